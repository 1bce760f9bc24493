"""cafce - content-addressed file cache keys for CI

Derives deterministic cache keys from declared file glob patterns so that a
CI cache can decide whether a stored artifact may be reused.
"""

__version__ = "0.1.0"
