#!/usr/bin/env python3
"""
Cache Key Configuration

Defines the pattern set a cache key is derived from and the constants shared
by the matcher and digest stages:

1. KeyConfig: ordered file patterns plus an optional key prefix
2. Default file-count ceiling
3. Hashing tuning constants
"""

from dataclasses import dataclass
from typing import Optional, Sequence

from typeguard import typechecked


# ==============================================================================
# Limits and Tuning Constants
# ==============================================================================

DEFAULT_MAX_FILES = 50  # Ceiling on matched files per key
DEFAULT_HASH_CHUNK_SIZE = 8192  # Bytes to read per chunk when hashing files
KEY_SEPARATOR = "-"  # Joins prefix and digest


@typechecked
@dataclass(frozen=True)
class KeyConfig:
    """
    Pattern set a cache key is computed from.

    Attributes:
        files: Glob patterns, relative to the root or absolute. May repeat or overlap.
        prefix: Optional string prepended to the digest as "<prefix>-<digest>"
    """

    files: Sequence[str]
    prefix: Optional[str] = None

    def __post_init__(self) -> None:
        if isinstance(self.files, str):
            raise TypeError("files must be a sequence of patterns, not a single string")
        files = tuple(self.files)
        if not all(isinstance(p, str) for p in files):
            raise TypeError("files must contain only pattern strings")
        object.__setattr__(self, "files", files)

    def has_prefix(self) -> bool:
        return self.prefix is not None
