#!/usr/bin/env python3
"""
Cache Key Errors

Failures raised while turning a pattern set into a cache key. Every error is
terminal for the current key computation and carries the data a caller needs
to report it (counts, limits, paths, patterns).
"""

from pathlib import Path
from typing import Optional

from cafce.errors import CafceError


class CacheKeyError(CafceError):
    """Base exception for cache key computation failures"""


class TooManyFilesError(CacheKeyError):
    """Resolved file count exceeds the configured ceiling."""

    def __init__(self, count: int, limit: int):
        super().__init__(f"Too many files matched: {count} > {limit}")
        self.count = count
        self.limit = limit


class FileReadError(CacheKeyError):
    """A matched file could not be read while computing its digest."""

    def __init__(self, path: Path, reason: Optional[str] = None):
        message = f"Failed to read file: {path}"
        if reason:
            message = f"{message} ({reason})"
        super().__init__(message)
        self.path = path
        self.reason = reason


class PatternMatchError(CacheKeyError):
    """A pattern string has invalid glob syntax."""

    def __init__(self, pattern: str, reason: Optional[str] = None):
        message = f"Invalid file pattern: {pattern!r}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)
        self.pattern = pattern
        self.reason = reason


class HashCalculationError(CacheKeyError):
    """Digest computation failed for a reason unrelated to file I/O."""

    def __init__(self, reason: str = ""):
        message = "Hash calculation failed"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)
        self.reason = reason
