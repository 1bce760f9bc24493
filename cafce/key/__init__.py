"""
Cache Key Pipeline

Turns a set of file glob patterns into a deterministic cache key:
pattern resolution, content hashing, then key composition.
"""

from cafce.key.builder import CacheKeyGenerator, generate_key
from cafce.key.config import DEFAULT_MAX_FILES, KeyConfig
from cafce.key.digest import EMPTY_DIGEST, aggregate_digest, file_digest
from cafce.key.errors import (
    CacheKeyError,
    FileReadError,
    HashCalculationError,
    PatternMatchError,
    TooManyFilesError,
)
from cafce.key.matcher import FileMatcher, resolve_patterns, validate_pattern


__all__ = [
    "CacheKeyGenerator",
    "generate_key",
    "DEFAULT_MAX_FILES",
    "KeyConfig",
    "EMPTY_DIGEST",
    "aggregate_digest",
    "file_digest",
    "CacheKeyError",
    "FileReadError",
    "HashCalculationError",
    "PatternMatchError",
    "TooManyFilesError",
    "FileMatcher",
    "resolve_patterns",
    "validate_pattern",
]
