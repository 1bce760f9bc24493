#!/usr/bin/env python3
"""
Cache Key Builder

Runs the key pipeline: pattern resolution, aggregate digest, then prefixing.
Any failure aborts the whole computation; there are no partial keys.
"""

import logging
from pathlib import Path
from typing import Union

from typeguard import typechecked

from cafce.key.config import DEFAULT_MAX_FILES, KEY_SEPARATOR, KeyConfig
from cafce.key.digest import aggregate_digest
from cafce.key.matcher import resolve_patterns


logger = logging.getLogger(__name__)


@typechecked
def generate_key(
    config: KeyConfig,
    root: Union[str, Path],
    limit: int = DEFAULT_MAX_FILES,
    jobs: int = 1,
) -> str:
    """
    Compute the cache key for a pattern set.

    Args:
        config: Patterns and optional prefix
        root: Directory patterns are resolved against
        limit: Maximum number of distinct matched files
        jobs: Number of files hashed in parallel

    Returns:
        "<prefix>-<digest>" when the config has a prefix, otherwise "<digest>"

    Raises:
        CacheKeyError: Any matcher or digest failure, unchanged
    """
    root_dir = Path(root).resolve()
    files = resolve_patterns(config.files, root_dir, limit)
    digest = aggregate_digest(files, root=root_dir, jobs=jobs)

    if config.has_prefix():
        key = f"{config.prefix}{KEY_SEPARATOR}{digest}"
    else:
        key = digest

    logger.info(f"Cache key from {len(files)} file(s): {key}")
    return key


class CacheKeyGenerator:
    """
    Cache key generator bound to a root directory and file-count ceiling.

    Both settings are fixed at construction; generate_key() is a pure function
    of the key config and the files on disk.
    """

    def __init__(
        self,
        max_files: int = DEFAULT_MAX_FILES,
        base_path: Union[str, Path] = ".",
        jobs: int = 1,
    ):
        """
        Initialize cache key generator.

        Args:
            max_files: Maximum number of distinct matched files
            base_path: Root directory for pattern resolution
            jobs: Number of files hashed in parallel
        """
        self.max_files = max_files
        self.base_path = Path(base_path)
        self.jobs = jobs

    def generate_key(self, key_config: KeyConfig) -> str:
        """Compute the cache key for key_config under this generator's root."""
        return generate_key(key_config, self.base_path, self.max_files, self.jobs)
