#!/usr/bin/env python3
"""
File Pattern Matcher

Expands glob patterns against a root directory into the bounded, deduplicated,
path-sorted list of files a cache key is computed over.

Supported syntax:
- `*` and `?` within a single path component
- `[abc]`, `[a-z]` and `[!abc]` character classes
- `**` as a whole path component, matching zero or more directories

Patterns that match nothing contribute no files. Directories are skipped, and
matches whose resolved location falls outside the root are dropped.
"""

import glob
import logging
import os
from pathlib import Path
from typing import List, Sequence, Set, Union

from typeguard import typechecked

from cafce.key.config import DEFAULT_MAX_FILES
from cafce.key.errors import PatternMatchError, TooManyFilesError


logger = logging.getLogger(__name__)

_SEPARATORS = {"/", os.sep}


def _class_end(pattern: str, start: int) -> int:
    """Index of the `]` closing the class opened at `start`, or -1."""
    i = start + 1
    if i < len(pattern) and pattern[i] == "!":
        i += 1
    # A leading `]` is a literal member of the class
    if i < len(pattern) and pattern[i] == "]":
        i += 1
    while i < len(pattern):
        ch = pattern[i]
        if ch in _SEPARATORS:
            return -1
        if ch == "]":
            return i
        i += 1
    return -1


def validate_pattern(pattern: str) -> None:
    """
    Check a pattern for syntax the glob expansion would silently misread.

    Args:
        pattern: Glob pattern to check

    Raises:
        PatternMatchError: If the pattern is empty, has an unclosed character
            class, a run of three or more `*`, or a `**` that is not a whole
            path component
    """
    if not pattern:
        raise PatternMatchError(pattern, "pattern is empty")

    i = 0
    n = len(pattern)
    while i < n:
        ch = pattern[i]
        if ch == "*":
            run_start = i
            while i < n and pattern[i] == "*":
                i += 1
            stars = i - run_start
            if stars > 2:
                raise PatternMatchError(
                    pattern, "wildcards are either regular '*' or recursive '**'"
                )
            if stars == 2:
                starts_component = run_start == 0 or pattern[run_start - 1] in _SEPARATORS
                ends_component = i == n or pattern[i] in _SEPARATORS
                if not (starts_component and ends_component):
                    raise PatternMatchError(
                        pattern, "recursive wildcards must form a single path component"
                    )
            continue
        if ch == "[":
            end = _class_end(pattern, i)
            if end < 0:
                raise PatternMatchError(pattern, "unclosed character class")
            i = end + 1
            continue
        i += 1


def _expand(pattern: str, root: Path) -> List[str]:
    """Expand one pattern to raw glob hits (files and directories)."""
    if os.path.isabs(pattern):
        full_pattern = pattern
    else:
        # The root itself is literal, only the pattern part may carry wildcards
        full_pattern = os.path.join(glob.escape(str(root)), pattern)
    return glob.glob(full_pattern, recursive=True, include_hidden=True)


@typechecked
def resolve_patterns(
    patterns: Sequence[str],
    root: Union[str, Path],
    limit: int = DEFAULT_MAX_FILES,
) -> List[Path]:
    """
    Resolve glob patterns to a sorted list of files under a root directory.

    Args:
        patterns: Glob patterns, relative to root or absolute
        root: Directory relative patterns are joined to; also the boundary
            every match must lie within
        limit: Maximum number of distinct files allowed

    Returns:
        Absolute, normalized file paths sorted by path string. Symlinks keep
        the name the pattern matched.

    Raises:
        TypeError: If patterns is a single string
        PatternMatchError: If a pattern has invalid syntax
        TooManyFilesError: If more than `limit` distinct files match
    """
    if isinstance(patterns, str):
        raise TypeError("patterns must be a sequence of patterns, not a single string")

    root_dir = Path(root).resolve()
    if not root_dir.is_dir():
        logger.warning(f"Root directory does not exist: {root_dir}")

    matched: Set[Path] = set()
    for pattern in patterns:
        validate_pattern(pattern)
        hits = _expand(pattern, root_dir)
        if not hits:
            logger.debug(f"Pattern {pattern!r} matched nothing")
            continue

        for hit in hits:
            candidate = Path(hit)
            if not candidate.is_file():
                continue
            # Links are kept under their own name; only the target must stay in root
            resolved = candidate.resolve()
            if not resolved.is_relative_to(root_dir):
                logger.debug(f"Skipping {hit}: resolves outside root {root_dir}")
                continue
            matched.add(Path(os.path.normpath(os.path.abspath(hit))))

    if len(matched) > limit:
        raise TooManyFilesError(count=len(matched), limit=limit)

    logger.debug(f"Resolved {len(patterns)} pattern(s) to {len(matched)} file(s)")
    return sorted(matched, key=str)


class FileMatcher:
    """
    Pattern resolver bound to a fixed file-count ceiling.

    Holds no state beyond its ceiling, so one instance can serve any number of
    concurrent callers.
    """

    def __init__(self, max_files: int = DEFAULT_MAX_FILES):
        """
        Initialize file matcher.

        Args:
            max_files: Maximum number of distinct files a resolution may return
        """
        self.max_files = max_files

    def resolve_patterns(
        self, patterns: Sequence[str], base_path: Union[str, Path]
    ) -> List[Path]:
        """Resolve patterns against base_path using this matcher's ceiling."""
        return resolve_patterns(patterns, base_path, self.max_files)
