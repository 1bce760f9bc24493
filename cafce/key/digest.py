#!/usr/bin/env python3
"""
Content Digests

SHA256 digests for single files and for ordered file lists.

The aggregate digest hashes one "<path>:<file-digest>" line per file, so it
changes when any file's content changes and when a file is renamed, but not
when the caller hands the same files over in a different order.
"""

import hashlib
import logging
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import Iterable, List, Optional, Sequence, Union

from typeguard import typechecked

from cafce.key.config import DEFAULT_HASH_CHUNK_SIZE
from cafce.key.errors import FileReadError, HashCalculationError


logger = logging.getLogger(__name__)

# Digest of zero bytes, returned for an empty file list
EMPTY_DIGEST = hashlib.sha256(b"").hexdigest()


@typechecked
def file_digest(path: Union[str, Path]) -> str:
    """
    Compute the SHA256 digest of a file's content.

    Args:
        path: File to hash

    Returns:
        64-character lowercase hex digest

    Raises:
        FileReadError: If the file is missing, unreadable or not a regular file
    """
    file_path = Path(path)
    hasher = hashlib.sha256()
    try:
        with open(file_path, "rb") as f:
            # Read in chunks to handle large files efficiently
            for chunk in iter(lambda: f.read(DEFAULT_HASH_CHUNK_SIZE), b""):
                hasher.update(chunk)
    except OSError as e:
        raise FileReadError(file_path, e.strerror or str(e)) from e
    return hasher.hexdigest()


def _display_path(path: Path, root: Optional[Path]) -> str:
    if root is None:
        return str(path)
    try:
        return path.relative_to(root).as_posix()
    except ValueError:
        # Outside root: record the full path
        return str(path)


def _digest_all(paths: List[Path], jobs: int) -> Iterable[str]:
    if jobs <= 1 or len(paths) <= 1:
        return [file_digest(p) for p in paths]
    # map() yields in input order and re-raises the first failure in that order
    with ThreadPoolExecutor(max_workers=min(jobs, len(paths))) as executor:
        return list(executor.map(file_digest, paths))


@typechecked
def aggregate_digest(
    paths: Sequence[Union[str, Path]],
    root: Optional[Union[str, Path]] = None,
    jobs: int = 1,
) -> str:
    """
    Compute one digest over a list of files.

    Paths are sorted by their string form before hashing, regardless of any
    ordering applied by the caller.

    Args:
        paths: Files to include
        root: When given, each file is recorded by its POSIX path relative to
            root, so identical trees in different directories hash alike
        jobs: Number of files hashed in parallel (1 hashes sequentially)

    Returns:
        64-character lowercase hex digest; EMPTY_DIGEST for an empty list

    Raises:
        FileReadError: If any file cannot be read
        HashCalculationError: If a path cannot be encoded for hashing
    """
    if not paths:
        return EMPTY_DIGEST

    ordered = sorted((Path(p) for p in paths), key=str)
    root_dir = Path(root) if root is not None else None

    digests = _digest_all(ordered, jobs)
    lines = [
        f"{_display_path(path, root_dir)}:{digest}"
        for path, digest in zip(ordered, digests)
    ]

    try:
        combined = "\n".join(lines).encode("utf-8")
    except UnicodeEncodeError as e:
        raise HashCalculationError(f"file path is not valid UTF-8 ({e.reason})") from e

    result = hashlib.sha256(combined).hexdigest()
    logger.debug(f"Aggregate digest over {len(ordered)} file(s): {result}")
    return result
