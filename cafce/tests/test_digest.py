"""
Test suite for file and aggregate digests.

Tests cover:
- Single file digests and read failures
- Aggregate digest line format and ordering
- Sensitivity to content and file identity
- Parallel hashing parity
"""

import hashlib
import os
import shutil
import sys
import tempfile
import unittest
from pathlib import Path
from unittest import TestCase

from cafce.key import (
    EMPTY_DIGEST,
    FileReadError,
    HashCalculationError,
    aggregate_digest,
    file_digest,
)


def sha256_hex(data: bytes) -> str:
    return hashlib.sha256(data).hexdigest()


class TestFileDigest(TestCase):
    """Test suite for file_digest()."""

    def setUp(self) -> None:
        """Set up test environment with temporary directory."""
        self.test_dir = Path(tempfile.mkdtemp())

    def tearDown(self) -> None:
        """Clean up test environment."""
        shutil.rmtree(self.test_dir, ignore_errors=True)

    def create_test_file(self, name: str, content: bytes) -> Path:
        path = self.test_dir / name
        path.write_bytes(content)
        return path

    def test_known_digest(self) -> None:
        """Digest equals SHA256 of the file bytes, lowercase hex."""
        path = self.create_test_file("test.txt", b"test content")

        digest = file_digest(path)

        self.assertEqual(digest, sha256_hex(b"test content"))
        self.assertEqual(len(digest), 64)
        self.assertEqual(digest, digest.lower())

    def test_accepts_string_path(self) -> None:
        path = self.create_test_file("test.txt", b"abc")
        self.assertEqual(file_digest(str(path)), sha256_hex(b"abc"))

    def test_same_content_same_digest(self) -> None:
        first = self.create_test_file("test1.txt", b"same content")
        second = self.create_test_file("test2.txt", b"same content")

        self.assertEqual(file_digest(first), file_digest(second))

    def test_different_content_different_digest(self) -> None:
        first = self.create_test_file("test1.txt", b"content1")
        second = self.create_test_file("test2.txt", b"content2")

        self.assertNotEqual(file_digest(first), file_digest(second))

    def test_large_file_spanning_chunks(self) -> None:
        """Files larger than one read chunk hash like a single update."""
        data = os.urandom(100_000)
        path = self.create_test_file("big.bin", data)

        self.assertEqual(file_digest(path), sha256_hex(data))

    def test_empty_file(self) -> None:
        path = self.create_test_file("empty.txt", b"")
        self.assertEqual(file_digest(path), EMPTY_DIGEST)

    def test_missing_file(self) -> None:
        """Missing files raise FileReadError carrying the path."""
        missing = self.test_dir / "nonexistent.txt"

        with self.assertRaises(FileReadError) as ctx:
            file_digest(missing)

        self.assertEqual(ctx.exception.path, missing)
        self.assertIsInstance(ctx.exception.__cause__, OSError)

    def test_directory_is_a_read_error(self) -> None:
        with self.assertRaises(FileReadError):
            file_digest(self.test_dir)


class TestAggregateDigest(TestCase):
    """Test suite for aggregate_digest()."""

    def setUp(self) -> None:
        """Set up test environment with temporary directory."""
        self.test_dir = Path(tempfile.mkdtemp()).resolve()

    def tearDown(self) -> None:
        """Clean up test environment."""
        shutil.rmtree(self.test_dir, ignore_errors=True)

    def create_test_file(self, relative: str, content: str) -> Path:
        path = self.test_dir / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(content.encode("utf-8"))
        return path

    def test_empty_list(self) -> None:
        """No files hashes to the SHA256 of zero bytes."""
        self.assertEqual(aggregate_digest([]), EMPTY_DIGEST)
        self.assertEqual(
            EMPTY_DIGEST,
            "e3b0c44298fc1c149afbf4c8996fb92427ae41e4649b934ca495991b7852b855",
        )

    def test_line_format_full_paths(self) -> None:
        """Without a root each line is "<path>:<digest>", newline separated."""
        a = self.create_test_file("a.txt", "content1")
        b = self.create_test_file("b.txt", "content2")

        expected_lines = [
            f"{a}:{sha256_hex(b'content1')}",
            f"{b}:{sha256_hex(b'content2')}",
        ]
        expected = sha256_hex("\n".join(expected_lines).encode("utf-8"))

        self.assertEqual(aggregate_digest([a, b]), expected)

    def test_line_format_relative_to_root(self) -> None:
        """With a root each line uses the POSIX path relative to it."""
        a = self.create_test_file("a.txt", "content1")
        nested = self.create_test_file("sub/dir/b.txt", "content2")

        expected_lines = [
            f"a.txt:{sha256_hex(b'content1')}",
            f"sub/dir/b.txt:{sha256_hex(b'content2')}",
        ]
        expected = sha256_hex("\n".join(expected_lines).encode("utf-8"))

        self.assertEqual(aggregate_digest([nested, a], root=self.test_dir), expected)

    def test_order_independent(self) -> None:
        """Caller-side ordering never changes the digest."""
        a = self.create_test_file("a.txt", "content1")
        b = self.create_test_file("b.txt", "content2")
        c = self.create_test_file("c.txt", "content3")

        self.assertEqual(aggregate_digest([a, b, c]), aggregate_digest([c, a, b]))
        self.assertEqual(
            aggregate_digest([a, b, c], root=self.test_dir),
            aggregate_digest([b, c, a], root=self.test_dir),
        )

    def test_content_change_changes_digest(self) -> None:
        path = self.create_test_file("a.txt", "content1")
        before = aggregate_digest([path])

        path.write_bytes(b"content2")

        self.assertNotEqual(aggregate_digest([path]), before)

    def test_rename_changes_digest(self) -> None:
        """Same content under another name is a different file set."""
        original = self.create_test_file("a.txt", "same")
        before = aggregate_digest([original], root=self.test_dir)

        renamed = original.rename(self.test_dir / "b.txt")

        self.assertNotEqual(aggregate_digest([renamed], root=self.test_dir), before)

    def test_same_tree_under_different_roots(self) -> None:
        """Relative display makes relocated copies hash alike."""
        first = self.test_dir / "checkout1"
        second = self.test_dir / "checkout2"
        for base in (first, second):
            (base / "src").mkdir(parents=True)
            (base / "src" / "main.py").write_text("print('hi')\n")
            (base / "setup.cfg").write_text("[metadata]\n")

        first_files = [first / "src" / "main.py", first / "setup.cfg"]
        second_files = [second / "src" / "main.py", second / "setup.cfg"]

        self.assertEqual(
            aggregate_digest(first_files, root=first),
            aggregate_digest(second_files, root=second),
        )
        self.assertNotEqual(aggregate_digest(first_files), aggregate_digest(second_files))

    def test_parallel_matches_sequential(self) -> None:
        files = [self.create_test_file(f"f{i:02d}.txt", f"content {i}") for i in range(20)]

        sequential = aggregate_digest(files, root=self.test_dir, jobs=1)
        parallel = aggregate_digest(list(reversed(files)), root=self.test_dir, jobs=4)

        self.assertEqual(sequential, parallel)

    def test_missing_file_aborts(self) -> None:
        """One unreadable file fails the whole aggregation."""
        present = self.create_test_file("a.txt", "content")
        missing = self.test_dir / "b.txt"

        for jobs in (1, 4):
            with self.subTest(jobs=jobs):
                with self.assertRaises(FileReadError) as ctx:
                    aggregate_digest([present, missing], jobs=jobs)
                self.assertEqual(ctx.exception.path, missing)

    @unittest.skipUnless(sys.platform.startswith("linux"), "needs byte file names")
    def test_undecodable_file_name(self) -> None:
        """A path that cannot be encoded as UTF-8 is a hash calculation error."""
        raw = os.path.join(os.fsencode(self.test_dir), b"\xff.txt")
        with open(raw, "wb") as f:
            f.write(b"content")

        with self.assertRaises(HashCalculationError):
            aggregate_digest([Path(os.fsdecode(raw))])
