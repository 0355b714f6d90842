"""Tests for safe source reading."""

import pytest

from unsafe_census.exceptions import FileAccessError, InvalidPathError
from unsafe_census.file_ops import read_source


class TestReadSource:
    def test_reads_bytes(self, tmp_path):
        path = tmp_path / "lib.rs"
        path.write_text("fn main() {}\n")
        assert read_source(path) == b"fn main() {}\n"

    def test_missing_file(self, tmp_path):
        with pytest.raises(InvalidPathError, match="Invalid path"):
            read_source(tmp_path / "missing.rs")

    def test_directory_rejected(self, tmp_path):
        with pytest.raises(InvalidPathError) as exc_info:
            read_source(tmp_path)
        assert exc_info.value.reason == "Not a regular file"

    def test_size_limit(self, tmp_path):
        path = tmp_path / "big.rs"
        path.write_bytes(b"x" * 100)
        with pytest.raises(FileAccessError, match="Cannot access file"):
            read_source(path, max_bytes=10)
        assert read_source(path, max_bytes=100) == b"x" * 100
