"""
Safe file reading for unsafe-census.

Provides size-limited reads with uniform error reporting.
"""

from pathlib import Path
from typing import Optional

from .exceptions import FileAccessError, InvalidPathError


def read_source(filepath: Path, max_bytes: Optional[int] = None) -> bytes:
    """
    Read a source file as bytes.

    tree-sitter parses bytes directly, so no decoding happens here.

    Args:
        filepath: File to read
        max_bytes: Refuse files larger than this (None = no limit)

    Returns:
        File contents

    Raises:
        InvalidPathError: If the path does not exist or is not a file
        FileAccessError: If the file is too large or cannot be read
    """
    if not filepath.exists():
        raise InvalidPathError(filepath, "Path does not exist")
    if not filepath.is_file():
        raise InvalidPathError(filepath, "Not a regular file")

    try:
        size = filepath.stat().st_size
    except OSError as e:
        raise FileAccessError(filepath, f"OS error: {e}")

    if max_bytes is not None and size > max_bytes:
        raise FileAccessError(
            filepath, f"File size {size} bytes exceeds limit of {max_bytes} bytes"
        )

    try:
        return filepath.read_bytes()
    except OSError as e:
        raise FileAccessError(filepath, f"OS error: {e}")
