"""Public API for unsafe-census.

Example:
    >>> from unsafe_census import scan_source
    >>>
    >>> result = scan_source(b"fn main() { unsafe { *p; } }")
    unsafe { *p; } ~ Inner ~ 1 ~ 1 ~ Dereference Operation
    >>> result.ledger.exprs.unsafe
    1
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Optional, TextIO, Union

from .config import ScanConfig
from .file_ops import read_source
from .ledger import CounterLedger
from .logging_config import get_logger
from .regions import RegionStatsPolicy
from .scanning.treesitter_parser import RustParser, check_parse_quality
from .visitor import IncludeTests, RegionVisitor

logger = get_logger(__name__)


@dataclass
class ScanResult:
    """Outcome of scanning one file.

    Attributes:
        path: Scanned path (or a placeholder for in-memory sources)
        ledger: Populated counter ledger
        final_depth: Trust region depth after the walk; non-zero means a
            region was opened without a matching close
        regions_closed: Number of diagnostic lines written
    """

    path: str
    ledger: CounterLedger
    final_depth: int
    regions_closed: int

    def to_dict(self) -> dict:
        return {
            "path": self.path,
            "counters": self.ledger.to_dict(),
            "final_depth": self.final_depth,
            "regions_closed": self.regions_closed,
        }


def scan_source(
    source: Union[str, bytes],
    include_tests: IncludeTests = IncludeTests.YES,
    region_stats: RegionStatsPolicy = "slot",
    out: Optional[TextIO] = None,
    path: str = "<memory>",
    strict: bool = True,
    parser: Optional[RustParser] = None,
) -> ScanResult:
    """Parse and scan one Rust source.

    Args:
        source: Rust source text or bytes
        include_tests: Test-inclusion policy
        region_stats: Region statistics policy ("slot" or "stack")
        out: Stream for diagnostic lines (default: standard output)
        path: Name used in messages and in the result
        strict: Raise ParsingError if the source has syntax errors
        parser: Reuse an existing parser

    Returns:
        ScanResult for the source

    Raises:
        UnsupportedLanguageError: If tree-sitter-rust is not installed
        ParsingError: If strict and the source does not parse cleanly
    """
    code = source.encode("utf-8") if isinstance(source, str) else source
    parser = parser or RustParser()

    tree = parser.parse(code)
    check_parse_quality(tree, path, strict=strict)

    visitor = RegionVisitor(include_tests=include_tests, region_stats=region_stats, out=out)
    ledger = visitor.scan(tree)

    if visitor.depth != 0:
        logger.debug(f"{path}: {visitor.depth} trust region(s) left open after scan")

    return ScanResult(
        path=path,
        ledger=ledger,
        final_depth=visitor.depth,
        regions_closed=visitor.regions_closed,
    )


def scan_file(
    path: Union[str, Path],
    config: Optional[ScanConfig] = None,
    out: Optional[TextIO] = None,
    parser: Optional[RustParser] = None,
) -> ScanResult:
    """Read and scan one Rust file.

    Args:
        path: File to scan
        config: Scan settings (defaults to ScanConfig())
        out: Stream for diagnostic lines (default: standard output)
        parser: Reuse an existing parser across files

    Raises:
        InvalidPathError, FileAccessError: If the file cannot be read
        ParsingError: If strict parsing is on and the file has syntax errors
    """
    config = config or ScanConfig()
    filepath = Path(path)
    logger.debug(f"Scanning {filepath}")

    code = read_source(filepath, max_bytes=config.max_file_size_bytes)
    return scan_source(
        code,
        include_tests=IncludeTests.YES if config.include_tests else IncludeTests.NO,
        region_stats=config.region_stats,
        out=out,
        path=str(filepath),
        strict=config.strict_parse,
        parser=parser,
    )
