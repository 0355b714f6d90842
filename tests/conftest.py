"""Shared fixtures for unsafe-census tests."""

import io
import textwrap

import pytest

from unsafe_census.scanning.treesitter_parser import TREE_SITTER_AVAILABLE


def _find_all(node, node_type):
    found = []
    if node.type == node_type:
        found.append(node)
    for child in node.children:
        found.extend(_find_all(child, node_type))
    return found


@pytest.fixture
def find_all():
    """All nodes of a type under a root (root included), in source order."""
    return _find_all


@pytest.fixture
def rust_parser():
    """A RustParser, skipping the test when tree-sitter is missing."""
    if not TREE_SITTER_AVAILABLE:
        pytest.skip("tree-sitter-rust not installed")
    from unsafe_census.scanning.treesitter_parser import RustParser

    return RustParser()


@pytest.fixture
def parse(rust_parser):
    """Parse dedented Rust source and return the root node."""

    def _parse(source: str):
        return rust_parser.parse(textwrap.dedent(source).encode()).root_node

    return _parse


@pytest.fixture
def scan(rust_parser):
    """Scan dedented Rust source; returns (ScanResult, diagnostic lines)."""
    from unsafe_census.api import scan_source
    from unsafe_census.visitor import IncludeTests

    def _scan(source: str, include_tests=IncludeTests.YES, region_stats="slot"):
        out = io.StringIO()
        result = scan_source(
            textwrap.dedent(source),
            include_tests=include_tests,
            region_stats=region_stats,
            out=out,
            parser=rust_parser,
        )
        return result, out.getvalue().splitlines()

    return _scan
