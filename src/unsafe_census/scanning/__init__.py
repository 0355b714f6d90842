"""Rust parsing and the syntax predicates the visitor relies on."""

from .attributes import (
    file_forbids_unsafe,
    has_unsafe_attributes,
    is_test_fn,
    is_test_mod,
    outer_attributes,
)
from .render import render_node
from .treesitter_parser import (
    TREE_SITTER_AVAILABLE,
    RustParser,
    check_parse_quality,
    get_supported_languages,
)

__all__ = [
    "TREE_SITTER_AVAILABLE",
    "RustParser",
    "check_parse_quality",
    "get_supported_languages",
    "file_forbids_unsafe",
    "has_unsafe_attributes",
    "is_test_fn",
    "is_test_mod",
    "outer_attributes",
    "render_node",
]
