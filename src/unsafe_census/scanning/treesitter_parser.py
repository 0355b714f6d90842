"""Tree-sitter parser wrapper for Rust sources.

Handles a missing tree-sitter installation gracefully: the module always
imports, TREE_SITTER_AVAILABLE reports whether parsing is possible, and
RustParser raises UnsupportedLanguageError when it is not.

Usage:
    if TREE_SITTER_AVAILABLE:
        parser = RustParser()
        tree = parser.parse(code_bytes)
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING, Any

from ..exceptions import ParsingError, UnsupportedLanguageError

TREE_SITTER_AVAILABLE = False
_tree_sitter_module: Any = None
_rust_module: Any = None

try:
    import tree_sitter as _tree_sitter_module  # type: ignore[no-redef]
    import tree_sitter_rust as _rust_module  # type: ignore[no-redef]

    TREE_SITTER_AVAILABLE = True
except ImportError:
    TREE_SITTER_AVAILABLE = False


if TYPE_CHECKING:
    from tree_sitter import Node, Tree

logger = logging.getLogger(__name__)

LANGUAGE = "rust"


def get_supported_languages() -> list[str]:
    """Get list of languages with installed grammars."""
    if not TREE_SITTER_AVAILABLE:
        return []
    return [LANGUAGE]


class RustParser:
    """Turns Rust source bytes into a tree-sitter syntax tree."""

    def __init__(self) -> None:
        if not TREE_SITTER_AVAILABLE:
            raise UnsupportedLanguageError(LANGUAGE, get_supported_languages())

        # tree-sitter >= 0.23 returns PyCapsule; wrap in Language()
        self._language = _tree_sitter_module.Language(_rust_module.language())
        self._parser = _tree_sitter_module.Parser(self._language)

    def parse(self, code: bytes) -> Tree:
        """Parse code and return its syntax tree.

        Args:
            code: Rust source as bytes

        Returns:
            Tree object. Syntax errors are embedded as ERROR nodes; use
            check_parse_quality() to decide whether to accept them.
        """
        return self._parser.parse(code)


def _first_error(node: Node) -> Node | None:
    if node.type == "ERROR" or node.is_missing:
        return node
    for child in node.children:
        if child.has_error:
            found = _first_error(child)
            if found is not None:
                return found
    return None


def check_parse_quality(tree: Tree, path: str | Path, strict: bool = True) -> None:
    """Reject or report a tree that contains syntax errors.

    Args:
        tree: Tree returned by RustParser.parse()
        path: Source path, used in messages
        strict: Raise ParsingError instead of logging a warning

    Raises:
        ParsingError: If strict and the tree has errors
    """
    root = tree.root_node
    if not root.has_error:
        return

    error_node = _first_error(root)
    if error_node is not None:
        line, column = error_node.start_point
        reason = f"syntax error at line {line + 1}, column {column + 1}"
    else:
        reason = "syntax error"

    if strict:
        raise ParsingError(Path(path), LANGUAGE, reason)
    logger.warning(f"{path}: {reason}; counts may be incomplete")
