"""Render syntax nodes back to source text for diagnostics."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from tree_sitter import Node


def render_node(node: Node) -> str:
    """Source text of node on a single line, runs of whitespace collapsed to one space."""
    if node.text is None:
        return ""
    return " ".join(node.text.decode("utf-8", errors="replace").split())
