"""Attribute predicates over tree-sitter Rust nodes.

tree-sitter-rust places outer attributes (`#[...]`) as siblings that precede
the item they annotate, and inner attributes (`#![...]`) as children of the
enclosing file or block. Each `attribute` node holds a path (identifier or
scoped_identifier) followed by optional `token_tree` arguments or an
`= value`.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Iterator

if TYPE_CHECKING:
    from tree_sitter import Node

_ATTRIBUTE_NEIGHBOURS = frozenset({"attribute_item", "line_comment", "block_comment"})

# Attributes that export a symbol unmangled; the compiler treats such
# functions as unsafe to define.
UNSAFE_ATTRIBUTES = frozenset({"no_mangle", "export_name"})


def _text(node: Node | None) -> str:
    if node is None or node.text is None:
        return ""
    return node.text.decode("utf-8", errors="ignore")


def _get_child_by_type(node: Node, node_type: str) -> Node | None:
    for child in node.named_children:
        if child.type == node_type:
            return child
    return None


def outer_attributes(node: Node) -> list[Node]:
    """Return the `attribute` nodes of the outer attributes preceding node, in source order."""
    attributes = []
    sibling = node.prev_named_sibling
    while sibling is not None and sibling.type in _ATTRIBUTE_NEIGHBOURS:
        if sibling.type == "attribute_item":
            attribute = _get_child_by_type(sibling, "attribute")
            if attribute is not None:
                attributes.append(attribute)
        sibling = sibling.prev_named_sibling
    attributes.reverse()
    return attributes


def inner_attributes(node: Node) -> list[Node]:
    """Return the `attribute` nodes of the inner attributes directly under node."""
    attributes = []
    for child in node.named_children:
        if child.type == "inner_attribute_item":
            attribute = _get_child_by_type(child, "attribute")
            if attribute is not None:
                attributes.append(attribute)
    return attributes


def attribute_path(attribute: Node) -> list[str]:
    """Path segments of an attribute: `#[tokio::test]` -> ["tokio", "test"]."""
    if not attribute.named_children:
        return []
    path = attribute.named_children[0]
    if path.type == "token_tree":
        return []
    return [segment for segment in _text(path).replace(" ", "").split("::") if segment]


def attribute_arguments(attribute: Node) -> Node | None:
    """The parenthesised token tree of a list attribute, if any."""
    arguments = attribute.child_by_field_name("arguments")
    if arguments is None:
        arguments = _get_child_by_type(attribute, "token_tree")
    return arguments


_DELIMITERS = frozenset({"(", ")", "[", "]", "{", "}"})


def _nested_words(token_tree: Node) -> Iterator[str]:
    """Yield the single-identifier paths of a meta list, descending into every nested list.

    In `cfg(all(test, feature = "x"), a::b)` only `test` is a word: `all`
    names a list, `feature` a name-value pair and `a::b` a multi-segment path.
    """
    tokens = [c for c in token_tree.children if c.type not in _DELIMITERS]
    for index, token in enumerate(tokens):
        if token.type == "token_tree":
            yield from _nested_words(token)
            continue
        if token.type != "identifier":
            continue
        before = tokens[index - 1].type if index > 0 else ","
        after = tokens[index + 1].type if index + 1 < len(tokens) else ","
        if before == "," and after == ",":
            yield _text(token)


def _is_word(attribute: Node, word: str) -> bool:
    return attribute_path(attribute) == [word]


def file_forbids_unsafe(root: Node) -> bool:
    """True if the file carries `#![forbid(unsafe_code)]`."""
    for attribute in inner_attributes(root):
        if not _is_word(attribute, "forbid"):
            continue
        arguments = attribute_arguments(attribute)
        if arguments is None:
            continue
        words = [_text(c) for c in arguments.named_children if c.type == "identifier"]
        if "unsafe_code" in words:
            return True
    return False


def has_unsafe_attributes(item: Node) -> bool:
    """True if the item is marked `#[no_mangle]` or `#[export_name = ...]`."""
    return any(
        len(path) == 1 and path[0] in UNSAFE_ATTRIBUTES
        for path in (attribute_path(a) for a in outer_attributes(item))
    )


def is_test_fn(item: Node) -> bool:
    """True if any outer attribute's meta mentions the word `test`.

    That is `#[test]` itself, or `test` anywhere inside a meta list such as
    `#[cfg(test)]`, `#[cfg(all(test, unix))]` or `#[cfg(not(test))]`.
    Multi-segment paths like `#[tokio::test]` do not match.
    """
    for attribute in outer_attributes(item):
        arguments = attribute_arguments(attribute)
        if arguments is None:
            if attribute.child_by_field_name("value") is None and _is_word(attribute, "test"):
                return True
        elif "test" in _nested_words(arguments):
            return True
    return False


def is_test_mod(item: Node) -> bool:
    """True if the module is annotated with exactly `#[cfg(test)]`."""
    for attribute in outer_attributes(item):
        if not _is_word(attribute, "cfg"):
            continue
        arguments = attribute_arguments(attribute)
        if arguments is None:
            continue
        nested = arguments.named_children
        if len(nested) == 1 and nested[0].type == "identifier" and _text(nested[0]) == "test":
            return True
    return False
