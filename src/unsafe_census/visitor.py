"""Trust region visitor over tree-sitter Rust syntax trees.

The visitor walks one file once, depth first and pre-order. It keeps a count
of the `unsafe` scopes it is currently nested in and tallies functions,
methods, traits, impls and expressions into a CounterLedger, each as safe or
unsafe. Whenever a trust region closes it writes one diagnostic line:

    <source> ~ <Inner|Function|Method> ~ <expression delta> ~ <statements>[ ~ Dereference Operation]

Dispatch follows ast.NodeVisitor: expressions go through visit_expr, every
other node goes to visit_<node type> or falls back to generic_visit, which
recurses into named children without counting anything.
"""

from __future__ import annotations

import sys
from contextlib import contextmanager, nullcontext
from enum import Enum
from typing import TYPE_CHECKING, Iterator, TextIO

from .exceptions import RegionDepthError
from .ledger import Category, CounterLedger
from .logging_config import get_logger
from .regions import RegionShape, RegionStats, RegionStatsPolicy
from .scanning.attributes import (
    file_forbids_unsafe,
    has_unsafe_attributes,
    is_test_fn,
    is_test_mod,
)
from .scanning.render import render_node

if TYPE_CHECKING:
    from tree_sitter import Node, Tree

logger = get_logger(__name__)


class IncludeTests(Enum):
    """Whether constructs inside test functions and test modules are counted."""

    YES = "yes"
    NO = "no"


# Paths and literals. Counting them would turn `f(x)` into three expressions.
TRIVIAL_EXPRESSION_KINDS = frozenset({
    "identifier",
    "self",
    "crate",
    "super",
    "metavariable",
    "scoped_identifier",
    "string_literal",
    "raw_string_literal",
    "char_literal",
    "boolean_literal",
    "integer_literal",
    "float_literal",
})

EXPRESSION_KINDS = TRIVIAL_EXPRESSION_KINDS | frozenset({
    "generic_function",
    "unary_expression",
    "reference_expression",
    "try_expression",
    "binary_expression",
    "assignment_expression",
    "compound_assignment_expr",
    "type_cast_expression",
    "range_expression",
    "call_expression",
    "return_expression",
    "yield_expression",
    "await_expression",
    "field_expression",
    "index_expression",
    "array_expression",
    "tuple_expression",
    "unit_expression",
    "parenthesized_expression",
    "struct_expression",
    "closure_expression",
    "break_expression",
    "continue_expression",
    "macro_invocation",
    "let_condition",
    "let_chain",
    "if_expression",
    "match_expression",
    "while_expression",
    "loop_expression",
    "for_expression",
    "block",
    "unsafe_block",
    "async_block",
    "gen_block",
    "const_block",
    "try_block",
})

# A block directly under these nodes is a body, not a block expression.
_BLOCK_OWNERS = frozenset({
    "function_item",
    "unsafe_block",
    "async_block",
    "gen_block",
    "const_block",
    "try_block",
    "if_expression",
    "while_expression",
    "loop_expression",
    "for_expression",
})

_ITEM_CONTAINERS = frozenset({"source_file", "declaration_list"})

_NON_STATEMENT_KINDS = frozenset({
    "line_comment",
    "block_comment",
    "attribute_item",
    "inner_attribute_item",
    "label",
    "empty_statement",
})


def _is_expression(node: Node) -> bool:
    if node.type not in EXPRESSION_KINDS:
        return False
    parent = node.parent
    if parent is None:
        return True
    if node.type == "block":
        return parent.type not in _BLOCK_OWNERS
    if node.type == "macro_invocation":
        return parent.type not in _ITEM_CONTAINERS
    return True


def _has_unsafe_keyword(node: Node) -> bool:
    """`unsafe impl` / `unsafe trait`: the keyword is a direct child."""
    return any(child.type == "unsafe" for child in node.children)


def _has_unsafe_modifier(node: Node) -> bool:
    """`unsafe fn`: the keyword sits inside function_modifiers."""
    for child in node.children:
        if child.type == "function_modifiers":
            return any(m.type == "unsafe" for m in child.children)
    return False


def _container_kind(node: Node) -> str | None:
    """Type of the item whose body holds node: impl_item, trait_item, mod_item..."""
    parent = node.parent
    if parent is None or parent.type != "declaration_list" or parent.parent is None:
        return None
    return parent.parent.type


def _method_receiver(callee: Node) -> Node | None:
    """Receiver of a method callee (`recv.name` or `recv.name::<T>`), else None."""
    if callee.type == "generic_function":
        function = callee.child_by_field_name("function")
        if function is None:
            return None
        callee = function
    if callee.type == "field_expression":
        return callee.child_by_field_name("value")
    return None


def _body(node: Node) -> Node | None:
    body = node.child_by_field_name("body")
    if body is not None:
        return body
    for child in node.named_children:
        if child.type == "block":
            return child
    return None


def block_statements(block: Node | None) -> list[Node]:
    """Direct statements of a block, not counting comments and attributes."""
    if block is None:
        return []
    return [c for c in block.named_children if c.type not in _NON_STATEMENT_KINDS]


class RegionVisitor:
    """Single-pass trust region visitor for one Rust file.

    Attributes:
        include_tests: Test-inclusion policy
        region_stats: "slot" reuses one statistics record for every region,
            "stack" keeps one record per open region
        metrics: The ledger filled by the walk
        regions_closed: Number of diagnostic lines written
    """

    def __init__(
        self,
        include_tests: IncludeTests = IncludeTests.YES,
        region_stats: RegionStatsPolicy = "slot",
        out: TextIO | None = None,
    ) -> None:
        self.include_tests = include_tests
        self.region_stats = region_stats
        self.metrics = CounterLedger()
        self.regions_closed = 0
        self._out = out
        # Number of nested unsafe scopes around the current node. An unsafe
        # block inside an unsafe fn puts this at 2; zero means safe code.
        self._depth = 0
        self._stats: list[RegionStats] = []

    @property
    def depth(self) -> int:
        return self._depth

    def scan(self, tree: Tree) -> CounterLedger:
        """Walk a whole parsed file and return the populated ledger."""
        self.visit(tree.root_node)
        return self.metrics

    # ── dispatch ────────────────────────────────────────────────────

    def visit(self, node: Node) -> None:
        if _is_expression(node):
            self.visit_expr(node)
        else:
            self._dispatch(node)

    def _dispatch(self, node: Node) -> None:
        visitor = getattr(self, f"visit_{node.type}", self.generic_visit)
        visitor(node)

    def generic_visit(self, node: Node) -> None:
        for child in node.named_children:
            self.visit(child)

    # ── trust region bookkeeping ───────────────────────────────────

    def _open_region(self, shape: RegionShape, node: Node, body: Node | None) -> None:
        stats = RegionStats(
            shape=shape,
            text=render_node(node),
            statements=len(block_statements(body)),
            expr_baseline=self.metrics.exprs.unsafe,
        )
        if self.region_stats == "stack":
            self._stats.append(stats)
        else:
            self._stats = [stats]
        self._depth += 1
        logger.debug(f"enter {shape.value} region at line {node.start_point[0] + 1}, depth {self._depth}")

    def _leave(self, shape: RegionShape) -> None:
        if self._depth == 0:
            raise RegionDepthError(shape.value)
        self._depth -= 1

    def _close_region(self, shape: RegionShape) -> None:
        self._leave(shape)
        stats = self._stats.pop() if self.region_stats == "stack" else self._stats[-1]
        stats.expr_final = self.metrics.exprs.unsafe
        self._emit(stats.diagnostic())
        stats.has_deref = False
        self.regions_closed += 1
        logger.debug(f"exit {shape.value} region, depth {self._depth}")

    @contextmanager
    def _trust_region(
        self, shape: RegionShape, node: Node, body: Node | None
    ) -> Iterator[None]:
        """Scope guard: opens a region, and closes it on every way out."""
        self._open_region(shape, node, body)
        try:
            yield
        except BaseException:
            # Unwinding: restore depth without reporting a partial region.
            self._leave(shape)
            if self.region_stats == "stack":
                self._stats.pop()
            raise
        self._close_region(shape)

    def _emit(self, line: str) -> None:
        print(line, file=self._out if self._out is not None else sys.stdout)

    # ── handlers ────────────────────────────────────────────────────

    def visit_source_file(self, node: Node) -> None:
        self.metrics.forbids_unsafe = file_forbids_unsafe(node)
        self.generic_visit(node)

    def visit_function_item(self, node: Node) -> None:
        container = _container_kind(node)
        if container == "impl_item":
            self._visit_method(node)
            return
        if container == "trait_item":
            # Provided trait methods: walk the body, count nothing for the item.
            self.generic_visit(node)
            return

        if self.include_tests is IncludeTests.NO and is_test_fn(node):
            return

        declared_unsafe = _has_unsafe_modifier(node)
        unsafe_fn = declared_unsafe or has_unsafe_attributes(node)
        body = _body(node)

        if unsafe_fn and not declared_unsafe:
            # Attribute-marked functions open a region for their body that
            # is never closed on this path.
            self._open_region(RegionShape.FUNCTION, node, body)

        guard = (
            self._trust_region(RegionShape.FUNCTION, node, body)
            if declared_unsafe
            else nullcontext()
        )
        with guard:
            self.metrics.count(Category.FUNCTIONS, unsafe_fn)
            self.generic_visit(node)

    def _visit_method(self, node: Node) -> None:
        unsafe_method = _has_unsafe_modifier(node)
        guard = (
            self._trust_region(RegionShape.METHOD, node, _body(node))
            if unsafe_method
            else nullcontext()
        )
        with guard:
            self.metrics.count(Category.METHODS, unsafe_method)
            self.generic_visit(node)

    def visit_expr(self, node: Node) -> None:
        if node.type == "unsafe_block":
            with self._trust_region(RegionShape.INNER, node, _body(node)):
                self.visit_unsafe_block(node)
        elif node.type in TRIVIAL_EXPRESSION_KINDS:
            pass
        elif node.type == "generic_function":
            # Turbofish path: part of the enclosing call, not an expression of its own.
            self._dispatch(node)
        else:
            self.metrics.count(Category.EXPRS, self._depth > 0)
            self._dispatch(node)

    def visit_unsafe_block(self, node: Node) -> None:
        # The block is the region itself; only its statements are visited.
        body = _body(node)
        if body is not None:
            self.generic_visit(body)

    def visit_call_expression(self, node: Node) -> None:
        function = node.child_by_field_name("function")
        receiver = _method_receiver(function) if function is not None else None
        if receiver is None:
            self.generic_visit(node)
            return
        # Method call: one expression. The `recv.name` callee is not counted.
        self.visit(receiver)
        arguments = node.child_by_field_name("arguments")
        if arguments is not None:
            self.visit(arguments)

    def visit_generic_function(self, node: Node) -> None:
        receiver = _method_receiver(node)
        if receiver is not None:
            self.visit(receiver)
        else:
            self.generic_visit(node)

    def visit_unary_expression(self, node: Node) -> None:
        if self._depth > 0 and node.children and node.children[0].type == "*":
            if self.region_stats == "stack":
                for stats in self._stats:
                    stats.has_deref = True
            else:
                self._stats[-1].has_deref = True
        self.generic_visit(node)

    def visit_mod_item(self, node: Node) -> None:
        if self.include_tests is IncludeTests.NO and is_test_mod(node):
            return
        self.generic_visit(node)

    def visit_impl_item(self, node: Node) -> None:
        self.metrics.count(Category.ITEM_IMPLS, _has_unsafe_keyword(node))
        self.generic_visit(node)

    def visit_trait_item(self, node: Node) -> None:
        self.metrics.count(Category.ITEM_TRAITS, _has_unsafe_keyword(node))
        self.generic_visit(node)

    def visit_attribute_item(self, node: Node) -> None:
        pass

    def visit_inner_attribute_item(self, node: Node) -> None:
        pass

    def visit_token_tree(self, node: Node) -> None:
        # Macro arguments are unparsed tokens.
        pass
