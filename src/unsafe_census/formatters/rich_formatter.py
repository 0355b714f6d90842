"""Rich terminal formatter for scan summaries."""

from typing import List

from rich.console import Console
from rich.table import Table

from ..api import ScanResult
from ..ledger import Category
from .base import BaseFormatter

# Summary goes to stderr; stdout carries the region diagnostics.
console = Console(stderr=True)

_LABELS = {
    Category.FUNCTIONS: "Functions",
    Category.EXPRS: "Expressions",
    Category.ITEM_IMPLS: "Impls",
    Category.ITEM_TRAITS: "Traits",
    Category.METHODS: "Methods",
}


def _unsafe_cell(unsafe: int) -> str:
    return f"[red]{unsafe}[/red]" if unsafe else "[green]0[/green]"


def _forbid_label(result: ScanResult) -> str:
    if result.ledger.forbids_unsafe:
        return "[green]forbids unsafe[/green]"
    return "[dim]unsafe allowed[/dim]"


class RichFormatter(BaseFormatter):
    """One table per file: safe and unsafe counts per category."""

    def render(self, results: List[ScanResult]) -> None:
        for result in results:
            table = Table(title=f"{result.path} ({_forbid_label(result)})", expand=False)
            table.add_column("Category", style="cyan")
            table.add_column("Safe", justify="right")
            table.add_column("Unsafe", justify="right")

            for category, label in _LABELS.items():
                count = result.ledger[category]
                table.add_row(label, str(count.safe), _unsafe_cell(count.unsafe))

            console.print(table)
            if result.final_depth:
                console.print(
                    f"[yellow]{result.final_depth} trust region(s) opened by "
                    f"attributes were never closed[/yellow]"
                )
            console.print()

    def format(self, results: List[ScanResult]) -> str:
        # Rich output goes directly to console; return empty string
        self.render(results)
        return ""
