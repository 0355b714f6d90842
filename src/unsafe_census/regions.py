"""Trust region statistics and the diagnostic line they produce."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Literal

RegionStatsPolicy = Literal["slot", "stack"]

DEREF_MARKER = "Dereference Operation"


class RegionShape(Enum):
    """Syntactic form of a trust region. Values are the printed labels."""

    INNER = "Inner"
    FUNCTION = "Function"
    METHOD = "Method"


@dataclass
class RegionStats:
    """Snapshot of one trust region, filled in at entry and completed at exit.

    Attributes:
        shape: Region shape
        text: Rendered source of the region
        statements: Direct statements in the region body, fixed at entry
        expr_baseline: Unsafe expression total when the region was entered
        expr_final: Unsafe expression total when the region was closed
        has_deref: A `*` dereference was seen since entry
    """

    shape: RegionShape
    text: str
    statements: int
    expr_baseline: int
    expr_final: int = 0
    has_deref: bool = False

    @property
    def expression_delta(self) -> int:
        return self.expr_final - self.expr_baseline

    def diagnostic(self) -> str:
        """Format as `text ~ shape ~ delta ~ statements[ ~ Dereference Operation]`."""
        line = f"{self.text} ~ {self.shape.value} ~ {self.expression_delta} ~ {self.statements}"
        if self.has_deref:
            line += f" ~ {DEREF_MARKER}"
        return line
