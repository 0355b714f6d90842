"""Counter ledger: safe/unsafe tallies for one scanned file.

Every countable node lands in exactly one category and exactly one of the
two buckets of that category. The ledger is created empty per file, only
grows during the walk, and is read once afterwards.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class Category(str, Enum):
    """Syntactic categories tallied by the visitor."""

    FUNCTIONS = "functions"
    METHODS = "methods"
    ITEM_TRAITS = "item_traits"
    ITEM_IMPLS = "item_impls"
    EXPRS = "exprs"


@dataclass
class Count:
    """Occurrences observed outside (safe) and inside (unsafe) trust regions."""

    safe: int = 0
    unsafe: int = 0

    def count(self, is_unsafe: bool) -> None:
        if is_unsafe:
            self.unsafe += 1
        else:
            self.safe += 1

    @property
    def total(self) -> int:
        return self.safe + self.unsafe


@dataclass
class CounterLedger:
    """Per-category counters plus the file-level forbid flag.

    Attributes:
        counters: One Count per Category
        forbids_unsafe: True if the file declares #![forbid(unsafe_code)]
    """

    counters: dict[Category, Count] = field(
        default_factory=lambda: {category: Count() for category in Category}
    )
    forbids_unsafe: bool = False

    def count(self, category: Category, in_trust_region: bool) -> None:
        """Increment the unsafe bucket of category if in_trust_region, else the safe one."""
        self.counters[category].count(in_trust_region)

    def __getitem__(self, category: Category) -> Count:
        return self.counters[category]

    @property
    def functions(self) -> Count:
        return self.counters[Category.FUNCTIONS]

    @property
    def methods(self) -> Count:
        return self.counters[Category.METHODS]

    @property
    def item_traits(self) -> Count:
        return self.counters[Category.ITEM_TRAITS]

    @property
    def item_impls(self) -> Count:
        return self.counters[Category.ITEM_IMPLS]

    @property
    def exprs(self) -> Count:
        return self.counters[Category.EXPRS]

    @property
    def has_unsafe(self) -> bool:
        """True if any category saw at least one unsafe occurrence."""
        return any(c.unsafe > 0 for c in self.counters.values())

    def to_dict(self) -> dict:
        """JSON-ready view of the ledger."""
        data: dict = {
            category.value: {"safe": c.safe, "unsafe": c.unsafe}
            for category, c in self.counters.items()
        }
        data["forbids_unsafe"] = self.forbids_unsafe
        return data
