"""Column registry.

Columns are typed handles `(kind, index)`; the index is unique within its kind
for the lifetime of one constraint system. Selectors additionally carry a
simple/complex tag that gate and lookup registration consult.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Set


class ColumnKind(Enum):
    ADVICE = "advice"
    FIXED = "fixed"
    INSTANCE = "instance"
    SELECTOR = "selector"
    LOOKUP_TABLE = "lookup_table"


@dataclass(frozen=True)
class Column:
    """Handle to one column of the witness table."""
    kind: ColumnKind
    index: int

    def __str__(self) -> str:
        return f"{self.kind.value}[{self.index}]"


# Aliases used in signatures; all are plain Columns distinguished by kind.
Selector = Column
TableColumn = Column


class ColumnRegistry:
    """Allocates columns with monotonically increasing per-kind indices."""

    def __init__(self):
        self._counts: Dict[ColumnKind, int] = {kind: 0 for kind in ColumnKind}
        self._simple_selectors: Set[int] = set()

    def allocate(self, kind: ColumnKind) -> Column:
        column = Column(kind, self._counts[kind])
        self._counts[kind] += 1
        return column

    def allocate_selector(self, complex: bool = False) -> Selector:
        selector = self.allocate(ColumnKind.SELECTOR)
        if not complex:
            self._simple_selectors.add(selector.index)
        return selector

    def is_allocated(self, column: Column) -> bool:
        return 0 <= column.index < self._counts[column.kind]

    def is_simple(self, selector: Selector) -> bool:
        return selector.kind is ColumnKind.SELECTOR and selector.index in self._simple_selectors

    def count(self, kind: ColumnKind) -> int:
        return self._counts[kind]

    def counts(self) -> Dict[ColumnKind, int]:
        return dict(self._counts)
