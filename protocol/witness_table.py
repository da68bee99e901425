"""Witness table: the concrete (column x absolute row) grid of field values.

Each column is stored as a galois array of length N = 2^k together with two
masks: `claimed` (the cell was written by some assignment, possibly with an
unknown value) and `known` (the cell holds a real value). A cell may be claimed
at most once; unclaimed and unknown cells read as zero during evaluation.
"""

from typing import Dict, Optional

import galois
import numpy as np

from primitives.field import FieldLike, FieldType, to_field
from protocol.columns import Column, ColumnKind
from protocol.errors import AssignmentCollisionError, LayoutOverflowError


class WitnessTable:
    """Column-major grid of field values over a 2^k row domain."""

    def __init__(self, k: int, counts: Dict[ColumnKind, int], field: FieldType):
        if k < 0:
            raise ValueError(f"k must be non-negative, got {k}")
        self.k = k
        self.field = field
        self._n = 1 << k
        self._values: Dict[Column, galois.FieldArray] = {}
        self._claimed: Dict[Column, np.ndarray] = {}
        self._known: Dict[Column, np.ndarray] = {}
        self._frozen = False
        for kind, count in counts.items():
            for index in range(count):
                column = Column(kind, index)
                self._values[column] = field.Zeros(self._n)
                self._claimed[column] = np.zeros(self._n, dtype=bool)
                self._known[column] = np.zeros(self._n, dtype=bool)

    def domain_size(self) -> int:
        return self._n

    def columns(self):
        return list(self._values)

    def has_column(self, column: Column) -> bool:
        return column in self._values

    # --- Reads ---

    def get(self, column: Column, row: int) -> Optional[galois.FieldArray]:
        """Return the value at (column, row), or None if it is not known."""
        self._check_row(column, row)
        if not self._known[column][row]:
            return None
        return self._values[column][row]

    def value(self, column: Column, row: int) -> galois.FieldArray:
        """Return the value at (column, row), reading unknown cells as zero."""
        return self._values[column][row]

    def is_assigned(self, column: Column, row: int) -> bool:
        return bool(self._known[column][row])

    def is_claimed(self, column: Column, row: int) -> bool:
        return bool(self._claimed[column][row])

    def column_values(self, column: Column) -> galois.FieldArray:
        return self._values[column]

    def known_mask(self, column: Column) -> np.ndarray:
        return self._known[column]

    # --- Writes ---

    def set(self, column: Column, row: int, value: Optional[FieldLike]) -> None:
        """Claim (column, row) and store `value` (None records an unknown value).

        Raises:
            AssignmentCollisionError: If the cell was already claimed
            LayoutOverflowError: If row is outside [0, N)
        """
        if self._frozen:
            raise RuntimeError("witness table is frozen; synthesis has completed")
        self._check_row(column, row)
        if self._claimed[column][row]:
            raise AssignmentCollisionError(f"cell {column} at row {row} is already assigned")
        self._claimed[column][row] = True
        if value is not None:
            self._values[column][row] = to_field(self.field, value)
            self._known[column][row] = True

    def fill_unclaimed(self, column: Column, value: FieldLike) -> None:
        """Write `value` into every unclaimed row of `column` (table padding)."""
        if self._frozen:
            raise RuntimeError("witness table is frozen; synthesis has completed")
        free = ~self._claimed[column]
        self._values[column][free] = to_field(self.field, value)
        self._known[column][free] = True
        self._claimed[column][free] = True

    def freeze(self) -> None:
        self._frozen = True

    @property
    def frozen(self) -> bool:
        return self._frozen

    def _check_row(self, column: Column, row: int) -> None:
        if column not in self._values:
            raise KeyError(f"column {column} is not part of this table")
        if not 0 <= row < self._n:
            raise LayoutOverflowError(
                f"row {row} of {column} is outside the domain of {self._n} rows (k={self.k})"
            )
