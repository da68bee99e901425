"""Evaluation contexts for expression trees.

EvaluationContext provides a uniform interface for expression evaluation that
works at a single row (returns scalars) and across the whole domain (returns
arrays). The same expression tree is evaluated in both contexts thanks to
galois broadcasting.

Example:
    identity = q * (a - 1)

    # One row: field scalar
    evaluate(identity, RowContext(table, row=3))

    # All rows at once: field array of length N
    evaluate(identity, DomainContext(table))

Rotations are cyclic in both contexts: row r with rotation k reads row
(r + k) mod N. Unassigned cells read as zero.
"""

from abc import ABC, abstractmethod
from typing import Dict, Tuple

import galois
import numpy as np

from primitives.field import FieldLike, field_full, to_field
from protocol.columns import Column
from protocol.expressions import Expression
from protocol.witness_table import WitnessTable


class EvaluationContext(ABC):
    """Resolves the leaves of an expression tree."""

    @abstractmethod
    def constant(self, value: FieldLike):
        """Lift a constant into this context's value shape."""
        pass

    @abstractmethod
    def query(self, column: Column, rotation: int):
        """Value of `column` at the current row shifted by `rotation`."""
        pass

    @abstractmethod
    def selector(self, column: Column):
        """Selector value (0 or 1) at the current row."""
        pass


class RowContext(EvaluationContext):
    """Scalar evaluation at one absolute row."""

    def __init__(self, table: WitnessTable, row: int):
        self._table = table
        self._row = row

    def constant(self, value: FieldLike) -> galois.FieldArray:
        return to_field(self._table.field, value)

    def query(self, column: Column, rotation: int) -> galois.FieldArray:
        n = self._table.domain_size()
        return self._table.value(column, (self._row + rotation) % n)

    def selector(self, column: Column) -> galois.FieldArray:
        return self._table.value(column, self._row)


class DomainContext(EvaluationContext):
    """Array evaluation at every row of the domain simultaneously."""

    def __init__(self, table: WitnessTable):
        self._table = table
        self._n = table.domain_size()
        self._rows = np.arange(self._n)
        self._rotated: Dict[Tuple[Column, int], galois.FieldArray] = {}

    def constant(self, value: FieldLike) -> galois.FieldArray:
        return field_full(self._table.field, self._n, value)

    def query(self, column: Column, rotation: int) -> galois.FieldArray:
        key = (column, rotation)
        if key not in self._rotated:
            values = self._table.column_values(column)
            # result[r] = values[(r + rotation) mod N]
            self._rotated[key] = values[(self._rows + rotation) % self._n]
        return self._rotated[key]

    def selector(self, column: Column) -> galois.FieldArray:
        return self.query(column, 0)


def evaluate(expr: Expression, ctx: EvaluationContext):
    """Fold the expression tree in the given context."""
    return expr.evaluate(ctx)


def evaluate_at(expr: Expression, row: int, table: WitnessTable) -> galois.FieldArray:
    """Evaluate `expr` at absolute row `row` of `table`."""
    return expr.evaluate(RowContext(table, row))


def evaluate_domain(expr: Expression, table: WitnessTable) -> galois.FieldArray:
    """Evaluate `expr` at every row of `table`, returning a length-N array."""
    return expr.evaluate(DomainContext(table))
