"""Symbolic polynomial expressions over column queries.

An Expression is an immutable tree built by composition:

    q = meta.query_selector(q_enable)
    a = meta.query_advice(a_col, Rotation.cur())
    identity = q * (a - 1)

Ints and field scalars are lifted to Constant on either side of an operator.
There is no division or inversion: every expression is a polynomial, and its
degree is tracked by `degree()`.

Evaluation is delegated to an EvaluationContext (see protocol/evaluation.py), so
the same tree evaluates to a scalar at one row or to an array over the domain.
"""

from dataclasses import dataclass
from typing import TYPE_CHECKING, Callable, Iterator, List, Set, Union

import galois
import numpy as np

from protocol.columns import Column

if TYPE_CHECKING:
    from protocol.evaluation import EvaluationContext


class Rotation:
    """Signed row offsets relative to the current row."""

    @staticmethod
    def cur() -> int:
        return 0

    @staticmethod
    def next() -> int:
        return 1

    @staticmethod
    def prev() -> int:
        return -1


class Expression:
    """Base class for expression tree nodes."""

    # Make numpy/galois defer to our reflected operators (FF(1) - expr).
    __array_ufunc__ = None

    def evaluate(self, ctx: "EvaluationContext"):
        raise NotImplementedError

    def children(self) -> List["Expression"]:
        return []

    def degree(self) -> int:
        raise NotImplementedError

    def walk(self) -> Iterator["Expression"]:
        """Yield every node in the tree, pre-order."""
        yield self
        for child in self.children():
            yield from child.walk()

    def queried_columns(self) -> Set[Column]:
        return {node.column for node in self.walk() if isinstance(node, (ColumnQuery, SelectorExpr))}

    def queried_selectors(self) -> Set[Column]:
        return {node.column for node in self.walk() if isinstance(node, SelectorExpr)}

    def contains_simple_selector(self, is_simple: Callable[[Column], bool]) -> bool:
        return any(is_simple(col) for col in self.queried_selectors())

    def scale(self, factor) -> "Expression":
        return Scaled(self, factor)

    # --- Operators ---

    def __add__(self, other) -> "Expression":
        return Sum(self, _lift(other))

    def __radd__(self, other) -> "Expression":
        return Sum(_lift(other), self)

    def __sub__(self, other) -> "Expression":
        return Sum(self, Negated(_lift(other)))

    def __rsub__(self, other) -> "Expression":
        return Sum(_lift(other), Negated(self))

    def __mul__(self, other) -> "Expression":
        return Product(self, _lift(other))

    def __rmul__(self, other) -> "Expression":
        return Product(_lift(other), self)

    def __neg__(self) -> "Expression":
        return Negated(self)


ExpressionLike = Union[Expression, int, galois.FieldArray]


def _lift(value: ExpressionLike) -> Expression:
    if isinstance(value, Expression):
        return value
    if isinstance(value, (int, np.integer, galois.FieldArray)):
        return Constant(value)
    raise TypeError(f"Cannot use {type(value).__name__} in an expression")


@dataclass(frozen=True, eq=False)
class Constant(Expression):
    value: Union[int, galois.FieldArray]

    def evaluate(self, ctx):
        return ctx.constant(self.value)

    def degree(self) -> int:
        return 0

    def __repr__(self) -> str:
        return f"Constant({int(self.value)})"


@dataclass(frozen=True, eq=False)
class ColumnQuery(Expression):
    """Value of `column` at row (r + rotation) mod N."""
    column: Column
    rotation: int = 0

    def evaluate(self, ctx):
        return ctx.query(self.column, self.rotation)

    def degree(self) -> int:
        return 1

    def __repr__(self) -> str:
        return f"{self.column}@{self.rotation:+d}"


@dataclass(frozen=True, eq=False)
class SelectorExpr(Expression):
    column: Column

    def evaluate(self, ctx):
        return ctx.selector(self.column)

    def degree(self) -> int:
        return 1

    def __repr__(self) -> str:
        return f"{self.column}"


@dataclass(frozen=True, eq=False)
class Negated(Expression):
    inner: Expression

    def evaluate(self, ctx):
        return -self.inner.evaluate(ctx)

    def children(self):
        return [self.inner]

    def degree(self) -> int:
        return self.inner.degree()

    def __repr__(self) -> str:
        return f"-({self.inner!r})"


@dataclass(frozen=True, eq=False)
class Sum(Expression):
    left: Expression
    right: Expression

    def evaluate(self, ctx):
        return self.left.evaluate(ctx) + self.right.evaluate(ctx)

    def children(self):
        return [self.left, self.right]

    def degree(self) -> int:
        return max(self.left.degree(), self.right.degree())

    def __repr__(self) -> str:
        return f"({self.left!r} + {self.right!r})"


@dataclass(frozen=True, eq=False)
class Product(Expression):
    left: Expression
    right: Expression

    def evaluate(self, ctx):
        return self.left.evaluate(ctx) * self.right.evaluate(ctx)

    def children(self):
        return [self.left, self.right]

    def degree(self) -> int:
        return self.left.degree() + self.right.degree()

    def __repr__(self) -> str:
        return f"({self.left!r} * {self.right!r})"


@dataclass(frozen=True, eq=False)
class Scaled(Expression):
    inner: Expression
    factor: Union[int, galois.FieldArray]

    def evaluate(self, ctx):
        return self.inner.evaluate(ctx) * ctx.constant(self.factor)

    def children(self):
        return [self.inner]

    def degree(self) -> int:
        return self.inner.degree()

    def __repr__(self) -> str:
        return f"({self.inner!r} * {int(self.factor)})"


# --- Shape checks ---

def top_level_factors(expr: Expression) -> List[Expression]:
    """Flatten the top-level product, looking through negation and scaling."""
    if isinstance(expr, Product):
        return top_level_factors(expr.left) + top_level_factors(expr.right)
    if isinstance(expr, (Negated, Scaled)):
        return top_level_factors(expr.inner)
    return [expr]


def misplaced_simple_selectors(expr: Expression, is_simple: Callable[[Column], bool]) -> Set[Column]:
    """Return simple selectors that appear anywhere but as a top-level factor.

    `q * (a - 1)` is well formed; `q * a - 1` and `a * (q + 1)` are not.
    """
    misplaced: Set[Column] = set()
    for factor in top_level_factors(expr):
        if isinstance(factor, SelectorExpr) and is_simple(factor.column):
            continue
        misplaced |= {col for col in factor.queried_selectors() if is_simple(col)}
    return misplaced
