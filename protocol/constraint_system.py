"""Constraint system: columns, custom gates and lookup arguments.

A circuit's `configure` step allocates columns and registers constraints:

    a = meta.advice_column()
    q = meta.selector()
    meta.create_gate("a is one", lambda m: [
        ("check a", m.query_selector(q) * (m.query_advice(a, Rotation.cur()) - 1)),
    ])

Gate and lookup builders are pure functions of a `Queries` capability bound to
this system; they return declarative expression trees. Registration validates
the trees immediately and raises ConstructionError on malformed input.
"""

import logging
from dataclasses import dataclass
from typing import Callable, List, Sequence, Set, Tuple, Union

from primitives.field import FF, FieldLike, FieldType, to_field
from protocol.columns import Column, ColumnKind, ColumnRegistry, Selector, TableColumn
from protocol.errors import ConstructionError
from protocol.expressions import (
    ColumnQuery,
    Constant,
    Expression,
    SelectorExpr,
    misplaced_simple_selectors,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Gate:
    """Named polynomial identities, each required to vanish on every row.

    Attributes:
        name: Gate name (e.g. 'a is one')
        identities: (identity name, expression) pairs
        order: Registration order shared with lookups
    """
    name: str
    identities: Tuple[Tuple[str, Expression], ...]
    order: int

    def queried_selectors(self) -> Set[Column]:
        out: Set[Column] = set()
        for _, expr in self.identities:
            out |= expr.queried_selectors()
        return out

    def queried_cells(self) -> Set[Tuple[Column, int]]:
        """(column, rotation) pairs queried by any identity, selectors excluded."""
        return {
            (node.column, node.rotation)
            for _, expr in self.identities
            for node in expr.walk()
            if isinstance(node, ColumnQuery)
        }

    def degree(self) -> int:
        return max(expr.degree() for _, expr in self.identities)


@dataclass(frozen=True)
class Lookup:
    """Input tuple that must appear as a row of the table columns.

    Lookups carry no selector of their own and are checked at every row; the
    inputs are expected to fold a default tuple in on disabled rows.
    """
    name: str
    inputs: Tuple[Tuple[Expression, TableColumn], ...]
    order: int

    @property
    def input_expressions(self) -> List[Expression]:
        return [expr for expr, _ in self.inputs]

    @property
    def table_columns(self) -> List[TableColumn]:
        return [col for _, col in self.inputs]

    def degree(self) -> int:
        return max(expr.degree() for expr, _ in self.inputs)


class Queries:
    """Query-builder capability handed to gate and lookup builders."""

    def __init__(self, cs: "ConstraintSystem"):
        self._cs = cs

    def query_advice(self, column: Column, rotation: int = 0) -> Expression:
        return self._query(column, ColumnKind.ADVICE, rotation)

    def query_fixed(self, column: Column, rotation: int = 0) -> Expression:
        return self._query(column, ColumnKind.FIXED, rotation)

    def query_instance(self, column: Column, rotation: int = 0) -> Expression:
        return self._query(column, ColumnKind.INSTANCE, rotation)

    def query_selector(self, selector: Selector) -> Expression:
        if selector.kind is not ColumnKind.SELECTOR:
            raise ConstructionError(f"{selector} is not a selector")
        return SelectorExpr(selector)

    def constant(self, value: FieldLike) -> Expression:
        """Constant expression, reduced into this system's field."""
        return Constant(to_field(self._cs.field, value))

    def _query(self, column: Column, kind: ColumnKind, rotation: int) -> Expression:
        if column.kind is not kind:
            raise ConstructionError(f"cannot query {column} as a {kind.value} column")
        return ColumnQuery(column, int(rotation))


GateOutput = Sequence[Union[Expression, Tuple[str, Expression]]]
LookupOutput = Sequence[Tuple[Expression, TableColumn]]


class ConstraintSystem:
    """Columns, gates and lookups of one circuit, over one field."""

    def __init__(self, field: FieldType = FF):
        self.field = field
        self.registry = ColumnRegistry()
        self.gates: List[Gate] = []
        self.lookups: List[Lookup] = []
        self._next_order = 0

    # --- Column allocation ---

    def advice_column(self) -> Column:
        return self.registry.allocate(ColumnKind.ADVICE)

    def fixed_column(self) -> Column:
        return self.registry.allocate(ColumnKind.FIXED)

    def instance_column(self) -> Column:
        return self.registry.allocate(ColumnKind.INSTANCE)

    def selector(self) -> Selector:
        """Allocate a simple selector (only usable as a gate's outer factor)."""
        return self.registry.allocate_selector(complex=False)

    def complex_selector(self) -> Selector:
        """Allocate a complex selector (usable anywhere, including lookups)."""
        return self.registry.allocate_selector(complex=True)

    def lookup_table_column(self) -> TableColumn:
        return self.registry.allocate(ColumnKind.LOOKUP_TABLE)

    def num_columns(self, kind: ColumnKind) -> int:
        return self.registry.count(kind)

    # --- Registration ---

    def create_gate(self, name: str, build: Callable[[Queries], GateOutput]) -> Gate:
        """Register a custom gate.

        Args:
            name: Gate name used in violation reports
            build: Pure function returning (identity name, expression) pairs

        Returns:
            The registered Gate

        Raises:
            ConstructionError: On an empty gate, a foreign column, or a simple
                selector used other than as a factor of the whole identity
        """
        identities = []
        for item in build(Queries(self)):
            identity_name, expr = item if isinstance(item, tuple) else ("", item)
            if not isinstance(expr, Expression):
                raise ConstructionError(f"gate '{name}': identity '{identity_name}' is not an Expression")
            self._check_columns(f"gate '{name}'", expr)
            misplaced = misplaced_simple_selectors(expr, self.registry.is_simple)
            if misplaced:
                raise ConstructionError(
                    f"gate '{name}': simple selector(s) {sorted(map(str, misplaced))} in identity "
                    f"'{identity_name}' must multiply the whole identity"
                )
            identities.append((identity_name, expr))
        if not identities:
            raise ConstructionError(f"gate '{name}' has no identities")

        gate = Gate(name, tuple(identities), self._take_order())
        self.gates.append(gate)
        logger.debug("Registered gate '%s' (%d identities, degree %d)", name, len(identities), gate.degree())
        return gate

    def lookup(self, name: str, build: Callable[[Queries], LookupOutput]) -> Lookup:
        """Register a lookup argument checked unconditionally at every row.

        To disable the lookup on some rows, build each input as
        `q * value + (1 - q) * default` with a complex selector q, where the
        default tuple is a row of the table.

        Raises:
            ConstructionError: On an empty lookup, a non-table target column,
                a foreign column, or any simple selector in an input
        """
        inputs = []
        for expr, table_column in build(Queries(self)):
            if not isinstance(expr, Expression):
                raise ConstructionError(f"lookup '{name}': input is not an Expression")
            if table_column.kind is not ColumnKind.LOOKUP_TABLE or not self.registry.is_allocated(table_column):
                raise ConstructionError(f"lookup '{name}': {table_column} is not a lookup table column of this system")
            self._check_columns(f"lookup '{name}'", expr)
            if expr.contains_simple_selector(self.registry.is_simple):
                raise ConstructionError(
                    f"lookup '{name}': simple selectors cannot appear in lookup inputs; use complex_selector()"
                )
            inputs.append((expr, table_column))
        if not inputs:
            raise ConstructionError(f"lookup '{name}' has no inputs")

        lookup = Lookup(name, tuple(inputs), self._take_order())
        self.lookups.append(lookup)
        logger.debug("Registered lookup '%s' (%d inputs)", name, len(inputs))
        return lookup

    def degree(self) -> int:
        """Maximum degree over all gate identities and lookup inputs."""
        degrees = [g.degree() for g in self.gates] + [lk.degree() for lk in self.lookups]
        return max(degrees, default=0)

    def _take_order(self) -> int:
        order = self._next_order
        self._next_order += 1
        return order

    def _check_columns(self, where: str, expr: Expression) -> None:
        for column in expr.queried_columns():
            if not self.registry.is_allocated(column):
                raise ConstructionError(f"{where}: column {column} was never allocated in this system")
