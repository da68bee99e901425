"""Mock prover: checks every gate and lookup against a synthesized witness table.

The mock prover runs the full circuit pipeline without any cryptography:

1. configure the circuit against a fresh ConstraintSystem
2. bind public inputs to the instance columns
3. synthesize the witness through a SimpleLayouter
4. evaluate every gate identity and lookup at every row of the 2^k domain

Construction and synthesis errors are raised from `run`. Constraint violations
are returned by `verify` as data, ordered by row, then by registration order,
so that every failing location is visible in one pass.

Example:
    prover = MockProver.run(k=3, circuit=EqOneCircuit(a=Value.known(FF(1))))
    result = prover.verify()
    assert result.is_satisfied
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence, Set, Tuple, Union

import numpy as np

from primitives.field import FF, FieldLike, FieldType, as_ints
from protocol.circuit import Circuit
from protocol.columns import Column, ColumnKind
from protocol.config import MockProverConfig
from protocol.constraint_system import ConstraintSystem, Gate, Lookup
from protocol.errors import InstanceError, TableError
from protocol.evaluation import DomainContext
from protocol.expressions import ColumnQuery
from protocol.layouter import PlacedRegion, SimpleLayouter
from protocol.witness_table import WitnessTable

logger = logging.getLogger(__name__)

# Rank of failure kinds within one (row, constraint) slot
_RANK_CELL = 0
_RANK_IDENTITY = 1
_RANK_LOOKUP = 2


# --- Failures ---

@dataclass(frozen=True)
class CellNotAssigned:
    """An enabled gate queries an advice cell that was never assigned."""
    gate: str
    row: int
    column: Column
    cell_row: int
    order: int

    @property
    def sort_key(self) -> Tuple[int, int, int, int]:
        return (self.row, self.order, _RANK_CELL, self.cell_row)

    def __str__(self) -> str:
        return (f"Gate '{self.gate}' enabled at row {self.row} queries {self.column} "
                f"at row {self.cell_row}, which was never assigned")


@dataclass(frozen=True)
class ConstraintNotSatisfied:
    """A gate identity evaluated to a non-zero value."""
    gate: str
    identity: str
    identity_index: int
    row: int
    cell_values: Tuple[Tuple[str, int], ...]
    order: int

    @property
    def sort_key(self) -> Tuple[int, int, int, int]:
        return (self.row, self.order, _RANK_IDENTITY, self.identity_index)

    def __str__(self) -> str:
        cells = ", ".join(f"{name} = {value}" for name, value in self.cell_values)
        label = f"'{self.identity}'" if self.identity else f"#{self.identity_index}"
        return f"Constraint {label} in gate '{self.gate}' is not satisfied at row {self.row} ({cells})"


@dataclass(frozen=True)
class LookupNotSatisfied:
    """A lookup input tuple is absent from its table."""
    lookup: str
    row: int
    inputs: Tuple[int, ...]
    order: int

    @property
    def sort_key(self) -> Tuple[int, int, int, int]:
        return (self.row, self.order, _RANK_LOOKUP, 0)

    def __str__(self) -> str:
        return f"Lookup '{self.lookup}' is not satisfied at row {self.row}: input {self.inputs} is not in the table"


VerifyFailure = Union[CellNotAssigned, ConstraintNotSatisfied, LookupNotSatisfied]


@dataclass(frozen=True)
class VerifyResult:
    """Outcome of a check: Satisfied when `failures` is empty."""
    failures: Tuple[VerifyFailure, ...] = ()

    @property
    def is_satisfied(self) -> bool:
        return not self.failures

    def gate_failures(self) -> List[ConstraintNotSatisfied]:
        return [f for f in self.failures if isinstance(f, ConstraintNotSatisfied)]

    def lookup_failures(self) -> List[LookupNotSatisfied]:
        return [f for f in self.failures if isinstance(f, LookupNotSatisfied)]

    def report(self, max_failures: Optional[int] = None) -> str:
        if self.is_satisfied:
            return "Satisfied"
        shown = self.failures if max_failures is None else self.failures[:max_failures]
        lines = [f"{len(self.failures)} constraint failure(s):"]
        lines.extend(f"  {failure}" for failure in shown)
        if len(shown) < len(self.failures):
            lines.append(f"  ... and {len(self.failures) - len(shown)} more")
        return "\n".join(lines)

    def assert_satisfied(self, max_failures: Optional[int] = None) -> None:
        if not self.is_satisfied:
            raise AssertionError(self.report(max_failures))


# --- Prover ---

class MockProver:
    """Configured constraint system plus its frozen witness table."""

    def __init__(
        self,
        k: int,
        cs: ConstraintSystem,
        table: WitnessTable,
        regions: Sequence[PlacedRegion],
        config: Optional[MockProverConfig] = None,
    ):
        self.k = k
        self.cs = cs
        self.table = table
        self.regions = list(regions)
        self.config = config or MockProverConfig()
        self._table_sets = self._build_table_sets()

    @classmethod
    def run(
        cls,
        k: int,
        circuit: Circuit,
        instance: Sequence[Sequence[FieldLike]] = (),
        config: Optional[MockProverConfig] = None,
        field: FieldType = FF,
    ) -> "MockProver":
        """Configure and synthesize `circuit` over a 2^k row domain.

        Args:
            k: Domain size exponent
            circuit: Circuit with full witness values
            instance: One sequence of public inputs per instance column,
                bound from absolute row 0
            config: Checking options (defaults to MockProverConfig())
            field: galois field the circuit is defined over

        Returns:
            MockProver ready for verify()

        Raises:
            ConstructionError: If configure registers a malformed constraint
            SynthesisError: If synthesis fails (missing witness, collision,
                layout overflow, bad table)
            InstanceError: If public inputs do not match the instance columns
        """
        cs = ConstraintSystem(field)
        circuit_config = type(circuit).configure(cs)

        table = WitnessTable(k, cs.registry.counts(), cs.field)
        _bind_instance(table, cs, instance)

        layouter = SimpleLayouter(cs, table, require_witness=True)
        circuit.synthesize(circuit_config, layouter)
        _check_tables_loaded(cs, layouter)
        table.freeze()

        logger.info(
            "Synthesized %s: k=%d, %d gate(s), %d lookup(s), %d region(s), %d/%d rows used",
            type(circuit).__name__, k, len(cs.gates), len(cs.lookups),
            len(layouter.regions), layouter.rows_used, table.domain_size(),
        )
        return cls(k, cs, table, layouter.regions, config)

    def verify(self) -> VerifyResult:
        """Check every gate and lookup at every row; never raises on violations."""
        units: List[Union[Gate, Lookup]] = [*self.cs.gates, *self.cs.lookups]
        if self.config.workers > 1 and len(units) > 1:
            with ThreadPoolExecutor(max_workers=self.config.workers) as executor:
                per_unit = list(executor.map(self._check_unit, units))
        else:
            per_unit = [self._check_unit(unit) for unit in units]

        failures = sorted((f for chunk in per_unit for f in chunk), key=lambda f: f.sort_key)
        result = VerifyResult(tuple(failures))
        if result.is_satisfied:
            logger.info("All %d constraint(s) satisfied over %d rows", len(units), self.table.domain_size())
        else:
            logger.warning("%d constraint failure(s); first: %s", len(failures), failures[0])
        return result

    def assert_satisfied(self) -> None:
        self.verify().assert_satisfied(self.config.max_reported_failures)

    # --- Checks ---

    def _check_unit(self, unit: Union[Gate, Lookup]) -> List[VerifyFailure]:
        # Each task evaluates with its own context over the read-only table
        ctx = DomainContext(self.table)
        if isinstance(unit, Gate):
            return self._check_gate(unit, ctx)
        return self._check_lookup(unit, ctx)

    def _check_gate(self, gate: Gate, ctx: DomainContext) -> List[VerifyFailure]:
        n = self.table.domain_size()
        failures: List[VerifyFailure] = []

        selectors = sorted(gate.queried_selectors(), key=lambda c: c.index)
        if selectors:
            enabled = np.ones(n, dtype=bool)
            for selector in selectors:
                enabled &= np.array(as_ints(ctx.selector(selector))) == 1
            advice_cells = sorted(
                ((col, rot) for col, rot in gate.queried_cells() if col.kind is ColumnKind.ADVICE),
                key=lambda cell: (cell[0].index, cell[1]),
            )
            for row in np.flatnonzero(enabled):
                for column, rotation in advice_cells:
                    cell_row = (int(row) + rotation) % n
                    if not self.table.is_assigned(column, cell_row):
                        failures.append(CellNotAssigned(gate.name, int(row), column, cell_row, gate.order))

        for index, (identity, expr) in enumerate(gate.identities):
            values = as_ints(expr.evaluate(ctx))
            queries = sorted(
                {(node.column, node.rotation) for node in expr.walk() if isinstance(node, ColumnQuery)},
                key=lambda q: (q[0].kind.value, q[0].index, q[1]),
            )
            for row, value in enumerate(values):
                if value == 0:
                    continue
                cell_values = tuple(
                    (f"{col}@{rot:+d}", int(self.table.value(col, (row + rot) % n)))
                    for col, rot in queries
                )
                failures.append(ConstraintNotSatisfied(gate.name, identity, index, row, cell_values, gate.order))
        return failures

    def _check_lookup(self, lookup: Lookup, ctx: DomainContext) -> List[VerifyFailure]:
        table_set = self._table_sets[tuple(lookup.table_columns)]
        inputs = [as_ints(expr.evaluate(ctx)) for expr in lookup.input_expressions]
        return [
            LookupNotSatisfied(lookup.name, row, tup, lookup.order)
            for row, tup in enumerate(zip(*inputs))
            if tup not in table_set
        ]

    def _build_table_sets(self) -> Dict[Tuple[Column, ...], Set[Tuple[int, ...]]]:
        """Assemble each lookup's table rows into a set of int tuples, once."""
        sets: Dict[Tuple[Column, ...], Set[Tuple[int, ...]]] = {}
        for lookup in self.cs.lookups:
            key = tuple(lookup.table_columns)
            if key not in sets:
                columns = [as_ints(self.table.column_values(col)) for col in key]
                sets[key] = set(zip(*columns))
        return sets


# --- Helpers ---

def _bind_instance(table: WitnessTable, cs: ConstraintSystem, instance: Sequence[Sequence[FieldLike]]) -> None:
    n_instance = cs.num_columns(ColumnKind.INSTANCE)
    if len(instance) != n_instance:
        raise InstanceError(f"expected {n_instance} instance column(s), got {len(instance)}")
    n = table.domain_size()
    for index, values in enumerate(instance):
        if len(values) > n:
            raise InstanceError(f"instance column {index} has {len(values)} values but the domain has {n} rows")
        column = Column(ColumnKind.INSTANCE, index)
        for row, value in enumerate(values):
            table.set(column, row, value)


def _check_tables_loaded(cs: ConstraintSystem, layouter: SimpleLayouter) -> None:
    """Every table column used by a lookup must be fully loaded, all from one table."""
    for lookup in cs.lookups:
        sources = set()
        for column in lookup.table_columns:
            if column not in layouter.loaded_tables:
                raise TableError(f"lookup '{lookup.name}': {column} was never loaded")
            sources.add(layouter.loaded_tables[column])
        if len(sources) > 1:
            raise TableError(f"lookup '{lookup.name}': table columns come from different tables {sorted(sources)}")
