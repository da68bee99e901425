"""Setup-only synthesis.

A setup run lays out the witness-independent part of a circuit: fixed columns,
selectors and lookup tables. It synthesizes `circuit.without_witnesses()` with
unknown values allowed, which is how a proving backend would derive its keys.
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, List

from primitives.field import FF, FieldType, as_ints
from protocol.circuit import Circuit
from protocol.columns import Column, ColumnKind
from protocol.constraint_system import ConstraintSystem
from protocol.layouter import PlacedRegion, SimpleLayouter
from protocol.witness_table import WitnessTable

logger = logging.getLogger(__name__)

FIXED_KINDS = (ColumnKind.FIXED, ColumnKind.SELECTOR, ColumnKind.LOOKUP_TABLE)


@dataclass
class CircuitSetup:
    """Constraint system and fixed assignment of a circuit."""
    k: int
    cs: ConstraintSystem
    config: Any
    table: WitnessTable
    regions: List[PlacedRegion]

    def fixed_columns(self) -> Dict[Column, List[int]]:
        """Values of every fixed, selector and lookup table column, as ints."""
        return {
            column: as_ints(self.table.column_values(column))
            for column in self.table.columns()
            if column.kind in FIXED_KINDS
        }


def setup(k: int, circuit: Circuit, field: FieldType = FF) -> CircuitSetup:
    """Configure and lay out `circuit` without witness data.

    Raises:
        ConstructionError: If configure registers a malformed constraint
        SynthesisError: On collisions, layout overflow or table errors
    """
    cs = ConstraintSystem(field)
    config = type(circuit).configure(cs)
    table = WitnessTable(k, cs.registry.counts(), cs.field)
    layouter = SimpleLayouter(cs, table, require_witness=False)
    circuit.without_witnesses().synthesize(config, layouter)
    table.freeze()
    logger.info("Setup of %s: k=%d, %d region(s), %d rows used",
                type(circuit).__name__, k, len(layouter.regions), layouter.rows_used)
    return CircuitSetup(k, cs, config, table, layouter.regions)
