"""Poseidon lookup circuit: (a, hash(a)) must be a row of a precomputed table.

Table (loaded in its own region, 16 rows):
    {(a, hash(a)) : a in [0, 16)}

Lookup inputs, with complex selector q_enable:
    q * a        + (1 - q) * 0
    q * poseidon + (1 - q) * hash(0)

Lookups have no selector of their own and are checked at every row. On rows
where q = 0 the inputs collapse to the default tuple (0, hash(0)), which is row
0 of the table, so disabled rows satisfy the lookup whatever their advice holds.
"""

from dataclasses import dataclass
from typing import List, Sequence

from primitives.field import FF
from primitives.poseidon2 import hash_to_field
from protocol.circuit import Circuit
from protocol.columns import Column, Selector, TableColumn
from protocol.constraint_system import ConstraintSystem
from protocol.expressions import Rotation
from protocol.layouter import Region, SimpleLayouter, TableRegion
from protocol.value import Value

TABLE_BITS = 4
TABLE_SIZE = 1 << TABLE_BITS


def poseidon(a: FF) -> FF:
    return hash_to_field([a])


@dataclass(frozen=True)
class PoseidonTableConfig:
    a: TableColumn
    poseidon: TableColumn

    def load(self, layouter: SimpleLayouter) -> None:
        def load_rows(table: TableRegion) -> None:
            for offset in range(TABLE_SIZE):
                a = FF(offset)
                table.assign_cell(self.a, offset, a, annotation="a")
                table.assign_cell(self.poseidon, offset, poseidon(a), annotation="Poseidon")

        layouter.assign_table("Poseidon table", load_rows)


@dataclass(frozen=True)
class PoseidonConfig:
    q_enable: Selector
    a: Column
    poseidon: Column
    table: PoseidonTableConfig

    @classmethod
    def configure(cls, meta: ConstraintSystem) -> "PoseidonConfig":
        q_enable = meta.complex_selector()
        a = meta.advice_column()
        poseidon_col = meta.advice_column()
        table = PoseidonTableConfig(a=meta.lookup_table_column(), poseidon=meta.lookup_table_column())

        default_a = FF(0)
        default_poseidon = poseidon(default_a)

        def lookup(m):
            q = m.query_selector(q_enable)
            not_q = m.constant(1) - q
            a_cur = m.query_advice(a, Rotation.cur())
            poseidon_cur = m.query_advice(poseidon_col, Rotation.cur())
            return [
                (q * a_cur + not_q * default_a, table.a),
                (q * poseidon_cur + not_q * default_poseidon, table.poseidon),
            ]

        meta.lookup("poseidon", lookup)
        return cls(q_enable, a, poseidon_col, table)

    def assign(self, region: Region, offset: int, a: Value, enabled: bool = True) -> None:
        if enabled:
            region.enable_selector(self.q_enable, offset)
        region.assign_advice(self.a, offset, a, annotation="a")
        region.assign_advice(self.poseidon, offset, a.map(poseidon), annotation="poseidon")


class PoseidonLookupCircuit(Circuit[PoseidonConfig]):
    """Proves that each input's Poseidon hash is in the 16-row table.

    Args:
        inputs: Values assigned on consecutive rows of one region
        enabled: Whether the lookup selector is enabled on those rows
    """

    def __init__(self, inputs: Sequence[Value] = (), enabled: bool = True):
        self.inputs: List[Value] = list(inputs)
        self.enabled = enabled

    @classmethod
    def from_ints(cls, values: Sequence[int], enabled: bool = True) -> "PoseidonLookupCircuit":
        return cls([Value.known(FF(v)) for v in values], enabled)

    def without_witnesses(self) -> "PoseidonLookupCircuit":
        return PoseidonLookupCircuit([Value.unknown() for _ in self.inputs], self.enabled)

    @classmethod
    def configure(cls, meta: ConstraintSystem) -> PoseidonConfig:
        return PoseidonConfig.configure(meta)

    def synthesize(self, config: PoseidonConfig, layouter: SimpleLayouter) -> None:
        config.table.load(layouter)

        def assign_inputs(region: Region) -> None:
            for offset, a in enumerate(self.inputs):
                config.assign(region, offset, a, self.enabled)

        layouter.assign_region("assign a", assign_inputs)
