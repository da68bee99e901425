"""EqOne circuit: a single advice cell constrained to equal one.

Gate "a is one":
    q_enable * (a - 1) = 0

One region assigns `a` at offset 0 and enables q_enable there; every other row
has q_enable = 0 and satisfies the gate trivially.
"""

from dataclasses import dataclass

from primitives.field import FieldType, to_field
from protocol.circuit import Circuit
from protocol.columns import Column, Selector
from protocol.constraint_system import ConstraintSystem
from protocol.expressions import Rotation
from protocol.layouter import Region, SimpleLayouter
from protocol.value import Value


@dataclass(frozen=True)
class EqOneConfig:
    q_enable: Selector
    a: Column

    @classmethod
    def configure(cls, meta: ConstraintSystem, q_enable: Selector, a: Column) -> "EqOneConfig":
        def gate(m):
            q = m.query_selector(q_enable)
            a_cur = m.query_advice(a, Rotation.cur())
            return [("check a", q * (a_cur - m.constant(1)))]

        meta.create_gate("a is one", gate)
        return cls(q_enable, a)

    def assign(self, region: Region, offset: int, a: Value) -> None:
        region.enable_selector(self.q_enable, offset)
        region.assign_advice(self.a, offset, a, annotation="a")


class EqOneCircuit(Circuit[EqOneConfig]):
    """Proves knowledge of `a` with a == 1."""

    def __init__(self, a: Value = None):
        self.a = a if a is not None else Value.unknown()

    @classmethod
    def with_value(cls, field: FieldType, a: int) -> "EqOneCircuit":
        return cls(Value.known(to_field(field, a)))

    def without_witnesses(self) -> "EqOneCircuit":
        return EqOneCircuit()

    @classmethod
    def configure(cls, meta: ConstraintSystem) -> EqOneConfig:
        a = meta.advice_column()
        q_enable = meta.selector()
        return EqOneConfig.configure(meta, q_enable, a)

    def synthesize(self, config: EqOneConfig, layouter: SimpleLayouter) -> None:
        layouter.assign_region("assign a", lambda region: config.assign(region, 0, self.a))
