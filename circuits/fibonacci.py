"""Fibonacci circuit: a single advice column related to itself by rotation.

Gates, over advice column `a` and instance column `pub`:
    fibonacci:      q_fib * (a[+2] - a[+1] - a[0])
    public inputs:  q_pub * (a[0] - pub[0])
    output:         q_out * (a[0] - pub[3 - ROWS])

The sequence occupies rows [0, ROWS) as the first region. Public inputs are
[f0, f1, f_{ROWS-1}] at instance rows 0, 1, 2; the output gate, enabled on the
last sequence row, reaches instance row 2 through a negative rotation.
"""

from dataclasses import dataclass
from typing import List

from primitives.field import FF
from protocol.circuit import Circuit
from protocol.columns import Column, Selector
from protocol.constraint_system import ConstraintSystem
from protocol.expressions import Rotation
from protocol.layouter import Region, SimpleLayouter
from protocol.value import Value

ROWS = 8


def fibonacci(f0: int, f1: int, rows: int = ROWS) -> List[int]:
    seq = [f0, f1]
    while len(seq) < rows:
        seq.append(seq[-1] + seq[-2])
    return seq


@dataclass(frozen=True)
class FibonacciConfig:
    a: Column
    pub: Column
    q_fib: Selector
    q_pub: Selector
    q_out: Selector


class FibonacciCircuit(Circuit[FibonacciConfig]):
    """Proves f_{ROWS-1} of the sequence starting at (f0, f1)."""

    def __init__(self, f0: Value = None, f1: Value = None):
        self.f0 = f0 if f0 is not None else Value.unknown()
        self.f1 = f1 if f1 is not None else Value.unknown()

    @classmethod
    def from_ints(cls, f0: int, f1: int) -> "FibonacciCircuit":
        return cls(Value.known(FF(f0)), Value.known(FF(f1)))

    def without_witnesses(self) -> "FibonacciCircuit":
        return FibonacciCircuit()

    @classmethod
    def configure(cls, meta: ConstraintSystem) -> FibonacciConfig:
        a = meta.advice_column()
        pub = meta.instance_column()
        q_fib = meta.selector()
        q_pub = meta.selector()
        q_out = meta.selector()

        meta.create_gate("fibonacci", lambda m: [(
            "a'' = a' + a",
            m.query_selector(q_fib) * (
                m.query_advice(a, 2) - m.query_advice(a, Rotation.next()) - m.query_advice(a, Rotation.cur())
            ),
        )])
        meta.create_gate("public inputs", lambda m: [(
            "a = pub",
            m.query_selector(q_pub) * (m.query_advice(a, Rotation.cur()) - m.query_instance(pub, Rotation.cur())),
        )])
        meta.create_gate("output", lambda m: [(
            "a = out",
            m.query_selector(q_out) * (m.query_advice(a, Rotation.cur()) - m.query_instance(pub, 3 - ROWS)),
        )])
        return FibonacciConfig(a, pub, q_fib, q_pub, q_out)

    def synthesize(self, config: FibonacciConfig, layouter: SimpleLayouter) -> None:
        values = [self.f0, self.f1]
        while len(values) < ROWS:
            values.append(values[-1].zip(values[-2]).map(lambda pair: pair[0] + pair[1]))

        def assign_sequence(region: Region) -> None:
            for offset, value in enumerate(values):
                region.assign_advice(config.a, offset, value, annotation=f"f{offset}")
                if offset < ROWS - 2:
                    region.enable_selector(config.q_fib, offset)
            region.enable_selector(config.q_pub, 0)
            region.enable_selector(config.q_pub, 1)
            region.enable_selector(config.q_out, ROWS - 1)

        layouter.assign_region("fibonacci", assign_sequence)
