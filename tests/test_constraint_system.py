"""Tests for column allocation, gate registration and lookup registration."""

import pytest

from primitives.field import FF
from protocol.columns import Column, ColumnKind
from protocol.constraint_system import ConstraintSystem
from protocol.errors import ConstructionError
from protocol.expressions import Rotation


class TestColumnAllocation:
    def test_indices_increase_per_kind(self, cs) -> None:
        a0 = cs.advice_column()
        f0 = cs.fixed_column()
        a1 = cs.advice_column()
        assert (a0.index, a1.index, f0.index) == (0, 1, 0)
        assert a0.kind is ColumnKind.ADVICE and f0.kind is ColumnKind.FIXED

    def test_selector_tags(self, cs) -> None:
        simple = cs.selector()
        complex_ = cs.complex_selector()
        assert cs.registry.is_simple(simple)
        assert not cs.registry.is_simple(complex_)
        assert simple.index != complex_.index

    def test_counts(self, cs) -> None:
        cs.advice_column()
        cs.instance_column()
        cs.lookup_table_column()
        cs.lookup_table_column()
        counts = cs.registry.counts()
        assert counts[ColumnKind.ADVICE] == 1
        assert counts[ColumnKind.INSTANCE] == 1
        assert counts[ColumnKind.LOOKUP_TABLE] == 2
        assert counts[ColumnKind.SELECTOR] == 0


class TestCreateGate:
    def test_registers_named_identities(self, cs) -> None:
        a = cs.advice_column()
        q = cs.selector()
        gate = cs.create_gate("a is one", lambda m: [
            ("check a", m.query_selector(q) * (m.query_advice(a, Rotation.cur()) - 1)),
        ])
        assert cs.gates == [gate]
        assert gate.identities[0][0] == "check a"
        assert gate.queried_selectors() == {q}
        assert gate.queried_cells() == {(a, 0)}

    def test_bare_expressions_get_empty_names(self, cs) -> None:
        a = cs.advice_column()
        gate = cs.create_gate("free", lambda m: [m.query_advice(a) * m.query_advice(a, 1)])
        assert gate.identities[0][0] == ""

    def test_empty_gate_is_rejected(self, cs) -> None:
        with pytest.raises(ConstructionError):
            cs.create_gate("empty", lambda m: [])

    def test_unallocated_column_is_rejected(self, cs) -> None:
        cs.advice_column()
        foreign = Column(ColumnKind.ADVICE, 5)
        with pytest.raises(ConstructionError, match="never allocated"):
            cs.create_gate("bad", lambda m: [m.query_advice(foreign)])

    def test_wrong_query_kind_is_rejected(self, cs) -> None:
        f = cs.fixed_column()
        with pytest.raises(ConstructionError):
            cs.create_gate("bad", lambda m: [m.query_advice(f)])

    def test_simple_selector_inside_identity_is_rejected(self, cs) -> None:
        a = cs.advice_column()
        q = cs.selector()
        with pytest.raises(ConstructionError, match="simple selector"):
            cs.create_gate("bad", lambda m: [m.query_selector(q) * m.query_advice(a) - 1])

    def test_complex_selector_may_appear_anywhere(self, cs) -> None:
        a = cs.advice_column()
        q = cs.complex_selector()
        cs.create_gate("ok", lambda m: [m.query_selector(q) * m.query_advice(a) - m.query_selector(q)])
        assert len(cs.gates) == 1


class TestLookup:
    def test_registers_inputs(self, cs) -> None:
        a = cs.advice_column()
        q = cs.complex_selector()
        t = cs.lookup_table_column()
        lookup = cs.lookup("range", lambda m: [(m.query_selector(q) * m.query_advice(a), t)])
        assert lookup.table_columns == [t]
        assert cs.lookups == [lookup]

    def test_simple_selector_is_rejected(self, cs) -> None:
        a = cs.advice_column()
        q = cs.selector()
        t = cs.lookup_table_column()
        with pytest.raises(ConstructionError, match="simple selectors"):
            cs.lookup("bad", lambda m: [(m.query_selector(q) * m.query_advice(a), t)])

    def test_target_must_be_table_column(self, cs) -> None:
        a = cs.advice_column()
        f = cs.fixed_column()
        with pytest.raises(ConstructionError, match="lookup table column"):
            cs.lookup("bad", lambda m: [(m.query_advice(a), f)])

    def test_undeclared_table_is_rejected(self, cs) -> None:
        a = cs.advice_column()
        with pytest.raises(ConstructionError):
            cs.lookup("bad", lambda m: [(m.query_advice(a), Column(ColumnKind.LOOKUP_TABLE, 0))])

    def test_empty_lookup_is_rejected(self, cs) -> None:
        with pytest.raises(ConstructionError):
            cs.lookup("empty", lambda m: [])


def test_registration_order_is_shared(cs) -> None:
    a = cs.advice_column()
    t = cs.lookup_table_column()
    g0 = cs.create_gate("g0", lambda m: [m.query_advice(a)])
    lk = cs.lookup("l", lambda m: [(m.query_advice(a), t)])
    g1 = cs.create_gate("g1", lambda m: [m.query_advice(a)])
    assert (g0.order, lk.order, g1.order) == (0, 1, 2)


def test_degree_is_max_over_constraints(cs) -> None:
    a = cs.advice_column()
    q = cs.selector()
    t = cs.lookup_table_column()
    assert cs.degree() == 0
    cs.create_gate("g", lambda m: [m.query_selector(q) * (m.query_advice(a) * m.query_advice(a) - 1)])
    cs.lookup("l", lambda m: [(m.query_advice(a), t)])
    assert cs.degree() == 3


def test_queries_constant_is_in_field() -> None:
    meta = ConstraintSystem(FF)
    a = meta.advice_column()
    gate = meta.create_gate("c", lambda m: [m.query_advice(a) - m.constant(-1)])
    const = gate.identities[0][1].right.inner
    assert const.value == FF(-1 % FF.order)
