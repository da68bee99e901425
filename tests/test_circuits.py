"""Tests for the example circuits, the circuit registry and setup-only synthesis."""

import pytest

from circuits import CIRCUIT_REGISTRY, EqOneCircuit, FibonacciCircuit, PoseidonLookupCircuit, get_circuit
from circuits.fibonacci import ROWS, fibonacci
from circuits.poseidon_lookup import TABLE_SIZE, poseidon
from primitives.field import FF
from protocol.columns import Column, ColumnKind
from protocol.config import WORKERS_ENV, MockProverConfig
from protocol.errors import LayoutOverflowError
from protocol.mock_prover import ConstraintNotSatisfied, MockProver
from protocol.setup import setup


class TestRegistry:
    def test_all_circuits_registered(self) -> None:
        assert set(CIRCUIT_REGISTRY) == {"EqOne", "PoseidonLookup", "Fibonacci"}

    def test_get_circuit(self) -> None:
        assert get_circuit("EqOne") is EqOneCircuit

    def test_unknown_name_lists_available(self) -> None:
        with pytest.raises(KeyError, match="Available"):
            get_circuit("Sha256")


class TestFibonacci:
    def test_sequence(self) -> None:
        assert fibonacci(1, 1) == [1, 1, 2, 3, 5, 8, 13, 21]
        assert len(fibonacci(0, 1)) == ROWS

    def test_satisfied(self) -> None:
        prover = MockProver.run(3, FibonacciCircuit.from_ints(1, 1), instance=[[1, 1, 21]])
        assert prover.verify().is_satisfied

    def test_satisfied_in_larger_domain(self) -> None:
        f = fibonacci(2, 3)
        prover = MockProver.run(5, FibonacciCircuit.from_ints(2, 3), instance=[[2, 3, f[-1]]])
        assert prover.verify().is_satisfied

    def test_wrong_output_fails_output_gate(self) -> None:
        result = MockProver.run(3, FibonacciCircuit.from_ints(1, 1), instance=[[1, 1, 22]]).verify()
        assert len(result.failures) == 1
        failure = result.failures[0]
        assert isinstance(failure, ConstraintNotSatisfied)
        assert (failure.gate, failure.identity, failure.row) == ("output", "a = out", ROWS - 1)

    def test_wrong_public_input_fails_at_that_row(self) -> None:
        result = MockProver.run(3, FibonacciCircuit.from_ints(1, 1), instance=[[1, 2, 21]]).verify()
        assert [(f.gate, f.row) for f in result.failures] == [("public inputs", 1)]

    def test_domain_too_small(self) -> None:
        with pytest.raises(LayoutOverflowError):
            MockProver.run(2, FibonacciCircuit.from_ints(1, 1), instance=[[1, 1, 21]])


class TestSetup:
    def test_setup_records_selectors_without_witness(self) -> None:
        result = setup(3, EqOneCircuit.with_value(FF, 1))
        a = Column(ColumnKind.ADVICE, 0)
        assert result.table.is_claimed(a, 0)
        assert not result.table.is_assigned(a, 0)
        fixed = result.fixed_columns()
        assert fixed[Column(ColumnKind.SELECTOR, 0)] == [1, 0, 0, 0, 0, 0, 0, 0]
        assert a not in fixed

    def test_setup_loads_tables(self) -> None:
        result = setup(5, PoseidonLookupCircuit.from_ints([7, 8]))
        fixed = result.fixed_columns()
        table_a = fixed[result.config.table.a]
        table_hash = fixed[result.config.table.poseidon]
        assert table_a[:TABLE_SIZE] == list(range(TABLE_SIZE))
        assert table_a[TABLE_SIZE:] == [0] * (32 - TABLE_SIZE)
        assert table_hash[3] == int(poseidon(FF(3)))
        assert [r.name for r in result.regions] == ["Poseidon table", "assign a"]

    def test_without_witnesses_clears_values(self) -> None:
        circuit = PoseidonLookupCircuit.from_ints([1, 2]).without_witnesses()
        assert len(circuit.inputs) == 2
        assert not any(v.is_known() for v in circuit.inputs)
        assert not FibonacciCircuit.from_ints(1, 1).without_witnesses().f0.is_known()


class TestMockProverConfig:
    def test_defaults(self) -> None:
        config = MockProverConfig()
        assert config.workers == 1
        assert config.max_reported_failures == 20

    def test_rejects_zero_workers(self) -> None:
        with pytest.raises(ValueError):
            MockProverConfig(workers=0)

    def test_from_env(self, monkeypatch) -> None:
        monkeypatch.setenv(WORKERS_ENV, "3")
        assert MockProverConfig.from_env().workers == 3

    def test_from_env_default(self, monkeypatch) -> None:
        monkeypatch.delenv(WORKERS_ENV, raising=False)
        assert MockProverConfig.from_env().workers == 1

    def test_from_env_rejects_garbage(self, monkeypatch) -> None:
        monkeypatch.setenv(WORKERS_ENV, "many")
        with pytest.raises(ValueError, match=WORKERS_ENV):
            MockProverConfig.from_env()
