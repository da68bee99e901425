"""Example circuits.

Each module defines a Config (column handles plus configure/assign helpers) and
a Circuit implementing the two-phase configure/synthesize contract. The
CIRCUIT_REGISTRY maps short names to circuit classes.
"""

from protocol.circuit import Circuit

from .eq_one import EqOneCircuit, EqOneConfig
from .fibonacci import FibonacciCircuit, FibonacciConfig
from .poseidon_lookup import PoseidonConfig, PoseidonLookupCircuit, PoseidonTableConfig

# Registry mapping circuit names to circuit classes
CIRCUIT_REGISTRY: dict[str, type[Circuit]] = {
    "EqOne": EqOneCircuit,
    "PoseidonLookup": PoseidonLookupCircuit,
    "Fibonacci": FibonacciCircuit,
}


def get_circuit(name: str) -> type[Circuit]:
    """Get the circuit class registered under `name`.

    Raises:
        KeyError: If no circuit is registered under that name
    """
    if name in CIRCUIT_REGISTRY:
        return CIRCUIT_REGISTRY[name]
    raise KeyError(
        f"No circuit named '{name}'. "
        f"Available: {list(CIRCUIT_REGISTRY.keys())}"
    )


__all__ = [
    "EqOneCircuit",
    "EqOneConfig",
    "FibonacciCircuit",
    "FibonacciConfig",
    "PoseidonConfig",
    "PoseidonLookupCircuit",
    "PoseidonTableConfig",
    "CIRCUIT_REGISTRY",
    "get_circuit",
]
