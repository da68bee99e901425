"""
Pytest configuration and shared fixtures for the test suite.
"""

import sys
from pathlib import Path

import pytest

# Add the repository root to the path so absolute imports work
# (tests/ is inside the root, so parent is the root)
root_dir = Path(__file__).parent.parent
if str(root_dir) not in sys.path:
    sys.path.insert(0, str(root_dir))

from primitives.field import FF  # noqa: E402
from protocol.constraint_system import ConstraintSystem  # noqa: E402
from protocol.witness_table import WitnessTable  # noqa: E402


@pytest.fixture
def cs() -> ConstraintSystem:
    return ConstraintSystem(FF)


@pytest.fixture
def make_table():
    """Factory: empty witness table sized for a constraint system."""
    def _make(meta: ConstraintSystem, k: int) -> WitnessTable:
        return WitnessTable(k, meta.registry.counts(), meta.field)
    return _make


@pytest.fixture
def counter_table(make_table):
    """One advice column holding a[r] = r over an 8-row domain."""
    meta = ConstraintSystem(FF)
    a = meta.advice_column()
    table = make_table(meta, 3)
    for row in range(table.domain_size()):
        table.set(a, row, row)
    return meta, a, table
