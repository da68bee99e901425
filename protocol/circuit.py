"""Circuit contract: the boundary between user circuits and the core.

Every circuit implements two phases:

1. `configure(cs)` - witness independent. Allocates columns, registers gates
   and lookups, and returns a Config holding the column handles.
2. `synthesize(config, layouter)` - witness dependent. Assigns regions through
   the layouter.

`without_witnesses()` returns the same circuit with every witness field set to
`Value.unknown()`, for setup-only flows that lay out fixed data but no witness.
"""

from abc import ABC, abstractmethod
from typing import Generic, TypeVar

from protocol.constraint_system import ConstraintSystem
from protocol.layouter import SimpleLayouter

Config = TypeVar("Config")


class Circuit(ABC, Generic[Config]):
    """Two-phase circuit description."""

    @abstractmethod
    def without_witnesses(self) -> "Circuit[Config]":
        """Return a structurally identical circuit with witness values cleared."""
        pass

    @classmethod
    @abstractmethod
    def configure(cls, cs: ConstraintSystem) -> Config:
        """Allocate columns and register constraints; must not read witness data."""
        pass

    @abstractmethod
    def synthesize(self, config: Config, layouter: SimpleLayouter) -> None:
        """Assign the witness through `layouter`.

        Raises:
            SynthesisError: If witness data is missing and a full run was requested
        """
        pass
