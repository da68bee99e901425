"""Error taxonomy for circuit construction and synthesis.

Construction errors are raised while a circuit configures its constraint system.
Synthesis errors are raised while witness values are laid out. Both abort the
run. Constraint violations are never raised; the mock prover returns them as data.
"""


class PlonkishError(Exception):
    """Base class for all errors raised by the arithmetization core."""


class ConstructionError(PlonkishError, ValueError):
    """Malformed constraint system: bad gate shape, foreign column, bad lookup."""


class SynthesisError(PlonkishError):
    """Witness layout failed, e.g. a required witness value is missing."""


class AssignmentCollisionError(SynthesisError):
    """The same (column, absolute row) cell was assigned twice."""


class LayoutOverflowError(SynthesisError):
    """A region or table does not fit in the 2^k row domain."""


class TableError(SynthesisError):
    """Lookup table loading failed (uneven lengths, reloads, unknown values)."""


class InstanceError(PlonkishError, ValueError):
    """Public inputs do not match the circuit's instance columns."""
