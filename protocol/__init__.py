"""Protocol - Constraint description, witness layout and constraint checking."""

from protocol.circuit import Circuit
from protocol.columns import Column, ColumnKind, ColumnRegistry, Selector, TableColumn
from protocol.config import MockProverConfig
from protocol.constraint_system import ConstraintSystem, Gate, Lookup, Queries
from protocol.errors import (
    AssignmentCollisionError,
    ConstructionError,
    InstanceError,
    LayoutOverflowError,
    PlonkishError,
    SynthesisError,
    TableError,
)
from protocol.evaluation import (
    DomainContext,
    EvaluationContext,
    RowContext,
    evaluate,
    evaluate_at,
    evaluate_domain,
)
from protocol.expressions import (
    ColumnQuery,
    Constant,
    Expression,
    Negated,
    Product,
    Rotation,
    Scaled,
    SelectorExpr,
    Sum,
)
from protocol.layouter import AssignedCell, Cell, PlacedRegion, Region, SimpleLayouter, TableRegion
from protocol.mock_prover import (
    CellNotAssigned,
    ConstraintNotSatisfied,
    LookupNotSatisfied,
    MockProver,
    VerifyFailure,
    VerifyResult,
)
from protocol.setup import CircuitSetup, setup
from protocol.value import Value
from protocol.witness_table import WitnessTable

__all__ = [
    # Columns
    "Column",
    "ColumnKind",
    "ColumnRegistry",
    "Selector",
    "TableColumn",
    # Expressions
    "Expression",
    "Constant",
    "ColumnQuery",
    "SelectorExpr",
    "Negated",
    "Sum",
    "Product",
    "Scaled",
    "Rotation",
    "EvaluationContext",
    "RowContext",
    "DomainContext",
    "evaluate",
    "evaluate_at",
    "evaluate_domain",
    # Constraint system
    "ConstraintSystem",
    "Gate",
    "Lookup",
    "Queries",
    # Layout
    "Value",
    "WitnessTable",
    "SimpleLayouter",
    "Region",
    "TableRegion",
    "Cell",
    "AssignedCell",
    "PlacedRegion",
    "Circuit",
    "CircuitSetup",
    "setup",
    # Checking
    "MockProver",
    "MockProverConfig",
    "VerifyResult",
    "VerifyFailure",
    "CellNotAssigned",
    "ConstraintNotSatisfied",
    "LookupNotSatisfied",
    # Errors
    "PlonkishError",
    "ConstructionError",
    "SynthesisError",
    "AssignmentCollisionError",
    "LayoutOverflowError",
    "TableError",
    "InstanceError",
]
