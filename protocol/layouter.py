"""Region layouter: places logical regions onto the absolute row space.

Circuits assign cells at offsets relative to the start of a region. The
SimpleLayouter places regions one after another with a single monotonic row
cursor, so regions never overlap and never share rows:

    region 'load table'   rows [0, 16)
    region 'assign a'     rows [16, 17)

Every relative offset is translated to `region_start + offset` before the cell
is written into the WitnessTable, which enforces the assign-once invariant.

Lookup tables are loaded through `assign_table`, a dedicated region whose
columns are padded with their first row once loading completes, so every row
of a table column holds a tuple that belongs to the table.
"""

import logging
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, TypeVar, Union

import galois

from primitives.field import FieldLike, to_field
from protocol.columns import Column, ColumnKind, Selector, TableColumn
from protocol.constraint_system import ConstraintSystem
from protocol.errors import (
    AssignmentCollisionError,
    ConstructionError,
    LayoutOverflowError,
    SynthesisError,
    TableError,
)
from protocol.value import Value
from protocol.witness_table import WitnessTable

logger = logging.getLogger(__name__)

T = TypeVar("T")
ValueLike = Union[Value, FieldLike]


@dataclass(frozen=True)
class Cell:
    """Location of an assigned cell, both region-relative and absolute."""
    region_index: int
    region_name: str
    column: Column
    offset: int
    row: int


@dataclass(frozen=True)
class AssignedCell:
    value: Value
    cell: Cell


@dataclass(frozen=True)
class PlacedRegion:
    """A region after placement: rows [start, start + height)."""
    index: int
    name: str
    start: int
    height: int

    @property
    def end(self) -> int:
        return self.start + self.height


class _RegionBase:
    def __init__(self, layouter: "SimpleLayouter", index: int, name: str, start: int):
        self._layouter = layouter
        self.index = index
        self.name = name
        self.start = start
        self.height = 0

    def _locate(self, column: Column, offset: int) -> Cell:
        if offset < 0:
            raise ValueError(f"region '{self.name}': offset must be non-negative, got {offset}")
        return Cell(self.index, self.name, column, offset, self.start + offset)

    def _write(self, cell: Cell, value: Optional[galois.FieldArray]) -> None:
        try:
            self._layouter.table.set(cell.column, cell.row, value)
        except (AssignmentCollisionError, LayoutOverflowError) as e:
            raise type(e)(f"region '{self.name}', {cell.column} at offset {cell.offset}: {e}") from e
        self.height = max(self.height, cell.offset + 1)


class Region(_RegionBase):
    """Assignment API for one region; offsets start at 0."""

    def assign_advice(self, column: Column, offset: int, value: ValueLike, annotation: str = "") -> AssignedCell:
        return self._assign(ColumnKind.ADVICE, column, offset, value, annotation)

    def assign_fixed(self, column: Column, offset: int, value: ValueLike, annotation: str = "") -> AssignedCell:
        return self._assign(ColumnKind.FIXED, column, offset, value, annotation)

    def enable_selector(self, selector: Selector, offset: int) -> Cell:
        """Set `selector` to 1 at `offset`."""
        self._layouter.check_column(ColumnKind.SELECTOR, selector, self.name)
        cell = self._locate(selector, offset)
        self._write(cell, self._layouter.cs.field(1))
        return cell

    def _assign(self, kind: ColumnKind, column: Column, offset: int, value: ValueLike,
                annotation: str) -> AssignedCell:
        self._layouter.check_column(kind, column, self.name)
        cell = self._locate(column, offset)
        value = value if isinstance(value, Value) else Value.known(value)
        if value.is_known():
            element = to_field(self._layouter.cs.field, value.assign())
            self._write(cell, element)
            return AssignedCell(Value.known(element), cell)
        if self._layouter.require_witness:
            label = f" ('{annotation}')" if annotation else ""
            raise SynthesisError(
                f"region '{self.name}': {column}{label} at offset {offset} has no witness value"
            )
        self._write(cell, None)
        return AssignedCell(Value.unknown(), cell)


class TableRegion(_RegionBase):
    """Loading API for lookup table columns."""

    def __init__(self, layouter: "SimpleLayouter", index: int, name: str, start: int):
        super().__init__(layouter, index, name, start)
        self.loaded: Dict[TableColumn, Dict[int, galois.FieldArray]] = {}

    def assign_cell(self, column: TableColumn, offset: int, value: ValueLike, annotation: str = "") -> Cell:
        self._layouter.check_column(ColumnKind.LOOKUP_TABLE, column, self.name)
        if column in self._layouter.loaded_tables:
            raise TableError(f"table '{self.name}': {column} was already loaded by table "
                             f"'{self._layouter.loaded_tables[column]}'")
        value = value if isinstance(value, Value) else Value.known(value)
        if not value.is_known():
            label = f" ('{annotation}')" if annotation else ""
            raise TableError(f"table '{self.name}': {column}{label} at offset {offset} has an unknown value")
        cell = self._locate(column, offset)
        element = to_field(self._layouter.cs.field, value.assign())
        self._write(cell, element)
        self.loaded.setdefault(column, {})[offset] = element
        return cell

    def finish(self) -> None:
        """Validate column lengths and pad every loaded column with its first row."""
        lengths = {}
        for column, cells in self.loaded.items():
            if sorted(cells) != list(range(len(cells))):
                raise TableError(f"table '{self.name}': {column} has gaps in its assigned offsets")
            lengths[column] = len(cells)
        if len(set(lengths.values())) > 1:
            detail = ", ".join(f"{col}={n}" for col, n in lengths.items())
            raise TableError(f"table '{self.name}': columns have uneven lengths ({detail})")
        for column, cells in self.loaded.items():
            self._layouter.table.fill_unclaimed(column, cells[0])
            self._layouter.loaded_tables[column] = self.name


class SimpleLayouter:
    """Sequential floor planner backed by a WitnessTable.

    Args:
        cs: Constraint system the circuit was configured against
        table: Witness table receiving the assignments
        require_witness: Raise SynthesisError on unknown values (full synthesis);
            when False, unknown values are recorded as unassigned cells
    """

    def __init__(self, cs: ConstraintSystem, table: WitnessTable, require_witness: bool = True):
        self.cs = cs
        self.table = table
        self.require_witness = require_witness
        self.regions: List[PlacedRegion] = []
        self.loaded_tables: Dict[TableColumn, str] = {}
        self._cursor = 0
        self._active: Optional[str] = None

    @property
    def rows_used(self) -> int:
        return self._cursor

    def assign_region(self, name: str, assignment: Callable[[Region], T]) -> T:
        """Run `assignment` against a new region placed at the row cursor."""
        return self._place(Region(self, len(self.regions), name, self._cursor), assignment)

    def assign_table(self, name: str, assignment: Callable[[TableRegion], T]) -> T:
        """Load lookup table columns in a dedicated region placed at the row cursor."""
        region = TableRegion(self, len(self.regions), name, self._cursor)
        result = self._place(region, assignment)
        region.finish()
        return result

    def check_column(self, kind: ColumnKind, column: Column, region_name: str) -> None:
        if column.kind is not kind:
            raise ConstructionError(f"region '{region_name}': {column} is not a {kind.value} column")
        if not self.cs.registry.is_allocated(column):
            raise ConstructionError(f"region '{region_name}': {column} was never allocated in this system")

    def _place(self, region: _RegionBase, assignment: Callable) -> T:
        if self._active is not None:
            raise RuntimeError(
                f"cannot open region '{region.name}' while region '{self._active}' is being assigned"
            )
        self._active = region.name
        try:
            result = assignment(region)
        finally:
            self._active = None
        placed = PlacedRegion(region.index, region.name, region.start, region.height)
        self.regions.append(placed)
        self._cursor = placed.end
        logger.debug("Placed region '%s' at rows [%d, %d)", placed.name, placed.start, placed.end)
        return result
