"""Tests for the witness table grid."""

import numpy as np
import pytest

from primitives.field import FF
from protocol.columns import Column, ColumnKind
from protocol.errors import AssignmentCollisionError, LayoutOverflowError


@pytest.fixture
def table(cs, make_table):
    cs.advice_column()
    cs.fixed_column()
    return make_table(cs, 2)


ADVICE = Column(ColumnKind.ADVICE, 0)
FIXED = Column(ColumnKind.FIXED, 0)


def test_domain_size(table) -> None:
    assert table.domain_size() == 4
    assert table.has_column(ADVICE) and table.has_column(FIXED)
    assert not table.has_column(Column(ColumnKind.INSTANCE, 0))


def test_set_then_get(table) -> None:
    table.set(ADVICE, 1, 7)
    assert table.get(ADVICE, 1) == FF(7)
    assert table.is_assigned(ADVICE, 1)
    assert table.get(ADVICE, 0) is None


def test_negative_ints_reduce_into_field(table) -> None:
    table.set(FIXED, 0, -1)
    assert table.value(FIXED, 0) == FF(FF.order - 1)


def test_unassigned_cells_read_as_zero(table) -> None:
    assert table.value(ADVICE, 3) == FF(0)
    assert not table.is_claimed(ADVICE, 3)


def test_second_write_collides(table) -> None:
    table.set(ADVICE, 2, 1)
    with pytest.raises(AssignmentCollisionError):
        table.set(ADVICE, 2, 1)


def test_unknown_value_still_claims_cell(table) -> None:
    table.set(ADVICE, 0, None)
    assert table.is_claimed(ADVICE, 0)
    assert not table.is_assigned(ADVICE, 0)
    with pytest.raises(AssignmentCollisionError):
        table.set(ADVICE, 0, 5)


@pytest.mark.parametrize("row", [-1, 4, 100])
def test_out_of_range_row_overflows(table, row) -> None:
    with pytest.raises(LayoutOverflowError):
        table.set(ADVICE, row, 1)


def test_unknown_column_raises_key_error(table) -> None:
    with pytest.raises(KeyError):
        table.get(Column(ColumnKind.ADVICE, 3), 0)


def test_fill_unclaimed_leaves_claimed_rows(table) -> None:
    table.set(FIXED, 0, 9)
    table.set(FIXED, 1, 4)
    table.fill_unclaimed(FIXED, 9)
    assert [int(v) for v in table.column_values(FIXED)] == [9, 4, 9, 9]
    assert table.known_mask(FIXED).all()


def test_frozen_table_rejects_writes(table) -> None:
    table.freeze()
    assert table.frozen
    with pytest.raises(RuntimeError):
        table.set(ADVICE, 0, 1)
    with pytest.raises(RuntimeError):
        table.fill_unclaimed(FIXED, 0)


def test_negative_k_is_rejected(cs, make_table) -> None:
    with pytest.raises(ValueError):
        make_table(cs, -1)


def test_known_mask_tracks_assignments(table) -> None:
    table.set(ADVICE, 1, 3)
    table.set(ADVICE, 3, None)
    np.testing.assert_array_equal(table.known_mask(ADVICE), [False, True, False, False])
