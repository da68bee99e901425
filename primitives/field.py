"""Goldilocks prime field GF(p).

Uses galois library for all field arithmetic. FF is the default field type for
constraint systems; any galois prime field can be substituted.

Field scalars are 0-d galois arrays, so expression evaluation works for a single
row and for a whole domain alike thanks to galois broadcasting.
"""

from typing import Sequence, Type, Union

import galois
import numpy as np

# --- Field Construction ---

GOLDILOCKS_PRIME = 0xFFFFFFFF00000001

FF = galois.GF(GOLDILOCKS_PRIME)
"""Base field GF(p) - Goldilocks prime field."""

FieldType = Type[galois.FieldArray]
FieldLike = Union[int, galois.FieldArray]


# --- Coercion ---

def to_field(field: FieldType, value: FieldLike) -> galois.FieldArray:
    """Convert an int (possibly negative) or field element into `field`.

    Ints are reduced modulo the field order, so -1 maps to p - 1.
    """
    if isinstance(value, galois.FieldArray):
        if type(value) is not field:
            raise TypeError(f"Value belongs to {type(value).name}, expected {field.name}")
        return value
    if isinstance(value, (int, np.integer)):
        return field(int(value) % field.order)
    raise TypeError(f"Cannot convert {type(value).__name__} to a field element")


def field_full(field: FieldType, n: int, value: FieldLike) -> galois.FieldArray:
    """Create a length-n array filled with a single field value."""
    return field.Zeros(n) + to_field(field, value)


def as_ints(values: Union[galois.FieldArray, Sequence]) -> list:
    """Extract plain Python ints from a field array (or any iterable of elements)."""
    return [int(v) for v in np.atleast_1d(values)]
