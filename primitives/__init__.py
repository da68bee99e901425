"""Primitives - Field and hash building blocks consumed as black boxes."""

from primitives.field import (
    FF,
    GOLDILOCKS_PRIME,
    as_ints,
    field_full,
    to_field,
)
from primitives.poseidon2 import (
    hash_to_field,
    poseidon2_permutation,
)

__all__ = [
    # Field
    "FF",
    "GOLDILOCKS_PRIME",
    "to_field",
    "field_full",
    "as_ints",
    # Hash
    "hash_to_field",
    "poseidon2_permutation",
]
