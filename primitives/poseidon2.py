"""
Poseidon2-style hash for the Goldilocks field.

This module provides the hash used to populate lookup tables. It follows the
Poseidon2 permutation structure (x^7 S-box, m4 external layer, diagonal internal
layer) with width 4.

The round constants and internal diagonal are derived from SHA-256 of a fixed
domain tag rather than taken from a published parameter set, so outputs are
not interoperable with other Poseidon2 instances. Lookup circuits only need a
deterministic map Field -> Field; they treat it as a black box.
"""

import hashlib
from typing import List, Sequence

from .field import FF, GOLDILOCKS_PRIME, FieldLike

WIDTH = 4
RATE = 3
ROUNDS_F = 8
ROUNDS_P = 22

_DOMAIN_TAG = b"plonkish-poseidon2-goldilocks-w4"


def _derive(label: str, count: int) -> List[int]:
    """Derive `count` field elements from SHA-256(tag || label || i)."""
    out = []
    for i in range(count):
        digest = hashlib.sha256(_DOMAIN_TAG + label.encode() + i.to_bytes(4, "little")).digest()
        out.append(int.from_bytes(digest[:8], "little") % GOLDILOCKS_PRIME)
    return out


POSEIDON2_RC = _derive("rc", ROUNDS_F * WIDTH + ROUNDS_P)
POSEIDON2_DIAG = [d | 1 for d in _derive("diag", WIDTH)]


def _pow7(x: int) -> int:
    """Compute x^7 as x^3 * x^4."""
    x2 = (x * x) % GOLDILOCKS_PRIME
    x3 = (x * x2) % GOLDILOCKS_PRIME
    x4 = (x2 * x2) % GOLDILOCKS_PRIME
    return (x3 * x4) % GOLDILOCKS_PRIME


def _matmul_m4(x: List[int]) -> List[int]:
    t0 = (x[0] + x[1]) % GOLDILOCKS_PRIME
    t1 = (x[2] + x[3]) % GOLDILOCKS_PRIME
    t2 = (x[1] + x[1] + t1) % GOLDILOCKS_PRIME
    t3 = (x[3] + x[3] + t0) % GOLDILOCKS_PRIME
    t1_2 = (t1 + t1) % GOLDILOCKS_PRIME
    t0_2 = (t0 + t0) % GOLDILOCKS_PRIME
    t4 = (t1_2 + t1_2 + t3) % GOLDILOCKS_PRIME
    t5 = (t0_2 + t0_2 + t2) % GOLDILOCKS_PRIME
    t6 = (t3 + t5) % GOLDILOCKS_PRIME
    t7 = (t2 + t4) % GOLDILOCKS_PRIME

    return [t6, t5, t7, t4]


def _pow7add(state: List[int], constants: List[int]) -> List[int]:
    return [_pow7((s + c) % GOLDILOCKS_PRIME) for s, c in zip(state, constants)]


def poseidon2_permutation(input_data: Sequence[int]) -> List[int]:
    """
    Apply the width-4 permutation.

    Args:
        input_data: WIDTH field elements as integers

    Returns:
        WIDTH field elements after the permutation
    """
    if len(input_data) != WIDTH:
        raise ValueError(f"input_data must have {WIDTH} elements, got {len(input_data)}")

    C = POSEIDON2_RC
    half_full_rounds = ROUNDS_F // 2
    state = [int(x) % GOLDILOCKS_PRIME for x in input_data]

    state = _matmul_m4(state)

    for r in range(half_full_rounds):
        state = _pow7add(state, C[r * WIDTH:(r + 1) * WIDTH])
        state = _matmul_m4(state)

    for r in range(ROUNDS_P):
        # Partial round: constant and S-box on the first element only
        state[0] = _pow7((state[0] + C[half_full_rounds * WIDTH + r]) % GOLDILOCKS_PRIME)
        sum_val = sum(state) % GOLDILOCKS_PRIME
        state = [(s * d + sum_val) % GOLDILOCKS_PRIME for s, d in zip(state, POSEIDON2_DIAG)]

    for r in range(half_full_rounds):
        rc_offset = half_full_rounds * WIDTH + ROUNDS_P + r * WIDTH
        state = _pow7add(state, C[rc_offset:rc_offset + WIDTH])
        state = _matmul_m4(state)

    return state


def hash_to_field(inputs: Sequence[FieldLike]) -> FF:
    """
    Hash a sequence of Goldilocks elements to a single element.

    Sponge with rate 3 and capacity 1; the capacity lane is seeded with the
    input length so inputs of different lengths never collide trivially.

    Args:
        inputs: Field elements or ints (ints are reduced mod p)

    Returns:
        FF element
    """
    values = [int(v) % GOLDILOCKS_PRIME for v in inputs]
    state = [0] * RATE + [len(values)]
    chunks = [values[i:i + RATE] for i in range(0, len(values), RATE)] or [[]]
    for chunk in chunks:
        for i, v in enumerate(chunk):
            state[i] = (state[i] + v) % GOLDILOCKS_PRIME
        state = poseidon2_permutation(state)
    return FF(state[0])
