"""
Keyed Feistel permutation over [0, n).

A balanced Feistel network permutes a power-of-four domain; cycle walking
restricts it to the first n values. Used to pick expansion parents.
"""

from typing import Sequence
import hashlib

from .tags import HashTag, tag_bytes

# Fixed round keys
FEISTEL_KEYS = (1, 2, 3, 4)


def _half_bits(num_elements: int) -> int:
    """Bits per Feistel half so that 2^(2*half) >= num_elements."""
    bits = max(1, (num_elements - 1).bit_length())
    return (bits + 1) // 2


def _round(value: int, key: int, mask: int) -> int:
    h = hashlib.blake2b(
        tag_bytes(HashTag.FEISTEL) + value.to_bytes(8, 'little') + key.to_bytes(8, 'little'),
        digest_size=8,
    )
    return int.from_bytes(h.digest(), 'little') & mask


def encode(index: int, keys: Sequence[int], half_bits: int) -> int:
    """One pass of the Feistel network over the full power-of-four domain."""
    mask = (1 << half_bits) - 1
    left = index >> half_bits
    right = index & mask
    for key in keys:
        left, right = right, left ^ _round(right, key, mask)
    return (left << half_bits) | right


def permute(num_elements: int, index: int, keys: Sequence[int] = FEISTEL_KEYS) -> int:
    """
    Map ``index`` to its image under the permutation of [0, num_elements).

    Raises:
        ValueError: index out of range
    """
    if not 0 <= index < num_elements:
        raise ValueError(f"index {index} out of range [0, {num_elements})")
    half_bits = _half_bits(num_elements)
    u = encode(index, keys, half_bits)
    while u >= num_elements:
        u = encode(u, keys, half_bits)
    return u
