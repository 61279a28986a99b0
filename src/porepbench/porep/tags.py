"""
Domain Tags for the PoRep construction

Tags separate the hash invocations of the construction from one another.
These tags are PINNED - changing them changes every commitment.
"""

from enum import IntEnum


class HashTag(IntEnum):
    """Domain separation tags for hashing."""

    # Pedersen-style hash
    GENERATOR = 0x10    # Generator derivation
    KDF = 0x11          # Key derivation for delay encoding
    NODE = 0x20         # Merkle internal node (height is added)

    # Feistel permutation
    FEISTEL = 0x30      # Round function


def tag_bytes(tag: HashTag) -> bytes:
    """Convert tag to canonical bytes (2 bytes, big-endian)."""
    return tag.to_bytes(2, 'big')
