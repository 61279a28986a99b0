"""
BLS12-381 Scalar Field Elements

Field: F_r where
    r = 0x73eda753299d7d483339d80809a1d80553bda402fffe5bfeffffffff00000001

Every node of a replica is one field element serialized as 32 bytes,
little-endian (the "fr32" representation). Arbitrary 32-byte digests are
made safe to interpret as field elements by clearing their top two bits.
"""

from __future__ import annotations


# BLS12-381 scalar field modulus (255 bits)
FR_MODULUS = 0x73eda753299d7d483339d80809a1d80553bda402fffe5bfeffffffff00000001

# Size of one serialized field element (one graph node)
FR_BYTES = 32

# 2^256 mod r, the Montgomery radix used by the reference field arithmetic
MONTGOMERY_R = (1 << 256) % FR_MODULUS
MONTGOMERY_R_INV = pow(MONTGOMERY_R, -1, FR_MODULUS)


class Fr:
    """
    Element of the BLS12-381 scalar field.

    Only the operations needed by delay encoding are provided.
    """

    __slots__ = ('value',)

    def __init__(self, value: int):
        self.value = value % FR_MODULUS

    def __add__(self, other: Fr) -> Fr:
        return Fr(self.value + other.value)

    def __sub__(self, other: Fr) -> Fr:
        return Fr(self.value - other.value)

    def __neg__(self) -> Fr:
        return Fr(-self.value)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Fr):
            return self.value == other.value
        if isinstance(other, int):
            return self.value == (other % FR_MODULUS)
        return False

    def __ne__(self, other: object) -> bool:
        return not self.__eq__(other)

    def __hash__(self) -> int:
        return hash(self.value)

    def __repr__(self) -> str:
        return f"Fr({self.value:#x})"

    def to_bytes(self) -> bytes:
        """Serialize to 32 bytes (little-endian)."""
        return self.value.to_bytes(FR_BYTES, 'little')

    @classmethod
    def from_bytes(cls, data: bytes) -> Fr:
        """
        Deserialize from exactly 32 little-endian bytes.

        Raises:
            ValueError: wrong length, or the value is not below the modulus
        """
        if len(data) != FR_BYTES:
            raise ValueError(f"expected {FR_BYTES} bytes, got {len(data)}")
        value = int.from_bytes(data, 'little')
        if value >= FR_MODULUS:
            raise ValueError("bytes do not encode a canonical field element")
        return cls(value)

    @classmethod
    def from_montgomery(cls, repr_: int) -> Fr:
        """Interpret a raw 256-bit representation as Montgomery form."""
        return cls(repr_ * MONTGOMERY_R_INV)

    @classmethod
    def zero(cls) -> Fr:
        return cls(0)


def fr_into_bytes(fr: Fr) -> bytes:
    """Canonical fixed-width byte representation of a field element."""
    return fr.to_bytes()


def bytes_into_fr(data: bytes) -> Fr:
    """Inverse of :func:`fr_into_bytes`."""
    return Fr.from_bytes(bytes(data))


def trim_bytes_to_fr_safe(digest: bytes) -> bytes:
    """
    Clear the two most significant bits of a 32-byte digest.

    The result is below 2^254 < r and therefore a canonical element.
    """
    if len(digest) != FR_BYTES:
        raise ValueError(f"expected {FR_BYTES} bytes, got {len(digest)}")
    trimmed = bytearray(digest)
    trimmed[31] &= 0b0011_1111
    return bytes(trimmed)


def data_at_node(data, node: int) -> bytes:
    """Slice the fr32 bytes of ``node`` out of a replica buffer."""
    start = node * FR_BYTES
    return bytes(data[start:start + FR_BYTES])
