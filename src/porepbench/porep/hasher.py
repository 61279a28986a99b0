"""
Hash Functions for the PoRep construction

Three interchangeable hashers, selected by name:
- pedersen: Pedersen-style multi-exponentiation hash (default)
- sha256:   SHA-256, output trimmed to a field element
- blake2s:  BLAKE2s-256, output trimmed to a field element

Every output ("domain element") is 32 bytes and a canonical fr32 value,
so it can be stored in a replica node or used as an encoding key.
"""

from abc import ABC, abstractmethod
from functools import lru_cache
from typing import Dict, Type
import hashlib

from ..errors import ConfigError
from .fr32 import FR_BYTES, FR_MODULUS, bytes_into_fr, fr_into_bytes, trim_bytes_to_fr_safe
from .tags import HashTag, tag_bytes


# Group for the Pedersen-style hash: quadratic residues modulo 2^255 - 19
PEDERSEN_PRIME = (1 << 255) - 19

# Message bytes absorbed per generator
PEDERSEN_CHUNK = 32


@lru_cache(maxsize=None)
def pedersen_generator(index: int) -> int:
    """
    Derive the ``index``-th generator.

    Squaring a hash output lands in the subgroup of quadratic residues.
    """
    seed = hashlib.sha256(tag_bytes(HashTag.GENERATOR) + index.to_bytes(4, 'big')).digest()
    g = pow(int.from_bytes(seed, 'big') % PEDERSEN_PRIME, 2, PEDERSEN_PRIME)
    if g in (0, 1):
        raise ValueError(f"degenerate Pedersen generator at index {index}")
    return g


class Hasher(ABC):
    """Base class for the construction's hash functions."""

    name: str = "hasher"

    @abstractmethod
    def hash(self, data: bytes) -> bytes:
        """Hash arbitrary bytes to a 32-byte domain element."""
        pass

    def node(self, left: bytes, right: bytes, height: int) -> bytes:
        """Hash two children into their Merkle parent."""
        return self.hash(left + right)

    def kdf(self, data: bytes) -> bytes:
        """Derive an encoding key from the replica id and parent data."""
        return self.hash(data)

    def sloth_encode(self, key: bytes, plaintext: bytes) -> bytes:
        """Encode one node: ciphertext = plaintext + key (mod r)."""
        return fr_into_bytes(bytes_into_fr(plaintext) + bytes_into_fr(key))

    def sloth_decode(self, key: bytes, ciphertext: bytes) -> bytes:
        """Invert :meth:`sloth_encode`."""
        return fr_into_bytes(bytes_into_fr(ciphertext) - bytes_into_fr(key))

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"


class PedersenHasher(Hasher):
    """
    Pedersen-style hash.

    H(m) = g_0^(p << 64 | len(m)) * prod_i g_{i+1}^(m_i)  (mod q)

    where m_i are the 32-byte little-endian chunks of m and p is a
    personalization. The group element is reduced into F_r.
    """

    name = "pedersen"

    def _hash(self, data: bytes, personalization: int) -> bytes:
        acc = pow(pedersen_generator(0), (personalization << 64) | len(data), PEDERSEN_PRIME)
        for i in range(0, len(data), PEDERSEN_CHUNK):
            chunk = int.from_bytes(data[i:i + PEDERSEN_CHUNK], 'little')
            g = pedersen_generator(i // PEDERSEN_CHUNK + 1)
            acc = acc * pow(g, chunk, PEDERSEN_PRIME) % PEDERSEN_PRIME
        return (acc % FR_MODULUS).to_bytes(FR_BYTES, 'little')

    def hash(self, data: bytes) -> bytes:
        return self._hash(data, 0)

    def node(self, left: bytes, right: bytes, height: int) -> bytes:
        return self._hash(left + right, HashTag.NODE + height)

    def kdf(self, data: bytes) -> bytes:
        return self._hash(data, HashTag.KDF)


class Sha256Hasher(Hasher):
    """SHA-256 with the top two bits cleared."""

    name = "sha256"

    def hash(self, data: bytes) -> bytes:
        return trim_bytes_to_fr_safe(hashlib.sha256(data).digest())


class Blake2sHasher(Hasher):
    """BLAKE2s-256 with the top two bits cleared."""

    name = "blake2s"

    def hash(self, data: bytes) -> bytes:
        return trim_bytes_to_fr_safe(hashlib.blake2s(data).digest())


HASHERS: Dict[str, Type[Hasher]] = {
    PedersenHasher.name: PedersenHasher,
    Sha256Hasher.name: Sha256Hasher,
    Blake2sHasher.name: Blake2sHasher,
}

DEFAULT_HASHER = PedersenHasher.name


def get_hasher(name: str) -> Hasher:
    """
    Look up a hasher by name.

    Raises:
        ConfigError: unknown hasher name
    """
    try:
        return HASHERS[name]()
    except KeyError:
        raise ConfigError(
            f"invalid hasher: {name} (available: {', '.join(sorted(HASHERS))})"
        ) from None
