"""
Deterministic replica data.

Buffers are written to an anonymous temporary file and memory-mapped
read/write, so replication mutates them in place without the whole
buffer having to stay resident. The temporary file disappears when the
mapping is closed.
"""

from typing import Optional
import logging
import mmap
import tempfile

from ..errors import StorageError
from ..porep.fr32 import FR_BYTES, fr_into_bytes
from ..porep.rng import XorShiftRng

logger = logging.getLogger(__name__)

# Fixed seed of every benchmark input stream
FIXED_SEED = (0x3dbe6259, 0x8d313d76, 0x3237db17, 0xe5bc0654)


def seeded_rng() -> XorShiftRng:
    """A new generator positioned at the start of the fixed stream."""
    return XorShiftRng(FIXED_SEED)


def generate_replica_id(rng: XorShiftRng) -> bytes:
    """Draw the next field element of ``rng`` as a replica id."""
    return fr_into_bytes(rng.gen_fr())


def file_backed_mmap_from_random_bytes(n: int, rng: Optional[XorShiftRng] = None) -> mmap.mmap:
    """
    Map ``n`` pseudo-random field elements.

    Args:
        n: Number of 32-byte elements
        rng: Generator to draw from (default: a fresh seeded_rng())

    Raises:
        ValueError: n is not positive
        StorageError: the backing file could not be written or mapped
    """
    if n <= 0:
        raise ValueError(f"element count must be positive, got {n}")
    if rng is None:
        rng = seeded_rng()

    logger.debug("writing %d elements to backing file", n)
    try:
        with tempfile.TemporaryFile() as tmpfile:
            for _ in range(n):
                tmpfile.write(fr_into_bytes(rng.gen_fr()))
            tmpfile.flush()
            # The mapping keeps its own handle on the file.
            return mmap.mmap(tmpfile.fileno(), n * FR_BYTES)
    except OSError as e:
        raise StorageError(f"failed to allocate replica buffer: {e}") from e


def file_backed_mmap_from(data: bytes) -> mmap.mmap:
    """Map a copy of ``data``."""
    if not data:
        raise ValueError("cannot map an empty buffer")
    try:
        with tempfile.TemporaryFile() as tmpfile:
            tmpfile.write(data)
            tmpfile.flush()
            return mmap.mmap(tmpfile.fileno(), len(data))
    except OSError as e:
        raise StorageError(f"failed to allocate replica buffer: {e}") from e
