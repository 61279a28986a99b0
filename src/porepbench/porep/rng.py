"""
Seedable XorShift128 generator.

Benchmarks need byte-identical inputs on every run, so the generator is
explicitly constructed from a fixed seed and handed to whoever consumes
it. There is no module-level instance.
"""

from typing import Sequence

from .fr32 import Fr, FR_MODULUS

MASK32 = 0xFFFFFFFF

# Top bits shaved off a random representation before the range check
# (256-bit repr, 255-bit modulus).
REPR_SHAVE_BITS = 1


class XorShiftRng:
    """
    Marsaglia's xorshift128 over four 32-bit words.

    Args:
        seed: Four 32-bit words, not all zero
    """

    __slots__ = ('x', 'y', 'z', 'w')

    def __init__(self, seed: Sequence[int]):
        if len(seed) != 4:
            raise ValueError("XorShiftRng needs exactly four 32-bit seed words")
        if not any(seed):
            raise ValueError("XorShiftRng seed must not be all zero")
        self.x, self.y, self.z, self.w = (s & MASK32 for s in seed)

    def next_u32(self) -> int:
        x = self.x
        t = (x ^ (x << 11)) & MASK32
        self.x, self.y, self.z = self.y, self.z, self.w
        w = self.w
        self.w = w ^ (w >> 19) ^ (t ^ (t >> 8))
        return self.w

    def next_u64(self) -> int:
        high = self.next_u32()
        low = self.next_u32()
        return (high << 32) | low

    def gen_fr(self) -> Fr:
        """
        Sample a uniformly random field element.

        Four 64-bit limbs (least significant first) are drawn, the top bit
        is shaved, and out-of-range representations are rejected. Accepted
        representations are in Montgomery form.
        """
        while True:
            limbs = [self.next_u64() for _ in range(4)]
            limbs[3] &= 0xFFFFFFFFFFFFFFFF >> REPR_SHAVE_BITS
            repr_ = sum(limb << (64 * i) for i, limb in enumerate(limbs))
            if repr_ < FR_MODULUS:
                return Fr.from_montgomery(repr_)
