"""
Property Tests for the construction primitives

1. Field: fr32 serialization is canonical and strict
2. RNG: the seeded stream is reproducible
3. Hashers: outputs are valid field elements
4. Graphs: parents are deterministic and point backwards
"""

import pytest

from porepbench.errors import ConfigError
from porepbench.porep.fr32 import (
    Fr,
    FR_BYTES,
    FR_MODULUS,
    bytes_into_fr,
    fr_into_bytes,
    trim_bytes_to_fr_safe,
)
from porepbench.porep.rng import XorShiftRng
from porepbench.porep.hasher import (
    HASHERS,
    Blake2sHasher,
    PedersenHasher,
    Sha256Hasher,
    get_hasher,
)
from porepbench.porep.graph import BucketGraph, ZigZagBucketGraph, new_seed


SEED = (0x3dbe6259, 0x8d313d76, 0x3237db17, 0xe5bc0654)
GRAPH_SEED = bytes(range(28))


# =============================================================================
# FIELD
# =============================================================================

class TestFr32:
    """fr32 serialization."""

    def test_round_trip(self):
        x = Fr(123456789)
        assert bytes_into_fr(fr_into_bytes(x)) == x

    def test_little_endian(self):
        assert fr_into_bytes(Fr(1)) == b'\x01' + b'\x00' * 31

    def test_width(self):
        assert len(fr_into_bytes(Fr(FR_MODULUS - 1))) == FR_BYTES

    def test_rejects_non_canonical(self):
        with pytest.raises(ValueError):
            bytes_into_fr(FR_MODULUS.to_bytes(32, 'little'))
        with pytest.raises(ValueError):
            bytes_into_fr(b'\xff' * 32)

    def test_rejects_wrong_length(self):
        with pytest.raises(ValueError):
            bytes_into_fr(b'\x00' * 31)

    def test_arithmetic_wraps(self):
        assert Fr(FR_MODULUS - 1) + Fr(2) == Fr(1)
        assert Fr(0) - Fr(1) == Fr(FR_MODULUS - 1)
        assert -Fr(0) == Fr.zero()

    def test_trim_clears_top_bits(self):
        trimmed = trim_bytes_to_fr_safe(b'\xff' * 32)
        assert trimmed[31] == 0x3f
        assert trimmed[:31] == b'\xff' * 31
        bytes_into_fr(trimmed)  # must not raise

    def test_montgomery_conversion(self):
        r = (1 << 256) % FR_MODULUS
        assert Fr.from_montgomery(r) == Fr(1)


# =============================================================================
# RNG
# =============================================================================

class TestXorShiftRng:
    """Seeded generator."""

    def test_same_seed_same_stream(self):
        a = XorShiftRng(SEED)
        b = XorShiftRng(SEED)
        assert [a.next_u32() for _ in range(100)] == [b.next_u32() for _ in range(100)]

    def test_different_seed_different_stream(self):
        a = XorShiftRng(SEED)
        b = XorShiftRng((1, 2, 3, 4))
        assert [a.next_u32() for _ in range(10)] != [b.next_u32() for _ in range(10)]

    def test_outputs_are_32_bit(self):
        rng = XorShiftRng(SEED)
        assert all(0 <= rng.next_u32() <= 0xFFFFFFFF for _ in range(1000))

    def test_u64_combines_two_words(self):
        a = XorShiftRng(SEED)
        b = XorShiftRng(SEED)
        high, low = b.next_u32(), b.next_u32()
        assert a.next_u64() == (high << 32) | low

    def test_field_elements_are_canonical(self):
        rng = XorShiftRng(SEED)
        for _ in range(200):
            assert 0 <= rng.gen_fr().value < FR_MODULUS

    def test_field_elements_reproducible(self):
        a = XorShiftRng(SEED)
        b = XorShiftRng(SEED)
        assert [a.gen_fr() for _ in range(20)] == [b.gen_fr() for _ in range(20)]

    def test_zero_seed_rejected(self):
        with pytest.raises(ValueError):
            XorShiftRng((0, 0, 0, 0))

    def test_seed_length(self):
        with pytest.raises(ValueError):
            XorShiftRng((1, 2, 3))


# =============================================================================
# HASHERS
# =============================================================================

@pytest.fixture(params=sorted(HASHERS))
def hasher(request):
    return get_hasher(request.param)


class TestHashers:
    """All hashers map into the field."""

    def test_registry(self):
        assert set(HASHERS) == {'pedersen', 'sha256', 'blake2s'}
        assert isinstance(get_hasher('pedersen'), PedersenHasher)
        assert isinstance(get_hasher('sha256'), Sha256Hasher)
        assert isinstance(get_hasher('blake2s'), Blake2sHasher)

    def test_unknown_hasher(self):
        with pytest.raises(ConfigError, match="xyz"):
            get_hasher('xyz')

    def test_output_is_field_element(self, hasher):
        for data in [b'', b'a', b'\xff' * 32, bytes(range(200))]:
            digest = hasher.hash(data)
            assert len(digest) == FR_BYTES
            bytes_into_fr(digest)

    def test_deterministic(self, hasher):
        assert hasher.hash(b'replica') == hasher.hash(b'replica')
        assert hasher.kdf(b'replica') == hasher.kdf(b'replica')

    def test_input_sensitivity(self, hasher):
        assert hasher.hash(b'replica0') != hasher.hash(b'replica1')

    def test_node_order_matters(self, hasher):
        left, right = hasher.hash(b'left'), hasher.hash(b'right')
        assert hasher.node(left, right, 0) != hasher.node(right, left, 0)

    def test_sloth_round_trip(self, hasher):
        key = hasher.kdf(b'key')
        plaintext = hasher.hash(b'plaintext')
        ciphertext = hasher.sloth_encode(key, plaintext)
        assert ciphertext != plaintext
        assert hasher.sloth_decode(key, ciphertext) == plaintext

    def test_pedersen_length_is_bound(self):
        h = PedersenHasher()
        assert h.hash(b'\x00') != h.hash(b'\x00\x00')

    def test_pedersen_personalization(self):
        h = PedersenHasher()
        left, right = h.hash(b'l'), h.hash(b'r')
        assert h.node(left, right, 0) != h.node(left, right, 1)
        assert h.kdf(left + right) != h.hash(left + right)


# =============================================================================
# GRAPHS
# =============================================================================

class TestBucketGraph:
    """Bucket-sampling DRG."""

    def test_first_nodes_point_at_zero(self):
        g = BucketGraph(64, 6, GRAPH_SEED, Sha256Hasher())
        assert g.parents(0) == [0] * 6
        assert g.parents(1) == [0] * 6

    def test_parents_shape(self):
        g = BucketGraph(256, 6, GRAPH_SEED, Sha256Hasher())
        for node in range(1, 256):
            parents = g.parents(node)
            assert len(parents) == 6
            assert parents == sorted(parents)
            assert all(0 <= p < node for p in parents)

    def test_deterministic_for_seed(self):
        a = BucketGraph(128, 5, GRAPH_SEED, Sha256Hasher())
        b = BucketGraph(128, 5, GRAPH_SEED, Sha256Hasher())
        assert all(a.parents(n) == b.parents(n) for n in range(128))

    def test_seed_changes_graph(self):
        a = BucketGraph(128, 5, GRAPH_SEED, Sha256Hasher())
        b = BucketGraph(128, 5, bytes(28), Sha256Hasher())
        assert [a.parents(n) for n in range(128)] != [b.parents(n) for n in range(128)]

    def test_invalid_shape(self):
        with pytest.raises(ValueError):
            BucketGraph(1, 6, GRAPH_SEED, Sha256Hasher())
        with pytest.raises(ValueError):
            BucketGraph(32, 0, GRAPH_SEED, Sha256Hasher())

    def test_node_out_of_range(self):
        g = BucketGraph(32, 6, GRAPH_SEED, Sha256Hasher())
        with pytest.raises(IndexError):
            g.parents(32)

    def test_new_seed(self):
        assert len(new_seed()) == 28
        assert new_seed() != new_seed()


class TestZigZagBucketGraph:
    """Expander edges on top of the bucket graph."""

    def test_degree(self):
        g = ZigZagBucketGraph(64, 5, 6, GRAPH_SEED, PedersenHasher())
        assert g.degree() == 11

    def test_base_parents_come_first(self):
        base = BucketGraph(64, 5, GRAPH_SEED, Sha256Hasher())
        g = ZigZagBucketGraph(64, 5, 6, GRAPH_SEED, Sha256Hasher())
        for node in range(64):
            assert g.parents(node)[:5] == base.parents(node)

    def test_expanded_parents_point_backwards(self):
        g = ZigZagBucketGraph(128, 5, 6, GRAPH_SEED, Sha256Hasher())
        for node in range(128):
            expanded = g.expanded_parents(node)
            assert len(expanded) <= 6
            assert all(0 <= p < node for p in expanded)

    def test_has_expander_edges(self):
        g = ZigZagBucketGraph(128, 5, 6, GRAPH_SEED, Sha256Hasher())
        assert sum(len(g.expanded_parents(n)) for n in range(128)) > 0

    def test_zero_expansion_is_bucket_graph(self):
        base = BucketGraph(64, 5, GRAPH_SEED, Sha256Hasher())
        g = ZigZagBucketGraph(64, 5, 0, GRAPH_SEED, Sha256Hasher())
        assert all(g.parents(n) == base.parents(n) for n in range(64))
