"""
Property-Based Testing with Hypothesis

These tests use Hypothesis to generate random inputs and check that the
encoding, the proofs and the statistics hold their properties for all
cases, not just the handful of fixed examples in the other suites.
"""

import pytest
from hypothesis import given, strategies as st, settings
import math

from porepbench.benchmarks.params import prev_layer_beta_height
from porepbench.benchmarks.stats import (
    GIB,
    average_proof_size,
    encoding_rates,
    mean_duration,
)
from porepbench.porep import feistel, vde
from porepbench.porep.drgporep import (
    DrgParams,
    DrgPoRep,
    PrivateInputs,
    Proof,
    PublicInputs,
    SetupParams,
)
from porepbench.porep.fr32 import FR_MODULUS, Fr, bytes_into_fr, fr_into_bytes
from porepbench.porep.graph import BucketGraph
from porepbench.porep.hasher import Sha256Hasher
from porepbench.porep.rng import XorShiftRng


GRAPH_SEED = bytes(range(28))
NODES = 32


# =============================================================================
# STRATEGIES
# =============================================================================

field_elements = st.integers(min_value=0, max_value=FR_MODULUS - 1).map(Fr)

seeds = st.tuples(
    st.integers(min_value=0, max_value=0xFFFFFFFF),
    st.integers(min_value=0, max_value=0xFFFFFFFF),
    st.integers(min_value=0, max_value=0xFFFFFFFF),
    st.integers(min_value=1, max_value=0xFFFFFFFF),
)


def fr_buffer(nodes: int, seed) -> bytearray:
    rng = XorShiftRng(seed)
    return bytearray(b''.join(fr_into_bytes(rng.gen_fr()) for _ in range(nodes)))


@pytest.fixture(scope="module")
def replica():
    """One replicated 1 KiB buffer with a public proof of challenge 2."""
    hasher = Sha256Hasher()
    scheme = DrgPoRep(hasher)
    pp = scheme.setup(SetupParams(
        drg=DrgParams(nodes=NODES, degree=6, expansion_degree=0, seed=GRAPH_SEED),
        private=False,
        challenges_count=1,
    ))
    replica_id = hasher.hash(b'replica')
    data = fr_buffer(NODES, (1, 2, 3, 4))
    tau, aux = scheme.replicate(pp, replica_id, data)
    pub = PublicInputs(replica_id=replica_id, challenges=[2], tau=tau)
    priv = PrivateInputs(tree_d=aux.tree_d, tree_r=aux.tree_r)
    proof = scheme.prove(pp, pub, priv)
    return scheme, pp, pub, proof.serialize()


# =============================================================================
# FIELD
# =============================================================================

class TestFieldProperties:
    """fr32 serialization and arithmetic."""

    @given(x=field_elements)
    @settings(max_examples=500)
    def test_bytes_round_trip(self, x):
        assert bytes_into_fr(fr_into_bytes(x)) == x

    @given(a=field_elements, b=field_elements)
    def test_add_sub_inverse(self, a, b):
        assert (a + b) - b == a

    @given(value=st.integers(min_value=FR_MODULUS, max_value=(1 << 256) - 1))
    def test_non_canonical_rejected(self, value):
        with pytest.raises(ValueError):
            bytes_into_fr(value.to_bytes(32, 'little'))

    @given(seed=seeds)
    @settings(max_examples=50)
    def test_rng_field_elements_canonical(self, seed):
        rng = XorShiftRng(seed)
        for _ in range(10):
            assert rng.gen_fr().value < FR_MODULUS


# =============================================================================
# GRAPH AND ENCODING
# =============================================================================

class TestEncodingProperties:
    """Graph shape and encode/decode."""

    @given(n=st.integers(min_value=1, max_value=300))
    @settings(max_examples=100)
    def test_feistel_is_permutation(self, n):
        images = [feistel.permute(n, i) for i in range(n)]
        assert sorted(images) == list(range(n))

    @given(seed=st.binary(min_size=28, max_size=28),
           nodes=st.integers(min_value=2, max_value=200),
           m=st.integers(min_value=1, max_value=8))
    @settings(max_examples=50)
    def test_parents_precede_node(self, seed, nodes, m):
        graph = BucketGraph(nodes, m, seed, Sha256Hasher())
        for node in range(1, nodes):
            parents = graph.parents(node)
            assert len(parents) == m
            assert all(p < node for p in parents)

    @given(seed=seeds, nodes=st.integers(min_value=2, max_value=24))
    @settings(max_examples=30, deadline=None)
    def test_encode_decode(self, seed, nodes):
        hasher = Sha256Hasher()
        graph = BucketGraph(nodes, 5, GRAPH_SEED, hasher)
        replica_id = hasher.hash(bytes(str(seed), 'ascii'))
        original = fr_buffer(nodes, seed)
        data = bytearray(original)
        vde.encode(graph, replica_id, data)
        vde.decode(graph, replica_id, data)
        assert data == original


# =============================================================================
# PROOF SOUNDNESS
# =============================================================================

class TestProofCorruption:
    """No single-byte corruption of a proof goes unnoticed."""

    @given(data=st.data())
    @settings(max_examples=300, deadline=None)
    def test_corrupted_proof_rejected(self, replica, data):
        scheme, pp, pub, blob = replica
        position = data.draw(st.integers(min_value=0, max_value=len(blob) - 1))
        mask = data.draw(st.integers(min_value=1, max_value=255))

        corrupted = bytearray(blob)
        corrupted[position] ^= mask

        try:
            proof = Proof.deserialize(bytes(corrupted))
        except ValueError:
            return
        assert not scheme.verify(pp, pub, proof)

    def test_untouched_proof_accepted(self, replica):
        scheme, pp, pub, blob = replica
        assert scheme.verify(pp, pub, Proof.deserialize(blob))


# =============================================================================
# STATISTICS
# =============================================================================

class TestStatsProperties:
    """Means, sizes and rates."""

    @given(durations=st.lists(st.integers(min_value=0, max_value=10 ** 11),
                              min_size=1, max_size=50))
    def test_mean_duration(self, durations):
        mean = mean_duration(sum(durations), len(durations))
        assert mean == pytest.approx(sum(durations) / len(durations) / 1e9, abs=1e-9)

    @given(sizes=st.lists(st.integers(min_value=0, max_value=10 ** 6),
                          min_size=1, max_size=50))
    def test_average_proof_size(self, sizes):
        assert average_proof_size(sizes, len(sizes)) == sum(sizes) // len(sizes)

    @given(elapsed=st.integers(min_value=0, max_value=10 ** 13),
           size=st.integers(min_value=1, max_value=1 << 40))
    def test_encoding_rates(self, elapsed, size):
        per_byte, per_gib = encoding_rates(elapsed, size)
        assert per_gib == per_byte * GIB
        assert per_byte * size == pytest.approx(elapsed / 1e9)

    @given(exp=st.integers(min_value=0, max_value=20))
    def test_beta_height_powers_of_two(self, exp):
        assert prev_layer_beta_height(1 << exp) == exp + 1

    @given(nodes=st.integers(min_value=2, max_value=1 << 20))
    def test_beta_height_close_to_exact(self, nodes):
        exact = math.ceil(math.log2(nodes)) + 1
        assert prev_layer_beta_height(nodes) in (exact - 1, exact)
