"""
DRG-PoRep construction

The cryptographic collaborator the benchmarks drive:

    setup(SetupParams) -> PublicParams
    replicate(pp, replica_id, data) -> (Tau, ProverAux)
    prove(pp, pub_inputs, priv_inputs) -> Proof
    verify(pp, pub_inputs, proof) -> bool
    vde.encode(graph, replica_id, data)

Example:
    >>> from porepbench.porep import DrgPoRep, get_hasher
    >>> scheme = DrgPoRep(get_hasher('sha256'))
"""

from .fr32 import (
    Fr,
    FR_BYTES,
    FR_MODULUS,
    fr_into_bytes,
    bytes_into_fr,
    trim_bytes_to_fr_safe,
    data_at_node,
)
from .rng import XorShiftRng
from .hasher import (
    Hasher,
    PedersenHasher,
    Sha256Hasher,
    Blake2sHasher,
    HASHERS,
    DEFAULT_HASHER,
    get_hasher,
)
from .graph import BucketGraph, ZigZagBucketGraph, new_seed
from .merkle import MerkleTree, MerkleProof, tree_depth, tree_from_buffer
from .drgporep import (
    DrgParams,
    SetupParams,
    PublicParams,
    Tau,
    ProverAux,
    PublicInputs,
    PrivateInputs,
    ChallengeProof,
    Proof,
    DrgPoRep,
)
from .layered import (
    LayerChallenges,
    HybridDomain,
    LayeredSetupParams,
    LayeredPublicParams,
    ZigZagDrgPoRep,
    replica_id_for_beta_height,
)
from . import vde

__all__ = [
    # Field
    'Fr',
    'FR_BYTES',
    'FR_MODULUS',
    'fr_into_bytes',
    'bytes_into_fr',
    'trim_bytes_to_fr_safe',
    'data_at_node',

    # RNG
    'XorShiftRng',

    # Hashers
    'Hasher',
    'PedersenHasher',
    'Sha256Hasher',
    'Blake2sHasher',
    'HASHERS',
    'DEFAULT_HASHER',
    'get_hasher',

    # Graphs
    'BucketGraph',
    'ZigZagBucketGraph',
    'new_seed',

    # Merkle
    'MerkleTree',
    'MerkleProof',
    'tree_depth',
    'tree_from_buffer',

    # DRG-PoRep
    'DrgParams',
    'SetupParams',
    'PublicParams',
    'Tau',
    'ProverAux',
    'PublicInputs',
    'PrivateInputs',
    'ChallengeProof',
    'Proof',
    'DrgPoRep',

    # Layered
    'LayerChallenges',
    'HybridDomain',
    'LayeredSetupParams',
    'LayeredPublicParams',
    'ZigZagDrgPoRep',
    'replica_id_for_beta_height',

    # Delay encoding
    'vde',
]
