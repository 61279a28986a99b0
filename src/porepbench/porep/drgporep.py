"""
DRG-PoRep: Proof of Replication over a depth-robust graph

Lifecycle:
1. setup:     SetupParams -> PublicParams (graph over the chosen hasher)
2. replicate: commit to the data (tree_d), delay-encode it in place,
              commit to the replica (tree_r) -> (Tau, ProverAux)
3. prove:     for each challenge open the replica node, its parents in
              tree_r and the original node in tree_d
4. verify:    check every opening, rebuild the encoding key from the
              opened parents and check that decoding the replica node
              yields the opened data node

When the parameters are private the proof does not carry the two roots;
the verifier takes them from the public inputs.
"""

from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from . import vde
from .fr32 import FR_BYTES
from .graph import BucketGraph
from .hasher import Hasher
from .merkle import MerkleProof, MerkleTree, tree_depth, tree_from_buffer, read_exact


@dataclass(frozen=True)
class DrgParams:
    """Shape of the dependency graph."""
    nodes: int
    degree: int
    expansion_degree: int
    seed: bytes


@dataclass(frozen=True)
class SetupParams:
    drg: DrgParams
    private: bool
    challenges_count: int
    beta_height: int = 0
    prev_layer_beta_height: int = 0


@dataclass(frozen=True)
class PublicParams:
    graph: BucketGraph
    private: bool
    challenges_count: int
    beta_height: int = 0
    prev_layer_beta_height: int = 0


@dataclass(frozen=True)
class Tau:
    """Public commitments: original-data root and replica root."""
    comm_d: bytes
    comm_r: bytes


@dataclass
class ProverAux:
    """Trees the prover keeps to answer challenges."""
    tree_d: MerkleTree
    tree_r: MerkleTree


@dataclass
class PublicInputs:
    replica_id: object
    challenges: List[int]
    tau: Optional[Tau] = None


@dataclass
class PrivateInputs:
    tree_d: MerkleTree
    tree_r: MerkleTree


@dataclass
class ChallengeProof:
    """Openings for a single challenged node."""
    replica_node: MerkleProof
    replica_parents: List[Tuple[int, MerkleProof]]
    node: MerkleProof

    def serialize(self) -> bytes:
        parts = [self.replica_node.serialize(), len(self.replica_parents).to_bytes(4, 'big')]
        for parent, proof in self.replica_parents:
            parts.append(parent.to_bytes(8, 'big'))
            parts.append(proof.serialize())
        parts.append(self.node.serialize())
        return b''.join(parts)

    @classmethod
    def deserialize_from(cls, data: bytes, offset: int) -> Tuple['ChallengeProof', int]:
        replica_node, offset = MerkleProof.deserialize_from(data, offset)
        num_parents = int.from_bytes(read_exact(data, offset, 4), 'big')
        offset += 4
        replica_parents = []
        for _ in range(num_parents):
            parent = int.from_bytes(read_exact(data, offset, 8), 'big')
            offset += 8
            proof, offset = MerkleProof.deserialize_from(data, offset)
            replica_parents.append((parent, proof))
        node, offset = MerkleProof.deserialize_from(data, offset)
        return cls(replica_node=replica_node, replica_parents=replica_parents, node=node), offset


@dataclass
class Proof:
    """
    DRG-PoRep proof.

    Format:
        has_roots(1) || [data_root(32) || replica_root(32)] ||
        count(4) || ChallengeProof*
    """
    challenges: List[ChallengeProof] = field(default_factory=list)
    data_root: Optional[bytes] = None
    replica_root: Optional[bytes] = None

    def serialize(self) -> bytes:
        has_roots = self.data_root is not None and self.replica_root is not None
        parts = [bytes([1 if has_roots else 0])]
        if has_roots:
            parts.extend([self.data_root, self.replica_root])
        parts.append(len(self.challenges).to_bytes(4, 'big'))
        parts.extend(c.serialize() for c in self.challenges)
        return b''.join(parts)

    @classmethod
    def deserialize(cls, data: bytes) -> 'Proof':
        """
        Strictly parse a serialized proof.

        Raises:
            ValueError: truncated, malformed, or trailing bytes
        """
        flag = read_exact(data, 0, 1)[0]
        if flag not in (0, 1):
            raise ValueError(f"invalid root flag {flag}")
        offset = 1
        data_root = replica_root = None
        if flag:
            data_root = read_exact(data, offset, FR_BYTES)
            replica_root = read_exact(data, offset + FR_BYTES, FR_BYTES)
            offset += 2 * FR_BYTES

        count = int.from_bytes(read_exact(data, offset, 4), 'big')
        offset += 4
        challenges = []
        for _ in range(count):
            challenge, offset = ChallengeProof.deserialize_from(data, offset)
            challenges.append(challenge)

        if offset != len(data):
            raise ValueError(f"{len(data) - offset} trailing bytes after proof")
        return cls(challenges=challenges, data_root=data_root, replica_root=replica_root)


class DrgPoRep:
    """
    DRG-PoRep over a BucketGraph.

    Args:
        hasher: Hash used for the graph, the trees and the encoding keys
    """

    def __init__(self, hasher: Hasher):
        self.hasher = hasher

    def setup(self, sp: SetupParams) -> PublicParams:
        """
        Derive public parameters.

        Raises:
            ValueError: unsupported graph shape or challenge count
        """
        if sp.challenges_count < 1:
            raise ValueError(f"challenges_count must be positive, got {sp.challenges_count}")
        if sp.drg.expansion_degree != 0:
            raise ValueError("DRG-PoRep does not use expansion parents")

        graph = BucketGraph(sp.drg.nodes, sp.drg.degree, sp.drg.seed, self.hasher)
        return PublicParams(
            graph=graph,
            private=sp.private,
            challenges_count=sp.challenges_count,
            beta_height=sp.beta_height,
            prev_layer_beta_height=sp.prev_layer_beta_height,
        )

    def replicate(self, pp: PublicParams, replica_id, data,
                  data_tree: Optional[MerkleTree] = None) -> Tuple[Tau, ProverAux]:
        """
        Replicate ``data`` in place.

        Args:
            pp: Public parameters
            replica_id: Replica identity bound into every encoding key
            data: Mutable buffer of ``nodes * 32`` bytes
            data_tree: Precomputed tree over the original data, if any
        """
        if len(data) != pp.graph.size() * FR_BYTES:
            raise ValueError(
                f"buffer holds {len(data)} bytes, graph needs {pp.graph.size() * FR_BYTES}"
            )
        tree_d = data_tree if data_tree is not None else tree_from_buffer(data, self.hasher)
        vde.encode(pp.graph, replica_id, data)
        tree_r = tree_from_buffer(data, self.hasher)

        return Tau(comm_d=tree_d.root, comm_r=tree_r.root), ProverAux(tree_d=tree_d, tree_r=tree_r)

    def extract_all(self, pp: PublicParams, replica_id, data) -> bytes:
        """Recover the original data from a replica without touching it."""
        copy = bytearray(data)
        vde.decode(pp.graph, replica_id, copy)
        return bytes(copy)

    def prove(self, pp: PublicParams, pub_inputs: PublicInputs,
              priv_inputs: PrivateInputs) -> Proof:
        tree_d, tree_r = priv_inputs.tree_d, priv_inputs.tree_r
        challenge_proofs = []

        for c in pub_inputs.challenges:
            challenge = c % pp.graph.size()
            parents = pp.graph.parents(challenge)
            challenge_proofs.append(ChallengeProof(
                replica_node=tree_r.get_proof(challenge),
                replica_parents=[(p, tree_r.get_proof(p)) for p in parents],
                node=tree_d.get_proof(challenge),
            ))

        if pp.private:
            return Proof(challenges=challenge_proofs)
        return Proof(challenges=challenge_proofs, data_root=tree_d.root, replica_root=tree_r.root)

    def verify(self, pp: PublicParams, pub_inputs: PublicInputs, proof: Proof) -> bool:
        tau = pub_inputs.tau
        if tau is None:
            return False
        if proof.data_root is not None and proof.data_root != tau.comm_d:
            return False
        if proof.replica_root is not None and proof.replica_root != tau.comm_r:
            return False
        if not pp.private and (proof.data_root is None or proof.replica_root is None):
            return False
        if len(proof.challenges) != len(pub_inputs.challenges):
            return False

        depth = tree_depth(pp.graph.size())

        def opens(opening: MerkleProof, index: int, root: bytes) -> bool:
            return (opening.index == index
                    and len(opening.siblings) == depth
                    and opening.verify(root, self.hasher))

        for c, cp in zip(pub_inputs.challenges, proof.challenges):
            challenge = c % pp.graph.size()

            if not opens(cp.replica_node, challenge, tau.comm_r):
                return False
            if not opens(cp.node, challenge, tau.comm_d):
                return False

            expected_parents = pp.graph.parents(challenge)
            if [p for p, _ in cp.replica_parents] != expected_parents:
                return False
            for parent, opening in cp.replica_parents:
                if not opens(opening, parent, tau.comm_r):
                    return False

            parent_values = [o.leaf for p, o in cp.replica_parents if p != challenge]
            key = vde.create_key(self.hasher, pub_inputs.replica_id, parent_values)
            if self.hasher.sloth_decode(key, cp.replica_node.leaf) != cp.node.leaf:
                return False

        return True
