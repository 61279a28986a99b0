"""
Merkle Trees over replica nodes

Binary Merkle tree whose leaves are the fr32 node values themselves.
Supports:
- Building trees from a replica buffer
- Generating authentication paths (proofs)
- Verifying inclusion proofs
- Strict serialization of proofs
"""

from dataclasses import dataclass
from typing import List, Tuple

from .fr32 import FR_BYTES, data_at_node
from .hasher import Hasher


def tree_depth(leaf_count: int) -> int:
    """Number of siblings on every authentication path: ceil(log2(n))."""
    if leaf_count < 1:
        raise ValueError("Cannot size an empty Merkle tree")
    return (leaf_count - 1).bit_length()


@dataclass
class MerkleProof:
    """Authentication path for one leaf."""
    index: int
    leaf: bytes
    siblings: List[Tuple[bytes, bool]]  # (sibling_hash, is_right)

    def root(self, hasher: Hasher) -> bytes:
        """Recompute the root implied by this path."""
        current = self.leaf
        for height, (sibling, is_right) in enumerate(self.siblings):
            if is_right:
                current = hasher.node(current, sibling, height)
            else:
                current = hasher.node(sibling, current, height)
        return current

    def verify(self, root: bytes, hasher: Hasher) -> bool:
        """
        Verify this proof against a root.

        The left/right flags must agree with the bits of ``index``.
        """
        if self.index >> len(self.siblings):
            return False
        for height, (_, is_right) in enumerate(self.siblings):
            if is_right != (((self.index >> height) & 1) == 0):
                return False
        return self.root(hasher) == root

    def serialize(self) -> bytes:
        """Serialize proof to bytes."""
        parts = [
            self.index.to_bytes(8, 'big'),
            len(self.leaf).to_bytes(4, 'big'),
            self.leaf,
            len(self.siblings).to_bytes(4, 'big'),
        ]
        for sibling, is_right in self.siblings:
            parts.append(sibling)
            parts.append(bytes([1 if is_right else 0]))
        return b''.join(parts)

    @classmethod
    def deserialize_from(cls, data: bytes, offset: int = 0) -> Tuple['MerkleProof', int]:
        """
        Parse one proof starting at ``offset``.

        Returns:
            (proof, offset just past the proof)

        Raises:
            ValueError: truncated or malformed input
        """
        index = int.from_bytes(read_exact(data, offset, 8), 'big')
        offset += 8

        leaf_len = int.from_bytes(read_exact(data, offset, 4), 'big')
        offset += 4
        if leaf_len != FR_BYTES:
            raise ValueError(f"leaf length {leaf_len} != {FR_BYTES}")
        leaf = read_exact(data, offset, leaf_len)
        offset += leaf_len

        num_siblings = int.from_bytes(read_exact(data, offset, 4), 'big')
        offset += 4

        siblings = []
        for _ in range(num_siblings):
            sibling = read_exact(data, offset, FR_BYTES)
            offset += FR_BYTES
            flag = read_exact(data, offset, 1)[0]
            offset += 1
            if flag not in (0, 1):
                raise ValueError(f"invalid direction flag {flag}")
            siblings.append((sibling, flag == 1))

        return cls(index=index, leaf=leaf, siblings=siblings), offset

    @classmethod
    def deserialize(cls, data: bytes) -> 'MerkleProof':
        """Deserialize proof from bytes (no trailing data allowed)."""
        proof, offset = cls.deserialize_from(data)
        if offset != len(data):
            raise ValueError(f"{len(data) - offset} trailing bytes after Merkle proof")
        return proof


def read_exact(data: bytes, offset: int, n: int) -> bytes:
    chunk = bytes(data[offset:offset + n])
    if len(chunk) != n:
        raise ValueError(f"truncated input: wanted {n} bytes at offset {offset}")
    return chunk


class MerkleTree:
    """
    Binary Merkle tree.

    Odd layers duplicate their last node.
    """

    def __init__(self, leaves: List[bytes], hasher: Hasher):
        """
        Build a Merkle tree from leaf data.

        Args:
            leaves: fr32 node values
            hasher: Hash used for internal nodes
        """
        if not leaves:
            raise ValueError("Cannot build empty Merkle tree")

        self.hasher = hasher
        self.leaf_count = len(leaves)
        self.layers: List[List[bytes]] = [list(leaves)]
        self._build_tree()
        self.root = self.layers[-1][0]

    def _build_tree(self):
        current_layer = self.layers[0]
        height = 0

        while len(current_layer) > 1:
            next_layer = []
            for i in range(0, len(current_layer), 2):
                left = current_layer[i]
                right = current_layer[i + 1] if i + 1 < len(current_layer) else left
                next_layer.append(self.hasher.node(left, right, height))

            self.layers.append(next_layer)
            current_layer = next_layer
            height += 1

    def read_at(self, index: int) -> bytes:
        return self.layers[0][index]

    def get_proof(self, index: int) -> MerkleProof:
        """
        Generate authentication path for leaf at index.

        Args:
            index: Leaf index (0-based)
        """
        if index < 0 or index >= self.leaf_count:
            raise IndexError(f"Index {index} out of range [0, {self.leaf_count})")

        siblings = []
        current_index = index

        for layer in self.layers[:-1]:
            if current_index % 2 == 0:
                sibling_index = current_index + 1
                is_right = True
            else:
                sibling_index = current_index - 1
                is_right = False

            if sibling_index < len(layer):
                sibling_hash = layer[sibling_index]
            else:
                sibling_hash = layer[current_index]

            siblings.append((sibling_hash, is_right))
            current_index //= 2

        return MerkleProof(index=index, leaf=self.layers[0][index], siblings=siblings)

    def verify_proof(self, proof: MerkleProof) -> bool:
        return proof.verify(self.root, self.hasher)


def tree_from_buffer(data, hasher: Hasher) -> MerkleTree:
    """Build a tree whose leaves are the consecutive fr32 nodes of ``data``."""
    if len(data) % FR_BYTES:
        raise ValueError(f"buffer length {len(data)} is not a multiple of {FR_BYTES}")
    return MerkleTree([data_at_node(data, i) for i in range(len(data) // FR_BYTES)], hasher)
