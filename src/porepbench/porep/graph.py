"""
Dependency Graphs (DRG)

BucketGraph:       depth-robust graph built by bucket sampling; every
                   node depends on ``degree`` earlier nodes.
ZigZagBucketGraph: BucketGraph plus ``expansion_degree`` extra parents
                   picked through a Feistel permutation.

Parents are derived deterministically from the graph seed, so a verifier
holding only the public parameters recomputes them exactly.
"""

from typing import List
import math
import os
import random

from . import feistel
from .hasher import Hasher

# Seed length in bytes (seven 32-bit words)
SEED_BYTES = 28


def new_seed() -> bytes:
    """A fresh, unpredictable graph seed."""
    return os.urandom(SEED_BYTES)


class BucketGraph:
    """
    Bucket-sampling DRG.

    Args:
        nodes: Number of nodes (at least 2)
        degree: Parents per node (at least 1)
        seed: Graph seed
        hasher: Hash function the construction runs over this graph
    """

    def __init__(self, nodes: int, degree: int, seed: bytes, hasher: Hasher):
        if nodes < 2:
            raise ValueError(f"graph needs at least 2 nodes, got {nodes}")
        if degree < 1:
            raise ValueError(f"graph degree must be positive, got {degree}")
        self.nodes = nodes
        self.base_degree = degree
        self.seed = bytes(seed)
        self.hasher = hasher

    def size(self) -> int:
        return self.nodes

    def degree(self) -> int:
        return self.base_degree

    def base_parents(self, node: int) -> List[int]:
        """
        Sorted parents of ``node``, all strictly smaller except for node 0.

        Nodes 0 and 1 point at node 0.
        """
        m = self.base_degree
        if node in (0, 1):
            return [0] * m

        rng = random.Random(self.seed + node.to_bytes(4, 'little'))
        parents = []
        logi = int(math.floor(math.log2(node * m)))
        for k in range(m):
            j = rng.randrange(logi)
            jj = min(node * m + k, 1 << (j + 1))
            back_dist = rng.randint(max(jj >> 1, 2), jj)
            out = (node * m + k - back_dist) // m
            # Self references become a reference to the previous node.
            parents.append(node - 1 if out == node else out)

        parents.sort()
        return parents

    def parents(self, node: int) -> List[int]:
        if not 0 <= node < self.nodes:
            raise IndexError(f"node {node} out of range [0, {self.nodes})")
        return self.base_parents(node)

    def __repr__(self) -> str:
        return (f"{type(self).__name__}(nodes={self.nodes}, degree={self.degree()}, "
                f"hasher={self.hasher.name})")


class ZigZagBucketGraph(BucketGraph):
    """
    BucketGraph with expander edges.

    Expansion parent i of a node is the Feistel image of
    ``node * expansion_degree + i``, kept only when it precedes the node.
    """

    def __init__(self, nodes: int, degree: int, expansion_degree: int,
                 seed: bytes, hasher: Hasher):
        super().__init__(nodes, degree, seed, hasher)
        if expansion_degree < 0:
            raise ValueError(f"expansion degree must not be negative, got {expansion_degree}")
        self.expansion_degree = expansion_degree

    def degree(self) -> int:
        return self.base_degree + self.expansion_degree

    def correspondent(self, node: int, i: int) -> int:
        a = node * self.expansion_degree + i
        transformed = feistel.permute(self.nodes * self.expansion_degree, a)
        return transformed // self.expansion_degree

    def expanded_parents(self, node: int) -> List[int]:
        parents = []
        for i in range(self.expansion_degree):
            other = self.correspondent(node, i)
            if other < node:
                parents.append(other)
        return parents

    def parents(self, node: int) -> List[int]:
        return super().parents(node) + self.expanded_parents(node)
