"""
Delay Encoding (VDE)

Encodes a buffer in place, node by node in index order. The key for a
node is derived from the replica id and the already-encoded values of its
parents, so the pass is inherently sequential:

    key_i  = KDF(replica_id || D'[p_1] || ... || D'[p_k])
    D'[i]  = D[i] + key_i   (mod r)

A parent equal to the node itself (node 0) contributes nothing.
"""

from typing import List

from .fr32 import FR_BYTES, data_at_node
from .hasher import Hasher


def replica_id_bytes(replica_id) -> bytes:
    """Raw 32 bytes of a plain or hybrid replica id."""
    raw = bytes(replica_id)
    if len(raw) != FR_BYTES:
        raise ValueError(f"replica id must be {FR_BYTES} bytes, got {len(raw)}")
    return raw


def create_key(hasher: Hasher, replica_id, parent_values: List[bytes]) -> bytes:
    return hasher.kdf(replica_id_bytes(replica_id) + b''.join(parent_values))


def _parent_values(data, node: int, parents: List[int]) -> List[bytes]:
    return [data_at_node(data, p) for p in parents if p != node]


def _check_size(graph, data):
    if len(data) != graph.size() * FR_BYTES:
        raise ValueError(
            f"buffer holds {len(data)} bytes, graph needs {graph.size() * FR_BYTES}"
        )


def encode(graph, replica_id, data) -> None:
    """Encode ``data`` in place over ``graph``."""
    _check_size(graph, data)
    hasher = graph.hasher

    for node in range(graph.size()):
        parents = graph.parents(node)
        key = create_key(hasher, replica_id, _parent_values(data, node, parents))
        start = node * FR_BYTES
        data[start:start + FR_BYTES] = hasher.sloth_encode(key, data_at_node(data, node))


def decode_block(graph, replica_id, data, node: int) -> bytes:
    """Recover the original value of one node from a full replica."""
    parents = graph.parents(node)
    key = create_key(graph.hasher, replica_id, _parent_values(data, node, parents))
    return graph.hasher.sloth_decode(key, data_at_node(data, node))


def decode(graph, replica_id, data) -> None:
    """
    Decode a replica in place.

    Runs from the last node down so every parent is still encoded when
    its key is rebuilt.
    """
    _check_size(graph, data)

    for node in reversed(range(graph.size())):
        start = node * FR_BYTES
        data[start:start + FR_BYTES] = decode_block(graph, replica_id, data, node)
