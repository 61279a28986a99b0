"""
Layered (ZigZag) DRG-PoRep parameters

The layered construction runs several encoding passes over a
ZigZagBucketGraph. The harness only needs its setup: the graph shape, the
per-layer challenge policy and the per-layer beta heights.

Replica ids of the layered construction are HybridDomain values. A beta
height of 0 means the layer works purely in the alpha (plain) domain.
"""

from dataclasses import dataclass
from typing import Tuple

from .drgporep import DrgParams
from .fr32 import FR_BYTES
from .graph import ZigZagBucketGraph
from .hasher import Hasher


@dataclass(frozen=True)
class LayerChallenges:
    """How many challenges each layer receives."""
    layers: int
    count: int

    def __post_init__(self):
        if self.layers < 1:
            raise ValueError(f"need at least one layer, got {self.layers}")
        if self.count < 1:
            raise ValueError(f"need at least one challenge per layer, got {self.count}")

    @classmethod
    def new_fixed(cls, layers: int, count: int) -> 'LayerChallenges':
        """Same challenge count on every layer."""
        return cls(layers=layers, count=count)

    def challenges_for_layer(self, layer: int) -> int:
        if not 0 <= layer < self.layers:
            raise IndexError(f"layer {layer} out of range [0, {self.layers})")
        return self.count

    def all_challenges(self) -> int:
        return self.layers * self.count


@dataclass(frozen=True)
class HybridDomain:
    """A domain element tagged as alpha (plain) or beta."""
    kind: str
    value: bytes

    ALPHA = 'alpha'
    BETA = 'beta'

    def __post_init__(self):
        if self.kind not in (self.ALPHA, self.BETA):
            raise ValueError(f"unknown hybrid domain kind: {self.kind}")
        if len(self.value) != FR_BYTES:
            raise ValueError(f"domain element must be {FR_BYTES} bytes")

    @classmethod
    def alpha(cls, value: bytes) -> 'HybridDomain':
        return cls(cls.ALPHA, bytes(value))

    @classmethod
    def beta(cls, value: bytes) -> 'HybridDomain':
        return cls(cls.BETA, bytes(value))

    @property
    def is_alpha(self) -> bool:
        return self.kind == self.ALPHA

    def __bytes__(self) -> bytes:
        return self.value


def replica_id_for_beta_height(value: bytes, beta_height: int) -> HybridDomain:
    """Alpha replica id when the beta height is 0, beta otherwise."""
    if beta_height == 0:
        return HybridDomain.alpha(value)
    return HybridDomain.beta(value)


@dataclass(frozen=True)
class LayeredSetupParams:
    drg: DrgParams
    layer_challenges: LayerChallenges
    beta_heights: Tuple[int, ...]


@dataclass(frozen=True)
class LayeredPublicParams:
    graph: ZigZagBucketGraph
    layer_challenges: LayerChallenges
    beta_heights: Tuple[int, ...]


class ZigZagDrgPoRep:
    """Setup of the layered construction over a ZigZagBucketGraph."""

    def __init__(self, hasher: Hasher):
        self.hasher = hasher

    def setup(self, sp: LayeredSetupParams) -> LayeredPublicParams:
        """
        Raises:
            ValueError: invalid graph shape or beta heights that do not
                match the layer count
        """
        if len(sp.beta_heights) != sp.layer_challenges.layers:
            raise ValueError(
                f"{len(sp.beta_heights)} beta heights for {sp.layer_challenges.layers} layers"
            )
        graph = ZigZagBucketGraph(
            sp.drg.nodes,
            sp.drg.degree,
            sp.drg.expansion_degree,
            sp.drg.seed,
            self.hasher,
        )
        return LayeredPublicParams(
            graph=graph,
            layer_challenges=sp.layer_challenges,
            beta_heights=tuple(sp.beta_heights),
        )
