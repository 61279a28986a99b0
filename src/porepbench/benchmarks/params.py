"""
Parameter assembly for the benchmarks.

Turns user-facing shape parameters (data size, m, expansion degree,
challenges, layers) into setup records and runs setup.
"""

from typing import Optional
import logging
import math
import struct

from ..errors import SetupError
from ..porep.drgporep import DrgParams, SetupParams
from ..porep.fr32 import FR_BYTES
from ..porep.graph import new_seed
from ..porep.layered import LayerChallenges, LayeredSetupParams

logger = logging.getLogger(__name__)

# Beta height of the vanilla construction (alpha domain only)
BETA_HEIGHT = 0

# Smallest graph setup accepts
MIN_NODES = 2

# Layered benchmarks set up a single layer with one challenge
N_LAYERS = 1
CHALLENGES_PER_LAYER = 1


def nodes_for_size(data_size: int) -> int:
    """Number of fr32 nodes in ``data_size`` bytes."""
    return data_size // FR_BYTES


def _f32(x: float) -> float:
    """Round to the nearest IEEE-754 single."""
    return struct.unpack('f', struct.pack('f', x))[0]


def prev_layer_beta_height(nodes: int) -> int:
    """
    ceil(log2(nodes)) + 1, evaluated in single precision.

    Single precision makes e.g. 2^21 + 1 nodes yield 22, not 23. Callers
    rely on exactly this value.
    """
    return int(math.ceil(_f32(math.log2(_f32(float(nodes)))))) + 1


def vanilla_setup_params(nodes: int, m: int, challenge_count: int,
                         seed: Optional[bytes] = None) -> SetupParams:
    """SetupParams of the private, non-layered construction."""
    return SetupParams(
        drg=DrgParams(
            nodes=nodes,
            degree=m,
            expansion_degree=0,
            seed=seed if seed is not None else new_seed(),
        ),
        private=True,
        challenges_count=challenge_count,
        beta_height=BETA_HEIGHT,
        prev_layer_beta_height=prev_layer_beta_height(nodes),
    )


def layered_setup_params(nodes: int, m: int, expansion_degree: int,
                         layers: int = N_LAYERS,
                         seed: Optional[bytes] = None) -> LayeredSetupParams:
    """LayeredSetupParams with a fixed challenge policy and zero beta heights."""
    return LayeredSetupParams(
        drg=DrgParams(
            nodes=nodes,
            degree=m,
            expansion_degree=expansion_degree,
            seed=seed if seed is not None else new_seed(),
        ),
        layer_challenges=LayerChallenges.new_fixed(layers, CHALLENGES_PER_LAYER),
        beta_heights=(BETA_HEIGHT,) * layers,
    )


def run_setup(scheme, sp):
    """
    Run ``scheme.setup(sp)``.

    Raises:
        SetupError: setup rejected the parameters
    """
    logger.info("running setup")
    try:
        return scheme.setup(sp)
    except ValueError as e:
        raise SetupError(f"setup failed: {e}") from e
