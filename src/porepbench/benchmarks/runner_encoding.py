"""
Benchmark B: standalone delay encoding

Times one vde.encode pass over the single-layer ZigZag graph and
normalizes it per byte and per GiB.
"""

from dataclasses import dataclass
from typing import Optional
import logging
import time

from .base import Benchmark, BenchmarkResult, BenchmarkStatus
from .data import file_backed_mmap_from_random_bytes, generate_replica_id, seeded_rng
from .params import (
    BETA_HEIGHT,
    MIN_NODES,
    N_LAYERS,
    layered_setup_params,
    nodes_for_size,
    run_setup,
)
from .profiling import NoopProfiler, ProfilingScope
from .stats import duration_to_seconds, encoding_rates, prettyb, report_encoding
from ..errors import ConfigError, EncodingError
from ..porep import vde
from ..porep.hasher import PedersenHasher
from ..porep.layered import ZigZagDrgPoRep, replica_id_for_beta_height

logger = logging.getLogger(__name__)

BETA_HEIGHTS = (BETA_HEIGHT,) * N_LAYERS

DEFAULT_M = 5
DEFAULT_EXPANSION_DEGREE = 6
DEFAULT_LAYERS = 10


@dataclass(frozen=True)
class EncodingConfig:
    """
    Configuration of an encoding run.

    ``layers`` is recorded with the result; the timed pass always runs
    over a single-layer setup.
    """
    data_size: int
    m: int = DEFAULT_M
    expansion_degree: int = DEFAULT_EXPANSION_DEGREE
    layers: int = DEFAULT_LAYERS

    def __post_init__(self):
        for name in ('data_size', 'm', 'expansion_degree', 'layers'):
            value = getattr(self, name)
            if not isinstance(value, int) or value <= 0:
                raise ConfigError(f"{name} must be a positive integer, got {value!r}")
        if self.nodes < MIN_NODES:
            raise ConfigError(
                f"data_size {self.data_size} holds {self.nodes} nodes, need at least {MIN_NODES}"
            )

    @property
    def nodes(self) -> int:
        return nodes_for_size(self.data_size)


def encode_stage(graph, replica_id, data):
    """
    Raises:
        EncodingError: the encoding pass failed
    """
    try:
        vde.encode(graph, replica_id, data)
    except ValueError as e:
        raise EncodingError(f"encoding failed: {e}") from e


class EncodingBenchmark(Benchmark):
    """Time a single delay-encoding pass."""

    name = "encoding"
    description = "ZigZag delay-encoding bench"

    def __init__(self, config: EncodingConfig, profiler: Optional[ProfilingScope] = None):
        self.config = config
        self.profiler = profiler or NoopProfiler()

    def run(self) -> BenchmarkResult:
        cfg = self.config
        hasher = PedersenHasher()
        rng = seeded_rng()

        logger.info("data size: %s", prettyb(cfg.data_size))
        logger.info("m: %d", cfg.m)
        logger.info("expansion_degree: %d", cfg.expansion_degree)
        logger.info("layers: %d", cfg.layers)
        logger.info("generating fake data")

        nodes = cfg.nodes

        with file_backed_mmap_from_random_bytes(nodes) as data:
            replica_id = replica_id_for_beta_height(generate_replica_id(rng), BETA_HEIGHTS[0])

            sp = layered_setup_params(nodes, cfg.m, cfg.expansion_degree, N_LAYERS)
            with self.profiler.stage("setup"):
                pp = run_setup(ZigZagDrgPoRep(hasher), sp)

            start = time.perf_counter_ns()
            logger.info("encoding")
            with self.profiler.stage("encode"):
                encode_stage(pp.graph, replica_id, data)
            encoding_ns = time.perf_counter_ns() - start

        report_encoding(encoding_ns, cfg.data_size)
        per_byte, per_gib = encoding_rates(encoding_ns, cfg.data_size)

        return BenchmarkResult(
            name=self.name,
            status=BenchmarkStatus.PASS,
            params={
                'data_size': cfg.data_size,
                'nodes': nodes,
                'm': cfg.m,
                'expansion_degree': cfg.expansion_degree,
                'layers': cfg.layers,
                'hasher': hasher.name,
            },
            metrics={
                'encoding_time_s': duration_to_seconds(encoding_ns),
                'encoding_time_per_byte_s': per_byte,
                'encoding_time_per_gib_s': per_gib,
            },
        )
