"""
Benchmark A: DRG-PoRep vanilla, disk backed

Stages:
- setup      (not timed)
- replicate  (timed once, reported as replication_time)
- prove      (sampled, mean reported)
- verify     (sampled, mean reported; any failure aborts the run)

Every sampled proof answers the same challenges for the same replica.
"""

from dataclasses import dataclass
from typing import Optional
import logging
import time

from .base import Benchmark, BenchmarkResult, BenchmarkStatus
from .data import file_backed_mmap_from_random_bytes, generate_replica_id, seeded_rng
from .params import MIN_NODES, nodes_for_size, run_setup, vanilla_setup_params
from .profiling import NoopProfiler, ProfilingScope
from .stats import SampleStats, duration_to_seconds, prettyb, report_vanilla
from ..errors import ConfigError, ReplicationError, VerificationError
from ..porep.drgporep import DrgPoRep, PrivateInputs, PublicInputs
from ..porep.hasher import DEFAULT_HASHER, get_hasher

logger = logging.getLogger(__name__)

SAMPLES = 30

# Every challenge targets this node
CHALLENGE_INDEX = 2

DEFAULT_M = 6
DEFAULT_CHALLENGES = 1


@dataclass(frozen=True)
class VanillaConfig:
    """
    Configuration of a vanilla run.

    Args:
        data_size: Bytes of generated data (a multiple of 32 is used)
        m: Graph degree
        challenge_count: Challenges per proof
        hasher: Hasher name
        samples: Prove/verify trials
    """
    data_size: int
    m: int = DEFAULT_M
    challenge_count: int = DEFAULT_CHALLENGES
    hasher: str = DEFAULT_HASHER
    samples: int = SAMPLES

    def __post_init__(self):
        for name in ('data_size', 'm', 'challenge_count', 'samples'):
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


def replicate_stage(scheme: DrgPoRep, pp, replica_id, data):
    """
    Replicate once.

    Raises:
        ReplicationError: replication failed
    """
    logger.info("running replicate")
    try:
        return scheme.replicate(pp, replica_id, data)
    except ValueError as e:
        raise ReplicationError(f"replication failed: {e}") from e


def sample_proofs(scheme: DrgPoRep, pp, pub_inputs: PublicInputs,
                  priv_inputs: PrivateInputs, samples: int = SAMPLES) -> SampleStats:
    """
    Prove then verify ``samples`` times, sequentially.

    Raises:
        VerificationError: a sampled proof did not verify
    """
    logger.info("sampling proving & verifying (samples: %d)", samples)
    stats = SampleStats(samples=samples)

    for trial in range(samples):
        start = time.perf_counter_ns()
        proof = scheme.prove(pp, pub_inputs, priv_inputs)
        proving_ns = time.perf_counter_ns() - start

        start = time.perf_counter_ns()
        valid = scheme.verify(pp, pub_inputs, proof)
        verifying_ns = time.perf_counter_ns() - start

        if not valid:
            raise VerificationError(f"failed to verify proof of sample {trial}")
        stats.record(proving_ns, verifying_ns, proof)

    return stats


class VanillaBenchmark(Benchmark):
    """Setup, replicate, and sample prove/verify of DRG-PoRep."""

    name = "drgporep_vanilla_disk"
    description = "DRG-PoRep vanilla bench"

    def __init__(self, config: VanillaConfig, profiler: Optional[ProfilingScope] = None):
        self.config = config
        self.profiler = profiler or NoopProfiler()

    def run(self) -> BenchmarkResult:
        cfg = self.config
        hasher = get_hasher(cfg.hasher)
        rng = seeded_rng()
        challenges = [CHALLENGE_INDEX] * cfg.challenge_count

        logger.info("hasher: %s", hasher.name)
        logger.info("data_size: %s", prettyb(cfg.data_size))
        logger.info("challenge_count: %d", cfg.challenge_count)
        logger.info("m: %d", cfg.m)
        logger.info("generating fake data")

        nodes = cfg.nodes
        replica_id = generate_replica_id(rng)

        with file_backed_mmap_from_random_bytes(nodes) as data:
            sp = vanilla_setup_params(nodes, cfg.m, cfg.challenge_count)
            scheme = DrgPoRep(hasher)

            with self.profiler.stage("setup"):
                pp = run_setup(scheme, sp)

            start = time.perf_counter_ns()
            with self.profiler.stage("replicate"):
                tau, aux = replicate_stage(scheme, pp, replica_id, data)

            pub_inputs = PublicInputs(replica_id=replica_id, challenges=challenges, tau=tau)
            priv_inputs = PrivateInputs(tree_d=aux.tree_d, tree_r=aux.tree_r)
            replication_ns = time.perf_counter_ns() - start

            stats = sample_proofs(scheme, pp, pub_inputs, priv_inputs, cfg.samples)

        report_vanilla(stats, replication_ns, cfg.data_size)
        avg_proof_size = stats.avg_proof_size

        return BenchmarkResult(
            name=self.name,
            status=BenchmarkStatus.PASS,
            params={
                'data_size': cfg.data_size,
                'nodes': nodes,
                'm': cfg.m,
                'challenge_count': cfg.challenge_count,
                'hasher': hasher.name,
                'samples': cfg.samples,
                'prev_layer_beta_height': sp.prev_layer_beta_height,
            },
            metrics={
                'avg_proving_time_s': stats.avg_proving_time,
                'avg_verifying_time_s': stats.avg_verifying_time,
                'replication_time_s': duration_to_seconds(replication_ns),
                'avg_proof_size_bytes': avg_proof_size,
                'avg_proof_size': prettyb(avg_proof_size),
                'comm_d': tau.comm_d.hex(),
                'comm_r': tau.comm_r.hex(),
            },
        )
