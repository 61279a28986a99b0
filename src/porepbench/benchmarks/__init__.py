"""
PoRep Benchmarks

Two mutually exclusive benchmarks:
A. Vanilla: setup, replicate once, then sample prove/verify 30 times
B. Encoding: time a single delay-encoding pass over a ZigZag graph
"""

from .base import Benchmark, BenchmarkResult, BenchmarkStatus
from .data import (
    FIXED_SEED,
    seeded_rng,
    generate_replica_id,
    file_backed_mmap_from_random_bytes,
    file_backed_mmap_from,
)
from .params import (
    nodes_for_size,
    prev_layer_beta_height,
    vanilla_setup_params,
    layered_setup_params,
    run_setup,
)
from .profiling import ProfilingScope, NoopProfiler, CProfileProfiler, profiler_for
from .stats import (
    SampleStats,
    duration_to_seconds,
    mean_duration,
    average_proof_size,
    encoding_rates,
    prettyb,
)
from .runner_vanilla import VanillaBenchmark, VanillaConfig, sample_proofs, SAMPLES
from .runner_encoding import EncodingBenchmark, EncodingConfig

__all__ = [
    'Benchmark',
    'BenchmarkResult',
    'BenchmarkStatus',
    'FIXED_SEED',
    'seeded_rng',
    'generate_replica_id',
    'file_backed_mmap_from_random_bytes',
    'file_backed_mmap_from',
    'nodes_for_size',
    'prev_layer_beta_height',
    'vanilla_setup_params',
    'layered_setup_params',
    'run_setup',
    'ProfilingScope',
    'NoopProfiler',
    'CProfileProfiler',
    'profiler_for',
    'SampleStats',
    'duration_to_seconds',
    'mean_duration',
    'average_proof_size',
    'encoding_rates',
    'prettyb',
    'VanillaBenchmark',
    'VanillaConfig',
    'sample_proofs',
    'SAMPLES',
    'EncodingBenchmark',
    'EncodingConfig',
]
