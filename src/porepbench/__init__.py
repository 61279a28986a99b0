"""
porepbench: Proof-of-Replication benchmarking harness

Measures setup, replication, proving and verification of DRG-PoRep, and
the throughput of the standalone delay-encoding pass.

Usage:
    from porepbench.benchmarks import VanillaBenchmark, VanillaConfig

    result = VanillaBenchmark(VanillaConfig(data_size=1024)).run()
    print(result.metrics['avg_proof_size'])

Command line:
    porepbench vanilla --size 1
    porepbench encoding --size 1024
"""

from .errors import (
    PoRepBenchError,
    ConfigError,
    SetupError,
    StorageError,
    ReplicationError,
    EncodingError,
    VerificationError,
)

__version__ = "0.1.0"

__all__ = [
    "__version__",
    "PoRepBenchError",
    "ConfigError",
    "SetupError",
    "StorageError",
    "ReplicationError",
    "EncodingError",
    "VerificationError",
]
