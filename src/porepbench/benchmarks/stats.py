"""
Sample statistics and reporting.

Durations are accumulated as integer nanoseconds from a monotonic clock
and only turned into fractional seconds (whole seconds plus sub-second
nanoseconds / 1e9) for reporting.
"""

from dataclasses import dataclass, field
from typing import List, Tuple
import logging

logger = logging.getLogger(__name__)

NANOS_PER_SEC = 1_000_000_000
GIB = 1 << 30

_UNITS = ("KiB", "MiB", "GiB", "TiB", "PiB", "EiB")


def duration_to_seconds(nanos: int) -> float:
    secs, subsec_nanos = divmod(nanos, NANOS_PER_SEC)
    return subsec_nanos / 1e9 + secs


def mean_duration(total_nanos: int, samples: int) -> float:
    """Mean of ``samples`` durations, truncated to whole nanoseconds."""
    if samples <= 0:
        raise ValueError(f"samples must be positive, got {samples}")
    return duration_to_seconds(total_nanos // samples)


def average_proof_size(proof_sizes: List[int], samples: int) -> int:
    """Total serialized length divided by the sample count."""
    if samples <= 0:
        raise ValueError(f"samples must be positive, got {samples}")
    return sum(proof_sizes) // samples


def prettyb(num: int) -> str:
    """
    Render a byte count with binary units.

    >>> prettyb(512)
    '512 B'
    >>> prettyb(1536)
    '1.50 KiB'
    >>> prettyb(1048575)
    '1.00 MiB'
    """
    if num < 1024:
        return f"{num} B"
    value = float(num)
    for unit in _UNITS:
        value /= 1024
        if round(value, 2) < 1024 or unit == _UNITS[-1]:
            return f"{value:.2f} {unit}"


def encoding_rates(elapsed_nanos: int, data_size: int) -> Tuple[float, float]:
    """
    Normalize an encoding time by the encoded size.

    Returns:
        (seconds per byte, seconds per GiB)
    """
    if data_size <= 0:
        raise ValueError(f"data size must be positive, got {data_size}")
    per_byte = duration_to_seconds(elapsed_nanos) / data_size
    return per_byte, per_byte * GIB


@dataclass
class SampleStats:
    """Running totals of the proving/verifying sampling loop."""
    samples: int
    total_proving_ns: int = 0
    total_verifying_ns: int = 0
    proofs: List = field(default_factory=list)
    proof_sizes: List[int] = field(default_factory=list)

    def record(self, proving_ns: int, verifying_ns: int, proof):
        """Add one trial. The proof is serialized once, here."""
        self.total_proving_ns += proving_ns
        self.total_verifying_ns += verifying_ns
        self.proofs.append(proof)
        self.proof_sizes.append(len(proof.serialize()))

    @property
    def avg_proving_time(self) -> float:
        return mean_duration(self.total_proving_ns, self.samples)

    @property
    def avg_verifying_time(self) -> float:
        return mean_duration(self.total_verifying_ns, self.samples)

    @property
    def avg_proof_size(self) -> int:
        return average_proof_size(self.proof_sizes, self.samples)


def report_vanilla(stats: SampleStats, replication_ns: int, data_size: int):
    """Log the outcome of a vanilla run."""
    logger.info("data_size: %s", prettyb(data_size))
    logger.info("avg_proving_time: %s seconds", stats.avg_proving_time)
    logger.info("avg_verifying_time: %s seconds", stats.avg_verifying_time)
    logger.info("replication_time: %s seconds", duration_to_seconds(replication_ns))
    logger.info("avg_proof_size: %s", prettyb(stats.avg_proof_size))


def report_encoding(elapsed_ns: int, data_size: int):
    """Log the outcome of an encoding run."""
    per_byte, per_gib = encoding_rates(elapsed_ns, data_size)
    logger.info("encoding_time: %s seconds", duration_to_seconds(elapsed_ns))
    logger.info("encoding time/byte: %s seconds", per_byte)
    logger.info("encoding time/GiB: %s seconds", per_gib)
