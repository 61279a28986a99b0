"""
Base benchmark infrastructure.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Dict, Any, Optional
from enum import Enum
import json
import time


class BenchmarkStatus(Enum):
    """Benchmark result status. A failed run raises instead."""
    PASS = "PASS"


@dataclass
class BenchmarkResult:
    """Result of a single benchmark run."""
    name: str
    status: BenchmarkStatus
    params: Dict[str, Any] = field(default_factory=dict)   # What was configured
    metrics: Dict[str, Any] = field(default_factory=dict)  # What was measured
    duration_ms: float = 0.0

    def to_dict(self) -> Dict[str, Any]:
        return {
            'name': self.name,
            'status': self.status.value,
            'params': self.params,
            'metrics': self.metrics,
            'duration_ms': self.duration_ms,
        }

    def to_json(self, indent: int = 2) -> str:
        return json.dumps(self.to_dict(), indent=indent, default=str)

    def save(self, path: str):
        """Save result to file."""
        with open(path, 'w') as f:
            f.write(self.to_json())


class Benchmark(ABC):
    """Base class for benchmarks."""

    name: str = "benchmark"
    description: str = "Base benchmark"

    @abstractmethod
    def run(self) -> BenchmarkResult:
        """Run the benchmark."""
        pass

    def timed_run(self) -> BenchmarkResult:
        """Run with wall-clock timing. Errors propagate."""
        start = time.perf_counter()
        result = self.run()
        result.duration_ms = (time.perf_counter() - start) * 1000
        return result
