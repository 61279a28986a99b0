"""
Profiling scopes.

Stages that may be profiled are bracketed by ``profiler.stage(name)``.
The profiler is chosen once from configuration; the no-op variant leaves
results untouched.
"""

from abc import ABC, abstractmethod
from contextlib import contextmanager
from pathlib import Path
from typing import Optional
import cProfile
import logging

logger = logging.getLogger(__name__)


class ProfilingScope(ABC):
    """Start/stop hooks around a named stage."""

    @abstractmethod
    def start(self, stage: str):
        pass

    @abstractmethod
    def stop(self):
        pass

    @contextmanager
    def stage(self, name: str):
        self.start(name)
        try:
            yield
        finally:
            self.stop()


class NoopProfiler(ProfilingScope):
    def start(self, stage: str):
        pass

    def stop(self):
        pass


class CProfileProfiler(ProfilingScope):
    """
    CPU profile per stage, written to ``<output_dir>/<stage>.profile``.

    Load the dumps with ``pstats.Stats``.
    """

    def __init__(self, output_dir: Path = Path('.')):
        self.output_dir = Path(output_dir)
        self._profile: Optional[cProfile.Profile] = None
        self._stage: Optional[str] = None

    def start(self, stage: str):
        if self._profile is not None:
            raise RuntimeError(f"profiler already running stage {self._stage!r}")
        self._stage = stage
        self._profile = cProfile.Profile()
        self._profile.enable()

    def stop(self):
        if self._profile is None:
            raise RuntimeError("profiler is not running")
        self._profile.disable()
        path = self.output_dir / f"{self._stage}.profile"
        self._profile.dump_stats(str(path))
        logger.debug("wrote profile %s", path)
        self._profile = None
        self._stage = None


def profiler_for(enabled: bool, output_dir: Path = Path('.')) -> ProfilingScope:
    return CProfileProfiler(output_dir) if enabled else NoopProfiler()
