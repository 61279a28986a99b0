"""
Error Taxonomy

Every error raised by the harness is fatal. The CLI reports the message
and exits; nothing is retried.
"""


class PoRepBenchError(Exception):
    """Base class for all harness errors."""
    pass


class ConfigError(PoRepBenchError, ValueError):
    """Malformed or unsupported configuration (unknown hasher, bad size)."""
    pass


class SetupError(PoRepBenchError):
    """Setup rejected the requested graph shape."""
    pass


class StorageError(PoRepBenchError):
    """Backing storage for the generated buffer could not be allocated or written."""
    pass


class ReplicationError(PoRepBenchError):
    """Replication of the generated buffer failed."""
    pass


class EncodingError(PoRepBenchError):
    """The standalone delay-encoding pass failed."""
    pass


class VerificationError(PoRepBenchError):
    """A proof produced during sampling did not verify."""
    pass
