class NbodyError(Exception):
    """Base class for fatal run errors."""


class ConfigurationError(NbodyError, ValueError):
    pass


class AllocationError(NbodyError, MemoryError):
    """The particle state buffer could not be obtained."""


class ComputeDispatchError(NbodyError, RuntimeError):
    """A drift or kick phase failed to run to completion.

    The buffer contents are undefined once this is raised.
    """


class SnapshotIOError(NbodyError, OSError):
    """A snapshot file could not be opened or fully written."""
