"""Core exception classes for the Agents Arena application.

The simulation core itself never raises; these cover the persistence
boundary only.
"""


class PersistenceError(Exception):
    """Base exception for snapshot persistence operations."""

    pass


class SnapshotLoadError(PersistenceError):
    """Raised when a snapshot cannot be read from the store."""

    pass


class SnapshotSaveError(PersistenceError):
    """Raised when a snapshot cannot be written to the store."""

    pass


class SnapshotDecodeError(PersistenceError):
    """Raised when a stored payload is not a valid arena snapshot."""

    pass
