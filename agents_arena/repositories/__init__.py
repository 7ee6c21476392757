"""Persistence repositories for arena snapshots."""

from .snapshot_repository import InMemorySnapshotRepository
from .snapshot_repository import SnapshotRepository
from .snapshot_repository import SqlSnapshotRepository

__all__ = [
    "InMemorySnapshotRepository",
    "SnapshotRepository",
    "SqlSnapshotRepository",
]
