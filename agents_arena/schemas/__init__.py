"""Pydantic schemas for persisted arena documents.

This module exports all Pydantic schemas used throughout the application.
"""

from agents_arena.schemas.arena import ArenaSnapshotSchema
from agents_arena.schemas.arena import decode_snapshot
from agents_arena.schemas.arena import encode_snapshot
from agents_arena.schemas.arena import snapshot_document
from agents_arena.schemas.base import PersistedModel

__all__ = [
    "ArenaSnapshotSchema",
    "PersistedModel",
    "decode_snapshot",
    "encode_snapshot",
    "snapshot_document",
]
