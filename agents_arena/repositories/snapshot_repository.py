"""Snapshot repositories for persisting arena state.

This module defines the load/save contract the arena runner persists through
and two implementations:
- InMemorySnapshotRepository: process-local store of JSON documents
- SqlSnapshotRepository: JSON documents in the ``module_data`` table

Both store the same JSON document layout, produced by
``agents_arena.schemas.arena``. Saved documents are trimmed to the configured
market history and trade log limits.
"""
import logging
from abc import ABC
from abc import abstractmethod

from sqlalchemy import delete
from sqlalchemy import select
from sqlalchemy.dialects.postgresql import insert
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.ext.asyncio import async_sessionmaker
from sqlalchemy.sql import func

from agents_arena.core.exceptions import SnapshotLoadError
from agents_arena.core.exceptions import SnapshotSaveError
from agents_arena.models.module_data import ModuleData
from agents_arena.models.module_data import parse_module_data_key
from agents_arena.schemas.arena import decode_snapshot
from agents_arena.schemas.arena import encode_snapshot
from agents_arena.schemas.arena import snapshot_document
from agents_arena.services.arena.simulator import ArenaSnapshot

logger = logging.getLogger(__name__)


class SnapshotRepository(ABC):
    """Base class for arena snapshot stores.

    Keys follow the ``user:{user_id}:module:{module_key}`` layout.
    """

    def __init__(
        self,
        market_history_limit: int | None = 100,
        recent_trades_limit: int | None = 20,
    ) -> None:
        """Initialize repository trimming limits.

        Args:
            market_history_limit: Newest market samples kept per document
                (None keeps all).
            recent_trades_limit: Most recent trades kept per document
                (None keeps all).
        """
        self.market_history_limit = market_history_limit
        self.recent_trades_limit = recent_trades_limit

    @abstractmethod
    async def load(self, key: str) -> ArenaSnapshot | None:
        """Load the snapshot stored under ``key``.

        Returns:
            The snapshot, or None if nothing is stored.

        Raises:
            SnapshotLoadError: If the store cannot be read.
            SnapshotDecodeError: If the stored document is invalid.
        """
        pass

    @abstractmethod
    async def save(self, key: str, snapshot: ArenaSnapshot) -> None:
        """Insert or replace the snapshot stored under ``key``.

        Raises:
            SnapshotSaveError: If the store cannot be written.
        """
        pass

    @abstractmethod
    async def delete(self, key: str) -> None:
        """Remove the snapshot stored under ``key`` (no-op if absent)."""
        pass


class InMemorySnapshotRepository(SnapshotRepository):
    """Keeps serialized snapshots in a dict.

    Documents go through the same JSON encoding as the SQL store, so a load
    returns exactly what a persistent store would.
    """

    def __init__(
        self,
        market_history_limit: int | None = 100,
        recent_trades_limit: int | None = 20,
    ) -> None:
        super().__init__(market_history_limit, recent_trades_limit)
        self.documents: dict[str, str] = {}

    async def load(self, key: str) -> ArenaSnapshot | None:
        document = self.documents.get(key)
        if document is None:
            logger.debug(f"No snapshot stored under {key}")
            return None
        return decode_snapshot(document)

    async def save(self, key: str, snapshot: ArenaSnapshot) -> None:
        self.documents[key] = encode_snapshot(
            snapshot, self.market_history_limit, self.recent_trades_limit
        )
        logger.debug(f"Saved snapshot under {key}")

    async def delete(self, key: str) -> None:
        self.documents.pop(key, None)


class SqlSnapshotRepository(SnapshotRepository):
    """Stores snapshots as JSON documents in the ``module_data`` table.

    Uses PostgreSQL's INSERT ... ON CONFLICT DO UPDATE so that concurrent
    saves of the same key never fail on the unique constraint.
    Driver-level connection failures (OSError) are wrapped the same way as
    SQLAlchemy errors.

    Example:
        ```python
        repo = SqlSnapshotRepository(session_factory)
        await repo.save("user:demo:module:agents-arena", simulator.snapshot())
        snapshot = await repo.load("user:demo:module:agents-arena")
        ```
    """

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        market_history_limit: int | None = 100,
        recent_trades_limit: int | None = 20,
    ) -> None:
        """Initialize repository with a session factory.

        Args:
            session_factory: Factory for creating async database sessions
            market_history_limit: Newest market samples kept per document
            recent_trades_limit: Most recent trades kept per document
        """
        super().__init__(market_history_limit, recent_trades_limit)
        self.session_factory = session_factory

    async def load(self, key: str) -> ArenaSnapshot | None:
        try:
            async with self.session_factory() as session:
                result = await session.execute(
                    select(ModuleData.data).where(ModuleData.key == key)
                )
                document = result.scalar_one_or_none()
        except (SQLAlchemyError, OSError) as e:
            logger.error(f"Failed to load snapshot {key}: {e}")
            raise SnapshotLoadError(f"Database error loading snapshot {key}: {str(e)}") from e

        if document is None:
            logger.debug(f"No snapshot stored under {key}")
            return None
        return decode_snapshot(document)

    async def save(self, key: str, snapshot: ArenaSnapshot) -> None:
        user_id, module_key = parse_module_data_key(key)
        document = snapshot_document(
            snapshot, self.market_history_limit, self.recent_trades_limit
        )

        stmt = insert(ModuleData).values(
            key=key, user_id=user_id, module_key=module_key, data=document
        )
        stmt = stmt.on_conflict_do_update(
            index_elements=["key"],
            set_={"data": stmt.excluded.data, "updated_at": func.now()},
        )

        async with self.session_factory() as session:
            try:
                await session.execute(stmt)
                await session.commit()
            except (SQLAlchemyError, OSError) as e:
                await session.rollback()
                logger.error(f"Failed to save snapshot {key}: {e}")
                raise SnapshotSaveError(
                    f"Database error saving snapshot {key}: {str(e)}"
                ) from e

        logger.debug(f"Saved snapshot under {key}")

    async def delete(self, key: str) -> None:
        async with self.session_factory() as session:
            try:
                await session.execute(delete(ModuleData).where(ModuleData.key == key))
                await session.commit()
            except (SQLAlchemyError, OSError) as e:
                await session.rollback()
                logger.error(f"Failed to delete snapshot {key}: {e}")
                raise SnapshotSaveError(
                    f"Database error deleting snapshot {key}: {str(e)}"
                ) from e
