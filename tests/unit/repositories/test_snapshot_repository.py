"""Unit tests for the in-memory snapshot repository."""
import json

import pytest

from agents_arena.core.exceptions import SnapshotDecodeError
from agents_arena.repositories.snapshot_repository import InMemorySnapshotRepository
from agents_arena.services.arena.simulator import ArenaSimulator

KEY = "user:demo-user:module:agents-arena"


class TestInMemorySnapshotRepository:
    """Tests for InMemorySnapshotRepository."""

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_missing_key_loads_none(self) -> None:
        assert await InMemorySnapshotRepository().load(KEY) is None

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_save_then_load(self, simulator: ArenaSimulator) -> None:
        """Test that a saved snapshot loads back equal."""
        for _ in range(40):
            simulator.step()
        repository = InMemorySnapshotRepository()

        await repository.save(KEY, simulator.snapshot())

        assert await repository.load(KEY) == simulator.snapshot()

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_save_replaces_previous(self, simulator: ArenaSimulator) -> None:
        repository = InMemorySnapshotRepository()
        await repository.save(KEY, simulator.snapshot())
        simulator.step()

        await repository.save(KEY, simulator.snapshot())

        assert len(repository.documents) == 1
        loaded = await repository.load(KEY)
        assert len(loaded.market_history) == 1

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_save_trims_to_limits(self, simulator: ArenaSimulator) -> None:
        """Test that documents keep the configured history and trade limits."""
        for _ in range(200):
            simulator.step()
        snapshot = simulator.snapshot()
        repository = InMemorySnapshotRepository(market_history_limit=25, recent_trades_limit=5)

        await repository.save(KEY, snapshot)

        document = json.loads(repository.documents[KEY])
        assert len(document["marketData"]) == 25
        assert len(document["recentTrades"]) == min(5, len(snapshot.recent_trades))
        loaded = await repository.load(KEY)
        assert loaded.market_history == snapshot.market_history[-25:]
        assert loaded.recent_trades == snapshot.recent_trades[:5]

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_keys_are_isolated(self, simulator: ArenaSimulator) -> None:
        repository = InMemorySnapshotRepository()

        await repository.save(KEY, simulator.snapshot())

        assert await repository.load("user:other-user:module:agents-arena") is None

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_delete(self, simulator: ArenaSimulator) -> None:
        repository = InMemorySnapshotRepository()
        await repository.save(KEY, simulator.snapshot())

        await repository.delete(KEY)
        await repository.delete(KEY)

        assert await repository.load(KEY) is None

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_invalid_document_raises(self) -> None:
        """Test that a corrupt stored document raises SnapshotDecodeError."""
        repository = InMemorySnapshotRepository()
        repository.documents[KEY] = json.dumps({"agents": []})

        with pytest.raises(SnapshotDecodeError):
            await repository.load(KEY)
