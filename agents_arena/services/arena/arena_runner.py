"""Runner that drives an arena simulation and persists its snapshots.

The simulator is synchronous and knows nothing about time or storage. This
runner steps it at a fixed cadence, saves snapshots through a
SnapshotRepository at most once per autosave window, and restores the last
saved arena on startup. Persistence failures are logged and reported, never
raised into the tick loop.
"""
import asyncio
import logging
import time
from collections.abc import Callable
from dataclasses import dataclass

from agents_arena.core.exceptions import PersistenceError
from agents_arena.models.module_data import parse_module_data_key
from agents_arena.repositories.snapshot_repository import SnapshotRepository
from agents_arena.services.arena.simulator import ArenaSimulator
from agents_arena.services.arena.simulator import StepResult

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SaveOutcome:
    """Result of a snapshot save attempt."""

    success: bool
    error: str | None = None


class ArenaRunner:
    """Steps an ArenaSimulator on a timer with debounced persistence.

    Example:
        >>> runner = ArenaRunner(simulator, repository, "user:demo:module:agents-arena")
        >>> await runner.restore()
        >>> await runner.run(max_ticks=60)
    """

    def __init__(
        self,
        simulator: ArenaSimulator,
        repository: SnapshotRepository,
        key: str,
        tick_interval: float = 1.0,
        autosave_debounce: float = 5.0,
        monotonic: Callable[[], float] = time.monotonic,
    ) -> None:
        """Initialize the runner.

        Args:
            simulator: Simulator to drive.
            repository: Snapshot store.
            key: Storage key (``user:{user_id}:module:{module_key}``).
            tick_interval: Seconds between steps in ``run()``.
            autosave_debounce: Minimum seconds between automatic saves.
            monotonic: Time source for the autosave window.

        Raises:
            ValueError: If the key is malformed or an interval is negative.
        """
        parse_module_data_key(key)
        if tick_interval < 0 or autosave_debounce < 0:
            msg = (
                f"Intervals cannot be negative, got tick_interval={tick_interval}, "
                f"autosave_debounce={autosave_debounce}"
            )
            raise ValueError(msg)

        self.simulator = simulator
        self.repository = repository
        self.key = key
        self.tick_interval = tick_interval
        self.autosave_debounce = autosave_debounce
        self.monotonic = monotonic

        self._dirty = False
        self._last_save_at: float | None = None
        self._running = False
        self._save_lock = asyncio.Lock()

    @property
    def is_dirty(self) -> bool:
        """Whether the simulator holds state newer than the last save."""
        return self._dirty

    @property
    def is_running(self) -> bool:
        return self._running

    async def restore(self) -> bool:
        """Load the persisted arena into the simulator.

        A missing snapshot and a failed load both leave the simulator in its
        reset state.

        Returns:
            True if a persisted snapshot was restored.
        """
        try:
            snapshot = await self.repository.load(self.key)
        except PersistenceError as e:
            logger.error(f"Failed to load arena {self.key}, starting fresh: {e}")
            self.simulator.reset()
            return False

        if snapshot is None:
            logger.info(f"No persisted arena for {self.key}, using initial state")
            self.simulator.reset()
            return False

        self.simulator.restore(snapshot)
        self._dirty = False
        return True

    def tick(self) -> StepResult:
        """Advance the simulator by one step."""
        result = self.simulator.step()
        self._dirty = True

        if result.new_trades:
            logger.info(
                f"Tick @ {result.snapshot.current_price:.2f}: "
                f"{len(result.new_trades)} trade(s), "
                f"bank value {result.snapshot.stats.total_bank_value:.2f}"
            )
        return result

    async def save_now(self) -> SaveOutcome:
        """Persist the current snapshot immediately.

        Never raises for storage failures; the simulator state is untouched
        either way.
        """
        snapshot = self.simulator.snapshot()
        async with self._save_lock:
            try:
                await self.repository.save(self.key, snapshot)
            except PersistenceError as e:
                logger.error(f"Failed to save arena {self.key}: {e}")
                return SaveOutcome(success=False, error=str(e))

        self._last_save_at = self.monotonic()
        # A step may have landed while the save was in flight
        if self.simulator.snapshot() is snapshot:
            self._dirty = False
        logger.debug(f"Arena {self.key} saved")
        return SaveOutcome(success=True)

    async def maybe_autosave(self) -> SaveOutcome | None:
        """Save if there are unsaved changes and the autosave window elapsed.

        Returns:
            The save outcome, or None if no save was due.
        """
        if not self._dirty:
            return None
        now = self.monotonic()
        if self._last_save_at is not None and now - self._last_save_at < self.autosave_debounce:
            return None
        return await self.save_now()

    async def join_team(self, agent_name: str) -> str | None:
        """Join an agent's team, or leave it if already joined.

        The selection is saved immediately.

        Args:
            agent_name: Display name of the agent.

        Returns:
            The team joined after the toggle (None if left).

        Raises:
            ValueError: If no agent has that name.
        """
        self._require_agent(agent_name)
        current = self.simulator.snapshot().joined_team
        team = None if current == agent_name else agent_name
        self.simulator.set_joined_team(team)
        self._dirty = True

        if team is None:
            logger.info(f"Left team {agent_name}")
        else:
            logger.info(f"Joined team {agent_name}")

        await self.save_now()
        return team

    async def reset(self) -> SaveOutcome:
        """Reset the arena and persist the reset state immediately."""
        self.simulator.reset()
        self._dirty = True
        return await self.save_now()

    async def run(self, max_ticks: int | None = None) -> int:
        """Step the arena every ``tick_interval`` seconds until stopped.

        Autosaves after each tick when due, and saves any remaining changes
        when the loop exits (including on cancellation).

        Args:
            max_ticks: Stop after this many ticks (None runs until stop()).

        Returns:
            Number of ticks executed.
        """
        self._running = True
        ticks = 0
        logger.info(f"Starting arena {self.key} (tick every {self.tick_interval}s)")

        try:
            while self._running:
                try:
                    self.tick()
                    ticks += 1
                    await self.maybe_autosave()
                except asyncio.CancelledError:
                    raise
                except Exception as e:
                    logger.error(f"Arena tick failed: {e}", exc_info=True)

                if max_ticks is not None and ticks >= max_ticks:
                    break
                await asyncio.sleep(self.tick_interval)
        finally:
            self._running = False
            if self._dirty:
                await self.save_now()
            logger.info(f"Stopped arena {self.key} after {ticks} ticks")

        return ticks

    def stop(self) -> None:
        """Ask the run loop to exit after the current tick."""
        self._running = False

    def _require_agent(self, agent_name: str) -> None:
        names = {agent.name for agent in self.simulator.snapshot().agents}
        if agent_name not in names:
            msg = f"Unknown agent: {agent_name}. Available: {', '.join(sorted(names))}"
            raise ValueError(msg)
