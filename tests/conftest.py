"""Shared pytest fixtures for the arena test suite.

Environment variables are set before importing application code so that
Settings picks up test configuration.
"""
import os

os.environ["ENVIRONMENT"] = "test"
os.environ["LOG_LEVEL"] = "WARNING"

from collections.abc import Callable
from collections.abc import Sequence

import pytest

from agents_arena.core.config import Settings
from agents_arena.core.config import get_settings
from agents_arena.services.arena.agent_protocol import AgentProfile
from agents_arena.services.arena.agent_protocol import Position
from agents_arena.services.arena.agent_protocol import TradingAgent
from agents_arena.services.arena.simulator import ArenaSimulator
from agents_arena.utils.structured_logging import configure_structured_logging


class ScriptedRandomSource:
    """RandomSource returning a fixed sequence of uniform draws.

    Raises AssertionError when more draws are requested than scripted, so
    tests also pin down how many draws a component consumes.
    """

    def __init__(self, values: Sequence[float]) -> None:
        self.values = list(values)
        self.consumed = 0

    def next_uniform(self) -> float:
        if self.consumed >= len(self.values):
            raise AssertionError(f"Random source exhausted after {self.consumed} draws")
        value = self.values[self.consumed]
        self.consumed += 1
        return value


class FixedClock:
    """Manually advanced millisecond clock."""

    def __init__(self, now_ms: int = 1_700_000_000_000) -> None:
        self.now_ms = now_ms

    def __call__(self) -> int:
        return self.now_ms

    def advance(self, ms: int = 1000) -> None:
        self.now_ms += ms


@pytest.fixture(scope="session", autouse=True)
def configure_logging():
    """Configure structured logging for tests."""
    configure_structured_logging(log_level=os.environ["LOG_LEVEL"])


@pytest.fixture(autouse=True)
def clear_settings_cache():
    """Ensure every test sees freshly loaded settings."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def scripted_random() -> type[ScriptedRandomSource]:
    """Factory for scripted random sources."""
    return ScriptedRandomSource


@pytest.fixture
def clock() -> FixedClock:
    return FixedClock()


@pytest.fixture
def settings() -> Settings:
    """Default settings with a fixed seed."""
    return Settings(random_seed=42)


@pytest.fixture
def simulator(settings: Settings, clock: FixedClock) -> ArenaSimulator:
    """Seeded simulator with the default roster."""
    return ArenaSimulator.from_settings(settings, clock=clock)


@pytest.fixture
def make_agent() -> Callable[..., TradingAgent]:
    """Factory for agents with sensible defaults.

    Example:
        agent = make_agent(position=Position.LONG, entry_price=50000, position_size=0.01)
    """

    def _make_agent(
        id: str = "deepseek",
        name: str = "Deepseek",
        aggressiveness: float = 0.8,
        mean_reversion: bool = False,
        initial_balance: float = 3000.0,
        balance: float | None = None,
        position: Position = Position.NEUTRAL,
        entry_price: float = 0.0,
        position_size: float = 0.0,
        **overrides,
    ) -> TradingAgent:
        return TradingAgent(
            id=id,
            name=name,
            personality="test agent",
            profile=AgentProfile(aggressiveness, mean_reversion),
            initial_balance=initial_balance,
            balance=initial_balance if balance is None else balance,
            position=position,
            entry_price=entry_price,
            position_size=position_size,
            **overrides,
        )

    return _make_agent
