"""Arena simulation services.

This package contains the market simulation in which autonomous trading
agents compete: price generation, decisions, bookkeeping and the runner that
drives and persists it.
"""

from agents_arena.services.arena.agent_protocol import AgentProfile
from agents_arena.services.arena.agent_protocol import MarketSample
from agents_arena.services.arena.agent_protocol import Position
from agents_arena.services.arena.agent_protocol import Trade
from agents_arena.services.arena.agent_protocol import TradeType
from agents_arena.services.arena.agent_protocol import TradingAgent
from agents_arena.services.arena.agent_registry import DEFAULT_ROSTER
from agents_arena.services.arena.agent_registry import get_profile
from agents_arena.services.arena.analytics import ArenaStats
from agents_arena.services.arena.decision_policy import AgentDecisionPolicy
from agents_arena.services.arena.price_process import PriceProcess
from agents_arena.services.arena.random_source import RandomSource
from agents_arena.services.arena.random_source import SeededRandomSource
from agents_arena.services.arena.simulator import ArenaSimulator
from agents_arena.services.arena.simulator import ArenaSnapshot
from agents_arena.services.arena.simulator import StepResult

__all__ = [
    "AgentDecisionPolicy",
    "AgentProfile",
    "ArenaSimulator",
    "ArenaSnapshot",
    "ArenaStats",
    "DEFAULT_ROSTER",
    "MarketSample",
    "Position",
    "PriceProcess",
    "RandomSource",
    "SeededRandomSource",
    "StepResult",
    "Trade",
    "TradeType",
    "TradingAgent",
    "get_profile",
]
