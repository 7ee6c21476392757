"""Aggregate statistics for arena snapshots.

Pure functions recomputed from the agent list after every step. Stats are
never mutated independently of the agents they describe.
"""
from collections.abc import Sequence
from dataclasses import dataclass

from agents_arena.services.arena.agent_protocol import TradingAgent


@dataclass(frozen=True)
class ArenaStats:
    """Arena-wide aggregates.

    Attributes:
        total_bank_value: Sum of balance + unrealized P&L across agents
        total_trades: Sum of closed trades across agents
        avg_win_rate: Mean of agent win rates
        market_price: Price of the latest tick
        market_volatility: Volatility parameter of the price process
        top_performer: Name of the agent with the highest total P&L
        bottom_performer: Name of the agent with the lowest total P&L
    """

    total_bank_value: float
    total_trades: int
    avg_win_rate: float
    market_price: float
    market_volatility: float
    top_performer: str
    bottom_performer: str


def rank_agents(agents: Sequence[TradingAgent]) -> list[TradingAgent]:
    """Agents ordered by total P&L, best first.

    The sort is stable: agents with equal total P&L keep roster order.
    """
    return sorted(agents, key=lambda agent: agent.total_pnl, reverse=True)


def compute_arena_stats(
    agents: Sequence[TradingAgent], market_price: float, market_volatility: float
) -> ArenaStats:
    """Compute stats for the given agents at the current price.

    Args:
        agents: Agents after this tick's updates, in roster order.
        market_price: Price of the current tick.
        market_volatility: Volatility parameter of the price process.

    Returns:
        ArenaStats. Performer names are empty when there are no agents.
    """
    if not agents:
        return initial_stats(0.0, market_price, market_volatility)

    ranked = rank_agents(agents)

    return ArenaStats(
        total_bank_value=sum(agent.balance + agent.unrealized_pnl for agent in agents),
        total_trades=sum(agent.trade_count for agent in agents),
        avg_win_rate=sum(agent.win_rate for agent in agents) / len(agents),
        market_price=market_price,
        market_volatility=market_volatility,
        top_performer=ranked[0].name,
        bottom_performer=ranked[-1].name,
    )


def initial_stats(
    total_bank_value: float, market_price: float, market_volatility: float
) -> ArenaStats:
    """Zero-state stats used before the first step and after a reset."""
    return ArenaStats(
        total_bank_value=total_bank_value,
        total_trades=0,
        avg_win_rate=0.0,
        market_price=market_price,
        market_volatility=market_volatility,
        top_performer="",
        bottom_performer="",
    )
