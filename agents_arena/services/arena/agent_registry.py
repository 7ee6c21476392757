"""Registry of arena agents.

This module holds the starting roster of the arena and resolves trading
profiles for agents restored from persisted snapshots.
"""
from dataclasses import dataclass

from agents_arena.core.constants import ArenaPolicy
from agents_arena.services.arena.agent_protocol import AgentProfile
from agents_arena.services.arena.agent_protocol import TradingAgent


@dataclass(frozen=True)
class RosterEntry:
    """Identity and profile of one roster agent."""

    id: str
    name: str
    personality: str
    profile: AgentProfile


DEFAULT_ROSTER: tuple[RosterEntry, ...] = (
    RosterEntry("deepseek", "Deepseek", "Aggressive trend follower", AgentProfile(0.8)),
    RosterEntry("grok4", "Grok 4", "High frequency scalper", AgentProfile(1.2)),
    RosterEntry(
        "hosv3", "HOS v3", "Mean reversion specialist", AgentProfile(0.6, mean_reversion=True)
    ),
    RosterEntry(
        "claude", "Claude", "Conservative value investor", AgentProfile(0.5, mean_reversion=True)
    ),
    RosterEntry("qwen3", "QWEN3", "Momentum trader", AgentProfile(0.9)),
    RosterEntry("gpt5", "GPT5", "Balanced portfolio manager", AgentProfile(0.7)),
)

# Agent id to roster entry mapping
ROSTER_BY_ID: dict[str, RosterEntry] = {entry.id: entry for entry in DEFAULT_ROSTER}

DEFAULT_PROFILE = AgentProfile(ArenaPolicy.DEFAULT_AGGRESSIVENESS)


def get_profile(agent_id: str) -> AgentProfile:
    """Get the trading profile for an agent id.

    Args:
        agent_id: Agent identifier (e.g., "claude").

    Returns:
        The roster profile, or the default profile for unknown agents.
    """
    entry = ROSTER_BY_ID.get(agent_id)
    return entry.profile if entry else DEFAULT_PROFILE


def build_agents(
    initial_balance: float, roster: tuple[RosterEntry, ...] = DEFAULT_ROSTER
) -> list[TradingAgent]:
    """Create fresh agents for every roster entry, in roster order.

    Args:
        initial_balance: Starting cash balance of every agent.
        roster: Roster to instantiate.

    Returns:
        List of flat agents with zeroed statistics.
    """
    return [
        TradingAgent.fresh(
            id=entry.id,
            name=entry.name,
            personality=entry.personality,
            profile=entry.profile,
            initial_balance=initial_balance,
        )
        for entry in roster
    ]
