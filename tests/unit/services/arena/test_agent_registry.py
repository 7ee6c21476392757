"""Unit tests for the arena agent registry."""
import pytest

from agents_arena.services.arena.agent_protocol import AgentProfile
from agents_arena.services.arena.agent_protocol import Position
from agents_arena.services.arena.agent_registry import DEFAULT_PROFILE
from agents_arena.services.arena.agent_registry import DEFAULT_ROSTER
from agents_arena.services.arena.agent_registry import RosterEntry
from agents_arena.services.arena.agent_registry import build_agents
from agents_arena.services.arena.agent_registry import get_profile


class TestDefaultRoster:
    """Tests for the default roster."""

    @pytest.mark.unit
    def test_roster_order(self) -> None:
        """Test the roster ids in evaluation order."""
        assert [entry.id for entry in DEFAULT_ROSTER] == [
            "deepseek",
            "grok4",
            "hosv3",
            "claude",
            "qwen3",
            "gpt5",
        ]

    @pytest.mark.unit
    def test_ids_and_names_unique(self) -> None:
        assert len({entry.id for entry in DEFAULT_ROSTER}) == len(DEFAULT_ROSTER)
        assert len({entry.name for entry in DEFAULT_ROSTER}) == len(DEFAULT_ROSTER)

    @pytest.mark.unit
    def test_mean_reversion_agents(self) -> None:
        """Test that only HOS v3 and Claude fade RSI extremes."""
        mean_reverting = {entry.id for entry in DEFAULT_ROSTER if entry.profile.mean_reversion}

        assert mean_reverting == {"hosv3", "claude"}


class TestGetProfile:
    """Tests for get_profile."""

    @pytest.mark.unit
    @pytest.mark.parametrize(
        "agent_id,aggressiveness",
        [
            ("deepseek", 0.8),
            ("grok4", 1.2),
            ("hosv3", 0.6),
            ("claude", 0.5),
            ("qwen3", 0.9),
            ("gpt5", 0.7),
        ],
    )
    def test_known_agents(self, agent_id: str, aggressiveness: float) -> None:
        assert get_profile(agent_id).aggressiveness == aggressiveness

    @pytest.mark.unit
    def test_unknown_agent_gets_default(self) -> None:
        """Test that unknown ids resolve to the default profile."""
        assert get_profile("nonexistent") == DEFAULT_PROFILE
        assert DEFAULT_PROFILE == AgentProfile(0.7, mean_reversion=False)


class TestBuildAgents:
    """Tests for build_agents."""

    @pytest.mark.unit
    def test_builds_flat_agents(self) -> None:
        """Test that every roster entry becomes a flat agent."""
        agents = build_agents(3000.0)

        assert [agent.id for agent in agents] == [entry.id for entry in DEFAULT_ROSTER]
        for agent in agents:
            assert agent.balance == 3000.0
            assert agent.initial_balance == 3000.0
            assert agent.position == Position.NEUTRAL
            assert agent.total_pnl == 0.0

    @pytest.mark.unit
    def test_custom_roster(self) -> None:
        roster = (RosterEntry("solo", "Solo", "Lone wolf", AgentProfile(1.0)),)

        agents = build_agents(1000.0, roster)

        assert len(agents) == 1
        assert agents[0].name == "Solo"
        assert agents[0].profile.aggressiveness == 1.0
