"""Arena simulator orchestrating one market tick at a time.

This module provides the engine that advances the arena. Each step:
1. Draws the next market sample from the price process
2. Computes indicators over the price history (including the new sample)
3. Marks every agent to market and asks the decision policy for a trade
4. Applies closes and opens to agent state
5. Recomputes arena stats and publishes a new immutable snapshot

The simulator is synchronous and holds no timers; callers decide the cadence.
"""
import logging
from collections.abc import Sequence
from dataclasses import dataclass
from dataclasses import replace

from agents_arena.core.config import Settings
from agents_arena.indicators.technical import compute_indicators
from agents_arena.services.arena.agent_protocol import MarketSample
from agents_arena.services.arena.agent_protocol import Position
from agents_arena.services.arena.agent_protocol import Trade
from agents_arena.services.arena.agent_protocol import TradeType
from agents_arena.services.arena.agent_protocol import TradingAgent
from agents_arena.services.arena.agent_registry import DEFAULT_ROSTER
from agents_arena.services.arena.agent_registry import RosterEntry
from agents_arena.services.arena.agent_registry import build_agents
from agents_arena.services.arena.analytics import ArenaStats
from agents_arena.services.arena.analytics import compute_arena_stats
from agents_arena.services.arena.analytics import initial_stats
from agents_arena.services.arena.decision_policy import AgentDecisionPolicy
from agents_arena.services.arena.price_process import Clock
from agents_arena.services.arena.price_process import PriceProcess
from agents_arena.services.arena.price_process import wall_clock_ms
from agents_arena.services.arena.random_source import RandomSource
from agents_arena.services.arena.random_source import SeededRandomSource

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ArenaSnapshot:
    """Complete, self-consistent state of an arena.

    This is the unit handed to persistence and to renderers. The random
    source state is not part of it: a restored arena continues from
    ``current_price`` with fresh randomness.
    """

    agents: tuple[TradingAgent, ...]
    market_history: tuple[MarketSample, ...]
    current_price: float
    stats: ArenaStats
    recent_trades: tuple[Trade, ...]
    joined_team: str | None
    last_updated_ms: int


@dataclass(frozen=True)
class StepResult:
    """Outcome of one simulator step."""

    snapshot: ArenaSnapshot
    new_trades: tuple[Trade, ...]


def apply_trade(agent: TradingAgent, trade: Trade) -> TradingAgent:
    """Return ``agent`` updated for a trade it emitted.

    A close realizes the P&L into balance and updates the running win rate
    with the pre-increment trade count. An open records entry price and size;
    unrealized P&L stays 0 until the next mark to market.
    """
    if trade.type == TradeType.CLOSE:
        pnl = trade.pnl
        won = 1 if pnl > 0 else 0
        realized = agent.realized_pnl + pnl
        return replace(
            agent,
            balance=agent.balance + pnl,
            position=Position.NEUTRAL,
            entry_price=0.0,
            position_size=0.0,
            unrealized_pnl=0.0,
            realized_pnl=realized,
            total_pnl=realized,
            trade_count=agent.trade_count + 1,
            win_rate=(agent.win_rate * agent.trade_count + won) / (agent.trade_count + 1),
        )

    return replace(
        agent,
        position=Position(trade.type.value),
        entry_price=trade.price,
        position_size=trade.size,
        unrealized_pnl=0.0,
        total_pnl=agent.realized_pnl,
    )


class ArenaSimulator:
    """Advances the arena one tick per ``step()`` call.

    State is only ever replaced wholesale: ``step()``, ``restore()`` and
    ``reset()`` build a complete new snapshot before publishing it, so a
    snapshot obtained from the simulator is never partially updated.

    Example:
        >>> simulator = ArenaSimulator.from_settings(get_settings())
        >>> result = simulator.step()
        >>> len(result.snapshot.agents)
        6
    """

    def __init__(
        self,
        price_process: PriceProcess,
        policy: AgentDecisionPolicy,
        roster: Sequence[RosterEntry] = DEFAULT_ROSTER,
        initial_balance: float = 3000.0,
        market_history_limit: int = 100,
        recent_trades_limit: int = 20,
        clock: Clock | None = None,
    ) -> None:
        """Initialize the simulator in its reset state.

        Args:
            price_process: Market price generator.
            policy: Decision policy applied to every agent.
            roster: Agents competing in the arena, in evaluation order.
            initial_balance: Starting balance of every agent.
            market_history_limit: Samples kept in snapshots.
            recent_trades_limit: Trades kept in snapshots, most recent first.
            clock: Timestamp source for reset/restore; defaults to the price
                process clock.

        Raises:
            ValueError: If a limit is not positive.
        """
        if market_history_limit < 1 or recent_trades_limit < 1:
            msg = (
                f"History limits must be positive, got market={market_history_limit}, "
                f"trades={recent_trades_limit}"
            )
            raise ValueError(msg)

        self.price_process = price_process
        self.policy = policy
        self.roster = tuple(roster)
        self.initial_balance = initial_balance
        self.market_history_limit = market_history_limit
        self.recent_trades_limit = recent_trades_limit
        self.clock = clock or price_process.clock

        self._snapshot = self._initial_snapshot()

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        random_source: RandomSource | None = None,
        clock: Clock = wall_clock_ms,
    ) -> "ArenaSimulator":
        """Build a simulator with the default roster from Settings.

        Args:
            settings: Application settings.
            random_source: Shared random source; defaults to a
                SeededRandomSource seeded with ``settings.random_seed``.
            clock: Timestamp source in epoch milliseconds.
        """
        source = random_source or SeededRandomSource(settings.random_seed)
        price_process = PriceProcess(
            random_source=source,
            clock=clock,
            base_price=settings.base_price,
            drift=settings.drift,
            volatility=settings.volatility,
            jump_probability=settings.jump_probability,
            jump_std=settings.jump_std,
            history_limit=settings.price_history_limit,
        )
        return cls(
            price_process=price_process,
            policy=AgentDecisionPolicy(source),
            initial_balance=settings.initial_balance,
            market_history_limit=settings.market_history_limit,
            recent_trades_limit=settings.recent_trades_limit,
            clock=clock,
        )

    def snapshot(self) -> ArenaSnapshot:
        """Current published snapshot."""
        return self._snapshot

    def step(self) -> StepResult:
        """Advance the arena by one tick.

        Agents are evaluated in roster order; each emits at most one trade.

        Returns:
            StepResult with the new snapshot and this tick's trades.
        """
        previous = self._snapshot
        sample = self.price_process.next_sample()
        price = sample.price
        indicators = compute_indicators(
            self.price_process.prices, self.price_process.base_price
        )

        agents: list[TradingAgent] = []
        new_trades: list[Trade] = []
        for agent in previous.agents:
            unrealized = agent.mark_to_market(price)
            trade = self.policy.decide(agent, price, indicators, sample.timestamp_ms)

            if trade is None:
                agents.append(
                    replace(
                        agent,
                        unrealized_pnl=unrealized,
                        total_pnl=agent.realized_pnl + unrealized,
                    )
                )
                continue

            logger.debug(
                f"{agent.name}: {trade.type.value} {trade.size:.6f} @ {trade.price:.2f}"
                + (f" pnl={trade.pnl:.2f}" if trade.pnl is not None else "")
            )
            new_trades.append(trade)
            agents.append(apply_trade(agent, trade))

        recent_trades = previous.recent_trades
        for trade in new_trades:
            recent_trades = (trade, *recent_trades)[: self.recent_trades_limit]

        self._snapshot = ArenaSnapshot(
            agents=tuple(agents),
            market_history=(*previous.market_history, sample)[-self.market_history_limit :],
            current_price=price,
            stats=compute_arena_stats(agents, price, self.price_process.volatility),
            recent_trades=recent_trades,
            joined_team=previous.joined_team,
            last_updated_ms=sample.timestamp_ms,
        )
        return StepResult(snapshot=self._snapshot, new_trades=tuple(new_trades))

    def restore(self, snapshot: ArenaSnapshot) -> None:
        """Replace the arena state with a persisted snapshot.

        The price process history is rebuilt from the snapshot's market
        history and prices continue from ``snapshot.current_price``.
        """
        self.price_process.set_history([sample.price for sample in snapshot.market_history])
        self.price_process.last_price = snapshot.current_price
        self._snapshot = replace(
            snapshot,
            market_history=snapshot.market_history[-self.market_history_limit :],
            recent_trades=snapshot.recent_trades[: self.recent_trades_limit],
        )
        logger.info(
            f"Arena restored: {len(snapshot.agents)} agents, "
            f"price {snapshot.current_price:.2f}, {snapshot.stats.total_trades} trades"
        )

    def reset(self) -> ArenaSnapshot:
        """Restore the starting roster, clear history and trades.

        Returns:
            The reset snapshot.
        """
        self.price_process.reset()
        self._snapshot = self._initial_snapshot()
        logger.info(
            f"Arena reset: {len(self.roster)} agents, "
            f"bank value {self._snapshot.stats.total_bank_value:.2f}"
        )
        return self._snapshot

    def set_joined_team(self, agent_name: str | None) -> ArenaSnapshot:
        """Record which agent's team the user backs (None to leave).

        Raises:
            ValueError: If no agent has that name.
        """
        names = {agent.name for agent in self._snapshot.agents}
        if agent_name is not None and agent_name not in names:
            msg = f"Unknown agent: {agent_name}. Available: {', '.join(sorted(names))}"
            raise ValueError(msg)
        self._snapshot = replace(
            self._snapshot, joined_team=agent_name, last_updated_ms=self.clock()
        )
        return self._snapshot

    def _initial_snapshot(self) -> ArenaSnapshot:
        agents = build_agents(self.initial_balance, self.roster)
        base_price = self.price_process.base_price
        return ArenaSnapshot(
            agents=tuple(agents),
            market_history=(),
            current_price=base_price,
            stats=initial_stats(
                self.initial_balance * len(agents), base_price, self.price_process.volatility
            ),
            recent_trades=(),
            joined_team=None,
            last_updated_ms=self.clock(),
        )
