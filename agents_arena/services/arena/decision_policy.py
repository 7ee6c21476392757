"""Decision policy shared by all arena agents.

Each tick, every agent is evaluated exactly once:

1. An agent holding a position closes it when unrealized P&L exceeds the
   take-profit or breaches the stop-loss, both measured against the agent's
   initial balance.
2. A flat agent considers opening a position with probability
   0.1 * aggressiveness. If it does, a trend-following rule (SMA20 vs SMA50,
   filtered by RSI) sets the direction; mean-reversion agents also fade RSI
   extremes. Long wins when both directions are signalled.
3. Otherwise the agent holds.

Positions never flip directly: Long/Short -> Neutral -> Long/Short.
"""
from agents_arena.core.constants import ArenaPolicy
from agents_arena.indicators.technical import IndicatorSnapshot
from agents_arena.services.arena.agent_protocol import Trade
from agents_arena.services.arena.agent_protocol import TradeType
from agents_arena.services.arena.agent_protocol import TradingAgent
from agents_arena.services.arena.random_source import RandomSource


class AgentDecisionPolicy:
    """Decides close / open / hold for one agent on one tick.

    The only randomness is the single uniform draw a flat agent makes when
    deciding whether to consider a trade; agents with an open position
    consume no draws.
    """

    def __init__(self, random_source: RandomSource) -> None:
        """Initialize the policy.

        Args:
            random_source: Source of the open-consideration draws.
        """
        self.random_source = random_source

    def decide(
        self,
        agent: TradingAgent,
        current_price: float,
        indicators: IndicatorSnapshot,
        timestamp_ms: int,
    ) -> Trade | None:
        """Evaluate one agent.

        Args:
            agent: Agent state before this tick's decision
            current_price: Price of the current tick
            indicators: Indicator values over the history including this tick
            timestamp_ms: Timestamp stamped onto any resulting trade

        Returns:
            A CLOSE, LONG or SHORT trade, or None to hold.
        """
        if agent.has_open_position:
            return self._check_exit(agent, current_price, timestamp_ms)

        threshold = ArenaPolicy.OPEN_PROBABILITY_PER_AGGRESSIVENESS * agent.profile.aggressiveness
        if self.random_source.next_uniform() >= threshold:
            return None

        return self._check_entry(agent, current_price, indicators, timestamp_ms)

    def _check_exit(
        self, agent: TradingAgent, current_price: float, timestamp_ms: int
    ) -> Trade | None:
        pnl = agent.mark_to_market(current_price)
        pnl_pct = pnl * 100 / agent.initial_balance

        if pnl_pct > ArenaPolicy.TAKE_PROFIT_PCT or pnl_pct < ArenaPolicy.STOP_LOSS_PCT:
            return Trade(
                agent_id=agent.id,
                type=TradeType.CLOSE,
                price=current_price,
                size=agent.position_size,
                timestamp_ms=timestamp_ms,
                pnl=pnl,
            )
        return None

    def _check_entry(
        self,
        agent: TradingAgent,
        current_price: float,
        indicators: IndicatorSnapshot,
        timestamp_ms: int,
    ) -> Trade | None:
        should_long = False
        should_short = False

        # Trend following
        if indicators.uptrend and indicators.rsi < ArenaPolicy.RSI_OVERBOUGHT:
            should_long = True
        elif indicators.downtrend and indicators.rsi > ArenaPolicy.RSI_OVERSOLD:
            should_short = True

        # Mean reversion overlay
        if agent.profile.mean_reversion:
            if indicators.rsi > ArenaPolicy.RSI_OVERBOUGHT:
                should_short = True
            if indicators.rsi < ArenaPolicy.RSI_OVERSOLD:
                should_long = True

        if not (should_long or should_short):
            return None

        size = position_size_for(agent, current_price)
        if size <= 0:
            # Bankrupt agents keep holding
            return None

        return Trade(
            agent_id=agent.id,
            type=TradeType.LONG if should_long else TradeType.SHORT,
            price=current_price,
            size=size,
            timestamp_ms=timestamp_ms,
        )


def position_size_for(agent: TradingAgent, current_price: float) -> float:
    """Units of the asset a new position buys or sells short.

    Commits (0.1 + 0.2 * aggressiveness) of the agent's balance.
    """
    risk_fraction = (
        ArenaPolicy.BASE_RISK_FRACTION
        + agent.profile.aggressiveness * ArenaPolicy.RISK_FRACTION_PER_AGGRESSIVENESS
    )
    dollar_risk = agent.balance * risk_fraction
    return dollar_risk / current_price
