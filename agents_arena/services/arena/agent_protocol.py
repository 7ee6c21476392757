"""Core data types for arena simulations.

Defines the market sample, trade and agent records exchanged between the
price process, the decision policy and the simulator. All records are
immutable; the simulator produces new instances on every step.
"""
from dataclasses import dataclass
from enum import Enum


class Position(str, Enum):
    """Directional stance of an agent."""

    NEUTRAL = "neutral"
    LONG = "long"
    SHORT = "short"


class TradeType(str, Enum):
    """Kind of trade event."""

    LONG = "long"  # Open a long position
    SHORT = "short"  # Open a short position
    CLOSE = "close"  # Close the current position


@dataclass(frozen=True)
class AgentProfile:
    """Trading temperament attached to an agent at creation time.

    Attributes:
        aggressiveness: Scales both how often the agent considers opening a
            trade and how much of its balance it commits.
        mean_reversion: Whether the agent also fades RSI extremes on top of
            the trend-following rule.
    """

    aggressiveness: float
    mean_reversion: bool = False

    def __post_init__(self) -> None:
        """Validate aggressiveness after initialization."""
        if self.aggressiveness < 0:
            raise ValueError(
                f"Aggressiveness ({self.aggressiveness}) cannot be negative"
            )


@dataclass(frozen=True)
class MarketSample:
    """One tick of simulated market data."""

    price: float
    timestamp_ms: int
    volume: float
    volatility: float


@dataclass(frozen=True)
class Trade:
    """Trade event emitted by an agent.

    ``pnl`` is set for CLOSE events only.
    """

    agent_id: str
    type: TradeType
    price: float
    size: float
    timestamp_ms: int
    pnl: float | None = None

    def __post_init__(self) -> None:
        """Validate pnl presence against the trade type."""
        if self.type == TradeType.CLOSE and self.pnl is None:
            raise ValueError("Close trades must carry a realized pnl")
        if self.type != TradeType.CLOSE and self.pnl is not None:
            raise ValueError(f"{self.type.value} trades cannot carry a pnl")


def unrealized_pnl(
    position: Position, entry_price: float, current_price: float, position_size: float
) -> float:
    """Mark-to-market P&L of a position at ``current_price``.

    Returns 0 for a neutral position.
    """
    if position == Position.LONG:
        return (current_price - entry_price) * position_size
    if position == Position.SHORT:
        return (entry_price - current_price) * position_size
    return 0.0


@dataclass(frozen=True)
class TradingAgent:
    """State of one autonomous trader.

    Identity (id, name, personality, profile, initial_balance) never changes
    during a session. ``entry_price`` and ``position_size`` are meaningful
    only while a position is open and are zero otherwise.
    """

    id: str
    name: str
    personality: str
    profile: AgentProfile
    initial_balance: float
    balance: float
    position: Position = Position.NEUTRAL
    entry_price: float = 0.0
    position_size: float = 0.0
    unrealized_pnl: float = 0.0
    realized_pnl: float = 0.0
    total_pnl: float = 0.0
    trade_count: int = 0
    win_rate: float = 0.0

    def __post_init__(self) -> None:
        """Validate position fields against the position after initialization.

        A neutral agent has zero entry price and size; an open position has
        both strictly positive.
        """
        if self.position == Position.NEUTRAL:
            consistent = self.entry_price == 0 and self.position_size == 0
        else:
            consistent = self.entry_price > 0 and self.position_size > 0
        if not consistent:
            raise ValueError(
                f"Agent {self.id}: position {self.position.value} inconsistent with "
                f"entry_price={self.entry_price}, position_size={self.position_size}"
            )
        if self.trade_count < 0:
            raise ValueError(f"Agent {self.id}: trade_count cannot be negative")

    @classmethod
    def fresh(
        cls,
        id: str,
        name: str,
        personality: str,
        profile: AgentProfile,
        initial_balance: float,
    ) -> "TradingAgent":
        """Create an agent with a flat position and zeroed statistics."""
        return cls(
            id=id,
            name=name,
            personality=personality,
            profile=profile,
            initial_balance=initial_balance,
            balance=initial_balance,
        )

    @property
    def has_open_position(self) -> bool:
        return self.position != Position.NEUTRAL

    def mark_to_market(self, current_price: float) -> float:
        """Unrealized P&L of the current position at ``current_price``."""
        return unrealized_pnl(
            self.position, self.entry_price, current_price, self.position_size
        )
