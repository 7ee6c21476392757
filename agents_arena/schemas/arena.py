"""Arena snapshot persistence schemas.

This module defines the JSON document an arena snapshot is stored as. Field
names follow the document layout shared with the web client:

    {"agents": [...], "marketData": [...], "currentPrice": ..., "stats": {...},
     "recentTrades": [...], "joinedTeam": ..., "lastUpdated": ...}
"""
from pydantic import Field

from agents_arena.core.exceptions import SnapshotDecodeError
from agents_arena.schemas.base import PersistedModel
from agents_arena.services.arena.agent_protocol import AgentProfile
from agents_arena.services.arena.agent_protocol import MarketSample
from agents_arena.services.arena.agent_protocol import Position
from agents_arena.services.arena.agent_protocol import Trade
from agents_arena.services.arena.agent_protocol import TradeType
from agents_arena.services.arena.agent_protocol import TradingAgent
from agents_arena.services.arena.agent_registry import get_profile
from agents_arena.services.arena.analytics import ArenaStats
from agents_arena.services.arena.simulator import ArenaSnapshot


class AgentProfileSchema(PersistedModel):
    """Trading profile of a persisted agent."""

    aggressiveness: float = Field(..., ge=0)
    mean_reversion: bool = Field(default=False, alias="meanReversion")


class AgentSchema(PersistedModel):
    """Persisted state of one trading agent.

    ``profile`` is optional: documents without it resolve the profile from
    the agent registry by id.
    """

    id: str
    name: str
    personality: str = ""
    balance: float
    initial_balance: float = Field(..., gt=0, alias="initialBalance")
    position: Position = Position.NEUTRAL
    entry_price: float = Field(default=0.0, alias="entryPrice")
    position_size: float = Field(default=0.0, alias="positionSize")
    unrealized_pnl: float = Field(default=0.0, alias="unrealizedPnL")
    realized_pnl: float = Field(default=0.0, alias="realizedPnL")
    total_pnl: float = Field(default=0.0, alias="totalPnL")
    trade_count: int = Field(default=0, ge=0, alias="tradeCount")
    win_rate: float = Field(default=0.0, ge=0, le=1, alias="winRate")
    profile: AgentProfileSchema | None = None

    @classmethod
    def from_agent(cls, agent: TradingAgent) -> "AgentSchema":
        return cls(
            id=agent.id,
            name=agent.name,
            personality=agent.personality,
            balance=agent.balance,
            initial_balance=agent.initial_balance,
            position=agent.position,
            entry_price=agent.entry_price,
            position_size=agent.position_size,
            unrealized_pnl=agent.unrealized_pnl,
            realized_pnl=agent.realized_pnl,
            total_pnl=agent.total_pnl,
            trade_count=agent.trade_count,
            win_rate=agent.win_rate,
            profile=AgentProfileSchema(
                aggressiveness=agent.profile.aggressiveness,
                mean_reversion=agent.profile.mean_reversion,
            ),
        )

    def to_agent(self) -> TradingAgent:
        if self.profile is not None:
            profile = AgentProfile(
                aggressiveness=self.profile.aggressiveness,
                mean_reversion=self.profile.mean_reversion,
            )
        else:
            profile = get_profile(self.id)

        return TradingAgent(
            id=self.id,
            name=self.name,
            personality=self.personality,
            profile=profile,
            initial_balance=self.initial_balance,
            balance=self.balance,
            position=self.position,
            entry_price=self.entry_price,
            position_size=self.position_size,
            unrealized_pnl=self.unrealized_pnl,
            realized_pnl=self.realized_pnl,
            total_pnl=self.total_pnl,
            trade_count=self.trade_count,
            win_rate=self.win_rate,
        )


class MarketSampleSchema(PersistedModel):
    """One persisted market tick."""

    price: float = Field(..., gt=0)
    timestamp: int
    volume: float
    volatility: float

    @classmethod
    def from_sample(cls, sample: MarketSample) -> "MarketSampleSchema":
        return cls(
            price=sample.price,
            timestamp=sample.timestamp_ms,
            volume=sample.volume,
            volatility=sample.volatility,
        )

    def to_sample(self) -> MarketSample:
        return MarketSample(
            price=self.price,
            timestamp_ms=self.timestamp,
            volume=self.volume,
            volatility=self.volatility,
        )


class TradeSchema(PersistedModel):
    """One persisted trade event."""

    agent_id: str = Field(..., alias="agentId")
    type: TradeType
    price: float
    size: float
    timestamp: int
    pnl: float | None = None

    @classmethod
    def from_trade(cls, trade: Trade) -> "TradeSchema":
        return cls(
            agent_id=trade.agent_id,
            type=trade.type,
            price=trade.price,
            size=trade.size,
            timestamp=trade.timestamp_ms,
            pnl=trade.pnl,
        )

    def to_trade(self) -> Trade:
        return Trade(
            agent_id=self.agent_id,
            type=self.type,
            price=self.price,
            size=self.size,
            timestamp_ms=self.timestamp,
            pnl=self.pnl,
        )


class ArenaStatsSchema(PersistedModel):
    """Persisted arena aggregates."""

    total_bank_value: float = Field(..., alias="totalBankValue")
    total_trades: int = Field(default=0, ge=0, alias="totalTrades")
    avg_win_rate: float = Field(default=0.0, alias="avgWinRate")
    market_price: float = Field(..., alias="marketPrice")
    market_volatility: float = Field(..., alias="marketVolatility")
    top_performer: str = Field(default="", alias="topPerformer")
    bottom_performer: str = Field(default="", alias="bottomPerformer")

    @classmethod
    def from_stats(cls, stats: ArenaStats) -> "ArenaStatsSchema":
        return cls(
            total_bank_value=stats.total_bank_value,
            total_trades=stats.total_trades,
            avg_win_rate=stats.avg_win_rate,
            market_price=stats.market_price,
            market_volatility=stats.market_volatility,
            top_performer=stats.top_performer,
            bottom_performer=stats.bottom_performer,
        )

    def to_stats(self) -> ArenaStats:
        return ArenaStats(
            total_bank_value=self.total_bank_value,
            total_trades=self.total_trades,
            avg_win_rate=self.avg_win_rate,
            market_price=self.market_price,
            market_volatility=self.market_volatility,
            top_performer=self.top_performer,
            bottom_performer=self.bottom_performer,
        )


class ArenaSnapshotSchema(PersistedModel):
    """Persisted arena snapshot document."""

    agents: list[AgentSchema] = Field(..., min_length=1)
    market_data: list[MarketSampleSchema] = Field(default_factory=list, alias="marketData")
    current_price: float = Field(..., gt=0, alias="currentPrice")
    stats: ArenaStatsSchema
    recent_trades: list[TradeSchema] = Field(default_factory=list, alias="recentTrades")
    joined_team: str | None = Field(default=None, alias="joinedTeam")
    last_updated: int = Field(..., alias="lastUpdated")

    @classmethod
    def from_snapshot(
        cls,
        snapshot: ArenaSnapshot,
        market_history_limit: int | None = None,
        recent_trades_limit: int | None = None,
    ) -> "ArenaSnapshotSchema":
        """Build the document for a snapshot.

        Args:
            snapshot: Snapshot to persist.
            market_history_limit: Keep only the newest N market samples.
            recent_trades_limit: Keep only the N most recent trades.
        """
        market_history = snapshot.market_history
        if market_history_limit is not None:
            market_history = market_history[-market_history_limit:]
        recent_trades = snapshot.recent_trades
        if recent_trades_limit is not None:
            recent_trades = recent_trades[:recent_trades_limit]

        return cls(
            agents=[AgentSchema.from_agent(agent) for agent in snapshot.agents],
            market_data=[MarketSampleSchema.from_sample(s) for s in market_history],
            current_price=snapshot.current_price,
            stats=ArenaStatsSchema.from_stats(snapshot.stats),
            recent_trades=[TradeSchema.from_trade(t) for t in recent_trades],
            joined_team=snapshot.joined_team,
            last_updated=snapshot.last_updated_ms,
        )

    def to_snapshot(self) -> ArenaSnapshot:
        return ArenaSnapshot(
            agents=tuple(agent.to_agent() for agent in self.agents),
            market_history=tuple(sample.to_sample() for sample in self.market_data),
            current_price=self.current_price,
            stats=self.stats.to_stats(),
            recent_trades=tuple(trade.to_trade() for trade in self.recent_trades),
            joined_team=self.joined_team,
            last_updated_ms=self.last_updated,
        )


def encode_snapshot(
    snapshot: ArenaSnapshot,
    market_history_limit: int | None = None,
    recent_trades_limit: int | None = None,
) -> str:
    """Serialize a snapshot to its JSON document."""
    document = ArenaSnapshotSchema.from_snapshot(
        snapshot, market_history_limit, recent_trades_limit
    )
    return document.model_dump_json(by_alias=True)


def decode_snapshot(payload: str | bytes | dict) -> ArenaSnapshot:
    """Parse a stored JSON document (text or already-decoded dict).

    Raises:
        SnapshotDecodeError: If the payload is not a valid arena snapshot.
    """
    try:
        if isinstance(payload, dict):
            document = ArenaSnapshotSchema.model_validate(payload)
        else:
            document = ArenaSnapshotSchema.model_validate_json(payload)
        return document.to_snapshot()
    except ValueError as e:
        # pydantic.ValidationError and record invariant violations
        raise SnapshotDecodeError(f"Invalid arena snapshot: {e}") from e


def snapshot_document(
    snapshot: ArenaSnapshot,
    market_history_limit: int | None = None,
    recent_trades_limit: int | None = None,
) -> dict:
    """Serialize a snapshot to a JSON-compatible dict (for JSON columns)."""
    document = ArenaSnapshotSchema.from_snapshot(
        snapshot, market_history_limit, recent_trades_limit
    )
    return document.model_dump(mode="json", by_alias=True)
