"""Fixed trading policy constants for the arena.

These values define how every agent trades and are not configurable through
Settings.
"""


class ArenaPolicy:
    """Thresholds and coefficients used by the agent decision policy."""

    # =========================================================================
    # Position exits
    # =========================================================================
    TAKE_PROFIT_PCT = 5.0
    """
    Close a position once unrealized P&L exceeds this percentage of the
    agent's initial balance (strictly greater than).
    """

    STOP_LOSS_PCT = -3.0
    """
    Close a position once unrealized P&L falls below this percentage of the
    agent's initial balance (strictly less than).
    """

    # =========================================================================
    # Position entries
    # =========================================================================
    OPEN_PROBABILITY_PER_AGGRESSIVENESS = 0.1
    """
    An agent considers opening a trade on a tick with probability
    0.1 * aggressiveness.
    """

    BASE_RISK_FRACTION = 0.1
    RISK_FRACTION_PER_AGGRESSIVENESS = 0.2
    """
    Fraction of balance committed to a new position:
    0.1 + 0.2 * aggressiveness.
    """

    DEFAULT_AGGRESSIVENESS = 0.7
    """Aggressiveness for agents without a known profile."""

    # =========================================================================
    # Indicators
    # =========================================================================
    FAST_SMA_PERIOD = 20
    SLOW_SMA_PERIOD = 50
    RSI_PERIOD = 14

    RSI_OVERBOUGHT = 70.0
    RSI_OVERSOLD = 30.0
    RSI_NEUTRAL = 50.0
    """RSI reported while there is not enough history to compute it."""
