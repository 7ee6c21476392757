"""Trailing technical indicators for agent decisions.

This module provides NumPy-based implementations of the indicators the arena
agents trade on. Unlike full-series indicators, each function returns a
single value for the most recent point of a bounded price history.

All functions are total: insufficient history maps to a defined neutral value
instead of NaN or an error.
"""
from collections.abc import Sequence
from dataclasses import dataclass

import numpy as np
from numpy.typing import NDArray

from agents_arena.core.constants import ArenaPolicy


def trailing_sma(
    prices: Sequence[float] | NDArray[np.float64], period: int, fallback: float
) -> float:
    """Calculate the Simple Moving Average of the last ``period`` prices.

    Formula: SMA = (P[n-period] + ... + P[n-1]) / period

    Args:
        prices: Price history, oldest first
        period: Number of trailing prices to average (must be > 0)
        fallback: Value returned when ``prices`` is empty

    Returns:
        The trailing SMA. With fewer than ``period`` prices, the most recent
        price (or ``fallback`` if there are none).

    Raises:
        ValueError: If period <= 0

    Example:
        >>> trailing_sma([1, 2, 3, 4, 5], 3, fallback=0.0)
        4.0
        >>> trailing_sma([7.5], 20, fallback=50000.0)
        7.5
    """
    if period <= 0:
        raise ValueError("Period must be greater than 0")

    prices_array = np.asarray(prices, dtype=float)

    if len(prices_array) == 0:
        return float(fallback)

    if len(prices_array) < period:
        return float(prices_array[-1])

    return float(prices_array[-period:].sum() / period)


def trailing_rsi(
    prices: Sequence[float] | NDArray[np.float64], period: int = 14
) -> float:
    """Calculate the Relative Strength Index over the last ``period`` deltas.

    Gains and losses are averaged over the window (simple averages, no
    Wilder smoothing carried between calls).
    Formula: RSI = 100 - (100 / (1 + RS)), RS = Average Gain / Average Loss

    Args:
        prices: Price history, oldest first
        period: Number of trailing price changes to use (must be > 0)

    Returns:
        RSI in [0, 100]. 50 when fewer than ``period + 1`` prices exist;
        100 when the window has no losses.

    Raises:
        ValueError: If period <= 0

    Example:
        >>> trailing_rsi([1.0, 2.0, 3.0], 2)
        100.0
    """
    if period <= 0:
        raise ValueError("Period must be greater than 0")

    prices_array = np.asarray(prices, dtype=float)

    if len(prices_array) < period + 1:
        return ArenaPolicy.RSI_NEUTRAL

    delta = np.diff(prices_array[-(period + 1) :])

    avg_gain = delta[delta > 0].sum() / period
    avg_loss = -delta[delta < 0].sum() / period

    if avg_loss == 0:
        return 100.0

    rs = avg_gain / avg_loss
    return float(100 - (100 / (1 + rs)))


@dataclass(frozen=True)
class IndicatorSnapshot:
    """Indicator values the decision policy reads on one tick."""

    sma_fast: float
    sma_slow: float
    rsi: float

    @property
    def uptrend(self) -> bool:
        return self.sma_fast > self.sma_slow

    @property
    def downtrend(self) -> bool:
        return self.sma_fast < self.sma_slow


def compute_indicators(
    prices: Sequence[float] | NDArray[np.float64], base_price: float
) -> IndicatorSnapshot:
    """Compute SMA20, SMA50 and RSI14 for the latest point of ``prices``.

    Args:
        prices: Price history, oldest first
        base_price: SMA fallback for an empty history

    Returns:
        IndicatorSnapshot for the decision policy
    """
    return IndicatorSnapshot(
        sma_fast=trailing_sma(prices, ArenaPolicy.FAST_SMA_PERIOD, base_price),
        sma_slow=trailing_sma(prices, ArenaPolicy.SLOW_SMA_PERIOD, base_price),
        rsi=trailing_rsi(prices, ArenaPolicy.RSI_PERIOD),
    )
