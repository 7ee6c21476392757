"""Technical indicators package for Agents Arena.

Available indicators:
- Trailing Simple Moving Average (SMA)
- Trailing Relative Strength Index (RSI)
"""

from .technical import IndicatorSnapshot
from .technical import compute_indicators
from .technical import trailing_rsi
from .technical import trailing_sma

__all__ = [
    "IndicatorSnapshot",
    "compute_indicators",
    "trailing_rsi",
    "trailing_sma",
]
