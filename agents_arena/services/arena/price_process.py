"""Stochastic price generator for the arena market.

Prices follow a geometric Brownian motion step with occasional jump events:

    dS = mu * S * dt + sigma * S * dW

with dt = 1 tick. With probability ``jump_probability`` the diffusion result
is additionally multiplied by (1 + E), E ~ N(0, jump_std), modelling a news
shock. The result is clamped to [0.5 * base_price, 2 * base_price]. The clamp
is a simplification that keeps the simulated market bounded and positive; it
does not model any real market mechanism.
"""
import logging
import math
import time
from collections import deque
from typing import Callable

from agents_arena.services.arena.agent_protocol import MarketSample
from agents_arena.services.arena.random_source import RandomSource
from agents_arena.services.arena.random_source import normal_draw

logger = logging.getLogger(__name__)

Clock = Callable[[], int]


def wall_clock_ms() -> int:
    """Current wall-clock time in epoch milliseconds."""
    return int(time.time() * 1000)


class PriceProcess:
    """Generates one MarketSample per call from the last retained price.

    Random draws per sample, in order: two for the diffusion shock, one for
    the jump check, two more if a jump occurs, one for the volume.

    Example:
        >>> process = PriceProcess(SeededRandomSource(seed=7))
        >>> sample = process.next_sample()
        >>> 25000 <= sample.price <= 100000
        True
    """

    MIN_PRICE_FACTOR = 0.5
    MAX_PRICE_FACTOR = 2.0
    DT = 1.0

    def __init__(
        self,
        random_source: RandomSource,
        clock: Clock = wall_clock_ms,
        base_price: float = 50000.0,
        drift: float = 0.0001,
        volatility: float = 0.02,
        jump_probability: float = 0.05,
        jump_std: float = 0.01,
        history_limit: int = 1000,
    ) -> None:
        """Initialize the price process.

        Args:
            random_source: Source of uniform draws.
            clock: Returns the timestamp (epoch ms) stamped onto samples.
            base_price: Starting price and centre of the clamp range.
            drift: GBM drift per tick.
            volatility: GBM volatility per tick.
            jump_probability: Probability of an event shock per tick.
            jump_std: Standard deviation of the event shock.
            history_limit: Maximum samples retained (oldest evicted first).

        Raises:
            ValueError: If base_price or history_limit is not positive.
        """
        if base_price <= 0:
            raise ValueError(f"base_price must be positive, got {base_price}")
        if history_limit < 1:
            raise ValueError(f"history_limit must be at least 1, got {history_limit}")

        self.random_source = random_source
        self.clock = clock
        self.base_price = base_price
        self.drift = drift
        self.volatility = volatility
        self.jump_probability = jump_probability
        self.jump_std = jump_std
        self.min_price = base_price * self.MIN_PRICE_FACTOR
        self.max_price = base_price * self.MAX_PRICE_FACTOR

        self.last_price = base_price
        self._history: deque[MarketSample] = deque(maxlen=history_limit)

    @property
    def history(self) -> list[MarketSample]:
        """Retained samples, oldest first."""
        return list(self._history)

    @property
    def prices(self) -> list[float]:
        """Retained prices, oldest first."""
        return [sample.price for sample in self._history]

    def next_sample(self) -> MarketSample:
        """Advance the market by one tick.

        Returns:
            The new MarketSample, also appended to the history.
        """
        shock = normal_draw(self.random_source)
        last = self.last_price
        change = (
            self.drift * last * self.DT
            + self.volatility * last * shock * math.sqrt(self.DT)
        )
        price = last + change

        if self.random_source.next_uniform() < self.jump_probability:
            event = normal_draw(self.random_source, 0.0, self.jump_std)
            price *= 1 + event

        price = min(max(price, self.min_price), self.max_price)
        self.last_price = price

        sample = MarketSample(
            price=price,
            timestamp_ms=self.clock(),
            volume=self._draw_volume(),
            volatility=self.volatility,
        )
        self._history.append(sample)
        return sample

    def set_history(self, prices: list[float]) -> None:
        """Reinitialize the history from persisted prices.

        Timestamps are reconstructed one second apart, the last one at the
        current clock time. The last price becomes the continuation point;
        an empty list restores the base price.

        Args:
            prices: Prices, oldest first. Only the newest ``history_limit``
                are retained.
        """
        now = self.clock()
        count = len(prices)
        self._history.clear()
        for index, price in enumerate(prices):
            self._history.append(
                MarketSample(
                    price=price,
                    timestamp_ms=now - (count - 1 - index) * 1000,
                    volume=self._draw_volume(),
                    volatility=self.volatility,
                )
            )
        self.last_price = prices[-1] if prices else self.base_price
        logger.info(f"Price history restored: {count} samples, last price {self.last_price:.2f}")

    def reset(self) -> None:
        """Restore the base price and clear the history."""
        self.last_price = self.base_price
        self._history.clear()

    def _draw_volume(self) -> float:
        return self.random_source.next_uniform() * 1000 + 500
