"""Randomness sources for the arena simulation.

All stochastic components draw from an injected RandomSource so that
simulations can be replayed exactly from a seed or a scripted sequence.
"""
import math
import random
from typing import Protocol


class RandomSource(Protocol):
    """Source of uniform random numbers in [0, 1)."""

    def next_uniform(self) -> float:
        """Return the next uniform draw in [0, 1)."""
        ...


class SeededRandomSource:
    """RandomSource backed by the standard library Mersenne Twister.

    Example:
        >>> source = SeededRandomSource(seed=42)
        >>> 0.0 <= source.next_uniform() < 1.0
        True
    """

    def __init__(self, seed: int | None = None) -> None:
        """Initialize the generator.

        Args:
            seed: Seed for reproducible sequences. None seeds from OS entropy.
        """
        self.seed = seed
        self._rng = random.Random(seed)

    def next_uniform(self) -> float:
        return self._rng.random()


def normal_draw(source: RandomSource, mean: float = 0.0, std_dev: float = 1.0) -> float:
    """Draw from N(mean, std_dev**2) using the Box-Muller transform.

    Consumes exactly two uniform draws. The first draw is mapped to (0, 1]
    so the logarithm is always defined.

    Args:
        source: Uniform random source.
        mean: Mean of the distribution.
        std_dev: Standard deviation of the distribution.

    Returns:
        Normally distributed sample.
    """
    u1 = 1.0 - source.next_uniform()
    u2 = source.next_uniform()
    z0 = math.sqrt(-2.0 * math.log(u1)) * math.cos(2.0 * math.pi * u2)
    return z0 * std_dev + mean
