"""Agents Arena: autonomous trading agents competing on a simulated market."""

__version__ = "0.1.0"
