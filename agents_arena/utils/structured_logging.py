"""Logging setup for the headless arena runner.

Two streams share stdout:
- package modules log through ``logging.getLogger(__name__)`` as plain text
  lines (ticks, trades, restores, persistence failures)
- the entry point emits lifecycle events (startup, shutdown, database
  health) through structlog as one JSON object per line, so a supervisor can
  parse them without scraping text
"""
import logging
import sys

import structlog


def configure_structured_logging(log_level: str = "INFO") -> None:
    """Configure both log streams at the same minimum level.

    Args:
        log_level: Minimum log level name; unknown names fall back to INFO
    """
    level = getattr(logging, log_level.upper(), logging.INFO)

    logging.basicConfig(
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stdout,
        level=level,
    )

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.StackInfoRenderer(),
            structlog.dev.set_exc_info,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            structlog.processors.JSONRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=False,
    )


def get_logger(name: str) -> structlog.BoundLogger:
    """Get the JSON event logger for the entry point."""
    return structlog.get_logger(name)
