"""Headless arena runner.

Usage:
    python -m agents_arena

Configuration comes from environment variables / .env (see Settings).
"""
import asyncio
import signal

from agents_arena.core.config import get_settings
from agents_arena.core.database import check_db_health
from agents_arena.core.database import create_engine
from agents_arena.core.database import create_session_factory
from agents_arena.core.database import init_models
from agents_arena.models.module_data import module_data_key
from agents_arena.repositories.snapshot_repository import SqlSnapshotRepository
from agents_arena.services.arena.arena_runner import ArenaRunner
from agents_arena.services.arena.simulator import ArenaSimulator
from agents_arena.utils.structured_logging import configure_structured_logging
from agents_arena.utils.structured_logging import get_logger


async def main() -> None:
    settings = get_settings()
    configure_structured_logging(log_level=settings.log_level)
    logger = get_logger(__name__)

    engine = create_engine(settings)
    try:
        health = await check_db_health(engine)
        if health["status"] != "healthy":
            logger.error("Database unavailable", app=settings.app_name, detail=health["message"])
            return
        await init_models(engine)
        repository = SqlSnapshotRepository(
            create_session_factory(engine),
            market_history_limit=settings.market_history_limit,
            recent_trades_limit=settings.recent_trades_limit,
        )
        runner = ArenaRunner(
            simulator=ArenaSimulator.from_settings(settings),
            repository=repository,
            key=module_data_key(settings.user_id, settings.module_key),
            tick_interval=settings.tick_interval_seconds,
            autosave_debounce=settings.autosave_debounce_seconds,
        )

        loop = asyncio.get_running_loop()
        for sig in (signal.SIGINT, signal.SIGTERM):
            loop.add_signal_handler(sig, runner.stop)

        restored = await runner.restore()
        logger.info(
            f"Starting {settings.app_name}",
            environment=settings.environment,
            restored=restored,
            user_id=settings.user_id,
        )
        ticks = await runner.run()
        logger.info(f"{settings.app_name} stopped", ticks=ticks)
    finally:
        await engine.dispose()


if __name__ == "__main__":
    asyncio.run(main())
