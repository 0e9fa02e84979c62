"""
Main entry point for Shelf Sync.

Runs one sync of the Goodreads feed into Notion and exits, or keeps
syncing on an interval when SYNC_INTERVAL_MINUTES is set.
"""

import sys

from apscheduler.schedulers.blocking import BlockingScheduler
from apscheduler.triggers.interval import IntervalTrigger

from shelf_sync.api.base import APIError
from shelf_sync.config import ConfigError, SyncConfig, get_config_from_env
from shelf_sync.sync.engine import SyncEngine, create_sync_engine
from shelf_sync.sync.writer import BatchWriteError
from shelf_sync.utils.logging import get_logger, setup_logging

logger = get_logger(__name__)


def run_sync(engine: SyncEngine) -> bool:
    """
    Run a sync operation.

    Returns:
        True if the run completed without errors
    """
    try:
        result = engine.sync()
    except BatchWriteError as e:
        logger.error("Sync failed", failed_writes=len(e.failures))
        return False
    except APIError as e:
        logger.error("Sync failed", error=str(e))
        return False

    logger.info(
        "Sync completed",
        run_id=result.run_id,
        fetched=result.books_fetched,
        created=result.created,
        updated=result.updated,
        unchanged=result.unchanged
    )
    return True


def run_scheduled(engine: SyncEngine, interval_minutes: int) -> None:
    """
    Sync now and then every interval_minutes until interrupted.
    """
    scheduler = BlockingScheduler()
    scheduler.add_job(
        run_sync,
        args=[engine],
        trigger=IntervalTrigger(minutes=interval_minutes),
        id="sync_job",
        name="Goodreads to Notion sync",
        replace_existing=True,
        max_instances=1,
        coalesce=True,
    )
    # Initial run straight away
    scheduler.add_job(run_sync, args=[engine], trigger="date", id="initial_sync")

    logger.info("Scheduler started", interval_minutes=interval_minutes)

    try:
        scheduler.start()
    except (KeyboardInterrupt, SystemExit):
        logger.info("Scheduler shutdown")


def main() -> int:
    """Main entry point."""
    setup_logging()

    try:
        config: SyncConfig = get_config_from_env()
    except ConfigError as e:
        logger.error("Configuration error", error=str(e))
        return 1

    setup_logging(config.log_level)

    engine = create_sync_engine(config)
    try:
        if config.sync_interval_minutes > 0:
            run_scheduled(engine, config.sync_interval_minutes)
            return 0
        return 0 if run_sync(engine) else 1
    finally:
        engine.close()


if __name__ == "__main__":
    sys.exit(main())
