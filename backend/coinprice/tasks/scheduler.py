"""Background scheduler that keeps the ticker's price fresh."""

import logging

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.interval import IntervalTrigger

from coinprice.services.relay import ConsumerRelay

logger = logging.getLogger(__name__)

scheduler = AsyncIOScheduler()


async def refresh_ticker(relay: ConsumerRelay) -> None:
    """Run the passive fetch-or-cache path for the ticker's coin."""
    try:
        record = await relay.display()
        logger.info(f"Refresh results: {record.display_data()}")
    except Exception as e:
        logger.error(f"Failed to refresh ticker for {relay.coin_id}: {e}")


def start_scheduler(relay: ConsumerRelay, interval: float) -> None:
    """Start the background scheduler."""
    scheduler.add_job(
        refresh_ticker,
        trigger=IntervalTrigger(seconds=interval),
        args=[relay],
        id="refresh_ticker",
        replace_existing=True,
    )
    scheduler.start()
    logger.info(f"Scheduler started, refreshing {relay.coin_id} every {interval}s")


def stop_scheduler() -> None:
    """Stop the background scheduler."""
    if scheduler.running:
        scheduler.shutdown()
        logger.info("Scheduler stopped")
