"""Market feed worker: periodically records a fresh price for every crop/market pair.

Disabled by default (MARKET_FEED_ENABLED). Each cycle asks the configured
price source for one sample per pair, persists it and notifies real-time
subscribers of the crop's room.
"""

import asyncio

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from smartagri.catalog import Crop, Market
from smartagri.config import settings
from smartagri.database import async_session_factory
from smartagri.dependencies import get_price_source
from smartagri.schemas.market import PriceObservationOut
from smartagri.services import market_store
from smartagri.services.pricing import PriceSource
from smartagri.services.realtime import MARKET_DATA_ADDED, EventPublisher, market_room

log = structlog.get_logger(__name__)


async def refresh_market_prices(
    db: AsyncSession, source: PriceSource, publisher: EventPublisher
) -> int:
    """Fetch, store and publish one sample per (crop, market). Returns rows written."""
    written = 0
    for crop in Crop:
        for market in Market:
            sourced = await source.fetch(crop.value, market.value)
            if sourced is None:
                continue
            record = await market_store.insert_sample(db, sourced.value)
            publisher.publish_nowait(
                MARKET_DATA_ADDED,
                market_room(record.crop),
                PriceObservationOut.model_validate(record),
                message="New market data added",
            )
            written += 1
    return written


async def market_feed_worker_loop(redis=None) -> None:
    source = get_price_source()
    publisher = EventPublisher(redis)
    interval = settings.market_feed_interval_seconds
    log.info("market_feed_worker_started", poll_interval=interval)
    while True:
        try:
            async with async_session_factory() as db:
                count = await refresh_market_prices(db, source, publisher)
            log.info("market_feed_refreshed", count=count)
        except Exception as exc:
            log.error("market_feed_worker_error", error=str(exc))
        await asyncio.sleep(interval)
