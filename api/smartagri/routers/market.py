"""Market price endpoints.

GET  /api/market/prices    -- latest observations, simulated on first request for a pair
GET  /api/market/history   -- price series for one crop/market over N days
GET  /api/market/stats     -- per-crop and overall aggregates
GET  /api/market/analysis  -- trend, comparison, seasonal outlook and insights
GET  /api/market/deals     -- cheapest/dearest market per crop
POST /api/market/add       -- record an observation and notify subscribers
"""

from datetime import datetime, timezone
from typing import Optional

import structlog
from fastapi import APIRouter, HTTPException, Query

from smartagri.dependencies import DbSession, PriceSourceDep, Publisher
from smartagri.errors import envelope
from smartagri.schemas.market import MarketDataCreate, PriceHistoryPoint, PriceObservationOut
from smartagri.services import market_store
from smartagri.services.comparison import latest_per_market, summarize_deals
from smartagri.services.insights import build_market_analysis
from smartagri.services.realtime import MARKET_DATA_ADDED, market_room

log = structlog.get_logger(__name__)

router = APIRouter(prefix="/api/market", tags=["market"])


def _require_pair(crop: Optional[str], market: Optional[str]) -> None:
    if not crop or not market:
        raise HTTPException(status_code=400, detail="Crop and market parameters are required")


@router.get("/prices")
async def get_market_prices(
    db: DbSession,
    price_source: PriceSourceDep,
    crop: Optional[str] = None,
    market: Optional[str] = None,
    limit: int = Query(default=50, ge=1, le=500),
) -> dict:
    """Latest observations, newest first.

    When a specific (crop, market) pair has no stored data yet, one sample is
    drawn from the configured price source and persisted.
    """
    rows = await market_store.list_prices(db, crop, market, limit)
    source = "database"

    if not rows and crop and market:
        sourced = await price_source.fetch(crop, market)
        if sourced is not None:
            record = await market_store.insert_sample(db, sourced.value)
            rows = [record]
            source = sourced.source_label
            log.info(
                "market_price_generated",
                crop=crop,
                market=market,
                outcome=sourced.outcome.value,
                price=record.price,
            )

    data = [PriceObservationOut.model_validate(row) for row in rows]
    return envelope(
        data,
        count=len(data),
        source=source,
        last_updated=datetime.now(timezone.utc),
    )


@router.get("/history")
async def get_price_history(
    db: DbSession,
    crop: Optional[str] = None,
    market: Optional[str] = None,
    days: int = Query(default=30, ge=1, le=365),
) -> dict:
    _require_pair(crop, market)
    rows = await market_store.price_history(db, crop, market, days)
    history = [PriceHistoryPoint.model_validate(row) for row in rows]

    price_range = None
    if history:
        prices = [point.price for point in history]
        price_range = {"min": min(prices), "max": max(prices), "current": prices[-1]}

    return envelope(
        history,
        crop=crop,
        market=market,
        period=f"{days} days",
        record_count=len(history),
        price_range=price_range,
    )


@router.get("/stats")
async def get_market_stats(db: DbSession) -> dict:
    return envelope(
        {
            "crop_stats": await market_store.crop_stats(db),
            "overall_stats": await market_store.overall_stats(db),
        }
    )


@router.get("/analysis")
async def get_market_analysis(
    db: DbSession,
    crop: Optional[str] = None,
    market: Optional[str] = None,
    days: int = Query(default=30, ge=1, le=365),
) -> dict:
    _require_pair(crop, market)
    analysis = await build_market_analysis(db, crop, market, days)
    return envelope(
        {
            "basic_info": {"crop": crop, "market": market, "analysis_period": f"{days} days"},
            "trend_analysis": analysis.trend_analysis,
            "market_comparison": analysis.market_comparison,
            "seasonal_prediction": analysis.seasonal_prediction,
            "ai_insights": analysis.insights,
        },
        generated_at=datetime.now(timezone.utc),
    )


@router.get("/deals")
async def get_best_deals(db: DbSession, crop: Optional[str] = None) -> dict:
    rows = await latest_per_market(db, crop)
    deals = summarize_deals(PriceObservationOut.model_validate(row) for row in rows)
    return envelope(
        deals,
        total_crops=len(deals),
        timestamp=datetime.now(timezone.utc),
    )


@router.post("/add", status_code=201)
async def add_market_data(
    body: MarketDataCreate,
    db: DbSession,
    publisher: Publisher,
) -> dict:
    if (body.trend == "up" and body.change < 0) or (body.trend == "down" and body.change > 0):
        # Not enforced; mismatches are only logged
        log.warning(
            "market_trend_change_mismatch",
            crop=body.crop,
            market=body.market,
            trend=body.trend,
            change=body.change,
        )

    record = await market_store.insert_observation(
        db, **body.model_dump(exclude_none=True)
    )
    data = PriceObservationOut.model_validate(record)

    publisher.publish_nowait(
        MARKET_DATA_ADDED,
        market_room(record.crop),
        data,
        message="New market data added",
    )
    log.info("market_data_added", crop=record.crop, market=record.market, price=record.price)
    return envelope(data, message="Market data added successfully")
