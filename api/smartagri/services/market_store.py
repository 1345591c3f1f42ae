"""Queries and inserts for the market price time series."""

from datetime import datetime, timedelta, timezone
from typing import Optional

from sqlalchemy import distinct, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from smartagri.metrics import observations_created
from smartagri.models.price_observation import PriceObservation
from smartagri.services.pricing import PriceSample


async def list_prices(
    db: AsyncSession,
    crop: Optional[str] = None,
    market: Optional[str] = None,
    limit: int = 50,
) -> list[PriceObservation]:
    stmt = select(PriceObservation).order_by(PriceObservation.observed_at.desc()).limit(limit)
    if crop:
        stmt = stmt.where(PriceObservation.crop == crop)
    if market:
        stmt = stmt.where(PriceObservation.market == market)
    result = await db.execute(stmt)
    return list(result.scalars().all())


async def price_history(
    db: AsyncSession, crop: str, market: str, days: int
) -> list[PriceObservation]:
    since = datetime.now(timezone.utc) - timedelta(days=days)
    result = await db.execute(
        select(PriceObservation)
        .where(PriceObservation.crop == crop)
        .where(PriceObservation.market == market)
        .where(PriceObservation.observed_at >= since)
        .order_by(PriceObservation.observed_at.asc())
    )
    return list(result.scalars().all())


async def insert_observation(db: AsyncSession, **fields) -> PriceObservation:
    record = PriceObservation(**fields)
    db.add(record)
    await db.commit()
    await db.refresh(record)
    observations_created.labels(kind="market", source=record.source).inc()
    return record


async def insert_sample(db: AsyncSession, sample: PriceSample) -> PriceObservation:
    return await insert_observation(
        db,
        crop=sample.crop,
        market=sample.market,
        price=sample.price,
        trend=sample.trend,
        change=sample.change,
        volume=sample.volume,
        unit=sample.unit,
        observed_at=sample.observed_at,
        source=sample.source,
    )


async def crop_stats(db: AsyncSession) -> list[dict]:
    """Per-crop price aggregates."""
    result = await db.execute(
        select(
            PriceObservation.crop,
            func.avg(PriceObservation.price).label("avg_price"),
            func.min(PriceObservation.price).label("min_price"),
            func.max(PriceObservation.price).label("max_price"),
            func.count(PriceObservation.id).label("total_records"),
            func.count(distinct(PriceObservation.market)).label("market_count"),
        )
        .group_by(PriceObservation.crop)
        .order_by(PriceObservation.crop)
    )
    return [
        {
            "crop": row.crop,
            "avg_price": round(float(row.avg_price), 2),
            "min_price": row.min_price,
            "max_price": row.max_price,
            "total_records": row.total_records,
            "market_count": row.market_count,
            "price_range": row.max_price - row.min_price,
        }
        for row in result.all()
    ]


async def overall_stats(db: AsyncSession) -> Optional[dict]:
    result = await db.execute(
        select(
            func.count(PriceObservation.id).label("total_records"),
            func.count(distinct(PriceObservation.crop)).label("unique_crops"),
            func.count(distinct(PriceObservation.market)).label("unique_markets"),
            func.avg(PriceObservation.price).label("overall_avg_price"),
        )
    )
    row = result.one()
    if not row.total_records:
        return None
    return {
        "total_records": row.total_records,
        "unique_crops": row.unique_crops,
        "unique_markets": row.unique_markets,
        "overall_avg_price": round(float(row.overall_avg_price), 2),
    }
