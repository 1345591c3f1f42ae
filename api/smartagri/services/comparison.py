"""Cross-market price comparison and best-deal discovery."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Iterable, Optional, Sequence

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from smartagri.catalog import COMPARISON_MARKETS
from smartagri.models.price_observation import PriceObservation


@dataclass(frozen=True)
class MarketQuote:
    market: str
    price: float
    trend: str
    change: float
    observed_at: datetime


@dataclass(frozen=True)
class MarketComparison:
    crop: str
    best_market: Optional[MarketQuote]
    worst_market: Optional[MarketQuote]
    average_price: Optional[int]
    comparisons: list[MarketQuote] = field(default_factory=list)


def quote_from_observation(row: PriceObservation) -> MarketQuote:
    return MarketQuote(
        market=row.market,
        price=row.price,
        trend=row.trend,
        change=row.change,
        observed_at=row.observed_at,
    )


def compare_markets(crop: str, quotes: Iterable[MarketQuote]) -> MarketComparison:
    """Rank quotes cheapest first; the cheapest market is best for buyers."""
    ranked = sorted(quotes, key=lambda q: q.price)
    if not ranked:
        return MarketComparison(crop=crop, best_market=None, worst_market=None, average_price=None)
    return MarketComparison(
        crop=crop,
        best_market=ranked[0],
        worst_market=ranked[-1],
        average_price=round(sum(q.price for q in ranked) / len(ranked)),
        comparisons=ranked,
    )


async def latest_quotes(
    db: AsyncSession, crop: str, markets: Sequence[str] = COMPARISON_MARKETS
) -> list[MarketQuote]:
    """Most recent observation per market; markets with none are skipped."""
    quotes = []
    for market in markets:
        result = await db.execute(
            select(PriceObservation)
            .where(PriceObservation.crop == crop)
            .where(PriceObservation.market == market)
            .order_by(PriceObservation.observed_at.desc())
            .limit(1)
        )
        row = result.scalars().first()
        if row is not None:
            quotes.append(quote_from_observation(row))
    return quotes


async def compare_markets_for_crop(db: AsyncSession, crop: str) -> MarketComparison:
    return compare_markets(crop, await latest_quotes(db, crop))


@dataclass(frozen=True)
class CropDeal:
    crop: str
    best_market: Any
    worst_market: Any
    price_difference: float
    price_difference_percent: Optional[float]
    available_markets: int


def summarize_deals(latest_rows: Iterable[Any]) -> list[CropDeal]:
    """Group latest-per-market rows by crop and pick cheapest/dearest market.

    Rows only need `crop` and `price` attributes; they are returned as-is in
    the best/worst slots.
    """
    by_crop: dict[str, list[Any]] = {}
    for row in latest_rows:
        by_crop.setdefault(row.crop, []).append(row)

    deals = []
    for crop, rows in by_crop.items():
        rows = sorted(rows, key=lambda r: r.price)
        best, worst = rows[0], rows[-1]
        difference = worst.price - best.price
        percent = round(difference / best.price * 100, 2) if best.price else None
        deals.append(
            CropDeal(
                crop=crop,
                best_market=best,
                worst_market=worst,
                price_difference=difference,
                price_difference_percent=percent,
                available_markets=len(rows),
            )
        )
    return deals


async def latest_per_market(
    db: AsyncSession, crop: Optional[str] = None
) -> list[PriceObservation]:
    """Latest observation for every (crop, market) pair, cheapest first."""
    ranked = select(
        PriceObservation.id,
        func.row_number()
        .over(
            partition_by=(PriceObservation.crop, PriceObservation.market),
            order_by=PriceObservation.observed_at.desc(),
        )
        .label("rn"),
    )
    if crop:
        ranked = ranked.where(PriceObservation.crop == crop)
    ranked = ranked.subquery()

    result = await db.execute(
        select(PriceObservation)
        .join(ranked, ranked.c.id == PriceObservation.id)
        .where(ranked.c.rn == 1)
        .order_by(PriceObservation.price.asc())
    )
    return list(result.scalars().all())
