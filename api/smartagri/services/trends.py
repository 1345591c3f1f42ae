"""Price trend analysis.

Splits a time-ordered price series in half and compares the half means.
The gap between them, relative to the overall mean and scaled by 1000,
becomes a 0-100 confidence score; a fixed rule cascade turns trend,
confidence and the current-vs-average position into a recommendation.
"""

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional, Sequence

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from smartagri.models.price_observation import PriceObservation

DEFAULT_WINDOW_DAYS = 30

# |second_half_mean - first_half_mean| / mean is multiplied by this before clamping
CONFIDENCE_SCALE = 1000

REC_INSUFFICIENT = "Insufficient data for analysis"
REC_HOLD = "Market is stable. Consider holding current positions."
REC_STRONG_UP = "Strong upward trend. Good time to sell if you have inventory."
REC_STRONG_DOWN = "Prices declining. Consider waiting for better prices or buy if needed."
REC_ABOVE_AVERAGE = "Prices are above average. Consider selling if you have surplus."
REC_BELOW_AVERAGE = "Prices are below average. Good time to buy if you need stock."
REC_NEUTRAL = "Market conditions are neutral. Monitor for better opportunities."


@dataclass(frozen=True)
class TrendAnalysis:
    trend: str
    confidence: int
    recommendation: str
    current_price: Optional[float] = None
    average_price: Optional[int] = None
    price_change: Optional[int] = None
    price_change_percent: Optional[float] = None
    sample_size: int = 0


def _mean(values: Sequence[float]) -> float:
    return sum(values) / len(values)


def trend_confidence(first_mean: float, second_mean: float, overall_mean: float) -> float:
    if overall_mean == 0:
        return 0.0
    raw = abs(second_mean - first_mean) / overall_mean * CONFIDENCE_SCALE
    return min(100.0, max(0.0, raw))


def trading_recommendation(
    trend: str, confidence: float, current_price: float, average_price: float
) -> str:
    """First matching rule wins; the order is the tie-break policy."""
    if confidence < 30:
        return REC_HOLD
    if trend == "up" and confidence > 60:
        return REC_STRONG_UP
    if trend == "down" and confidence > 60:
        return REC_STRONG_DOWN
    if current_price > average_price * 1.1:
        return REC_ABOVE_AVERAGE
    if current_price < average_price * 0.9:
        return REC_BELOW_AVERAGE
    return REC_NEUTRAL


def analyze_price_series(prices: Sequence[float]) -> TrendAnalysis:
    """Classify a price series that is already sorted oldest-first."""
    if not prices:
        return TrendAnalysis(trend="unknown", confidence=0, recommendation=REC_INSUFFICIENT)

    midpoint = len(prices) // 2
    overall_mean = _mean(prices)
    second_mean = _mean(prices[midpoint:])
    # A single observation has an empty first half: treat it as no movement
    first_mean = _mean(prices[:midpoint]) if midpoint else second_mean

    if second_mean > first_mean:
        trend = "up"
    elif second_mean < first_mean:
        trend = "down"
    else:
        trend = "stable"

    confidence = trend_confidence(first_mean, second_mean, overall_mean)
    current_price = prices[-1]
    change_percent = (
        round((current_price - overall_mean) / overall_mean * 100, 2) if overall_mean else 0.0
    )

    return TrendAnalysis(
        trend=trend,
        confidence=round(confidence),
        recommendation=trading_recommendation(trend, confidence, current_price, overall_mean),
        current_price=current_price,
        average_price=round(overall_mean),
        price_change=round(current_price - overall_mean),
        price_change_percent=change_percent,
        sample_size=len(prices),
    )


async def fetch_price_window(
    db: AsyncSession, crop: str, market: str, days: int = DEFAULT_WINDOW_DAYS
) -> list[PriceObservation]:
    """Observations for (crop, market) in the last `days` days, oldest first."""
    since = datetime.now(timezone.utc) - timedelta(days=days)
    result = await db.execute(
        select(PriceObservation)
        .where(PriceObservation.crop == crop)
        .where(PriceObservation.market == market)
        .where(PriceObservation.observed_at >= since)
        .order_by(PriceObservation.observed_at.asc())
    )
    return list(result.scalars().all())


async def analyze_price_trends(
    db: AsyncSession, crop: str, market: str, days: int = DEFAULT_WINDOW_DAYS
) -> TrendAnalysis:
    rows = await fetch_price_window(db, crop, market, days)
    return analyze_price_series([row.price for row in rows])
