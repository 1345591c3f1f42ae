"""Market analysis facade.

Combines trend analysis, cross-market comparison and the seasonal outlook
into one payload with a coarse BUY/SELL/HOLD action and a risk level.
"""

from dataclasses import dataclass
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from smartagri.services.comparison import MarketComparison, compare_markets_for_crop
from smartagri.services.seasonal import SeasonalPrediction, predict_seasonal_prices
from smartagri.services.trends import TrendAnalysis, analyze_price_trends

STRONG_TREND_CONFIDENCE = 70


@dataclass(frozen=True)
class MarketInsights:
    best_action: str
    risk_level: str
    confidence: int


@dataclass(frozen=True)
class MarketAnalysis:
    trend_analysis: TrendAnalysis
    market_comparison: MarketComparison
    seasonal_prediction: SeasonalPrediction
    insights: MarketInsights


def best_action(trend: TrendAnalysis, seasonal: SeasonalPrediction) -> str:
    if trend.trend == "up" and trend.confidence > STRONG_TREND_CONFIDENCE:
        return "SELL"
    if trend.trend == "down" and trend.confidence > STRONG_TREND_CONFIDENCE:
        return "BUY"
    if "high price season" in seasonal.recommendation:
        return "SELL"
    if "low price season" in seasonal.recommendation:
        return "BUY"
    return "HOLD"


def risk_level(trend: TrendAnalysis) -> str:
    if trend.confidence > 80:
        return "LOW"
    if trend.confidence > 60:
        return "MEDIUM"
    if trend.confidence > 40:
        return "HIGH"
    return "VERY_HIGH"


def build_insights(trend: TrendAnalysis, seasonal: SeasonalPrediction) -> MarketInsights:
    return MarketInsights(
        best_action=best_action(trend, seasonal),
        risk_level=risk_level(trend),
        confidence=trend.confidence,
    )


async def build_market_analysis(
    db: AsyncSession,
    crop: str,
    market: str,
    days: int,
    month: Optional[int] = None,
) -> MarketAnalysis:
    trend = await analyze_price_trends(db, crop, market, days)
    comparison = await compare_markets_for_crop(db, crop)
    seasonal = predict_seasonal_prices(crop, month)
    return MarketAnalysis(
        trend_analysis=trend,
        market_comparison=comparison,
        seasonal_prediction=seasonal,
        insights=build_insights(trend, seasonal),
    )
