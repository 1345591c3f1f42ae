"""Tests for BUY/SELL/HOLD insights and the analysis facade."""

import asyncio
from datetime import datetime, timezone
from types import SimpleNamespace

import pytest

from smartagri.services import comparison, trends
from smartagri.services.comparison import MarketQuote
from smartagri.services.insights import best_action, build_market_analysis, risk_level
from smartagri.services.seasonal import predict_seasonal_prices
from smartagri.services.trends import TrendAnalysis


def _trend(trend: str, confidence: int) -> TrendAnalysis:
    return TrendAnalysis(trend=trend, confidence=confidence, recommendation="")


@pytest.mark.parametrize(
    "trend, confidence, month, expected",
    [
        ("up", 71, 8, "SELL"),
        ("down", 71, 2, "BUY"),
        ("up", 70, 2, "SELL"),
        ("up", 70, 8, "BUY"),
        ("stable", 0, 5, "HOLD"),
    ],
)
def test_best_action(trend, confidence, month, expected):
    seasonal = predict_seasonal_prices("wheat", month)
    assert best_action(_trend(trend, confidence), seasonal) == expected


@pytest.mark.parametrize(
    "confidence, expected",
    [(81, "LOW"), (80, "MEDIUM"), (61, "MEDIUM"), (60, "HIGH"), (41, "HIGH"), (40, "VERY_HIGH")],
)
def test_risk_level(confidence, expected):
    assert risk_level(_trend("up", confidence)) == expected


def test_build_market_analysis(monkeypatch):
    now = datetime.now(timezone.utc)

    async def fake_window(db, crop, market, days):
        return [SimpleNamespace(price=p) for p in (2000, 2000, 2300, 2300)]

    async def fake_quotes(db, crop, markets=comparison.COMPARISON_MARKETS):
        return [
            MarketQuote("delhi", 2300, "up", 2.0, now),
            MarketQuote("pune", 2100, "stable", 0.0, now),
        ]

    monkeypatch.setattr(trends, "fetch_price_window", fake_window)
    monkeypatch.setattr(comparison, "latest_quotes", fake_quotes)

    analysis = asyncio.run(build_market_analysis(object(), "wheat", "delhi", 30, month=5))

    assert analysis.trend_analysis.trend == "up"
    assert analysis.market_comparison.best_market.market == "pune"
    assert analysis.seasonal_prediction.current_season == "Summer"
    assert analysis.insights.best_action == "SELL"
    assert analysis.insights.risk_level == "LOW"
    assert analysis.insights.confidence == 100
