"""Tests for cross-market comparison and best deals."""

import asyncio
from datetime import datetime, timezone
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

from smartagri.services.comparison import (
    MarketQuote,
    compare_markets,
    latest_quotes,
    summarize_deals,
)

NOW = datetime(2024, 3, 1, tzinfo=timezone.utc)


def _quote(market: str, price: float) -> MarketQuote:
    return MarketQuote(market=market, price=price, trend="stable", change=0.0, observed_at=NOW)


def test_compare_markets_ranks_cheapest_first():
    result = compare_markets(
        "wheat",
        [_quote("mumbai", 2205), _quote("pune", 2058), _quote("delhi", 2100)],
    )

    assert [q.market for q in result.comparisons] == ["pune", "delhi", "mumbai"]
    assert result.best_market.market == "pune"
    assert result.worst_market.market == "mumbai"
    assert result.average_price == 2121
    assert all(result.best_market.price <= q.price for q in result.comparisons)


def test_compare_markets_with_no_data():
    result = compare_markets("wheat", [])
    assert result.best_market is None
    assert result.worst_market is None
    assert result.average_price is None
    assert result.comparisons == []


def test_latest_quotes_skips_markets_without_data(make_scalars_result):
    row = SimpleNamespace(market="delhi", price=2100, trend="up", change=1.2, observed_at=NOW)
    db = MagicMock()
    db.execute = AsyncMock(side_effect=[make_scalars_result([row]), make_scalars_result([])])

    quotes = asyncio.run(latest_quotes(db, "wheat", ["delhi", "mumbai"]))

    assert quotes == [MarketQuote("delhi", 2100, "up", 1.2, NOW)]
    assert db.execute.await_count == 2


def test_summarize_deals_groups_by_crop():
    rows = [
        SimpleNamespace(crop="wheat", market="delhi", price=2000),
        SimpleNamespace(crop="wheat", market="mumbai", price=2200),
        SimpleNamespace(crop="rice", market="pune", price=3000),
        SimpleNamespace(crop="wheat", market="pune", price=2100),
    ]

    deals = {deal.crop: deal for deal in summarize_deals(rows)}

    wheat = deals["wheat"]
    assert wheat.best_market.market == "delhi"
    assert wheat.worst_market.market == "mumbai"
    assert wheat.price_difference == 200
    assert wheat.price_difference_percent == 10.0
    assert wheat.available_markets == 3

    rice = deals["rice"]
    assert rice.best_market is rice.worst_market
    assert rice.price_difference == 0
    assert rice.available_markets == 1


def test_summarize_deals_zero_price_has_no_percent():
    rows = [
        SimpleNamespace(crop="tomato", market="delhi", price=0),
        SimpleNamespace(crop="tomato", market="pune", price=100),
    ]
    (deal,) = summarize_deals(rows)
    assert deal.price_difference_percent is None
