"""Tests for the market price endpoints."""

import random
import uuid
from dataclasses import asdict
from types import SimpleNamespace

from smartagri.dependencies import get_price_source
from smartagri.main import app
from smartagri.routers import market as market_router
from smartagri.services import comparison, market_store, trends
from smartagri.services.pricing import SimulatedPriceSource


def _fake_insert_sample(calls):
    async def _insert(db, sample):
        calls.append(sample)
        return SimpleNamespace(id=uuid.uuid4(), **asdict(sample))

    return _insert


def test_prices_returns_stored_rows(client, monkeypatch, price_row):
    async def fake_list(db, crop, market, limit):
        assert (crop, market, limit) == ("wheat", None, 50)
        return [price_row(), price_row(market="pune", price=2050.0)]

    monkeypatch.setattr(market_store, "list_prices", fake_list)

    response = client.get("/api/market/prices", params={"crop": "wheat"})

    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert body["count"] == 2
    assert body["source"] == "database"
    assert body["data"][1]["market"] == "pune"


def test_prices_generates_sample_for_empty_pair(client, monkeypatch):
    inserted = []

    async def fake_list(db, crop, market, limit):
        return []

    monkeypatch.setattr(market_store, "list_prices", fake_list)
    monkeypatch.setattr(market_store, "insert_sample", _fake_insert_sample(inserted))
    app.dependency_overrides[get_price_source] = lambda: SimulatedPriceSource(random.Random(1))

    response = client.get("/api/market/prices", params={"crop": "wheat", "market": "mumbai"})

    assert response.status_code == 200
    body = response.json()
    assert body["count"] == 1
    assert body["source"] == "simulated"
    assert body["data"][0]["source"] == "simulated"
    assert body["data"][0]["price"] >= 2100 * 1.05 * 0.5
    assert len(inserted) == 1


def test_prices_unknown_crop_returns_empty(client, monkeypatch):
    inserted = []

    async def fake_list(db, crop, market, limit):
        return []

    monkeypatch.setattr(market_store, "list_prices", fake_list)
    monkeypatch.setattr(market_store, "insert_sample", _fake_insert_sample(inserted))
    app.dependency_overrides[get_price_source] = lambda: SimulatedPriceSource(random.Random(1))

    response = client.get("/api/market/prices", params={"crop": "quinoa", "market": "delhi"})

    assert response.status_code == 200
    assert response.json()["count"] == 0
    assert inserted == []


def test_history_requires_crop_and_market(client):
    response = client.get("/api/market/history", params={"crop": "wheat"})

    assert response.status_code == 400
    body = response.json()
    assert body["success"] is False
    assert body["message"] == "Crop and market parameters are required"


def test_history_reports_price_range(client, monkeypatch, price_row):
    async def fake_history(db, crop, market, days):
        assert days == 7
        return [price_row(price=2000.0), price_row(price=2300.0), price_row(price=2150.0)]

    monkeypatch.setattr(market_store, "price_history", fake_history)

    response = client.get(
        "/api/market/history", params={"crop": "wheat", "market": "delhi", "days": 7}
    )

    body = response.json()
    assert body["record_count"] == 3
    assert body["period"] == "7 days"
    assert body["price_range"] == {"min": 2000.0, "max": 2300.0, "current": 2150.0}


def test_stats(client, monkeypatch):
    async def fake_crop_stats(db):
        return [{"crop": "wheat", "avg_price": 2100.0}]

    async def fake_overall(db):
        return None

    monkeypatch.setattr(market_store, "crop_stats", fake_crop_stats)
    monkeypatch.setattr(market_store, "overall_stats", fake_overall)

    body = client.get("/api/market/stats").json()

    assert body["data"]["crop_stats"][0]["crop"] == "wheat"
    assert body["data"]["overall_stats"] is None


def test_analysis(client, monkeypatch, price_row):
    async def fake_window(db, crop, market, days):
        return [price_row(price=p) for p in (2000.0, 2000.0, 2400.0, 2400.0)]

    async def fake_quotes(db, crop, markets=comparison.COMPARISON_MARKETS):
        return [comparison.quote_from_observation(price_row(market="pune", price=2050.0))]

    monkeypatch.setattr(trends, "fetch_price_window", fake_window)
    monkeypatch.setattr(comparison, "latest_quotes", fake_quotes)

    response = client.get("/api/market/analysis", params={"crop": "wheat", "market": "delhi"})

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["basic_info"] == {"crop": "wheat", "market": "delhi", "analysis_period": "30 days"}
    assert data["trend_analysis"]["trend"] == "up"
    assert data["market_comparison"]["best_market"]["market"] == "pune"
    assert data["ai_insights"] == {"best_action": "SELL", "risk_level": "LOW", "confidence": 100}


def test_analysis_requires_parameters(client):
    assert client.get("/api/market/analysis").status_code == 400


def test_deals(client, monkeypatch, price_row):
    async def fake_latest(db, crop=None):
        return [
            price_row(market="pune", price=2000.0),
            price_row(market="delhi", price=2500.0),
        ]

    monkeypatch.setattr(market_router, "latest_per_market", fake_latest)

    body = client.get("/api/market/deals").json()

    assert body["total_crops"] == 1
    deal = body["data"][0]
    assert deal["best_market"]["market"] == "pune"
    assert deal["worst_market"]["market"] == "delhi"
    assert deal["price_difference"] == 500.0
    assert deal["price_difference_percent"] == 25.0


def test_add_market_data(client, monkeypatch):
    captured = {}

    async def fake_insert(db, **fields):
        captured.update(fields)
        return SimpleNamespace(id=uuid.uuid4(), observed_at="2024-03-01T00:00:00Z", **fields)

    monkeypatch.setattr(market_store, "insert_observation", fake_insert)

    response = client.post(
        "/api/market/add",
        json={"crop": "wheat", "market": "delhi", "price": 2150, "trend": "up", "change": 2.4},
    )

    assert response.status_code == 201
    body = response.json()
    assert body["message"] == "Market data added successfully"
    assert body["data"]["price"] == 2150.0
    assert captured["crop"] == "wheat"
    assert captured["source"] == "government"
    assert captured["unit"] == "quintal"


def test_add_rejects_unknown_crop(client):
    response = client.post(
        "/api/market/add", json={"crop": "quinoa", "market": "delhi", "price": 100}
    )
    assert response.status_code == 400
    assert response.json()["message"] == "Invalid request parameters"


def test_add_rejects_negative_price(client):
    response = client.post(
        "/api/market/add", json={"crop": "wheat", "market": "delhi", "price": -5}
    )
    assert response.status_code == 400
