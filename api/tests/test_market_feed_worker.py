"""Tests for one market feed refresh cycle."""

import asyncio
import random
import uuid
from dataclasses import asdict
from types import SimpleNamespace

from smartagri.catalog import Crop, Market
from smartagri.services import market_store
from smartagri.services.pricing import SimulatedPriceSource
from smartagri.services.realtime import EventPublisher
from smartagri.worker.market_feed_worker import refresh_market_prices


def test_refresh_writes_one_sample_per_pair(monkeypatch):
    stored = []

    async def fake_insert_sample(db, sample):
        stored.append(sample)
        return SimpleNamespace(id=uuid.uuid4(), **asdict(sample))

    monkeypatch.setattr(market_store, "insert_sample", fake_insert_sample)

    written = asyncio.run(
        refresh_market_prices(object(), SimulatedPriceSource(random.Random(0)), EventPublisher(None))
    )

    assert written == len(Crop) * len(Market)
    assert len(stored) == written
    assert {(s.crop, s.market) for s in stored} == {(c.value, m.value) for c in Crop for m in Market}
    assert all(s.source == "simulated" for s in stored)
