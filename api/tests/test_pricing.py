"""Tests for simulated and external market price sources."""

import asyncio
import random

import httpx
import pytest

from smartagri.errors import SourceUnavailableError
from smartagri.services.pricing import (
    BASE_PRICES,
    MARKET_MULTIPLIERS,
    PRICE_FLOOR_RATIO,
    VOLUME_RANGE,
    FallbackPriceSource,
    GovernmentPriceSource,
    PriceSource,
    SimulatedPriceSource,
    adjusted_base_price,
    generate_price_sample,
)
from smartagri.services.sources import SourceOutcome


class FixedRandom(random.Random):
    """Random whose uniform() always returns the same perturbation."""

    def __init__(self, value: float) -> None:
        super().__init__(0)
        self.value = value

    def uniform(self, a, b):
        return self.value


class FailingPriceSource(PriceSource):
    async def fetch(self, crop, market):
        raise SourceUnavailableError("feed down")


def test_adjusted_base_price_applies_market_multiplier():
    assert adjusted_base_price("wheat", "mumbai") == pytest.approx(2100 * 1.05)
    assert adjusted_base_price("wheat", "nowhere") == 2100
    assert adjusted_base_price("quinoa", "delhi") is None


def test_simulated_prices_respect_floor_and_volume_range():
    rng = random.Random(42)
    for _ in range(20):
        for crop, pricing in BASE_PRICES.items():
            for market, multiplier in MARKET_MULTIPLIERS.items():
                sample = generate_price_sample(crop, market, rng)
                adjusted = pricing.base * multiplier
                assert sample.price >= adjusted * PRICE_FLOOR_RATIO
                assert abs(sample.price - adjusted) <= pricing.volatility + 1
                assert VOLUME_RANGE[0] <= sample.volume <= VOLUME_RANGE[1]
                assert sample.source == "simulated"
                assert sample.unit == "quintal"


def test_simulated_trend_follows_perturbation_sign():
    rng = random.Random(7)
    for _ in range(100):
        sample = generate_price_sample("onion", "delhi", rng)
        if sample.change > 0:
            assert sample.trend == "up"
        elif sample.change < 0:
            assert sample.trend == "down"


def test_zero_perturbation_is_stable():
    sample = generate_price_sample("wheat", "delhi", FixedRandom(0.0))
    assert sample.trend == "stable"
    assert sample.change == 0.0
    assert sample.price == 2100


def test_positive_perturbation_reports_percent_change():
    sample = generate_price_sample("wheat", "delhi", FixedRandom(42.0))
    assert sample.trend == "up"
    assert sample.price == 2142
    assert sample.change == 2.0


def test_unknown_crop_produces_no_sample():
    assert generate_price_sample("quinoa", "delhi", random.Random(1)) is None


def test_same_seed_reproduces_prices():
    first = generate_price_sample("rice", "pune", random.Random(99))
    second = generate_price_sample("rice", "pune", random.Random(99))
    assert (first.price, first.volume, first.change) == (second.price, second.volume, second.change)


def test_simulated_source_tags_outcome():
    source = SimulatedPriceSource(random.Random(3))
    result = asyncio.run(source.fetch("maize", "kolkata"))
    assert result.outcome is SourceOutcome.SIMULATED
    assert result.is_simulated
    assert result.source_label == "simulated"
    assert asyncio.run(source.fetch("quinoa", "kolkata")) is None


def _government_source(handler) -> GovernmentPriceSource:
    return GovernmentPriceSource(
        "https://api.example.test/resource",
        "secret",
        transport=httpx.MockTransport(handler),
    )


def test_government_source_maps_modal_price():
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.params["api-key"] == "secret"
        assert request.url.params["filters[crop]"] == "wheat"
        return httpx.Response(
            200, json={"records": [{"modal_price": "2250", "arrival_weight": "730.5"}]}
        )

    result = asyncio.run(_government_source(handler).fetch("wheat", "delhi"))

    assert result.outcome is SourceOutcome.EXTERNAL
    assert result.source_label == "external_api"
    assert result.value.price == 2250.0
    assert result.value.volume == 730
    assert result.value.source == "government"
    assert result.value.trend == "stable"


def test_government_source_raises_on_empty_records():
    source = _government_source(lambda request: httpx.Response(200, json={"records": []}))
    with pytest.raises(SourceUnavailableError):
        asyncio.run(source.fetch("wheat", "delhi"))


def test_government_source_raises_on_http_error():
    source = _government_source(lambda request: httpx.Response(503))
    with pytest.raises(SourceUnavailableError):
        asyncio.run(source.fetch("wheat", "delhi"))


def test_government_source_raises_on_malformed_record():
    source = _government_source(
        lambda request: httpx.Response(200, json={"records": [{"modal_price": "n/a"}]})
    )
    with pytest.raises(SourceUnavailableError):
        asyncio.run(source.fetch("wheat", "delhi"))


def test_fallback_source_uses_simulator_when_primary_fails():
    source = FallbackPriceSource(FailingPriceSource(), SimulatedPriceSource(random.Random(5)))

    result = asyncio.run(source.fetch("wheat", "delhi"))

    assert result.outcome is SourceOutcome.FALLBACK
    assert result.source_label == "simulated"
    assert result.error == "feed down"
    assert result.value.source == "simulated"


def test_fallback_source_passes_primary_result_through():
    primary = _government_source(
        lambda request: httpx.Response(200, json={"records": [{"modal_price": 3300}]})
    )
    source = FallbackPriceSource(primary, SimulatedPriceSource(random.Random(5)))

    result = asyncio.run(source.fetch("rice", "delhi"))

    assert result.outcome is SourceOutcome.EXTERNAL
    assert result.value.price == 3300.0
