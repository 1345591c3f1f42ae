"""Market price sources.

SimulatedPriceSource stands in for a live market feed by perturbing a
per-crop base price within its volatility band. GovernmentPriceSource reads
the data.gov.in commodity price resource. FallbackPriceSource composes the
two so callers see one interface regardless of where a price came from.
"""

import random
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Optional

import httpx
import structlog

from smartagri.catalog import DEFAULT_UNIT, PriceSourceTag, PriceTrend
from smartagri.errors import SourceUnavailableError
from smartagri.metrics import source_fallbacks
from smartagri.services.sources import Sourced, SourceOutcome

log = structlog.get_logger(__name__)


@dataclass(frozen=True)
class CropPricing:
    base: float
    volatility: float


# Rupees per quintal
BASE_PRICES: dict[str, CropPricing] = {
    "wheat": CropPricing(2100, 100),
    "rice": CropPricing(3200, 150),
    "cotton": CropPricing(5800, 300),
    "sugarcane": CropPricing(320, 20),
    "maize": CropPricing(1800, 80),
    "tomato": CropPricing(1200, 400),
    "potato": CropPricing(800, 200),
    "onion": CropPricing(1500, 500),
}

MARKET_MULTIPLIERS: dict[str, float] = {
    "delhi": 1.0,
    "mumbai": 1.05,
    "pune": 0.98,
    "bangalore": 1.08,
    "hyderabad": 1.02,
    "chennai": 1.03,
    "kolkata": 0.95,
}

# Simulated prices never drop below this share of the adjusted base
PRICE_FLOOR_RATIO = 0.5
VOLUME_RANGE = (500, 2500)


@dataclass
class PriceSample:
    crop: str
    market: str
    price: float
    trend: str
    change: float
    volume: int
    source: str
    unit: str = DEFAULT_UNIT
    observed_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


def adjusted_base_price(crop: str, market: str) -> Optional[float]:
    pricing = BASE_PRICES.get(crop)
    if pricing is None:
        return None
    return pricing.base * MARKET_MULTIPLIERS.get(market, 1.0)


def generate_price_sample(
    crop: str, market: str, rng: random.Random
) -> Optional[PriceSample]:
    """Draw one simulated price for (crop, market).

    Returns None for crops outside BASE_PRICES; callers then skip creating
    an observation.
    """
    pricing = BASE_PRICES.get(crop)
    if pricing is None:
        return None

    adjusted = pricing.base * MARKET_MULTIPLIERS.get(market, 1.0)
    perturbation = rng.uniform(-pricing.volatility, pricing.volatility)
    price = max(adjusted * PRICE_FLOOR_RATIO, round(adjusted + perturbation))

    if perturbation > 0:
        trend = PriceTrend.up
    elif perturbation < 0:
        trend = PriceTrend.down
    else:
        trend = PriceTrend.stable

    return PriceSample(
        crop=crop,
        market=market,
        price=price,
        trend=trend.value,
        change=round(perturbation / adjusted * 100, 2),
        volume=rng.randint(*VOLUME_RANGE),
        source=PriceSourceTag.simulated.value,
    )


class PriceSource(ABC):
    @abstractmethod
    async def fetch(self, crop: str, market: str) -> Optional[Sourced[PriceSample]]:
        """Return a price sample for (crop, market), or None if the crop is unsupported."""
        raise NotImplementedError


class SimulatedPriceSource(PriceSource):
    def __init__(self, rng: Optional[random.Random] = None) -> None:
        self.rng = rng or random.Random()

    async def fetch(self, crop: str, market: str) -> Optional[Sourced[PriceSample]]:
        sample = generate_price_sample(crop, market, self.rng)
        if sample is None:
            return None
        return Sourced(sample, SourceOutcome.SIMULATED)


class GovernmentPriceSource(PriceSource):
    """Latest modal price from the data.gov.in mandi price resource."""

    def __init__(
        self,
        api_url: str,
        api_key: str,
        timeout: float = 5.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.api_url = api_url
        self.api_key = api_key
        self.timeout = timeout
        self._transport = transport

    async def fetch(self, crop: str, market: str) -> Optional[Sourced[PriceSample]]:
        params = {
            "api-key": self.api_key,
            "format": "json",
            "filters[crop]": crop,
            "filters[market]": market,
            "limit": 1,
        }
        try:
            async with httpx.AsyncClient(
                timeout=self.timeout, transport=self._transport
            ) as client:
                resp = await client.get(self.api_url, params=params)
                resp.raise_for_status()
                payload = resp.json()
        except (httpx.HTTPError, ValueError) as exc:
            raise SourceUnavailableError(f"market feed request failed: {exc}") from exc

        records = payload.get("records") if isinstance(payload, dict) else None
        if not records:
            raise SourceUnavailableError(f"market feed has no record for {crop}/{market}")

        record = records[0]
        try:
            price = float(record["modal_price"])
        except (KeyError, TypeError, ValueError) as exc:
            raise SourceUnavailableError(f"malformed market feed record: {exc}") from exc

        try:
            volume = int(float(record.get("arrival_weight") or 0))
        except (TypeError, ValueError):
            volume = 0

        sample = PriceSample(
            crop=crop,
            market=market,
            price=price,
            trend=PriceTrend.stable.value,
            change=0.0,
            volume=volume,
            source=PriceSourceTag.government.value,
        )
        return Sourced(sample, SourceOutcome.EXTERNAL)


class FallbackPriceSource(PriceSource):
    """Try the primary feed; on failure answer from the fallback, tagged FALLBACK."""

    def __init__(self, primary: PriceSource, fallback: PriceSource) -> None:
        self.primary = primary
        self.fallback = fallback

    async def fetch(self, crop: str, market: str) -> Optional[Sourced[PriceSample]]:
        try:
            result = await self.primary.fetch(crop, market)
            if result is not None:
                return result
        except SourceUnavailableError as exc:
            error = str(exc)
            log.warning("market_source_fallback", crop=crop, market=market, error=error)
            source_fallbacks.labels(kind="market").inc()
        else:
            error = "primary source returned no data"

        result = await self.fallback.fetch(crop, market)
        if result is None:
            return None
        return Sourced(result.value, SourceOutcome.FALLBACK, error=error)
