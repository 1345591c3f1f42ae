"""Current weather sources and a simple forecast generator.

OpenWeatherSource maps the OpenWeatherMap current-conditions payload into a
WeatherReading. SimulatedWeatherSource produces plausible readings from a
per-city baseline with small random jitter. FallbackWeatherSource answers
from the simulator whenever the external API fails, tagging the result so
callers can tell the two apart.
"""

import asyncio
import random
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Optional, Sequence

import httpx
import structlog

from smartagri.errors import SourceUnavailableError
from smartagri.metrics import source_fallbacks
from smartagri.services.sources import Sourced, SourceOutcome

log = structlog.get_logger(__name__)

# city -> (base temperature °C, base humidity %)
CITY_BASELINES: dict[str, tuple[float, float]] = {
    "delhi": (28, 65),
    "mumbai": (32, 78),
    "pune": (26, 60),
    "bangalore": (24, 70),
    "hyderabad": (29, 65),
    "chennai": (31, 75),
}
DEFAULT_BASELINE = (27, 65)

CONDITIONS = [
    "Clear",
    "Partly Cloudy",
    "Cloudy",
    "Overcast",
    "Light Rain",
    "Moderate Rain",
    "Heavy Rain",
    "Thunderstorm",
]

TEMPERATURE_JITTER = 2
HUMIDITY_JITTER = 5
HUMIDITY_BOUNDS = (30, 95)
FORECAST_TEMPERATURE_JITTER = 3


@dataclass
class WeatherReading:
    city: str
    temperature: float
    humidity: float
    rainfall: float
    condition: str
    wind_speed: float
    pressure: float = 1013
    is_simulated: bool = False
    observed_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


@dataclass(frozen=True)
class ForecastDay:
    date: datetime
    temperature: float
    condition: str
    rainfall: float


def simulate_reading(city: str, rng: random.Random) -> WeatherReading:
    base_temp, base_humidity = CITY_BASELINES.get(city, DEFAULT_BASELINE)
    temperature = round(base_temp + rng.uniform(-TEMPERATURE_JITTER, TEMPERATURE_JITTER))
    humidity = round(base_humidity + rng.uniform(-HUMIDITY_JITTER, HUMIDITY_JITTER))
    low, high = HUMIDITY_BOUNDS
    return WeatherReading(
        city=city,
        temperature=temperature,
        humidity=max(low, min(high, humidity)),
        rainfall=round(rng.uniform(0, 50)),
        condition=rng.choice(CONDITIONS),
        wind_speed=round(rng.uniform(5, 25)),
        pressure=round(rng.uniform(1000, 1050)),
        is_simulated=True,
    )


def generate_forecast(
    current: WeatherReading, days: int, rng: random.Random
) -> list[ForecastDay]:
    """Daily outlook starting today, jittered around the current temperature."""
    today = datetime.now(timezone.utc)
    return [
        ForecastDay(
            date=today + timedelta(days=offset),
            temperature=round(
                current.temperature
                + rng.uniform(-FORECAST_TEMPERATURE_JITTER, FORECAST_TEMPERATURE_JITTER),
                1,
            ),
            condition=rng.choice(CONDITIONS),
            rainfall=round(rng.uniform(0, 30)),
        )
        for offset in range(days)
    ]


class WeatherSource(ABC):
    @abstractmethod
    async def fetch(self, city: str) -> Sourced[WeatherReading]:
        raise NotImplementedError


class SimulatedWeatherSource(WeatherSource):
    def __init__(self, rng: Optional[random.Random] = None) -> None:
        self.rng = rng or random.Random()

    async def fetch(self, city: str) -> Sourced[WeatherReading]:
        return Sourced(simulate_reading(city, self.rng), SourceOutcome.SIMULATED)


class OpenWeatherSource(WeatherSource):
    def __init__(
        self,
        base_url: str,
        api_key: str,
        timeout: float = 5.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.api_key = api_key
        self.timeout = timeout
        self._transport = transport

    async def fetch(self, city: str) -> Sourced[WeatherReading]:
        try:
            async with httpx.AsyncClient(
                timeout=self.timeout, transport=self._transport
            ) as client:
                resp = await client.get(
                    f"{self.base_url}/weather",
                    params={"q": city, "appid": self.api_key, "units": "metric"},
                )
                resp.raise_for_status()
                payload = resp.json()
        except (httpx.HTTPError, ValueError) as exc:
            raise SourceUnavailableError(f"weather request failed: {exc}") from exc

        try:
            reading = WeatherReading(
                city=city,
                temperature=round(payload["main"]["temp"]),
                humidity=payload["main"]["humidity"],
                rainfall=(payload.get("rain") or {}).get("1h", 0),
                condition=payload["weather"][0]["description"],
                wind_speed=payload["wind"]["speed"],
                pressure=payload["main"]["pressure"],
            )
        except (KeyError, IndexError, TypeError, AttributeError) as exc:
            raise SourceUnavailableError(f"malformed weather payload: {exc!r}") from exc

        return Sourced(reading, SourceOutcome.EXTERNAL)


class FallbackWeatherSource(WeatherSource):
    def __init__(self, primary: WeatherSource, fallback: WeatherSource) -> None:
        self.primary = primary
        self.fallback = fallback

    async def fetch(self, city: str) -> Sourced[WeatherReading]:
        try:
            return await self.primary.fetch(city)
        except SourceUnavailableError as exc:
            log.warning("weather_source_fallback", city=city, error=str(exc))
            source_fallbacks.labels(kind="weather").inc()
            result = await self.fallback.fetch(city)
            return Sourced(result.value, SourceOutcome.FALLBACK, error=str(exc))


@dataclass(frozen=True)
class CitiesSummary:
    total_cities: int
    average_temperature: float
    average_humidity: float
    hottest_city: WeatherReading
    coldest_city: WeatherReading


async def fetch_cities(
    source: WeatherSource, cities: Sequence[str]
) -> list[Sourced[WeatherReading]]:
    return list(await asyncio.gather(*(source.fetch(city) for city in cities)))


def summarize_cities(readings: Sequence[WeatherReading]) -> Optional[CitiesSummary]:
    if not readings:
        return None
    count = len(readings)
    return CitiesSummary(
        total_cities=count,
        average_temperature=round(sum(r.temperature for r in readings) / count, 1),
        average_humidity=round(sum(r.humidity for r in readings) / count, 1),
        # ties go to the earliest city in the list
        hottest_city=max(readings, key=lambda r: r.temperature),
        coldest_city=min(readings, key=lambda r: r.temperature),
    )
