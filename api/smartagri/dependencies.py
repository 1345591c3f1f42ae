"""Shared FastAPI dependencies.

Data sources are built once per process from settings and cached; tests
swap them through ``app.dependency_overrides``.
"""

import random
from functools import lru_cache
from typing import Annotated

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from smartagri.config import settings
from smartagri.database import get_db
from smartagri.services.pricing import (
    FallbackPriceSource,
    GovernmentPriceSource,
    PriceSource,
    SimulatedPriceSource,
)
from smartagri.services.realtime import EventPublisher
from smartagri.services.weather import (
    FallbackWeatherSource,
    OpenWeatherSource,
    SimulatedWeatherSource,
    WeatherSource,
)


@lru_cache
def get_rng() -> random.Random:
    return random.Random(settings.simulation_seed)


@lru_cache
def get_price_source() -> PriceSource:
    simulated = SimulatedPriceSource(get_rng())
    if not settings.market_api_key:
        return simulated
    return FallbackPriceSource(
        GovernmentPriceSource(
            settings.market_api_url,
            settings.market_api_key,
            timeout=settings.http_timeout_seconds,
        ),
        simulated,
    )


@lru_cache
def get_weather_source() -> WeatherSource:
    simulated = SimulatedWeatherSource(get_rng())
    if not settings.weather_api_key:
        return simulated
    return FallbackWeatherSource(
        OpenWeatherSource(
            settings.weather_base_url,
            settings.weather_api_key,
            timeout=settings.http_timeout_seconds,
        ),
        simulated,
    )


def get_publisher(request: Request) -> EventPublisher:
    return EventPublisher(getattr(request.app.state, "redis", None))


DbSession = Annotated[AsyncSession, Depends(get_db)]
Rng = Annotated[random.Random, Depends(get_rng)]
PriceSourceDep = Annotated[PriceSource, Depends(get_price_source)]
WeatherSourceDep = Annotated[WeatherSource, Depends(get_weather_source)]
Publisher = Annotated[EventPublisher, Depends(get_publisher)]
