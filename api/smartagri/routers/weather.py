"""Weather endpoints.

GET  /api/weather/current     -- current conditions + farming advisories (persisted)
GET  /api/weather/forecast    -- N-day outlook around current conditions
GET  /api/weather/alerts      -- warning-level advisories only
GET  /api/weather/historical  -- stored observations for a city
GET  /api/weather/cities      -- current conditions across major cities
POST /api/weather/update      -- manual correction of the latest observation
"""

from datetime import datetime, timezone
from typing import Optional

import structlog
from fastapi import APIRouter, HTTPException, Query

from smartagri.catalog import SUMMARY_CITIES
from smartagri.dependencies import DbSession, Publisher, Rng, WeatherSourceDep
from smartagri.errors import envelope
from smartagri.schemas.weather import (
    WeatherHistoryPoint,
    WeatherObservationOut,
    WeatherUpdateRequest,
)
from smartagri.services import weather_store
from smartagri.services.advisories import critical_alerts, farming_recommendations
from smartagri.services.realtime import WEATHER_DATA_UPDATED, WEATHER_UPDATE, weather_room
from smartagri.services.weather import fetch_cities, generate_forecast, summarize_cities

log = structlog.get_logger(__name__)

router = APIRouter(prefix="/api/weather", tags=["weather"])

DEFAULT_CITY = "delhi"


def _require_city(city: Optional[str]) -> None:
    if not city:
        raise HTTPException(status_code=400, detail="City parameter is required")


@router.get("/current")
async def get_current_weather(
    db: DbSession,
    weather_source: WeatherSourceDep,
    publisher: Publisher,
    city: str = DEFAULT_CITY,
) -> dict:
    """Fetch, persist and broadcast current conditions with farming advisories."""
    _require_city(city)
    sourced = await weather_source.fetch(city)
    reading = sourced.value
    recommendations = farming_recommendations(reading)

    record = await weather_store.insert_reading(db, reading)
    data = WeatherObservationOut.model_validate(record)

    publisher.publish_nowait(
        WEATHER_UPDATE,
        weather_room(city),
        {"data": data, "recommendations": recommendations},
    )
    log.info(
        "weather_fetched",
        city=city,
        outcome=sourced.outcome.value,
        advisories=len(recommendations),
    )
    return envelope(
        data,
        recommendations=recommendations,
        source=sourced.source_label,
        outcome=sourced.outcome.value,
        last_updated=datetime.now(timezone.utc),
    )


@router.get("/forecast")
async def get_weather_forecast(
    weather_source: WeatherSourceDep,
    rng: Rng,
    city: str = DEFAULT_CITY,
    days: int = Query(default=5, ge=1, le=14),
) -> dict:
    _require_city(city)
    current = await weather_source.fetch(city)
    forecast = generate_forecast(current.value, days, rng)
    return envelope(
        forecast,
        city=city,
        days=days,
        generated_at=datetime.now(timezone.utc),
    )


@router.get("/alerts")
async def get_weather_alerts(
    weather_source: WeatherSourceDep,
    city: str = DEFAULT_CITY,
) -> dict:
    _require_city(city)
    sourced = await weather_source.fetch(city)
    reading = sourced.value
    advisories = farming_recommendations(reading)
    alerts = critical_alerts(advisories)
    return envelope(
        {
            "city": city,
            "current_conditions": {
                "temperature": reading.temperature,
                "humidity": reading.humidity,
                "rainfall": reading.rainfall,
                "condition": reading.condition,
            },
            "alerts": alerts,
            "all_recommendations": advisories,
        },
        alert_count=len(alerts),
        timestamp=datetime.now(timezone.utc),
    )


@router.get("/historical")
async def get_historical_weather(
    db: DbSession,
    city: Optional[str] = None,
    days: int = Query(default=7, ge=1, le=365),
) -> dict:
    _require_city(city)
    rows = await weather_store.weather_history(db, city, days)
    history = [WeatherHistoryPoint.model_validate(row) for row in rows]
    return envelope(
        history,
        city=city,
        period=f"{days} days",
        record_count=len(history),
    )


@router.get("/cities")
async def get_cities_weather(weather_source: WeatherSourceDep) -> dict:
    results = await fetch_cities(weather_source, SUMMARY_CITIES)
    readings = [result.value for result in results]
    return envelope(
        readings,
        summary=summarize_cities(readings),
        timestamp=datetime.now(timezone.utc),
    )


@router.post("/update")
async def update_weather_data(
    body: WeatherUpdateRequest,
    db: DbSession,
    publisher: Publisher,
) -> dict:
    fields = body.weather_data.model_dump(exclude_none=True)
    if body.weather_data.forecast is not None:
        fields["forecast"] = [
            entry.model_dump(mode="json") for entry in body.weather_data.forecast
        ]
    fields["is_simulated"] = False

    record = await weather_store.upsert_latest(db, body.city, fields)
    data = WeatherObservationOut.model_validate(record)

    publisher.publish_nowait(
        WEATHER_DATA_UPDATED,
        weather_room(body.city),
        data,
        message="Weather data manually updated",
    )
    log.info("weather_data_updated", city=body.city)
    return envelope(data, message="Weather data updated successfully")
