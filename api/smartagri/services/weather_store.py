"""Queries and writes for weather observations."""

from datetime import datetime, timedelta, timezone
from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from smartagri.metrics import observations_created
from smartagri.models.weather_observation import WeatherObservation
from smartagri.services.weather import ForecastDay, WeatherReading


def _forecast_json(forecast: Optional[list[ForecastDay]]) -> Optional[list[dict]]:
    if forecast is None:
        return None
    return [
        {
            "date": day.date.isoformat(),
            "temperature": day.temperature,
            "condition": day.condition,
            "rainfall": day.rainfall,
        }
        for day in forecast
    ]


async def insert_reading(
    db: AsyncSession,
    reading: WeatherReading,
    forecast: Optional[list[ForecastDay]] = None,
) -> WeatherObservation:
    record = WeatherObservation(
        city=reading.city,
        temperature=reading.temperature,
        humidity=reading.humidity,
        rainfall=reading.rainfall,
        condition=reading.condition,
        wind_speed=reading.wind_speed,
        pressure=reading.pressure,
        forecast=_forecast_json(forecast),
        observed_at=reading.observed_at,
        is_simulated=reading.is_simulated,
    )
    db.add(record)
    await db.commit()
    await db.refresh(record)
    observations_created.labels(
        kind="weather", source="simulated" if reading.is_simulated else "external_api"
    ).inc()
    return record


async def weather_history(db: AsyncSession, city: str, days: int) -> list[WeatherObservation]:
    since = datetime.now(timezone.utc) - timedelta(days=days)
    result = await db.execute(
        select(WeatherObservation)
        .where(WeatherObservation.city == city)
        .where(WeatherObservation.observed_at >= since)
        .order_by(WeatherObservation.observed_at.asc())
    )
    return list(result.scalars().all())


async def upsert_latest(
    db: AsyncSession, city: str, fields: dict, updated_by: str = "admin"
) -> WeatherObservation:
    """Overwrite the newest observation for `city`, or create one if none exists."""
    result = await db.execute(
        select(WeatherObservation)
        .where(WeatherObservation.city == city)
        .order_by(WeatherObservation.observed_at.desc())
        .limit(1)
    )
    record = result.scalars().first()
    if record is None:
        record = WeatherObservation(city=city, **fields)
        db.add(record)
    else:
        for key, value in fields.items():
            setattr(record, key, value)
    record.observed_at = datetime.now(timezone.utc)
    record.updated_by = updated_by
    await db.commit()
    await db.refresh(record)
    return record
