"""Weather observation model.

A fresh row is written for every current-conditions fetch, even when nothing
changed since the previous one.
"""

import uuid
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import Boolean, CheckConstraint, DateTime, Float, Index, String, func
from sqlalchemy.dialects.postgresql import JSON, UUID
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class WeatherObservation(Base):
    __tablename__ = "weather_observations"
    __table_args__ = (
        CheckConstraint(
            "humidity >= 0 AND humidity <= 100",
            name="ck_weather_observations_humidity_range",
        ),
        Index("ix_weather_observations_city_observed", "city", "observed_at"),
    )

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4
    )
    city: Mapped[str] = mapped_column(String(20), nullable=False)
    temperature: Mapped[float] = mapped_column(Float, nullable=False)
    humidity: Mapped[float] = mapped_column(Float, nullable=False)
    # Millimetres over the provider's reporting interval
    rainfall: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    condition: Mapped[str] = mapped_column(String(100), nullable=False)
    wind_speed: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    pressure: Mapped[float] = mapped_column(Float, nullable=False, default=1013.0)
    # List of {date, temperature, condition, rainfall}
    forecast: Mapped[Optional[list]] = mapped_column(JSON, nullable=True)
    observed_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=_utcnow
    )
    is_simulated: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    updated_by: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
