"""Pydantic schemas for weather endpoints."""

import uuid
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from smartagri.catalog import City


class ForecastEntry(BaseModel):
    date: datetime
    temperature: float
    condition: str
    rainfall: float = Field(ge=0)


class WeatherFields(BaseModel):
    """Manually supplied conditions for POST /weather/update."""

    temperature: float
    humidity: float = Field(ge=0, le=100)
    rainfall: float = Field(default=0, ge=0)
    condition: str = Field(min_length=1, max_length=100)
    wind_speed: float = Field(default=0, ge=0)
    pressure: float = 1013
    forecast: Optional[list[ForecastEntry]] = None


class WeatherUpdateRequest(BaseModel):
    model_config = ConfigDict(use_enum_values=True)

    city: City
    weather_data: WeatherFields


class WeatherObservationOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: Optional[uuid.UUID] = None
    city: str
    temperature: float
    humidity: float
    rainfall: float
    condition: str
    wind_speed: float
    pressure: float
    forecast: Optional[list[ForecastEntry]] = None
    observed_at: datetime
    is_simulated: bool = False
    updated_by: Optional[str] = None


class WeatherHistoryPoint(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    temperature: float
    humidity: float
    rainfall: float
    condition: str
    observed_at: datetime
