"""Pydantic schemas for market price endpoints."""

import uuid
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from smartagri.catalog import DEFAULT_UNIT, Crop, Market, PriceSourceTag, PriceTrend


class MarketDataCreate(BaseModel):
    """Request schema for POST /market/add."""

    model_config = ConfigDict(use_enum_values=True, validate_default=True)

    crop: Crop
    market: Market
    price: float = Field(ge=0)
    trend: PriceTrend = PriceTrend.stable
    change: float = 0.0
    volume: int = Field(default=0, ge=0)
    unit: str = Field(default=DEFAULT_UNIT, max_length=20)
    observed_at: Optional[datetime] = None
    source: PriceSourceTag = PriceSourceTag.government


class PriceObservationOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: Optional[uuid.UUID] = None
    crop: str
    market: str
    price: float
    trend: str
    change: float
    volume: int
    unit: str = DEFAULT_UNIT
    observed_at: datetime
    source: str


class PriceHistoryPoint(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    price: float
    observed_at: datetime
    trend: str
    change: float
    volume: int
