"""Market price observation model.

Append-only time series: one row per price reading for a (crop, market) pair.
Rows are never updated in place; analysis always reads a window of them.
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import CheckConstraint, DateTime, Float, Index, Integer, String, func
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column

from smartagri.catalog import DEFAULT_UNIT, PriceSourceTag, PriceTrend

from .base import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class PriceObservation(Base):
    __tablename__ = "market_prices"
    __table_args__ = (
        CheckConstraint("price >= 0", name="ck_market_prices_price_non_negative"),
        CheckConstraint("volume >= 0", name="ck_market_prices_volume_non_negative"),
        Index("ix_market_prices_crop_market_observed", "crop", "market", "observed_at"),
    )

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4
    )
    crop: Mapped[str] = mapped_column(String(20), nullable=False)
    market: Mapped[str] = mapped_column(String(20), nullable=False)
    price: Mapped[float] = mapped_column(Float, nullable=False)
    trend: Mapped[str] = mapped_column(
        String(10), nullable=False, default=PriceTrend.stable.value
    )
    # Signed percent change relative to the reference price
    change: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    volume: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    unit: Mapped[str] = mapped_column(String(20), nullable=False, default=DEFAULT_UNIT)
    observed_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=_utcnow
    )
    source: Mapped[str] = mapped_column(
        String(20), nullable=False, default=PriceSourceTag.government.value
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
