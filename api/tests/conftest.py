"""Shared fixtures: a TestClient wired to a mock database session."""

import uuid
from dataclasses import asdict
from datetime import datetime, timezone
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import pytest
from fastapi.testclient import TestClient

from smartagri.database import get_db
from smartagri.main import app


@pytest.fixture
def db_session():
    """Stand-in AsyncSession; tests patch the store functions that would query it."""
    session = MagicMock()
    session.execute = AsyncMock()
    session.commit = AsyncMock()
    session.refresh = AsyncMock()
    return session


@pytest.fixture
def client(db_session):
    async def _override_db():
        yield db_session

    app.dependency_overrides[get_db] = _override_db
    app.state.redis = None
    yield TestClient(app)
    app.dependency_overrides.clear()
    app.state.redis = None


@pytest.fixture
def price_row():
    def _make(**overrides):
        fields = {
            "id": uuid.uuid4(),
            "crop": "wheat",
            "market": "delhi",
            "price": 2100.0,
            "trend": "stable",
            "change": 0.0,
            "volume": 1000,
            "unit": "quintal",
            "observed_at": datetime.now(timezone.utc),
            "source": "government",
        }
        fields.update(overrides)
        return SimpleNamespace(**fields)

    return _make


@pytest.fixture
def weather_row():
    def _make(reading=None, **overrides):
        fields = {
            "id": uuid.uuid4(),
            "city": "delhi",
            "temperature": 28.0,
            "humidity": 65.0,
            "rainfall": 0.0,
            "condition": "Clear",
            "wind_speed": 10.0,
            "pressure": 1013.0,
            "forecast": None,
            "observed_at": datetime.now(timezone.utc),
            "is_simulated": False,
            "updated_by": None,
        }
        if reading is not None:
            fields.update(asdict(reading))
        fields.update(overrides)
        return SimpleNamespace(**fields)

    return _make


@pytest.fixture
def article_row():
    def _make(**overrides):
        now = datetime.now(timezone.utc)
        fields = {
            "id": uuid.uuid4(),
            "title": "Drip irrigation basics",
            "category": "irrigation",
            "content": "Drip lines deliver water directly to the root zone.",
            "summary": "Save water with drip irrigation.",
            "tags": ["water", "drip"],
            "author": "Agricultural Expert",
            "views": 0,
            "rating": 4.5,
            "is_featured": False,
            "language": "english",
            "created_at": now,
            "updated_at": now,
        }
        fields.update(overrides)
        return SimpleNamespace(**fields)

    return _make


def scalars_result(rows):
    """Mimic the object returned by AsyncSession.execute for scalar queries."""
    result = MagicMock()
    result.scalars.return_value.all.return_value = list(rows)
    result.scalars.return_value.first.return_value = rows[0] if rows else None
    return result


@pytest.fixture
def make_scalars_result():
    return scalars_result
