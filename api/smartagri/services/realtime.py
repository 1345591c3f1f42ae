"""Real-time event fan-out over Redis pub/sub.

Events are published to per-topic rooms ("market-wheat", "weather-delhi").
Publishing is fire-and-forget: the request path schedules the publish as a
tracked background task and never waits for it, and a missing or failing
Redis connection is logged rather than raised.
"""

import asyncio
import json
from datetime import datetime, timezone
from typing import Any, Optional

import structlog
from fastapi.encoders import jsonable_encoder

from smartagri.config import settings
from smartagri.metrics import realtime_publishes

log = structlog.get_logger(__name__)

MARKET_DATA_ADDED = "market-data-added"
WEATHER_UPDATE = "weather-update"
WEATHER_DATA_UPDATED = "weather-data-updated"

# Track background tasks to prevent GC before completion
_background_tasks: set[asyncio.Task] = set()


def _track_task(coro) -> None:
    task = asyncio.create_task(coro)
    _background_tasks.add(task)
    task.add_done_callback(_background_tasks.discard)


def market_room(crop: str) -> str:
    return f"market-{crop}"


def weather_room(city: str) -> str:
    return f"weather-{city}"


def channel_name(room: str) -> str:
    return f"{settings.realtime_channel_prefix}{room}"


def room_for_join(request: Any) -> Optional[str]:
    """Map a client join request to a room name, or None if it is not one."""
    if not isinstance(request, dict):
        return None
    action = request.get("action")
    if action == "join-market" and request.get("crop"):
        return market_room(str(request["crop"]).lower())
    if action == "join-weather" and request.get("city"):
        return weather_room(str(request["city"]).lower())
    return None


def build_event(event: str, room: str, data: Any, message: Optional[str] = None) -> str:
    body = {
        "event": event,
        "room": room,
        "data": jsonable_encoder(data),
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }
    if message is not None:
        body["message"] = message
    return json.dumps(body)


class EventPublisher:
    def __init__(self, redis) -> None:
        self.redis = redis

    async def publish(
        self, event: str, room: str, data: Any, message: Optional[str] = None
    ) -> bool:
        """Publish one event; returns False when nothing was delivered to Redis."""
        if self.redis is None:
            realtime_publishes.labels(event=event, status="skipped").inc()
            return False
        try:
            receivers = await self.redis.publish(
                channel_name(room), build_event(event, room, data, message)
            )
        except Exception as exc:
            log.warning("realtime_publish_failed", publish_event=event, room=room, error=str(exc))
            realtime_publishes.labels(event=event, status="failed").inc()
            return False
        realtime_publishes.labels(event=event, status="ok").inc()
        log.debug("realtime_published", publish_event=event, room=room, receivers=receivers)
        return True

    def publish_nowait(
        self, event: str, room: str, data: Any, message: Optional[str] = None
    ) -> None:
        if self.redis is None:
            return
        _track_task(self.publish(event, room, data, message))
