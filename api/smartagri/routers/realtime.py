"""WebSocket bridge to the Redis event channels.

Clients join rooms by sending ``{"action": "join-market", "crop": "wheat"}``
or ``{"action": "join-weather", "city": "delhi"}`` and then receive every
event published to the joined rooms.
"""

import asyncio
import json

import structlog
from fastapi import APIRouter, WebSocket, WebSocketDisconnect
from starlette.websockets import WebSocketState

from smartagri.services.realtime import channel_name, room_for_join

log = structlog.get_logger(__name__)

router = APIRouter(tags=["realtime"])

# Close code for "try again later" when the event bus is not available
UNAVAILABLE_CLOSE_CODE = 1013


async def _forward_events(pubsub, websocket: WebSocket) -> None:
    while True:
        if not pubsub.subscribed:
            await asyncio.sleep(0.1)
            continue
        message = await pubsub.get_message(ignore_subscribe_messages=True, timeout=1.0)
        if message is None:
            continue
        await websocket.send_text(message["data"])


async def _receive_joins(pubsub, websocket: WebSocket) -> None:
    try:
        while True:
            raw = await websocket.receive_text()
            try:
                request = json.loads(raw)
            except ValueError:
                request = None
            room = room_for_join(request)
            if room is None:
                await websocket.send_json({"event": "error", "message": "Unknown join request"})
                continue
            await pubsub.subscribe(channel_name(room))
            await websocket.send_json({"event": "joined", "room": room})
            log.info("realtime_client_joined", room=room)
    except WebSocketDisconnect:
        log.info("realtime_client_disconnected")


@router.websocket("/ws")
async def realtime_socket(websocket: WebSocket) -> None:
    await websocket.accept()
    redis = getattr(websocket.app.state, "redis", None)
    if redis is None:
        await websocket.close(code=UNAVAILABLE_CLOSE_CODE)
        return

    pubsub = redis.pubsub()
    receiver = asyncio.create_task(_receive_joins(pubsub, websocket))
    forwarder = asyncio.create_task(_forward_events(pubsub, websocket))
    log.info("realtime_client_connected")
    try:
        done, _ = await asyncio.wait(
            {receiver, forwarder}, return_when=asyncio.FIRST_COMPLETED
        )
        if forwarder in done:
            log.error("realtime_forwarder_failed", error=str(forwarder.exception()))
            if websocket.client_state == WebSocketState.CONNECTED:
                await websocket.close(code=UNAVAILABLE_CLOSE_CODE)
        else:
            receiver.result()
    finally:
        for task in (receiver, forwarder):
            task.cancel()
        await asyncio.gather(receiver, forwarder, return_exceptions=True)
        await pubsub.aclose()
