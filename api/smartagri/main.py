import asyncio
from contextlib import asynccontextmanager

import redis.asyncio as aioredis
import structlog
from fastapi import FastAPI, Response
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy import text
from starlette.exceptions import HTTPException as StarletteHTTPException

from smartagri.config import settings
from smartagri.database import async_session_factory, verify_connection
from smartagri.errors import (
    http_exception_handler,
    unhandled_exception_handler,
    validation_exception_handler,
)
from smartagri.logging_config import configure_logging
from smartagri.metrics import metrics_endpoint
from smartagri.middleware.logging_middleware import RequestLoggingMiddleware
from smartagri.routers import chat, knowledge, market, realtime, weather
from smartagri.worker.market_feed_worker import market_feed_worker_loop

log = structlog.get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Configure structured logging before anything else
    configure_logging()

    # Fail startup if the database is unreachable
    try:
        await verify_connection()
    except Exception as exc:
        log.critical("database_unreachable", error=str(exc))
        raise

    app.state.redis = aioredis.from_url(
        settings.redis_url, encoding="utf-8", decode_responses=True
    )

    app.state.market_feed_task = None
    if settings.market_feed_enabled:
        app.state.market_feed_task = asyncio.create_task(
            market_feed_worker_loop(app.state.redis)
        )

    log.info(
        "startup_complete",
        environment=settings.environment,
        market_feed_enabled=settings.market_feed_enabled,
    )
    try:
        yield
    finally:
        if app.state.market_feed_task is not None:
            app.state.market_feed_task.cancel()
        await app.state.redis.aclose()


app = FastAPI(title="SmartAgri API", version="0.1.0", lifespan=lifespan)

app.add_middleware(RequestLoggingMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization", "X-Requested-With"],
    allow_credentials=True,
)

app.add_exception_handler(StarletteHTTPException, http_exception_handler)
app.add_exception_handler(RequestValidationError, validation_exception_handler)
app.add_exception_handler(Exception, unhandled_exception_handler)

app.include_router(market.router)
app.include_router(weather.router)
app.include_router(knowledge.router)
app.include_router(chat.router)
app.include_router(realtime.router)

# Prometheus metrics endpoint
app.get("/metrics")(metrics_endpoint)


@app.get("/health")
async def health_check(response: Response):
    """Verify database, Redis and (when enabled) the market feed worker.

    Returns 200 if all components are healthy, 503 if any component is unhealthy.
    """
    checks = {}
    overall_healthy = True

    try:
        async with async_session_factory() as db:
            await db.execute(text("SELECT 1"))
        checks["database"] = {"status": "healthy"}
    except Exception as e:
        checks["database"] = {"status": "unhealthy", "error": str(e)}
        overall_healthy = False

    try:
        await app.state.redis.ping()
        checks["redis"] = {"status": "healthy"}
    except Exception as e:
        checks["redis"] = {"status": "unhealthy", "error": str(e)}
        overall_healthy = False

    worker = getattr(app.state, "market_feed_task", None)
    if worker is None:
        checks["market_feed_worker"] = {"status": "disabled"}
    elif worker.done() or worker.cancelled():
        checks["market_feed_worker"] = {
            "status": "unhealthy",
            "error": "Worker task stopped",
        }
        overall_healthy = False
    else:
        checks["market_feed_worker"] = {"status": "healthy"}

    response.status_code = 200 if overall_healthy else 503
    return {"status": "healthy" if overall_healthy else "unhealthy", "checks": checks}
