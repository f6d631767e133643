"""Main FastAPI application."""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from datetime import UTC, datetime

from fastapi import FastAPI, Response
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.middleware.gzip import GZipMiddleware

from src.api import api_router
from src.config import get_settings
from src.db import async_session_maker, init_db
from src.utils.cache import cache
from src.utils.http_client import close_all_clients
from src.utils.logging import get_logger, setup_logging
from src.utils.metrics import MetricsMiddleware, metrics

settings = get_settings()
setup_logging()
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan handler."""
    # Startup
    await init_db()
    logger.info("Database initialized")

    # Initialize Redis cache
    if await cache.connect():
        logger.info("Redis cache connected")
    else:
        logger.warning("Redis cache unavailable - running without caching")

    if not settings.tmdb_api_key:
        logger.warning("TMDB_API_KEY not set - recommendations will use local content only")

    yield

    # Close Redis cache connection
    await cache.close()
    logger.info("Redis cache closed")

    # Close persistent HTTP clients
    await close_all_clients()
    logger.info("HTTP clients closed")

    logger.info("Application shutdown complete")


app = FastAPI(
    title=settings.app_name,
    version="0.1.0",
    lifespan=lifespan,
)

# Middleware (order matters - first added = last executed)
app.add_middleware(MetricsMiddleware)  # Collect HTTP metrics
app.add_middleware(GZipMiddleware, minimum_size=500)  # Compress responses > 500 bytes

# CORS configuration for API access
if settings.is_development:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["http://localhost:3000", "http://localhost:8080", "http://127.0.0.1:8080"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
else:
    # Production: only allow same origin
    app.add_middleware(
        CORSMiddleware,
        allow_origins=[settings.app_url],
        allow_credentials=True,
        allow_methods=["GET", "POST"],
        allow_headers=["Content-Type", "Authorization"],
    )

# Routers
app.include_router(api_router)


# Store app start time for uptime tracking
_app_start_time = datetime.now(UTC)


@app.get("/health", include_in_schema=True, tags=["monitoring"])
async def health_check() -> JSONResponse:
    """Health check endpoint for monitoring and load balancers.

    The cache is optional: an unreachable Redis is reported but does not
    degrade the service.
    """
    from sqlalchemy import text

    health_status = {
        "status": "healthy",
        "timestamp": datetime.now(UTC).isoformat(),
        "uptime_seconds": (datetime.now(UTC) - _app_start_time).total_seconds(),
        "version": "0.1.0",
        "checks": {},
    }

    # Check database connection
    try:
        async with async_session_maker() as db:
            await db.execute(text("SELECT 1"))
        health_status["checks"]["database"] = {"status": "healthy"}
    except Exception:
        health_status["checks"]["database"] = {"status": "unhealthy"}
        health_status["status"] = "degraded"

    # Check Redis connection
    try:
        await cache.ping()
        health_status["checks"]["redis"] = {"status": "healthy"}
    except Exception:
        health_status["checks"]["redis"] = {"status": "unavailable"}

    status_code = 200 if health_status["status"] == "healthy" else 503
    return JSONResponse(content=health_status, status_code=status_code)


@app.get("/metrics", include_in_schema=True, tags=["monitoring"])
async def prometheus_metrics() -> Response:
    """Prometheus metrics endpoint.

    Returns:
        Prometheus-formatted metrics text.
    """
    return Response(
        content=metrics.format_prometheus(),
        media_type="text/plain; charset=utf-8",
    )
