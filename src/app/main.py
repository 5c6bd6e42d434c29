"""
StudyPro Global API - Main Application Entry Point

This module initializes and configures the FastAPI application including:
- Database and Redis connections
- Background job scheduler
- Rate limiting, request IDs and CORS middleware
- Error handlers and API routing
- Health check endpoints
"""

import logging
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

import app.models  # noqa: F401  (registers every mapper)
from app.api import api_router
from app.core.config import DEFAULT_JWT_SECRET, settings
from app.core.database import check_db, close_db, init_db
from app.core.error_handlers import register_error_handlers
from app.core.middleware import RequestIDMiddleware
from app.core.rate_limit import RateLimitMiddleware
from app.core.redis import close_redis, init_redis, ping_redis
from app.core.scheduler import start_scheduler, stop_scheduler
from app.modules.blog.jobs import register_blog_jobs
from app.modules.subscriptions.jobs import register_subscription_jobs

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(_app: FastAPI):
    """
    Application lifespan manager.

    Handles startup and shutdown events including:
    - Redis connection (optional outside production)
    - Database connection
    - Background job scheduler
    """
    logger.info(f"Starting {settings.app_name} in {settings.python_env} mode...")

    if settings.is_production:
        if settings.jwt_secret == DEFAULT_JWT_SECRET:
            raise RuntimeError("JWT_SECRET must be set in production")
        if not settings.payment_webhook_secret:
            raise RuntimeError("PAYMENT_WEBHOOK_SECRET must be set in production")
        if not settings.stripe_webhook_secret:
            logger.warning("STRIPE_WEBHOOK_SECRET is not set; Stripe webhooks will be rejected")

    try:
        await init_redis()
        logger.info("Redis connected")
    except Exception as e:
        logger.warning(f"Redis connection failed, using in-memory rate limits: {e}")
        if settings.is_production:
            raise

    try:
        await init_db()
        logger.info("Database connected")
    except Exception as e:
        logger.error(f"Database connection failed: {e}")
        if settings.is_production:
            raise

    if settings.scheduler_enabled:
        try:
            register_subscription_jobs()
            register_blog_jobs()
            await start_scheduler()
            logger.info("Background scheduler started")
        except Exception as e:
            logger.error(f"Background scheduler failed to start: {e}")
            if settings.is_production:
                raise

    yield

    logger.info(f"Shutting down {settings.app_name}...")

    # Wait for running jobs before closing connections they may use
    await stop_scheduler()
    await close_redis()
    await close_db()
    logger.info("Cleanup complete")


app = FastAPI(
    title=settings.app_name,
    description="University application platform API",
    version="1.0.0",
    docs_url="/docs" if settings.is_development else None,
    redoc_url="/redoc" if settings.is_development else None,
    lifespan=lifespan,
)

register_error_handlers(app)

app.include_router(api_router, prefix="/api/v1")

# Starlette runs the last added middleware first: CORS, then request IDs, then rate limits
app.add_middleware(
    RateLimitMiddleware,
    limit=settings.rate_limit_requests,
    window_seconds=settings.rate_limit_window_seconds,
)
app.add_middleware(RequestIDMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["X-Request-ID", "Retry-After"],
)

if Path(settings.upload_dir).is_dir():
    app.mount("/uploads", StaticFiles(directory=settings.upload_dir), name="uploads")


@app.get("/", tags=["Root"])
async def root() -> dict[str, str]:
    """Root endpoint - service information."""
    return {
        "name": settings.app_name,
        "status": "running",
        "version": app.version,
        "environment": settings.python_env,
        "api": "/api/v1",
    }


@app.get("/api/health", tags=["Health"])
async def health_check() -> dict[str, str]:
    """Health check with dependency status. Redis is optional, so only the database degrades it."""
    database_ok = await check_db()
    redis_ok = await ping_redis()
    return {
        "status": "healthy" if database_ok else "degraded",
        "environment": settings.python_env,
        "database": "connected" if database_ok else "unavailable",
        "redis": "connected" if redis_ok else "unavailable",
    }


@app.get("/ready", tags=["Health"])
async def readiness_check() -> dict[str, str]:
    """Readiness check endpoint."""
    return {"status": "ready"}
