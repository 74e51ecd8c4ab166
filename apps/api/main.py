import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Response
from fastapi.middleware.cors import CORSMiddleware
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest

from apps.api.errors import install_error_handlers
from apps.api.middlewares.metrics import MetricsMiddleware
from apps.api.routers import admin_reports, admin_users, gamification, health
from core.config import settings
from core.db import engine


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager."""
    # Startup
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    yield
    # Shutdown
    await engine.dispose()


app = FastAPI(
    title="Game Forge Admin API",
    description="Moderation and sanction back office for the Game Forge community",
    version="0.1.0",
    lifespan=lifespan,
    docs_url=None if settings.is_production else "/docs",
    redoc_url=None if settings.is_production else "/redoc",
    openapi_url=None if settings.is_production else "/openapi.json",
)

# Middlewares
app.add_middleware(MetricsMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"] if settings.is_development else [],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

install_error_handlers(app)

# Include routers
app.include_router(health.router, prefix="/health", tags=["health"])
app.include_router(admin_reports.router)  # Already has /admin/reports prefix
app.include_router(admin_users.router)  # Already has /admin/users prefix
app.include_router(gamification.router)  # Already has /gamification prefix


@app.get("/")
async def root() -> dict[str, str]:
    """Root endpoint."""
    return {"status": "ok", "service": "game-forge-admin"}


@app.get("/metrics")
async def metrics() -> Response:
    """Prometheus metrics endpoint."""
    return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)
