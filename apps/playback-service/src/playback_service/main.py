"""
Playback Service - FastAPI Application

Hosts ad-break synchronization sessions and exposes their state,
health and Prometheus metrics.
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI
from fastapi.responses import JSONResponse, Response
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest

from playback_service.api import sessions
from playback_service.logging_config import configure_focused_logging
from playback_service.metrics.prometheus import PlaybackMetrics
from playback_service.orchestrator.session_manager import SessionManager

configure_focused_logging()
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager."""
    logger.info("Playback service starting...")
    yield
    logger.info("Playback service shutting down...")
    await app.state.session_manager.cleanup_all()


app = FastAPI(
    title="Playback Service API",
    description="Synchronizes ad breaks with content playback and exposes session state",
    version="0.1.0",
    lifespan=lifespan,
)
app.state.session_manager = SessionManager()

# Register metric families so /metrics is populated before any session starts
PlaybackMetrics()

# Include routers
app.include_router(sessions.router, prefix="/v1/sessions", tags=["sessions"])


@app.get("/health")
async def health_check() -> JSONResponse:
    """Health check endpoint."""
    return JSONResponse({"status": "ok", "service": "playback-service"})


@app.get("/")
async def root() -> JSONResponse:
    """Root endpoint."""
    return JSONResponse(
        {
            "service": "playback-service",
            "version": "0.1.0",
            "status": "running",
            "active_sessions": app.state.session_manager.active_count,
        }
    )


@app.get("/metrics")
async def metrics() -> Response:
    """Prometheus metrics endpoint."""
    return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)
