# backend/interview_booking/main.py
"""
FastAPI application for the interview booking service.
"""

from contextlib import asynccontextmanager
import logging
from typing import AsyncIterator

from fastapi import FastAPI, Response

from . import __version__
from .core.config import settings
from .database import init_db
from .errors import register_error_handlers
from .monitoring.prometheus_metrics import prometheus_metrics
from .routes import booking_links, booking_management, public_booking, templates

logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    logger.info(f"Starting interview booking service ({settings.environment})")
    init_db()
    yield
    logger.info("Shutting down interview booking service")


def create_app() -> FastAPI:
    app = FastAPI(
        title="Interview Booking API",
        version=__version__,
        lifespan=lifespan,
    )
    register_error_handlers(app)

    app.include_router(booking_management.router)
    app.include_router(public_booking.router)
    app.include_router(templates.router)
    app.include_router(booking_links.router)

    @app.get("/api/health", tags=["health"])
    async def health_check():
        return {"status": "healthy", "version": __version__}

    @app.get("/metrics", include_in_schema=False)
    async def metrics() -> Response:
        return Response(
            content=prometheus_metrics.get_metrics(),
            media_type=prometheus_metrics.get_content_type(),
        )

    return app


app = create_app()
