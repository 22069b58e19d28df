"""FastAPI application factory."""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
import structlog

from callcal.api.routes import attendance, auth, health
from callcal.config.settings import settings
from callcal.core.exceptions import InvalidInputError, MemberNotFoundError, StorageError
from callcal.services.attendance import AttendanceService

logger = structlog.get_logger()


def create_app(service: AttendanceService) -> FastAPI:
    """Create the API application around an attendance service."""

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        """Application lifespan handler."""
        logger.info("Starting call-cal-bot API...")
        await service.store.create_schema()
        yield
        logger.info("call-cal-bot API shutdown complete")

    app = FastAPI(
        title="call-cal-bot API",
        description="Daily group check-in records",
        version="0.1.0",
        docs_url="/docs" if not settings.is_production else None,
        redoc_url="/redoc" if not settings.is_production else None,
        lifespan=lifespan,
    )
    app.state.service = service

    @app.exception_handler(InvalidInputError)
    async def invalid_input_handler(request: Request, exc: InvalidInputError) -> JSONResponse:
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"ok": False, "message": exc.message},
        )

    @app.exception_handler(MemberNotFoundError)
    async def member_not_found_handler(request: Request, exc: MemberNotFoundError) -> JSONResponse:
        return JSONResponse(
            status_code=status.HTTP_404_NOT_FOUND,
            content={"ok": False, "message": exc.message},
        )

    @app.exception_handler(StorageError)
    async def storage_error_handler(request: Request, exc: StorageError) -> JSONResponse:
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={"ok": False, "message": "db error"},
        )

    # Register routes
    app.include_router(health.router, tags=["Health"])
    app.include_router(auth.router, prefix="/api/v1/auth", tags=["Authentication"])
    app.include_router(attendance.router, prefix="/api/v1/attendance", tags=["Attendance"])

    return app
