from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from campus_chat.api.middleware.correlation_id import CorrelationIdMiddleware
from campus_chat.api.v1.routers import health, messages, ws
from campus_chat.application.exceptions import AppError, InvalidCredential
from campus_chat.config import settings
from campus_chat.infrastructure.db.session import engine
from campus_chat.infrastructure.ws.directory import ConnectionDirectory
from campus_chat.infrastructure.ws.lifecycle import LifecycleManager

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Startup / shutdown lifecycle."""
    yield
    await engine.dispose()
    logger.info("Database engine disposed")


def create_app() -> FastAPI:
    app = FastAPI(
        title="Campus Chat Service",
        version="0.1.0",
        lifespan=lifespan,
    )

    app.state.directory = ConnectionDirectory()
    app.state.lifecycle = LifecycleManager(app.state.directory)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(CorrelationIdMiddleware)

    _register_exception_handlers(app)

    app.include_router(health.router)
    app.include_router(messages.router)
    app.include_router(ws.router)

    return app


def _register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(InvalidCredential)
    async def _invalid_credential(_req: Request, exc: InvalidCredential) -> JSONResponse:
        return JSONResponse(status_code=401, content={"detail": exc.detail})

    @app.exception_handler(AppError)
    async def _app_error(_req: Request, exc: AppError) -> JSONResponse:
        return JSONResponse(status_code=400, content={"detail": exc.detail})
