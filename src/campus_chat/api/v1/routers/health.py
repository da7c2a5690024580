from __future__ import annotations

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse
from sqlalchemy import text

from campus_chat.infrastructure.db.session import AsyncSessionLocal

router = APIRouter(tags=["health"])


@router.get("/healthz")
async def healthz() -> dict[str, str]:
    return {"status": "ok"}


@router.get("/readyz")
async def readyz(request: Request) -> JSONResponse:
    errors: list[str] = []

    try:
        async with AsyncSessionLocal() as session:
            await session.execute(text("SELECT 1"))
    except Exception as exc:  # noqa: BLE001
        errors.append(f"postgres: {exc}")

    sessions = request.app.state.lifecycle.active_sessions
    if errors:
        return JSONResponse(
            status_code=503,
            content={"status": "unavailable", "errors": errors, "ws_sessions": sessions},
        )
    return JSONResponse(content={"status": "ready", "ws_sessions": sessions})
