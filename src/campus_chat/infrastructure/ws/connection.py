from __future__ import annotations

import uuid
from typing import Protocol

from fastapi import WebSocket, WebSocketDisconnect
from starlette.websockets import WebSocketState

from campus_chat.application.exceptions import DispatchFailure


class Connection(Protocol):
    session_id: str
    user_id: int | None

    @property
    def is_open(self) -> bool: ...

    async def accept(self) -> None: ...

    async def send_text(self, raw: str) -> None: ...

    async def close(self, code: int = 1000, reason: str | None = None) -> None: ...


class WebSocketConnection:
    """Connection handle over a Starlette WebSocket."""

    def __init__(self, websocket: WebSocket) -> None:
        self._ws = websocket
        self.session_id = uuid.uuid4().hex
        self.user_id: int | None = None

    @property
    def is_open(self) -> bool:
        return (
            self._ws.client_state == WebSocketState.CONNECTED
            and self._ws.application_state == WebSocketState.CONNECTED
        )

    async def accept(self) -> None:
        await self._ws.accept()

    async def send_text(self, raw: str) -> None:
        try:
            await self._ws.send_text(raw)
        except (WebSocketDisconnect, RuntimeError, OSError) as exc:
            raise DispatchFailure(f"send on {self.session_id} failed: {exc!r}") from exc

    async def close(self, code: int = 1000, reason: str | None = None) -> None:
        if self.is_open:
            await self._ws.close(code=code, reason=reason)

    def __repr__(self) -> str:
        return f"<WebSocketConnection {self.session_id} user={self.user_id}>"
