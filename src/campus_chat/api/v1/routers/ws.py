from __future__ import annotations

import logging

from fastapi import APIRouter, WebSocket, WebSocketDisconnect, status

from campus_chat.api.deps import LifecycleDep, MessageStoreDep, VerifierDep
from campus_chat.application.exceptions import DispatchFailure, PersistenceFailure
from campus_chat.infrastructure.ws.connection import WebSocketConnection
from campus_chat.infrastructure.ws.session import ChatSession

logger = logging.getLogger(__name__)
router = APIRouter(tags=["websocket"])


@router.websocket("/ws/chat")
async def ws_chat(
    websocket: WebSocket,
    lifecycle: LifecycleDep,
    verifier: VerifierDep,
    store: MessageStoreDep,
) -> None:
    connection = WebSocketConnection(websocket)
    session = await lifecycle.open(connection, verifier=verifier, store=store)
    try:
        await _read_loop(websocket, session)
    except WebSocketDisconnect:
        pass
    except PersistenceFailure:
        logger.exception("Persisting message failed on %s, closing", session.session_id)
        await connection.close(code=status.WS_1011_INTERNAL_ERROR, reason="message not stored")
    except DispatchFailure as exc:
        logger.info("Sender transport lost on %s: %s", session.session_id, exc.detail)
    except Exception:
        logger.exception("WS error on %s", session.session_id)
        await connection.close(code=status.WS_1011_INTERNAL_ERROR)
    finally:
        lifecycle.close(session)


async def _read_loop(ws: WebSocket, session: ChatSession) -> None:
    while True:
        message = await ws.receive()
        if message["type"] == "websocket.disconnect":
            raise WebSocketDisconnect(message.get("code", status.WS_1000_NORMAL_CLOSURE))
        raw = message.get("text")
        if raw is None:
            raw = message.get("bytes")
        if raw is not None:
            await session.handle_text(raw)
