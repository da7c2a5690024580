"""Open/close bookkeeping for relay connections."""
from __future__ import annotations

import logging

from campus_chat.application.ports.auth import TokenVerifier
from campus_chat.application.ports.clock import Clock
from campus_chat.application.ports.message_store import MessageStore
from campus_chat.infrastructure.ws.connection import Connection
from campus_chat.infrastructure.ws.directory import ConnectionDirectory
from campus_chat.infrastructure.ws.session import ChatSession

logger = logging.getLogger(__name__)


class LifecycleManager:
    """Owns the open chat sessions and keeps the directory free of stale entries."""

    def __init__(self, directory: ConnectionDirectory) -> None:
        self._directory = directory
        self._sessions: dict[str, ChatSession] = {}

    @property
    def directory(self) -> ConnectionDirectory:
        return self._directory

    @property
    def active_sessions(self) -> int:
        return len(self._sessions)

    async def open(
        self,
        connection: Connection,
        *,
        verifier: TokenVerifier,
        store: MessageStore,
        clock: Clock | None = None,
    ) -> ChatSession:
        await connection.accept()
        session = ChatSession(connection, self._directory, verifier, store, clock)
        self._sessions[connection.session_id] = session
        logger.info("WS connected: %s (total=%d)", connection.session_id, len(self._sessions))
        return session

    def close(self, session: ChatSession) -> None:
        self._sessions.pop(session.session_id, None)
        released = session.close()
        logger.info(
            "WS closed: %s user=%s released=%s (total=%d)",
            session.session_id,
            session.user_id,
            released,
            len(self._sessions),
        )
