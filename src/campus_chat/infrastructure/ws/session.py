"""Per-connection chat relay state machine."""
from __future__ import annotations

import logging

from campus_chat.application.exceptions import (
    DispatchFailure,
    InvalidCredential,
    MalformedFrame,
    PersistenceFailure,
)
from campus_chat.application.ports.auth import TokenVerifier
from campus_chat.application.ports.clock import Clock, SystemClock, epoch_millis
from campus_chat.application.ports.message_store import MessageStore
from campus_chat.domain.value_objects.enums import MessageType, SessionState
from campus_chat.infrastructure.ws.connection import Connection
from campus_chat.infrastructure.ws.directory import ConnectionDirectory
from campus_chat.infrastructure.ws.protocol import (
    AuthFrame,
    AuthSuccess,
    ChatFrame,
    InboundFrame,
    MessageDelivery,
    MessageSent,
    OutboundFrame,
    parse_frame,
)

logger = logging.getLogger(__name__)


class ChatSession:
    """Advances one connection through UNAUTHENTICATED → AUTHENTICATED → CLOSED.

    Frames are handled one at a time and each handler runs to completion.
    Messages are persisted before any delivery is attempted; delivery to the
    recipient is best-effort and never fails the sender's connection.
    """

    def __init__(
        self,
        connection: Connection,
        directory: ConnectionDirectory,
        verifier: TokenVerifier,
        store: MessageStore,
        clock: Clock | None = None,
    ) -> None:
        self._connection = connection
        self._directory = directory
        self._verifier = verifier
        self._store = store
        self._clock = clock or SystemClock()
        self._state = SessionState.UNAUTHENTICATED

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def connection(self) -> Connection:
        return self._connection

    @property
    def session_id(self) -> str:
        return self._connection.session_id

    @property
    def user_id(self) -> int | None:
        return self._connection.user_id

    async def handle_text(self, raw: str | bytes) -> None:
        try:
            frame = parse_frame(raw)
        except MalformedFrame as exc:
            # no error frame is sent back; clients see silence
            logger.debug("Ignoring malformed frame on %s: %s", self.session_id, exc.detail)
            return
        await self.handle_frame(frame)

    async def handle_frame(self, frame: InboundFrame) -> None:
        if self._state is SessionState.CLOSED:
            return
        if isinstance(frame, AuthFrame):
            if self._state is SessionState.UNAUTHENTICATED:
                await self._authenticate(frame)
        elif isinstance(frame, ChatFrame):
            if self._state is SessionState.AUTHENTICATED:
                await self._relay(frame)
        else:
            logger.debug("Ignoring frame type %r on %s", frame.type, self.session_id)

    def close(self) -> bool:
        """Enter CLOSED and release the directory entry. Returns True if one was released."""
        if self._state is SessionState.CLOSED:
            return False
        bound = self._state is SessionState.AUTHENTICATED
        self._state = SessionState.CLOSED
        user_id = self._connection.user_id
        if bound and user_id is not None:
            return self._directory.unbind(user_id, self._connection)
        return False

    async def _authenticate(self, frame: AuthFrame) -> None:
        try:
            principal = await self._verifier.verify(frame.token)
        except InvalidCredential as exc:
            logger.info("WS auth rejected on %s: %s", self.session_id, exc.detail)
            return

        self._connection.user_id = principal.user_id
        previous = self._directory.bind(principal.user_id, self._connection)
        self._state = SessionState.AUTHENTICATED
        if previous is not None and previous is not self._connection:
            logger.info(
                "User %d re-authenticated on %s; %s superseded but left open",
                principal.user_id,
                self.session_id,
                previous.session_id,
            )
        logger.info("WS authenticated: user=%d session=%s", principal.user_id, self.session_id)
        await self._send(self._connection, AuthSuccess())

    async def _relay(self, frame: ChatFrame) -> None:
        sender_id = self._connection.user_id
        if sender_id is None:
            logger.error("Chat frame on %s has no bound user; dropped", self.session_id)
            return

        try:
            message = await self._store.save(
                sender_id, frame.receiver_id, frame.content, MessageType.TEXT,
            )
        except PersistenceFailure:
            raise
        except Exception as exc:  # noqa: BLE001
            raise PersistenceFailure(
                f"could not store message {sender_id}->{frame.receiver_id}: {exc}"
            ) from exc

        recipient = self._directory.lookup(frame.receiver_id)
        if recipient is not None and recipient.is_open:
            delivery = MessageDelivery(
                id=message.id,
                sender_id=sender_id,
                content=frame.content,
                timestamp=epoch_millis(self._clock.now()),
            )
            try:
                await self._send(recipient, delivery)
            except DispatchFailure as exc:
                logger.warning(
                    "Delivery of message %d to user %d failed: %s",
                    message.id,
                    frame.receiver_id,
                    exc.detail,
                )

        await self._send(self._connection, MessageSent(message_id=message.id))

    @staticmethod
    async def _send(connection: Connection, frame: OutboundFrame) -> None:
        await connection.send_text(frame.to_text())
