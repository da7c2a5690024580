"""FastAPI dependency injection helpers."""
from __future__ import annotations

from typing import Annotated, AsyncIterator

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from starlette.requests import HTTPConnection

from campus_chat.application.dto.principal import Principal
from campus_chat.application.exceptions import InvalidCredential
from campus_chat.application.ports.auth import TokenVerifier
from campus_chat.application.ports.message_store import MessageStore
from campus_chat.config import settings
from campus_chat.infrastructure.auth.hs256_verifier import HS256Verifier
from campus_chat.infrastructure.db.message_store import SqlAlchemyMessageStore
from campus_chat.infrastructure.db.session import AsyncSessionLocal
from campus_chat.infrastructure.db.uow import SqlAlchemyUoW
from campus_chat.infrastructure.ws.lifecycle import LifecycleManager

_bearer_scheme = HTTPBearer()


async def get_uow() -> AsyncIterator[SqlAlchemyUoW]:
    async with AsyncSessionLocal() as session:
        uow = SqlAlchemyUoW(session)
        try:
            yield uow
        finally:
            await session.close()


UoWDep = Annotated[SqlAlchemyUoW, Depends(get_uow)]

_verifier: TokenVerifier | None = None


def get_verifier() -> TokenVerifier:
    global _verifier  # noqa: PLW0603
    if _verifier is None:
        _verifier = HS256Verifier(
            settings.JWT_SECRET,
            settings.JWT_ALGORITHM,
            settings.JWT_EXPIRATION_SECONDS,
        )
    return _verifier


VerifierDep = Annotated[TokenVerifier, Depends(get_verifier)]


def get_message_store() -> MessageStore:
    return SqlAlchemyMessageStore(AsyncSessionLocal)


MessageStoreDep = Annotated[MessageStore, Depends(get_message_store)]


def get_lifecycle(conn: HTTPConnection) -> LifecycleManager:
    return conn.app.state.lifecycle


LifecycleDep = Annotated[LifecycleManager, Depends(get_lifecycle)]


async def get_current_principal(
    credentials: Annotated[HTTPAuthorizationCredentials, Depends(_bearer_scheme)],
    verifier: VerifierDep,
) -> Principal:
    try:
        return await verifier.verify(credentials.credentials)
    except InvalidCredential as exc:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=exc.detail,
        ) from exc


CurrentPrincipal = Annotated[Principal, Depends(get_current_principal)]
