from __future__ import annotations

from datetime import datetime, timedelta, timezone

import jwt

from campus_chat.application.dto.principal import Principal
from campus_chat.application.exceptions import InvalidCredential


class HS256Verifier:
    """Verify (and mint) JWTs signed with a shared HS256 secret.

    Tokens carry ``userId`` and ``username`` claims plus ``sub``, ``iat``
    and ``exp``. Verification is stateless: signature and expiry only.
    """

    def __init__(
        self,
        secret: str,
        algorithm: str = "HS256",
        expiration_seconds: int = 7 * 24 * 3600,
    ) -> None:
        self._secret = secret
        self._algorithm = algorithm
        self._expiration = timedelta(seconds=expiration_seconds)

    async def verify(self, token: str) -> Principal:
        try:
            payload = jwt.decode(
                token,
                self._secret,
                algorithms=[self._algorithm],
                options={"require": ["exp"]},
            )
        except jwt.PyJWTError as exc:
            raise InvalidCredential(str(exc)) from exc

        user_id = payload.get("userId")
        if isinstance(user_id, bool) or not isinstance(user_id, int):
            raise InvalidCredential("token has no integer userId claim")
        username = payload.get("username", payload.get("sub"))
        return Principal(user_id=user_id, username=username)

    def issue(self, user_id: int, username: str, *, now: datetime | None = None) -> str:
        issued_at = now or datetime.now(timezone.utc)
        claims = {
            "userId": user_id,
            "username": username,
            "sub": username,
            "iat": issued_at,
            "exp": issued_at + self._expiration,
        }
        return jwt.encode(claims, self._secret, algorithm=self._algorithm)
