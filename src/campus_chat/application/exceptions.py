from __future__ import annotations


class AppError(Exception):
    """Base application error."""

    def __init__(self, detail: str = "") -> None:
        self.detail = detail
        super().__init__(detail)


class InvalidCredential(AppError):
    """Bearer token is malformed, badly signed or expired."""


class PersistenceFailure(AppError):
    """A chat message could not be stored. Fatal to the connection."""


class DispatchFailure(AppError):
    """Writing a frame to a connection's transport failed."""


class MalformedFrame(AppError):
    """Inbound frame could not be parsed into a known shape."""
