"""Entrypoint: python -m campus_chat"""
from __future__ import annotations

import logging

import uvicorn

from campus_chat.api.middleware.correlation_id import CorrelationIdFilter
from campus_chat.config import settings

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s [%(correlation_id)s]: %(message)s"


def configure_logging(level: str) -> None:
    logging.basicConfig(level=level.upper(), format=LOG_FORMAT)
    for handler in logging.getLogger().handlers:
        handler.addFilter(CorrelationIdFilter())


def main() -> None:
    configure_logging(settings.LOG_LEVEL)
    uvicorn.run(
        "campus_chat.app:create_app",
        factory=True,
        host=settings.HOST,
        port=settings.PORT,
        log_level=settings.LOG_LEVEL,
        log_config=None,
    )


if __name__ == "__main__":
    main()
