from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True, slots=True)
class ConversationSummary:
    """Latest exchange with one peer, as listed in the inbox."""

    peer_id: int
    last_message: str | None
    last_message_time: datetime
    unread_count: int
