from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True, slots=True)
class Message:
    id: int
    sender_id: int
    receiver_id: int
    content: str | None
    type: str
    media_urls: str | None
    is_read: bool
    created_at: datetime
    deleted: bool = False

    def peer_of(self, user_id: int) -> int:
        """Return the other side of the exchange as seen from ``user_id``."""
        return self.receiver_id if self.sender_id == user_id else self.sender_id
