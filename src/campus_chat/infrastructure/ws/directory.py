"""In-process directory of authenticated connections."""
from __future__ import annotations

import threading

from campus_chat.infrastructure.ws.connection import Connection


class ConnectionDirectory:
    """Maps a user id to the single connection it is currently reachable on.

    Every operation is total and holds the lock only for the dict access,
    never across I/O.
    """

    def __init__(self) -> None:
        self._entries: dict[int, Connection] = {}
        self._lock = threading.Lock()

    def bind(self, user_id: int, connection: Connection) -> Connection | None:
        """Insert or replace the entry. Returns the replaced connection, if any."""
        with self._lock:
            previous = self._entries.get(user_id)
            self._entries[user_id] = connection
        return previous

    def lookup(self, user_id: int) -> Connection | None:
        with self._lock:
            return self._entries.get(user_id)

    def unbind(self, user_id: int, connection: Connection) -> bool:
        """Remove the entry only if it still points at ``connection``."""
        with self._lock:
            if self._entries.get(user_id) is connection:
                del self._entries[user_id]
                return True
            return False

    def __contains__(self, user_id: object) -> bool:
        with self._lock:
            return user_id in self._entries

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
