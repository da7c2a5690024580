"""Import all models so metadata.create_all / migrations can discover them via Base.metadata."""
from campus_chat.infrastructure.db.models.message import MessageModel

__all__ = [
    "MessageModel",
]
