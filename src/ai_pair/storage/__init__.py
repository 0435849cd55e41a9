"""Storage package initialization."""

from ai_pair.storage.conversations import ConversationRecord, ConversationWriter, slugify

__all__ = [
    "ConversationRecord",
    "ConversationWriter",
    "slugify",
]
