"""LLM package initialization."""

from ai_pair.llm.client import ChatClient
from ai_pair.llm.models import ChatMessage, ProviderConfig

__all__ = [
    "ChatClient",
    "ChatMessage",
    "ProviderConfig",
]
