"""Data models for OpenAI-compatible chat requests."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

Role = Literal["system", "user", "assistant"]


class ChatMessage(BaseModel):
    """A single role-tagged message in a chat request."""

    model_config = ConfigDict(frozen=True)

    role: Role
    content: str

    @classmethod
    def system(cls, content: str) -> ChatMessage:
        return cls(role="system", content=content)

    @classmethod
    def user(cls, content: str) -> ChatMessage:
        return cls(role="user", content=content)

    @classmethod
    def assistant(cls, content: str) -> ChatMessage:
        return cls(role="assistant", content=content)


class ProviderConfig(BaseModel):
    """Where and how to reach one chat-completion provider."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(description="Display name used in prompts and errors")
    base_url: str = Field(description="API base URL; '/chat/completions' is appended")
    model: str = Field(description="Model identifier sent in the request body")
    temperature: float = Field(default=0.7, ge=0.0, le=2.0)
