"""Exception hierarchy for ai-pair.

Chat client failures carry the provider's display name so the session can
report them without knowing which call produced them.
"""

from __future__ import annotations

from typing import Literal


class AiPairError(Exception):
    """Base class for all ai-pair errors."""


class UserInputEmpty(AiPairError):
    """Raised when a question is empty after trimming."""

    def __init__(self) -> None:
        super().__init__("Question is empty")


class ChatClientError(AiPairError):
    """Base class for errors raised while talking to a chat provider."""

    def __init__(self, provider: str, message: str) -> None:
        super().__init__(f"{provider}: {message}")
        self.provider = provider
        self.detail = message


class CredentialMissing(ChatClientError):
    """Raised when no API key is available for a provider."""

    def __init__(self, provider: str) -> None:
        super().__init__(provider, "API key is missing")


class NetworkFailure(ChatClientError):
    """Raised when the request never produced an HTTP response."""


class HttpStatusError(ChatClientError):
    """Raised when the provider answered with a non-2xx status."""

    def __init__(self, provider: str, status_code: int, body: str = "") -> None:
        message = f"HTTP {status_code}"
        if body:
            message = f"{message}: {body}"
        super().__init__(provider, message)
        self.status_code = status_code
        self.body = body


class MalformedResponse(ChatClientError):
    """Raised when a 2xx response cannot be turned into answer text."""


class TurnError(AiPairError):
    """Raised when one stage of a turn fails.

    ``primary_answer`` is set when the primary call succeeded and only the
    reviewer failed, so the caller can still show the first answer.
    """

    def __init__(
        self,
        stage: Literal["primary", "reviewer"],
        cause: ChatClientError,
        primary_answer: str | None = None,
    ) -> None:
        super().__init__(f"{stage} call failed: {cause}")
        self.stage = stage
        self.cause = cause
        self.primary_answer = primary_answer


class FileSystemError(AiPairError):
    """Raised when a conversation cannot be written to disk."""

    def __init__(self, path: str, message: str) -> None:
        super().__init__(f"{path}: {message}")
        self.path = path
