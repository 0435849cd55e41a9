"""OpenAI-compatible chat-completion client."""

from __future__ import annotations

import logging
from collections.abc import Sequence

import httpx
from openai import (
    APIConnectionError,
    APIResponseValidationError,
    APIStatusError,
    OpenAI,
)

from ai_pair.errors import (
    CredentialMissing,
    HttpStatusError,
    MalformedResponse,
    NetworkFailure,
)
from ai_pair.llm.models import ChatMessage, ProviderConfig

logger = logging.getLogger(__name__)


class ChatClient:
    """Sends one chat-completion request per call to a single provider.

    The client holds no conversation state; every call sends exactly the
    messages it is given. Automatic retries are disabled so a failure
    surfaces on the first attempt.
    """

    def __init__(
        self,
        provider: ProviderConfig,
        api_key: str,
        http_client: httpx.Client | None = None,
    ) -> None:
        """Initialize the client.

        Args:
            provider: Endpoint, model and display name for the provider.
            api_key: Bearer credential for the provider.
            http_client: Optional transport, mainly for tests.
        """
        self.provider = provider
        self._api_key = api_key
        self._http_client = http_client
        self._client: OpenAI | None = None

    @property
    def name(self) -> str:
        return self.provider.name

    @property
    def model(self) -> str:
        return self.provider.model

    def _get_client(self) -> OpenAI:
        if not self._api_key.strip():
            raise CredentialMissing(self.provider.name)

        if self._client is None:
            self._client = OpenAI(
                api_key=self._api_key,
                base_url=self.provider.base_url,
                max_retries=0,
                http_client=self._http_client,
            )
            logger.info(
                "Chat client initialized",
                extra={"provider": self.provider.name, "model": self.provider.model},
            )
        return self._client

    def send(self, messages: Sequence[ChatMessage]) -> str:
        """Send a chat completion request and return the first answer.

        Args:
            messages: Ordered role-tagged messages.

        Returns:
            Content of the first choice, exactly as received.

        Raises:
            CredentialMissing: If the API key is blank.
            NetworkFailure: If no HTTP response was received.
            HttpStatusError: If the provider returned a non-2xx status.
            MalformedResponse: If the body has no usable choice.
        """
        client = self._get_client()
        name = self.provider.name

        logger.debug(
            "Sending chat completion",
            extra={"provider": name, "model": self.provider.model, "messages": len(messages)},
        )

        try:
            completion = client.chat.completions.create(
                model=self.provider.model,
                messages=[message.model_dump() for message in messages],  # type: ignore
                temperature=self.provider.temperature,
            )
        except APIConnectionError as exc:
            raise NetworkFailure(name, f"request failed: {exc}") from exc
        except APIStatusError as exc:
            raise HttpStatusError(name, exc.status_code, exc.response.text) from exc
        except APIResponseValidationError as exc:
            raise MalformedResponse(name, f"unexpected response body: {exc}") from exc
        except ValueError as exc:
            raise MalformedResponse(name, f"response is not valid JSON: {exc}") from exc

        choices = getattr(completion, "choices", None)
        if not isinstance(choices, list) or not choices:
            raise MalformedResponse(name, "no choices returned")

        message = getattr(choices[0], "message", None)
        if message is None:
            raise MalformedResponse(name, "first choice has no message")

        content = getattr(message, "content", None)
        if content is None:
            content = ""
        elif not isinstance(content, str):
            raise MalformedResponse(name, f"content is {type(content).__name__}, not text")

        logger.debug("Received %d characters", len(content), extra={"provider": name})
        return content
