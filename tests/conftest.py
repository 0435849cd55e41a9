"""Test configuration and fixtures."""

from __future__ import annotations

from collections.abc import Callable
from unittest.mock import Mock

import httpx
import pytest

from ai_pair.llm.client import ChatClient
from ai_pair.llm.models import ProviderConfig

CREDENTIAL_ENV_VARS = (
    "PRIMARY_API_KEY",
    "REVIEWER_API_KEY",
    "MOONSHOT_API_KEY",
    "DEEPSEEK_API_KEY",
)


def _completion_body(*contents: str | None) -> dict[str, object]:
    return {
        "id": "chatcmpl-test",
        "object": "chat.completion",
        "created": 1_700_000_000,
        "model": "test-model",
        "choices": [
            {
                "index": i,
                "finish_reason": "stop",
                "message": {"role": "assistant", "content": content},
            }
            for i, content in enumerate(contents)
        ],
    }


@pytest.fixture(autouse=True)
def clean_credential_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep real API keys in the environment out of tests."""
    for name in CREDENTIAL_ENV_VARS:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def completion_body() -> Callable[..., dict[str, object]]:
    """Build an OpenAI-style chat completion response body."""
    return _completion_body


@pytest.fixture
def provider() -> ProviderConfig:
    """Provide a test provider configuration."""
    return ProviderConfig(
        name="Test AI",
        base_url="https://api.example.test/v1",
        model="test-model",
    )


@pytest.fixture
def mock_http() -> Callable[[Callable[[httpx.Request], httpx.Response]], httpx.Client]:
    """Build an httpx client whose requests are answered by a handler."""

    def factory(handler: Callable[[httpx.Request], httpx.Response]) -> httpx.Client:
        return httpx.Client(transport=httpx.MockTransport(handler))

    return factory


def make_mock_client(name: str, model: str) -> Mock:
    client = Mock(spec=ChatClient)
    client.name = name
    client.model = model
    return client


@pytest.fixture
def primary_client() -> Mock:
    return make_mock_client("Primary AI", "primary-model")


@pytest.fixture
def reviewer_client() -> Mock:
    return make_mock_client("Reviewer AI", "reviewer-model")
