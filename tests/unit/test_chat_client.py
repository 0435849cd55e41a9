"""Unit tests for the OpenAI-compatible chat client (mocked transport)."""

from __future__ import annotations

import json

import httpx
import pytest

from ai_pair.errors import CredentialMissing, HttpStatusError, MalformedResponse, NetworkFailure
from ai_pair.llm.client import ChatClient
from ai_pair.llm.models import ChatMessage, ProviderConfig

MESSAGES = [
    ChatMessage.system("You are a helpful AI assistant."),
    ChatMessage.user("What is ownership?"),
]


def test_send_posts_openai_request(
    provider: ProviderConfig, mock_http, completion_body
) -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json=completion_body("Ownership is..."))

    client = ChatClient(provider, "sk-test", http_client=mock_http(handler))
    client.send(MESSAGES)

    assert len(seen) == 1
    request = seen[0]
    assert request.method == "POST"
    assert str(request.url) == "https://api.example.test/v1/chat/completions"
    assert request.headers["Authorization"] == "Bearer sk-test"

    body = json.loads(request.content)
    assert body["model"] == "test-model"
    assert body["temperature"] == 0.7
    assert body["messages"] == [
        {"role": "system", "content": "You are a helpful AI assistant."},
        {"role": "user", "content": "What is ownership?"},
    ]


def test_send_returns_first_choice_unmodified(
    provider: ProviderConfig, mock_http, completion_body
) -> None:
    answer = "  Ownership, *borrowing*\n\n  and lifetimes.\t\n"

    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json=completion_body(answer, "second choice"))

    client = ChatClient(provider, "sk-test", http_client=mock_http(handler))

    assert client.send(MESSAGES) == answer


def test_send_null_content_returns_empty_string(
    provider: ProviderConfig, mock_http, completion_body
) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json=completion_body(None))

    client = ChatClient(provider, "sk-test", http_client=mock_http(handler))

    assert client.send(MESSAGES) == ""


def test_send_without_choices_is_malformed(
    provider: ProviderConfig, mock_http, completion_body
) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json=completion_body())

    client = ChatClient(provider, "sk-test", http_client=mock_http(handler))

    with pytest.raises(MalformedResponse) as exc_info:
        client.send(MESSAGES)

    assert exc_info.value.provider == "Test AI"


def test_send_http_error_carries_status(provider: ProviderConfig, mock_http) -> None:
    calls = 0

    def handler(request: httpx.Request) -> httpx.Response:
        nonlocal calls
        calls += 1
        return httpx.Response(401, json={"error": {"message": "Invalid API key"}})

    client = ChatClient(provider, "sk-bad", http_client=mock_http(handler))

    with pytest.raises(HttpStatusError) as exc_info:
        client.send(MESSAGES)

    assert exc_info.value.status_code == 401
    assert "Invalid API key" in exc_info.value.body
    assert calls == 1


def test_send_server_error_is_not_retried(provider: ProviderConfig, mock_http) -> None:
    calls = 0

    def handler(request: httpx.Request) -> httpx.Response:
        nonlocal calls
        calls += 1
        return httpx.Response(503, text="overloaded")

    client = ChatClient(provider, "sk-test", http_client=mock_http(handler))

    with pytest.raises(HttpStatusError) as exc_info:
        client.send(MESSAGES)

    assert exc_info.value.status_code == 503
    assert calls == 1


def test_send_transport_failure_is_network_error(provider: ProviderConfig, mock_http) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    client = ChatClient(provider, "sk-test", http_client=mock_http(handler))

    with pytest.raises(NetworkFailure) as exc_info:
        client.send(MESSAGES)

    assert exc_info.value.provider == "Test AI"


def test_send_blank_key_fails_before_request(
    provider: ProviderConfig, mock_http, completion_body
) -> None:
    calls = 0

    def handler(request: httpx.Request) -> httpx.Response:
        nonlocal calls
        calls += 1
        return httpx.Response(200, json=completion_body("unused"))

    client = ChatClient(provider, "   ", http_client=mock_http(handler))

    with pytest.raises(CredentialMissing):
        client.send(MESSAGES)

    assert calls == 0


def test_client_exposes_provider_identity(provider: ProviderConfig) -> None:
    client = ChatClient(provider, "sk-test")

    assert client.name == "Test AI"
    assert client.model == "test-model"


@pytest.mark.parametrize(
    "body",
    [
        {"choices": {"a": 1}},
        {"choices": [{"message": {"role": "assistant", "content": ["x"]}}]},
    ],
    ids=["choices-not-a-list", "content-not-text"],
)
def test_send_unexpected_shapes_are_malformed(
    provider: ProviderConfig, mock_http, body: dict[str, object]
) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json=body)

    client = ChatClient(provider, "sk-test", http_client=mock_http(handler))

    with pytest.raises(MalformedResponse):
        client.send(MESSAGES)
