"""
Tests for the Ollama adapter.
"""

from __future__ import annotations

import json

import httpx
import pytest

from taskforge.config import ModelUnavailableError
from taskforge.domains.tasks import BusinessContext, Task, TaskContext, TaskType, UserPreferences

from .client import OllamaClient
from .model import OllamaModel, system_prompt


def make_client(handler) -> OllamaClient:
    return OllamaClient(
        base_url="http://ollama.test",
        backoff_seconds=0,
        transport=httpx.MockTransport(handler),
    )


async def test_generate_sends_payload() -> None:
    """Test generate posts a non-streaming request and returns the text."""
    seen: list[dict] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(json.loads(request.content))
        assert request.url.path == "/api/generate"
        return httpx.Response(200, json={"response": "Revenue grew 12%."})

    client = make_client(handler)
    text = await client.generate("llama3.2", "Summarize Q3", system="Be brief.")
    await client.close()

    assert text == "Revenue grew 12%."
    assert seen[0]["model"] == "llama3.2"
    assert seen[0]["stream"] is False
    assert seen[0]["system"] == "Be brief."


async def test_retries_transport_errors() -> None:
    """Test transient connection failures are retried."""
    calls = 0

    def handler(request: httpx.Request) -> httpx.Response:
        nonlocal calls
        calls += 1
        if calls < 3:
            raise httpx.ConnectError("connection refused", request=request)
        return httpx.Response(200, json={"response": "ok"})

    client = make_client(handler)
    assert await client.generate("llama3.2", "hi") == "ok"
    assert calls == 3
    await client.close()


async def test_transport_errors_exhausted() -> None:
    """Test a dead server surfaces as ModelUnavailableError."""
    calls = 0

    def handler(request: httpx.Request) -> httpx.Response:
        nonlocal calls
        calls += 1
        raise httpx.ConnectError("connection refused", request=request)

    client = make_client(handler)
    with pytest.raises(ModelUnavailableError) as exc_info:
        await client.generate("llama3.2", "hi")

    assert calls == 3
    assert isinstance(exc_info.value.__cause__, httpx.ConnectError)
    await client.close()


async def test_http_status_not_retried() -> None:
    """Test an HTTP error status fails immediately."""
    calls = 0

    def handler(request: httpx.Request) -> httpx.Response:
        nonlocal calls
        calls += 1
        return httpx.Response(404, json={"error": "model not found"})

    client = make_client(handler)
    with pytest.raises(ModelUnavailableError) as exc_info:
        await client.generate("missing", "hi")

    assert calls == 1
    assert exc_info.value.details["status_code"] == 404
    await client.close()


async def test_list_models() -> None:
    """Test model names are read from the tags endpoint."""

    def handler(request: httpx.Request) -> httpx.Response:
        assert request.method == "GET"
        return httpx.Response(200, json={"models": [{"name": "llama3.2"}, {"name": "mistral"}]})

    client = make_client(handler)
    assert await client.list_models() == ["llama3.2", "mistral"]
    await client.close()


def test_system_prompt_uses_context() -> None:
    """Test preferences and role shape the system prompt."""
    task = Task(
        type=TaskType.SUMMARIZATION,
        input="text",
        context=TaskContext(
            business_context=BusinessContext(role="manager"),
            preferences=UserPreferences(language="French", response_style="concise"),
        ),
    )

    prompt = system_prompt(task)

    assert "Summarize the input." in prompt
    assert "Answer in French." in prompt
    assert "concise" in prompt
    assert "manager" in prompt


async def test_model_plugin() -> None:
    """Test the plugin wraps generated text in a result dict."""

    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"response": "Bonjour"})

    client = make_client(handler)
    model = OllamaModel(client, model="llama3.2")

    result = await model.process(Task(type=TaskType.TRANSLATION, input="Hello"))

    assert model.name == "ollama-llama3.2"
    assert model.spec.cost_per_token == 0.0
    assert result["data"] == "Bonjour"
    assert result["model"] == "ollama-llama3.2"
    await client.close()
