"""Outbound provider clients exercised against ``httpx.MockTransport``."""
from __future__ import annotations

import json

import httpx
import pytest

from superfishal.config import Settings
from superfishal.services.providers import (
    AnthropicProvider,
    HuggingFaceProvider,
    PerplexityProvider,
    ProviderError,
    ProviderName,
    build_providers,
)
from superfishal.services.providers.anthropic import ANTHROPIC_VERSION


pytestmark = pytest.mark.anyio("asyncio")


@pytest.fixture
def anyio_backend():
    return "asyncio"


class Recorder:
    """Collects requests and answers with queued responses."""

    def __init__(self, *responses: httpx.Response) -> None:
        self.requests: list[httpx.Request] = []
        self._responses = list(responses)

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if not self._responses:
            raise AssertionError("Unexpected request to " + str(request.url))
        return self._responses.pop(0)

    def body(self, index: int = 0) -> dict:
        return json.loads(self.requests[index].content)


def _client(recorder: Recorder) -> httpx.AsyncClient:
    return httpx.AsyncClient(transport=httpx.MockTransport(recorder))


async def test_anthropic_posts_messages_request():
    recorder = Recorder(
        httpx.Response(200, json={"content": [{"type": "text", "text": "hello there"}]})
    )
    async with _client(recorder) as client:
        provider = AnthropicProvider(
            client, "sk-test", base_url="https://anthropic.test/", model="claude-test"
        )
        reply = await provider.complete("Write a title", system_prompt="Be brief")

    assert reply == "hello there"
    request = recorder.requests[0]
    assert str(request.url) == "https://anthropic.test/v1/messages"
    assert request.headers["x-api-key"] == "sk-test"
    assert request.headers["anthropic-version"] == ANTHROPIC_VERSION
    body = recorder.body()
    assert body["model"] == "claude-test"
    assert body["system"] == "Be brief"
    assert body["messages"] == [{"role": "user", "content": "Write a title"}]
    assert body["max_tokens"] == 1500


async def test_anthropic_without_key_never_sends_a_request():
    recorder = Recorder()
    async with _client(recorder) as client:
        provider = AnthropicProvider(client, None, base_url="https://anthropic.test", model="m")
        assert not provider.configured
        with pytest.raises(ProviderError) as excinfo:
            await provider.complete("x", system_prompt="y")

    assert excinfo.value.provider is ProviderName.ANTHROPIC
    assert recorder.requests == []


async def test_anthropic_rejects_reply_without_text_block():
    recorder = Recorder(httpx.Response(200, json={"content": [{"type": "tool_use"}]}))
    async with _client(recorder) as client:
        provider = AnthropicProvider(client, "k", base_url="https://anthropic.test", model="m")
        with pytest.raises(ProviderError, match="no text block"):
            await provider.complete("x", system_prompt="y")


async def test_http_status_errors_become_provider_errors():
    recorder = Recorder(httpx.Response(529, json={"error": "overloaded"}))
    async with _client(recorder) as client:
        provider = PerplexityProvider(client, "pk", base_url="https://pplx.test", model="sonar")
        with pytest.raises(ProviderError, match="HTTP 529"):
            await provider.complete("x", system_prompt="y")


async def test_transport_errors_become_provider_errors():
    def refuse(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    async with httpx.AsyncClient(transport=httpx.MockTransport(refuse)) as client:
        provider = PerplexityProvider(client, "pk", base_url="https://pplx.test", model="sonar")
        with pytest.raises(ProviderError, match="failed"):
            await provider.complete("x", system_prompt="y")


async def test_non_json_body_becomes_provider_error():
    recorder = Recorder(httpx.Response(200, text="<html>gateway</html>"))
    async with _client(recorder) as client:
        provider = PerplexityProvider(client, "pk", base_url="https://pplx.test", model="sonar")
        with pytest.raises(ProviderError, match="non-JSON"):
            await provider.complete("x", system_prompt="y")


async def test_perplexity_reads_first_choice():
    recorder = Recorder(
        httpx.Response(
            200,
            json={
                "choices": [{"message": {"role": "assistant", "content": "analysis"}}],
                "citations": ["https://www.cisa.gov/"],
            },
        )
    )
    async with _client(recorder) as client:
        provider = PerplexityProvider(client, "pk", base_url="https://pplx.test", model="sonar")
        reply = await provider.complete("query", system_prompt="system", temperature=0.5)

    assert reply == "analysis"
    request = recorder.requests[0]
    assert str(request.url) == "https://pplx.test/chat/completions"
    assert request.headers["authorization"] == "Bearer pk"
    body = recorder.body()
    assert [message["role"] for message in body["messages"]] == ["system", "user"]
    assert body["temperature"] == 0.5


async def test_huggingface_walks_models_until_one_answers():
    recorder = Recorder(
        httpx.Response(503, json={"error": "loading"}),
        httpx.Response(200, json={"error": "still loading"}),
        httpx.Response(200, json=[{"generated_text": "  result  "}]),
    )
    async with _client(recorder) as client:
        provider = HuggingFaceProvider(
            client,
            None,
            base_url="https://hf.test",
            models=("org/first", "org/second", "org/third"),
        )
        reply = await provider.complete("topic", system_prompt="system")

    assert reply == "result"
    assert [request.url.path for request in recorder.requests] == [
        "/models/org/first",
        "/models/org/second",
        "/models/org/third",
    ]
    assert "authorization" not in recorder.requests[0].headers
    body = recorder.body(2)
    assert body["inputs"] == "system\n\nUser: topic\n\nAssistant:"
    assert body["parameters"]["top_p"] == 0.95


async def test_huggingface_raises_last_error_when_every_model_fails():
    recorder = Recorder(httpx.Response(500), httpx.Response(500))
    async with _client(recorder) as client:
        provider = HuggingFaceProvider(
            client, "hf", base_url="https://hf.test", models=("a/one", "a/two")
        )
        with pytest.raises(ProviderError, match="a/two"):
            await provider.complete("topic", system_prompt="system")

    assert recorder.requests[0].headers["authorization"] == "Bearer hf"


async def test_huggingface_generate_text_accepts_single_object():
    recorder = Recorder(httpx.Response(200, json={"generated_text": "hi"}))
    async with _client(recorder) as client:
        provider = HuggingFaceProvider(client, None, base_url="https://hf.test", models=())
        text = await provider.generate_text(
            "prompt", model="gpt2", max_new_tokens=250, temperature=0.7
        )

    assert text == "hi"
    assert recorder.body()["parameters"]["max_new_tokens"] == 250


async def test_build_providers_uses_settings():
    settings = Settings(
        anthropic_api_key="a",
        perplexity_api_key=None,
        huggingface_models=("x/y",),
        anthropic_model="claude-custom",
    )
    async with httpx.AsyncClient() as client:
        providers = build_providers(settings, client)

    assert set(providers) == set(ProviderName)
    assert providers[ProviderName.ANTHROPIC].model == "claude-custom"
    assert providers[ProviderName.HUGGINGFACE].models == ("x/y",)
    assert not providers[ProviderName.PERPLEXITY].configured
    assert providers[ProviderName.HUGGINGFACE].configured
