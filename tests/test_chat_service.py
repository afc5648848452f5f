from __future__ import annotations

import json
from datetime import datetime, timezone

import httpx
import pytest

from superfishal.schemas import ChatMessage
from superfishal.services.chat import (
    FALLBACK_REPLY,
    SYSTEM_PROMPT,
    ChatService,
    clean_response,
    format_chat_prompt,
)
from superfishal.services.providers import HuggingFaceProvider


pytestmark = pytest.mark.anyio("asyncio")


@pytest.fixture
def anyio_backend():
    return "asyncio"


def _message(message_id: int, role: str, content: str) -> ChatMessage:
    return ChatMessage(
        id=message_id,
        role=role,
        content=content,
        timestamp=datetime(2025, 3, 1, tzinfo=timezone.utc),
    )


def _service(handler) -> tuple[ChatService, httpx.AsyncClient]:
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    provider = HuggingFaceProvider(client, None, base_url="https://hf.test", models=())
    return ChatService(provider, model="gpt2"), client


def test_format_chat_prompt_labels_turns_and_cues_assistant():
    prompt = format_chat_prompt(
        [
            _message(1, "user", "Any free image models?"),
            _message(2, "assistant", "Try Stable Diffusion."),
            _message(3, "user", "Where can I host it?"),
        ]
    )

    assert prompt == (
        f"{SYSTEM_PROMPT}\n\n"
        "User: Any free image models?\n"
        "Assistant: Try Stable Diffusion.\n"
        "User: Where can I host it?\n"
        "Assistant:"
    )


def test_format_chat_prompt_without_history():
    assert format_chat_prompt([]) == f"{SYSTEM_PROMPT}\n\nAssistant:"


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("Assistant: Hello!", "Hello!"),
        ("  assistant:   Hi  ", "Hi"),
        ("Assistant: Assistant: twice", "Assistant: twice"),
        ("No label here", "No label here"),
    ],
)
def test_clean_response(raw, expected):
    assert clean_response(raw) == expected


async def test_reply_sends_single_generation_request():
    requests: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        return httpx.Response(200, json=[{"generated_text": "Assistant: Use GitHub Pages."}])

    service, client = _service(handler)
    async with client:
        reply = await service.reply([_message(1, "user", "Where can I host a demo?")])

    assert reply == "Use GitHub Pages."
    assert len(requests) == 1
    assert requests[0].url.path == "/models/gpt2"
    parameters = json.loads(requests[0].content)["parameters"]
    assert parameters["max_new_tokens"] == 250
    assert parameters["temperature"] == 0.7
    assert parameters["top_p"] == 0.9


@pytest.mark.parametrize(
    "response",
    [
        httpx.Response(503, json={"error": "Model gpt2 is currently loading"}),
        httpx.Response(200, json=[{"generated_text": "Assistant:   "}]),
    ],
)
async def test_reply_falls_back_to_apology(response):
    calls = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request)
        return response

    service, client = _service(handler)
    async with client:
        reply = await service.reply([_message(1, "user", "hello")])

    assert reply == FALLBACK_REPLY
    assert len(calls) == 1
