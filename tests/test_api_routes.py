"""HTTP contract tests: route functions called directly plus ``TestClient`` wiring."""
from __future__ import annotations

import httpx
import pytest
from fastapi import HTTPException
from fastapi.testclient import TestClient

from superfishal.app import create_app
from superfishal.config import Settings
from superfishal.routers import admin, categories, chat, content, resources
from superfishal.schemas import (
    CategoryCreate,
    ChatExchange,
    ChatMessageCreate,
    ContentGenerateRequest,
    ContentUpdate,
    ResourceCreate,
    ResourceUpdate,
    ScriptRequest,
)
from superfishal.services import ContentGenerator, MemoryStorage, ProviderError, ProviderName
from superfishal.services.chat import FALLBACK_REPLY
from superfishal.services.seed import DEFAULT_CATEGORIES, DEFAULT_RESOURCES, seed_default_data


pytestmark = pytest.mark.anyio("asyncio")


@pytest.fixture
def anyio_backend():
    return "asyncio"


class StubChat:
    """Test double for the chat service recording the history it was given."""

    def __init__(self, reply: str = "Try Hugging Face Spaces.") -> None:
        self.reply_text = reply
        self.histories: list[list] = []

    async def reply(self, history):
        history = list(history)
        self.histories.append(history)
        return self.reply_text


class DownProvider:
    """Provider double that is always unreachable."""

    def __init__(self, name: ProviderName) -> None:
        self.name = name
        self.calls = 0

    async def complete(self, prompt, *, system_prompt, max_tokens=None, temperature=None):
        self.calls += 1
        raise ProviderError(self.name, "connection refused")


@pytest.fixture()
def storage() -> MemoryStorage:
    store = MemoryStorage()
    seed_default_data(store)
    return store


@pytest.fixture()
def offline_generator() -> ContentGenerator:
    return ContentGenerator({name: DownProvider(name) for name in ProviderName})


def _payload(**overrides) -> ResourceCreate:
    values = {
        "name": "Ollama",
        "description": "Run open models locally",
        "url": "https://ollama.com",
        "category": "Large Language Models",
        "tags": ["local", "LLM"],
        "isPopular": True,
    }
    values.update(overrides)
    return ResourceCreate(**values)


# ---------------------------------------------------------------------------
# Direct calls
# ---------------------------------------------------------------------------


def test_created_resource_reads_back_identically(storage):
    created = resources.create_resource(
        _payload(logoUrl="https://ollama.com/logo.png"), storage=storage
    )

    fetched = resources.get_resource(str(created.id), storage=storage)

    assert fetched == created
    assert fetched.model_dump(exclude={"id"}) == _payload(
        logoUrl="https://ollama.com/logo.png"
    ).model_dump()


def test_popular_resources_are_popular_and_limited(storage):
    result = resources.list_popular_resources(limit=2, storage=storage)

    assert len(result) == 2
    assert all(resource.is_popular for resource in result)
    everything = resources.list_popular_resources(limit=100, storage=storage)
    assert len(everything) == sum(1 for r in DEFAULT_RESOURCES if r.is_popular)


def test_search_query_is_used_as_given(storage):
    resources.create_resource(_payload(name="Pro Suite", tags=["x"]), storage=storage)
    resources.create_resource(_payload(name="Suite", tags=["y"]), storage=storage)

    found = {r.name for r in resources.search_resources(q=" Suite", storage=storage)}

    assert found & {"Pro Suite", "Suite"} == {"Pro Suite"}


def test_resource_lookup_errors(storage):
    with pytest.raises(HTTPException) as invalid:
        resources.get_resource("abc", storage=storage)
    assert invalid.value.status_code == 400
    assert invalid.value.detail == "Invalid resource ID"

    with pytest.raises(HTTPException) as missing:
        resources.get_resource("999", storage=storage)
    assert missing.value.status_code == 404
    assert missing.value.detail == "Resource not found"


def test_search_requires_query_and_is_case_insensitive(storage):
    with pytest.raises(HTTPException) as excinfo:
        resources.search_resources(q="  ", storage=storage)
    assert excinfo.value.detail == "Search query is required"

    names = {resource.name for resource in resources.search_resources(q="HOSTING", storage=storage)}
    assert names == {"Firebase Pro Hosting", "GitHub Pages Professional"}


def test_resource_update_and_delete(storage):
    created = resources.create_resource(_payload(), storage=storage)

    updated = resources.update_resource(
        str(created.id), ResourceUpdate(isFeatured=True), storage=storage
    )
    assert updated.is_featured is True
    assert updated.name == created.name

    with pytest.raises(HTTPException) as empty:
        resources.update_resource(str(created.id), ResourceUpdate(), storage=storage)
    assert empty.value.status_code == 400

    response = resources.delete_resource(str(created.id), storage=storage)
    assert response.status_code == 204
    with pytest.raises(HTTPException) as gone:
        resources.delete_resource(str(created.id), storage=storage)
    assert gone.value.status_code == 404


def test_duplicate_category_is_rejected(storage):
    with pytest.raises(HTTPException) as excinfo:
        categories.create_category(
            CategoryCreate(name=DEFAULT_CATEGORIES[0].name, description="again"), storage=storage
        )
    assert excinfo.value.status_code == 400

    with pytest.raises(HTTPException) as invalid:
        categories.get_category("x", storage=storage)
    assert invalid.value.detail == "Invalid category ID"


async def test_user_chat_message_persists_user_then_assistant(storage):
    stub = StubChat()
    payload = ChatMessageCreate(content="Which hosting is free?", role="user", user_id=3)

    result = await chat.post_chat_message(payload, storage=storage, chat=stub)

    assert isinstance(result, ChatExchange)
    stored = storage.list_chat_messages(3)
    assert [(m.role, m.content) for m in stored] == [
        ("user", "Which hosting is free?"),
        ("assistant", "Try Hugging Face Spaces."),
    ]
    assert result.user_message.id == stored[0].id
    assert result.assistant_message.user_id == 3
    # The new turn is part of the history exactly once.
    assert [m.content for m in stub.histories[0]] == ["Which hosting is free?"]


async def test_non_user_chat_message_persists_one(storage):
    stub = StubChat()
    payload = ChatMessageCreate(content="Welcome!", role="assistant")

    result = await chat.post_chat_message(payload, storage=storage, chat=stub)

    assert result.content == "Welcome!"
    assert len(storage.list_chat_messages(None)) == 1
    assert stub.histories == []


async def test_chat_history_is_per_conversation(storage):
    stub = StubChat()
    await chat.post_chat_message(
        ChatMessageCreate(content="first", role="user"), storage=storage, chat=stub
    )
    await chat.post_chat_message(
        ChatMessageCreate(content="mine", role="user", user_id=9), storage=storage, chat=stub
    )
    await chat.post_chat_message(
        ChatMessageCreate(content="second", role="user"), storage=storage, chat=stub
    )

    anonymous = chat.get_chat_history(user_id=None, storage=storage)
    assert [m.content for m in anonymous if m.role == "user"] == ["first", "second"]
    assert [m.content for m in stub.histories[-1]] == [
        "first",
        "Try Hugging Face Spaces.",
        "second",
    ]


async def test_generate_content_survives_unreachable_providers(storage, offline_generator):
    request = ContentGenerateRequest(topic="ransomware", relatedResourceIds=[1])

    created = await content.generate_content(
        request, storage=storage, generator=offline_generator
    )

    assert created.id is not None
    assert created.title == "Critical Cybersecurity Trends for 2025"
    assert created.summary and created.key_points and created.youtube_script_idea
    assert created.category == "cybersecurity"
    assert created.tags == list(content.DEFAULT_CONTENT_TAGS)
    assert created.related_resource_ids == [1]
    assert storage.get_content(created.id) == created


async def test_generated_content_queries(storage, offline_generator):
    first = await content.generate_content(
        ContentGenerateRequest(tags=["email"], isFeatured=True),
        storage=storage,
        generator=offline_generator,
    )
    second = await content.generate_content(
        ContentGenerateRequest(category="ai", relatedResourceIds=[4]),
        storage=storage,
        generator=offline_generator,
    )

    assert [c.id for c in content.list_content(limit=20, storage=storage)] == [second.id, first.id]
    assert [c.id for c in content.list_featured_content(limit=5, storage=storage)] == [first.id]
    assert [c.id for c in content.list_content_by_category("ai", limit=10, storage=storage)] == [
        second.id
    ]
    assert [
        c.id for c in content.list_content_by_tags(tags="email, other", limit=10, storage=storage)
    ] == [first.id]
    assert [
        c.id for c in content.list_related_content(resource_ids="4", limit=3, storage=storage)
    ] == [second.id]

    with pytest.raises(HTTPException) as bad_ids:
        content.list_related_content(resource_ids="4,x", limit=3, storage=storage)
    assert bad_ids.value.detail == "Invalid resource IDs"
    with pytest.raises(HTTPException):
        content.list_content_by_tags(tags=None, limit=10, storage=storage)


async def test_content_patch_and_delete(storage, offline_generator):
    created = await content.generate_content(
        ContentGenerateRequest(), storage=storage, generator=offline_generator
    )

    patched = content.update_content(
        str(created.id), ContentUpdate(youtubeUrl="https://youtu.be/abc"), storage=storage
    )
    assert patched.youtube_url == "https://youtu.be/abc"
    assert content.delete_content(str(created.id), storage=storage).status_code == 204
    with pytest.raises(HTTPException) as missing:
        content.get_content(str(created.id), storage=storage)
    assert missing.value.status_code == 404


async def test_script_and_resource_search_fall_back(offline_generator):
    script = await content.generate_script(
        ScriptRequest(topic="Deepfakes"), generator=offline_generator
    )
    assert script.title == "Deepfakes - Essential Guide"

    search = await content.search_security_resources(q="OT", generator=offline_generator)
    assert search.query == "OT"
    assert search.resources[0].url == "https://www.cisa.gov/"

    with pytest.raises(HTTPException):
        await content.search_security_resources(q=None, generator=offline_generator)


def test_reset_database_is_idempotent(storage):
    resources.create_resource(_payload(), storage=storage)

    first = admin.reset_database_endpoint(storage=storage)
    second = admin.reset_database_endpoint(storage=storage)

    assert (first.categories, first.resources) == (second.categories, second.resources)
    assert first.resources == len(DEFAULT_RESOURCES)


# ---------------------------------------------------------------------------
# Application wiring and the error envelope
# ---------------------------------------------------------------------------


@pytest.fixture()
def client():
    def unreachable(request: httpx.Request) -> httpx.Response:
        return httpx.Response(503, json={"error": "unavailable"})

    settings = Settings(
        storage_backend="memory",
        seed_on_startup=True,
        huggingface_api_key=None,
        anthropic_api_key=None,
        perplexity_api_key=None,
        content_provider="anthropic",
    )
    http_client = httpx.AsyncClient(transport=httpx.MockTransport(unreachable))
    app = create_app(settings, http_client=http_client)
    with TestClient(app) as test_client:
        yield test_client


def test_health(client):
    assert client.get("/health").json() == {"status": "ok"}


def test_resources_are_camel_case(client):
    body = client.get("/api/resources").json()

    assert len(body) == len(DEFAULT_RESOURCES)
    assert {"isFeatured", "isPopular", "logoUrl"} <= set(body[0])


def test_error_envelope(client):
    assert client.get("/api/resources/abc").json() == {"message": "Invalid resource ID"}

    missing = client.get("/api/resources/999")
    assert missing.status_code == 404
    assert missing.json() == {"message": "Resource not found"}

    no_query = client.get("/api/resources/search")
    assert no_query.status_code == 400
    assert no_query.json() == {"message": "Search query is required"}


def test_validation_errors_are_400_with_message(client):
    response = client.post("/api/resources", json={"description": "no name"})

    assert response.status_code == 400
    message = response.json()["message"]
    assert message.startswith("Validation error: ")
    assert 'at "name"' in message
    assert "; " in message


def test_chat_round_trip_with_unreachable_model(client):
    response = client.post("/api/chat", json={"content": "Hello", "role": "user"})

    assert response.status_code == 201
    body = response.json()
    assert body["userMessage"]["content"] == "Hello"
    assert body["assistantMessage"]["role"] == "assistant"
    assert body["assistantMessage"]["content"] == FALLBACK_REPLY

    history = client.get("/api/chat/history").json()
    assert [message["role"] for message in history] == ["user", "assistant"]

    single = client.post("/api/chat", json={"content": "Note", "role": "assistant", "userId": 4})
    assert single.status_code == 201
    assert single.json()["userId"] == 4
    assert len(client.get("/api/chat/history", params={"userId": 4}).json()) == 1


def test_invalid_chat_role_is_rejected(client):
    response = client.post("/api/chat", json={"content": "Hi", "role": "system"})

    assert response.status_code == 400
    assert 'at "role"' in response.json()["message"]


def test_generate_returns_fallback_when_provider_unreachable(client):
    response = client.post("/api/content/generate", json={})

    assert response.status_code == 201
    body = response.json()
    for key in ("title", "summary", "keyPoints", "youtubeScriptIdea"):
        assert body[key]
    assert body["tags"] == ["cybersecurity", "security", "trends"]
    assert client.get(f"/api/content/{body['id']}").status_code == 200


@pytest.mark.parametrize(
    "path",
    [
        "/api/resources/popular",
        "/api/resources/featured",
        "/api/content",
        "/api/content/featured",
        "/api/content/category/cybersecurity",
        "/api/content/tags?tags=security",
        "/api/content/related?resourceIds=1",
    ],
)
@pytest.mark.parametrize("limit", ["0", "-1"])
def test_non_positive_limit_is_rejected(client, path, limit):
    separator = "&" if "?" in path else "?"
    response = client.get(f"{path}{separator}limit={limit}")

    assert response.status_code == 400
    assert 'at "limit"' in response.json()["message"]


def test_generate_without_body_uses_defaults(client):
    response = client.post("/api/content/generate")

    assert response.status_code == 201
    body = response.json()
    assert body["category"] == "cybersecurity"
    assert body["tags"] == ["cybersecurity", "security", "trends"]
    assert body["title"]


def test_reset_database_over_http(client):
    client.post("/api/categories", json={"name": "Extra", "description": "x"})

    first = client.post("/api/reset-database").json()
    second = client.post("/api/reset-database").json()

    assert first["categories"] == second["categories"] == len(DEFAULT_CATEGORIES)
    assert first["resources"] == second["resources"] == len(DEFAULT_RESOURCES)


def test_duplicate_category_over_http(client):
    response = client.post(
        "/api/categories", json={"name": DEFAULT_CATEGORIES[0].name, "description": "dup"}
    )

    assert response.status_code == 400
    assert "already exists" in response.json()["message"]


def test_delete_content_over_http(client):
    created = client.post(
        "/api/content",
        json={
            "title": "Manual",
            "summary": "s",
            "keyPoints": ["k"],
            "youtubeScriptIdea": "idea",
            "category": "cybersecurity",
        },
    )
    assert created.status_code == 201
    content_id = created.json()["id"]

    assert client.delete(f"/api/content/{content_id}").status_code == 204
    assert client.delete(f"/api/content/{content_id}").status_code == 404
