"""FastAPI dependencies for shared services."""
from __future__ import annotations

from fastapi import Request

from .services import ChatService, ContentGenerator, Storage


def get_storage(request: Request) -> Storage:  # pragma: no cover - thin wrapper for dependency injection
    """Return the storage backend built by the application lifespan."""

    return request.app.state.storage


def get_chat_service(request: Request) -> ChatService:  # pragma: no cover - thin wrapper
    return request.app.state.chat_service


def get_content_generator(request: Request) -> ContentGenerator:  # pragma: no cover - thin wrapper
    return request.app.state.content_generator
