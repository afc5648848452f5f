"""Storage capability shared by the in-memory and database-backed stores."""
from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Iterable, Sequence

from ..schemas import (
    Category,
    CategoryCreate,
    ChatMessage,
    ChatMessageCreate,
    ContentCreate,
    GeneratedContent,
    Resource,
    ResourceCreate,
    User,
    UserCreate,
)

DEFAULT_RESOURCE_LIMIT = 10
DEFAULT_CONTENT_LIMIT = 20
DEFAULT_CONTENT_CATEGORY_LIMIT = 10
DEFAULT_FEATURED_CONTENT_LIMIT = 5
DEFAULT_RELATED_CONTENT_LIMIT = 3


class DuplicateError(ValueError):
    """Raised when a unique column would receive a value that already exists."""


def bounded_limit(limit: int) -> int:
    """Negative limits select nothing, the same on every backend."""

    return max(limit, 0)


def resource_matches(resource: Resource, query: str) -> bool:
    """Case-insensitive substring match on name, description or any tag."""

    needle = query.lower()
    if needle in resource.name.lower() or needle in resource.description.lower():
        return True
    return any(needle in tag.lower() for tag in resource.tags)


def content_matches(content: GeneratedContent, query: str) -> bool:
    needle = query.lower()
    return any(
        needle in value.lower()
        for value in (content.title, content.summary, content.youtube_script_idea)
    )


def shares_tag(content: GeneratedContent, tags: Iterable[str]) -> bool:
    return not set(content.tags).isdisjoint(tags)


def shares_resource(content: GeneratedContent, resource_ids: Iterable[int]) -> bool:
    return not set(content.related_resource_ids).isdisjoint(resource_ids)


class Storage(ABC):
    """Persistence operations used by the HTTP layer.

    Listings return plain pydantic records, never ORM rows, so callers behave
    the same whichever implementation is configured. Lookups by id return
    ``None`` when the row does not exist; deletes report whether a row was
    removed.
    """

    # Users -----------------------------------------------------------------

    @abstractmethod
    def get_user(self, user_id: int) -> User | None: ...

    @abstractmethod
    def get_user_by_username(self, username: str) -> User | None: ...

    @abstractmethod
    def create_user(self, data: UserCreate) -> User: ...

    # Resources -------------------------------------------------------------

    @abstractmethod
    def list_resources(self) -> list[Resource]: ...

    @abstractmethod
    def get_resource(self, resource_id: int) -> Resource | None: ...

    @abstractmethod
    def list_resources_by_category(self, category: str) -> list[Resource]: ...

    @abstractmethod
    def list_popular_resources(self, limit: int = DEFAULT_RESOURCE_LIMIT) -> list[Resource]: ...

    @abstractmethod
    def list_featured_resources(self, limit: int = DEFAULT_RESOURCE_LIMIT) -> list[Resource]: ...

    def search_resources(self, query: str) -> list[Resource]:
        return [resource for resource in self.list_resources() if resource_matches(resource, query)]

    @abstractmethod
    def create_resource(self, data: ResourceCreate) -> Resource: ...

    @abstractmethod
    def update_resource(self, resource_id: int, changes: dict[str, Any]) -> Resource | None: ...

    @abstractmethod
    def delete_resource(self, resource_id: int) -> bool: ...

    # Chat ------------------------------------------------------------------

    @abstractmethod
    def list_chat_messages(self, user_id: int | None) -> list[ChatMessage]:
        """Return one conversation in insertion order.

        ``None`` selects the anonymous conversation, not every message.
        """

    @abstractmethod
    def create_chat_message(self, data: ChatMessageCreate) -> ChatMessage: ...

    # Categories ------------------------------------------------------------

    @abstractmethod
    def list_categories(self) -> list[Category]: ...

    @abstractmethod
    def get_category(self, category_id: int) -> Category | None: ...

    @abstractmethod
    def create_category(self, data: CategoryCreate) -> Category: ...

    # Generated content -----------------------------------------------------

    @abstractmethod
    def list_content(self, limit: int = DEFAULT_CONTENT_LIMIT) -> list[GeneratedContent]:
        """Newest first; every content listing below uses the same order."""

    @abstractmethod
    def get_content(self, content_id: int) -> GeneratedContent | None: ...

    @abstractmethod
    def list_content_by_category(
        self, category: str, limit: int = DEFAULT_CONTENT_CATEGORY_LIMIT
    ) -> list[GeneratedContent]: ...

    @abstractmethod
    def list_featured_content(
        self, limit: int = DEFAULT_FEATURED_CONTENT_LIMIT
    ) -> list[GeneratedContent]: ...

    def list_content_by_tags(
        self, tags: Sequence[str], limit: int = DEFAULT_CONTENT_CATEGORY_LIMIT
    ) -> list[GeneratedContent]:
        matches = [item for item in self._all_content() if shares_tag(item, tags)]
        return matches[: bounded_limit(limit)]

    def list_related_content(
        self, resource_ids: Sequence[int], limit: int = DEFAULT_RELATED_CONTENT_LIMIT
    ) -> list[GeneratedContent]:
        matches = [item for item in self._all_content() if shares_resource(item, resource_ids)]
        return matches[: bounded_limit(limit)]

    def search_content(self, query: str) -> list[GeneratedContent]:
        return [item for item in self._all_content() if content_matches(item, query)]

    @abstractmethod
    def _all_content(self) -> list[GeneratedContent]:
        """Every generated content row, newest first."""

    @abstractmethod
    def create_content(self, data: ContentCreate) -> GeneratedContent: ...

    @abstractmethod
    def update_content(
        self, content_id: int, changes: dict[str, Any]
    ) -> GeneratedContent | None: ...

    @abstractmethod
    def delete_content(self, content_id: int) -> bool: ...

    # Maintenance -----------------------------------------------------------

    @abstractmethod
    def reset(self) -> None:
        """Remove every row from every table."""

    def close(self) -> None:
        """Release backend resources; the in-memory store has none."""


__all__ = [
    "DEFAULT_CONTENT_CATEGORY_LIMIT",
    "DEFAULT_CONTENT_LIMIT",
    "DEFAULT_FEATURED_CONTENT_LIMIT",
    "DEFAULT_RELATED_CONTENT_LIMIT",
    "DEFAULT_RESOURCE_LIMIT",
    "DuplicateError",
    "Storage",
    "bounded_limit",
    "content_matches",
    "resource_matches",
]
