"""Dictionary-backed storage used for tests and local development."""
from __future__ import annotations

import itertools
import threading
from datetime import datetime, timezone
from typing import Any, Callable, Iterator, TypeVar

from pydantic import BaseModel

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
from .storage import (
    DEFAULT_CONTENT_CATEGORY_LIMIT,
    DEFAULT_CONTENT_LIMIT,
    DEFAULT_FEATURED_CONTENT_LIMIT,
    DEFAULT_RESOURCE_LIMIT,
    DuplicateError,
    Storage,
    bounded_limit,
)

RecordT = TypeVar("RecordT", bound=BaseModel)


class _Table(dict[int, RecordT]):
    """Rows keyed by id with an autoincrement counter."""

    def __init__(self) -> None:
        super().__init__()
        self._ids: Iterator[int] = itertools.count(1)

    def insert(self, build: Callable[[int], RecordT]) -> RecordT:
        record = build(next(self._ids))
        self[record.id] = record  # type: ignore[attr-defined]
        return record

    def reset(self) -> None:
        self.clear()
        self._ids = itertools.count(1)


class MemoryStorage(Storage):
    """Thread-safe in-memory implementation of :class:`Storage`."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._users: _Table[User] = _Table()
        self._resources: _Table[Resource] = _Table()
        self._messages: _Table[ChatMessage] = _Table()
        self._categories: _Table[Category] = _Table()
        self._content: _Table[GeneratedContent] = _Table()

    @staticmethod
    def _copy(record: RecordT | None) -> RecordT | None:
        return record.model_copy(deep=True) if record is not None else None

    @staticmethod
    def _apply(record: RecordT, changes: dict[str, Any]) -> RecordT:
        return record.model_copy(update=changes, deep=True)

    # Users -----------------------------------------------------------------

    def get_user(self, user_id: int) -> User | None:
        with self._lock:
            return self._copy(self._users.get(user_id))

    def get_user_by_username(self, username: str) -> User | None:
        with self._lock:
            for user in self._users.values():
                if user.username == username:
                    return self._copy(user)
        return None

    def create_user(self, data: UserCreate) -> User:
        with self._lock:
            if any(user.username == data.username for user in self._users.values()):
                raise DuplicateError(f"Username {data.username!r} already exists")
            user = self._users.insert(lambda new_id: User(id=new_id, **data.model_dump()))
            return self._copy(user)

    # Resources -------------------------------------------------------------

    def list_resources(self) -> list[Resource]:
        with self._lock:
            return [self._copy(resource) for resource in self._resources.values()]

    def get_resource(self, resource_id: int) -> Resource | None:
        with self._lock:
            return self._copy(self._resources.get(resource_id))

    def list_resources_by_category(self, category: str) -> list[Resource]:
        return [resource for resource in self.list_resources() if resource.category == category]

    def list_popular_resources(self, limit: int = DEFAULT_RESOURCE_LIMIT) -> list[Resource]:
        popular = [resource for resource in self.list_resources() if resource.is_popular]
        return popular[: bounded_limit(limit)]

    def list_featured_resources(self, limit: int = DEFAULT_RESOURCE_LIMIT) -> list[Resource]:
        featured = [resource for resource in self.list_resources() if resource.is_featured]
        return featured[: bounded_limit(limit)]

    def create_resource(self, data: ResourceCreate) -> Resource:
        with self._lock:
            resource = self._resources.insert(
                lambda new_id: Resource(id=new_id, **data.model_dump())
            )
            return self._copy(resource)

    def update_resource(self, resource_id: int, changes: dict[str, Any]) -> Resource | None:
        with self._lock:
            current = self._resources.get(resource_id)
            if current is None:
                return None
            updated = self._apply(current, changes)
            self._resources[resource_id] = updated
            return self._copy(updated)

    def delete_resource(self, resource_id: int) -> bool:
        with self._lock:
            return self._resources.pop(resource_id, None) is not None

    # Chat ------------------------------------------------------------------

    def list_chat_messages(self, user_id: int | None) -> list[ChatMessage]:
        with self._lock:
            return [
                self._copy(message)
                for message in self._messages.values()
                if message.user_id == user_id
            ]

    def create_chat_message(self, data: ChatMessageCreate) -> ChatMessage:
        with self._lock:
            message = self._messages.insert(
                lambda new_id: ChatMessage(
                    id=new_id,
                    timestamp=datetime.now(timezone.utc),
                    **data.model_dump(),
                )
            )
            return self._copy(message)

    # Categories ------------------------------------------------------------

    def list_categories(self) -> list[Category]:
        with self._lock:
            return [self._copy(category) for category in self._categories.values()]

    def get_category(self, category_id: int) -> Category | None:
        with self._lock:
            return self._copy(self._categories.get(category_id))

    def create_category(self, data: CategoryCreate) -> Category:
        with self._lock:
            if any(category.name == data.name for category in self._categories.values()):
                raise DuplicateError(f"Category {data.name!r} already exists")
            category = self._categories.insert(
                lambda new_id: Category(id=new_id, **data.model_dump())
            )
            return self._copy(category)

    # Generated content -----------------------------------------------------

    def _all_content(self) -> list[GeneratedContent]:
        with self._lock:
            items = [self._copy(item) for item in self._content.values()]
        return sorted(items, key=lambda item: (item.created_at, item.id), reverse=True)

    def list_content(self, limit: int = DEFAULT_CONTENT_LIMIT) -> list[GeneratedContent]:
        return self._all_content()[: bounded_limit(limit)]

    def get_content(self, content_id: int) -> GeneratedContent | None:
        with self._lock:
            return self._copy(self._content.get(content_id))

    def list_content_by_category(
        self, category: str, limit: int = DEFAULT_CONTENT_CATEGORY_LIMIT
    ) -> list[GeneratedContent]:
        matches = [item for item in self._all_content() if item.category == category]
        return matches[: bounded_limit(limit)]

    def list_featured_content(
        self, limit: int = DEFAULT_FEATURED_CONTENT_LIMIT
    ) -> list[GeneratedContent]:
        featured = [item for item in self._all_content() if item.is_featured]
        return featured[: bounded_limit(limit)]

    def create_content(self, data: ContentCreate) -> GeneratedContent:
        with self._lock:
            content = self._content.insert(
                lambda new_id: GeneratedContent(
                    id=new_id,
                    created_at=datetime.now(timezone.utc),
                    **data.model_dump(),
                )
            )
            return self._copy(content)

    def update_content(
        self, content_id: int, changes: dict[str, Any]
    ) -> GeneratedContent | None:
        with self._lock:
            current = self._content.get(content_id)
            if current is None:
                return None
            updated = self._apply(current, changes)
            self._content[content_id] = updated
            return self._copy(updated)

    def delete_content(self, content_id: int) -> bool:
        with self._lock:
            return self._content.pop(content_id, None) is not None

    # Maintenance -----------------------------------------------------------

    def reset(self) -> None:
        with self._lock:
            for table in (
                self._users,
                self._resources,
                self._messages,
                self._categories,
                self._content,
            ):
                table.reset()


__all__ = ["MemoryStorage"]
