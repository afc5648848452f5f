"""SQLAlchemy-backed implementation of the storage capability."""
from __future__ import annotations

import logging
from typing import Any, Sequence, TypeVar

from pydantic import BaseModel
from sqlalchemy import Engine, delete, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, sessionmaker

from superfishal.db import create_session_factory, get_session, init_db
from superfishal.db import models
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

LOGGER = logging.getLogger(__name__)

SchemaT = TypeVar("SchemaT", bound=BaseModel)

_NEWEST_FIRST = (
    models.GeneratedContent.created_at.desc(),
    models.GeneratedContent.id.desc(),
)


def _to_schema(schema: type[SchemaT], rows: Sequence[Any]) -> list[SchemaT]:
    return [schema.model_validate(row) for row in rows]


class DatabaseStorage(Storage):
    """Persistent storage over any SQLAlchemy-supported database."""

    def __init__(self, engine: Engine, *, create_tables: bool = True) -> None:
        self._engine = engine
        self._session_factory: sessionmaker[Session] = create_session_factory(engine)
        if create_tables:
            init_db(engine)

    def _session(self):
        return get_session(self._session_factory)

    def _insert(self, row: Any, schema: type[SchemaT], conflict: str | None = None) -> SchemaT:
        with self._session() as session:
            session.add(row)
            try:
                session.flush()
            except IntegrityError as exc:
                if conflict is None:
                    raise
                raise DuplicateError(conflict) from exc
            return schema.model_validate(row)

    def _update(
        self, model: type[Any], row_id: int, changes: dict[str, Any], schema: type[SchemaT]
    ) -> SchemaT | None:
        with self._session() as session:
            row = session.get(model, row_id)
            if row is None:
                return None
            for key, value in changes.items():
                setattr(row, key, value)
            session.flush()
            return schema.model_validate(row)

    def _delete(self, model: type[Any], row_id: int) -> bool:
        with self._session() as session:
            row = session.get(model, row_id)
            if row is None:
                return False
            session.delete(row)
            return True

    def _get(self, model: type[Any], row_id: int, schema: type[SchemaT]) -> SchemaT | None:
        with self._session() as session:
            row = session.get(model, row_id)
            return schema.model_validate(row) if row is not None else None

    def _select(self, stmt, schema: type[SchemaT]) -> list[SchemaT]:
        with self._session() as session:
            return _to_schema(schema, session.scalars(stmt).all())

    # Users -----------------------------------------------------------------

    def get_user(self, user_id: int) -> User | None:
        return self._get(models.User, user_id, User)

    def get_user_by_username(self, username: str) -> User | None:
        rows = self._select(select(models.User).where(models.User.username == username), User)
        return rows[0] if rows else None

    def create_user(self, data: UserCreate) -> User:
        return self._insert(
            models.User(**data.model_dump()),
            User,
            conflict=f"Username {data.username!r} already exists",
        )

    # Resources -------------------------------------------------------------

    def list_resources(self) -> list[Resource]:
        return self._select(select(models.Resource).order_by(models.Resource.id), Resource)

    def get_resource(self, resource_id: int) -> Resource | None:
        return self._get(models.Resource, resource_id, Resource)

    def list_resources_by_category(self, category: str) -> list[Resource]:
        stmt = (
            select(models.Resource)
            .where(models.Resource.category == category)
            .order_by(models.Resource.id)
        )
        return self._select(stmt, Resource)

    def list_popular_resources(self, limit: int = DEFAULT_RESOURCE_LIMIT) -> list[Resource]:
        stmt = (
            select(models.Resource)
            .where(models.Resource.is_popular.is_(True))
            .order_by(models.Resource.id)
            .limit(bounded_limit(limit))
        )
        return self._select(stmt, Resource)

    def list_featured_resources(self, limit: int = DEFAULT_RESOURCE_LIMIT) -> list[Resource]:
        stmt = (
            select(models.Resource)
            .where(models.Resource.is_featured.is_(True))
            .order_by(models.Resource.id)
            .limit(bounded_limit(limit))
        )
        return self._select(stmt, Resource)

    def create_resource(self, data: ResourceCreate) -> Resource:
        return self._insert(models.Resource(**data.model_dump()), Resource)

    def update_resource(self, resource_id: int, changes: dict[str, Any]) -> Resource | None:
        return self._update(models.Resource, resource_id, changes, Resource)

    def delete_resource(self, resource_id: int) -> bool:
        return self._delete(models.Resource, resource_id)

    # Chat ------------------------------------------------------------------

    def list_chat_messages(self, user_id: int | None) -> list[ChatMessage]:
        if user_id is None:
            condition = models.ChatMessage.user_id.is_(None)
        else:
            condition = models.ChatMessage.user_id == user_id
        stmt = select(models.ChatMessage).where(condition).order_by(models.ChatMessage.id)
        return self._select(stmt, ChatMessage)

    def create_chat_message(self, data: ChatMessageCreate) -> ChatMessage:
        return self._insert(models.ChatMessage(**data.model_dump()), ChatMessage)

    # Categories ------------------------------------------------------------

    def list_categories(self) -> list[Category]:
        stmt = select(models.ResourceCategory).order_by(models.ResourceCategory.id)
        return self._select(stmt, Category)

    def get_category(self, category_id: int) -> Category | None:
        return self._get(models.ResourceCategory, category_id, Category)

    def create_category(self, data: CategoryCreate) -> Category:
        return self._insert(
            models.ResourceCategory(**data.model_dump()),
            Category,
            conflict=f"Category {data.name!r} already exists",
        )

    # Generated content -----------------------------------------------------

    def _all_content(self) -> list[GeneratedContent]:
        return self._select(select(models.GeneratedContent).order_by(*_NEWEST_FIRST), GeneratedContent)

    def list_content(self, limit: int = DEFAULT_CONTENT_LIMIT) -> list[GeneratedContent]:
        stmt = (
            select(models.GeneratedContent)
            .order_by(*_NEWEST_FIRST)
            .limit(bounded_limit(limit))
        )
        return self._select(stmt, GeneratedContent)

    def get_content(self, content_id: int) -> GeneratedContent | None:
        return self._get(models.GeneratedContent, content_id, GeneratedContent)

    def list_content_by_category(
        self, category: str, limit: int = DEFAULT_CONTENT_CATEGORY_LIMIT
    ) -> list[GeneratedContent]:
        stmt = (
            select(models.GeneratedContent)
            .where(models.GeneratedContent.category == category)
            .order_by(*_NEWEST_FIRST)
            .limit(bounded_limit(limit))
        )
        return self._select(stmt, GeneratedContent)

    def list_featured_content(
        self, limit: int = DEFAULT_FEATURED_CONTENT_LIMIT
    ) -> list[GeneratedContent]:
        stmt = (
            select(models.GeneratedContent)
            .where(models.GeneratedContent.is_featured.is_(True))
            .order_by(*_NEWEST_FIRST)
            .limit(bounded_limit(limit))
        )
        return self._select(stmt, GeneratedContent)

    def create_content(self, data: ContentCreate) -> GeneratedContent:
        return self._insert(models.GeneratedContent(**data.model_dump()), GeneratedContent)

    def update_content(
        self, content_id: int, changes: dict[str, Any]
    ) -> GeneratedContent | None:
        return self._update(models.GeneratedContent, content_id, changes, GeneratedContent)

    def delete_content(self, content_id: int) -> bool:
        return self._delete(models.GeneratedContent, content_id)

    # Maintenance -----------------------------------------------------------

    def reset(self) -> None:
        with self._session() as session:
            for model in (
                models.GeneratedContent,
                models.ChatMessage,
                models.Resource,
                models.ResourceCategory,
                models.User,
            ):
                session.execute(delete(model))
        LOGGER.info("Cleared all tables")

    def close(self) -> None:
        self._engine.dispose()


__all__ = ["DatabaseStorage"]
