"""Pydantic schemas shared across the API and storage layers."""
from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, ClassVar, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class ApiModel(BaseModel):
    """camelCase on the wire, snake_case in Python; either accepted on input."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


def _assume_utc(value: datetime) -> datetime:
    # SQLite drops tzinfo on the way back out.
    return value.replace(tzinfo=timezone.utc) if value.tzinfo is None else value


class PartialUpdate(ApiModel):
    # Fields that may be explicitly cleared with null.
    NULLABLE_FIELDS: ClassVar[frozenset[str]] = frozenset()

    def changes(self) -> dict[str, Any]:
        data = self.model_dump(exclude_unset=True)
        return {
            key: value
            for key, value in data.items()
            if value is not None or key in self.NULLABLE_FIELDS
        }

    def ensure_any_field(self) -> None:
        if not self.changes():
            raise ValueError("At least one field must be provided for update")


# ---------------------------------------------------------------------------
# Users
# ---------------------------------------------------------------------------


class UserCreate(ApiModel):
    username: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


class User(UserCreate):
    id: int


# ---------------------------------------------------------------------------
# Resources and categories
# ---------------------------------------------------------------------------


class ResourceCreate(ApiModel):
    name: str = Field(..., min_length=1)
    description: str
    url: str = Field(..., min_length=1)
    category: str = Field(..., min_length=1)
    tags: List[str]
    is_featured: bool = False
    is_popular: bool = False
    logo_url: Optional[str] = None


class ResourceUpdate(PartialUpdate):
    NULLABLE_FIELDS: ClassVar[frozenset[str]] = frozenset({"logo_url"})

    name: Optional[str] = Field(default=None, min_length=1)
    description: Optional[str] = None
    url: Optional[str] = Field(default=None, min_length=1)
    category: Optional[str] = Field(default=None, min_length=1)
    tags: Optional[List[str]] = None
    is_featured: Optional[bool] = None
    is_popular: Optional[bool] = None
    logo_url: Optional[str] = None


class Resource(ResourceCreate):
    id: int


class CategoryCreate(ApiModel):
    name: str = Field(..., min_length=1)
    description: str


class Category(CategoryCreate):
    id: int


# ---------------------------------------------------------------------------
# Chat
# ---------------------------------------------------------------------------


ChatRole = Literal["user", "assistant"]


class ChatMessageCreate(ApiModel):
    content: str = Field(..., min_length=1)
    role: ChatRole
    user_id: Optional[int] = None


class ChatMessage(ChatMessageCreate):
    id: int
    timestamp: datetime

    @field_validator("timestamp")
    @classmethod
    def timestamp_is_utc(cls, value: datetime) -> datetime:
        return _assume_utc(value)


class ChatExchange(ApiModel):
    user_message: ChatMessage
    assistant_message: ChatMessage


# ---------------------------------------------------------------------------
# Generated content
# ---------------------------------------------------------------------------


class ContentCreate(ApiModel):
    title: str = Field(..., min_length=1)
    summary: str
    key_points: List[str]
    youtube_script_idea: str
    full_content: Optional[str] = None
    category: str = Field(..., min_length=1)
    tags: List[str] = Field(default_factory=list)
    is_featured: bool = False
    youtube_url: Optional[str] = None
    related_resource_ids: List[int] = Field(default_factory=list)


class ContentUpdate(PartialUpdate):
    NULLABLE_FIELDS: ClassVar[frozenset[str]] = frozenset({"full_content", "youtube_url"})

    title: Optional[str] = Field(default=None, min_length=1)
    summary: Optional[str] = None
    key_points: Optional[List[str]] = None
    youtube_script_idea: Optional[str] = None
    full_content: Optional[str] = None
    category: Optional[str] = Field(default=None, min_length=1)
    tags: Optional[List[str]] = None
    is_featured: Optional[bool] = None
    youtube_url: Optional[str] = None
    related_resource_ids: Optional[List[int]] = None


class GeneratedContent(ContentCreate):
    id: int
    created_at: datetime

    @field_validator("created_at")
    @classmethod
    def created_at_is_utc(cls, value: datetime) -> datetime:
        return _assume_utc(value)


class ContentGenerateRequest(ApiModel):
    topic: Optional[str] = None
    category: str = Field("cybersecurity", min_length=1)
    tags: Optional[List[str]] = None
    is_featured: bool = False
    related_resource_ids: List[int] = Field(default_factory=list)

    @field_validator("topic")
    @classmethod
    def blank_topic_is_none(cls, value: Optional[str]) -> Optional[str]:
        if value is not None and not value.strip():
            return None
        return value


class ScriptRequest(ApiModel):
    topic: str = Field(..., min_length=1)


class VideoScript(ApiModel):
    title: str
    summary: str
    script: str
    key_points: List[str]
    categories: List[str]
    tags: List[str]


class SecurityResource(ApiModel):
    title: str
    description: str
    url: str


class SecurityResourceSearch(ApiModel):
    query: str
    resources: List[SecurityResource]
    analysis: str


# ---------------------------------------------------------------------------
# Maintenance
# ---------------------------------------------------------------------------


class ResetResponse(ApiModel):
    message: str
    categories: int
    resources: int
