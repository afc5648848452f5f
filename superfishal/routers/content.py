"""Generated marketing content endpoints."""
from __future__ import annotations

import logging
from typing import Annotated, List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status

from ..dependencies import get_content_generator, get_storage
from ..schemas import (
    ContentCreate,
    ContentGenerateRequest,
    ContentUpdate,
    GeneratedContent,
    ScriptRequest,
    SecurityResource,
    SecurityResourceSearch,
    VideoScript,
)
from ..services.content_generator import ContentGenerator
from ..services.storage import (
    DEFAULT_CONTENT_CATEGORY_LIMIT,
    DEFAULT_CONTENT_LIMIT,
    DEFAULT_FEATURED_CONTENT_LIMIT,
    DEFAULT_RELATED_CONTENT_LIMIT,
    Storage,
)
from .errors import failure_message, not_found, parse_id, require_query

LOGGER = logging.getLogger(__name__)

DEFAULT_CONTENT_TAGS = ("cybersecurity", "security", "trends")

router = APIRouter(prefix="/api/content", tags=["content"])
security_router = APIRouter(prefix="/api/security-resources", tags=["content"])


def _split_csv(raw: str | None, message: str) -> list[str]:
    values = [item.strip() for item in (raw or "").split(",") if item.strip()]
    if not values:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=message)
    return values


@router.get("", response_model=List[GeneratedContent])
def list_content(
    limit: Annotated[int, Query(ge=1)] = DEFAULT_CONTENT_LIMIT,
    storage: Storage = Depends(get_storage),
) -> list[GeneratedContent]:
    with failure_message("Failed to fetch content"):
        return storage.list_content(limit)


@router.get("/featured", response_model=List[GeneratedContent])
def list_featured_content(
    limit: Annotated[int, Query(ge=1)] = DEFAULT_FEATURED_CONTENT_LIMIT,
    storage: Storage = Depends(get_storage),
) -> list[GeneratedContent]:
    with failure_message("Failed to fetch featured content"):
        return storage.list_featured_content(limit)


@router.get("/category/{category}", response_model=List[GeneratedContent])
def list_content_by_category(
    category: str,
    limit: Annotated[int, Query(ge=1)] = DEFAULT_CONTENT_CATEGORY_LIMIT,
    storage: Storage = Depends(get_storage),
) -> list[GeneratedContent]:
    with failure_message("Failed to fetch content by category"):
        return storage.list_content_by_category(category, limit)


@router.get("/search", response_model=List[GeneratedContent])
def search_content(
    q: str | None = None, storage: Storage = Depends(get_storage)
) -> list[GeneratedContent]:
    query = require_query(q, "Search query is required")
    with failure_message("Failed to search content"):
        return storage.search_content(query)


@router.get("/tags", response_model=List[GeneratedContent])
def list_content_by_tags(
    tags: str | None = None,
    limit: Annotated[int, Query(ge=1)] = DEFAULT_CONTENT_CATEGORY_LIMIT,
    storage: Storage = Depends(get_storage),
) -> list[GeneratedContent]:
    tag_list = _split_csv(tags, "Tags parameter is required")
    with failure_message("Failed to fetch content by tags"):
        return storage.list_content_by_tags(tag_list, limit)


@router.get("/related", response_model=List[GeneratedContent])
def list_related_content(
    resource_ids: Annotated[Optional[str], Query(alias="resourceIds")] = None,
    limit: Annotated[int, Query(ge=1)] = DEFAULT_RELATED_CONTENT_LIMIT,
    storage: Storage = Depends(get_storage),
) -> list[GeneratedContent]:
    raw_ids = _split_csv(resource_ids, "Resource IDs parameter is required")
    try:
        ids = [int(value) for value in raw_ids]
    except ValueError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid resource IDs"
        ) from exc
    with failure_message("Failed to fetch related content"):
        return storage.list_related_content(ids, limit)


@router.get("/{content_id}", response_model=GeneratedContent)
def get_content(content_id: str, storage: Storage = Depends(get_storage)) -> GeneratedContent:
    parsed_id = parse_id(content_id, "content")
    with failure_message("Failed to fetch content"):
        content = storage.get_content(parsed_id)
        if content is None:
            raise not_found("Content")
        return content


@router.post(
    "/generate", response_model=GeneratedContent, status_code=status.HTTP_201_CREATED
)
async def generate_content(
    payload: Optional[ContentGenerateRequest] = None,
    storage: Storage = Depends(get_storage),
    generator: ContentGenerator = Depends(get_content_generator),
) -> GeneratedContent:
    """Generate a trend analysis and store it.

    Provider failures are absorbed by the generator's fallback payloads, so
    this only fails when storage does.
    """

    payload = payload or ContentGenerateRequest()
    with failure_message("Failed to generate content"):
        result = await generator.generate_trend(payload.topic)
        trend = result.content
        content = storage.create_content(
            ContentCreate(
                title=trend.title,
                summary=trend.summary,
                key_points=trend.key_points,
                youtube_script_idea=trend.youtube_script_idea,
                full_content=trend.full_content,
                category=payload.category,
                tags=payload.tags or list(DEFAULT_CONTENT_TAGS),
                is_featured=payload.is_featured,
                related_resource_ids=payload.related_resource_ids,
            )
        )
        LOGGER.info(
            "Stored generated content %d (provider=%s, strategy=%s)",
            content.id,
            result.provider.value if result.provider else "none",
            result.strategy,
        )
        return content


@router.post("/script", response_model=VideoScript)
async def generate_script(
    payload: ScriptRequest,
    generator: ContentGenerator = Depends(get_content_generator),
) -> VideoScript:
    with failure_message("Failed to generate script"):
        script = await generator.generate_script(payload.topic)
        return VideoScript(
            title=script.title,
            summary=script.summary,
            script=script.script,
            key_points=script.key_points,
            categories=script.categories,
            tags=script.tags,
        )


@router.post("", response_model=GeneratedContent, status_code=status.HTTP_201_CREATED)
def create_content(
    payload: ContentCreate, storage: Storage = Depends(get_storage)
) -> GeneratedContent:
    with failure_message("Failed to create content"):
        return storage.create_content(payload)


@router.patch("/{content_id}", response_model=GeneratedContent)
def update_content(
    content_id: str, payload: ContentUpdate, storage: Storage = Depends(get_storage)
) -> GeneratedContent:
    parsed_id = parse_id(content_id, "content")
    try:
        payload.ensure_any_field()
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc

    with failure_message("Failed to update content"):
        content = storage.update_content(parsed_id, payload.changes())
        if content is None:
            raise not_found("Content")
        return content


@router.delete(
    "/{content_id}", status_code=status.HTTP_204_NO_CONTENT, response_class=Response
)
def delete_content(content_id: str, storage: Storage = Depends(get_storage)) -> Response:
    parsed_id = parse_id(content_id, "content")
    with failure_message("Failed to delete content"):
        if not storage.delete_content(parsed_id):
            raise not_found("Content")
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@security_router.get("", response_model=SecurityResourceSearch)
async def search_security_resources(
    q: str | None = None,
    generator: ContentGenerator = Depends(get_content_generator),
) -> SecurityResourceSearch:
    query = require_query(q, "Search query is required")
    with failure_message("Failed to search security resources"):
        analysis = await generator.search_security_resources(query)
        return SecurityResourceSearch(
            query=query,
            resources=[
                SecurityResource(title=link.title, description=link.description, url=link.url)
                for link in analysis.resources
            ],
            analysis=analysis.analysis,
        )


__all__ = ["router", "security_router"]
