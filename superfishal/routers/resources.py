"""AI-tool directory endpoints."""
from __future__ import annotations

from typing import Annotated, List

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status

from ..dependencies import get_storage
from ..schemas import Resource, ResourceCreate, ResourceUpdate
from ..services.storage import DEFAULT_RESOURCE_LIMIT, Storage
from .errors import failure_message, not_found, parse_id, require_query

router = APIRouter(prefix="/api/resources", tags=["resources"])


@router.get("", response_model=List[Resource])
def list_resources(storage: Storage = Depends(get_storage)) -> list[Resource]:
    with failure_message("Failed to fetch resources"):
        return storage.list_resources()


@router.get("/popular", response_model=List[Resource])
def list_popular_resources(
    limit: Annotated[int, Query(ge=1)] = DEFAULT_RESOURCE_LIMIT,
    storage: Storage = Depends(get_storage),
) -> list[Resource]:
    with failure_message("Failed to fetch popular resources"):
        return storage.list_popular_resources(limit)


@router.get("/featured", response_model=List[Resource])
def list_featured_resources(
    limit: Annotated[int, Query(ge=1)] = DEFAULT_RESOURCE_LIMIT,
    storage: Storage = Depends(get_storage),
) -> list[Resource]:
    with failure_message("Failed to fetch featured resources"):
        return storage.list_featured_resources(limit)


@router.get("/category/{category}", response_model=List[Resource])
def list_resources_by_category(
    category: str, storage: Storage = Depends(get_storage)
) -> list[Resource]:
    with failure_message("Failed to fetch resources by category"):
        return storage.list_resources_by_category(category)


@router.get("/search", response_model=List[Resource])
def search_resources(
    q: str | None = None, storage: Storage = Depends(get_storage)
) -> list[Resource]:
    query = require_query(q, "Search query is required")
    with failure_message("Failed to search resources"):
        return storage.search_resources(query)


@router.get("/{resource_id}", response_model=Resource)
def get_resource(resource_id: str, storage: Storage = Depends(get_storage)) -> Resource:
    parsed_id = parse_id(resource_id, "resource")
    with failure_message("Failed to fetch resource"):
        resource = storage.get_resource(parsed_id)
        if resource is None:
            raise not_found("Resource")
        return resource


@router.post("", response_model=Resource, status_code=status.HTTP_201_CREATED)
def create_resource(
    payload: ResourceCreate, storage: Storage = Depends(get_storage)
) -> Resource:
    with failure_message("Failed to create resource"):
        return storage.create_resource(payload)


@router.patch("/{resource_id}", response_model=Resource)
def update_resource(
    resource_id: str, payload: ResourceUpdate, storage: Storage = Depends(get_storage)
) -> Resource:
    parsed_id = parse_id(resource_id, "resource")
    try:
        payload.ensure_any_field()
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc

    with failure_message("Failed to update resource"):
        resource = storage.update_resource(parsed_id, payload.changes())
        if resource is None:
            raise not_found("Resource")
        return resource


@router.delete(
    "/{resource_id}", status_code=status.HTTP_204_NO_CONTENT, response_class=Response
)
def delete_resource(resource_id: str, storage: Storage = Depends(get_storage)) -> Response:
    parsed_id = parse_id(resource_id, "resource")
    with failure_message("Failed to delete resource"):
        if not storage.delete_resource(parsed_id):
            raise not_found("Resource")
    return Response(status_code=status.HTTP_204_NO_CONTENT)


__all__ = ["router"]
