"""Resource category endpoints."""
from __future__ import annotations

from typing import List

from fastapi import APIRouter, Depends, status

from ..dependencies import get_storage
from ..schemas import Category, CategoryCreate
from ..services.storage import Storage
from .errors import failure_message, not_found, parse_id

router = APIRouter(prefix="/api/categories", tags=["categories"])


@router.get("", response_model=List[Category])
def list_categories(storage: Storage = Depends(get_storage)) -> list[Category]:
    with failure_message("Failed to fetch categories"):
        return storage.list_categories()


@router.get("/{category_id}", response_model=Category)
def get_category(category_id: str, storage: Storage = Depends(get_storage)) -> Category:
    parsed_id = parse_id(category_id, "category")
    with failure_message("Failed to fetch category"):
        category = storage.get_category(parsed_id)
        if category is None:
            raise not_found("Category")
        return category


@router.post("", response_model=Category, status_code=status.HTTP_201_CREATED)
def create_category(
    payload: CategoryCreate, storage: Storage = Depends(get_storage)
) -> Category:
    with failure_message("Failed to create category"):
        return storage.create_category(payload)


__all__ = ["router"]
