"""Maintenance endpoints."""
from __future__ import annotations

import logging

from fastapi import APIRouter, Depends

from ..dependencies import get_storage
from ..schemas import ResetResponse
from ..services.seed import reset_database
from ..services.storage import Storage
from .errors import failure_message

LOGGER = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["admin"])


@router.post("/reset-database", response_model=ResetResponse)
def reset_database_endpoint(storage: Storage = Depends(get_storage)) -> ResetResponse:
    with failure_message("Failed to reset database"):
        categories, resources = reset_database(storage)
    LOGGER.info("Database reset: %d categories, %d resources", categories, resources)
    return ResetResponse(
        message="Database reset and reseeded",
        categories=categories,
        resources=resources,
    )


__all__ = ["router"]
