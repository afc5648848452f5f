"""Handler-boundary error conversion shared by the API routers."""
from __future__ import annotations

import contextlib
import logging
from typing import Iterator

from fastapi import HTTPException, status

from ..services.storage import DuplicateError

LOGGER = logging.getLogger(__name__)


def parse_id(raw: str, label: str) -> int:
    """Parse a path identifier, answering 400 ``Invalid <label> ID`` otherwise."""

    try:
        return int(raw)
    except ValueError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail=f"Invalid {label} ID"
        ) from exc


def not_found(label: str) -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"{label} not found")


def require_query(value: str | None, message: str) -> str:
    if value is None or not value.strip():
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=message)
    return value


@contextlib.contextmanager
def failure_message(message: str) -> Iterator[None]:
    """Turn unexpected errors inside a handler into a logged 500 ``message``."""

    try:
        yield
    except HTTPException:
        raise
    except DuplicateError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    except Exception as exc:  # noqa: BLE001 - return consistent error to clients
        LOGGER.exception(message)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=message
        ) from exc


__all__ = ["failure_message", "not_found", "parse_id", "require_query"]
