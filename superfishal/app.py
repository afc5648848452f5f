"""FastAPI application exposing the directory, chat and content endpoints."""
from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

import httpx
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from .config import Settings
from .db import create_db_engine
from .routers import admin, categories, chat, content, resources
from .services import (
    ChatService,
    ContentGenerator,
    DatabaseStorage,
    DuplicateError,
    MemoryStorage,
    ProviderName,
    Storage,
    build_providers,
    seed_default_data,
)
from .services.content_generator import parse_provider_name

LOGGER = logging.getLogger(__name__)


def build_storage(settings: Settings) -> Storage:
    backend = settings.storage_backend.strip().lower()
    if backend == "memory":
        return MemoryStorage()
    if backend == "database":
        engine = create_db_engine(settings.database_url, echo=settings.sqlalchemy_echo)
        return DatabaseStorage(engine)
    raise ValueError(f"Unknown storage backend {settings.storage_backend!r}")


def format_validation_error(exc: RequestValidationError) -> str:
    """Render pydantic errors as ``Validation error: <msg> at "<path>"; ...``."""

    parts = []
    for error in exc.errors():
        location = [str(part) for part in error.get("loc", ())]
        # Drop the leading "body"/"query" marker when a field path follows it.
        if len(location) > 1 and location[0] in {"body", "query", "path"}:
            location = location[1:]
        message = error.get("msg", "Invalid value")
        parts.append(f'{message} at "{".".join(location)}"' if location else message)
    return "Validation error: " + "; ".join(parts)


def _register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(
        request: Request, exc: StarletteHTTPException
    ) -> JSONResponse:
        return JSONResponse(
            status_code=exc.status_code,
            content={"message": str(exc.detail)},
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"message": format_validation_error(exc)},
        )

    @app.exception_handler(DuplicateError)
    async def duplicate_exception_handler(request: Request, exc: DuplicateError) -> JSONResponse:
        return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"message": str(exc)})

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        LOGGER.error("Unhandled error on %s %s", request.method, request.url.path, exc_info=exc)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"message": "Internal Server Error"},
        )


def create_app(
    settings: Settings | None = None,
    *,
    storage: Storage | None = None,
    http_client: httpx.AsyncClient | None = None,
) -> FastAPI:
    """Build the application.

    ``storage`` and ``http_client`` may be supplied by the caller, in which
    case the caller keeps ownership and the lifespan does not close them.
    """

    settings = settings or Settings()
    logging.basicConfig(level=getattr(logging, settings.log_level.upper(), logging.INFO))
    primary = parse_provider_name(settings.content_provider)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        client = http_client if http_client is not None else httpx.AsyncClient(
            timeout=settings.provider_timeout
        )
        store = storage if storage is not None else build_storage(settings)
        providers = build_providers(settings, client)
        unconfigured = [
            name.value for name, provider in providers.items() if not provider.configured
        ]
        if unconfigured:
            LOGGER.warning("Providers without API keys: %s", ", ".join(unconfigured))

        app.state.storage = store
        app.state.chat_service = ChatService(
            providers[ProviderName.HUGGINGFACE], model=settings.chat_model
        )
        app.state.content_generator = ContentGenerator(providers, primary=primary)
        if settings.seed_on_startup:
            seed_default_data(store)
        LOGGER.info(
            "Superfishal API ready (storage=%s, primary provider=%s)",
            type(store).__name__,
            primary.value,
        )
        try:
            yield
        finally:
            if http_client is None:
                await client.aclose()
            if storage is None:
                store.close()

    app = FastAPI(title="Superfishal Intelligence API", version="0.1.0", lifespan=lifespan)
    app.state.settings = settings
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    _register_exception_handlers(app)

    app.include_router(resources.router)
    app.include_router(chat.router)
    app.include_router(categories.router)
    app.include_router(content.router)
    app.include_router(content.security_router)
    app.include_router(admin.router)

    @app.get("/health")
    def health_check() -> dict[str, str]:
        return {"status": "ok"}

    return app


app = create_app()


def main() -> None:  # pragma: no cover - manual entry point
    import uvicorn

    uvicorn.run("superfishal.app:app", host="0.0.0.0", port=5000)


if __name__ == "__main__":  # pragma: no cover
    main()


__all__ = ["app", "build_storage", "create_app", "format_validation_error"]
