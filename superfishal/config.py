"""Application configuration settings."""
from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Final

from dotenv import load_dotenv

load_dotenv()

BASE_DIR: Final[Path] = Path(__file__).resolve().parent.parent
DATA_DIR: Final[Path] = Path(os.getenv("DATA_DIR", str(BASE_DIR / "data")))

DATABASE_URL: Final[str] = os.getenv(
    "DATABASE_URL", f"sqlite:///{(DATA_DIR / 'superfishal.db').as_posix()}"
)
# "database" for the SQLAlchemy-backed store, "memory" for the dict-backed one.
STORAGE_BACKEND: Final[str] = os.getenv("STORAGE_BACKEND", "database")
SQLALCHEMY_ECHO: Final[bool] = os.getenv("SQLALCHEMY_ECHO") == "1"
SEED_ON_STARTUP: Final[bool] = os.getenv("SEED_ON_STARTUP", "1") == "1"

LOG_LEVEL: Final[str] = os.getenv("LOG_LEVEL", "INFO")
CORS_ORIGINS: Final[list[str]] = [
    origin.strip() for origin in os.getenv("CORS_ORIGINS", "*").split(",") if origin.strip()
]

# Provider credentials
HUGGINGFACE_API_KEY: Final[str | None] = os.getenv("HUGGINGFACE_API_KEY")
ANTHROPIC_API_KEY: Final[str | None] = os.getenv("ANTHROPIC_API_KEY")
PERPLEXITY_API_KEY: Final[str | None] = os.getenv("PERPLEXITY_API_KEY")

# Provider endpoints and models
HUGGINGFACE_BASE_URL: Final[str] = os.getenv(
    "HUGGINGFACE_BASE_URL", "https://api-inference.huggingface.co"
)
HUGGINGFACE_MODELS: Final[tuple[str, ...]] = tuple(
    model.strip()
    for model in os.getenv(
        "HUGGINGFACE_MODELS",
        "meta-llama/Llama-2-70b-chat-hf,tiiuae/falcon-180B,bigscience/bloom,"
        "google/gemma-7b,mistralai/Mistral-7B-Instruct-v0.2,meta-llama/Llama-2-7b-chat-hf",
    ).split(",")
    if model.strip()
)
CHAT_MODEL: Final[str] = os.getenv("CHAT_MODEL", "gpt2")
ANTHROPIC_BASE_URL: Final[str] = os.getenv("ANTHROPIC_BASE_URL", "https://api.anthropic.com")
ANTHROPIC_MODEL: Final[str] = os.getenv("ANTHROPIC_MODEL", "claude-3-7-sonnet-20250219")
PERPLEXITY_BASE_URL: Final[str] = os.getenv("PERPLEXITY_BASE_URL", "https://api.perplexity.ai")
PERPLEXITY_MODEL: Final[str] = os.getenv(
    "PERPLEXITY_MODEL", "llama-3.1-sonar-small-128k-online"
)

# Primary provider for structured content; the others are tried after it.
CONTENT_PROVIDER: Final[str] = os.getenv("CONTENT_PROVIDER", "anthropic")
PROVIDER_TIMEOUT: Final[float] = float(os.getenv("PROVIDER_TIMEOUT", 60))


@dataclass(slots=True)
class Settings:
    """Snapshot of the environment used to build an application instance."""

    database_url: str = DATABASE_URL
    storage_backend: str = STORAGE_BACKEND
    sqlalchemy_echo: bool = SQLALCHEMY_ECHO
    seed_on_startup: bool = SEED_ON_STARTUP
    log_level: str = LOG_LEVEL
    cors_origins: list[str] = field(default_factory=lambda: list(CORS_ORIGINS))
    huggingface_api_key: str | None = HUGGINGFACE_API_KEY
    anthropic_api_key: str | None = ANTHROPIC_API_KEY
    perplexity_api_key: str | None = PERPLEXITY_API_KEY
    huggingface_base_url: str = HUGGINGFACE_BASE_URL
    huggingface_models: tuple[str, ...] = HUGGINGFACE_MODELS
    chat_model: str = CHAT_MODEL
    anthropic_base_url: str = ANTHROPIC_BASE_URL
    anthropic_model: str = ANTHROPIC_MODEL
    perplexity_base_url: str = PERPLEXITY_BASE_URL
    perplexity_model: str = PERPLEXITY_MODEL
    content_provider: str = CONTENT_PROVIDER
    provider_timeout: float = PROVIDER_TIMEOUT


def ensure_data_dir(database_url: str) -> None:
    """Create the parent directory for a file-backed SQLite database."""

    if not database_url.startswith("sqlite:///"):
        return
    target = database_url.replace("sqlite:///", "", 1)
    if target == ":memory:" or target.startswith("file:"):
        return
    Path(target).expanduser().parent.mkdir(parents=True, exist_ok=True)
