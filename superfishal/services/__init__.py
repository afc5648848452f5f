"""Service layer for Superfishal Intelligence."""

from .chat import ChatService
from .content_generator import ContentGenerator, GenerationResult
from .content_parser import ContentParser
from .database_storage import DatabaseStorage
from .memory_storage import MemoryStorage
from .providers import ProviderError, ProviderName, build_providers
from .seed import reset_database, seed_default_data
from .storage import DuplicateError, Storage

__all__ = [
    "ChatService",
    "ContentGenerator",
    "ContentParser",
    "DatabaseStorage",
    "DuplicateError",
    "GenerationResult",
    "MemoryStorage",
    "ProviderError",
    "ProviderName",
    "Storage",
    "build_providers",
    "reset_database",
    "seed_default_data",
]
