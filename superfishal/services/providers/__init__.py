"""Language-model provider clients."""
from __future__ import annotations

import httpx

from ...config import Settings
from .anthropic import AnthropicProvider
from .base import LanguageModelProvider, ProviderError, ProviderName
from .huggingface import HuggingFaceProvider
from .perplexity import PerplexityProvider


def build_providers(
    settings: Settings, client: httpx.AsyncClient
) -> dict[ProviderName, LanguageModelProvider]:
    """Construct one client per provider, all sharing ``client``."""

    return {
        ProviderName.HUGGINGFACE: HuggingFaceProvider(
            client,
            settings.huggingface_api_key,
            base_url=settings.huggingface_base_url,
            models=settings.huggingface_models,
            timeout=settings.provider_timeout,
        ),
        ProviderName.ANTHROPIC: AnthropicProvider(
            client,
            settings.anthropic_api_key,
            base_url=settings.anthropic_base_url,
            model=settings.anthropic_model,
            timeout=settings.provider_timeout,
        ),
        ProviderName.PERPLEXITY: PerplexityProvider(
            client,
            settings.perplexity_api_key,
            base_url=settings.perplexity_base_url,
            model=settings.perplexity_model,
            timeout=settings.provider_timeout,
        ),
    }


__all__ = [
    "AnthropicProvider",
    "HuggingFaceProvider",
    "LanguageModelProvider",
    "PerplexityProvider",
    "ProviderError",
    "ProviderName",
    "build_providers",
]
