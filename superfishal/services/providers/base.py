"""Shared plumbing for outbound language-model API clients."""
from __future__ import annotations

import enum
import logging
from abc import ABC, abstractmethod
from typing import Any, ClassVar

import httpx

LOGGER = logging.getLogger(__name__)


class ProviderName(str, enum.Enum):
    HUGGINGFACE = "huggingface"
    ANTHROPIC = "anthropic"
    PERPLEXITY = "perplexity"


class ProviderError(RuntimeError):
    """Raised when a provider call fails or returns an unusable payload."""

    def __init__(self, provider: ProviderName, message: str) -> None:
        super().__init__(f"{provider.value}: {message}")
        self.provider = provider


class LanguageModelProvider(ABC):
    """One external LLM HTTP API.

    The ``httpx.AsyncClient`` is owned by the caller; providers never open or
    close it.
    """

    name: ClassVar[ProviderName]
    requires_api_key: ClassVar[bool] = True
    default_max_tokens: ClassVar[int] = 1024
    default_temperature: ClassVar[float] = 0.7

    def __init__(
        self,
        client: httpx.AsyncClient,
        api_key: str | None,
        *,
        base_url: str,
        timeout: float = 60.0,
    ) -> None:
        self._client = client
        self._api_key = api_key
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout

    @property
    def configured(self) -> bool:
        return bool(self._api_key) or not self.requires_api_key

    @abstractmethod
    async def complete(
        self,
        prompt: str,
        *,
        system_prompt: str,
        max_tokens: int | None = None,
        temperature: float | None = None,
    ) -> str:
        """Return the model's text reply or raise :class:`ProviderError`."""

    def _headers(self) -> dict[str, str]:
        return {"Content-Type": "application/json"}

    def _error(self, message: str) -> ProviderError:
        return ProviderError(self.name, message)

    async def _post(self, path: str, payload: dict[str, Any]) -> Any:
        if not self.configured:
            raise self._error("API key not configured")
        url = f"{self._base_url}{path}"
        try:
            response = await self._client.post(
                url, json=payload, headers=self._headers(), timeout=self._timeout
            )
            response.raise_for_status()
            return response.json()
        except httpx.HTTPStatusError as exc:
            raise self._error(
                f"HTTP {exc.response.status_code} from {url}"
            ) from exc
        except httpx.HTTPError as exc:
            raise self._error(f"request to {url} failed: {exc}") from exc
        except ValueError as exc:
            raise self._error(f"non-JSON response from {url}") from exc


__all__ = ["LanguageModelProvider", "ProviderError", "ProviderName"]
