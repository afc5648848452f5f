"""Perplexity chat-completions API client."""
from __future__ import annotations

import logging

import httpx

from .base import LanguageModelProvider, ProviderName

LOGGER = logging.getLogger(__name__)


class PerplexityProvider(LanguageModelProvider):
    name = ProviderName.PERPLEXITY
    default_max_tokens = 1024
    default_temperature = 0.2

    def __init__(
        self,
        client: httpx.AsyncClient,
        api_key: str | None,
        *,
        base_url: str,
        model: str,
        timeout: float = 60.0,
    ) -> None:
        super().__init__(client, api_key, base_url=base_url, timeout=timeout)
        self.model = model

    def _headers(self) -> dict[str, str]:
        headers = super()._headers()
        headers["Authorization"] = f"Bearer {self._api_key}"
        return headers

    async def complete(
        self,
        prompt: str,
        *,
        system_prompt: str,
        max_tokens: int | None = None,
        temperature: float | None = None,
    ) -> str:
        payload = {
            "model": self.model,
            "messages": [
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": prompt},
            ],
            "max_tokens": max_tokens or self.default_max_tokens,
            "temperature": self.default_temperature if temperature is None else temperature,
            "top_p": 0.9,
            "return_images": False,
            "return_related_questions": False,
            "search_recency_filter": "month",
            "stream": False,
            "presence_penalty": 0,
            "frequency_penalty": 1,
        }
        data = await self._post("/chat/completions", payload)
        if isinstance(data, dict) and data.get("citations"):
            LOGGER.debug("Perplexity citations: %s", data["citations"])
        try:
            content = data["choices"][0]["message"]["content"]
        except (KeyError, IndexError, TypeError) as exc:
            raise self._error("unexpected response format") from exc
        if not isinstance(content, str) or not content:
            raise self._error("empty completion")
        return content


__all__ = ["PerplexityProvider"]
