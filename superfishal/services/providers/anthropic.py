"""Anthropic Messages API client."""
from __future__ import annotations

import httpx

from .base import LanguageModelProvider, ProviderName

ANTHROPIC_VERSION = "2023-06-01"


class AnthropicProvider(LanguageModelProvider):
    name = ProviderName.ANTHROPIC
    default_max_tokens = 1500
    default_temperature = 0.7

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
        headers["x-api-key"] = self._api_key or ""
        headers["anthropic-version"] = ANTHROPIC_VERSION
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
            "max_tokens": max_tokens or self.default_max_tokens,
            "temperature": self.default_temperature if temperature is None else temperature,
            "system": system_prompt,
            "messages": [{"role": "user", "content": prompt}],
        }
        data = await self._post("/v1/messages", payload)
        blocks = data.get("content") if isinstance(data, dict) else None
        for block in blocks or []:
            if isinstance(block, dict) and block.get("type") == "text" and block.get("text"):
                return block["text"]
        raise self._error("response contained no text block")


__all__ = ["AnthropicProvider"]
