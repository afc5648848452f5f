"""Hugging Face Inference API client."""
from __future__ import annotations

import logging
from typing import Any, Sequence

import httpx

from .base import LanguageModelProvider, ProviderError, ProviderName

LOGGER = logging.getLogger(__name__)


def _generated_text(data: Any) -> str | None:
    if isinstance(data, list) and data:
        data = data[0]
    if isinstance(data, dict):
        text = data.get("generated_text")
        if isinstance(text, str):
            return text
    return None


class HuggingFaceProvider(LanguageModelProvider):
    """Text generation against hosted models.

    :meth:`complete` walks ``models`` in order and returns the first non-empty
    generation; :meth:`generate_text` targets a single model.
    """

    name = ProviderName.HUGGINGFACE
    # Anonymous inference is rate-limited but allowed.
    requires_api_key = False
    default_max_tokens = 1024
    default_temperature = 0.5

    def __init__(
        self,
        client: httpx.AsyncClient,
        api_key: str | None,
        *,
        base_url: str,
        models: Sequence[str],
        timeout: float = 60.0,
    ) -> None:
        super().__init__(client, api_key, base_url=base_url, timeout=timeout)
        self.models = tuple(models)

    def _headers(self) -> dict[str, str]:
        headers = super()._headers()
        if self._api_key:
            headers["Authorization"] = f"Bearer {self._api_key}"
        return headers

    async def generate_text(
        self,
        prompt: str,
        *,
        model: str,
        max_new_tokens: int,
        temperature: float,
        top_p: float = 0.9,
        return_full_text: bool = False,
    ) -> str:
        payload = {
            "inputs": prompt,
            "parameters": {
                "max_new_tokens": max_new_tokens,
                "temperature": temperature,
                "top_p": top_p,
                "do_sample": True,
                "return_full_text": return_full_text,
            },
        }
        data = await self._post(f"/models/{model}", payload)
        text = _generated_text(data)
        if not text:
            if isinstance(data, dict) and data.get("error"):
                raise self._error(f"{model}: {data['error']}")
            raise self._error(f"{model} returned no generated_text")
        return text

    async def complete(
        self,
        prompt: str,
        *,
        system_prompt: str,
        max_tokens: int | None = None,
        temperature: float | None = None,
    ) -> str:
        full_prompt = f"{system_prompt}\n\nUser: {prompt}\n\nAssistant:"
        last_error: ProviderError | None = None
        for model in self.models:
            try:
                text = await self.generate_text(
                    full_prompt,
                    model=model,
                    max_new_tokens=max_tokens or self.default_max_tokens,
                    temperature=self.default_temperature if temperature is None else temperature,
                    top_p=0.95,
                )
            except ProviderError as exc:
                LOGGER.warning("Hugging Face model %s failed: %s", model, exc)
                last_error = exc
                continue
            return text.strip()
        if last_error is not None:
            raise last_error
        raise self._error("no models configured")


__all__ = ["HuggingFaceProvider"]
