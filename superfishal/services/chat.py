"""Chat replies for the resource-guide widget."""
from __future__ import annotations

import logging
import re
from typing import Iterable

from ..schemas import ChatMessage
from .providers import HuggingFaceProvider, ProviderError

LOGGER = logging.getLogger(__name__)

SYSTEM_PROMPT = (
    "You are an AI resource guide at Superfishal Intelligence, a platform that helps users "
    "discover free AI tools, get code examples, and find hosting options."
)
FALLBACK_REPLY = (
    "I'm sorry, I'm having trouble connecting to my AI brain at the moment. Please try again "
    "later or ask about our AI resources."
)

MAX_NEW_TOKENS = 250
TEMPERATURE = 0.7
TOP_P = 0.9

_ROLE_LABELS = {"user": "User", "assistant": "Assistant"}
_LEADING_LABEL = re.compile(r"^\s*assistant:\s*", re.IGNORECASE)


def format_chat_prompt(messages: Iterable[ChatMessage]) -> str:
    """Render the conversation as one plain-text completion prompt."""

    lines = [f"{_ROLE_LABELS[message.role]}: {message.content}" for message in messages]
    return f"{SYSTEM_PROMPT}\n\n" + "".join(f"{line}\n" for line in lines) + "Assistant:"


def clean_response(text: str) -> str:
    return _LEADING_LABEL.sub("", text, count=1).strip()


class ChatService:
    """Single-shot text generation against one hosted model."""

    def __init__(self, provider: HuggingFaceProvider, *, model: str = "gpt2") -> None:
        self._provider = provider
        self.model = model

    async def reply(self, history: Iterable[ChatMessage]) -> str:
        prompt = format_chat_prompt(history)
        try:
            generated = await self._provider.generate_text(
                prompt,
                model=self.model,
                max_new_tokens=MAX_NEW_TOKENS,
                temperature=TEMPERATURE,
                top_p=TOP_P,
            )
        except ProviderError as exc:
            LOGGER.warning("Chat reply failed: %s", exc)
            return FALLBACK_REPLY
        reply = clean_response(generated)
        if not reply:
            LOGGER.warning("Chat model %s returned an empty reply", self.model)
            return FALLBACK_REPLY
        return reply


__all__ = [
    "ChatService",
    "FALLBACK_REPLY",
    "SYSTEM_PROMPT",
    "clean_response",
    "format_chat_prompt",
]
