"""Structured marketing-content generation across language-model providers."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Mapping, TypeVar

from .content_parser import (
    STRATEGY_NONE,
    ContentParser,
    ParseResult,
    ResourceAnalysis,
    ResourceLink,
    TrendContent,
    VideoScriptContent,
)
from .providers import LanguageModelProvider, ProviderError, ProviderName

LOGGER = logging.getLogger(__name__)

T = TypeVar("T")

STRATEGY_FALLBACK = "fallback"

DEFAULT_TREND_TOPIC = "latest cybersecurity threats, vulnerabilities, and mitigation strategies"

TREND_SYSTEM_PROMPT = (
    "You are a world-class cybersecurity expert at Superfishal Intelligence, providing "
    "detailed analysis on cybersecurity topics. Be technical but make it understandable "
    "for IT professionals. Include specific threat actor names, CVEs, and real-world "
    "examples where appropriate."
)
TREND_PROMPT = """
Generate a comprehensive analysis on {topic}. Focus on information that would be valuable to cybersecurity professionals.

Structure your response in the following JSON format:
{{
  "title": "An SEO-optimized, engaging title",
  "summary": "A concise 2-3 sentence summary of the main insights",
  "keyPoints": ["Point 1 about a critical security issue", "Point 2 about another important aspect", "Point 3 with actionable advice", "Point 4 with relevant statistics or examples", "Point 5 with a real-world example"],
  "youtubeScriptIdea": "A brief outline for a 5-7 minute educational YouTube video on this topic",
  "fullContent": "A detailed 500-word technical analysis expanding on the key points"
}}
"""

SCRIPT_SYSTEM_PROMPT = (
    "You are a professional content creator specializing in cybersecurity education."
)
SCRIPT_PROMPT = """
Create a detailed YouTube script about "{topic}" for our cybersecurity channel.
Make it engaging, informative, and professionally structured.

Return the response in this JSON format:
{{
  "title": "An engaging, SEO-optimized title",
  "summary": "A compelling 30-word description for the video",
  "script": "The complete 5-minute script including intro, main points, and conclusion",
  "keypoints": ["Main point 1", "Main point 2", "Main point 3", "Main point 4"],
  "categories": ["Primary category", "Secondary category"],
  "tags": ["tag1", "tag2", "tag3", "tag4", "tag5"]
}}
"""

RESOURCE_SYSTEM_PROMPT = (
    "You are a cybersecurity resource analyst who provides factual, well-researched "
    "information."
)
RESOURCE_PROMPT = """
Find and analyze recent, high-quality cybersecurity resources related to "{query}".
Focus on authoritative sources, tools, and informational resources.

Return your response in this JSON format, including 3-5 resources:
{{
  "resources": [
    {{
      "title": "Resource name",
      "description": "Brief description of what this resource offers",
      "url": "Full URL to the resource"
    }}
  ],
  "analysis": "A 2-3 paragraph analysis of these resources, their strengths, and how they relate to the query"
}}
"""

FALLBACK_TRENDS: Mapping[ProviderName, TrendContent] = {
    ProviderName.ANTHROPIC: TrendContent(
        title="Critical Cybersecurity Trends for 2025",
        summary=(
            "An analysis of the most significant cybersecurity developments affecting "
            "organizations today."
        ),
        key_points=[
            "Rise in sophisticated supply chain attacks targeting software dependencies",
            "Increased nation-state sponsored attacks on critical infrastructure",
            "AI-enhanced threat detection becoming standard for enterprise security",
            "Zero-trust architecture adoption accelerating across industries",
            "Quantum computing threats driving cryptographic agility initiatives",
        ],
        youtube_script_idea=(
            "A comprehensive breakdown of the 5 most critical cybersecurity threats and "
            "practical mitigation strategies for organizations of all sizes."
        ),
        full_content=(
            "The cybersecurity landscape continues to evolve rapidly with threats becoming "
            "more sophisticated and targeted. Organizations must adopt proactive security "
            "postures and leverage advanced technologies to defend against modern attacks."
        ),
    ),
    ProviderName.PERPLEXITY: TrendContent(
        title="Emerging Cybersecurity Trends",
        summary=(
            "An overview of the latest developments in cybersecurity threats and defenses."
        ),
        key_points=[
            "Zero-trust architecture is becoming increasingly important",
            "Ransomware continues to evolve with more sophisticated techniques",
            "AI-driven security tools are enhancing threat detection capabilities",
            "Cloud security posture management is critical as cloud adoption accelerates",
        ],
        youtube_script_idea=(
            "A walkthrough of the most critical security practices businesses should "
            "implement in today's threat landscape."
        ),
    ),
    ProviderName.HUGGINGFACE: TrendContent(
        title="Latest Cybersecurity Trends Analysis",
        summary="Analysis of current cybersecurity landscape and emerging threats.",
        key_points=[
            "Advanced persistent threats continue to evolve",
            "Zero-trust architecture is becoming standard",
            "AI-powered security tools are increasingly important",
        ],
        youtube_script_idea=(
            "A comprehensive overview of emerging cybersecurity threats and defense "
            "strategies."
        ),
    ),
}


@dataclass(slots=True)
class GenerationResult:
    """Generated payload plus where it came from.

    ``provider`` is ``None`` when every provider failed and ``strategy`` is
    then ``"fallback"``.
    """

    content: TrendContent
    provider: ProviderName | None
    strategy: str


def _copy_trend(trend: TrendContent) -> TrendContent:
    return TrendContent(
        title=trend.title,
        summary=trend.summary,
        key_points=list(trend.key_points),
        youtube_script_idea=trend.youtube_script_idea,
        full_content=trend.full_content,
    )


class ContentGenerator:
    """Run one prompt through an ordered chain of providers.

    The primary provider is tried first, then the rest in enum order. A
    provider error or a reply the parser cannot extract anything from moves
    on to the next provider; when the chain is exhausted the primary
    provider's fallback payload is returned.
    """

    def __init__(
        self,
        providers: Mapping[ProviderName, LanguageModelProvider],
        *,
        primary: ProviderName = ProviderName.ANTHROPIC,
        parser: ContentParser | None = None,
    ) -> None:
        self._providers = dict(providers)
        self.primary = primary
        self._parser = parser or ContentParser()

    @property
    def provider_order(self) -> list[ProviderName]:
        order = [self.primary] + [name for name in ProviderName if name != self.primary]
        return [name for name in order if name in self._providers]

    async def _run_chain(
        self,
        prompt: str,
        system_prompt: str,
        parse: Callable[[str], ParseResult[T]],
        *,
        label: str,
        max_tokens: int | None = None,
    ) -> tuple[T, ProviderName, str] | None:
        for name in self.provider_order:
            provider = self._providers[name]
            try:
                reply = await provider.complete(
                    prompt, system_prompt=system_prompt, max_tokens=max_tokens
                )
            except ProviderError as exc:
                LOGGER.warning("%s generation via %s failed: %s", label, name.value, exc)
                continue
            result = parse(reply)
            if result.strategy == STRATEGY_NONE:
                LOGGER.warning(
                    "%s reply from %s had no recognisable structure", label, name.value
                )
                continue
            LOGGER.info(
                "%s generated via %s (%s parse)", label, name.value, result.strategy
            )
            return result.value, name, result.strategy
        return None

    async def generate_trend(self, topic: str | None = None) -> GenerationResult:
        prompt = TREND_PROMPT.format(topic=topic or DEFAULT_TREND_TOPIC)
        outcome = await self._run_chain(
            prompt, TREND_SYSTEM_PROMPT, self._parser.parse_trend, label="Trend"
        )
        if outcome is None:
            LOGGER.warning("All providers failed; using %s fallback trend", self.primary.value)
            return GenerationResult(
                content=_copy_trend(FALLBACK_TRENDS[self.primary]),
                provider=None,
                strategy=STRATEGY_FALLBACK,
            )
        content, provider, strategy = outcome
        return GenerationResult(content=content, provider=provider, strategy=strategy)

    async def generate_script(self, topic: str) -> VideoScriptContent:
        outcome = await self._run_chain(
            SCRIPT_PROMPT.format(topic=topic),
            SCRIPT_SYSTEM_PROMPT,
            lambda reply: self._parser.parse_script(reply, topic),
            label="Script",
            max_tokens=2000,
        )
        if outcome is None:
            return self._parser.parse_script("", topic).value
        return outcome[0]

    async def search_security_resources(self, query: str) -> ResourceAnalysis:
        outcome = await self._run_chain(
            RESOURCE_PROMPT.format(query=query),
            RESOURCE_SYSTEM_PROMPT,
            lambda reply: self._parser.parse_resource_search(reply, query),
            label="Resource search",
        )
        if outcome is None:
            return ResourceAnalysis(
                resources=[
                    ResourceLink(
                        title="Resource not available",
                        description="Unable to retrieve resources at this time",
                        url="https://www.cisa.gov/",
                    )
                ],
                analysis=(
                    f'We\'re currently unable to provide analysis for "{query}". Please try '
                    "another search term or check back later."
                ),
            )
        return outcome[0]


def parse_provider_name(value: str) -> ProviderName:
    try:
        return ProviderName(value.strip().lower())
    except ValueError as exc:
        choices = ", ".join(name.value for name in ProviderName)
        raise ValueError(f"Unknown content provider {value!r}; expected one of {choices}") from exc


__all__ = [
    "ContentGenerator",
    "DEFAULT_TREND_TOPIC",
    "FALLBACK_TRENDS",
    "GenerationResult",
    "STRATEGY_FALLBACK",
    "parse_provider_name",
]
