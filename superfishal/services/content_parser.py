"""Best-effort parsing of free-text language-model replies.

Replies are asked to be JSON but frequently arrive wrapped in prose, with
markdown headings, or as JSON-ish text that does not decode. Each ``parse_*``
method tries, in order:

``json``
    Decode the outermost ``{...}`` span. Accepted when at least one expected
    key is present; missing keys take the defaults.
``fields``
    Regex over quoted keys, e.g. ``"title": "..."`` and ``"keyPoints": [...]``.
``sections``
    Labelled sections such as ``Title: ...`` or a ``Key Points:`` heading
    followed by bullet lines (trend content only).
``none``
    Nothing recognisable; every field takes its default.

Parsing never raises. A ``none`` result is an ordinary outcome the caller can
act on.
"""
from __future__ import annotations

import json
import logging
import re
from dataclasses import dataclass, field
from typing import Any, Generic, Iterable, Sequence, TypeVar

LOGGER = logging.getLogger(__name__)

T = TypeVar("T")

STRATEGY_JSON = "json"
STRATEGY_FIELDS = "fields"
STRATEGY_SECTIONS = "sections"
STRATEGY_NONE = "none"

DEFAULT_TREND_TITLE = "Latest Cybersecurity Trends Analysis"
DEFAULT_TREND_SUMMARY = "Analysis of current cybersecurity landscape and emerging threats."
DEFAULT_TREND_KEY_POINTS = (
    "Advanced persistent threats continue to evolve",
    "Zero-trust architecture is becoming standard",
    "AI-powered security tools are increasingly important",
)
DEFAULT_TREND_SCRIPT_IDEA = (
    "A comprehensive overview of emerging cybersecurity threats and defense strategies."
)

DEFAULT_SCRIPT_KEY_POINTS = (
    "Understanding the basics",
    "Implementation strategies",
    "Common pitfalls",
    "Advanced techniques",
)
DEFAULT_SCRIPT_CATEGORIES = ("Cybersecurity", "Technology")

CISA_RESOURCE = {
    "title": "CISA Cybersecurity Resources",
    "description": (
        "Official cybersecurity guidance and tools from the Cybersecurity & "
        "Infrastructure Security Agency"
    ),
    "url": "https://www.cisa.gov/resources-tools",
}


@dataclass(slots=True)
class TrendContent:
    title: str
    summary: str
    key_points: list[str]
    youtube_script_idea: str
    full_content: str | None = None


@dataclass(slots=True)
class VideoScriptContent:
    title: str
    summary: str
    script: str
    key_points: list[str]
    categories: list[str]
    tags: list[str]


@dataclass(slots=True)
class ResourceLink:
    title: str
    description: str
    url: str


@dataclass(slots=True)
class ResourceAnalysis:
    resources: list[ResourceLink] = field(default_factory=list)
    analysis: str = ""


@dataclass
class ParseResult(Generic[T]):
    value: T
    strategy: str

    @property
    def extracted(self) -> bool:
        return self.strategy != STRATEGY_NONE


# ---------------------------------------------------------------------------
# Low-level extraction helpers
# ---------------------------------------------------------------------------

_LIST_SPLIT = re.compile(r",(?=\s*[\"'])")
_BULLET = re.compile(r"^\s*(?:[-*•]|\d+[.)])\s+(?P<item>.+)$")
_SECTION_LABELS = {
    "title": "title",
    "summary": "summary",
    "key points": "key_points",
    "youtube script idea": "youtube_script_idea",
    "full content": "full_content",
}
_SECTION_HEADER = re.compile(
    r"^\s*(?:#+\s*)?(?:\d+[.)]\s*)?\**\s*"
    r"(?P<label>title|summary|key points|youtube script idea|full content)"
    r"\s*\**\s*(?::\s*\**\s*(?P<rest>.*)|\s*$)",
    re.IGNORECASE,
)


def extract_json_object(text: str) -> dict[str, Any] | None:
    """Decode the outermost ``{...}`` span of ``text`` if it is a JSON object."""

    start = text.find("{")
    end = text.rfind("}")
    if start == -1 or end <= start:
        return None
    try:
        data = json.loads(text[start : end + 1])
    except (json.JSONDecodeError, RecursionError) as exc:
        LOGGER.debug("Reply is not valid JSON: %s", exc)
        return None
    return data if isinstance(data, dict) else None


def _key_pattern(keys: Sequence[str]) -> str:
    return "|".join(rf"\"{re.escape(key)}\"|\b{re.escape(key)}\b" for key in keys)


def _unescape(value: str) -> str:
    try:
        return json.loads(f'"{value}"')
    except json.JSONDecodeError:
        return value


def quoted_string(text: str, keys: Sequence[str]) -> str | None:
    match = re.search(
        rf"(?:{_key_pattern(keys)})\s*:\s*\"((?:[^\"\\]|\\.)*)\"",
        text,
    )
    if not match:
        return None
    value = _unescape(match.group(1)).strip()
    return value or None


def quoted_list(text: str, keys: Sequence[str]) -> list[str] | None:
    match = re.search(rf"(?:{_key_pattern(keys)})\s*:\s*\[(.*?)\]", text, re.DOTALL)
    if not match:
        return None
    items = [
        item.strip().strip("\"'").strip()
        for item in _LIST_SPLIT.split(match.group(1))
    ]
    items = [item for item in items if item]
    return items or None


def _first(data: dict[str, Any], keys: Iterable[str]) -> Any:
    for key in keys:
        if key in data and data[key] not in (None, ""):
            return data[key]
    return None


def _as_text(value: Any) -> str | None:
    if isinstance(value, str) and value.strip():
        return value.strip()
    return None


def _as_list(value: Any) -> list[str] | None:
    if isinstance(value, str) and value.strip():
        return [value.strip()]
    if isinstance(value, list):
        items = [str(item).strip() for item in value if str(item).strip()]
        return items or None
    return None


def split_sections(text: str) -> dict[str, list[str]]:
    """Group lines under the recognised section label that precedes them."""

    sections: dict[str, list[str]] = {}
    current: str | None = None
    for line in text.splitlines():
        header = _SECTION_HEADER.match(line)
        if header:
            current = _SECTION_LABELS[header.group("label").lower()]
            rest = (header.group("rest") or "").strip().strip("*").strip()
            sections.setdefault(current, [])
            if rest:
                sections[current].append(rest)
            continue
        if current is not None and line.strip():
            sections[current].append(line.strip())
    return sections


# ---------------------------------------------------------------------------
# Parser
# ---------------------------------------------------------------------------

_TITLE_KEYS = ("title",)
_SUMMARY_KEYS = ("summary",)
_KEY_POINT_KEYS = ("keyPoints", "key_points", "keypoints")
_SCRIPT_IDEA_KEYS = ("youtubeScriptIdea", "youtube_script_idea")
_FULL_CONTENT_KEYS = ("fullContent", "full_content")


class ContentParser:
    """Turn raw model replies into structured payloads."""

    def parse_trend(self, text: str) -> ParseResult[TrendContent]:
        data = extract_json_object(text)
        if data is not None:
            title = _as_text(_first(data, _TITLE_KEYS))
            summary = _as_text(_first(data, _SUMMARY_KEYS))
            key_points = _as_list(_first(data, _KEY_POINT_KEYS))
            script_idea = _as_text(_first(data, _SCRIPT_IDEA_KEYS))
            full_content = _as_text(_first(data, _FULL_CONTENT_KEYS))
            if any(value is not None for value in (title, summary, key_points, script_idea)):
                return ParseResult(
                    self._trend(title, summary, key_points, script_idea, full_content),
                    STRATEGY_JSON,
                )

        title = quoted_string(text, _TITLE_KEYS)
        summary = quoted_string(text, _SUMMARY_KEYS)
        key_points = quoted_list(text, _KEY_POINT_KEYS)
        script_idea = quoted_string(text, _SCRIPT_IDEA_KEYS)
        if any(value is not None for value in (title, summary, key_points, script_idea)):
            full_content = quoted_string(text, _FULL_CONTENT_KEYS)
            return ParseResult(
                self._trend(title, summary, key_points, script_idea, full_content),
                STRATEGY_FIELDS,
            )

        sections = split_sections(text)
        if any(sections.values()):
            points = [
                match.group("item").strip()
                for match in (_BULLET.match(line) for line in sections.get("key_points", []))
                if match
            ]
            trend = self._trend(
                self._joined(sections, "title", first_line_only=True),
                self._joined(sections, "summary"),
                points or None,
                self._joined(sections, "youtube_script_idea"),
                self._joined(sections, "full_content") or text.strip(),
            )
            return ParseResult(trend, STRATEGY_SECTIONS)

        return ParseResult(self._trend(None, None, None, None, None), STRATEGY_NONE)

    def parse_script(self, text: str, topic: str) -> ParseResult[VideoScriptContent]:
        data = extract_json_object(text)
        if data is not None:
            values = {
                "title": _as_text(data.get("title")),
                "summary": _as_text(data.get("summary")),
                "script": _as_text(data.get("script")),
                "key_points": _as_list(_first(data, _KEY_POINT_KEYS)),
                "categories": _as_list(data.get("categories")),
                "tags": _as_list(data.get("tags")),
            }
            if any(value is not None for value in values.values()):
                return ParseResult(self._script(topic, **values), STRATEGY_JSON)

        values = {
            "title": quoted_string(text, ("title",)),
            "summary": quoted_string(text, ("summary",)),
            "script": quoted_string(text, ("script",)),
            "key_points": quoted_list(text, _KEY_POINT_KEYS),
            "categories": quoted_list(text, ("categories",)),
            "tags": quoted_list(text, ("tags",)),
        }
        if any(value is not None for value in values.values()):
            return ParseResult(self._script(topic, **values), STRATEGY_FIELDS)
        return ParseResult(
            self._script(
                topic,
                title=None,
                summary=None,
                script=None,
                key_points=None,
                categories=None,
                tags=None,
            ),
            STRATEGY_NONE,
        )

    def parse_resource_search(self, text: str, query: str) -> ParseResult[ResourceAnalysis]:
        data = extract_json_object(text)
        if data is not None and ("resources" in data or "analysis" in data):
            links = self._links(data.get("resources"))
            analysis = _as_text(data.get("analysis"))
            return ParseResult(self._analysis(query, links, analysis), STRATEGY_JSON)

        links = self._links_from_text(text)
        analysis = quoted_string(text, ("analysis",))
        if links or analysis:
            return ParseResult(self._analysis(query, links, analysis), STRATEGY_FIELDS)
        return ParseResult(self._analysis(query, [], None), STRATEGY_NONE)

    # -- builders ------------------------------------------------------------

    @staticmethod
    def _joined(
        sections: dict[str, list[str]], key: str, *, first_line_only: bool = False
    ) -> str | None:
        lines = sections.get(key) or []
        if not lines:
            return None
        return lines[0] if first_line_only else " ".join(lines)

    @staticmethod
    def _trend(
        title: str | None,
        summary: str | None,
        key_points: list[str] | None,
        script_idea: str | None,
        full_content: str | None,
    ) -> TrendContent:
        return TrendContent(
            title=title or DEFAULT_TREND_TITLE,
            summary=summary or DEFAULT_TREND_SUMMARY,
            key_points=key_points or list(DEFAULT_TREND_KEY_POINTS),
            youtube_script_idea=script_idea or DEFAULT_TREND_SCRIPT_IDEA,
            full_content=full_content,
        )

    @staticmethod
    def _script(
        topic: str,
        *,
        title: str | None,
        summary: str | None,
        script: str | None,
        key_points: list[str] | None,
        categories: list[str] | None,
        tags: list[str] | None,
    ) -> VideoScriptContent:
        return VideoScriptContent(
            title=title or f"{topic} - Essential Guide",
            summary=summary
            or f"A comprehensive overview of {topic} for cybersecurity professionals.",
            script=script
            or f"Welcome to Superfishal Intelligence. Today we're discussing {topic}...",
            key_points=key_points or list(DEFAULT_SCRIPT_KEY_POINTS),
            categories=categories or list(DEFAULT_SCRIPT_CATEGORIES),
            tags=tags or ["cybersecurity", "infosec", topic.lower(), "security", "technology"],
        )

    @staticmethod
    def _link(item: Any) -> ResourceLink | None:
        if not isinstance(item, dict):
            return None
        return ResourceLink(
            title=_as_text(item.get("title")) or "Unknown resource",
            description=_as_text(item.get("description")) or "No description available",
            url=_as_text(item.get("url")) or "https://www.cisa.gov/",
        )

    def _links(self, items: Any) -> list[ResourceLink]:
        if not isinstance(items, list):
            return []
        return [link for link in (self._link(item) for item in items) if link is not None]

    def _links_from_text(self, text: str) -> list[ResourceLink]:
        match = re.search(r"(?:\"resources\"|\bresources\b)\s*:\s*\[(.*)\]", text, re.DOTALL)
        if not match:
            return []
        links: list[ResourceLink] = []
        for chunk in re.findall(r"\{[^{}]*\}", match.group(1)):
            try:
                link = self._link(json.loads(chunk))
            except json.JSONDecodeError:
                continue
            if link is not None:
                links.append(link)
        return links

    @staticmethod
    def _analysis(
        query: str, links: list[ResourceLink], analysis: str | None
    ) -> ResourceAnalysis:
        return ResourceAnalysis(
            resources=links or [ResourceLink(**CISA_RESOURCE)],
            analysis=analysis
            or (
                f"These resources provide valuable information about {query} "
                "for cybersecurity professionals."
            ),
        )


__all__ = [
    "ContentParser",
    "ParseResult",
    "ResourceAnalysis",
    "ResourceLink",
    "STRATEGY_FIELDS",
    "STRATEGY_JSON",
    "STRATEGY_NONE",
    "STRATEGY_SECTIONS",
    "TrendContent",
    "VideoScriptContent",
    "extract_json_object",
    "quoted_list",
    "quoted_string",
    "split_sections",
]
