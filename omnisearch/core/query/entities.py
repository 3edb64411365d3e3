"""Entity extraction for omnisearch query parsing.

Four matchers run in a fixed order over a shared working copy of the query:

1. Tools - registry names/ids, stripped as plain substrings
2. Content types - keyword families, stripped on word boundaries
3. Dates - relative and absolute date phrases, read from the original query
4. Persons - "from X", "by X", "X sent", "@handle", read from the original query

Each matcher returns the working copy with its matches removed; what is left
feeds the normalizer.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Any, Iterable

from ..tools import ToolRegistry, tool_fields
from .taxonomy import (
    ContentType,
    EntityConfidence,
    EntityType,
    QueryEntity,
    SearchFilters,
)

# Keyword families per content type. Declaration order is the match order.
CONTENT_TYPE_KEYWORDS: dict[ContentType, tuple[str, ...]] = {
    ContentType.EMAIL: ("email", "emails", "mail", "message", "inbox"),
    ContentType.DOCUMENT: ("document", "doc", "file", "pdf", "report"),
    ContentType.MESSAGE: ("message", "chat", "conversation", "dm"),
    ContentType.TASK: ("task", "todo", "assignment", "work"),
    ContentType.ISSUE: ("issue", "bug", "ticket", "problem"),
    ContentType.FILE: ("file", "attachment", "upload"),
    ContentType.CALENDAR_EVENT: ("meeting", "event", "calendar", "appointment"),
    ContentType.CONTACT: ("contact", "person", "user", "colleague"),
    ContentType.NOTE: ("note", "notes", "memo", "reminder"),
    ContentType.CODE: ("code", "repository", "repo", "commit", "branch"),
}

_MONTHS = (
    "january|february|march|april|may|june|july|"
    "august|september|october|november|december"
)

# ASCII only: \d, \s and \b must not match non-Latin digits or word characters
_DATE_FLAGS = re.IGNORECASE | re.ASCII

DATE_PATTERNS: tuple[re.Pattern[str], ...] = (
    re.compile(r"\b(?:today|yesterday|tomorrow)\b", _DATE_FLAGS),
    re.compile(r"\b(?:this|last|next)\s+(?:week|month|year)\b", _DATE_FLAGS),
    re.compile(r"\b\d{1,2}/\d{1,2}/\d{2,4}\b", re.ASCII),
    re.compile(r"\b\d{1,2}-\d{1,2}-\d{2,4}\b", re.ASCII),
    re.compile(rf"\b(?:{_MONTHS})\s+\d{{1,2}}\b", _DATE_FLAGS),
    re.compile(r"\b\d{1,2}\s+(?:days?|weeks?|months?)\s+ago\b", _DATE_FLAGS),
)

# Names must look like capitalized words ("John", "Mary Ann").
_NAME = r"[A-Z][a-z]+(?:\s+[A-Z][a-z]+)*"

PERSON_PATTERNS: tuple[re.Pattern[str], ...] = (
    re.compile(rf"\bfrom\s+({_NAME})\b"),
    re.compile(rf"\bby\s+({_NAME})\b"),
    re.compile(rf"\b({_NAME})\s+sent\b"),
    # "@" must not follow a word character, so e-mail addresses are skipped
    re.compile(r"(?<!\w)@([A-Za-z0-9._-]*[A-Za-z0-9_])"),
)

# "<Name> sent" is searched on the reversed query. Scanning forward restarts
# at every capitalized word and rereads the rest of its name run, which is
# quadratic on long runs of capitalized words.
_SENDER_PATTERN = PERSON_PATTERNS[2]
_SENDER_REVERSED = re.compile(r"\btnes\s+((?:[a-z]+[A-Z]\s+)*[a-z]+[A-Z])\b")

_KEYWORD_PATTERNS: dict[str, re.Pattern[str]] = {
    keyword: re.compile(rf"\b{re.escape(keyword)}\b")
    for keywords in CONTENT_TYPE_KEYWORDS.values()
    for keyword in keywords
}


@dataclass
class ExtractedEntities:
    """Accumulator for one extraction pass.

    Attributes:
        entities: Detected entities in detection order
        tools: Matched tool ids in registry order
        content_types: Matched content types, duplicates included
        author: Last matched person reference
        remaining: Working query after all matched spans were removed
    """

    entities: list[QueryEntity] = field(default_factory=list)
    tools: list[str] = field(default_factory=list)
    content_types: list[ContentType] = field(default_factory=list)
    author: str | None = None
    remaining: str = ""

    def to_filters(self) -> SearchFilters:
        """Derive search filters, de-duplicating content types."""
        return SearchFilters(
            tools=tuple(self.tools) if self.tools else None,
            content_types=(
                tuple(dict.fromkeys(self.content_types)) if self.content_types else None
            ),
            author=self.author,
        )


class EntityExtractor:
    """Extract tools, content types, dates and persons from query text."""

    def __init__(self, registry: Iterable[Any] = ()) -> None:
        """Initialize the extractor.

        Args:
            registry: Known tools; Tool objects or ``{"id", "name"}`` mappings
        """
        self.registry = registry

    def extract(self, query: str) -> ExtractedEntities:
        """Run all matchers over the query.

        Args:
            query: Original query text

        Returns:
            ExtractedEntities with the stripped working query in ``remaining``
        """
        result = ExtractedEntities()
        working = query.lower().strip()

        working = self._match_tools(working, result)
        working = self._match_content_types(working, result)
        working = self._match_dates(query, working, result)
        working = self._match_persons(query, working, result)

        result.remaining = working
        return result

    def _iter_tools(self) -> Iterable[tuple[str, str]]:
        """Yield (id, name) for well-formed registry entries only."""
        try:
            tools = list(self.registry or ())
        except TypeError:
            return
        for tool in tools:
            tool_id, name = tool_fields(tool)
            if not (isinstance(tool_id, str) and isinstance(name, str)):
                continue
            if tool_id.strip() and name.strip():
                yield tool_id, name

    def _match_tools(self, working: str, result: ExtractedEntities) -> str:
        # All tools are tested before any name is stripped
        matched = [
            (tool_id, name)
            for tool_id, name in self._iter_tools()
            if name.lower() in working or tool_id.lower() in working
        ]

        for tool_id, name in matched:
            result.tools.append(tool_id)
            result.entities.append(
                QueryEntity(type=EntityType.TOOL, value=name, confidence=EntityConfidence.TOOL)
            )

        for _, name in matched:
            working = working.replace(name.lower(), "")

        return working

    def _match_content_types(self, working: str, result: ExtractedEntities) -> str:
        for content_type, keywords in CONTENT_TYPE_KEYWORDS.items():
            for keyword in keywords:
                if keyword in working:
                    result.content_types.append(content_type)
                    result.entities.append(
                        QueryEntity(
                            type=EntityType.CONTENT_TYPE,
                            value=content_type.value,
                            confidence=EntityConfidence.CONTENT_TYPE,
                        )
                    )
                    working = _KEYWORD_PATTERNS[keyword].sub("", working)
        return working

    def _match_dates(self, query: str, working: str, result: ExtractedEntities) -> str:
        for pattern in DATE_PATTERNS:
            for match in pattern.finditer(query):
                phrase = match.group(0)
                result.entities.append(
                    QueryEntity(type=EntityType.DATE, value=phrase, confidence=EntityConfidence.DATE)
                )
                working = working.replace(phrase.lower(), "")
        return working

    def _match_persons(self, query: str, working: str, result: ExtractedEntities) -> str:
        for pattern in PERSON_PATTERNS:
            found = _search_person(pattern, query)
            if found is None:
                continue
            person, phrase = found
            result.entities.append(
                QueryEntity(type=EntityType.PERSON, value=person, confidence=EntityConfidence.PERSON)
            )
            # Later patterns overwrite earlier ones
            result.author = person
            working = working.replace(phrase.lower(), "")
        return working


def _search_person(pattern: re.Pattern[str], query: str) -> tuple[str, str] | None:
    """Return (person, matched text) for the first match of pattern, if any."""
    if pattern is _SENDER_PATTERN:
        return _search_sender(query)
    match = pattern.search(query)
    if not match:
        return None
    return match.group(1), match.group(0)


def _search_sender(query: str) -> tuple[str, str] | None:
    """Find the leftmost "<Name> sent" in linear time."""
    if "sent" not in query:
        return None
    # The leftmost match in the query is the last one in the reversed text
    matches = list(_SENDER_REVERSED.finditer(query[::-1]))
    if not matches:
        return None
    match = matches[-1]
    start, end = len(query) - match.end(), len(query) - match.start()
    return match.group(1)[::-1], query[start:end]


def extract_entities(query: str, registry: Iterable[Any] | None = None) -> ExtractedEntities:
    """Extract entities from a query.

    Args:
        query: Original query text
        registry: Known tools (defaults to the built-in registry)

    Returns:
        ExtractedEntities with all detected entities
    """
    if registry is None:
        registry = ToolRegistry.default()
    return EntityExtractor(registry).extract(query)
