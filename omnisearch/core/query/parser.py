"""Query parsing orchestrator for omnisearch.

Turns a free-text query into a ParsedQuery in a single pass:

1. Entity extraction - tools, content types, dates, persons
2. Intent classification - action, question or search
3. Normalization - stop words and whitespace

The parser holds no per-call state; one instance can serve any number of
concurrent callers.
"""

from __future__ import annotations

import logging
from typing import Any, Iterable

from ..tools import ToolRegistry
from .entities import EntityExtractor
from .normalizer import normalize_query
from .patterns import IntentPatternMatcher
from .taxonomy import ParsedQuery

logger = logging.getLogger(__name__)


class QueryParser:
    """Rule-based natural-language query interpreter.

    Attributes:
        registry: Known tools used for tool matching
        entity_extractor: Tool/content-type/date/person matchers
        intent_matcher: Rule-based intent classifier
    """

    def __init__(self, registry: "ToolRegistry | Iterable[Any] | None" = None) -> None:
        """Initialize the query parser.

        Args:
            registry: Known tools (defaults to the built-in registry)
        """
        self.registry = registry if registry is not None else ToolRegistry.default()
        self.entity_extractor = EntityExtractor(self.registry)
        self.intent_matcher = IntentPatternMatcher()

    def parse(self, query: str) -> ParsedQuery:
        """Parse a query into clean terms, intent, entities and filters.

        Never raises; empty or non-string input yields an empty search.
        The whole query is analysed, however long.

        Args:
            query: Free-text query

        Returns:
            ParsedQuery for this query
        """
        if not isinstance(query, str):
            query = ""

        extracted = self.entity_extractor.extract(query)
        intent = self.intent_matcher.classify(query)
        clean_query = normalize_query(extracted.remaining)

        parsed = ParsedQuery(
            original_query=query,
            clean_query=clean_query,
            filters=extracted.to_filters(),
            intent=intent,
            entities=tuple(extracted.entities),
        )
        logger.debug(
            "Parsed %r: intent=%s clean=%r entities=%d",
            query[:80],
            intent.type.value,
            clean_query,
            len(parsed.entities),
        )
        return parsed


def create_parser(registry: "ToolRegistry | Iterable[Any] | None" = None) -> QueryParser:
    """Factory function to create a QueryParser.

    Args:
        registry: Known tools (defaults to the built-in registry)

    Returns:
        Configured QueryParser instance
    """
    return QueryParser(registry=registry)


def parse_query(query: str, registry: "ToolRegistry | Iterable[Any] | None" = None) -> ParsedQuery:
    """Parse a query with a one-off parser over the given registry."""
    return QueryParser(registry=registry).parse(query)
