"""Follow-up suggestions and human-readable explanations for parsed queries."""

from __future__ import annotations

from typing import Any, Iterable

from ..tools import ToolRegistry, tool_fields
from .parser import QueryParser
from .taxonomy import EntityType, IntentType, ParsedQuery

MAX_SUGGESTIONS = 5

# One template per entity type; other entity types yield no suggestion
ENTITY_TEMPLATES: dict[EntityType, str] = {
    EntityType.TOOL: "{query} in {value}",
    EntityType.CONTENT_TYPE: "{value} about {query}",
    EntityType.PERSON: "{query} from {value}",
}

SEARCH_TEMPLATES: tuple[str, ...] = (
    "{query} from last week",
    "{query} documents",
    "{query} meetings",
    "recent {query}",
)


def suggest_for(parsed: ParsedQuery, query: str | None = None) -> list[str]:
    """Build follow-up queries from a parsed query.

    Entity-derived suggestions come first, in entity order, followed by the
    generic search templates when the intent is a plain search. Duplicates
    are kept.

    Args:
        parsed: Result of parsing ``query``
        query: Text substituted into templates (defaults to the original query)

    Returns:
        At most MAX_SUGGESTIONS suggestions
    """
    if query is None:
        query = parsed.original_query

    suggestions: list[str] = []
    for entity in parsed.entities:
        template = ENTITY_TEMPLATES.get(entity.type)
        if template is not None:
            suggestions.append(template.format(query=query, value=entity.value))

    if parsed.intent.type == IntentType.SEARCH:
        suggestions.extend(template.format(query=query) for template in SEARCH_TEMPLATES)

    return suggestions[:MAX_SUGGESTIONS]


def generate_search_suggestions(
    query: str, registry: "Iterable[Any] | None" = None
) -> list[str]:
    """Parse a query and derive up to five follow-up queries.

    Args:
        query: Free-text query
        registry: Known tools (defaults to the built-in registry)

    Returns:
        Between zero and five suggestion strings
    """
    parsed = QueryParser(registry=registry).parse(query)
    return suggest_for(parsed, query if isinstance(query, str) else "")


def explain_query(parsed: ParsedQuery, registry: "Iterable[Any] | None" = None) -> str:
    """Render a one-line description of a parsed query.

    Example: 'Searching for "budget" in Slack for email by John'

    Args:
        parsed: Result of parse_query()
        registry: Known tools, used to resolve tool ids to display names

    Returns:
        Explanation sentence, or an empty string for an empty query
    """
    parts: list[str] = []

    if parsed.clean_query:
        parts.append(f'Searching for "{parsed.clean_query}"')

    if parsed.filters.tools:
        names = _tool_names(parsed.filters.tools, registry)
        if names:
            parts.append(f"in {', '.join(names)}")

    if parsed.filters.content_types:
        parts.append(f"for {', '.join(ct.value for ct in parsed.filters.content_types)}")

    if parsed.filters.author:
        parts.append(f"by {parsed.filters.author}")

    return " ".join(parts)


def _tool_names(tool_ids: Iterable[str], registry: "Iterable[Any] | None") -> list[str]:
    if registry is None:
        registry = ToolRegistry.default()

    names_by_id: dict[str, str] = {}
    for tool in registry:
        tool_id, name = tool_fields(tool)
        if isinstance(tool_id, str) and isinstance(name, str) and tool_id not in names_by_id:
            names_by_id[tool_id] = name

    return [names_by_id[tool_id] for tool_id in tool_ids if tool_id in names_by_id]
