"""Core components for omnisearch."""

from __future__ import annotations

from .query import (
    ContentType,
    IntentType,
    ParsedQuery,
    QueryParser,
    create_parser,
    explain_query,
    generate_search_suggestions,
    parse_query,
)
from .tools import (
    DEFAULT_TOOLS,
    TOOL_CATEGORIES,
    RegistryError,
    Tool,
    ToolCategory,
    ToolRegistry,
)

__all__ = [
    # Query interpretation
    "QueryParser",
    "ParsedQuery",
    "IntentType",
    "ContentType",
    "create_parser",
    "parse_query",
    "generate_search_suggestions",
    "explain_query",
    # Tool registry
    "Tool",
    "ToolCategory",
    "ToolRegistry",
    "RegistryError",
    "DEFAULT_TOOLS",
    "TOOL_CATEGORIES",
]
