"""Natural-language query interpretation for omnisearch.

This module turns a free-text search query into a structured ParsedQuery:
cleaned search terms, a classified intent, extracted entities and derived
search filters. It is a deterministic rule/keyword/regex engine with no
I/O and no shared mutable state.

The pipeline:
1. Entity matchers - tools, content types, dates, persons
2. Intent classifier - action, question or search
3. Normalizer - stop words and whitespace

Example usage:
    ```python
    from omnisearch.core.query import explain_query, parse_query

    parsed = parse_query("emails from John Smith in slack last week")
    assert parsed.filters.tools == ("slack",)
    assert parsed.filters.author == "John Smith"
    print(explain_query(parsed))
    ```
"""

from .entities import (
    CONTENT_TYPE_KEYWORDS,
    DATE_PATTERNS,
    PERSON_PATTERNS,
    EntityExtractor,
    ExtractedEntities,
    extract_entities,
)
from .normalizer import STOP_WORDS, normalize_query
from .parser import QueryParser, create_parser, parse_query
from .patterns import (
    ACTION_KEYWORDS,
    QUESTION_WORDS,
    IntentPatternMatcher,
    classify_intent,
)
from .suggestions import (
    MAX_SUGGESTIONS,
    explain_query,
    generate_search_suggestions,
    suggest_for,
)
from .taxonomy import (
    ActionType,
    ContentType,
    DateRange,
    EntityConfidence,
    EntityType,
    IntentConfidence,
    IntentType,
    ParsedQuery,
    QueryEntity,
    QueryIntent,
    SearchFilters,
)

__all__ = [
    # Main parser
    "QueryParser",
    "create_parser",
    "parse_query",
    # Suggestions and explanations
    "generate_search_suggestions",
    "suggest_for",
    "explain_query",
    "MAX_SUGGESTIONS",
    # Intent classification
    "IntentPatternMatcher",
    "classify_intent",
    "ACTION_KEYWORDS",
    "QUESTION_WORDS",
    # Entity extraction
    "EntityExtractor",
    "ExtractedEntities",
    "extract_entities",
    "CONTENT_TYPE_KEYWORDS",
    "DATE_PATTERNS",
    "PERSON_PATTERNS",
    # Normalization
    "normalize_query",
    "STOP_WORDS",
    # Taxonomy
    "IntentType",
    "ActionType",
    "EntityType",
    "ContentType",
    "IntentConfidence",
    "EntityConfidence",
    "QueryIntent",
    "QueryEntity",
    "SearchFilters",
    "DateRange",
    "ParsedQuery",
]
