"""Query taxonomy and result types for omnisearch.

This module defines the intent types, entity types, content types and
confidence constants used by the query interpreter, along with the
immutable result objects it produces.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any


class IntentType(str, Enum):
    """Coarse purpose of a query."""

    SEARCH = "search"  # Informational lookup
    ACTION = "action"  # Imperative request (send, schedule, ...)
    QUESTION = "question"  # Starts with a question word


class ActionType(str, Enum):
    """Action verbs recognised for ACTION intents."""

    CREATE = "create"
    SEND = "send"
    SCHEDULE = "schedule"
    FIND = "find"
    UPDATE = "update"
    DELETE = "delete"


class EntityType(str, Enum):
    """Kinds of spans extracted from query text."""

    PERSON = "person"
    DATE = "date"
    TOOL = "tool"
    CONTENT_TYPE = "content_type"
    TAG = "tag"
    LOCATION = "location"


class ContentType(str, Enum):
    """Kinds of searchable content across connected tools."""

    EMAIL = "email"
    DOCUMENT = "document"
    MESSAGE = "message"
    TASK = "task"
    ISSUE = "issue"
    FILE = "file"
    CALENDAR_EVENT = "calendar-event"
    CONTACT = "contact"
    NOTE = "note"
    CODE = "code"


class IntentConfidence:
    """Fixed confidence scores per classification rule."""

    ACTION = 0.8
    QUESTION = 0.9
    SEARCH = 0.7


class EntityConfidence:
    """Fixed confidence scores per entity detection method."""

    TOOL = 0.9
    CONTENT_TYPE = 0.8
    DATE = 0.7
    PERSON = 0.6


@dataclass(frozen=True)
class QueryIntent:
    """Classified intent of a query.

    Attributes:
        type: SEARCH, ACTION or QUESTION
        confidence: Confidence score 0.0-1.0
        action: Action verb, only set when type is ACTION
    """

    type: IntentType
    confidence: float
    action: ActionType | None = None

    @classmethod
    def search(cls) -> "QueryIntent":
        """Default intent for queries that match no rule."""
        return cls(type=IntentType.SEARCH, confidence=IntentConfidence.SEARCH)

    @classmethod
    def question(cls) -> "QueryIntent":
        return cls(type=IntentType.QUESTION, confidence=IntentConfidence.QUESTION)

    @classmethod
    def for_action(cls, action: ActionType) -> "QueryIntent":
        return cls(type=IntentType.ACTION, confidence=IntentConfidence.ACTION, action=action)

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"type": self.type.value, "confidence": self.confidence}
        if self.action is not None:
            data["action"] = self.action.value
        return data


@dataclass(frozen=True)
class QueryEntity:
    """A typed span of meaning extracted from the query."""

    type: EntityType
    value: str
    confidence: float

    def to_dict(self) -> dict[str, Any]:
        return {"type": self.type.value, "value": self.value, "confidence": self.confidence}


@dataclass(frozen=True)
class DateRange:
    """Inclusive date window for search filters."""

    start: datetime
    end: datetime

    def to_dict(self) -> dict[str, str]:
        return {"start": self.start.isoformat(), "end": self.end.isoformat()}


@dataclass(frozen=True)
class SearchFilters:
    """Structured search constraints derived from entities.

    Attributes:
        tools: Matched tool ids in registry order (None if no tool matched)
        content_types: De-duplicated content types in first-detection order
        date_range: Reserved for downstream date resolution, never set by the parser
        author: Last matched person reference
    """

    tools: tuple[str, ...] | None = None
    content_types: tuple[ContentType, ...] | None = None
    date_range: DateRange | None = None
    author: str | None = None

    def is_empty(self) -> bool:
        """Check if no filter was derived."""
        return (
            not self.tools
            and not self.content_types
            and self.date_range is None
            and self.author is None
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary, excluding unset filters."""
        data: dict[str, Any] = {}
        if self.tools is not None:
            data["tools"] = list(self.tools)
        if self.content_types is not None:
            data["contentTypes"] = [ct.value for ct in self.content_types]
        if self.date_range is not None:
            data["dateRange"] = self.date_range.to_dict()
        if self.author is not None:
            data["author"] = self.author
        return data


@dataclass(frozen=True)
class ParsedQuery:
    """Structured interpretation of a free-text query.

    Attributes:
        original_query: The query exactly as given
        clean_query: Remaining search terms after entity and stop-word removal
        filters: Filters derived from detected entities
        intent: Classified intent
        entities: Detected entities in detection order
            (tools, content types, dates, persons)
    """

    original_query: str
    clean_query: str
    filters: SearchFilters
    intent: QueryIntent
    entities: tuple[QueryEntity, ...] = field(default_factory=tuple)

    def entities_of(self, entity_type: EntityType) -> list[QueryEntity]:
        """Return all entities of the given type, in detection order."""
        return [e for e in self.entities if e.type == entity_type]

    def to_dict(self) -> dict[str, Any]:
        return {
            "originalQuery": self.original_query,
            "cleanQuery": self.clean_query,
            "filters": self.filters.to_dict(),
            "intent": self.intent.to_dict(),
            "entities": [e.to_dict() for e in self.entities],
        }
