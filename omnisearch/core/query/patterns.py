"""Rule-based intent classification for omnisearch queries.

Rules are evaluated in a fixed order and the first match wins:

1. Action keywords (create, send, schedule, find, update, delete)
2. Leading question words (what, when, where, who, why, how)
3. Plain search
"""

from __future__ import annotations

from .taxonomy import ActionType, QueryIntent

# Keyword lists per action, in evaluation order. Keywords match as substrings.
ACTION_KEYWORDS: dict[ActionType, tuple[str, ...]] = {
    ActionType.CREATE: ("create", "make", "new", "add", "compose", "write"),
    ActionType.SEND: ("send", "email", "message", "share"),
    ActionType.SCHEDULE: ("schedule", "book", "plan", "arrange"),
    ActionType.FIND: ("find", "search", "look", "get", "show"),
    ActionType.UPDATE: ("update", "edit", "change", "modify"),
    ActionType.DELETE: ("delete", "remove", "cancel"),
}

QUESTION_WORDS: tuple[str, ...] = ("what", "when", "where", "who", "why", "how")


class IntentPatternMatcher:
    """Classify a query as an action, a question or a search."""

    def match_action(self, text: str) -> ActionType | None:
        """Return the first action whose keywords occur in text, if any."""
        text_lower = text.lower()
        for action, keywords in ACTION_KEYWORDS.items():
            if any(keyword in text_lower for keyword in keywords):
                return action
        return None

    def is_question(self, text: str) -> bool:
        """Check if text starts with a question word."""
        return text.lower().lstrip().startswith(QUESTION_WORDS)

    def classify(self, text: str) -> QueryIntent:
        """Classify text into a QueryIntent.

        Args:
            text: Original query text

        Returns:
            QueryIntent; plain search when no rule matches
        """
        action = self.match_action(text)
        if action is not None:
            return QueryIntent.for_action(action)

        if self.is_question(text):
            return QueryIntent.question()

        return QueryIntent.search()


_matcher = IntentPatternMatcher()


def classify_intent(text: str) -> QueryIntent:
    """Classify text using the default matcher."""
    return _matcher.classify(text)
