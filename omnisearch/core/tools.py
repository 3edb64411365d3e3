"""Tool registry for omnisearch.

Known integrations (id, display name, category) that queries can mention.
The query parser only reads from the registry; it is built once and never
mutated afterwards, so a single instance can be shared freely.

A registry can be loaded from YAML:

    tools:
      - id: slack
        name: Slack
        category: communication
      - id: jira
        name: Jira
        category: project-management
"""

from __future__ import annotations

import logging
from enum import Enum
from pathlib import Path
from typing import Any, Iterable, Iterator, Mapping

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator
from ruamel.yaml import YAML
from ruamel.yaml.error import YAMLError

logger = logging.getLogger(__name__)


class RegistryError(Exception):
    """Tool registry could not be loaded."""

    pass


class ToolCategory(str, Enum):
    """Integration categories."""

    COMMUNICATION = "communication"
    PROJECT_MANAGEMENT = "project-management"
    DEVELOPMENT = "development"
    DOCUMENTATION = "documentation"
    FILE_STORAGE = "file-storage"
    PRODUCTIVITY = "productivity"
    CRM = "crm"
    ANALYTICS = "analytics"


TOOL_CATEGORIES: dict[ToolCategory, str] = {
    ToolCategory.COMMUNICATION: "Communication",
    ToolCategory.PROJECT_MANAGEMENT: "Project Management",
    ToolCategory.DEVELOPMENT: "Development",
    ToolCategory.DOCUMENTATION: "Documentation",
    ToolCategory.FILE_STORAGE: "File Storage",
    ToolCategory.PRODUCTIVITY: "Productivity",
    ToolCategory.CRM: "CRM",
    ToolCategory.ANALYTICS: "Analytics",
}


class Tool(BaseModel):
    """A known integration.

    Attributes:
        id: Stable identifier (e.g., "google-drive")
        name: Display name (e.g., "Google Drive")
        category: Integration category
        description: Short human description
        is_demo: Whether the tool is backed by demo data
        features: Feature labels shown to users
    """

    model_config = ConfigDict(frozen=True)

    id: str = Field(min_length=1, description="Tool identifier")
    name: str = Field(min_length=1, description="Display name")
    category: ToolCategory = ToolCategory.PRODUCTIVITY
    description: str = ""
    is_demo: bool = False
    features: tuple[str, ...] = ()

    @field_validator("id", "name", mode="after")
    @classmethod
    def not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("must not be blank")
        return value


def tool_fields(entry: Any) -> tuple[Any, Any]:
    """Return (id, name) of a registry entry.

    Entries may be Tool models, other objects with ``id``/``name`` attributes,
    or plain mappings. Missing fields come back as None.
    """
    if isinstance(entry, Mapping):
        return entry.get("id"), entry.get("name")
    return getattr(entry, "id", None), getattr(entry, "name", None)


DEFAULT_TOOLS: tuple[Tool, ...] = (
    # Google workspace
    Tool(
        id="gmail",
        name="Gmail",
        category=ToolCategory.COMMUNICATION,
        description="Email management and search",
        features=("Email search", "Compose emails", "Manage labels", "Real-time sync"),
    ),
    Tool(
        id="google-calendar",
        name="Google Calendar",
        category=ToolCategory.PRODUCTIVITY,
        description="Calendar events and scheduling",
        features=("Event search", "Create events", "Schedule meetings", "Availability check"),
    ),
    Tool(
        id="google-drive",
        name="Google Drive",
        category=ToolCategory.FILE_STORAGE,
        description="File storage and document management",
        features=("File search", "Upload files", "Share documents", "Version control"),
    ),
    Tool(
        id="google-sheets",
        name="Google Sheets",
        category=ToolCategory.PRODUCTIVITY,
        description="Spreadsheet management and data analysis",
        features=("Data search", "Create sheets", "Formulas", "Collaboration"),
    ),
    Tool(
        id="google-meet",
        name="Google Meet",
        category=ToolCategory.COMMUNICATION,
        description="Video conferencing and meetings",
        features=("Schedule meetings", "Join calls", "Recording access"),
    ),
    # Communication
    Tool(
        id="slack",
        name="Slack",
        category=ToolCategory.COMMUNICATION,
        description="Team communication and collaboration",
        is_demo=True,
        features=("Channel search", "Direct messages", "File sharing", "Integrations"),
    ),
    Tool(
        id="microsoft-teams",
        name="Microsoft Teams",
        category=ToolCategory.COMMUNICATION,
        description="Team collaboration and video meetings",
        is_demo=True,
        features=("Chat search", "Video calls", "File collaboration"),
    ),
    Tool(
        id="discord",
        name="Discord",
        category=ToolCategory.COMMUNICATION,
        description="Community and team communication",
        is_demo=True,
        features=("Server search", "Voice channels", "Message history"),
    ),
    # Project management
    Tool(
        id="jira",
        name="Jira",
        category=ToolCategory.PROJECT_MANAGEMENT,
        description="Issue tracking and project management",
        is_demo=True,
        features=("Ticket search", "Sprint planning", "Workflow management", "Reporting"),
    ),
    Tool(
        id="asana",
        name="Asana",
        category=ToolCategory.PROJECT_MANAGEMENT,
        description="Task and project management",
        is_demo=True,
        features=("Task search", "Project tracking", "Timeline view"),
    ),
    Tool(
        id="monday",
        name="Monday.com",
        category=ToolCategory.PROJECT_MANAGEMENT,
        description="Work operating system",
        is_demo=True,
        features=("Board search", "Workflow automation", "Time tracking"),
    ),
    Tool(
        id="trello",
        name="Trello",
        category=ToolCategory.PROJECT_MANAGEMENT,
        description="Kanban-style project management",
        is_demo=True,
        features=("Card search", "Board management", "Power-ups"),
    ),
    # Development
    Tool(
        id="github",
        name="GitHub",
        category=ToolCategory.DEVELOPMENT,
        description="Code repository and collaboration",
        is_demo=True,
        features=("Code search", "Issue tracking", "Pull requests"),
    ),
    Tool(
        id="gitlab",
        name="GitLab",
        category=ToolCategory.DEVELOPMENT,
        description="DevOps platform and code management",
        is_demo=True,
        features=("Project search", "CI/CD pipelines", "Merge requests"),
    ),
    Tool(
        id="bitbucket",
        name="Bitbucket",
        category=ToolCategory.DEVELOPMENT,
        description="Git repository management",
        is_demo=True,
        features=("Repository search", "Branch management", "Code review"),
    ),
)


class ToolRegistry:
    """Read-only, ordered collection of known tools.

    Registration order is preserved; the parser reports matched tools in
    this order.
    """

    def __init__(self, tools: Iterable[Tool] = ()) -> None:
        unique: dict[str, Tool] = {}
        for tool in tools:
            if tool.id in unique:
                logger.warning(f"Duplicate tool id '{tool.id}' ignored")
                continue
            unique[tool.id] = tool
        self._tools: tuple[Tool, ...] = tuple(unique.values())
        self._by_id: dict[str, Tool] = unique

    @classmethod
    def default(cls) -> "ToolRegistry":
        """Shared registry over the built-in tool list."""
        return _DEFAULT_REGISTRY

    @classmethod
    def from_entries(cls, entries: Iterable[Any]) -> "ToolRegistry":
        """Build a registry from raw mappings, skipping malformed entries.

        Args:
            entries: Iterable of dicts with at least ``id`` and ``name``

        Returns:
            ToolRegistry with every valid entry
        """
        tools: list[Tool] = []
        for index, entry in enumerate(entries):
            if not isinstance(entry, dict):
                logger.warning(f"Skipping tool entry #{index}: expected a mapping")
                continue
            try:
                tools.append(Tool(**{str(k): v for k, v in entry.items()}))
            except (ValidationError, TypeError) as e:
                logger.warning(f"Skipping invalid tool entry #{index}: {e}")
        return cls(tools)

    @classmethod
    def from_yaml(cls, path: Path) -> "ToolRegistry":
        """Load a registry from a YAML file with a top-level ``tools`` list.

        Args:
            path: YAML file path

        Returns:
            ToolRegistry (empty if the file has no tools)

        Raises:
            RegistryError: If the file cannot be read or parsed.
        """
        yaml = YAML(typ="safe")
        try:
            with open(path) as f:
                data = yaml.load(f)
        except (OSError, YAMLError) as e:
            logger.error("Failed to load tool registry %s: %s", path, e)
            raise RegistryError(f"Cannot load tool registry from {path}: {e}") from e

        if not data:
            logger.warning("Empty tool registry file: %s", path)
            return cls()

        entries = data.get("tools") if isinstance(data, dict) else data
        if not isinstance(entries, list):
            logger.warning("Tool registry %s has no 'tools' list", path)
            return cls()

        registry = cls.from_entries(entries)
        logger.info("Loaded %d tools from %s", len(registry), path)
        return registry

    def __iter__(self) -> Iterator[Tool]:
        return iter(self._tools)

    def __len__(self) -> int:
        return len(self._tools)

    def __contains__(self, tool_id: object) -> bool:
        return tool_id in self._by_id

    def ids(self) -> list[str]:
        return [tool.id for tool in self._tools]

    def get(self, tool_id: str) -> Tool | None:
        """Exact lookup by id."""
        return self._by_id.get(tool_id)

    def display_name(self, tool_id: str) -> str | None:
        tool = self._by_id.get(tool_id)
        return tool.name if tool else None

    def find(self, text: str) -> list[Tool]:
        """Return tools whose name or id occurs in text (case-insensitive).

        Args:
            text: Text to search for tool mentions

        Returns:
            Matching tools in registry order
        """
        text_lower = text.lower()
        return [
            tool
            for tool in self._tools
            if tool.name.lower() in text_lower or tool.id.lower() in text_lower
        ]

    def by_category(self, category: ToolCategory | str) -> list[Tool]:
        """Return tools in a category, in registry order."""
        category = ToolCategory(category)
        return [tool for tool in self._tools if tool.category == category]

    def to_entries(self) -> list[dict[str, Any]]:
        """Serialize to plain dicts, suitable for YAML output."""
        return [tool.model_dump(mode="json") for tool in self._tools]


_DEFAULT_REGISTRY = ToolRegistry(DEFAULT_TOOLS)
