"""Tests for omnisearch.core.tools.

Covers:
- Tool model validation
- Default registry contents and lookups
- Building registries from raw entries and YAML files
"""

from __future__ import annotations

from pathlib import Path

import pytest
from pydantic import ValidationError

from omnisearch.core.tools import (
    DEFAULT_TOOLS,
    TOOL_CATEGORIES,
    RegistryError,
    Tool,
    ToolCategory,
    ToolRegistry,
)

# ============================================================================
# Tool Model Tests
# ============================================================================


class TestTool:
    """Tests for the Tool model."""

    def test_minimal_tool(self):
        tool = Tool(id="notion", name="Notion")
        assert tool.category == ToolCategory.PRODUCTIVITY
        assert tool.is_demo is False
        assert tool.features == ()

    def test_blank_name_rejected(self):
        with pytest.raises(ValidationError):
            Tool(id="x", name="   ")

    def test_empty_id_rejected(self):
        with pytest.raises(ValidationError):
            Tool(id="", name="X")

    def test_category_from_string(self):
        assert Tool(id="hub", name="HubSpot", category="crm").category == ToolCategory.CRM

    def test_frozen(self):
        tool = Tool(id="notion", name="Notion")
        with pytest.raises(ValidationError):
            tool.name = "Other"

    def test_every_category_has_display_name(self):
        assert set(TOOL_CATEGORIES) == set(ToolCategory)


# ============================================================================
# Registry Tests
# ============================================================================


class TestDefaultRegistry:
    """Tests for the built-in registry."""

    @pytest.fixture
    def registry(self) -> ToolRegistry:
        return ToolRegistry.default()

    def test_order_and_size(self, registry: ToolRegistry):
        """Google tools come first, then the demo tools."""
        assert len(registry) == len(DEFAULT_TOOLS) == 15
        assert registry.ids()[:6] == [
            "gmail",
            "google-calendar",
            "google-drive",
            "google-sheets",
            "google-meet",
            "slack",
        ]
        assert registry.ids()[-1] == "bitbucket"

    def test_default_is_shared(self):
        assert ToolRegistry.default() is ToolRegistry.default()

    def test_get(self, registry: ToolRegistry):
        assert registry.get("slack").name == "Slack"
        assert registry.get("missing") is None
        assert "jira" in registry

    def test_display_name(self, registry: ToolRegistry):
        assert registry.display_name("monday") == "Monday.com"
        assert registry.display_name("nope") is None

    def test_find_by_name_case_insensitive(self, registry: ToolRegistry):
        assert [t.id for t in registry.find("Search GOOGLE DRIVE please")] == ["google-drive"]

    def test_find_by_id(self, registry: ToolRegistry):
        assert [t.id for t in registry.find("microsoft-teams chat")] == ["microsoft-teams"]

    def test_find_keeps_registry_order(self, registry: ToolRegistry):
        assert [t.id for t in registry.find("trello or gmail")] == ["gmail", "trello"]

    def test_find_nothing(self, registry: ToolRegistry):
        assert registry.find("quarterly numbers") == []

    def test_by_category(self, registry: ToolRegistry):
        ids = [t.id for t in registry.by_category(ToolCategory.DEVELOPMENT)]
        assert ids == ["github", "gitlab", "bitbucket"]
        assert registry.by_category("crm") == []

    def test_to_entries(self, registry: ToolRegistry):
        entries = registry.to_entries()
        assert entries[0]["id"] == "gmail"
        assert entries[0]["category"] == "communication"


class TestRegistryFromEntries:
    """Tests for building registries from raw data."""

    def test_skips_malformed_entries(self):
        registry = ToolRegistry.from_entries(
            [
                {"id": "a", "name": "A"},
                {"id": "", "name": "B"},
                {"name": "C"},
                "junk",
                {"id": "d", "name": "D", "category": "not-a-category"},
                {"id": "a", "name": "Duplicate"},
            ]
        )
        assert registry.ids() == ["a"]
        assert registry.get("a").name == "A"

    def test_empty(self):
        assert len(ToolRegistry.from_entries([])) == 0


class TestRegistryFromYaml:
    """Tests for YAML registry files."""

    def test_load(self, tmp_path: Path):
        path = tmp_path / "tools.yaml"
        path.write_text(
            "tools:\n"
            "  - id: notion\n"
            "    name: Notion\n"
            "    category: documentation\n"
            "  - id: linear\n"
            "    name: Linear\n"
            "    is_demo: true\n"
        )
        registry = ToolRegistry.from_yaml(path)
        assert registry.ids() == ["notion", "linear"]
        assert registry.get("notion").category == ToolCategory.DOCUMENTATION
        assert registry.get("linear").is_demo is True

    def test_bare_list(self, tmp_path: Path):
        path = tmp_path / "tools.yaml"
        path.write_text("- id: notion\n  name: Notion\n")
        assert ToolRegistry.from_yaml(path).ids() == ["notion"]

    def test_empty_file(self, tmp_path: Path):
        path = tmp_path / "tools.yaml"
        path.write_text("")
        assert len(ToolRegistry.from_yaml(path)) == 0

    def test_missing_tools_key(self, tmp_path: Path):
        path = tmp_path / "tools.yaml"
        path.write_text("other: 1\n")
        assert len(ToolRegistry.from_yaml(path)) == 0

    def test_missing_file(self, tmp_path: Path):
        with pytest.raises(RegistryError):
            ToolRegistry.from_yaml(tmp_path / "absent.yaml")

    def test_invalid_yaml(self, tmp_path: Path):
        path = tmp_path / "tools.yaml"
        path.write_text("tools: [unclosed\n")
        with pytest.raises(RegistryError):
            ToolRegistry.from_yaml(path)
