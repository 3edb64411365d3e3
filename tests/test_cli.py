"""Tests for omnisearch.cli module.

Tests cover:
- CLI argument parsing
- parse / suggest / explain / tools commands
- Error handling and exit codes
"""

import json
from pathlib import Path

import pytest

from omnisearch.cli import create_parser, run_cli


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ("OMNISEARCH_TOOLS_FILE", "OMNISEARCH_MAX_QUERY_LENGTH", "OMNISEARCH_LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def tools_file(tmp_path: Path) -> Path:
    """Write a small YAML tool registry."""
    path = tmp_path / "tools.yaml"
    path.write_text(
        "tools:\n"
        "  - id: notion\n"
        "    name: Notion\n"
        "    category: documentation\n"
    )
    return path


# =============================================================================
# Parser Tests
# =============================================================================


class TestParser:
    """Tests for argument parser."""

    def test_create_parser(self):
        parser = create_parser()
        assert parser.prog == "omnisearch"

    def test_parser_parse(self):
        args = create_parser().parse_args(["parse", "project alpha", "--json"])
        assert args.command == "parse"
        assert args.query == "project alpha"
        assert args.json is True
        assert hasattr(args, "func")

    def test_parser_global_options(self):
        args = create_parser().parse_args(
            ["--project", "/some/path", "--tools", "t.yaml", "-v", "explain", "x"]
        )
        assert args.project_path == "/some/path"
        assert args.tools_file == "t.yaml"
        assert args.verbose is True

    def test_parser_tools_category(self):
        args = create_parser().parse_args(["tools", "--category", "development"])
        assert args.category == "development"

    def test_parser_rejects_unknown_category(self):
        with pytest.raises(SystemExit):
            create_parser().parse_args(["tools", "--category", "games"])


# =============================================================================
# Command Tests
# =============================================================================


class TestParseCommand:
    """Tests for 'parse' command."""

    def test_json_output(self, tmp_path: Path, capsys):
        code = run_cli(["-p", str(tmp_path), "parse", "search in slack for team updates", "--json"])
        assert code == 0
        data = json.loads(capsys.readouterr().out)
        assert data["cleanQuery"] == "search for team updates"
        assert data["filters"] == {"tools": ["slack"]}
        assert data["intent"]["action"] == "find"

    def test_table_output(self, tmp_path: Path, capsys):
        code = run_cli(["-p", str(tmp_path), "parse", "emails from John Smith"])
        assert code == 0
        out = capsys.readouterr().out
        assert "Intent:" in out
        assert "John Smith" in out
        assert "author" in out

    def test_no_entities(self, tmp_path: Path, capsys):
        assert run_cli(["-p", str(tmp_path), "parse", "project alpha status"]) == 0
        assert "No entities detected" in capsys.readouterr().out

    def test_custom_tools_file(self, tmp_path: Path, tools_file: Path, capsys):
        code = run_cli(
            ["-p", str(tmp_path), "--tools", str(tools_file), "parse", "notion slack", "--json"]
        )
        assert code == 0
        data = json.loads(capsys.readouterr().out)
        assert data["filters"]["tools"] == ["notion"]


class TestSuggestCommand:
    """Tests for 'suggest' command."""

    def test_suggestions(self, tmp_path: Path, capsys):
        assert run_cli(["-p", str(tmp_path), "suggest", "project alpha"]) == 0
        lines = capsys.readouterr().out.strip().splitlines()
        assert lines == [
            "project alpha from last week",
            "project alpha documents",
            "project alpha meetings",
            "recent project alpha",
        ]


class TestExplainCommand:
    """Tests for 'explain' command."""

    def test_explain(self, tmp_path: Path, capsys):
        assert run_cli(["-p", str(tmp_path), "explain", "slack messages about deployment"]) == 0
        out = capsys.readouterr().out.strip()
        assert out == 'Searching for "messages about deployment" in Slack for email, message'

    def test_explain_with_custom_registry(self, tmp_path: Path, tools_file: Path, capsys):
        code = run_cli(["-p", str(tmp_path), "-t", str(tools_file), "explain", "notion pages"])
        assert code == 0
        assert capsys.readouterr().out.strip() == 'Searching for "pages" in Notion'


class TestToolsCommand:
    """Tests for 'tools' command."""

    def test_list_all(self, tmp_path: Path, capsys):
        assert run_cli(["-p", str(tmp_path), "tools"]) == 0
        out = capsys.readouterr().out
        assert "gmail" in out
        assert "bitbucket" in out

    def test_list_category(self, tmp_path: Path, capsys):
        assert run_cli(["-p", str(tmp_path), "tools", "-c", "development"]) == 0
        out = capsys.readouterr().out
        assert "github" in out
        assert "slack" not in out

    def test_empty_category(self, tmp_path: Path, capsys):
        assert run_cli(["-p", str(tmp_path), "tools", "-c", "crm"]) == 0
        assert "No tools registered" in capsys.readouterr().out


class TestRunCli:
    """Tests for dispatch and error handling."""

    def test_no_command_prints_help(self, capsys):
        assert run_cli([]) == 0
        assert "usage" in capsys.readouterr().out.lower()

    def test_missing_tools_file(self, tmp_path: Path, capsys):
        code = run_cli(["-p", str(tmp_path), "--tools", str(tmp_path / "absent.yaml"), "tools"])
        assert code == 1
        assert "Error" in capsys.readouterr().err

    def test_query_over_limit_rejected(self, tmp_path: Path, monkeypatch, capsys):
        monkeypatch.setenv("OMNISEARCH_MAX_QUERY_LENGTH", "10")
        code = run_cli(["-p", str(tmp_path), "parse", "project alpha status"])
        assert code == 1
        captured = capsys.readouterr()
        assert "limit is 10" in captured.err
        assert captured.out == ""

    def test_query_at_limit_accepted(self, tmp_path: Path, monkeypatch, capsys):
        monkeypatch.setenv("OMNISEARCH_MAX_QUERY_LENGTH", "13")
        assert run_cli(["-p", str(tmp_path), "explain", "project alpha"]) == 0
        assert capsys.readouterr().out.strip() == 'Searching for "project alpha"'

    def test_malformed_config(self, tmp_path: Path, capsys):
        config_dir = tmp_path / ".omnisearch"
        config_dir.mkdir()
        (config_dir / "config.yaml").write_text("log_level: [oops\n")
        assert run_cli(["-p", str(tmp_path), "explain", "x"]) == 1
