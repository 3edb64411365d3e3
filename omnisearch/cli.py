"""CLI commands for omnisearch.

Wraps the query interpreter for use from a terminal.

Commands:
    omnisearch parse QUERY     - Show clean query, intent, entities and filters
    omnisearch suggest QUERY   - Show follow-up query suggestions
    omnisearch explain QUERY   - Show a one-line description of the query
    omnisearch tools           - List known tools
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from .config import AppConfig
from .core.query import QueryParser, explain_query, suggest_for
from .core.tools import TOOL_CATEGORIES, ToolCategory, ToolRegistry

console = Console()
err_console = Console(stderr=True)

logger = logging.getLogger(__name__)


def configure_logging(level: str) -> None:
    """Send omnisearch logs to stderr through rich at the given level."""
    package_logger = logging.getLogger("omnisearch")
    package_logger.setLevel(level)
    if not any(isinstance(h, RichHandler) for h in package_logger.handlers):
        package_logger.addHandler(RichHandler(console=err_console, show_path=False))


def load_config(args: argparse.Namespace) -> AppConfig:
    """Load configuration for the project in args, applying CLI overrides."""
    config = getattr(args, "config", None)
    if config is None:
        config = AppConfig.load(Path(args.project_path).resolve())
    tools_file = getattr(args, "tools_file", None)
    if tools_file:
        config.tools_file = Path(tools_file).expanduser().resolve()
    return config


def build_query_parser(args: argparse.Namespace) -> QueryParser:
    """Build a QueryParser from the configured registry."""
    return QueryParser(registry=load_config(args).build_registry())


def read_query(args: argparse.Namespace) -> str:
    """Return the query argument, rejecting queries over the configured limit.

    Raises:
        ValueError: If the query is longer than max_query_length.
    """
    limit = load_config(args).max_query_length
    if len(args.query) > limit:
        raise ValueError(f"Query is {len(args.query)} characters long; the limit is {limit}")
    return args.query


def parse_command(args: argparse.Namespace) -> int:
    """Show how a query is interpreted.

    Args:
        args: Parsed arguments (query, json)

    Returns:
        Exit code (0 for success)
    """
    parsed = build_query_parser(args).parse(read_query(args))

    if args.json:
        console.out(json.dumps(parsed.to_dict(), indent=2), highlight=False)
        return 0

    intent = parsed.intent
    intent_label = intent.type.value
    if intent.action is not None:
        intent_label += f" ({intent.action.value})"

    console.print(f"[bold]Query:[/bold] {escape(parsed.original_query)}", soft_wrap=True)
    console.print(f"[bold]Clean:[/bold] {escape(parsed.clean_query) or '[dim]-[/dim]'}", soft_wrap=True)
    console.print(f"[bold]Intent:[/bold] {intent_label} [dim]{intent.confidence:.2f}[/dim]")

    if parsed.entities:
        table = Table(title="Entities")
        table.add_column("Type", style="cyan")
        table.add_column("Value")
        table.add_column("Confidence", justify="right")
        for entity in parsed.entities:
            table.add_row(entity.type.value, escape(entity.value), f"{entity.confidence:.2f}")
        console.print(table)
    else:
        console.print("[dim]No entities detected.[/dim]")

    filters = parsed.filters.to_dict()
    if filters:
        console.print("[bold]Filters:[/bold]")
        for key, value in filters.items():
            shown = ", ".join(value) if isinstance(value, list) else str(value)
            console.print(f"  {key}: {escape(shown)}", soft_wrap=True)

    return 0


def suggest_command(args: argparse.Namespace) -> int:
    """Print follow-up suggestions for a query, one per line."""
    query = read_query(args)
    parsed = build_query_parser(args).parse(query)
    for suggestion in suggest_for(parsed, query):
        console.out(suggestion, highlight=False)
    return 0


def explain_command(args: argparse.Namespace) -> int:
    """Print a one-line explanation of a query."""
    query_parser = build_query_parser(args)
    parsed = query_parser.parse(read_query(args))
    console.out(explain_query(parsed, query_parser.registry), highlight=False)
    return 0


def list_tools(args: argparse.Namespace) -> int:
    """List the tools in the configured registry.

    Args:
        args: Parsed arguments (category)

    Returns:
        Exit code (0 for success)
    """
    registry: ToolRegistry = load_config(args).build_registry()
    tools = registry.by_category(args.category) if args.category else list(registry)

    if not tools:
        console.print("[dim]No tools registered.[/dim]")
        return 0

    table = Table(title="Tools")
    table.add_column("ID", style="cyan")
    table.add_column("Name")
    table.add_column("Category")
    table.add_column("Demo", justify="center")
    for tool in tools:
        table.add_row(
            tool.id,
            escape(tool.name),
            TOOL_CATEGORIES.get(tool.category, tool.category.value),
            "yes" if tool.is_demo else "",
        )
    console.print(table)
    return 0


def create_parser() -> argparse.ArgumentParser:
    """Create the CLI argument parser.

    Returns:
        Configured ArgumentParser
    """
    parser = argparse.ArgumentParser(
        prog="omnisearch",
        description="omnisearch: natural-language query interpreter for cross-tool search",
    )
    parser.add_argument(
        "--project",
        "-p",
        dest="project_path",
        default=".",
        help="Path to project directory (default: current directory)",
    )
    parser.add_argument(
        "--tools",
        "-t",
        dest="tools_file",
        help="YAML tool registry to use instead of the built-in tools",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Enable debug logging",
    )

    subparsers = parser.add_subparsers(dest="command", help="Commands")

    parse_parser = subparsers.add_parser("parse", help="Show how a query is interpreted")
    parse_parser.add_argument("query", help="Free-text query")
    parse_parser.add_argument(
        "--json",
        action="store_true",
        help="Print the parsed query as JSON",
    )
    parse_parser.set_defaults(func=parse_command)

    suggest_parser = subparsers.add_parser("suggest", help="Suggest follow-up queries")
    suggest_parser.add_argument("query", help="Free-text query")
    suggest_parser.set_defaults(func=suggest_command)

    explain_parser = subparsers.add_parser("explain", help="Explain a query in one line")
    explain_parser.add_argument("query", help="Free-text query")
    explain_parser.set_defaults(func=explain_command)

    tools_parser = subparsers.add_parser("tools", help="List known tools")
    tools_parser.add_argument(
        "--category",
        "-c",
        choices=[category.value for category in ToolCategory],
        help="Only list tools in this category",
    )
    tools_parser.set_defaults(func=list_tools)

    return parser


def run_cli(args: list[str] | None = None) -> int:
    """Run the CLI.

    Args:
        args: Command-line arguments (defaults to sys.argv[1:])

    Returns:
        Exit code
    """
    parser = create_parser()
    parsed = parser.parse_args(args)

    if not hasattr(parsed, "func"):
        parser.print_help()
        return 0

    try:
        parsed.config = load_config(parsed)
        configure_logging("DEBUG" if parsed.verbose else parsed.config.log_level)
        return parsed.func(parsed)
    except KeyboardInterrupt:
        console.print("\n[dim]Cancelled.[/dim]")
        return 130
    except Exception as e:
        logger.debug("Command failed", exc_info=True)
        err_console.print(f"[red]Error:[/red] {escape(str(e))}")
        return 1


def main() -> None:
    """Console script entry point."""
    sys.exit(run_cli())


__all__ = [
    "create_parser",
    "run_cli",
    "main",
    "parse_command",
    "suggest_command",
    "explain_command",
    "list_tools",
]
