"""CLI commands for the arXiv MCP server."""

import asyncio
import sys
from pathlib import Path
from typing import Any

import typer
from loguru import logger
from rich.console import Console
from rich.table import Table

from arxiv_mcp import __logo__, __version__
from arxiv_mcp.cli.config_cmd import register_cache_commands, register_config_commands
from arxiv_mcp.config.schema import Config
from arxiv_mcp.errors import ToolNotFoundError, ToolValidationError

app = typer.Typer(
    name="arxiv-mcp",
    help=f"{__logo__} arXiv MCP server - search papers and read their full text",
    no_args_is_help=True,
)

console = Console()


def _stderr_sink(message) -> None:
    sys.stderr.write(message)


def _setup_logging(level: str) -> None:
    """Send all logs to stderr; stdout carries the MCP stream."""
    logger.remove()
    logger.add(_stderr_sink, level=level.upper())


def _load(ctx: typer.Context) -> Config:
    from arxiv_mcp.config.loader import load_config

    state = ctx.obj or {}
    config = load_config(state.get("config_path"))
    _setup_logging("DEBUG" if state.get("verbose") else config.logging.level)
    return config


def _run_tool(ctx: typer.Context, name: str, params: dict[str, Any]) -> None:
    """Execute one tool and print its text; non-zero exit on errors."""
    from arxiv_mcp.server import build_registry

    config = _load(ctx)
    registry = build_registry(config)
    try:
        result = asyncio.run(registry.execute(name, params))
    except (ToolValidationError, ToolNotFoundError) as e:
        console.print(str(e), style="red", markup=False, highlight=False)
        raise typer.Exit(2)

    console.print(result.text, markup=False, highlight=False, emoji=False, soft_wrap=True)
    if result.is_error:
        raise typer.Exit(1)


def _paging(
    start: int | None,
    max_results: int | None,
    sort_by: str | None,
    sort_order: str | None,
) -> dict[str, Any]:
    params = {
        "startIndex": start,
        "maxResults": max_results,
        "sortField": sort_by,
        "sortOrder": sort_order,
    }
    return {k: v for k, v in params.items() if v is not None}


def version_callback(value: bool):
    if value:
        console.print(f"{__logo__} arxiv-mcp v{__version__}")
        raise typer.Exit()


@app.callback()
def main(
    ctx: typer.Context,
    version: bool = typer.Option(None, "--version", callback=version_callback, is_eager=True),
    config_path: Path = typer.Option(None, "--config", "-c", help="Path to config.json"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging on stderr"),
):
    """arXiv MCP server CLI."""
    ctx.obj = {"config_path": config_path, "verbose": verbose}


@app.command()
def serve(ctx: typer.Context):
    """Run the MCP server on stdio."""
    from arxiv_mcp.server import ArxivMCPServer

    config = _load(ctx)
    logger.info("Starting {} (cache: {})", config.server.name, config.cache_path)
    asyncio.run(ArxivMCPServer(config).serve())


@app.command()
def search(
    ctx: typer.Context,
    query: str = typer.Option(None, "--query", "-q", help="General search query across all fields"),
    category: str = typer.Option(None, "--category", help="arXiv category, e.g. cs.AI"),
    author: str = typer.Option(None, "--author", "-a", help="Author name"),
    title: str = typer.Option(None, "--title", "-t", help="Words in the title"),
    abstract: str = typer.Option(None, "--abstract", help="Words in the abstract"),
    start: int = typer.Option(None, "--start", help="Starting index (0-based)"),
    max_results: int = typer.Option(None, "--max-results", "-n", help="Results per page (max 2000)"),
    sort_by: str = typer.Option(None, "--sort-by", help="relevance | lastUpdatedDate | submittedDate"),
    sort_order: str = typer.Option(None, "--sort-order", help="ascending | descending"),
):
    """Search arXiv papers."""
    params: dict[str, Any] = {
        k: v
        for k, v in {
            "generalQuery": query,
            "category": category,
            "author": author,
            "title": title,
            "abstract": abstract,
        }.items()
        if v is not None
    }
    params.update(_paging(start, max_results, sort_by, sort_order))
    _run_tool(ctx, "search_papers", params)


@app.command()
def paper(
    ctx: typer.Context,
    paper_id: str = typer.Argument(..., help="arXiv ID, e.g. 2104.13478 or cs/0001001"),
):
    """Show metadata for one paper."""
    _run_tool(ctx, "get_paper", {"paperId": paper_id})


@app.command()
def category(
    ctx: typer.Context,
    name: str = typer.Argument(..., help="arXiv category, e.g. cs.AI"),
    start: int = typer.Option(None, "--start", help="Starting index (0-based)"),
    max_results: int = typer.Option(None, "--max-results", "-n", help="Results per page (max 2000)"),
    sort_by: str = typer.Option(None, "--sort-by", help="relevance | lastUpdatedDate | submittedDate"),
    sort_order: str = typer.Option(None, "--sort-order", help="ascending | descending"),
):
    """List papers in a category."""
    params: dict[str, Any] = {"category": name}
    params.update(_paging(start, max_results, sort_by, sort_order))
    _run_tool(ctx, "search_by_category", params)


@app.command()
def content(
    ctx: typer.Context,
    paper_id: str = typer.Argument(..., help="arXiv ID, e.g. 2104.13478 or cs/0001001"),
):
    """Print the extracted full text of a paper (downloads the PDF once)."""
    _run_tool(ctx, "get_paper_content", {"paperId": paper_id})


@app.command()
def tools(ctx: typer.Context):
    """List the tools exposed to MCP hosts."""
    from arxiv_mcp.server import build_registry

    registry = build_registry(_load(ctx))
    table = Table(title="Tools")
    table.add_column("Name", style="cyan", no_wrap=True)
    table.add_column("Required")
    table.add_column("Description")
    for definition in registry.get_definitions():
        required = ", ".join(definition["inputSchema"].get("required", [])) or "-"
        table.add_row(definition["name"], required, definition["description"])
    console.print(table)


register_config_commands(app, console=console, load=_load)
register_cache_commands(app, console=console, load=_load)
