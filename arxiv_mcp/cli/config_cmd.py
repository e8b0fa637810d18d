"""arxiv-mcp config / cache - CLI sub-commands for configuration and the PDF cache."""

import json

import typer


def register_config_commands(app, *, console, load) -> None:
    """Add `arxiv-mcp config` sub-command group to *app*."""
    config_app = typer.Typer(help="Manage arxiv-mcp configuration")
    app.add_typer(config_app, name="config")

    # ------------------------------------------------------------------ #
    # arxiv-mcp config show
    # ------------------------------------------------------------------ #

    @config_app.command("show")
    def config_show(ctx: typer.Context):
        """Show the effective configuration (file + environment)."""
        from arxiv_mcp.config.loader import get_config_path

        config = load(ctx)
        config_path = (ctx.obj or {}).get("config_path") or get_config_path()

        console.print("\n[bold]arXiv[/bold]")
        console.print(f"  api:      [cyan]{config.arxiv.api_url}[/cyan]")
        console.print(f"  pdf base: [cyan]{config.arxiv.pdf_base_url}[/cyan]")
        console.print(f"  timeout:  {config.arxiv.timeout_seconds}s")
        console.print(
            f"  results:  default {config.arxiv.default_max_results}, "
            f"limit {config.arxiv.max_results_limit}"
        )

        console.print("\n[bold]Cache[/bold]")
        console.print(f"  directory: [cyan]{config.cache_path}[/cyan]")
        console.print(f"  download timeout: {config.cache.download_timeout_seconds}s")

        console.print("\n[bold]Server[/bold]")
        console.print(f"  name:       {config.server.name}")
        console.print(f"  user agent: {config.server.user_agent}")
        console.print(f"  log level:  {config.logging.level}")

        status = "" if config_path.exists() else " [dim](not found, using defaults)[/dim]"
        console.print(f"\n[dim]Config file: {config_path}[/dim]{status}\n")

    # ------------------------------------------------------------------ #
    # arxiv-mcp config init
    # ------------------------------------------------------------------ #

    @config_app.command("init")
    def config_init(
        ctx: typer.Context,
        force: bool = typer.Option(False, "--force", "-f", help="Overwrite an existing file"),
    ):
        """Write a config file populated with default values."""
        from arxiv_mcp.config.loader import get_config_path, save_config
        from arxiv_mcp.config.schema import Config

        config_path = (ctx.obj or {}).get("config_path") or get_config_path()
        if config_path.exists() and not force:
            if not typer.confirm(f"Config already exists at {config_path}. Overwrite?"):
                console.print("[dim]Config left unchanged.[/dim]")
                return

        save_config(Config(), config_path)
        console.print(f"[green]✓[/green] Wrote config to {config_path}")

    @config_app.command("path")
    def config_path_cmd(ctx: typer.Context):
        """Print the config file path."""
        from arxiv_mcp.config.loader import get_config_path

        console.print(
            str((ctx.obj or {}).get("config_path") or get_config_path()),
            markup=False,
            soft_wrap=True,
        )


def register_cache_commands(app, *, console, load) -> None:
    """Add `arxiv-mcp cache` sub-command group to *app*."""
    cache_app = typer.Typer(help="Inspect the local PDF cache")
    app.add_typer(cache_app, name="cache")

    @cache_app.command("info")
    def cache_info(
        ctx: typer.Context,
        as_json: bool = typer.Option(False, "--json", help="Print machine-readable output"),
    ):
        """Show cache location, number of PDFs and total size."""
        from arxiv_mcp.content.cache import PdfCache

        config = load(ctx)
        cache = PdfCache(config.cache_path)
        entries = cache.entries()
        total = sum(p.stat().st_size for p in entries)

        if as_json:
            console.print(
                json.dumps(
                    {"directory": str(cache.directory), "count": len(entries), "bytes": total}
                ),
                markup=False,
                highlight=False,
                soft_wrap=True,
            )
            return

        console.print(f"Directory: [cyan]{cache.directory}[/cyan]")
        console.print(f"Cached PDFs: {len(entries)}")
        console.print(f"Total size: {total / 1e6:.1f} MB")
