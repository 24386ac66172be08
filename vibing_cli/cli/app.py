"""
Defines the command-line interface for the application using Typer.
"""

import asyncio
import logging
import os
from pathlib import Path

import typer
from rich.console import Console
from rich.logging import RichHandler

from vibing_cli import __version__
from vibing_cli.api.client import CatalogClient
from vibing_cli.core.browser import CatalogBrowser
from vibing_cli.core.volume import VolumeController
from vibing_cli.exceptions import VibingCliError
from vibing_cli.media.downloader import close_connection_pool
from vibing_cli.models.config import ClientConfig
from vibing_cli.models.query import SearchQuery, SortKey, known_vibes
from vibing_cli.storage.config_manager import ConfigManager
from vibing_cli.utils.formatting import format_size
from vibing_cli.utils.structured_logger import create_structured_logger

from .formatters import (
    print_config,
    print_validation_table,
    print_vibe_groups,
    render_results,
)

console = Console()

logging.basicConfig(
    level="INFO",
    format="%(message)s",
    datefmt="[%X]",
    handlers=[
        RichHandler(
            console=console,
            rich_tracebacks=True,
            show_path=False,
            show_level=False,
            markup=True,
        )
    ],
)
log = logging.getLogger("vibing_cli")

app = typer.Typer(
    name="vibing-cli",
    help=(
        "Browse, filter and download tracks from a vibing-storage catalog. Use"
        " 'vibing-cli <command> --help' for more info."
    ),
    rich_markup_mode="rich",
    pretty_exceptions_show_locals=False,
    add_completion=False,
)


def get_config_dir() -> Path:
    if os.name == "nt":
        base_dir = Path(os.getenv("APPDATA", "~\\AppData\\Roaming"))
    else:
        base_dir = Path(os.getenv("XDG_CONFIG_HOME", "~/.config"))
    return base_dir.expanduser() / "vibing-cli"


CONFIG_DIR = get_config_dir()
CONFIG_FILE = CONFIG_DIR / "config.ini"


def _build_browser(config: ClientConfig) -> CatalogBrowser:
    client = CatalogClient(
        config.base_url, page_size=config.page_size, timeout=config.request_timeout
    )
    base_logger, catalog_logger, playback_logger = create_structured_logger(
        log_dir=CONFIG_DIR / "logs", enable_json=config.event_log
    )
    base_logger.set_session_context(base_url=config.base_url)
    return CatalogBrowser(
        client,
        volume=VolumeController(config.default_volume),
        catalog_logger=catalog_logger,
        playback_logger=playback_logger,
    )


@app.callback(invoke_without_command=True)
def main_callback(
    ctx: typer.Context,
    verbose: int = typer.Option(
        0,
        "--verbose",
        "-v",
        count=True,
        help="Increase logging verbosity (-vv for debug).",
    ),
    version: bool = typer.Option(
        False, "--version", help="Show version and exit.", is_eager=True
    ),
    show_config: bool = typer.Option(
        False, "--show-config", help="Display the current configuration."
    ),
):
    """vibing-storage catalog CLI"""
    if version:
        console.print(f"[bold]vibing-cli[/bold] version [cyan]{__version__}[/cyan]")
        raise typer.Exit()

    log_level = "INFO"
    if verbose >= 2:
        log_level = "DEBUG"
    logging.getLogger("vibing_cli").setLevel(log_level)

    if show_config:
        try:
            config = ConfigManager(CONFIG_FILE).load_config()
        except VibingCliError as e:
            console.print(f"[red]✗ {e}[/red]")
            raise typer.Exit(code=1) from e
        print_config(CONFIG_FILE, config.model_dump(exclude={"config_path"}))
        raise typer.Exit()

    if ctx.invoked_subcommand is None:
        console.print(ctx.get_help())


@app.command()
def init(
    base_url: str = typer.Argument(..., help="Root URL of the catalog service."),
    force: bool = typer.Option(
        False, "--force", "-f", help="Overwrite an existing configuration file."
    ),
):
    """Initialize configuration with the catalog service URL."""
    if (
        CONFIG_FILE.exists()
        and not force
        and not typer.confirm("Configuration file already exists. Overwrite it?")
    ):
        raise typer.Abort()

    config_manager = ConfigManager(CONFIG_FILE)
    # Validate first so a bad URL never reaches the file.
    config = config_manager.load_config({"base_url": base_url})
    config_manager.save_new_config({"base_url": config.base_url})
    console.print(f"\n[bold green]✓ Configuration saved to '{CONFIG_FILE}'[/bold green]")
    console.print("Ready to browse! Try: [cyan]vibing-cli search rain[/cyan]")


@app.command()
def search(
    pattern: str | None = typer.Argument(None, help="Free-text search pattern."),
    sort: SortKey | None = typer.Option(
        None, "--sort", "-s", help="Sort order.", case_sensitive=False
    ),
    vibes: list[str] | None = typer.Option(  # noqa: B008
        None,
        "--vibe",
        "-t",
        help="Filter by vibe tag. Repeat for several; see 'vibing-cli vibes'.",
    ),
    author: str | None = typer.Option(None, "--author", "-a", help="Filter by author."),
    page: int = typer.Option(1, "--page", "-p", help="Page number (1-based)."),
):
    """Search the catalog."""
    config = ConfigManager(CONFIG_FILE).load_config()

    unknown = [v for v in vibes or [] if v not in known_vibes()]
    if unknown:
        console.print(
            f"[yellow]⚠️  Unknown vibe(s): {', '.join(unknown)}. Sending anyway.[/yellow]"
        )

    query = SearchQuery(
        pattern=pattern, order_by=sort, vibes=tuple(vibes or ()), author=author
    )

    async def _search_async():
        browser = _build_browser(config)
        try:
            await browser.search(query, page=page)
            console.print(render_results(browser.results))
        finally:
            await browser.close()

    asyncio.run(_search_async())


@app.command()
def download(
    track_id: int = typer.Argument(..., help="ID of the track to download."),
    output_dir: Path | None = typer.Option(  # noqa: B008
        None, "-o", "--output", help="Directory to save into (default from config)."
    ),
):
    """Download a track."""
    config = ConfigManager(CONFIG_FILE).load_config()
    destination = (output_dir or Path(config.download_dir)).expanduser()

    async def _download_async():
        browser = _build_browser(config)
        try:
            with console.status(f"[cyan]Downloading track {track_id}...[/cyan]"):
                path = await browser.download(track_id, destination)
            console.print(
                f"[green]✓ Saved to '{path}' ({format_size(path.stat().st_size)})[/green]"
            )
        finally:
            await close_connection_pool()
            await browser.close()

    asyncio.run(_download_async())


@app.command()
def vibes():
    """List the known vibe tags."""
    print_vibe_groups()


@app.command()
def validate():
    """Validate the current configuration."""
    try:
        config = ConfigManager(CONFIG_FILE).load_config()
        print_validation_table(config)
    except VibingCliError as e:
        console.print(f"[red]✗ Configuration is invalid: {e}[/red]")
        raise typer.Exit(code=1) from e


@app.command()
def diagnose():
    """Check the configuration and that the catalog service answers."""
    console.print("\n[bold cyan]Running diagnostics...[/bold cyan]\n")
    try:
        config = ConfigManager(CONFIG_FILE).load_config()
        console.print("[green]✓[/] Configuration is valid.")
    except VibingCliError as e:
        console.print(f"[red]✗ Configuration validation failed: {e}[/red]")
        raise typer.Exit(code=1) from e

    async def test_connection() -> bool:
        async with CatalogClient(
            config.base_url, page_size=1, timeout=10
        ) as client:
            try:
                await client.initial()
            except VibingCliError as e:
                console.print(f"[red]✗ Catalog check failed: {e}[/red]")
                return False
        console.print(f"[green]✓[/] Catalog at {config.base_url} answered.")
        return True

    if asyncio.run(test_connection()):
        console.print("\n[bold green]✓ All checks passed![/bold green]\n")
    else:
        console.print("\n[bold red]✗ Some issues were found.[/bold red]\n")
        raise typer.Exit(code=1)
