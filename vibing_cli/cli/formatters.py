"""
Functions for formatting and displaying data in the console using Rich.
"""

from pathlib import Path
from typing import Any

from rich import box
from rich.console import Console, Group, RenderableType
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from vibing_cli.models.config import ClientConfig
from vibing_cli.models.query import VIBE_GROUPS, ResultSet
from vibing_cli.models.track import Track
from vibing_cli.utils.formatting import format_rating, format_track_time


def format_error_with_suggestions(
    error: Exception, context: dict | None = None
) -> Panel:
    """Formats an error with actionable suggestions into a Rich Panel."""
    error_type = type(error).__name__
    error_msg = str(error)

    suggestions_map = {
        "ConfigurationError": [
            "• Set VIBING_API_URL or run `vibing-cli init <URL>`.",
            "• Run `vibing-cli validate` to check the configuration file.",
        ],
        "TransientNetworkError": [
            "• Check that the catalog service is running and reachable.",
            "• Verify the base URL with `vibing-cli --show-config`.",
            "• Please try again in a few moments.",
        ],
        "MalformedResponseError": [
            "• The catalog answered with data this client does not understand.",
            "• The base URL may point at the wrong service.",
        ],
    }

    suggestions = suggestions_map.get(
        error_type, ["• Run the command with -vv for detailed logs."]
    )

    error_text = Text()
    error_text.append(f"{error_type}: ", style="bold red")
    error_text.append(error_msg)

    content = Table.grid(padding=(1, 0))
    content.add_row(error_text)
    content.add_row()
    content.add_row(Text("Suggestions", style="bold yellow"))
    content.add_row(Text("\n".join(suggestions)))

    if context:
        content.add_row()
        content.add_row(Text(f"Context: {context}", style="dim"))

    return Panel(
        content,
        title="[bold red]An Error Occurred[/bold red]",
        border_style="red",
        expand=False,
    )


def results_heading(count: int) -> str:
    return f"{count} results matched"


def build_track_table(tracks: list[Track], playing_id: int | None = None) -> Table:
    """One row per track, in server order; the playing track is marked."""
    table = Table(box=box.SIMPLE_HEAD, expand=False)
    table.add_column("", width=1)
    table.add_column("ID", style="dim", justify="right")
    table.add_column("Title", style="bold")
    table.add_column("Author")
    table.add_column("Genre", style="dim")
    table.add_column("Length", justify="right")
    table.add_column("Rating", justify="right", style="yellow")
    table.add_column("Downloads", justify="right", style="cyan")
    table.add_column("Vibes", style="magenta")

    for track in tracks:
        table.add_row(
            "▶" if track.id == playing_id else "",
            str(track.id),
            escape(track.title or "Unknown Title"),
            escape(track.author or "Unknown Artist"),
            escape(track.genre),
            format_track_time(track.duration),
            format_rating(track.average_rating),
            str(track.download_count),
            escape(", ".join(track.vibe_names)),
        )
    return table


def render_results(results: ResultSet, playing_id: int | None = None) -> RenderableType:
    """The result count, followed by the track table when there is anything to show."""
    parts: list[RenderableType] = [Text(results_heading(results.count), style="dim")]
    if results.tracks:
        parts.append(build_track_table(results.tracks, playing_id))
    if results.request is not None:
        parts.append(Text(f"page {results.request.page}", style="dim"))
    return Group(*parts)


def print_config(config_path: Path, config_data: dict[str, Any]):
    """Displays the current configuration."""
    console = Console()
    content = ""
    for key, value in config_data.items():
        content += f"{key} = {escape(str(value))}\n"

    console.print(
        Panel(
            content.strip(),
            title=f"Configuration ([dim]{config_path}[/dim])",
            border_style="cyan",
        )
    )


def print_validation_table(config: ClientConfig):
    """Displays a summary of the current settings."""
    console = Console()
    table = Table(show_header=False, box=None, padding=(0, 2))
    table.add_column(style="bold cyan")
    table.add_column()

    table.add_row("Catalog URL:", f"[green]{escape(config.base_url)}[/green]")
    table.add_row("Request Timeout:", f"{config.request_timeout:g}s")
    table.add_row("Page Size:", str(config.page_size))
    table.add_row("Default Volume:", str(config.default_volume))
    table.add_row("Download Dir:", f"[dim]{escape(config.download_dir)}[/dim]")
    table.add_row("Event Log:", "✓ Enabled" if config.event_log else "✗ Disabled")

    console.print(
        Panel(
            table,
            title="[bold green]✓ Validated Settings[/bold green]",
            border_style="green",
        )
    )


def print_vibe_groups():
    """Lists the known vibe tags, grouped by facet."""
    console = Console()
    table = Table(title="Vibes", box=box.ROUNDED)
    table.add_column("Group", style="bold cyan")
    table.add_column("Tags")
    for group, names in VIBE_GROUPS.items():
        table.add_row(group, escape(", ".join(names)))
    console.print(table)
