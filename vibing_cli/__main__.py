"""
Entry point for ``vibing-cli`` and ``python -m vibing_cli``.

Turns the errors that escape a command into a panel and an exit code.
"""

import asyncio
import logging
import os
import sys

import typer
from rich.console import Console

from vibing_cli.cli.app import app
from vibing_cli.cli.formatters import format_error_with_suggestions
from vibing_cli.exceptions import CatalogError, ConfigurationError, VibingCliError
from vibing_cli.storage.config_manager import BASE_URL_ENV

log = logging.getLogger("vibing_cli")


def _hint_for(error: VibingCliError) -> str | None:
    if isinstance(error, ConfigurationError):
        if os.getenv(BASE_URL_ENV):
            return f"Check the value of {BASE_URL_ENV}."
        return "Run [cyan]vibing-cli init <BASE_URL>[/cyan] first."
    if isinstance(error, CatalogError):
        return "Run [cyan]vibing-cli diagnose[/cyan] to check the service."
    return None


def main() -> None:
    if os.name == "nt":
        try:
            sys.stdout.reconfigure(encoding="utf-8")
        except (TypeError, AttributeError):
            pass

    console = Console()
    try:
        app()
    except (typer.Exit, typer.Abort):
        pass
    except (KeyboardInterrupt, asyncio.CancelledError):
        console.print("\n[yellow]Stopped.[/yellow]")
        sys.exit(0)
    except VibingCliError as e:
        console.print(format_error_with_suggestions(e))
        if hint := _hint_for(e):
            console.print(f"[dim]Hint:[/dim] {hint}")
        sys.exit(1)
    except Exception as e:
        log.debug("Unhandled error", exc_info=True)
        console.print(format_error_with_suggestions(e, {"type": "Unexpected"}))
        console.print("[dim]Hint:[/dim] rerun with [cyan]-vv[/cyan] for the traceback.")
        sys.exit(1)


if __name__ == "__main__":
    main()
