"""
CLI Main Application - Typer app entry point.

This module provides the main CLI application: it loads configuration,
sets up logging and registers the episode, sources and config commands.
"""

import sys
import logging
from pathlib import Path
from typing import Optional

import typer
from rich.traceback import install as install_rich_traceback

from anisift import __version__
from anisift.core import ConfigManager
from anisift.core.exceptions import AniSiftError
from anisift.ui import get_console, handle_error
from anisift.cli.context import get_config_manager, is_debug, set_config_manager, set_debug


app = typer.Typer(
    name="anisift",
    help="🎌 Find and fetch episodes from torrent catalogs",
    no_args_is_help=True,
    rich_markup_mode="rich",
    context_settings={"help_option_names": ["-h", "--help"]},
)


def _version_callback(value: bool) -> None:
    if value:
        get_console().print(f"[bold blue]AniSift[/bold blue] version [green]{__version__}[/green]")
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(
        False,
        "--version",
        "-v",
        help="Show version information and exit",
        callback=_version_callback,
        is_eager=True,
    ),
    config_dir: Optional[Path] = typer.Option(
        None,
        "--config-dir",
        help="Configuration directory path",
        file_okay=False,
        dir_okay=True,
    ),
    debug: bool = typer.Option(
        False,
        "--debug",
        help="Enable debug logging and tracebacks",
    ),
) -> None:
    """
    🎌 AniSift - search torrent catalogs and select episodes.

    Release titles are parsed into series, season, episode, group,
    resolution and file type, then filtered by your criteria.
    """
    set_debug(debug)

    try:
        config_manager = ConfigManager(config_dir)
        set_config_manager(config_manager)
    except AniSiftError as e:
        handle_error(e, "During application initialization", show_traceback=debug)
        raise typer.Exit(1)

    _setup_logging(debug, config_manager.settings.logging.level)

    if debug:
        install_rich_traceback(show_locals=False)


def _setup_logging(debug: bool = False, level_name: str = "WARNING") -> None:
    """
    Set up application logging on stderr.

    Args:
        debug: Enable debug logging
        level_name: Configured level used when debug is off
    """
    level = logging.DEBUG if debug else getattr(logging, level_name, logging.WARNING)

    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[
            logging.StreamHandler(sys.stderr),
        ],
        force=True,
    )

    # Reduce noise from third-party libraries
    if not debug:
        logging.getLogger("aiohttp").setLevel(logging.WARNING)


def _register_commands() -> None:
    """Register commands with the main app."""
    from anisift.cli.commands import config, episodes, sources

    app.command(name="list")(episodes.list_episodes)
    app.command(name="get")(episodes.get_episodes)
    app.add_typer(sources.app, name="sources", help="🔌 List and configure catalog sources")
    app.add_typer(config.app, name="config", help="⚙️  Manage configuration")


_register_commands()


def cli_main() -> None:
    """
    Main CLI entry point for the anisift command.
    """
    try:
        app()
    except KeyboardInterrupt:
        get_console().print("\n[yellow]Operation cancelled by user[/yellow]")
        sys.exit(130)  # Standard exit code for SIGINT
    except Exception as e:
        handle_error(e, "Unexpected error in CLI", show_traceback=is_debug())
        sys.exit(1)


__all__ = [
    "app",
    "cli_main",
    "get_config_manager",
]
