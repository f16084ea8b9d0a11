"""
Config Command - Show, change and reset configuration.

Settings are addressed with dot notation, e.g. ``output.name_style`` or
``filters.resolutions``.
"""

import json
from typing import Any

import typer
from rich.prompt import Confirm

from anisift.cli.context import get_config_manager, is_debug
from anisift.core.exceptions import AniSiftError
from anisift.ui import display_info, get_console, handle_error


app = typer.Typer(
    name="config",
    help="⚙️  Manage configuration",
    no_args_is_help=True,
)

console = get_console()


@app.command(name="show")
def show_config() -> None:
    """
    📋 Show the current configuration.

    Prints settings.json and sources.json as loaded, with defaults filled in.
    """
    config_manager = get_config_manager()

    console.print(f"[dim]Configuration directory:[/dim] [cyan]{config_manager.config_dir}[/cyan]\n")
    console.print("[bold]Settings[/bold]")
    console.print_json(data=config_manager.settings.model_dump(mode='json'))
    console.print("\n[bold]Sources[/bold]")
    console.print_json(data=config_manager.sources.model_dump(mode='json'))


def _parse_value(raw: str) -> Any:
    """Interpret a JSON literal, falling back to the raw string."""
    try:
        return json.loads(raw)
    except json.JSONDecodeError:
        return raw


@app.command(name="set")
def set_config(
    key: str = typer.Argument(..., help="Configuration key (dot notation)"),
    value: str = typer.Argument(..., help="New value (JSON literal or plain text)"),
) -> None:
    """
    ✏️  Set a configuration value.

    Examples:

        anisift config set output.name_style western

        anisift config set filters.resolutions '["720p"]'
    """
    try:
        get_config_manager().update_setting(key, _parse_value(value))
        display_info(f"{key} = {value}", "✅ Setting Updated")
    except AniSiftError as e:
        handle_error(e, f"Failed to set '{key}'", show_traceback=is_debug())
        raise typer.Exit(1)


@app.command(name="reset")
def reset_config(
    confirm: bool = typer.Option(
        False,
        "--yes",
        "-y",
        help="Skip confirmation prompt"
    ),
) -> None:
    """
    🔄 Reset configuration to defaults.

    This action requires confirmation unless --yes is used.
    """
    try:
        if not confirm and not Confirm.ask(
            "[bold red]⚠️  This will reset ALL configuration to defaults. Continue?[/bold red]",
            default=False
        ):
            display_info("Configuration reset cancelled.", "ℹ️  Cancelled")
            return

        get_config_manager().reset_to_defaults()
        display_info("Configuration has been reset to default values.", "✅ Configuration Reset")
    except AniSiftError as e:
        handle_error(e, "Failed to reset configuration", show_traceback=is_debug())
        raise typer.Exit(1)
