"""
Sources Command - Inspect and toggle catalog sources.

Running ``anisift sources`` lists every supported source with its
options; ``enable`` and ``disable`` change which sources are searched
by default.
"""

import typer

from anisift.cli.context import get_config_manager, is_debug
from anisift.core.exceptions import AniSiftError, ConfigurationError
from anisift.sources import get_source_info, supported_source_names
from anisift.ui import (
    create_sources_table,
    display_info,
    get_console,
    handle_error,
)


app = typer.Typer(
    name="sources",
    help="🔌 List and configure catalog sources",
    invoke_without_command=True,
)

console = get_console()


@app.callback()
def sources_main(ctx: typer.Context) -> None:
    """
    🔌 Show supported sources and their options.

    Options are set per search with --source-option SOURCE.OPTION=VALUE,
    or permanently in sources.json.

    Examples:

        anisift sources

        anisift sources enable rss
    """
    if ctx.invoked_subcommand is not None:
        return

    try:
        config_manager = get_config_manager()
        infos = [get_source_info(name) for name in supported_source_names()]
        enabled = config_manager.sources.get_enabled_sources()
        console.print(create_sources_table(infos, enabled))
    except AniSiftError as e:
        handle_error(e, "Failed to list sources", show_traceback=is_debug())
        raise typer.Exit(1)


def _check_source_name(source_name: str) -> None:
    if source_name not in supported_source_names():
        raise ConfigurationError(
            f"Unknown source '{source_name}'. Valid sources are "
            f"{', '.join(supported_source_names())}"
        )


@app.command(name="enable")
def enable_source(
    source_name: str = typer.Argument(..., help="Source to search by default"),
) -> None:
    """✅ Enable a source."""
    try:
        _check_source_name(source_name)
        get_config_manager().enable_source(source_name)
        display_info(f"Source '{source_name}' enabled.", "✅ Source Enabled")
    except AniSiftError as e:
        handle_error(e, f"Failed to enable source '{source_name}'", show_traceback=is_debug())
        raise typer.Exit(1)


@app.command(name="disable")
def disable_source(
    source_name: str = typer.Argument(..., help="Source to stop searching by default"),
) -> None:
    """❌ Disable a source."""
    try:
        _check_source_name(source_name)
        get_config_manager().disable_source(source_name)
        display_info(f"Source '{source_name}' disabled.", "❌ Source Disabled")
    except AniSiftError as e:
        handle_error(e, f"Failed to disable source '{source_name}'", show_traceback=is_debug())
        raise typer.Exit(1)
