"""
UI Components - Rich tables for episodes, sources and downloads.

This module renders selection results and source descriptions with
consistent styling across CLI commands.
"""

from typing import Any, Dict, Iterable, List, Sequence

from rich import box
from rich.table import Table
from rich.text import Text

from anisift.core.downloader import DownloadResult
from anisift.core.models import Episode, Resolution
from anisift.core.naming import NameStyle, format_episode


_RESOLUTION_STYLES = {
    Resolution.R1080P: "bold green",
    Resolution.R720P: "green",
    Resolution.R480P: "yellow",
    Resolution.UNKNOWN: "dim",
}


def create_episodes_table(
    episodes: Sequence[Episode],
    title: str = "📺 Episodes",
    style: NameStyle = NameStyle.ANIME,
) -> Table:
    """
    Create a table of selected episodes.

    Args:
        episodes: Episodes in presentation order
        title: Table title
        style: Naming convention for the Name column
    """
    table = Table(
        title=title,
        box=box.ROUNDED,
        show_header=True,
        header_style="bold cyan",
        expand=False,
    )

    table.add_column("#", style="dim", justify="right", width=4)
    table.add_column("Name", style="bold", min_width=24)
    table.add_column("Season", justify="right")
    table.add_column("Episode", justify="right")
    table.add_column("Group", style="magenta")
    table.add_column("Resolution", justify="center")
    table.add_column("Type", style="dim")
    table.add_column("Source", style="dim")

    for index, episode in enumerate(episodes, 1):
        resolution = Text(
            episode.resolution.value,
            style=_RESOLUTION_STYLES.get(episode.resolution, "white"),
        )
        table.add_row(
            str(index),
            format_episode(episode, style),
            str(episode.season) if episode.season is not None else "-",
            str(episode.episode_number),
            episode.release_group or "-",
            resolution,
            episode.extension or "-",
            episode.source or "-",
        )

    return table


def create_sources_table(sources: Iterable[Dict[str, Any]], enabled: Iterable[str] = ()) -> Table:
    """
    Create a table describing sources and their options.

    Args:
        sources: Source info dicts as returned by ``get_source_info``
        enabled: Names of sources enabled in the configuration
    """
    enabled = set(enabled)

    table = Table(
        title="🔌 Sources",
        box=box.ROUNDED,
        show_header=True,
        header_style="bold cyan",
        show_lines=True,
    )

    table.add_column("Source", style="bold")
    table.add_column("Status", justify="center")
    table.add_column("Description")
    table.add_column("Options")

    for info in sources:
        status = Text("enabled", style="green") if info["name"] in enabled else Text("disabled", style="dim")
        table.add_row(
            info["name"],
            status,
            info.get("description") or "",
            _format_options(info.get("options") or []),
        )

    return table


def _format_options(options: List[Dict[str, Any]]) -> str:
    lines = []
    for option in options:
        name = option["name"]
        if option.get("argument"):
            name = f"{name}={option['argument']}"
        line = f"[cyan]{name}[/cyan]"
        if option.get("description"):
            line += f"  {option['description']}"
        if option.get("default") is not None:
            line += f" [dim](default: {option['default']})[/dim]"
        lines.append(line)
    return "\n".join(lines) or "[dim]none[/dim]"


def create_downloads_table(results: Sequence[DownloadResult]) -> Table:
    """Create a table summarizing download outcomes."""
    table = Table(
        title="⬇️  Downloads",
        box=box.ROUNDED,
        show_header=True,
        header_style="bold cyan",
    )

    table.add_column("Episode", style="bold")
    table.add_column("Result")

    for result in results:
        if result.ok:
            outcome = Text(str(result.path), style="green")
        else:
            outcome = Text(result.error or "failed", style="red")
        table.add_row(str(result.episode), outcome)

    return table


__all__ = [
    "create_episodes_table",
    "create_sources_table",
    "create_downloads_table",
]
