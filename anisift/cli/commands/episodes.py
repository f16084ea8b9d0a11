"""
Episode Commands - Search the catalogs and select episodes.

``list`` shows every matching release; ``get`` selects one release per
episode, skips episodes already seen and saves their torrent files.
Both build the query from the configured default criteria first, then
from the command-line options.
"""

import asyncio
import logging
from pathlib import Path
from typing import List, Optional

import typer
from rich.prompt import Confirm

from anisift.cli.context import get_config_manager, is_debug
from anisift.core import (
    AppSettings,
    Episode,
    EpisodePool,
    NameStyle,
    Query,
    QueryBuilder,
    build_pool,
    format_episode,
    select,
)
from anisift.core.downloader import TorrentDownloader
from anisift.core.exceptions import AniSiftError, InvalidQueryError
from anisift.core.seen import SeenEpisodes
from anisift.core.source_manager import SourceManager
from anisift.ui import (
    create_downloads_table,
    create_episodes_table,
    display_info,
    display_warning,
    get_console,
    handle_error,
    status_spinner,
)


logger = logging.getLogger(__name__)

console = get_console()


def build_query(
    settings: AppSettings,
    seasons: Optional[List[str]] = None,
    episodes: Optional[List[str]] = None,
    groups: Optional[List[str]] = None,
    resolutions: Optional[List[str]] = None,
    types: Optional[List[str]] = None,
    latest: Optional[bool] = None,
    allow_duplicates: Optional[bool] = None,
    select_all: bool = False,
) -> Query:
    """
    Build the selection query: configured defaults, then ``--all``, then
    the remaining command-line criteria.

    Raises:
        InvalidQueryError: If any criterion is malformed
    """
    filters = settings.filters
    builder = QueryBuilder().extend(
        seasons=filters.seasons,
        episodes=filters.episodes,
        groups=filters.groups,
        resolutions=filters.resolutions,
        extensions=filters.extensions,
    )
    builder.match_latest(filters.match_latest)
    builder.allow_duplicates(filters.allow_duplicates)

    if select_all:
        builder.clear_all()

    builder.extend(
        seasons=seasons or (),
        episodes=episodes or (),
        groups=groups or (),
        resolutions=resolutions or (),
        extensions=types or (),
    )
    if latest is not None:
        builder.match_latest(latest)
    if allow_duplicates is not None:
        builder.allow_duplicates(allow_duplicates)

    return builder.build()


def resolve_style(settings: AppSettings, anime_style: bool, western_style: bool) -> NameStyle:
    if western_style:
        return NameStyle.WESTERN
    if anime_style:
        return NameStyle.ANIME
    return NameStyle(settings.output.name_style)


def _search_text(words: List[str], settings: AppSettings) -> str:
    text = " ".join(words).strip()
    if len(text) < settings.search.min_query_length:
        raise InvalidQueryError(
            f"Search text must be at least {settings.search.min_query_length} characters",
            criterion="search",
            value=text,
        )
    return text


def _fetch_pool(
    text: str,
    settings: AppSettings,
    sources: Optional[List[str]],
    source_options: Optional[List[str]],
) -> EpisodePool:
    source_manager = SourceManager(get_config_manager())
    adapters = source_manager.create_sources(sources, source_options)

    with status_spinner(f"Searching {len(adapters)} sources for '{text}'..."):
        pool = build_pool(
            adapters,
            text,
            max_concurrent=settings.search.max_concurrent_sources,
            timeout=settings.search.search_timeout,
        )

    for name in pool.failed_sources:
        display_warning(f"{name}: {pool.failures[name]}", "⚠️  Source Failed")

    logger.info(
        f"Pool for '{text}': {pool.size} episodes from {pool.candidate_count} candidates, "
        f"{len(pool.discarded)} unparsable"
    )
    return pool


def _print_episodes(episodes: List[Episode], style: NameStyle, plain: bool, title: str) -> None:
    if plain:
        for episode in episodes:
            console.print(format_episode(episode, style), markup=False, highlight=False)
    else:
        console.print(create_episodes_table(episodes, title=title, style=style))


def list_episodes(
    search: List[str] = typer.Argument(..., help="Series to search for"),
    season: Optional[List[str]] = typer.Option(None, "--season", "-s", help="Season numbers or ranges, e.g. 2 or 1..3"),
    episode: Optional[List[str]] = typer.Option(None, "--episode", "-e", help="Episode numbers or ranges, e.g. 5 or 1..12"),
    latest: Optional[bool] = typer.Option(None, "--latest/--no-latest", help="Only the latest episode"),
    allow_duplicates: Optional[bool] = typer.Option(
        None, "--allow-duplicates/--no-allow-duplicates", "-d",
        help="Show every release of an episode (default for list)"
    ),
    select_all: bool = typer.Option(False, "--all", "-a", help="Clear configured criteria first"),
    group: Optional[List[str]] = typer.Option(None, "--group", "-g", help="Release groups, comma-separated"),
    resolution: Optional[List[str]] = typer.Option(None, "--resolution", "-r", help="Resolutions, e.g. 720p,1080p or any"),
    file_type: Optional[List[str]] = typer.Option(None, "--type", "-t", help="File types, e.g. mkv or any"),
    sources: Optional[List[str]] = typer.Option(None, "--from", help="Sources to search, comma-separated, or all"),
    source_option: Optional[List[str]] = typer.Option(None, "--source-option", help="SOURCE.OPTION=VALUE"),
    anime_style: bool = typer.Option(False, "--anime-style", "-n", help="Print names as [Group] Series - 05"),
    western_style: bool = typer.Option(False, "--western-style", "-w", help="Print names as Series.S01E05"),
    plain: bool = typer.Option(False, "--plain", help="Print one name per line instead of a table"),
) -> None:
    """
    📋 List matching episodes.

    Every release is shown unless --no-allow-duplicates is given.

    Examples:

        anisift list "Frieren" -r 1080p

        anisift list "Dungeon Meshi" -e 1..6 --plain
    """
    try:
        settings = get_config_manager().settings
        text = _search_text(search, settings)
        query = build_query(
            settings,
            seasons=season,
            episodes=episode,
            groups=group,
            resolutions=resolution,
            types=file_type,
            latest=latest,
            allow_duplicates=True if allow_duplicates is None else allow_duplicates,
            select_all=select_all,
        )

        pool = _fetch_pool(text, settings, sources, source_option)
        selected = select(pool.episodes, query)

        if not selected:
            display_info(f"No episodes match '{text}'.", "🔍 No Results")
            return

        style = resolve_style(settings, anime_style, western_style)
        _print_episodes(selected, style, plain, f"📺 {len(selected)} episodes")

    except AniSiftError as e:
        handle_error(e, "Failed to list episodes", show_traceback=is_debug())
        raise typer.Exit(1)


def get_episodes(
    search: List[str] = typer.Argument(..., help="Series to search for"),
    season: Optional[List[str]] = typer.Option(None, "--season", "-s", help="Season numbers or ranges, e.g. 2 or 1..3"),
    episode: Optional[List[str]] = typer.Option(None, "--episode", "-e", help="Episode numbers or ranges, e.g. 5 or 1..12"),
    latest: Optional[bool] = typer.Option(None, "--latest/--no-latest", help="Only the latest episode"),
    allow_duplicates: Optional[bool] = typer.Option(
        None, "--allow-duplicates/--no-allow-duplicates", "-d",
        help="Download every release of an episode"
    ),
    select_all: bool = typer.Option(False, "--all", "-a", help="Clear configured criteria first"),
    group: Optional[List[str]] = typer.Option(None, "--group", "-g", help="Release groups, comma-separated"),
    resolution: Optional[List[str]] = typer.Option(None, "--resolution", "-r", help="Resolutions, e.g. 720p,1080p or any"),
    file_type: Optional[List[str]] = typer.Option(None, "--type", "-t", help="File types, e.g. mkv or any"),
    sources: Optional[List[str]] = typer.Option(None, "--from", help="Sources to search, comma-separated, or all"),
    source_option: Optional[List[str]] = typer.Option(None, "--source-option", help="SOURCE.OPTION=VALUE"),
    anime_style: bool = typer.Option(False, "--anime-style", "-n", help="Print names as [Group] Series - 05"),
    western_style: bool = typer.Option(False, "--western-style", "-w", help="Print names as Series.S01E05"),
    outdir: Optional[Path] = typer.Option(None, "--outdir", "-o", help="Directory for torrent files"),
    seen_file: Optional[Path] = typer.Option(None, "--seen", help="File recording downloaded episodes"),
    force: bool = typer.Option(False, "--force", "-f", help="Download without asking"),
    dry_run: bool = typer.Option(False, "--dry-run", help="Show what would be downloaded"),
) -> None:
    """
    ⬇️  Download the torrent files of matching episodes.

    One release per episode is chosen, preferring the highest resolution.

    Examples:

        anisift get "Frieren" --latest

        anisift get "Dungeon Meshi" -e 1..6 -r 1080p --seen ~/.anisift-seen.json -f
    """
    try:
        settings = get_config_manager().settings
        text = _search_text(search, settings)
        query = build_query(
            settings,
            seasons=season,
            episodes=episode,
            groups=group,
            resolutions=resolution,
            types=file_type,
            latest=latest,
            allow_duplicates=allow_duplicates,
            select_all=select_all,
        )

        seen_path = seen_file or settings.output.seen_file
        seen = SeenEpisodes(seen_path) if seen_path else None

        pool = _fetch_pool(text, settings, sources, source_option)
        selected = select(pool.episodes, query)
        if seen is not None:
            selected = seen.filter_unseen(selected)

        if not selected:
            display_info(f"No new episodes match '{text}'.", "🔍 No Results")
            return

        style = resolve_style(settings, anime_style, western_style)
        _print_episodes(selected, style, False, f"⬇️  {len(selected)} episodes to download")

        if dry_run:
            return

        if settings.output.interactive and not force:
            if not Confirm.ask(f"Download {len(selected)} episodes?", default=True):
                display_info("Download cancelled.", "ℹ️  Cancelled")
                return

        downloader = TorrentDownloader(
            outdir or settings.output.outdir,
            timeout=settings.search.search_timeout,
        )
        results = asyncio.run(downloader.download_batch(selected))
        console.print(create_downloads_table(results))

        if seen is not None:
            seen.mark_seen(result.episode for result in results if result.ok)
            seen.save()

        failed = [result for result in results if not result.ok]
        if failed:
            display_warning(f"{len(failed)} of {len(results)} downloads failed.")
            raise typer.Exit(1)

    except AniSiftError as e:
        handle_error(e, "Failed to get episodes", show_traceback=is_debug())
        raise typer.Exit(1)


__all__ = ["build_query", "resolve_style", "list_episodes", "get_episodes"]
