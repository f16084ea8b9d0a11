"""
Selection Engine - Evaluate a query against a pool of parsed episodes.

Selection runs in four steps: attribute filtering, the optional
latest-episode refinement, deduplication by identity and final ordering.
It is synchronous, deterministic and never mutates its inputs.

When several releases share an identity, the representative (and, with
duplicates allowed, the order among them) is decided by ``variant_order``:
highest resolution first, then release group, extension, source link and
display name, ascending and case-insensitive. Releases without a group
sort after grouped ones.
"""

import logging
from collections import defaultdict
from typing import Dict, Iterable, List, Sequence, Tuple

from anisift.core.models import Episode, IdentityKey, Query


logger = logging.getLogger(__name__)


def variant_order(episode: Episode) -> Tuple:
    """Total order over release variants of the same episode."""
    group = episode.release_group
    return (
        -episode.resolution.height,
        group is None,
        (group or "").casefold(),
        episode.extension,
        episode.source_link,
        episode.series_name,
    )


def presentation_order(episode: Episode) -> Tuple:
    """Sort key for the final result: identity first, then variant order."""
    return (episode.identity, variant_order(episode))


def matches_attributes(episode: Episode, query: Query) -> bool:
    """
    Check an episode against every attribute criterion of the query.

    Empty criteria never exclude anything. With a group restriction in
    place, releases that carry no group do not match.
    """
    if query.seasons and episode.season_or_default not in query.seasons:
        return False

    if query.episodes and episode.episode_number not in query.episodes:
        return False

    if query.resolutions and episode.resolution not in query.resolutions:
        return False

    if query.extensions and episode.extension not in query.extensions:
        return False

    if query.groups:
        if episode.release_group is None:
            return False
        wanted = {group.casefold() for group in query.groups}
        if episode.release_group.casefold() not in wanted:
            return False

    return True


def filter_attributes(episodes: Iterable[Episode], query: Query) -> List[Episode]:
    return [episode for episode in episodes if matches_attributes(episode, query)]


def filter_latest(episodes: Sequence[Episode], query: Query) -> List[Episode]:
    """
    Keep only the latest episode(s) within each scope.

    With a season restriction the scope is each (series, season) pair, and
    the latest is the highest episode number. Without one, the scope is the
    series and the latest is the highest (season, episode) pair, so a later
    season always outranks any episode of an earlier one. Every release of
    the latest episode is kept; deduplication happens afterwards.
    """
    if query.seasons:
        def scope(episode: Episode):
            return (episode.normalized_series, episode.season_or_default)

        def rank(episode: Episode):
            return episode.episode_number
    else:
        def scope(episode: Episode):
            return episode.normalized_series

        def rank(episode: Episode):
            return (episode.season_or_default, episode.episode_number)

    best: Dict[object, object] = {}
    for episode in episodes:
        key = scope(episode)
        value = rank(episode)
        if key not in best or value > best[key]:
            best[key] = value

    return [episode for episode in episodes if rank(episode) == best[scope(episode)]]


def deduplicate(episodes: Iterable[Episode]) -> List[Episode]:
    """Keep exactly one representative per identity key."""
    groups: Dict[IdentityKey, List[Episode]] = defaultdict(list)
    for episode in episodes:
        groups[episode.identity].append(episode)

    unique = [min(group, key=variant_order) for group in groups.values()]

    duplicates_removed = sum(len(group) for group in groups.values()) - len(unique)
    if duplicates_removed > 0:
        logger.debug(f"Removed {duplicates_removed} duplicate releases")
    return unique


def select(pool: Iterable[Episode], query: Query) -> List[Episode]:
    """
    Select the episodes of a pool that satisfy a query.

    Args:
        pool: Parsed episodes from every source; duplicates are expected
        query: Selection criteria

    Returns:
        Matching episodes ordered by (series, season, episode), with at most
        one release per episode unless the query allows duplicates
    """
    candidates = filter_attributes(pool, query)
    logger.debug(f"{len(candidates)} episodes passed the attribute filter")

    if query.match_latest:
        candidates = filter_latest(candidates, query)
        logger.debug(f"{len(candidates)} episodes left after the latest-episode filter")

    if not query.allow_duplicates:
        candidates = deduplicate(candidates)

    return sorted(candidates, key=presentation_order)


__all__ = [
    "select",
    "matches_attributes",
    "filter_attributes",
    "filter_latest",
    "deduplicate",
    "variant_order",
    "presentation_order",
]
