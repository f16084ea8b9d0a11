"""
Episode Naming - Render episodes back to display strings.

Two interchangeable styles are supported: the bracketed style common for
anime fansub releases and the dotted style used by western scene releases.
"""

from enum import Enum
from typing import Callable, Dict

from anisift.core.models import Episode, Resolution


class NameStyle(str, Enum):
    """Episode display styles."""

    ANIME = "anime"
    WESTERN = "western"


def episode_name_anime(episode: Episode) -> str:
    """[Group] Series S2 - 05 [720p]"""
    parts = []
    if episode.release_group:
        parts.append(f"[{episode.release_group}]")
    parts.append(episode.series_name)
    if episode.season_or_default != 1:
        parts.append(f"S{episode.season_or_default}")
    parts.append(f"- {episode.episode_number:02d}")
    if episode.resolution is not Resolution.UNKNOWN:
        parts.append(f"[{episode.resolution}]")
    return " ".join(parts)


def episode_name_western(episode: Episode) -> str:
    """Series.S02E05.720p-Group"""
    name = ".".join(episode.series_name.split())
    name += f".S{episode.season_or_default:02d}E{episode.episode_number:02d}"
    if episode.resolution is not Resolution.UNKNOWN:
        name += f".{episode.resolution}"
    if episode.release_group:
        name += f"-{episode.release_group}"
    return name


_FORMATTERS: Dict[NameStyle, Callable[[Episode], str]] = {
    NameStyle.ANIME: episode_name_anime,
    NameStyle.WESTERN: episode_name_western,
}


def format_episode(episode: Episode, style: NameStyle = NameStyle.ANIME) -> str:
    return _FORMATTERS[NameStyle(style)](episode)


__all__ = ["NameStyle", "episode_name_anime", "episode_name_western", "format_episode"]
