"""
Title Parser - Structured episode metadata from freeform release titles.

Catalogs advertise the same episode under very different naming schemes.
This module turns one raw title into an ``Episode`` by trying a list of
parsing strategies in a fixed priority order; the first strategy that can
extract an episode number wins. Every other field is optional and falls
back to its "absent" value instead of failing the parse.

Supported conventions, in priority order:

    bracketed   [Group] Series Name - 05 [720p][mkv]
    dotted      Series.Name.S02E10.1080p-Group  /  Series Name 2x10
    numbered    [Group] Series Name 05  /  Series Name Episode 5
"""

import logging
import re
from typing import Callable, Iterable, List, NamedTuple, Optional, Tuple, Union

from pydantic import ValidationError

from anisift.core.models import Episode, ParseFailure, RawCandidate, Resolution


logger = logging.getLogger(__name__)


# File types recognised as an extension, either as a filename suffix or
# inside a trailing bracketed tag.
KNOWN_EXTENSIONS = frozenset({
    "mkv", "mp4", "avi", "m4v", "webm", "ts", "wmv", "mov", "ogm", "flv", "torrent",
})

_RESOLUTION_RE = re.compile(r'(?<![0-9a-z])(1080|720|480)p(?![0-9a-z])', re.IGNORECASE)
_FILE_EXTENSION_RE = re.compile(r'\.([A-Za-z0-9]{1,8})\s*$')
_TAG_RE = re.compile(r'[\[\(]([^\[\]\(\)]*)[\]\)]')
_LEADING_TAG_RE = re.compile(r'^\s*\[(?P<group>[^\[\]]+)\]\s*')
_TRAILING_TAGS_RE = re.compile(r'(?:[\s_]*[\[\(][^\[\]\(\)]*[\]\)])+[\s_]*$')
_SEASON_SUFFIX_RE = re.compile(
    r'^(?P<series>.+?)[\s._-]+(?:s|season\s*)(?P<season>\d{1,3})$', re.IGNORECASE
)
_GROUP_SUFFIX_RE = re.compile(
    r'(?<![\s._-])(?<!web)-(?P<group>[^\s.\-\[\]\(\)]+)\s*$', re.IGNORECASE
)
_SEASON_WORD_RE = re.compile(r'(?:^|[\s._-])(?:s|season)$', re.IGNORECASE)

_BRACKETED_RE = re.compile(
    r'''
    ^\s*\[(?P<group>[^\[\]]+)\]                 (?# [Group])
    [\s_]*(?P<series>.+?)                       (?# Series Name)
    [\s_]+-[\s_]+                               (?# dash separator)
    (?P<episode>\d+)(?:v\d+)?                   (?# 05, optional v2 revision)
    (?![0-9a-z])(?P<rest>.*)$                   (?# trailing tags)
    ''',
    re.VERBOSE | re.IGNORECASE,
)

_DOTTED_RES = [
    re.compile(
        r'''
        ^(?P<series>.+?)[\s._-]+                (?# Series.Name and separator)
        s(?P<season>\d{1,3})[\s._-]*            (?# S02 and optional separator)
        e(?P<episode>\d{1,4})                   (?# E10)
        (?:[\s._-]*e\d{1,4})*                   (?# E11/etc of multi-episode releases)
        (?![0-9a-z])(?P<rest>.*)$               (?# Source.Quality.Etc-Group)
        ''',
        re.VERBOSE | re.IGNORECASE,
    ),
    re.compile(
        r'''
        ^(?P<series>.+?)[\s._-]+                (?# Series.Name and separator)
        (?P<season>\d{1,2})x(?P<episode>\d{1,3})  (?# 2x10)
        (?![0-9a-z])(?P<rest>.*)$               (?# Source.Quality.Etc-Group)
        ''',
        re.VERBOSE | re.IGNORECASE,
    ),
]

_NUMBERED_RE = re.compile(
    r'''
    ^(?P<series>.*?[^\s._-])[\s._-]+            (?# Series Name and separator)
    (?:(?:episode|ep)[\s.]*)?                   (?# optional Episode/Ep)
    \#?(?P<episode>\d{1,4})(?:v\d+)?            (?# 05, optional v2 revision)
    [\s_]*$
    ''',
    re.VERBOSE | re.IGNORECASE,
)


class ParsedTitle(NamedTuple):
    """Fields extracted by a single strategy."""

    series: str
    episode: int
    season: Optional[int] = None
    group: Optional[str] = None


ParseStrategy = Callable[[str], Optional[ParsedTitle]]


def _clean_series(text: str, dotted: bool = False) -> str:
    """Trim delimiters around a series name and collapse its separators."""
    text = text.replace('_', ' ')
    if dotted:
        text = text.replace('.', ' ')
    text = re.sub(r'\s+', ' ', text)
    return text.strip(' -.')


def _split_season(series: str) -> Tuple[str, Optional[int]]:
    """Split a trailing "S2" or "Season 2" off a series name."""
    match = _SEASON_SUFFIX_RE.match(series)
    if match:
        return match.group('series'), int(match.group('season'))
    return series, None


def _strip_leading_tag(text: str) -> Tuple[str, Optional[str]]:
    match = _LEADING_TAG_RE.match(text)
    if match:
        return text[match.end():], match.group('group').strip()
    return text, None


def _strip_trailing_tags(text: str) -> str:
    return _TRAILING_TAGS_RE.sub('', text)


def parse_bracketed(title: str) -> Optional[ParsedTitle]:
    """[Group] Series Name - NN [Resolution][Extension]"""
    match = _BRACKETED_RE.match(title)
    if not match:
        return None

    series, season = _split_season(_clean_series(match.group('series')))
    return ParsedTitle(
        series=series,
        episode=int(match.group('episode')),
        season=season,
        group=match.group('group').strip(),
    )


def parse_dotted(title: str) -> Optional[ParsedTitle]:
    """Series.Name.SxxEyy.Resolution-Group"""
    body, leading_group = _strip_leading_tag(title)

    for pattern in _DOTTED_RES:
        match = pattern.match(body)
        if not match:
            continue

        rest = _strip_trailing_tags(match.group('rest'))
        group_match = _GROUP_SUFFIX_RE.search(rest)
        group = group_match.group('group') if group_match else leading_group

        return ParsedTitle(
            series=_clean_series(match.group('series'), dotted=True),
            episode=int(match.group('episode')),
            season=int(match.group('season')),
            group=group,
        )

    return None


def parse_numbered(title: str) -> Optional[ParsedTitle]:
    """Fallback: a series name followed by a bare episode number."""
    body, group = _strip_leading_tag(title)
    body = _strip_trailing_tags(body)

    match = _NUMBERED_RE.match(body)
    if not match:
        return None

    # "Show Season 2" names a season pack, not an episode
    if _SEASON_WORD_RE.search(match.group('series')):
        return None

    series, season = _split_season(_clean_series(match.group('series')))
    return ParsedTitle(
        series=series,
        episode=int(match.group('episode')),
        season=season,
        group=group,
    )


# Conventions in priority order
STRATEGIES: List[Tuple[str, ParseStrategy]] = [
    ("bracketed", parse_bracketed),
    ("dotted", parse_dotted),
    ("numbered", parse_numbered),
]


def detect_resolution(title: str) -> Resolution:
    """Find a literal 1080p/720p/480p token anywhere in the title."""
    match = _RESOLUTION_RE.search(title)
    if match:
        return Resolution.from_token(f"{match.group(1)}p")
    return Resolution.UNKNOWN


def split_extension(title: str) -> Tuple[str, str]:
    """
    Separate the file type from a title.

    Returns the title without any filename extension, and the lower-cased
    extension taken from the filename or from a trailing bracketed tag
    (empty when neither names a known file type).
    """
    match = _FILE_EXTENSION_RE.search(title)
    if match and match.group(1).lower() in KNOWN_EXTENSIONS:
        return title[:match.start()], match.group(1).lower()

    trailing = _TRAILING_TAGS_RE.search(title)
    if trailing:
        for tag in reversed(_TAG_RE.findall(trailing.group(0))):
            for token in reversed(re.split(r'[\s.,_-]+', tag)):
                if token.lower() in KNOWN_EXTENSIONS:
                    return title, token.lower()

    return title, ""


def parse(
    raw_title: str,
    link: str = "",
    source: Optional[str] = None,
    strategies: Optional[Iterable[Tuple[str, ParseStrategy]]] = None,
) -> Union[Episode, ParseFailure]:
    """
    Parse a raw catalog title into an episode.

    Args:
        raw_title: Title exactly as advertised by the catalog
        link: Opaque locator carried through to the episode
        source: Name of the source the title came from
        strategies: Override the default strategy list (mainly for tests)

    Returns:
        The parsed Episode, or a ParseFailure when no strategy could find
        an episode number
    """
    title = " ".join(raw_title.split())
    if not title:
        return ParseFailure(title=raw_title, reason="empty title")

    stem, extension = split_extension(title)

    for name, strategy in (strategies if strategies is not None else STRATEGIES):
        parsed = strategy(stem)
        if parsed is None or not parsed.series:
            continue

        try:
            episode = Episode(
                series_name=parsed.series,
                season=parsed.season,
                episode_number=parsed.episode,
                release_group=parsed.group,
                resolution=detect_resolution(title),
                extension=extension,
                source_link=link,
                source=source,
            )
        except ValidationError as e:
            logger.debug(f"Strategy '{name}' produced invalid fields for '{title}': {e}")
            continue

        logger.debug(f"Parsed '{title}' with strategy '{name}': {episode!r}")
        return episode

    return ParseFailure(title=raw_title)


def parse_candidates(
    candidates: Iterable[RawCandidate],
) -> Tuple[List[Episode], List[ParseFailure]]:
    """
    Parse a batch of candidates, separating successes from failures.

    One bad title never aborts the batch; failures are logged and returned.
    """
    episodes: List[Episode] = []
    failures: List[ParseFailure] = []

    for candidate in candidates:
        result = parse(candidate.title, link=candidate.link, source=candidate.source)
        if isinstance(result, ParseFailure):
            logger.debug(f"Discarding unparsable title '{candidate.title}': {result.reason}")
            failures.append(result)
        else:
            episodes.append(result)

    return episodes, failures


__all__ = [
    "KNOWN_EXTENSIONS",
    "ParsedTitle",
    "ParseStrategy",
    "STRATEGIES",
    "parse",
    "parse_candidates",
    "parse_bracketed",
    "parse_dotted",
    "parse_numbered",
    "detect_resolution",
    "split_extension",
]
