"""
Query Builder - Strongly-typed construction of selection queries.

Criteria are accumulated by applying validated transformations in call
order: configuration-file defaults first, then command-line values. The
wildcard ``any`` is handled at the value-parsing boundary and turned into
an explicit reset of that dimension, so it always clears whatever was
accumulated before it.
"""

import logging
import re
from typing import Iterable, List, Optional, Set

from pydantic import ValidationError

from anisift.core.exceptions import InvalidQueryError
from anisift.core.models import Query, Resolution, normalize_extension


logger = logging.getLogger(__name__)

ANY_TOKEN = "any"

_RANGE_RE = re.compile(r'^\s*(?P<start>-?\d+)\s*(?:\.\.\s*(?P<end>-?\d+)\s*)?$')


def parse_int_range(value: str, criterion: str) -> List[int]:
    """
    Parse ``N``, ``A..B`` or a comma-separated list of those.

    Raises:
        InvalidQueryError: On malformed, negative or descending ranges
    """
    numbers: List[int] = []

    for part in value.split(','):
        match = _RANGE_RE.match(part)
        if not match:
            raise InvalidQueryError(
                f"Invalid {criterion} '{value}': expected a number or a range like 1..5",
                criterion=criterion,
                value=value,
            )

        start = int(match.group('start'))
        end = int(match.group('end')) if match.group('end') is not None else start

        if start < 0 or end < 0:
            raise InvalidQueryError(
                f"Invalid {criterion} '{value}': numbers must be non-negative",
                criterion=criterion,
                value=value,
            )
        if end < start:
            raise InvalidQueryError(
                f"Invalid {criterion} '{value}': range {start}..{end} is empty",
                criterion=criterion,
                value=value,
            )

        numbers.extend(range(start, end + 1))

    return numbers


def parse_list(value: str, criterion: str) -> List[str]:
    """Split a comma-separated value, rejecting empty items."""
    items = [item.strip() for item in value.split(',')]
    if not items or any(not item for item in items):
        raise InvalidQueryError(
            f"Invalid {criterion} '{value}': empty list item",
            criterion=criterion,
            value=value,
        )
    return items


def _split_wildcard(value: str, criterion: str) -> Optional[List[str]]:
    """
    Return None when the value is the wildcard, otherwise its items.

    Mixing the wildcard with concrete values is contradictory and rejected.
    """
    items = parse_list(value, criterion)
    wildcards = [item for item in items if item.lower() == ANY_TOKEN]
    if not wildcards:
        return items
    if len(wildcards) != len(items):
        raise InvalidQueryError(
            f"Invalid {criterion} '{value}': '{ANY_TOKEN}' cannot be combined with other values",
            criterion=criterion,
            value=value,
        )
    return None


class QueryBuilder:
    """
    Accumulates selection criteria and produces an immutable Query.

    Every method validates its input, applies one transformation and
    returns the builder so calls can be chained.
    """

    def __init__(self) -> None:
        self._seasons: Set[int] = set()
        self._episodes: Set[int] = set()
        self._resolutions: Set[Resolution] = set()
        self._extensions: Set[str] = set()
        self._groups: Set[str] = set()
        self._match_latest = False
        self._allow_duplicates = False

    def add_seasons(self, value: str) -> "QueryBuilder":
        self._seasons.update(parse_int_range(value, "season"))
        return self

    def add_episodes(self, value: str) -> "QueryBuilder":
        self._episodes.update(parse_int_range(value, "episode"))
        return self

    def add_groups(self, value: str) -> "QueryBuilder":
        self._groups.update(parse_list(value, "group"))
        return self

    def add_resolutions(self, value: str) -> "QueryBuilder":
        """Add acceptable resolutions; the wildcard resets the dimension."""
        items = _split_wildcard(value, "resolution")
        if items is None:
            return self.any_resolution()

        for item in items:
            resolution = Resolution.from_token(item)
            if resolution is Resolution.UNKNOWN and item.lower() != Resolution.UNKNOWN.value:
                raise InvalidQueryError(
                    f"Invalid resolution '{item}': valid values are 1080p, 720p, 480p and any",
                    criterion="resolution",
                    value=value,
                )
            self._resolutions.add(resolution)
        return self

    def add_extensions(self, value: str) -> "QueryBuilder":
        """Add acceptable file types; the wildcard resets the dimension."""
        items = _split_wildcard(value, "type")
        if items is None:
            return self.any_extension()

        for item in items:
            extension = normalize_extension(item)
            if not extension:
                raise InvalidQueryError(
                    f"Invalid file type '{item}'",
                    criterion="type",
                    value=value,
                )
            self._extensions.add(extension)
        return self

    def any_resolution(self) -> "QueryBuilder":
        self._resolutions.clear()
        return self

    def any_extension(self) -> "QueryBuilder":
        self._extensions.clear()
        return self

    def clear_all(self) -> "QueryBuilder":
        """Drop every attribute criterion, keeping the latest/duplicate flags."""
        self._seasons.clear()
        self._episodes.clear()
        self._resolutions.clear()
        self._extensions.clear()
        self._groups.clear()
        return self

    def match_latest(self, enabled: bool = True) -> "QueryBuilder":
        self._match_latest = enabled
        return self

    def allow_duplicates(self, enabled: bool = True) -> "QueryBuilder":
        self._allow_duplicates = enabled
        return self

    def extend(
        self,
        seasons: Iterable[str] = (),
        episodes: Iterable[str] = (),
        groups: Iterable[str] = (),
        resolutions: Iterable[str] = (),
        extensions: Iterable[str] = (),
    ) -> "QueryBuilder":
        """Apply several values per criterion, in order."""
        for value in seasons:
            self.add_seasons(value)
        for value in episodes:
            self.add_episodes(value)
        for value in groups:
            self.add_groups(value)
        for value in resolutions:
            self.add_resolutions(value)
        for value in extensions:
            self.add_extensions(value)
        return self

    def build(self) -> Query:
        """
        Freeze the accumulated criteria.

        Raises:
            InvalidQueryError: If the criteria do not form a valid query
        """
        try:
            query = Query(
                seasons=frozenset(self._seasons),
                episodes=frozenset(self._episodes),
                match_latest=self._match_latest,
                resolutions=frozenset(self._resolutions),
                extensions=frozenset(self._extensions),
                groups=frozenset(self._groups),
                allow_duplicates=self._allow_duplicates,
            )
        except ValidationError as e:
            raise InvalidQueryError(f"Invalid query: {e}", details=str(e))

        logger.debug(f"Built query: {query!r}")
        return query


__all__ = [
    "ANY_TOKEN",
    "QueryBuilder",
    "parse_int_range",
    "parse_list",
]
