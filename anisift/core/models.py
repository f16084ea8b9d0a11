"""
Core Data Models - Pydantic models for type safety and validation.

This module defines the core data structures used throughout AniSift:
parsed episodes and their identity, raw catalog candidates, parse failures
and the immutable query evaluated by the selection engine. All models are
frozen once created.
"""

from enum import Enum
from typing import FrozenSet, List, NamedTuple, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class Resolution(str, Enum):
    """Video resolutions recognised in release titles."""

    R480P = "480p"
    R720P = "720p"
    R1080P = "1080p"
    UNKNOWN = "unknown"

    @classmethod
    def from_token(cls, token: str) -> "Resolution":
        """Map a literal resolution token to its enum member, or UNKNOWN."""
        token = token.strip().lower()
        for resolution in cls:
            if resolution is not cls.UNKNOWN and resolution.value == token:
                return resolution
        return cls.UNKNOWN

    @property
    def height(self) -> int:
        """Get the height in pixels for this resolution (0 when unknown)."""
        if self is Resolution.UNKNOWN:
            return 0
        return int(self.value.replace('p', ''))

    def __str__(self) -> str:
        return self.value


def normalize_series_name(name: str) -> str:
    """Fold case and whitespace so that differently formatted names compare equal."""
    return " ".join(name.split()).casefold()


def normalize_extension(extension: str) -> str:
    """Lower-case an extension token and drop any leading dot."""
    return extension.strip().lstrip('.').lower()


class IdentityKey(NamedTuple):
    """The (series, season, episode) triple defining "the same episode"."""

    series: str
    season: int
    episode: int


class Episode(BaseModel):
    """
    Represents one release of an episode as advertised by a catalog.

    Identity (see ``identity``) only depends on the series, season and
    episode number; group, resolution and extension describe the release
    variant.
    """

    model_config = ConfigDict(frozen=True)

    series_name: str = Field(..., min_length=1, description="Series title, display casing")
    season: Optional[int] = Field(None, ge=0, description="Season number if the title encodes one")
    episode_number: int = Field(..., ge=0, description="Episode number")
    release_group: Optional[str] = Field(None, description="Release group tag")
    resolution: Resolution = Field(Resolution.UNKNOWN, description="Video resolution")
    extension: str = Field("", description="Lower-cased file type token")
    source_link: str = Field("", description="Locator used by the download stage")
    source: Optional[str] = Field(None, description="Name of the source that produced it")

    @field_validator('series_name')
    @classmethod
    def validate_series_name(cls, v: str) -> str:
        """Collapse internal whitespace."""
        return " ".join(v.split())

    @field_validator('release_group')
    @classmethod
    def validate_release_group(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return v
        v = v.strip()
        return v or None

    @field_validator('extension')
    @classmethod
    def validate_extension(cls, v: str) -> str:
        return normalize_extension(v)

    @property
    def season_or_default(self) -> int:
        """Season number, with episodic titles lacking one counted as season 1."""
        return 1 if self.season is None else self.season

    @property
    def normalized_series(self) -> str:
        return normalize_series_name(self.series_name)

    @property
    def identity(self) -> IdentityKey:
        """Identity key, independent of group, resolution and extension."""
        return IdentityKey(self.normalized_series, self.season_or_default, self.episode_number)

    def __str__(self) -> str:
        return f"{self.series_name} S{self.season_or_default:02d}E{self.episode_number:02d}"

    def __repr__(self) -> str:
        return (
            f"Episode(series_name='{self.series_name}', season={self.season}, "
            f"episode_number={self.episode_number}, release_group={self.release_group!r}, "
            f"resolution='{self.resolution}')"
        )


class RawCandidate(BaseModel):
    """An unparsed (title, link) pair produced by a source adapter."""

    model_config = ConfigDict(frozen=True)

    title: str
    link: str = ""
    source: Optional[str] = None


class ParseFailure(BaseModel):
    """Result of a title that did not yield an episode number."""

    model_config = ConfigDict(frozen=True)

    title: str
    reason: str = "no episode number found"

    def __bool__(self) -> bool:
        return False


class Query(BaseModel):
    """
    Declarative selection criteria.

    An empty set always means "unconstrained on that dimension". Queries are
    normally produced by ``QueryBuilder`` rather than constructed directly.
    """

    model_config = ConfigDict(frozen=True)

    seasons: FrozenSet[int] = Field(default_factory=frozenset)
    episodes: FrozenSet[int] = Field(default_factory=frozenset)
    match_latest: bool = False
    resolutions: FrozenSet[Resolution] = Field(default_factory=frozenset)
    extensions: FrozenSet[str] = Field(default_factory=frozenset)
    groups: FrozenSet[str] = Field(default_factory=frozenset)
    allow_duplicates: bool = False

    @field_validator('seasons', 'episodes')
    @classmethod
    def validate_numbers(cls, v: FrozenSet[int]) -> FrozenSet[int]:
        if any(n < 0 for n in v):
            raise ValueError("season and episode numbers must be non-negative")
        return v

    @field_validator('extensions')
    @classmethod
    def validate_extensions(cls, v: FrozenSet[str]) -> FrozenSet[str]:
        return frozenset(normalize_extension(ext) for ext in v)

    @field_validator('groups')
    @classmethod
    def validate_groups(cls, v: FrozenSet[str]) -> FrozenSet[str]:
        return frozenset(group.strip() for group in v)

    @property
    def is_unconstrained(self) -> bool:
        """True when no attribute criterion narrows the pool."""
        return not (self.seasons or self.episodes or self.resolutions
                    or self.extensions or self.groups)


# Type aliases for better code readability
EpisodeList = List[Episode]
CandidateList = List[RawCandidate]

# Export all models and types
__all__ = [
    "Resolution",
    "IdentityKey",
    "Episode",
    "RawCandidate",
    "ParseFailure",
    "Query",
    "EpisodeList",
    "CandidateList",
    "normalize_series_name",
    "normalize_extension",
]
