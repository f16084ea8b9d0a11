"""
AniSift - Find episodes across release catalogs and pick the ones you want.

Release titles from several catalogs are parsed into structured episode
metadata and filtered by season, episode, resolution, file type and
release group, with duplicate suppression and "latest episode" matching.
"""

__version__ = "0.1.0"

# Package metadata
__title__ = "anisift"
__description__ = "Find and filter episode releases across torrent catalogs"
__license__ = "MIT"

# Version info tuple for programmatic access
VERSION_INFO = tuple(map(int, __version__.split(".")))

from anisift.core.models import Episode, Query, Resolution, ParseFailure
from anisift.core.parser import parse
from anisift.core.selection import select
from anisift.core.query_builder import QueryBuilder

__all__ = [
    "__version__",
    "Episode",
    "Query",
    "Resolution",
    "ParseFailure",
    "QueryBuilder",
    "parse",
    "select",
]
