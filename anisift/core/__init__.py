"""
Core Layer - Episode parsing, selection and application services.

This module contains the title parser, the selection engine, the pool
builder, configuration handling and the data models that power AniSift.
"""

from anisift.core.config_manager import ConfigManager
from anisift.core.config_schemas import AppSettings, SourcesConfig, SourceConfig
from anisift.core.config_defaults import get_default_settings, get_default_sources
from anisift.core.exceptions import (
    AniSiftError,
    ConfigurationError,
    DownloadError,
    InvalidQueryError,
    NetworkError,
    SourceError,
)
from anisift.core.models import (
    Episode,
    IdentityKey,
    ParseFailure,
    Query,
    RawCandidate,
    Resolution,
)
from anisift.core.naming import NameStyle, format_episode
from anisift.core.parser import parse
from anisift.core.pool import EpisodePool, EpisodePoolBuilder, build_pool
from anisift.core.query_builder import QueryBuilder
from anisift.core.selection import select

__all__ = [
    # Data Models
    "Episode",
    "IdentityKey",
    "ParseFailure",
    "Query",
    "RawCandidate",
    "Resolution",
    # Parsing and Selection
    "parse",
    "select",
    "QueryBuilder",
    "EpisodePool",
    "EpisodePoolBuilder",
    "build_pool",
    "NameStyle",
    "format_episode",
    # Configuration Management
    "ConfigManager",
    "AppSettings",
    "SourcesConfig",
    "SourceConfig",
    "get_default_settings",
    "get_default_sources",
    # Exceptions
    "AniSiftError",
    "ConfigurationError",
    "DownloadError",
    "InvalidQueryError",
    "NetworkError",
    "SourceError",
]
