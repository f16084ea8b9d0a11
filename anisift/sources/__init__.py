"""
Source Layer - Catalog adapters producing raw release titles.

This module contains the source adapter interface and the individual
catalog implementations searched by AniSift.
"""

from anisift.sources.base import BaseSource, SourceMetadata, SourceOption
from anisift.sources.registry import (
    SUPPORTED_SOURCES,
    create_source,
    get_source_info,
    supported_source_names,
)

__all__ = [
    "BaseSource",
    "SourceMetadata",
    "SourceOption",
    "SUPPORTED_SOURCES",
    "create_source",
    "get_source_info",
    "supported_source_names",
]
