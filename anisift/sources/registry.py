"""
Source Registry - The catalog sources AniSift knows how to search.

This module maps source names to their adapter classes and creates
configured instances on demand.
"""

from typing import Any, Dict, List, Optional, Type

from anisift.core.exceptions import ConfigurationError
from anisift.sources.base import BaseSource
from anisift.sources.nyaa import NyaaSource
from anisift.sources.rss import RssSource


SUPPORTED_SOURCES: Dict[str, Type[BaseSource]] = {
    "nyaa": NyaaSource,
    "rss": RssSource,
}


def supported_source_names() -> List[str]:
    """Names of all supported sources, in registration order."""
    return list(SUPPORTED_SOURCES)


def create_source(name: str, options: Optional[Dict[str, Any]] = None) -> BaseSource:
    """
    Create a source adapter by name.

    Args:
        name: Registered source name
        options: Source-specific option values

    Returns:
        Configured source instance

    Raises:
        ConfigurationError: If the source is unknown or an option is invalid
    """
    source_class = SUPPORTED_SOURCES.get(name)
    if source_class is None:
        raise ConfigurationError(
            f"Unknown source '{name}'. Valid sources are {', '.join(supported_source_names())}"
        )
    return source_class(options=options)


def get_source_info(name: str) -> Dict[str, Any]:
    """
    Get source information for display purposes.

    Raises:
        ConfigurationError: If the source is unknown
    """
    metadata = create_source(name).metadata
    return {
        "name": metadata.name,
        "description": metadata.description,
        "website": metadata.website,
        "options": [option.model_dump() for option in metadata.options],
    }


__all__ = [
    "SUPPORTED_SOURCES",
    "supported_source_names",
    "create_source",
    "get_source_info",
]
