"""
Source Manager - Build the set of sources used for one search.

Combines the source configuration file with command-line selections and
option overrides, and creates one independent adapter instance per
source.
"""

import logging
from typing import Any, Dict, Iterable, List, Optional, Tuple

from anisift.core.config_manager import ConfigManager
from anisift.core.exceptions import ConfigurationError
from anisift.sources import BaseSource, create_source, supported_source_names


logger = logging.getLogger(__name__)


def parse_source_option(value: str) -> Tuple[str, str, Any]:
    """
    Parse a ``SOURCE.OPTION=VALUE`` override (``SOURCE.OPTION`` sets a flag).

    Raises:
        ConfigurationError: If the override is malformed
    """
    key, sep, raw = value.partition('=')
    source, dot, option = key.strip().partition('.')
    if not dot or not source or not option:
        raise ConfigurationError(
            f"Invalid source option '{value}': expected SOURCE.OPTION=VALUE"
        )
    return source, option, raw if sep else True


class SourceManager:
    """Creates configured source adapters for a search."""

    def __init__(self, config_manager: ConfigManager):
        self.config_manager = config_manager

    def resolve_names(self, requested: Optional[Iterable[str]] = None) -> List[str]:
        """
        Decide which sources to search.

        Requested names may be comma-separated; ``all`` selects every
        supported source. Without a request, the enabled sources from the
        configuration are used, or every supported source if none is enabled.

        Raises:
            ConfigurationError: If a requested source is unknown
        """
        names: List[str] = []
        for value in requested or ():
            for name in (part.strip() for part in value.split(',')):
                if name == "all":
                    names = []
                    continue
                if name not in supported_source_names():
                    raise ConfigurationError(
                        f"Unknown source '{name}'. Valid sources are "
                        f"{', '.join(supported_source_names())}"
                    )
                if name not in names:
                    names.append(name)

        if names:
            return names

        if requested:
            return supported_source_names()

        enabled = list(self.config_manager.sources.get_enabled_sources())
        return enabled or supported_source_names()

    def create_sources(
        self,
        requested: Optional[Iterable[str]] = None,
        overrides: Optional[Iterable[str]] = None,
    ) -> List[BaseSource]:
        """
        Create adapters for the selected sources.

        Args:
            requested: Source names from the command line
            overrides: ``SOURCE.OPTION=VALUE`` strings from the command line

        Raises:
            ConfigurationError: If a source or option is invalid
        """
        names = self.resolve_names(requested)

        extra: Dict[str, Dict[str, Any]] = {}
        for value in overrides or ():
            source, option, raw = parse_source_option(value)
            if source not in supported_source_names():
                raise ConfigurationError(f"Unknown source '{source}' in option '{value}'")
            extra.setdefault(source, {})[option] = raw

        sources = []
        for name in names:
            source_config = self.config_manager.sources.get_source(name)
            options = dict(source_config.options) if source_config else {}
            options.update(extra.get(name, {}))
            options = {key: value for key, value in options.items() if value is not None}

            sources.append(create_source(name, options))
            logger.debug(f"Created source {name} with options {options}")

        logger.info(f"Searching {len(sources)} sources: {', '.join(names)}")
        return sources


__all__ = ["SourceManager", "parse_source_option"]
