"""
Configuration Schemas - Pydantic models for configuration validation.

This module defines the data structures and validation rules for
application settings, default selection criteria and source
configuration using Pydantic models.
"""

import logging
from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, Field, field_validator, model_validator


logger = logging.getLogger(__name__)


class SearchSettings(BaseModel):
    """Search-related configuration settings."""

    search_timeout: int = Field(
        default=30,
        ge=1,
        le=300,
        description="Time limit for each source in seconds"
    )
    max_concurrent_sources: int = Field(
        default=5,
        ge=1,
        le=20,
        description="Maximum number of sources to query concurrently"
    )
    min_query_length: int = Field(
        default=2,
        ge=1,
        le=10,
        description="Minimum search query length"
    )


class FilterSettings(BaseModel):
    """
    Default selection criteria, applied before command-line options.

    Values use the same syntax as the command line, e.g. seasons
    ``["1..3"]`` or resolutions ``["720p,1080p"]``.
    """

    seasons: List[str] = Field(default_factory=list, description="Season numbers or ranges")
    episodes: List[str] = Field(default_factory=list, description="Episode numbers or ranges")
    resolutions: List[str] = Field(default_factory=list, description="Acceptable resolutions")
    extensions: List[str] = Field(default_factory=list, description="Acceptable file types")
    groups: List[str] = Field(default_factory=list, description="Acceptable release groups")
    match_latest: bool = Field(default=False, description="Only match the latest episode")
    allow_duplicates: bool = Field(default=False, description="Keep several releases of an episode")


class OutputSettings(BaseModel):
    """Output and download configuration settings."""

    name_style: Literal["anime", "western"] = Field(
        default="anime",
        description="Style used to print episode names"
    )
    outdir: Optional[str] = Field(
        default=None,
        description="Directory for downloaded torrent files (current directory if unset)"
    )
    seen_file: Optional[str] = Field(
        default=None,
        description="File recording already downloaded episodes"
    )
    interactive: bool = Field(
        default=True,
        description="Ask before downloading"
    )


class LoggingSettings(BaseModel):
    """Logging configuration settings."""

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="WARNING",
        description="Logging level"
    )

    @field_validator('level', mode='before')
    @classmethod
    def validate_level(cls, v: Any) -> Any:
        return v.upper() if isinstance(v, str) else v


class AppSettings(BaseModel):
    """Main application settings container."""

    search: SearchSettings = Field(default_factory=SearchSettings)
    filters: FilterSettings = Field(default_factory=FilterSettings)
    output: OutputSettings = Field(default_factory=OutputSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)


class SourceConfig(BaseModel):
    """Configuration for an individual source."""

    enabled: bool = Field(
        default=False,
        description="Whether the source is searched by default"
    )
    priority: int = Field(
        default=1,
        ge=1,
        le=100,
        description="Source priority (lower numbers = higher priority)"
    )
    options: Dict[str, Any] = Field(
        default_factory=dict,
        description="Source-specific option values"
    )

    @field_validator('options')
    @classmethod
    def validate_options(cls, v: Dict[str, Any]) -> Dict[str, Any]:
        """Validate the generic networking options."""
        if 'timeout' in v and (not isinstance(v['timeout'], int) or v['timeout'] < 1):
            raise ValueError("timeout must be a positive integer")

        if 'max_retries' in v and (not isinstance(v['max_retries'], int) or v['max_retries'] < 0):
            raise ValueError("max_retries must be a non-negative integer")

        return v


class SourcesConfig(BaseModel):
    """Sources configuration container."""

    sources: Dict[str, SourceConfig] = Field(
        default_factory=dict,
        description="Individual source configurations"
    )

    @model_validator(mode='after')
    def validate_source_priorities(self) -> 'SourcesConfig':
        """Warn about sources sharing a priority."""
        priorities = {}
        for name, config in self.sources.items():
            if config.priority in priorities:
                logger.warning(
                    f"Duplicate priority {config.priority} for sources "
                    f"{name} and {priorities[config.priority]}"
                )
            priorities[config.priority] = name

        return self

    def get_enabled_sources(self) -> Dict[str, SourceConfig]:
        """Get all enabled sources sorted by priority."""
        enabled = {
            name: config for name, config in self.sources.items()
            if config.enabled
        }

        return dict(sorted(
            enabled.items(),
            key=lambda item: item[1].priority
        ))

    def get_source(self, name: str) -> Optional[SourceConfig]:
        """Get configuration for a specific source."""
        return self.sources.get(name)


# Export all configuration models
__all__ = [
    "SearchSettings",
    "FilterSettings",
    "OutputSettings",
    "LoggingSettings",
    "AppSettings",
    "SourceConfig",
    "SourcesConfig",
]
