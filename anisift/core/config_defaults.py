"""
Configuration Defaults - Default configuration templates.

This module provides the default settings and source configuration
written on first run.
"""

from anisift.core.config_schemas import AppSettings, SourceConfig, SourcesConfig


def get_default_settings() -> AppSettings:
    """
    Get default application settings.

    Returns:
        AppSettings instance with sensible defaults
    """
    return AppSettings()


def get_default_sources() -> SourcesConfig:
    """
    Get default sources configuration.

    Nyaa is searched out of the box; the RSS source needs a feed URL
    and stays disabled until one is configured.
    """
    return SourcesConfig(sources={
        "nyaa": SourceConfig(
            enabled=True,
            priority=1,
            options={"category": "1_2", "filter": "0"},
        ),
        "rss": SourceConfig(
            enabled=False,
            priority=2,
            options={"url": None},
        ),
    })


__all__ = [
    "get_default_settings",
    "get_default_sources",
]
