"""
Configuration Manager - JSON-based settings and source configuration.

This module provides centralized configuration management for AniSift,
loading and saving user preferences and source options with validation
and default value management.
"""

import json
import logging
from pathlib import Path
from threading import Lock
from typing import Any, Dict, Optional, Type, TypeVar, Union

from pydantic import BaseModel, ValidationError

from anisift.core.config_defaults import get_default_settings, get_default_sources
from anisift.core.config_schemas import AppSettings, SourceConfig, SourcesConfig
from anisift.core.exceptions import ConfigurationError


logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)


class ConfigManager:
    """
    Manages application configuration with JSON persistence and validation.

    Corrupted files are backed up and replaced by defaults, so a bad edit
    never prevents the program from starting.
    """

    def __init__(self, config_dir: Optional[Union[str, Path]] = None):
        """
        Initialize configuration manager.

        Args:
            config_dir: Directory containing configuration files.
                       Defaults to '~/.config/anisift' if not specified.
        """
        self.config_dir = Path(config_dir or Path.home() / ".config" / "anisift").expanduser()
        self.config_dir.mkdir(parents=True, exist_ok=True)

        self._settings_file = self.config_dir / "settings.json"
        self._sources_file = self.config_dir / "sources.json"

        self._lock = Lock()
        self._settings: Optional[AppSettings] = None
        self._sources: Optional[SourcesConfig] = None

        self._load_configurations()

    def _load_configurations(self) -> None:
        """Load all configuration files with error handling."""
        try:
            self._settings = self._load_file(self._settings_file, AppSettings, get_default_settings)
            self._sources = self._load_file(self._sources_file, SourcesConfig, get_default_sources)
            logger.info("Configuration loaded successfully")
        except OSError as e:
            logger.error(f"Failed to load configuration: {e}")
            raise ConfigurationError(f"Configuration loading failed: {e}", str(self.config_dir))

    def _load_file(self, path: Path, model: Type[ModelT], default_factory) -> ModelT:
        """Load and validate one configuration file, falling back to defaults."""
        if not path.exists():
            logger.info(f"{path.name} not found, creating default configuration")
            config = default_factory()
            self._save_file(path, config)
            return config

        try:
            with open(path, 'r', encoding='utf-8') as f:
                data = json.load(f)
            return model.model_validate(data)
        except (json.JSONDecodeError, ValidationError) as e:
            logger.warning(f"Invalid {path.name}, using defaults: {e}")
            backup_path = path.with_suffix('.json.backup')
            path.replace(backup_path)
            logger.info(f"Corrupted configuration backed up to {backup_path}")

            config = default_factory()
            self._save_file(path, config)
            return config

    def _save_file(self, path: Path, config: BaseModel) -> None:
        """Save a configuration model with atomic write."""
        temp_file = path.with_suffix('.tmp')
        try:
            with open(temp_file, 'w', encoding='utf-8') as f:
                json.dump(config.model_dump(mode='json'), f, indent=2, ensure_ascii=False)
            temp_file.replace(path)
            logger.debug(f"{path.name} saved successfully")
        except OSError as e:
            if temp_file.exists():
                temp_file.unlink()
            raise ConfigurationError(f"Failed to save {path.name}: {e}", str(path))

    @property
    def settings(self) -> AppSettings:
        """Get current application settings (thread-safe)."""
        with self._lock:
            if self._settings is None:
                self._settings = self._load_file(self._settings_file, AppSettings, get_default_settings)
            return self._settings

    @property
    def sources(self) -> SourcesConfig:
        """Get current sources configuration (thread-safe)."""
        with self._lock:
            if self._sources is None:
                self._sources = self._load_file(self._sources_file, SourcesConfig, get_default_sources)
            return self._sources

    def update_setting(self, key_path: str, value: Any) -> None:
        """
        Update a specific setting using dot notation.

        Args:
            key_path: Dot-separated path to the setting (e.g., 'output.name_style')
            value: New value for the setting

        Raises:
            ConfigurationError: If key path is invalid or value is invalid
        """
        with self._lock:
            settings_dict = self.settings_dict()

            keys = key_path.split('.')
            current = settings_dict
            for key in keys[:-1]:
                if not isinstance(current.get(key), dict):
                    raise ConfigurationError(f"Invalid setting path: {key_path}")
                current = current[key]

            final_key = keys[-1]
            if final_key not in current:
                raise ConfigurationError(f"Invalid setting key: {final_key}")

            current[final_key] = value

            try:
                updated_settings = AppSettings.model_validate(settings_dict)
            except ValidationError as e:
                raise ConfigurationError(f"Invalid setting value: {e}")

            self._settings = updated_settings
            self._save_file(self._settings_file, updated_settings)
            logger.info(f"Setting updated: {key_path} = {value}")

    def settings_dict(self) -> Dict[str, Any]:
        return (self._settings or get_default_settings()).model_dump(mode='json')

    def update_source_config(self, source_name: str, config: Dict[str, Any]) -> None:
        """
        Update configuration for a specific source.

        Raises:
            ConfigurationError: If configuration is invalid
        """
        with self._lock:
            sources_dict = (self._sources or get_default_sources()).model_dump(mode='json')
            sources_dict['sources'].setdefault(source_name, SourceConfig().model_dump())
            sources_dict['sources'][source_name].update(config)

            try:
                updated_sources = SourcesConfig.model_validate(sources_dict)
            except ValidationError as e:
                raise ConfigurationError(f"Invalid source configuration: {e}")

            self._sources = updated_sources
            self._save_file(self._sources_file, updated_sources)
            logger.info(f"Source configuration updated: {source_name}")

    def enable_source(self, source_name: str) -> None:
        """Enable a source."""
        self.update_source_config(source_name, {"enabled": True})

    def disable_source(self, source_name: str) -> None:
        """Disable a source."""
        self.update_source_config(source_name, {"enabled": False})

    def reset_to_defaults(self) -> None:
        """Reset all configuration to default values."""
        with self._lock:
            logger.warning("Resetting configuration to defaults")
            self._settings = get_default_settings()
            self._sources = get_default_sources()
            self._save_file(self._settings_file, self._settings)
            self._save_file(self._sources_file, self._sources)


__all__ = ["ConfigManager"]
