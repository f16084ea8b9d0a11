"""
CLI Context - Global application state shared by the commands.

The main callback creates the configuration manager once per invocation;
commands fetch it from here to avoid circular imports.
"""

from typing import Optional

from anisift.core import ConfigManager


_config_manager: Optional[ConfigManager] = None
_debug = False


def get_config_manager() -> ConfigManager:
    """Get the global configuration manager instance."""
    if _config_manager is None:
        raise RuntimeError("Configuration manager not initialized")
    return _config_manager


def set_config_manager(config_manager: ConfigManager) -> None:
    """Set the global configuration manager instance."""
    global _config_manager
    _config_manager = config_manager



def is_debug() -> bool:
    """Whether --debug was given for this invocation."""
    return _debug


def set_debug(enabled: bool) -> None:
    global _debug
    _debug = enabled


__all__ = ["get_config_manager", "set_config_manager", "is_debug", "set_debug"]
