"""
Core Exceptions - Custom exception classes for AniSift.

This module defines the error taxonomy used throughout AniSift. Parse
failures are not exceptions (see ``ParseFailure`` in the models module);
source failures are contained by the pool builder, while query errors are
always surfaced to the caller.
"""

from typing import Optional, Any


class AniSiftError(Exception):
    """Base exception class for all AniSift-specific errors."""

    def __init__(self, message: str, details: Optional[Any] = None):
        """
        Initialize AniSift error.

        Args:
            message: Human-readable error message
            details: Additional error details for debugging
        """
        super().__init__(message)
        self.message = message
        self.details = details

    def __str__(self) -> str:
        return self.message


class ConfigurationError(AniSiftError):
    """Raised when configuration-related errors occur."""

    def __init__(self, message: str, config_path: Optional[str] = None, details: Optional[Any] = None):
        """
        Initialize configuration error.

        Args:
            message: Error description
            config_path: Path to the problematic configuration file
            details: Additional error context
        """
        super().__init__(message, details)
        self.config_path = config_path


class SourceError(AniSiftError):
    """Raised when a source adapter cannot be reached or returns malformed data."""

    def __init__(self, message: str, source_name: Optional[str] = None, details: Optional[Any] = None):
        super().__init__(message, details)
        self.source_name = source_name


class NetworkError(AniSiftError):
    """Raised when network-related errors occur."""

    def __init__(self, message: str, url: Optional[str] = None, status_code: Optional[int] = None, details: Optional[Any] = None):
        """
        Initialize network error.

        Args:
            message: Error description
            url: URL that caused the error
            status_code: HTTP status code if applicable
            details: Additional error context
        """
        super().__init__(message, details)
        self.url = url
        self.status_code = status_code


class InvalidQueryError(AniSiftError):
    """
    Raised when a query cannot be built from the given criteria.

    Carries the criterion and the raw value so the user can correct the input.
    """

    def __init__(self, message: str, criterion: Optional[str] = None, value: Optional[Any] = None, details: Optional[Any] = None):
        super().__init__(message, details)
        self.criterion = criterion
        self.value = value


class DownloadError(AniSiftError):
    """Raised when a selected episode cannot be downloaded."""

    def __init__(self, message: str, episode_title: Optional[str] = None, details: Optional[Any] = None):
        super().__init__(message, details)
        self.episode_title = episode_title


# Export all exception classes
__all__ = [
    "AniSiftError",
    "ConfigurationError",
    "SourceError",
    "NetworkError",
    "InvalidQueryError",
    "DownloadError",
]
