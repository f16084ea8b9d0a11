"""
Base Source Interface - Abstract base class for catalog source adapters.

This module defines the interface that all catalog sources must implement:
a name, a list of configurable options and an asynchronous ``fetch`` that
returns raw (title, link) candidates for a search string. Sources do not
share mutable state; each owns its HTTP session.
"""

import asyncio
import logging
import time
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional
from urllib.parse import urljoin, urlparse

import aiohttp
from pydantic import BaseModel, Field

from anisift import __version__
from anisift.core.exceptions import ConfigurationError, NetworkError
from anisift.core.models import RawCandidate


logger = logging.getLogger(__name__)


class SourceOption(BaseModel):
    """A source-specific option that can be set from configuration or the CLI."""

    name: str = Field(..., description="Option name, e.g. 'category'")
    description: str = Field(default="", description="Help text")
    argument: Optional[str] = Field(
        default=None,
        description="Metavar of the required value, or None for a plain flag"
    )
    default: Optional[Any] = Field(default=None, description="Value used when unset")

    @property
    def takes_value(self) -> bool:
        return self.argument is not None


class SourceMetadata(BaseModel):
    """Metadata information for a source."""

    name: str = Field(..., description="Source name used on the command line")
    description: str = Field(default="", description="Source description")
    website: Optional[str] = Field(None, description="Catalog website URL")
    options: List[SourceOption] = Field(default_factory=list, description="Configurable options")
    rate_limit: float = Field(default=1.0, description="Minimum seconds between requests")


class BaseSource(ABC):
    """
    Abstract base class for catalog sources.

    Subclasses provide ``metadata`` and ``fetch``; the base class handles
    option storage, rate limiting, retries and the HTTP session.
    """

    def __init__(self, options: Optional[Dict[str, Any]] = None):
        """
        Initialize the source with option values.

        Args:
            options: Source-specific option values keyed by option name

        Raises:
            ConfigurationError: If an option is not supported by this source
        """
        self.options: Dict[str, Any] = {
            option.name: option.default for option in self.metadata.options
        }
        self._session: Optional[aiohttp.ClientSession] = None
        self._last_request_time = 0.0

        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")

        for name, value in (options or {}).items():
            self.configure(name, value)

        self.timeout = self.options.get('timeout') or 30
        self.max_retries = self.options.get('max_retries', 2)
        self.retry_delay = self.options.get('retry_delay', 1.0)
        self.user_agent = f"AniSift/{__version__}"

    @property
    @abstractmethod
    def metadata(self) -> SourceMetadata:
        """Get source metadata information."""
        pass

    @property
    def name(self) -> str:
        return self.metadata.name

    @property
    def configurable_options(self) -> List[SourceOption]:
        return self.metadata.options

    def configure(self, option: str, value: Any = True) -> None:
        """
        Set a source-specific option.

        Generic networking options (timeout, max_retries, retry_delay) are
        accepted by every source.

        Raises:
            ConfigurationError: If the option is unknown to this source
        """
        known = {opt.name for opt in self.metadata.options}
        if option not in known | {'timeout', 'max_retries', 'retry_delay'}:
            raise ConfigurationError(
                f"Source '{self.name}' has no option '{option}'. "
                f"Valid options: {', '.join(sorted(known)) or 'none'}"
            )
        self.options[option] = value

    @property
    def session(self) -> aiohttp.ClientSession:
        """Get or create HTTP session with proper configuration."""
        if self._session is None or self._session.closed:
            timeout = aiohttp.ClientTimeout(total=self.timeout)
            headers = {
                'User-Agent': self.user_agent,
                'Accept': 'text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8',
            }
            self._session = aiohttp.ClientSession(timeout=timeout, headers=headers)
        return self._session

    async def _rate_limit(self) -> None:
        """Enforce rate limiting between requests."""
        time_since_last = time.time() - self._last_request_time

        if time_since_last < self.metadata.rate_limit:
            await asyncio.sleep(self.metadata.rate_limit - time_since_last)

        self._last_request_time = time.time()

    async def _get_text(self, url: str, base_url: Optional[str] = None, **kwargs) -> str:
        """
        Get text content from URL with retries.

        Raises:
            NetworkError: If the request fails after all retries
        """
        await self._rate_limit()

        if base_url and not urlparse(url).netloc:
            url = urljoin(base_url, url)

        last_exception = None

        for attempt in range(self.max_retries + 1):
            try:
                self.logger.debug(f"Making GET request to {url} (attempt {attempt + 1})")

                async with self.session.get(url, **kwargs) as response:
                    if response.status >= 400:
                        raise NetworkError(
                            f"HTTP {response.status} error for {url}",
                            url=url,
                            status_code=response.status,
                        )
                    return await response.text()

            except (aiohttp.ClientError, asyncio.TimeoutError) as e:
                last_exception = e
                self.logger.warning(f"Request failed (attempt {attempt + 1}): {e}")

                if attempt < self.max_retries:
                    await asyncio.sleep(self.retry_delay * (attempt + 1))

        raise NetworkError(
            f"Request failed after {self.max_retries + 1} attempts: {last_exception}",
            url=url,
            details=str(last_exception)
        )

    @abstractmethod
    async def fetch(self, query: str) -> List[RawCandidate]:
        """
        Fetch raw candidates matching a search string.

        Args:
            query: Free-text search string

        Returns:
            Raw (title, link) candidates, possibly empty

        Raises:
            SourceError: If the catalog returned data that cannot be read
            NetworkError: If the catalog cannot be reached
        """
        pass

    async def cleanup(self) -> None:
        """Clean up resources used by the source."""
        if self._session and not self._session.closed:
            await self._session.close()
            self.logger.debug("HTTP session closed")
        self._session = None

    def __str__(self) -> str:
        return self.metadata.name

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(name='{self.metadata.name}')"


__all__ = ["BaseSource", "SourceMetadata", "SourceOption"]
