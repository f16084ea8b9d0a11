"""
Episode Pool Builder - Fetch, parse and merge candidates from all sources.

Sources are queried concurrently and independently: a source that fails,
times out or returns nothing contributes zero candidates without affecting
the others. Every candidate title goes through the title parser and
unparsable titles are dropped. The resulting pool is an immutable snapshot
handed to the selection engine.
"""

import asyncio
import logging
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from pydantic import BaseModel, ConfigDict, Field

from anisift.core.models import Episode, ParseFailure, RawCandidate
from anisift.core.parser import parse_candidates
from anisift.sources.base import BaseSource


logger = logging.getLogger(__name__)


class EpisodePool(BaseModel):
    """Parsed episodes of one search invocation, plus bookkeeping."""

    model_config = ConfigDict(frozen=True)

    episodes: Tuple[Episode, ...] = Field(default_factory=tuple)
    candidate_count: int = Field(0, ge=0, description="Raw candidates fetched")
    discarded: Tuple[ParseFailure, ...] = Field(default_factory=tuple)
    failures: Dict[str, str] = Field(default_factory=dict, description="Source name to error")

    @property
    def size(self) -> int:
        return len(self.episodes)

    @property
    def failed_sources(self) -> List[str]:
        return sorted(self.failures)


class EpisodePoolBuilder:
    """
    Builds an EpisodePool from a set of sources and a search string.

    Args:
        max_concurrent: Maximum number of sources fetched at once
        timeout: Optional per-source time limit in seconds
    """

    def __init__(self, max_concurrent: int = 5, timeout: Optional[float] = None):
        self.max_concurrent = max(max_concurrent, 1)
        self.timeout = timeout

    async def _fetch_source(
        self,
        source: BaseSource,
        query_text: str,
        semaphore: asyncio.Semaphore,
    ) -> Tuple[str, List[RawCandidate], Optional[str]]:
        """Fetch one source, containing any failure."""
        async with semaphore:
            try:
                logger.debug(f"Fetching source '{source.name}' for: '{query_text}'")
                if self.timeout:
                    candidates = await asyncio.wait_for(source.fetch(query_text), timeout=self.timeout)
                else:
                    candidates = await source.fetch(query_text)
                logger.debug(f"Source '{source.name}' returned {len(candidates)} candidates")
                return source.name, list(candidates), None
            except asyncio.TimeoutError:
                logger.warning(f"Fetch timeout for source '{source.name}'")
                return source.name, [], f"timed out after {self.timeout}s"
            except Exception as e:
                logger.error(f"Fetch failed for source '{source.name}': {e}")
                return source.name, [], str(e) or e.__class__.__name__

    async def build(self, sources: Sequence[BaseSource], query_text: str) -> EpisodePool:
        """
        Query every source and parse the merged candidates.

        Args:
            sources: Source adapters to query
            query_text: Search string passed to each source

        Returns:
            The closed episode pool
        """
        if not sources:
            logger.warning("No sources available for search")
            return EpisodePool()

        semaphore = asyncio.Semaphore(self.max_concurrent)
        results = await asyncio.gather(
            *(self._fetch_source(source, query_text, semaphore) for source in sources)
        )

        candidates: List[RawCandidate] = []
        failures: Dict[str, str] = {}
        for name, source_candidates, error in results:
            candidates.extend(source_candidates)
            if error is not None:
                failures[name] = error

        return self.from_candidates(candidates, failures)

    @staticmethod
    def from_candidates(
        candidates: Iterable[RawCandidate],
        failures: Optional[Dict[str, str]] = None,
    ) -> EpisodePool:
        """Parse already-fetched candidates into a pool."""
        candidates = list(candidates)
        episodes, discarded = parse_candidates(candidates)

        logger.info(
            f"Pool built: {len(episodes)} episodes from {len(candidates)} candidates "
            f"({len(discarded)} unparsable, {len(failures or {})} failed sources)"
        )
        return EpisodePool(
            episodes=tuple(episodes),
            candidate_count=len(candidates),
            discarded=tuple(discarded),
            failures=dict(failures or {}),
        )


def build_pool(
    sources: Sequence[BaseSource],
    query_text: str,
    max_concurrent: int = 5,
    timeout: Optional[float] = None,
) -> EpisodePool:
    """Synchronous wrapper around EpisodePoolBuilder.build, closing source sessions afterwards."""

    async def _run() -> EpisodePool:
        builder = EpisodePoolBuilder(max_concurrent=max_concurrent, timeout=timeout)
        try:
            return await builder.build(sources, query_text)
        finally:
            await asyncio.gather(*(source.cleanup() for source in sources), return_exceptions=True)

    return asyncio.run(_run())


__all__ = ["EpisodePool", "EpisodePoolBuilder", "build_pool"]
