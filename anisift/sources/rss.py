"""
RSS Source - Search any RSS/Atom feed of releases.

The feed is downloaded and read with feedparser; entries whose title
contains every word of the search string are returned. A ``{query}``
placeholder in the feed URL is replaced by the URL-encoded search string,
which lets search-capable feeds do the narrowing server side.
"""

import logging
from typing import List
from urllib.parse import quote_plus

import feedparser

from anisift.core.exceptions import SourceError
from anisift.core.models import RawCandidate
from anisift.sources.base import BaseSource, SourceMetadata, SourceOption


logger = logging.getLogger(__name__)


class RssSource(BaseSource):
    """Catalog source backed by an arbitrary RSS feed."""

    @property
    def metadata(self) -> SourceMetadata:
        return SourceMetadata(
            name="rss",
            description="Releases from a user-supplied RSS feed",
            options=[
                SourceOption(
                    name="url",
                    description="Read releases from the feed at URL. "
                                "'{query}' in the URL is replaced by the search string.",
                    argument="URL",
                ),
            ],
            rate_limit=0.0,
        )

    def feed_url(self, query: str) -> str:
        url = self.options.get("url")
        if not url:
            raise SourceError("No feed URL configured (set the 'url' option)", source_name=self.name)
        return str(url).replace("{query}", quote_plus(query))

    async def fetch(self, query: str) -> List[RawCandidate]:
        text = await self._get_text(self.feed_url(query))
        return self.parse_feed(text, query)

    def parse_feed(self, text: str, query: str) -> List[RawCandidate]:
        """
        Extract candidates matching the search words from feed content.

        Raises:
            SourceError: If the content is not a readable feed
        """
        feed = feedparser.parse(text)
        if feed.bozo and not feed.entries:
            raise SourceError(
                f"Malformed feed: {feed.get('bozo_exception')}",
                source_name=self.name,
            )

        words = query.casefold().split()
        candidates = []

        for entry in feed.entries:
            title = entry.get("title", "")
            if not title:
                continue

            folded = title.casefold()
            if not all(word in folded for word in words):
                continue

            link = entry.get("link", "")
            for enclosure in entry.get("enclosures", []):
                if enclosure.get("href"):
                    link = enclosure["href"]
                    break

            candidates.append(RawCandidate(title=title, link=link, source=self.name))

        self.logger.debug(f"Feed had {len(feed.entries)} entries, {len(candidates)} matching '{query}'")
        return candidates


__all__ = ["RssSource"]
