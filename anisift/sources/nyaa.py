"""
Nyaa Source - Search the nyaa.si torrent listing.

Scrapes the HTML search results page, yielding the title of each listed
torrent together with its .torrent download link (or magnet link when the
listing has no file).
"""

import logging
from typing import List
from urllib.parse import urlencode, urljoin

from bs4 import BeautifulSoup

from anisift.core.exceptions import SourceError
from anisift.core.models import RawCandidate
from anisift.sources.base import BaseSource, SourceMetadata, SourceOption


logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://nyaa.si"


class NyaaSource(BaseSource):
    """Catalog source for nyaa.si and compatible mirrors."""

    @property
    def metadata(self) -> SourceMetadata:
        return SourceMetadata(
            name="nyaa",
            description="Anime torrents listed on nyaa.si",
            website=DEFAULT_BASE_URL,
            options=[
                SourceOption(
                    name="category",
                    description="Nyaa category code, e.g. 1_2 for English-translated anime.",
                    argument="CAT",
                    default="1_2",
                ),
                SourceOption(
                    name="filter",
                    description="0 = no filter, 1 = no remakes, 2 = trusted uploads only.",
                    argument="LEVEL",
                    default="0",
                ),
                SourceOption(
                    name="pages",
                    description="Number of result pages to read.",
                    argument="N",
                    default=1,
                ),
                SourceOption(
                    name="base-url",
                    description="Use a nyaa mirror at the given URL.",
                    argument="URL",
                    default=DEFAULT_BASE_URL,
                ),
            ],
            rate_limit=1.0,
        )

    def search_url(self, query: str, page: int = 1) -> str:
        params = {
            "f": self.options["filter"],
            "c": self.options["category"],
            "q": query,
        }
        if page > 1:
            params["p"] = page
        return f"{str(self.options['base-url']).rstrip('/')}/?{urlencode(params)}"

    async def fetch(self, query: str) -> List[RawCandidate]:
        candidates: List[RawCandidate] = []
        pages = max(int(self.options["pages"]), 1)

        for page in range(1, pages + 1):
            html = await self._get_text(self.search_url(query, page))
            page_candidates = self.parse_listing(html)
            candidates.extend(page_candidates)

            if not page_candidates:
                break

        self.logger.debug(f"Nyaa returned {len(candidates)} candidates for '{query}'")
        return candidates

    def parse_listing(self, html: str) -> List[RawCandidate]:
        """
        Extract candidates from a search results page.

        Raises:
            SourceError: If the page is not a nyaa listing
        """
        soup = BeautifulSoup(html, 'html.parser')
        table = soup.select_one("table.torrent-list")

        if table is None:
            if "No results found" in soup.get_text():
                return []
            raise SourceError("Unexpected page layout from nyaa", source_name=self.name)

        base_url = str(self.options["base-url"])
        candidates = []

        for row in table.select("tbody tr"):
            title_links = [
                a for a in row.select('td[colspan="2"] a')
                if "comments" not in (a.get("class") or [])
            ]
            if not title_links:
                continue

            title_link = title_links[-1]
            title = title_link.get("title") or title_link.get_text(strip=True)

            torrent = row.select_one('a[href$=".torrent"]')
            magnet = row.select_one('a[href^="magnet:"]')
            if torrent is not None:
                link = urljoin(base_url, torrent["href"])
            elif magnet is not None:
                link = magnet["href"]
            else:
                link = urljoin(base_url, title_link.get("href", ""))

            candidates.append(RawCandidate(title=title, link=link, source=self.name))

        return candidates


__all__ = ["NyaaSource"]
