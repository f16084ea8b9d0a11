import pytest

from anisift.core.config_manager import ConfigManager
from anisift.core.exceptions import ConfigurationError, SourceError
from anisift.core.source_manager import SourceManager, parse_source_option
from anisift.sources import create_source, get_source_info, supported_source_names
from anisift.sources.nyaa import NyaaSource
from anisift.sources.rss import RssSource


NYAA_LISTING = """
<html><body><div class="table-responsive">
<table class="table torrent-list">
  <thead><tr><th>Category</th><th>Name</th><th>Link</th></tr></thead>
  <tbody>
    <tr class="default">
      <td><a href="/?c=1_2" title="Anime - English-translated">cat</a></td>
      <td colspan="2">
        <a href="/view/100#comments" class="comments" title="2 comments">2</a>
        <a href="/view/100" title="[Fans] Show Name - 05 [720p].mkv">[Fans] Show Name - 05 [720p].mkv</a>
      </td>
      <td class="text-center">
        <a href="/download/100.torrent"><i class="fa fa-fw fa-download"></i></a>
        <a href="magnet:?xt=urn:btih:AAA"><i class="fa fa-fw fa-magnet"></i></a>
      </td>
    </tr>
    <tr class="success">
      <td><a href="/?c=1_2">cat</a></td>
      <td colspan="2">
        <a href="/view/101" title="Show.Name.S01E06.1080p-Fans">Show.Name.S01E06.1080p-Fans</a>
      </td>
      <td class="text-center">
        <a href="magnet:?xt=urn:btih:BBB"><i class="fa fa-fw fa-magnet"></i></a>
      </td>
    </tr>
  </tbody>
</table>
</div></body></html>
"""

RSS_FEED = """<?xml version="1.0" encoding="UTF-8"?>
<rss version="2.0">
  <channel>
    <title>Releases</title>
    <item>
      <title>[Fans] Show Name - 05 [720p]</title>
      <link>https://example.org/view/1</link>
      <enclosure url="https://example.org/1.torrent" type="application/x-bittorrent" length="1000"/>
    </item>
    <item>
      <title>Another Series - 01 [1080p]</title>
      <link>https://example.org/view/2</link>
    </item>
    <item>
      <title>[Fans] show NAME - 06 [720p]</title>
      <link>https://example.org/view/3</link>
    </item>
  </channel>
</rss>
"""


def test_nyaa_listing_is_parsed():
    source = NyaaSource()

    candidates = source.parse_listing(NYAA_LISTING)

    assert [candidate.title for candidate in candidates] == [
        "[Fans] Show Name - 05 [720p].mkv",
        "Show.Name.S01E06.1080p-Fans",
    ]
    assert candidates[0].link == "https://nyaa.si/download/100.torrent"
    assert candidates[1].link == "magnet:?xt=urn:btih:BBB"
    assert all(candidate.source == "nyaa" for candidate in candidates)


def test_nyaa_no_results_page():
    source = NyaaSource()

    assert source.parse_listing("<html><body><h3>No results found</h3></body></html>") == []


def test_nyaa_unexpected_page_raises():
    with pytest.raises(SourceError):
        NyaaSource().parse_listing("<html><body>Maintenance</body></html>")


def test_nyaa_search_url_uses_options():
    source = NyaaSource({"category": "1_0", "filter": "2", "base-url": "https://mirror.example/"})

    url = source.search_url("show name", page=2)

    assert url == "https://mirror.example/?f=2&c=1_0&q=show+name&p=2"


def test_unknown_option_is_rejected():
    with pytest.raises(ConfigurationError):
        NyaaSource({"colour": "blue"})


def test_rss_feed_filters_on_search_words():
    source = RssSource({"url": "https://example.org/rss?q={query}"})

    candidates = source.parse_feed(RSS_FEED, "show name")

    assert [candidate.title for candidate in candidates] == [
        "[Fans] Show Name - 05 [720p]",
        "[Fans] show NAME - 06 [720p]",
    ]
    assert candidates[0].link == "https://example.org/1.torrent"
    assert candidates[1].link == "https://example.org/view/3"


def test_rss_feed_url_substitutes_query():
    source = RssSource({"url": "https://example.org/rss?q={query}"})

    assert source.feed_url("show name") == "https://example.org/rss?q=show+name"


def test_rss_without_url_raises():
    with pytest.raises(SourceError):
        RssSource().feed_url("show")


def test_registry():
    assert supported_source_names() == ["nyaa", "rss"]
    assert isinstance(create_source("rss", {"url": "x"}), RssSource)
    assert get_source_info("nyaa")["name"] == "nyaa"
    with pytest.raises(ConfigurationError):
        create_source("piratebay")


def test_parse_source_option():
    assert parse_source_option("nyaa.filter=2") == ("nyaa", "filter", "2")
    assert parse_source_option("rss.url=https://a/?x=1") == ("rss", "url", "https://a/?x=1")
    with pytest.raises(ConfigurationError):
        parse_source_option("filter=2")


def test_source_manager_uses_enabled_sources(tmp_path):
    manager = SourceManager(ConfigManager(tmp_path))

    assert manager.resolve_names() == ["nyaa"]
    assert manager.resolve_names(["nyaa,rss"]) == ["nyaa", "rss"]
    assert manager.resolve_names(["all"]) == ["nyaa", "rss"]
    with pytest.raises(ConfigurationError):
        manager.resolve_names(["piratebay"])


def test_source_manager_applies_overrides(tmp_path):
    manager = SourceManager(ConfigManager(tmp_path))

    sources = manager.create_sources(["nyaa,rss"], ["rss.url=https://example.org/feed", "nyaa.filter=2"])

    nyaa, rss = sources
    assert nyaa.options["filter"] == "2"
    assert nyaa.options["category"] == "1_2"
    assert rss.options["url"] == "https://example.org/feed"
