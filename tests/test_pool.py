import asyncio
from typing import List

from anisift.core.exceptions import NetworkError
from anisift.core.models import RawCandidate
from anisift.core.pool import EpisodePoolBuilder, build_pool
from anisift.sources.base import BaseSource, SourceMetadata


class StaticSource(BaseSource):
    """Returns a fixed list of titles."""

    def __init__(self, name, titles, delay=0.0):
        self._name = name
        self.titles = titles
        self.delay = delay
        self.queries = []
        super().__init__()

    @property
    def metadata(self) -> SourceMetadata:
        return SourceMetadata(name=self._name, rate_limit=0.0)

    async def fetch(self, query: str) -> List[RawCandidate]:
        self.queries.append(query)
        if self.delay:
            await asyncio.sleep(self.delay)
        return [RawCandidate(title=title, link=f"{self._name}:{i}", source=self._name)
                for i, title in enumerate(self.titles)]


class BrokenSource(StaticSource):
    async def fetch(self, query: str) -> List[RawCandidate]:
        raise NetworkError("catalog unreachable", url="https://example.org")


def test_pool_merges_sources_and_drops_unparsable_titles():
    first = StaticSource("one", ["[Fans] Show - 01 [720p]", "not an episode"])
    second = StaticSource("two", ["Show.S01E01.1080p-Other", "Show.S01E02.1080p-Other"])

    pool = build_pool([first, second], "show")

    assert pool.size == 3
    assert pool.candidate_count == 4
    assert [failure.title for failure in pool.discarded] == ["not an episode"]
    assert pool.failures == {}
    assert first.queries == ["show"] and second.queries == ["show"]


def test_failing_source_does_not_block_others():
    good = StaticSource("good", ["[Fans] Show - 01 [720p]"])
    bad = BrokenSource("bad", [])

    pool = build_pool([bad, good], "show")

    assert pool.size == 1
    assert pool.episodes[0].source == "good"
    assert pool.failed_sources == ["bad"]
    assert "catalog unreachable" in pool.failures["bad"]


def test_slow_source_times_out():
    slow = StaticSource("slow", ["[Fans] Show - 01 [720p]"], delay=5)
    fast = StaticSource("fast", ["[Fans] Show - 02 [720p]"])

    pool = asyncio.run(EpisodePoolBuilder(timeout=0.05).build([slow, fast], "show"))

    assert [episode.episode_number for episode in pool.episodes] == [2]
    assert pool.failed_sources == ["slow"]


def test_no_sources_gives_empty_pool():
    pool = asyncio.run(EpisodePoolBuilder().build([], "show"))

    assert pool.size == 0
    assert pool.candidate_count == 0


def test_pool_from_candidates():
    pool = EpisodePoolBuilder.from_candidates(
        [RawCandidate(title="[A] Show - 03", link="x")],
        {"rss": "timed out"},
    )

    assert pool.episodes[0].episode_number == 3
    assert pool.failed_sources == ["rss"]
