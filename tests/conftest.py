import pytest

from anisift.core.models import Episode, Resolution


@pytest.fixture
def make_episode():
    """Factory for episodes with sensible defaults."""

    def _make(
        series="SeriesX",
        episode=1,
        season=1,
        group=None,
        resolution=Resolution.UNKNOWN,
        extension="",
        link="",
        source=None,
    ):
        return Episode(
            series_name=series,
            season=season,
            episode_number=episode,
            release_group=group,
            resolution=resolution,
            extension=extension,
            source_link=link,
            source=source,
        )

    return _make
