from anisift.core.models import Resolution
from anisift.core.naming import NameStyle, format_episode


def test_anime_style(make_episode):
    episode = make_episode("Show Name", 5, season=2, group="Fans", resolution=Resolution.R720P)

    assert format_episode(episode, NameStyle.ANIME) == "[Fans] Show Name S2 - 05 [720p]"


def test_anime_style_omits_absent_fields(make_episode):
    episode = make_episode("Show Name", 12, season=None)

    assert format_episode(episode) == "Show Name - 12"


def test_western_style(make_episode):
    episode = make_episode("Show Name", 5, season=2, group="Fans", resolution=Resolution.R720P)

    assert format_episode(episode, NameStyle.WESTERN) == "Show.Name.S02E05.720p-Fans"


def test_western_style_accepts_plain_string(make_episode):
    episode = make_episode("Show", 3, season=None)

    assert format_episode(episode, "western") == "Show.S01E03"
