import pytest

from anisift.core.exceptions import InvalidQueryError
from anisift.core.models import Resolution
from anisift.core.query_builder import QueryBuilder, parse_int_range, parse_list
from anisift.core.selection import select


def test_parse_int_range_accepts_lists_and_ranges():
    assert parse_int_range("3", "episode") == [3]
    assert parse_int_range("1..3, 07", "episode") == [1, 2, 3, 7]
    assert parse_int_range("2..2", "season") == [2]


@pytest.mark.parametrize("value", ["3..1", "-1", "1..-2", "abc", "1..", ""])
def test_parse_int_range_rejects_bad_values(value):
    with pytest.raises(InvalidQueryError) as excinfo:
        parse_int_range(value, "episode")

    assert excinfo.value.criterion == "episode"
    assert excinfo.value.value == value


def test_parse_list_rejects_empty_items():
    assert parse_list("a, b", "group") == ["a", "b"]
    with pytest.raises(InvalidQueryError):
        parse_list("a,,b", "group")


def test_builder_accumulates_in_order():
    query = (
        QueryBuilder()
        .add_seasons("1")
        .add_seasons("3..4")
        .add_episodes("1..2")
        .add_groups("SubsPlease, Erai-raws")
        .add_resolutions("720p,1080P")
        .add_extensions(".MKV")
        .match_latest()
        .build()
    )

    assert query.seasons == {1, 3, 4}
    assert query.episodes == {1, 2}
    assert query.groups == {"SubsPlease", "Erai-raws"}
    assert query.resolutions == {Resolution.R720P, Resolution.R1080P}
    assert query.extensions == {"mkv"}
    assert query.match_latest is True
    assert query.allow_duplicates is False


def test_any_resets_earlier_restrictions():
    query = (
        QueryBuilder()
        .add_resolutions("720p")
        .add_extensions("mkv")
        .add_resolutions("any")
        .add_extensions("ANY")
        .build()
    )

    assert query.resolutions == frozenset()
    assert query.extensions == frozenset()
    assert query.is_unconstrained


def test_values_after_any_are_kept():
    query = QueryBuilder().add_resolutions("any").add_resolutions("480p").build()

    assert query.resolutions == {Resolution.R480P}


def test_any_mixed_with_values_is_rejected():
    with pytest.raises(InvalidQueryError) as excinfo:
        QueryBuilder().add_resolutions("720p,any")

    assert excinfo.value.criterion == "resolution"
    assert excinfo.value.value == "720p,any"


def test_unknown_resolution_is_rejected():
    with pytest.raises(InvalidQueryError) as excinfo:
        QueryBuilder().add_resolutions("4k")

    assert excinfo.value.criterion == "resolution"


def test_unknown_resolution_token_is_allowed_explicitly():
    query = QueryBuilder().add_resolutions("unknown").build()

    assert query.resolutions == {Resolution.UNKNOWN}


def test_clear_all_keeps_flags():
    query = (
        QueryBuilder()
        .add_seasons("1")
        .add_groups("A")
        .add_resolutions("720p")
        .allow_duplicates()
        .match_latest()
        .clear_all()
        .build()
    )

    assert query.is_unconstrained
    assert query.allow_duplicates and query.match_latest


def test_wildcard_reset_gives_superset(make_episode):
    pool = [
        make_episode(episode=1, resolution=Resolution.R720P),
        make_episode(episode=2, resolution=Resolution.R1080P),
        make_episode(episode=3),
    ]
    builder = QueryBuilder().add_resolutions("720p")

    before = select(pool, builder.build())
    after = select(pool, builder.add_resolutions("any").build())

    assert [e.episode_number for e in before] == [1]
    assert set(before) <= set(after)
    assert [e.episode_number for e in after] == [1, 2, 3]


def test_extend_applies_every_value():
    query = QueryBuilder().extend(
        seasons=["1", "2"],
        episodes=["5"],
        groups=["A"],
        resolutions=["720p"],
        extensions=["mkv", "mp4"],
    ).build()

    assert query.seasons == {1, 2}
    assert query.extensions == {"mkv", "mp4"}
