from anisift.core.models import Query, Resolution
from anisift.core.selection import deduplicate, filter_latest, select, variant_order


R480, R720, R1080 = Resolution.R480P, Resolution.R720P, Resolution.R1080P


def test_latest_in_season_with_duplicates_removed(make_episode):
    """
    The latest episode of the requested season is returned exactly once.
    """
    pool = [
        make_episode("SeriesX", 1, season=1, resolution=R720, group="GroupA"),
        make_episode("SeriesX", 1, season=1, resolution=R1080, group="GroupB"),
        make_episode("SeriesX", 2, season=1, resolution=R720, group="GroupA"),
    ]
    query = Query(seasons={1}, match_latest=True, allow_duplicates=False)

    result = select(pool, query)

    assert len(result) == 1
    assert result[0].identity == ("seriesx", 1, 2)


def test_empty_pool_gives_empty_result():
    assert select([], Query()) == []


def test_permissive_query_returns_one_per_identity(make_episode):
    pool = [
        make_episode("A", 1, resolution=R720),
        make_episode("a", 1, resolution=R1080),
        make_episode("A", 2),
        make_episode("B", 1),
    ]

    result = select(pool, Query())

    assert [episode.identity for episode in result] == [("a", 1, 1), ("a", 1, 2), ("b", 1, 1)]


def test_dedup_prefers_highest_resolution_then_group(make_episode):
    pool = [
        make_episode(group="Zeta", resolution=R720),
        make_episode(group="beta", resolution=R1080),
        make_episode(group="Alpha", resolution=R1080),
        make_episode(group=None, resolution=R1080),
    ]

    result = select(pool, Query())

    assert len(result) == 1
    assert result[0].release_group == "Alpha"
    assert result[0].resolution is R1080


def test_dedup_is_independent_of_pool_order(make_episode):
    pool = [
        make_episode(group="B", resolution=R720, extension="mkv"),
        make_episode(group="B", resolution=R720, extension="mp4"),
        make_episode(group="A", resolution=R480),
    ]

    forward = deduplicate(pool)
    backward = deduplicate(list(reversed(pool)))

    assert forward == backward
    assert forward[0].extension == "mkv"


def test_allow_duplicates_keeps_variants_in_order(make_episode):
    pool = [
        make_episode(group="B", resolution=R720),
        make_episode(group="A", resolution=R720),
        make_episode(group="C", resolution=R1080),
        make_episode(episode=2, group="A", resolution=R480),
    ]

    result = select(pool, Query(allow_duplicates=True))

    assert [(e.episode_number, e.release_group) for e in result] == [
        (1, "C"), (1, "A"), (1, "B"), (2, "A"),
    ]


def test_latest_without_season_restriction_prefers_later_season(make_episode):
    pool = [
        make_episode("Show", 12, season=1),
        make_episode("Show", 1, season=2),
        make_episode("Other", 3, season=None),
        make_episode("Other", 4, season=None),
    ]

    result = select(pool, Query(match_latest=True))

    assert [episode.identity for episode in result] == [("other", 1, 4), ("show", 2, 1)]


def test_latest_with_seasons_is_per_season(make_episode):
    pool = [
        make_episode("Show", 11, season=1),
        make_episode("Show", 12, season=1),
        make_episode("Show", 2, season=2),
        make_episode("Show", 3, season=2),
        make_episode("Show", 1, season=3),
    ]

    result = select(pool, Query(seasons={1, 2}, match_latest=True))

    assert [episode.identity for episode in result] == [("show", 1, 12), ("show", 2, 3)]


def test_latest_is_chosen_after_attribute_filter(make_episode):
    pool = [
        make_episode(episode=1, resolution=R1080),
        make_episode(episode=2, resolution=R1080),
        make_episode(episode=3, resolution=R720),
    ]

    result = select(pool, Query(resolutions={R1080}, match_latest=True))

    assert [episode.episode_number for episode in result] == [2]


def test_latest_keeps_every_release_of_latest_episode(make_episode):
    pool = [
        make_episode(episode=5, group="A"),
        make_episode(episode=5, group="B"),
        make_episode(episode=4, group="A"),
    ]

    latest = filter_latest(pool, Query(match_latest=True))

    assert sorted(e.release_group for e in latest) == ["A", "B"]


def test_no_greater_episode_survives_latest_filter(make_episode):
    pool = [make_episode("Show", n, season=s) for s in (1, 2) for n in range(1, 6)]

    result = select(pool, Query(match_latest=True))
    best = max((e.season_or_default, e.episode_number) for e in pool)

    assert all((e.season_or_default, e.episode_number) == best for e in result)


def test_group_filter_is_case_insensitive_and_needs_a_group(make_episode):
    pool = [
        make_episode(episode=1, group="SubsPlease"),
        make_episode(episode=2, group="Other"),
        make_episode(episode=3, group=None),
    ]

    result = select(pool, Query(groups={"subsplease"}))

    assert [episode.episode_number for episode in result] == [1]


def test_episode_and_extension_filters(make_episode):
    pool = [
        make_episode(episode=1, extension="mkv"),
        make_episode(episode=2, extension="mp4"),
        make_episode(episode=3, extension="mkv"),
    ]

    result = select(pool, Query(episodes={1, 2}, extensions={".MKV"}))

    assert [episode.episode_number for episode in result] == [1]


def test_season_filter_counts_missing_season_as_one(make_episode):
    pool = [make_episode(episode=1, season=None), make_episode(episode=2, season=2)]

    result = select(pool, Query(seasons={1}))

    assert [episode.episode_number for episode in result] == [1]


def test_select_is_idempotent_and_leaves_pool_untouched(make_episode):
    pool = [
        make_episode("B", 2, group="X", resolution=R720),
        make_episode("A", 1, group="Y", resolution=R480),
        make_episode("A", 1, group="X", resolution=R480),
    ]
    snapshot = list(pool)
    query = Query(match_latest=True)

    assert select(pool, query) == select(pool, query)
    assert pool == snapshot


def test_result_ordered_by_series_season_episode(make_episode):
    pool = [
        make_episode("Beta", 1, season=1),
        make_episode("Alpha", 2, season=2),
        make_episode("Alpha", 10, season=1),
        make_episode("Alpha", 9, season=1),
    ]

    result = select(pool, Query())

    assert [str(episode) for episode in result] == [
        "Alpha S01E09", "Alpha S01E10", "Alpha S02E02", "Beta S01E01",
    ]


def test_variant_order_puts_ungrouped_last(make_episode):
    grouped = make_episode(group="zzz", resolution=R720)
    ungrouped = make_episode(group=None, resolution=R720)

    assert variant_order(grouped) < variant_order(ungrouped)
