import asyncio
from unittest.mock import MagicMock

import pytest

from anisift.core.downloader import TorrentDownloader, sanitize_filename
from anisift.core.exceptions import DownloadError
from anisift.core.models import Resolution


def test_sanitize_filename():
    assert sanitize_filename('a/b:c?.torrent') == "a_b_c_.torrent"
    assert sanitize_filename(" . ") == "untitled"


def test_output_path_uses_western_name(tmp_path, make_episode):
    downloader = TorrentDownloader(tmp_path)
    episode = make_episode("Show Name", 5, group="Fans", resolution=Resolution.R720P)

    assert downloader.output_path(episode) == tmp_path / "Show.Name.S01E05.720p-Fans.torrent"


def test_magnet_link_is_saved_without_network(tmp_path, make_episode):
    downloader = TorrentDownloader(tmp_path / "out")
    episode = make_episode("Show", 2, link="magnet:?xt=urn:btih:ABC")
    session = MagicMock()

    path = asyncio.run(downloader.download_episode(session, episode))

    assert path == tmp_path / "out" / "Show.S01E02.magnet"
    assert path.read_text(encoding="utf-8") == "magnet:?xt=urn:btih:ABC\n"
    session.get.assert_not_called()


def test_missing_link_raises(tmp_path, make_episode):
    downloader = TorrentDownloader(tmp_path)

    with pytest.raises(DownloadError):
        asyncio.run(downloader.download_episode(MagicMock(), make_episode(link="")))


def test_batch_collects_failures(tmp_path, make_episode):
    downloader = TorrentDownloader(tmp_path)
    episodes = [
        make_episode("Show", 1, link="magnet:?xt=urn:btih:ONE"),
        make_episode("Show", 2, link=""),
    ]

    results = asyncio.run(downloader.download_batch(episodes))

    assert [result.ok for result in results] == [True, False]
    assert results[0].path.exists()
    assert "no download link" in results[1].error


def test_batch_gives_same_named_releases_their_own_files(tmp_path, make_episode):
    downloader = TorrentDownloader(tmp_path)
    episodes = [
        make_episode("SeriesX", 1, group="G", extension="mkv", link="magnet:?xt=urn:btih:MKV"),
        make_episode("SeriesX", 1, group="G", extension="mp4", link="magnet:?xt=urn:btih:MP4"),
    ]

    results = asyncio.run(downloader.download_batch(episodes))

    assert all(result.ok for result in results)
    assert [result.path.name for result in results] == [
        "SeriesX.S01E01-G.magnet",
        "SeriesX.S01E01-G.2.magnet",
    ]
    assert results[0].path.read_text(encoding="utf-8") == "magnet:?xt=urn:btih:MKV\n"
    assert results[1].path.read_text(encoding="utf-8") == "magnet:?xt=urn:btih:MP4\n"
