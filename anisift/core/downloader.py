"""
Downloader - Save the torrent files of selected episodes.

Each episode's source link is fetched concurrently with aiohttp and
written to the output directory under its western-style name. Magnet
links have no file to fetch and are saved as ``.magnet`` text files.
A failed episode never stops the others.
"""

import asyncio
import logging
import re
from pathlib import Path
from typing import List, Optional, Set, Union

import aiohttp
from pydantic import BaseModel, ConfigDict

from anisift.core.exceptions import DownloadError, NetworkError
from anisift.core.models import Episode
from anisift.core.naming import episode_name_western


logger = logging.getLogger(__name__)


def sanitize_filename(filename: str, max_length: int = 200) -> str:
    """
    Sanitize a filename by removing invalid characters and limiting length.

    Args:
        filename: The original filename
        max_length: Maximum allowed filename length

    Returns:
        A sanitized filename safe for filesystem use
    """
    sanitized = re.sub(r'[<>:"/\\|?*]', '_', filename)
    sanitized = re.sub(r'[\x00-\x1f\x7f-\x9f]', '', sanitized)
    sanitized = sanitized.strip(' .')

    if not sanitized:
        sanitized = "untitled"

    return sanitized[:max_length]


class DownloadResult(BaseModel):
    """Outcome of downloading one episode."""

    model_config = ConfigDict(frozen=True)

    episode: Episode
    path: Optional[Path] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None


class TorrentDownloader:
    """
    Downloads torrent files for selected episodes.

    Args:
        outdir: Directory the files are written to (current directory if None)
        timeout: Network timeout in seconds
        concurrent_downloads: Maximum number of simultaneous downloads
    """

    def __init__(
        self,
        outdir: Optional[Union[str, Path]] = None,
        timeout: int = 30,
        concurrent_downloads: int = 3,
    ):
        self.outdir = Path(outdir or ".").expanduser()
        self.timeout = timeout
        self.concurrent_downloads = max(concurrent_downloads, 1)

    def output_path(self, episode: Episode, suffix: Optional[str] = None, index: int = 1) -> Path:
        """
        Path of the file saved for an episode.

        The suffix is ``.magnet`` for magnet links and ``.torrent`` otherwise.
        An index above 1 tells apart releases that share a name.
        """
        if suffix is None:
            suffix = ".magnet" if episode.source_link.startswith("magnet:") else ".torrent"
        name = sanitize_filename(episode_name_western(episode))
        if index > 1:
            name = f"{name}.{index}"
        return self.outdir / f"{name}{suffix}"

    def plan_paths(self, episodes: List[Episode]) -> List[Path]:
        """Assign each episode of a batch its own output path."""
        taken: Set[Path] = set()
        paths = []
        for episode in episodes:
            index = 1
            path = self.output_path(episode)
            while path in taken:
                index += 1
                path = self.output_path(episode, index=index)
            taken.add(path)
            paths.append(path)
        return paths

    async def download_episode(
        self,
        session: aiohttp.ClientSession,
        episode: Episode,
        path: Optional[Path] = None,
    ) -> Path:
        """
        Download one episode's torrent file.

        Raises:
            DownloadError: If the link is missing or the file cannot be written
            NetworkError: If the link cannot be fetched
        """
        link = episode.source_link
        if not link:
            raise DownloadError("Episode has no download link", str(episode))

        try:
            path = path or self.output_path(episode)
            path.parent.mkdir(parents=True, exist_ok=True)

            if link.startswith("magnet:"):
                path.write_text(link + "\n", encoding="utf-8")
                return path

            async with session.get(link) as response:
                if response.status >= 400:
                    raise NetworkError(
                        f"HTTP {response.status} error",
                        url=link,
                        status_code=response.status
                    )
                content = await response.read()

            path.write_bytes(content)
            return path

        except aiohttp.ClientError as e:
            raise NetworkError(f"Network error during download: {e}", link)
        except OSError as e:
            raise DownloadError(f"File system error: {e}", str(episode))

    async def download_batch(self, episodes: List[Episode]) -> List[DownloadResult]:
        """Download several episodes concurrently, collecting per-episode outcomes."""
        if not episodes:
            return []

        semaphore = asyncio.Semaphore(self.concurrent_downloads)
        timeout = aiohttp.ClientTimeout(total=self.timeout)

        async with aiohttp.ClientSession(timeout=timeout) as session:

            async def _download(episode: Episode, path: Path) -> DownloadResult:
                async with semaphore:
                    try:
                        path = await self.download_episode(session, episode, path)
                        logger.info(f"Saved {episode} to {path}")
                        return DownloadResult(episode=episode, path=path)
                    except (DownloadError, NetworkError, asyncio.TimeoutError) as e:
                        logger.error(f"Download failed for {episode}: {e}")
                        return DownloadResult(episode=episode, error=str(e) or e.__class__.__name__)

            logger.info(f"Starting batch download of {len(episodes)} episodes")
            paths = self.plan_paths(episodes)
            return list(await asyncio.gather(
                *(_download(episode, path) for episode, path in zip(episodes, paths))
            ))


__all__ = ["TorrentDownloader", "DownloadResult", "sanitize_filename"]
