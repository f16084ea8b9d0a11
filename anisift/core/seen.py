"""
Seen Episodes - Persistent record of episodes already downloaded.

The selection engine never consults this store; callers intersect its
output against it. The file holds a JSON list of identity keys, written
atomically.
"""

import json
import logging
from pathlib import Path
from typing import Iterable, List, Set, Union

from anisift.core.exceptions import ConfigurationError
from anisift.core.models import Episode, IdentityKey


logger = logging.getLogger(__name__)


class SeenEpisodes:
    """Identity keys of previously downloaded episodes, backed by a JSON file."""

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path).expanduser()
        self._keys: Set[IdentityKey] = set()
        self.load()

    def load(self) -> None:
        """
        Load seen keys from disk; a missing file means nothing is seen.

        Raises:
            ConfigurationError: If the file exists but cannot be read
        """
        self._keys.clear()
        if not self.path.exists():
            return

        try:
            with open(self.path, 'r', encoding='utf-8') as f:
                data = json.load(f)
            self._keys = {IdentityKey(str(series), int(season), int(episode))
                          for series, season, episode in data}
        except (OSError, json.JSONDecodeError, TypeError, ValueError) as e:
            raise ConfigurationError(f"Invalid seen file: {e}", config_path=str(self.path))

        logger.debug(f"Loaded {len(self._keys)} seen episodes from {self.path}")

    def save(self) -> None:
        """Write seen keys to disk with atomic replace."""
        self.path.parent.mkdir(parents=True, exist_ok=True)
        temp_file = self.path.with_suffix('.tmp')
        try:
            with open(temp_file, 'w', encoding='utf-8') as f:
                json.dump(sorted(list(key) for key in self._keys), f, indent=2, ensure_ascii=False)
            temp_file.replace(self.path)
        except OSError as e:
            if temp_file.exists():
                temp_file.unlink()
            raise ConfigurationError(f"Failed to save seen file: {e}", config_path=str(self.path))

    def __contains__(self, episode: Episode) -> bool:
        return episode.identity in self._keys

    def __len__(self) -> int:
        return len(self._keys)

    def filter_unseen(self, episodes: Iterable[Episode]) -> List[Episode]:
        return [episode for episode in episodes if episode.identity not in self._keys]

    def mark_seen(self, episodes: Iterable[Episode]) -> None:
        for episode in episodes:
            self._keys.add(episode.identity)


__all__ = ["SeenEpisodes"]
