"""Shared data structures for the torrent index."""

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class IndexedTorrentRecord:
    """A .torrent file known to the index."""

    name: str
    file_path: str
    info_hash: str


@dataclass(frozen=True)
class TorrentLocator:
    """Exact-lookup criteria; populated fields are ANDed together."""

    info_hash: Optional[str] = None
    name: Optional[str] = None
    path: Optional[str] = None

    def describe(self) -> str:
        items: list[str] = []
        if self.info_hash:
            items.append(f"info_hash='{self.info_hash}'")
        if self.name:
            items.append(f"name='{self.name}'")
        if self.path:
            items.append(f"path='{self.path}'")
        return ", ".join(items)
