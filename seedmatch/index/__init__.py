"""Torrent index: storage, lookup protocol and directory sync."""

from .protocols import TorrentIndexStore
from .store import SQLiteTorrentIndex
from .sync import (
    TorrentDirError,
    find_all_torrent_files_in_dir,
    index_new_torrents,
    info_hashes_to_exclude,
    sync_index,
    validate_torrent_dir,
)
from .types import IndexedTorrentRecord, TorrentLocator

__all__ = [
    "IndexedTorrentRecord",
    "SQLiteTorrentIndex",
    "TorrentDirError",
    "TorrentIndexStore",
    "TorrentLocator",
    "find_all_torrent_files_in_dir",
    "index_new_torrents",
    "info_hashes_to_exclude",
    "sync_index",
    "validate_torrent_dir",
]
