"""Keep the torrent index in step with the torrent directory."""

from __future__ import annotations

import os
from os import PathLike
from pathlib import Path
from typing import List

from seedmatch import logger
from seedmatch.config import IndexConfig
from seedmatch.index.store import SQLiteTorrentIndex
from seedmatch.index.types import IndexedTorrentRecord
from seedmatch.metafile import MetafileDecodeError, read_metafile

TORRENT_SUFFIX = ".torrent"


class TorrentDirError(RuntimeError):
    """Raised when the configured torrent directory cannot be read."""


def validate_torrent_dir(torrent_dir: str | PathLike[str]) -> None:
    try:
        os.listdir(torrent_dir)
    except OSError as exc:
        raise TorrentDirError(f"Torrent dir {torrent_dir} is invalid") from exc


def find_all_torrent_files_in_dir(torrent_dir: str | PathLike[str]) -> List[Path]:
    """Absolute paths of every .torrent file in ``torrent_dir``, sorted by file name."""
    names = sorted(name for name in os.listdir(torrent_dir) if Path(name).suffix == TORRENT_SUFFIX)
    return [(Path(torrent_dir) / name).resolve() for name in names]


async def index_new_torrents(store: SQLiteTorrentIndex, torrent_dir: str | PathLike[str]) -> int:
    """
    Add unseen .torrent files to the index and drop rows for deleted files.

    Returns the number of newly indexed torrents.
    """
    log = logger.get_logger()
    dir_contents = [str(path) for path in find_all_torrent_files_in_dir(torrent_dir)]
    added = 0

    for file_path in dir_contents:
        if await store.has_file_path(file_path):
            continue
        try:
            meta = await read_metafile(file_path)
        except (MetafileDecodeError, OSError) as exc:
            def _report(path: str = file_path, cause: Exception = exc) -> None:
                log.error(f"Failed to parse {path}")
                log.debug(str(cause))

            log.log_once(f"parse:{file_path}", _report)
            continue
        await store.insert(
            IndexedTorrentRecord(name=meta.name, file_path=file_path, info_hash=meta.info_hash)
        )
        added += 1

    present = set(dir_contents)
    stale = [path for path in await store.all_file_paths() if path not in present]
    removed = await store.delete_file_paths(stale)
    log.debug(f"Indexed {added} new torrent(s), removed {removed} stale row(s) from {torrent_dir}")
    return added


async def sync_index(config: IndexConfig) -> SQLiteTorrentIndex:
    """Open the configured index database and bring it in step with ``torrent_dir``."""
    if config.torrent_dir is None:
        raise TorrentDirError("No torrent dir configured")
    validate_torrent_dir(config.torrent_dir)
    store = SQLiteTorrentIndex(config.database)
    store.init_db()
    await index_new_torrents(store, config.torrent_dir)
    return store


async def info_hashes_to_exclude(store: SQLiteTorrentIndex) -> List[str]:
    """Info hashes already in the index; searches should skip these."""
    return await store.info_hashes()
