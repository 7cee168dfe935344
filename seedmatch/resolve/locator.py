"""Exact torrent lookup by info hash and/or name."""

from __future__ import annotations

from seedmatch.index.protocols import TorrentIndexStore
from seedmatch.index.types import TorrentLocator
from seedmatch.metafile import Metafile, read_metafile


class TorrentNotFoundError(LookupError):
    """Raised when no indexed torrent satisfies the lookup criteria."""


async def locate_by_criteria(store: TorrentIndexStore, criteria: TorrentLocator) -> Metafile:
    """
    Decode the indexed torrent matching every populated criterion.

    Only ``info_hash`` and ``name`` take part in the lookup. When several rows
    match, the first in storage order wins.
    """
    record = await store.query_by_criteria(info_hash=criteria.info_hash, name=criteria.name)
    if record is None:
        raise TorrentNotFoundError(f"could not find a torrent with the criteria {criteria.describe()}")
    return await read_metafile(record.file_path)
