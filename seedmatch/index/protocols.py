"""Protocol definition for the torrent index consumed by the resolvers."""

from __future__ import annotations

from typing import Protocol, Sequence

from seedmatch.index.types import IndexedTorrentRecord


class TorrentIndexStore(Protocol):
    """Minimal read API the fuzzy resolver and criteria locator rely on."""

    async def query_by_name_pattern(self, pattern: str) -> Sequence[IndexedTorrentRecord]:
        ...

    async def query_by_criteria(
        self,
        info_hash: str | None = None,
        name: str | None = None,
    ) -> IndexedTorrentRecord | None:
        ...

    async def all_file_paths(self) -> Sequence[str]:
        ...
