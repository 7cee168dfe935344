"""Thin wrapper around torf for decoding and encoding .torrent metainfo."""

from __future__ import annotations

import asyncio
import io
import re
from os import PathLike
from pathlib import Path

import torf

_UNSAFE_FILENAME_CHARS = re.compile(r'[\\/:*?"<>|\x00-\x1f]')


class MetafileDecodeError(ValueError):
    """Raised when bytes cannot be decoded into valid torrent metainfo."""


class Metafile:
    """Decoded torrent metadata."""

    def __init__(self, torrent: torf.Torrent):
        self._torrent = torrent

    @classmethod
    def decode(cls, data: bytes) -> "Metafile":
        try:
            torrent = torf.Torrent.read_stream(io.BytesIO(data))
        except torf.TorfError as exc:
            raise MetafileDecodeError(f"invalid torrent metainfo: {exc}") from exc
        return cls(torrent)

    def encode(self) -> bytes:
        return self._torrent.dump()

    @property
    def info_hash(self) -> str:
        return self._torrent.infohash

    @property
    def name(self) -> str:
        return self._torrent.name or ""

    @property
    def torrent(self) -> torf.Torrent:
        return self._torrent

    def file_system_safe_name(self) -> str:
        """Torrent name with path separators and reserved characters removed."""
        return _UNSAFE_FILENAME_CHARS.sub("", self.name).strip()

    def __repr__(self) -> str:
        return f"Metafile(name={self.name!r}, info_hash={self.info_hash!r})"


async def read_metafile(path: str | PathLike[str]) -> Metafile:
    """Read and decode a .torrent file without blocking the event loop."""
    data = await asyncio.to_thread(Path(path).read_bytes)
    try:
        return Metafile.decode(data)
    except MetafileDecodeError as exc:
        raise MetafileDecodeError(f"{path}: {exc}") from exc
