from __future__ import annotations

from pathlib import Path
from typing import Callable

import pytest
import torf

TEST_TRACKER = "https://tracker.example/announce"


@pytest.fixture
def make_torrent(tmp_path: Path) -> Callable[..., bytes]:
    """Build real .torrent bytes for a single file called ``name``."""
    content_dir = tmp_path / "content"
    content_dir.mkdir(exist_ok=True)

    def _make(name: str, payload: bytes = b"seedmatch payload " * 64) -> bytes:
        path = content_dir / name
        path.write_bytes(payload)
        torrent = torf.Torrent(path=path, trackers=[TEST_TRACKER])
        torrent.generate()
        return torrent.dump()

    return _make


@pytest.fixture
def write_torrent(tmp_path: Path, make_torrent: Callable[..., bytes]) -> Callable[..., Path]:
    """Write a .torrent for ``name`` into ``tmp_path/torrents`` and return its path."""
    torrent_dir = tmp_path / "torrents"
    torrent_dir.mkdir(exist_ok=True)

    def _write(name: str, file_name: str | None = None) -> Path:
        path = torrent_dir / (file_name or f"{name}.torrent")
        path.write_bytes(make_torrent(name))
        return path.resolve()

    return _write
