"""Write snatched metafiles to the output directory."""

from __future__ import annotations

import os
from os import PathLike
from pathlib import Path

from seedmatch.config import IndexConfig
from seedmatch.metafile import Metafile
from seedmatch.resolve.names import strip_extension

TORRENT_FILE_MODE = 0o644


def torrent_file_name(meta: Metafile, *, tracker: str, tag: str = "") -> str:
    """``[tag][tracker]<name>.torrent`` with any media extension dropped from the name."""
    return f"[{tag}][{tracker}]{strip_extension(meta.file_system_safe_name())}.torrent"


def save_torrent_file(
    meta: Metafile,
    *,
    tracker: str,
    output_dir: str | PathLike[str],
    tag: str = "",
) -> Path:
    """Encode ``meta`` into ``output_dir`` and return the written path."""
    path = Path(output_dir) / torrent_file_name(meta, tracker=tracker, tag=tag)
    path.write_bytes(meta.encode())
    os.chmod(path, TORRENT_FILE_MODE)
    return path


def save_to_output_dir(meta: Metafile, config: IndexConfig, *, tracker: str, tag: str = "") -> Path:
    """``save_torrent_file`` into the configured ``output_dir``."""
    if config.output_dir is None:
        raise ValueError("No output dir configured")
    return save_torrent_file(meta, tracker=tracker, output_dir=config.output_dir, tag=tag)
