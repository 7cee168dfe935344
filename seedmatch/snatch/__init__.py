"""Snatching .torrent files from trackers."""

from .output import save_to_output_dir, save_torrent_file, torrent_file_name
from .snatcher import SnatchResponse, TorrentSnatcher, classify_response, snatch_torrent
from .types import SnatchError, SnatchResult

__all__ = [
    "SnatchError",
    "SnatchResponse",
    "SnatchResult",
    "TorrentSnatcher",
    "classify_response",
    "save_to_output_dir",
    "save_torrent_file",
    "snatch_torrent",
    "torrent_file_name",
]
