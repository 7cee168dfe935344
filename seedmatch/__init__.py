"""Torrent-identity resolution: tracker snatching and fuzzy index lookups."""

from seedmatch.__version__ import __version__

__all__ = ["__version__"]
