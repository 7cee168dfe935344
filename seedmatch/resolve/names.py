"""Release-name normalization and search-term extraction."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import List, Optional, Union

VIDEO_EXTENSIONS = (".mkv", ".mp4", ".avi", ".m4v", ".ts", ".wmv", ".mov")
DATA_EXTENSIONS = (".rar", ".zip", ".7z", ".tar", ".iso", ".img", ".bin")

_TOKEN_SEPARATORS = re.compile(r"[.\s-]+")
_WILDCARD_SEPARATORS = re.compile(r"[^0-9a-z]+", re.IGNORECASE)

EPISODE_REGEX = re.compile(r"(?<![0-9a-z])S\d{1,4}[\s._-]?E\d{1,4}(?:-?E\d{1,4})*(?![0-9a-z])", re.IGNORECASE)
SEASON_REGEX = re.compile(r"(?<![0-9a-z])S\d{1,4}(?![0-9a-z])", re.IGNORECASE)
MOVIE_REGEX = re.compile(r"^(?P<title>.+?)[\s._(\[-]+(?P<year>(?:19|20)\d{2})(?![0-9a-z])", re.IGNORECASE)
# trailing "-GROUP" tag, skipping resolutions and bare numbers
GROUP_REGEX = re.compile(r"(?<=-)\s*(?!\d{3,4}[ip]\b)(?!\d+\b)(\w+)\s*(?:\[[^\]]*\])?\s*$", re.IGNORECASE)


def strip_extension(name: str) -> str:
    """Drop one known video or data file extension from the end of ``name``."""
    lowered = name.lower()
    for extension in VIDEO_EXTENSIONS + DATA_EXTENSIONS:
        if lowered.endswith(extension):
            return name[: -len(extension)]
    return name


def tokenize_name(name: str) -> List[str]:
    return sorted(token.lower() for token in _TOKEN_SEPARATORS.split(name) if token)


def canonical_key(name: str) -> str:
    """
    Order- and case-insensitive comparison key for a release name, minus one trailing file extension.

    ``Show.Name.S01E02-GROUP.mkv`` and ``group show name s01e02`` share a key.
    """
    return "".join(tokenize_name(strip_extension(name)))


def _wildcard_join(marker: str) -> str:
    return "%".join(part for part in _WILDCARD_SEPARATORS.split(marker) if part)


@dataclass(frozen=True)
class EpisodeMarker:
    marker: str

    @property
    def base_term(self) -> str:
        return _wildcard_join(self.marker)


@dataclass(frozen=True)
class SeasonMarker:
    marker: str

    @property
    def base_term(self) -> str:
        return _wildcard_join(self.marker)


@dataclass(frozen=True)
class MovieMarker:
    """Title plus year; punctuation between title words becomes a wildcard."""

    marker: str

    @property
    def base_term(self) -> str:
        return _wildcard_join(self.marker)


ReleaseMarker = Union[EpisodeMarker, SeasonMarker, MovieMarker]


def classify_release(name: str) -> Optional[ReleaseMarker]:
    """Episode beats season beats movie; None when the name carries no marker."""
    episode = EPISODE_REGEX.search(name)
    if episode:
        return EpisodeMarker(episode.group(0))
    season = SEASON_REGEX.search(name)
    if season:
        return SeasonMarker(season.group(0))
    movie = MOVIE_REGEX.search(name)
    if movie:
        return MovieMarker(movie.group(0))
    return None


def release_group(name: str) -> Optional[str]:
    match = GROUP_REGEX.search(strip_extension(name))
    return match.group(1) if match else None


def search_pattern(name: str) -> Optional[str]:
    """
    SQL LIKE pattern that buckets index names sharing ``name``'s release marker.

    Returns None when the name has no episode, season or movie marker.
    """
    marker = classify_release(name)
    if marker is None:
        return None
    group = release_group(name)
    term = f"{marker.base_term}%{group}" if group else marker.base_term
    return f"%{term}%"
