"""Resolving names and criteria to torrents already in the index."""

from .fuzzy import (
    FuzzyMatch,
    FuzzyNameResolver,
    build_candidate_map,
    distance_ceiling,
    nearest_candidate,
)
from .locator import TorrentNotFoundError, locate_by_criteria
from .names import (
    EpisodeMarker,
    MovieMarker,
    ReleaseMarker,
    SeasonMarker,
    canonical_key,
    classify_release,
    release_group,
    search_pattern,
    strip_extension,
)

__all__ = [
    "EpisodeMarker",
    "FuzzyMatch",
    "FuzzyNameResolver",
    "MovieMarker",
    "ReleaseMarker",
    "SeasonMarker",
    "TorrentNotFoundError",
    "build_candidate_map",
    "canonical_key",
    "classify_release",
    "distance_ceiling",
    "locate_by_criteria",
    "nearest_candidate",
    "release_group",
    "search_pattern",
    "strip_extension",
]
