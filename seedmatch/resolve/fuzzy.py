"""Fuzzy lookup of a release name against the torrent index.

Two stages: a SQL LIKE pre-filter keeps only index names sharing the query's
episode/season/movie marker (and group tag), then the closest canonical key
by Levenshtein distance is accepted if it falls under a ceiling that grows
with the length of the query key.
"""

from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import Iterable, Mapping, Optional, Tuple

from rapidfuzz.distance import Levenshtein

from seedmatch import logger
from seedmatch.config import FuzzyMatchConfig
from seedmatch.index.protocols import TorrentIndexStore
from seedmatch.index.types import IndexedTorrentRecord
from seedmatch.metafile import Metafile, read_metafile
from seedmatch.resolve.names import canonical_key, search_pattern

RELATIVE_CEILING = 0.1
MAX_LENGTH_CEILING = 8


@dataclass(frozen=True)
class FuzzyMatch:
    """Closest candidate for a query and how it scored."""

    record: IndexedTorrentRecord
    distance: int
    ceiling: float
    similarity: float

    @property
    def accepted(self) -> bool:
        return self.distance <= self.ceiling


def distance_ceiling(target_length: int, threshold: float) -> float:
    """Largest accepted edit distance for a query key of ``target_length``."""
    return max(threshold, min(RELATIVE_CEILING * target_length, MAX_LENGTH_CEILING))


def build_candidate_map(records: Iterable[IndexedTorrentRecord]) -> Mapping[str, IndexedTorrentRecord]:
    """Key records by canonical name; a later record replaces an earlier one on collision."""
    return MappingProxyType(dict((canonical_key(record.name), record) for record in records))


def nearest_candidate(target: str, keys: Iterable[str]) -> Optional[Tuple[str, int]]:
    """Key closest to ``target`` and its distance; the first key wins ties."""
    best: Optional[Tuple[str, int]] = None
    for key in keys:
        distance = Levenshtein.distance(target, key)
        if best is None or distance < best[1]:
            best = (key, distance)
    return best


class FuzzyNameResolver:
    """Resolves free-form release names to torrents already in the index."""

    def __init__(self, store: TorrentIndexStore, config: Optional[FuzzyMatchConfig] = None):
        self.store = store
        self.config = config or FuzzyMatchConfig()

    async def find_match(self, name: str, config: Optional[FuzzyMatchConfig] = None) -> Optional[FuzzyMatch]:
        """Best-scoring candidate for ``name``, accepted or not; None if nothing to compare."""
        config = config or self.config
        log = logger.get_logger()

        target = canonical_key(name)
        if not target:
            log.debug(f"Fuzzy lookup skipped, '{name}' has no comparable tokens")
            return None

        pattern = search_pattern(name)
        if pattern is None:
            log.debug(f"Fuzzy lookup skipped, no episode/season/movie marker in '{name}'")
            return None

        records = await self.store.query_by_name_pattern(pattern)
        candidates = build_candidate_map(records)
        nearest = nearest_candidate(target, candidates.keys())
        if nearest is None:
            log.debug(f"Fuzzy lookup for '{name}' found no candidates for pattern '{pattern}'")
            return None

        key, distance = nearest
        ceiling = distance_ceiling(len(target), config.levenshtein_threshold)
        similarity = 100 * (1 - distance / len(target))
        match = FuzzyMatch(record=candidates[key], distance=distance, ceiling=ceiling, similarity=similarity)

        if distance <= ceiling + config.advisory_window:
            log.decide(
                f"[levenshtein({ceiling:g})] -> {match.record.name}\n"
                f"\t\t -> {name}\n"
                f"\t\t\t = {similarity:.2f}% ({distance})"
            )
        return match

    async def resolve_by_name(self, name: str, config: Optional[FuzzyMatchConfig] = None) -> Optional[Metafile]:
        """Decoded metafile of the indexed torrent matching ``name``, or None."""
        match = await self.find_match(name, config)
        if match is None or not match.accepted:
            return None
        return await read_metafile(match.record.file_path)
