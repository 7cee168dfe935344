from __future__ import annotations

import pytest

from seedmatch.config import FuzzyMatchConfig
from seedmatch.index.store import SQLiteTorrentIndex
from seedmatch.index.types import IndexedTorrentRecord
from seedmatch.metafile import MetafileDecodeError
from seedmatch.resolve import fuzzy
from seedmatch.resolve.names import canonical_key

QUERY = "Show.Name.S01E02-GROUP"  # canonical key "groupnames01e02show", 19 chars


class _ListStore:
    """Returns the same records for any pattern and remembers what was asked."""

    def __init__(self, records: list[IndexedTorrentRecord]) -> None:
        self.records = records
        self.patterns: list[str] = []

    async def query_by_name_pattern(self, pattern: str) -> list[IndexedTorrentRecord]:
        self.patterns.append(pattern)
        return list(self.records)

    async def query_by_criteria(self, info_hash=None, name=None):
        return None

    async def all_file_paths(self) -> list[str]:
        return [record.file_path for record in self.records]


class _FakeLog:
    def __init__(self) -> None:
        self.decisions: list[str] = []

    def decide(self, msg: str) -> None:
        self.decisions.append(msg)

    def debug(self, *_args, **_kwargs) -> None:
        return None


def _record(name: str, file_path: str = "/nowhere.torrent") -> IndexedTorrentRecord:
    return IndexedTorrentRecord(name=name, file_path=file_path, info_hash="0" * 40)


@pytest.fixture
def fake_log(monkeypatch: pytest.MonkeyPatch) -> _FakeLog:
    log = _FakeLog()
    monkeypatch.setattr(fuzzy.logger, "get_logger", lambda: log)
    return log


@pytest.mark.parametrize(
    ("length", "threshold", "expected"),
    [
        (19, 1, 1.9),
        (19, 3, 3),
        (5, 0, 0.5),
        (200, 1, 8),
        (200, 12, 12),
        (0, 1, 1),
    ],
)
def test_distance_ceiling(length: int, threshold: float, expected: float) -> None:
    assert fuzzy.distance_ceiling(length, threshold) == pytest.approx(expected)


def test_candidate_map_last_write_wins() -> None:
    first = _record("Show.Name.S01E02-GROUP.mkv", "/a.torrent")
    second = _record("show name s01e02 group", "/b.torrent")
    other = _record("Show.Name.S01E03-GROUP", "/c.torrent")

    candidates = fuzzy.build_candidate_map([first, other, second])

    assert dict(candidates) == {
        canonical_key(first.name): second,
        canonical_key(other.name): other,
    }
    with pytest.raises(TypeError):
        candidates["x"] = other  # type: ignore[index]


def test_candidate_map_handles_large_season_bucket_in_one_pass() -> None:
    records = (
        _record(f"Show{i % 500}.S01E02-GRP", f"/t/{i}.torrent")
        for i in range(20000)
    )

    candidates = fuzzy.build_candidate_map(records)

    assert len(candidates) == 500
    assert candidates[canonical_key("Show7.S01E02-GRP")].file_path == "/t/19507.torrent"


def test_nearest_candidate_prefers_first_on_ties() -> None:
    assert fuzzy.nearest_candidate("abcd", ["abcx", "abxd", "zzzz"]) == ("abcx", 1)
    assert fuzzy.nearest_candidate("abcd", []) is None


@pytest.mark.asyncio
async def test_distance_at_ceiling_is_accepted(fake_log: _FakeLog) -> None:
    store = _ListStore([_record("Show.Name.S01E02-GROUPXYZ")])  # distance 3
    resolver = fuzzy.FuzzyNameResolver(store, FuzzyMatchConfig(levenshtein_threshold=3))

    match = await resolver.find_match(QUERY)

    assert match is not None
    assert match.distance == 3
    assert match.ceiling == 3
    assert match.accepted
    assert store.patterns == ["%S01E02%GROUP%"]


@pytest.mark.asyncio
async def test_distance_one_past_ceiling_is_rejected_but_logged(fake_log: _FakeLog) -> None:
    store = _ListStore([_record("Show.Name.S01E02-GROUPWXYZ")])  # distance 4
    resolver = fuzzy.FuzzyNameResolver(store, FuzzyMatchConfig(levenshtein_threshold=3))

    match = await resolver.find_match(QUERY)

    assert match is not None
    assert match.distance == 4
    assert not match.accepted
    assert await resolver.resolve_by_name(QUERY) is None
    assert len(fake_log.decisions) == 2
    assert "[levenshtein(3)] -> Show.Name.S01E02-GROUPWXYZ" in fake_log.decisions[0]
    assert "(4)" in fake_log.decisions[0]


@pytest.mark.asyncio
async def test_distance_beyond_advisory_window_is_not_logged(fake_log: _FakeLog) -> None:
    store = _ListStore([_record("Show.Name.S01E02-GROUPTUVWXY")])  # distance 6
    config = FuzzyMatchConfig(levenshtein_threshold=3, advisory_window=2)

    match = await fuzzy.FuzzyNameResolver(store, config).find_match(QUERY)

    assert match is not None and match.distance == 6
    assert fake_log.decisions == []


@pytest.mark.asyncio
async def test_per_call_config_overrides_resolver_default(fake_log: _FakeLog) -> None:
    store = _ListStore([_record("Show.Name.S01E02-GROUPWXYZ")])
    resolver = fuzzy.FuzzyNameResolver(store, FuzzyMatchConfig(levenshtein_threshold=1))

    strict = await resolver.find_match(QUERY)
    loose = await resolver.find_match(QUERY, FuzzyMatchConfig(levenshtein_threshold=4))

    assert strict is not None and not strict.accepted
    assert loose is not None and loose.accepted


@pytest.mark.asyncio
async def test_empty_candidate_set_is_no_match(fake_log: _FakeLog) -> None:
    store = _ListStore([])
    assert await fuzzy.FuzzyNameResolver(store).resolve_by_name(QUERY) is None
    assert store.patterns == ["%S01E02%GROUP%"]


@pytest.mark.asyncio
async def test_empty_target_key_is_no_match_without_query(fake_log: _FakeLog) -> None:
    store = _ListStore([_record("Show.Name.S01E02-GROUP")])
    assert await fuzzy.FuzzyNameResolver(store).resolve_by_name(" .-. ") is None
    assert store.patterns == []


@pytest.mark.asyncio
async def test_name_without_release_marker_is_no_match(fake_log: _FakeLog) -> None:
    store = _ListStore([_record("Just Some Words")])
    assert await fuzzy.FuzzyNameResolver(store).resolve_by_name("Just Some Words") is None
    assert store.patterns == []


@pytest.mark.asyncio
async def test_accepted_match_with_corrupt_file_raises(tmp_path, fake_log: _FakeLog) -> None:
    broken = tmp_path / "broken.torrent"
    broken.write_bytes(b"garbage")
    store = _ListStore([_record("Show.Name.S01E02-GROUP.mkv", str(broken))])

    with pytest.raises(MetafileDecodeError):
        await fuzzy.FuzzyNameResolver(store).resolve_by_name(QUERY)


@pytest.mark.asyncio
async def test_resolves_renamed_release_from_sqlite_index(tmp_path, write_torrent) -> None:
    path = write_torrent("Show.Name.S01E02.GROUP.mkv")
    store = SQLiteTorrentIndex(tmp_path / "index.db")
    store.init_db()
    await store.insert(IndexedTorrentRecord(name="Show.Name.S01E02.GROUP.mkv", file_path=str(path), info_hash="a" * 40))

    meta = await fuzzy.FuzzyNameResolver(store).resolve_by_name("Show Name - S01E02 - GROUP")

    assert meta is not None
    assert meta.name == "Show.Name.S01E02.GROUP.mkv"


@pytest.mark.asyncio
async def test_other_bucket_is_filtered_out_of_sqlite_index(tmp_path, write_torrent) -> None:
    path = write_torrent("Unrelated.Movie.2020.GROUP.mkv")
    store = SQLiteTorrentIndex(tmp_path / "index.db")
    store.init_db()
    await store.insert(
        IndexedTorrentRecord(name="Unrelated.Movie.2020.GROUP.mkv", file_path=str(path), info_hash="b" * 40)
    )

    resolver = fuzzy.FuzzyNameResolver(store)

    assert await store.query_by_name_pattern("%S01E02%") == []
    assert await resolver.resolve_by_name("Show.Name.S01E02.GROUP.mkv") is None
