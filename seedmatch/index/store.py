"""SQLite-backed torrent index.

Implements the TorrentIndexStore protocol on top of a single ``torrent``
table. Queries run in a worker thread so callers stay on the event loop.
"""

from __future__ import annotations

import asyncio
import sqlite3
from contextlib import contextmanager
from os import PathLike
from typing import Iterable, Iterator, List, Optional

from seedmatch.index.types import IndexedTorrentRecord


class SQLiteTorrentIndex:
    """Thin SQLite wrapper that satisfies the TorrentIndexStore contract."""

    def __init__(self, db_path: str | PathLike[str]) -> None:
        self._db_path = str(db_path)

    @contextmanager
    def _connect(self) -> Iterator[sqlite3.Connection]:
        conn = sqlite3.connect(self._db_path)
        conn.row_factory = sqlite3.Row
        try:
            with conn:
                yield conn
        finally:
            conn.close()

    def init_db(self) -> None:
        """Create the torrent table if it does not exist.

        Fields:
        - file_path: absolute path of the .torrent file (PRIMARY KEY)
        - info_hash: hex info hash read from the file
        - name: release name embedded in the metainfo
        """

        with self._connect() as conn:
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS torrent (
                    file_path TEXT PRIMARY KEY,
                    info_hash TEXT NOT NULL,
                    name TEXT NOT NULL
                )
                """
            )
            conn.execute("CREATE INDEX IF NOT EXISTS idx_torrent_info_hash ON torrent (info_hash)")
            conn.execute("CREATE INDEX IF NOT EXISTS idx_torrent_name ON torrent (name)")

    @staticmethod
    def _to_record(row: sqlite3.Row) -> IndexedTorrentRecord:
        return IndexedTorrentRecord(
            name=row["name"],
            file_path=row["file_path"],
            info_hash=row["info_hash"],
        )

    def _select_by_name_pattern(self, pattern: str) -> List[IndexedTorrentRecord]:
        with self._connect() as conn:
            rows = conn.execute(
                "SELECT name, file_path, info_hash FROM torrent WHERE name LIKE ? ORDER BY rowid",
                (pattern,),
            ).fetchall()
        return [self._to_record(row) for row in rows]

    def _select_by_criteria(
        self,
        info_hash: Optional[str],
        name: Optional[str],
    ) -> Optional[IndexedTorrentRecord]:
        clauses: list[str] = []
        params: list[str] = []
        if info_hash:
            clauses.append("info_hash = ?")
            params.append(info_hash)
        if name:
            clauses.append("name = ?")
            params.append(name)
        where = f" WHERE {' AND '.join(clauses)}" if clauses else ""
        with self._connect() as conn:
            row = conn.execute(
                f"SELECT name, file_path, info_hash FROM torrent{where} ORDER BY rowid LIMIT 1",
                params,
            ).fetchone()
        return self._to_record(row) if row is not None else None

    def _select_file_paths(self) -> List[str]:
        with self._connect() as conn:
            rows = conn.execute("SELECT file_path FROM torrent ORDER BY rowid").fetchall()
        return [row["file_path"] for row in rows]

    def _select_info_hashes(self) -> List[str]:
        with self._connect() as conn:
            rows = conn.execute("SELECT info_hash FROM torrent ORDER BY rowid").fetchall()
        return [row["info_hash"] for row in rows]

    def _has_file_path(self, file_path: str) -> bool:
        with self._connect() as conn:
            row = conn.execute("SELECT 1 FROM torrent WHERE file_path = ?", (file_path,)).fetchone()
        return row is not None

    def _insert(self, record: IndexedTorrentRecord) -> None:
        with self._connect() as conn:
            conn.execute(
                "INSERT INTO torrent (file_path, info_hash, name) VALUES (?, ?, ?) "
                "ON CONFLICT(file_path) DO NOTHING",
                (record.file_path, record.info_hash, record.name),
            )

    def _delete_file_paths(self, file_paths: Iterable[str]) -> int:
        rows = [(path,) for path in file_paths]
        if not rows:
            return 0
        with self._connect() as conn:
            cursor = conn.executemany(
                "DELETE FROM torrent WHERE file_path = ?",
                rows,
            )
            return cursor.rowcount

    async def query_by_name_pattern(self, pattern: str) -> List[IndexedTorrentRecord]:
        """Records whose name matches a SQL LIKE pattern, in storage order."""
        return await asyncio.to_thread(self._select_by_name_pattern, pattern)

    async def query_by_criteria(
        self,
        info_hash: Optional[str] = None,
        name: Optional[str] = None,
    ) -> Optional[IndexedTorrentRecord]:
        """First record matching every provided criterion, or None."""
        return await asyncio.to_thread(self._select_by_criteria, info_hash, name)

    async def all_file_paths(self) -> List[str]:
        return await asyncio.to_thread(self._select_file_paths)

    async def info_hashes(self) -> List[str]:
        return await asyncio.to_thread(self._select_info_hashes)

    async def has_file_path(self, file_path: str) -> bool:
        return await asyncio.to_thread(self._has_file_path, file_path)

    async def insert(self, record: IndexedTorrentRecord) -> None:
        """Add a record; an existing row for the same file_path is left alone."""
        await asyncio.to_thread(self._insert, record)

    async def delete_file_paths(self, file_paths: Iterable[str]) -> int:
        return await asyncio.to_thread(self._delete_file_paths, list(file_paths))
