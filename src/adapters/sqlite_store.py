"""Almacenamiento SQLite de la caché de dominios.

Por qué SQLite:
- Un único fichero local, sin servidor, suficiente para miles de filas.
- La tabla es un multimapa: no hay clave única sobre `domain`.

Todos los `sqlite3.Error` se traducen a `StorageError` en este borde.
"""

from __future__ import annotations

import logging
import sqlite3
from pathlib import Path
from typing import Iterable

from core.domain.errors import StorageError
from core.domain.models import DomainRecord, Provider

logger = logging.getLogger(__name__)

MEMORY = ":memory:"

_SCHEMA = (
    """
    CREATE TABLE IF NOT EXISTS domain_list (
        account_id TEXT NOT NULL,
        real_id TEXT NOT NULL,
        provider TEXT NOT NULL,
        domain TEXT NOT NULL
    )
    """,
    "CREATE INDEX IF NOT EXISTS idx_domain_list_domain ON domain_list(domain)",
)


class SqliteInventoryStore:
    """Implementa `core.interfaces.storage.InventoryStore` sobre sqlite3."""

    def __init__(self, path: Path | str) -> None:
        self._path = str(path)
        self._conn: sqlite3.Connection | None = None

    @property
    def path(self) -> str:
        return self._path

    def _connection(self) -> sqlite3.Connection:
        if self._conn is None:
            try:
                if self._path != MEMORY:
                    Path(self._path).parent.mkdir(parents=True, exist_ok=True)
                self._conn = sqlite3.connect(self._path, check_same_thread=False)
            except (OSError, sqlite3.Error) as exc:
                raise StorageError(f"Error opening cache file {self._path}: {exc}") from exc
        return self._conn

    def exists(self) -> bool:
        if self._path == MEMORY:
            return self._conn is not None
        return Path(self._path).is_file()

    def create_schema(self) -> None:
        conn = self._connection()
        try:
            with conn:
                for statement in _SCHEMA:
                    conn.execute(statement)
        except sqlite3.Error as exc:
            raise StorageError(f"Error creating cache schema: {exc}") from exc
        logger.debug("Cache schema created/verified at %s", self._path)

    def wipe(self) -> None:
        conn = self._connection()
        try:
            with conn:
                conn.execute("DELETE FROM domain_list")
        except sqlite3.Error as exc:
            raise StorageError(f"Error wiping cache: {exc}") from exc

    def insert_many(self, records: Iterable[DomainRecord]) -> int:
        rows = [(r.account_id, r.real_id, r.provider.value, r.domain) for r in records]
        if not rows:
            return 0
        conn = self._connection()
        try:
            with conn:
                conn.executemany(
                    "INSERT INTO domain_list(account_id, real_id, provider, domain) VALUES (?, ?, ?, ?)",
                    rows,
                )
        except sqlite3.Error as exc:
            raise StorageError(f"Error inserting {len(rows)} record(s): {exc}") from exc
        return len(rows)

    def count(self) -> int:
        try:
            row = self._connection().execute("SELECT COUNT(*) FROM domain_list").fetchone()
        except sqlite3.Error as exc:
            raise StorageError(f"Error counting cache records: {exc}") from exc
        return int(row[0])

    def query_exact(self, domain: str) -> list[DomainRecord]:
        try:
            rows = self._connection().execute(
                "SELECT account_id, real_id, provider, domain FROM domain_list WHERE domain = ? ORDER BY rowid",
                (domain,),
            ).fetchall()
        except sqlite3.Error as exc:
            raise StorageError(f"Error querying cache: {exc}") from exc
        return [
            DomainRecord(account_id=account_id, real_id=real_id, provider=Provider(provider), domain=name)
            for account_id, real_id, provider, name in rows
        ]

    def close(self) -> None:
        if self._conn is not None:
            self._conn.close()
            self._conn = None

    def __enter__(self) -> "SqliteInventoryStore":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()
