"""
SQLite key-value store with the same table layout and behaviour as the
PostgreSQL store. Used for local setups and for running the test-suite
without a database server.
"""

import logging
import re
import sqlite3
import threading
from typing import Optional, Tuple

from structkv.utils.exceptions import QueryError, StoreConnectionError

from .base import BaseStore

logger = logging.getLogger(__name__)

_IDENTIFIER = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


def _quote_table(table: str) -> str:
    if not table or not _IDENTIFIER.match(table):
        raise ValueError(f"Invalid table name: {table!r}")
    return f'"{table}"'


class SqliteStore(BaseStore):
    def __init__(self, database: str, table: str) -> None:
        super().__init__(table)
        quoted = _quote_table(table)
        self._select_sql = f"SELECT value FROM {quoted} WHERE key = ?"
        self._upsert_sql = (
            f"INSERT INTO {quoted} (key, value) VALUES (?, ?) "
            "ON CONFLICT (key) DO UPDATE SET value = excluded.value"
        )
        self._delete_sql = f"DELETE FROM {quoted} WHERE key = ?"

        try:
            # autocommit, every statement is its own transaction
            self._conn = sqlite3.connect(database, check_same_thread=False, isolation_level=None)
        except sqlite3.Error as exc:
            raise StoreConnectionError(f"Cannot open SQLite database {database!r}: {exc}") from exc
        self._lock = threading.Lock()

        try:
            self.ping()
        except QueryError as exc:
            self._conn.close()
            raise StoreConnectionError(f"SQLite database {database!r} failed validation: {exc}") from exc

        logger.debug("Opened SQLite store %s on table %s", database, table)

    @staticmethod
    def database_from_url(url: str) -> str:
        """
        Map a URL onto a sqlite3 database argument:

            sqlite:///store.db        -> store.db (relative)
            sqlite:////var/store.db   -> /var/store.db
            sqlite:///:memory:        -> :memory:
        """
        path = url.split("://", 1)[1] if "://" in url else url
        if path.startswith("/"):
            path = path[1:]
        return path or ":memory:"

    @classmethod
    def create_table(cls, database: str, table: str) -> None:
        """Create the backing table if it does not exist."""
        query = f"CREATE TABLE IF NOT EXISTS {_quote_table(table)} (key TEXT PRIMARY KEY, value TEXT)"
        try:
            conn = sqlite3.connect(database)
        except sqlite3.Error as exc:
            raise StoreConnectionError(f"Cannot open SQLite database {database!r}: {exc}") from exc
        try:
            with conn:
                conn.execute(query)
        except sqlite3.Error as exc:
            raise QueryError(f"Cannot create table {table!r}: {exc}") from exc
        finally:
            conn.close()

    def _execute(self, query: str, params: tuple = (), key: Optional[str] = None):
        with self._lock:
            try:
                return self._conn.execute(query, params).fetchone()
            except sqlite3.Error as exc:
                raise QueryError(f"SQLite query on {self.table!r} failed: {exc}", key) from exc

    def _fetch(self, key: str) -> Tuple[bool, Optional[str]]:
        row = self._execute(self._select_sql, (key,), key)
        if row is None:
            return False, None
        return True, row[0]

    def _upsert(self, key: str, payload: str) -> None:
        self._execute(self._upsert_sql, (key, payload), key)

    def _delete(self, key: str) -> None:
        self._execute(self._delete_sql, (key,), key)

    def ping(self) -> None:
        self._execute("SELECT 1")

    def close(self) -> None:
        with self._lock:
            self._conn.close()
        logger.debug("Closed SQLite store on table %s", self.table)
