import os
import sqlite3

import psycopg2
import pytest
from psycopg2 import sql

import structkv

TABLE = "structkv_test"
POSTGRES_URL = os.environ.get("STRUCTKV_TEST_POSTGRES_URL")


class RawTable:
    """
    Direct access to the backing table, bypassing the store. Opens a fresh
    connection per call.
    """

    def __init__(self, url: str, table: str) -> None:
        self.url = url
        self.table = table

    def _run(self, query: str, params: tuple):
        if self.url.startswith("sqlite"):
            conn = sqlite3.connect(structkv.SqliteStore.database_from_url(self.url))
            try:
                with conn:
                    return conn.execute(query.replace("%s", "?").format(table=f'"{self.table}"'), params).fetchone()
            finally:
                conn.close()

        conn = psycopg2.connect(self.url)
        try:
            with conn.cursor() as cur:
                cur.execute(sql.SQL(query).format(table=sql.Identifier(self.table)), params)
                row = cur.fetchone() if cur.description else None
            conn.commit()
            return row
        finally:
            conn.close()

    def value(self, key: str):
        row = self._run("SELECT value FROM {table} WHERE key = %s", (key,))
        return row[0] if row else None

    def count(self, key: str) -> int:
        return self._run("SELECT count(*) FROM {table} WHERE key = %s", (key,))[0]

    def write(self, key: str, value) -> None:
        self._run("INSERT INTO {table} (key, value) VALUES (%s, %s)", (key, value))

    def truncate(self) -> None:
        self._run("DELETE FROM {table}", ())


@pytest.fixture
def sqlite_url(tmp_path):
    url = f"sqlite:///{tmp_path / 'store.db'}"
    structkv.create_table(url, TABLE)
    return url


@pytest.fixture(params=["sqlite", "postgres"])
def store_url(request, tmp_path):
    if request.param == "sqlite":
        url = f"sqlite:///{tmp_path / 'store.db'}"
    else:
        if not POSTGRES_URL:
            pytest.skip("STRUCTKV_TEST_POSTGRES_URL not set")
        url = POSTGRES_URL

    structkv.create_table(url, TABLE)
    RawTable(url, TABLE).truncate()
    return url


@pytest.fixture
def store(store_url):
    kv_store = structkv.open_store(store_url, TABLE)
    yield kv_store
    kv_store.close()


@pytest.fixture
def raw(store_url):
    return RawTable(store_url, TABLE)


@pytest.fixture
def sqlite_raw(sqlite_url):
    return RawTable(sqlite_url, TABLE)
