from structkv.utils.exceptions import ConfigError

from .base import BaseStore
from .postgres import PostgresStore
from .sqlite import SqliteStore

STORE_BACKENDS = {
    "postgres": PostgresStore,
    "postgresql": PostgresStore,
    "sqlite": SqliteStore,
}


def backend_for_url(url: str) -> type:
    """
    Pick the store class for a connection URL by its scheme.
    """
    scheme = url.split("://", 1)[0].lower() if "://" in url else ""
    if scheme not in STORE_BACKENDS:
        raise ConfigError(f"Unsupported store URL scheme {scheme!r}. Supported: {sorted(STORE_BACKENDS)}")
    return STORE_BACKENDS[scheme]


def open_store(url: str, table: str, **options) -> BaseStore:
    """
    Open the store selected by the URL scheme, bound to `table`. Extra keyword
    arguments go to the backend constructor (e.g. max_connections).
    """
    backend = backend_for_url(url)
    return backend(backend.database_from_url(url), table, **options)


def create_table(url: str, table: str) -> None:
    """Create `table` with the key/value layout if it is missing."""
    backend = backend_for_url(url)
    backend.create_table(backend.database_from_url(url), table)
