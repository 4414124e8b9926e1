from typing import Any, Optional, Tuple

from structkv.codecs import resolve_codec
from structkv.utils.exceptions import StoreError


class BaseStore:
    """
    Base class for key-value stores backed by one relational table with the
    columns `key` (text, primary key) and `value` (JSON text).

    Backends implement the four primitives below. Each primitive runs exactly
    one statement and raises QueryError on any backend failure:

        _fetch(key)            -> (row_exists, payload)
        _upsert(key, payload)  -> insert-or-replace in one statement
        _delete(key)           -> delete, no error if absent
        ping()                 -> SELECT 1

    Serialization lives here so every backend stores the same JSON text.
    """

    def __init__(self, table: str) -> None:
        self.table = table

    def get(self, key: str, as_type: Any = Any) -> Tuple[bool, Any]:
        """
        Look up `key` and decode its value into `as_type`.

        Args:
            key (str): Record key.
            as_type: Type (or Codec) to decode into. Defaults to plain JSON data.

        Returns:
            (False, None) when the key is absent, (True, value) otherwise.

        Raises:
            DecodeError: The record exists but its value does not fit `as_type`.
            QueryError: The backend failed.
        """
        codec = resolve_codec(as_type)
        found, payload = self._fetch(key)
        if not found:
            return False, None
        return True, self._with_key(key, codec.decode, payload)

    def set(self, key: str, value: Any, as_type: Optional[Any] = None) -> None:
        """
        Insert or fully replace the record for `key`.

        Args:
            key (str): Record key.
            value: Value to store; anything pydantic can serialize to JSON.
            as_type: Optional type (or Codec) to serialize `value` as.

        Raises:
            EncodeError: `value` cannot be serialized. Nothing is written.
            QueryError: The backend failed.
        """
        codec = resolve_codec(Any if as_type is None else as_type)
        payload = self._with_key(key, codec.encode, value)
        self._upsert(key, payload)

    def remove(self, key: str) -> None:
        """Delete the record for `key`. Removing an absent key is a no-op."""
        self._delete(key)

    def ping(self) -> None:
        raise NotImplementedError(f"{type(self).__name__}.ping() not implemented")

    def close(self) -> None:
        raise NotImplementedError(f"{type(self).__name__}.close() not implemented")

    def _fetch(self, key: str) -> Tuple[bool, Optional[str]]:
        raise NotImplementedError(f"{type(self).__name__}._fetch() not implemented")

    def _upsert(self, key: str, payload: str) -> None:
        raise NotImplementedError(f"{type(self).__name__}._upsert() not implemented")

    def _delete(self, key: str) -> None:
        raise NotImplementedError(f"{type(self).__name__}._delete() not implemented")

    @staticmethod
    def _with_key(key: str, func, arg):
        try:
            return func(arg)
        except StoreError as exc:
            exc.key = key
            raise

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def __repr__(self) -> str:
        return f"{type(self).__name__}(table={self.table!r})"
