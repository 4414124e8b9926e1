class ConfigError(Exception):
    """Raised when a store configuration is missing or invalid."""


class StoreError(Exception):
    """
    Base class for errors raised by a store. The driver exception, if any, is
    chained as __cause__.
    """

    def __init__(self, message: str, key: str = None) -> None:
        super().__init__(message)
        self.key = key


class StoreConnectionError(StoreError):
    """The backend could not be reached or the connection failed validation."""


class QueryError(StoreError):
    """A get/set/remove statement failed on the backend."""


class EncodeError(StoreError):
    """The value passed to set() cannot be serialized."""


class DecodeError(StoreError):
    """The stored payload cannot be decoded into the requested type."""
