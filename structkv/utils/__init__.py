from .exceptions import (ConfigError, DecodeError, EncodeError, QueryError,
                         StoreConnectionError, StoreError)
