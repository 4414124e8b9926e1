from .codecs import Codec, JsonCodec, resolve_codec
from .stores import (STORE_BACKENDS, BaseStore, PostgresStore, SqliteStore,
                     create_table, open_store)
from .utils.config import (StoreConfig, config_from_env, load_config,
                           open_store_from_config)
from .utils.exceptions import (ConfigError, DecodeError, EncodeError,
                               QueryError, StoreConnectionError, StoreError)
