"""
KV HTTP service.

Thin REST wrapper around one structkv store.

Run:

    uvicorn structkv.service:app --port 8002

Environment:
    STRUCTKV_URL, STRUCTKV_TABLE, STRUCTKV_MAX_CONNECTIONS
"""

import logging
from contextlib import asynccontextmanager
from typing import Any, Dict, Optional

from fastapi import Body, FastAPI, HTTPException, Response
from pydantic import BaseModel

from structkv.stores import BaseStore
from structkv.utils.config import StoreConfig, config_from_env, open_store_from_config
from structkv.utils.exceptions import DecodeError, EncodeError, QueryError

logger = logging.getLogger(__name__)


class KVItem(BaseModel):
    key: str
    value: Any


def create_app(store: Optional[BaseStore] = None, config: Optional[StoreConfig] = None) -> FastAPI:
    """
    Build the service app.

    Args:
        store (BaseStore): Store to serve. The caller keeps ownership and closes it.
        config (StoreConfig): Used when no store is given. The app opens the
            store at startup and closes it at shutdown. Defaults to the
            STRUCTKV_* environment variables.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        owned = app.state.store is None
        if owned:
            cfg = config if config is not None else config_from_env()
            app.state.store = open_store_from_config(cfg)
        logger.info("KV service starting on table %s", app.state.store.table)
        try:
            yield
        finally:
            logger.info("KV service shutting down")
            if owned:
                app.state.store.close()
                app.state.store = None

    app = FastAPI(title="KV Service", version="0.1.0", lifespan=lifespan)
    app.state.store = store

    @app.get("/items/{key}", response_model=KVItem, summary="Read one item")
    def get_item(key: str) -> KVItem:
        try:
            found, value = app.state.store.get(key)
        except DecodeError as exc:
            logger.warning("Stored value for %s is not valid JSON: %s", key, exc)
            raise HTTPException(status_code=500, detail=str(exc))
        except QueryError as exc:
            logger.warning("Reading %s failed: %s", key, exc)
            raise HTTPException(status_code=503, detail=str(exc))
        if not found:
            raise HTTPException(status_code=404, detail=f"Key {key!r} not found")
        return KVItem(key=key, value=value)

    @app.put("/items/{key}", response_model=KVItem, summary="Create or replace one item")
    def put_item(key: str, value: Any = Body(...)) -> KVItem:
        try:
            app.state.store.set(key, value)
        except EncodeError as exc:
            raise HTTPException(status_code=422, detail=str(exc))
        except QueryError as exc:
            logger.warning("Writing %s failed: %s", key, exc)
            raise HTTPException(status_code=503, detail=str(exc))
        return KVItem(key=key, value=value)

    @app.delete("/items/{key}", status_code=204, summary="Delete one item")
    def delete_item(key: str) -> Response:
        try:
            app.state.store.remove(key)
        except QueryError as exc:
            logger.warning("Removing %s failed: %s", key, exc)
            raise HTTPException(status_code=503, detail=str(exc))
        return Response(status_code=204)

    @app.get("/health", summary="Health check")
    def health() -> Dict[str, str]:
        try:
            app.state.store.ping()
        except QueryError as exc:
            raise HTTPException(status_code=503, detail=str(exc))
        return {"status": "ok"}

    return app


# store is opened from the environment at startup
app = create_app()
