"""
Codecs translate between Python values and the JSON text kept in the `value`
column.

A codec is anything with ``encode(value) -> str`` and ``decode(payload) -> T``.
The default implementation builds a pydantic ``TypeAdapter`` for the requested
type, so the same call works for pydantic models, dataclasses, TypedDicts and
builtins:

    codec = JsonCodec(Point)
    codec.encode(Point(x=10, y=20))   # '{"x":10,"y":20}'
    codec.decode('{"x":1,"y":2}')     # Point(x=1, y=2)
"""

import math
from typing import Any, Dict, Generic, TypeVar

from pydantic import TypeAdapter, ValidationError
from pydantic.errors import PydanticUserError

from structkv.utils.exceptions import DecodeError, EncodeError

T = TypeVar("T")


class Codec(Generic[T]):
    """
    Base class for value codecs. Subclasses raise EncodeError / DecodeError
    and nothing else for bad input.
    """

    def encode(self, value: T) -> str:
        raise NotImplementedError("Codec.encode() not implemented")

    def decode(self, payload: str) -> T:
        raise NotImplementedError("Codec.decode() not implemented")


class JsonCodec(Codec[T]):
    def __init__(self, type_: Any = Any) -> None:
        try:
            self._adapter = TypeAdapter(type_)
        except PydanticUserError as exc:
            raise TypeError(f"Cannot build a JSON codec for {type_!r}: {exc}") from exc
        self.type_ = type_
        # a pinned type must match the value exactly, Any serializes by inference
        self._warnings = "none" if type_ is Any else "error"

    def encode(self, value: T) -> str:
        try:
            payload = self._adapter.dump_json(value, warnings=self._warnings).decode("utf-8")
            # JSON has no NaN/Infinity, pydantic would write them as null
            if _has_non_finite(self._adapter.dump_python(value, warnings="none")):
                raise ValueError("NaN and Infinity are not valid JSON")
        except (TypeError, ValueError) as exc:
            raise EncodeError(f"Cannot encode {type(value).__name__} as JSON: {exc}") from exc
        return payload

    def decode(self, payload: str) -> T:
        if payload is None:
            raise DecodeError("Stored value is NULL")
        try:
            return self._adapter.validate_json(payload, strict=True)
        except ValidationError as exc:
            raise DecodeError(f"Cannot decode stored value as {self._type_name()}: {exc}") from exc

    def _type_name(self) -> str:
        return getattr(self.type_, "__name__", repr(self.type_))

    def __repr__(self) -> str:
        return f"JsonCodec({self._type_name()})"


def _has_non_finite(data: Any) -> bool:
    if isinstance(data, float):
        return not math.isfinite(data)
    if isinstance(data, dict):
        return any(_has_non_finite(k) or _has_non_finite(v) for k, v in data.items())
    if isinstance(data, (list, tuple, set, frozenset)):
        return any(_has_non_finite(item) for item in data)
    return False


_CODECS: Dict[Any, JsonCodec] = {}


def resolve_codec(as_type: Any = Any) -> Codec:
    """
    Return a codec for `as_type`. Codec instances are returned unchanged, types
    get a cached JsonCodec.
    """
    if isinstance(as_type, Codec):
        return as_type

    try:
        codec = _CODECS.get(as_type)
    except TypeError:
        # unhashable annotation, build one per call
        return JsonCodec(as_type)

    if codec is None:
        codec = JsonCodec(as_type)
        _CODECS[as_type] = codec
    return codec
