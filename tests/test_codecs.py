import json
from typing import Any, Dict, List, Optional

import pytest
from pydantic import BaseModel

from structkv import Codec, DecodeError, EncodeError, JsonCodec, resolve_codec


class Dummy(BaseModel):
    x: int
    y: int


class Device(BaseModel):
    name: str
    tags: List[str] = []
    parent: Optional["Device"] = None


class Reading(BaseModel):
    value: float


class NotSerializable:
    pass


def test_encode_model_is_compact_json():
    assert JsonCodec(Dummy).encode(Dummy(x=10, y=20)) == '{"x":10,"y":20}'


def test_encode_any_infers_nested_models():
    payload = JsonCodec().encode({"point": Dummy(x=1, y=2), "ids": (1, 2)})
    assert json.loads(payload) == {"point": {"x": 1, "y": 2}, "ids": [1, 2]}


def test_decode_model():
    assert JsonCodec(Dummy).decode('{"y": 2, "x": 1}') == Dummy(x=1, y=2)


def test_decode_recursive_model():
    device = Device(name="arm", tags=["a"], parent=Device(name="cell"))
    codec = JsonCodec(Device)
    assert codec.decode(codec.encode(device)) == device


def test_decode_any_returns_plain_data():
    assert JsonCodec().decode('[1, {"a": null}]') == [1, {"a": None}]


@pytest.mark.parametrize("payload", [
    "{not json",
    "",
    '{"x": 1}',
    '{"x": "a", "y": 2}',
    '{"x": "10", "y": "20"}',
    '{"x": 1.5, "y": 2}',
    "[]",
])
def test_decode_errors(payload):
    with pytest.raises(DecodeError):
        JsonCodec(Dummy).decode(payload)


def test_decode_null_payload():
    with pytest.raises(DecodeError):
        JsonCodec().decode(None)


def test_encode_unserializable_value():
    with pytest.raises(EncodeError):
        JsonCodec().encode(NotSerializable())


@pytest.mark.parametrize("value", [
    float("nan"),
    {"a": float("inf")},
    [1.0, float("-inf")],
    Reading(value=float("nan")),
])
def test_encode_non_finite_floats(value):
    with pytest.raises(EncodeError):
        JsonCodec().encode(value)


def test_encode_non_finite_floats_with_pinned_type():
    with pytest.raises(EncodeError):
        JsonCodec(Reading).encode(Reading(value=float("inf")))


def test_encode_finite_floats():
    assert JsonCodec(Reading).encode(Reading(value=0.5)) == '{"value":0.5}'


def test_encode_pinned_type_mismatch():
    with pytest.raises(EncodeError):
        JsonCodec(Dummy).encode({"x": "a"})


def test_codec_for_unsupported_type():
    with pytest.raises(TypeError):
        JsonCodec(NotSerializable)


def test_resolve_codec_caches_per_type():
    assert resolve_codec(Dummy) is resolve_codec(Dummy)
    assert resolve_codec(Dict[str, int]) is resolve_codec(Dict[str, int])
    assert resolve_codec() is resolve_codec(Any)


def test_resolve_codec_passes_codec_instances_through():
    codec = JsonCodec(Dummy)
    assert resolve_codec(codec) is codec


def test_custom_codec():
    class UpperCodec(Codec[str]):
        def encode(self, value: str) -> str:
            return json.dumps(value.upper())

        def decode(self, payload: str) -> str:
            return json.loads(payload).lower()

    codec = resolve_codec(UpperCodec())
    assert codec.encode("abc") == '"ABC"'
    assert codec.decode('"ABC"') == "abc"


def test_base_codec_is_abstract():
    with pytest.raises(NotImplementedError):
        Codec().encode(1)
