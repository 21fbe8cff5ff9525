from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import msgpack
import pytest

from fluentconv import ConversionConfig
from fluentconv.errors import EncodeError
from fluentconv.record import convert_fields, pack_fields
from fluentconv.tags import tagged


@dataclass
class Request:
    Method: str = tagged("method", default="GET")
    Path: str = tagged("path", default="/")
    Query: dict[str, str] = tagged("query,omitempty", default_factory=dict)


@dataclass
class Token:
    Value: str = tagged("value", default="")

    def __msgpack__(self) -> Any:
        return "***"


def test_convert_fields_converts_each_value():
    out = convert_fields({"req": Request(Path="/x"), "status": 200, 7: ["a"]})
    assert out == {"req": {"method": "GET", "path": "/x"}, "status": 200, "7": ["a"]}


def test_pack_fields_roundtrips_through_msgpack():
    payload = pack_fields({"req": Request(Query={"q": "1"}), "tags": ("a", "b"), "raw": b"\x00"})
    decoded = msgpack.unpackb(payload, raw=False)
    assert decoded == {
        "req": {"method": "GET", "path": "/", "query": {"q": "1"}},
        "tags": ["a", "b"],
        "raw": b"\x00",
    }


def test_pack_fields_uses_marshaler_with_escape_hatch():
    fields = {"token": Token(Value="secret")}

    decoded = msgpack.unpackb(pack_fields(fields), raw=False)
    assert decoded == {"token": {"value": "secret"}}

    decoded = msgpack.unpackb(pack_fields(fields, ConversionConfig(use_msgpack=True)), raw=False)
    assert decoded == {"token": "***"}


def test_pack_fields_keeps_msgpack_ext_types():
    cfg = ConversionConfig(use_msgpack=True)
    decoded = msgpack.unpackb(pack_fields({"ext": msgpack.ExtType(3, b"z")}, cfg), raw=False)
    assert decoded == {"ext": msgpack.ExtType(3, b"z")}


def test_pack_fields_raises_encode_error_for_unpackable_scalars():
    with pytest.raises(EncodeError, match=r"can not serialize"):
        pack_fields({"obj": object()})


def test_pack_fields_does_not_call_marshaler_on_classes():
    with pytest.raises(EncodeError):
        pack_fields({"cls": Token}, ConversionConfig(use_msgpack=True))
