"""fluentconv: turn log field values into plain, MessagePack-ready trees."""

from __future__ import annotations

from . import errors
from .config import ConversionConfig
from .convert import (
    MsgpackMarshaler,
    convert,
    convert_mapping,
    convert_sequence,
    flatten_struct,
    is_msgpack_marshaler,
)
from .introspect import FieldDescriptor, Kind, kind_of, struct_fields
from .record import convert_fields, pack_fields
from .tags import TagSpec, embed, field_key, parse_tag, split_tag, tagged
from .zero import is_zero, zero_value

__all__ = [
    "ConversionConfig",
    "FieldDescriptor",
    "Kind",
    "MsgpackMarshaler",
    "TagSpec",
    "convert",
    "convert_fields",
    "convert_mapping",
    "convert_sequence",
    "embed",
    "errors",
    "field_key",
    "flatten_struct",
    "is_msgpack_marshaler",
    "is_zero",
    "kind_of",
    "pack_fields",
    "parse_tag",
    "split_tag",
    "struct_fields",
    "tagged",
    "zero_value",
]
