"""Log-record helpers: convert every field of a record and pack it."""

from __future__ import annotations

from typing import Any, Mapping

import msgpack

from .config import ConversionConfig
from .convert import convert, is_msgpack_marshaler, stringify_key
from .errors import EncodeError


def convert_fields(fields: Mapping[Any, Any], config: ConversionConfig | None = None) -> dict[str, Any]:
    """Convert each field value of a log record independently."""
    return {stringify_key(k): convert(v, config) for k, v in fields.items()}


def _default(obj: Any) -> Any:
    if is_msgpack_marshaler(obj) and hasattr(obj, "__msgpack__"):
        return obj.__msgpack__()
    raise TypeError(f"can not serialize {type(obj).__name__!r} object")


def pack_fields(fields: Mapping[Any, Any], config: ConversionConfig | None = None) -> bytes:
    record = convert_fields(fields, config)
    try:
        return msgpack.packb(record, use_bin_type=True, default=_default)
    except Exception as e:  # noqa: BLE001 - boundary encoding error
        raise EncodeError(str(e)) from e
