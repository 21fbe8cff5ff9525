"""Zero-value detection for `omitempty`.

The zero value is derived from a field's *declared* type:

- numbers, text and bools: `0`, `""`, `b""`, `False`;
- containers: any empty collection;
- optional types (`X | None`) and `Any`: only `None`;
- dataclasses: every field is zero for its own declared type.

When the declared type is unknown (or has no derivable zero), the value's
runtime type is used instead.
"""

from __future__ import annotations

import datetime
import logging
import numbers
import types
from collections import abc
from dataclasses import is_dataclass
from typing import Annotated, Any, Union, get_args, get_origin

from .introspect import struct_fields

logger = logging.getLogger(__name__)


class _Sentinel:
    def __init__(self, name: str) -> None:
        self._name = name

    def __repr__(self) -> str:
        return self._name


# Zero of a container type: any empty collection.
EMPTY = _Sentinel("EMPTY")
# No zero value can be derived for the type.
NO_ZERO = _Sentinel("NO_ZERO")

# Order matters: bool before int, text before the collection check.
_SCALAR_ZEROS: tuple[tuple[type, Any], ...] = (
    (bool, False),
    (int, 0),
    (float, 0.0),
    (complex, 0j),
    (str, ""),
    (bytes, b""),
    (bytearray, b""),
)

# Types whose no-argument constructor yields their zero.
_CONSTRUCTIBLE = (numbers.Number, datetime.timedelta)


def _strip_annotated(tp: Any) -> Any:
    while get_origin(tp) is Annotated:
        tp = get_args(tp)[0]
    return tp


def _is_optional(tp: Any) -> bool:
    origin = get_origin(tp)
    if origin is Union or origin is types.UnionType:
        return type(None) in get_args(tp)
    return False


def zero_value(declared_type: Any) -> Any:
    """Return the zero of `declared_type`, `EMPTY` for containers, or `NO_ZERO`."""
    tp = _strip_annotated(declared_type)
    if tp is None or tp is type(None) or tp is Any:
        return None
    if _is_optional(tp):
        return None

    origin = get_origin(tp)
    if origin is not None:
        # list[int] -> list, Sequence[str] -> collections.abc.Sequence
        tp = origin
    if not isinstance(tp, type):
        return NO_ZERO

    for base, zero in _SCALAR_ZEROS:
        if issubclass(tp, base):
            return zero
    if issubclass(tp, abc.Collection):
        return EMPTY
    if issubclass(tp, _CONSTRUCTIBLE):
        try:
            return tp()
        except Exception:  # noqa: BLE001 - e.g. Number subclasses requiring args
            return NO_ZERO
    return NO_ZERO


def is_zero(value: Any, declared_type: Any = None) -> bool:
    """Report whether `value` equals the zero of its declared type.

    Never raises: a comparison that fails counts as "not zero".
    """
    if value is None:
        return True
    try:
        return _is_zero(value, declared_type)
    except Exception as e:  # noqa: BLE001 - user-defined __eq__/__len__
        logger.debug("zero check failed for %s: %s", type(value).__name__, e)
        return False


def _is_zero(value: Any, declared_type: Any) -> bool:
    if is_dataclass(value) and not isinstance(value, type):
        tp = _strip_annotated(declared_type)
        if tp is not None and (tp is Any or _is_optional(tp)):
            return False
        for fd in struct_fields(type(value)):
            if not hasattr(value, fd.name):
                continue
            if not is_zero(getattr(value, fd.name), fd.declared_type):
                return False
        return True

    zero = NO_ZERO if declared_type is None else zero_value(declared_type)
    if zero is NO_ZERO:
        zero = zero_value(type(value))
    if zero is NO_ZERO or zero is None:
        return False
    if zero is EMPTY:
        return isinstance(value, abc.Collection) and not isinstance(value, (str, bytes)) and len(value) == 0
    return bool(value == zero)
