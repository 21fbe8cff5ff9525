"""Convert arbitrary values into plain trees for log transport.

`convert()` dispatches on the value's kind:

- dataclasses flatten into `dict[str, Any]` following their field tags;
- mappings become `dict[str, Any]` with stringified keys;
- sequences and sets become lists;
- queues, iterators, coroutines and `None` become `None`;
- everything else passes through unchanged.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Protocol, runtime_checkable

import msgpack

from .config import ConversionConfig
from .introspect import Kind, deref, kind_of, struct_plan
from .tags import OMITEMPTY, SKIP
from .zero import is_zero

logger = logging.getLogger(__name__)

_DEFAULT_CONFIG = ConversionConfig()


@runtime_checkable
class MsgpackMarshaler(Protocol):
    """Values that know how to pack themselves.

    `__msgpack__` returns something MessagePack can pack natively.
    """

    def __msgpack__(self) -> Any: ...


_MSGPACK_NATIVE = (msgpack.ExtType, msgpack.Timestamp)


def is_msgpack_marshaler(value: Any) -> bool:
    if isinstance(value, type):
        return False
    if isinstance(value, _MSGPACK_NATIVE):
        return True
    try:
        return isinstance(value, MsgpackMarshaler)
    except Exception:  # noqa: BLE001 - hostile __getattr__
        return False


def stringify_key(key: Any) -> str:
    if type(key) is str:
        return key
    if isinstance(key, str):
        # str subclasses (e.g. str enums) come out as plain str
        return str.__str__(key)
    try:
        return str(key)
    except Exception:  # noqa: BLE001 - broken __str__
        return object.__repr__(key)


def convert(value: Any, config: ConversionConfig | None = None) -> Any:
    """Convert `value` into a tree of dicts, lists and scalars. Never raises."""
    cfg = _DEFAULT_CONFIG if config is None else config
    return _guarded(_convert, value, cfg)


def flatten_struct(
    value: Any, config: ConversionConfig | None = None, result: dict[str, Any] | None = None
) -> dict[str, Any] | None:
    """Flatten a dataclass instance, promoting embedded fields into the same dict.

    Fields are written into `result` when given (later keys overwrite earlier
    ones), otherwise into a new dict.
    """
    cfg = _DEFAULT_CONFIG if config is None else config
    out = {} if result is None else result
    return _guarded(lambda v, c, d: _flatten(v, c, out, d), value, cfg)


def convert_mapping(value: Any, config: ConversionConfig | None = None) -> dict[str, Any] | None:
    cfg = _DEFAULT_CONFIG if config is None else config
    return _guarded(_convert_mapping, value, cfg)


def convert_sequence(value: Any, config: ConversionConfig | None = None) -> list[Any] | None:
    cfg = _DEFAULT_CONFIG if config is None else config
    return _guarded(_convert_sequence, value, cfg)


def _guarded(fn: Callable[[Any, ConversionConfig, int], Any], value: Any, config: ConversionConfig) -> Any:
    try:
        return fn(value, config, 0)
    except RecursionError:
        logger.debug("recursion limit hit converting %s", type(value).__name__)
        return None


def _convert(value: Any, config: ConversionConfig, depth: int) -> Any:
    value = deref(value)
    if config.use_msgpack and is_msgpack_marshaler(value):
        return value

    kind = kind_of(value)
    if kind is Kind.SCALAR:
        return value
    if kind is Kind.CHANNEL or kind is Kind.INVALID:
        return None
    if depth >= config.max_depth:
        logger.debug("max depth %d reached; dropping %s", config.max_depth, type(value).__name__)
        return None
    if kind is Kind.STRUCT:
        return _flatten(value, config, {}, depth)
    if kind is Kind.MAPPING:
        return _convert_mapping(value, config, depth)
    return _convert_sequence(value, config, depth)


def _flatten(value: Any, config: ConversionConfig, result: dict[str, Any], depth: int) -> dict[str, Any]:
    for fd, spec in struct_plan(type(value), config.tag_name):
        if not fd.exported and not fd.anonymous:
            continue
        try:
            field_value = getattr(value, fd.name)
        except AttributeError:
            # init=False field that was never assigned
            continue
        except Exception as e:  # noqa: BLE001 - unreadable field (e.g. detached lazy load)
            logger.debug("cannot read field %s.%s: %s", type(value).__name__, fd.name, e)
            continue

        if fd.anonymous:
            embedded = deref(field_value)
            if kind_of(embedded) is not Kind.STRUCT:
                continue
            if depth + 1 >= config.max_depth:
                logger.debug("max depth %d reached; dropping embedded %s", config.max_depth, fd.name)
                continue
            _flatten(embedded, config, result, depth + 1)
            continue

        if spec.name == SKIP:
            continue
        if spec.has(OMITEMPTY) and is_zero(field_value, fd.declared_type):
            continue
        # Later fields overwrite earlier ones, embedded ones included.
        result[spec.name or fd.name] = _convert(field_value, config, depth + 1)
    return result


def _convert_mapping(value: Any, config: ConversionConfig, depth: int) -> dict[str, Any] | None:
    try:
        items = list(value.items())
    except Exception as e:  # noqa: BLE001 - unreadable mapping
        logger.debug("cannot read mapping %s: %s", type(value).__name__, e)
        return None
    result: dict[str, Any] = {}
    for k, v in items:
        result[stringify_key(k)] = _convert(v, config, depth + 1)
    return result


def _convert_sequence(value: Any, config: ConversionConfig, depth: int) -> list[Any] | None:
    try:
        items = list(value)
    except Exception as e:  # noqa: BLE001 - unreadable sequence
        logger.debug("cannot read sequence %s: %s", type(value).__name__, e)
        return None
    return [_convert(item, config, depth + 1) for item in items]
