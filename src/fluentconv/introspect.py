"""Read-only views over runtime values and dataclass field tables."""

from __future__ import annotations

import asyncio
import enum
import logging
import queue
import weakref
from collections import abc, deque
from dataclasses import dataclass, fields, is_dataclass
from typing import Any, Mapping, get_type_hints

from .tags import EMBEDDED, TagSpec, split_tag

logger = logging.getLogger(__name__)


class Kind(enum.Enum):
    STRUCT = "struct"
    MAPPING = "mapping"
    SEQUENCE = "sequence"
    CHANNEL = "channel"
    INVALID = "invalid"
    SCALAR = "scalar"


@dataclass(frozen=True)
class FieldDescriptor:
    name: str
    exported: bool
    anonymous: bool
    # None when the annotation could not be resolved.
    declared_type: Any
    tags: Mapping[str, Any]

    def tag(self, tag_name: str) -> str:
        raw = self.tags.get(tag_name)
        return raw if isinstance(raw, str) else ""


_TEXT_TYPES = (str, bytes, bytearray, memoryview)
_CHANNEL_TYPES = (
    queue.Queue,
    queue.SimpleQueue,
    asyncio.Queue,
    abc.Iterator,
    abc.AsyncIterator,
    abc.Coroutine,
)
_SEQUENCE_TYPES = (abc.Sequence, abc.Set, abc.ValuesView, deque)

# cls -> field table; weak so types built at runtime can be collected
_FIELD_TABLES: "weakref.WeakKeyDictionary[type, tuple[FieldDescriptor, ...]]" = weakref.WeakKeyDictionary()
# cls -> tag_name -> field table with parsed tags
_FIELD_PLANS: "weakref.WeakKeyDictionary[type, dict[str, tuple[tuple[FieldDescriptor, TagSpec], ...]]]" = (
    weakref.WeakKeyDictionary()
)


def deref(value: Any) -> Any:
    """Follow one level of `weakref.ref`; a dead reference yields None."""
    if isinstance(value, weakref.ref):
        return value()
    return value


def kind_of(value: Any) -> Kind:
    if value is None:
        return Kind.INVALID
    if is_dataclass(value) and not isinstance(value, type):
        return Kind.STRUCT
    if isinstance(value, _TEXT_TYPES):
        return Kind.SCALAR
    if isinstance(value, abc.Mapping):
        return Kind.MAPPING
    if isinstance(value, _CHANNEL_TYPES) or _is_mp_queue(value):
        return Kind.CHANNEL
    if isinstance(value, _SEQUENCE_TYPES):
        return Kind.SEQUENCE
    return Kind.SCALAR


def _is_mp_queue(value: Any) -> bool:
    # multiprocessing.Queue() and friends are factory methods; match on the module.
    mod = type(value).__module__
    return mod == "multiprocessing.queues"


def struct_fields(cls: type) -> tuple[FieldDescriptor, ...]:
    """Return the field table of a dataclass type, built once per type."""
    table = _FIELD_TABLES.get(cls)
    if table is None:
        table = _build_field_table(cls)
        _FIELD_TABLES[cls] = table
    return table


def struct_plan(cls: type, tag_name: str) -> tuple[tuple[FieldDescriptor, TagSpec], ...]:
    """Field table paired with each field's parsed tag for `tag_name`."""
    by_tag = _FIELD_PLANS.get(cls)
    if by_tag is None:
        by_tag = {}
        _FIELD_PLANS[cls] = by_tag
    plan = by_tag.get(tag_name)
    if plan is None:
        plan = tuple((fd, split_tag(fd.tag(tag_name))) for fd in struct_fields(cls))
        by_tag[tag_name] = plan
    return plan


def clear_field_tables() -> None:
    _FIELD_TABLES.clear()
    _FIELD_PLANS.clear()


def _build_field_table(cls: type) -> tuple[FieldDescriptor, ...]:
    try:
        hints = get_type_hints(cls, include_extras=True)
    except Exception as e:  # noqa: BLE001 - unresolvable forward references
        logger.debug("cannot resolve annotations of %s: %s", cls.__qualname__, e)
        hints = {}

    out: list[FieldDescriptor] = []
    for f in fields(cls):
        declared = hints.get(f.name)
        if declared is None and not isinstance(f.type, str):
            declared = f.type
        out.append(
            FieldDescriptor(
                name=f.name,
                exported=not f.name.startswith("_"),
                anonymous=bool(f.metadata.get(EMBEDDED)),
                declared_type=declared,
                tags=f.metadata,
            )
        )
    return tuple(out)
