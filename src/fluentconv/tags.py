"""Struct tag parsing.

Tags live in dataclass field metadata under a tag namespace (the config's
`tag_name`), using the familiar `"name,opt1,opt2"` syntax:

    @dataclass
    class Person:
        Name: str = tagged("name")
        Age: int = tagged("age,omitempty", default=0)
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from .config import DEFAULT_TAG_NAME

if TYPE_CHECKING:
    from .introspect import FieldDescriptor

# Metadata key marking a field as embedded (its fields are promoted).
EMBEDDED = "fluentconv.embedded"

OMITEMPTY = "omitempty"
SKIP = "-"


@dataclass(frozen=True)
class TagSpec:
    name: str
    options: frozenset[str] = frozenset()

    def has(self, option: str) -> bool:
        return option in self.options


def split_tag(raw: str) -> TagSpec:
    # Options are kept verbatim: no trimming, case-sensitive.
    name, *opts = raw.split(",")
    return TagSpec(name=name, options=frozenset(opts))


def parse_tag(fd: "FieldDescriptor", tag_name: str) -> TagSpec:
    return split_tag(fd.tag(tag_name))


def field_key(fd: "FieldDescriptor", tag_name: str) -> str:
    """Return the output key for a field: the tag name, or the field name."""
    spec = parse_tag(fd, tag_name)
    return spec.name or fd.name


def tagged(raw: str, *, tag_name: str = DEFAULT_TAG_NAME, **kwargs: Any) -> Any:
    """`dataclasses.field()` carrying a tag under `tag_name`."""
    metadata = dict(kwargs.pop("metadata", None) or {})
    metadata[tag_name] = raw
    return field(metadata=metadata, **kwargs)


def embed(**kwargs: Any) -> Any:
    """`dataclasses.field()` for an embedded struct whose fields are promoted."""
    metadata = dict(kwargs.pop("metadata", None) or {})
    metadata[EMBEDDED] = True
    return field(metadata=metadata, **kwargs)
