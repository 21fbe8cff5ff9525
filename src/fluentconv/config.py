from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping

from .errors import ConfigError

DEFAULT_TAG_NAME = "fluent"
DEFAULT_MAX_DEPTH = 64

_TRUE = {"1", "true", "yes", "on"}
_FALSE = {"0", "false", "no", "off"}


@dataclass(frozen=True)
class ConversionConfig:
    # Metadata key that holds field tags, e.g. field(metadata={"fluent": "name,omitempty"}).
    tag_name: str = DEFAULT_TAG_NAME
    # Pass MessagePack-capable values through untouched.
    use_msgpack: bool = False
    # Containers nested deeper than this convert to None.
    max_depth: int = DEFAULT_MAX_DEPTH

    def __post_init__(self) -> None:
        if not isinstance(self.tag_name, str) or not self.tag_name:
            raise ConfigError("tag_name must be a non-empty string")
        if "," in self.tag_name or any(ch.isspace() for ch in self.tag_name):
            raise ConfigError(f"invalid tag_name {self.tag_name!r}")
        if not isinstance(self.max_depth, int) or isinstance(self.max_depth, bool) or self.max_depth < 1:
            raise ConfigError("max_depth must be a positive int")

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "ConversionConfig":
        """Build a config from environment overrides.

        Reads `FLUENTCONV_TAG_NAME`, `FLUENTCONV_USE_MSGPACK` and
        `FLUENTCONV_MAX_DEPTH`; unset or empty variables keep the defaults.
        """
        env = os.environ if environ is None else environ

        tag_name = env.get("FLUENTCONV_TAG_NAME") or DEFAULT_TAG_NAME

        use_msgpack = False
        raw = env.get("FLUENTCONV_USE_MSGPACK")
        if raw:
            flag = raw.strip().lower()
            if flag in _TRUE:
                use_msgpack = True
            elif flag not in _FALSE:
                raise ConfigError(f"FLUENTCONV_USE_MSGPACK: expected a boolean, got {raw!r}")

        max_depth = DEFAULT_MAX_DEPTH
        raw = env.get("FLUENTCONV_MAX_DEPTH")
        if raw:
            try:
                max_depth = int(raw)
            except ValueError:
                raise ConfigError(f"FLUENTCONV_MAX_DEPTH: expected an int, got {raw!r}") from None

        return cls(tag_name=tag_name, use_msgpack=use_msgpack, max_depth=max_depth)
