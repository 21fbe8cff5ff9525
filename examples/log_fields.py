from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

import msgpack

import fluentconv
from fluentconv import embed, tagged


@dataclass
class Host:
    Name: str = tagged("host", default="")
    Region: str = tagged("region,omitempty", default="")


@dataclass
class Request:
    host: Host = embed(default_factory=Host)
    Method: str = tagged("method", default="GET")
    Path: str = tagged("path", default="/")
    Token: str = tagged("-", default="")


@dataclass
class Session:
    ID: str = tagged("id", default="")

    def __msgpack__(self) -> Any:
        # Only ship the id, never the full session.
        return {"session": self.ID}


def main() -> None:
    logging.basicConfig(level=logging.DEBUG)

    # FLUENTCONV_TAG_NAME / FLUENTCONV_USE_MSGPACK / FLUENTCONV_MAX_DEPTH
    config = fluentconv.ConversionConfig.from_env()

    fields = {
        "request": Request(host=Host(Name="web-1"), Path="/health", Token="secret"),
        "session": Session(ID="abc"),
        "attempts": (1, 2),
    }
    print("converted ->", fluentconv.convert_fields(fields, config))

    payload = fluentconv.pack_fields(fields, config)
    print("packed ->", msgpack.unpackb(payload, raw=False))


if __name__ == "__main__":
    main()
