from __future__ import annotations

import json

from typing import Any

import yaml

from . import ConfigException


class Encoder:
    """
    Generic key/value encoder used as the fallback when no writer in the chain
    accepts a value. Implementations return the serialized value as bytes in
    the requested charset.
    """
    content_type = "application/octet-stream"

    def encode(self, key: str, value: Any, charset: str) -> bytes:
        raise NotImplementedError()


class JsonEncoder(Encoder):
    content_type = "application/json"

    def __init__(self, **dumps_kwargs):
        self.dumps_kwargs = dumps_kwargs

    def encode(self, key: str, value: Any, charset: str) -> bytes:
        return json.dumps(value, **self.dumps_kwargs).encode(charset)


class YamlEncoder(Encoder):
    content_type = "application/x-yaml"

    def encode(self, key: str, value: Any, charset: str) -> bytes:
        return yaml.safe_dump(value, allow_unicode=True).encode(charset)


ENCODERS = {
    "json": JsonEncoder,
    "yaml": YamlEncoder,
}


def encoder_for(name: str) -> Encoder:
    try:
        return ENCODERS[name]()
    except KeyError:
        raise ConfigException(f"Unknown delegate encoder {name}, only {', '.join(sorted(ENCODERS))} are supported")
