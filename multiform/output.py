from __future__ import annotations

import codecs
import io

from typing import Union

from . import ConfigException

CRLF = "\r\n"


class Output:
    """
    Append-only byte sink for a single encode pass. Text is transcoded using
    `charset`, bytes are written as-is.
    """

    def __init__(self, charset: str = "UTF-8"):
        try:
            codecs.lookup(charset)
        except LookupError as ex:
            raise ConfigException(f"Unknown charset {charset}") from ex

        self.charset = charset
        self._buffer = io.BytesIO()

    def write(self, data: Union[str, bytes, bytearray, memoryview]) -> Output:
        if isinstance(data, str):
            data = data.encode(self.charset)
        self._buffer.write(data)
        return self

    def to_bytes(self) -> bytes:
        return self._buffer.getvalue()

    def close(self):
        self._buffer.close()

    @property
    def closed(self) -> bool:
        return self._buffer.closed

    def __enter__(self) -> Output:
        return self

    def __exit__(self, *exc_info):
        self.close()

    def __len__(self) -> int:
        # append-only, so the stream position is the size
        return self._buffer.tell()
