# pylint: disable=missing-docstring

from dataclasses import dataclass
from os import path
from typing import Dict, List

from pytest import fixture

from ..processor import MultipartFormContentProcessor

BOUNDARY = "5eed5eed5eed"


@dataclass
class Part:
    headers: Dict[str, str]
    body: bytes

    @property
    def disposition(self) -> str:
        return "Content-Disposition: " + self.headers.get("Content-Disposition")

    @property
    def content_type(self) -> str:
        return self.headers.get("Content-Type")


def split_parts(body: bytes, boundary: str = BOUNDARY) -> List[Part]:
    """
    Splits an encoded body back into parts. Asserts the body is properly
    terminated so every test gets that check for free.
    """
    delimiter = b"--" + boundary.encode("ascii")
    terminator = delimiter + b"--\r\n"
    assert body.endswith(terminator), "body should end with closing boundary"

    chunks = body[: -len(terminator)].split(delimiter + b"\r\n")
    assert chunks[0] == b"", "nothing expected before first boundary"

    parts = []
    for chunk in chunks[1:]:
        assert chunk.endswith(b"\r\n")
        raw_headers, content = chunk[:-2].split(b"\r\n\r\n", 1)
        headers = dict(line.split(": ", 1) for line in raw_headers.decode("utf-8").split("\r\n"))
        parts.append(Part(headers=headers, body=content))
    return parts


class Fixtures:
    def fixture_path(self, *dir):
        return path.join(path.dirname(__file__), "fixtures", *dir)

    def fixture_content(self, *dir) -> bytes:
        with open(self.fixture_path(*dir), "rb") as f:
            return f.read()


class ProcessorFixtures(Fixtures):
    @fixture
    def processor(self):
        return MultipartFormContentProcessor(boundary_factory=lambda: BOUNDARY)

    @fixture
    def encode(self, processor):
        def _encode(data: dict, charset: str = "UTF-8") -> List[Part]:
            body, header = processor.encode(data, charset)
            assert header == f"multipart/form-data; charset={charset}; boundary={BOUNDARY}"
            return split_parts(body)

        return _encode
