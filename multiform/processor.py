from __future__ import annotations

from typing import Any, Callable, List, Mapping, Tuple

from . import ConfigException, log
from .boundary import time_boundary
from .chain import WriterChain
from .encoders import Encoder, JsonEncoder
from .output import CRLF, Output
from .request import RequestTemplate
from .writers import (
    ByteArrayWriter,
    CompositeWriter,
    DelegateWriter,
    FormDataWriter,
    ManyFilesWriter,
    ParameterWriter,
    SingleFileWriter,
    Writer,
)

CONTENT_TYPE_HEADER = "Content-Type"

# Writer names in default chain order. Composite needs the chain and separator, the rest take no arguments.
DEFAULT_WRITERS = ["bytes", "form_data", "file", "files", "parameter", "composite"]


def build_writer(name: str, chain: WriterChain, separator: str = ".") -> Writer:
    if name == "composite":
        return CompositeWriter(chain, separator=separator)

    simple = {
        "bytes": ByteArrayWriter,
        "form_data": FormDataWriter,
        "file": SingleFileWriter,
        "files": ManyFilesWriter,
        "parameter": ParameterWriter,
    }
    if name not in simple:
        raise ConfigException(f"Unknown writer {name}, expected one of {', '.join(DEFAULT_WRITERS)}")
    return simple[name]()


class MultipartFormContentProcessor:
    """
    Encodes a mapping of fields into a multipart/form-data body.

    Each field value is handed to the first applicable writer in `chain`; values nothing claims go to the
    `delegate` encoder (JSON by default). Every `encode()` gets its own boundary and output buffer, the only state
    kept between calls is the chain.
    """
    content_type = "multipart/form-data"

    def __init__(
        self,
        delegate: Encoder = None,
        boundary_factory: Callable[[], str] = None,
        separator: str = ".",
        writers: List[str] = None,
    ):
        self.delegate = delegate or JsonEncoder()
        self.boundary_factory = boundary_factory or time_boundary
        self.chain = WriterChain(fallback=DelegateWriter(self.delegate))

        for name in DEFAULT_WRITERS if writers is None else writers:
            self.add_writer(build_writer(name, self.chain, separator))

    def encode(self, data: Mapping[str, Any], charset: str = "UTF-8") -> Tuple[bytes, str]:
        """
        Returns (body, content type header value). Fields are written in mapping order.
        """
        boundary = self.boundary_factory()
        log.debug("encoding %d fields with boundary %s", len(data), boundary)

        with Output(charset) as output:
            for key, value in data.items():
                writer = self.chain.dispatch(value)
                writer.write(output, boundary, key, value)

            output.write("--").write(boundary).write("--").write(CRLF)
            body = output.to_bytes()

        header = f"{self.content_type}; charset={charset}; boundary={boundary}"
        log.debug("encoded %d bytes", len(body))
        return body, header

    def process(self, template: RequestTemplate, charset: str, data: Mapping[str, Any]):
        """
        Encode `data` and put the result on `template`. The template is only touched once encoding succeeded.
        """
        body, header = self.encode(data, charset)

        template.header(CONTENT_TYPE_HEADER)  # reset header
        template.header(CONTENT_TYPE_HEADER, header)

        # Body mixes text and binary parts so it is handed over without a charset
        template.body(body, None)

    def add_writer(self, writer: Writer):
        self.chain.append(writer)

    def add_first_writer(self, writer: Writer):
        self.chain.prepend(writer)

    def add_last_writer(self, writer: Writer):
        self.chain.append(writer)

    def set_writer(self, index: int, writer: Writer):
        self.chain.replace_at(index, writer)

    @property
    def writers(self) -> Tuple[Writer, ...]:
        return self.chain.snapshot()
