from __future__ import annotations

import dataclasses
import io
import os
import threading

from collections.abc import Mapping
from datetime import date, time
from enum import Enum
from numbers import Number
from pathlib import PurePath
from types import ModuleType
from typing import Any, Iterable, Tuple
from uuid import UUID

from . import EncodingError, log
from .content_types import guess_type
from .encoders import Encoder
from .output import CRLF, Output
from .values import FormData, FormFile

# How many leading bytes of a payload are used to sniff its content type
SNIFF_BYTES = 16


def quote_param(value: str) -> str:
    """
    Make a header parameter value safe to put between double quotes. Uses the
    percent-encoding browsers apply to form field and file names.
    """
    return str(value).replace('"', "%22").replace("\r", "%0D").replace("\n", "%0A")


def content_disposition(name: str, filename: str = None) -> str:
    header = f'Content-Disposition: form-data; name="{quote_param(name)}"'
    if filename is not None:
        header += f'; filename="{quote_param(filename)}"'
    return header


class Writer:
    """
    Encodes one kind of value into multipart parts.

    `is_applicable` decides whether this writer handles a value; it must be side-effect free and never raise.
    `write` appends one or more complete parts (opening boundary, headers, blank line, payload, CRLF) to `output`.
    """
    name = None

    def is_applicable(self, value: Any) -> bool:
        raise NotImplementedError()

    def write(self, output: Output, boundary: str, key: str, value: Any):
        raise NotImplementedError()

    def describe(self) -> str:
        doc = (type(self).__doc__ or "").strip()
        return doc.splitlines()[0] if doc else type(self).__name__


class AbstractWriter(Writer):
    """Base for writers that emit exactly one part per value"""

    def write(self, output: Output, boundary: str, key: str, value: Any):
        try:
            output.write("--").write(boundary).write(CRLF)
            self.write_part(output, key, value)
            output.write(CRLF)
        except UnicodeEncodeError as ex:
            raise EncodingError(f"Unable to encode {key} using charset {output.charset}", key=key) from ex

    def write_part(self, output: Output, key: str, value: Any):
        raise NotImplementedError()

    def write_file_metadata(self, output: Output, name: str, filename: str = None, content_type: str = None, head: bytes = b""):
        if not content_type:
            content_type = guess_type(filename, head)

        output.write(content_disposition(name, filename)).write(CRLF)
        output.write("Content-Type: " + content_type).write(CRLF)
        output.write("Content-Transfer-Encoding: binary").write(CRLF)
        output.write(CRLF)


class ByteArrayWriter(AbstractWriter):
    """Raw binary content (bytes, bytearray, memoryview)"""
    name = "bytes"

    def is_applicable(self, value: Any) -> bool:
        return isinstance(value, (bytes, bytearray, memoryview))

    def write_part(self, output: Output, key: str, value: Any):
        data = bytes(value)
        self.write_file_metadata(output, key, head=data[:SNIFF_BYTES])
        output.write(data)


class FormDataWriter(AbstractWriter):
    """Pre-shaped FormData sub-parts carrying their own filename and content type"""
    name = "form_data"

    def is_applicable(self, value: Any) -> bool:
        return isinstance(value, FormData)

    def write_part(self, output: Output, key: str, value: FormData):
        data = value.data or b""
        self.write_file_metadata(output, key, value.filename, value.content_type, data[:SNIFF_BYTES])
        output.write(data)


class SingleFileWriter(AbstractWriter):
    """A single file: pathlib path, FormFile or readable stream (binary or text)"""
    name = "file"

    def is_applicable(self, value: Any) -> bool:
        return isinstance(value, (PurePath, FormFile, io.BufferedIOBase, io.RawIOBase, io.TextIOBase))

    def write_part(self, output: Output, key: str, value: Any):
        try:
            filename, content_type, content = self.read(value)
        except (OSError, ValueError) as ex:
            raise EncodingError(f"Error writing file's content for {key}", key=key) from ex

        if isinstance(content, str):
            content = content.encode(output.charset)

        log.debug("writing file %s (%d bytes) as %s", filename, len(content), key)
        self.write_file_metadata(output, key, filename, content_type, content[:SNIFF_BYTES])
        output.write(content)

    def read(self, value: Any) -> Tuple[str, str, bytes]:
        """
        Returns (filename, declared content type, content) for a file-like value
        """
        if isinstance(value, PurePath):
            with open(value, "rb") as file:
                return value.name, None, file.read()

        if isinstance(value, FormFile):
            return value.filename, value.content_type, value.read()

        name = getattr(value, "name", None)
        filename = os.path.basename(name) if isinstance(name, str) else None
        return filename, None, value.read()


class ManyFilesWriter(Writer):
    """Non-empty list or tuple of files, one part per file under the same name"""
    name = "files"

    def __init__(self, file_writer: SingleFileWriter = None):
        self.file_writer = file_writer or SingleFileWriter()

    def is_applicable(self, value: Any) -> bool:
        if not isinstance(value, (list, tuple)) or not value:
            return False
        return all(self.file_writer.is_applicable(item) for item in value)

    def write(self, output: Output, boundary: str, key: str, value: Iterable):
        for file in value:
            self.file_writer.write(output, boundary, key, file)


class ParameterWriter(AbstractWriter):
    """Plain scalars: strings, numbers, booleans, enum members, UUIDs, dates and times"""
    name = "parameter"

    def is_applicable(self, value: Any) -> bool:
        return isinstance(value, (str, Number, Enum, UUID, date, time))

    def write_part(self, output: Output, key: str, value: Any):
        output.write(content_disposition(key)).write(CRLF)
        output.write(f"Content-Type: text/plain; charset={output.charset}").write(CRLF)
        output.write(CRLF)
        output.write(self.to_text(value))

    @staticmethod
    def to_text(value: Any) -> str:
        if isinstance(value, Enum):
            value = value.value
        if isinstance(value, bool):
            return "true" if value else "false"
        if isinstance(value, (date, time)):
            return value.isoformat()
        return str(value)


class CompositeWriter(Writer):
    """
    Structured values (mappings, dataclasses, named tuples, plain objects).

    Each child attribute is redispatched through the chain as `<key><separator><child>`, so nesting is only
    limited by the value itself. `None` children are skipped. A value with no children left is handed to the
    chain's fallback as a whole, so the field still appears in the body. A value that contains itself raises
    `EncodingError`.
    """
    name = "composite"

    def __init__(self, chain, separator: str = "."):
        self.chain = chain
        self.separator = separator
        self._visiting = threading.local()

    def is_applicable(self, value: Any) -> bool:
        if isinstance(value, Mapping):
            return True
        if isinstance(value, tuple):
            return hasattr(value, "_asdict")
        if isinstance(value, (type, ModuleType, io.IOBase)) or callable(value):
            return False
        if dataclasses.is_dataclass(value):
            return True
        return bool(getattr(value, "__dict__", None))

    def write(self, output: Output, boundary: str, key: str, value: Any):
        children = [(name, child) for name, child in self.children(value) if child is not None]
        if not children:
            log.debug("%s has no children, using fallback", key)
            self.chain.fallback.write(output, boundary, key, value)
            return

        visiting = self.visiting()
        if id(value) in visiting:
            raise EncodingError(f"Cyclic value under {key}", key=key)

        visiting.add(id(value))
        try:
            for name, child in children:
                child_key = f"{key}{self.separator}{name}"
                self.chain.dispatch(child).write(output, boundary, child_key, child)
        finally:
            visiting.discard(id(value))

    def visiting(self) -> set:
        # ids of the values currently being decomposed on this thread
        if not hasattr(self._visiting, "ids"):
            self._visiting.ids = set()
        return self._visiting.ids

    def children(self, value: Any) -> Iterable[Tuple[str, Any]]:
        if isinstance(value, Mapping):
            return [(str(k), v) for k, v in value.items()]

        if isinstance(value, tuple):
            items = value._asdict().items()
        elif dataclasses.is_dataclass(value):
            items = [(f.name, getattr(value, f.name)) for f in dataclasses.fields(value)]
        else:
            items = vars(value).items()

        return [(k, v) for k, v in items if not k.startswith("_")]


class DelegateWriter(AbstractWriter):
    """Fallback, hands the value to a generic encoder and copies its bytes into the part"""
    name = "delegate"

    def __init__(self, encoder: Encoder):
        self.encoder = encoder

    def is_applicable(self, value: Any) -> bool:
        return False

    def write_part(self, output: Output, key: str, value: Any):
        try:
            data = self.encoder.encode(key, value, output.charset)
        except Exception as ex:
            raise EncodingError(f"{type(self.encoder).__name__} could not encode {key}", key=key) from ex

        output.write(content_disposition(key)).write(CRLF)
        output.write(f"Content-Type: {self.encoder.content_type}; charset={output.charset}").write(CRLF)
        output.write(CRLF)
        output.write(data)
