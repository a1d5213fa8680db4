from __future__ import annotations

from dataclasses import dataclass
from typing import IO


@dataclass
class FormData:
    """
    A value that already knows how it wants to appear in the form: its own
    content type, optional filename and raw bytes.
    """
    content_type: str
    filename: str
    data: bytes


@dataclass
class FormFile:
    """File-like field: a name, a binary stream and an optional declared mimetype"""
    filename: str
    stream: IO
    content_type: str = None

    def read(self) -> bytes:
        return self.stream.read()
