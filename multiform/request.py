from __future__ import annotations

from typing import Dict, List


class RequestTemplate:
    """
    Outgoing request as seen by a content processor: headers plus a body.
    Header names are case-insensitive, each name can carry several values.
    """

    def __init__(self, headers: Dict[str, List[str]] = None):
        self._headers: Dict[str, List[str]] = {}
        self.body_bytes: bytes = None
        self.body_charset: str = None

        for name, values in (headers or {}).items():
            self.header(name, *values)

    def header(self, name: str, *values: str) -> RequestTemplate:
        """
        Add values to header `name`. Calling without values removes the header.
        """
        existing = self._find(name)
        if not values:
            if existing:
                del self._headers[existing]
            return self

        self._headers.setdefault(existing or name, []).extend(values)
        return self

    def body(self, data: bytes, charset: str = None) -> RequestTemplate:
        """Set the body. `charset` of None marks the body as binary"""
        self.body_bytes = data
        self.body_charset = charset
        return self

    @property
    def headers(self) -> Dict[str, List[str]]:
        return {name: list(values) for name, values in self._headers.items()}

    def header_values(self, name: str) -> List[str]:
        existing = self._find(name)
        return list(self._headers[existing]) if existing else []

    def _find(self, name: str) -> str:
        for existing in self._headers:
            if existing.lower() == name.lower():
                return existing
        return None
