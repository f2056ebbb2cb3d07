"""Response Headers - Case-insensitive access to response headers.

Copyright (c) 2024-2026 BlackRoad OS, Inc. All rights reserved.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Iterator, List, Optional

from bearer_client.errors import HeaderFormatError

logger = logging.getLogger(__name__)


class Headers:
    """Access wrapper over a response's header data.

    The source maps header names to lists of values, because a header may be
    repeated. Names are lower-cased on construction and lookups are
    case-insensitive. Single-value lookups collapse to the first value.
    """

    def __init__(self, source: Dict[str, List[str]]):
        if not _is_header_source(source):
            raise HeaderFormatError(
                "expect a dict of string header names to lists of "
                "string header values"
            )

        # Also copies the source, so later changes to it are not seen here
        self._headers: Dict[str, List[str]] = {}
        for name, values in source.items():
            self._headers[name.lower()] = list(values)

    @classmethod
    def from_http_message(cls, message: Any) -> "Headers":
        """Build from an ``http.client.HTTPMessage`` (or any ``.items()``)."""
        source: Dict[str, List[str]] = {}
        for name, value in message.items():
            source.setdefault(name.lower(), []).append(value)
        return cls(source)

    def get(self, name: str, default: Optional[str] = None) -> Optional[str]:
        """Get the first value of a header (case-insensitive)."""
        values = self._headers.get(name.lower())
        if not values:
            return default
        if len(values) > 1:
            logger.warning(
                f"Duplicate header values for `{name}`; returning only first"
            )
        return values[0]

    def get_all(self, name: str) -> List[str]:
        """Get every value of a header (case-insensitive)."""
        return list(self._headers.get(name.lower(), []))

    def __getitem__(self, name: str) -> str:
        value = self.get(name)
        if value is None:
            raise KeyError(name)
        return value

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and bool(self._headers.get(name.lower()))

    def __iter__(self) -> Iterator[str]:
        return iter(self._headers)

    def __len__(self) -> int:
        return len(self._headers)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Headers):
            return NotImplemented
        return self._headers == other._headers

    def __repr__(self) -> str:
        return f"Headers({self._headers!r})"

    def to_dict(self) -> Dict[str, List[str]]:
        """Copy of the normalized header mapping."""
        return {name: list(values) for name, values in self._headers.items()}


def _is_header_source(source: Any) -> bool:
    if not isinstance(source, dict):
        return False
    for name, values in source.items():
        if not isinstance(name, str):
            return False
        if not isinstance(values, (list, tuple)):
            return False
        if not all(isinstance(value, str) for value in values):
            return False
    return True


__all__ = [
    "Headers",
]
