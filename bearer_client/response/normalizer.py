"""Response Normalizer - Uniform view of a proxy response.

Copyright (c) 2024-2026 BlackRoad OS, Inc. All rights reserved.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from bearer_client.response.headers import Headers

REQUEST_ID_HEADER = "bearer-request-id"

# parsed_body value for bodies that are not valid JSON
UNPARSABLE_BODY = "response body is not JSON parsable"


@dataclass(frozen=True)
class RawHttpResult:
    """What a transport hands back for one HTTP exchange."""

    status: int
    body: str = ""
    header_source: Dict[str, List[str]] = field(default_factory=dict)
    correlation_header: Optional[str] = None


@dataclass(frozen=True)
class NormalizedResponse:
    """Response returned to callers.

    Any HTTP status, including 4xx/5xx, is a valid NormalizedResponse.
    """

    status_code: int
    raw_body: str
    parsed_body: Any
    headers: Headers
    correlation_id: Optional[str] = None

    @property
    def ok(self) -> bool:
        """Check if response is successful (2xx)."""
        return 200 <= self.status_code < 300

    @property
    def is_parsable(self) -> bool:
        return self.parsed_body is not UNPARSABLE_BODY

    def json(self) -> Any:
        """Parsed body (same as ``parsed_body``)."""
        return self.parsed_body


def parse_body(body: str) -> Any:
    """Parse a JSON body, returning UNPARSABLE_BODY instead of raising."""
    try:
        return json.loads(body)
    except (TypeError, ValueError):
        return UNPARSABLE_BODY


def normalize(raw: RawHttpResult) -> NormalizedResponse:
    """Wrap a raw HTTP result.

    Body parsing is lenient; the header wrapper is strict and raises
    HeaderFormatError on a malformed header source.
    """
    headers = Headers(raw.header_source)
    correlation_id = raw.correlation_header
    if correlation_id is None:
        correlation_id = headers.get(REQUEST_ID_HEADER)

    return NormalizedResponse(
        status_code=int(raw.status),
        raw_body=raw.body,
        parsed_body=parse_body(raw.body),
        headers=headers,
        correlation_id=correlation_id,
    )


__all__ = [
    "RawHttpResult",
    "NormalizedResponse",
    "UNPARSABLE_BODY",
    "REQUEST_ID_HEADER",
    "normalize",
    "parse_body",
]
