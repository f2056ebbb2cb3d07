"""Helper utilities.

Copyright (c) 2024-2026 BlackRoad OS, Inc. All rights reserved.
"""

from __future__ import annotations

import json
from typing import Any, Dict, Mapping, Optional
from urllib.parse import urlencode, urlsplit, urlunsplit


def append_query(url: str, query: Optional[Mapping[str, Any]] = None) -> str:
    """Append URL-encoded query parameters to a URL."""
    if not query:
        return url

    parsed = urlsplit(url)
    query_string = urlencode(query, doseq=True)
    if parsed.query:
        query_string = f"{parsed.query}&{query_string}"

    return urlunsplit(
        (parsed.scheme, parsed.netloc, parsed.path, query_string, parsed.fragment)
    )


def encode_body(body: Any) -> Optional[bytes]:
    """JSON-encode a request body. None means no body."""
    if body is None:
        return None
    return json.dumps(body).encode("utf-8")


def merge_headers(
    *layers: Mapping[str, Optional[str]],
) -> Dict[str, Optional[str]]:
    """Layer header mappings; a later layer overrides an earlier one.

    Names match case-insensitively and the overriding layer's spelling is
    kept, so ``{"Content-Type": a}`` then ``{"content-type": b}`` gives
    ``{"content-type": b}``.
    """
    merged: Dict[str, Optional[str]] = {}
    spelling: Dict[str, str] = {}  # lower-cased name -> key in merged

    for layer in layers:
        for name, value in layer.items():
            folded = name.lower()
            previous = spelling.get(folded)
            if previous is not None and previous != name:
                del merged[previous]
            spelling[folded] = name
            merged[name] = value

    return merged


__all__ = [
    "append_query",
    "encode_body",
    "merge_headers",
]
