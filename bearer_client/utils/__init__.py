"""Utils module - Utility functions."""

from bearer_client.utils.helpers import (
    append_query,
    encode_body,
    merge_headers,
)

__all__ = [
    "append_query",
    "encode_body",
    "merge_headers",
]
