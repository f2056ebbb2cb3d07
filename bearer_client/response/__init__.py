"""Response module - Normalized proxy responses."""

from bearer_client.response.headers import Headers
from bearer_client.response.normalizer import (
    NormalizedResponse,
    RawHttpResult,
    UNPARSABLE_BODY,
    normalize,
)

__all__ = [
    "Headers",
    "NormalizedResponse",
    "RawHttpResult",
    "UNPARSABLE_BODY",
    "normalize",
]
