"""Errors - Exception hierarchy for the Bearer client.

Copyright (c) 2024-2026 BlackRoad OS, Inc. All rights reserved.
"""

from __future__ import annotations

import json
from typing import Any, Optional


class BearerError(Exception):
    """Base class for all client errors."""
    pass


class ConfigurationError(BearerError):
    """Raised when a required setting is missing or invalid."""
    pass


class InvalidRequest(BearerError, ValueError):
    """Raised for malformed caller input (bad method, bad endpoint)."""
    pass


class HeaderFormatError(BearerError, ValueError):
    """Raised when a response header source is structurally invalid."""
    pass


class TransportError(BearerError):
    """Transport failure that exhausted retries or was not retryable.

    The underlying exception is kept on ``cause`` (and chained as
    ``__cause__`` when raised with ``from``).
    """

    def __init__(
        self,
        message: str,
        cause: Optional[BaseException] = None,
        kind: Any = None,
        attempts: int = 0,
    ):
        super().__init__(message)
        self.cause = cause
        self.kind = kind
        self.attempts = attempts


class FunctionError(BearerError):
    """The remote integration function reported an error."""

    def __init__(self, data: Any):
        super().__init__(json.dumps(data) if data is not None else None)
        self.data = data


class Cancelled(BearerError):
    """Raised when a call is cancelled or its deadline passes."""

    def __init__(self, message: str, last_error: Optional[BaseException] = None):
        super().__init__(message)
        self.last_error = last_error


__all__ = [
    "BearerError",
    "ConfigurationError",
    "InvalidRequest",
    "HeaderFormatError",
    "TransportError",
    "FunctionError",
    "Cancelled",
]
