"""Attempt Events - What the retry loop reports about each attempt.

Copyright (c) 2024-2026 BlackRoad OS, Inc. All rights reserved.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto
from typing import Any, Callable, Optional

from bearer_client.proxy.builder import ProxyRequest


class AttemptOutcome(Enum):
    """Outcome of a single attempt."""

    SUCCESS = auto()    # Got an HTTP response (any status)
    RETRY = auto()      # Retryable failure, another attempt follows
    FAILED = auto()     # Terminal failure, the call raises
    CANCELLED = auto()  # Cancelled or deadline reached


@dataclass(frozen=True)
class AttemptEvent:
    """One attempt of a proxied call."""

    request: ProxyRequest
    attempt: int
    outcome: AttemptOutcome
    elapsed: float
    status_code: Optional[int] = None
    correlation_id: Optional[str] = None
    error: Optional[BaseException] = None
    failure_kind: Any = None
    delay: float = 0.0

    @property
    def elapsed_ms(self) -> float:
        return self.elapsed * 1000


AttemptObserver = Callable[[AttemptEvent], None]


__all__ = [
    "AttemptEvent",
    "AttemptObserver",
    "AttemptOutcome",
]
