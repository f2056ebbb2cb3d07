"""Observability module - Attempt events and observers."""

from bearer_client.observability.events import (
    AttemptEvent,
    AttemptObserver,
    AttemptOutcome,
)
from bearer_client.observability.logging import (
    LoggingObserver,
    ObserverConfig,
)

__all__ = [
    "AttemptEvent",
    "AttemptObserver",
    "AttemptOutcome",
    "LoggingObserver",
    "ObserverConfig",
]
