"""Logging Observer - Logs proxied call attempts.

Copyright (c) 2024-2026 BlackRoad OS, Inc. All rights reserved.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import Optional

from bearer_client.observability.events import AttemptEvent, AttemptOutcome

logger = logging.getLogger(__name__)


@dataclass
class ObserverConfig:
    """Logging observer configuration."""

    log_headers: bool = False
    log_body: bool = False
    log_query: bool = True
    max_body_size: int = 1024


class LoggingObserver:
    """Logs each attempt of a proxied call.

    Header and body logging is off by default because requests carry the
    secret key and end-user data.
    """

    def __init__(self, config: Optional[ObserverConfig] = None):
        self.config = config or ObserverConfig()

    def __call__(self, event: AttemptEvent) -> None:
        request = event.request
        prefix = f"[{request.integration_id}#{event.attempt}]"

        if event.outcome == AttemptOutcome.SUCCESS:
            log_parts = [
                f"{prefix} <-- {event.status_code} {request.method} "
                f"{request.endpoint_path} ({event.elapsed_ms:.2f}ms)",
                f"requestId={event.correlation_id}",
            ]
            if self.config.log_query and request.query:
                log_parts.append(f"query={request.query}")
            if self.config.log_headers:
                log_parts.append(f"headers={_redact(request.headers)}")
            if self.config.log_body and request.body is not None:
                body = json.dumps(request.body)[: self.config.max_body_size]
                log_parts.append(f"body={body}")
            logger.info(" ".join(log_parts))
            return

        error = event.error
        error_text = f"{type(error).__name__}: {error}" if error else "unknown error"

        if event.outcome == AttemptOutcome.RETRY:
            logger.warning(
                f"{prefix} There was an error while trying to make a request "
                f"to bearer. {error_text}"
            )
            logger.info(f"{prefix} retrying request in {event.delay:.3f}s")
        elif event.outcome == AttemptOutcome.CANCELLED:
            logger.warning(f"{prefix} request cancelled after {event.elapsed_ms:.2f}ms")
        else:
            logger.warning(
                f"{prefix} Failed to perform bearer request after "
                f"{event.attempt} attempt(s). {error_text}"
            )


def _redact(headers: dict) -> dict:
    return {
        key: ("[REDACTED]" if key.lower() == "authorization" else value)
        for key, value in headers.items()
    }


__all__ = [
    "LoggingObserver",
    "ObserverConfig",
]
