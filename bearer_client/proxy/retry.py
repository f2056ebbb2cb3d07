"""Retry - Retry-aware execution of proxied requests.

Copyright (c) 2024-2026 BlackRoad OS, Inc. All rights reserved.
"""

from __future__ import annotations

import asyncio
import functools
import logging
import random
import threading
import time
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from bearer_client.errors import (
    Cancelled,
    ConfigurationError,
    InvalidRequest,
    TransportError,
)
from bearer_client.observability.events import (
    AttemptEvent,
    AttemptObserver,
    AttemptOutcome,
)
from bearer_client.proxy.builder import ProxyRequest
from bearer_client.proxy.transport import (
    RETRYABLE_FAILURES,
    Transport,
    classify_failure,
)
from bearer_client.response.normalizer import (
    NormalizedResponse,
    RawHttpResult,
    normalize,
)
from bearer_client.utils.helpers import append_query, encode_body

logger = logging.getLogger(__name__)

# Keeps 2 ** n finite for absurd retry counts; max_delay caps it anyway
_MAX_BACKOFF_EXPONENT = 62

# Seconds between cancellation checks during an async backoff
_CANCEL_POLL_INTERVAL = 0.05


@dataclass(frozen=True)
class RetryPolicy:
    """Network retry policy.

    Backoff after ``attempt`` retries so far (RetryState.attempt):
    ┌────────────────────────────────────────────────────────────┐
    │  base  = initial_delay                      attempt = 0     │
    │  base  = min(initial_delay * 2^(a-1), max)  attempt = a >= 1│
    │  delay = max(initial_delay, base * uniform(0.5, 1.0))       │
    │                                                             │
    │  a=0: [i]   a=1: [i]   a=2: [i..2i]   a=3: [2i..4i] <= max  │
    └────────────────────────────────────────────────────────────┘
    """

    max_retries: int = 0
    initial_delay: float = 0.5
    max_delay: float = 2.0

    def __post_init__(self) -> None:
        if self.max_retries < 0:
            raise ConfigurationError("max_retries must be >= 0")
        if self.initial_delay <= 0:
            raise ConfigurationError("initial_delay must be > 0")
        if self.max_delay < self.initial_delay:
            raise ConfigurationError("max_delay must be >= initial_delay")

    def backoff_delay(self, attempt: int) -> float:
        """Delay after ``attempt`` retries so far, without jitter."""
        if attempt < 1:
            return self.initial_delay
        exponent = min(attempt - 1, _MAX_BACKOFF_EXPONENT)
        return min(self.initial_delay * (2 ** exponent), self.max_delay)

    def sleep_time(
        self,
        attempt: int,
        rng: Optional[random.Random] = None,
    ) -> float:
        """Delay after ``attempt`` retries so far, with jitter applied."""
        delay = self.backoff_delay(attempt)
        # Jitter in [delay / 2, delay]
        delay *= (rng or random).uniform(0.5, 1.0)
        # But never less than the initial delay
        return max(self.initial_delay, delay)


@dataclass
class RetryState:
    """Per-call retry bookkeeping."""

    attempt: int = 0
    started_at: float = field(default_factory=time.monotonic)
    last_error: Optional[BaseException] = None

    @property
    def elapsed(self) -> float:
        return time.monotonic() - self.started_at


class CancellationToken:
    """Cancels a call's retry loop, manually or at a deadline.

    Usage:
        token = CancellationToken(timeout=10.0)
        integration.get("/slow", cancellation=token)

        # elsewhere
        token.cancel()
    """

    def __init__(self, timeout: Optional[float] = None):
        self._event = threading.Event()
        self.deadline: Optional[float] = (
            time.monotonic() + timeout if timeout is not None else None
        )

    def cancel(self) -> None:
        self._event.set()

    @property
    def cancelled(self) -> bool:
        if self._event.is_set():
            return True
        return self.deadline is not None and time.monotonic() >= self.deadline

    def remaining(self) -> Optional[float]:
        """Seconds until the deadline, or None without one."""
        if self.deadline is None:
            return None
        return max(0.0, self.deadline - time.monotonic())

    def wait(self, seconds: float) -> bool:
        """Sleep up to ``seconds``. Returns True if cancelled meanwhile."""
        remaining = self.remaining()
        if remaining is not None and remaining < seconds:
            self._event.wait(remaining)
            return True
        return self._event.wait(seconds)

    async def wait_async(self, seconds: float) -> bool:
        """Async sleep up to ``seconds``. Returns True if cancelled meanwhile.

        ``cancel()`` may come from any thread, so the event is polled in
        short slices instead of awaited.
        """
        remaining = self.remaining()
        deadline_reached = remaining is not None and remaining < seconds
        if deadline_reached:
            seconds = remaining

        wake_at = time.monotonic() + seconds
        while not self._event.is_set():
            left = wake_at - time.monotonic()
            if left <= 0:
                break
            await asyncio.sleep(min(left, _CANCEL_POLL_INTERVAL))

        return deadline_reached or self.cancelled


class RetryingTransport:
    """Executes ProxyRequests with retries on transient transport failures.

    Only transport-level failures are retried. Any HTTP response, whatever
    its status, ends the loop and is returned normalized.

    Flow:
    ┌────────────────────────────────────────────────────────────┐
    │  attempt ──▶ response ──────────────────────▶ normalize     │
    │     │                                                       │
    │     └──▶ failure ──▶ retryable and attempts left?           │
    │                        │ yes: sleep(backoff) ──▶ attempt    │
    │                        │ no:  raise TransportError          │
    └────────────────────────────────────────────────────────────┘
    """

    def __init__(
        self,
        transport: Transport,
        policy: Optional[RetryPolicy] = None,
        observers: Optional[List[AttemptObserver]] = None,
        rng: Optional[random.Random] = None,
    ):
        self.transport = transport
        self.policy = policy or RetryPolicy()
        self._observers: List[AttemptObserver] = list(observers or [])
        self._rng = rng

    def on_attempt(self, observer: AttemptObserver) -> "RetryingTransport":
        """Register an attempt observer."""
        self._observers.append(observer)
        return self

    def execute(
        self,
        request: ProxyRequest,
        cancellation: Optional[CancellationToken] = None,
    ) -> NormalizedResponse:
        """Execute a request, retrying transient transport failures.

        Args:
            request: Request to send
            cancellation: Optional token that stops the retry loop

        Returns:
            NormalizedResponse for any HTTP status

        Raises:
            TransportError: Retries exhausted or non-retryable failure
            Cancelled: The token was cancelled or its deadline passed
            InvalidRequest: The body is not JSON serializable
        """
        url, body = prepare(request)
        state = RetryState()
        cancellation = cancellation or CancellationToken()

        while True:
            self._check_cancelled(request, state, cancellation)
            attempt_started = time.monotonic()
            try:
                raw = self.transport.send(request.method, url, dict(request.headers), body)
            except Exception as e:
                delay = self._handle_failure(request, state, e, attempt_started)
                if cancellation.wait(delay):
                    self._cancel(request, state)
                continue

            return self._handle_response(request, state, raw, attempt_started)

    async def execute_async(
        self,
        request: ProxyRequest,
        cancellation: Optional[CancellationToken] = None,
    ) -> NormalizedResponse:
        """Async version of ``execute``.

        The blocking send runs in the default executor and backoff uses
        ``asyncio.sleep``, so other tasks keep running while a call waits.
        """
        url, body = prepare(request)
        state = RetryState()
        cancellation = cancellation or CancellationToken()
        loop = asyncio.get_running_loop()

        while True:
            self._check_cancelled(request, state, cancellation)
            attempt_started = time.monotonic()
            try:
                raw = await loop.run_in_executor(
                    None,
                    functools.partial(
                        self.transport.send,
                        request.method,
                        url,
                        dict(request.headers),
                        body,
                    ),
                )
            except Exception as e:
                delay = self._handle_failure(request, state, e, attempt_started)
                if await cancellation.wait_async(delay):
                    self._cancel(request, state)
                continue

            return self._handle_response(request, state, raw, attempt_started)

    def _handle_response(
        self,
        request: ProxyRequest,
        state: RetryState,
        raw: RawHttpResult,
        attempt_started: float,
    ) -> NormalizedResponse:
        response = normalize(raw)
        self._emit(
            AttemptEvent(
                request=request,
                attempt=state.attempt + 1,
                outcome=AttemptOutcome.SUCCESS,
                elapsed=time.monotonic() - attempt_started,
                status_code=response.status_code,
                correlation_id=response.correlation_id,
            )
        )
        return response

    def _handle_failure(
        self,
        request: ProxyRequest,
        state: RetryState,
        error: Exception,
        attempt_started: float,
    ) -> float:
        """Return the delay before the next attempt, or raise TransportError."""
        kind = classify_failure(error)
        state.last_error = error
        attempt_number = state.attempt + 1
        elapsed = time.monotonic() - attempt_started
        retryable = kind in RETRYABLE_FAILURES

        if retryable and state.attempt < self.policy.max_retries:
            delay = self.policy.sleep_time(state.attempt, self._rng)
            self._emit(
                AttemptEvent(
                    request=request,
                    attempt=attempt_number,
                    outcome=AttemptOutcome.RETRY,
                    elapsed=elapsed,
                    error=error,
                    failure_kind=kind,
                    delay=delay,
                )
            )
            logger.debug(
                f"Retry {attempt_number}/{self.policy.max_retries} "
                f"after {delay:.3f}s: {error}"
            )
            state.attempt += 1
            return delay

        self._emit(
            AttemptEvent(
                request=request,
                attempt=attempt_number,
                outcome=AttemptOutcome.FAILED,
                elapsed=elapsed,
                error=error,
                failure_kind=kind,
            )
        )
        if retryable:
            message = (
                f"{request.method} {request.url} failed after "
                f"{attempt_number} attempt(s): {error}"
            )
        else:
            message = f"{request.method} {request.url} failed: {error}"
        raise TransportError(
            message,
            cause=error,
            kind=kind,
            attempts=attempt_number,
        ) from error

    def _check_cancelled(
        self,
        request: ProxyRequest,
        state: RetryState,
        cancellation: CancellationToken,
    ) -> None:
        if cancellation.cancelled:
            self._cancel(request, state)

    def _cancel(self, request: ProxyRequest, state: RetryState) -> None:
        self._emit(
            AttemptEvent(
                request=request,
                attempt=state.attempt,
                outcome=AttemptOutcome.CANCELLED,
                elapsed=state.elapsed,
                error=state.last_error,
            )
        )
        raise Cancelled(
            f"{request.method} {request.url} cancelled after "
            f"{state.attempt} attempt(s)",
            last_error=state.last_error,
        )

    def _emit(self, event: AttemptEvent) -> None:
        for observer in self._observers:
            try:
                observer(event)
            except Exception:
                logger.debug(f"Attempt observer {observer!r} failed", exc_info=True)


def prepare(request: ProxyRequest) -> Tuple[str, Optional[bytes]]:
    """Final URL (with query string) and encoded body for a request."""
    url = append_query(request.url, request.query)
    try:
        body = encode_body(request.body)
    except (TypeError, ValueError) as e:
        raise InvalidRequest(f"Request body is not JSON serializable: {e}") from e
    return url, body


__all__ = [
    "RetryPolicy",
    "RetryState",
    "RetryingTransport",
    "CancellationToken",
    "prepare",
]
