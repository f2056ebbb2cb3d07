"""Transport - Single HTTP exchange and failure classification.

Copyright (c) 2024-2026 BlackRoad OS, Inc. All rights reserved.
"""

from __future__ import annotations

import errno
import http.client
import logging
import socket
import ssl
from abc import ABC, abstractmethod
from enum import Enum, auto
from typing import Dict, Optional
from urllib.parse import urlsplit

from bearer_client.response.normalizer import REQUEST_ID_HEADER, RawHttpResult

logger = logging.getLogger(__name__)


class ConnectTimeout(TimeoutError):
    """Timed out while opening the connection."""
    pass


class ReadTimeout(TimeoutError):
    """Timed out while waiting for the response."""
    pass


class FailureKind(Enum):
    """Transport failure kinds."""

    CONNECT_TIMEOUT = auto()
    READ_TIMEOUT = auto()
    CONNECTION_REFUSED = auto()
    CONNECTION_RESET = auto()
    HOST_UNREACHABLE = auto()
    OPERATION_TIMED_OUT = auto()
    NAME_RESOLUTION = auto()
    PREMATURE_EOF = auto()
    OTHER = auto()


RETRYABLE_FAILURES = frozenset(
    {
        FailureKind.CONNECT_TIMEOUT,
        FailureKind.READ_TIMEOUT,
        FailureKind.CONNECTION_REFUSED,
        FailureKind.CONNECTION_RESET,
        FailureKind.HOST_UNREACHABLE,
        FailureKind.OPERATION_TIMED_OUT,
        FailureKind.NAME_RESOLUTION,
        FailureKind.PREMATURE_EOF,
    }
)


def classify_failure(error: BaseException) -> FailureKind:
    """Map an exception raised by a transport to a FailureKind.

    Order matters: the concrete timeout and connection classes are
    subclasses of OSError, and RemoteDisconnected is a ConnectionResetError.
    """
    if isinstance(error, ConnectTimeout):
        return FailureKind.CONNECT_TIMEOUT
    if isinstance(error, ReadTimeout):
        return FailureKind.READ_TIMEOUT
    if isinstance(error, (http.client.RemoteDisconnected, http.client.IncompleteRead, EOFError)):
        return FailureKind.PREMATURE_EOF
    if isinstance(error, ConnectionRefusedError):
        return FailureKind.CONNECTION_REFUSED
    if isinstance(error, ConnectionResetError):
        return FailureKind.CONNECTION_RESET
    if isinstance(error, (socket.gaierror, socket.herror)):
        return FailureKind.NAME_RESOLUTION
    if isinstance(error, (TimeoutError, socket.timeout)):
        return FailureKind.OPERATION_TIMED_OUT
    if isinstance(error, OSError) and not isinstance(error, ssl.SSLError):
        if error.errno == errno.EHOSTUNREACH:
            return FailureKind.HOST_UNREACHABLE
        if error.errno == errno.ETIMEDOUT:
            return FailureKind.OPERATION_TIMED_OUT
    return FailureKind.OTHER


def is_retryable(error: BaseException) -> bool:
    """Check if a transport failure is worth another attempt."""
    return classify_failure(error) in RETRYABLE_FAILURES


class Transport(ABC):
    """Performs one HTTP exchange.

    Implementations return a RawHttpResult for any HTTP status and raise for
    transport-level failures; they never retry.
    """

    @abstractmethod
    def send(
        self,
        method: str,
        url: str,
        headers: Dict[str, str],
        body: Optional[bytes] = None,
    ) -> RawHttpResult:
        """Send a request and read the full response."""
        pass


class HTTPTransport(Transport):
    """``http.client`` transport with separate open and read timeouts.

    A new connection is opened per call and closed once the body is read.
    """

    def __init__(
        self,
        open_timeout: float = 5.0,
        read_timeout: float = 5.0,
        ssl_context: Optional[ssl.SSLContext] = None,
    ):
        self.open_timeout = open_timeout
        self.read_timeout = read_timeout
        self.ssl_context = ssl_context

    def send(
        self,
        method: str,
        url: str,
        headers: Dict[str, str],
        body: Optional[bytes] = None,
    ) -> RawHttpResult:
        parsed = urlsplit(url)
        path = parsed.path or "/"
        if parsed.query:
            path = f"{path}?{parsed.query}"

        logger.debug(
            f"sending request {method} {parsed.scheme}://{parsed.netloc}{path} "
            f"(open_timeout={self.open_timeout}, read_timeout={self.read_timeout})"
        )

        connection = self._connection(parsed.scheme, parsed.hostname or "", parsed.port)
        try:
            try:
                connection.connect()
            except socket.timeout as e:
                raise ConnectTimeout(
                    f"Timed out connecting to {parsed.hostname}:{parsed.port or ''}"
                ) from e

            connection.sock.settimeout(self.read_timeout)

            try:
                connection.request(method, path, body=body, headers=headers)
                response = connection.getresponse()
                data = response.read()
            except socket.timeout as e:
                raise ReadTimeout(f"Timed out reading response from {url}") from e

            header_source: Dict[str, list] = {}
            for name, value in response.getheaders():
                header_source.setdefault(name.lower(), []).append(value)

            request_ids = header_source.get(REQUEST_ID_HEADER)
            return RawHttpResult(
                status=response.status,
                body=data.decode("utf-8", errors="replace"),
                header_source=header_source,
                correlation_header=request_ids[0] if request_ids else None,
            )
        finally:
            connection.close()

    def _connection(
        self,
        scheme: str,
        host: str,
        port: Optional[int],
    ) -> http.client.HTTPConnection:
        if scheme == "https":
            return http.client.HTTPSConnection(
                host,
                port,
                timeout=self.open_timeout,
                context=self.ssl_context or ssl.create_default_context(),
            )
        return http.client.HTTPConnection(host, port, timeout=self.open_timeout)


__all__ = [
    "Transport",
    "HTTPTransport",
    "FailureKind",
    "RETRYABLE_FAILURES",
    "ConnectTimeout",
    "ReadTimeout",
    "classify_failure",
    "is_retryable",
]
