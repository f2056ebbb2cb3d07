"""Proxy module - Building, sending and retrying proxied requests."""

from bearer_client.proxy.builder import (
    RequestBuilder,
    ProxyRequest,
    Identity,
    HeaderMode,
    UrlStyle,
)
from bearer_client.proxy.transport import (
    Transport,
    HTTPTransport,
    FailureKind,
    classify_failure,
)
from bearer_client.proxy.retry import (
    RetryPolicy,
    RetryState,
    RetryingTransport,
    CancellationToken,
)

__all__ = [
    "RequestBuilder",
    "ProxyRequest",
    "Identity",
    "HeaderMode",
    "UrlStyle",
    "Transport",
    "HTTPTransport",
    "FailureKind",
    "classify_failure",
    "RetryPolicy",
    "RetryState",
    "RetryingTransport",
    "CancellationToken",
]
