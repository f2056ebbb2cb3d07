"""Bearer Client - Python bindings for the Bearer proxy gateway.

Copyright (c) 2024-2026 BlackRoad OS, Inc. All rights reserved.

The client calls third-party APIs through the Bearer proxy, which injects
the end-user credentials stored for an auth id / setup id:
- Proxied requests to an integration's API (GET/HEAD/POST/PUT/PATCH/DELETE)
- Backend function invocation
- Retries with exponential backoff on transient network failures
- Normalized responses (parsed body, case-insensitive headers, request id)

Architecture Overview:
┌─────────────────────────────────────────────────────────────────────────────┐
│                              Bearer Client                                   │
├─────────────────────────────────────────────────────────────────────────────┤
│                                                                              │
│  ┌───────────────────────────────────────────────────────────────────────┐  │
│  │                          Request Pipeline                              │  │
│  │  Caller ──▶ Builder ──▶ RetryingTransport ──▶ Proxy ──▶ Normalizer    │  │
│  └───────────────────────────────────────────────────────────────────────┘  │
│                                                                              │
│  ┌─────────────────┐  ┌─────────────────┐  ┌─────────────────────────────┐ │
│  │    Builder      │  │     Retry       │  │        Response             │ │
│  │                 │  │                 │  │                             │ │
│  │ - URL styles    │  │ - Classification│  │ - JSON body (lenient)       │ │
│  │ - Auth headers  │  │ - Backoff+jitter│  │ - Headers (strict)          │ │
│  │ - Header modes  │  │ - Cancellation  │  │ - Request id                │ │
│  └─────────────────┘  └─────────────────┘  └─────────────────────────────┘ │
│                                                                              │
└─────────────────────────────────────────────────────────────────────────────┘

Usage:
    from bearer_client import Bearer

    bearer = Bearer("sk_production_...")
    github = bearer.integration("github").auth("auth-id")

    response = github.get("/user/repos", query={"per_page": "10"})
    print(response.status_code, response.parsed_body, response.correlation_id)

    goats = bearer.invoke("4l1c3", "fetch-goats", params={"q": "dolly"})
"""

__version__ = "0.1.0"
__author__ = "BlackRoad OS, Inc."

# Client
from bearer_client.client import Bearer
from bearer_client.integration import Integration
from bearer_client.config import Configuration, load_config

# Errors
from bearer_client.errors import (
    BearerError,
    Cancelled,
    ConfigurationError,
    FunctionError,
    HeaderFormatError,
    InvalidRequest,
    TransportError,
)

# Proxy
from bearer_client.proxy.builder import HeaderMode, Identity, RequestBuilder, UrlStyle
from bearer_client.proxy.retry import CancellationToken, RetryingTransport, RetryPolicy
from bearer_client.proxy.transport import HTTPTransport, Transport

# Response
from bearer_client.response.headers import Headers
from bearer_client.response.normalizer import NormalizedResponse, UNPARSABLE_BODY

# Auth details
from bearer_client.auth_details import AuthDetails

__all__ = [
    # Version
    "__version__",
    # Client
    "Bearer",
    "Integration",
    "Configuration",
    "load_config",
    # Errors
    "BearerError",
    "Cancelled",
    "ConfigurationError",
    "FunctionError",
    "HeaderFormatError",
    "InvalidRequest",
    "TransportError",
    # Proxy
    "HeaderMode",
    "Identity",
    "RequestBuilder",
    "UrlStyle",
    "CancellationToken",
    "RetryingTransport",
    "RetryPolicy",
    "HTTPTransport",
    "Transport",
    # Response
    "Headers",
    "NormalizedResponse",
    "UNPARSABLE_BODY",
    # Auth details
    "AuthDetails",
]
