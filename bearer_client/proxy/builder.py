"""Request Builder - Composes proxied requests.

Copyright (c) 2024-2026 BlackRoad OS, Inc. All rights reserved.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Any, Dict, Mapping, Optional

from bearer_client import __version__
from bearer_client.errors import InvalidRequest
from bearer_client.utils.helpers import merge_headers

SUPPORTED_METHODS = ("GET", "HEAD", "POST", "PUT", "PATCH", "DELETE")

USER_AGENT = f"Bearer-Python ({__version__})"

AUTH_ID_HEADER = "Bearer-Auth-Id"
SETUP_ID_HEADER = "Bearer-Setup-Id"
PROXY_HEADER_PREFIX = "Bearer-Proxy-"


class UrlStyle(Enum):
    """How the target URL is laid out on the gateway."""

    DIRECT = auto()    # {host}/{integration}/{endpoint}
    FUNCTION = auto()  # {host}/{functions_path}/{integration}/{proxy_function}/{endpoint}


class HeaderMode(Enum):
    """How caller headers are combined with the gateway headers."""

    MERGE = auto()   # Merged over the defaults
    PREFIX = auto()  # Namespaced as Bearer-Proxy-<name>


@dataclass(frozen=True)
class Identity:
    """End-user identity forwarded to the gateway."""

    auth_id: Optional[str] = None
    setup_id: Optional[str] = None


@dataclass
class ProxyRequest:
    """A request ready to be sent through the proxy."""

    method: str
    integration_id: str
    endpoint_path: str
    url: str
    headers: Dict[str, str] = field(default_factory=dict)
    identity: Optional[Identity] = None
    body: Any = None
    query: Optional[Dict[str, str]] = None


class RequestBuilder:
    """Builds ProxyRequest objects for one integration.

    Header layout:
    ┌────────────────────────────────────────────────────────────┐
    │  Authorization     secret key                               │
    │  User-Agent        Bearer-Python (<version>)                │
    │  Bearer-Auth-Id    identity.auth_id   (dropped when None)   │
    │  Bearer-Setup-Id   identity.setup_id  (dropped when None)   │
    │  Content-Type      application/json                         │
    │  <caller headers>  merged, or as Bearer-Proxy-<name>        │
    └────────────────────────────────────────────────────────────┘
    """

    def __init__(
        self,
        integration_id: str,
        secret_key: str,
        host: str,
        header_mode: HeaderMode = HeaderMode.MERGE,
        url_style: UrlStyle = UrlStyle.DIRECT,
        functions_path: str = "",
        proxy_function_name: str = "",
        user_agent: str = USER_AGENT,
    ):
        self.integration_id = integration_id
        self.secret_key = secret_key
        self.host = host.rstrip("/")
        self.header_mode = header_mode
        self.url_style = url_style
        self.functions_path = functions_path.strip("/")
        self.proxy_function_name = proxy_function_name.strip("/")
        self.user_agent = user_agent

    def build(
        self,
        method: str,
        endpoint_path: str,
        identity: Optional[Identity] = None,
        headers: Optional[Mapping[str, Optional[str]]] = None,
        body: Any = None,
        query: Optional[Mapping[str, str]] = None,
    ) -> ProxyRequest:
        """Build a request.

        Args:
            method: GET/HEAD/POST/PUT/PATCH/DELETE
            endpoint_path: Path relative to the integration's API base URL
            identity: Auth/setup ids to forward
            headers: Headers for the integration's API
            body: JSON-serializable request body
            query: Query string parameters

        Returns:
            ProxyRequest

        Raises:
            InvalidRequest: On an unsupported method or malformed endpoint
        """
        if not self.integration_id:
            raise InvalidRequest("integration id is required")
        if not isinstance(method, str) or method.upper() not in SUPPORTED_METHODS:
            raise InvalidRequest(
                f"Unsupported method {method!r}, expected one of "
                f"{', '.join(SUPPORTED_METHODS)}"
            )
        if not isinstance(endpoint_path, str):
            raise InvalidRequest(f"Endpoint must be a string, got {endpoint_path!r}")

        method = method.upper()
        endpoint_path = normalize_endpoint(endpoint_path)

        return ProxyRequest(
            method=method,
            integration_id=self.integration_id,
            endpoint_path=endpoint_path,
            url=self.build_url(endpoint_path),
            headers=self.build_headers(identity, headers),
            identity=identity,
            body=body,
            query=dict(query) if query else None,
        )

    def build_url(self, endpoint_path: str) -> str:
        """Compose the gateway URL for an endpoint.

        In FUNCTION style an empty endpoint addresses the function itself.
        """
        if self.url_style == UrlStyle.FUNCTION:
            parts = [
                self.host,
                self.functions_path,
                self.integration_id,
                self.proxy_function_name,
            ]
            if endpoint_path:
                parts.append(endpoint_path)
        else:
            parts = [self.host, self.integration_id, endpoint_path]
        return "/".join(parts)

    def build_headers(
        self,
        identity: Optional[Identity] = None,
        headers: Optional[Mapping[str, Optional[str]]] = None,
    ) -> Dict[str, str]:
        """Compose gateway headers plus caller headers, dropping None values."""
        identity = identity or Identity()
        request_headers: Dict[str, Optional[str]] = {
            "Authorization": self.secret_key,
            "User-Agent": self.user_agent,
            AUTH_ID_HEADER: identity.auth_id,
            SETUP_ID_HEADER: identity.setup_id,
            "Content-Type": "application/json",
        }

        caller_headers = dict(headers or {})
        for key in caller_headers:
            if not isinstance(key, str) or not key:
                raise InvalidRequest(f"Invalid header name {key!r}")
        if self.header_mode == HeaderMode.PREFIX:
            caller_headers = {
                f"{PROXY_HEADER_PREFIX}{key}": value
                for key, value in caller_headers.items()
            }
        request_headers = merge_headers(request_headers, caller_headers)

        result: Dict[str, str] = {}
        for key, value in request_headers.items():
            if value is None:
                continue
            value = str(value)
            _check_header(key, value)
            result[key] = value
        return result


def _check_header(name: str, value: str) -> None:
    """Reject headers http.client cannot put on the wire.

    Names must be ASCII and values Latin-1, and neither may contain a line
    break.
    """
    try:
        name.encode("ascii")
        value.encode("latin-1")
    except UnicodeEncodeError as e:
        raise InvalidRequest(f"Header {name!r} cannot be encoded: {e}") from e
    if any(char in name + value for char in "\r\n"):
        raise InvalidRequest(f"Header {name!r} contains a line break")


def normalize_endpoint(endpoint_path: str) -> str:
    """Strip a single leading slash."""
    if endpoint_path.startswith("/"):
        return endpoint_path[1:]
    return endpoint_path


__all__ = [
    "RequestBuilder",
    "ProxyRequest",
    "Identity",
    "HeaderMode",
    "UrlStyle",
    "SUPPORTED_METHODS",
    "USER_AGENT",
    "normalize_endpoint",
]
