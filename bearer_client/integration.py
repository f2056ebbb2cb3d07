"""Integration - Client for one integration behind the proxy.

Copyright (c) 2024-2026 BlackRoad OS, Inc. All rights reserved.
"""

from __future__ import annotations

from typing import Any, List, Mapping, Optional

from bearer_client.config import Configuration
from bearer_client.observability import AttemptObserver, LoggingObserver
from bearer_client.proxy.builder import Identity, ProxyRequest, RequestBuilder
from bearer_client.proxy.retry import CancellationToken, RetryingTransport
from bearer_client.proxy.transport import HTTPTransport, Transport
from bearer_client.response.normalizer import NormalizedResponse


class Integration:
    """Makes requests to the API configured for an integration.

    Usage:
        github = Integration("github", config)
        response = github.auth("auth-id").get("/user/repos", query={"page": "2"})
        response.status_code, response.parsed_body
    """

    def __init__(
        self,
        integration_id: str,
        config: Configuration,
        auth_id: Optional[str] = None,
        setup_id: Optional[str] = None,
        http_client_settings: Optional[Mapping[str, Any]] = None,
        transport: Optional[Transport] = None,
        observers: Optional[List[AttemptObserver]] = None,
    ):
        """
        Args:
            integration_id: Integration id
            config: Client configuration
            auth_id: Auth id used to connect
            setup_id: Setup id used to store the credentials
            http_client_settings: open_timeout / read_timeout overrides
            transport: Transport to send requests with
            observers: Attempt observers, defaults to a LoggingObserver
        """
        self.integration_id = integration_id
        self.auth_id = auth_id
        self.setup_id = setup_id
        self._base_config = config
        self._http_client_settings = dict(http_client_settings or {})
        self._transport = transport
        self._observers = observers

        self.config = config.with_http_client_settings(self._http_client_settings)
        self._builder = RequestBuilder(
            integration_id=integration_id,
            secret_key=self.config.require("secret_key"),
            host=self.config.host,
            header_mode=self.config.header_mode,
            url_style=self.config.url_style,
            functions_path=self.config.functions_path,
            proxy_function_name=self.config.proxy_function_name,
        )
        self._executor = RetryingTransport(
            transport or HTTPTransport(
                open_timeout=self.config.open_timeout,
                read_timeout=self.config.read_timeout,
            ),
            policy=self.config.retry_policy,
            observers=[LoggingObserver()] if observers is None else observers,
        )

    def __repr__(self) -> str:
        return (
            f"Integration({self.integration_id!r}, auth_id={self.auth_id!r}, "
            f"setup_id={self.setup_id!r})"
        )

    @property
    def identity(self) -> Identity:
        return Identity(auth_id=self.auth_id, setup_id=self.setup_id)

    def auth(self, auth_id: str) -> "Integration":
        """New client instance that uses the given auth id for requests."""
        return self._copy(auth_id=auth_id, setup_id=self.setup_id)

    # Alias of auth
    authenticate = auth

    def setup(self, setup_id: str) -> "Integration":
        """New client instance that uses the given setup id for requests."""
        return self._copy(auth_id=self.auth_id, setup_id=setup_id)

    def get(self, endpoint: str, **kwargs: Any) -> NormalizedResponse:
        """Make a GET request. See ``request`` for arguments."""
        return self.request("GET", endpoint, **kwargs)

    def head(self, endpoint: str, **kwargs: Any) -> NormalizedResponse:
        """Make a HEAD request. See ``request`` for arguments."""
        return self.request("HEAD", endpoint, **kwargs)

    def post(self, endpoint: str, **kwargs: Any) -> NormalizedResponse:
        """Make a POST request. See ``request`` for arguments."""
        return self.request("POST", endpoint, **kwargs)

    def put(self, endpoint: str, **kwargs: Any) -> NormalizedResponse:
        """Make a PUT request. See ``request`` for arguments."""
        return self.request("PUT", endpoint, **kwargs)

    def patch(self, endpoint: str, **kwargs: Any) -> NormalizedResponse:
        """Make a PATCH request. See ``request`` for arguments."""
        return self.request("PATCH", endpoint, **kwargs)

    def delete(self, endpoint: str, **kwargs: Any) -> NormalizedResponse:
        """Make a DELETE request. See ``request`` for arguments."""
        return self.request("DELETE", endpoint, **kwargs)

    def build_request(
        self,
        method: str,
        endpoint: str,
        headers: Optional[Mapping[str, Optional[str]]] = None,
        body: Any = None,
        query: Optional[Mapping[str, str]] = None,
    ) -> ProxyRequest:
        """Build the ProxyRequest ``request`` would send, without sending it."""
        return self._builder.build(
            method,
            endpoint,
            identity=self.identity,
            headers=headers,
            body=body,
            query=query,
        )

    def request(
        self,
        method: str,
        endpoint: str,
        headers: Optional[Mapping[str, Optional[str]]] = None,
        body: Any = None,
        query: Optional[Mapping[str, str]] = None,
        cancellation: Optional[CancellationToken] = None,
    ) -> NormalizedResponse:
        """Make a request to the API configured for this integration.

        Args:
            method: GET/HEAD/POST/PUT/PATCH/DELETE
            endpoint: URL relative to the configured API's base URL
            headers: Headers to send to the API
            body: Request body data, sent as JSON
            query: Parameters to add to the URL's query string
            cancellation: Token that stops retrying early

        Returns:
            NormalizedResponse (any HTTP status)
        """
        proxy_request = self.build_request(method, endpoint, headers, body, query)
        return self._executor.execute(proxy_request, cancellation=cancellation)

    async def request_async(
        self,
        method: str,
        endpoint: str,
        headers: Optional[Mapping[str, Optional[str]]] = None,
        body: Any = None,
        query: Optional[Mapping[str, str]] = None,
        cancellation: Optional[CancellationToken] = None,
    ) -> NormalizedResponse:
        """Async version of ``request``."""
        proxy_request = self.build_request(method, endpoint, headers, body, query)
        return await self._executor.execute_async(
            proxy_request,
            cancellation=cancellation,
        )

    def _copy(self, **identity: Optional[str]) -> "Integration":
        return type(self)(
            integration_id=self.integration_id,
            config=self._base_config,
            http_client_settings=self._http_client_settings,
            transport=self._transport,
            observers=self._observers,
            **identity,
        )


__all__ = [
    "Integration",
]
