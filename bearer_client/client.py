"""Bearer Client - Library entry point.

Copyright (c) 2024-2026 BlackRoad OS, Inc. All rights reserved.
"""

from __future__ import annotations

import logging
from typing import Any, List, Mapping, Optional

from bearer_client.config import Configuration, load_config
from bearer_client.errors import FunctionError
from bearer_client.integration import Integration
from bearer_client.observability import AttemptObserver, LoggingObserver
from bearer_client.proxy.builder import ProxyRequest, RequestBuilder, UrlStyle
from bearer_client.proxy.retry import CancellationToken, RetryingTransport
from bearer_client.proxy.transport import HTTPTransport, Transport
from bearer_client.response.normalizer import NormalizedResponse

PACKAGE_LOGGER = "bearer_client"


def configure_logging(config: Configuration) -> None:
    """Apply the configured log level to the package logger."""
    logging.getLogger(PACKAGE_LOGGER).setLevel(config.log_level.upper())


def raise_for_function_error(response: NormalizedResponse) -> Any:
    """Return the parsed body of a function call, or raise FunctionError.

    A JSON object with an ``error`` key is the gateway's error envelope,
    whatever the HTTP status.
    """
    data = response.parsed_body
    if isinstance(data, dict) and "error" in data:
        raise FunctionError(data["error"])
    return data


class Bearer:
    """Bearer client.

    Usage:
        bearer = Bearer("sk_production_...")

        # Proxied API calls
        response = bearer.integration("github").auth(auth_id).get("/user")

        # Backend functions
        goats = bearer.invoke("4l1c3", "fetch-goats", params={"q": "dolly"})
    """

    def __init__(
        self,
        secret_key: Optional[str] = None,
        config: Optional[Configuration] = None,
        transport: Optional[Transport] = None,
        observers: Optional[List[AttemptObserver]] = None,
        **overrides: Any,
    ):
        """
        Args:
            secret_key: Developer secret key, overrides the configured one
            config: Configuration, loaded from the environment when omitted
            transport: Transport shared by every call of this client
            observers: Attempt observers, defaults to a LoggingObserver
            **overrides: Configuration fields to override (host, ...),
                deprecated names (api_key, ...) included
        """
        config = config or load_config()
        if secret_key is not None:
            overrides["secret_key"] = secret_key
        if overrides:
            config = config.with_overrides(overrides)

        self.config = config
        self.secret_key = config.require("secret_key")
        self._transport = transport
        self._observers = observers

        configure_logging(config)

    def integration(
        self,
        integration_id: str,
        http_client_settings: Optional[Mapping[str, Any]] = None,
    ) -> Integration:
        """Return an integration client.

        Args:
            integration_id: Integration id
            http_client_settings: open_timeout / read_timeout overrides
        """
        return Integration(
            integration_id=integration_id,
            config=self.config,
            http_client_settings=http_client_settings,
            transport=self._transport,
            observers=self._observers,
        )

    def invoke(
        self,
        integration_id: str,
        function_name: str,
        params: Optional[Mapping[str, str]] = None,
        body: Any = None,
        cancellation: Optional[CancellationToken] = None,
    ) -> Any:
        """Invoke a backend function and return its parsed response.

        Args:
            integration_id: Integration id
            function_name: Function to call
            params: Query string parameters
            body: JSON body, ``{}`` when omitted

        Raises:
            FunctionError: The function answered with an error payload
        """
        request = self._function_request(integration_id, function_name, params, body)
        response = self._executor().execute(request, cancellation=cancellation)
        return raise_for_function_error(response)

    # Older name of invoke
    call = invoke

    async def invoke_async(
        self,
        integration_id: str,
        function_name: str,
        params: Optional[Mapping[str, str]] = None,
        body: Any = None,
        cancellation: Optional[CancellationToken] = None,
    ) -> Any:
        """Async version of ``invoke``."""
        request = self._function_request(integration_id, function_name, params, body)
        response = await self._executor().execute_async(
            request,
            cancellation=cancellation,
        )
        return raise_for_function_error(response)

    def _function_request(
        self,
        integration_id: str,
        function_name: str,
        params: Optional[Mapping[str, str]],
        body: Any,
    ) -> ProxyRequest:
        builder = RequestBuilder(
            integration_id=integration_id,
            secret_key=self.secret_key,
            host=self.config.functions_host,
            url_style=UrlStyle.FUNCTION,
            functions_path=self.config.functions_path,
            proxy_function_name=function_name,
        )
        return builder.build(
            "POST",
            "",
            body={} if body is None else body,
            query=params,
        )

    def _executor(self) -> RetryingTransport:
        transport = self._transport or HTTPTransport(
            open_timeout=self.config.open_timeout,
            read_timeout=self.config.read_timeout,
        )
        return RetryingTransport(
            transport,
            policy=self.config.retry_policy,
            observers=[LoggingObserver()] if self._observers is None else self._observers,
        )


__all__ = [
    "Bearer",
    "configure_logging",
    "raise_for_function_error",
]
