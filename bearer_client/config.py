"""Configuration utilities.

Copyright (c) 2024-2026 BlackRoad OS, Inc. All rights reserved.

Configuration is an immutable value. It is built once (from defaults, a
file, the environment or a plain dict) and handed to the client objects
that need it; nothing in the library mutates it afterwards.
"""

from __future__ import annotations

import dataclasses
import json
import logging
import os
from dataclasses import dataclass, fields
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Type, TypeVar

from bearer_client.errors import ConfigurationError
from bearer_client.proxy.builder import HeaderMode, UrlStyle
from bearer_client.proxy.retry import RetryPolicy

logger = logging.getLogger(__name__)

T = TypeVar("T", bound="Configuration")

PRODUCTION_INTEGRATION_HOST = "https://proxy.bearer.sh"
PRODUCTION_FUNCTIONS_HOST = "https://int.bearer.sh"
DEFAULT_FUNCTIONS_PATH = "api/v4/functions/backend"
DEFAULT_PROXY_FUNCTION_NAME = "bearer-proxy"

DEFAULT_OPEN_TIMEOUT = 5.0
DEFAULT_READ_TIMEOUT = 5.0

# Deprecated name -> current field
LEGACY_FIELDS: Dict[str, str] = {
    "api_key": "secret_key",
    "client_id": "publishable_key",
    "secret": "encryption_key",
    "integration_host": "host",
    "http_client_params": "http_client_settings",
}

HTTP_CLIENT_SETTING_FIELDS = ("open_timeout", "read_timeout")


@dataclass(frozen=True)
class Configuration:
    """Client configuration."""

    # Credentials
    secret_key: Optional[str] = None
    publishable_key: Optional[str] = None
    encryption_key: Optional[str] = None

    # Gateway
    host: str = PRODUCTION_INTEGRATION_HOST
    functions_host: str = PRODUCTION_FUNCTIONS_HOST
    functions_path: str = DEFAULT_FUNCTIONS_PATH
    proxy_function_name: str = DEFAULT_PROXY_FUNCTION_NAME
    url_style: UrlStyle = UrlStyle.DIRECT
    header_mode: HeaderMode = HeaderMode.MERGE

    # Timeouts
    open_timeout: float = DEFAULT_OPEN_TIMEOUT
    read_timeout: float = DEFAULT_READ_TIMEOUT

    # Retries
    max_network_retries: int = 0
    initial_network_retry_delay: float = 0.5
    max_network_retry_delay: float = 2.0

    # Logging
    log_level: str = "INFO"

    def __post_init__(self) -> None:
        # Enum fields may arrive as names from files or the environment
        if not isinstance(self.url_style, UrlStyle):
            object.__setattr__(self, "url_style", _to_enum(UrlStyle, self.url_style))
        if not isinstance(self.header_mode, HeaderMode):
            object.__setattr__(
                self, "header_mode", _to_enum(HeaderMode, self.header_mode)
            )

        for name in HTTP_CLIENT_SETTING_FIELDS:
            if getattr(self, name) <= 0:
                raise ConfigurationError(f"Bearer {name} must be positive")

    @property
    def http_client_settings(self) -> Dict[str, float]:
        """Per-call transport settings."""
        return {
            "open_timeout": self.open_timeout,
            "read_timeout": self.read_timeout,
        }

    @property
    def retry_policy(self) -> RetryPolicy:
        """Retry policy derived from the network retry settings."""
        return RetryPolicy(
            max_retries=self.max_network_retries,
            initial_delay=self.initial_network_retry_delay,
            max_delay=self.max_network_retry_delay,
        )

    def require(self, name: str) -> Any:
        """Return a setting, raising ConfigurationError when it is unset."""
        value = getattr(self, name)
        if not value:
            raise ConfigurationError(f"Bearer {name} is missing!")
        return value

    def with_http_client_settings(
        self,
        settings: Optional[Mapping[str, Any]] = None,
    ) -> "Configuration":
        """Copy with transport settings overridden."""
        if not settings:
            return self
        unknown = set(settings) - set(HTTP_CLIENT_SETTING_FIELDS)
        if unknown:
            raise ConfigurationError(
                f"Unknown http client settings: {', '.join(sorted(unknown))}"
            )
        return dataclasses.replace(self, **settings)

    def with_overrides(self, overrides: Mapping[str, Any]) -> "Configuration":
        """Copy with fields overridden.

        Accepts the same names as ``from_dict``, deprecated ones included.
        Unknown names raise ConfigurationError.
        """
        data = _resolve_legacy_fields(overrides)
        settings = data.pop("http_client_settings", None)

        valid_fields = {f.name for f in fields(self)}
        unknown = set(data) - valid_fields
        if unknown:
            raise ConfigurationError(
                f"Unknown configuration fields: {', '.join(sorted(unknown))}"
            )

        config = dataclasses.replace(self, **data) if data else self
        return config.with_http_client_settings(settings)

    @classmethod
    def from_dict(cls: Type[T], data: Mapping[str, Any]) -> T:
        """Create config from dictionary.

        Deprecated field names are translated here, once, and unknown keys
        are ignored.
        """
        data = _resolve_legacy_fields(data)

        settings = data.pop("http_client_settings", None)
        if settings:
            for key in HTTP_CLIENT_SETTING_FIELDS:
                if key in settings:
                    data.setdefault(key, settings[key])

        valid_fields = {f.name for f in fields(cls)}
        filtered = {k: v for k, v in data.items() if k in valid_fields}
        return cls(**filtered)

    @classmethod
    def from_json(cls: Type[T], path: str) -> T:
        """Load config from JSON file."""
        with open(path, "r") as f:
            data = json.load(f)
        return cls.from_dict(data or {})

    @classmethod
    def from_yaml(cls: Type[T], path: str) -> T:
        """Load config from YAML file."""
        import yaml

        with open(path, "r") as f:
            data = yaml.safe_load(f)
        return cls.from_dict(data or {})

    @classmethod
    def from_env(cls: Type[T], prefix: str = "BEARER_") -> T:
        """Load config from environment variables."""
        defaults = {f.name: f.default for f in fields(cls)}
        data: Dict[str, Any] = {}

        for key, value in os.environ.items():
            if not key.startswith(prefix):
                continue
            config_key = key[len(prefix):].lower()
            config_key = LEGACY_FIELDS.get(config_key, config_key)
            if config_key not in defaults:
                continue
            data[config_key] = _coerce(value, defaults[config_key])

        return cls.from_dict(data)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        result = {}
        for f in fields(self):
            result[f.name] = getattr(self, f.name)
        return result

    def merge(self, other: "Configuration") -> "Configuration":
        """Merge with another config.

        Values ``other`` sets away from their defaults take precedence.
        """
        data = self.to_dict()
        for f in fields(other):
            value = getattr(other, f.name)
            if value != f.default:
                data[f.name] = value
        return type(self)(**data)


def _resolve_legacy_fields(data: Mapping[str, Any]) -> Dict[str, Any]:
    resolved = dict(data)
    for old, new in LEGACY_FIELDS.items():
        if old not in resolved:
            continue
        logger.warning(
            "Bearer Deprecation Warning: %s is deprecated, use %s instead",
            old,
            new,
        )
        value = resolved.pop(old)
        resolved.setdefault(new, value)
    return resolved


def _to_enum(enum_cls: Type[Enum], value: Any) -> Enum:
    try:
        return enum_cls[str(value).upper()]
    except KeyError:
        raise ConfigurationError(
            f"Invalid {enum_cls.__name__} value: {value!r}"
        ) from None


def _coerce(value: str, default: Any) -> Any:
    """Convert an environment string to the type of the field default."""
    if isinstance(default, bool):
        return value.lower() == "true"
    if isinstance(default, int):
        return int(value)
    if isinstance(default, float):
        return float(value)
    return value


def load_config(
    path: Optional[str] = None,
    env_prefix: str = "BEARER_",
) -> Configuration:
    """Load configuration from multiple sources.

    Priority (highest to lowest):
    1. Environment variables
    2. Config file (if provided)
    3. Defaults
    """
    config = Configuration()

    if path:
        path_obj = Path(path)
        if path_obj.exists():
            if path.endswith(".json"):
                config = Configuration.from_json(path)
            elif path.endswith((".yaml", ".yml")):
                config = Configuration.from_yaml(path)
            else:
                logger.warning(f"Unknown config format: {path}")

    env_config = Configuration.from_env(env_prefix)
    return config.merge(env_config)


__all__ = [
    "Configuration",
    "LEGACY_FIELDS",
    "PRODUCTION_INTEGRATION_HOST",
    "PRODUCTION_FUNCTIONS_HOST",
    "load_config",
]
