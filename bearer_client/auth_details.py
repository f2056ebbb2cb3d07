"""Auth Details - Stored end-user credentials returned by the gateway.

Copyright (c) 2024-2026 BlackRoad OS, Inc. All rights reserved.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional


class OAuth1SignatureMethod:
    """OAuth 1 signature methods."""

    HMAC_SHA1 = "HMAC-SHA1"
    RSA_SHA1 = "RSA-SHA1"
    PLAIN_TEXT = "PLAINTEXT"


class TokenType:
    """Token types (RFC 7662 plus gateway extensions)."""

    OAUTH1 = "oauth"
    OAUTH2_ACCESS_TOKEN = "bearer"
    OAUTH2_REFRESH_TOKEN = "refresh"  # Not defined in RFC 7662
    OPENID_CONNECT = "id"  # Not defined in RFC 7662


# Token types whose scopes default to an empty list
_SCOPED_TOKEN_TYPES = {TokenType.OAUTH2_ACCESS_TOKEN, TokenType.OAUTH2_REFRESH_TOKEN}


def _timestamp(value: Optional[float]) -> Optional[datetime]:
    if value is None:
        return None
    return datetime.fromtimestamp(value, tz=timezone.utc)


@dataclass(frozen=True)
class TokenResponse:
    """Raw token endpoint response."""

    body: Any = None
    headers: Any = None


@dataclass(frozen=True)
class TokenData:
    """Decoded token introspection data."""

    value: Optional[str] = None
    token_type: Optional[str] = None
    client_id: Optional[str] = None
    issued_at: Optional[datetime] = None
    expires_at: Optional[datetime] = None
    scopes: Optional[List[str]] = None
    active: Optional[bool] = None

    @property
    def is_active(self) -> bool:
        return bool(self.active)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "TokenData":
        token_type = data.get("token_type")
        scope = data.get("scope")
        if scope:
            scopes: Optional[List[str]] = scope.split(" ")
        else:
            scopes = [] if token_type in _SCOPED_TOKEN_TYPES else None

        return cls(
            value=data.get("value"),
            token_type=token_type,
            client_id=data.get("client_id"),
            issued_at=_timestamp(data.get("iat")),
            expires_at=_timestamp(data.get("exp")),
            scopes=scopes,
            active=data.get("active"),
        )


@dataclass(frozen=True)
class AuthDetails:
    """Credentials stored on the gateway for an auth id.

    Covers OAuth 1 (consumer key/secret, token secret, signature method) and
    OAuth 2 / OpenID Connect (client id/secret, refresh and id tokens).
    """

    access_token: TokenData
    token_response: TokenResponse
    raw_data: Dict[str, Any] = field(repr=False, default_factory=dict)
    callback_params: Any = None
    client_id: Optional[str] = None
    client_secret: Optional[str] = None
    consumer_key: Optional[str] = None
    consumer_secret: Optional[str] = None
    id_token: Optional[TokenData] = None
    id_token_jwt: Any = None
    refresh_token: Optional[TokenData] = None
    token_secret: Optional[str] = None
    signature_method: Optional[str] = None

    @classmethod
    def from_dict(cls, raw_data: Dict[str, Any]) -> "AuthDetails":
        """Decode the gateway's camelCase payload."""
        token_response = raw_data.get("tokenResponse") or {}
        id_token = raw_data.get("idToken")
        refresh_token = raw_data.get("refreshToken")

        return cls(
            access_token=TokenData.from_dict(raw_data["accessToken"]),
            token_response=TokenResponse(
                body=token_response.get("body"),
                headers=token_response.get("headers"),
            ),
            raw_data=raw_data,
            callback_params=raw_data.get("callbackParams"),
            client_id=raw_data.get("clientID"),
            client_secret=raw_data.get("clientSecret"),
            consumer_key=raw_data.get("consumerKey"),
            consumer_secret=raw_data.get("consumerSecret"),
            id_token=TokenData.from_dict(id_token) if id_token else None,
            id_token_jwt=raw_data.get("idTokenJwt"),
            refresh_token=TokenData.from_dict(refresh_token) if refresh_token else None,
            token_secret=raw_data.get("tokenSecret"),
            signature_method=raw_data.get("signatureMethod"),
        )


__all__ = [
    "AuthDetails",
    "TokenData",
    "TokenResponse",
    "TokenType",
    "OAuth1SignatureMethod",
]
