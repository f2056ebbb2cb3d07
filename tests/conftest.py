"""Shared test fixtures."""

from dataclasses import dataclass
from typing import Dict, List, Optional

import pytest

from bearer_client.config import Configuration
from bearer_client.proxy.transport import Transport
from bearer_client.response.normalizer import RawHttpResult


@dataclass
class SentRequest:
    """What a FakeTransport was asked to send."""

    method: str
    url: str
    headers: Dict[str, str]
    body: Optional[bytes]


def make_raw(
    status: int = 200,
    body: str = '{"data": "It Works!!"}',
    headers: Optional[Dict[str, List[str]]] = None,
) -> RawHttpResult:
    """Build a RawHttpResult the way HTTPTransport does."""
    if headers is None:
        headers = {"bearer-request-id": ["bearer-request-id"]}
    request_ids = headers.get("bearer-request-id")
    return RawHttpResult(
        status=status,
        body=body,
        header_source=headers,
        correlation_header=request_ids[0] if request_ids else None,
    )


class FakeTransport(Transport):
    """Transport replaying scripted outcomes.

    Each outcome is a RawHttpResult to return or an exception to raise.
    The last outcome repeats once the script runs out.
    """

    def __init__(self, *outcomes):
        self.outcomes = list(outcomes) or [make_raw()]
        self.calls: List[SentRequest] = []

    def send(self, method, url, headers, body=None):
        self.calls.append(SentRequest(method, url, headers, body))
        if len(self.outcomes) > 1:
            outcome = self.outcomes.pop(0)
        else:
            outcome = self.outcomes[0]
        if isinstance(outcome, BaseException):
            raise outcome
        return outcome

    @property
    def last(self) -> SentRequest:
        return self.calls[-1]


@pytest.fixture
def transport_factory():
    """FakeTransport class, called with the outcomes to replay."""
    return FakeTransport


@pytest.fixture
def raw_factory():
    """make_raw helper."""
    return make_raw


@pytest.fixture
def config():
    """Configuration pointing at a test host, with fast retries."""
    return Configuration(
        secret_key="test-api-key",
        host="https://int.example.com",
        initial_network_retry_delay=0.001,
        max_network_retry_delay=0.002,
    )
