"""Attempt observer tests."""

import logging

import pytest

from bearer_client.observability import (
    AttemptEvent,
    AttemptOutcome,
    LoggingObserver,
    ObserverConfig,
)
from bearer_client.proxy.builder import RequestBuilder

LOGGER = "bearer_client.observability.logging"


def make_request(**kwargs):
    builder = RequestBuilder(
        integration_id="test-integration-id",
        secret_key="test-api-key",
        host="https://int.example.com",
    )
    return builder.build("POST", "/test", **kwargs)


def messages(caplog):
    return [record.getMessage() for record in caplog.records]


@pytest.fixture
def log(caplog):
    caplog.set_level(logging.INFO, logger=LOGGER)
    return caplog


class TestLoggingObserver:
    """Test attempt logging."""

    def test_success(self, log):
        """Test a response is logged at info."""
        LoggingObserver()(
            AttemptEvent(
                request=make_request(query={"q": "dolly"}),
                attempt=1,
                outcome=AttemptOutcome.SUCCESS,
                elapsed=0.0125,
                status_code=200,
                correlation_id="req-1",
            )
        )

        (message,) = messages(log)
        assert message.startswith("[test-integration-id#1] <-- 200 POST test (12.50ms)")
        assert "requestId=req-1" in message
        assert "query={'q': 'dolly'}" in message
        assert "headers=" not in message
        assert log.records[0].levelno == logging.INFO

    def test_headers_redacted(self, log):
        """Test the secret key is never logged."""
        observer = LoggingObserver(ObserverConfig(log_headers=True, log_body=True))
        observer(
            AttemptEvent(
                request=make_request(body={"body": "data"}),
                attempt=1,
                outcome=AttemptOutcome.SUCCESS,
                elapsed=0.01,
                status_code=200,
            )
        )

        (message,) = messages(log)
        assert "test-api-key" not in message
        assert "'Authorization': '[REDACTED]'" in message
        assert 'body={"body": "data"}' in message

    def test_body_truncated(self, log):
        """Test body logging respects max_body_size."""
        observer = LoggingObserver(ObserverConfig(log_body=True, max_body_size=5))
        observer(
            AttemptEvent(
                request=make_request(body={"body": "data"}),
                attempt=1,
                outcome=AttemptOutcome.SUCCESS,
                elapsed=0.01,
                status_code=200,
            )
        )
        assert messages(log)[0].endswith('body={"bod')

    def test_retry(self, log):
        """Test a retry logs the error and the delay."""
        LoggingObserver()(
            AttemptEvent(
                request=make_request(),
                attempt=1,
                outcome=AttemptOutcome.RETRY,
                elapsed=0.01,
                error=ConnectionResetError("reset"),
                delay=0.5,
            )
        )

        warning, info = log.records
        assert warning.levelno == logging.WARNING
        assert "There was an error while trying to make a request to bearer. ConnectionResetError: reset" in warning.getMessage()
        assert info.getMessage() == "[test-integration-id#1] retrying request in 0.500s"

    def test_failed(self, log):
        """Test a terminal failure is logged."""
        LoggingObserver()(
            AttemptEvent(
                request=make_request(),
                attempt=3,
                outcome=AttemptOutcome.FAILED,
                elapsed=0.01,
                error=ConnectionRefusedError("refused"),
            )
        )

        (message,) = messages(log)
        assert "Failed to perform bearer request after 3 attempt(s). ConnectionRefusedError: refused" in message

    def test_cancelled(self, log):
        """Test cancellation is logged."""
        LoggingObserver()(
            AttemptEvent(
                request=make_request(),
                attempt=1,
                outcome=AttemptOutcome.CANCELLED,
                elapsed=1.0,
            )
        )
        assert "request cancelled after 1000.00ms" in messages(log)[0]
