"""Request builder tests."""

import pytest

from bearer_client import __version__
from bearer_client.errors import InvalidRequest
from bearer_client.proxy.builder import (
    HeaderMode,
    Identity,
    RequestBuilder,
    UrlStyle,
    normalize_endpoint,
)


def make_builder(**kwargs):
    options = {
        "integration_id": "test-integration-id",
        "secret_key": "test-api-key",
        "host": "https://int.example.com",
    }
    options.update(kwargs)
    return RequestBuilder(**options)


class TestRequestUrl:
    """Test URL composition."""

    def test_strips_leading_slash(self):
        """Test endpoint with a leading slash yields no double slash."""
        request = make_builder().build("GET", "/test")

        assert request.url == "https://int.example.com/test-integration-id/test"
        assert request.endpoint_path == "test"

    def test_endpoint_without_slash(self):
        """Test endpoint without leading slash."""
        request = make_builder().build("GET", "test/nested")
        assert request.url == "https://int.example.com/test-integration-id/test/nested"

    def test_only_one_slash_stripped(self):
        """Test a single leading slash is stripped."""
        assert normalize_endpoint("//test") == "/test"

    def test_host_trailing_slash(self):
        """Test host trailing slash is ignored."""
        request = make_builder(host="https://int.example.com/").build("GET", "/test")
        assert request.url == "https://int.example.com/test-integration-id/test"

    def test_function_style_url(self):
        """Test function-style gateway path."""
        builder = make_builder(
            url_style=UrlStyle.FUNCTION,
            functions_path="api/v4/functions/backend",
            proxy_function_name="bearer-proxy",
        )
        request = builder.build("GET", "/test")

        assert request.url == (
            "https://int.example.com/api/v4/functions/backend/"
            "test-integration-id/bearer-proxy/test"
        )

    def test_function_style_empty_endpoint(self):
        """Test an empty endpoint addresses the function itself."""
        builder = make_builder(
            url_style=UrlStyle.FUNCTION,
            functions_path="/api/v4/functions/backend/",
            proxy_function_name="fetch-goats",
        )
        request = builder.build("POST", "")

        assert request.url == (
            "https://int.example.com/api/v4/functions/backend/"
            "test-integration-id/fetch-goats"
        )


class TestRequestHeaders:
    """Test header assembly."""

    def test_required_headers(self):
        """Test gateway headers without identity."""
        request = make_builder().build("GET", "/test")

        assert request.headers == {
            "Authorization": "test-api-key",
            "User-Agent": f"Bearer-Python ({__version__})",
            "Content-Type": "application/json",
        }
        assert "Bearer-Auth-Id" not in request.headers
        assert "Bearer-Setup-Id" not in request.headers

    def test_auth_id_header(self):
        """Test auth id forwarded as Bearer-Auth-Id."""
        builder = make_builder()
        plain = builder.build("GET", "/test")
        request = builder.build("GET", "/test", identity=Identity(auth_id="test-auth-id"))

        assert request.headers["Bearer-Auth-Id"] == "test-auth-id"
        assert "Bearer-Setup-Id" not in request.headers
        assert request.url == plain.url
        assert {k: v for k, v in request.headers.items() if k != "Bearer-Auth-Id"} == plain.headers

    def test_setup_id_header(self):
        """Test setup id forwarded as Bearer-Setup-Id."""
        request = make_builder().build(
            "GET",
            "/test",
            identity=Identity(auth_id="auth", setup_id="test-setup-id"),
        )
        assert request.headers["Bearer-Setup-Id"] == "test-setup-id"
        assert request.headers["Bearer-Auth-Id"] == "auth"

    def test_merge_mode(self):
        """Test caller headers merged directly."""
        request = make_builder().build("GET", "/test", headers={"test": "header"})
        assert request.headers["test"] == "header"

    def test_merge_mode_overrides_case_insensitively(self):
        """Test a caller header replaces the default with the same name."""
        request = make_builder().build(
            "POST",
            "/test",
            headers={"content-type": "text/plain"},
        )

        assert request.headers["content-type"] == "text/plain"
        assert "Content-Type" not in request.headers

    def test_prefix_mode(self):
        """Test caller headers namespaced with Bearer-Proxy-."""
        builder = make_builder(header_mode=HeaderMode.PREFIX)
        request = builder.build("GET", "/test", headers={"test": "header"})

        assert request.headers["Bearer-Proxy-test"] == "header"
        assert "test" not in request.headers
        assert request.headers["Content-Type"] == "application/json"

    def test_none_values_dropped(self):
        """Test headers with None values are not sent."""
        request = make_builder().build("GET", "/test", headers={"X-Empty": None})
        assert "X-Empty" not in request.headers


class TestRequestValidation:
    """Test malformed input."""

    @pytest.mark.parametrize("method", ["GET", "HEAD", "POST", "PUT", "PATCH", "DELETE"])
    def test_supported_methods(self, method):
        """Test every supported method."""
        assert make_builder().build(method, "/test").method == method

    def test_lowercase_method(self):
        """Test method is upper-cased."""
        assert make_builder().build("post", "/test").method == "POST"

    @pytest.mark.parametrize("method", ["OPTIONS", "TRACE", "", None])
    def test_unsupported_method(self, method):
        """Test unsupported method raises InvalidRequest."""
        with pytest.raises(InvalidRequest):
            make_builder().build(method, "/test")

    def test_non_string_endpoint(self):
        """Test endpoint must be a string."""
        with pytest.raises(InvalidRequest):
            make_builder().build("GET", None)

    def test_missing_integration_id(self):
        """Test integration id is required."""
        with pytest.raises(InvalidRequest):
            make_builder(integration_id="").build("GET", "/test")

    def test_body_and_query_kept(self):
        """Test body and query carried on the request."""
        request = make_builder().build(
            "POST",
            "/test",
            body={"body": "data"},
            query={"q": "dolly"},
        )
        assert request.body == {"body": "data"}
        assert request.query == {"q": "dolly"}

    @pytest.mark.parametrize(
        "headers",
        [
            {"X-Name": "café ☕"},
            {"X-Café": "value"},
            {"X-Injected": "value\r\nX-Evil: 1"},
            {1: "value"},
            {"": "value"},
        ],
    )
    def test_unencodable_headers(self, headers):
        """Test headers that cannot go on the wire raise InvalidRequest."""
        with pytest.raises(InvalidRequest):
            make_builder().build("GET", "/test", headers=headers)

    def test_latin1_header_value(self):
        """Test Latin-1 header values are accepted."""
        request = make_builder().build("GET", "/test", headers={"X-Name": "café"})
        assert request.headers["X-Name"] == "café"
