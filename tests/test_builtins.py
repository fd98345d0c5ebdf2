"""Built-in middleware and stub adapter tests."""

import logging

import pytest

from roadchain_core.adapters.stub import StubAdapter, Stubs
from roadchain_core.context import RequestContext
from roadchain_core.errors import ClientError, ConfigurationError, ServerError, StubNotFoundError
from roadchain_core.middleware.chain import MiddlewareChain
from roadchain_core.middleware.logging import LoggingMiddleware
from roadchain_core.middleware.raise_error import RaiseErrorMiddleware
from roadchain_core.middleware.transform import HeaderMiddleware


@pytest.fixture
def stubs():
    stubs = Stubs()
    stubs.get("/success", (200, {"Content-Type": "text/plain", "Server": "stub"}, "ok"))
    stubs.get("/missing", (404, {}, "not found"))
    stubs.get("/broken", (503, {}, "down"))
    stubs.post("/echo", lambda ctx: (201, {}, ctx.request_body))
    return stubs


@pytest.fixture
def adapter(stubs):
    return StubAdapter(stubs)


class TestStubAdapter:
    """Test the stub terminal handler."""

    def test_stubbed_response(self, adapter):
        """Test a matching stub finishes the context."""
        context = adapter.process(RequestContext("GET", "http://example.com/success"))

        assert context.status == 200
        assert context.is_success
        assert context.text() == "ok"
        assert context.get_header("content-type", response=True) == "text/plain"

    def test_callable_stub(self, adapter):
        """Test callable stubs see the request."""
        context = RequestContext("POST", "/echo", request_body=b"payload")
        assert adapter.process(context).response_body == b"payload"

    def test_unmatched_request(self, adapter):
        """Test unmatched requests raise."""
        with pytest.raises(StubNotFoundError):
            adapter.process(RequestContext("GET", "/elsewhere"))

    def test_unused_stubs(self, adapter, stubs):
        """Test unused stubs are reported."""
        adapter.process(RequestContext("GET", "/success"))
        assert len(stubs.unused()) == 3


class TestRaiseErrorMiddleware:
    """Test status-to-exception middleware."""

    def test_success_passes(self, adapter):
        """Test 2xx responses pass through."""
        context = RaiseErrorMiddleware(adapter).process(RequestContext("GET", "/success"))
        assert context.status == 200

    def test_client_error(self, adapter):
        """Test 4xx raises ClientError with the request attached."""
        with pytest.raises(ClientError) as exc_info:
            RaiseErrorMiddleware(adapter).process(RequestContext("GET", "/missing"))

        assert exc_info.value.status == 404
        assert exc_info.value.response["request"]["method"] == "GET"

    def test_server_error(self, adapter):
        """Test 5xx raises ServerError."""
        with pytest.raises(ServerError):
            RaiseErrorMiddleware(adapter).process(RequestContext("GET", "/broken"))

    def test_include_request_default_override(self, adapter):
        """Test a type-level override drops the request from errors."""
        RaiseErrorMiddleware.set_default_options(include_request=False)

        with pytest.raises(ClientError) as exc_info:
            RaiseErrorMiddleware(adapter).process(RequestContext("GET", "/missing"))

        assert "request" not in exc_info.value.response

    def test_allowed_statuses(self, adapter):
        """Test allowed statuses do not raise."""
        mw = RaiseErrorMiddleware(adapter, {"allowed_statuses": (404,)})
        assert mw.process(RequestContext("GET", "/missing")).status == 404

    def test_unknown_default_rejected(self):
        """Test the schema rejects unknown keys."""
        with pytest.raises(ConfigurationError):
            RaiseErrorMiddleware.set_default_options(include_response=False)

    def test_outer_error_hook_sees_raised_error(self, adapter):
        """Test errors raised by an inner post-hook reach outer error hooks."""
        records = []

        class Outer(LoggingMiddleware):
            def on_error(self, error):
                records.append(error)

        app = MiddlewareChain().use(Outer).use(RaiseErrorMiddleware).build(adapter)

        with pytest.raises(ClientError):
            app.process(RequestContext("GET", "/missing"))
        assert len(records) == 1
        assert isinstance(records[0], ClientError)


class TestHeaderMiddleware:
    """Test header manipulation."""

    def test_request_headers(self, adapter):
        """Test request headers are added and removed."""
        mw = HeaderMiddleware(adapter, {
            "add_request_headers": {"X-Api-Version": "2"},
            "remove_request_headers": ["cookie"],
        })

        context = RequestContext("GET", "/success", request_headers={"Cookie": "a=b"})
        mw.process(context)

        assert context.request_headers == {"X-Api-Version": "2"}

    def test_response_headers(self, adapter):
        """Test response headers are added and removed."""
        mw = HeaderMiddleware(adapter, {
            "add_response_headers": {"X-Frame-Options": "DENY"},
            "remove_response_headers": ["Server"],
        })

        context = mw.process(RequestContext("GET", "/success"))

        assert context.response_headers == {
            "Content-Type": "text/plain",
            "X-Frame-Options": "DENY",
        }

    def test_default_override(self, adapter):
        """Test type-level defaults apply to new instances."""
        HeaderMiddleware.set_default_options(add_request_headers={"User-Agent": "roadchain"})

        context = HeaderMiddleware(adapter).process(RequestContext("GET", "/success"))

        assert context.get_header("user-agent") == "roadchain"

    def test_logs_header_edits(self, adapter, caplog):
        """Test header edits are logged at debug level."""
        mw = HeaderMiddleware(adapter, {"add_request_headers": {"X-Api-Version": "2"}})

        with caplog.at_level(logging.DEBUG, logger="roadchain_core.middleware.transform"):
            mw.process(RequestContext("GET", "/success"))

        messages = [r.getMessage() for r in caplog.records]
        assert messages == ["request headers: removed=[] added=['X-Api-Version']"]


class TestLoggingMiddleware:
    """Test request/response logging."""

    def test_logs_request_and_response(self, adapter, caplog):
        """Test both directions are logged with timing in metadata."""
        with caplog.at_level(logging.INFO, logger="roadchain_core.middleware.logging"):
            context = LoggingMiddleware(adapter).process(
                RequestContext("GET", "http://example.com/success")
            )

        messages = [r.getMessage() for r in caplog.records]
        assert len(messages) == 2
        assert "--> GET http://example.com/success" in messages[0]
        assert "<-- 200" in messages[1]
        assert "_start_time" in context.metadata

    def test_skip_paths(self, adapter, caplog):
        """Test skipped paths are not logged."""
        with caplog.at_level(logging.INFO, logger="roadchain_core.middleware.logging"):
            LoggingMiddleware(adapter, {"skip_paths": ["/success"]}).process(
                RequestContext("GET", "/success")
            )

        assert caplog.records == []

    def test_string_skip_path_matches_whole_path(self, adapter, caplog):
        """Test a single string skip path is not a substring match."""
        adapter.stubs.get("/", (200, {}, "root"))
        mw = LoggingMiddleware(adapter, {"skip_paths": "/success"})

        with caplog.at_level(logging.INFO, logger="roadchain_core.middleware.logging"):
            mw.process(RequestContext("GET", "/success"))
            mw.process(RequestContext("GET", "/"))

        messages = [r.getMessage() for r in caplog.records]
        assert len(messages) == 2
        assert "--> GET /" in messages[0]

    def test_logs_errors(self, adapter, caplog):
        """Test downstream failures are logged and re-raised."""
        with caplog.at_level(logging.INFO, logger="roadchain_core.middleware.logging"):
            with pytest.raises(StubNotFoundError):
                LoggingMiddleware(adapter).process(RequestContext("GET", "/nowhere"))

        assert caplog.records[-1].levelno == logging.ERROR
        assert "StubNotFoundError" in caplog.records[-1].getMessage()

    def test_headers_and_body(self, adapter, caplog):
        """Test optional header and body logging."""
        mw = LoggingMiddleware(adapter, {"log_headers": True, "log_body": True, "max_body_size": 4})

        with caplog.at_level(logging.INFO, logger="roadchain_core.middleware.logging"):
            mw.process(RequestContext("POST", "/echo", {"X-Id": "1"}, b"abcdefgh"))

        assert "X-Id" in caplog.records[0].getMessage()
        assert "abcd..." in caplog.records[0].getMessage()


class TestRequestContext:
    """Test the request context."""

    def test_path_and_query(self):
        """Test URL parsing helpers."""
        context = RequestContext("get", "https://example.com/api/users?page=2")

        assert context.method == "GET"
        assert context.path == "/api/users"
        assert context.query == {"page": ["2"]}
        assert context.is_finished is False

    def test_set_header_replaces_case_insensitively(self):
        """Test header replacement ignores case."""
        context = RequestContext("GET", "/", request_headers={"content-type": "text/html"})
        context.set_header("Content-Type", "application/json")

        assert context.request_headers == {"Content-Type": "application/json"}

    def test_json_body(self):
        """Test JSON response parsing."""
        context = RequestContext("GET", "/").finish(200, {}, b'{"message": "success"}')
        assert context.json() == {"message": "success"}
