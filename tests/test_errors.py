"""Tests for the error hierarchy."""

import httpx

from eventsource_client.errors import (
    EventSourceError,
    InvalidFieldError,
    MalformedEventError,
    ParseError,
    ResponseStatusError,
    error_from_response,
)


class TestHierarchy:
    def test_parse_errors(self):
        assert issubclass(MalformedEventError, ParseError)
        assert issubclass(InvalidFieldError, ParseError)
        assert issubclass(ParseError, EventSourceError)

    def test_parse_error_carries_reason_and_raw(self):
        err = MalformedEventError("bad block", "id:x")
        assert err.reason == "bad block"
        assert err.raw == "id:x"
        assert str(err) == "bad block"

    def test_cause(self):
        cause = ValueError("inner")
        err = EventSourceError("outer", cause=cause)
        assert err.cause is cause


class TestErrorFromResponse:
    def test_status_and_reason_phrase(self):
        request = httpx.Request("GET", "http://example.com/events")
        response = httpx.Response(500, request=request)

        err = error_from_response(response)

        assert isinstance(err, ResponseStatusError)
        assert err.status_code == 500
        assert err.reason_phrase == "Internal Server Error"
        assert err.url == "http://example.com/events"
        assert str(err) == "Error connecting to server"
        assert err.description == "Response code: 500 Internal Server Error"

    def test_unknown_status_has_no_trailing_space(self):
        request = httpx.Request("GET", "http://example.com/events")
        response = httpx.Response(599, request=request)

        assert error_from_response(response).description == "Response code: 599"
