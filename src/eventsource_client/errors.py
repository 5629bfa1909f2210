"""Error hierarchy for the EventSource client.

None of these escape the connection loop: they are raised at the point of
failure and converted into error callbacks by the loop or the parser.
"""

from __future__ import annotations

import httpx


class EventSourceError(Exception):
    """Base error for all EventSource errors."""

    def __init__(self, message: str, *, cause: Exception | None = None):
        super().__init__(message)
        self.cause = cause


# --- Parse errors (from the event stream) ---


class ParseError(EventSourceError):
    """A problem found while parsing an event block."""

    def __init__(self, reason: str, raw: str):
        super().__init__(reason)
        self.reason = reason
        self.raw = raw


class MalformedEventError(ParseError):
    """The whole block is unusable and must be dropped."""


class InvalidFieldError(ParseError):
    """A single field is unusable; the rest of the block still counts."""


# --- Connection errors ---


class ResponseStatusError(EventSourceError):
    """The server answered with a non-success status code."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int,
        reason_phrase: str = "",
        url: str | None = None,
    ):
        super().__init__(message)
        self.status_code = status_code
        self.reason_phrase = reason_phrase
        self.url = url

    @property
    def description(self) -> str:
        return f"Response code: {self.status_code} {self.reason_phrase}".rstrip()


class ConfigurationError(EventSourceError):
    """Invalid client configuration."""


# --- Factory ---


def error_from_response(response: httpx.Response) -> ResponseStatusError:
    """Create a ResponseStatusError describing an unsuccessful response."""
    return ResponseStatusError(
        "Error connecting to server",
        status_code=response.status_code,
        reason_phrase=response.reason_phrase,
        url=str(response.url),
    )
