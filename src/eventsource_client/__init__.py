"""Server-Sent Events client with automatic reconnection."""

from eventsource_client.config import EventSourceConfig
from eventsource_client.emitter import CallbackEmitter, CallbackKind
from eventsource_client.errors import (
    ConfigurationError,
    EventSourceError,
    InvalidFieldError,
    MalformedEventError,
    ParseError,
    ResponseStatusError,
)
from eventsource_client.eventsource import EventSource
from eventsource_client.parser import SessionState, iter_blocks, iter_lines, parse_block
from eventsource_client.types import NO_ID, Event, ReadyState

__all__ = [
    "NO_ID",
    "CallbackEmitter",
    "CallbackKind",
    "ConfigurationError",
    "Event",
    "EventSource",
    "EventSourceConfig",
    "EventSourceError",
    "InvalidFieldError",
    "MalformedEventError",
    "ParseError",
    "ReadyState",
    "ResponseStatusError",
    "SessionState",
    "iter_blocks",
    "iter_lines",
    "parse_block",
]
