"""Parser for text/event-stream bodies.

Framing and field parsing are split:

- ``iter_blocks`` groups raw lines into blocks terminated by a blank line.
- ``parse_block`` turns one block into an ``Event``, updating the session
  state (``last_event_id``, ``reconnect_delay_ms``) as fields are read.

Errors come in two tiers. A line without a colon or a non-integer ``id``
drops the whole block. A non-integer ``retry`` or an unknown field is
reported and parsing continues.

Multiple ``data`` fields are concatenated with no separator.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import AsyncIterator, Callable

from eventsource_client.errors import InvalidFieldError, MalformedEventError
from eventsource_client.types import DEFAULT_EVENT_NAME, NO_ID, Event

DEFAULT_RECONNECT_DELAY_MS = 5000

ErrorCallback = Callable[[str, str], None]

_LINE_BREAK = re.compile(r"\r\n|\r|\n")
_INTEGER = re.compile(r"[+-]?[0-9]+")


@dataclass
class SessionState:
    """Per-client state that survives reconnects."""

    last_event_id: int = NO_ID
    reconnect_delay_ms: int = DEFAULT_RECONNECT_DELAY_MS


async def iter_lines(chunks: AsyncIterator[str]) -> AsyncIterator[str]:
    """Split decoded text chunks into lines.

    Only ``\\n``, ``\\r\\n`` and a lone ``\\r`` end a line; other Unicode line
    separators are ordinary characters. A ``\\r`` at the end of a chunk is
    held back in case the next chunk starts with ``\\n``.
    """
    pending = ""

    async for chunk in chunks:
        pending += chunk
        held_cr = pending.endswith("\r")
        if held_cr:
            pending = pending[:-1]

        *lines, pending = _LINE_BREAK.split(pending)
        for line in lines:
            yield line

        if held_cr:
            pending += "\r"

    if pending.endswith("\r"):
        yield pending[:-1]
    elif pending:
        yield pending


async def iter_blocks(lines: AsyncIterator[str]) -> AsyncIterator[str]:
    """Group stream lines into event blocks.

    Yields each block without its trailing newline. Blank lines seen while
    no block is pending are skipped. A block still pending when the stream
    ends is discarded.
    """
    buffer: list[str] = []

    async for line in lines:
        line = line.rstrip("\r\n")

        if not line:
            if buffer:
                yield "\n".join(buffer)
                buffer = []
            continue

        buffer.append(line)


def _parse_int(value: str) -> int | None:
    if not _INTEGER.fullmatch(value):
        return None
    return int(value)


@dataclass
class _EventBuilder:
    id: int = NO_ID
    name: str = DEFAULT_EVENT_NAME
    data: str = ""

    def build(self) -> Event:
        return Event(id=self.id, name=self.name, data=self.data)


def _apply_line(line: str, block: str, builder: _EventBuilder, session: SessionState) -> None:
    field, sep, value = line.partition(":")
    if not sep:
        raise MalformedEventError("Invalid event: line has no field prefix", block)
    value = value.strip()

    if field == "id":
        event_id = _parse_int(value)
        if event_id is None:
            raise MalformedEventError("Invalid event: ID field is not an integer", block)
        builder.id = event_id
        # Advances the resume point even if the block is later dropped.
        session.last_event_id = event_id
    elif field == "event":
        builder.name = value
    elif field == "retry":
        delay = _parse_int(value)
        if delay is None:
            raise InvalidFieldError("Invalid retry value in event", line)
        session.reconnect_delay_ms = delay
    elif field == "data":
        builder.data += value
    else:
        raise InvalidFieldError("Invalid field in event", line)


def parse_block(
    block: str,
    session: SessionState,
    on_error: ErrorCallback,
) -> Event | None:
    """Parse one event block.

    Returns the assembled Event, or None if the block was dropped. Every
    problem found is reported through ``on_error(reason, raw)``.
    """
    builder = _EventBuilder()

    for line in block.strip().split("\n"):
        try:
            _apply_line(line, block, builder, session)
        except MalformedEventError as e:
            on_error(e.reason, e.raw)
            return None
        except InvalidFieldError as e:
            on_error(e.reason, e.raw)

    return builder.build()
