"""Core value types: Event and ReadyState."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

NO_ID = -1
DEFAULT_EVENT_NAME = "message"


class ReadyState(Enum):
    """Lifecycle phase of an EventSource connection."""

    CONNECTING = 0
    OPEN = 1
    CLOSED = 2


@dataclass(frozen=True)
class Event:
    """A single event dispatched from the stream."""

    id: int = NO_ID
    name: str = DEFAULT_EVENT_NAME
    data: str = ""

    @property
    def has_id(self) -> bool:
        return self.id != NO_ID

    def __str__(self) -> str:
        return f"Event: {self.name}\n\tID: {self.id}\n\tData: {self.data}"
