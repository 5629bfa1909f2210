"""Callback kinds and a multi-subscriber emitter."""

from __future__ import annotations

from enum import Enum
from typing import Any, Callable


class CallbackKind(Enum):
    OPEN = "open"
    STATE_CHANGED = "state_changed"
    ERROR = "error"
    MESSAGE = "message"


class CallbackEmitter:
    """Maps each CallbackKind to an ordered list of subscribers.

    Subscribers are called synchronously in registration order. Registering
    the same callable twice for one kind has no effect.
    """

    def __init__(self):
        self._subscribers: dict[CallbackKind, list[Callable[..., None]]] = {
            kind: [] for kind in CallbackKind
        }

    def subscribe(self, kind: CallbackKind, callback: Callable[..., None]) -> None:
        subscribers = self._subscribers[kind]
        if callback not in subscribers:
            subscribers.append(callback)

    def unsubscribe(self, kind: CallbackKind, callback: Callable[..., None]) -> None:
        subscribers = self._subscribers[kind]
        if callback in subscribers:
            subscribers.remove(callback)

    def subscribers(self, kind: CallbackKind) -> list[Callable[..., None]]:
        return list(self._subscribers[kind])

    def emit(self, kind: CallbackKind, *args: Any) -> None:
        for subscriber in list(self._subscribers[kind]):
            subscriber(*args)
