"""Client configuration."""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass

import httpx

from eventsource_client.errors import ConfigurationError
from eventsource_client.parser import DEFAULT_RECONNECT_DELAY_MS


@dataclass
class EventSourceConfig:
    """Tunables for an EventSource.

    ``reconnect_delay_ms`` is only the initial delay: a ``retry`` field in
    the stream replaces it for the lifetime of the client.
    """

    reconnect_delay_ms: int = DEFAULT_RECONNECT_DELAY_MS
    connect_timeout: float | None = 30.0
    max_redirect_follows: int = 10

    def __post_init__(self) -> None:
        if self.reconnect_delay_ms < 0:
            raise ConfigurationError(
                f"reconnect_delay_ms must be >= 0, got {self.reconnect_delay_ms}"
            )
        if self.connect_timeout is not None and self.connect_timeout <= 0:
            raise ConfigurationError(
                f"connect_timeout must be positive or None, got {self.connect_timeout}"
            )
        if self.max_redirect_follows < 0:
            raise ConfigurationError(
                f"max_redirect_follows must be >= 0, got {self.max_redirect_follows}"
            )

    @classmethod
    def from_env(cls, *, environ: Mapping[str, str] | None = None) -> EventSourceConfig:
        """Build a config from EVENTSOURCE_* environment variables."""
        env = os.environ if environ is None else environ
        kwargs: dict[str, object] = {}

        delay = env.get("EVENTSOURCE_RECONNECT_DELAY_MS")
        if delay:
            kwargs["reconnect_delay_ms"] = _int_from_env("EVENTSOURCE_RECONNECT_DELAY_MS", delay)

        timeout = env.get("EVENTSOURCE_CONNECT_TIMEOUT")
        if timeout is not None:
            if timeout.strip().lower() in ("", "none"):
                kwargs["connect_timeout"] = None
            else:
                try:
                    kwargs["connect_timeout"] = float(timeout)
                except ValueError as e:
                    raise ConfigurationError(
                        f"EVENTSOURCE_CONNECT_TIMEOUT is not a number: {timeout!r}", cause=e
                    ) from e

        redirects = env.get("EVENTSOURCE_MAX_REDIRECT_FOLLOWS")
        if redirects:
            kwargs["max_redirect_follows"] = _int_from_env(
                "EVENTSOURCE_MAX_REDIRECT_FOLLOWS", redirects
            )

        return cls(**kwargs)  # type: ignore[arg-type]

    def timeout(self) -> httpx.Timeout:
        """Timeout for the streamed request; reads never time out."""
        return httpx.Timeout(
            connect=self.connect_timeout,
            read=None,
            write=self.connect_timeout,
            pool=self.connect_timeout,
        )


def _int_from_env(name: str, value: str) -> int:
    try:
        return int(value)
    except ValueError as e:
        raise ConfigurationError(f"{name} is not an integer: {value!r}", cause=e) from e
