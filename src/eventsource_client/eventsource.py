"""EventSource: a reconnecting Server-Sent Events client."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Mapping
from types import MappingProxyType
from typing import AsyncIterator, Callable

import httpx

from eventsource_client.config import EventSourceConfig
from eventsource_client.emitter import CallbackEmitter, CallbackKind
from eventsource_client.errors import error_from_response
from eventsource_client.parser import SessionState, iter_blocks, iter_lines, parse_block
from eventsource_client.types import NO_ID, Event, ReadyState

logger = logging.getLogger(__name__)

_REDIRECT_STATUSES = (401, 403)


class EventSource:
    """Consumes a text/event-stream endpoint, reconnecting until cancelled.

    The connection loop runs as a single asyncio task created by ``start()``.
    Callbacks are invoked synchronously from that task, so they should not
    block.

    Cancellation is driven by an ``asyncio.Event``. If one is passed in, the
    caller owns it and ``close()`` does nothing; otherwise the EventSource
    creates its own and ``close()`` sets it.
    """

    def __init__(
        self,
        url: str | httpx.URL,
        cancel_event: asyncio.Event | None = None,
        *,
        headers: Mapping[str, str] | None = None,
        http_client: httpx.AsyncClient | None = None,
        config: EventSourceConfig | None = None,
    ):
        self._url = str(url)
        self._current_url = httpx.URL(url)
        self._headers: dict[str, str] = dict(headers or {})
        self._request_headers: Mapping[str, str] | None = None
        self._config = config or EventSourceConfig()
        self._session = SessionState(reconnect_delay_ms=self._config.reconnect_delay_ms)

        self._owns_cancel_event = cancel_event is None
        self._cancel_event = cancel_event if cancel_event is not None else asyncio.Event()

        self._owns_client = http_client is None
        self._client = http_client

        self._emitter = CallbackEmitter()
        self._state = ReadyState.CLOSED
        self._task: asyncio.Task[None] | None = None
        self._watcher: asyncio.Task[None] | None = None

    # --- Observable state ---

    @property
    def ready_state(self) -> ReadyState:
        return self._state

    @property
    def url(self) -> str:
        """The URL this EventSource was created with."""
        return self._url

    @property
    def current_url(self) -> httpx.URL:
        """The URL the next connection attempt will target."""
        return self._current_url

    @property
    def headers(self) -> Mapping[str, str]:
        """Extra request headers. Mutable until ``start()``, read-only after."""
        if self._request_headers is not None:
            return self._request_headers
        return self._headers

    @property
    def last_event_id(self) -> int:
        return self._session.last_event_id

    @property
    def reconnect_delay_ms(self) -> int:
        return self._session.reconnect_delay_ms

    # --- Callback registration ---

    def subscribe(self, kind: CallbackKind, callback: Callable[..., None]) -> None:
        self._emitter.subscribe(kind, callback)

    def unsubscribe(self, kind: CallbackKind, callback: Callable[..., None]) -> None:
        self._emitter.unsubscribe(kind, callback)

    def on_open(self, callback: Callable[[], None]) -> Callable[[], None]:
        self._emitter.subscribe(CallbackKind.OPEN, callback)
        return callback

    def on_state_changed(
        self, callback: Callable[[ReadyState], None]
    ) -> Callable[[ReadyState], None]:
        self._emitter.subscribe(CallbackKind.STATE_CHANGED, callback)
        return callback

    def on_error(self, callback: Callable[[str, str], None]) -> Callable[[str, str], None]:
        self._emitter.subscribe(CallbackKind.ERROR, callback)
        return callback

    def on_message(self, callback: Callable[[Event], None]) -> Callable[[Event], None]:
        self._emitter.subscribe(CallbackKind.MESSAGE, callback)
        return callback

    # --- Lifecycle ---

    def start(self) -> asyncio.Task[None]:
        """Start the connection loop and return its task.

        Must be called from a running event loop. An EventSource runs once:
        later calls log a warning and return the existing task.
        """
        if self._task is not None:
            logger.warning("EventSource for %s already started; ignoring start()", self._url)
            return self._task

        self._request_headers = MappingProxyType(dict(self._headers))
        self._task = asyncio.create_task(self._run(), name=f"eventsource:{self._url}")
        self._watcher = asyncio.create_task(self._watch_cancel(self._task))
        return self._task

    def close(self) -> None:
        """Request shutdown. Does nothing if the cancel event was supplied."""
        if not self._owns_cancel_event:
            logger.debug("close() ignored for %s: cancel event is caller-owned", self._url)
            return
        self._cancel_event.set()

    async def wait_closed(self) -> None:
        """Wait for the connection loop to finish."""
        if self._task is not None:
            await self._task

    # --- Connection loop ---

    async def _watch_cancel(self, task: asyncio.Task[None]) -> None:
        await self._cancel_event.wait()
        task.cancel()

    async def _run(self) -> None:
        client = self._client or httpx.AsyncClient(
            timeout=self._config.timeout(), follow_redirects=True
        )
        redirects_followed = 0
        try:
            while not self._cancel_event.is_set():
                can_follow = redirects_followed < self._config.max_redirect_follows
                if await self._attempt(client, can_follow_redirect=can_follow):
                    redirects_followed += 1
                    continue
                redirects_followed = 0

                if self._cancel_event.is_set():
                    break
                delay_ms = self._session.reconnect_delay_ms
                logger.debug("Reconnecting to %s in %d ms", self._current_url, delay_ms)
                await asyncio.sleep(max(delay_ms, 0) / 1000)
        except asyncio.CancelledError:
            if not self._cancel_event.is_set():
                raise
        finally:
            if self._watcher is not None:
                self._watcher.cancel()
            if self._owns_client:
                await client.aclose()
            self._set_state(ReadyState.CLOSED)
            logger.info("EventSource for %s closed", self._url)

    async def _attempt(self, client: httpx.AsyncClient, *, can_follow_redirect: bool) -> bool:
        """Run one connection attempt.

        Returns True when the attempt was redirected and should be retried
        immediately, False when the caller should wait before reconnecting.
        """
        try:
            self._set_state(ReadyState.CONNECTING)
            headers = self._build_request_headers()
            logger.debug(
                "Connecting to %s (Last-Event-ID=%s)",
                self._current_url,
                headers.get("Last-Event-ID"),
            )
            async with client.stream(
                "GET",
                self._current_url,
                headers=headers,
                timeout=self._config.timeout(),
                follow_redirects=True,
            ) as response:
                if not response.is_success:
                    return self._handle_status(response, can_follow_redirect)

                self._set_state(ReadyState.OPEN)
                logger.info("EventSource connected to %s", response.url)
                self._emitter.emit(CallbackKind.OPEN)
                await self._consume(response)
        except (httpx.TransportError, httpx.StreamError) as e:
            self._emit_error("Connection failure", str(e) or type(e).__name__)
        except Exception:
            logger.warning("Connection attempt to %s failed", self._current_url, exc_info=True)
        return False

    def _handle_status(self, response: httpx.Response, can_follow_redirect: bool) -> bool:
        if (
            can_follow_redirect
            and response.status_code in _REDIRECT_STATUSES
            and response.url != self._current_url
        ):
            logger.info("Redirected from %s to %s", self._current_url, response.url)
            self._current_url = response.url
            return True

        error = error_from_response(response)
        self._emit_error(str(error), error.description)
        return False

    def _build_request_headers(self) -> httpx.Headers:
        headers = httpx.Headers(self.headers)
        headers["Accept"] = "text/event-stream"
        if self._session.last_event_id != NO_ID:
            headers["Last-Event-ID"] = str(self._session.last_event_id)
        return headers

    async def _consume(self, response: httpx.Response) -> None:
        async for block in iter_blocks(self._lines(response)):
            event = parse_block(block, self._session, self._emit_error)
            if event is None:
                continue
            logger.debug("Received %r event (id=%d)", event.name, event.id)
            self._emitter.emit(CallbackKind.MESSAGE, event)

    async def _lines(self, response: httpx.Response) -> AsyncIterator[str]:
        async for line in iter_lines(response.aiter_text()):
            if self._cancel_event.is_set():
                return
            yield line

    # --- Emission helpers ---

    def _set_state(self, state: ReadyState) -> None:
        if state is self._state:
            return
        self._state = state
        self._emitter.emit(CallbackKind.STATE_CHANGED, state)

    def _emit_error(self, reason: str, raw: str) -> None:
        logger.debug("EventSource error: %s (%s)", reason, raw)
        self._emitter.emit(CallbackKind.ERROR, reason, raw)
