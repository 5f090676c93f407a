"""
Streaming client for Horizon collection endpoints.

A StreamItem owns one connection at a time. A single pump task reads the
event stream, decodes frames and queues StreamEvents; `events()` hands them
to the caller one by one. Dropped connections are reopened from the last
seen cursor until `close()` is called.
"""

import asyncio
import inspect
import logging
import threading
from dataclasses import dataclass
from enum import Enum
from typing import Any, AsyncIterator, Awaitable, Callable

from yarl import URL

from horizon_client import config
from horizon_client.core.exceptions import (
    DecodeError,
    HorizonError,
    HttpStatusError,
    TransportError,
    capture_unexpected,
)
from horizon_client.core.transport import SUCCESS_STATUSES, Transport
from horizon_client.core.url import with_cursor
from horizon_client.decoder import ResourceFamily, decode

from .sse import SSEFrame, SSEParser

logger = logging.getLogger(__name__)

NOW = "now"

# events decoded ahead of the consumer; the connection is read no further until it catches up
MAX_PENDING_EVENTS = 100


class StreamState(str, Enum):
    IDLE = "idle"
    CONNECTING = "connecting"
    OPEN = "open"
    RECEIVING = "receiving"
    RECONNECTING = "reconnecting"
    CLOSED = "closed"


class StreamEventKind(str, Enum):
    OPEN = "open"
    RESOURCE = "resource"
    ERROR = "error"


@dataclass(frozen=True)
class StreamEvent:
    kind: StreamEventKind
    resource: Any = None
    error: HorizonError | None = None
    event_id: str | None = None

    @classmethod
    def opened(cls) -> "StreamEvent":
        return cls(StreamEventKind.OPEN)

    @classmethod
    def received(cls, resource: Any, event_id: str | None) -> "StreamEvent":
        return cls(StreamEventKind.RESOURCE, resource=resource, event_id=event_id)

    @classmethod
    def failed(cls, error: HorizonError, event_id: str | None = None) -> "StreamEvent":
        return cls(StreamEventKind.ERROR, error=error, event_id=event_id)


def is_fatal_status(status: int) -> bool:
    """Client errors will not go away by reconnecting, except rate limiting."""
    return 400 <= status < 500 and status != 429


_END = object()


class StreamItem:
    def __init__(
        self,
        transport: Transport,
        url: str,
        family: ResourceFamily,
        cursor: str | None = None,
        retry_ms: int | None = None,
        strict: bool = False,
    ) -> None:
        self.transport = transport
        self.url = url
        self.family = ResourceFamily(family)
        self.cursor = cursor or URL(url).query.get("cursor") or NOW
        self.retry_ms = retry_ms if retry_ms is not None else config.STREAM_RETRY_MS
        self.strict = strict
        self.state = StreamState.IDLE
        self._closed = False
        self._queue: asyncio.Queue | None = None
        self._pump: asyncio.Task | None = None
        self._loop: asyncio.AbstractEventLoop | None = None
        self._pump_error: BaseException | None = None
        self._thread: int | None = None

    @property
    def closed(self) -> bool:
        return self._closed

    def request_url(self) -> str:
        return with_cursor(self.url, self.cursor)

    def _headers(self) -> dict[str, str]:
        if self.cursor == NOW:
            return {}
        return {"Last-Event-ID": self.cursor}

    async def events(self) -> AsyncIterator[StreamEvent]:
        """Open the stream and yield its events in arrival order.

        Can be consumed once. Breaking out of the loop does not release the
        connection: call `aclose()`, or use the stream as an async context
        manager (`async with StreamItem(...) as stream`).
        """
        if self._pump is not None:
            raise RuntimeError("stream is already being consumed")
        if self._closed:
            return
        self._loop = asyncio.get_running_loop()
        self._thread = threading.get_ident()
        self._queue = asyncio.Queue(maxsize=MAX_PENDING_EVENTS)
        self._pump = asyncio.create_task(self._run(), name=f"horizon-stream {self.url}")
        try:
            while not self._closed:
                event = await self._queue.get()
                if event is _END or self._closed:
                    break
                yield event
            if self._pump_error is not None:
                raise self._pump_error
        finally:
            self.close()

    def on_receive(
        self, callback: Callable[[StreamEvent], Awaitable[None] | None]
    ) -> asyncio.Task:
        """Deliver every event to `callback`, sequentially, from a background task.

        The task ends when the stream is closed; an exception raised by the
        callback closes the stream and is stored on the task.
        """

        async def consume():
            try:
                async for event in self.events():
                    result = callback(event)
                    if inspect.isawaitable(result):
                        await result
            finally:
                self.close()

        return asyncio.create_task(consume())

    def close(self) -> None:
        """Stop the stream. No event is delivered once this returns."""
        if self._closed:
            return
        self._closed = True
        self.state = StreamState.CLOSED
        logger.info(f"Closing stream {self.url} at cursor {self.cursor}")
        if self._pump is None or self._loop is None:
            return
        if self._loop.is_closed():
            return
        if threading.get_ident() == self._thread:
            self._stop_pump()
        else:
            self._loop.call_soon_threadsafe(self._stop_pump)

    async def aclose(self) -> None:
        """Close and wait for the connection to be released."""
        self.close()
        if self._pump is not None and self._pump is not asyncio.current_task():
            await asyncio.gather(self._pump, return_exceptions=True)

    async def __aenter__(self) -> "StreamItem":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    def _stop_pump(self) -> None:
        if self._pump is not None and self._pump is not asyncio.current_task():
            self._pump.cancel()
        if self._queue is not None:
            # drop pending events, making room for the sentinel
            while not self._queue.empty():
                self._queue.get_nowait()
            self._queue.put_nowait(_END)

    async def _emit(self, event: StreamEvent) -> None:
        if not self._closed and self._queue is not None:
            await self._queue.put(event)

    async def _run(self) -> None:
        try:
            await self._connect_loop()
        except asyncio.CancelledError:
            raise
        except Exception as e:
            logger.exception(f"Stream {self.url} stopped unexpectedly")
            capture_unexpected(e, url=self.url, cursor=self.cursor)
            self._pump_error = e
        finally:
            # on close the sentinel is queued by _stop_pump
            if self._queue is not None and not self._closed:
                await self._queue.put(_END)

    async def _connect_loop(self) -> None:
        first = True
        while not self._closed:
            self.state = StreamState.CONNECTING if first else StreamState.RECONNECTING
            first = False
            url = self.request_url()
            logger.info(f"Connecting to stream {url}")
            try:
                async with self.transport.open_stream(url, headers=self._headers()) as connection:
                    if self._closed:
                        return
                    if connection.status == 204:
                        logger.info(f"Stream {url} ended by server")
                        self.state = StreamState.CLOSED
                        return
                    if connection.status not in SUCCESS_STATUSES:
                        error = HttpStatusError(connection.status, connection.body, url)
                        await self._emit(StreamEvent.failed(error))
                        if is_fatal_status(connection.status):
                            logger.warning(f"Stream {url} refused: {error}")
                            self.state = StreamState.CLOSED
                            return
                    else:
                        await self._receive(connection.chunks)
                        logger.info(f"Stream {url} disconnected, reconnecting")
            except TransportError as e:
                logger.warning(f"Stream {url} connection failed: {e}")
                await self._emit(StreamEvent.failed(e))
            if not self._closed:
                self.state = StreamState.RECONNECTING
                await asyncio.sleep(self.retry_ms / 1000)

    async def _receive(self, chunks: AsyncIterator[bytes]) -> None:
        parser = SSEParser()
        opened = False
        async for chunk in chunks:
            for frame in parser.feed(chunk):
                if self._closed:
                    return
                for event in self._handle_frame(frame, opened):
                    if event.kind is StreamEventKind.OPEN:
                        opened = True
                        self.state = StreamState.OPEN
                    elif event.kind is StreamEventKind.RESOURCE:
                        self.state = StreamState.RECEIVING
                    await self._emit(event)

    def _handle_frame(self, frame: SSEFrame, opened: bool) -> list[StreamEvent]:
        if frame.retry is not None:
            self.retry_ms = frame.retry
        if frame.data is None:
            return []
        events = [] if opened else [StreamEvent.opened()]
        data = frame.data.strip()
        if not data.startswith("{"):
            # control payload such as "hello"
            return events
        if frame.id is not None and frame.id == self.cursor:
            return events
        try:
            resource = decode(data, self.family, strict=self.strict)
        except DecodeError as e:
            logger.warning(f"Could not decode frame {frame.id} of {self.url}: {e}")
            if frame.id is not None:
                self.cursor = frame.id
            events.append(StreamEvent.failed(e, event_id=frame.id))
            return events
        self.cursor = frame.id or resource.paging_token
        events.append(StreamEvent.received(resource, self.cursor))
        return events
