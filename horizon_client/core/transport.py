"""
Transport layer: one HTTP exchange, or one long-lived event-stream connection.

The rest of the client depends on the Transport protocol only, so tests and
callers may plug any implementation. AiohttpTransport is the default one.
"""

import asyncio
from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import AsyncContextManager, AsyncIterator, Protocol, runtime_checkable

import aiohttp

from horizon_client import config

from .exceptions import TransportError, handle_exception
from .version import get_client_version

SUCCESS_STATUSES = {200, 201, 202}


def default_headers() -> dict[str, str]:
    return {
        "X-Client-Name": config.CLIENT_NAME,
        "X-Client-Version": get_client_version(),
    }


@dataclass
class StreamConnection:
    """An open event-stream response: its status and its body, chunk by chunk."""

    status: int
    chunks: AsyncIterator[bytes]
    body: bytes = b""


@runtime_checkable
class Transport(Protocol):
    async def fetch(
        self,
        method: str,
        url: str,
        headers: dict[str, str] | None = None,
        body: bytes | None = None,
    ) -> tuple[int, bytes]:
        """Perform one request, returning the status code and the raw body.

        Raises:
            TransportError: when no HTTP answer could be obtained.
        """
        ...

    def open_stream(
        self, url: str, headers: dict[str, str] | None = None
    ) -> AsyncContextManager[StreamConnection]:
        """Open a long-lived GET whose body is consumed incrementally."""
        ...


class AiohttpTransport:
    """Transport backed by an aiohttp.ClientSession.

    The session is created lazily (it needs a running loop) unless one is
    given, in which case its lifetime is the caller's business.
    """

    def __init__(
        self,
        session: aiohttp.ClientSession | None = None,
        timeout: float | None = None,
        stream_read_timeout: float | None = None,
    ) -> None:
        self._session = session
        self._own_session = session is None
        self.timeout = timeout if timeout is not None else config.REQUEST_TIMEOUT
        self.stream_read_timeout = (
            stream_read_timeout if stream_read_timeout is not None else config.STREAM_READ_TIMEOUT
        )

    def _get_session(self) -> aiohttp.ClientSession:
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(headers=default_headers())
            self._own_session = True
        return self._session

    async def fetch(
        self,
        method: str,
        url: str,
        headers: dict[str, str] | None = None,
        body: bytes | None = None,
    ) -> tuple[int, bytes]:
        session = self._get_session()
        try:
            async with session.request(
                method,
                url,
                headers=headers,
                data=body,
                timeout=aiohttp.ClientTimeout(total=self.timeout),
            ) as res:
                return res.status, await res.read()
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            raise TransportError(url, e) from e

    @asynccontextmanager
    async def open_stream(self, url: str, headers: dict[str, str] | None = None):
        session = self._get_session()
        request_headers = {"Accept": "text/event-stream", "Cache-Control": "no-cache"}
        request_headers.update(headers or {})
        try:
            async with session.get(
                url,
                headers=request_headers,
                timeout=aiohttp.ClientTimeout(total=None, sock_read=self.stream_read_timeout),
            ) as res:
                body = b"" if res.status in SUCCESS_STATUSES else await res.read()
                yield StreamConnection(status=res.status, chunks=res.content.iter_any(), body=body)
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            raise TransportError(url, e) from e

    async def close(self) -> None:
        if self._own_session and self._session is not None:
            await self._session.close()
        self._session = None

    async def __aenter__(self) -> "AiohttpTransport":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()


async def request(
    transport: Transport,
    method: str,
    url: str,
    headers: dict[str, str] | None = None,
    body: bytes | None = None,
) -> bytes:
    """Fetch `url` and return the body of a 2xx answer.

    Raises:
        TransportError: on network failure.
        HttpStatusError: on any other status.
    """
    status, payload = await transport.fetch(method, url, headers=headers, body=body)
    if status not in SUCCESS_STATUSES:
        handle_exception(status, payload, url)
    return payload
