import asyncio
import json

import pytest
from yarl import URL

from horizon_client.core.exceptions import (
    ErrorKind,
    HttpStatusError,
    MalformedResponseError,
    TransportError,
)
from horizon_client.decoder import ResourceFamily
from horizon_client.streaming import StreamEventKind, StreamItem, StreamState
from horizon_client.streaming.stream import MAX_PENDING_EVENTS

from .conftest import HORIZON_URL, payment_payload, problem, sse

pytestmark = pytest.mark.asyncio

STREAM_URL = f"{HORIZON_URL}/operations"
HELLO = 'retry: 0\ndata: "hello"'

OPEN = StreamEventKind.OPEN
RESOURCE = StreamEventKind.RESOURCE
ERROR = StreamEventKind.ERROR


def frame(id: str) -> str:
    return f"id: {id}\ndata: {json.dumps(payment_payload(id=id))}"


async def collect(stream: StreamItem, count: int) -> list:
    events = []
    async with asyncio.timeout(2):
        async for event in stream.events():
            events.append(event)
            if len(events) == count:
                break
    return events


def resource_ids(events) -> list[str]:
    return [e.resource.id for e in events if e.kind is RESOURCE]


async def test_stream_delivers_resources(fake_transport):
    fake_transport.add_stream(chunks=[sse(HELLO, frame("1"), frame("2"))])
    async with StreamItem(fake_transport, STREAM_URL, ResourceFamily.OPERATION) as stream:
        events = await collect(stream, 3)

    assert [e.kind for e in events] == [OPEN, RESOURCE, RESOURCE]
    assert resource_ids(events) == ["1", "2"]
    assert events[2].event_id == "2"
    assert stream.cursor == "2"
    assert stream.state is StreamState.CLOSED
    assert fake_transport.stream_calls[0] == (f"{STREAM_URL}?cursor=now", {})


async def test_stream_malformed_frame_does_not_block_the_next_one(fake_transport):
    bad = 'id: 2\ndata: {"id": "2", "paging_token": "2", "type_i": 1}'
    fake_transport.add_stream(chunks=[sse(frame("1"), bad, frame("3"))])
    async with StreamItem(fake_transport, STREAM_URL, ResourceFamily.OPERATION) as stream:
        events = await collect(stream, 4)

    assert [e.kind for e in events] == [OPEN, RESOURCE, ERROR, RESOURCE]
    assert isinstance(events[2].error, MalformedResponseError)
    assert events[2].event_id == "2"
    assert resource_ids(events) == ["1", "3"]


async def test_stream_resumes_from_last_event_id(fake_transport):
    fake_transport.add_stream(chunks=[sse(HELLO, frame("100")), sse(frame("101"))])
    fake_transport.add_stream(chunks=[sse(HELLO, frame("101"), frame("102"))])
    async with StreamItem(fake_transport, STREAM_URL, ResourceFamily.OPERATION) as stream:
        events = await collect(stream, 5)

    assert [e.kind for e in events] == [OPEN, RESOURCE, RESOURCE, OPEN, RESOURCE]
    assert resource_ids(events) == ["100", "101", "102"]
    url, headers = fake_transport.stream_calls[1]
    assert URL(url).query["cursor"] == "101"
    assert headers == {"Last-Event-ID": "101"}


async def test_stream_initial_cursor_from_url(fake_transport):
    fake_transport.add_stream(chunks=[sse(HELLO)])
    url = f"{STREAM_URL}?order=asc&cursor=42"
    async with StreamItem(fake_transport, url, ResourceFamily.OPERATION) as stream:
        await collect(stream, 1)

    request_url, headers = fake_transport.stream_calls[0]
    assert URL(request_url).query["cursor"] == "42"
    assert URL(request_url).query["order"] == "asc"
    assert headers == {"Last-Event-ID": "42"}


async def test_stream_reconnects_after_server_error(fake_transport):
    body = json.dumps(problem(503, "Stale History", "stale_history")).encode()
    fake_transport.add_stream(status=503, body=body)
    fake_transport.add_stream(chunks=[sse(frame("1"))])
    async with StreamItem(fake_transport, STREAM_URL, ResourceFamily.OPERATION) as stream:
        events = await collect(stream, 3)

    assert [e.kind for e in events] == [ERROR, OPEN, RESOURCE]
    assert isinstance(events[0].error, HttpStatusError)
    assert events[0].error.kind is ErrorKind.STALE_HISTORY
    assert len(fake_transport.stream_calls) == 2


async def test_stream_reconnects_after_transport_error(fake_transport):
    fake_transport.fail_stream(TransportError(STREAM_URL, ConnectionResetError()))
    fake_transport.add_stream(chunks=[sse(frame("1"))])
    async with StreamItem(fake_transport, STREAM_URL, ResourceFamily.OPERATION) as stream:
        events = await collect(stream, 3)

    assert [e.kind for e in events] == [ERROR, OPEN, RESOURCE]
    assert isinstance(events[0].error, TransportError)


async def test_stream_fatal_status_closes(fake_transport):
    body = json.dumps(problem(404, "Resource Missing", "not_found")).encode()
    fake_transport.add_stream(status=404, body=body)
    stream = StreamItem(fake_transport, STREAM_URL, ResourceFamily.OPERATION)
    async with asyncio.timeout(2):
        events = [event async for event in stream.events()]

    assert [e.kind for e in events] == [ERROR]
    assert events[0].error.kind is ErrorKind.NOT_FOUND
    assert stream.closed
    assert stream.state is StreamState.CLOSED


async def test_stream_no_content_closes(fake_transport):
    fake_transport.add_stream(status=204)
    stream = StreamItem(fake_transport, STREAM_URL, ResourceFamily.OPERATION)
    async with asyncio.timeout(2):
        events = [event async for event in stream.events()]

    assert events == []
    assert stream.closed


async def test_stream_close_during_reconnect(fake_transport):
    fake_transport.add_stream(chunks=[sse(frame("1"))])
    stream = StreamItem(fake_transport, STREAM_URL, ResourceFamily.OPERATION, retry_ms=60_000)
    await collect(stream, 2)
    async with asyncio.timeout(2):
        while stream.state is not StreamState.RECONNECTING:
            await asyncio.sleep(0)

    stream.close()
    assert stream.state is StreamState.CLOSED
    await stream.aclose()
    await asyncio.sleep(0)


async def test_stream_no_event_after_close(fake_transport):
    fake_transport.add_stream(chunks=[sse(frame("1"), frame("2"), frame("3"))])
    stream = StreamItem(fake_transport, STREAM_URL, ResourceFamily.OPERATION)
    received = []
    async with asyncio.timeout(2):
        async for event in stream.events():
            received.append(event)
            if event.kind is RESOURCE:
                stream.close()

    assert [e.kind for e in received] == [OPEN, RESOURCE]
    await stream.aclose()


async def test_stream_close_from_another_thread(fake_transport):
    fake_transport.add_stream(chunks=[sse(frame("1"))])
    stream = StreamItem(fake_transport, STREAM_URL, ResourceFamily.OPERATION)
    await collect(stream, 2)

    await asyncio.get_running_loop().run_in_executor(None, stream.close)
    await stream.aclose()
    assert stream.closed
    assert stream.state is StreamState.CLOSED


async def test_stream_events_consumed_once(fake_transport):
    fake_transport.add_stream(chunks=[sse(HELLO)])
    stream = StreamItem(fake_transport, STREAM_URL, ResourceFamily.OPERATION)
    events = stream.events()
    assert (await events.__anext__()).kind is OPEN
    with pytest.raises(RuntimeError):
        await stream.events().__anext__()
    await stream.aclose()
    await events.aclose()


async def test_stream_retry_field(fake_transport):
    fake_transport.add_stream(chunks=[sse('retry: 1500\ndata: "hello"')])
    async with StreamItem(fake_transport, STREAM_URL, ResourceFamily.OPERATION) as stream:
        await collect(stream, 1)
    assert stream.retry_ms == 1500


async def test_stream_on_receive_is_sequential(fake_transport):
    fake_transport.add_stream(chunks=[sse(frame("1"), frame("2"), frame("3"))])
    stream = StreamItem(fake_transport, STREAM_URL, ResourceFamily.OPERATION)
    seen = []
    active = peak = 0
    done = asyncio.Event()

    async def callback(event):
        nonlocal active, peak
        active += 1
        peak = max(peak, active)
        await asyncio.sleep(0.01)
        seen.append(event)
        active -= 1
        if len(seen) == 4:
            done.set()

    task = stream.on_receive(callback)
    async with asyncio.timeout(2):
        await done.wait()
    stream.close()
    await task

    assert peak == 1
    assert [e.kind for e in seen] == [OPEN, RESOURCE, RESOURCE, RESOURCE]
    assert resource_ids(seen) == ["1", "2", "3"]


async def test_stream_on_receive_sync_callback(fake_transport):
    fake_transport.add_stream(chunks=[sse(HELLO, frame("1"))])
    stream = StreamItem(fake_transport, STREAM_URL, ResourceFamily.OPERATION)
    seen = []
    task = stream.on_receive(seen.append)
    async with asyncio.timeout(2):
        while len(seen) < 2:
            await asyncio.sleep(0)
    await stream.aclose()
    await task
    assert resource_ids(seen) == ["1"]


async def test_stream_over_aiohttp(rmock, transport):
    rmock.get(
        f"{STREAM_URL}?cursor=now",
        body=sse(HELLO, frame("1")),
        headers={"Content-Type": "text/event-stream"},
    )
    async with StreamItem(transport, STREAM_URL, ResourceFamily.OPERATION) as stream:
        events = await collect(stream, 2)
    assert [e.kind for e in events] == [OPEN, RESOURCE]
    assert stream.cursor == "1"


async def test_stream_on_receive_callback_error_closes(fake_transport):
    fake_transport.add_stream(chunks=[sse(HELLO)])
    stream = StreamItem(fake_transport, STREAM_URL, ResourceFamily.OPERATION)

    def callback(event):
        raise RuntimeError("boom")

    task = stream.on_receive(callback)
    with pytest.raises(RuntimeError):
        async with asyncio.timeout(2):
            await task
    assert stream.closed
    await stream.aclose()


async def test_stream_waits_for_slow_consumer(fake_transport):
    count = MAX_PENDING_EVENTS + 50
    fake_transport.add_stream(chunks=[sse(*(frame(str(i)) for i in range(1, count + 1)))])
    stream = StreamItem(fake_transport, STREAM_URL, ResourceFamily.OPERATION)
    events = stream.events()

    assert (await events.__anext__()).kind is OPEN
    for _ in range(20):
        await asyncio.sleep(0)
    assert stream._queue.qsize() <= MAX_PENDING_EVENTS
    assert stream.cursor != str(count)

    received = []
    async with asyncio.timeout(2):
        while len(received) < count:
            received.append(await events.__anext__())
    assert resource_ids(received) == [str(i) for i in range(1, count + 1)]
    await stream.aclose()
    await events.aclose()


async def test_stream_break_then_aclose_releases_connection(fake_transport):
    fake_transport.add_stream(chunks=[sse(frame("1"))])
    stream = StreamItem(fake_transport, STREAM_URL, ResourceFamily.OPERATION)
    events = await collect(stream, 2)
    assert resource_ids(events) == ["1"]

    await stream.aclose()
    assert stream.closed
    assert stream.state is StreamState.CLOSED
    assert stream._pump.done()
