from .sse import SSEFrame, SSEParser
from .stream import StreamEvent, StreamEventKind, StreamItem, StreamState

__all__ = [
    "SSEFrame",
    "SSEParser",
    "StreamEvent",
    "StreamEventKind",
    "StreamItem",
    "StreamState",
]
