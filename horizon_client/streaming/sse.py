"""
Incremental Server-Sent Events parser.

Bytes are fed as they arrive; complete frames come out. Lines may end with
CRLF, LF or CR, a blank line terminates a frame, lines starting with ':' are
comments. See https://html.spec.whatwg.org/multipage/server-sent-events.html
"""

import codecs
import re
from dataclasses import dataclass

_LINE_END = re.compile(r"\r\n|\r|\n")


@dataclass(frozen=True)
class SSEFrame:
    data: str | None = None
    event: str | None = None
    id: str | None = None
    retry: int | None = None


class SSEParser:
    def __init__(self) -> None:
        self._decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")
        self._buffer = ""
        self._reset()

    def _reset(self) -> None:
        self._data: list[str] = []
        self._event: str | None = None
        self._id: str | None = None
        self._retry: int | None = None
        self._dirty = False

    def feed(self, chunk: bytes) -> list[SSEFrame]:
        self._buffer += self._decoder.decode(chunk)
        frames = []
        while True:
            match = _LINE_END.search(self._buffer)
            if match is None:
                break
            # a trailing CR may be the first half of a CRLF split across chunks
            if match.group() == "\r" and match.end() == len(self._buffer):
                break
            line = self._buffer[: match.start()]
            self._buffer = self._buffer[match.end() :]
            frame = self._process_line(line)
            if frame is not None:
                frames.append(frame)
        return frames

    def _process_line(self, line: str) -> SSEFrame | None:
        if not line:
            return self._dispatch()
        if line.startswith(":"):
            return None
        name, _, value = line.partition(":")
        if value.startswith(" "):
            value = value[1:]
        if name == "data":
            self._data.append(value)
        elif name == "event":
            self._event = value
        elif name == "id" and "\0" not in value:
            self._id = value
        elif name == "retry" and value.isdigit():
            self._retry = int(value)
        else:
            return None
        self._dirty = True
        return None

    def _dispatch(self) -> SSEFrame | None:
        if not self._dirty:
            return None
        frame = SSEFrame(
            data="\n".join(self._data) if self._data else None,
            event=self._event,
            id=self._id,
            retry=self._retry,
        )
        self._reset()
        return frame
