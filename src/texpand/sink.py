from typing import Protocol, TextIO


class Sink(Protocol):
    def write(self, text: str) -> None: ...


class StreamSink:
    def __init__(self, stream: TextIO) -> None:
        self._stream = stream

    def write(self, text: str) -> None:
        if text:
            self._stream.write(text)
            self._stream.flush()


class CaptureSink:
    def __init__(self) -> None:
        self._chunks: list[str] = []

    def write(self, text: str) -> None:
        if text:
            self._chunks.append(text)

    def getvalue(self) -> str:
        return "".join(self._chunks)
