"""
Text sink for fuzz transcripts.

The LogSink is passed explicitly to everything that writes a transcript. It is
append-only and line-buffered, has an explicit ``flush`` and an ``endl``
section terminator that differs from a plain newline: ``endl`` closes a
logical section and forces a flush, so partial output survives a crash in the
engine.
"""

import io
import sys
from contextlib import contextmanager
from typing import Iterator, Optional, TextIO


class LogSink:
    """Append-only, line-buffered text sink with section markers.

    Attributes:
        stream: Underlying text stream.
        sections: Number of sections closed with ``endl``.
    """

    def __init__(self, stream: Optional[TextIO] = None, line_buffered: bool = True) -> None:
        """Initialize LogSink.

        Args:
            stream: Destination stream (default: sys.stdout).
            line_buffered: Flush after every write that completes a line.
        """
        self.stream = stream if stream is not None else sys.stdout
        self.line_buffered = line_buffered
        self.sections = 0
        self._owns_stream = False
        self._closed = False

    @classmethod
    @contextmanager
    def open(cls, path: str, line_buffered: bool = True) -> Iterator["LogSink"]:
        """Open a file-backed sink, closing it on exit."""
        stream = open(path, "a", encoding="utf-8")
        sink = cls(stream, line_buffered=line_buffered)
        sink._owns_stream = True
        try:
            yield sink
        finally:
            sink.close()

    @classmethod
    def in_memory(cls) -> "LogSink":
        """Create a sink backed by a StringIO; read it back with ``getvalue``."""
        return cls(io.StringIO())

    def write(self, text: str) -> None:
        """Append text to the sink."""
        if self._closed:
            raise ValueError("write to closed log sink")
        self.stream.write(text)
        if self.line_buffered and "\n" in text:
            self.stream.flush()

    def writeline(self, text: str = "") -> None:
        """Append text followed by a plain newline."""
        self.write(text + "\n")

    def endl(self) -> None:
        """Terminate the current logical section and flush."""
        self.write("\n")
        self.sections += 1
        self.flush()

    def flush(self) -> None:
        if not self._closed:
            self.stream.flush()

    @contextmanager
    def section(self, title: Optional[str] = None) -> Iterator["LogSink"]:
        """Scope a logical section; ``endl`` runs on exit even if the body raises."""
        if title is not None:
            self.writeline(title)
        try:
            yield self
        finally:
            self.endl()

    def getvalue(self) -> str:
        """Return everything written so far (in-memory sinks only)."""
        if not isinstance(self.stream, io.StringIO):
            raise TypeError("getvalue is only available on in-memory sinks")
        return self.stream.getvalue()

    def close(self) -> None:
        """Flush, and close the stream if this sink opened it."""
        if self._closed:
            return
        self.flush()
        if self._owns_stream:
            self.stream.close()
        self._closed = True
