"""
Tests for LogSink - section markers and flushing.
"""

import io

import pytest

from ort_fuzz_lite.report.log_sink import LogSink


class FlushCountingStream(io.StringIO):
    """StringIO that counts flush calls."""

    def __init__(self) -> None:
        super().__init__()
        self.flushes = 0

    def flush(self) -> None:
        self.flushes += 1
        super().flush()


@pytest.mark.unit
def test_write_and_getvalue():
    sink = LogSink.in_memory()

    sink.write("a")
    sink.writeline("b")

    assert sink.getvalue() == "ab\n"


@pytest.mark.unit
def test_endl_terminates_section_and_flushes():
    stream = FlushCountingStream()
    sink = LogSink(stream, line_buffered=False)

    sink.write("inference starting")
    assert stream.flushes == 0

    sink.endl()

    assert stream.getvalue() == "inference starting\n"
    assert stream.flushes == 1
    assert sink.sections == 1


@pytest.mark.unit
def test_line_buffered_flushes_on_newline():
    stream = FlushCountingStream()
    sink = LogSink(stream)

    sink.write("partial")
    assert stream.flushes == 0

    sink.writeline(" line")
    assert stream.flushes == 1


@pytest.mark.unit
def test_section_flushes_on_exception():
    """Test that a section is terminated even if its body raises."""
    stream = FlushCountingStream()
    sink = LogSink(stream, line_buffered=False)

    with pytest.raises(RuntimeError):
        with sink.section("input data:"):
            sink.write("x = [1]\n")
            raise RuntimeError("boom")

    assert stream.getvalue() == "input data:\nx = [1]\n\n"
    assert stream.flushes >= 1
    assert sink.sections == 1


@pytest.mark.unit
def test_section_without_title():
    sink = LogSink.in_memory()

    with sink.section():
        sink.writeline("body")

    assert sink.getvalue() == "body\n\n"


@pytest.mark.unit
def test_open_file_sink(tmp_path):
    """Test that a file sink appends and closes its stream."""
    path = tmp_path / "fuzz.log"

    with LogSink.open(str(path)) as sink:
        sink.write("first")
        sink.endl()

    with LogSink.open(str(path)) as sink:
        sink.write("second")
        sink.endl()

    assert path.read_text(encoding="utf-8") == "first\nsecond\n"
    assert sink.stream.closed


@pytest.mark.unit
def test_write_after_close_raises():
    sink = LogSink.in_memory()
    sink.close()

    with pytest.raises(ValueError):
        sink.write("late")


@pytest.mark.unit
def test_close_keeps_borrowed_stream_open():
    stream = io.StringIO()
    sink = LogSink(stream)

    sink.close()

    assert not stream.closed


@pytest.mark.unit
def test_getvalue_requires_memory_stream(tmp_path):
    with LogSink.open(str(tmp_path / "x.log")) as sink:
        with pytest.raises(TypeError):
            sink.getvalue()
