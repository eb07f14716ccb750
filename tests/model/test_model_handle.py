"""
Tests for ModelHandle - the three model acquisition paths.
"""

import pytest

from ort_fuzz_lite.core.errors import ModelLoadError
from ort_fuzz_lite.engine.engine import ModelFormat
from ort_fuzz_lite.memory.allocator import EngineAllocator
from ort_fuzz_lite.model.model_handle import ModelHandle, ModelSource


@pytest.mark.unit
def test_from_path_owns_no_buffer(tmp_path):
    """Test that a path handle owns no bytes."""
    handle = ModelHandle.from_path(tmp_path / "model.onnx")

    assert handle.source == ModelSource.PATH
    assert handle.path == str(tmp_path / "model.onnx")
    assert not handle.owns_buffer
    assert handle.buffer is None
    assert handle.length == 0
    assert handle.format_hint is None

    handle.close()
    assert handle.closed


@pytest.mark.unit
def test_from_model_proto_serializes_into_buffer(two_input_model):
    """Test that a ModelProto is serialized into an allocator buffer."""
    allocator = EngineAllocator()

    handle = ModelHandle.from_model_proto(two_input_model, allocator)

    assert handle.source == ModelSource.MODEL_PROTO
    assert handle.owns_buffer
    assert handle.length == two_input_model.ByteSize()
    assert handle.buffer.to_bytes() == two_input_model.SerializeToString()
    assert handle.format_hint is None
    assert allocator.get_stats()["live_buffers"] == 1


@pytest.mark.unit
def test_from_bytes_copies_verbatim():
    """Test that raw bytes are copied and tagged with the ORT hint by default."""
    allocator = EngineAllocator()
    data = bytearray(b"\x01\x02\x03\x04")

    handle = ModelHandle.from_bytes(data, allocator)
    data[0] = 0xFF

    assert handle.source == ModelSource.RAW_BYTES
    assert handle.format_hint == ModelFormat.ORT
    assert handle.length == 4
    assert handle.buffer.to_bytes() == b"\x01\x02\x03\x04"


@pytest.mark.unit
def test_from_bytes_explicit_hint():
    allocator = EngineAllocator()

    handle = ModelHandle.from_bytes(b"abc", allocator, ModelFormat.ONNX)

    assert handle.format_hint == ModelFormat.ONNX


@pytest.mark.unit
def test_from_bytes_empty_rejected():
    """Test that empty bytes are rejected before any allocation."""
    allocator = EngineAllocator()

    with pytest.raises(ModelLoadError):
        ModelHandle.from_bytes(b"", allocator)

    assert allocator.get_stats()["total_allocations"] == 0


@pytest.mark.unit
def test_close_frees_buffer_once(two_input_model):
    """Test that close frees the owned buffer exactly once."""
    allocator = EngineAllocator()
    handle = ModelHandle.from_model_proto(two_input_model, allocator)

    handle.close()
    handle.close()

    stats = allocator.get_stats()
    assert stats["total_frees"] == 1
    assert stats["live_buffers"] == 0


@pytest.mark.unit
def test_closed_handle_refuses_access():
    allocator = EngineAllocator()
    handle = ModelHandle.from_bytes(b"abc", allocator)
    handle.close()

    with pytest.raises(ValueError, match="closed"):
        handle.buffer


@pytest.mark.integration
def test_load_each_source(engine, two_input_model, two_input_model_path, two_input_ort_bytes):
    """Test that every acquisition path yields a working session."""
    handles = [
        ModelHandle.from_path(two_input_model_path),
        ModelHandle.from_model_proto(two_input_model, engine.allocator),
        ModelHandle.from_bytes(two_input_ort_bytes, engine.allocator),
    ]

    for handle in handles:
        session = handle.load(engine)
        assert session.input_count() == 2
        session.close()
        handle.close()

    assert engine.allocator.get_stats()["live_buffers"] == 0
    assert engine.get_stats()["open_sessions"] == 0


@pytest.mark.unit
def test_repr():
    allocator = EngineAllocator()

    handle = ModelHandle.from_bytes(b"abcd", allocator)

    assert "raw_bytes" in repr(handle)
    assert "ORT" in repr(handle)
