"""
Model acquisition for the fuzz harness.

A ModelHandle owns the model bytes under one of three acquisition modes:
- PATH: the engine reads the file itself; no bytes are owned
- MODEL_PROTO: an ``onnx.ModelProto`` is serialized into an allocator buffer
- RAW_BYTES: caller bytes are copied verbatim into an allocator buffer and
  tagged with a format hint (the engine's compact ORT format by default)

Owned buffers are freed through the allocator that produced them, exactly once.
"""

import logging
import os
from enum import Enum
from typing import Optional, Union

import onnx

from ort_fuzz_lite.core.errors import ModelLoadError
from ort_fuzz_lite.engine.engine import Engine, EngineSession, ModelFormat
from ort_fuzz_lite.memory.allocator import EngineAllocator, ModelBuffer

logger = logging.getLogger(__name__)


class ModelSource(Enum):
    """How a model was acquired."""

    PATH = "path"
    MODEL_PROTO = "model_proto"
    RAW_BYTES = "raw_bytes"


class ModelHandle:
    """Owner of the bytes backing one loaded model.

    Use the ``from_path``, ``from_model_proto`` and ``from_bytes``
    constructors rather than instantiating directly.

    Attributes:
        source: Acquisition mode.
        path: Model file path (PATH mode only).
        format_hint: Serialization convention passed to the engine, if any.
    """

    def __init__(
        self,
        source: ModelSource,
        path: Optional[str] = None,
        buffer: Optional[ModelBuffer] = None,
        length: int = 0,
        format_hint: Optional[ModelFormat] = None,
    ) -> None:
        self.source = source
        self.path = path
        self.format_hint = format_hint
        self._buffer = buffer
        self._length = length
        self._closed = False

    @classmethod
    def from_path(cls, path: Union[str, "os.PathLike[str]"]) -> "ModelHandle":
        """Reference a model file the engine will load directly."""
        return cls(ModelSource.PATH, path=os.fspath(path))

    @classmethod
    def from_model_proto(
        cls, model: onnx.ModelProto, allocator: EngineAllocator
    ) -> "ModelHandle":
        """Serialize an in-memory graph into an allocator-owned buffer.

        Args:
            model: Graph description to serialize.
            allocator: Allocator that owns the resulting buffer.
        """
        num_bytes = model.ByteSize()
        if num_bytes == 0:
            raise ModelLoadError("model proto serializes to zero bytes", source="<model_proto>")

        buffer = allocator.alloc(num_bytes)
        try:
            serialized = model.SerializeToString()
            buffer.view()[:num_bytes] = serialized
        except Exception:
            allocator.free(buffer)
            raise
        return cls(ModelSource.MODEL_PROTO, buffer=buffer, length=num_bytes)

    @classmethod
    def from_bytes(
        cls,
        data: Union[bytes, bytearray, memoryview],
        allocator: EngineAllocator,
        format_hint: ModelFormat = ModelFormat.ORT,
    ) -> "ModelHandle":
        """Copy a raw model buffer into an allocator-owned buffer.

        Args:
            data: Serialized model bytes.
            allocator: Allocator that owns the copy.
            format_hint: Serialization convention of ``data``.
        """
        num_bytes = len(data)
        if num_bytes == 0:
            raise ModelLoadError("model bytes cannot be empty", source="<bytes>")

        buffer = allocator.alloc(num_bytes)
        buffer.view()[:num_bytes] = data
        return cls(
            ModelSource.RAW_BYTES,
            buffer=buffer,
            length=num_bytes,
            format_hint=format_hint,
        )

    @property
    def owns_buffer(self) -> bool:
        return self._buffer is not None

    @property
    def buffer(self) -> Optional[ModelBuffer]:
        """The owned buffer, or None in PATH mode."""
        self._check_open()
        return self._buffer

    @property
    def length(self) -> int:
        """Number of model bytes in the owned buffer (0 in PATH mode)."""
        return self._length

    @property
    def closed(self) -> bool:
        return self._closed

    def _check_open(self) -> None:
        if self._closed:
            raise ValueError("model handle is closed")

    def load(self, engine: Engine) -> EngineSession:
        """Establish an engine session for this model.

        Raises:
            ModelLoadError: If the engine rejects the model.
        """
        self._check_open()
        if self.source == ModelSource.PATH:
            return engine.load_from_path(self.path)
        return engine.load_from_bytes(self._buffer, self._length, self.format_hint)

    def close(self) -> None:
        """Free the owned buffer, if any. Safe to call more than once."""
        if self._closed:
            return
        self._closed = True
        if self._buffer is not None:
            self._buffer.allocator.free(self._buffer)
            logger.debug("released %s model buffer", self.source.value)

    def __repr__(self) -> str:
        if self.source == ModelSource.PATH:
            return f"ModelHandle(source=path, path={self.path!r})"
        return (
            f"ModelHandle(source={self.source.value}, length={self._length}, "
            f"format_hint={self.format_hint.value if self.format_hint else None})"
        )
