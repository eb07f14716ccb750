"""
Narrow interface to the ONNX Runtime inference engine.

The harness never touches ``onnxruntime`` directly. Engine loads models from a
path or from an allocator-owned byte buffer and returns EngineSession objects
exposing only what the harness needs: counts, names, type descriptions and a
positional run. Engine-native exceptions are translated into ModelLoadError
and InferenceError here.
"""

import logging
import os
import threading
from enum import Enum
from typing import Any, Dict, List, Optional, Sequence, Union

import onnxruntime as ort

from ort_fuzz_lite.core.config import FuzzConfig
from ort_fuzz_lite.core.errors import InferenceError, ModelLoadError
from ort_fuzz_lite.engine.types import TypeInfo, parse_type_info
from ort_fuzz_lite.memory.allocator import EngineAllocator, ModelBuffer

logger = logging.getLogger(__name__)

# Session config key telling the engine how a byte buffer is serialized
LOAD_MODEL_FORMAT_KEY = "session.load_model_format"


class ModelFormat(Enum):
    """Serialization convention of a model byte buffer."""

    ONNX = "ONNX"  # general exchange format (protobuf)
    ORT = "ORT"  # engine-native compact format (flatbuffer)


class EngineSession:
    """One engine execution context bound to a single loaded model."""

    def __init__(
        self,
        engine: "Engine",
        ort_session: ort.InferenceSession,
        origin: str,
    ) -> None:
        self._engine = engine
        self._session: Optional[ort.InferenceSession] = ort_session
        self.origin = origin

        self._inputs = ort_session.get_inputs()
        self._outputs = ort_session.get_outputs()

    @property
    def closed(self) -> bool:
        return self._session is None

    def input_count(self) -> int:
        return len(self._inputs)

    def output_count(self) -> int:
        return len(self._outputs)

    def input_name(self, index: int) -> str:
        return self._inputs[index].name

    def output_name(self, index: int) -> str:
        return self._outputs[index].name

    def input_type_info(self, index: int) -> TypeInfo:
        arg = self._inputs[index]
        return parse_type_info(arg.type, arg.shape, self._engine.config.dynamic_dim_value)

    def output_type_info(self, index: int) -> TypeInfo:
        arg = self._outputs[index]
        return parse_type_info(arg.type, arg.shape, self._engine.config.dynamic_dim_value)

    def run(
        self,
        input_names: Sequence[str],
        input_values: Sequence[Any],
        output_names: Sequence[str],
    ) -> List[Any]:
        """Execute inference.

        Inputs whose value is None are left unbound; the engine decides
        whether that is acceptable.

        Args:
            input_names: Input names, index-aligned with input_values.
            input_values: Bound values or None for unbound slots.
            output_names: Outputs to fetch, in order.

        Returns:
            Output values, index-aligned with output_names.

        Raises:
            InferenceError: If the engine faults during execution.
        """
        if self._session is None:
            raise InferenceError(f"session for {self.origin} is closed")

        feeds = {
            name: value
            for name, value in zip(input_names, input_values)
            if value is not None
        }
        try:
            return self._session.run(list(output_names), feeds)
        except Exception as exc:
            raise InferenceError(f"inference failed for {self.origin}: {exc}") from exc

    def close(self) -> None:
        """Drop the engine session. Safe to call more than once."""
        if self._session is None:
            return
        self._session = None
        self._engine._session_closed(self)


class Engine:
    """Loads models into sessions and owns the allocator for model buffers."""

    def __init__(
        self,
        config: Optional[FuzzConfig] = None,
        allocator: Optional[EngineAllocator] = None,
    ) -> None:
        """Initialize the engine.

        Args:
            config: Harness configuration (session options, dimension sizing).
            allocator: Allocator for model buffers; a new one if not given.
        """
        self.config = config if config is not None else FuzzConfig()
        self.allocator = allocator if allocator is not None else EngineAllocator()

        self.sessions_created = 0
        self.sessions_released = 0
        self._open_sessions = 0
        self.lock = threading.Lock()

    def _session_options(self, format_hint: Optional[ModelFormat] = None) -> ort.SessionOptions:
        options = ort.SessionOptions()
        options.log_severity_level = self.config.log_severity_level
        if self.config.intra_op_num_threads > 0:
            options.intra_op_num_threads = self.config.intra_op_num_threads
        if format_hint is not None:
            options.add_session_config_entry(LOAD_MODEL_FORMAT_KEY, format_hint.value)
        return options

    def _open(
        self,
        model: Union[str, bytes],
        options: ort.SessionOptions,
        origin: str,
    ) -> EngineSession:
        try:
            ort_session = ort.InferenceSession(
                model, sess_options=options, providers=self.config.providers
            )
        except Exception as exc:
            logger.error("engine rejected model from %s: %s", origin, exc)
            raise ModelLoadError(
                f"Failed to load model from {origin}: {exc}", source=origin
            ) from exc

        session = EngineSession(self, ort_session, origin)
        with self.lock:
            self.sessions_created += 1
            self._open_sessions += 1
        logger.debug(
            "opened session for %s (%d inputs, %d outputs)",
            origin,
            session.input_count(),
            session.output_count(),
        )
        return session

    def load_from_path(self, path: Union[str, "os.PathLike[str]"]) -> EngineSession:
        """Load a model file directly.

        Raises:
            ModelLoadError: If the file is missing or rejected by the engine.
        """
        path = os.fspath(path)
        if not os.path.isfile(path):
            raise ModelLoadError(f"Model file not found: {path}", source=path)
        return self._open(path, self._session_options(), path)

    def load_from_bytes(
        self,
        buffer: ModelBuffer,
        length: int,
        format_hint: Optional[ModelFormat] = None,
    ) -> EngineSession:
        """Load a model from an allocator-owned buffer.

        Args:
            buffer: Buffer holding the serialized model.
            length: Number of leading bytes of the buffer that form the model.
            format_hint: Serialization convention of the bytes; None lets the
                engine decide.

        Raises:
            ModelLoadError: If the bytes are rejected by the engine.
        """
        if not 0 < length <= buffer.size:
            raise ModelLoadError(
                f"model length {length} out of range for a {buffer.size}-byte buffer",
                source="<bytes>",
            )
        model_bytes = bytes(buffer.view()[:length])
        origin = f"<{length} bytes>"
        return self._open(model_bytes, self._session_options(format_hint), origin)

    def release_session(self, session: EngineSession) -> None:
        """Release a session this caller owns.

        Raises:
            ValueError: If the session belongs to another engine or was
                already closed.
        """
        if session._engine is not self:
            raise ValueError(f"session for {session.origin} belongs to another engine")
        if session.closed:
            raise ValueError(f"session for {session.origin} was already released")
        with self.lock:
            self.sessions_released += 1
        session.close()

    def _session_closed(self, session: EngineSession) -> None:
        with self.lock:
            self._open_sessions -= 1
        logger.debug("closed session for %s", session.origin)

    def get_stats(self) -> Dict[str, int]:
        """Get engine statistics.

        Returns:
            Dictionary with keys:
            - sessions_created: Sessions ever opened
            - sessions_released: Sessions released through release_session
            - open_sessions: Sessions not yet closed
        """
        with self.lock:
            return {
                "sessions_created": self.sessions_created,
                "sessions_released": self.sessions_released,
                "open_sessions": self._open_sessions,
            }


_default_engine: Optional[Engine] = None
_default_engine_lock = threading.Lock()


def get_default_engine() -> Engine:
    """Return the process-wide engine, creating it on first use."""
    global _default_engine
    with _default_engine_lock:
        if _default_engine is None:
            _default_engine = Engine()
        return _default_engine
