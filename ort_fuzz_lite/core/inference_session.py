"""
Fuzzing session over one loaded model.

InferenceSession ties together a ModelHandle, the engine session it produced,
the input/output name tables and value slots, the random data generator and
the transcript sink. It is single-model and single-session: binding to a
different model means constructing a new instance.
"""

import logging
import os
from typing import Any, Callable, List, Optional, Union

import onnx
import torch

from ort_fuzz_lite.core.errors import InferenceError, ModelLoadError, UnsupportedTypeError
from ort_fuzz_lite.core.session_slot import EmbeddedSession, OwnedSession, SessionSlot
from ort_fuzz_lite.engine.engine import Engine, EngineSession, ModelFormat, get_default_engine
from ort_fuzz_lite.engine.types import ElementType, TypeInfo
from ort_fuzz_lite.model.model_handle import ModelHandle, ModelSource
from ort_fuzz_lite.report.formatter import ResultFormatter
from ort_fuzz_lite.report.log_sink import LogSink
from ort_fuzz_lite.sampling.random_data import RandomTensorGenerator

logger = logging.getLogger(__name__)

# (session, input_index, input_name, element_type, element_count, seed) -> None
InputGeneratorFunction = Callable[
    ["InferenceSession", int, str, ElementType, int, int], None
]


def generate_data_for_input_type_tensor(
    session: "InferenceSession",
    input_index: int,
    input_name: str,
    element_type: ElementType,
    element_count: int,
    seed: int,
) -> None:
    """Default input hook: generate, print and bind one tensor input.

    Raises:
        UnsupportedTypeError: If the generator has no arm for element_type.
    """
    raw_data = session.generator.generate(element_type, element_count, seed)
    session.formatter.write_tensor(session.sink, input_name, raw_data)
    shape = session.input_type(input_index).shape
    session.bind_input(input_index, raw_data.reshape(shape))


class InferenceSession:
    """Harness around a single engine session.

    Use ``from_path``, ``from_model_proto`` or ``from_bytes``; the instance
    takes ownership of the ModelHandle and releases it on ``close``.

    Attributes:
        engine: Engine that loaded the model.
        model: Handle owning the model bytes.
        sink: Transcript sink.
        generator: Random data generator for inputs.
        formatter: Tensor formatter for the transcript.
        input_names: Input names, index-aligned with input_values.
        input_values: Bound input values, None where unbound.
        output_names: Output names, index-aligned with output_values.
        output_values: Values produced by the last run, None before it.
    """

    def __init__(
        self,
        model: ModelHandle,
        engine: Optional[Engine] = None,
        sink: Optional[LogSink] = None,
        generator: Optional[RandomTensorGenerator] = None,
    ) -> None:
        """Initialize InferenceSession and establish the engine session.

        Args:
            model: Model to load; ownership passes to this instance.
            engine: Engine to load with (default: the process-wide engine).
            sink: Transcript sink (default: stdout).
            generator: Input data generator (default: from the engine config).

        Raises:
            ModelLoadError: If the engine rejects the model. The model handle
                is released before raising.
        """
        self.engine = engine if engine is not None else get_default_engine()
        self.model = model
        self.sink = sink if sink is not None else LogSink()
        self.generator = (
            generator
            if generator is not None
            else RandomTensorGenerator.from_config(self.engine.config)
        )
        self.formatter = ResultFormatter()
        self._closed = False

        try:
            engine_session = model.load(self.engine)
        except ModelLoadError:
            model.close()
            raise

        if model.source == ModelSource.PATH:
            self._slot: SessionSlot = EmbeddedSession(engine_session)
        else:
            self._slot = OwnedSession(engine_session, self.engine)

        self.input_names: List[str] = [
            engine_session.input_name(i) for i in range(engine_session.input_count())
        ]
        self.input_values: List[Any] = [None] * len(self.input_names)
        self.output_names: List[str] = [
            engine_session.output_name(i) for i in range(engine_session.output_count())
        ]
        self.output_values: List[Any] = [None] * len(self.output_names)

    @classmethod
    def from_path(
        cls,
        path: Union[str, "os.PathLike[str]"],
        engine: Optional[Engine] = None,
        sink: Optional[LogSink] = None,
        generator: Optional[RandomTensorGenerator] = None,
    ) -> "InferenceSession":
        """Load a model file; the engine session is held by value."""
        return cls(ModelHandle.from_path(path), engine, sink, generator)

    @classmethod
    def from_model_proto(
        cls,
        model: onnx.ModelProto,
        engine: Optional[Engine] = None,
        sink: Optional[LogSink] = None,
        generator: Optional[RandomTensorGenerator] = None,
    ) -> "InferenceSession":
        """Serialize an in-memory graph and load it; the session is owned."""
        engine = engine if engine is not None else get_default_engine()
        handle = ModelHandle.from_model_proto(model, engine.allocator)
        return cls(handle, engine, sink, generator)

    @classmethod
    def from_bytes(
        cls,
        data: Union[bytes, bytearray, memoryview],
        format_hint: ModelFormat = ModelFormat.ORT,
        engine: Optional[Engine] = None,
        sink: Optional[LogSink] = None,
        generator: Optional[RandomTensorGenerator] = None,
    ) -> "InferenceSession":
        """Copy raw model bytes and load them; the session is owned."""
        engine = engine if engine is not None else get_default_engine()
        handle = ModelHandle.from_bytes(data, engine.allocator, format_hint)
        return cls(handle, engine, sink, generator)

    @property
    def session(self) -> EngineSession:
        """The active engine session, whichever way it is held."""
        return self._slot.session

    @property
    def owns_session(self) -> bool:
        return self._slot.owned

    @property
    def closed(self) -> bool:
        return self._closed

    def input_count(self) -> int:
        return len(self.input_names)

    def output_count(self) -> int:
        return len(self.output_names)

    def input_type(self, index: int) -> TypeInfo:
        return self.session.input_type_info(index)

    def output_type(self, index: int) -> TypeInfo:
        return self.session.output_type_info(index)

    def bind_input(self, index: int, value: Any) -> None:
        """Store a value in input slot ``index``, replacing any earlier binding.

        Torch tensors are converted to numpy arrays for the engine.
        """
        if not 0 <= index < len(self.input_values):
            raise IndexError(
                f"input index {index} out of range for {len(self.input_values)} inputs"
            )
        if isinstance(value, torch.Tensor):
            value = value.detach().cpu().numpy()
        self.input_values[index] = value

    def clear_inputs(self) -> None:
        """Unbind every input slot."""
        self.input_values = [None] * len(self.input_names)

    def setup_input(
        self,
        generate_data: Optional[InputGeneratorFunction] = None,
        seed: int = 0,
    ) -> int:
        """Synthesize and bind data for every supported tensor input.

        Writes an ``input data:`` section to the sink. Inputs that are not
        tensors are logged as unsupported and left unbound. With the default
        hook, element types the generator does not support are skipped the
        same way; a custom hook sees every tensor input and declines one by
        raising UnsupportedTypeError. The seed advances by one after each
        generated input.

        Args:
            generate_data: Per-input hook (default:
                generate_data_for_input_type_tensor).
            seed: Seed for the first generated input.

        Returns:
            The seed following the last one used.
        """
        check_support = generate_data is None
        if generate_data is None:
            generate_data = generate_data_for_input_type_tensor

        with self.sink.section("input data:"):
            for index, name in enumerate(self.input_names):
                type_info = self.input_type(index)
                if not type_info.is_tensor or (
                    check_support and not self.generator.supports(type_info.element_type)
                ):
                    self._report_unsupported(name, type_info)
                    continue

                try:
                    generate_data(
                        self,
                        index,
                        name,
                        type_info.element_type,
                        type_info.element_count,
                        seed,
                    )
                except UnsupportedTypeError:
                    self._report_unsupported(name, type_info)
                    continue

                seed += 1

        return seed

    def _report_unsupported(self, name: str, type_info: TypeInfo) -> None:
        self.sink.writeline(f"Unsupported input {name} of type {type_info.type_name}")
        logger.warning("skipping input %s: unsupported type %s", name, type_info.type_name)

    def run(self) -> List[Any]:
        """Execute inference with the currently bound inputs.

        Returns:
            The output values, also stored in ``output_values``.

        Raises:
            InferenceError: If the engine faults.
        """
        if self._closed:
            raise InferenceError("cannot run a closed session")
        self.output_values[:] = [None] * len(self.output_names)
        outputs = self.session.run(self.input_names, self.input_values, self.output_names)
        for index, value in enumerate(outputs):
            self.output_values[index] = value
        return self.output_values

    def run_inference(self) -> List[Any]:
        """Run with start/completion markers in the transcript.

        A failure is written to the sink and logged, then re-raised.
        """
        self.sink.write("inference starting")
        self.sink.endl()

        try:
            outputs = self.run()
        except InferenceError as exc:
            self.sink.write("Something went wrong in inference")
            self.sink.endl()
            logger.error("inference failed for %r: %s", self.model, exc)
            raise

        self.sink.write("inference completed")
        self.sink.endl()
        return outputs

    def print_output_values(self) -> None:
        """Write an ``output data:`` section with every output."""
        self.formatter.write_section(
            self.sink, self.output_names, self.output_values, title="output data:"
        )

    def format_outputs(self) -> str:
        return self.formatter.format_tensors(self.output_names, self.output_values)

    def __str__(self) -> str:
        return self.format_outputs()

    def close(self) -> None:
        """Release the session, then the model bytes. Safe to call more than once."""
        if self._closed:
            return
        self._closed = True
        try:
            self._slot.close()
        finally:
            self.model.close()
            self.input_values = [None] * len(self.input_names)

    def __enter__(self) -> "InferenceSession":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()
