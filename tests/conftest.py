"""
Pytest configuration and shared fixtures for ort-fuzz-lite tests.

This module provides reusable fixtures for testing, including:
- Tiny ONNX models built with onnx.helper (two-input, zero-input,
  string-input, sequence-input, symbolic-dimension and
  three-input graphs)
- The same models saved to disk and converted to the ORT format
- A fresh Engine per test and an in-memory LogSink
"""

from pathlib import Path

import onnx
import onnxruntime as ort
import pytest
from onnx import TensorProto, helper

from ort_fuzz_lite.core.config import FuzzConfig
from ort_fuzz_lite.engine.engine import Engine
from ort_fuzz_lite.report.log_sink import LogSink

OPSET = 13
IR_VERSION = 8


def make_model(graph: onnx.GraphProto) -> onnx.ModelProto:
    """Wrap a graph in a model the installed onnxruntime can load."""
    model = helper.make_model(
        graph,
        opset_imports=[helper.make_opsetid("", OPSET)],
        producer_name="ort-fuzz-lite-tests",
    )
    model.ir_version = IR_VERSION
    onnx.checker.check_model(model)
    return model


def build_two_input_model() -> onnx.ModelProto:
    """x: float32[4], y: int32[2] -> z = x + sum(float(y)), float32[4]."""
    nodes = [
        helper.make_node("Cast", ["y"], ["y_float"], to=TensorProto.FLOAT),
        helper.make_node("ReduceSum", ["y_float"], ["y_sum"], keepdims=1),
        helper.make_node("Add", ["x", "y_sum"], ["z"]),
    ]
    graph = helper.make_graph(
        nodes,
        "two_input",
        inputs=[
            helper.make_tensor_value_info("x", TensorProto.FLOAT, [4]),
            helper.make_tensor_value_info("y", TensorProto.INT32, [2]),
        ],
        outputs=[helper.make_tensor_value_info("z", TensorProto.FLOAT, [4])],
    )
    return make_model(graph)


def build_zero_input_model() -> onnx.ModelProto:
    """No inputs; one constant float32[2] output."""
    value = helper.make_tensor("value", TensorProto.FLOAT, [2], [1.5, -2.0])
    graph = helper.make_graph(
        [helper.make_node("Constant", [], ["c"], value=value)],
        "zero_input",
        inputs=[],
        outputs=[helper.make_tensor_value_info("c", TensorProto.FLOAT, [2])],
    )
    return make_model(graph)


def build_string_input_model() -> onnx.ModelProto:
    """s: string[1] (unsupported), x: float32[3] -> s_out, x_out."""
    graph = helper.make_graph(
        [
            helper.make_node("Identity", ["s"], ["s_out"]),
            helper.make_node("Relu", ["x"], ["x_out"]),
        ],
        "string_input",
        inputs=[
            helper.make_tensor_value_info("s", TensorProto.STRING, [1]),
            helper.make_tensor_value_info("x", TensorProto.FLOAT, [3]),
        ],
        outputs=[
            helper.make_tensor_value_info("s_out", TensorProto.STRING, [1]),
            helper.make_tensor_value_info("x_out", TensorProto.FLOAT, [3]),
        ],
    )
    return make_model(graph)


def build_symbolic_dim_model() -> onnx.ModelProto:
    """x: float32[batch, 3] -> y = relu(x)."""
    graph = helper.make_graph(
        [helper.make_node("Relu", ["x"], ["y"])],
        "symbolic_dim",
        inputs=[helper.make_tensor_value_info("x", TensorProto.FLOAT, ["batch", 3])],
        outputs=[helper.make_tensor_value_info("y", TensorProto.FLOAT, ["batch", 3])],
    )
    return make_model(graph)


def build_sequence_input_model() -> onnx.ModelProto:
    """seq: seq(tensor(float)) (non-tensor), x: float32[3] -> n, x_out."""
    graph = helper.make_graph(
        [
            helper.make_node("SequenceLength", ["seq"], ["n"]),
            helper.make_node("Relu", ["x"], ["x_out"]),
        ],
        "sequence_input",
        inputs=[
            helper.make_tensor_sequence_value_info("seq", TensorProto.FLOAT, None),
            helper.make_tensor_value_info("x", TensorProto.FLOAT, [3]),
        ],
        outputs=[
            helper.make_tensor_value_info("n", TensorProto.INT64, []),
            helper.make_tensor_value_info("x_out", TensorProto.FLOAT, [3]),
        ],
    )
    return make_model(graph)


def build_three_input_model() -> onnx.ModelProto:
    """a, b, c: float32[3] -> total = a + b + c."""
    graph = helper.make_graph(
        [helper.make_node("Sum", ["a", "b", "c"], ["total"])],
        "three_input",
        inputs=[
            helper.make_tensor_value_info(name, TensorProto.FLOAT, [3])
            for name in ("a", "b", "c")
        ],
        outputs=[helper.make_tensor_value_info("total", TensorProto.FLOAT, [3])],
    )
    return make_model(graph)


@pytest.fixture
def two_input_model() -> onnx.ModelProto:
    return build_two_input_model()


@pytest.fixture
def zero_input_model() -> onnx.ModelProto:
    return build_zero_input_model()


@pytest.fixture
def string_input_model() -> onnx.ModelProto:
    return build_string_input_model()


@pytest.fixture
def symbolic_dim_model() -> onnx.ModelProto:
    return build_symbolic_dim_model()


@pytest.fixture
def sequence_input_model() -> onnx.ModelProto:
    return build_sequence_input_model()


@pytest.fixture
def three_input_model() -> onnx.ModelProto:
    return build_three_input_model()


@pytest.fixture
def two_input_model_path(tmp_path: Path, two_input_model: onnx.ModelProto) -> Path:
    """The two-input model saved as an .onnx file."""
    path = tmp_path / "two_input.onnx"
    onnx.save(two_input_model, str(path))
    return path


@pytest.fixture
def two_input_ort_bytes(tmp_path: Path, two_input_model_path: Path) -> bytes:
    """The two-input model converted to the engine's compact ORT format."""
    ort_path = tmp_path / "two_input.ort"
    options = ort.SessionOptions()
    options.graph_optimization_level = ort.GraphOptimizationLevel.ORT_ENABLE_BASIC
    options.optimized_model_filepath = str(ort_path)
    options.add_session_config_entry("session.save_model_format", "ORT")
    ort.InferenceSession(
        str(two_input_model_path), options, providers=["CPUExecutionProvider"]
    )
    return ort_path.read_bytes()


@pytest.fixture
def engine() -> Engine:
    """A fresh engine with its own allocator, so statistics start at zero."""
    return Engine(FuzzConfig())


@pytest.fixture
def sink() -> LogSink:
    return LogSink.in_memory()
