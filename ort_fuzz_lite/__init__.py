"""
ort_fuzz_lite: A lightweight randomized-input fuzz harness for ONNX Runtime models.

This package provides:
- Model ingestion from a file path, an onnx.ModelProto or raw bytes
- Introspection of declared input types and shapes
- Seed-reproducible random tensor data for every supported input
- Inference execution with failures logged and re-raised
- Transcripts of inputs and outputs written to an explicit log sink
"""

from ort_fuzz_lite.core.config import FuzzConfig
from ort_fuzz_lite.core.errors import (
    FuzzHarnessError,
    InferenceError,
    ModelLoadError,
    UnsupportedTypeError,
)
from ort_fuzz_lite.core.harness import FuzzHarness, IterationResult, fuzz_model
from ort_fuzz_lite.core.inference_session import InferenceSession
from ort_fuzz_lite.engine.engine import Engine, ModelFormat
from ort_fuzz_lite.engine.types import ElementType
from ort_fuzz_lite.model.model_handle import ModelHandle, ModelSource
from ort_fuzz_lite.report.log_sink import LogSink
from ort_fuzz_lite.sampling.random_data import RandomTensorGenerator

__version__ = "0.1.0"
__author__ = "ort-fuzz-lite contributors"

__all__ = [
    "FuzzConfig",
    "FuzzHarnessError",
    "InferenceError",
    "ModelLoadError",
    "UnsupportedTypeError",
    "FuzzHarness",
    "IterationResult",
    "fuzz_model",
    "InferenceSession",
    "Engine",
    "ModelFormat",
    "ElementType",
    "ModelHandle",
    "ModelSource",
    "LogSink",
    "RandomTensorGenerator",
]
