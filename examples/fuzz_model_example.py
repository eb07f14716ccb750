"""
Example demonstrating a fuzz run with InferenceSession and FuzzHarness.

This example builds a small two-input ONNX model in memory, fuzzes it for a
few iterations with a fixed starting seed, and prints the transcript and the
resource statistics afterwards.
"""

import logging

from onnx import TensorProto, helper

from ort_fuzz_lite import Engine, FuzzConfig, FuzzHarness, InferenceSession, LogSink

logging.basicConfig(level=logging.INFO)

# Build a model: z = x * cast(y)
graph = helper.make_graph(
    [
        helper.make_node("Cast", ["y"], ["y_float"], to=TensorProto.FLOAT),
        helper.make_node("Mul", ["x", "y_float"], ["z"]),
    ],
    "example",
    inputs=[
        helper.make_tensor_value_info("x", TensorProto.FLOAT, [4]),
        helper.make_tensor_value_info("y", TensorProto.INT32, [4]),
    ],
    outputs=[helper.make_tensor_value_info("z", TensorProto.FLOAT, [4])],
)
model = helper.make_model(graph, opset_imports=[helper.make_opsetid("", 13)])
model.ir_version = 8

# Configure the run
config = FuzzConfig(seed=42, num_iterations=3, int_low=-3, int_high=4)
engine = Engine(config)
sink = LogSink()

print("Fuzzing in-memory model...")
with InferenceSession.from_model_proto(model, engine, sink) as session:
    harness = FuzzHarness(session)
    results = harness.run(stop_on_error=False)

print("\nIteration results:")
for result in results:
    status = "ok" if result.succeeded else f"failed: {result.error}"
    print(f"  #{result.iteration} seed={result.seed} inputs={result.bound_inputs} {status}")

print("\nEngine stats:", engine.get_stats())
print("Allocator stats:", engine.allocator.get_stats())
