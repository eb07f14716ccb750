"""
Fuzz loop over one InferenceSession.

FuzzHarness repeats the setup-run-report cycle for a configured number of
iterations. The seed carries over between iterations (the next iteration
starts where the previous one's seed advancement stopped), so a whole run is
reproducible from the starting seed.
"""

import logging
import os
from dataclasses import dataclass
from typing import Dict, List, Optional, Union

import onnx

from ort_fuzz_lite.core.config import FuzzConfig
from ort_fuzz_lite.core.errors import InferenceError
from ort_fuzz_lite.core.inference_session import InferenceSession, InputGeneratorFunction
from ort_fuzz_lite.engine.engine import Engine, ModelFormat
from ort_fuzz_lite.report.log_sink import LogSink

logger = logging.getLogger(__name__)


@dataclass
class IterationResult:
    """Outcome of one fuzz iteration.

    Attributes:
        iteration: Zero-based iteration number.
        seed: Seed used for the first generated input of the iteration.
        bound_inputs: Number of inputs that received data.
        succeeded: Whether inference completed.
        error: Error message if inference failed.
    """

    iteration: int
    seed: int
    bound_inputs: int
    succeeded: bool
    error: Optional[str] = None


class FuzzHarness:
    """Drives repeated fuzz iterations over a session."""

    def __init__(
        self,
        session: InferenceSession,
        config: Optional[FuzzConfig] = None,
        generate_data: Optional[InputGeneratorFunction] = None,
    ) -> None:
        """Initialize FuzzHarness.

        Args:
            session: Session to fuzz; the harness does not close it.
            config: Seed and iteration count (default: the session engine's config).
            generate_data: Per-input hook passed to ``setup_input``.
        """
        self.session = session
        self.config = config if config is not None else session.engine.config
        self.generate_data = generate_data
        self.results: List[IterationResult] = []
        self.next_seed = self.config.seed

    def run_iteration(self, stop_on_error: bool = True) -> IterationResult:
        """Run one setup-run-report cycle.

        Args:
            stop_on_error: Re-raise InferenceError instead of recording it.

        Raises:
            InferenceError: If inference fails and stop_on_error is set.
        """
        iteration = len(self.results)
        seed = self.next_seed

        self.session.clear_inputs()
        self.next_seed = self.session.setup_input(self.generate_data, seed)
        bound = sum(value is not None for value in self.session.input_values)

        try:
            self.session.run_inference()
        except InferenceError as exc:
            result = IterationResult(iteration, seed, bound, succeeded=False, error=str(exc))
            self.results.append(result)
            if stop_on_error:
                raise
            logger.warning("iteration %d (seed %d) failed: %s", iteration, seed, exc)
            return result

        self.session.print_output_values()
        result = IterationResult(iteration, seed, bound, succeeded=True)
        self.results.append(result)
        return result

    def run(self, stop_on_error: bool = True) -> List[IterationResult]:
        """Run ``config.num_iterations`` iterations and return their results."""
        for _ in range(self.config.num_iterations):
            self.run_iteration(stop_on_error=stop_on_error)
        return self.results

    def get_stats(self) -> Dict[str, int]:
        """Get run statistics.

        Returns:
            Dictionary with iterations, succeeded and failed counts.
        """
        succeeded = sum(result.succeeded for result in self.results)
        return {
            "iterations": len(self.results),
            "succeeded": succeeded,
            "failed": len(self.results) - succeeded,
        }


def fuzz_model(
    model: Union[
        str, "os.PathLike[str]", onnx.ModelProto, bytes, bytearray, memoryview
    ],
    seed: int = 0,
    sink: Optional[LogSink] = None,
    engine: Optional[Engine] = None,
    format_hint: ModelFormat = ModelFormat.ORT,
) -> List[IterationResult]:
    """Fuzz a model once from a path, a ModelProto or raw bytes.

    Raw bytes are loaded with ``format_hint`` (the engine's ORT format by
    default). The session is closed before returning.

    Raises:
        ModelLoadError: If the engine rejects the model.
        InferenceError: If inference fails.
    """
    if isinstance(model, onnx.ModelProto):
        session = InferenceSession.from_model_proto(model, engine, sink)
    elif isinstance(model, (bytes, bytearray, memoryview)):
        session = InferenceSession.from_bytes(model, format_hint, engine, sink)
    else:
        session = InferenceSession.from_path(model, engine, sink)

    with session:
        config = FuzzConfig.from_dict({**session.engine.config.to_dict(), "seed": seed})
        return FuzzHarness(session, config).run()
