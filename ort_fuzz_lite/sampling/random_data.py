"""
Random tensor data generation.

This module implements the seeded generator that synthesizes input data for
fuzzing. Each call builds its own ``torch.Generator`` from the seed, so the
output depends only on (element_type, count, seed) and a failing input can be
replayed from the seed alone.
"""

from typing import Callable, Dict

import numpy as np
import torch

from ort_fuzz_lite.core.errors import UnsupportedTypeError
from ort_fuzz_lite.engine.types import ElementType


def _uniform(
    dtype: torch.dtype,
) -> Callable[["RandomTensorGenerator", int, torch.Generator], torch.Tensor]:
    def generate(gen: "RandomTensorGenerator", count: int, rng: torch.Generator) -> torch.Tensor:
        # float16 is drawn in float32 and narrowed
        draw_dtype = torch.float64 if dtype == torch.float64 else torch.float32
        values = torch.rand(count, generator=rng, dtype=draw_dtype)
        values = values * (gen.float_high - gen.float_low) + gen.float_low
        return values.to(dtype)

    return generate


def _integers(
    dtype: torch.dtype,
) -> Callable[["RandomTensorGenerator", int, torch.Generator], torch.Tensor]:
    info = torch.iinfo(dtype)

    def generate(gen: "RandomTensorGenerator", count: int, rng: torch.Generator) -> torch.Tensor:
        low = max(gen.int_low, info.min)
        high = min(gen.int_high, info.max + 1)
        if low >= high:
            # Configured range lies outside the type; fall back to its full range
            low, high = info.min, info.max + 1
        return torch.randint(low, high, (count,), generator=rng, dtype=dtype)

    return generate


def _booleans(gen: "RandomTensorGenerator", count: int, rng: torch.Generator) -> torch.Tensor:
    return torch.randint(0, 2, (count,), generator=rng, dtype=torch.uint8).to(torch.bool)


# One arm per supported element type
_GENERATORS: Dict[ElementType, Callable[["RandomTensorGenerator", int, torch.Generator], torch.Tensor]] = {
    ElementType.FLOAT: _uniform(torch.float32),
    ElementType.DOUBLE: _uniform(torch.float64),
    ElementType.FLOAT16: _uniform(torch.float16),
    ElementType.INT8: _integers(torch.int8),
    ElementType.UINT8: _integers(torch.uint8),
    ElementType.INT16: _integers(torch.int16),
    ElementType.INT32: _integers(torch.int32),
    ElementType.INT64: _integers(torch.int64),
    ElementType.BOOL: _booleans,
}


class RandomTensorGenerator:
    """Seed-reproducible generator of flat tensor data.

    Attributes:
        float_low: Inclusive lower bound for floating point values.
        float_high: Exclusive upper bound for floating point values.
        int_low: Inclusive lower bound for integers, clamped per type.
        int_high: Exclusive upper bound for integers, clamped per type.
    """

    def __init__(
        self,
        float_low: float = -10.0,
        float_high: float = 10.0,
        int_low: int = -100,
        int_high: int = 100,
    ) -> None:
        if float_low >= float_high:
            raise ValueError(
                f"float_low ({float_low}) must be less than float_high ({float_high})"
            )
        if int_low >= int_high:
            raise ValueError(
                f"int_low ({int_low}) must be less than int_high ({int_high})"
            )
        self.float_low = float_low
        self.float_high = float_high
        self.int_low = int_low
        self.int_high = int_high

    @classmethod
    def from_config(cls, config) -> "RandomTensorGenerator":
        """Build a generator using the value ranges of a FuzzConfig."""
        return cls(
            float_low=config.float_low,
            float_high=config.float_high,
            int_low=config.int_low,
            int_high=config.int_high,
        )

    @staticmethod
    def supports(element_type: ElementType) -> bool:
        """Check whether data can be generated for an element type."""
        return element_type in _GENERATORS

    def generate(self, element_type: ElementType, count: int, seed: int) -> np.ndarray:
        """Generate ``count`` values of ``element_type`` from ``seed``.

        Args:
            element_type: Declared element type of the tensor.
            count: Number of values to generate.
            seed: Seed for this tensor's data.

        Returns:
            1-D array of length ``count`` with the matching numpy dtype.

        Raises:
            UnsupportedTypeError: If no generator exists for the element type.
            ValueError: If count is negative.
        """
        arm = _GENERATORS.get(element_type)
        if arm is None:
            name = getattr(element_type, "name", str(element_type))
            raise UnsupportedTypeError(
                f"no data generator for element type {name}", type_name=name
            )
        if count < 0:
            raise ValueError(f"count must be non-negative, got {count}")

        rng = torch.Generator(device="cpu")
        rng.manual_seed(seed)
        return arm(self, count, rng).numpy()
