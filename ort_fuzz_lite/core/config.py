"""
Fuzz harness configuration.

This module defines the FuzzConfig class which stores the parameters of a
fuzz run: the starting seed, the value ranges used for synthesized data,
how unknown dimensions are sized, and the engine session options.
"""

from typing import Any, Dict, List, Optional


class FuzzConfig:
    """Configuration class for the fuzz harness.

    Attributes:
        seed: Starting seed for the first input of the first iteration.
        float_low: Inclusive lower bound for floating point values.
        float_high: Exclusive upper bound for floating point values.
        int_low: Inclusive lower bound for integer values.
        int_high: Exclusive upper bound for integer values.
        dynamic_dim_value: Size substituted for symbolic or unknown dimensions.
        providers: Engine execution providers, in priority order.
        log_severity_level: Engine log severity (0 verbose .. 4 fatal).
        intra_op_num_threads: Engine intra-op threads, 0 for the engine default.
        num_iterations: Number of setup/run/report iterations per harness run.
    """

    def __init__(
        self,
        seed: int = 0,
        float_low: float = -10.0,
        float_high: float = 10.0,
        int_low: int = -100,
        int_high: int = 100,
        dynamic_dim_value: int = 1,
        providers: Optional[List[str]] = None,
        log_severity_level: int = 3,
        intra_op_num_threads: int = 0,
        num_iterations: int = 1,
        **kwargs: Any,
    ) -> None:
        """Initialize FuzzConfig.

        Args:
            seed: Starting seed for the first input of the first iteration.
            float_low: Inclusive lower bound for floating point values.
            float_high: Exclusive upper bound for floating point values.
            int_low: Inclusive lower bound for integer values.
            int_high: Exclusive upper bound for integer values.
            dynamic_dim_value: Size substituted for symbolic or unknown dimensions.
            providers: Engine execution providers (default: CPU only).
            log_severity_level: Engine log severity (0 verbose .. 4 fatal).
            intra_op_num_threads: Engine intra-op threads, 0 for the default.
            num_iterations: Number of iterations per harness run.
            **kwargs: Additional configuration parameters (ignored).
        """
        self.seed = seed
        self.float_low = float_low
        self.float_high = float_high
        self.int_low = int_low
        self.int_high = int_high
        self.dynamic_dim_value = dynamic_dim_value
        self.providers = (
            list(providers) if providers is not None else ["CPUExecutionProvider"]
        )
        self.log_severity_level = log_severity_level
        self.intra_op_num_threads = intra_op_num_threads
        self.num_iterations = num_iterations

        self._validate()

    def _validate(self) -> None:
        """Validate configuration parameters.

        Raises:
            ValueError: If configuration parameters are invalid.
        """
        if self.seed < 0:
            raise ValueError(f"seed must be non-negative, got {self.seed}")

        if self.float_low >= self.float_high:
            raise ValueError(
                f"float_low ({self.float_low}) must be less than "
                f"float_high ({self.float_high})"
            )
        if self.int_low >= self.int_high:
            raise ValueError(
                f"int_low ({self.int_low}) must be less than "
                f"int_high ({self.int_high})"
            )

        if self.dynamic_dim_value < 1:
            raise ValueError(
                f"dynamic_dim_value must be positive, got {self.dynamic_dim_value}"
            )
        if not self.providers:
            raise ValueError("providers cannot be empty")
        if not 0 <= self.log_severity_level <= 4:
            raise ValueError(
                f"log_severity_level must be in [0, 4], got {self.log_severity_level}"
            )
        if self.intra_op_num_threads < 0:
            raise ValueError(
                f"intra_op_num_threads must be non-negative, "
                f"got {self.intra_op_num_threads}"
            )
        if self.num_iterations < 1:
            raise ValueError(
                f"num_iterations must be positive, got {self.num_iterations}"
            )

    @classmethod
    def from_dict(cls, values: Dict[str, Any]) -> "FuzzConfig":
        """Create a configuration from a dictionary, ignoring unknown keys."""
        return cls(**values)

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to a dictionary.

        Returns:
            Dictionary containing all configuration parameters.
        """
        return {
            "seed": self.seed,
            "float_low": self.float_low,
            "float_high": self.float_high,
            "int_low": self.int_low,
            "int_high": self.int_high,
            "dynamic_dim_value": self.dynamic_dim_value,
            "providers": list(self.providers),
            "log_severity_level": self.log_severity_level,
            "intra_op_num_threads": self.intra_op_num_threads,
            "num_iterations": self.num_iterations,
        }

    def __repr__(self) -> str:
        return (
            f"FuzzConfig("
            f"seed={self.seed}, "
            f"float_range=[{self.float_low}, {self.float_high}), "
            f"int_range=[{self.int_low}, {self.int_high}), "
            f"dynamic_dim_value={self.dynamic_dim_value}, "
            f"providers={self.providers}, "
            f"num_iterations={self.num_iterations}"
            f")"
        )
