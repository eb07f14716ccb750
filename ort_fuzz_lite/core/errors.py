"""
Error taxonomy for the fuzz harness.

Every fault the harness surfaces derives from FuzzHarnessError so callers can
catch the whole family at one site. Engine-native exceptions are wrapped at the
engine boundary and chained with ``raise ... from``.
"""

from typing import Optional


class FuzzHarnessError(Exception):
    """Base class for all harness errors."""


class ModelLoadError(FuzzHarnessError):
    """The engine rejected the model (malformed graph, unsupported op, format mismatch).

    Fatal to the harness instance being constructed; never retried.
    """

    def __init__(self, message: str, source: Optional[str] = None) -> None:
        super().__init__(message)
        self.source = source


class UnsupportedTypeError(FuzzHarnessError):
    """An input's declared type has no data generator.

    The affected input is skipped; the run continues with fewer bound inputs.
    """

    def __init__(self, message: str, type_name: Optional[str] = None) -> None:
        super().__init__(message)
        self.type_name = type_name


class InferenceError(FuzzHarnessError):
    """The engine faulted while executing inference.

    Fatal to the run but not to the process.
    """
