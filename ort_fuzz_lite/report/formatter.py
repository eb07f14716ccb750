"""
Rendering of named tensors for fuzz transcripts.

Each tensor renders as one line ``<name> = [v0, v1, ..., vn-1]``. Values are
printed per element kind: floats with six significant digits, booleans as
1/0, integers verbatim. Anything that is not an array renders as
``<name> = Unsupported``.
"""

from typing import Any, Callable, Dict, Optional, Sequence

import numpy as np

from ort_fuzz_lite.report.log_sink import LogSink

UNSUPPORTED = "Unsupported"


def _format_float(value: Any) -> str:
    return f"{float(value):g}"


def _format_int(value: Any) -> str:
    return str(int(value))


# numpy dtype kind -> element printer
_PRINTERS: Dict[str, Callable[[Any], str]] = {
    "f": _format_float,
    "i": _format_int,
    "u": _format_int,
    "b": _format_int,
}


def format_values(values: np.ndarray) -> str:
    """Render the elements of an array as ``[v0, v1, ...]`` in C order."""
    printer = _PRINTERS.get(values.dtype.kind, str)
    return "[" + ", ".join(printer(v) for v in values.reshape(-1)) + "]"


class ResultFormatter:
    """Formats named tensors, one line per tensor, in name-table order."""

    def format_tensor(self, name: str, value: Any) -> str:
        if not isinstance(value, np.ndarray):
            return f"{name} = {UNSUPPORTED}"
        return f"{name} = {format_values(value)}"

    def format_tensors(self, names: Sequence[str], values: Sequence[Any]) -> str:
        if len(names) != len(values):
            raise ValueError(
                f"names ({len(names)}) and values ({len(values)}) must have equal length"
            )
        return "".join(
            self.format_tensor(name, value) + "\n" for name, value in zip(names, values)
        )

    def write_tensor(self, sink: LogSink, name: str, value: Any) -> None:
        sink.writeline(self.format_tensor(name, value))

    def write_section(
        self,
        sink: LogSink,
        names: Sequence[str],
        values: Sequence[Any],
        title: Optional[str] = None,
    ) -> None:
        """Write a titled section of tensors and flush it."""
        with sink.section(title):
            sink.write(self.format_tensors(names, values))
