"""
Fuzz transcript reporting.

Provides:
- LogSink: Explicitly passed text sink with section markers
- ResultFormatter: One line per named tensor
"""

from ort_fuzz_lite.report.formatter import ResultFormatter
from ort_fuzz_lite.report.log_sink import LogSink

__all__ = ["LogSink", "ResultFormatter"]
