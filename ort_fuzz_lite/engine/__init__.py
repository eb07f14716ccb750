"""
Engine collaborator interface.

Provides:
- Engine: Loads models from paths or byte buffers into sessions
- EngineSession: Counts, names, type descriptions and run
- ModelFormat: Serialization hint for byte buffers
- TypeInfo / ElementType / ValueKind: Declared input and output types
"""

from ort_fuzz_lite.engine.engine import Engine, EngineSession, ModelFormat
from ort_fuzz_lite.engine.types import ElementType, TypeInfo, ValueKind

__all__ = ["Engine", "EngineSession", "ModelFormat", "ElementType", "TypeInfo", "ValueKind"]
