"""
Model acquisition.

Provides:
- ModelHandle: Owner of model bytes for the path, ModelProto and raw byte paths
- ModelSource: Acquisition mode enum
"""

from ort_fuzz_lite.model.model_handle import ModelHandle, ModelSource

__all__ = ["ModelHandle", "ModelSource"]
