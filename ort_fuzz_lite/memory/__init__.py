"""
Memory management for model buffers.

Provides:
- EngineAllocator: Paired alloc/free of model buffers with usage statistics
- ModelBuffer: Allocator-owned byte buffer
"""

from ort_fuzz_lite.memory.allocator import EngineAllocator, ModelBuffer

__all__ = ["EngineAllocator", "ModelBuffer"]
