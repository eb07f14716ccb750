"""
Random input data generation.

Provides:
- RandomTensorGenerator: Seed-reproducible flat tensor data per element type
"""

from ort_fuzz_lite.sampling.random_data import RandomTensorGenerator

__all__ = ["RandomTensorGenerator"]
