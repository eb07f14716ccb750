"""
Core fuzzing module.

Provides the main API and orchestrates all components:
- InferenceSession: One loaded model, its name tables and value slots
- FuzzHarness: Repeated setup/run/report iterations with seed advancement
- FuzzConfig: Harness configuration and parameters
- Error taxonomy: ModelLoadError, UnsupportedTypeError, InferenceError
"""

__all__ = []
