"""
Engine allocator for model byte buffers.

This module implements the EngineAllocator that hands out the byte buffers
holding in-memory models before they are given to the engine. Every buffer
is tracked from allocation until it is freed, so the allocator can enforce:
- 1:1 pairing of alloc and free per buffer
- freeing through the same allocator instance that produced the buffer
- usage statistics for leak checks
- thread-safe bookkeeping when one allocator is shared process-wide
"""

import logging
import threading
from dataclasses import dataclass, field
from typing import Dict

logger = logging.getLogger(__name__)


@dataclass(eq=False)
class ModelBuffer:
    """A byte buffer produced by an EngineAllocator.

    Attributes:
        buffer_id: Allocator-unique identifier.
        size: Number of bytes in the buffer.
        data: Backing storage, writable until the buffer is freed.
        allocator: The allocator that produced this buffer.
    """

    buffer_id: int
    size: int
    data: bytearray = field(repr=False)
    allocator: "EngineAllocator" = field(repr=False)

    def view(self) -> memoryview:
        """Return a writable view over the buffer contents."""
        return memoryview(self.data)

    def to_bytes(self) -> bytes:
        """Return an immutable copy of the buffer contents."""
        return bytes(self.data)


class EngineAllocator:
    """Allocator for engine-managed model buffers.

    Buffers are zero-initialized on allocation and released back with
    ``free``. Freeing a buffer twice, or freeing it through a different
    allocator, raises ValueError.
    """

    def __init__(self) -> None:
        """Initialize an empty allocator."""
        self._next_id = 0

        # Live buffers: buffer_id -> buffer
        self._live: Dict[int, ModelBuffer] = {}

        self.total_allocations = 0
        self.total_frees = 0

        # Thread safety lock
        self.lock = threading.Lock()

    def alloc(self, size: int) -> ModelBuffer:
        """Allocate a zero-filled buffer.

        Args:
            size: Number of bytes to allocate.

        Returns:
            The newly allocated buffer.

        Raises:
            ValueError: If size is negative.
        """
        if size < 0:
            raise ValueError(f"size must be non-negative, got {size}")

        with self.lock:
            buffer = ModelBuffer(
                buffer_id=self._next_id,
                size=size,
                data=bytearray(size),
                allocator=self,
            )
            self._next_id += 1
            self._live[buffer.buffer_id] = buffer
            self.total_allocations += 1

        logger.debug("allocated model buffer %d (%d bytes)", buffer.buffer_id, size)
        return buffer

    def free(self, buffer: ModelBuffer) -> None:
        """Release a buffer back to the allocator.

        Args:
            buffer: Buffer previously returned by ``alloc`` on this allocator.

        Raises:
            ValueError: If the buffer belongs to another allocator or was
                already freed.
        """
        if buffer.allocator is not self:
            raise ValueError(
                f"buffer {buffer.buffer_id} was not allocated by this allocator"
            )

        with self.lock:
            if self._live.pop(buffer.buffer_id, None) is None:
                raise ValueError(f"buffer {buffer.buffer_id} was already freed")
            self.total_frees += 1

        # Drop the storage so stale views cannot be handed to the engine
        buffer.data = bytearray()
        logger.debug("freed model buffer %d", buffer.buffer_id)

    def is_live(self, buffer: ModelBuffer) -> bool:
        """Check whether a buffer is allocated and not yet freed."""
        with self.lock:
            return self._live.get(buffer.buffer_id) is buffer

    def get_stats(self) -> Dict[str, int]:
        """Get allocator statistics.

        Returns:
            Dictionary with keys:
            - total_allocations: Buffers ever allocated
            - total_frees: Buffers ever freed
            - live_buffers: Buffers currently allocated
            - live_bytes: Bytes currently allocated
        """
        with self.lock:
            return {
                "total_allocations": self.total_allocations,
                "total_frees": self.total_frees,
                "live_buffers": len(self._live),
                "live_bytes": sum(b.size for b in self._live.values()),
            }
