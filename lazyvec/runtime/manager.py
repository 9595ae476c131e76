# lazyvec/runtime/manager.py
#
# The buffer manager owns every allocation a LazyVector makes. It hands out
# numpy buffers, performs reallocate-and-transfer growth, and polices the
# configured maximum vector size. Allocation events can be captured by the
# profiler, which is how the "building an expression allocates nothing"
# property is observed from tests.

import time
from typing import NamedTuple, Optional

import numpy as np

from ..errors import CapacityExceededError
from .config import get_config
from .logging import get_logger

log = get_logger("runtime")


class BufferEvent(NamedTuple):
    """One buffer allocation or release observed by an active profiler."""

    kind: str  # "allocate", "reallocate" or "release"
    slots: int
    dtype: str
    duration_ms: float


class BufferManager:
    """
    Allocates and grows the contiguous buffers backing LazyVector.

    A single process-wide instance is shared by all vectors; use
    ``BufferManager.get_instance()`` rather than constructing one.
    """

    _instance: Optional["BufferManager"] = None

    def __init__(self):
        self._recorders: list[list[BufferEvent]] = []
        self.allocations = 0
        self.reallocations = 0
        self.releases = 0

    @classmethod
    def get_instance(cls) -> "BufferManager":
        if cls._instance is None:
            cls._instance = cls()
        return cls._instance

    # ------------------------------------------------------------------
    # Capacity policy
    # ------------------------------------------------------------------

    @property
    def max_size(self) -> int:
        return get_config().vector.max_size

    def check_size(self, size: int) -> None:
        """
        Raise ValueError for a negative ``size`` and CapacityExceededError
        if it is beyond the ceiling.
        """
        if size < 0:
            raise ValueError(f"vector size must be non-negative, got {size}")
        max_size = self.max_size
        if size > max_size:
            log.warning("capacity_exceeded", requested=size, max_size=max_size)
            raise CapacityExceededError(size, max_size)

    def initial_capacity(self, size: int) -> int:
        """
        Capacity for a freshly constructed vector of ``size`` elements.

        Twice the requested size, so the first few pushes do not reallocate,
        but never below the default capacity and never above the ceiling.
        """
        self.check_size(size)
        vector_config = get_config().vector
        return min(max(2 * size, vector_config.default_capacity), vector_config.max_size)

    def grown_capacity(self, capacity: int, required: int) -> int:
        """Double ``capacity`` until it holds ``required`` slots."""
        self.check_size(required)
        vector_config = get_config().vector
        new_capacity = capacity * 2 if capacity else vector_config.default_capacity
        while new_capacity < required:
            new_capacity *= 2
        return min(new_capacity, vector_config.max_size)

    # ------------------------------------------------------------------
    # Allocation
    # ------------------------------------------------------------------

    def allocate(self, capacity: int, dtype: np.dtype) -> np.ndarray:
        """Allocate an uninitialized buffer of ``capacity`` slots."""
        self.check_size(capacity)
        start = time.perf_counter()
        buffer = np.empty(capacity, dtype=dtype)
        self.allocations += 1
        self._record("allocate", capacity, dtype, start)
        log.debug("buffer_allocated", slots=capacity, dtype=str(dtype))
        return buffer

    def reallocate(self, buffer: np.ndarray, length: int, capacity: int) -> np.ndarray:
        """
        Move the first ``length`` live elements of ``buffer`` into a new
        buffer of ``capacity`` slots. Slots past ``length`` are never copied.

        Args:
            buffer: The buffer being replaced. It must not be used afterwards.
            length: Number of live elements to transfer.
            capacity: Slot count of the new buffer (at least ``length``).

        Returns:
            The new buffer.
        """
        self.check_size(capacity)
        start = time.perf_counter()
        new_buffer = np.empty(capacity, dtype=buffer.dtype)
        new_buffer[:length] = buffer[:length]
        self.reallocations += 1
        self._record("reallocate", capacity, buffer.dtype, start)
        log.debug(
            "buffer_reallocated",
            old_slots=buffer.shape[0],
            new_slots=capacity,
            live=length,
        )
        self.release(buffer)
        return new_buffer

    def release(self, buffer: np.ndarray) -> None:
        """Record that a vector has dropped its reference to ``buffer``."""
        self.releases += 1
        self._record("release", buffer.shape[0], buffer.dtype, time.perf_counter())
        log.debug("buffer_released", slots=buffer.shape[0], dtype=str(buffer.dtype))

    # ------------------------------------------------------------------
    # Profiler hooks
    # ------------------------------------------------------------------

    def start_recording(self) -> list[BufferEvent]:
        """Begin capturing events; the returned list fills as they happen."""
        events: list[BufferEvent] = []
        self._recorders.append(events)
        return events

    def stop_recording(self, events: list[BufferEvent]) -> list[BufferEvent]:
        """Stop capturing into ``events`` (recorders may nest)."""
        for position, active in enumerate(self._recorders):
            if active is events:
                del self._recorders[position]
                break
        return events

    def reset(self) -> None:
        """Stop every recorder and zero the counters."""
        self._recorders.clear()
        self.allocations = 0
        self.reallocations = 0
        self.releases = 0

    def _record(self, kind: str, slots: int, dtype: np.dtype, start: float) -> None:
        if not self._recorders:
            return
        event = BufferEvent(kind, slots, str(dtype), (time.perf_counter() - start) * 1000)
        for events in self._recorders:
            events.append(event)


def get_manager() -> BufferManager:
    return BufferManager.get_instance()
