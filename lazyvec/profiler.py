# lazyvec/profiler.py
#
# Defines the Python-side logic for the profiler, providing a clean
# API and context manager for observing buffer allocations in a block.

from .runtime.manager import get_manager


class profile:
    """
    A context manager that records every buffer allocation, reallocation
    and release made by LazyVector inside the block.

    Example:
        with lazyvec.profile() as p:
            d -= (a + b + c) + (b / c) * (a / c)
        assert p.allocations == 0
        p.print_report()
    """
    def __enter__(self):
        self.events = get_manager().start_recording()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        get_manager().stop_recording(self.events)

    def _allocation_events(self):
        return [event for event in self.events if event.kind != "release"]

    @property
    def allocations(self) -> int:
        """Number of buffers allocated or reallocated so far."""
        return len(self._allocation_events())

    @property
    def releases(self) -> int:
        return sum(1 for event in self.events if event.kind == "release")

    @property
    def slots(self) -> int:
        """Slots allocated so far; released buffers are not subtracted."""
        return sum(event.slots for event in self._allocation_events())

    def print_report(self):
        print("--- lazyvec Allocation Report ---")
        if not self.events:
            print("No allocations captured.")
            return

        total_time = sum(event.duration_ms for event in self.events)

        print(f"Allocations: {self.allocations}  Releases: {self.releases}  "
              f"Slots: {self.slots}  Time: {total_time:.4f} ms")
        print("---------------------------------")

        for event in self.events:
            print(f"{event.kind:<12} | {event.slots:>12} slots | {event.dtype:<10} | {event.duration_ms:>10.4f} ms")
        print("---------------------------------")
