"""Tests for configuration, the buffer manager and logging."""

import numpy as np
import pytest

from lazyvec import CapacityExceededError, LazyVector, setup_logging
from lazyvec.runtime.config import Config, get_config
from lazyvec.runtime.manager import BufferManager, get_manager


class TestConfig:
    """Settings come from LAZYVEC_* variables."""

    def test_defaults(self):
        config = Config()
        assert config.vector.default_capacity == 4
        assert config.vector.max_size == 1_000_000_000
        assert config.debug_checks is False
        assert config.observability.log_level == "INFO"

    def test_environment_override(self, configure):
        configure(vector__default_capacity=16, debug_checks=1)
        config = get_config()
        assert config.vector.default_capacity == 16
        assert config.debug_checks is True
        assert LazyVector().capacity() == 16

    def test_get_config_is_cached(self):
        assert get_config() is get_config()

    def test_invalid_value_rejected(self, configure):
        configure(vector__max_size=0)
        with pytest.raises(ValueError):
            get_config()


class TestBufferManager:
    """Capacity policy and reallocate-and-transfer."""

    def test_singleton(self):
        assert get_manager() is BufferManager.get_instance()

    def test_initial_capacity(self):
        manager = get_manager()
        assert manager.initial_capacity(0) == 4
        assert manager.initial_capacity(1) == 4
        assert manager.initial_capacity(3) == 6

    def test_grown_capacity_doubles(self):
        manager = get_manager()
        assert manager.grown_capacity(4, 5) == 8
        assert manager.grown_capacity(4, 20) == 32
        assert manager.grown_capacity(0, 1) == 4

    def test_grown_capacity_clamped(self, configure):
        configure(vector__max_size=10)
        assert get_manager().grown_capacity(8, 9) == 10
        with pytest.raises(CapacityExceededError) as exc_info:
            get_manager().grown_capacity(10, 11)
        assert exc_info.value.requested == 11
        assert exc_info.value.max_size == 10

    def test_capacity_error_is_memory_error(self, configure):
        configure(vector__max_size=1)
        with pytest.raises(MemoryError):
            get_manager().check_size(2)

    def test_reallocate_transfers_live_elements(self):
        manager = get_manager()
        buffer = manager.allocate(4, np.dtype(object))
        buffer[:2] = ["x", "y"]
        grown = manager.reallocate(buffer, 2, 8)
        assert grown.shape == (8,)
        assert grown[:2].tolist() == ["x", "y"]
        # Slots past the live range are not copied.
        assert grown[2] is None

    def test_counters(self):
        manager = get_manager()
        allocations, reallocations, releases = (
            manager.allocations, manager.reallocations, manager.releases,
        )
        v = LazyVector()
        for i in range(5):
            v.push(i)
        assert manager.allocations == allocations + 1
        assert manager.reallocations == reallocations + 1
        assert manager.releases == releases + 1

    def test_each_test_starts_from_zero(self):
        manager = get_manager()
        assert manager.allocations == 0
        assert manager.reallocations == 0
        assert manager.releases == 0

    def test_reset_stops_recorders(self):
        manager = get_manager()
        events = manager.start_recording()
        manager.allocate(4, np.dtype(object))
        manager.reset()
        manager.allocate(4, np.dtype(object))
        assert [event.kind for event in events] == ["allocate"]
        assert manager.allocations == 1


class TestLogging:
    """setup_logging renders library events."""

    def test_reallocation_logged_at_debug(self, configure, capsys):
        configure(observability__log_level="DEBUG", observability__log_format="json")
        setup_logging()
        v = LazyVector()
        for i in range(5):
            v.push(i)
        err = capsys.readouterr().err
        assert "buffer_reallocated" in err
        assert '"new_slots": 8' in err
        assert "buffer_released" in err

    def test_materialization_logged(self, configure, capsys):
        configure(observability__log_level="DEBUG")
        setup_logging()
        a = LazyVector([1, 2])
        (a + a).tolist(2)
        err = capsys.readouterr().err
        assert "expression_materialized" in err
        assert "out0 = (in0 + in0)" in err

    def test_capacity_warning(self, configure, capsys):
        configure(vector__max_size=2)
        setup_logging()
        with pytest.raises(CapacityExceededError):
            LazyVector([1, 2, 3])
        assert "capacity_exceeded" in capsys.readouterr().err

    def test_silent_without_setup(self, capsys):
        v = LazyVector()
        for i in range(5):
            v.push(i)
        captured = capsys.readouterr()
        assert captured.out == ""
        assert "buffer_reallocated" not in captured.err
