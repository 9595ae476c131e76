"""Tests for the LazyVector container contract."""

import copy

import numpy as np
import pytest

from lazyvec import CapacityExceededError, LazyVector, OutOfRangeError


class TestConstruction:
    """Every construction path sizes, fills and reserves as documented."""

    def test_literal_round_trip(self):
        values = [3, 1, 4, 1, 5, 9]
        v = LazyVector(values)
        assert v.size() == len(values)
        assert [v[i] for i in range(len(values))] == values

    def test_capacity_is_twice_the_size(self):
        v = LazyVector(range(10))
        assert v.capacity() == 20

    def test_empty_vector_gets_default_capacity(self):
        v = LazyVector()
        assert v.empty()
        assert v.size() == 0
        assert v.capacity() == 4

    def test_filled_with_value(self):
        v = LazyVector.filled(3, 7)
        assert v.tolist() == [7, 7, 7]
        assert v.capacity() == 6

    def test_filled_numeric_defaults_to_zero(self):
        v = LazyVector.filled(4, dtype=np.float64)
        assert v.tolist() == [0.0, 0.0, 0.0, 0.0]
        assert v.dtype == np.float64

    def test_filled_object_defaults_to_none(self):
        assert LazyVector.filled(2).tolist() == [None, None]

    def test_from_range(self):
        v = LazyVector.from_range([10, 20, 30, 40, 50], 1, 4)
        assert v.tolist() == [20, 30, 40]

    def test_from_numpy_keeps_dtype(self):
        v = LazyVector(np.arange(3, dtype=np.int32))
        assert v.dtype == np.int32
        assert v.tolist() == [0, 1, 2]

    def test_copy_is_independent(self):
        v = LazyVector([1, 2, 3])
        w = v.copy()
        w[0] = 100
        assert v.tolist() == [1, 2, 3]
        assert w.tolist() == [100, 2, 3]

    def test_copy_copies_elements(self):
        a = LazyVector([[1], [2]])
        x = a.copy()
        x += LazyVector([[9], [9]])
        assert x.tolist() == [[1, 9], [2, 9]]
        assert a.tolist() == [[1], [2]]

    def test_copy_module_support(self):
        v = LazyVector([[[1]], [[2]]])
        shallow = copy.copy(v)
        deep = copy.deepcopy(v)
        v[0].append(5)
        v[0][0].append(9)
        assert shallow[0] == [[1, 9]]
        assert deep[0] == [[1]]

    def test_take_leaves_source_empty(self):
        v = LazyVector([1, 2, 3])
        w = LazyVector.take(v)
        assert w.tolist() == [1, 2, 3]
        assert v.size() == 0
        assert v.capacity() == 0
        assert v.tolist() == []

    def test_moved_from_vector_is_reusable(self):
        v = LazyVector([1, 2])
        LazyVector.take(v)
        v.push(5)
        assert v.tolist() == [5]
        assert v.capacity() == 4

    def test_construct_from_expression_rejected(self):
        a = LazyVector([1, 2])
        with pytest.raises(TypeError):
            LazyVector(a + a)


class TestAccess:
    """Checked and unchecked element access."""

    def test_at_in_range(self):
        v = LazyVector([1, 2, 3])
        assert v.at(2) == 3

    def test_at_size_is_out_of_range(self):
        v = LazyVector([1, 2, 3])
        with pytest.raises(OutOfRangeError):
            v.at(v.size())

    def test_at_negative_is_out_of_range(self):
        with pytest.raises(OutOfRangeError):
            LazyVector([1]).at(-1)

    def test_out_of_range_is_an_index_error(self):
        with pytest.raises(IndexError):
            LazyVector().at(0)

    def test_set_at(self):
        v = LazyVector([1, 2])
        v.set_at(1, 20)
        assert v.tolist() == [1, 20]
        with pytest.raises(OutOfRangeError):
            v.set_at(2, 0)

    def test_front_and_back(self):
        v = LazyVector([4, 5, 6])
        assert v.front() == 4
        assert v.back() == 6

    def test_data_is_a_live_view(self):
        v = LazyVector([1.0, 2.0], dtype=np.float64)
        v.data[0] = 9.0
        assert v[0] == 9.0
        assert v.data.shape == (2,)

    def test_to_numpy_is_a_copy(self):
        v = LazyVector([1.0, 2.0], dtype=np.float64)
        arr = v.to_numpy()
        arr[0] = 9.0
        assert v[0] == 1.0

    def test_slice_returns_new_vector(self):
        v = LazyVector([1, 2, 3, 4])
        assert v[1:3].tolist() == [2, 3]
        assert v[::-1].tolist() == [4, 3, 2, 1]

    def test_slice_assignment_from_values(self):
        v = LazyVector([1, 2, 3, 4])
        v[1:3] = [20, 30]
        assert v.tolist() == [1, 20, 30, 4]
        with pytest.raises(ValueError):
            v[0:2] = [1]

    def test_iteration_and_len(self):
        v = LazyVector([1, 2, 3])
        assert list(v) == [1, 2, 3]
        assert len(v) == 3

    def test_repr(self):
        assert repr(LazyVector([1, 2])) == "LazyVector([1, 2])"
        assert repr(LazyVector([1.5], dtype=np.float64)) == "LazyVector([1.5], dtype=float64)"

    def test_equals(self):
        v = LazyVector([1, 2, 3])
        assert v.equals([1, 2, 3])
        assert v.equals(LazyVector([1, 2, 3]))
        assert not v.equals([1, 2])
        assert not v.equals([1, 2, 4])

    def test_vectors_are_unhashable(self):
        with pytest.raises(TypeError):
            hash(LazyVector([1]))


class TestGrowth:
    """Capacity only grows, geometrically, and always covers the size."""

    def test_push_doubles_when_full(self):
        v = LazyVector()
        capacities = []
        for i in range(9):
            v.push(i)
            capacities.append(v.capacity())
        assert capacities == [4, 4, 4, 4, 8, 8, 8, 8, 16]
        assert v.tolist() == list(range(9))

    def test_capacity_never_decreases(self):
        v = LazyVector()
        last = v.capacity()
        for i in range(100):
            if i % 7 == 3:
                v.insert(0, i, count=3)
            else:
                v.push(i)
            assert v.capacity() >= v.size()
            assert v.capacity() >= last
            last = v.capacity()

    def test_negative_sizes_rejected(self):
        with pytest.raises(ValueError):
            LazyVector.filled(-1, 0)
        v = LazyVector([1, 2, 3])
        with pytest.raises(ValueError):
            v.resize(-1)
        with pytest.raises(ValueError):
            v.reserve(-1)
        with pytest.raises(ValueError):
            v.assign_fill(-2, 7)
        assert v.size() == 3
        assert v.tolist() == [1, 2, 3]

    def test_pop_single_element(self):
        v = LazyVector([42])
        assert v.pop() == 42
        assert v.size() == 0
        assert v.empty()

    def test_pop_empty_raises(self):
        with pytest.raises(OutOfRangeError):
            LazyVector().pop()

    def test_pop_keeps_capacity(self):
        v = LazyVector([1, 2, 3])
        v.pop()
        assert v.capacity() == 6

    def test_reserve_grows_only(self):
        v = LazyVector([1, 2])
        v.reserve(50)
        assert v.capacity() == 50
        v.reserve(10)
        assert v.capacity() == 50
        assert v.tolist() == [1, 2]

    def test_resize_grow_and_shrink(self):
        v = LazyVector([1, 2])
        v.resize(5, 0)
        assert v.tolist() == [1, 2, 0, 0, 0]
        capacity = v.capacity()
        v.resize(1)
        assert v.tolist() == [1]
        assert v.capacity() == capacity

    def test_resize_numeric_default(self):
        v = LazyVector([1, 2], dtype=np.int64)
        v.resize(3)
        assert v.tolist() == [1, 2, 0]

    def test_shrink_to_fit(self):
        v = LazyVector(range(5))
        v.shrink_to_fit()
        assert v.capacity() == 5
        assert v.tolist() == [0, 1, 2, 3, 4]

    def test_shrink_then_push(self):
        v = LazyVector()
        v.shrink_to_fit()
        assert v.capacity() == 0
        v.push(1)
        assert v.tolist() == [1]

    def test_max_size_is_configured(self, configure):
        configure(vector__max_size=8)
        v = LazyVector()
        assert v.max_size() == 8
        for i in range(8):
            v.push(i)
        assert v.capacity() == 8
        with pytest.raises(CapacityExceededError):
            v.push(8)
        assert v.size() == 8

    def test_construction_beyond_max_size(self, configure):
        configure(vector__max_size=5)
        with pytest.raises(CapacityExceededError):
            LazyVector(range(6))
        # Capacity is clamped rather than doubled past the ceiling.
        assert LazyVector(range(5)).capacity() == 5

    def test_reserve_beyond_max_size(self, configure):
        configure(vector__max_size=16)
        with pytest.raises(CapacityExceededError):
            LazyVector().reserve(17)


class TestModifiers:
    """Insert, erase, assign and friends shift and fill correctly."""

    def test_insert_single(self):
        v = LazyVector([1, 3])
        assert v.insert(1, 2) == 1
        assert v.tolist() == [1, 2, 3]

    def test_insert_count(self):
        v = LazyVector([1, 4])
        v.insert(1, 0, count=2)
        assert v.tolist() == [1, 0, 0, 4]

    def test_insert_zero_count_is_noop(self):
        v = LazyVector([1])
        assert v.insert(0, 5, count=0) == 0
        assert v.tolist() == [1]

    def test_insert_at_end(self):
        v = LazyVector([1])
        v.insert(1, 2)
        assert v.tolist() == [1, 2]

    def test_insert_out_of_range(self):
        with pytest.raises(OutOfRangeError):
            LazyVector([1]).insert(3, 0)

    def test_insert_many_grows(self):
        v = LazyVector([1, 2, 3, 4])
        v.insert_many(2, range(10, 20))
        assert v.tolist() == [1, 2] + list(range(10, 20)) + [3, 4]
        assert v.capacity() >= v.size()

    def test_erase(self):
        v = LazyVector([1, 2, 3])
        assert v.erase(0) == 0
        assert v.tolist() == [2, 3]
        with pytest.raises(OutOfRangeError):
            v.erase(2)

    def test_erase_range(self):
        v = LazyVector(range(6))
        assert v.erase_range(1, 4) == 1
        assert v.tolist() == [0, 4, 5]
        assert v.erase_range(1, 1) == 1
        assert v.tolist() == [0, 4, 5]

    def test_erase_range_invalid(self):
        with pytest.raises(OutOfRangeError):
            LazyVector([1, 2]).erase_range(1, 3)

    def test_emplace_with_element_type(self):
        v = LazyVector(element_type=complex)
        v.emplace_back(1, 2)
        v.emplace(0, 3)
        assert v.tolist() == [3 + 0j, 1 + 2j]

    def test_emplace_numeric_dtype(self):
        v = LazyVector([1.0], dtype=np.float32)
        v.emplace_back(2.5)
        assert v.tolist() == [1.0, 2.5]

    def test_emplace_needs_element_type(self):
        with pytest.raises(TypeError):
            LazyVector().emplace_back(1)

    def test_assign_returns_self(self):
        v = LazyVector([1, 2, 3, 4])
        assert v.assign([9, 8]) is v
        assert v.tolist() == [9, 8]

    def test_assign_grows(self):
        v = LazyVector()
        v.assign(range(20))
        assert v.tolist() == list(range(20))
        assert v.capacity() >= 20

    def test_assign_fill(self):
        v = LazyVector([1])
        assert v.assign_fill(3, "x") is v
        assert v.tolist() == ["x", "x", "x"]

    def test_swap(self):
        v = LazyVector([1, 2, 3])
        w = LazyVector([9.0], dtype=np.float64)
        v.swap(w)
        assert v.tolist() == [9.0]
        assert v.dtype == np.float64
        assert w.tolist() == [1, 2, 3]

    def test_clear_keeps_capacity(self):
        v = LazyVector(range(10))
        v.clear()
        assert v.size() == 0
        assert v.capacity() == 20

    def test_push_back_and_pop_back_aliases(self):
        v = LazyVector()
        v.push_back(1)
        v.push_back(2)
        assert v.pop_back() == 2
        assert v.tolist() == [1]
