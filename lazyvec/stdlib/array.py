# lazyvec/stdlib/array.py
#
# Implements the LazyVector object: a growable, contiguous, one-dimensional
# array backed by a numpy buffer obtained from the runtime buffer manager.
# Crucially, its binary operators are overloaded to build expression trees
# instead of computing results; only the in-place operators (`+=` and
# friends) and explicit assignment evaluate, one index at a time, straight
# into the vector's own storage.
#
# Slots [0, size) of the buffer are live. Slots [size, capacity) hold
# whatever was there before and must never be read.

import copy
import itertools
from typing import Any, Callable, Iterable, Optional

import numpy as np

from ..compiler.expr import Borrowed, LazyOperators, Operand, prepare_materialization
from ..compiler.ops import CATALOG, OpTag
from ..errors import OutOfRangeError
from ..runtime.manager import get_manager


def _inplace(tag: OpTag):
    apply_inplace = CATALOG[tag].apply_inplace

    def method(self, other):
        source = prepare_materialization(other, self._length)
        buffer = self._buffer
        for i in range(self._length):
            buffer[i] = apply_inplace(buffer[i], source[i])
        return self

    method.__doc__ = (
        f"Evaluate ``other`` index by index and apply ``{CATALOG[tag].symbol}=`` "
        "into this vector's storage."
    )
    return method


class LazyVector(LazyOperators):
    """
    A growable array whose operators build deferred expressions.

    Args:
        data: Initial elements: a list literal, any iterable, a numpy array
            or another LazyVector (which is copied).
        dtype: numpy dtype of the buffer. Defaults to the dtype of ``data``
            when it has one, else ``object`` (any Python value).
        element_type: Callable used by ``emplace`` and for default elements.
            Defaults to the numpy scalar type for non-object dtypes.
    """

    def __init__(self, data: Iterable = (), dtype=None, element_type: Optional[Callable] = None):
        if dtype is None:
            dtype = getattr(data, "dtype", None)
        items = list(data)
        self._init_storage(len(items), dtype, element_type)
        buffer = self._buffer
        for i, item in enumerate(items):
            buffer[i] = item
        self._length = len(items)

    def _init_storage(self, size: int, dtype, element_type: Optional[Callable]) -> None:
        self._dtype = np.dtype(object if dtype is None else dtype)
        if element_type is None and self._dtype != np.dtype(object):
            element_type = self._dtype.type
        self._element_type = element_type
        self._manager = get_manager()
        self._length = 0
        self._buffer = self._manager.allocate(self._manager.initial_capacity(size), self._dtype)

    # ------------------------------------------------------------------
    # Alternative constructors
    # ------------------------------------------------------------------

    @classmethod
    def filled(cls, size: int, value: Any = None, dtype=None,
               element_type: Optional[Callable] = None) -> "LazyVector":
        """Construct a vector of ``size`` copies of ``value`` (or the default element)."""
        vector = cls.__new__(cls)
        vector._init_storage(size, dtype, element_type)
        fill = vector._default() if value is None else value
        for i in range(size):
            vector._buffer[i] = fill
        vector._length = size
        return vector

    @classmethod
    def from_range(cls, iterable: Iterable, first: int, last: int, dtype=None) -> "LazyVector":
        """Construct from the elements at positions ``[first, last)`` of ``iterable``."""
        return cls(itertools.islice(iterable, first, last), dtype=dtype)

    @classmethod
    def from_expression(cls, expr, length: int, dtype=None) -> "LazyVector":
        """
        Construct a vector of exactly ``length`` elements by evaluating
        ``expr`` at each index. Operand vectors must be at least ``length``
        long; that is not checked unless debug checks are enabled.
        """
        vector = cls.filled(length, dtype=dtype)
        return vector.assign_expression(expr)

    @classmethod
    def take(cls, other: "LazyVector") -> "LazyVector":
        """
        Move constructor: the new vector takes over ``other``'s buffer and
        ``other`` is left empty with no buffer at all.
        """
        vector = cls.__new__(cls)
        vector._dtype = other._dtype
        vector._element_type = other._element_type
        vector._manager = other._manager
        vector._buffer = other._buffer
        vector._length = other._length
        if other._buffer is not None:
            other._manager.release(other._buffer)
        other._buffer = None
        other._length = 0
        return vector

    def copy(self) -> "LazyVector":
        """
        Copy the live elements into a freshly allocated vector. Object
        elements are copied with ``copy.copy``, so in-place operators on the
        result never reach the source's elements; ``copy.deepcopy`` copies
        them recursively.
        """
        items = self
        if self._dtype == np.dtype(object):
            items = (copy.copy(item) for item in self)
        return type(self)(items, dtype=self._dtype, element_type=self._element_type)

    __copy__ = copy

    def __deepcopy__(self, memo):
        return type(self)(
            (copy.deepcopy(item, memo) for item in self),
            dtype=self._dtype,
            element_type=self._element_type,
        )

    # ------------------------------------------------------------------
    # Operand protocol
    # ------------------------------------------------------------------

    def _as_operand(self) -> Operand:
        return Borrowed(self)

    __iadd__ = _inplace(OpTag.ADD)
    __isub__ = _inplace(OpTag.SUB)
    __imul__ = _inplace(OpTag.MUL)
    __itruediv__ = _inplace(OpTag.DIV)
    __ior__ = _inplace(OpTag.OR)
    __iand__ = _inplace(OpTag.AND)
    __ixor__ = _inplace(OpTag.XOR)
    __ilshift__ = _inplace(OpTag.LSHIFT)
    __irshift__ = _inplace(OpTag.RSHIFT)

    def assign_expression(self, expr) -> "LazyVector":
        """
        Set ``self[i] = expr[i]`` for every ``i`` in ``[0, size)``.

        The vector is not resized: an expression can only answer indexing,
        it does not know how long its result is.
        """
        source = prepare_materialization(expr, self._length)
        buffer = self._buffer
        for i in range(self._length):
            buffer[i] = source[i]
        return self

    # ------------------------------------------------------------------
    # Element access
    # ------------------------------------------------------------------

    def __getitem__(self, index):
        # Unchecked: reading at or past size() is undefined.
        if type(index) is slice:
            return type(self)(
                (self._buffer[i] for i in range(*index.indices(self._length))),
                dtype=self._dtype,
                element_type=self._element_type,
            )
        return self._buffer[index]

    def __setitem__(self, index, value):
        if type(index) is not slice:
            self._buffer[index] = value
            return
        positions = range(*index.indices(self._length))
        if isinstance(value, LazyOperators) and not isinstance(value, LazyVector):
            # Expressions are evaluated at the same indices they are stored to.
            span = max(positions[0], positions[-1]) + 1 if positions else 0
            source = prepare_materialization(value, span)
            for i in positions:
                self._buffer[i] = source[i]
            return
        values = list(value)
        if len(values) != len(positions):
            raise ValueError(
                f"cannot assign {len(values)} values to a slice of {len(positions)} elements"
            )
        for i, item in zip(positions, values):
            self._buffer[i] = item

    def at(self, index: int):
        """Checked read; raises OutOfRangeError unless ``0 <= index < size()``."""
        if not 0 <= index < self._length:
            raise OutOfRangeError(index, self._length)
        return self._buffer[index]

    def set_at(self, index: int, value) -> None:
        """Checked write; raises OutOfRangeError unless ``0 <= index < size()``."""
        if not 0 <= index < self._length:
            raise OutOfRangeError(index, self._length)
        self._buffer[index] = value

    def front(self):
        return self._buffer[0]

    def back(self):
        return self._buffer[self._length - 1]

    @property
    def data(self) -> np.ndarray:
        """A numpy view of the live elements (shares storage with the vector)."""
        if self._buffer is None:
            return np.empty(0, dtype=self._dtype)
        return self._buffer[:self._length]

    @property
    def dtype(self) -> np.dtype:
        return self._dtype

    @property
    def element_type(self) -> Optional[Callable]:
        return self._element_type

    def to_numpy(self) -> np.ndarray:
        return self.data.copy()

    def tolist(self) -> list:
        return self.data.tolist()

    def __iter__(self):
        return iter(self.data)

    def __len__(self):
        return self._length

    def __repr__(self):
        if self._dtype == np.dtype(object):
            return f"LazyVector({self.tolist()!r})"
        return f"LazyVector({self.tolist()!r}, dtype={self._dtype})"

    def equals(self, other: Iterable) -> bool:
        """Eager comparison: same length and every element equal."""
        other = list(other)
        if len(other) != self._length:
            return False
        return all(bool(x == y) for x, y in zip(self.data, other))

    # ------------------------------------------------------------------
    # Capacity
    # ------------------------------------------------------------------

    def empty(self) -> bool:
        return self._length == 0

    def size(self) -> int:
        return self._length

    def capacity(self) -> int:
        return 0 if self._buffer is None else self._buffer.shape[0]

    def max_size(self) -> int:
        return self._manager.max_size

    def reserve(self, capacity: int) -> None:
        """Grow the buffer to at least ``capacity`` slots. Never shrinks."""
        self._manager.check_size(capacity)
        if capacity > self.capacity():
            self._reallocate(capacity)

    def shrink_to_fit(self) -> None:
        """Reallocate so that capacity equals size."""
        if self.capacity() != self._length:
            self._reallocate(self._length)

    def resize(self, size: int, value: Any = None) -> None:
        """
        Change the number of live elements. New slots are filled with
        ``value`` (or the default element); capacity is never lowered.
        """
        self._manager.check_size(size)
        if size > self._length:
            self._ensure_capacity(size)
            fill = self._default() if value is None else value
            for i in range(self._length, size):
                self._buffer[i] = fill
        else:
            self._clear_slots(size, self._length)
        self._length = size

    def _reallocate(self, capacity: int) -> None:
        if self._buffer is None:
            self._buffer = self._manager.allocate(capacity, self._dtype)
        else:
            self._buffer = self._manager.reallocate(self._buffer, self._length, capacity)

    def _ensure_capacity(self, required: int) -> None:
        capacity = self.capacity()
        if required > capacity:
            self._reallocate(self._manager.grown_capacity(capacity, required))

    def _clear_slots(self, start: int, stop: int) -> None:
        # Drop references held by vacated slots; numeric slots are left as is.
        if self._dtype == np.dtype(object) and stop > start:
            self._buffer[start:stop] = None

    def _default(self):
        if self._element_type is not None:
            return self._element_type()
        return None

    def _make(self, args, kwargs):
        if self._element_type is None:
            raise TypeError("emplace needs an element_type for an object-dtype LazyVector")
        return self._element_type(*args, **kwargs)

    # ------------------------------------------------------------------
    # Modifiers
    # ------------------------------------------------------------------

    def push(self, value) -> None:
        """Append ``value``, doubling the capacity first if the buffer is full."""
        if self._length == self.capacity():
            self._ensure_capacity(self._length + 1)
        self._buffer[self._length] = value
        self._length += 1

    push_back = push

    def pop(self):
        """Remove and return the last element."""
        if self._length == 0:
            raise OutOfRangeError(0, 0)
        self._length -= 1
        value = self._buffer[self._length]
        self._clear_slots(self._length, self._length + 1)
        return value

    pop_back = pop

    def emplace_back(self, *args, **kwargs) -> None:
        self.push(self._make(args, kwargs))

    def emplace(self, position: int, *args, **kwargs) -> int:
        """Construct an element from ``args`` and insert it before ``position``."""
        return self.insert(position, self._make(args, kwargs))

    def insert(self, position: int, value, count: int = 1) -> int:
        """
        Insert ``count`` copies of ``value`` before ``position``.

        Returns:
            The index of the first inserted element.
        """
        if not 0 <= position <= self._length:
            raise OutOfRangeError(position, self._length)
        if count <= 0:
            return position
        self._open_gap(position, count)
        for i in range(position, position + count):
            self._buffer[i] = value
        return position

    def insert_many(self, position: int, values: Iterable) -> int:
        """Insert every element of ``values`` before ``position``, in order."""
        if not 0 <= position <= self._length:
            raise OutOfRangeError(position, self._length)
        items = list(values)
        if not items:
            return position
        self._open_gap(position, len(items))
        for i, item in enumerate(items, start=position):
            self._buffer[i] = item
        return position

    def _open_gap(self, position: int, count: int) -> None:
        self._ensure_capacity(self._length + count)
        buffer = self._buffer
        buffer[position + count:self._length + count] = buffer[position:self._length]
        self._length += count

    def erase(self, position: int) -> int:
        """Remove the element at ``position``; returns the index now holding its successor."""
        if not 0 <= position < self._length:
            raise OutOfRangeError(position, self._length)
        return self.erase_range(position, position + 1)

    def erase_range(self, first: int, last: int) -> int:
        """Remove the elements in ``[first, last)``; returns ``first``."""
        if not 0 <= first <= last <= self._length:
            raise OutOfRangeError(last, self._length)
        count = last - first
        if count:
            buffer = self._buffer
            buffer[first:self._length - count] = buffer[last:self._length]
            self._clear_slots(self._length - count, self._length)
            self._length -= count
        return first

    def assign(self, values: Iterable) -> "LazyVector":
        """Replace the contents with the elements of ``values``."""
        items = list(values)
        self._replace(len(items), items)
        return self

    def assign_fill(self, count: int, value) -> "LazyVector":
        """Replace the contents with ``count`` copies of ``value``."""
        self._replace(count, itertools.repeat(value, count))
        return self

    def _replace(self, count: int, items: Iterable) -> None:
        self._manager.check_size(count)
        self._ensure_capacity(count)
        self._clear_slots(count, self._length)
        buffer = self._buffer
        for i, item in enumerate(items):
            buffer[i] = item
        self._length = count

    def swap(self, other: "LazyVector") -> None:
        """Exchange contents (buffer, size, dtype) with ``other``."""
        self._buffer, other._buffer = other._buffer, self._buffer
        self._length, other._length = other._length, self._length
        self._dtype, other._dtype = other._dtype, self._dtype
        self._element_type, other._element_type = other._element_type, self._element_type

    def clear(self) -> None:
        """Remove every element; capacity is kept."""
        self._clear_slots(0, self._length)
        self._length = 0
