# lazyvec/errors.py
#
# Exception taxonomy for lazyvec. Only the capacity-management path
# (construction, growth, checked access) and the expression ownership checks
# raise these. The per-index evaluation path performs no checks at all.


class LazyVecError(Exception):
    """Base class for all lazyvec errors."""


class OutOfRangeError(LazyVecError, IndexError):
    """A checked accessor was given an index outside ``[0, size)``."""

    def __init__(self, index: int, size: int):
        super().__init__(f"index {index} is out of range for a vector of size {size}")
        self.index = index
        self.size = size


class CapacityExceededError(LazyVecError, MemoryError):
    """A requested size or capacity is beyond the configured maximum."""

    def __init__(self, requested: int, max_size: int):
        super().__init__(
            f"requested size {requested} exceeds the maximum vector size {max_size}"
        )
        self.requested = requested
        self.max_size = max_size


class ExpressionConsumedError(LazyVecError, RuntimeError):
    """An expression was reused after being moved into a parent or materialized."""


class OperandLengthError(LazyVecError, ValueError):
    """An operand vector is shorter than the destination (debug checks only)."""

    def __init__(self, operand_length: int, length: int):
        super().__init__(
            f"operand of length {operand_length} cannot be evaluated over {length} elements"
        )
        self.operand_length = operand_length
        self.length = length
