# lazyvec/__init__.py

# Expose the core, user-facing components of the lazyvec library
# at the top-level package namespace.

from .stdlib import LazyVector
from .compiler.expr import (
    BinaryExpression,
    Expression,
    ExprRef,
    ExprState,
    logical_and,
    logical_or,
)
from .compiler.ops import OpTag
from .errors import (
    CapacityExceededError,
    ExpressionConsumedError,
    LazyVecError,
    OperandLengthError,
    OutOfRangeError,
)
from .profiler import profile
from .runtime.config import get_config
from .runtime.logging import setup_logging

__version__ = "0.1.0"
