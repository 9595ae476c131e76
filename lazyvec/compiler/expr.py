# lazyvec/compiler/expr.py
#
# This file defines the node classes for building the lazy evaluation
# expression tree. When a user writes `a + b` with LazyVector operands,
# nothing is computed: a BinaryExpression is created that holds the operator
# and its two operands. Applying another operator to that node wraps it in a
# new node, so a whole chain of operators becomes one tree. The tree is only
# evaluated when it is indexed, and indexing evaluates exactly one element:
# `node[i]` computes `left[i]`, `right[i]` and applies the operator, which is
# what lets a destination be filled in a single fused pass.
#
# Every operand records its ownership. A vector (or a borrowed expression) is
# Borrowed: the values read from it live in someone else's storage. A nested
# expression built inline is Owned: its per-index result is a fresh temporary
# that the parent may update in place. The choice of scalar rule is made once
# per node from that ownership (see ops.BinaryOp.rule).

import enum
import logging

from ..errors import ExpressionConsumedError
from ..runtime.config import get_config
from ..runtime.logging import get_logger
from .ops import CATALOG, BinaryOp, OpTag

log = get_logger("compiler")


class ExprState(enum.Enum):
    UNEVALUATED = "unevaluated"
    MOVED = "moved"  # ownership transferred into a parent node
    CONSUMED = "consumed"  # materialized after taking an in-place branch


class Operand:
    """One side of an expression node: a source to index plus its ownership."""

    __slots__ = ("source",)
    movable = False

    def __init__(self, source):
        self.source = source

    def __repr__(self):
        return f"{type(self).__name__}({self.source!r})"


class Borrowed(Operand):
    """A long-lived source: a vector, a scalar or a borrowed expression."""

    __slots__ = ()


class Owned(Operand):
    """A temporary expression whose ownership moved into the node."""

    __slots__ = ()
    movable = True


class Scalar:
    """A leaf that answers every index with the same value."""

    __slots__ = ("value",)

    def __init__(self, value):
        self.value = value

    def __getitem__(self, index):
        return self.value

    def __repr__(self):
        return repr(self.value)


def as_operand(obj) -> Operand:
    """Wrap ``obj`` as an operand, taking ownership of inline expressions."""
    if isinstance(obj, LazyOperators):
        return obj._as_operand()
    return Borrowed(Scalar(obj))


def _operands(x, y) -> tuple:
    """Wrap both operands, checking both before either is moved."""
    for obj in (x, y):
        if isinstance(obj, LazyOperators):
            obj._check_operand()
    return as_operand(x), as_operand(y)


def _binary(tag: OpTag):
    op = CATALOG[tag]

    def method(self, other):
        left, right = _operands(self, other)
        return BinaryExpression(left, op, right)

    method.__doc__ = f"Build the deferred expression ``self {op.symbol} other``."
    return method


def _reflected(tag: OpTag):
    op = CATALOG[tag]

    def method(self, other):
        left, right = _operands(other, self)
        return BinaryExpression(left, op, right)

    method.__doc__ = f"Build the deferred expression ``other {op.symbol} self``."
    return method


class LazyOperators:
    """
    The lazy operator surface shared by vectors and expressions. Every
    operator returns an unevaluated BinaryExpression; subclasses decide how
    they appear as an operand through ``_as_operand``.
    """

    __slots__ = ()

    # Make numpy defer to our reflected operators instead of iterating us.
    __array_ufunc__ = None
    # `==` builds an expression, so these objects cannot be hashed.
    __hash__ = None

    def _as_operand(self) -> Operand:
        raise NotImplementedError

    def _check_operand(self) -> None:
        pass

    def _begin_materialization(self) -> None:
        pass

    __add__ = _binary(OpTag.ADD)
    __sub__ = _binary(OpTag.SUB)
    __mul__ = _binary(OpTag.MUL)
    __truediv__ = _binary(OpTag.DIV)
    __or__ = _binary(OpTag.OR)
    __and__ = _binary(OpTag.AND)
    __xor__ = _binary(OpTag.XOR)
    __lshift__ = _binary(OpTag.LSHIFT)
    __rshift__ = _binary(OpTag.RSHIFT)

    __radd__ = _reflected(OpTag.ADD)
    __rsub__ = _reflected(OpTag.SUB)
    __rmul__ = _reflected(OpTag.MUL)
    __rtruediv__ = _reflected(OpTag.DIV)
    __ror__ = _reflected(OpTag.OR)
    __rand__ = _reflected(OpTag.AND)
    __rxor__ = _reflected(OpTag.XOR)
    __rlshift__ = _reflected(OpTag.LSHIFT)
    __rrshift__ = _reflected(OpTag.RSHIFT)

    # Python swaps the operands of reflected comparisons itself.
    __eq__ = _binary(OpTag.EQ)
    __ne__ = _binary(OpTag.NE)
    __lt__ = _binary(OpTag.LT)
    __le__ = _binary(OpTag.LE)
    __gt__ = _binary(OpTag.GT)
    __ge__ = _binary(OpTag.GE)

    logical_and = _binary(OpTag.LOGICAL_AND)
    logical_or = _binary(OpTag.LOGICAL_OR)


class Expression(LazyOperators):
    """Base class for all expression tree nodes."""

    __slots__ = ()

    def __getitem__(self, index):
        raise NotImplementedError

    def __iter__(self):
        raise TypeError(
            "an expression has no length; use materialize(length) or tolist(length)"
        )

    def __bool__(self):
        raise TypeError(
            "the truth value of a lazy expression is ambiguous; use all(length) or any(length)"
        )

    def __repr__(self):
        return f"<{type(self).__name__} {self.kernel()}>"

    def borrow(self) -> "ExprRef":
        raise NotImplementedError

    def kernel(self) -> str:
        """Render the fused kernel body this expression evaluates."""
        from .kernel import render_kernel

        return render_kernel(self)

    def materialize(self, length: int, dtype=None):
        """
        Evaluate the expression over ``[0, length)`` into a new LazyVector.

        The expression does not know its own length, so the caller supplies
        it; every operand vector must be at least that long.
        """
        from ..stdlib.array import LazyVector

        return LazyVector.from_expression(self, length, dtype=dtype)

    def tolist(self, length: int) -> list:
        source = prepare_materialization(self, length)
        return [source[i] for i in range(length)]

    def all(self, length: int) -> bool:
        """True if every element in ``[0, length)`` is truthy."""
        source = prepare_materialization(self, length)
        return all(source[i] for i in range(length))

    def any(self, length: int) -> bool:
        """True if some element in ``[0, length)`` is truthy."""
        source = prepare_materialization(self, length)
        return any(source[i] for i in range(length))


class BinaryExpression(Expression):
    """
    Represents a pending binary operation (e.g., +, <, logical_and).

    Args:
        left: The left operand (Borrowed or Owned).
        op: The catalog entry to apply.
        right: The right operand (Borrowed or Owned).
    """

    __slots__ = ("left", "op", "right", "_rule", "_state", "_single_use")

    def __init__(self, left: Operand, op: BinaryOp, right: Operand):
        self.left = left
        self.op = op
        self.right = right
        self._rule = op.rule(left.movable, right.movable)
        self._state = ExprState.UNEVALUATED
        # Only a node holding a temporary is single-use.
        self._single_use = left.movable or right.movable

    @property
    def state(self) -> ExprState:
        return self._state

    def __getitem__(self, index):
        return self._rule(self.left.source[index], self.right.source[index])

    def borrow(self) -> "ExprRef":
        """
        Return a handle that can be used as an operand any number of times.
        Values read through the handle are never updated in place.
        """
        self._check_usable("borrow")
        return ExprRef(self)

    def _check_usable(self, action: str) -> None:
        if self._state is not ExprState.UNEVALUATED:
            raise ExpressionConsumedError(
                f"cannot {action} an expression that was already {self._state.value}"
            )

    def _check_operand(self) -> None:
        self._check_usable("reuse")

    def _as_operand(self) -> Operand:
        self._check_usable("reuse")
        self._state = ExprState.MOVED
        return Owned(self)

    def _begin_materialization(self) -> None:
        self._check_usable("materialize")
        if self._single_use:
            self._state = ExprState.CONSUMED


class ExprRef(Expression):
    """A borrowed handle to an expression, created by ``Expression.borrow()``."""

    __slots__ = ("expression",)

    def __init__(self, expression: BinaryExpression):
        self.expression = expression

    def __getitem__(self, index):
        return self.expression[index]

    def borrow(self) -> "ExprRef":
        return self

    def _check_operand(self) -> None:
        self.expression._check_usable("borrow")

    def _as_operand(self) -> Operand:
        self.expression._check_usable("borrow")
        return Borrowed(self.expression)

    def _begin_materialization(self) -> None:
        self.expression._check_usable("materialize")


def _lazy_pair(name: str, x, y) -> None:
    if not isinstance(x, LazyOperators) and not isinstance(y, LazyOperators):
        raise TypeError(f"{name} needs a LazyVector or an expression operand")


def logical_and(x, y) -> BinaryExpression:
    """Deferred elementwise ``bool(x[i]) and bool(y[i])``."""
    _lazy_pair("logical_and", x, y)
    left, right = _operands(x, y)
    return BinaryExpression(left, CATALOG[OpTag.LOGICAL_AND], right)


def logical_or(x, y) -> BinaryExpression:
    """Deferred elementwise ``bool(x[i]) or bool(y[i])``."""
    _lazy_pair("logical_or", x, y)
    left, right = _operands(x, y)
    return BinaryExpression(left, CATALOG[OpTag.LOGICAL_OR], right)


def prepare_materialization(obj, length: int):
    """
    Get ``obj`` ready for one evaluation pass over ``[0, length)``.

    Plain values become a Scalar leaf. Expressions are checked for reuse and,
    if they hold a temporary, marked consumed. With debug checks enabled the
    operand vectors are also checked against ``length``; the per-index path
    itself stays unchecked.

    Returns:
        The indexable source the pass reads from.
    """
    if not isinstance(obj, LazyOperators):
        return Scalar(obj)
    if get_config().debug_checks:
        from .kernel import check_operand_lengths

        check_operand_lengths(obj, length)
    obj._begin_materialization()
    if isinstance(obj, Expression) and log.isEnabledFor(logging.DEBUG):
        log.debug("expression_materialized", kernel=obj.kernel(), length=length)
    return obj
