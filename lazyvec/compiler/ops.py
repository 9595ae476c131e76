# lazyvec/compiler/ops.py
#
# The fixed operator catalog. Every operator the expression engine knows is
# described once here: its tag, the symbol used when rendering kernels, the
# scalar rule applied at each index, and (for combining operators) the
# in-place form used to reuse a temporary instead of allocating a new value.

import enum
import operator
from dataclasses import dataclass
from typing import Any, Callable, Optional

ScalarRule = Callable[[Any, Any], Any]


class OpTag(enum.Enum):
    ADD = "add"
    SUB = "sub"
    MUL = "mul"
    DIV = "div"
    OR = "or"
    AND = "and"
    XOR = "xor"
    LSHIFT = "lshift"
    RSHIFT = "rshift"
    LOGICAL_AND = "logical_and"
    LOGICAL_OR = "logical_or"
    EQ = "eq"
    NE = "ne"
    LT = "lt"
    LE = "le"
    GT = "gt"
    GE = "ge"


class OpFamily(enum.Enum):
    COMBINING = "combining"
    RELATIONAL = "relational"


def _logical_and(a, b):
    return bool(a) and bool(b)


def _logical_or(a, b):
    return bool(a) or bool(b)


def _swapped(inplace: ScalarRule) -> ScalarRule:
    def apply(a, b):
        return inplace(b, a)
    return apply


@dataclass(frozen=True)
class BinaryOp:
    """
    One entry of the operator catalog.

    Attributes:
        tag: Identifies the operator.
        symbol: Infix spelling used when rendering a kernel body.
        apply: The binary scalar rule, ``apply(a, b) == a OP b``.
        apply_inplace: The in-place form ``a OP= b`` for combining operators,
            None for relational/logical ones.
        commutative: Whether ``a OP b == b OP a`` for the element type, which
            is what allows a right-hand temporary to be reused.
    """
    tag: OpTag
    symbol: str
    apply: ScalarRule
    apply_inplace: Optional[ScalarRule] = None
    commutative: bool = False

    @property
    def family(self) -> OpFamily:
        if self.apply_inplace is None:
            return OpFamily.RELATIONAL
        return OpFamily.COMBINING

    def rule(self, left_movable: bool, right_movable: bool) -> ScalarRule:
        """
        Pick the scalar rule for a node whose operands have the given
        ownership. Called once per node, never per index.

        A movable side is a temporary produced by an owned sub-expression; it
        may be updated in place and handed back instead of building a new
        value. A non-movable side reads straight out of a vector (or a
        borrowed expression / scalar) and must not be touched.
        """
        if self.apply_inplace is None:
            return self.apply
        if left_movable:
            # Owned/Borrowed and Owned/Owned: update the left temporary.
            return self.apply_inplace
        if right_movable and self.commutative:
            return _swapped(self.apply_inplace)
        return self.apply


CATALOG: dict[OpTag, BinaryOp] = {
    op.tag: op
    for op in (
        BinaryOp(OpTag.ADD, "+", operator.add, operator.iadd, commutative=True),
        BinaryOp(OpTag.SUB, "-", operator.sub, operator.isub),
        BinaryOp(OpTag.MUL, "*", operator.mul, operator.imul, commutative=True),
        BinaryOp(OpTag.DIV, "/", operator.truediv, operator.itruediv),
        BinaryOp(OpTag.OR, "|", operator.or_, operator.ior, commutative=True),
        BinaryOp(OpTag.AND, "&", operator.and_, operator.iand, commutative=True),
        BinaryOp(OpTag.XOR, "^", operator.xor, operator.ixor, commutative=True),
        BinaryOp(OpTag.LSHIFT, "<<", operator.lshift, operator.ilshift),
        BinaryOp(OpTag.RSHIFT, ">>", operator.rshift, operator.irshift),
        BinaryOp(OpTag.LOGICAL_AND, "and", _logical_and),
        BinaryOp(OpTag.LOGICAL_OR, "or", _logical_or),
        BinaryOp(OpTag.EQ, "==", operator.eq),
        BinaryOp(OpTag.NE, "!=", operator.ne),
        BinaryOp(OpTag.LT, "<", operator.lt),
        BinaryOp(OpTag.LE, "<=", operator.le),
        BinaryOp(OpTag.GT, ">", operator.gt),
        BinaryOp(OpTag.GE, ">=", operator.ge),
    )
}

COMBINING = tuple(op for op in CATALOG.values() if op.family is OpFamily.COMBINING)
RELATIONAL = tuple(op for op in CATALOG.values() if op.family is OpFamily.RELATIONAL)
