# lazyvec/compiler/kernel.py
#
# Walks expression trees without evaluating them. Two things need this:
# 1. Rendering the fused kernel an expression stands for, e.g.
#    "out0 = ((in0 + in1) * 2)", used by repr() and the materialization log.
# 2. Discovering the distinct vectors an expression reads, so that debug
#    checks can compare their lengths against the destination.
#
# Leaf vectors are numbered in the order they are first met, left to right,
# so `a + b + a` renders as "((in0 + in1) + in0)".

from ..errors import OperandLengthError
from .expr import BinaryExpression, ExprRef, Scalar


def _traverse_expr_tree(node, input_map: dict) -> str:
    """
    Recursively traverses an expression tree and generates the kernel body
    string, replacing each leaf vector with a generic name like `in0`.

    Args:
        node: The current node (expression, scalar or vector).
        input_map: Maps ``id(vector)`` to its generic name; filled as leaves
            are discovered.

    Returns:
        A string representing the computation (e.g. "((in0 + in1) * 2.0)").
    """
    if isinstance(node, BinaryExpression):
        left_str = _traverse_expr_tree(node.left.source, input_map)
        right_str = _traverse_expr_tree(node.right.source, input_map)
        return f"({left_str} {node.op.symbol} {right_str})"

    elif isinstance(node, ExprRef):
        return _traverse_expr_tree(node.expression, input_map)

    elif isinstance(node, Scalar):
        return repr(node.value)

    else:
        key = id(node)
        if key not in input_map:
            input_map[key] = (f"in{len(input_map)}", node)
        return input_map[key][0]


def render_kernel(expr, output: str = "out0") -> str:
    """Render ``expr`` as a single fused assignment to ``output``."""
    body = _traverse_expr_tree(expr, {})
    return f"{output} = {body}"


def kernel_inputs(expr) -> list:
    """Return the distinct leaf vectors of ``expr`` in first-seen order."""
    input_map: dict = {}
    _traverse_expr_tree(expr, input_map)
    return [vector for _, vector in input_map.values()]


def check_operand_lengths(expr, length: int) -> None:
    """Raise OperandLengthError if any leaf vector is shorter than ``length``."""
    for vector in kernel_inputs(expr):
        if len(vector) < length:
            raise OperandLengthError(len(vector), length)
