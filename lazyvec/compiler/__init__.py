from .expr import BinaryExpression, Expression, ExprRef, ExprState
from .kernel import kernel_inputs, render_kernel
from .ops import CATALOG, BinaryOp, OpFamily, OpTag
