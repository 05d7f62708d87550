from typing import Union

import numpy as np

from integral.errors import TreeInvariantError
from integral.nodes import OPERATORS, FuncNode, NumNode, OpNode, VarNode


def eval_node(node: object, x):
    """
    Reduce ``node`` at ``x``; callers are expected to hold ``np.errstate``.

    The tree is walked post-order with an explicit worklist and value stack,
    so depth is not limited by the interpreter recursion limit.
    """
    if node is None:
        return 0.0
    values = []
    pending = [(node, False)]
    while pending:
        current, expanded = pending.pop()
        if isinstance(current, VarNode):
            values.append(x)
        elif isinstance(current, NumNode):
            values.append(current.value)
        elif isinstance(current, FuncNode):
            if expanded:
                values.append(current.operation(values.pop()))
                continue
            if current.left is None:
                raise TreeInvariantError(f"Function node {current.name!r} has no operand")
            pending.append((current, True))
            pending.append((current.left, False))
        elif isinstance(current, OpNode):
            operation = OPERATORS.get(current.symbol)
            if operation is None:
                raise TreeInvariantError(f"Unknown operator {current.symbol!r}")
            if expanded:
                right = values.pop()
                left = values.pop()
                values.append(operation(left, right))
                continue
            if current.left is None or current.right is None:
                raise TreeInvariantError(f"Operator node {current.symbol!r} is missing an operand")
            # left is popped, and so evaluated, first
            pending.append((current, True))
            pending.append((current.right, False))
            pending.append((current.left, False))
        else:
            raise TreeInvariantError(f"Unknown node type: {type(current).__name__}")
    return values.pop()


def evaluate(node: object, x: Union[float, np.ndarray]) -> Union[float, np.ndarray]:
    """
    Evaluate an expression tree at ``x``.

    Arithmetic is IEEE-754 double precision: division by zero, logarithms of
    non-positive numbers and overflow produce ``inf``/``nan`` instead of
    raising. A scalar ``x`` gives a float; an array gives an array of the same
    shape.
    """
    values = np.asarray(x, dtype=np.float64)
    with np.errstate(all="ignore"):
        result = eval_node(node, values)
    if values.ndim == 0:
        return float(result)
    return np.array(np.broadcast_to(result, values.shape), dtype=np.float64)
