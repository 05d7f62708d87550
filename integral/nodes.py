from types import MappingProxyType
from typing import Callable, List, Optional

import numpy as np

UnaryOperation = Callable[[np.ndarray], np.ndarray]


def _cot(value):
    return np.divide(1.0, np.tan(value))


FUNCTIONS = MappingProxyType({
    "sin": np.sin,
    "cos": np.cos,
    "tg": np.tan,
    "ctg": _cot,
    "ln": np.log,
    "exp": np.exp,
})

OPERATORS = MappingProxyType({
    "+": np.add,
    "-": np.subtract,
    "*": np.multiply,
    "/": np.divide,
    "^": np.power,
})


class VarNode:
    def __init__(self, name: str):
        self.name = name

    def __repr__(self) -> str:
        return f"VarNode({self.name!r})"


class NumNode:
    def __init__(self, value: float):
        self.value = float(value)

    def __repr__(self) -> str:
        return f"NumNode({self.value!r})"


class FuncNode:
    def __init__(self, name: str, operation: UnaryOperation, left: object):
        self.name = name
        self.operation = operation
        self.left = left

    def __repr__(self) -> str:
        return f"FuncNode({self.name!r})"


class OpNode:
    def __init__(self, symbol: str, left: object, right: object):
        self.symbol = symbol
        self.left = left
        self.right = right

    def __repr__(self) -> str:
        return f"OpNode({self.symbol!r})"


def children(node: object) -> List[object]:
    """Return the owned children of ``node`` in evaluation order."""
    if isinstance(node, OpNode):
        return [node.left, node.right]
    if isinstance(node, FuncNode):
        return [node.left]
    return []


def destroy_tree(node: Optional[object]) -> int:
    """
    Release a tree in a single post-order sweep.

    Every node is visited exactly once; its children are detached after they
    have been released, so the handle passed in is left as an empty shell.
    Returns the number of nodes released.
    """
    if node is None:
        return 0
    released = 0
    pending = [(node, False)]
    while pending:
        current, expanded = pending.pop()
        if not expanded:
            pending.append((current, True))
            for child in reversed(children(current)):
                if child is not None:
                    pending.append((child, False))
            continue
        if isinstance(current, OpNode):
            current.left = None
            current.right = None
        elif isinstance(current, FuncNode):
            current.left = None
        released += 1
    return released
