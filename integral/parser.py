from contextlib import contextmanager
from dataclasses import dataclass
from typing import Iterator, List, Optional, Sequence, Union

import numpy as np

from integral.errors import CompileError, InvalidToken, StackUnderflow, TrailingOperands
from integral.evaluator import evaluate
from integral.nodes import FUNCTIONS, OPERATORS, FuncNode, NumNode, OpNode, VarNode, destroy_tree
from integral.settings import STACK_SIZE, VARIABLE
from integral.stack import NodeStack


@dataclass
class ParsedIntegrand:
    expression: str
    node: object

    def evaluate(self, x: Union[float, np.ndarray]) -> Union[float, np.ndarray]:
        return evaluate(self.node, x)

    def destroy(self) -> int:
        released = destroy_tree(self.node)
        self.node = None
        return released


class IntegrandParser:
    def __init__(self, variable: str = VARIABLE, capacity: int = STACK_SIZE):
        self.variable = variable
        self.capacity = capacity

    def parse_expression(self, expr: str) -> ParsedIntegrand:
        cleaned = self._sanitize_expression(expr)
        node = compile_tokens(tokenize(cleaned), variable=self.variable, capacity=self.capacity)
        return ParsedIntegrand(expression=cleaned, node=node)

    def _sanitize_expression(self, expr: str) -> str:
        return " ".join(tokenize(expr))


def tokenize(expr: str) -> List[str]:
    return expr.split()


def _parse_number(token: str, position: int) -> float:
    # float() also accepts digit-group underscores, which are not part of the literal grammar
    if "_" in token:
        raise InvalidToken(f"Invalid token {token!r} in expression", token, position)
    try:
        return float(token)
    except ValueError:
        raise InvalidToken(f"Invalid token {token!r} in expression", token, position) from None


def compile_tokens(
    tokens: Sequence[str],
    variable: str = VARIABLE,
    capacity: int = STACK_SIZE,
) -> Optional[object]:
    """
    Build an expression tree from RPN tokens.

    Tokens are classified in priority order: the variable symbol, a single
    operator character, a function name, then a float literal. Operators take
    the most recently pushed operand as their right child. An empty token
    sequence yields ``None``. Nodes built before a failure are released
    before the error propagates.
    """
    stack = NodeStack(capacity)
    try:
        for position, token in enumerate(tokens):
            if token == variable:
                stack.push(VarNode(variable), token, position)
            elif len(token) == 1 and token in OPERATORS:
                right = stack.pop(token, position)
                try:
                    left = stack.pop(token, position)
                except StackUnderflow:
                    destroy_tree(right)
                    raise
                stack.push(OpNode(token, left, right), token, position)
            elif token in FUNCTIONS:
                operand = stack.pop(token, position)
                stack.push(FuncNode(token, FUNCTIONS[token], operand), token, position)
            else:
                stack.push(NumNode(_parse_number(token, position)), token, position)
    except CompileError:
        for node in stack.drain():
            destroy_tree(node)
        raise

    remaining = stack.drain()
    if not remaining:
        return None
    if len(remaining) > 1:
        for node in remaining:
            destroy_tree(node)
        raise TrailingOperands(
            f"Expression leaves {len(remaining)} operands on the stack; expected exactly one",
            None,
            len(tokens),
        )
    return remaining[0]


@contextmanager
def compiled_expression(
    expr: str,
    variable: str = VARIABLE,
    capacity: int = STACK_SIZE,
) -> Iterator[Optional[object]]:
    """Compile ``expr`` and release the tree when the block exits, however it exits."""
    parsed = IntegrandParser(variable=variable, capacity=capacity).parse_expression(expr)
    try:
        yield parsed.node
    finally:
        parsed.destroy()
