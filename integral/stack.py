from typing import List, Optional

from integral.errors import StackOverflow, StackUnderflow
from integral.settings import STACK_SIZE


class NodeStack:
    """Bounded LIFO of node handles used while compiling one expression."""

    def __init__(self, capacity: int = STACK_SIZE):
        if capacity < 1:
            raise ValueError("Stack capacity must be at least 1")
        self.capacity = capacity
        self._items: List[object] = []

    def __len__(self) -> int:
        return len(self._items)

    def push(self, node: object, token: Optional[str] = None, position: Optional[int] = None) -> None:
        if len(self._items) >= self.capacity:
            raise StackOverflow(
                f"Stack overflow: expression needs more than {self.capacity} pending operands",
                token,
                position,
            )
        self._items.append(node)

    def pop(self, token: Optional[str] = None, position: Optional[int] = None) -> object:
        if not self._items:
            raise StackUnderflow(
                f"Stack underflow: not enough operands for {token!r}" if token else "Stack underflow",
                token,
                position,
            )
        return self._items.pop()

    def drain(self) -> List[object]:
        """Remove and return every remaining handle, bottom first."""
        items, self._items = self._items, []
        return items
