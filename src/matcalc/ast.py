"""Expression-tree nodes."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union

from .parser import Operator
from .values import Matrix, Scalar


@dataclass(frozen=True)
class Operation:
    op: Operator


Operand = Union[Operation, Scalar, Matrix]


@dataclass
class Node:
    """One tree node; ``left`` and ``right`` are owned exclusively by this node."""

    operand: Operand
    left: "Node | None" = None
    right: "Node | None" = None

    @property
    def is_leaf(self) -> bool:
        return not isinstance(self.operand, Operation)

    def depth(self) -> int:
        best = 0
        stack: list[tuple[Node, int]] = [(self, 1)]
        while stack:
            node, level = stack.pop()
            best = max(best, level)
            for child in (node.left, node.right):
                if child is not None:
                    stack.append((child, level + 1))
        return best

    def to_postfix(self) -> list[str]:
        """Render back to postfix text, useful for checking tree shape."""
        out: list[str] = []
        for child in (self.left, self.right):
            if child is not None:
                out.extend(child.to_postfix())
        if isinstance(self.operand, Operation):
            out.append(self.operand.op.value)
        elif isinstance(self.operand, Scalar):
            out.append(repr(self.operand.value))
        else:
            out.append(f"<{self.operand.rows}x{self.operand.cols}>")
        return out
