"""Build expression trees from postfix token streams."""

from __future__ import annotations

from typing import Mapping, Sequence

from .ast import Node, Operation
from .errors import MalformedTokenError, StackUnderflowError
from .lexer import Token
from .parser import operator_for
from .values import Matrix, Scalar, Value, as_value


def parse_number(text: str) -> float | None:
    """IEEE-754 literal parse; ``None`` when ``text`` is not a number."""
    if not text or "_" in text or text != text.strip():
        return None
    try:
        return float(text)
    except ValueError:
        return None


def _leaf_for(stored: object) -> Node:
    value = as_value(stored)
    if isinstance(value, Matrix):
        return Node(operand=value)
    return Node(operand=Scalar(float(value.value)))


def build_tree(postfix: Sequence[Token], store: Mapping[str, Value]) -> Node | None:
    """Reduce a postfix stream to a single tree.

    Returns ``None`` when the stream is empty or leaves more than one tree.
    A unary operator with nothing to consume gets no child; the evaluator
    rejects it later.
    """
    stack: list[Node] = []
    for tok in postfix:
        number = parse_number(tok.text)
        if number is not None:
            stack.append(Node(operand=Scalar(number)))
            continue
        if tok.text in store:
            stack.append(_leaf_for(store[tok.text]))
            continue
        op = operator_for(tok.text)
        if op is None:
            raise MalformedTokenError(
                "Unknown token", start=tok.pos, end=tok.end, token=tok.text
            )
        if op.is_unary:
            child = stack.pop() if stack else None
            stack.append(Node(operand=Operation(op), left=child))
            continue
        if len(stack) < 2:
            raise StackUnderflowError(
                f"Operator {op.value!r} needs two operands, found {len(stack)}",
                start=tok.pos,
                end=tok.end,
                token=tok.text,
            )
        right = stack.pop()
        left = stack.pop()
        stack.append(Node(operand=Operation(op), left=left, right=right))

    if len(stack) != 1:
        return None
    return stack[0]
