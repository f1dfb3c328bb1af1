"""Shunting-yard conversion of infix token sequences into postfix order."""

from __future__ import annotations

from enum import Enum
from typing import Final, Sequence

from .lexer import Token, token_texts, tokenize


class Operator(str, Enum):
    SUM = "+"
    SUB = "-"
    MUL = "*"
    DIV = "/"
    POW = "^"
    TRANSPOSE = "T"
    DETERMINANT = "DET"
    INVERSE = "INV"

    @property
    def precedence(self) -> int:
        return PRECEDENCE[self]

    @property
    def is_unary(self) -> bool:
        return self in UNARY_OPERATORS


# DET ties with "/" and sits below the other postfix unaries; kept for surface compatibility.
PRECEDENCE: Final[dict[Operator, int]] = {
    Operator.SUM: 1,
    Operator.SUB: 1,
    Operator.MUL: 1,
    Operator.DIV: 2,
    Operator.DETERMINANT: 2,
    Operator.POW: 3,
    Operator.INVERSE: 3,
    Operator.TRANSPOSE: 3,
}

UNARY_OPERATORS: Final[frozenset[Operator]] = frozenset(
    {Operator.TRANSPOSE, Operator.DETERMINANT, Operator.INVERSE}
)

RESERVED_WORDS: Final[frozenset[str]] = frozenset(op.value for op in Operator) | {"(", ")"}

_OPERATORS_BY_SYMBOL: Final[dict[str, Operator]] = {op.value: op for op in Operator}


def operator_for(text: str) -> Operator | None:
    return _OPERATORS_BY_SYMBOL.get(text)


def to_postfix(tokens: Sequence[Token]) -> list[Token]:
    """Reorder infix tokens into postfix.

    Operands (numbers, identifiers, and anything unrecognised) go straight to
    the output; malformed input is left for the tree builder to reject.
    Operators of equal precedence are popped first, so every binary operator,
    ``^`` included, associates to the left.
    """
    stack: list[Token] = []
    output: list[Token] = []
    for tok in tokens:
        if tok.text == "(":
            stack.append(tok)
            continue
        if tok.text == ")":
            while stack:
                top = stack.pop()
                if top.text == "(":
                    break
                output.append(top)
            continue
        op = operator_for(tok.text)
        if op is None:
            output.append(tok)
            continue
        while stack and stack[-1].text != "(":
            top_op = operator_for(stack[-1].text)
            assert top_op is not None
            if top_op.precedence < op.precedence:
                break
            output.append(stack.pop())
        stack.append(tok)
    while stack:
        output.append(stack.pop())
    return output


def infix_to_postfix(expression: str) -> list[str]:
    return token_texts(to_postfix(tokenize(expression)))
