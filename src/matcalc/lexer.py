"""Tokenization for space-separated calculator expressions."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Token:
    text: str
    pos: int
    end: int


def tokenize(source: str) -> list[Token]:
    """Split ``source`` on single spaces, keeping each token's character span.

    Consecutive spaces produce empty tokens, as in the surface grammar; those
    are rejected later by the tree builder like any other unknown token.
    """
    if not source:
        return []
    tokens: list[Token] = []
    pos = 0
    for text in source.split(" "):
        tokens.append(Token(text=text, pos=pos, end=pos + len(text)))
        pos += len(text) + 1
    return tokens


def token_texts(tokens: list[Token]) -> list[str]:
    return [tok.text for tok in tokens]
