"""Tokenizer turning raw input text into a lazy stream of tokens."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Iterator

from .config import DECIMAL_SEPARATOR

DIGITS = frozenset("0123456789")
LETTERS = frozenset("abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ")


class TokenKind(Enum):
    NUMBER = "number"
    IDENTIFIER = "identifier"
    SYMBOL = "symbol"
    END = "end"


@dataclass(frozen=True)
class Token:
    kind: TokenKind
    text: str
    position: int

    @property
    def is_word(self) -> bool:
        return self.kind in (TokenKind.NUMBER, TokenKind.IDENTIFIER)

    def is_symbol(self, char: str) -> bool:
        return self.kind is TokenKind.SYMBOL and self.text == char

    def __str__(self) -> str:
        if self.kind is TokenKind.END:
            return "end of input"
        return repr(self.text)


def is_whitespace(char: str) -> bool:
    """ASCII control characters and space (codes 0-32) separate tokens."""
    return ord(char) <= 32


def word_characters(strict: bool = False) -> frozenset[str]:
    """Characters merged into number and identifier runs.

    Strict mode only accepts digits, so neither decimals nor identifiers
    can be formed.
    """
    if strict:
        return DIGITS
    return DIGITS | LETTERS | {DECIMAL_SEPARATOR}


def tokenize(text: str, strict: bool = False) -> Iterator[Token]:
    """Yield tokens for ``text``, finishing with a single END token.

    Args:
        text: Raw input
        strict: Restrict word characters to digits

    Yields:
        Token instances in input order
    """
    word_chars = word_characters(strict)
    position = 0
    length = len(text)
    while position < length:
        char = text[position]
        if is_whitespace(char):
            position += 1
            continue
        if char in word_chars:
            start = position
            while position < length and text[position] in word_chars:
                position += 1
            word = text[start:position]
            kind = TokenKind.IDENTIFIER if word[0] in LETTERS else TokenKind.NUMBER
            yield Token(kind, word, start)
            continue
        yield Token(TokenKind.SYMBOL, char, position)
        position += 1
    yield Token(TokenKind.END, "", length)
