"""Regex-driven tokenizer for Lox source text."""

from __future__ import annotations

import re
import sys
from dataclasses import dataclass
from enum import Enum, auto
from typing import Iterator


class TokenType(Enum):
    """Every kind of token the lexer can recognise."""

    LINE_COMMENT = auto()
    BLOCK_COMMENT = auto()

    LEFT_PAREN = auto()
    RIGHT_PAREN = auto()
    LEFT_CURLY = auto()
    RIGHT_CURLY = auto()

    COMMA = auto()
    SEMI = auto()
    DOT = auto()

    MINUS = auto()
    PLUS = auto()
    DIV = auto()
    STAR = auto()

    ASSIGNOP = auto()
    NOT = auto()
    NOT_EQUAL = auto()
    EQUAL = auto()
    GREATER = auto()
    GREATER_EQUAL = auto()
    LESS = auto()
    LESS_EQUAL = auto()
    AND = auto()
    OR = auto()
    TRUE = auto()
    FALSE = auto()

    IF = auto()
    ELSE = auto()
    WHILE = auto()
    FOR = auto()
    NIL = auto()

    CLASS = auto()
    VAR = auto()
    FUN = auto()
    PRINT = auto()
    RETURN = auto()
    SUPER = auto()
    THIS = auto()

    STRING = auto()
    NUMBER = auto()
    ID = auto()

    LINE_FEED = auto()
    OTHER_BLANK = auto()
    ERROR = auto()
    EOF = auto()


@dataclass(frozen=True)
class Token:
    """A lexeme together with its kind and the line it starts on."""

    token_type: TokenType
    lineno: int
    lexeme: str


# Order matters: on equal match length the earlier rule wins.
_PATTERNS: tuple[tuple[str, TokenType], ...] = (
    (r"//[^\r\n]*", TokenType.LINE_COMMENT),
    (r"/\*[\s\S]*?\*/", TokenType.BLOCK_COMMENT),
    (r"\(", TokenType.LEFT_PAREN),
    (r"\)", TokenType.RIGHT_PAREN),
    (r"\{", TokenType.LEFT_CURLY),
    (r"\}", TokenType.RIGHT_CURLY),
    (r",", TokenType.COMMA),
    (r";", TokenType.SEMI),
    (r"\.", TokenType.DOT),
    (r"-", TokenType.MINUS),
    (r"\+", TokenType.PLUS),
    (r"/", TokenType.DIV),
    (r"\*", TokenType.STAR),
    (r"=", TokenType.ASSIGNOP),
    (r"!", TokenType.NOT),
    (r"!=", TokenType.NOT_EQUAL),
    (r"==", TokenType.EQUAL),
    (r">", TokenType.GREATER),
    (r">=", TokenType.GREATER_EQUAL),
    (r"<", TokenType.LESS),
    (r"<=", TokenType.LESS_EQUAL),
    (r"\b(and)\b", TokenType.AND),
    (r"\b(or)\b", TokenType.OR),
    (r"\b(true)\b", TokenType.TRUE),
    (r"\b(false)\b", TokenType.FALSE),
    (r"\b(if)\b", TokenType.IF),
    (r"\b(else)\b", TokenType.ELSE),
    (r"\b(while)\b", TokenType.WHILE),
    (r"\b(for)\b", TokenType.FOR),
    (r"\b(nil)\b", TokenType.NIL),
    (r"\b(class)\b", TokenType.CLASS),
    (r"\b(var)\b", TokenType.VAR),
    (r"\b(fun)\b", TokenType.FUN),
    (r"\b(print)\b", TokenType.PRINT),
    (r"\b(return)\b", TokenType.RETURN),
    (r"\b(super)\b", TokenType.SUPER),
    (r"\b(this)\b", TokenType.THIS),
    (r'"([^"]*)"', TokenType.STRING),
    (r"\d+(\.\d+)?", TokenType.NUMBER),
    (r"[a-zA-Z_][a-zA-Z0-9_]*", TokenType.ID),
    (r"\r?\n", TokenType.LINE_FEED),
    (r"[ \t\f]+", TokenType.OTHER_BLANK),
    (r".", TokenType.ERROR),
)

_RULES = tuple((re.compile(pattern), token_type) for pattern, token_type in _PATTERNS)

_SILENT = frozenset({TokenType.OTHER_BLANK, TokenType.LINE_COMMENT})


class Lexer:
    """Splits source text into tokens using longest-match rules.

    Unrecognised characters are reported on stderr, recorded in
    ``errors`` and skipped.
    """

    def __init__(self, source: str) -> None:
        self.source = source
        self.position = 0
        self.lineno = 1
        self.errors: list[str] = []

    def _longest_match(self, remaining: str) -> tuple[TokenType, str] | None:
        best: tuple[TokenType, str] | None = None
        for pattern, token_type in _RULES:
            match = pattern.match(remaining)
            if match and match.end() > (len(best[1]) if best else 0):
                best = (token_type, match.group(0))
        return best

    def next_token(self) -> Token:
        """Return the next significant token, or an EOF token at the end."""
        while self.position < len(self.source):
            # Slicing keeps word boundaries relative to the current position.
            found = self._longest_match(self.source[self.position:])
            if found is None:
                break
            token_type, text = found
            self.position += len(text)

            if token_type is TokenType.LINE_FEED:
                self.lineno += 1
                continue
            if token_type in _SILENT:
                continue
            if token_type is TokenType.BLOCK_COMMENT:
                self.lineno += text.count("\n")
                continue
            if token_type is TokenType.ERROR:
                message = f"Lexer Error at line {self.lineno}: Unrecognized token '{text}'"
                self.errors.append(message)
                print(message, file=sys.stderr)
                continue

            return Token(token_type, self.lineno, text)

        return Token(TokenType.EOF, self.lineno, "")

    def __iter__(self) -> Iterator[Token]:
        while True:
            token = self.next_token()
            yield token
            if token.token_type is TokenType.EOF:
                return

    def tokenize(self) -> list[Token]:
        """Return all remaining tokens, ending with a single EOF token."""
        return list(self)


def tokenize(source: str) -> list[Token]:
    """Tokenize ``source`` in one call."""
    return Lexer(source).tokenize()