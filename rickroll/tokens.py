"""Expression tokenizer — lexes an expression substring into a token tuple."""

from __future__ import annotations

from collections.abc import Set
from dataclasses import dataclass

from .errors import ERR_NAME, ERR_SYNTAX, CompileError


# Token type constants
TK_INT = "INT"
TK_FLOAT = "FLOAT"
TK_STRING = "STRING"
TK_BOOL = "BOOL"
TK_UNDEFINED = "UNDEFINED"
TK_IDENT = "IDENT"
TK_OP = "OP"

KEYWORDS: dict[str, str] = {
    "TRUE": TK_BOOL,
    "FALSE": TK_BOOL,
    "UNDEFINED": TK_UNDEFINED,
}

# Multi-character operators, matched before single characters
MULTI_OPS: list[str] = [
    "==",
    "!=",
    "<=",
    ">=",
    "&&",
    "||",
]

SINGLE_OPS: set[str] = {
    "+",
    "-",
    "*",
    "/",
    "%",
    "<",
    ">",
    "!",
    "(",
    ")",
    ",",
}

ESCAPE_MAP: dict[str, str] = {
    "n": "\n",
    "r": "\r",
    "t": "\t",
    "\\": "\\",
    '"': '"',
    "0": "\0",
}


@dataclass(frozen=True)
class Token:
    """A lexed token. `col` is 1-based within the expression."""

    type: str
    value: str
    col: int

    def __str__(self) -> str:
        return self.type + ":" + self.value


def _is_digit(c: str) -> bool:
    return c >= "0" and c <= "9"


def _is_alpha(c: str) -> bool:
    return c.isalpha() or c == "_"


def is_word(c: str) -> bool:
    """Word character: alphanumeric or underscore."""
    return c.isalnum() or c == "_"


def tokenize_expression(expression: str, scope: Set[str]) -> tuple[Token, ...]:
    """Tokenize an expression, checking identifiers against `scope`."""
    tokens: list[Token] = []
    pos = 0
    length = len(expression)

    while pos < length:
        c = expression[pos]

        # Whitespace
        if c == " " or c == "\t":
            pos += 1
            continue

        start = pos
        col = pos + 1

        # Number: int or float
        if _is_digit(c):
            while pos < length and _is_digit(expression[pos]):
                pos += 1
            is_float = False
            if pos + 1 < length and expression[pos] == "." and _is_digit(expression[pos + 1]):
                is_float = True
                pos += 1
                while pos < length and _is_digit(expression[pos]):
                    pos += 1
            raw = expression[start:pos]
            if is_float:
                tokens.append(Token(TK_FLOAT, raw, col))
            else:
                tokens.append(Token(TK_INT, raw, col))
            continue

        # String literal: "..."
        if c == '"':
            pos += 1
            chars: list[str] = []
            while pos < length and expression[pos] != '"':
                if expression[pos] == "\\":
                    pos += 1
                    if pos >= length:
                        raise CompileError(ERR_SYNTAX, "unterminated string literal", col=col)
                    esc = expression[pos]
                    if esc not in ESCAPE_MAP:
                        raise CompileError(ERR_SYNTAX, "invalid escape: \\" + esc, col=pos)
                    chars.append(ESCAPE_MAP[esc])
                else:
                    chars.append(expression[pos])
                pos += 1
            if pos >= length:
                raise CompileError(ERR_SYNTAX, "unterminated string literal", col=col)
            pos += 1  # skip closing "
            tokens.append(Token(TK_STRING, "".join(chars), col))
            continue

        # Keyword or identifier
        if _is_alpha(c):
            while pos < length and is_word(expression[pos]):
                pos += 1
            word = expression[start:pos]
            if word in KEYWORDS:
                tokens.append(Token(KEYWORDS[word], word, col))
                continue
            if word not in scope:
                raise CompileError(ERR_NAME, "Variable " + word + " is not defined", col=col)
            tokens.append(Token(TK_IDENT, word, col))
            continue

        # Multi-character operators
        matched = False
        for op in MULTI_OPS:
            if expression.startswith(op, pos):
                tokens.append(Token(TK_OP, op, col))
                pos += len(op)
                matched = True
                break
        if matched:
            continue

        # Single-character operators
        if c in SINGLE_OPS:
            tokens.append(Token(TK_OP, c, col))
            pos += 1
            continue

        raise CompileError(ERR_SYNTAX, "Unexpected character " + repr(c), col=col)

    return tuple(tokens)
