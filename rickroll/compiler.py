"""Line compiler — turns source lines into (line, instruction) pairs.

Each non-blank line is classified, then compiled to exactly one instruction.
Expression text is handed to the expression lexer together with a frozen copy
of the declared names, so nothing the lexer does can reach the live scope.
Errors from the lexer get the current line appended to their traceback.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence, Set as AbstractSet
from typing import Callable

from .errors import ERR_NAME, ERR_SYNTAX, CompileError
from .instructions import End, Instruction, Let, Program, Put, Set
from .statements import (
    ASSIGN_PREFIX,
    LET_PREFIX,
    LET_SUFFIX,
    SAY_PREFIX,
    STMT_ASSIGN,
    STMT_LET,
    STMT_SAY,
    classify,
)
from .tokens import Token, tokenize_expression

logger = logging.getLogger(__name__)

Lexer = Callable[[str, AbstractSet[str]], Sequence[Token]]


def split_lines(source: str) -> list[str]:
    """Split on \\n, \\r\\n or a lone \\r. Always yields a final segment."""
    lines: list[str] = []
    current: list[str] = []
    pos = 0
    length = len(source)
    while pos < length:
        c = source[pos]
        if c == "\r" or c == "\n":
            lines.append("".join(current))
            current = []
            if c == "\r" and pos + 1 < length and source[pos + 1] == "\n":
                pos += 1
        else:
            current.append(c)
        pos += 1
    lines.append("".join(current))
    return lines


class Compiler:
    """Single-use compiler over one source text."""

    def __init__(self, source: str, lexer: Lexer = tokenize_expression) -> None:
        self.ptr: int = 0
        self.lines: list[str] = split_lines(source)
        self.scope: set[str] = set()
        self.lexer: Lexer = lexer

    def lineno(self) -> int:
        return self.ptr + 1

    def advance(self) -> None:
        self.ptr += 1

    def lex(self, expression: str) -> tuple[Token, ...]:
        """Run the lexer on a snapshot of the scope, tagging failures with the line."""
        try:
            tokens = self.lexer(expression, frozenset(self.scope))
        except CompileError as e:
            e.add_frame(self.lineno())
            raise
        return tuple(tokens)

    def compile(self) -> Program:
        compiled: Program = []
        while self.ptr < len(self.lines):
            line = self.lines[self.ptr].strip()
            if line != "":
                compiled.append((self.lineno(), self.compile_statement(line)))
            self.advance()
        compiled.append((0, End()))
        return compiled

    def compile_statement(self, line: str) -> Instruction:
        stmt = classify(line)
        if stmt == STMT_SAY:
            return Put(self.lex(line[len(SAY_PREFIX) :]))
        if stmt == STMT_LET:
            return self.compile_let(line[len(LET_PREFIX) : len(line) - len(LET_SUFFIX)])
        if stmt == STMT_ASSIGN:
            return self.compile_assign(line[len(ASSIGN_PREFIX) :])
        raise CompileError(ERR_SYNTAX, "Illegal statement", self.lineno())

    def compile_let(self, name: str) -> Instruction:
        if name in self.scope:
            raise CompileError(
                ERR_NAME,
                "Variable " + name + " already exists in the current scope",
                self.lineno(),
            )
        self.scope.add(name)
        logger.debug("line %d: declare %s", self.lineno(), name)
        return Let(name)

    def compile_assign(self, rest: str) -> Instruction:
        index = rest.find(" ")
        if index < 0:
            raise CompileError(ERR_SYNTAX, "Illegal statement", self.lineno())
        name = rest[:index].strip()
        tokens = self.lex(rest[index + 1 :])
        logger.debug("line %d: assign %s <- %s", self.lineno(), name, tokens)
        return Set(name, tokens)


def compile_source(source: str, lexer: Lexer = tokenize_expression) -> Program:
    """Compile source text. Raises CompileError on the first failure."""
    return Compiler(source, lexer).compile()
