"""rickroll compiler — public API."""

from __future__ import annotations

from .compiler import Compiler, compile_source, split_lines
from .errors import ERR_NAME, ERR_SYNTAX, CompileError
from .instructions import End, Instruction, Let, Program, Put, Set
from .statements import STMT_ASSIGN, STMT_LET, STMT_SAY, classify
from .tokens import Token, tokenize_expression

__all__ = [
    "Compiler",
    "CompileError",
    "End",
    "ERR_NAME",
    "ERR_SYNTAX",
    "Instruction",
    "Let",
    "Program",
    "Put",
    "STMT_ASSIGN",
    "STMT_LET",
    "STMT_SAY",
    "Set",
    "Token",
    "classify",
    "compile_source",
    "split_lines",
    "tokenize_expression",
]
