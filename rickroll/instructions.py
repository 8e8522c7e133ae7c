"""Compiled instruction forms consumed by an executor."""

from __future__ import annotations

from dataclasses import dataclass

from .tokens import Token


@dataclass(frozen=True)
class Instruction:
    """Base for all instructions."""


@dataclass(frozen=True)
class Put(Instruction):
    """Print the evaluated expression."""

    tokens: tuple[Token, ...]


@dataclass(frozen=True)
class Let(Instruction):
    """Declare a variable with no initial value."""

    name: str


@dataclass(frozen=True)
class Set(Instruction):
    """Assign the evaluated expression to a variable."""

    name: str
    tokens: tuple[Token, ...]


@dataclass(frozen=True)
class End(Instruction):
    """End of program. Always last, line 0."""


# (source line, instruction); line 0 means no single originating line
Program = list[tuple[int, Instruction]]
