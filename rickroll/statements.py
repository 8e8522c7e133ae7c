"""Statement classifier — matches a trimmed line against the fixed grammars."""

from __future__ import annotations

from typing import Callable

from .tokens import is_word


# Statement tags
STMT_SAY = "Say"
STMT_LET = "Let"
STMT_ASSIGN = "Assign"

SAY_PREFIX = "Never gonna say "
LET_PREFIX = "Never gonna let "
LET_SUFFIX = " down"
ASSIGN_PREFIX = "Never gonna give "


def _all_word(text: str) -> bool:
    if text == "":
        return False
    for c in text:
        if not is_word(c):
            return False
    return True


def _match_say(line: str) -> bool:
    """Never gonna say .+"""
    return line.startswith(SAY_PREFIX) and len(line) > len(SAY_PREFIX)


def _match_let(line: str) -> bool:
    """Never gonna let \\w+ down"""
    if not line.startswith(LET_PREFIX) or not line.endswith(LET_SUFFIX):
        return False
    if len(line) < len(LET_PREFIX) + len(LET_SUFFIX):
        return False
    return _all_word(line[len(LET_PREFIX) : len(line) - len(LET_SUFFIX)])


def _match_assign(line: str) -> bool:
    """Never gonna give \\w+ .+"""
    if not line.startswith(ASSIGN_PREFIX):
        return False
    pos = len(ASSIGN_PREFIX)
    start = pos
    while pos < len(line) and is_word(line[pos]):
        pos += 1
    if pos == start:
        return False
    # a single space, then at least one character
    return pos + 1 < len(line) and line[pos] == " "


# Tried in order; the first match wins
GRAMMARS: list[tuple[str, Callable[[str], bool]]] = [
    (STMT_SAY, _match_say),
    (STMT_LET, _match_let),
    (STMT_ASSIGN, _match_assign),
]


def classify(line: str) -> str | None:
    """Return the tag of the first grammar matching the whole line, or None."""
    for tag, matches in GRAMMARS:
        if matches(line):
            return tag
    return None
