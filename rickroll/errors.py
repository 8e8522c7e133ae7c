"""Compile errors with a line-number traceback."""

from __future__ import annotations


# Error kind constants
ERR_SYNTAX = "SyntaxError"
ERR_NAME = "NameError"


class CompileError(Exception):
    """Error raised while compiling or lexing source.

    `traceback` lists the source lines the error passed through, innermost
    first. Errors raised by the expression lexer start with an empty traceback
    and a column inside the expression; the compiler adds the line.
    """

    def __init__(self, kind: str, msg: str, line: int | None = None, col: int = 0):
        self.kind: str = kind
        self.msg: str = msg
        self.col: int = col
        self.traceback: list[int] = []
        if line is not None:
            self.traceback.append(line)
        super().__init__(self._describe())

    @property
    def line(self) -> int:
        if len(self.traceback) == 0:
            return 0
        return self.traceback[0]

    def add_frame(self, line: int) -> None:
        """Record one more enclosing source line."""
        self.traceback.append(line)
        self.args = (self._describe(),)

    def _describe(self) -> str:
        text = self.kind + ": " + self.msg
        if len(self.traceback) > 0:
            text += " at line " + str(self.traceback[0])
        if self.col > 0:
            text += " col " + str(self.col)
        return text

    def format(self) -> str:
        """Render a report, outermost frame first."""
        lines: list[str] = ["Traceback:"]
        i = len(self.traceback) - 1
        while i >= 0:
            lines.append("  line " + str(self.traceback[i]))
            i -= 1
        message = self.kind + ": " + self.msg
        if self.col > 0:
            message += " (col " + str(self.col) + ")"
        lines.append(message)
        return "\n".join(lines)
