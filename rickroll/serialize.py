"""Serialization of compiled programs and errors — dicts, JSON, text listing."""

from __future__ import annotations

from .errors import CompileError
from .instructions import End, Instruction, Let, Program, Put, Set
from .tokens import Token


def token_to_dict(token: Token) -> dict[str, object]:
    return {"type": token.type, "value": token.value, "col": token.col}


def _tokens_to_list(tokens: tuple[Token, ...]) -> list[object]:
    return [token_to_dict(t) for t in tokens]


def instruction_to_dict(line: int, instr: Instruction) -> dict[str, object]:
    """Convert one (line, instruction) pair to a plain dict."""
    d: dict[str, object] = {"line": line, "op": type(instr).__name__}
    if isinstance(instr, Put):
        d["tokens"] = _tokens_to_list(instr.tokens)
    elif isinstance(instr, Let):
        d["name"] = instr.name
    elif isinstance(instr, Set):
        d["name"] = instr.name
        d["tokens"] = _tokens_to_list(instr.tokens)
    elif not isinstance(instr, End):
        raise TypeError("unknown instruction: " + repr(instr))
    return d


def program_to_dict(program: Program) -> dict[str, object]:
    return {"instructions": [instruction_to_dict(line, instr) for line, instr in program]}


def error_to_dict(error: CompileError) -> dict[str, object]:
    d: dict[str, object] = {
        "kind": error.kind,
        "message": error.msg,
        "traceback": list(error.traceback),
    }
    if error.col > 0:
        d["col"] = error.col
    return d


# --- JSON ---


def _json_escape(s: str) -> str:
    """Escape a string for JSON output."""
    result: list[str] = []
    for c in s:
        if c == "\\":
            result.append("\\\\")
        elif c == '"':
            result.append('\\"')
        elif c == "\n":
            result.append("\\n")
        elif c == "\r":
            result.append("\\r")
        elif c == "\t":
            result.append("\\t")
        elif ord(c) < 0x20:
            result.append("\\u" + format(ord(c), "04x"))
        else:
            result.append(c)
    return "".join(result)


def _to_json(obj: object, indent: int, level: int) -> str:
    if obj is None:
        return "null"
    if isinstance(obj, bool):
        if obj:
            return "true"
        return "false"
    if isinstance(obj, int):
        return str(obj)
    if isinstance(obj, str):
        return '"' + _json_escape(obj) + '"'
    if isinstance(obj, list):
        if len(obj) == 0:
            return "[]"
        pad = " " * (indent * (level + 1))
        pad_close = " " * (indent * level)
        parts = [pad + _to_json(item, indent, level + 1) for item in obj]
        return "[\n" + ",\n".join(parts) + "\n" + pad_close + "]"
    if isinstance(obj, dict):
        if len(obj) == 0:
            return "{}"
        pad = " " * (indent * (level + 1))
        pad_close = " " * (indent * level)
        parts = []
        for k, v in obj.items():
            key_str = '"' + _json_escape(str(k)) + '"'
            parts.append(pad + key_str + ": " + _to_json(v, indent, level + 1))
        return "{\n" + ",\n".join(parts) + "\n" + pad_close + "}"
    raise TypeError("cannot serialize " + type(obj).__name__)


def to_json(obj: object) -> str:
    """Serialize object to pretty-printed JSON."""
    return _to_json(obj, 2, 0)


# --- Text listing ---


def format_instruction(line: int, instr: Instruction) -> str:
    text = type(instr).__name__
    if isinstance(instr, (Let, Set)):
        text += " " + instr.name
    if isinstance(instr, (Put, Set)):
        text += " " + " ".join(str(t) for t in instr.tokens)
    return str(line).rjust(4) + "  " + text


def format_program(program: Program) -> str:
    """One instruction per line: right-aligned source line, op, arguments."""
    return "\n".join(format_instruction(line, instr) for line, instr in program)
