"""Pytest-based compiler tests."""

from pathlib import Path

import pytest

from rickroll import (
    ERR_NAME,
    ERR_SYNTAX,
    CompileError,
    Compiler,
    End,
    Let,
    Put,
    Set,
    Token,
    compile_source,
    split_lines,
)
from rickroll.serialize import format_program

COMPILE_DIR = Path(__file__).parent / "compile"


def parse_test_file(path: Path) -> list[tuple[str, str, str]]:
    """Parse .tests file into (name, input, expected) tuples.

    Expected is 'ok' followed by the listing, or 'error: <Kind>' followed by
    an optional 'traceback: <line>, <line>' line.
    """
    lines = path.read_text().split("\n")
    result: list[tuple[str, str, str]] = []
    i = 0
    while i < len(lines):
        line = lines[i]
        if line.startswith("=== "):
            test_name = line[4:].strip()
            i += 1
            input_lines: list[str] = []
            while i < len(lines) and not lines[i].startswith("---"):
                input_lines.append(lines[i])
                i += 1
            if i < len(lines) and lines[i] == "---":
                i += 1
            expected_lines: list[str] = []
            while i < len(lines) and not lines[i].startswith("---"):
                expected_lines.append(lines[i])
                i += 1
            if i < len(lines) and lines[i] == "---":
                i += 1
            test_input = "\n".join(input_lines)
            expected = "\n".join(expected_lines).strip()
            result.append((test_name, test_input, expected))
        else:
            i += 1
    return result


def discover_compile_tests() -> list[tuple[str, str, str]]:
    """Find all compile tests, returns (test_id, input, expected)."""
    results = []
    for test_file in sorted(COMPILE_DIR.glob("*.tests")):
        for name, input_code, expected in parse_test_file(test_file):
            results.append((f"{test_file.stem}/{name}", input_code, expected))
    return results


def pytest_generate_tests(metafunc):
    """Parametrize tests over compile test files."""
    if "compile_input" in metafunc.fixturenames:
        params = [
            pytest.param(input_code, expected, id=test_id)
            for test_id, input_code, expected in discover_compile_tests()
        ]
        metafunc.parametrize("compile_input,compile_expected", params)


def _normalize(text: str) -> list[str]:
    return [" ".join(line.split()) for line in text.split("\n") if line.strip() != ""]


def test_compile(compile_input: str, compile_expected: str):
    """Verify the compiler produces the expected listing or error."""
    expected = compile_expected.split("\n")
    if expected[0] == "ok":
        try:
            program = compile_source(compile_input)
        except CompileError as e:
            pytest.fail(f"Expected ok, got {e}")
        assert _normalize(format_program(program)) == _normalize("\n".join(expected[1:]))
    elif expected[0].startswith("error:"):
        kind = expected[0][6:].strip()
        with pytest.raises(CompileError) as info:
            compile_source(compile_input)
        assert info.value.kind == kind
        for line in expected[1:]:
            if line.startswith("traceback:"):
                frames = [int(f) for f in line[10:].split(",")]
                assert info.value.traceback == frames
    else:
        pytest.fail(f"Unknown expected format: {expected[0]}")


# --- Direct tests with a stand-in lexer ---


def _word_lexer(expression, scope):
    """Splits on spaces; accepts anything."""
    return [Token("WORD", w, 0) for w in expression.split(" ")]


def _words(text: str) -> tuple[Token, ...]:
    return tuple(_word_lexer(text, frozenset()))


def test_say_hands_expression_to_lexer():
    program = compile_source("Never gonna say hello world", lexer=_word_lexer)
    assert program == [(1, Put(_words("hello world"))), (0, End())]


def test_let_declares():
    assert compile_source("Never gonna let x down") == [(1, Let("x")), (0, End())]


def test_assign_without_let():
    program = compile_source("Never gonna give x 5", lexer=_word_lexer)
    assert program == [(1, Set("x", _words("5"))), (0, End())]


def test_redeclaration_reports_second_line():
    with pytest.raises(CompileError) as info:
        compile_source("Never gonna let x down\nNever gonna let x down")
    assert info.value.kind == ERR_NAME
    assert info.value.msg == "Variable x already exists in the current scope"
    assert info.value.traceback == [2]


def test_illegal_statement():
    with pytest.raises(CompileError) as info:
        compile_source("not a valid line")
    assert info.value.kind == ERR_SYNTAX
    assert info.value.msg == "Illegal statement"
    assert info.value.line == 1


def test_empty_input():
    assert compile_source("") == [(0, End())]


def test_end_is_last_and_unique():
    program = compile_source("Never gonna let a down\n\nNever gonna say a\n")
    ends = [pair for pair in program if isinstance(pair[1], End)]
    assert ends == [(0, End())]
    assert program[-1] == (0, End())


def test_count_matches_non_blank_lines():
    source = "\n  \nNever gonna let a down\n\t\nNever gonna give a 1\nNever gonna say a\n\n"
    program = compile_source(source)
    non_blank = [line for line in source.split("\n") if line.strip() != ""]
    assert len(program) - 1 == len(non_blank)


def test_compile_twice_is_identical():
    source = 'Never gonna let x down\nNever gonna give x "up"\nNever gonna say x'
    assert compile_source(source) == compile_source(source)


def test_blank_lines_keep_original_numbers():
    program = compile_source("\n\nNever gonna let a down\n\nNever gonna say a")
    assert [line for line, _ in program] == [3, 5, 0]


def test_crlf_line_endings():
    program = compile_source("Never gonna let a down\r\nNever gonna say a\r\n")
    assert [line for line, _ in program] == [1, 2, 0]


def test_lone_carriage_return():
    program = compile_source("Never gonna let a down\rNever gonna say a")
    assert [line for line, _ in program] == [1, 2, 0]


def test_lexer_error_gains_one_frame():
    def failing(expression, scope):
        raise CompileError("ValueError", "bad literal", col=3)

    with pytest.raises(CompileError) as info:
        compile_source("Never gonna let a down\nNever gonna say 1", lexer=failing)
    assert info.value.kind == "ValueError"
    assert info.value.traceback == [2]
    assert info.value.col == 3


def test_lexer_error_keeps_inner_frames():
    def failing(expression, scope):
        raise CompileError("ValueError", "bad literal", line=7)

    with pytest.raises(CompileError) as info:
        compile_source("\nNever gonna give z 1", lexer=failing)
    assert info.value.traceback == [7, 2]


def test_lexer_gets_scope_snapshot():
    seen = []

    def recording(expression, scope):
        seen.append(scope)
        return []

    compile_source(
        "Never gonna let a down\nNever gonna say 1\nNever gonna let b down\nNever gonna give c 2",
        lexer=recording,
    )
    assert seen == [frozenset({"a"}), frozenset({"a", "b"})]
    assert isinstance(seen[0], frozenset)


def test_lexer_cannot_mutate_scope():
    def greedy(expression, scope):
        try:
            scope.add("sneaky")
        except AttributeError:
            pass
        return []

    compiler = Compiler("Never gonna say 1", lexer=greedy)
    compiler.compile()
    assert compiler.scope == set()


def test_assign_name_and_expression_split_on_first_space():
    seen = []

    def recording(expression, scope):
        seen.append(expression)
        return []

    program = compile_source("Never gonna give x a b  c", lexer=recording)
    assert seen == ["a b  c"]
    assert program[0] == (1, Set("x", ()))


def test_assign_without_space_is_illegal():
    compiler = Compiler("")
    with pytest.raises(CompileError) as info:
        compiler.compile_assign("x")
    assert info.value.kind == ERR_SYNTAX
    assert info.value.traceback == [1]


def test_split_lines():
    assert split_lines("") == [""]
    assert split_lines("a\nb") == ["a", "b"]
    assert split_lines("a\n") == ["a", ""]
    assert split_lines("a\r\nb\rc") == ["a", "b", "c"]
    assert split_lines("\n\n") == ["", "", ""]
