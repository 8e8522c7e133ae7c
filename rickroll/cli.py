"""rickroll CLI — compile source files to an instruction listing."""

from __future__ import annotations

import logging
import sys

from .compiler import compile_source, split_lines
from .errors import CompileError
from .serialize import error_to_dict, format_program, program_to_dict, to_json
from .statements import classify

PHASES: list[str] = [
    "classify",
    "compile",
]

USAGE: str = """\
rickroll [OPTIONS] [INPUT] [-o OUTPUT]

Compile a rickroll program to instructions. Reads stdin when INPUT is omitted.

Options:
  --stop-at PHASE     Stop after phase: classify, compile
  --json              Write JSON instead of a text listing
  -o, --output FILE   Write output to FILE instead of stdout
  -v, --verbose       Log compiler activity to stderr
  -h, --help          Show this help message
"""


class Options:
    """Parsed command-line options."""

    def __init__(self) -> None:
        self.stop_at: str = "compile"
        self.json: bool = False
        self.verbose: bool = False
        self.input_file: str | None = None
        self.output_file: str | None = None


def parse_args(args: list[str]) -> tuple[Options | None, int]:
    """Parse arguments. Returns (options, exit_code); options is None when done."""
    opts = Options()
    i = 0
    while i < len(args):
        arg = args[i]
        if arg == "--help" or arg == "-h":
            print(USAGE, end="")
            return (None, 0)
        elif arg == "--stop-at":
            if i + 1 >= len(args):
                print("error: --stop-at requires an argument", file=sys.stderr)
                return (None, 2)
            opts.stop_at = args[i + 1]
            i += 2
        elif arg == "-o" or arg == "--output":
            if i + 1 >= len(args):
                print("error: " + arg + " requires an argument", file=sys.stderr)
                return (None, 2)
            opts.output_file = args[i + 1]
            i += 2
        elif arg == "--json":
            opts.json = True
            i += 1
        elif arg == "-v" or arg == "--verbose":
            opts.verbose = True
            i += 1
        elif arg.startswith("-") and arg != "-":
            print("error: unknown flag '" + arg + "'", file=sys.stderr)
            return (None, 2)
        else:
            if opts.input_file is not None:
                print("error: unexpected argument '" + arg + "'", file=sys.stderr)
                return (None, 2)
            opts.input_file = arg
            i += 1
    if opts.stop_at not in PHASES:
        print("error: unknown phase '" + opts.stop_at + "'", file=sys.stderr)
        return (None, 2)
    return (opts, 0)


def read_source(input_file: str | None) -> tuple[str, int]:
    """Read source from file or stdin. Returns (source, exit_code)."""
    if input_file is not None and input_file != "-":
        try:
            with open(input_file, "rb") as f:
                raw = f.read()
        except OSError:
            print("error: cannot open '" + input_file + "'", file=sys.stderr)
            return ("", 1)
    else:
        raw = sys.stdin.buffer.read()
    try:
        return (raw.decode("utf-8"), 0)
    except ValueError:
        print("error: invalid utf-8 in input", file=sys.stderr)
        return ("", 1)


def write_output(output: str, output_file: str | None) -> int:
    """Write output to file or stdout. Returns 0 on success, 1 on error."""
    if output_file is not None:
        try:
            with open(output_file, "w", encoding="utf-8") as f:
                f.write(output + "\n")
        except OSError:
            print("error: cannot write '" + output_file + "'", file=sys.stderr)
            return 1
        return 0
    print(output)
    return 0


def classify_listing(source: str, as_json: bool) -> str:
    """Statement tag per source line; '-' marks blank lines, '?' unmatched ones."""
    rows: list[dict[str, object]] = []
    for i, raw in enumerate(split_lines(source)):
        line = raw.strip()
        if line == "":
            tag = "-"
        else:
            tag = classify(line) or "?"
        rows.append({"line": i + 1, "statement": tag})
    if as_json:
        return to_json({"lines": rows})
    return "\n".join(str(r["line"]).rjust(4) + "  " + str(r["statement"]) for r in rows)


def run(source: str, opts: Options) -> tuple[int, str]:
    """Run the requested phases. Returns (exit_code, output)."""
    if opts.stop_at == "classify":
        return (0, classify_listing(source, opts.json))
    try:
        program = compile_source(source)
    except CompileError as e:
        if opts.json:
            print(to_json(error_to_dict(e)), file=sys.stderr)
        else:
            print(e.format(), file=sys.stderr)
        return (1, "")
    if opts.json:
        return (0, to_json(program_to_dict(program)))
    return (0, format_program(program))


def main(argv: list[str] | None = None) -> int:
    args = argv if argv is not None else sys.argv[1:]
    opts, code = parse_args(args)
    if opts is None:
        return code
    logging.basicConfig(
        level=logging.DEBUG if opts.verbose else logging.WARNING,
        format="%(name)s: %(levelname)s: %(message)s",
        stream=sys.stderr,
    )
    source, err = read_source(opts.input_file)
    if err != 0:
        return err
    exit_code, output = run(source, opts)
    if exit_code != 0:
        return exit_code
    return write_output(output, opts.output_file)


def main_entry() -> None:
    sys.exit(main())


if __name__ == "__main__":
    main_entry()
