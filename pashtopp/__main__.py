"""CLI entry point for the Pashto++ interpreter.

Usage:
    python -m pashtopp [-v|-vv|-vvv] [--timeout SECONDS] <program_file>
    python -m pashtopp [-v...] --emit-ast <program_file>
    python -m pashtopp [-v...] [--timeout SECONDS] --ast <ast_json_file>

Options:
  -v            Increase debug verbosity (can be repeated)
  --timeout     Cancel the run after the given number of seconds
  --emit-ast    Parse the given .ppp file and emit an AST JSON file
  --ast         Execute a previously emitted AST JSON file

Program output is written to stdout as it is produced, so `oghwara`
prompts appear before the interpreter waits for a line on stdin. Errors
are written to stderr and the process exits with status 1.

Debug information is written to `debug.txt` in the current directory when
verbosity is greater than zero.
"""

import argparse
import asyncio
import json
import sys
import threading
from pathlib import Path
from typing import List, Optional
from .ast import Program
from .ast_json import ast_to_obj, ast_from_obj
from .errors import PashtoError
from .interpreter import Interpreter
from .parser import parse_program


async def stdin_line() -> str:
    line = await asyncio.to_thread(sys.stdin.readline)
    if line == '':
        raise EOFError
    return line


def echo_stdout(text: str) -> None:
    sys.stdout.write(text)
    sys.stdout.flush()


def read_file(path: Path) -> str:
    if not path.exists():
        print(f"Error: file {path} not found", file=sys.stderr)
        sys.exit(1)
    with open(path, 'r', encoding='utf-8') as f:
        return f.read()


def parse_or_exit(source: str) -> Program:
    try:
        return parse_program(source)
    except PashtoError as e:
        print(str(e), file=sys.stderr)
        sys.exit(1)


def execute(program: Program, debug_level: int, timeout) -> None:
    cancel = threading.Event()
    timer = None
    if timeout is not None:
        timer = threading.Timer(timeout, cancel.set)
        timer.daemon = True
        timer.start()
    interpreter = Interpreter(stdin_line, echo=echo_stdout, cancel=cancel, debug_level=debug_level)
    try:
        asyncio.run(interpreter.run(program))
    except PashtoError as e:
        sys.stdout.flush()
        print(str(e), file=sys.stderr)
        sys.exit(1)
    finally:
        if timer is not None:
            timer.cancel()


def main(argv: Optional[List[str]] = None) -> None:
    parser = argparse.ArgumentParser(description="Pashto++ language interpreter")
    parser.add_argument('-v', action='count', default=0, help='increase debug verbosity (can be repeated)')
    parser.add_argument('--timeout', type=float, metavar='SECONDS', help='cancel the run after SECONDS')
    group = parser.add_mutually_exclusive_group()
    group.add_argument('--emit-ast', metavar='PPP_FILE', help='emit AST JSON for the given .ppp file')
    group.add_argument('--ast', metavar='AST_JSON_FILE', help='execute AST from a JSON file')
    parser.add_argument('program', nargs='?', help='Pashto++ program file (.ppp) to execute')
    args = parser.parse_args(argv)

    # Emit AST mode
    if args.emit_ast:
        program_file = Path(args.emit_ast)
        ast_program = parse_or_exit(read_file(program_file))
        obj = ast_to_obj(ast_program)
        out_path = program_file.with_name(program_file.name + '.ast.json')
        with open(out_path, 'w', encoding='utf-8') as out:
            json.dump(obj, out, ensure_ascii=False, indent=2)
        print(str(out_path))
        return

    # Execute from AST JSON
    if args.ast:
        source = read_file(Path(args.ast))
        try:
            ast_program = ast_from_obj(json.loads(source))
        except (TypeError, ValueError, KeyError) as e:
            print(f"Error: invalid AST file: {e}", file=sys.stderr)
            sys.exit(1)
        execute(ast_program, args.v, args.timeout)
        return

    # Default: execute source file
    if not args.program:
        parser.error('missing program file; or use --emit-ast/--ast')
    ast_program = parse_or_exit(read_file(Path(args.program)))
    execute(ast_program, args.v, args.timeout)


if __name__ == '__main__':
    main()
