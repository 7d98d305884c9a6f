import asyncio
from pathlib import Path
from pashtopp.interpreter import parse_program, Interpreter

EXAMPLES = Path(__file__).resolve().parent.parent / 'examples'


def test_program_7_closures_keep_their_own_counter():
    with open(EXAMPLES / 'program_7.ppp', 'r', encoding='utf-8') as f:
        source = f.read()
    ast = parse_program(source)
    interp = Interpreter()
    out = asyncio.run(interp.run(ast))
    assert out == '3\n1\n'
