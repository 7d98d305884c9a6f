import asyncio
from pathlib import Path
from pashtopp.interpreter import parse_program, Interpreter

EXAMPLES = Path(__file__).resolve().parent.parent / 'examples'


def test_program_9_prompt_and_input(feed_input):
    with open(EXAMPLES / 'program_9.ppp', 'r', encoding='utf-8') as f:
        source = f.read()
    ast = parse_program(source)
    interp = Interpreter(feed_input('Ahmad\n'))
    out = asyncio.run(interp.run(ast))
    # the prompt is not followed by a newline
    assert out == 'Num: Salam, Ahmad!\n'
