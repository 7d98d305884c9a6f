from pathlib import Path
from pashtopp import run_program

EXAMPLES = Path(__file__).resolve().parent.parent / 'examples'


def test_program_14_reads_until_empty_line(feed_input):
    with open(EXAMPLES / 'program_14.ppp', 'r', encoding='utf-8') as f:
        source = f.read()
    result = run_program(source, feed_input('salam\n', 'dera\r\n', '\n'))
    assert result.ok, result.error
    assert result.output.splitlines() == ['line 1: salam', 'line 2: dera', 'lines: 2']


def test_program_14_runs_out_of_input(feed_input):
    with open(EXAMPLES / 'program_14.ppp', 'r', encoding='utf-8') as f:
        source = f.read()
    result = run_program(source, feed_input('salam\n'))
    assert result.output == 'line 1: salam\n'
    assert result.error.startswith('RuntimeError: no more input')
