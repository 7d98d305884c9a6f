# Pashto++ language package
# This package provides a tokenizer, parser and asynchronous tree-walking
# interpreter for Pashto++, a small scripting language with Pashto keywords.
from .interpreter import run, run_program, RunResult, Interpreter
from .lexer import tokenize
from .parser import parse_program
from .errors import PashtoError, LexicalError, ParseError, EvalError, RunCancelled

__all__ = [
    'run',
    'run_program',
    'RunResult',
    'Interpreter',
    'tokenize',
    'parse_program',
    'PashtoError',
    'LexicalError',
    'ParseError',
    'EvalError',
    'RunCancelled',
]
