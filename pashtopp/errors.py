from typing import Any
from pashtopp.types import ErrorVal


class PashtoError(Exception):
    """Base class for every error that aborts a Pashto++ run."""
    def __init__(self, err: ErrorVal):
        super().__init__(str(err))
        self.err = err

    @property
    def line(self) -> int:
        return self.err.line

    @property
    def column(self) -> int:
        return self.err.column


class LexicalError(PashtoError):
    """Raised by the tokenizer for unterminated strings and stray characters."""
    def __init__(self, message: str, line: int = 0, column: int = 0):
        super().__init__(ErrorVal('LexicalError', message, line, column))


class ParseError(PashtoError):
    """Raised by the parser on the first structural violation."""
    def __init__(self, message: str, line: int = 0, column: int = 0):
        super().__init__(ErrorVal('SyntaxError', message, line, column))


class EvalError(PashtoError):
    """Raised by the evaluator; reported to hosts as a RuntimeError."""
    def __init__(self, message: str, line: int = 0, column: int = 0):
        super().__init__(ErrorVal('RuntimeError', message, line, column))


class RunCancelled(EvalError):
    """Raised when the host's cancel flag is observed at a loop or call boundary."""
    def __init__(self, line: int = 0, column: int = 0):
        super().__init__('execution cancelled', line, column)


class ReturnSignal(Exception):
    """Internal signal used to unwind a function body on `raka`."""
    def __init__(self, value: Any):
        super().__init__('return')
        self.value = value
