from typing import Any, Awaitable, Callable, List, Optional
from pashtopp.errors import EvalError


InputProvider = Callable[[], Awaitable[str]]
EchoSink = Callable[[str], Any]


class BasicIO:
    """Output buffer and input source owned by a single run.

    Every chunk written is kept in order and, when an echo sink is given,
    forwarded to it immediately so a host can display prompts before the
    run suspends for input.
    """
    def __init__(self, input_provider: Optional[InputProvider] = None, echo: Optional[EchoSink] = None):
        self.input_provider = input_provider
        self.echo = echo
        self.chunks: List[str] = []

    def write(self, text: str):
        self.chunks.append(text)
        if self.echo is not None:
            self.echo(text)

    def getvalue(self) -> str:
        return ''.join(self.chunks)

    async def read_line(self) -> str:
        if self.input_provider is None:
            raise EvalError('no input provider is attached to this run')
        try:
            line = await self.input_provider()
        except EOFError:
            raise EvalError('no more input') from None
        if not isinstance(line, str):
            raise EvalError(f"input provider returned {type(line).__name__}, expected text")
        if line.endswith('\r\n'):
            return line[:-2]
        if line.endswith('\n'):
            return line[:-1]
        return line
