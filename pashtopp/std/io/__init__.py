from .basic_io import BasicIO, InputProvider, EchoSink
from pashtopp.builtin_function import BuiltinFunction
from pashtopp.errors import EvalError
from pashtopp.types import NIL, to_string, type_name
from typing import Dict, List, Any


def populate_io_builtins(basic_io: BasicIO) -> Dict[str, BuiltinFunction]:
        """Build `olika` (print) and `oghwara` (input) bound to one run's I/O."""

        def std_olika(args: List[Any]) -> Any:
            basic_io.write(''.join(to_string(a) for a in args) + '\n')
            return NIL

        async def std_oghwara(args: List[Any]) -> Any:
            prompt = args[0] if args else ''
            if not isinstance(prompt, str):
                raise EvalError(f"oghwara prompt must be String, got {type_name(prompt)}")
            if prompt:
                basic_io.write(prompt)
            # the only point where a run suspends
            return await basic_io.read_line()

        return {
            'olika': BuiltinFunction('olika', 0, None, std_olika),
            'oghwara': BuiltinFunction('oghwara', 0, 1, std_oghwara, is_async=True),
        }


__all__ = ['BasicIO', 'InputProvider', 'EchoSink', 'populate_io_builtins']
