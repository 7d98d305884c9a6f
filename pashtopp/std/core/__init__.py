from pashtopp.builtin_function import BuiltinFunction
from pashtopp.errors import EvalError
from pashtopp.types import ArrayVal, format_number, is_number, type_name
from typing import Dict, List, Any


def _require_number(fn_name: str, value: Any, position: str) -> float:
    if not is_number(value):
        raise EvalError(f"{fn_name} {position} argument must be Number, got {type_name(value)}")
    return value


def _require_integer(fn_name: str, value: Any, position: str) -> float:
    value = _require_number(fn_name, value, position)
    if not value.is_integer():
        raise EvalError(f"{fn_name} {position} argument must be a whole number, got {format_number(value)}")
    return value


def populate_core_builtins() -> Dict[str, BuiltinFunction]:
    """Build the sequence and numeric built-ins."""

    def std_jorkanumbers(args: List[Any]) -> Any:
        start = _require_integer('jorkanumbers', args[0], 'start')
        end = _require_integer('jorkanumbers', args[1], 'end')
        items = []
        current = start
        while current < end:
            items.append(current)
            current += 1.0
        return ArrayVal(items)

    def std_oshmara(args: List[Any]) -> Any:
        target = args[0]
        if not isinstance(target, ArrayVal):
            raise EvalError(f"oshmara argument must be Array, got {type_name(target)}")
        return float(len(target.items))

    def std_max(args: List[Any]) -> Any:
        for i, arg in enumerate(args):
            _require_number('max', arg, f"#{i + 1}")
        return max(args)

    def std_min(args: List[Any]) -> Any:
        for i, arg in enumerate(args):
            _require_number('min', arg, f"#{i + 1}")
        return min(args)

    def std_abs(args: List[Any]) -> Any:
        return abs(_require_number('abs', args[0], 'first'))

    return {
        'jorkanumbers': BuiltinFunction('jorkanumbers', 2, 2, std_jorkanumbers),
        'oshmara': BuiltinFunction('oshmara', 1, 1, std_oshmara),
        'max': BuiltinFunction('max', 1, None, std_max),
        'min': BuiltinFunction('min', 1, None, std_min),
        'abs': BuiltinFunction('abs', 1, 1, std_abs),
    }
