"""Runtime value model for Pashto++.

Values are dynamically typed and tagged by their Python representation:

* Number   -> ``float`` (never ``bool``; all numeric literals are floats)
* String   -> ``str``
* Boolean  -> ``bool``
* Array    -> :class:`ArrayVal`, shared by reference
* Function -> :class:`FunctionValue`, a closure over its defining scope
* Nil      -> the :data:`NIL` singleton

Every operator and built-in inspects the kind explicitly through
:func:`type_name` or the ``is_*`` helpers; nothing is coerced implicitly
except by the ``_`` concatenation operator, which goes through
:func:`to_string`.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, List, Optional
import math


TRUE_WORD = 'rishtia'
FALSE_WORD = 'ghalat'


@dataclass
class ErrorVal:
    """Describes an error: its category name, message and source position.

    ``line`` and ``column`` are 1-based; zero means the position is unknown.
    """
    name: str
    message: str
    line: int = 0
    column: int = 0

    def __str__(self) -> str:
        if self.line > 0:
            return f"{self.name}: {self.message} at line {self.line}, column {self.column}"
        return f"{self.name}: {self.message}"


class NilVal:
    """Marker object for the absence of a value."""
    _instance: Optional['NilVal'] = None

    def __new__(cls) -> 'NilVal':
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return 'Nil'


NIL = NilVal()


@dataclass(eq=False)
class ArrayVal:
    """A mutable, resizable sequence of values.

    Arrays compare by identity in Python; language-level equality is
    structural and lives in :func:`values_equal`.
    """
    items: List[Any]

    def __repr__(self) -> str:
        return f"Array({self.items!r})"


@dataclass(eq=False)
class FunctionValue:
    """A user-defined function together with the scope it was declared in."""
    name: str
    params: List[str]
    body: Any  # ast.Block
    env: Any  # environment.Environment

    def __repr__(self) -> str:
        return f"<opejana {self.name}>"


def is_number(value: Any) -> bool:
    return isinstance(value, float)


def is_string(value: Any) -> bool:
    return isinstance(value, str)


def is_boolean(value: Any) -> bool:
    return isinstance(value, bool)


def type_name(value: Any) -> str:
    """Return the Pashto++ kind name of a runtime value."""
    if isinstance(value, bool):
        return 'Boolean'
    if isinstance(value, float):
        return 'Number'
    if isinstance(value, str):
        return 'String'
    if isinstance(value, ArrayVal):
        return 'Array'
    if isinstance(value, FunctionValue):
        return 'Function'
    if isinstance(value, NilVal):
        return 'Nil'
    return type(value).__name__


def format_number(x: float) -> str:
    """Format a number without unnecessary trailing zeros.

    Integral values print without a fractional part (``5`` rather than
    ``5.0``); everything else uses the shortest representation that
    round-trips.
    """
    if math.isnan(x):
        return 'NaN'
    if math.isinf(x):
        return 'Infinity' if x > 0 else '-Infinity'
    if x.is_integer():
        return str(int(x))
    return repr(x)


def to_string(value: Any) -> str:
    """Convert a value to the text used by `olika` and the `_` operator."""
    if isinstance(value, bool):
        return TRUE_WORD if value else FALSE_WORD
    if isinstance(value, float):
        return format_number(value)
    if isinstance(value, str):
        return value
    if isinstance(value, ArrayVal):
        return '[' + ', '.join(to_string(item) for item in value.items) + ']'
    if isinstance(value, FunctionValue):
        return f"<opejana {value.name}>"
    if isinstance(value, NilVal):
        return 'nil'
    return str(value)


def values_equal(a: Any, b: Any) -> bool:
    # Values of different kinds are never equal; this keeps == and != total.
    kind = type_name(a)
    if kind != type_name(b):
        return False
    if isinstance(a, ArrayVal):
        if len(a.items) != len(b.items):
            return False
        return all(values_equal(x, y) for x, y in zip(a.items, b.items))
    if isinstance(a, FunctionValue):
        return a is b
    if isinstance(a, NilVal):
        return True
    return a == b
