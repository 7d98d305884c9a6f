from dataclasses import dataclass
from typing import Any, Optional


@dataclass
class BuiltinFunction:
    name: str
    min_args: int
    max_args: Optional[int]  # None means variadic
    fn: Any
    is_async: bool = False

    def __repr__(self) -> str:
        return f"<builtin {self.name}>"
