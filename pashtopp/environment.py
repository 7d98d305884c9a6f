from typing import Any, Dict, Optional
from pashtopp.errors import EvalError


class Environment:
    """A lexical scope: name-to-value bindings plus a link to the enclosing scope."""
    def __init__(self, parent: Optional['Environment'] = None):
        self.parent = parent
        self.values: Dict[str, Any] = {}

    def resolve(self, name: str) -> Optional['Environment']:
        env: Optional[Environment] = self
        while env is not None:
            if name in env.values:
                return env
            env = env.parent
        return None

    def has(self, name: str) -> bool:
        return self.resolve(name) is not None

    def get(self, name: str, line: int = 0, column: int = 0) -> Any:
        owner = self.resolve(name)
        if owner is None:
            raise EvalError(f"undefined variable '{name}'", line, column)
        return owner.values[name]

    def define(self, name: str, value: Any):
        self.values[name] = value

    def assign(self, name: str, value: Any):
        # Rebind in the nearest scope that already has the name, otherwise
        # create the binding here; there is no separate declaration step.
        owner = self.resolve(name)
        if owner is None:
            owner = self
        owner.values[name] = value
