"""Tree-walking evaluator for Pashto++.

The :class:`Interpreter` walks a parsed :class:`~pashtopp.ast.Program`,
executing statements for effect and evaluating expressions to runtime
values (see :mod:`pashtopp.types`). Evaluation is written as coroutines so
that the `oghwara` built-in can await the host's input provider; that is
the only place a run ever suspends. Everything else runs synchronously
between suspensions.

The public entry points are :func:`run`, which takes source text and an
asynchronous input provider and returns a :class:`RunResult`, and
:func:`run_program`, its synchronous counterpart.
"""

from __future__ import annotations

import asyncio
import math
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from .std.io import BasicIO, EchoSink, InputProvider, populate_io_builtins
from .std.core import populate_core_builtins
from .types import (
    NIL, ArrayVal, FunctionValue, is_number, to_string, type_name, values_equal,
)
from .ast import (
    Program, Block, FuncDecl, IfStmt, WhileStmt, ForInStmt, ReturnStmt,
    ExprStmt, Literal, Ident, ArrayLit, BinaryOp, Assign, Call, Node,
)
from .errors import PashtoError, EvalError, RunCancelled, ReturnSignal
from .environment import Environment
from .builtin_function import BuiltinFunction
from .parser import parse_program


class Interpreter:
    """Core interpreter that executes a Pashto++ AST.

    One instance corresponds to one run: it owns the global scope, the
    output buffer and the built-in table, none of which are shared with
    other instances.

    ``cancel`` may be any object with an ``is_set()`` method (for example
    :class:`threading.Event`). It is polled at every loop iteration and
    every user function call, and the run aborts with
    :class:`~pashtopp.errors.RunCancelled` once it is set.
    """
    def __init__(self, input_provider: Optional[InputProvider] = None, echo: Optional[EchoSink] = None,
                 cancel: Any = None, debug_level: int = 0, debug_file: str = 'debug.txt'):
        self.global_env = Environment()
        self.io = BasicIO(input_provider, echo)
        self.cancel = cancel
        self.debug_level = debug_level
        self.debug_file = debug_file
        self.debug_fp = None
        self.builtins: Dict[str, BuiltinFunction] = {}
        self.load_builtins()

    @property
    def output(self) -> str:
        return self.io.getvalue()

    def debug(self, msg: str):
        if self.debug_fp:
            self.debug_fp.write(msg + '\n')
            self.debug_fp.flush()

    def load_builtins(self):
        self.builtins.update(populate_io_builtins(self.io))
        self.builtins.update(populate_core_builtins())

    # Public API
    async def run(self, program: Program) -> str:
        """Execute the program's top-level statements and return the output text.

        Errors propagate as :class:`~pashtopp.errors.PashtoError`; output
        produced before the error stays available through :attr:`output`.
        """
        if self.debug_level > 0:
            self.debug_fp = open(self.debug_file, 'w', encoding='utf-8')
        try:
            self.debug(f"run: {len(program.body)} top-level statements")
            # A top-level `raka` simply ends the program.
            await self.execute_block(program.body, self.global_env)
            self.debug('run: finished')
        except PashtoError as e:
            self.debug(f"run: aborted: {e}")
            raise
        except RecursionError:
            # nesting too deep outside any user call, e.g. a long operator chain
            err = EvalError('maximum recursion depth exceeded')
            self.debug(f"run: aborted: {err}")
            raise err from None
        finally:
            if self.debug_fp:
                self.debug_fp.close()
                self.debug_fp = None
        return self.output

    def check_cancel(self, node: Node):
        if self.cancel is not None and self.cancel.is_set():
            raise RunCancelled(node.line, node.column)

    def check_condition(self, value: Any, keyword: str, node: Node) -> bool:
        if not isinstance(value, bool):
            raise EvalError(f"{keyword} condition must be Boolean, got {type_name(value)}",
                            node.line, node.column)
        if self.debug_level >= 3:
            self.debug(f"{keyword} condition at {node.line}:{node.column} -> {to_string(value)}")
        return value

    async def execute_block(self, statements: List[Node], env: Environment) -> Optional[ReturnSignal]:
        for stmt in statements:
            result = await self.execute(stmt, env)
            # a return signal stops the block and is handed to the caller
            if isinstance(result, ReturnSignal):
                return result
        return None

    async def execute(self, node: Node, env: Environment) -> Optional[ReturnSignal]:
        if isinstance(node, ExprStmt):
            await self.evaluate(node.expr, env)
            return None
        if isinstance(node, FuncDecl):
            if node.name in self.builtins:
                raise EvalError(f"cannot redefine built-in '{node.name}'", node.line, node.column)
            env.define(node.name, FunctionValue(node.name, node.params, node.body, env))
            if self.debug_level >= 2:
                self.debug(f"define function {node.name}({', '.join(node.params)})")
            return None
        if isinstance(node, IfStmt):
            cond = await self.evaluate(node.condition, env)
            if self.check_condition(cond, 'ko', node):
                return await self.execute_block(node.then_block.statements, Environment(parent=env))
            if node.else_block is not None:
                return await self.execute_block(node.else_block.statements, Environment(parent=env))
            return None
        if isinstance(node, WhileStmt):
            # one scope for the body, shared by every iteration
            body_env = Environment(parent=env)
            while True:
                self.check_cancel(node)
                cond = await self.evaluate(node.condition, env)
                if not self.check_condition(cond, 'kala', node):
                    break
                res = await self.execute_block(node.body.statements, body_env)
                if isinstance(res, ReturnSignal):
                    return res
            return None
        if isinstance(node, ForInStmt):
            iterable = await self.evaluate(node.iterable, env)
            if not isinstance(iterable, ArrayVal):
                raise EvalError(f"che loop can only iterate an Array, got {type_name(iterable)}",
                                node.line, node.column)
            for item in list(iterable.items):
                self.check_cancel(node)
                if self.debug_level >= 3:
                    self.debug(f"che {node.var_name} = {to_string(item)}")
                iteration_env = Environment(parent=env)
                iteration_env.define(node.var_name, item)
                res = await self.execute_block(node.body.statements, iteration_env)
                if isinstance(res, ReturnSignal):
                    return res
            return None
        if isinstance(node, ReturnStmt):
            value = await self.evaluate(node.value, env) if node.value is not None else NIL
            return ReturnSignal(value)
        if isinstance(node, Block):
            return await self.execute_block(node.statements, Environment(parent=env))
        raise NotImplementedError(f"execute: unexpected node type {type(node).__name__}")

    async def evaluate(self, node: Node, env: Environment) -> Any:
        if isinstance(node, Literal):
            return node.value
        if isinstance(node, Ident):
            if node.name in self.builtins and not env.has(node.name):
                raise EvalError(f"built-in '{node.name}' can only be called", node.line, node.column)
            return env.get(node.name, node.line, node.column)
        if isinstance(node, ArrayLit):
            return ArrayVal([await self.evaluate(el, env) for el in node.elements])
        if isinstance(node, BinaryOp):
            left = await self.evaluate(node.left, env)
            right = await self.evaluate(node.right, env)
            return self.apply_binary_op(node.op, left, right, node)
        if isinstance(node, Assign):
            name = node.target.name
            if name in self.builtins:
                raise EvalError(f"cannot assign to built-in '{name}'", node.line, node.column)
            value = await self.evaluate(node.value, env)
            env.assign(name, value)
            if self.debug_level >= 2:
                self.debug(f"assign {name} = {to_string(value)}")
            return value
        if isinstance(node, Call):
            if isinstance(node.func, Ident) and node.func.name in self.builtins:
                builtin = self.builtins[node.func.name]
                args = [await self.evaluate(arg, env) for arg in node.args]
                return await self.call_builtin(builtin, args, node)
            func = await self.evaluate(node.func, env)
            args = [await self.evaluate(arg, env) for arg in node.args]
            return await self.call_function(func, args, node)
        raise NotImplementedError(f"evaluate: unexpected node type {type(node).__name__}")

    async def call_builtin(self, func: BuiltinFunction, args: List[Any], node: Call) -> Any:
        if len(args) < func.min_args or (func.max_args is not None and len(args) > func.max_args):
            if func.max_args is None:
                expected = f"at least {func.min_args}"
            elif func.min_args == func.max_args:
                expected = str(func.min_args)
            else:
                expected = f"{func.min_args} to {func.max_args}"
            raise EvalError(f"{func.name} expects {expected} argument(s), got {len(args)}",
                            node.line, node.column)
        if self.debug_level >= 2:
            self.debug(f"call built-in {func.name} with {len(args)} argument(s)")
        try:
            result = func.fn(args)
            if func.is_async:
                result = await result
        except EvalError as ex:
            if ex.line == 0:
                raise EvalError(ex.err.message, node.line, node.column) from None
            raise
        return result

    async def call_function(self, func: Any, args: List[Any], node: Call) -> Any:
        if not isinstance(func, FunctionValue):
            what = f"'{node.func.name}'" if isinstance(node.func, Ident) else 'value'
            raise EvalError(f"cannot call {what} of type {type_name(func)}", node.line, node.column)
        self.check_cancel(node)
        if self.debug_level >= 2:
            self.debug(f"call {func.name} with {len(args)} argument(s)")
        # Missing arguments bind Nil, extra arguments are ignored.
        call_env = Environment(parent=func.env)
        for i, param in enumerate(func.params):
            call_env.define(param, args[i] if i < len(args) else NIL)
        try:
            res = await self.execute_block(func.body.statements, call_env)
        except RecursionError:
            raise EvalError('maximum recursion depth exceeded', node.line, node.column) from None
        if isinstance(res, ReturnSignal):
            return res.value
        return NIL

    def apply_binary_op(self, op: str, a: Any, b: Any, node: BinaryOp) -> Any:
        if op == '_':
            return to_string(a) + to_string(b)
        if op == '==':
            return values_equal(a, b)
        if op == '!=':
            return not values_equal(a, b)
        if not (is_number(a) and is_number(b)):
            raise EvalError(f"operator '{op}' expects Number operands, got {type_name(a)} and {type_name(b)}",
                            node.line, node.column)
        if op == '+':
            return a + b
        if op == '-':
            return a - b
        if op == '*':
            return a * b
        if op == '/':
            if b == 0:
                raise EvalError('division by zero', node.line, node.column)
            return a / b
        if op == '%':
            if b == 0:
                raise EvalError('modulo by zero', node.line, node.column)
            # remainder takes the sign of the dividend
            return math.fmod(a, b)
        if op == '>':
            return a > b
        if op == '<':
            return a < b
        if op == '>=':
            return a >= b
        if op == '<=':
            return a <= b
        raise EvalError(f"unknown operator {op}", node.line, node.column)


@dataclass
class RunResult:
    """Outcome of one run: all output produced, plus the error that ended it, if any."""
    output: str
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None


async def run(source: str, input_provider: Optional[InputProvider] = None, *, echo: Optional[EchoSink] = None,
              cancel: Any = None, debug_level: int = 0, debug_file: str = 'debug.txt') -> RunResult:
    """Tokenize, parse and execute Pashto++ source text.

    ``input_provider`` is a zero-argument callable returning an awaitable
    that resolves to one line of input; it is awaited each time the
    program calls `oghwara`. The first error of any kind ends the run and
    is reported in :attr:`RunResult.error` alongside the output produced
    before it.
    """
    interpreter = Interpreter(input_provider, echo=echo, cancel=cancel,
                              debug_level=debug_level, debug_file=debug_file)
    try:
        program = parse_program(source)
        await interpreter.run(program)
    except PashtoError as e:
        return RunResult(interpreter.output, str(e))
    return RunResult(interpreter.output)


def run_program(source: str, input_provider: Optional[InputProvider] = None, **kwargs) -> RunResult:
    """Synchronous wrapper around :func:`run` for hosts without an event loop."""
    return asyncio.run(run(source, input_provider, **kwargs))
