"""Abstract Syntax Tree (AST) definitions for Pashto++.

Each node records the line and column of its leading token so the
evaluator can point runtime errors at the source. The tree is built once
by the parser and only read afterwards.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional, Any


@dataclass
class Node:
    """Base class for all AST nodes."""
    line: int
    column: int


@dataclass
class Program(Node):
    body: List[Node] = field(default_factory=list)


@dataclass
class Block(Node):
    statements: List[Node] = field(default_factory=list)


@dataclass
class FuncDecl(Node):
    name: str
    params: List[str]
    body: Block


@dataclass
class IfStmt(Node):
    condition: Node
    then_block: Block
    else_block: Optional[Block] = None


@dataclass
class WhileStmt(Node):
    condition: Node
    body: Block


@dataclass
class ForInStmt(Node):
    var_name: str
    iterable: Node
    body: Block


@dataclass
class ReturnStmt(Node):
    value: Optional[Node] = None


@dataclass
class ExprStmt(Node):
    expr: Node


@dataclass
class Literal(Node):
    value: Any
    literal_type: str  # 'Number', 'String', 'Boolean'


@dataclass
class Ident(Node):
    name: str


@dataclass
class ArrayLit(Node):
    elements: List[Node]


@dataclass
class BinaryOp(Node):
    op: str  # canonical symbol, word aliases are resolved by the parser
    left: Node
    right: Node


@dataclass
class Assign(Node):
    target: Ident
    value: Node


@dataclass
class Call(Node):
    func: Node
    args: List[Node]
