"""JSON serialization/deserialization for the Pashto++ AST.

This module converts between AST dataclasses and plain dict/list
structures suitable for JSON encoding. Every node keeps its source
position so a tree loaded back from JSON reports runtime errors at the
same lines and columns as the original source.
"""

from __future__ import annotations

from typing import Any, Dict

from .ast import (
    Program,
    Block,
    FuncDecl,
    IfStmt,
    WhileStmt,
    ForInStmt,
    ReturnStmt,
    ExprStmt,
    Literal,
    Ident,
    ArrayLit,
    BinaryOp,
    Assign,
    Call,
)


def _pos(node: Any) -> Dict[str, Any]:
    return {"line": node.line, "column": node.column}


def ast_to_obj(node: Any) -> Any:
    if node is None:
        return None

    if isinstance(node, Program):
        return {"type": "Program", **_pos(node), "body": [ast_to_obj(n) for n in node.body]}
    if isinstance(node, Block):
        return {"type": "Block", **_pos(node), "statements": [ast_to_obj(s) for s in node.statements]}
    if isinstance(node, FuncDecl):
        return {
            "type": "FuncDecl",
            **_pos(node),
            "name": node.name,
            "params": list(node.params),
            "body": ast_to_obj(node.body),
        }
    if isinstance(node, IfStmt):
        return {
            "type": "IfStmt",
            **_pos(node),
            "condition": ast_to_obj(node.condition),
            "then_block": ast_to_obj(node.then_block),
            "else_block": ast_to_obj(node.else_block),
        }
    if isinstance(node, WhileStmt):
        return {"type": "WhileStmt", **_pos(node), "condition": ast_to_obj(node.condition),
                "body": ast_to_obj(node.body)}
    if isinstance(node, ForInStmt):
        return {
            "type": "ForInStmt",
            **_pos(node),
            "var_name": node.var_name,
            "iterable": ast_to_obj(node.iterable),
            "body": ast_to_obj(node.body),
        }
    if isinstance(node, ReturnStmt):
        return {"type": "ReturnStmt", **_pos(node), "value": ast_to_obj(node.value)}
    if isinstance(node, ExprStmt):
        return {"type": "ExprStmt", **_pos(node), "expr": ast_to_obj(node.expr)}
    if isinstance(node, Literal):
        return {"type": "Literal", **_pos(node), "value": node.value, "literal_type": node.literal_type}
    if isinstance(node, Ident):
        return {"type": "Ident", **_pos(node), "name": node.name}
    if isinstance(node, ArrayLit):
        return {"type": "ArrayLit", **_pos(node), "elements": [ast_to_obj(e) for e in node.elements]}
    if isinstance(node, BinaryOp):
        return {"type": "BinaryOp", **_pos(node), "op": node.op, "left": ast_to_obj(node.left),
                "right": ast_to_obj(node.right)}
    if isinstance(node, Assign):
        return {"type": "Assign", **_pos(node), "target": ast_to_obj(node.target), "value": ast_to_obj(node.value)}
    if isinstance(node, Call):
        return {"type": "Call", **_pos(node), "func": ast_to_obj(node.func), "args": [ast_to_obj(a) for a in node.args]}

    raise TypeError(f"Unsupported node for serialization: {type(node).__name__}")


def _literal_value(obj: Dict[str, Any]) -> Any:
    # JSON has a single number type; Pashto++ numbers are always floats.
    if obj["literal_type"] == "Number":
        return float(obj["value"])
    return obj["value"]


def ast_from_obj(obj: Any) -> Any:
    if obj is None:
        return None
    if not isinstance(obj, dict):
        raise TypeError("Invalid AST object")
    t = obj.get("type")
    line, column = obj.get("line", 0), obj.get("column", 0)
    if t == "Program":
        return Program(line, column, [ast_from_obj(n) for n in obj["body"]])
    if t == "Block":
        return Block(line, column, [ast_from_obj(s) for s in obj["statements"]])
    if t == "FuncDecl":
        return FuncDecl(line, column, obj["name"], list(obj["params"]), ast_from_obj(obj["body"]))
    if t == "IfStmt":
        return IfStmt(
            line,
            column,
            ast_from_obj(obj["condition"]),
            ast_from_obj(obj["then_block"]),
            ast_from_obj(obj.get("else_block")),
        )
    if t == "WhileStmt":
        return WhileStmt(line, column, ast_from_obj(obj["condition"]), ast_from_obj(obj["body"]))
    if t == "ForInStmt":
        return ForInStmt(line, column, obj["var_name"], ast_from_obj(obj["iterable"]), ast_from_obj(obj["body"]))
    if t == "ReturnStmt":
        return ReturnStmt(line, column, ast_from_obj(obj.get("value")))
    if t == "ExprStmt":
        return ExprStmt(line, column, ast_from_obj(obj["expr"]))
    if t == "Literal":
        return Literal(line, column, _literal_value(obj), obj["literal_type"])
    if t == "Ident":
        return Ident(line, column, obj["name"])
    if t == "ArrayLit":
        return ArrayLit(line, column, [ast_from_obj(e) for e in obj["elements"]])
    if t == "BinaryOp":
        return BinaryOp(line, column, obj["op"], ast_from_obj(obj["left"]), ast_from_obj(obj["right"]))
    if t == "Assign":
        return Assign(line, column, ast_from_obj(obj["target"]), ast_from_obj(obj["value"]))
    if t == "Call":
        return Call(line, column, ast_from_obj(obj["func"]), [ast_from_obj(a) for a in obj["args"]])

    raise ValueError(f"Unknown AST node type: {t}")
