"""Recursive-descent parser for Pashto++.

The parser consumes the token list produced by :func:`pashtopp.lexer.tokenize`
and builds a :class:`~pashtopp.ast.Program`. It stops at the first
structural error and raises :class:`~pashtopp.errors.ParseError` carrying
the line and column of the offending token; there is no error recovery.

Expression precedence, lowest to highest:

1. assignment (right-associative, target must be an identifier)
2. equality ``==`` ``!=``
3. comparison ``>`` ``<`` ``>=`` ``<=``
4. additive ``+``/``jama`` ``-``/``manfi`` ``_``
5. multiplicative ``*``/``zarab`` ``/``/``takseem`` ``%``/``takseembaki``
6. unary ``-``/``manfi`` (desugared to ``0 - operand``)
7. calls ``f(args)``, applied left to right, then primaries

Word operators are resolved to their symbols here, so the evaluator only
ever sees canonical operators.
"""

from __future__ import annotations

from typing import List, Optional

from .ast import (
    Program, Block, FuncDecl, IfStmt, WhileStmt, ForInStmt, ReturnStmt,
    ExprStmt, Literal, Ident, ArrayLit, BinaryOp, Assign, Call, Node,
)
from .errors import ParseError
from .lexer import (
    Token, tokenize,
    NUMBER, STRING, IDENTIFIER, KEYWORD, OPERATOR, PUNCTUATION, EOF,
)


OPERATOR_ALIASES = {
    'jama': '+',
    'manfi': '-',
    'zarab': '*',
    'takseem': '/',
    'takseembaki': '%',
}

EQUALITY_OPS = ('==', '!=')
COMPARISON_OPS = ('>', '<', '>=', '<=')
ADDITIVE_OPS = ('+', '-', '_')
MULTIPLICATIVE_OPS = ('*', '/', '%')

# Keywords that name built-in routines and may therefore appear as call targets.
CALLABLE_KEYWORDS = ('olika', 'oghwara')


def canonical_operator(value: str) -> str:
    return OPERATOR_ALIASES.get(value, value)


def describe(token: Token) -> str:
    if token.type == EOF:
        return 'end of input'
    if token.type == STRING:
        return f"string {token.value!r}"
    return f"'{token.value}'"


class Parser:
    def __init__(self, tokens: List[Token]):
        if not tokens or tokens[-1].type != EOF:
            raise ValueError('token list must end with an EOF token')
        self.tokens = tokens
        self.pos = 0

    # Token helpers

    def peek(self) -> Token:
        return self.tokens[self.pos]

    def advance(self) -> Token:
        token = self.tokens[self.pos]
        if token.type != EOF:
            self.pos += 1
        return token

    def at_end(self) -> bool:
        return self.peek().type == EOF

    def check(self, type_: str, value: Optional[str] = None) -> bool:
        token = self.peek()
        if token.type != type_:
            return False
        return value is None or token.value == value

    def check_operator(self, operators) -> bool:
        token = self.peek()
        return token.type == OPERATOR and canonical_operator(token.value) in operators

    def match(self, type_: str, value: Optional[str] = None) -> bool:
        if self.check(type_, value):
            self.advance()
            return True
        return False

    def consume(self, type_: str, value: Optional[str], message: str) -> Token:
        if self.check(type_, value):
            return self.advance()
        token = self.peek()
        raise ParseError(f"{message}, got {describe(token)}", token.line, token.column)

    def skip_semicolons(self):
        while self.match(PUNCTUATION, ';'):
            pass

    # Declarations and statements

    def parse_program(self) -> Program:
        statements: List[Node] = []
        self.skip_semicolons()
        while not self.at_end():
            statements.append(self.parse_declaration())
            self.skip_semicolons()
        return Program(1, 1, statements)

    def parse_declaration(self) -> Node:
        if self.check(KEYWORD, 'opejana'):
            return self.parse_func_decl()
        return self.parse_statement()

    def parse_func_decl(self) -> FuncDecl:
        keyword = self.consume(KEYWORD, 'opejana', "expected 'opejana'")
        name = self.consume(IDENTIFIER, None, 'expected function name after opejana')
        self.consume(PUNCTUATION, '(', "expected '(' after function name")
        params: List[str] = []
        if not self.check(PUNCTUATION, ')'):
            while True:
                param = self.consume(IDENTIFIER, None, 'expected parameter name')
                params.append(param.value)
                if not self.match(PUNCTUATION, ','):
                    break
        self.consume(PUNCTUATION, ')', "expected ')' after parameters")
        body = self.parse_block("expected '{' before function body")
        return FuncDecl(keyword.line, keyword.column, name.value, params, body)

    def parse_statement(self) -> Node:
        token = self.peek()
        if token.type == KEYWORD:
            if token.value == 'ko':
                return self.parse_if_stmt()
            if token.value == 'kala':
                return self.parse_while_stmt()
            if token.value == 'che':
                return self.parse_for_stmt()
            if token.value == 'raka':
                return self.parse_return_stmt()
        if self.check(PUNCTUATION, '{'):
            return self.parse_block()
        return self.parse_expr_stmt()

    def parse_block(self, message: str = "expected '{'") -> Block:
        opening = self.consume(PUNCTUATION, '{', message)
        statements: List[Node] = []
        self.skip_semicolons()
        while not self.check(PUNCTUATION, '}'):
            if self.at_end():
                token = self.peek()
                raise ParseError("expected '}' after block, got end of input", token.line, token.column)
            statements.append(self.parse_declaration())
            self.skip_semicolons()
        self.consume(PUNCTUATION, '}', "expected '}' after block")
        return Block(opening.line, opening.column, statements)

    def parse_if_stmt(self) -> IfStmt:
        keyword = self.consume(KEYWORD, 'ko', "expected 'ko'")
        self.consume(PUNCTUATION, '(', "expected '(' after ko")
        condition = self.parse_expression()
        self.consume(PUNCTUATION, ')', "expected ')' after if condition")
        then_block = self.parse_block("expected '{' before if body")
        else_block = None
        if self.check(KEYWORD, 'geni'):
            geni = self.advance()
            if self.check(KEYWORD, 'ko'):
                # geni ko (...) { } is lowered into an else block holding the nested if
                nested = self.parse_if_stmt()
                else_block = Block(geni.line, geni.column, [nested])
            else:
                else_block = self.parse_block("expected '{' before else body")
        return IfStmt(keyword.line, keyword.column, condition, then_block, else_block)

    def parse_while_stmt(self) -> WhileStmt:
        keyword = self.consume(KEYWORD, 'kala', "expected 'kala'")
        self.consume(PUNCTUATION, '(', "expected '(' after kala")
        condition = self.parse_expression()
        self.consume(PUNCTUATION, ')', "expected ')' after while condition")
        body = self.parse_block("expected '{' before while body")
        return WhileStmt(keyword.line, keyword.column, condition, body)

    def parse_for_stmt(self) -> ForInStmt:
        keyword = self.consume(KEYWORD, 'che', "expected 'che'")
        self.consume(PUNCTUATION, '(', "expected '(' after che")
        var = self.consume(IDENTIFIER, None, 'expected loop variable name in che loop')
        self.consume(KEYWORD, 'we', "expected 'we' after loop variable")
        iterable = self.parse_expression()
        self.consume(PUNCTUATION, ')', "expected ')' after che loop iterable")
        body = self.parse_block("expected '{' before che loop body")
        return ForInStmt(keyword.line, keyword.column, var.value, iterable, body)

    def parse_return_stmt(self) -> ReturnStmt:
        keyword = self.consume(KEYWORD, 'raka', "expected 'raka'")
        value: Optional[Node] = None
        if not (self.check(PUNCTUATION, ';') or self.check(PUNCTUATION, '}') or self.at_end()):
            value = self.parse_expression()
        self.match(PUNCTUATION, ';')
        return ReturnStmt(keyword.line, keyword.column, value)

    def parse_expr_stmt(self) -> ExprStmt:
        token = self.peek()
        expr = self.parse_expression()
        self.match(PUNCTUATION, ';')
        return ExprStmt(token.line, token.column, expr)

    # Expressions

    def parse_expression(self) -> Node:
        return self.parse_assign()

    def parse_assign(self) -> Node:
        target = self.parse_equality()
        if self.check(OPERATOR, '='):
            equals = self.advance()
            value = self.parse_assign()
            if not isinstance(target, Ident):
                raise ParseError('invalid assignment target', equals.line, equals.column)
            return Assign(target.line, target.column, target, value)
        return target

    def parse_binary(self, operators, operand) -> Node:
        node = operand()
        while self.check_operator(operators):
            op_token = self.advance()
            right = operand()
            node = BinaryOp(node.line, node.column, canonical_operator(op_token.value), node, right)
        return node

    def parse_equality(self) -> Node:
        return self.parse_binary(EQUALITY_OPS, self.parse_comparison)

    def parse_comparison(self) -> Node:
        return self.parse_binary(COMPARISON_OPS, self.parse_additive)

    def parse_additive(self) -> Node:
        return self.parse_binary(ADDITIVE_OPS, self.parse_multiplicative)

    def parse_multiplicative(self) -> Node:
        return self.parse_binary(MULTIPLICATIVE_OPS, self.parse_unary)

    def parse_unary(self) -> Node:
        if self.check_operator(('-',)):
            op_token = self.advance()
            operand = self.parse_unary()
            zero = Literal(op_token.line, op_token.column, 0.0, 'Number')
            return BinaryOp(op_token.line, op_token.column, '-', zero, operand)
        return self.parse_call()

    def parse_call(self) -> Node:
        node = self.parse_primary()
        while self.match(PUNCTUATION, '('):
            args = self.parse_arguments(')', "expected ')' after arguments")
            node = Call(node.line, node.column, node, args)
        return node

    def parse_arguments(self, closing: str, message: str) -> List[Node]:
        # the opening bracket has already been consumed
        items: List[Node] = []
        if not self.check(PUNCTUATION, closing):
            items.append(self.parse_expression())
            while self.match(PUNCTUATION, ','):
                items.append(self.parse_expression())
        self.consume(PUNCTUATION, closing, message)
        return items

    def parse_primary(self) -> Node:
        token = self.peek()
        if token.type == NUMBER:
            self.advance()
            return Literal(token.line, token.column, float(token.value), 'Number')
        if token.type == STRING:
            self.advance()
            return Literal(token.line, token.column, token.value, 'String')
        if token.type == KEYWORD:
            if token.value in ('rishtia', 'ghalat'):
                self.advance()
                return Literal(token.line, token.column, token.value == 'rishtia', 'Boolean')
            if token.value in CALLABLE_KEYWORDS:
                self.advance()
                return Ident(token.line, token.column, token.value)
        if token.type == IDENTIFIER:
            self.advance()
            return Ident(token.line, token.column, token.value)
        if self.match(PUNCTUATION, '['):
            elements = self.parse_arguments(']', "expected ']' after array elements")
            return ArrayLit(token.line, token.column, elements)
        if self.match(PUNCTUATION, '('):
            expr = self.parse_expression()
            self.consume(PUNCTUATION, ')', "expected ')' after expression")
            return expr
        raise ParseError(f"unexpected token {describe(token)}", token.line, token.column)


def parse(tokens: List[Token]) -> Program:
    parser = Parser(tokens)
    try:
        return parser.parse_program()
    except RecursionError:
        token = parser.peek()
        raise ParseError('expression nested too deeply', token.line, token.column) from None


def parse_program(source: str) -> Program:
    """Tokenize and parse Pashto++ source text into a Program AST."""
    return parse(tokenize(source))
