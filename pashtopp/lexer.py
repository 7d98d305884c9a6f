"""Tokenizer for Pashto++.

Scanning is delegated to a lark ``basic`` lexer built once from a small
terminal grammar. Lark discards whitespace and ``//`` comments, tracks
line and column numbers, and matches the longest operators first. This
module then reclassifies identifier-shaped words into keywords and word
operators and appends the end-of-input token.

Keywords and word operators are case-insensitive: ``KO``, ``Ko`` and
``ko`` all produce the keyword ``ko``. Other identifiers keep their
original spelling.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List

from lark import Lark
from lark.exceptions import UnexpectedCharacters

from .errors import LexicalError


NUMBER = 'NUMBER'
STRING = 'STRING'
IDENTIFIER = 'IDENTIFIER'
KEYWORD = 'KEYWORD'
OPERATOR = 'OPERATOR'
PUNCTUATION = 'PUNCTUATION'
EOF = 'EOF'


KEYWORDS = frozenset({
    'ko',       # if
    'geni',     # else
    'kala',     # while
    'che',      # for
    'we',       # in
    'opejana',  # function
    'raka',     # return
    'olika',    # print
    'oghwara',  # input
    'rishtia',  # true
    'ghalat',   # false
})

WORD_OPERATORS = frozenset({
    'jama',         # +
    'manfi',        # -
    'zarab',        # *
    'takseem',      # /
    'takseembaki',  # %
    '_',            # concatenation
})


@dataclass
class Token:
    type: str
    value: str
    line: int
    column: int

    def __repr__(self) -> str:
        return f"Token({self.type}, {self.value!r}, {self.line}:{self.column})"


PASHTO_TERMINALS = r"""
    start: (NUMBER | STRING | WORD | OP | PUNCT)*

    NUMBER: /[0-9]+(?:\.[0-9]*)?/
    STRING: /"[^"]*"|'[^']*'/
    WORD: /[A-Za-z_][A-Za-z0-9_]*/
    OP: /==|!=|>=|<=|[-+*\/%<>=]/
    PUNCT: /[(){}\[\],.;]/

    WS: /\s+/
    COMMENT: /\/\/[^\n]*/
    %ignore WS
    %ignore COMMENT
"""


PASHTO_LEXER = Lark(
    PASHTO_TERMINALS,
    parser='lalr',
    lexer='basic',
)


def _end_position(source: str):
    line = source.count('\n') + 1
    column = len(source) - source.rfind('\n')
    return line, column


def _classify_word(word: str) -> str:
    lowered = word.lower()
    if lowered in KEYWORDS:
        return KEYWORD
    if lowered in WORD_OPERATORS:
        return OPERATOR
    return IDENTIFIER


def tokenize(source: str) -> List[Token]:
    """Convert source text into a list of tokens ending with one EOF token.

    Raises :class:`LexicalError` for an unterminated string literal
    (reported at its opening quote) or for any character that starts no
    token.
    """
    tokens: List[Token] = []
    try:
        for tok in PASHTO_LEXER.lex(source):
            kind = tok.type
            value = str(tok)
            if kind == 'WORD':
                kind = _classify_word(value)
                if kind != IDENTIFIER:
                    value = value.lower()
            elif kind == 'STRING':
                value = value[1:-1]
            elif kind == 'OP':
                kind = OPERATOR
            elif kind == 'PUNCT':
                kind = PUNCTUATION
            tokens.append(Token(kind, value, tok.line, tok.column))
    except UnexpectedCharacters as e:
        if e.char in ('"', "'"):
            raise LexicalError('unterminated string literal', e.line, e.column) from None
        raise LexicalError(f"unexpected character {e.char!r}", e.line, e.column) from None
    line, column = _end_position(source)
    tokens.append(Token(EOF, '', line, column))
    return tokens
