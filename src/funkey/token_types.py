"""
Token Types for Funkey

Shared between lexer and parser to avoid circular dependencies.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Dict


class TT(Enum):
    """Token Types.

    Each value is the display name the parser uses in its diagnostics.
    """

    ILLEGAL = 'ILLEGAL'
    EOF = 'EOF'

    # Literals
    IDENT = 'IDENT'
    INT = 'INT'
    STRING = 'STRING'

    # Operators
    ASSIGN = '='
    PLUS = '+'
    MINUS = '-'
    BANG = '!'
    ASTERISK = '*'
    SLASH = '/'
    MOD = '%'

    # Comparison
    LT = '<'
    LTE = '<='
    GT = '>'
    GTE = '>='
    EQ = '=='
    NOT_EQ = '!='

    # Punctuation
    DOT = '.'
    COMMA = ','
    COLON = ':'
    SEMICOLON = ';'
    LPAREN = '('
    RPAREN = ')'
    LBRACKET = '['
    RBRACKET = ']'
    LBRACE = '{'
    RBRACE = '}'

    # Keywords
    FUNCTION = 'FUNCTION'
    LET = 'LET'
    TRUE = 'TRUE'
    FALSE = 'FALSE'
    IF = 'IF'
    ELSE = 'ELSE'
    RETURN = 'RETURN'
    FOR = 'FOR'

    def __str__(self) -> str:
        return self.value


KEYWORDS: Dict[str, TT] = {
    'fn': TT.FUNCTION,
    'let': TT.LET,
    'true': TT.TRUE,
    'false': TT.FALSE,
    'if': TT.IF,
    'else': TT.ELSE,
    'return': TT.RETURN,
    'for': TT.FOR,
}


@dataclass(frozen=True)
class Tok:
    """Token with position info"""

    type: TT
    value: str
    line: int = 0
    column: int = 0

    def __repr__(self):
        return f"Tok({self.type.name}, {self.value!r}, {self.line}:{self.column})"
