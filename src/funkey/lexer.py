"""
Lexer for Funkey

Turns source text into tokens, one at a time, on demand.

Features:
- Position tracking (line, column), both 1-based
- Never raises: unknown characters and unterminated strings come back as
  ILLEGAL tokens so the parser can report them
- End-of-input is sticky: once reached, every call returns EOF
"""

from typing import List

from .token_types import KEYWORDS, TT, Tok

WHITESPACE = frozenset(' \t\n\r\f\v')

# Two-character operators, checked before their one-character prefixes
TWO_CHAR_OPERATORS = {
    '==': TT.EQ,
    '!=': TT.NOT_EQ,
    '<=': TT.LTE,
    '>=': TT.GTE,
}

SINGLE_CHAR_OPERATORS = {
    '=': TT.ASSIGN,
    '+': TT.PLUS,
    '-': TT.MINUS,
    '!': TT.BANG,
    '*': TT.ASTERISK,
    '/': TT.SLASH,
    '%': TT.MOD,
    '<': TT.LT,
    '>': TT.GT,
    '.': TT.DOT,
    ',': TT.COMMA,
    ':': TT.COLON,
    ';': TT.SEMICOLON,
    '(': TT.LPAREN,
    ')': TT.RPAREN,
    '[': TT.LBRACKET,
    ']': TT.RBRACKET,
    '{': TT.LBRACE,
    '}': TT.RBRACE,
}


def is_letter(ch: str) -> bool:
    return ('a' <= ch <= 'z') or ('A' <= ch <= 'Z')


def is_digit(ch: str) -> bool:
    return '0' <= ch <= '9'


class Lexer:
    """Funkey lexer with a raw character cursor and line/column counters."""

    def __init__(self, source: str):
        self.source = source
        self.pos = 0
        self.line = 1
        self.column = 1

    # ========================================================================
    # Character navigation
    # ========================================================================

    def peek(self, offset: int = 0) -> str:
        """Look ahead at a character; '' past the end"""
        idx = self.pos + offset
        if idx < len(self.source):
            return self.source[idx]
        return ''

    def advance(self) -> str:
        """Consume current character"""
        ch = self.source[self.pos]
        self.pos += 1

        if ch == '\n':
            self.line += 1
            self.column = 1
        else:
            self.column += 1

        return ch

    def skip_whitespace(self) -> None:
        while self.peek() in WHITESPACE:
            self.advance()

    # ========================================================================
    # Tokens
    # ========================================================================

    def next_token(self) -> Tok:
        """Scan and return the next token"""
        self.skip_whitespace()

        line, column = self.line, self.column
        ch = self.peek()

        if ch == '':
            return Tok(TT.EOF, '', line, column)

        if ch == '"':
            return self.scan_string(line, column)

        if is_letter(ch):
            return self.scan_identifier(line, column)

        if is_digit(ch):
            return self.scan_number(line, column)

        pair = ch + self.peek(1)
        if pair in TWO_CHAR_OPERATORS:
            self.advance()
            self.advance()
            return Tok(TWO_CHAR_OPERATORS[pair], pair, line, column)

        kind = SINGLE_CHAR_OPERATORS.get(ch, TT.ILLEGAL)
        self.advance()
        return Tok(kind, ch, line, column)

    def scan_identifier(self, line: int, column: int) -> Tok:
        start = self.pos
        while is_letter(self.peek()):
            self.advance()

        word = self.source[start:self.pos]
        return Tok(KEYWORDS.get(word, TT.IDENT), word, line, column)

    def scan_number(self, line: int, column: int) -> Tok:
        start = self.pos
        while is_digit(self.peek()):
            self.advance()

        return Tok(TT.INT, self.source[start:self.pos], line, column)

    def scan_string(self, line: int, column: int) -> Tok:
        """Read raw characters up to the closing quote; no escapes."""
        start = self.pos
        self.advance()  # opening quote

        while self.peek() not in ('"', ''):
            self.advance()

        if self.peek() == '':
            return Tok(TT.ILLEGAL, self.source[start:self.pos], line, column)

        self.advance()  # closing quote
        return Tok(TT.STRING, self.source[start + 1:self.pos - 1], line, column)

    def tokenize(self) -> List[Tok]:
        """Drain the lexer, return every token up to and including EOF"""
        tokens = []

        while True:
            tok = self.next_token()
            tokens.append(tok)
            if tok.type == TT.EOF:
                return tokens


def tokenize(source: str) -> List[Tok]:
    """Convenience wrapper: tokenize source in one call."""
    return Lexer(source).tokenize()
