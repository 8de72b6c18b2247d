"""Live syntax highlighting for the REPL prompt.

The Funkey lexer already reports a 1-based column for every token, so each
line is cut into fragments straight from token positions; whatever falls
between tokens (whitespace) is emitted unstyled.
"""

from __future__ import annotations

from typing import Callable, Iterator, List, Tuple

from prompt_toolkit.document import Document
from prompt_toolkit.formatted_text import StyleAndTextTuples
from prompt_toolkit.lexers import Lexer

from .lexer import tokenize
from .token_types import KEYWORDS, TT, Tok

# Highlight group => prompt_toolkit style string.
GROUP_STYLE = {
    "keyword": "bold ansicyan",
    "boolean": "ansicyan",
    "number": "ansimagenta",
    "string": "ansigreen",
    "identifier": "",
    "function": "bold ansiyellow",
    "operator": "",
    "punctuation": "",
    "error": "bold ansired",
}

_PUNCTUATION = frozenset('.,:;()[]{}')


def _group(tok: Tok, following: TT) -> str:
    match tok.type:
        case TT.TRUE | TT.FALSE:
            return "boolean"
        case TT.INT:
            return "number"
        case TT.STRING:
            return "string"
        case TT.ILLEGAL:
            return "error"
        case TT.IDENT:
            # A name directly followed by '(' is being called.
            return "function" if following == TT.LPAREN else "identifier"

    if tok.type in KEYWORDS.values():
        return "keyword"

    return "punctuation" if tok.value in _PUNCTUATION else "operator"


def _span(tok: Tok) -> Tuple[int, int]:
    start = tok.column - 1
    # STRING values drop their quotes.
    width = len(tok.value) + 2 if tok.type == TT.STRING else len(tok.value)
    return start, start + width


def _fragments(text: str) -> Iterator[Tuple[str, str]]:
    tokens: List[Tok] = [t for t in tokenize(text) if t.type != TT.EOF]
    pos = 0

    for i, tok in enumerate(tokens):
        start, end = _span(tok)
        if start < pos or end <= start:
            continue

        if start > pos:
            yield "", text[pos:start]

        following = tokens[i + 1].type if i + 1 < len(tokens) else TT.EOF
        yield GROUP_STYLE[_group(tok, following)], text[start:end]
        pos = end

    if pos < len(text):
        yield "", text[pos:]


def _highlight_line(text: str) -> StyleAndTextTuples:
    return list(_fragments(text)) or [("", text)]


class FunkeyLexer(Lexer):
    """prompt_toolkit lexer; one Funkey lexer pass per visible line, cached."""

    def lex_document(self, document: Document) -> Callable[[int], StyleAndTextTuples]:
        lines = document.lines
        seen: dict[int, StyleAndTextTuples] = {}

        def get_line(lineno: int) -> StyleAndTextTuples:
            if lineno >= len(lines):
                return [("", "")]
            if lineno not in seen:
                seen[lineno] = _highlight_line(lines[lineno])
            return seen[lineno]

        return get_line
