"""
Pratt Parser for Funkey

Structure:
- Lexer: on-demand token stream, two tokens buffered (current + next)
- Statements: recursive descent (let, return, for, expression statements)
- Expressions: Pratt parsing; each token kind registers a prefix and/or an
  infix handler, and the loop climbs while the next token binds tighter

Syntax errors never raise. Every failed check appends a message to the error
list and the current construct returns None, so one pass can report several
problems.
"""

from enum import IntEnum
from typing import Callable, Dict, List, Optional, TypeVar

from .ast import (
    ArrayLiteral,
    AssignExpression,
    BlockStatement,
    BooleanLiteral,
    CallExpression,
    DotExpression,
    Expression,
    ExpressionStatement,
    ForStatement,
    FunctionLiteral,
    Identifier,
    IfExpression,
    IndexExpression,
    InfixExpression,
    IntegerLiteral,
    LetStatement,
    MapLiteral,
    PrefixExpression,
    Program,
    ReturnStatement,
    Statement,
    StringLiteral,
)
from .lexer import Lexer
from .token_types import TT, Tok
from .types import INT_MAX

T = TypeVar('T')

PrefixParseFn = Callable[[], Optional[Expression]]
InfixParseFn = Callable[[Expression], Optional[Expression]]


class ParseError(Exception):
    """Raised by callers (never by the parser) when a parse reported errors"""

    def __init__(self, errors: List[str]):
        self.errors = list(errors)
        super().__init__("\n".join(self.errors))


class Precedence(IntEnum):
    """
    Binding power, lowest to highest:
    1. assignment (=)
    2. equality (==, !=)
    3. relational (<, <=, >, >=)
    4. additive (+, -)
    5. multiplicative (*, /, %)
    6. prefix (!, -)
    7. call (...)
    8. index [...]
    9. dot (.field)
    """

    LOWEST = 0
    ASSIGN = 1
    EQUALS = 2
    LESSGREATER = 3
    SUM = 4
    PRODUCT = 5
    PREFIX = 6
    CALL = 7
    INDEX = 8
    DOT = 9


PRECEDENCES: Dict[TT, Precedence] = {
    TT.ASSIGN: Precedence.ASSIGN,
    TT.EQ: Precedence.EQUALS,
    TT.NOT_EQ: Precedence.EQUALS,
    TT.LT: Precedence.LESSGREATER,
    TT.LTE: Precedence.LESSGREATER,
    TT.GT: Precedence.LESSGREATER,
    TT.GTE: Precedence.LESSGREATER,
    TT.PLUS: Precedence.SUM,
    TT.MINUS: Precedence.SUM,
    TT.ASTERISK: Precedence.PRODUCT,
    TT.SLASH: Precedence.PRODUCT,
    TT.MOD: Precedence.PRODUCT,
    TT.LPAREN: Precedence.CALL,
    TT.LBRACKET: Precedence.INDEX,
    TT.DOT: Precedence.DOT,
}


class Parser:
    """Recursive descent + Pratt parser over a Lexer."""

    def __init__(self, lexer: Lexer):
        self.lexer = lexer
        self._errors: List[str] = []

        self.current = Tok(TT.EOF, '')
        self.next = Tok(TT.EOF, '')

        self.prefix_parse_fns: Dict[TT, PrefixParseFn] = {
            TT.IDENT: self.parse_identifier,
            TT.INT: self.parse_integer,
            TT.STRING: self.parse_string,
            TT.TRUE: self.parse_boolean,
            TT.FALSE: self.parse_boolean,
            TT.BANG: self.parse_prefix_expr,
            TT.MINUS: self.parse_prefix_expr,
            TT.LPAREN: self.parse_grouped_expr,
            TT.LBRACKET: self.parse_array_literal,
            TT.LBRACE: self.parse_map_literal,
            TT.IF: self.parse_if_expr,
            TT.FUNCTION: self.parse_function_literal,
        }

        self.infix_parse_fns: Dict[TT, InfixParseFn] = {
            TT.PLUS: self.parse_infix_expr,
            TT.MINUS: self.parse_infix_expr,
            TT.ASTERISK: self.parse_infix_expr,
            TT.SLASH: self.parse_infix_expr,
            TT.MOD: self.parse_infix_expr,
            TT.EQ: self.parse_infix_expr,
            TT.NOT_EQ: self.parse_infix_expr,
            TT.LT: self.parse_infix_expr,
            TT.LTE: self.parse_infix_expr,
            TT.GT: self.parse_infix_expr,
            TT.GTE: self.parse_infix_expr,
            TT.LPAREN: self.parse_call_expr,
            TT.LBRACKET: self.parse_index_expr,
            TT.DOT: self.parse_dot_expr,
            TT.ASSIGN: self.parse_assign_expr,
        }

        # Fill both lookahead slots
        self.advance()
        self.advance()

    # ========================================================================
    # Token Navigation
    # ========================================================================

    def advance(self) -> None:
        self.current = self.next
        self.next = self.lexer.next_token()

    def check(self, token_type: TT) -> bool:
        return self.current.type == token_type

    def check_next(self, token_type: TT) -> bool:
        return self.next.type == token_type

    def expect_next(self, token_type: TT) -> bool:
        """Advance if the next token has the given kind, else record an error"""
        if self.check_next(token_type):
            self.advance()
            return True

        self._errors.append(
            f"expected next token to be {token_type}, got {self.next.type} instead"
        )
        return False

    def expect_current(self, token_type: TT) -> bool:
        if self.check(token_type):
            return True

        self._errors.append(
            f"expected token to be {token_type}, got {self.current.type} instead"
        )
        return False

    def next_precedence(self) -> Precedence:
        return PRECEDENCES.get(self.next.type, Precedence.LOWEST)

    def current_precedence(self) -> Precedence:
        return PRECEDENCES.get(self.current.type, Precedence.LOWEST)

    def errors(self) -> List[str]:
        return list(self._errors)

    # ========================================================================
    # Top-Level Parsing
    # ========================================================================

    def parse_program(self) -> Program:
        statements: List[Statement] = []

        while not self.check(TT.EOF):
            stmt = self.parse_statement()
            if stmt is not None:
                statements.append(stmt)

            self.advance()

        return Program(tuple(statements))

    # ========================================================================
    # Statements
    # ========================================================================

    def parse_statement(self) -> Optional[Statement]:
        match self.current.type:
            case TT.LET:
                return self.parse_let_stmt()
            case TT.RETURN:
                return self.parse_return_stmt()
            case TT.FOR:
                return self.parse_for_stmt()
            case _:
                return self.parse_expression_stmt()

    def parse_let_stmt(self) -> Optional[LetStatement]:
        """
        let IDENT = expr ;
        let IDENT ;
        """
        tok = self.current

        if not self.expect_next(TT.IDENT):
            return None
        name = Identifier(self.current, self.current.value)

        if self.check_next(TT.SEMICOLON):
            self.advance()
            return LetStatement(tok, name)

        if not self.expect_next(TT.ASSIGN):
            return None
        self.advance()

        value = self.parse_expression(Precedence.LOWEST)
        if value is None:
            return None

        if not self.expect_next(TT.SEMICOLON):
            return None

        return LetStatement(tok, name, value)

    def parse_return_stmt(self) -> Optional[ReturnStatement]:
        tok = self.current

        if self.check_next(TT.SEMICOLON):
            self.advance()
            return ReturnStatement(tok)

        self.advance()
        value = self.parse_expression(Precedence.LOWEST)
        if value is None:
            return None

        if not self.expect_next(TT.SEMICOLON):
            return None

        return ReturnStatement(tok, value)

    def parse_for_stmt(self) -> Optional[ForStatement]:
        """
        for ( <let-or-expr-stmt> ; <expr-stmt> ; <let-or-expr-stmt> ) { block }
        """
        tok = self.current

        if not self.expect_next(TT.LPAREN):
            return None
        self.advance()

        init = None
        if not self.check(TT.SEMICOLON):
            init = self.parse_simple_stmt()
            if init is None:
                return None
        if not self.expect_current(TT.SEMICOLON):
            return None
        self.advance()

        condition = None
        if not self.check(TT.SEMICOLON):
            condition = self.parse_expression_stmt()
            if condition is None:
                return None
        if not self.expect_current(TT.SEMICOLON):
            return None
        self.advance()

        update = None
        if not self.check(TT.RPAREN):
            update = self.parse_simple_stmt()
            if update is None:
                return None
            if not self.expect_next(TT.RPAREN):
                return None

        if not self.expect_next(TT.LBRACE):
            return None

        body = self.parse_block_stmt()
        if body is None:
            return None

        return ForStatement(tok, init, condition, update, body)

    def parse_simple_stmt(self) -> Optional[Statement]:
        """Clause of a for header: let-statement or expression statement"""
        if self.check(TT.LET):
            return self.parse_let_stmt()

        return self.parse_expression_stmt()

    def parse_expression_stmt(self) -> Optional[ExpressionStatement]:
        tok = self.current

        expr = self.parse_expression(Precedence.LOWEST)
        if expr is None:
            return None

        if self.check_next(TT.SEMICOLON):
            self.advance()

        return ExpressionStatement(tok, expr)

    def parse_block_stmt(self) -> Optional[BlockStatement]:
        """{ stmt* } -- current token is the opening brace"""
        tok = self.current
        statements: List[Statement] = []

        self.advance()

        while not self.check(TT.RBRACE):
            if self.check(TT.EOF):
                self._errors.append(
                    f"expected next token to be {TT.RBRACE}, got {TT.EOF} instead"
                )
                return None

            stmt = self.parse_statement()
            if stmt is not None:
                statements.append(stmt)

            self.advance()

        return BlockStatement(tok, tuple(statements))

    # ========================================================================
    # Expressions
    # ========================================================================

    def parse_expression(self, precedence: Precedence) -> Optional[Expression]:
        prefix = self.prefix_parse_fns.get(self.current.type)
        if prefix is None:
            self._errors.append(f"no prefix parse function for {self.current.type} found")
            return None

        left = prefix()

        while (
            left is not None
            and not self.check_next(TT.SEMICOLON)
            and precedence < self.next_precedence()
        ):
            infix = self.infix_parse_fns.get(self.next.type)
            if infix is None:
                return left

            self.advance()
            left = infix(left)

        return left

    def parse_delimited(self, end: TT, parse_item: Callable[[], Optional[T]]) -> Optional[List[T]]:
        """
        Shared list loop for arguments, array elements, map entries and
        parameters: item (, item)* end. Empty lists allowed, no trailing comma.
        """
        items: List[T] = []

        if self.check_next(end):
            self.advance()
            return items

        self.advance()
        item = parse_item()
        if item is None:
            return None
        items.append(item)

        while self.check_next(TT.COMMA):
            self.advance()
            self.advance()

            item = parse_item()
            if item is None:
                return None
            items.append(item)

        if not self.expect_next(end):
            return None

        return items

    def parse_list_item(self) -> Optional[Expression]:
        return self.parse_expression(Precedence.LOWEST)

    # ---------------- prefix handlers ----------------

    def parse_identifier(self) -> Expression:
        return Identifier(self.current, self.current.value)

    def parse_integer(self) -> Optional[Expression]:
        literal = self.current.value
        value = int(literal)

        if value > INT_MAX:
            self._errors.append(f"could not parse {literal} as an integer")
            return None

        return IntegerLiteral(self.current, value)

    def parse_string(self) -> Expression:
        return StringLiteral(self.current, self.current.value)

    def parse_boolean(self) -> Expression:
        return BooleanLiteral(self.current, self.check(TT.TRUE))

    def parse_prefix_expr(self) -> Optional[Expression]:
        tok = self.current
        self.advance()

        right = self.parse_expression(Precedence.PREFIX)
        if right is None:
            return None

        return PrefixExpression(tok, tok.value, right)

    def parse_grouped_expr(self) -> Optional[Expression]:
        self.advance()

        expr = self.parse_expression(Precedence.LOWEST)
        if expr is None:
            return None

        if not self.expect_next(TT.RPAREN):
            return None

        return expr

    def parse_array_literal(self) -> Optional[Expression]:
        tok = self.current

        elements = self.parse_delimited(TT.RBRACKET, self.parse_list_item)
        if elements is None:
            return None

        return ArrayLiteral(tok, tuple(elements))

    def parse_map_literal(self) -> Optional[Expression]:
        tok = self.current

        pairs = self.parse_delimited(TT.RBRACE, self.parse_map_entry)
        if pairs is None:
            return None

        return MapLiteral(tok, tuple(pairs))

    def parse_map_entry(self):
        key = self.parse_expression(Precedence.LOWEST)
        if key is None:
            return None

        if not self.expect_next(TT.COLON):
            return None
        self.advance()

        value = self.parse_expression(Precedence.LOWEST)
        if value is None:
            return None

        return key, value

    def parse_if_expr(self) -> Optional[Expression]:
        """
        if ( cond ) { block } [ else { block } ]
        """
        tok = self.current

        if not self.expect_next(TT.LPAREN):
            return None
        self.advance()

        condition = self.parse_expression(Precedence.LOWEST)
        if condition is None:
            return None

        if not self.expect_next(TT.RPAREN):
            return None
        if not self.expect_next(TT.LBRACE):
            return None

        consequence = self.parse_block_stmt()
        if consequence is None:
            return None

        if not self.check_next(TT.ELSE):
            return IfExpression(tok, condition, consequence)
        self.advance()

        if not self.expect_next(TT.LBRACE):
            return None

        alternative = self.parse_block_stmt()
        if alternative is None:
            return None

        return IfExpression(tok, condition, consequence, alternative)

    def parse_function_literal(self) -> Optional[Expression]:
        """
        fn ( ident, ident, ... ) { block }
        """
        tok = self.current

        if not self.expect_next(TT.LPAREN):
            return None

        params = self.parse_delimited(TT.RPAREN, self.parse_parameter)
        if params is None:
            return None

        if not self.expect_next(TT.LBRACE):
            return None

        body = self.parse_block_stmt()
        if body is None:
            return None

        return FunctionLiteral(tok, tuple(params), body)

    def parse_parameter(self) -> Optional[Identifier]:
        if not self.check(TT.IDENT):
            self._errors.append(
                f"expected next token to be {TT.IDENT}, got {self.current.type} instead"
            )
            return None

        return Identifier(self.current, self.current.value)

    # ---------------- infix handlers ----------------

    def parse_infix_expr(self, left: Expression) -> Optional[Expression]:
        tok = self.current
        precedence = self.current_precedence()
        self.advance()

        right = self.parse_expression(precedence)
        if right is None:
            return None

        return InfixExpression(tok, left, tok.value, right)

    def parse_call_expr(self, function: Expression) -> Optional[Expression]:
        tok = self.current

        args = self.parse_delimited(TT.RPAREN, self.parse_list_item)
        if args is None:
            return None

        return CallExpression(tok, function, tuple(args))

    def parse_index_expr(self, left: Expression) -> Optional[Expression]:
        tok = self.current
        self.advance()

        index = self.parse_expression(Precedence.LOWEST)
        if index is None:
            return None

        if not self.expect_next(TT.RBRACKET):
            return None

        return IndexExpression(tok, left, index)

    def parse_dot_expr(self, left: Expression) -> Optional[Expression]:
        tok = self.current

        if not self.expect_next(TT.IDENT):
            return None

        return DotExpression(tok, left, Identifier(self.current, self.current.value))

    def parse_assign_expr(self, target: Expression) -> Optional[Expression]:
        tok = self.current
        self.advance()

        # Right side at assignment's own binding power: a = b = c groups left.
        value = self.parse_expression(Precedence.ASSIGN)
        if value is None:
            return None

        return AssignExpression(tok, target, value)
