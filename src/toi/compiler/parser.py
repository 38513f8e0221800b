"""
Toi Parser.

A recursive descent parser that reads source text character by character and
builds an Abstract Syntax Tree (AST). There is no separate lexer: identifiers
and numerals are recognized by the same productions that recognize the
grammar, and whitespace is only accepted where the grammar spells it out.

Grammar (highest precedence first):

    Atom  = Numeral | Id "(" ArgListExpr ")" | Id | "(" Expr ")"
    Op2   = Atom "*" Op2 | Atom
    Op1   = Op2 "+" Op1 | Op2 "-" Op1 | Op2
    Expr  = "let " Decl " in " Expr | Op1
    Decl  = "var " Id " = " Expr
          | "function " Id "(" ArgList ")" "{" Expr "}"

Alternatives are tried in order and a failed alternative rewinds the input,
so ``*``, ``+`` and ``-`` all associate to the right.
"""

import logging
from typing import Callable, Optional, TypeVar

from toi.compiler.ast_nodes import (
    Declaration,
    Expression,
    FunCall,
    FunDecl,
    Identifier,
    Let,
    Minus,
    Numeral,
    Plus,
    Times,
    VarDecl,
)
from toi.utils.errors import NestingDepthError, ParserError, SourceLocation

logger = logging.getLogger(__name__)

T = TypeVar("T")

# Literal keywords, including the single spaces the grammar requires
LET_KEYWORD = "let "
IN_KEYWORD = " in "
VAR_KEYWORD = "var "
FUNCTION_KEYWORD = "function "
BIND_OPERATOR = " = "

# Additive operators share one precedence level
ADDITIVE_OPERATORS: dict[str, type] = {
    "+": Plus,
    "-": Minus,
}


def _is_letter(char: Optional[str]) -> bool:
    return char is not None and (("a" <= char <= "z") or ("A" <= char <= "Z"))


def _is_digit(char: Optional[str]) -> bool:
    return char is not None and "0" <= char <= "9"


class Parser:
    """
    Recursive descent parser for Toi.

    Each public method parses one entry production and must consume the
    whole input; anything left over is a syntax error.

    Usage:
        parser = Parser("let var x = 2 in x*x")
        ast = parser.parse_expr()
    """

    def __init__(self, source: str, filename: Optional[str] = None) -> None:
        """
        Initialize the parser.

        Args:
            source: The text to parse
            filename: Optional filename for error reporting
        """
        self.source = source
        self.filename = filename
        self.pos = 0

        # Furthest offset any alternative reached before failing
        self._furthest = 0
        self._furthest_message = "unexpected input"

    # -------------------------------------------------------------------------
    # Entry points
    # -------------------------------------------------------------------------

    def parse_id(self) -> str:
        """Parse the whole input as a single identifier."""
        return self._parse_all(self._parse_identifier)

    def parse_numeral(self) -> Numeral:
        """Parse the whole input as a single numeral."""
        return self._parse_all(self._parse_numeral)

    def parse_expr(self) -> Expression:
        """Parse the whole input as an expression."""
        return self._parse_all(self._parse_expression)

    def parse_decl(self) -> Declaration:
        """Parse the whole input as a declaration."""
        return self._parse_all(self._parse_declaration)

    def _parse_all(self, production: Callable[[], T]) -> T:
        self.pos = 0
        self._furthest = 0
        self._furthest_message = "unexpected input"
        try:
            result = production()
            if not self._is_at_end():
                raise self._error("unexpected trailing input")
        except RecursionError:
            raise NestingDepthError(
                "input is nested too deeply to parse",
                self._location(self.pos),
            ) from None
        except ParserError as e:
            logger.debug("Rejected %r: %s", self.source, e)
            raise
        return result

    # -------------------------------------------------------------------------
    # Cursor helpers
    # -------------------------------------------------------------------------

    @property
    def _current_char(self) -> Optional[str]:
        """Return the current character or None if at end."""
        if self.pos >= len(self.source):
            return None
        return self.source[self.pos]

    @property
    def _peek_char(self) -> Optional[str]:
        """Return the next character without consuming it."""
        peek_pos = self.pos + 1
        if peek_pos >= len(self.source):
            return None
        return self.source[peek_pos]

    def _is_at_end(self) -> bool:
        return self.pos >= len(self.source)

    def _advance(self) -> str:
        """Consume and return the current character."""
        char = self.source[self.pos]
        self.pos += 1
        return char

    def _check(self, literal: str) -> bool:
        """Check whether the input continues with ``literal``."""
        return self.source.startswith(literal, self.pos)

    def _match(self, literal: str) -> bool:
        """Consume ``literal`` if the input continues with it."""
        if self._check(literal):
            self.pos += len(literal)
            return True
        return False

    def _expect(self, literal: str) -> None:
        """Consume ``literal``, else raise an error."""
        if not self._match(literal):
            raise self._error(f"expected '{literal}'")

    def _attempt(self, production: Callable[[], T]) -> Optional[T]:
        """
        Try one alternative, rewinding the input if it fails.

        Returns None when the alternative does not match.
        """
        start = self.pos
        try:
            return production()
        except ParserError:
            self.pos = start
            return None

    def _location(self, offset: int) -> SourceLocation:
        line_start = self.source.rfind("\n", 0, offset) + 1
        return SourceLocation(
            line=self.source.count("\n", 0, offset) + 1,
            column=offset - line_start + 1,
            offset=offset,
            filename=self.filename,
        )

    def _line_text(self, offset: int) -> str:
        line_start = self.source.rfind("\n", 0, offset) + 1
        end = self.source.find("\n", offset)
        if end == -1:
            end = len(self.source)
        return self.source[line_start:end]

    def _error(self, message: str) -> ParserError:
        """
        Create a parser error.

        The error always reports the furthest position reached by any
        alternative, which is where the input stopped making sense.
        """
        if self.pos >= self._furthest:
            self._furthest = self.pos
            self._furthest_message = message
        return ParserError(
            self._furthest_message,
            self._location(self._furthest),
            self._line_text(self._furthest),
        )

    # -------------------------------------------------------------------------
    # Terminals
    # -------------------------------------------------------------------------

    def _parse_identifier(self) -> str:
        """Parse a letter followed by letters, digits or underscores."""
        start = self.pos
        if not _is_letter(self._current_char):
            raise self._error("expected an identifier")
        self._advance()

        while True:
            char = self._current_char
            if not (_is_letter(char) or _is_digit(char) or char == "_"):
                break
            self._advance()

        return self.source[start:self.pos]

    def _parse_numeral(self) -> Numeral:
        """
        Parse a numeral.

        An optional minus sign, an integer part that is either 0 or has no
        leading zero, then an optional fraction of one or more digits.
        """
        start = self.pos
        self._match("-")

        if self._match("0"):
            pass
        elif _is_digit(self._current_char):
            self._advance()
            while _is_digit(self._current_char):
                self._advance()
        else:
            raise self._error("expected a numeral")

        # A dot without digits after it is not part of the numeral
        if self._current_char == "." and _is_digit(self._peek_char):
            self._advance()
            while _is_digit(self._current_char):
                self._advance()

        return Numeral(value=float(self.source[start:self.pos]), location=self._location(start))

    # -------------------------------------------------------------------------
    # Expressions
    # -------------------------------------------------------------------------

    def _parse_expression(self) -> Expression:
        """Parse ``"let " Decl " in " Expr`` or fall back to Op1."""
        if self._check(LET_KEYWORD):
            let = self._attempt(self._parse_let)
            if let is not None:
                return let
        return self._parse_additive()

    def _parse_let(self) -> Let:
        start = self.pos
        self._expect(LET_KEYWORD)
        declaration = self._parse_declaration()
        self._expect(IN_KEYWORD)
        body = self._parse_expression()
        return Let(declaration=declaration, body=body, location=self._location(start))

    def _parse_additive(self) -> Expression:
        """Parse Op1: an Op2 optionally followed by ``+`` or ``-`` and Op1."""
        start = self.pos
        left = self._parse_multiplicative()

        for symbol, node_type in ADDITIVE_OPERATORS.items():
            if self._check(symbol):
                right = self._attempt(lambda: self._parse_operand(symbol, self._parse_additive))
                if right is not None:
                    return node_type(left=left, right=right, location=self._location(start))

        return left

    def _parse_multiplicative(self) -> Expression:
        """Parse Op2: an atom optionally followed by ``*`` and Op2."""
        start = self.pos
        left = self._parse_atom()

        if self._check("*"):
            right = self._attempt(lambda: self._parse_operand("*", self._parse_multiplicative))
            if right is not None:
                return Times(left=left, right=right, location=self._location(start))

        return left

    def _parse_operand(self, symbol: str, production: Callable[[], Expression]) -> Expression:
        self._expect(symbol)
        return production()

    def _parse_atom(self) -> Expression:
        """Parse a numeral, a call, an identifier or a parenthesized expression."""
        start = self.pos
        char = self._current_char

        if char == "-" or _is_digit(char):
            return self._parse_numeral()

        if _is_letter(char):
            name = self._parse_identifier()
            if self._check("("):
                arguments = self._attempt(self._parse_call_arguments)
                if arguments is not None:
                    return FunCall(name=name, arguments=arguments, location=self._location(start))
            return Identifier(name=name, location=self._location(start))

        if self._match("("):
            expr = self._parse_expression()
            self._expect(")")
            return expr

        raise self._error("expected an expression")

    def _parse_call_arguments(self) -> tuple[Expression, ...]:
        self._expect("(")
        arguments = self._parse_comma_list(self._parse_expression)
        self._expect(")")
        return arguments

    def _parse_comma_list(self, item: Callable[[], T]) -> tuple[T, ...]:
        """Parse zero or more ``item``s separated by commas."""
        first = self._attempt(item)
        if first is None:
            return ()

        items = [first]
        while self._check(","):
            following = self._attempt(lambda: self._parse_operand(",", item))
            if following is None:
                break
            items.append(following)

        return tuple(items)

    # -------------------------------------------------------------------------
    # Declarations
    # -------------------------------------------------------------------------

    def _parse_declaration(self) -> Declaration:
        """Parse a variable or function declaration."""
        if self._check(VAR_KEYWORD):
            return self._parse_var_decl()
        if self._check(FUNCTION_KEYWORD):
            return self._parse_fun_decl()
        raise self._error(f"expected '{VAR_KEYWORD.strip()}' or '{FUNCTION_KEYWORD.strip()}'")

    def _parse_var_decl(self) -> VarDecl:
        start = self.pos
        self._expect(VAR_KEYWORD)
        name = self._parse_identifier()
        self._expect(BIND_OPERATOR)
        value = self._parse_expression()
        return VarDecl(name=name, value=value, location=self._location(start))

    def _parse_fun_decl(self) -> FunDecl:
        start = self.pos
        self._expect(FUNCTION_KEYWORD)
        name = self._parse_identifier()
        self._expect("(")
        parameters = self._parse_comma_list(self._parse_identifier)
        self._expect(")")
        self._expect("{")
        body = self._parse_expression()
        self._expect("}")
        return FunDecl(name=name, parameters=parameters, body=body, location=self._location(start))


# =============================================================================
# Convenience functions
# =============================================================================


def parse_id(text: str, filename: Optional[str] = None) -> str:
    """Parse ``text`` as an identifier, raising ParserError if it is not one."""
    return Parser(text, filename).parse_id()


def parse_numeral(text: str, filename: Optional[str] = None) -> Numeral:
    """Parse ``text`` as a numeral, raising ParserError if it is not one."""
    return Parser(text, filename).parse_numeral()


def parse_expr(text: str, filename: Optional[str] = None) -> Expression:
    """Parse ``text`` as an expression, raising ParserError on failure."""
    return Parser(text, filename).parse_expr()


def parse_decl(text: str, filename: Optional[str] = None) -> Declaration:
    """Parse ``text`` as a declaration, raising ParserError on failure."""
    return Parser(text, filename).parse_decl()


# Entry points by production name, as used by the command line
ENTRY_POINTS: dict[str, Callable[[str], object]] = {
    "id": parse_id,
    "numeral": parse_numeral,
    "expr": parse_expr,
    "decl": parse_decl,
}


__all__ = [
    "Parser",
    "parse_id",
    "parse_numeral",
    "parse_expr",
    "parse_decl",
    "ENTRY_POINTS",
]
