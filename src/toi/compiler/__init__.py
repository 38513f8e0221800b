"""
Toi Parser Package.

Turns source text into parser ASTs.
"""

from toi.compiler.ast_nodes import (
    decl_eq,
    decl_to_string,
    expr_eq,
    expr_to_string,
    render,
    render_parse_result,
)
from toi.compiler.parser import (
    Parser,
    parse_decl,
    parse_expr,
    parse_id,
    parse_numeral,
)

__all__ = [
    "Parser",
    "parse_id",
    "parse_numeral",
    "parse_expr",
    "parse_decl",
    "expr_eq",
    "decl_eq",
    "expr_to_string",
    "decl_to_string",
    "render",
    "render_parse_result",
]
