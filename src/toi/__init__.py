"""
Toi - a small-language front end.

Toi pairs a grammar-driven parser for a let/function arithmetic language with
two independent tree walkers: a substitution-based evaluator and a structural
type checker. Each works on its own AST family; the evaluator and the type
checker share the persistent Environment mapping.
"""

from toi.compiler.parser import Parser, parse_decl, parse_expr, parse_id, parse_numeral
from toi.environment import Environment
from toi.evaluator.evaluator import Evaluator, eval_defn, eval_expr
from toi.typer.type_checker import TypeChecker, type_check_defn, type_check_expr

__version__ = "0.1.0"
__all__ = [
    "Environment",
    "Parser",
    "parse_id",
    "parse_numeral",
    "parse_expr",
    "parse_decl",
    "Evaluator",
    "eval_expr",
    "eval_defn",
    "TypeChecker",
    "type_check_expr",
    "type_check_defn",
]
