"""
Pytest configuration and shared fixtures for Toi tests.
"""

import pytest

from toi.compiler.parser import Parser
from toi.environment import Environment
from toi.evaluator.evaluator import Evaluator
from toi.typer.type_checker import TypeChecker


@pytest.fixture
def parser_factory():
    """Factory fixture for creating parsers from source."""

    def _create_parser(source: str, filename: str = "test.toi") -> Parser:
        return Parser(source, filename)

    return _create_parser


@pytest.fixture
def parse(parser_factory):
    """Fixture to parse source text as an expression."""

    def _parse(source: str):
        return parser_factory(source).parse_expr()

    return _parse


@pytest.fixture
def parse_declaration(parser_factory):
    """Fixture to parse source text as a declaration."""

    def _parse(source: str):
        return parser_factory(source).parse_decl()

    return _parse


@pytest.fixture
def empty_env() -> Environment:
    """A fresh top-level environment or typing context."""
    return Environment()


@pytest.fixture
def evaluate(empty_env):
    """Fixture to evaluate an evaluator AST at top level."""

    def _evaluate(expr, strict: bool = False):
        return Evaluator(strict=strict).eval_expr(empty_env, expr)

    return _evaluate


@pytest.fixture
def infer(empty_env):
    """Fixture to type check a typer AST at top level."""

    def _infer(expr, context: Environment = None):
        return TypeChecker().check_expr(context if context is not None else empty_env, expr)

    return _infer
