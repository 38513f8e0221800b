"""
Toi Utilities Package.

Error types and source locations shared by the parser, evaluator and typer.
"""

from toi.utils.errors import (
    EvaluationError,
    NestingDepthError,
    ParserError,
    SourceLocation,
    ToiError,
)

__all__ = [
    "ToiError",
    "ParserError",
    "EvaluationError",
    "NestingDepthError",
    "SourceLocation",
]
