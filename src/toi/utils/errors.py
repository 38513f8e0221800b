"""
Error types and source location tracking for the Toi front end.
"""

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True, slots=True)
class SourceLocation:
    """Where a node starts: 1-based line and column, 0-based offset."""

    line: int
    column: int
    offset: int = 0
    filename: Optional[str] = None

    def __str__(self) -> str:
        position = f"{self.line}:{self.column}"
        return f"{self.filename}:{position}" if self.filename else position


class ToiError(Exception):
    """Base exception for all Toi front-end errors."""

    def __init__(
        self,
        message: str,
        location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
    ) -> None:
        self.message = message
        self.location = location
        self.source_line = source_line
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        if self.location is None:
            return self.message
        header = f"[{self.location}] {self.message}"
        if not self.source_line:
            return header
        caret = " " * (self.location.column - 1) + "^"
        return f"{header}\n    {self.source_line}\n    {caret}"


class ParserError(ToiError):
    """Raised when the input does not match the requested grammar production."""

    pass


class EvaluationError(ToiError):
    """Raised by a strict evaluator instead of degrading to a default value."""

    pass


class NestingDepthError(ParserError, EvaluationError):
    """
    Raised when a program is nested deeper than the interpreter can recurse.

    Subclasses both ParserError and EvaluationError so that callers handling
    either family also see it.
    """

    pass
