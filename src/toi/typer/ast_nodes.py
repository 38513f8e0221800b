"""
AST node definitions for the Toi type checker.

This family extends the evaluator's shapes with string and boolean literals,
comparisons, and function definitions that annotate their parameters and
result with types.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Any, Optional

from toi.typer.types import Type
from toi.utils.errors import SourceLocation


class ASTNode(ABC):
    """Base class for all typer AST nodes."""

    location: Optional[SourceLocation]

    @abstractmethod
    def accept(self, visitor: "ASTVisitor") -> Any:
        """Accept a visitor for tree traversal."""
        pass


class ASTVisitor(ABC):
    """Visitor pattern base class for typer AST traversal."""

    def visit(self, node: ASTNode) -> Any:
        """Dispatch to the appropriate visit method."""
        return node.accept(self)


class Comparison(Enum):
    """Comparison operator types."""

    LESS_EQUAL = auto()     # <=
    LESS = auto()           # <
    EQUAL = auto()          # =
    NOT_EQUAL = auto()      # !=
    GREATER = auto()        # >
    GREATER_EQUAL = auto()  # >=


# -----------------------------------------------------------------------------
# Expressions
# -----------------------------------------------------------------------------


class Expression(ASTNode):
    """Base class for all expressions."""

    pass


@dataclass(frozen=True, slots=True)
class Identifier(Expression):
    name: str
    location: Optional[SourceLocation] = field(default=None, compare=False, repr=False)

    def accept(self, visitor: ASTVisitor) -> Any:
        return visitor.visit_identifier(self)


@dataclass(frozen=True, slots=True)
class Numeral(Expression):
    """An integer literal, e.g. ``5``."""

    value: int
    location: Optional[SourceLocation] = field(default=None, compare=False, repr=False)

    def accept(self, visitor: ASTVisitor) -> Any:
        return visitor.visit_numeral(self)


@dataclass(frozen=True, slots=True)
class StringLiteral(Expression):
    """A string literal, e.g. ``"hi"``."""

    value: str
    location: Optional[SourceLocation] = field(default=None, compare=False, repr=False)

    def accept(self, visitor: ASTVisitor) -> Any:
        return visitor.visit_string_literal(self)


@dataclass(frozen=True, slots=True)
class BooleanLiteral(Expression):
    """The literal ``true`` or ``false``."""

    value: bool
    location: Optional[SourceLocation] = field(default=None, compare=False, repr=False)

    def accept(self, visitor: ASTVisitor) -> Any:
        return visitor.visit_boolean_literal(self)


@dataclass(frozen=True, slots=True)
class Compare(Expression):
    """
    A comparison between two operands.

    Example:
        Compare(e1, Comparison.GREATER, e2) is ``e1 > e2``
    """

    left: Expression
    operator: Comparison
    right: Expression
    location: Optional[SourceLocation] = field(default=None, compare=False, repr=False)

    def accept(self, visitor: ASTVisitor) -> Any:
        return visitor.visit_compare(self)


@dataclass(frozen=True, slots=True)
class Times(Expression):
    left: Expression
    right: Expression
    location: Optional[SourceLocation] = field(default=None, compare=False, repr=False)

    def accept(self, visitor: ASTVisitor) -> Any:
        return visitor.visit_times(self)


@dataclass(frozen=True, slots=True)
class Plus(Expression):
    left: Expression
    right: Expression
    location: Optional[SourceLocation] = field(default=None, compare=False, repr=False)

    def accept(self, visitor: ASTVisitor) -> Any:
        return visitor.visit_plus(self)


@dataclass(frozen=True, slots=True)
class Minus(Expression):
    left: Expression
    right: Expression
    location: Optional[SourceLocation] = field(default=None, compare=False, repr=False)

    def accept(self, visitor: ASTVisitor) -> Any:
        return visitor.visit_minus(self)


@dataclass(frozen=True, slots=True)
class Let(Expression):
    definition: "Definition"
    body: Expression
    location: Optional[SourceLocation] = field(default=None, compare=False, repr=False)

    def accept(self, visitor: ASTVisitor) -> Any:
        return visitor.visit_let(self)


@dataclass(frozen=True, slots=True)
class Call(Expression):
    name: str
    arguments: tuple[Expression, ...] = ()
    location: Optional[SourceLocation] = field(default=None, compare=False, repr=False)

    def accept(self, visitor: ASTVisitor) -> Any:
        return visitor.visit_call(self)


# -----------------------------------------------------------------------------
# Definitions
# -----------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class Parameter:
    """
    A typed function parameter.

    Example:
        x: Number
    """

    name: str
    type_: Type
    location: Optional[SourceLocation] = field(default=None, compare=False, repr=False)


class Definition(ASTNode):
    """Base class for definitions."""

    pass


@dataclass(frozen=True, slots=True)
class VarDefn(Definition):
    name: str
    value: Expression
    location: Optional[SourceLocation] = field(default=None, compare=False, repr=False)

    def accept(self, visitor: ASTVisitor) -> Any:
        return visitor.visit_var_defn(self)


@dataclass(frozen=True, slots=True)
class FunDefn(Definition):
    """
    A function definition. Functions may call themselves.

    Example:
        FunDefn("f", (Parameter("x", NUMBER_TYPE), Parameter("y", NUMBER_TYPE)),
                BOOLEAN_TYPE, Compare(Identifier("x"), Comparison.EQUAL, Identifier("y")))

        is ``function f(x: number, y: number): boolean = (x = y)``
    """

    name: str
    parameters: tuple[Parameter, ...]
    return_type: Type
    body: Expression
    location: Optional[SourceLocation] = field(default=None, compare=False, repr=False)

    def accept(self, visitor: ASTVisitor) -> Any:
        return visitor.visit_fun_defn(self)
