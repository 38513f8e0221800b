"""
AST node definitions for the Toi evaluator.

These nodes mirror the parser's tree shapes but use integer numerals and are
built directly (by tests, or by any front end that lowers into them). The
module also defines the records an evaluation environment binds names to.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Optional, Union

from toi.utils.errors import SourceLocation

# Values are fully evaluated numerals
Value = int


class ASTNode(ABC):
    """Base class for all evaluator AST nodes."""

    location: Optional[SourceLocation]

    @abstractmethod
    def accept(self, visitor: "ASTVisitor") -> Any:
        """Accept a visitor for tree traversal."""
        pass


class ASTVisitor(ABC):
    """Visitor pattern base class for evaluator AST traversal."""

    def visit(self, node: ASTNode) -> Any:
        """Dispatch to the appropriate visit method."""
        return node.accept(self)


# -----------------------------------------------------------------------------
# Expressions
# -----------------------------------------------------------------------------


class Expression(ASTNode):
    """Base class for all expressions."""

    pass


@dataclass(frozen=True, slots=True)
class Identifier(Expression):
    """A reference to a bound name."""

    name: str
    location: Optional[SourceLocation] = field(default=None, compare=False, repr=False)

    def accept(self, visitor: ASTVisitor) -> Any:
        return visitor.visit_identifier(self)


@dataclass(frozen=True, slots=True)
class Numeral(Expression):
    """An integer literal."""

    value: int
    location: Optional[SourceLocation] = field(default=None, compare=False, repr=False)

    def accept(self, visitor: ASTVisitor) -> Any:
        return visitor.visit_numeral(self)


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
    """
    Evaluate ``body`` in the scope extended by ``definition``.

    Example:
        let var x = 10 in x*x
    """

    definition: "Definition"
    body: Expression
    location: Optional[SourceLocation] = field(default=None, compare=False, repr=False)

    def accept(self, visitor: ASTVisitor) -> Any:
        return visitor.visit_let(self)


@dataclass(frozen=True, slots=True)
class Call(Expression):
    """
    A call of a named function with positional arguments.

    Example:
        sq(4), f(g(2), 3)
    """

    name: str
    arguments: tuple[Expression, ...] = ()
    location: Optional[SourceLocation] = field(default=None, compare=False, repr=False)

    def accept(self, visitor: ASTVisitor) -> Any:
        return visitor.visit_call(self)


# -----------------------------------------------------------------------------
# Definitions
# -----------------------------------------------------------------------------


class Definition(ASTNode):
    """Base class for definitions."""

    pass


@dataclass(frozen=True, slots=True)
class VarDefn(Definition):
    """Defines ``name`` to equal the value of ``value``."""

    name: str
    value: Expression
    location: Optional[SourceLocation] = field(default=None, compare=False, repr=False)

    def accept(self, visitor: ASTVisitor) -> Any:
        return visitor.visit_var_defn(self)


@dataclass(frozen=True, slots=True)
class FunDefn(Definition):
    """Defines function ``name(parameters...) = body``."""

    name: str
    parameters: tuple[str, ...]
    body: Expression
    location: Optional[SourceLocation] = field(default=None, compare=False, repr=False)

    def accept(self, visitor: ASTVisitor) -> Any:
        return visitor.visit_fun_defn(self)


# -----------------------------------------------------------------------------
# Environment records
# -----------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class VarRecord:
    """A name bound to an evaluated value."""

    value: Value


@dataclass(frozen=True, slots=True)
class FunRecord:
    """
    A name bound to a function.

    Only the parameter names and the unevaluated body are stored; the
    environment at the definition site is not captured.
    """

    parameters: tuple[str, ...]
    body: Expression


EnvRecord = Union[VarRecord, FunRecord]
