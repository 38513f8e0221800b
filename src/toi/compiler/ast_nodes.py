"""
Abstract Syntax Tree (AST) node definitions for the Toi parser.

This module defines the node types produced by ``toi.compiler.parser``.
Nodes are immutable; each may carry the source location it was parsed from,
which takes no part in equality. The module also provides the structural
equality and rendering helpers used by tests and the command line.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, Callable, Optional, Union

from toi.utils.errors import ParserError, SourceLocation


class ASTNode(ABC):
    """Base class for all AST nodes."""

    location: Optional[SourceLocation]

    @abstractmethod
    def accept(self, visitor: "ASTVisitor") -> Any:
        """Accept a visitor for tree traversal."""
        pass


class ASTVisitor(ABC):
    """
    Visitor pattern base class for AST traversal.

    Implement this to create custom AST processors (printers, evaluators,
    lowering passes, etc.).
    """

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
    """
    An identifier expression.

    Example:
        x, myVariable, z_3
    """

    name: str
    location: Optional[SourceLocation] = field(default=None, compare=False, repr=False)

    def accept(self, visitor: ASTVisitor) -> Any:
        return visitor.visit_identifier(self)


@dataclass(frozen=True, slots=True)
class Numeral(Expression):
    """A numeric literal. Negative literals keep their sign here."""

    value: float
    location: Optional[SourceLocation] = field(default=None, compare=False, repr=False)

    def accept(self, visitor: ASTVisitor) -> Any:
        return visitor.visit_numeral(self)


@dataclass(frozen=True, slots=True)
class Times(Expression):
    """Multiplication: ``left*right``."""

    left: Expression
    right: Expression
    location: Optional[SourceLocation] = field(default=None, compare=False, repr=False)

    def accept(self, visitor: ASTVisitor) -> Any:
        return visitor.visit_times(self)


@dataclass(frozen=True, slots=True)
class Plus(Expression):
    """Addition: ``left+right``."""

    left: Expression
    right: Expression
    location: Optional[SourceLocation] = field(default=None, compare=False, repr=False)

    def accept(self, visitor: ASTVisitor) -> Any:
        return visitor.visit_plus(self)


@dataclass(frozen=True, slots=True)
class Minus(Expression):
    """Subtraction: ``left-right``."""

    left: Expression
    right: Expression
    location: Optional[SourceLocation] = field(default=None, compare=False, repr=False)

    def accept(self, visitor: ASTVisitor) -> Any:
        return visitor.visit_minus(self)


@dataclass(frozen=True, slots=True)
class Let(Expression):
    """
    A let expression scoping one declaration over a body.

    Example:
        let var x = 1 in x*x
    """

    declaration: "Declaration"
    body: Expression
    location: Optional[SourceLocation] = field(default=None, compare=False, repr=False)

    def accept(self, visitor: ASTVisitor) -> Any:
        return visitor.visit_let(self)


@dataclass(frozen=True, slots=True)
class FunCall(Expression):
    """
    A call of a named function with positional arguments.

    Example:
        f(2), g(), h(x,y*2,3)
    """

    name: str
    arguments: tuple[Expression, ...] = ()
    location: Optional[SourceLocation] = field(default=None, compare=False, repr=False)

    def accept(self, visitor: ASTVisitor) -> Any:
        return visitor.visit_fun_call(self)


# -----------------------------------------------------------------------------
# Declarations
# -----------------------------------------------------------------------------


class Declaration(ASTNode):
    """Base class for declarations introduced by ``let``."""

    pass


@dataclass(frozen=True, slots=True)
class VarDecl(Declaration):
    """
    A variable declaration.

    Example:
        var x = y*2
    """

    name: str
    value: Expression
    location: Optional[SourceLocation] = field(default=None, compare=False, repr=False)

    def accept(self, visitor: ASTVisitor) -> Any:
        return visitor.visit_var_decl(self)


@dataclass(frozen=True, slots=True)
class FunDecl(Declaration):
    """
    A function declaration.

    Example:
        function f(x,y){x*y}
    """

    name: str
    parameters: tuple[str, ...]
    body: Expression
    location: Optional[SourceLocation] = field(default=None, compare=False, repr=False)

    def accept(self, visitor: ASTVisitor) -> Any:
        return visitor.visit_fun_decl(self)


# -----------------------------------------------------------------------------
# Structural equality
# -----------------------------------------------------------------------------


def expr_eq(left: Expression, right: Expression) -> bool:
    """
    Check two expressions for structural equality.

    Every constructor and field must match recursively; source locations are
    ignored. Calls with argument lists of different length are unequal.
    """
    if type(left) is not type(right):
        return False

    if isinstance(left, Identifier):
        return left.name == right.name
    if isinstance(left, Numeral):
        return left.value == right.value
    if isinstance(left, (Times, Plus, Minus)):
        return expr_eq(left.left, right.left) and expr_eq(left.right, right.right)
    if isinstance(left, Let):
        return decl_eq(left.declaration, right.declaration) and expr_eq(left.body, right.body)
    if isinstance(left, FunCall):
        if left.name != right.name or len(left.arguments) != len(right.arguments):
            return False
        return all(expr_eq(a, b) for a, b in zip(left.arguments, right.arguments))

    return False


def decl_eq(left: Declaration, right: Declaration) -> bool:
    """Check two declarations for structural equality."""
    if isinstance(left, VarDecl) and isinstance(right, VarDecl):
        return left.name == right.name and expr_eq(left.value, right.value)
    if isinstance(left, FunDecl) and isinstance(right, FunDecl):
        return (
            left.name == right.name
            and left.parameters == right.parameters
            and expr_eq(left.body, right.body)
        )
    return False


# -----------------------------------------------------------------------------
# Rendering
# -----------------------------------------------------------------------------


def _format_number(value: float) -> str:
    if value.is_integer():
        return str(int(value))
    # Shortest round-tripping digits, never in exponent form
    return format(Decimal(repr(value)), "f")


class ASTPrinter(ASTVisitor):
    """
    Renders parser ASTs in a canonical textual form.

    The output uses the surface syntax but drops grouping parentheses, so it
    is deterministic but not guaranteed to parse back to the same tree.
    """

    def visit_identifier(self, node: Identifier) -> str:
        return node.name

    def visit_numeral(self, node: Numeral) -> str:
        return _format_number(node.value)

    def visit_times(self, node: Times) -> str:
        return f"{self.visit(node.left)}*{self.visit(node.right)}"

    def visit_plus(self, node: Plus) -> str:
        return f"{self.visit(node.left)}+{self.visit(node.right)}"

    def visit_minus(self, node: Minus) -> str:
        return f"{self.visit(node.left)}-{self.visit(node.right)}"

    def visit_let(self, node: Let) -> str:
        return f"let {self.visit(node.declaration)} in {self.visit(node.body)}"

    def visit_fun_call(self, node: FunCall) -> str:
        args = ",".join(self.visit(arg) for arg in node.arguments)
        return f"{node.name}({args})"

    def visit_var_decl(self, node: VarDecl) -> str:
        return f"var {node.name} = {self.visit(node.value)}"

    def visit_fun_decl(self, node: FunDecl) -> str:
        params = ",".join(node.parameters)
        return f"function {node.name}({params}){{{self.visit(node.body)}}}"


def expr_to_string(expr: Expression) -> str:
    """Render an expression in canonical form."""
    return ASTPrinter().visit(expr)


def decl_to_string(decl: Declaration) -> str:
    """Render a declaration in canonical form."""
    return ASTPrinter().visit(decl)


def render(result: Union[ASTNode, str]) -> str:
    """
    Render any parser result.

    Identifiers come back from ``parse_id`` as plain strings and are
    rendered unchanged.
    """
    if isinstance(result, ASTNode):
        return ASTPrinter().visit(result)
    return str(result)


def render_parse_result(parse: Callable[[str], Any], text: str) -> str:
    """
    Parse ``text`` and render the result, or return ``"err"`` on failure.

    ``parse`` is one of the parser entry points.
    """
    try:
        result = parse(text)
    except ParserError:
        return "err"
    return render(result)
