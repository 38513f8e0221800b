"""
Type Checking Module for Toi.

Derives the type of an expression or definition under a typing context, or
rejects it. The judgements implemented are:

    Γ ⊢ x : Γ(x)                               if x is bound
    Γ ⊢ n : Number,  Γ ⊢ "s" : String,  Γ ⊢ true/false : Boolean
    Γ ⊢ e1 op e2 : Boolean                     if both operands are Number
    Γ ⊢ e1 * e2, e1 + e2, e1 - e2 : Number     if both operands are Number
    Γ ⊢ let d in e : t                         if Γ ⊢ d : (x, t') and Γ[x : t'] ⊢ e : t
    Γ ⊢ f(e1..en) : r                          if Γ(f) = (t1..tn) -> r and Γ ⊢ ei : ti
    Γ ⊢ f(...) : t                             if Γ(f) = t is not a function type

    Γ ⊢ var x = e : (x, t)                     if Γ ⊢ e : t
    Γ ⊢ function f(xi: ti): r = e : (f, (t1..tn) -> r)
                                               if Γ[xi : ti, f : (t1..tn) -> r] ⊢ e : t for some t

A failed judgement yields None. The declared return type of a function is not
compared with the type of its body.
"""

from __future__ import annotations

import logging
from typing import Optional

from toi.environment import Environment
from toi.typer.ast_nodes import (
    ASTVisitor,
    BooleanLiteral,
    Call,
    Compare,
    Definition,
    Expression,
    FunDefn,
    Identifier,
    Let,
    Minus,
    Numeral,
    Plus,
    StringLiteral,
    Times,
    VarDefn,
)
from toi.typer.types import (
    BOOLEAN_TYPE,
    NUMBER_TYPE,
    STRING_TYPE,
    FunctionType,
    Type,
)
from toi.utils.errors import NestingDepthError

logger = logging.getLogger(__name__)

TypingContext = Environment[Type]


class TypeChecker(ASTVisitor):
    """
    Infers and checks types over the typer AST.

    Each visit method returns the derived type, or None once any part of the
    tree fails to type check; None propagates outward unchanged. The current
    context is held on the instance during a check, so one instance must not
    be shared between threads.

    Usage:
        checker = TypeChecker()
        result = checker.check_expr(Environment(), expr)
        if result is None:
            print("ill-typed")
    """

    def __init__(self) -> None:
        self._context: TypingContext = Environment()

    def check_expr(self, context: TypingContext, expr: Expression) -> Optional[Type]:
        """Type check ``expr`` under ``context``."""
        try:
            return self._check_in(context, expr)
        except RecursionError:
            raise NestingDepthError(
                "program is nested too deeply to type check", expr.location
            ) from None

    def check_defn(
        self, context: TypingContext, defn: Definition
    ) -> Optional[tuple[str, Type]]:
        """Type check ``defn`` under ``context``, returning the name and its type."""
        try:
            return self._check_in(context, defn)
        except RecursionError:
            raise NestingDepthError(
                "program is nested too deeply to type check", defn.location
            ) from None

    def _check_in(self, context: TypingContext, node):
        saved = self._context
        self._context = context
        try:
            return self.visit(node)
        finally:
            self._context = saved

    def _reject(self, reason: str) -> None:
        logger.debug("Type check failed: %s", reason)
        return None

    def _check_numeric_operands(
        self, left: Expression, right: Expression, result: Type, operation: str
    ) -> Optional[Type]:
        left_type = self.visit(left)
        right_type = self.visit(right)
        if left_type == NUMBER_TYPE and right_type == NUMBER_TYPE:
            return result
        return self._reject(
            f"{operation} needs Number operands, got {left_type} and {right_type}"
        )

    # -------------------------------------------------------------------------
    # Definitions
    # -------------------------------------------------------------------------

    def visit_var_defn(self, node: VarDefn) -> Optional[tuple[str, Type]]:
        value_type = self.visit(node.value)
        if value_type is None:
            return None
        return node.name, value_type

    def visit_fun_defn(self, node: FunDefn) -> Optional[tuple[str, Type]]:
        param_types = tuple(param.type_ for param in node.parameters)
        function_type = FunctionType(param_types, node.return_type)

        body_context = self._context
        for param in node.parameters:
            body_context = body_context.insert(param.name, param.type_)
        # Bound last so the body can call the function recursively
        body_context = body_context.insert(node.name, function_type)

        # TODO: compare the body type with node.return_type once ill-typed
        # definitions with a mismatched declared result should be rejected.
        if self._check_in(body_context, node.body) is None:
            return None
        return node.name, function_type

    # -------------------------------------------------------------------------
    # Expressions
    # -------------------------------------------------------------------------

    def visit_identifier(self, node: Identifier) -> Optional[Type]:
        bound = self._context.get(node.name)
        if bound is None:
            return self._reject(f"'{node.name}' is not defined")
        return bound

    def visit_numeral(self, node: Numeral) -> Type:
        return NUMBER_TYPE

    def visit_string_literal(self, node: StringLiteral) -> Type:
        return STRING_TYPE

    def visit_boolean_literal(self, node: BooleanLiteral) -> Type:
        return BOOLEAN_TYPE

    def visit_compare(self, node: Compare) -> Optional[Type]:
        # Every comparison operator shares this rule
        return self._check_numeric_operands(
            node.left, node.right, BOOLEAN_TYPE, f"comparison {node.operator.name}"
        )

    def visit_times(self, node: Times) -> Optional[Type]:
        return self._check_numeric_operands(node.left, node.right, NUMBER_TYPE, "'*'")

    def visit_plus(self, node: Plus) -> Optional[Type]:
        return self._check_numeric_operands(node.left, node.right, NUMBER_TYPE, "'+'")

    def visit_minus(self, node: Minus) -> Optional[Type]:
        return self._check_numeric_operands(node.left, node.right, NUMBER_TYPE, "'-'")

    def visit_let(self, node: Let) -> Optional[Type]:
        binding = self.visit(node.definition)
        if binding is None:
            return None
        name, bound_type = binding
        return self._check_in(self._context.insert(name, bound_type), node.body)

    def visit_call(self, node: Call) -> Optional[Type]:
        callee_type = self._context.get(node.name)
        if callee_type is None:
            return self._reject(f"function '{node.name}' is not defined")

        # A non-function callee types as itself whatever the arguments are
        if not callee_type.is_function():
            return callee_type

        if len(callee_type.param_types) != len(node.arguments):
            return self._reject(
                f"'{node.name}' expects {len(callee_type.param_types)} arguments, "
                f"got {len(node.arguments)}"
            )

        for position, (expected, arg) in enumerate(
            zip(callee_type.param_types, node.arguments), start=1
        ):
            actual = self.visit(arg)
            if actual != expected:
                return self._reject(
                    f"argument {position} of '{node.name}' should be {expected}, got {actual}"
                )

        return callee_type.return_type


# =============================================================================
# Utility Functions
# =============================================================================


def type_check_expr(context: TypingContext, expr: Expression) -> Optional[Type]:
    """
    Type check an expression.

    Args:
        context: The typing context (``Environment()`` at top level)
        expr: The expression to check

    Returns:
        The derived type, or None if the expression is ill-typed
    """
    return TypeChecker().check_expr(context, expr)


def type_check_defn(
    context: TypingContext, defn: Definition
) -> Optional[tuple[str, Type]]:
    """
    Type check a definition.

    Args:
        context: The typing context
        defn: The definition to check

    Returns:
        The defined name and its type, or None if the definition is ill-typed
    """
    return TypeChecker().check_defn(context, defn)


__all__ = [
    "TypeChecker",
    "TypingContext",
    "type_check_expr",
    "type_check_defn",
]
