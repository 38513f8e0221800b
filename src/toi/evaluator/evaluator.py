"""
Substitution-based Evaluator for Toi.

Reduces evaluator ASTs to integer values against a persistent environment:

    eval_expr(E, Id(x))           = E(x)
    eval_expr(E, Numeral(n))      = n
    eval_expr(E, Times(e1, e2))   = eval_expr(E, e1) * eval_expr(E, e2)
    eval_expr(E, Plus(e1, e2))    = eval_expr(E, e1) + eval_expr(E, e2)
    eval_expr(E, Minus(e1, e2))   = eval_expr(E, e1) - eval_expr(E, e2)
    eval_expr(E, Let(d, e))       = eval_expr(eval_defn(E, d), e)
    eval_expr(E, Call(f, args))   = eval_expr(E[x1 -> a1, ..., xn -> an], body)
                                    where E(f) = (x1..xn) -> body
    eval_defn(E, VarDefn(x, e))   = E[x -> eval_expr(E, e)]
    eval_defn(E, FunDefn(f, xs, e)) = E[f -> (xs) -> e]

Scoping is dynamic: a function body runs in the caller's environment extended
with its parameters, so free names resolve at the call site.

Evaluation never fails on unbound or mis-kinded names. Every such case goes
through ``Evaluator._degrade``, which returns a default (0 for names, the
bound value for a call on a variable). Passing ``strict=True`` turns the same
cases into EvaluationError.
"""

import logging
from typing import Optional

from toi.environment import Environment
from toi.evaluator.ast_nodes import (
    ASTVisitor,
    Call,
    Definition,
    EnvRecord,
    Expression,
    FunDefn,
    FunRecord,
    Identifier,
    Let,
    Minus,
    Numeral,
    Plus,
    Times,
    Value,
    VarDefn,
    VarRecord,
)
from toi.utils.errors import EvaluationError, NestingDepthError, SourceLocation

logger = logging.getLogger(__name__)

# Value produced for names that do not resolve to a variable
DEFAULT_VALUE: Value = 0

RuntimeEnvironment = Environment[EnvRecord]


class Evaluator(ASTVisitor):
    """
    Evaluates expressions and definitions.

    The scope being evaluated in is held on the instance while a call runs
    and restored when it returns or raises, so an instance is reusable but
    must not be shared between threads. ``eval_expr`` and ``eval_defn`` at
    module level build a fresh instance per call.

    Usage:
        evaluator = Evaluator()
        value = evaluator.eval_expr(Environment(), expr)
    """

    def __init__(self, strict: bool = False) -> None:
        """
        Initialize the evaluator.

        Args:
            strict: Raise EvaluationError instead of degrading to defaults
        """
        self.strict = strict
        self._env: RuntimeEnvironment = Environment()

    def eval_expr(self, env: RuntimeEnvironment, expr: Expression) -> Value:
        """Evaluate ``expr`` in ``env``."""
        try:
            return self._eval_in(env, expr)
        except RecursionError:
            raise NestingDepthError(
                "program is nested too deeply to evaluate", expr.location
            ) from None

    def eval_defn(self, env: RuntimeEnvironment, defn: Definition) -> RuntimeEnvironment:
        """Evaluate ``defn`` in ``env`` and return the extended environment."""
        try:
            return self._define_in(env, defn)
        except RecursionError:
            raise NestingDepthError(
                "program is nested too deeply to evaluate", defn.location
            ) from None

    def _eval_in(self, env: RuntimeEnvironment, expr: Expression) -> Value:
        saved = self._env
        self._env = env
        try:
            return self.visit(expr)
        finally:
            self._env = saved

    def _define_in(self, env: RuntimeEnvironment, defn: Definition) -> RuntimeEnvironment:
        saved = self._env
        self._env = env
        try:
            return self.visit(defn)
        finally:
            self._env = saved

    def _degrade(
        self,
        message: str,
        default: Value,
        location: Optional[SourceLocation] = None,
    ) -> Value:
        """Return ``default`` for a name that cannot be used as asked."""
        if self.strict:
            raise EvaluationError(message, location)
        logger.debug("%s; using %r", message, default)
        return default

    # -------------------------------------------------------------------------
    # Definitions
    # -------------------------------------------------------------------------

    def visit_var_defn(self, node: VarDefn) -> RuntimeEnvironment:
        value = self.visit(node.value)
        return self._env.insert(node.name, VarRecord(value))

    def visit_fun_defn(self, node: FunDefn) -> RuntimeEnvironment:
        return self._env.insert(node.name, FunRecord(node.parameters, node.body))

    # -------------------------------------------------------------------------
    # Expressions
    # -------------------------------------------------------------------------

    def visit_identifier(self, node: Identifier) -> Value:
        record = self._env.get(node.name)
        if isinstance(record, VarRecord):
            return record.value
        if isinstance(record, FunRecord):
            return self._degrade(
                f"'{node.name}' is a function, not a value", DEFAULT_VALUE, node.location
            )
        return self._degrade(f"'{node.name}' is not defined", DEFAULT_VALUE, node.location)

    def visit_numeral(self, node: Numeral) -> Value:
        return node.value

    def visit_times(self, node: Times) -> Value:
        left = self.visit(node.left)
        right = self.visit(node.right)
        return left * right

    def visit_plus(self, node: Plus) -> Value:
        left = self.visit(node.left)
        right = self.visit(node.right)
        return left + right

    def visit_minus(self, node: Minus) -> Value:
        left = self.visit(node.left)
        right = self.visit(node.right)
        return left - right

    def visit_let(self, node: Let) -> Value:
        extended = self.visit(node.definition)
        return self._eval_in(extended, node.body)

    def visit_call(self, node: Call) -> Value:
        record = self._env.get(node.name)

        if isinstance(record, VarRecord):
            return self._degrade(
                f"'{node.name}' is a value, not a function", record.value, node.location
            )
        if record is None:
            return self._degrade(
                f"function '{node.name}' is not defined", DEFAULT_VALUE, node.location
            )

        # Bind parameters one at a time, starting from the caller's scope.
        # Each argument sees the parameters bound before it; extra arguments
        # are ignored and missing ones leave their parameter unbound.
        call_env = self._env
        for param, arg in zip(record.parameters, node.arguments):
            call_env = self._define_in(call_env, VarDefn(param, arg))

        return self._eval_in(call_env, record.body)


# =============================================================================
# Convenience functions
# =============================================================================


def eval_expr(
    env: RuntimeEnvironment, expr: Expression, strict: bool = False
) -> Value:
    """
    Evaluate an expression.

    Args:
        env: The environment to evaluate in (``Environment()`` at top level)
        expr: The expression to evaluate
        strict: Raise EvaluationError instead of degrading to defaults

    Returns:
        The integer value of the expression
    """
    return Evaluator(strict=strict).eval_expr(env, expr)


def eval_defn(
    env: RuntimeEnvironment, defn: Definition, strict: bool = False
) -> RuntimeEnvironment:
    """
    Evaluate a definition.

    Args:
        env: The environment to extend
        defn: The definition to evaluate
        strict: Raise EvaluationError instead of degrading to defaults

    Returns:
        A new environment with the defined name bound; ``env`` is unchanged
    """
    return Evaluator(strict=strict).eval_defn(env, defn)


__all__ = [
    "Evaluator",
    "RuntimeEnvironment",
    "DEFAULT_VALUE",
    "eval_expr",
    "eval_defn",
]
