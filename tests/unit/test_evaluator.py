"""
Unit tests for the Toi Evaluator.
"""

import logging

import pytest

from toi.environment import Environment
from toi.evaluator.ast_nodes import (
    Call,
    FunDefn,
    FunRecord,
    Identifier,
    Let,
    Minus,
    Numeral,
    Plus,
    Times,
    VarDefn,
    VarRecord,
)
from toi.evaluator.evaluator import DEFAULT_VALUE, Evaluator, eval_defn, eval_expr
from toi.utils.errors import EvaluationError, NestingDepthError


def square(name: str = "sq") -> FunDefn:
    return FunDefn(name, ("x",), Times(Identifier("x"), Identifier("x")))


class TestEvaluatorArithmetic:
    """Tests for literals and arithmetic."""

    def test_numeral(self, evaluate):
        assert evaluate(Numeral(3)) == 3

    def test_times(self, evaluate):
        assert evaluate(Times(Numeral(3), Numeral(5))) == 15

    def test_plus(self, evaluate):
        assert evaluate(Plus(Numeral(3), Numeral(5))) == 8

    def test_minus(self, evaluate):
        assert evaluate(Minus(Numeral(3), Numeral(5))) == -2

    def test_nested(self, evaluate):
        expr = Minus(Numeral(10), Times(Numeral(2), Plus(Numeral(1), Numeral(3))))
        assert evaluate(expr) == 2

    def test_large_values_do_not_overflow(self, evaluate):
        big = Numeral(2**62)
        assert evaluate(Times(big, big)) == 2**124


class TestEvaluatorDefinitions:
    """Tests for eval_defn."""

    def test_var_defn(self, empty_env):
        env = eval_defn(empty_env, VarDefn("x", Numeral(2)))
        assert env == Environment({"x": VarRecord(2)})

    def test_var_defn_evaluates_value(self, empty_env):
        env = eval_defn(empty_env, VarDefn("z", Plus(Numeral(2), Numeral(2))))
        assert env == Environment({"z": VarRecord(4)})

    def test_fun_defn_stores_body_unevaluated(self, empty_env):
        defn = square()
        env = eval_defn(empty_env, defn)
        assert env["sq"] == FunRecord(("x",), defn.body)

    def test_input_environment_untouched(self, empty_env):
        eval_defn(empty_env, VarDefn("x", Numeral(2)))
        assert len(empty_env) == 0

    def test_redefinition_shadows(self, empty_env):
        env = eval_defn(empty_env, VarDefn("x", Numeral(1)))
        env = eval_defn(env, VarDefn("x", Numeral(2)))
        assert env["x"] == VarRecord(2)


class TestEvaluatorLet:
    """Tests for let scoping."""

    def test_let_var(self, evaluate):
        expr = Let(VarDefn("x", Numeral(10)), Times(Identifier("x"), Identifier("x")))
        assert evaluate(expr) == 100

    def test_sibling_lets_are_independent(self, evaluate):
        first = Let(VarDefn("x", Numeral(10)), Times(Identifier("x"), Identifier("x")))
        second = Let(VarDefn("x", Numeral(20)), Times(Identifier("x"), Identifier("x")))
        assert evaluate(Minus(first, second)) == -300

    def test_let_binding_does_not_leak(self, evaluate):
        expr = Plus(Let(VarDefn("x", Numeral(5)), Identifier("x")), Identifier("x"))
        assert evaluate(expr) == 5


class TestEvaluatorCalls:
    """Tests for function calls."""

    def test_square(self, evaluate):
        assert evaluate(Let(square(), Call("sq", (Numeral(4),)))) == 16

    def test_nested_calls(self, evaluate):
        expr = Let(square(), Call("sq", (Call("sq", (Numeral(4),)),)))
        assert evaluate(expr) == 256

    def test_products_of_calls(self, evaluate):
        defn = FunDefn("f", ("a",), Plus(Identifier("a"), Numeral(2)))
        expr = Let(defn, Times(Call("f", (Numeral(3),)), Call("f", (Numeral(5),))))
        assert evaluate(expr) == 35

    def test_inner_function_uses_outer_parameter(self, evaluate):
        inner = FunDefn("g", ("b",), Minus(Numeral(0), Identifier("b")))
        outer = FunDefn(
            "f",
            ("a",),
            Let(inner, Call("g", (Times(Numeral(2), Identifier("a")),))),
        )
        assert evaluate(Let(outer, Call("f", (Numeral(5),)))) == -10

    def test_multiple_parameters(self, evaluate):
        defn = FunDefn(
            "f",
            ("a", "b", "c"),
            Minus(Identifier("a"), Times(Identifier("b"), Identifier("c"))),
        )
        expr = Let(defn, Call("f", (Numeral(10), Numeral(2), Numeral(3))))
        assert evaluate(expr) == 4

    def test_excess_arguments_dropped(self, evaluate):
        expr = Let(square(), Call("sq", (Numeral(3), Numeral(100))))
        assert evaluate(expr) == 9

    def test_missing_arguments_leave_parameter_unbound(self, evaluate):
        defn = FunDefn("f", ("a", "b"), Plus(Identifier("a"), Identifier("b")))
        assert evaluate(Let(defn, Call("f", (Numeral(7),)))) == 7

    def test_later_argument_sees_earlier_parameter(self, evaluate):
        """Parameters are bound one at a time in the caller's environment."""
        defn = FunDefn("f", ("a", "b"), Identifier("b"))
        expr = Let(
            VarDefn("a", Numeral(1)),
            Let(defn, Call("f", (Numeral(50), Identifier("a")))),
        )
        assert evaluate(expr) == 50

    def test_recursive_reference_resolves_by_name(self, evaluate):
        """The function's own name is visible in its body at call time."""
        defn = FunDefn("f", ("n",), Identifier("n"))
        outer = Let(defn, Call("f", (Call("f", (Numeral(9),)),)))
        assert evaluate(outer) == 9


class TestEvaluatorDynamicScope:
    """Free names in a function body resolve where the function is called."""

    def test_call_site_binding_wins(self, evaluate):
        # let var y = 1 in
        #   let function f(x){x+y} in
        #     let var y = 100 in f(1)
        expr = Let(
            VarDefn("y", Numeral(1)),
            Let(
                FunDefn("f", ("x",), Plus(Identifier("x"), Identifier("y"))),
                Let(VarDefn("y", Numeral(100)), Call("f", (Numeral(1),))),
            ),
        )
        assert evaluate(expr) == 101

    def test_same_function_different_call_sites(self, evaluate):
        defn = FunDefn("f", (), Identifier("y"))
        expr = Let(
            defn,
            Plus(
                Let(VarDefn("y", Numeral(3)), Call("f", ())),
                Let(VarDefn("y", Numeral(40)), Call("f", ())),
            ),
        )
        assert evaluate(expr) == 43

    def test_inner_function_needs_live_parameter(self, evaluate):
        """g reads f's parameter, which only exists while f is running."""
        g = FunDefn("g", (), Identifier("a"))
        f = FunDefn("f", ("a",), Call("g", ()))
        inside = Let(g, Let(f, Call("f", (Numeral(8),))))
        outside = Let(g, Let(f, Call("g", ())))
        assert evaluate(inside) == 8
        assert evaluate(outside) == DEFAULT_VALUE

    def test_parameter_shadows_caller_binding(self, evaluate):
        expr = Let(
            VarDefn("x", Numeral(1)),
            Let(square("f"), Plus(Call("f", (Numeral(3),)), Identifier("x"))),
        )
        assert evaluate(expr) == 10


class TestEvaluatorDefaults:
    """Tests for the never-raise evaluation policy."""

    def test_unbound_identifier_is_zero(self, evaluate):
        assert evaluate(Identifier("undefined")) == 0

    def test_function_used_as_value_is_zero(self, evaluate):
        assert evaluate(Let(square(), Identifier("sq"))) == 0

    def test_unknown_function_is_zero(self, evaluate):
        assert evaluate(Call("nothing", (Numeral(1),))) == 0

    def test_calling_a_value_returns_it(self, evaluate):
        expr = Let(VarDefn("v", Numeral(12)), Call("v", (Numeral(1), Numeral(2))))
        assert evaluate(expr) == 12

    def test_degradation_is_logged(self, evaluate, caplog):
        with caplog.at_level(logging.DEBUG, logger="toi.evaluator.evaluator"):
            evaluate(Identifier("ghost"))
        assert "'ghost' is not defined" in caplog.text


class TestEvaluatorStrictMode:
    """Tests for strict evaluation."""

    def test_unbound_identifier_raises(self, evaluate):
        with pytest.raises(EvaluationError, match="not defined"):
            evaluate(Identifier("undefined"), strict=True)

    def test_function_as_value_raises(self, evaluate):
        with pytest.raises(EvaluationError, match="is a function"):
            evaluate(Let(square(), Identifier("sq")), strict=True)

    def test_call_of_value_raises(self, evaluate):
        expr = Let(VarDefn("v", Numeral(12)), Call("v", ()))
        with pytest.raises(EvaluationError, match="is a value"):
            evaluate(expr, strict=True)

    def test_well_formed_program_unaffected(self, evaluate):
        assert evaluate(Let(square(), Call("sq", (Numeral(6),))), strict=True) == 36

    def test_module_function_accepts_strict(self, empty_env):
        with pytest.raises(EvaluationError):
            eval_expr(empty_env, Call("f", ()), strict=True)


class TestEvaluatorLimits:
    """Tests for pathological input."""

    def test_deep_nesting_fails_gracefully(self, empty_env):
        expr = Numeral(1)
        for _ in range(20000):
            expr = Plus(Numeral(1), expr)
        with pytest.raises(NestingDepthError):
            Evaluator().eval_expr(empty_env, expr)

    def test_evaluator_is_reusable(self, empty_env):
        evaluator = Evaluator()
        assert evaluator.eval_expr(empty_env, Numeral(1)) == 1
        assert evaluator.eval_expr(empty_env, Identifier("x")) == 0

    def test_scope_restored_after_strict_failure(self, empty_env):
        """A raise deep inside a let does not leave its binding behind."""
        evaluator = Evaluator(strict=True)
        failing = Let(VarDefn("x", Numeral(1)), Identifier("missing"))
        with pytest.raises(EvaluationError):
            evaluator.eval_expr(empty_env, failing)
        with pytest.raises(EvaluationError):
            evaluator.eval_expr(empty_env, Identifier("x"))

    def test_scope_restored_after_nesting_failure(self, empty_env):
        evaluator = Evaluator()
        expr = Identifier("x")
        for _ in range(20000):
            expr = Plus(Numeral(1), expr)
        with pytest.raises(NestingDepthError):
            evaluator.eval_expr(empty_env, Let(VarDefn("x", Numeral(5)), expr))
        assert evaluator.eval_expr(empty_env, Identifier("x")) == 0
