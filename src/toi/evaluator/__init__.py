"""
Toi Evaluator Package.

Reduces evaluator ASTs to integer values under dynamic scoping.
"""

from toi.evaluator.evaluator import Evaluator, eval_defn, eval_expr

__all__ = [
    "Evaluator",
    "eval_expr",
    "eval_defn",
]
