"""
Toi Type Checker Package.
"""

from toi.typer.type_checker import TypeChecker, type_check_defn, type_check_expr
from toi.typer.types import (
    BOOLEAN_TYPE,
    NUMBER_TYPE,
    STRING_TYPE,
    FunctionType,
    PrimitiveType,
    Type,
)

__all__ = [
    "TypeChecker",
    "type_check_expr",
    "type_check_defn",
    "Type",
    "PrimitiveType",
    "FunctionType",
    "NUMBER_TYPE",
    "STRING_TYPE",
    "BOOLEAN_TYPE",
]
