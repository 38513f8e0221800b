"""
Type System Representation for the Toi type checker.

Types are immutable and compare structurally: two function types are equal
when their parameter lists have the same length and pairwise equal types and
their return types are equal, recursively.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass


class Type(ABC):
    """
    Base class for all types in the Toi type system.

    Types are immutable and support structural equality.
    """

    @abstractmethod
    def __str__(self) -> str:
        """Return a human-readable string representation of the type."""
        pass

    @abstractmethod
    def __eq__(self, other: object) -> bool:
        """Check structural equality between types."""
        pass

    @abstractmethod
    def __hash__(self) -> int:
        """Return hash for use in dictionaries and sets."""
        pass

    def is_function(self) -> bool:
        return False


@dataclass(frozen=True, eq=False)
class PrimitiveType(Type):
    """
    A primitive (built-in) type.

    Supported primitives: Number, String, Boolean
    """

    name: str

    def __str__(self) -> str:
        return self.name

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, PrimitiveType):
            return False
        return self.name == other.name

    def __hash__(self) -> int:
        return hash(("primitive", self.name))


# Singleton instances for primitive types
NUMBER_TYPE = PrimitiveType("Number")
STRING_TYPE = PrimitiveType("String")
BOOLEAN_TYPE = PrimitiveType("Boolean")


@dataclass(frozen=True, eq=False)
class FunctionType(Type):
    """
    A function type representing callable signatures.

    Example: (Number, Number) -> Boolean
    """

    param_types: tuple[Type, ...]
    return_type: Type

    def __str__(self) -> str:
        if not self.param_types:
            return f"() -> {self.return_type}"
        params_str = ", ".join(str(t) for t in self.param_types)
        return f"({params_str}) -> {self.return_type}"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, FunctionType):
            return False
        return (
            self.param_types == other.param_types
            and self.return_type == other.return_type
        )

    def __hash__(self) -> int:
        return hash(("function", self.param_types, self.return_type))

    def is_function(self) -> bool:
        return True


__all__ = [
    "Type",
    "PrimitiveType",
    "FunctionType",
    "NUMBER_TYPE",
    "STRING_TYPE",
    "BOOLEAN_TYPE",
]
