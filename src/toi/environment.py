"""
Persistent name-to-binding mapping shared by the evaluator and the typer.

An Environment is never modified in place: ``insert`` returns a new mapping
and every earlier reference keeps seeing exactly what it saw before. This is
what lets a ``let`` or a function call extend the scope for its body without
disturbing sibling evaluations that hold the same environment.
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from typing import Generic, Optional, TypeVar

from immutables import Map

V = TypeVar("V")


class Environment(Generic[V]):
    """
    An immutable mapping from names to bindings.

    Usage:
        env = Environment()
        outer = env.insert("x", 1)
        inner = outer.insert("x", 2)
        outer["x"]  # still 1
    """

    __slots__ = ("_bindings",)

    def __init__(self, bindings: Optional[Mapping[str, V]] = None) -> None:
        if isinstance(bindings, Map):
            self._bindings: Map[str, V] = bindings
        else:
            self._bindings = Map(bindings or {})

    @classmethod
    def empty(cls) -> Environment[V]:
        """Return an environment with no bindings."""
        return cls()

    @classmethod
    def from_mapping(cls, mapping: Mapping[str, V]) -> Environment[V]:
        """Build an environment holding every binding of ``mapping``."""
        return cls(mapping)

    def insert(self, name: str, value: V) -> Environment[V]:
        """
        Return a new environment with ``name`` bound to ``value``.

        An existing binding for ``name`` is shadowed in the result only. The
        result shares every untouched trie node with ``self``, so insertion
        is O(log n).
        """
        return type(self)(self._bindings.set(name, value))

    def get(self, name: str, default: Optional[V] = None) -> Optional[V]:
        """Look up ``name``, returning ``default`` if it is unbound."""
        return self._bindings.get(name, default)

    def items(self) -> Iterator[tuple[str, V]]:
        return iter(self._bindings.items())

    def __getitem__(self, name: str) -> V:
        return self._bindings[name]

    def __contains__(self, name: object) -> bool:
        return name in self._bindings

    def __iter__(self) -> Iterator[str]:
        return iter(self._bindings)

    def __len__(self) -> int:
        return len(self._bindings)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Environment):
            return NotImplemented
        return self._bindings == other._bindings

    def __hash__(self) -> int:
        return hash(self._bindings)

    def __repr__(self) -> str:
        bindings = ", ".join(f"{name!r}: {value!r}" for name, value in self._bindings.items())
        return f"Environment({{{bindings}}})"
