"""
Lightweight typing aliases and the query capability protocol.

Queries are opaque to qsub: any object that can produce a structural (tree)
serialization of itself through ``build()`` is accepted. Keep the surface small
and stable to avoid churn in dependents.

Examples:
    >>> from qsub.core.typing import Buildable
    >>> class Table:
    ...     def build(self):
    ...         return [15, ["turtles"]]
    >>> isinstance(Table(), Buildable)
    True
"""

from __future__ import annotations

from typing import Any, Protocol, Union, runtime_checkable

__all__ = [
    "JsonScalar",
    "JsonValue",
    "JsonDict",
    "Buildable",
]

JsonScalar = Union[str, int, float, bool, None]
JsonValue = Union[JsonScalar, list["JsonValue"], dict[str, "JsonValue"]]

# Convenient JSON-like mapping alias. Kept intentionally broad for serde boundaries.
JsonDict = dict[str, Any]


@runtime_checkable
class Buildable(Protocol):
    """Query expression that can emit its structural form."""

    def build(self) -> Any: ...
