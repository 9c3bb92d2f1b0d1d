"""
Structural serialization of opaque query expressions.

Turns a query-builder expression into a plain JSON-compatible tree by calling
its ``build()`` and resolving the result. Drivers differ in how deep ``build()``
goes (some return nested expression objects and leave the rest to a JSON
encoder), so nested buildables are built recursively here.

Responsibilities
- Recognize query expressions (qsub.core.typing.Buildable).
- Produce a tree of lists, str-keyed dicts and JSON scalars.
- Raise SerializationError for anything that cannot be represented; never
  substitute a default.

Notes:
    - Tuples become lists; mapping key order is preserved as emitted.
    - Non-finite floats are rejected since they have no JSON encoding.
    - Zero-IO, stdlib-only.
"""

from __future__ import annotations

import math
from collections.abc import Mapping
from typing import Any

from .errors import SerializationError
from .typing import Buildable, JsonValue

__all__ = [
    "is_buildable",
    "to_structure",
]


def is_buildable(obj: Any) -> bool:
    """
    Check whether an object exposes a callable ``build`` method.

    Args:
        obj (Any): Candidate query value.

    Returns:
        bool: True if obj satisfies the Buildable protocol.

    Examples:
        >>> is_buildable(object())
        False
    """
    return isinstance(obj, Buildable) and callable(getattr(obj, "build", None))


def _build(expr: Any) -> Any:
    try:
        return expr.build()
    except SerializationError:
        raise
    except Exception as exc:
        raise SerializationError(
            f"build() failed for {type(expr).__name__}: {exc}"
        ) from exc


def _resolve(node: Any, path: str) -> JsonValue:
    # bool before int: bool is an int subclass but passes through as-is.
    if node is None or isinstance(node, (bool, str, int)):
        return node
    if isinstance(node, float):
        if not math.isfinite(node):
            raise SerializationError(f"non-finite float {node!r} at {path}")
        return node
    if isinstance(node, (list, tuple)):
        return [_resolve(item, f"{path}[{i}]") for i, item in enumerate(node)]
    if isinstance(node, Mapping):
        out: dict[str, JsonValue] = {}
        for key, value in node.items():
            if not isinstance(key, str):
                raise SerializationError(
                    f"mapping key {key!r} at {path} is {type(key).__name__}, expected str"
                )
            out[key] = _resolve(value, f"{path}.{key}")
        return out
    if is_buildable(node):
        return _resolve(_build(node), path)
    raise SerializationError(
        f"unsupported value of type {type(node).__name__} at {path}"
    )


def to_structure(query: Any) -> JsonValue:
    """
    Produce the structural (tree) form of a query expression.

    Args:
        query (Any): Query-builder expression exposing ``build()``.

    Returns:
        JsonValue: Tree of lists, str-keyed dicts and JSON scalars.

    Raises:
        SerializationError: If query has no ``build()``, ``build()`` raises, the
            tree contains values with no JSON representation, or the tree is
            cyclic/too deep to walk.

    Examples:
        >>> class Table:
        ...     def __init__(self, name):
        ...         self.name = name
        ...     def build(self):
        ...         return [15, (self.name,)]
        >>> to_structure(Table("turtles"))
        [15, ['turtles']]
    """
    if not is_buildable(query):
        raise SerializationError(
            f"{type(query).__name__} is not a query expression (no build() method)"
        )
    try:
        return _resolve(_build(query), "$")
    except RecursionError as exc:
        raise SerializationError("query structure is cyclic or too deeply nested") from exc
