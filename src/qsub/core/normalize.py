"""
Query-local renumbering of anonymous-function variable ids.

Query builders allocate function parameter ids from a process-global counter,
so two structurally identical queries built at different times carry different
ids. This pass rewrites every id to the ordinal of its first occurrence within
the query's own tree, making the result a function of structural shape alone.

Shapes recognized (term codes configurable, ReQL defaults):

    [FUNC, [[MAKE_ARRAY, [id, ...]], body], ...]   parameter declaration
    [VAR, [id]]                                    variable reference

Notes:
    - Pre-order walk: list items left to right, mapping values in emission
      order. Declarations precede their references, so parameters are numbered
      in the order functions appear.
    - One mapping covers the whole tree; distinct ids stay distinct, so nested
      functions keep separate variables.
    - Inputs are never mutated; a new tree is returned.
    - Booleans are not ids even though bool is an int subclass.
"""

from __future__ import annotations

from collections.abc import Callable

from .constants import FUNC_TERM, MAKE_ARRAY_TERM, VAR_ID_START, VAR_TERM
from .typing import JsonValue

__all__ = [
    "collect_var_ids",
    "normalize_var_ids",
]


def _is_id(value: object) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _is_term(node: object, term: int) -> bool:
    return (
        isinstance(node, list)
        and len(node) >= 2
        and _is_id(node[0])
        and node[0] == term
        and isinstance(node[1], list)
    )


def _func_params(node: list, func_term: int, make_array_term: int) -> list[int] | None:
    """Return the declared parameter ids of a FUNC node, or None if node is not one."""
    if not _is_term(node, func_term) or len(node[1]) != 2:
        return None
    params = node[1][0]
    if not _is_term(params, make_array_term) or not all(_is_id(v) for v in params[1]):
        return None
    return list(params[1])


def _var_ref(node: list, var_term: int) -> int | None:
    if _is_term(node, var_term) and len(node[1]) == 1 and _is_id(node[1][0]):
        return node[1][0]
    return None


def _walk(
    node: JsonValue,
    rename: Callable[[int], int],
    func_term: int,
    var_term: int,
    make_array_term: int,
) -> JsonValue:
    if isinstance(node, dict):
        return {k: _walk(v, rename, func_term, var_term, make_array_term) for k, v in node.items()}
    if not isinstance(node, list):
        return node

    ref = _var_ref(node, var_term)
    if ref is not None:
        return [node[0], [rename(ref)], *node[2:]]

    params = _func_params(node, func_term, make_array_term)
    if params is not None:
        head, body = node[1]
        new_params = [head[0], [rename(p) for p in params], *head[2:]]
        new_body = _walk(body, rename, func_term, var_term, make_array_term)
        rest = [_walk(v, rename, func_term, var_term, make_array_term) for v in node[2:]]
        return [node[0], [new_params, new_body], *rest]

    return [_walk(v, rename, func_term, var_term, make_array_term) for v in node]


def collect_var_ids(
    tree: JsonValue,
    *,
    func_term: int = FUNC_TERM,
    var_term: int = VAR_TERM,
    make_array_term: int = MAKE_ARRAY_TERM,
) -> list[int]:
    """
    List the variable ids of a structural query in first-occurrence order.

    Args:
        tree (JsonValue): Structural query form (see qsub.core.structure).
        func_term (int): Term code of function nodes.
        var_term (int): Term code of variable references.
        make_array_term (int): Term code of the parameter array inside a function.

    Returns:
        list[int]: Distinct ids, ordered by first appearance in a pre-order walk.

    Examples:
        >>> collect_var_ids([39, [[15, ["t"]], [69, [[2, [7]], [10, [7]]]]]])
        [7]
    """
    seen: dict[int, None] = {}

    def record(var_id: int) -> int:
        seen.setdefault(var_id, None)
        return var_id

    _walk(tree, record, func_term, var_term, make_array_term)
    return list(seen)


def normalize_var_ids(
    tree: JsonValue,
    *,
    func_term: int = FUNC_TERM,
    var_term: int = VAR_TERM,
    make_array_term: int = MAKE_ARRAY_TERM,
    start: int = VAR_ID_START,
) -> JsonValue:
    """
    Rewrite variable ids to the ordinal of their first occurrence in the tree.

    Args:
        tree (JsonValue): Structural query form (see qsub.core.structure).
        func_term (int): Term code of function nodes.
        var_term (int): Term code of variable references.
        make_array_term (int): Term code of the parameter array inside a function.
        start (int): Id assigned to the first variable encountered.

    Returns:
        JsonValue: New tree with ids renumbered start, start + 1, ...

    Examples:
        >>> normalize_var_ids([69, [[2, [41]], [17, [[10, [41]], 5]]]])
        [69, [[2, [1]], [17, [[10, [1]], 5]]]]
        >>> normalize_var_ids([69, [[2, [41]], [17, [[10, [41]], 5]]]], start=0)
        [69, [[2, [0]], [17, [[10, [0]], 5]]]]
    """
    mapping: dict[int, int] = {}

    def rename(var_id: int) -> int:
        if var_id not in mapping:
            mapping[var_id] = start + len(mapping)
        return mapping[var_id]

    return _walk(tree, rename, func_term, var_term, make_array_term)
