"""
Minimal ReQL-shaped expression builder for tests.

Mirrors how ReQL drivers build queries: terms emit ``[term_type, args, optargs?]``
with nested terms left for the caller to resolve, and anonymous functions take
parameter ids from a process-global counter that never resets.
"""

from __future__ import annotations

import inspect
from typing import Any

import pytest

DATUM, MAKE_ARRAY, VAR, TABLE, EQ, GT, FILTER, MAP, FUNC, BRACKET = 1, 2, 10, 15, 17, 21, 39, 38, 69, 170


class Term:
    tt: int

    def __init__(self, *args: Any, **optargs: Any) -> None:
        self.args = [expr(a) for a in args]
        self.optargs = {k: expr(v) for k, v in optargs.items()}

    def build(self) -> list:
        res: list = [self.tt, self.args]
        if self.optargs:
            res.append(self.optargs)
        return res

    def __getitem__(self, key: Any) -> Term:
        return Bracket(self, key)

    def __eq__(self, other: Any) -> Term:  # type: ignore[override]
        return Eq(self, other)

    def __gt__(self, other: Any) -> Term:
        return Gt(self, other)

    __hash__ = None  # type: ignore[assignment]

    def filter(self, predicate: Any, **optargs: Any) -> Term:
        return Filter(self, predicate, **optargs)

    def map(self, fn: Any) -> Term:
        return Map(self, fn)


class Datum(Term):
    def __init__(self, data: Any) -> None:
        self.data = data

    def build(self) -> Any:
        return self.data


class MakeArray(Term):
    tt = MAKE_ARRAY


class MakeObj(Term):
    def __init__(self, obj: dict) -> None:
        self.obj = {k: expr(v) for k, v in obj.items()}

    def build(self) -> dict:
        return self.obj


class Var(Term):
    tt = VAR


class Func(Term):
    tt = FUNC
    next_var_id = 1

    def __init__(self, fn: Any) -> None:
        n = len(inspect.signature(fn).parameters)
        ids = list(range(Func.next_var_id, Func.next_var_id + n))
        Func.next_var_id += n
        super().__init__(MakeArray(*ids), fn(*[Var(i) for i in ids]))


class Table(Term):
    tt = TABLE


class Eq(Term):
    tt = EQ


class Gt(Term):
    tt = GT


class Bracket(Term):
    tt = BRACKET


class Filter(Term):
    tt = FILTER


class Map(Term):
    tt = MAP


def expr(value: Any) -> Term:
    if isinstance(value, Term):
        return value
    if isinstance(value, dict):
        return MakeObj(value)
    if isinstance(value, (list, tuple)):
        return MakeArray(*value)
    if callable(value):
        return Func(value)
    return Datum(value)


class R:
    """The ``r`` namespace of the test builder."""

    @staticmethod
    def table(name: str) -> Term:
        return Table(name)

    @staticmethod
    def expr(value: Any) -> Term:
        return expr(value)

    @staticmethod
    def func(fn: Any) -> Term:
        return Func(fn)


@pytest.fixture
def r() -> R:
    return R()
