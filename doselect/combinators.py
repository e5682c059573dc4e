"""
Control-flow combinators over effect trees.

Each function is the ``FREE`` context's derived operation; they exist so
pipelines can be written without naming the context.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from typing import Any

from doselect.selective import FREE
from doselect.tree import Tree


def if_s(cond: Tree[bool], then: Tree[Any], else_: Tree[Any]) -> Tree[Any]:
    """Run ``cond``, then exactly one of ``then`` / ``else_``."""
    return FREE.if_s(cond, then, else_)


def when_s(cond: Tree[bool], action: Tree[Any]) -> Tree[None]:
    """Run ``action`` only when ``cond`` yields ``True``; the result is ``None``."""
    return FREE.map(lambda _: None, FREE.when_s(cond, action))


def while_s(action: Tree[bool]) -> Tree[None]:
    """Repeat ``action`` until it yields ``False``.

    The loop body is generated on demand, one iteration per forced
    ``Deferred`` node.
    """
    return FREE.while_s(action)


def or_s(x: Tree[bool], y: Tree[bool]) -> Tree[bool]:
    return FREE.or_s(x, y)


def and_s(x: Tree[bool], y: Tree[bool]) -> Tree[bool]:
    return FREE.and_s(x, y)


def or_all(xs: Iterable[Tree[bool]]) -> Tree[bool]:
    """Short-circuit disjunction: stops at the first ``True``."""
    return FREE.or_all(xs)


def and_all(xs: Iterable[Tree[bool]]) -> Tree[bool]:
    """Short-circuit conjunction: stops at the first ``False``."""
    return FREE.and_all(xs)


def any_s(predicate: Callable[[Any], Tree[bool]], items: Iterable[Any]) -> Tree[bool]:
    return FREE.any_s(predicate, items)


def all_s(predicate: Callable[[Any], Tree[bool]], items: Iterable[Any]) -> Tree[bool]:
    return FREE.all_s(predicate, items)


def from_maybe_s(default: Tree[Any], x: Tree[Any]) -> Tree[Any]:
    return FREE.from_maybe_s(default, x)


__all__ = [
    "all_s",
    "and_all",
    "and_s",
    "any_s",
    "from_maybe_s",
    "if_s",
    "or_all",
    "or_s",
    "when_s",
    "while_s",
]
