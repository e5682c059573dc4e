"""Fold an effect tree into any selective context."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any, TypeVar

from doselect.errors import UnboundedTreeError
from doselect.selective import Selective
from doselect.tree import Deferred, Lifted, Pure, Select, Tree
from doselect.types import EffectBase

F = TypeVar("F")

_VISIT = "visit"
_HANDLE = "handle"
_MAP = "map"


def fold_tree(
    tree: Tree[Any],
    context: Selective[F],
    interpret_effect: Callable[[EffectBase], F],
    *,
    unroll: int | None = 0,
    on_unbounded: Callable[[], F] | None = None,
) -> F:
    """Rebuild ``tree`` with ``context``'s operations.

    ``interpret_effect`` turns each lifted effect into a context value, in
    the order the effects appear. ``Deferred`` subtrees are expanded at most
    ``unroll`` times along any path. Past that, ``on_unbounded`` supplies the
    value, or :class:`UnboundedTreeError` is raised. ``unroll=None`` hands
    deferral to the context itself (``context.defer``), which only lazy
    contexts support.

    The walk keeps its own stack, so deep combinator chains fold without
    Python recursion.
    """

    if unroll is not None and unroll < 0:
        raise ValueError("unroll must be >= 0 or None")

    values: list[F] = []
    work: list[tuple[str, Any, int | None]] = [(_VISIT, tree, unroll)]
    while work:
        op, item, budget = work.pop()
        if op == _HANDLE:
            handler = values.pop()
            disjunction = values.pop()
            values.append(context.map(item, context.handle(disjunction, handler)))
            continue
        if op == _MAP:
            values.append(context.map(item, values.pop()))
            continue

        node = item
        if isinstance(node, Pure):
            values.append(context.pure(node.value))
        elif isinstance(node, Lifted):
            values.append(context.map(node.k, interpret_effect(node.effect)))
        elif isinstance(node, Select):
            work.append((_HANDLE, node.k, budget))
            work.append((_VISIT, node.handler, budget))
            work.append((_VISIT, node.disjunction, budget))
        elif isinstance(node, Deferred):
            if budget is None:
                values.append(context.defer(_lazy_fold(node, context, interpret_effect)))
            elif budget <= 0:
                if on_unbounded is None:
                    raise UnboundedTreeError()
                values.append(on_unbounded())
            else:
                work.append((_MAP, node.k, budget))
                work.append((_VISIT, node.force(), budget - 1))
        else:
            raise TypeError(f"fold_tree expects a Tree; got {type(node).__name__}")

    return values.pop()


def _lazy_fold(
    node: Deferred[Any],
    context: Selective[F],
    interpret_effect: Callable[[EffectBase], F],
) -> Callable[[], F]:
    def unfold() -> F:
        return context.map(node.k, fold_tree(node.force(), context, interpret_effect, unroll=None))

    return unfold


__all__ = ["fold_tree"]
