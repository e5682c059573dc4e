"""
Effect trees: the free selective structure.

A tree is an inert description of a selective pipeline. Leaves are pure
values or single lifted effects; ``Select`` nodes pair a computation that
yields ``Left``/``Right`` with a handler subtree that only runs on ``Left``.

A handler may be any tree. Interpreters run it as one skippable unit, so
nested handlers are never rebracketed. Mapping over a node composes into its
``k`` and costs the same whatever the size of the subtree.
"""

from __future__ import annotations

from abc import ABC
from collections.abc import Callable, Iterator
from dataclasses import dataclass, replace
from enum import Enum
from typing import Any, Generic, TypeVar

from doselect._vendor import Either, Left, Right, apply_to, compose, either, identity
from doselect.types import EffectBase

T = TypeVar("T")
U = TypeVar("U")


class Tree(ABC, Generic[T]):
    """Base class for every tree node."""

    def map(self, f: Callable[[T], U]) -> Tree[U]:
        """Map a pure function over the eventual value."""
        return fmap(f, self)


class Route(Enum):
    """What static analysis may assume about a ``Select`` node's handler.

    Execution ignores the route and always inspects the tag.
    """

    OPTIONAL = "optional"  # handler runs on Left, skipped on Right
    ALWAYS = "always"  # disjunction only ever yields Left
    # disjunction is a Select whose handler yields Right; this handler runs
    # exactly when that one was skipped
    EXCLUSIVE = "exclusive"


@dataclass(frozen=True)
class Pure(Tree[T]):
    """A literal value with no effect."""

    value: T


@dataclass(frozen=True)
class Lifted(Tree[T]):
    """One opaque effect; the tree's value is ``k(result)``."""

    effect: EffectBase
    k: Callable[[Any], T] = identity


@dataclass(frozen=True)
class Select(Tree[T]):
    """Run ``disjunction``; on ``Left(a)`` run ``handler`` and apply it to ``a``.

    The node's value is ``k`` of that result (or of ``b`` for ``Right(b)``).
    """

    disjunction: Tree[Either[Any, Any]]
    handler: Tree[Callable[[Any], Any]]
    k: Callable[[Any], T] = identity
    route: Route = Route.OPTIONAL


@dataclass(frozen=True, eq=False)
class Deferred(Tree[T]):
    """A subtree generated on demand; the node's value is ``k(value)``.

    ``thunk`` is called every time the node is forced; nothing is cached on
    the node. Mapping composes into ``k`` and never touches the generated
    subtree.
    """

    thunk: Callable[[], Tree[Any]]
    k: Callable[[Any], T] = identity

    def force(self) -> Tree[Any]:
        tree = self.thunk()
        if not isinstance(tree, Tree):
            raise TypeError(
                f"Deferred thunk must return a Tree; got {type(tree).__name__}"
            )
        return tree


# =========================================================
# Construction
# =========================================================
def pure(value: T) -> Pure[T]:
    return Pure(value)


def lift(effect: EffectBase) -> Lifted[Any]:
    if not isinstance(effect, EffectBase):
        raise TypeError(f"lift expects an EffectBase; got {type(effect).__name__}")
    return Lifted(effect)


def defer(thunk: Callable[[], Tree[T]]) -> Deferred[T]:
    if not callable(thunk):
        raise TypeError("defer expects a zero-argument callable returning a Tree")
    return Deferred(thunk)


def fmap(f: Callable[[T], U], tree: Tree[T]) -> Tree[U]:
    """Map ``f`` over the value of ``tree`` without touching its effects."""

    if isinstance(tree, Pure):
        return Pure(f(tree.value))
    if isinstance(tree, Lifted):
        return Lifted(tree.effect, compose(f, tree.k))
    if isinstance(tree, Select):
        return replace(tree, k=compose(f, tree.k))
    if isinstance(tree, Deferred):
        return Deferred(tree.thunk, compose(f, tree.k))
    raise TypeError(f"fmap expects a Tree; got {type(tree).__name__}")


def handle(x: Tree[Either[Any, T]], y: Tree[Callable[[Any], T]]) -> Tree[T]:
    """The selective primitive: apply ``y`` only when ``x`` yields ``Left``."""

    if not isinstance(x, Tree) or not isinstance(y, Tree):
        raise TypeError(
            f"handle expects Tree arguments; got {type(x).__name__}, {type(y).__name__}"
        )
    if isinstance(y, Pure):
        return fmap(either(y.value, identity), x)
    if isinstance(x, Pure) and isinstance(x.value, Left):
        return fmap(apply_to(x.value.value), y)
    return Select(x, y)


def select(
    x: Tree[Either[Any, Any]],
    left: Tree[Callable[[Any], T]],
    right: Tree[Callable[[Any], T]],
) -> Tree[T]:
    """Run ``left`` on ``Left(a)`` or ``right`` on ``Right(b)``, never both."""

    tagged = fmap(lambda e: e.map(Left), x)
    via_left = fmap(lambda f: compose(Right, f), left)
    inner = handle(tagged, via_left)
    outer = handle(inner, right)
    if (
        isinstance(outer, Select)
        and outer.disjunction is inner
        and isinstance(inner, Select)
        and inner.disjunction is tagged
        and inner.handler is via_left
    ):
        return replace(outer, route=Route.EXCLUSIVE)
    return outer


def ap(f: Tree[Callable[[Any], T]], x: Tree[Any]) -> Tree[T]:
    """Apply without selection: both effects always run, ``f`` first."""

    disjunction = fmap(Left, f)
    handler = fmap(apply_to, x)
    tree = handle(disjunction, handler)
    if isinstance(tree, Select) and tree.disjunction is disjunction and tree.handler is handler:
        return replace(tree, route=Route.ALWAYS)
    return tree


def lift_a2(fn: Callable[[Any, Any], T], x: Tree[Any], y: Tree[Any]) -> Tree[T]:
    return ap(fmap(lambda a: lambda b: fn(a, b), x), y)


def effects(tree: Tree[Any]) -> Iterator[EffectBase]:
    """Yield the effects structurally present in ``tree``, in order.

    Deferred subtrees are not forced.
    """

    stack: list[Tree[Any]] = [tree]
    while stack:
        node = stack.pop()
        if isinstance(node, Lifted):
            yield node.effect
        elif isinstance(node, Select):
            stack.append(node.handler)
            stack.append(node.disjunction)


__all__ = [
    "Deferred",
    "Lifted",
    "Pure",
    "Route",
    "Select",
    "Tree",
    "ap",
    "defer",
    "effects",
    "fmap",
    "handle",
    "lift",
    "lift_a2",
    "pure",
    "select",
]
