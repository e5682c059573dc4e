"""
The selective capability interface.

A context implements ``pure``, ``map`` and ``handle``; every other operation
here (``select``, ``ap``, the control-flow combinators) is derived from those
three, so any context that satisfies the selective laws gets combinators with
the same skipping guarantees.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Callable, Iterable
from typing import Any, Generic, TypeVar

from doselect import tree as _tree
from doselect._vendor import Either, Left, Right, apply_to, compose
from doselect.errors import UnboundedTreeError
from doselect.tree import Tree

F = TypeVar("F")
T = TypeVar("T")


def _const(value: Any) -> Callable[[Any], Any]:
    return lambda _ignored: value


def _bool_to_either(flag: bool) -> Either[None, None]:
    return Left(None) if flag else Right(None)


class Selective(ABC, Generic[F]):
    """Strategy object describing one effect context.

    ``F`` is the type of the context's values (trees, thunks, validations,
    label collections, ...).
    """

    name: str = "selective"

    @abstractmethod
    def pure(self, value: Any) -> F:
        """Wrap ``value`` with no effect."""

    @abstractmethod
    def map(self, f: Callable[[Any], Any], fx: F) -> F:
        """Transform the produced value without changing effects."""

    @abstractmethod
    def handle(self, x: F, y: F) -> F:
        """Apply the function from ``y`` only when ``x`` yields ``Left``."""

    def defer(self, thunk: Callable[[], F]) -> F:
        """Build a value lazily. Strict contexts cannot, so they refuse."""
        raise UnboundedTreeError(f"{self.name} context cannot represent deferred values")

    # ------------------------------------------------------------------
    # Derived operations
    # ------------------------------------------------------------------
    def select(self, x: F, left: F, right: F) -> F:
        tagged = self.map(lambda e: e.map(Left), x)
        via_left = self.map(lambda f: compose(Right, f), left)
        return self.handle(self.handle(tagged, via_left), right)

    def ap(self, f: F, x: F) -> F:
        return self.handle(self.map(Left, f), self.map(apply_to, x))

    def lift_a2(self, fn: Callable[[Any, Any], Any], x: F, y: F) -> F:
        return self.ap(self.map(lambda a: lambda b: fn(a, b), x), y)

    def if_s(self, cond: F, then: F, else_: F) -> F:
        return self.select(
            self.map(_bool_to_either, cond),
            self.map(_const, then),
            self.map(_const, else_),
        )

    def when_s(self, cond: F, action: F) -> F:
        return self.if_s(cond, action, self.pure(None))

    def while_s(self, action: F) -> F:
        return self.defer(lambda: self.when_s(action, self.while_s(action)))

    def or_s(self, x: F, y: F) -> F:
        return self.if_s(x, self.pure(True), y)

    def and_s(self, x: F, y: F) -> F:
        return self.if_s(x, y, self.pure(False))

    def or_all(self, xs: Iterable[F]) -> F:
        result = self.pure(False)
        for x in reversed(list(xs)):
            result = self.or_s(x, result)
        return result

    def and_all(self, xs: Iterable[F]) -> F:
        result = self.pure(True)
        for x in reversed(list(xs)):
            result = self.and_s(x, result)
        return result

    def any_s(self, predicate: Callable[[Any], F], items: Iterable[Any]) -> F:
        return self.or_all(predicate(item) for item in items)

    def all_s(self, predicate: Callable[[Any], F], items: Iterable[Any]) -> F:
        return self.and_all(predicate(item) for item in items)

    def from_maybe_s(self, default: F, x: F) -> F:
        """Use ``x``'s value unless it is ``None``, in which case run ``default``."""
        return self.handle(
            self.map(lambda v: Left(None) if v is None else Right(v), x),
            self.map(_const, default),
        )


class Monad(Selective[F]):
    """Contexts that can also sequence on computed values."""

    @abstractmethod
    def bind(self, fx: F, f: Callable[[Any], F]) -> F:
        """Run ``fx`` then the context value ``f`` builds from its result."""

    def handle_m(self, x: F, y: F) -> F:
        """``handle`` derived from ``bind``: inspect the tag, then maybe run ``y``."""
        return self.bind(
            x,
            lambda tagged: tagged.either(
                lambda a: self.map(apply_to(a), y),
                self.pure,
            ),
        )


class FreeSelective(Selective[Tree[Any]]):
    """The tree context: values are effect trees built by ``doselect.tree``."""

    name = "free"

    def pure(self, value: Any) -> Tree[Any]:
        return _tree.pure(value)

    def map(self, f: Callable[[Any], Any], fx: Tree[Any]) -> Tree[Any]:
        return _tree.fmap(f, fx)

    def handle(self, x: Tree[Any], y: Tree[Any]) -> Tree[Any]:
        return _tree.handle(x, y)

    def select(self, x: Tree[Any], left: Tree[Any], right: Tree[Any]) -> Tree[Any]:
        return _tree.select(x, left, right)

    def ap(self, f: Tree[Any], x: Tree[Any]) -> Tree[Any]:
        return _tree.ap(f, x)

    def defer(self, thunk: Callable[[], Tree[Any]]) -> Tree[Any]:
        return _tree.defer(thunk)


FREE = FreeSelective()

__all__ = [
    "FREE",
    "FreeSelective",
    "Monad",
    "Selective",
]
