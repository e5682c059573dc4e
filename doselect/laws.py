"""
Selective law suite.

Every context is expected to satisfy these identities. Both sides of a law
are built with the context under test and compared through ``observe``,
which turns a context value into something comparable (for trees: run it
and keep the value and the effect trace; for thunks: call them).

==  =======================================================================
F1  g <$> handle(x, y)  ==  handle(fmap g <$> x, (g .) <$> y)
F2  handle(first g <$> x, y)  ==  handle(x, (. g) <$> y)
F3  handle(x, f <$> y)  ==  handle(first (flip f) <$> x, (&) <$> y)
P1  handle(x, pure g)  ==  either g id <$> x
P2  handle(pure (Left a), y)  ==  ($ a) <$> y
A1  handle(x, handle(y, z))  ==  handle(handle(f <$> x, g <$> y), uncurry <$> z)
M   handle(x, y)  ==  x >>= either (\\a -> ($ a) <$> y) pure   (monads only)
==  =======================================================================

There is deliberately no law for ``handle(pure (Right b), y)``.
"""

from __future__ import annotations

from collections.abc import Callable, Collection, Iterable
from dataclasses import dataclass
from typing import Any, Generic, TypeVar

from loguru import logger

from doselect._vendor import (
    Either,
    Left,
    Right,
    apply_to,
    compose,
    either,
    flip,
    identity,
    uncurry,
)
from doselect.errors import LawViolation
from doselect.selective import Monad, Selective

F = TypeVar("F")

logger = logger.bind(component="laws")

LAWS = ("F1", "F2", "F3", "P1", "P2", "A1", "M")


@dataclass(frozen=True)
class LawCheck:
    law: str
    lhs: Any
    rhs: Any

    @property
    def holds(self) -> bool:
        return self.lhs == self.rhs


@dataclass(frozen=True)
class LawSamples(Generic[F]):
    """Inputs for one round of checks.

    All context values are over the same element type so one set of pure
    functions fits every law:

    - ``x``: ``F[Either[a, a]]``
    - ``y``: ``F[a -> a]``
    - ``c``: ``F[a]``
    - ``choice``: ``F[Either[a, a -> a]]``
    - ``z``: ``F[a -> a -> a]``
    - ``g``: ``a -> a``; ``curried``: ``a -> a -> a``; ``value``: ``a``
    """

    x: F
    y: F
    c: F
    choice: F
    z: F
    g: Callable[[Any], Any]
    curried: Callable[[Any], Callable[[Any], Any]]
    value: Any


def _nest_right(tagged: Either[Any, Any]) -> Either[Any, Any]:
    return tagged.map(Right)


def _pair_or_apply(tagged: Either[Any, Any]) -> Callable[[Any], Either[Any, Any]]:
    return lambda a: tagged.either(lambda c: Left((c, a)), lambda fn: Right(fn(a)))


class SelectiveLaws(Generic[F]):
    """Check the selective laws for one context."""

    def __init__(self, context: Selective[F], observe: Callable[[F], Any] = identity):
        self.context = context
        self.observe = observe

    def _check(self, law: str, lhs: F, rhs: F) -> LawCheck:
        return LawCheck(law, self.observe(lhs), self.observe(rhs))

    def f1(self, x: F, y: F, g: Callable[[Any], Any]) -> LawCheck:
        ctx = self.context
        lhs = ctx.map(g, ctx.handle(x, y))
        rhs = ctx.handle(
            ctx.map(lambda tagged: tagged.map(g), x),
            ctx.map(lambda fn: compose(g, fn), y),
        )
        return self._check("F1", lhs, rhs)

    def f2(self, x: F, y: F, g: Callable[[Any], Any]) -> LawCheck:
        ctx = self.context
        lhs = ctx.handle(ctx.map(lambda tagged: tagged.map_left(g), x), y)
        rhs = ctx.handle(x, ctx.map(lambda fn: compose(fn, g), y))
        return self._check("F2", lhs, rhs)

    def f3(self, x: F, c: F, curried: Callable[[Any], Callable[[Any], Any]]) -> LawCheck:
        ctx = self.context
        lhs = ctx.handle(x, ctx.map(curried, c))
        rhs = ctx.handle(
            ctx.map(lambda tagged: tagged.map_left(flip(curried)), x),
            ctx.map(apply_to, c),
        )
        return self._check("F3", lhs, rhs)

    def p1(self, x: F, g: Callable[[Any], Any]) -> LawCheck:
        ctx = self.context
        lhs = ctx.handle(x, ctx.pure(g))
        rhs = ctx.map(either(g, identity), x)
        return self._check("P1", lhs, rhs)

    def p2(self, value: Any, y: F) -> LawCheck:
        ctx = self.context
        lhs = ctx.handle(ctx.pure(Left(value)), y)
        rhs = ctx.map(apply_to(value), y)
        return self._check("P2", lhs, rhs)

    def a1(self, x: F, choice: F, z: F) -> LawCheck:
        ctx = self.context
        lhs = ctx.handle(x, ctx.handle(choice, z))
        rhs = ctx.handle(
            ctx.handle(ctx.map(_nest_right, x), ctx.map(_pair_or_apply, choice)),
            ctx.map(uncurry, z),
        )
        return self._check("A1", lhs, rhs)

    def monad_coherence(self, x: F, y: F) -> LawCheck:
        ctx = self.context
        if not isinstance(ctx, Monad):
            raise TypeError(f"{ctx.name} context does not support bind")
        return self._check("M", ctx.handle(x, y), ctx.handle_m(x, y))

    def check_all(
        self, samples: Iterable[LawSamples[F]], *, skip: Collection[str] = ()
    ) -> list[LawCheck]:
        checks: list[LawCheck] = []
        for sample in samples:
            runners: dict[str, Callable[[], LawCheck]] = {
                "F1": lambda: self.f1(sample.x, sample.y, sample.g),
                "F2": lambda: self.f2(sample.x, sample.y, sample.g),
                "F3": lambda: self.f3(sample.x, sample.c, sample.curried),
                "P1": lambda: self.p1(sample.x, sample.g),
                "P2": lambda: self.p2(sample.value, sample.y),
                "A1": lambda: self.a1(sample.x, sample.choice, sample.z),
            }
            if isinstance(self.context, Monad):
                runners["M"] = lambda: self.monad_coherence(sample.x, sample.y)
            for law, runner in runners.items():
                if law not in skip:
                    checks.append(runner())
        return checks

    def assert_laws(
        self, samples: Iterable[LawSamples[F]], *, skip: Collection[str] = ()
    ) -> list[LawCheck]:
        """Run every law and raise :class:`LawViolation` if any fails."""

        checks = self.check_all(samples, skip=skip)
        failures = [check for check in checks if not check.holds]
        for check in failures:
            logger.error(
                "{} context violates {}: {!r} != {!r}",
                self.context.name,
                check.law,
                check.lhs,
                check.rhs,
            )
        if failures:
            raise LawViolation(failures)
        logger.debug("{} context satisfies {} law check(s)", self.context.name, len(checks))
        return checks


__all__ = [
    "LAWS",
    "LawCheck",
    "LawSamples",
    "SelectiveLaws",
]
