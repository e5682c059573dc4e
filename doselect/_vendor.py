"""
Vendored minimal algebraic types.

Result/Ok/Err carry interpreter outcomes; Either/Left/Right is the two-way
tagged value every selection inspects. The small function helpers below are
the vocabulary the selective laws are stated in.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, Generic, NoReturn, TypeVar, cast

from frozendict import frozendict

# =========================================================
# Type Vars
# =========================================================
T = TypeVar("T")
T_co = TypeVar("T_co", covariant=True)
U = TypeVar("U")
A = TypeVar("A")
B = TypeVar("B")
C = TypeVar("C")


class Result(Generic[T_co]):
    """Sum type representing either a successful value or an error."""

    __slots__ = ()

    def is_ok(self) -> bool:
        """Return ``True`` when the result is successful."""

        return isinstance(self, Ok)

    def is_err(self) -> bool:
        """Return ``True`` when the result represents a failure."""

        return isinstance(self, Err)

    def unwrap(self) -> T_co:
        """Return the value or raise the stored error."""

        if isinstance(self, Ok):
            return self.value
        raise self.error


@dataclass(frozen=True)
class Ok(Result[T], Generic[T]):
    """Success result."""
    value: T


@dataclass(frozen=True)
class Err(Result[NoReturn]):
    """Error result."""
    error: Exception


# =========================================================
# Either
# =========================================================
class Either(Generic[A, B]):
    """Two-way tagged value: ``Left`` asks for a handler, ``Right`` is done."""

    __slots__ = ()

    def is_left(self) -> bool:
        return isinstance(self, Left)

    def is_right(self) -> bool:
        return isinstance(self, Right)

    def either(self, on_left: Callable[[A], C], on_right: Callable[[B], C]) -> C:
        """Eliminate the tag by applying the matching function."""

        if isinstance(self, Left):
            return on_left(self.value)
        return on_right(cast(Right[B], self).value)

    def map(self, f: Callable[[B], U]) -> Either[A, U]:
        """Map the ``Right`` payload, leaving ``Left`` untouched."""

        if isinstance(self, Right):
            return Right(f(self.value))
        return cast(Either[A, U], self)

    def map_left(self, f: Callable[[A], U]) -> Either[U, B]:
        """Map the ``Left`` payload, leaving ``Right`` untouched."""

        if isinstance(self, Left):
            return Left(f(self.value))
        return cast(Either[U, B], self)


@dataclass(frozen=True)
class Left(Either[A, NoReturn], Generic[A]):
    """Payload that still needs a handler."""
    value: A


@dataclass(frozen=True)
class Right(Either[NoReturn, B], Generic[B]):
    """Payload that is already a final value."""
    value: B


# =========================================================
# Function helpers
# =========================================================
def identity(value: T) -> T:
    return value


def either(on_left: Callable[[A], C], on_right: Callable[[B], C]) -> Callable[[Either[A, B]], C]:
    """Curried case elimination: ``either(f, g)(Left(a)) == f(a)``."""

    def eliminate(value: Either[A, B]) -> C:
        return value.either(on_left, on_right)

    return eliminate


def compose(f: Callable[[B], C], g: Callable[[A], B]) -> Callable[[A], C]:
    """``compose(f, g)(x) == f(g(x))``."""

    def composed(value: A) -> C:
        return f(g(value))

    return composed


def apply_to(value: Any) -> Callable[[Callable[[Any], U]], U]:
    """Return ``f -> f(value)``."""

    def applied(f: Callable[[Any], U]) -> U:
        return f(value)

    return applied


def flip(f: Callable[[A], Callable[[B], C]]) -> Callable[[B], Callable[[A], C]]:
    """Swap the two arguments of a curried function."""

    def flipped(b: B) -> Callable[[A], C]:
        return lambda a: f(a)(b)

    return flipped


def uncurry(f: Callable[[A], Callable[[B], C]]) -> Callable[[tuple[A, B]], C]:
    """Turn a curried function into one over pairs."""

    def uncurried(pair: tuple[A, B]) -> C:
        first, second = pair
        return f(first)(second)

    return uncurried


# =========================================================
# Frozen Dict
# =========================================================
FrozenDict = frozendict

__all__ = [
    "Either",
    "Err",
    "FrozenDict",
    "Left",
    "Ok",
    "Result",
    "Right",
    "apply_to",
    "compose",
    "either",
    "flip",
    "identity",
    "uncurry",
]
