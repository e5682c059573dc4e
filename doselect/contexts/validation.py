"""Validation context: collect independent failures instead of stopping.

``ap`` runs both sides and concatenates their errors. ``handle`` is
selective: once the disjunction has failed there is no choice to act on, so
the handler's failures are never reported, and a ``Right`` skips the handler
the same way.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, Generic, TypeVar

from doselect._vendor import Left
from doselect.selective import Selective

T = TypeVar("T")


class Validation(Generic[T]):
    __slots__ = ()

    def is_success(self) -> bool:
        return isinstance(self, Success)

    def is_failure(self) -> bool:
        return isinstance(self, Failure)


@dataclass(frozen=True)
class Success(Validation[T], Generic[T]):
    value: T


@dataclass(frozen=True)
class Failure(Validation[Any]):
    errors: tuple[Any, ...]


def failure(*errors: Any) -> Failure:
    return Failure(tuple(errors))


class ValidationContext(Selective[Validation[Any]]):
    name = "validation"

    def pure(self, value: Any) -> Validation[Any]:
        return Success(value)

    def map(self, f: Callable[[Any], Any], fx: Validation[Any]) -> Validation[Any]:
        if isinstance(fx, Success):
            return Success(f(fx.value))
        return fx

    def handle(self, x: Validation[Any], y: Validation[Any]) -> Validation[Any]:
        if isinstance(x, Failure):
            return x
        tagged = x.value
        if isinstance(tagged, Left):
            return self.map(lambda fn: fn(tagged.value), y)
        return Success(tagged.value)

    def ap(self, f: Validation[Any], x: Validation[Any]) -> Validation[Any]:
        if isinstance(f, Failure) and isinstance(x, Failure):
            return Failure(f.errors + x.errors)
        if isinstance(f, Failure):
            return f
        if isinstance(x, Failure):
            return x
        return Success(f.value(x.value))


VALIDATION = ValidationContext()

__all__ = [
    "Failure",
    "Success",
    "VALIDATION",
    "Validation",
    "ValidationContext",
    "failure",
]
