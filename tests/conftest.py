"""
Pytest configuration for doselect tests.

Provides an instrumented handler that records every effect it performs, so
tests can assert which effects ran and which were skipped.
"""

from collections.abc import Iterator
from typing import Any

import pytest

from doselect import SelectiveInterpreter, Token


class Recorder:
    """Handler for :class:`Token` effects.

    Returns the token's payload, or the next scripted value for its label.
    Exceptions (as payloads or scripted values) are raised instead.
    """

    def __init__(self) -> None:
        self.calls: list[str] = []
        self._scripts: dict[str, Iterator[Any]] = {}

    def script(self, label: str, *values: Any) -> None:
        self._scripts[label] = iter(values)

    def count(self, label: str) -> int:
        return self.calls.count(label)

    def __call__(self, effect: Token) -> Any:
        self.calls.append(effect.label)
        if effect.label in self._scripts:
            value = next(self._scripts[effect.label])
        else:
            value = effect.payload
        if isinstance(value, Exception):
            raise value
        return value


@pytest.fixture
def recorder() -> Recorder:
    return Recorder()


@pytest.fixture
def interpreter(recorder: Recorder) -> SelectiveInterpreter:
    return SelectiveInterpreter({Token: recorder})
