"""Task context: deferred synchronous computations.

A ``Task`` does nothing until called. ``handle`` only calls the handler task
when the disjunction produced ``Left``, so the context is selective in the
same way as the execution interpreter, and it can also ``bind``. Calling a
task runs on the Python stack, so long ``while_s`` loops belong to the
interpreter instead.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, Generic, TypeVar

from doselect._vendor import Left
from doselect.selective import Monad

T = TypeVar("T")


@dataclass(frozen=True, eq=False)
class Task(Generic[T]):
    """A zero-argument computation, run by calling it."""

    run: Callable[[], T]

    def __call__(self) -> T:
        return self.run()


class TaskContext(Monad[Task[Any]]):
    name = "task"

    def pure(self, value: Any) -> Task[Any]:
        return Task(lambda: value)

    def map(self, f: Callable[[Any], Any], fx: Task[Any]) -> Task[Any]:
        return Task(lambda: f(fx()))

    def handle(self, x: Task[Any], y: Task[Any]) -> Task[Any]:
        def run() -> Any:
            tagged = x()
            if isinstance(tagged, Left):
                return y()(tagged.value)
            return tagged.value

        return Task(run)

    def bind(self, fx: Task[Any], f: Callable[[Any], Task[Any]]) -> Task[Any]:
        return Task(lambda: f(fx())())

    def defer(self, thunk: Callable[[], Task[Any]]) -> Task[Any]:
        return Task(lambda: thunk()())


TASK = TaskContext()

__all__ = ["TASK", "Task", "TaskContext"]
