"""
Execution interpreter for effect trees.

Drives the small-step machine in ``doselect.machine``, performing each
effect it yields with a registered handler. A ``Select`` node's handler is
only entered when its disjunction produced ``Left``, so skipped effects are
never invoked at all. The first failure stops the run.
"""

from __future__ import annotations

import inspect
import logging
from collections import deque
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from typing import Any, Generic, TypeVar

from doselect._vendor import Err, FrozenDict, Ok, Result
from doselect.errors import StepLimitExceeded, UnhandledEffectError
from doselect.machine import Done, EffectYield, Failed, MachineState, machine_step
from doselect.tree import Tree
from doselect.types import EffectBase
from doselect.utils import debug_enabled

T = TypeVar("T")

logger = logging.getLogger(__name__)

Handler = Callable[[EffectBase], Any]


def _origin(effect: EffectBase) -> str:
    if effect.created_at is None:
        return effect.label
    return f"{effect.label} (created at {effect.created_at.format_location()})"


def _log_handler_failure(effect: EffectBase, error: Exception) -> None:
    logger.debug("effect %s failed: %r", _origin(effect), error)


@dataclass(frozen=True)
class RunResult(Generic[T]):
    """Outcome of one interpretation pass."""

    result: Result[T]
    trace: tuple[str, ...] = ()
    steps: int = 0

    @property
    def value(self) -> T:
        """Get the successful value or raise the stored exception."""
        return self.result.unwrap()

    @property
    def error(self) -> Exception:
        if isinstance(self.result, Err):
            return self.result.error
        raise ValueError("Cannot access error on successful result")

    def is_ok(self) -> bool:
        return self.result.is_ok()

    def is_err(self) -> bool:
        return self.result.is_err()


@dataclass
class _RunState:
    """Mutable bookkeeping for a single pass; never shared between passes."""

    max_steps: int | None
    trace: deque[str] = field(default_factory=deque)
    steps: int = 0

    def finish(self, result: Result[Any]) -> RunResult[Any]:
        return RunResult(result=result, trace=tuple(self.trace), steps=self.steps)


class SelectiveInterpreter:
    """Run effect trees against a table of effect handlers.

    Handlers are looked up by the effect's type, walking its MRO, so a
    handler registered for a base class serves its subclasses. ``fallback``
    receives any effect without a registered handler.
    """

    def __init__(
        self,
        handlers: Mapping[type, Handler] | None = None,
        *,
        fallback: Handler | None = None,
        max_steps: int | None = None,
        max_trace_entries: int | None = None,
    ):
        if max_steps is not None and max_steps <= 0:
            raise ValueError("max_steps must be > 0 or None")
        if max_trace_entries is not None and max_trace_entries < 0:
            raise ValueError("max_trace_entries must be >= 0 or None")

        self._handlers: FrozenDict[type, Handler] = FrozenDict(handlers or {})
        self._fallback = fallback
        self._max_steps = max_steps
        self._max_trace_entries = max_trace_entries
        self._debug = debug_enabled()

    @property
    def handlers(self) -> FrozenDict[type, Handler]:
        return self._handlers

    def with_handlers(self, handlers: Mapping[type, Handler]) -> SelectiveInterpreter:
        """Return a copy with ``handlers`` layered over the current table."""
        return SelectiveInterpreter(
            {**self._handlers, **handlers},
            fallback=self._fallback,
            max_steps=self._max_steps,
            max_trace_entries=self._max_trace_entries,
        )

    def _resolve(self, effect: EffectBase) -> Handler:
        for klass in type(effect).__mro__:
            handler = self._handlers.get(klass)
            if handler is not None:
                return handler
        if self._fallback is not None:
            return self._fallback
        raise UnhandledEffectError(effect)

    def _new_run(self) -> _RunState:
        return _RunState(
            max_steps=self._max_steps,
            trace=deque(maxlen=self._max_trace_entries),
        )

    def _advance(self, state: MachineState, run: _RunState) -> MachineState | Done | Failed:
        """Step until the machine yields an effect or terminates."""

        while True:
            if run.max_steps is not None and run.steps >= run.max_steps:
                return Failed(StepLimitExceeded(run.max_steps))
            result = machine_step(state)
            run.steps += 1
            if self._debug:
                logger.debug("step %d: %s", run.steps, type(state.C).__name__)
            if isinstance(result, (Done, Failed)):
                return result
            if isinstance(result.C, EffectYield):
                return result
            state = result

    def _record(self, effect: EffectBase, run: _RunState) -> None:
        run.trace.append(effect.label)
        logger.debug("performing effect %s", effect.label)

    def run(self, tree: Tree[T]) -> RunResult[T]:
        """Interpret ``tree`` synchronously."""

        run = self._new_run()
        state: MachineState | Done | Failed = MachineState.initial(tree)

        while True:
            state = self._advance(state, run)
            if isinstance(state, Done):
                return run.finish(Ok(state.value))
            if isinstance(state, Failed):
                logger.debug("run failed: %r", state.error)
                return run.finish(Err(state.error))

            effect = state.C.effect
            try:
                handler = self._resolve(effect)
                self._record(effect, run)
                value = handler(effect)
            except Exception as e:
                _log_handler_failure(effect, e)
                state = state.fail(e)
                continue

            if inspect.isawaitable(value):
                if inspect.iscoroutine(value):
                    value.close()
                state = state.fail(
                    TypeError(
                        f"Handler for {effect.label} returned an awaitable. "
                        "Use run_async to interpret trees with async handlers."
                    )
                )
                continue
            state = state.resume(value)

    async def run_async(self, tree: Tree[T]) -> RunResult[T]:
        """Interpret ``tree``, awaiting handlers that return awaitables."""

        run = self._new_run()
        state: MachineState | Done | Failed = MachineState.initial(tree)

        while True:
            state = self._advance(state, run)
            if isinstance(state, Done):
                return run.finish(Ok(state.value))
            if isinstance(state, Failed):
                logger.debug("run failed: %r", state.error)
                return run.finish(Err(state.error))

            effect = state.C.effect
            try:
                handler = self._resolve(effect)
                self._record(effect, run)
                value = handler(effect)
                if inspect.isawaitable(value):
                    value = await value
            except Exception as e:
                _log_handler_failure(effect, e)
                state = state.fail(e)
                continue
            state = state.resume(value)


def run(
    tree: Tree[T],
    handlers: Mapping[type, Handler] | None = None,
    **kwargs: Any,
) -> RunResult[T]:
    """Run ``tree`` with a one-off :class:`SelectiveInterpreter`."""
    return SelectiveInterpreter(handlers, **kwargs).run(tree)


async def run_async(
    tree: Tree[T],
    handlers: Mapping[type, Handler] | None = None,
    **kwargs: Any,
) -> RunResult[T]:
    return await SelectiveInterpreter(handlers, **kwargs).run_async(tree)


__all__ = [
    "Handler",
    "RunResult",
    "SelectiveInterpreter",
    "run",
    "run_async",
]
