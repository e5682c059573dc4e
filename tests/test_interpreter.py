"""Tests for the execution interpreter."""

import asyncio
import logging
from dataclasses import dataclass

import pytest

from doselect import (
    EffectBase,
    Err,
    Left,
    Ok,
    Right,
    RunResult,
    SelectiveInterpreter,
    StepLimitExceeded,
    Token,
    UnhandledEffectError,
    handle,
    lift,
    lift_a2,
    pure,
    run,
    run_async,
    select,
    token,
    when_s,
    while_s,
)


@dataclass(frozen=True)
class Fetch(EffectBase):
    key: str

    @property
    def label(self) -> str:
        return f"fetch:{self.key}"


class TestRunResult:
    def test_value_on_ok(self):
        result: RunResult[int] = RunResult(result=Ok(42))
        assert result.is_ok()
        assert not result.is_err()
        assert result.value == 42

    def test_value_raises_stored_error(self):
        result: RunResult[int] = RunResult(result=Err(ValueError("bad input")))
        assert result.is_err()
        with pytest.raises(ValueError, match="bad input"):
            result.value

    def test_error_on_ok_raises(self):
        with pytest.raises(ValueError, match="successful result"):
            RunResult(result=Ok(1)).error


class TestSyncRun:
    def test_pure_tree_runs_no_effects(self, interpreter, recorder):
        result = interpreter.run(pure(7))
        assert result.value == 7
        assert result.trace == ()
        assert recorder.calls == []

    def test_lifted_effect_uses_handler(self, interpreter):
        result = interpreter.run(lift(token("answer", 42)).map(lambda v: v + 1))
        assert result.value == 43
        assert result.trace == ("answer",)

    def test_select_runs_only_left_branch(self, interpreter, recorder):
        tree = select(
            lift(token("cond", Left(2))),
            lift(token("left", lambda a: a * 10)),
            lift(token("right", lambda b: b - 1)),
        )
        assert interpreter.run(tree).value == 20
        assert recorder.calls == ["cond", "left"]

    def test_select_runs_only_right_branch(self, interpreter, recorder):
        tree = select(
            lift(token("cond", Right(2))),
            lift(token("left", lambda a: a * 10)),
            lift(token("right", lambda b: b - 1)),
        )
        assert interpreter.run(tree).value == 1
        assert recorder.calls == ["cond", "right"]

    def test_pure_right_skips_handler(self, interpreter, recorder):
        tree = handle(pure(Right("done")), lift(token("handler", lambda a: a)))
        assert interpreter.run(tree).value == "done"
        assert recorder.calls == []

    def test_ap_runs_both_effects_in_order(self, interpreter):
        tree = lift_a2(lambda a, b: a + b, lift(token("a", 1)), lift(token("b", 2)))
        result = interpreter.run(tree)
        assert result.value == 3
        assert result.trace == ("a", "b")

    def test_tree_can_be_reused(self, interpreter):
        tree = lift_a2(lambda a, b: (a, b), lift(token("a", 1)), lift(token("b", 2)))
        first = interpreter.run(tree)
        second = interpreter.run(tree)
        assert first.value == second.value == (1, 2)
        assert first.trace == second.trace

    def test_module_level_run(self):
        result = run(lift(Fetch("user")), {Fetch: lambda effect: effect.key.upper()})
        assert result.value == "USER"
        assert result.trace == ("fetch:user",)


class TestFailures:
    def test_first_failure_stops_evaluation(self, interpreter, recorder):
        tree = lift_a2(
            lambda a, b: a + b,
            lift(token("first", RuntimeError("disk full"))),
            lift(token("second", 2)),
        )
        result = interpreter.run(tree)
        assert result.is_err()
        assert isinstance(result.error, RuntimeError)
        assert recorder.calls == ["first"]
        assert result.trace == ("first",)

    def test_pure_function_failure_propagates(self, interpreter):
        result = interpreter.run(lift(token("n", 0)).map(lambda v: 1 / v))
        assert isinstance(result.error, ZeroDivisionError)

    def test_unhandled_effect(self):
        result = SelectiveInterpreter().run(lift(Fetch("user")))
        assert isinstance(result.error, UnhandledEffectError)
        assert "Fetch" in str(result.error)

    def test_unhandled_effect_names_its_creation_site(self):
        result = SelectiveInterpreter().run(lift(token("orphan")))
        message = str(result.error)
        assert "Effect created at" in message
        assert f"{__file__}:" in message
        assert "test_unhandled_effect_names_its_creation_site" in message
        assert "Hint:" in message

    def test_handler_failure_is_logged_with_creation_site(self, interpreter, caplog):
        with caplog.at_level(logging.DEBUG, logger="doselect.interpreter"):
            interpreter.run(lift(token("broken", RuntimeError("disk full"))))
        failures = [r.getMessage() for r in caplog.records if r.getMessage().startswith("effect ")]
        assert len(failures) == 1
        assert "broken (created at" in failures[0]
        assert "disk full" in failures[0]

    def test_handler_lookup_walks_mro(self):
        interpreter = SelectiveInterpreter({EffectBase: lambda effect: effect.label})
        assert interpreter.run(lift(Fetch("a"))).value == "fetch:a"

    def test_fallback_handler(self):
        interpreter = SelectiveInterpreter({Token: lambda effect: 1}, fallback=lambda effect: 2)
        tree = lift_a2(lambda a, b: (a, b), lift(token("t")), lift(Fetch("f")))
        assert interpreter.run(tree).value == (1, 2)

    def test_disjunction_must_be_either(self, interpreter):
        tree = handle(lift(token("cond", "not either")), lift(token("h", lambda a: a)))
        result = interpreter.run(tree)
        assert isinstance(result.error, TypeError)

    def test_async_handler_rejected_by_sync_run(self):
        async def fetch(effect):
            return 1

        result = SelectiveInterpreter({Fetch: fetch}).run(lift(Fetch("a")))
        assert isinstance(result.error, TypeError)
        assert "run_async" in str(result.error)


class TestLimits:
    def test_max_steps_stops_runaway_loop(self):
        interpreter = SelectiveInterpreter({Token: lambda effect: True}, max_steps=500)
        result = interpreter.run(while_s(lift(token("again"))))
        assert isinstance(result.error, StepLimitExceeded)
        assert result.steps == 500

    def test_max_trace_entries_keeps_latest(self, recorder):
        recorder.script("again", True, True, True, False)
        interpreter = SelectiveInterpreter({Token: recorder}, max_trace_entries=2)
        result = interpreter.run(while_s(lift(token("again"))))
        assert result.is_ok()
        assert result.trace == ("again", "again")
        assert recorder.count("again") == 4

    def test_invalid_limits(self):
        with pytest.raises(ValueError):
            SelectiveInterpreter(max_steps=0)
        with pytest.raises(ValueError):
            SelectiveInterpreter(max_trace_entries=-1)

    def test_long_loop_runs_without_python_recursion(self, recorder):
        iterations = 5000
        recorder.script("again", *([True] * iterations), False)
        interpreter = SelectiveInterpreter({Token: recorder})
        result = interpreter.run(while_s(lift(token("again"))))
        assert result.is_ok()
        assert recorder.count("again") == iterations + 1

    def test_with_handlers_layers_table(self):
        base = SelectiveInterpreter({Token: lambda effect: "token"})
        extended = base.with_handlers({Fetch: lambda effect: "fetch"})
        tree = lift_a2(lambda a, b: (a, b), lift(token("t")), lift(Fetch("f")))
        assert extended.run(tree).value == ("token", "fetch")
        assert Fetch not in base.handlers


class TestAsyncRun:
    @pytest.mark.asyncio
    async def test_async_handlers_are_awaited(self):
        async def fetch(effect):
            await asyncio.sleep(0)
            return effect.key

        tree = lift_a2(lambda a, b: a + b, lift(Fetch("a")), lift(Fetch("b")))
        result = await run_async(tree, {Fetch: fetch})
        assert result.value == "ab"
        assert result.trace == ("fetch:a", "fetch:b")

    @pytest.mark.asyncio
    async def test_async_run_accepts_sync_handlers(self, interpreter):
        result = await interpreter.run_async(lift(token("x", 5)))
        assert result.value == 5

    @pytest.mark.asyncio
    async def test_async_failure_stops_evaluation(self, recorder):
        async def boom(effect):
            raise KeyError(effect.key)

        interpreter = SelectiveInterpreter({Fetch: boom, Token: recorder})
        tree = lift_a2(lambda a, b: a, lift(Fetch("missing")), lift(token("after")))
        result = await interpreter.run_async(tree)
        assert isinstance(result.error, KeyError)
        assert recorder.calls == []

    @pytest.mark.asyncio
    async def test_async_selectivity(self, recorder):
        async def deny(effect):
            return False

        interpreter = SelectiveInterpreter({Fetch: deny, Token: recorder})
        result = await interpreter.run_async(when_s(lift(Fetch("allowed")), lift(token("act"))))
        assert result.is_ok()
        assert recorder.calls == []
