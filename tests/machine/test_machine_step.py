import pytest

from doselect import Left, Right, defer, handle, lift, pure, token
from doselect.machine import (
    ApplyFrame,
    Done,
    EffectYield,
    Error,
    Failed,
    HandlerArgFrame,
    Kont,
    MachineState,
    SelectFrame,
    TreeControl,
    Value,
    depth,
    machine_step,
    push,
)


def drive(tree, handler):
    """Step a tree to completion, answering each effect with ``handler``."""

    state = MachineState.initial(tree)
    while True:
        if isinstance(state, (Done, Failed)):
            return state
        if isinstance(state.C, EffectYield):
            state = state.resume(handler(state.C.effect))
            continue
        state = machine_step(state)


class TestTreeControl:
    def test_pure_becomes_value(self):
        result = machine_step(MachineState.initial(pure(3)))

        assert result == MachineState(C=Value(3), K=None)

    def test_lifted_yields_effect_and_pushes_continuation(self):
        effect = token("read")
        tree = lift(effect).map(str)

        result = machine_step(MachineState.initial(tree))

        assert isinstance(result.C, EffectYield)
        assert result.C.effect == effect
        assert isinstance(result.K.frame, ApplyFrame)
        assert result.K.frame.f(5) == "5"

    def test_select_evaluates_disjunction_first(self):
        tree = handle(lift(token("x")), lift(token("y")))

        result = machine_step(MachineState.initial(tree))

        assert result.C == TreeControl(tree.disjunction)
        assert result.K == Kont(SelectFrame(tree.handler), None)

    def test_mapped_select_applies_continuation_after_handler(self):
        tree = handle(lift(token("x")), lift(token("y"))).map(str)

        result = machine_step(MachineState.initial(tree))

        assert result.C == TreeControl(tree.disjunction)
        assert result.K.frame == SelectFrame(tree.handler)
        assert result.K.rest.frame == ApplyFrame(tree.k)
        assert drive(tree, lambda effect: Left(2) if effect.label == "x" else (lambda n: n + 1)) == Done("3")

    def test_deferred_is_forced(self):
        result = machine_step(MachineState.initial(defer(lambda: pure(1))))

        assert result.C == TreeControl(pure(1))

    def test_deferred_failure_becomes_error(self):
        def explode():
            raise RuntimeError("cannot build")

        result = machine_step(MachineState.initial(defer(explode)))

        assert isinstance(result.C, Error)
        assert isinstance(result.C.error, RuntimeError)

    def test_non_tree_control_becomes_type_error(self):
        result = machine_step(MachineState(C=TreeControl("not a tree")))

        assert isinstance(result.C.error, TypeError)


class TestFrames:
    def test_effect_yield_is_left_for_the_driver(self):
        state = MachineState(C=EffectYield(token("x")))

        assert machine_step(state) is state

    def test_left_runs_handler_with_argument(self):
        handler = lift(token("h"))
        state = MachineState(C=Value(Left(7)), K=push(SelectFrame(handler), None))

        result = machine_step(state)

        assert result.C == TreeControl(handler)
        assert result.K == Kont(HandlerArgFrame(7), None)

    def test_right_skips_handler(self):
        state = MachineState(C=Value(Right(7)), K=push(SelectFrame(lift(token("h"))), None))

        result = machine_step(state)

        assert result == MachineState(C=Value(7), K=None)

    def test_non_either_disjunction_is_type_error(self):
        state = MachineState(C=Value(7), K=push(SelectFrame(lift(token("h"))), None))

        result = machine_step(state)

        assert isinstance(result.C.error, TypeError)
        assert "Left or Right" in str(result.C.error)

    def test_handler_function_is_applied(self):
        state = MachineState(C=Value(lambda n: n * 2), K=push(HandlerArgFrame(21), None))

        assert machine_step(state) == MachineState(C=Value(42), K=None)

    def test_apply_frame_failure_becomes_error(self):
        state = MachineState(C=Value(0), K=push(ApplyFrame(lambda n: 1 / n), None))

        result = machine_step(state)

        assert isinstance(result.C.error, ZeroDivisionError)
        assert result.K is None

    def test_error_skips_pending_frames(self):
        exc = ValueError("boom")
        k = push(ApplyFrame(str), push(SelectFrame(lift(token("h"))), None))

        result = machine_step(MachineState(C=Error(exc), K=k))

        assert isinstance(result, Failed)
        assert result.error is exc

    def test_depth_counts_frames(self):
        k = push(ApplyFrame(str), push(HandlerArgFrame(1), None))

        assert depth(k) == 2
        assert depth(None) == 0


class TestDriving:
    @pytest.mark.parametrize(
        ("tagged", "expected", "performed"),
        [
            (Left(2), 20, ["x", "h"]),
            (Right(5), 5, ["x"]),
        ],
    )
    def test_select_round_trip(self, tagged, expected, performed):
        seen = []

        def handler(effect):
            seen.append(effect.label)
            return tagged if effect.label == "x" else (lambda n: n * 10)

        result = drive(handle(lift(token("x")), lift(token("h"))), handler)

        assert result == Done(expected)
        assert seen == performed

    def test_loop_continuation_grows_by_a_fixed_amount(self):
        from doselect import while_s

        remaining = iter([True] * 50 + [False])
        depths = []
        state = MachineState.initial(while_s(lift(token("guard"))))
        while not isinstance(state, (Done, Failed)):
            if isinstance(state.C, EffectYield):
                depths.append(depth(state.K))
                state = state.resume(next(remaining))
            else:
                state = machine_step(state)

        assert isinstance(state, Done)
        assert len(depths) == 51
        steps = {later - earlier for earlier, later in zip(depths, depths[1:])}
        assert len(steps) == 1


class TestDeferredContinuation:
    def test_mapped_deferred_pushes_apply_frame(self):
        tree = defer(lambda: pure(1)).map(lambda v: v + 1)

        result = machine_step(MachineState.initial(tree))

        assert result.C == TreeControl(pure(1))
        assert isinstance(result.K.frame, ApplyFrame)
        assert drive(tree, lambda effect: None) == Done(2)
