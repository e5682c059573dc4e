from __future__ import annotations

from doselect._vendor import Left, Right, identity
from doselect.machine.frames import ApplyFrame, HandlerArgFrame, SelectFrame, push
from doselect.machine.state import (
    Done,
    EffectYield,
    Error,
    Failed,
    MachineState,
    TreeControl,
    Value,
)
from doselect.tree import Deferred, Lifted, Pure, Select


def machine_step(state: MachineState) -> MachineState | Done | Failed:
    C, K = state.C, state.K

    if isinstance(C, TreeControl):
        tree = C.tree
        if isinstance(tree, Pure):
            return MachineState(C=Value(tree.value), K=K)
        if isinstance(tree, Lifted):
            return MachineState(C=EffectYield(tree.effect), K=push(ApplyFrame(tree.k), K))
        if isinstance(tree, Select):
            if tree.k is not identity:
                K = push(ApplyFrame(tree.k), K)
            return MachineState(
                C=TreeControl(tree.disjunction),
                K=push(SelectFrame(tree.handler), K),
            )
        if isinstance(tree, Deferred):
            try:
                forced = tree.force()
            except Exception as e:
                return MachineState(C=Error(e), K=K)
            if tree.k is not identity:
                K = push(ApplyFrame(tree.k), K)
            return MachineState(C=TreeControl(forced), K=K)
        return MachineState(
            C=Error(TypeError(f"Cannot interpret {type(tree).__name__} as a Tree")),
            K=K,
        )

    if isinstance(C, EffectYield):
        # the driver performs the effect and resumes; stepping is a no-op
        return state

    # Fail fast: no frame at this layer intercepts errors.
    if isinstance(C, Error):
        return Failed(C.error)

    if isinstance(C, Value) and K is None:
        return Done(C.value)

    if isinstance(C, Value):
        frame, rest_k = K.frame, K.rest

        if isinstance(frame, ApplyFrame):
            try:
                return MachineState(C=Value(frame.f(C.value)), K=rest_k)
            except Exception as e:
                return MachineState(C=Error(e), K=rest_k)

        if isinstance(frame, SelectFrame):
            tagged = C.value
            if isinstance(tagged, Left):
                return MachineState(
                    C=TreeControl(frame.handler),
                    K=push(HandlerArgFrame(tagged.value), rest_k),
                )
            if isinstance(tagged, Right):
                return MachineState(C=Value(tagged.value), K=rest_k)
            return MachineState(
                C=Error(
                    TypeError(
                        f"Select disjunction must produce Left or Right; got {type(tagged).__name__}"
                    )
                ),
                K=rest_k,
            )

        if isinstance(frame, HandlerArgFrame):
            try:
                return MachineState(C=Value(C.value(frame.arg)), K=rest_k)
            except Exception as e:
                return MachineState(C=Error(e), K=rest_k)

    return state
