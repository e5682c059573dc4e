from doselect.machine.frames import (
    ApplyFrame,
    Frame,
    HandlerArgFrame,
    Kont,
    Kontinuation,
    SelectFrame,
    depth,
    push,
)
from doselect.machine.state import (
    Control,
    Done,
    EffectYield,
    Error,
    Failed,
    MachineState,
    TreeControl,
    Value,
)
from doselect.machine.step import machine_step

__all__ = [
    "ApplyFrame",
    "Control",
    "Done",
    "EffectYield",
    "Error",
    "Failed",
    "Frame",
    "HandlerArgFrame",
    "Kont",
    "Kontinuation",
    "MachineState",
    "SelectFrame",
    "TreeControl",
    "Value",
    "depth",
    "machine_step",
    "push",
]
