from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from doselect.machine.frames import Kontinuation
    from doselect.tree import Tree
    from doselect.types import EffectBase


@dataclass(frozen=True)
class TreeControl:
    tree: Tree[Any]


@dataclass(frozen=True)
class Value:
    value: Any


@dataclass(frozen=True)
class Error:
    error: BaseException


@dataclass(frozen=True)
class EffectYield:
    effect: EffectBase


@dataclass(frozen=True)
class Done:
    value: Any


@dataclass(frozen=True)
class Failed:
    error: BaseException


Control = TreeControl | Value | Error | EffectYield


@dataclass(frozen=True)
class MachineState:
    C: Control
    K: Kontinuation = None

    @classmethod
    def initial(cls, tree: Tree[Any]) -> MachineState:
        return cls(C=TreeControl(tree), K=None)

    def resume(self, value: Any) -> MachineState:
        """Continue after the pending effect produced ``value``."""
        return MachineState(C=Value(value), K=self.K)

    def fail(self, error: BaseException) -> MachineState:
        return MachineState(C=Error(error), K=self.K)
