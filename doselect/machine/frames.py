from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Union

if TYPE_CHECKING:
    from doselect.tree import Tree


@dataclass(frozen=True)
class ApplyFrame:
    """Apply a pure continuation to the value produced below."""

    f: Callable[[Any], Any]


@dataclass(frozen=True)
class SelectFrame:
    """Waiting for a disjunction; runs ``handler`` only on ``Left``."""

    handler: Tree[Callable[[Any], Any]]


@dataclass(frozen=True)
class HandlerArgFrame:
    """Waiting for a handler function to apply to ``arg``."""

    arg: Any


Frame = ApplyFrame | SelectFrame | HandlerArgFrame


@dataclass(frozen=True)
class Kont:
    """Persistent stack cell: ``frame`` on top of ``rest``."""

    frame: Frame
    rest: Kontinuation


Kontinuation = Union[Kont, None]


def push(frame: Frame, k: Kontinuation) -> Kont:
    return Kont(frame, k)


def depth(k: Kontinuation) -> int:
    count = 0
    while k is not None:
        count += 1
        k = k.rest
    return count
