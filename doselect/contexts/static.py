"""Constant context that only collects effect labels.

Values are tuples of labels and the computed value is thrown away. ``Over``
always includes the handler's labels, so it lists every effect that might
run.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

from doselect.selective import Selective

Labels = tuple[str, ...]


class OverContext(Selective[Labels]):
    name = "over"

    def pure(self, value: Any) -> Labels:
        return ()

    def map(self, f: Callable[[Any], Any], fx: Labels) -> Labels:
        return fx

    def handle(self, x: Labels, y: Labels) -> Labels:
        return x + y


OVER = OverContext()

__all__ = ["Labels", "OVER", "OverContext"]
