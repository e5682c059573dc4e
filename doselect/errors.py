from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from doselect.laws import LawCheck


class UnhandledEffectError(LookupError):
    """Raised when the execution interpreter has no handler for an effect."""

    def __init__(self, effect: Any) -> None:
        self.effect = effect
        effect_type = type(effect).__name__
        lines = [f"No handler registered for effect {effect!r}"]
        created_at = getattr(effect, "created_at", None)
        if created_at is not None:
            lines.append(created_at.format_full())
        lines.append(
            f"Hint: Pass `handlers={{{effect_type}: ...}}` or a `fallback` to SelectiveInterpreter"
        )
        super().__init__("\n".join(lines))


class UnboundedTreeError(ValueError):
    """Raised when a tree contains a deferred (looping) subtree that cannot be unrolled."""

    def __init__(self, message: str = "tree contains an unbounded loop construct") -> None:
        super().__init__(
            f"{message}\n"
            "Hint: pass `unroll=N` to bound how many times deferred subtrees are expanded"
        )


class StepLimitExceeded(RuntimeError):
    """Raised when an interpretation runs for more machine steps than allowed."""

    def __init__(self, max_steps: int) -> None:
        self.max_steps = max_steps
        super().__init__(f"Interpretation exceeded max_steps={max_steps}")


class LawViolation(AssertionError):
    """Raised by the law suite when one or more selective laws fail."""

    def __init__(self, checks: Sequence[LawCheck]) -> None:
        self.checks = tuple(checks)
        details = "\n".join(f"  {check.law}: {check.lhs!r} != {check.rhs!r}" for check in self.checks)
        super().__init__(f"{len(self.checks)} selective law(s) violated:\n{details}")


__all__ = [
    "LawViolation",
    "StepLimitExceeded",
    "UnboundedTreeError",
    "UnhandledEffectError",
]
