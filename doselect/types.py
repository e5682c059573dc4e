"""
Effect data for the doselect system.

Effects are opaque requests. The core never looks inside one; it only asks
for a ``label`` (used by static analysis and traces) and hands the effect to
whichever backend interprets the tree.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any, TypeVar

from doselect.utils import create_effect_with_trace

E = TypeVar("E", bound="EffectBase")


@dataclass(frozen=True)
class EffectCreationContext:
    """Context information about where an effect was created."""

    filename: str
    line: int
    function: str
    code: str | None = None
    stack_trace: list[dict[str, Any]] = field(default_factory=list)

    def format_location(self) -> str:
        """Format the creation location as a string."""
        return f"{self.filename}:{self.line} in {self.function}"

    def format_full(self) -> str:
        """Format the full creation context with stack trace."""
        lines = [f"Effect created at {self.format_location()}"]
        if self.code:
            lines.append(f"    {self.code}")
        if self.stack_trace:
            lines.append("\nCreation stack trace:")
            for frame in self.stack_trace:
                lines.append(
                    f'  File "{frame["filename"]}", line {frame["line"]}, in {frame["function"]}'
                )
                if frame.get("code"):
                    lines.append(f"    {frame['code']}")
        return "\n".join(lines)


@dataclass(frozen=True)
class EffectBase:
    """Base dataclass for opaque effect tokens.

    Subclasses add their own fields. ``created_at`` is excluded from equality
    so two effects built at different call sites still compare equal.
    """

    created_at: EffectCreationContext | None = field(
        default=None, compare=False, repr=False, kw_only=True
    )

    @property
    def label(self) -> str:
        """Name used by traces and static analysis."""
        return type(self).__name__

    def with_created_at(self: E, created_at: EffectCreationContext | None) -> E:
        if created_at is self.created_at:
            return self
        return replace(self, created_at=created_at)


@dataclass(frozen=True)
class Token(EffectBase):
    """Generic labelled effect with an optional payload."""

    name: str
    payload: Any = None

    @property
    def label(self) -> str:
        return self.name


def token(name: str, payload: Any = None) -> Token:
    """Create a :class:`Token`, recording where it was created."""
    return create_effect_with_trace(Token(name, payload))


__all__ = [
    "EffectBase",
    "EffectCreationContext",
    "Token",
    "token",
]
