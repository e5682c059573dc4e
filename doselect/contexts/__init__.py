"""Concrete effect contexts implementing :class:`doselect.selective.Selective`."""

from doselect.contexts.static import OVER, Labels, OverContext
from doselect.contexts.task import TASK, Task, TaskContext
from doselect.contexts.validation import (
    VALIDATION,
    Failure,
    Success,
    Validation,
    ValidationContext,
    failure,
)

__all__ = [
    "Failure",
    "Labels",
    "OVER",
    "OverContext",
    "Success",
    "TASK",
    "Task",
    "TaskContext",
    "VALIDATION",
    "Validation",
    "ValidationContext",
    "failure",
]
