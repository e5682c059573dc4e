"""
doselect - Selective effect pipelines for Python.

Pipelines are built as inert effect trees where a step can skip a later
step's effects based on an earlier result, without full monadic sequencing.
The same tree can be executed for real or analysed statically for every
effect it could possibly perform.

Example:
    >>> from doselect import lift, if_s, token, run, possibilities
    >>>
    >>> tree = if_s(lift(token("is_admin")), lift(token("audit")), lift(token("greet")))
    >>> sorted(possibilities(tree).labels())
    ['audit', 'greet', 'is_admin']
"""

from doselect._vendor import (
    Either,
    Err,
    FrozenDict,
    Left,
    Ok,
    Result,
    Right,
)
from doselect.analysis import PossibilitySet, dependencies, necessary, possibilities
from doselect.combinators import (
    all_s,
    and_all,
    and_s,
    any_s,
    from_maybe_s,
    if_s,
    or_all,
    or_s,
    when_s,
    while_s,
)
from doselect.contexts import (
    OVER,
    TASK,
    VALIDATION,
    Failure,
    Success,
    Task,
    Validation,
    failure,
)
from doselect.errors import (
    LawViolation,
    StepLimitExceeded,
    UnboundedTreeError,
    UnhandledEffectError,
)
from doselect.fold import fold_tree
from doselect.interpreter import RunResult, SelectiveInterpreter, run, run_async
from doselect.laws import LawCheck, LawSamples, SelectiveLaws
from doselect.selective import FREE, FreeSelective, Monad, Selective
from doselect.tree import (
    Deferred,
    Lifted,
    Pure,
    Route,
    Select,
    Tree,
    ap,
    defer,
    effects,
    fmap,
    handle,
    lift,
    lift_a2,
    pure,
    select,
)
from doselect.types import EffectBase, EffectCreationContext, Token, token

__all__ = [
    # Vendored types
    "Either",
    "Err",
    "FrozenDict",
    "Left",
    "Ok",
    "Result",
    "Right",
    # Effects
    "EffectBase",
    "EffectCreationContext",
    "Token",
    "token",
    # Trees
    "Deferred",
    "Lifted",
    "Pure",
    "Route",
    "Select",
    "Tree",
    "ap",
    "defer",
    "effects",
    "fmap",
    "handle",
    "lift",
    "lift_a2",
    "pure",
    "select",
    # Combinators
    "all_s",
    "and_all",
    "and_s",
    "any_s",
    "from_maybe_s",
    "if_s",
    "or_all",
    "or_s",
    "when_s",
    "while_s",
    # Contexts
    "FREE",
    "FreeSelective",
    "Monad",
    "OVER",
    "Selective",
    "TASK",
    "Task",
    "VALIDATION",
    "Failure",
    "Success",
    "Validation",
    "failure",
    # Interpretation
    "RunResult",
    "SelectiveInterpreter",
    "fold_tree",
    "run",
    "run_async",
    # Static analysis
    "PossibilitySet",
    "dependencies",
    "necessary",
    "possibilities",
    # Laws
    "LawCheck",
    "LawSamples",
    "SelectiveLaws",
    # Errors
    "LawViolation",
    "StepLimitExceeded",
    "UnboundedTreeError",
    "UnhandledEffectError",
]
