from doselect.analysis.possibilities import (
    PossibilitySet,
    dependencies,
    necessary,
    possibilities,
)

__all__ = [
    "PossibilitySet",
    "dependencies",
    "necessary",
    "possibilities",
]
