"""
Static analysis of effect trees.

Nothing here runs an effect. The tree is translated into a path expression
(see :mod:`doselect.analysis.paths`) describing every label sequence it
could traverse, answering "which effects could this pipeline perform" before
any handler is chosen.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field
from typing import Any

from doselect.analysis import paths
from doselect.analysis.paths import EMPTY, Path
from doselect.contexts.static import OVER, Labels
from doselect.errors import UnboundedTreeError
from doselect.fold import fold_tree
from doselect.tree import Tree
from doselect.types import EffectBase

logger = logging.getLogger(__name__)

DEFAULT_MAX_SEQUENCES = 10_000


@dataclass(frozen=True)
class PossibilitySet:
    """Label sequences a tree could traverse.

    ``sequences`` holds at most ``max_sequences`` entries. ``truncated`` is
    set when a deferred (looping) subtree was cut off at the unroll bound, or
    when enumeration stopped at that cap. Membership is decided on ``path``,
    so a sequence past the cap is still recognised.
    """

    sequences: frozenset[Labels]
    truncated: bool = False
    path: Path | None = field(default=None, repr=False, compare=False)

    def labels(self) -> frozenset[str]:
        if self.path is not None:
            return frozenset(paths.labels(self.path))
        return frozenset(label for sequence in self.sequences for label in sequence)

    def __contains__(self, sequence: Iterable[str]) -> bool:
        candidate = tuple(sequence)
        if candidate in self.sequences:
            return True
        return self.path is not None and paths.matches(self.path, candidate)

    def __iter__(self) -> Iterator[Labels]:
        return iter(sorted(self.sequences, key=lambda s: (len(s), s)))

    def __len__(self) -> int:
        return len(self.sequences)


def _path(tree: Tree[Any], unroll: int, strict: bool) -> tuple[Path, bool]:
    truncated = False

    def cut() -> Path:
        nonlocal truncated
        if strict:
            raise UnboundedTreeError()
        truncated = True
        return EMPTY

    if unroll < 0:
        raise ValueError("unroll must be >= 0")
    path = paths.from_tree(tree, unroll=unroll, on_cut=cut)
    return path, truncated


def possibilities(
    tree: Tree[Any],
    *,
    unroll: int = 0,
    strict: bool = False,
    max_sequences: int = DEFAULT_MAX_SEQUENCES,
) -> PossibilitySet:
    """Compute the possibility set of ``tree``.

    Args:
        unroll: how many times each deferred subtree may be expanded.
        strict: raise :class:`UnboundedTreeError` instead of truncating.
        max_sequences: stop enumerating after this many distinct sequences.
    """

    if max_sequences <= 0:
        raise ValueError("max_sequences must be > 0")
    path, truncated = _path(tree, unroll, strict)
    if truncated:
        logger.warning(
            "possibility analysis truncated a deferred subtree after %d unroll(s)", unroll
        )

    found: set[Labels] = set()
    for sequence in paths.iter_sequences(path):
        if sequence in found:
            continue
        if len(found) >= max_sequences:
            logger.warning("possibility set capped at %d sequences", max_sequences)
            truncated = True
            break
        found.add(sequence)
    return PossibilitySet(sequences=frozenset(found), truncated=truncated, path=path)


def _single(effect: EffectBase) -> Labels:
    return (effect.label,)


def dependencies(tree: Tree[Any], *, unroll: int = 0) -> Labels:
    """Every label that could be performed, in first-seen order."""

    return tuple(dict.fromkeys(fold_tree(tree, OVER, _single, unroll=unroll, on_unbounded=lambda: ())))


def necessary(tree: Tree[Any], *, unroll: int = 0) -> Labels:
    """Labels performed on every run, in order of first occurrence.

    A cut deferred subtree contributes nothing.
    """

    path, _ = _path(tree, unroll, strict=False)
    return paths.necessary(path)


__all__ = [
    "DEFAULT_MAX_SEQUENCES",
    "PossibilitySet",
    "dependencies",
    "necessary",
    "possibilities",
]
