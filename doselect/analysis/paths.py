"""
Path expressions: the shape of every label sequence a tree can traverse.

A tree translates into a small regular expression without repetition.
``Step`` is one effect, ``Seq`` runs its parts in order and ``Alt`` takes
exactly one of its options. Membership, label listing and enumeration all
walk the expression with explicit stacks, so deep combinator chains never
recurse on the Python stack and nothing is enumerated unless asked for.
"""

from __future__ import annotations

from collections.abc import Callable, Iterator, Sequence
from dataclasses import dataclass
from typing import Any, Union

from doselect.tree import Deferred, Lifted, Pure, Route, Select, Tree

Labels = tuple[str, ...]


@dataclass(frozen=True, eq=False)
class Empty:
    """The empty sequence."""


@dataclass(frozen=True, eq=False)
class Step:
    label: str


@dataclass(frozen=True, eq=False, repr=False)
class Seq:
    parts: tuple[Path, ...]


@dataclass(frozen=True, eq=False, repr=False)
class Alt:
    options: tuple[Path, ...]


Path = Union[Empty, Step, Seq, Alt]

EMPTY = Empty()

# pending work is a cons list: (path, rest) or None
_Pending = Union[tuple[Path, Any], None]


def seq(*parts: Path) -> Path:
    flat: list[Path] = []
    for part in parts:
        if part is EMPTY:
            continue
        if isinstance(part, Seq):
            flat.extend(part.parts)
        else:
            flat.append(part)
    if not flat:
        return EMPTY
    if len(flat) == 1:
        return flat[0]
    return Seq(tuple(flat))


def alt(*options: Path) -> Path:
    kept: list[Path] = []
    for option in options:
        if option is EMPTY and EMPTY in kept:
            continue
        kept.append(option)
    if len(kept) == 1:
        return kept[0]
    return Alt(tuple(kept))


def from_tree(tree: Tree[Any], *, unroll: int, on_cut: Callable[[], Path]) -> Path:
    """Translate ``tree``, expanding each ``Deferred`` at most ``unroll`` times per path.

    ``on_cut`` supplies the path for a deferred subtree past the bound.
    """

    built: list[Path] = []
    work: list[tuple[str, Any, int]] = [("visit", tree, unroll)]
    while work:
        op, node, budget = work.pop()
        if op == "optional":
            handler = built.pop()
            built.append(seq(built.pop(), alt(EMPTY, handler)))
        elif op == "always":
            handler = built.pop()
            built.append(seq(built.pop(), handler))
        elif op == "exclusive":
            right = built.pop()
            left = built.pop()
            built.append(seq(built.pop(), alt(left, right)))
        elif isinstance(node, Pure):
            built.append(EMPTY)
        elif isinstance(node, Lifted):
            built.append(Step(node.effect.label))
        elif isinstance(node, Select):
            inner = node.disjunction
            if node.route is Route.EXCLUSIVE and isinstance(inner, Select):
                work.append(("exclusive", None, budget))
                work.append(("visit", node.handler, budget))
                work.append(("visit", inner.handler, budget))
                work.append(("visit", inner.disjunction, budget))
                continue
            work.append(("always" if node.route is Route.ALWAYS else "optional", None, budget))
            work.append(("visit", node.handler, budget))
            work.append(("visit", node.disjunction, budget))
        elif isinstance(node, Deferred):
            if budget <= 0:
                built.append(on_cut())
            else:
                work.append(("visit", node.force(), budget - 1))
        else:
            raise TypeError(f"expected a Tree; got {type(node).__name__}")
    return built.pop()


def _children(path: Path) -> tuple[Path, ...]:
    if isinstance(path, Seq):
        return path.parts
    if isinstance(path, Alt):
        return path.options
    return ()


def labels(path: Path) -> Labels:
    """Every label in ``path``, in first-seen order."""

    seen: dict[str, None] = {}
    stack = [path]
    while stack:
        node = stack.pop()
        if isinstance(node, Step):
            seen.setdefault(node.label)
        else:
            stack.extend(reversed(_children(node)))
    return tuple(seen)


def necessary(path: Path) -> Labels:
    """Labels on every sequence of ``path``, in first-seen order."""

    results: list[Labels] = []
    stack: list[tuple[Path, bool]] = [(path, False)]
    while stack:
        node, expanded = stack.pop()
        if isinstance(node, Step):
            results.append((node.label,))
            continue
        children = _children(node)
        if not children:
            results.append(())
            continue
        if not expanded:
            stack.append((node, True))
            stack.extend((child, False) for child in reversed(children))
            continue
        parts = results[-len(children):]
        del results[-len(children):]
        if isinstance(node, Seq):
            results.append(tuple(label for part in parts for label in part))
        else:
            first, rest = parts[0], parts[1:]
            results.append(tuple(label for label in first if all(label in p for p in rest)))
    return tuple(dict.fromkeys(results.pop()))


def _expand(node: Path, rest: _Pending) -> list[_Pending] | None:
    """Pending lists that follow from expanding ``node``; ``None`` for a ``Step``."""

    if isinstance(node, Seq):
        cons = rest
        for part in reversed(node.parts):
            cons = (part, cons)
        return [cons]
    if isinstance(node, Alt):
        return [(option, rest) for option in reversed(node.options)]
    if isinstance(node, Step):
        return None
    return [rest]


def matches(path: Path, sequence: Sequence[str]) -> bool:
    """Whether ``sequence`` is one of the sequences ``path`` describes."""

    size = len(sequence)
    stack: list[tuple[int, _Pending]] = [(0, (path, None))]
    seen: dict[tuple[int, int, int], _Pending] = {}
    while stack:
        i, pending = stack.pop()
        if pending is None:
            if i == size:
                return True
            continue
        node, rest = pending
        key = (i, id(node), id(rest))
        if key in seen:
            continue
        seen[key] = pending
        following = _expand(node, rest)
        if following is None:
            if i < size and sequence[i] == node.label:
                stack.append((i + 1, rest))
        else:
            stack.extend((i, p) for p in following)
    return False


def iter_sequences(path: Path) -> Iterator[Labels]:
    """Yield the sequences of ``path``; the same sequence may come up more than once."""

    stack: list[tuple[Labels, _Pending]] = [((), (path, None))]
    seen: dict[tuple[Labels, int, int], _Pending] = {}
    while stack:
        prefix, pending = stack.pop()
        if pending is None:
            yield prefix
            continue
        node, rest = pending
        key = (prefix, id(node), id(rest))
        if key in seen:
            continue
        seen[key] = pending
        following = _expand(node, rest)
        if following is None:
            stack.append((prefix + (node.label,), rest))
        else:
            stack.extend((prefix, p) for p in following)


__all__ = [
    "EMPTY",
    "Alt",
    "Empty",
    "Path",
    "Seq",
    "Step",
    "alt",
    "from_tree",
    "iter_sequences",
    "labels",
    "matches",
    "necessary",
    "seq",
]
