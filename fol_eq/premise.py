"""
Premise sets: the asserted equalities a query is decided against.

A premise holds unordered pairs of terms.  Inserting ``(a, b)`` is the same
as inserting ``(b, a)``, and repeating an insertion changes nothing.

For example, the premise

    x = y,
    x = z,
    z = y

is stored as three pairs and exposes the adjacency view

    {x: {y, z}, y: {x, z}, z: {x, y}}

through ``equalities()``.
"""

from __future__ import annotations

import logging
import threading
from typing import Dict, FrozenSet, Iterable, Iterator, List, Optional, Tuple

from .closure import CongruenceClosure, build_closure
from .config import ClosureStrategy, parse_strategy
from .term import Term, format_term, is_term, subterms, term_sort_key

logger = logging.getLogger(__name__)

Pair = Tuple[Term, Term]


def _orient(lhs: Term, rhs: Term) -> Pair:
    if term_sort_key(rhs) < term_sort_key(lhs):
        return (rhs, lhs)
    return (lhs, rhs)


class Premise:
    """Unordered collection of asserted equalities between ground terms."""

    __hash__ = None  # mutable

    def __init__(self, pairs: Iterable[Pair] = ()) -> None:
        self._pairs: Dict[FrozenSet[Term], Pair] = {}
        self._closures: Dict[ClosureStrategy, CongruenceClosure] = {}
        self._lock = threading.Lock()
        for lhs, rhs in pairs:
            self.insert(lhs, rhs)

    @classmethod
    def from_equalities(cls, pairs: Iterable[Pair]) -> "Premise":
        """Create a premise with pre-defined equalities."""
        return cls(pairs)

    def insert(self, lhs: Term, rhs: Term) -> None:
        """Assert ``lhs = rhs``.  Orientation and repetition do not matter."""
        if not is_term(lhs) or not is_term(rhs):
            raise TypeError(
                f"Premise entries must be terms, got {type(lhs).__name__} and {type(rhs).__name__}"
            )
        key = frozenset((lhs, rhs))
        with self._lock:
            if key in self._pairs:
                return
            self._pairs[key] = _orient(lhs, rhs)
            self._closures.clear()

    def __len__(self) -> int:
        return len(self._pairs)

    def __contains__(self, pair: object) -> bool:
        if not isinstance(pair, tuple) or len(pair) != 2:
            return False
        try:
            return frozenset(pair) in self._pairs
        except TypeError:
            return False

    def __iter__(self) -> Iterator[Pair]:
        return iter(self.pairs())

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Premise):
            return NotImplemented
        return self._pairs.keys() == other._pairs.keys()

    def __repr__(self) -> str:
        body = ", ".join(f"{format_term(a)} = {format_term(b)}" for a, b in self.pairs())
        return f"Premise({{{body}}})"

    def pairs(self) -> List[Pair]:
        """Unique asserted pairs in a deterministic order."""
        return sorted(self._pairs.values(), key=lambda p: (term_sort_key(p[0]), term_sort_key(p[1])))

    def equalities(self) -> Dict[Term, FrozenSet[Term]]:
        """Map each asserted term to the terms directly asserted equal to it."""
        out: Dict[Term, set] = {}
        for lhs, rhs in self._pairs.values():
            out.setdefault(lhs, set()).add(rhs)
            out.setdefault(rhs, set()).add(lhs)
        return {term: frozenset(partners) for term, partners in out.items()}

    def terms(self) -> FrozenSet[Term]:
        """Every term and subterm mentioned by the premise."""
        universe = set()
        for lhs, rhs in self._pairs.values():
            universe.update(subterms(lhs))
            universe.update(subterms(rhs))
        return frozenset(universe)

    def copy(self) -> "Premise":
        return Premise(self._pairs.values())

    def closure(self, strategy: Optional[ClosureStrategy | str] = None) -> CongruenceClosure:
        """
        Frozen congruence closure of this premise, built once per strategy.

        The cached closure is discarded by ``insert``; it is never handed out
        in a mutable state.
        """
        strategy = parse_strategy(strategy or ClosureStrategy.WORKLIST)
        with self._lock:
            cached = self._closures.get(strategy)
            if cached is None:
                cached = build_closure(self._pairs.values(), strategy)
                self._closures[strategy] = cached
                logger.debug(
                    "built %s closure for premise of %d pairs (%d terms)",
                    strategy.value,
                    len(self._pairs),
                    cached.universe_size,
                )
            return cached
