"""
Ground congruence closure (EUF) over an arena of interned terms.

Every distinct term (compared structurally) gets a stable integer id in the
arena; a union-find over those ids holds the current partition.  Asserted
equalities are unioned directly; the congruence rule

    s1 = t1, ..., sn = tn   =>   f(s1, ..., sn) = f(t1, ..., tn)

is applied to a fixpoint using the *signature* of a function term: its symbol
together with the class representatives of its arguments.  Two function terms
with equal signatures are congruent.  Arity is implied by the length of the
representative tuple, so f/2 and f/3 never collide, and literals never take
part in the signature table, so congruence alone never merges a literal with
a function term.

Two fixpoint strategies are available (see ``ClosureStrategy``):

- WORKLIST: each union re-signs only the parents of the absorbed class and
  queues any newly congruent pair.
- NAIVE: full passes over every function term until a pass merges nothing.
"""

from __future__ import annotations

import logging
from typing import Dict, Hashable, Iterable, Iterator, List, Optional, Tuple

from .config import ClosureStrategy, parse_strategy
from .term import Function, Literal, Term, format_term, symbol_key, term_sort_key
from .union_find import UnionFind

logger = logging.getLogger(__name__)

Signature = Tuple[Hashable, Tuple[int, ...]]


class CongruenceClosure:
    """
    Incrementally maintained congruence closure over ground terms.

    A closure can be frozen once built; a frozen closure answers queries
    without mutating any state and can be shared between threads.
    """

    def __init__(self, strategy: ClosureStrategy | str = ClosureStrategy.WORKLIST) -> None:
        self.strategy = parse_strategy(strategy)
        self._terms: List[Term] = []
        self._ids: Dict[Term, int] = {}
        self._args: List[Tuple[int, ...]] = []
        self._uf = UnionFind()
        # class root -> ids of function terms with an argument in that class
        self._uses: List[List[int]] = []
        self._sig: Dict[Signature, int] = {}
        self._pending: List[Tuple[int, int]] = []
        self._dirty = False
        self._frozen = False
        self.merges = 0
        self.passes = 0

    # -------------------------------------------------------------------------
    # Universe
    # -------------------------------------------------------------------------

    def __len__(self) -> int:
        return len(self._terms)

    def __contains__(self, term: object) -> bool:
        return term in self._ids

    @property
    def universe_size(self) -> int:
        return len(self._terms)

    @property
    def frozen(self) -> bool:
        return self._frozen

    def terms(self) -> Iterator[Term]:
        return iter(self._terms)

    def add_term(self, term: Term) -> int:
        """Intern ``term`` and all of its subterms; return the term's id."""
        tid = self._ids.get(term)
        if tid is not None:
            return tid
        self._check_mutable()
        if not isinstance(term, (Literal, Function)):
            raise TypeError(f"Expected a Literal or Function, got {type(term).__name__}")

        # post-order: a node is interned once all of its arguments are
        stack = [(term, False)]
        while stack:
            node, ready = stack.pop()
            if node in self._ids:
                continue
            if ready or isinstance(node, Literal):
                self._intern(node)
            else:
                stack.append((node, True))
                stack.extend((arg, False) for arg in node.arguments)
        return self._ids[term]

    def find(self, term: Term) -> int:
        """
        Class root id of ``term``.

        A term outside the universe is interned first, which is only allowed
        while the closure is mutable; a frozen closure raises KeyError.
        """
        tid = self._ids.get(term)
        if tid is None:
            if self._frozen:
                raise KeyError(f"{format_term(term)} is not in the frozen universe")
            tid = self.add_term(term)
        self.close()
        return self._uf.find(tid)

    def _intern(self, term: Term) -> int:
        arg_ids = tuple(self._ids[arg] for arg in term.arguments)
        tid = self._uf.add()
        self._terms.append(term)
        self._ids[term] = tid
        self._args.append(arg_ids)
        self._uses.append([])

        if isinstance(term, Function):
            for root in {self._uf.find(a) for a in arg_ids}:
                self._uses[root].append(tid)
            if self.strategy is ClosureStrategy.WORKLIST:
                self._sign(tid)
                self._propagate()
            else:
                self._dirty = True
        return tid

    # -------------------------------------------------------------------------
    # Merging
    # -------------------------------------------------------------------------

    def merge(self, lhs: Term, rhs: Term) -> None:
        """Assert ``lhs = rhs`` and restore congruence closure."""
        self._check_mutable()
        a, b = self.add_term(lhs), self.add_term(rhs)
        self._pending.append((a, b))
        if self.strategy is ClosureStrategy.WORKLIST:
            self._propagate()
        else:
            self._dirty = True

    def merge_all(self, pairs: Iterable[Tuple[Term, Term]]) -> None:
        for lhs, rhs in pairs:
            self.merge(lhs, rhs)

    def close(self) -> None:
        """Run any outstanding congruence work to the fixpoint."""
        if self._frozen:
            return
        if self.strategy is ClosureStrategy.WORKLIST:
            self._propagate()
        elif self._dirty or self._pending:
            self._saturate()

    def freeze(self) -> "CongruenceClosure":
        """Close, compress and make the closure read-only."""
        self.close()
        self._uf.flatten()
        self._frozen = True
        logger.debug(
            "congruence closure frozen: %d terms, %d classes, %d merges, %d passes (strategy=%s)",
            len(self._terms),
            sum(1 for _ in self._uf.roots()),
            self.merges,
            self.passes,
            self.strategy.value,
        )
        return self

    def copy(self) -> "CongruenceClosure":
        """Return an unfrozen copy that can be extended independently."""
        self.close()
        other = CongruenceClosure(self.strategy)
        other._terms = list(self._terms)
        other._ids = dict(self._ids)
        other._args = list(self._args)
        other._uf = self._uf.copy()
        other._uses = [list(u) for u in self._uses]
        other._sig = dict(self._sig)
        other.merges = self.merges
        other.passes = self.passes
        return other

    def _check_mutable(self) -> None:
        if self._frozen:
            raise RuntimeError("congruence closure is frozen; use copy() to extend it")

    def _signature(self, tid: int) -> Signature:
        find = self._uf.find
        return (symbol_key(self._terms[tid].symbol), tuple(find(a) for a in self._args[tid]))

    def _sign(self, tid: int) -> None:
        key = self._signature(tid)
        other = self._sig.get(key)
        if other is None:
            self._sig[key] = tid
        elif self._uf.find(other) != self._uf.find(tid):
            self._pending.append((tid, other))

    def _propagate(self) -> None:
        find = self._uf.find
        while self._pending:
            a, b = self._pending.pop()
            ra, rb = find(a), find(b)
            if ra == rb:
                continue
            root = self._uf.union(ra, rb)
            absorbed = rb if root == ra else ra
            moved = self._uses[absorbed]
            self._uses[absorbed] = []
            self._uses[root].extend(moved)
            self.merges += 1
            # only parents of the absorbed class changed signature
            for parent in moved:
                self._sign(parent)

    def _saturate(self) -> None:
        find = self._uf.find
        for a, b in self._pending:
            if find(a) != find(b):
                self._uf.union(a, b)
                self.merges += 1
        self._pending.clear()

        while True:
            self.passes += 1
            self._sig = {}
            merged = 0
            for tid, term in enumerate(self._terms):
                if not isinstance(term, Function):
                    continue
                other = self._sig.setdefault(self._signature(tid), tid)
                if other != tid and find(other) != find(tid):
                    self._uf.union(other, tid)
                    merged += 1
            self.merges += merged
            logger.debug("naive congruence pass %d: %d merges", self.passes, merged)
            if not merged:
                break
        self._dirty = False

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    def resolve(self, term: Term) -> Hashable:
        """
        Return a key identifying the class ``term`` belongs to.

        Universe members resolve to their class root id.  A term outside the
        universe resolves through the signature table, so a fresh ``f(x)``
        joins the class of any universe member congruent to it.  Otherwise a
        fresh literal stands for itself and a fresh function for the term
        rebuilt over the class representatives of its arguments.  The closure
        is never modified by a query.
        """
        self.close()
        find = self._uf.find
        keys: Dict[Term, Hashable] = {}
        stack = [(term, False)]
        while stack:
            node, ready = stack.pop()
            if node in keys:
                continue
            tid = self._ids.get(node)
            if tid is not None:
                keys[node] = find(tid)
            elif isinstance(node, Literal):
                keys[node] = node
            elif not ready:
                stack.append((node, True))
                stack.extend((arg, False) for arg in node.arguments)
            else:
                keys[node] = self._resolve_fresh(node, tuple(keys[arg] for arg in node.arguments))
        return keys[term]

    def _resolve_fresh(self, term: Function, arg_keys: Tuple[Hashable, ...]) -> Hashable:
        if all(type(k) is int for k in arg_keys):
            other = self._sig.get((symbol_key(term.symbol), arg_keys))
            if other is not None:
                return self._uf.find(other)
        args = tuple(self._terms[k] if type(k) is int else k for k in arg_keys)
        return Function(term.symbol, args)

    def same_class(self, lhs: Term, rhs: Term) -> bool:
        if lhs == rhs:
            return True
        return self.resolve(lhs) == self.resolve(rhs)

    def representative(self, term: Term) -> Optional[Term]:
        """Canonical member of the class of a universe term, None otherwise."""
        self.close()
        tid = self._ids.get(term)
        if tid is None:
            return None
        return self._terms[self._uf.find(tid)]

    def class_of(self, term: Term) -> Tuple[Term, ...]:
        """Universe members equal to ``term`` (just ``(term,)`` if none)."""
        key = self.resolve(term)
        if type(key) is not int:
            return (term,)
        members = [t for i, t in enumerate(self._terms) if self._uf.find(i) == key]
        return tuple(sorted(members, key=term_sort_key))

    def classes(self) -> List[Tuple[Term, ...]]:
        """The partition of the universe, each class and the list sorted."""
        self.close()
        groups = self._uf.groups()
        out = [tuple(sorted((self._terms[i] for i in ids), key=term_sort_key)) for ids in groups.values()]
        return sorted(out, key=lambda cls: term_sort_key(cls[0]))

    def describe(self) -> str:
        lines = []
        for cls in self.classes():
            lines.append(" = ".join(format_term(t) for t in cls))
        return "\n".join(lines)


def build_closure(
    pairs: Iterable[Tuple[Term, Term]],
    strategy: ClosureStrategy | str = ClosureStrategy.WORKLIST,
    extra_terms: Iterable[Term] = (),
) -> CongruenceClosure:
    """
    Build and freeze the congruence closure of ``pairs``.

    The whole universe (every subterm of every pair, plus ``extra_terms``) is
    interned before any equality is asserted.
    """
    pairs = list(pairs)
    closure = CongruenceClosure(strategy)
    for lhs, rhs in pairs:
        closure.add_term(lhs)
        closure.add_term(rhs)
    for term in extra_terms:
        closure.add_term(term)
    closure.merge_all(pairs)
    return closure.freeze()
