"""
Ground term model for the equality decision procedure.

A term is either a ``Literal`` (an atomic constant identified by its symbol)
or a ``Function`` application carrying a symbol and an ordered tuple of
argument terms.  Symbols may be any hashable value (ints, strings, ...).

NORMATIVE INVARIANTS:
- Terms are frozen dataclasses; nothing in this package rewrites a term in place
- Argument order and arity are part of a function term's identity
- Function(f, ()) is NOT the same term as Literal(f)
- Symbols compare by type and value: Literal(1), Literal(1.0) and Literal(True)
  are three different terms
- Structural equality is ``==``; it implies premise-aware equality, not conversely
- Hashing, ``==`` and the helpers below never recurse, so term depth is bounded
  only by memory
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Hashable, Iterator, List, Tuple, Union


# =============================================================================
# Term Dataclasses (frozen for immutability and hashing)
# =============================================================================


@dataclass(frozen=True, eq=False)
class Literal:
    """Atomic term, e.g. ``a`` or ``42``."""

    symbol: Hashable
    _hash: int = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        _require_hashable(self.symbol)
        object.__setattr__(self, "_hash", hash((Literal, symbol_key(self.symbol))))

    @property
    def arguments(self) -> Tuple["Term", ...]:
        return ()

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, (Literal, Function)):
            return NotImplemented
        return structural_eq(self, other)

    def __hash__(self) -> int:
        return self._hash

    def __repr__(self) -> str:
        return format_term(self)


@dataclass(frozen=True, eq=False)
class Function:
    """Function application node, e.g. ``f(a, g(b))``.

    ``arguments`` is always stored as a tuple so the term stays hashable.
    The hash is computed once from the children's stored hashes.
    """

    symbol: Hashable
    arguments: Tuple["Term", ...] = ()
    _hash: int = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        _require_hashable(self.symbol)
        args = tuple(self.arguments)
        for arg in args:
            if not isinstance(arg, (Literal, Function)):
                raise TypeError(
                    f"Function argument must be a Literal or Function, got {type(arg).__name__}"
                )
        object.__setattr__(self, "arguments", args)
        object.__setattr__(
            self,
            "_hash",
            hash((Function, symbol_key(self.symbol), tuple(arg._hash for arg in args))),
        )

    @property
    def arity(self) -> int:
        return len(self.arguments)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, (Literal, Function)):
            return NotImplemented
        return structural_eq(self, other)

    def __hash__(self) -> int:
        return self._hash

    def __repr__(self) -> str:
        return format_term(self)


# Type alias for any term node
Term = Union[Literal, Function]


def _require_hashable(symbol: Any) -> None:
    try:
        hash(symbol)
    except TypeError as e:
        raise TypeError(f"Term symbol must be hashable, got {type(symbol).__name__}") from e


def symbol_key(symbol: Hashable) -> Tuple[type, Hashable]:
    """Identity of a symbol: its type together with its value.

    Keeps ``1``, ``1.0`` and ``True`` apart even though Python compares them equal.
    """
    return (type(symbol), symbol)


def is_term(value: Any) -> bool:
    """Return True if ``value`` is a Literal or a Function."""
    return isinstance(value, (Literal, Function))


# =============================================================================
# Construction helpers
# =============================================================================


def lit(symbol: Hashable) -> Literal:
    return Literal(symbol)


def fun(symbol: Hashable, *arguments: Any) -> Function:
    """Build a function term; non-term arguments are wrapped as literals.

    Example:
        fun("f", 1, fun("g", 2))  # f(1, g(2))
    """
    processed = []
    for arg in arguments:
        if is_term(arg):
            processed.append(arg)
        else:
            processed.append(Literal(arg))
    return Function(symbol, tuple(processed))


# =============================================================================
# Accessors and structural comparison
# =============================================================================


def symbol_of(term: Term) -> Hashable:
    return term.symbol


def arguments_of(term: Term) -> Tuple[Term, ...]:
    """Argument tuple of a function term; literals have none."""
    if isinstance(term, Function):
        return term.arguments
    return ()


def arity(term: Term) -> int:
    return len(arguments_of(term))


def structural_eq(t1: Term, t2: Term) -> bool:
    """Compare two terms structurally, ignoring any premise.

    True iff both are literals with equal symbols, or both are functions with
    equal symbols, equal arity and pairwise structurally equal arguments.
    """
    stack = [(t1, t2)]
    while stack:
        a, b = stack.pop()
        if a is b:
            continue
        if type(a) is not type(b) or not isinstance(a, (Literal, Function)):
            return False
        if a._hash != b._hash or symbol_key(a.symbol) != symbol_key(b.symbol):
            return False
        if isinstance(a, Function):
            if len(a.arguments) != len(b.arguments):
                return False
            stack.extend(zip(a.arguments, b.arguments))
    return True


# =============================================================================
# Traversal
# =============================================================================


def subterms(term: Term) -> Iterator[Term]:
    """Yield ``term`` and every nested argument in pre-order.

    Repeated occurrences are yielded once per occurrence.
    """
    stack = [term]
    while stack:
        node = stack.pop()
        yield node
        if isinstance(node, Function):
            stack.extend(reversed(node.arguments))


def visit(term: Term, callback: Callable[[Term], bool]) -> bool:
    """
    Walk ``term`` in pre-order, calling ``callback`` on every node.

    Returns False as soon as the callback returns False (the walk stops),
    True if the whole term was visited.
    """
    for node in subterms(term):
        if not callback(node):
            return False
    return True


def substitute(term: Term, old: Term, new: Term) -> Term:
    """Return ``term`` with every occurrence of ``old`` replaced by ``new``.

    Replacement is not re-applied inside ``new``.
    """
    out: List[Term] = []
    # (node, children already rebuilt onto ``out``)
    stack: List[Tuple[Term, bool]] = [(term, False)]
    while stack:
        node, rebuilt = stack.pop()
        if rebuilt:
            n = len(node.arguments)
            args = tuple(out[-n:])
            del out[-n:]
            out.append(Function(node.symbol, args) if args != node.arguments else node)
        elif node == old:
            out.append(new)
        elif isinstance(node, Function) and node.arguments:
            stack.append((node, True))
            stack.extend((arg, False) for arg in reversed(node.arguments))
        else:
            out.append(node)
    return out[0]


def term_depth(term: Term) -> int:
    """Literals and 0-ary functions have depth 0."""
    deepest = 0
    stack = [(term, 0)]
    while stack:
        node, depth = stack.pop()
        deepest = max(deepest, depth)
        if isinstance(node, Function):
            stack.extend((arg, depth + 1) for arg in node.arguments)
    return deepest


def term_size(term: Term) -> int:
    """Number of nodes in the term tree."""
    return sum(1 for _ in subterms(term))


# =============================================================================
# Rendering and ordering
# =============================================================================


def format_term(term: Term) -> str:
    parts: List[str] = []
    # str items are punctuation, everything else is a term still to render
    stack: List[Any] = [term]
    while stack:
        item = stack.pop()
        if isinstance(item, str):
            parts.append(item)
        elif isinstance(item, Literal):
            parts.append(str(item.symbol))
        else:
            parts.append(f"{item.symbol}(")
            stack.append(")")
            for i in reversed(range(len(item.arguments))):
                stack.append(item.arguments[i])
                if i:
                    stack.append(", ")
    return "".join(parts)


def term_sort_key(term: Term) -> tuple:
    """Deterministic ordering key across mixed symbol types.

    Literals sort before functions; symbols compare by type name, then repr.
    The key is the flat pre-order list of nodes, each tagged with its arity,
    which orders terms the same way a nested comparison would.
    """
    return tuple(
        (
            0 if isinstance(node, Literal) else 1,
            type(node.symbol).__name__,
            repr(node.symbol),
            len(node.arguments),
        )
        for node in subterms(term)
    )
