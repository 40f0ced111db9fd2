"""
Public entry points of the equality decision procedure.

``equals(t1, t2, premise)`` is True iff ``t1 = t2`` follows from the premise
pairs by reflexivity, symmetry, transitivity and congruence.  The premise is
never modified; the closure it caches is private and read-only.
"""

from __future__ import annotations

import logging
from typing import Iterable, List, Optional, Tuple

from .closure import CongruenceClosure, build_closure
from .config import EngineConfig, resolve_config
from .premise import Premise
from .term import Term

logger = logging.getLogger(__name__)


def _closure_for(
    premise: Premise,
    config: EngineConfig,
    extra_terms: Iterable[Term] = (),
) -> CongruenceClosure:
    if config.cache_closure:
        return premise.closure(config.strategy)
    return build_closure(premise.pairs(), config.strategy, extra_terms)


def equals(
    term_a: Term,
    term_b: Term,
    premise: Premise,
    config: Optional[EngineConfig] = None,
) -> bool:
    """Determine whether two terms are equal under ``premise``."""
    # reflexivity
    if term_a == term_b:
        return True
    config = resolve_config(config)
    closure = _closure_for(premise, config, (term_a, term_b))
    return closure.same_class(term_a, term_b)


def check_queries(
    premise: Premise,
    queries: Iterable[Tuple[Term, Term]],
    config: Optional[EngineConfig] = None,
) -> List[bool]:
    """Decide a batch of ``(lhs, rhs)`` queries against one closure."""
    config = resolve_config(config)
    queries = list(queries)
    extra = [t for pair in queries for t in pair]
    closure = _closure_for(premise, config, extra)
    results = [closure.same_class(lhs, rhs) for lhs, rhs in queries]
    logger.debug("checked %d queries, %d equal", len(results), sum(results))
    return results


def equivalence_classes(
    premise: Premise,
    *extra_terms: Term,
    config: Optional[EngineConfig] = None,
) -> List[Tuple[Term, ...]]:
    """
    Partition of the premise universe plus ``extra_terms``.

    Classes and their members are sorted deterministically.
    """
    config = resolve_config(config)
    return build_closure(premise.pairs(), config.strategy, extra_terms).classes()
