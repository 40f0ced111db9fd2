"""Ground equality decision procedure (congruence closure over EUF terms)."""

from .closure import CongruenceClosure, build_closure
from .config import DEFAULT_CONFIG, ClosureStrategy, EngineConfig
from .engine import check_queries, equals, equivalence_classes
from .errors import ConfigError, FolEqError, ProblemLoadError, TermFormatError
from .premise import Premise
from .serialization import (
    Problem,
    Query,
    canonicalize_term,
    load_problem,
    parse_problem,
    parse_term,
    term_hash,
    term_to_dict,
)
from .term import (
    Function,
    Literal,
    Term,
    arguments_of,
    arity,
    format_term,
    fun,
    lit,
    structural_eq,
    subterms,
    substitute,
    symbol_of,
    term_depth,
    term_size,
    visit,
)

__all__: list[str] = [
    # Term model
    "Function",
    "Literal",
    "Term",
    "arguments_of",
    "arity",
    "format_term",
    "fun",
    "lit",
    "structural_eq",
    "subterms",
    "substitute",
    "symbol_of",
    "term_depth",
    "term_size",
    "visit",

    # Decision procedure
    "ClosureStrategy",
    "CongruenceClosure",
    "DEFAULT_CONFIG",
    "EngineConfig",
    "Premise",
    "build_closure",
    "check_queries",
    "equals",
    "equivalence_classes",

    # Codec
    "Problem",
    "Query",
    "canonicalize_term",
    "load_problem",
    "parse_problem",
    "parse_term",
    "term_hash",
    "term_to_dict",

    # Errors
    "ConfigError",
    "FolEqError",
    "ProblemLoadError",
    "TermFormatError",
]
