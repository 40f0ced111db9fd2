"""
Structured (JSON-like) encoding of terms and equality problems.

This is a data codec, not a parser for textual FOL syntax.

JSON Schema (terms):
- Literal: {"type": "literal", "symbol": scalar}
- Function: {"type": "function", "symbol": scalar, "args": [TERM, ...]}
- A bare JSON scalar (string, number, bool) is shorthand for a literal.

Problem files (YAML or JSON):

    premises:
      - [1, 3]                      # two-element list
      - {left: 2, right: 4}         # or a left/right mapping
    queries:
      - left: {type: function, symbol: f, args: [1, 2]}
        right: {type: function, symbol: f, args: [3, 4]}
        expect: true                # optional
        name: congruence            # optional

NORMATIVE INVARIANTS:
- canonicalize_term output is compact JSON with sorted keys
- term_hash uses the DOMAIN_TERM domain separation tag
- term_to_dict always emits the explicit (non-shorthand) form
- A symbol's JSON type is part of its identity: 1, 1.0 and true name three
  different literals, both for term equality and for term_hash
- parse_term and term_to_dict recurse once per nesting level, so like the json
  module they are bounded by the interpreter recursion limit
"""

from __future__ import annotations

import hashlib
import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, List, Optional, Tuple

import yaml

from .errors import ProblemLoadError, TermFormatError
from .premise import Premise
from .term import Function, Literal, Term

DOMAIN_TERM = b"\x10"

_SCALARS = (str, int, float, bool)


# =============================================================================
# Terms
# =============================================================================


def parse_term(data: Any) -> Term:
    """Parse a term from its JSON-like representation.

    FAIL-CLOSED: Raises TermFormatError on unknown node types or bad fields.
    """
    if isinstance(data, _SCALARS):
        return Literal(data)
    if not isinstance(data, dict):
        raise TermFormatError(f"Expected dict or scalar, got {type(data).__name__}")

    node_type = data.get("type")
    if node_type is None:
        raise TermFormatError("Missing 'type' field in term node")

    if "symbol" not in data:
        raise TermFormatError(f"{node_type} node missing 'symbol' field")
    symbol = data["symbol"]
    if not isinstance(symbol, _SCALARS):
        raise TermFormatError(f"Term symbol must be a JSON scalar, got {type(symbol).__name__}")

    if node_type == "literal":
        return Literal(symbol)

    elif node_type == "function":
        args_data = data.get("args")
        if args_data is None:
            raise TermFormatError("Function node missing 'args' field")
        if not isinstance(args_data, list):
            raise TermFormatError("Function node 'args' must be a list")
        return Function(symbol, tuple(parse_term(arg) for arg in args_data))

    else:
        raise TermFormatError(f"Unknown term node type: '{node_type}'")


def term_to_dict(term: Term) -> dict:
    """Convert a term to a dict for JSON serialization."""
    if isinstance(term, Literal):
        return {"type": "literal", "symbol": _json_symbol(term.symbol)}
    elif isinstance(term, Function):
        return {
            "type": "function",
            "symbol": _json_symbol(term.symbol),
            "args": [term_to_dict(arg) for arg in term.arguments],
        }
    else:
        raise TermFormatError(f"Unknown term node type: {type(term).__name__}")


def _json_symbol(symbol: Any) -> Any:
    if not isinstance(symbol, _SCALARS):
        raise TermFormatError(f"Symbol {symbol!r} is not JSON-serializable")
    return symbol


def canonicalize_term(term: Term) -> str:
    return json.dumps(term_to_dict(term), sort_keys=True, separators=(",", ":"), ensure_ascii=True)


def term_hash(term: Term) -> str:
    """64-character hex digest of the canonical term encoding."""
    payload = canonicalize_term(term).encode("utf-8")
    return hashlib.sha256(DOMAIN_TERM + payload).hexdigest()


# =============================================================================
# Problems
# =============================================================================


@dataclass(frozen=True)
class Query:
    lhs: Term
    rhs: Term
    expect: Optional[bool] = None
    name: Optional[str] = None


@dataclass
class Problem:
    """A premise set together with the queries to decide against it."""

    premise: Premise = field(default_factory=Premise)
    queries: List[Query] = field(default_factory=list)

    def to_dict(self) -> dict:
        queries = []
        for query in self.queries:
            entry: dict = {"left": term_to_dict(query.lhs), "right": term_to_dict(query.rhs)}
            if query.expect is not None:
                entry["expect"] = query.expect
            if query.name is not None:
                entry["name"] = query.name
            queries.append(entry)
        return {
            "premises": [
                {"left": term_to_dict(lhs), "right": term_to_dict(rhs)} for lhs, rhs in self.premise.pairs()
            ],
            "queries": queries,
        }


def _parse_pair(entry: Any, where: str) -> Tuple[Term, Term]:
    if isinstance(entry, list):
        if len(entry) != 2:
            raise ProblemLoadError(f"{where}: expected a two-element list, got {len(entry)} elements")
        left, right = entry
    elif isinstance(entry, dict):
        if "left" not in entry or "right" not in entry:
            raise ProblemLoadError(f"{where}: missing 'left' or 'right' field")
        left, right = entry["left"], entry["right"]
    else:
        raise ProblemLoadError(f"{where}: expected a list or mapping, got {type(entry).__name__}")

    try:
        return parse_term(left), parse_term(right)
    except TermFormatError as e:
        raise ProblemLoadError(f"{where}: {e}") from e


def parse_problem(data: Any) -> Problem:
    """Build a Problem from already-decoded YAML/JSON data."""
    if data is None:
        return Problem()
    if not isinstance(data, dict):
        raise ProblemLoadError(f"Problem must be a mapping, got {type(data).__name__}")

    premises = data.get("premises") or []
    queries = data.get("queries") or []
    if not isinstance(premises, list):
        raise ProblemLoadError("'premises' must be a list")
    if not isinstance(queries, list):
        raise ProblemLoadError("'queries' must be a list")

    premise = Premise()
    for i, entry in enumerate(premises):
        premise.insert(*_parse_pair(entry, f"premises[{i}]"))

    parsed: List[Query] = []
    for i, entry in enumerate(queries):
        lhs, rhs = _parse_pair(entry, f"queries[{i}]")
        expect = None
        name = None
        if isinstance(entry, dict):
            expect = entry.get("expect")
            if expect is not None and not isinstance(expect, bool):
                raise ProblemLoadError(f"queries[{i}]: 'expect' must be a boolean")
            name = entry.get("name")
            if name is not None:
                name = str(name)
        parsed.append(Query(lhs, rhs, expect, name))

    return Problem(premise=premise, queries=parsed)


def load_problem(path: Path | str) -> Problem:
    """
    Load a problem from a YAML or JSON file.

    Raises:
        ProblemLoadError: If the file is missing, unreadable, not UTF-8 or malformed.
    """
    path = Path(path)
    if not path.exists():
        raise ProblemLoadError(f"Problem file not found at: {path}")

    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise ProblemLoadError(f"Error reading problem file: {path}") from e

    if path.suffix.lower() == ".json":
        try:
            data = json.loads(text)
        except json.JSONDecodeError as e:
            raise ProblemLoadError(f"Error parsing JSON file: {path}") from e
    else:
        try:
            data = yaml.safe_load(text)
        except yaml.YAMLError as e:
            raise ProblemLoadError(f"Error parsing YAML file: {path}") from e

    try:
        return parse_problem(data)
    except ProblemLoadError as e:
        raise ProblemLoadError(f"{path}: {e}") from e
