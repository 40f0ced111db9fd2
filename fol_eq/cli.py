"""
Command line interface for the equality decision procedure.

    fol-eq check PROBLEM [--strategy naive|worklist] [--config CONFIG] [--json] [-v]
    fol-eq classes PROBLEM [--strategy ...] [--config CONFIG] [--json] [-v]

Exit codes: 0 success, 1 an ``expect`` did not hold, 2 input/config error.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from typing import List, Optional, Sequence

from .config import ClosureStrategy, EngineConfig
from .engine import check_queries, equivalence_classes
from .errors import ConfigError, ProblemLoadError
from .serialization import Problem, load_problem, term_to_dict
from .term import format_term

logger = logging.getLogger("fol_eq.cli")

EXIT_OK = 0
EXIT_MISMATCH = 1
EXIT_ERROR = 2


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="fol-eq",
        description="Decide ground equalities under a premise set (congruence closure).",
    )
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("problem", help="Path to a YAML or JSON problem file.")
    common.add_argument(
        "--strategy",
        choices=[s.value for s in ClosureStrategy],
        default=None,
        help="Congruence fixpoint strategy (overrides config and FOL_EQ_STRATEGY).",
    )
    common.add_argument("--config", default=None, help="YAML config file with an 'engine' section.")
    common.add_argument("--json", action="store_true", help="Emit machine-readable JSON.")
    common.add_argument("-v", "--verbose", action="count", default=0, help="Increase log verbosity.")

    sub = parser.add_subparsers(dest="command", required=True)
    sub.add_parser("check", parents=[common], help="Decide every query in the problem file.")
    sub.add_parser("classes", parents=[common], help="Print the equivalence classes of the premises.")
    return parser


def _configure_logging(verbosity: int) -> None:
    level = logging.WARNING
    if verbosity == 1:
        level = logging.INFO
    elif verbosity >= 2:
        level = logging.DEBUG
    logging.basicConfig(level=level, format="%(asctime)s %(levelname)s %(message)s")


def _load_config(args: argparse.Namespace) -> EngineConfig:
    if args.config:
        config = EngineConfig.from_file(args.config)
    else:
        config = EngineConfig.from_env()
    if args.strategy:
        config = config.with_strategy(args.strategy)
    return config


def _run_check(problem: Problem, config: EngineConfig, as_json: bool) -> int:
    results = check_queries(problem.premise, [(q.lhs, q.rhs) for q in problem.queries], config)
    mismatches = 0
    records = []
    for index, (query, equal) in enumerate(zip(problem.queries, results)):
        ok = query.expect is None or query.expect == equal
        if not ok:
            mismatches += 1
        records.append((index, query, equal, ok))

    if as_json:
        payload = [
            {
                "index": index,
                "name": query.name,
                "left": term_to_dict(query.lhs),
                "right": term_to_dict(query.rhs),
                "equal": equal,
                "expect": query.expect,
                "ok": ok,
            }
            for index, query, equal, ok in records
        ]
        print(json.dumps({"results": payload, "mismatches": mismatches}, indent=2))
    else:
        for index, query, equal, ok in records:
            label = query.name or f"#{index}"
            verdict = "EQUAL" if equal else "DISTINCT"
            line = f"{label}: {format_term(query.lhs)} vs {format_term(query.rhs)}: {verdict}"
            if query.expect is not None:
                line += " ok" if ok else " MISMATCH"
            print(line)

    logger.info(
        "%d queries checked with %s strategy, %d mismatches",
        len(records),
        config.strategy.value,
        mismatches,
    )
    return EXIT_MISMATCH if mismatches else EXIT_OK


def _run_classes(problem: Problem, config: EngineConfig, as_json: bool) -> int:
    extra = [t for q in problem.queries for t in (q.lhs, q.rhs)]
    classes = equivalence_classes(problem.premise, *extra, config=config)
    if as_json:
        print(json.dumps({"classes": [[term_to_dict(t) for t in cls] for cls in classes]}, indent=2))
    else:
        for cls in classes:
            print(" = ".join(format_term(t) for t in cls))
    return EXIT_OK


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    _configure_logging(args.verbose)

    try:
        config = _load_config(args)
        problem = load_problem(args.problem)
    except (ConfigError, ProblemLoadError) as e:
        logger.error("%s", e)
        return EXIT_ERROR

    logger.info(
        "loaded %s: %d premise pairs, %d queries",
        args.problem,
        len(problem.premise),
        len(problem.queries),
    )

    if args.command == "check":
        return _run_check(problem, config, args.json)
    return _run_classes(problem, config, args.json)


if __name__ == "__main__":
    sys.exit(main())
