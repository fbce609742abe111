"""Compare Fibonacci implementations.

Usage:
    python -m memo_fib
    python -m memo_fib -n 30 --columns test,elapsed,relative
    python -m memo_fib --only memo_closure,memoise2 --json results/bench.json
"""

import argparse
import json
import logging
import sys
from pathlib import Path

from memo_fib._benchmark import (
    ALL_COLUMNS,
    DEFAULT_COLUMNS,
    DEFAULT_N,
    BenchmarkMismatch,
    default_contestants,
    format_table,
    results_payload,
    run_benchmark,
    select,
)

log = logging.getLogger("memo_fib")


def _csv(value: str) -> list[str]:
    return [part.strip() for part in value.split(",") if part.strip()]


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="memo-fib", description="Fibonacci memoisation benchmark")
    parser.add_argument("-n", "--n", type=int, default=DEFAULT_N, help="Fibonacci index to compute")
    parser.add_argument("--replications", type=int, default=1, help="Calls per contestant")
    parser.add_argument(
        "--columns",
        type=_csv,
        default=list(DEFAULT_COLUMNS),
        help="Comma-separated columns (test, replications, elapsed, user_self, relative, result)",
    )
    parser.add_argument("--only", type=_csv, default=None, help="Comma-separated contestant names")
    parser.add_argument("--json", type=Path, default=None, help="Write results to this JSON file")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO, format="%(message)s"
    )

    if args.n < 0:
        parser.error("-n must be non-negative")
    if args.replications < 1:
        parser.error("--replications must be >= 1")
    bad = [c for c in args.columns if c not in ALL_COLUMNS]
    if bad:
        parser.error(f"unknown column(s): {', '.join(bad)}")

    contestants = default_contestants()
    if args.only:
        try:
            contestants = select(contestants, args.only)
        except ValueError as exc:
            parser.error(str(exc))

    log.info("fib(%d), %d replication(s), %d contestant(s)", args.n, args.replications, len(contestants))
    try:
        results = run_benchmark(contestants, args.n, args.replications)
    except BenchmarkMismatch as exc:
        log.error("%s", exc)
        return 1

    print(format_table(results, args.columns))

    if args.json is not None:
        args.json.parent.mkdir(parents=True, exist_ok=True)
        args.json.write_text(json.dumps(results_payload(results, args.n), indent=2))
        log.info("Results saved to %s", args.json)
    return 0


if __name__ == "__main__":
    sys.exit(main())
