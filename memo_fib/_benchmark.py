"""Time Fibonacci variants against each other."""

import logging
import os
import platform
import sys
import time
from collections.abc import Callable
from dataclasses import asdict, dataclass

from memo_fib._codegen import memoise2
from memo_fib._fib import fib_naive, fib_open, make_memo_fib
from memo_fib._memoise import memoise, memoise_open
from memo_fib._native import fib_native, warm_up

log = logging.getLogger(__name__)

DEFAULT_N = 25
DEFAULT_COLUMNS = ("test", "replications", "elapsed", "user_self")
ALL_COLUMNS = ("test", "replications", "elapsed", "user_self", "relative", "result")


class BenchmarkMismatch(ValueError):
    """Contestants disagreed on the value of fib(n)."""


@dataclass
class Contestant:
    name: str
    make: Callable[[], Callable[[int], int]]
    setup: Callable[[], None] | None = None


@dataclass
class BenchResult:
    test: str
    replications: int
    elapsed: float
    user_self: float
    result: int
    relative: float = 1.0


def default_contestants() -> list[Contestant]:
    """Every variant, each ``make()`` returning a callable with a cold cache."""
    return [
        Contestant(name="naive", make=lambda: fib_naive),
        Contestant(name="native", make=lambda: fib_native, setup=warm_up),
        Contestant(name="memo_closure", make=make_memo_fib),
        Contestant(name="memoise", make=lambda: memoise(fib_naive)),
        Contestant(name="memoise2", make=lambda: memoise2(fib_naive)),
        Contestant(name="memoise_open", make=lambda: memoise_open(fib_open)),
    ]


def select(contestants: list[Contestant], names: list[str]) -> list[Contestant]:
    by_name = {c.name: c for c in contestants}
    unknown = [n for n in names if n not in by_name]
    if unknown:
        raise ValueError(f"Unknown contestant(s): {', '.join(map(repr, unknown))}")
    return [by_name[n] for n in names]


def _time_one(c: Contestant, n: int, replications: int) -> BenchResult:
    if c.setup is not None:
        c.setup()
    result = None
    elapsed = user = 0.0
    for _ in range(replications):
        fn = c.make()
        u0 = os.times().user
        t0 = time.perf_counter()
        result = fn(n)
        elapsed += time.perf_counter() - t0
        user += os.times().user - u0
    log.debug("%s: fib(%d) = %s in %.6fs", c.name, n, result, elapsed)
    return BenchResult(
        test=c.name,
        replications=replications,
        elapsed=elapsed,
        user_self=user,
        result=int(result),
    )


def run_benchmark(
    contestants: list[Contestant],
    n: int = DEFAULT_N,
    replications: int = 1,
) -> list[BenchResult]:
    """Run every contestant and return results sorted by elapsed time.

    Raises:
        BenchmarkMismatch: two contestants returned different values.
    """
    if replications < 1:
        raise ValueError(f"replications must be >= 1, got {replications}")

    results = [_time_one(c, n, replications) for c in contestants]

    values = {r.result for r in results}
    if len(values) > 1:
        detail = ", ".join(f"{r.test}={r.result}" for r in results)
        raise BenchmarkMismatch(f"fib({n}) results differ: {detail}")

    results.sort(key=lambda r: r.elapsed)
    fastest = results[0].elapsed if results else 0.0
    for r in results:
        r.relative = r.elapsed / fastest if fastest > 0 else 1.0
    return results


def _cell(result: BenchResult, column: str) -> str:
    value = getattr(result, column)
    if column in ("elapsed", "user_self"):
        return f"{value:.6f}"
    if column == "relative":
        return f"{value:.1f}"
    return str(value)


def format_table(results: list[BenchResult], columns=DEFAULT_COLUMNS) -> str:
    columns = list(columns)
    bad = [c for c in columns if c not in ALL_COLUMNS]
    if bad:
        raise ValueError(
            f"Unknown column(s): {', '.join(map(repr, bad))}. Use {', '.join(ALL_COLUMNS)}."
        )

    rows = [columns] + [[_cell(r, c) for c in columns] for r in results]
    widths = [max(len(row[i]) for row in rows) for i in range(len(columns))]
    # row numbers down the left, like a printed data frame
    num_width = len(str(len(results)))
    lines = []
    for idx, row in enumerate(rows):
        label = str(idx).rjust(num_width) if idx else " " * num_width
        cells = [
            cell.ljust(w) if i == 0 else cell.rjust(w)
            for i, (cell, w) in enumerate(zip(row, widths, strict=True))
        ]
        lines.append(f"{label} " + "  ".join(cells))
    return "\n".join(lines)


def python_info() -> dict:
    """Collect Python build/runtime details."""
    return {
        "version": sys.version.split()[0],
        "implementation": platform.python_implementation(),
        "compiler": platform.python_compiler(),
        "arch": platform.machine(),
    }


def results_payload(results: list[BenchResult], n: int) -> dict:
    return {
        "python": python_info(),
        "n": n,
        "results": [asdict(r) for r in results],
    }
