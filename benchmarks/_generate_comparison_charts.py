#!/usr/bin/env python3
"""Generate an elapsed-time bar chart per result file.

Produces one PNG per ``benchmarks/results/bench_<tag>.json``:
  - comparison_<tag>.png   Elapsed time per variant, log scale

Usage:
    python benchmarks/_generate_comparison_charts.py
"""

import json
from pathlib import Path

import matplotlib

matplotlib.use("Agg")

import matplotlib.pyplot as plt  # noqa: E402, I001

RESULTS_DIR = Path(__file__).resolve().parent / "results"

COLORS = {
    "naive": "#ea580c",
    "native": "#16a34a",
    "memo_closure": "#2563eb",
    "memoise": "#f59e0b",
    "memoise2": "#7c3aed",
    "memoise_open": "#0891b2",
}

DPI = 150


def chart_elapsed(run: dict, out_path: Path) -> None:
    """Horizontal bar chart of elapsed seconds, slowest on top."""
    results = sorted(run["results"], key=lambda r: r["elapsed"])
    names = [r["test"] for r in results]
    values = [max(r["elapsed"], 1e-9) for r in results]

    fig, ax = plt.subplots(figsize=(8, 0.6 * len(names) + 1.5))
    ax.barh(names, values, color=[COLORS.get(n, "#6b7280") for n in names])
    for y, v in enumerate(values):
        ax.text(v, y, f" {v:.2e}s", va="center", fontsize=8)

    ax.set_xscale("log")
    ax.set_xlabel("Elapsed (s, log scale)")
    ax.set_title(f"fib({run['n']}) — Python {run['python']['version']}")
    fig.tight_layout()
    fig.savefig(out_path, dpi=DPI)
    plt.close(fig)


def main() -> None:
    paths = sorted(RESULTS_DIR.glob("bench_*.json"))
    if not paths:
        print(f"No result files found in {RESULTS_DIR}")
        return
    for p in paths:
        tag = p.stem.removeprefix("bench_")
        out = RESULTS_DIR / f"comparison_{tag}.png"
        chart_elapsed(json.loads(p.read_text()), out)
        print(f"Wrote {out}")


if __name__ == "__main__":
    main()
