#!/usr/bin/env python3
"""Generate a Markdown benchmark report from JSON result files.

Result files are written by ``python -m memo_fib --json benchmarks/results/bench_<tag>.json``.

Usage:
    python benchmarks/_report_generator.py
    python benchmarks/_report_generator.py --tags py3.12,py3.13
"""

import argparse
import json
import platform
from datetime import datetime, timezone
from pathlib import Path

RESULTS_DIR = Path(__file__).resolve().parent / "results"
REPORT_PATH = Path(__file__).resolve().parent / "BENCHMARK_REPORT.md"


def _fmt_seconds(sec: float) -> str:
    if sec >= 1:
        return f"{sec:.2f}s"
    if sec >= 1e-3:
        return f"{sec * 1e3:.2f}ms"
    return f"{sec * 1e6:.1f}µs"


def _load_results(results_dir: Path, tags: list[str] | None) -> dict[str, dict]:
    data: dict[str, dict] = {}
    if tags:
        for tag in tags:
            p = results_dir / f"bench_{tag}.json"
            if p.exists():
                data[tag] = json.loads(p.read_text())
            else:
                print(f"Warning: {p} not found, skipping")
    else:
        for p in sorted(results_dir.glob("bench_*.json")):
            tag = p.stem.removeprefix("bench_")
            data[tag] = json.loads(p.read_text())
    return data


def _md_table(headers: list[str], rows: list[list[str]]) -> str:
    lines = []
    lines.append("| " + " | ".join(headers) + " |")
    lines.append("| " + " | ".join("---" for _ in headers) + " |")
    for row in rows:
        lines.append("| " + " | ".join(row) + " |")
    return "\n".join(lines)


def generate_report(data: dict[str, dict]) -> str:
    sections: list[str] = []

    now = datetime.now(timezone.utc).strftime("%Y-%m-%d %H:%M UTC")
    sections.append("# memo_fib Benchmark Report\n")
    sections.append(f"Generated: {now}  ")
    sections.append(f"Machine: {platform.machine()} / {platform.system()} {platform.release()}\n")

    for tag, run in data.items():
        py = run["python"]
        sections.append(f"## {tag} — Python {py['version']} [{py['implementation']}], fib({run['n']})\n")

        headers = ["Variant", "Replications", "Elapsed", "User CPU", "Relative"]
        rows = []
        for r in sorted(run["results"], key=lambda r: r["elapsed"]):
            rows.append([
                r["test"],
                str(r["replications"]),
                _fmt_seconds(r["elapsed"]),
                _fmt_seconds(r["user_self"]),
                f"{r.get('relative', 1.0):.1f}x",
            ])
        sections.append(_md_table(headers, rows))
        sections.append("")

    return "\n".join(sections)


def main() -> None:
    parser = argparse.ArgumentParser(description="Generate benchmark Markdown report")
    parser.add_argument("--tags", type=str, default=None, help="Comma-separated tags (default: all)")
    parser.add_argument("--results-dir", type=Path, default=RESULTS_DIR)
    parser.add_argument("--output", type=Path, default=REPORT_PATH)
    args = parser.parse_args()

    tags = args.tags.split(",") if args.tags else None
    data = _load_results(args.results_dir, tags)
    if not data:
        print(f"No result files found in {args.results_dir}")
        return

    args.output.write_text(generate_report(data))
    print(f"Report written to {args.output}")


if __name__ == "__main__":
    main()
