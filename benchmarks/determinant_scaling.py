"""Time cofactor-expansion determinants and inverses for growing matrix sizes."""

from __future__ import annotations

import argparse
import json
import random
from dataclasses import asdict, dataclass
from pathlib import Path

from _bench_utils import host_metadata, mean, sample_ms, stddev

from matcalc import determinant, inverse
from matcalc.values import Matrix


@dataclass(frozen=True)
class ScalingRow:
    op: str
    size: int
    repeats: int
    mean_ms: float
    stddev_ms: float


def _random_matrix(n: int, rng: random.Random) -> Matrix:
    # Diagonally dominant keeps every sample invertible.
    rows = [[rng.uniform(-1.0, 1.0) for _ in range(n)] for _ in range(n)]
    for i in range(n):
        rows[i][i] += float(n)
    return Matrix.from_rows(rows)


def main() -> None:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("--min-size", type=int, default=1, help="smallest matrix side")
    parser.add_argument("--max-size", type=int, default=7, help="largest matrix side (runtime grows as n!)")
    parser.add_argument("--samples", type=int, default=5, help="timing samples per size")
    parser.add_argument("--seed", type=int, default=0, help="random seed for matrix contents")
    parser.add_argument("--json-out", default="", help="optional path to write machine-readable results")
    args = parser.parse_args()

    rng = random.Random(args.seed)
    rows: list[ScalingRow] = []
    print("| Op | n | Repeats | Mean (ms) | Stddev (ms) |")
    print("|---|---:|---:|---:|---:|")
    for n in range(args.min_size, args.max_size + 1):
        a = _random_matrix(n, rng)
        repeats = max(1, 64 // max(1, n * n))
        for name, fn in (("determinant", determinant), ("inverse", inverse)):
            timings = sample_ms(fn, (a,), repeats=repeats, warmup=1, samples=args.samples)
            row = ScalingRow(op=name, size=n, repeats=repeats, mean_ms=mean(timings), stddev_ms=stddev(timings))
            rows.append(row)
            print(f"| {row.op} | {row.size} | {row.repeats} | {row.mean_ms:.3f} | {row.stddev_ms:.3f} |")

    if args.json_out:
        out = Path(args.json_out)
        out.parent.mkdir(parents=True, exist_ok=True)
        payload = {"host": host_metadata(), "rows": [asdict(row) for row in rows]}
        out.write_text(json.dumps(payload, indent=2) + "\n", encoding="utf-8")
        print(f"\nwrote {out}")


if __name__ == "__main__":
    main()
