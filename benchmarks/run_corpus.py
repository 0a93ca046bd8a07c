#!/usr/bin/env python3
"""
MinAll Corpus Benchmark
Times every .js script under benchmarks/scripts end to end (lex, parse, run)
"""

import argparse
import io
import json
import sys
import time
from pathlib import Path

import numpy as np

from minall_runtime import MinAllError, MinAllRuntime, RuntimeConfig

SCRIPTS_DIR = Path(__file__).parent / "scripts"


def time_script(path, runs):
    """Execute a script `runs` times with output discarded; returns seconds per run"""
    source = path.read_text(encoding="utf-8")
    timings = np.empty(runs, dtype=np.float64)
    for i in range(runs):
        runtime = MinAllRuntime(RuntimeConfig(output=io.StringIO()))
        start = time.perf_counter()
        runtime.execute(source)
        timings[i] = time.perf_counter() - start
    return timings


def main():
    parser = argparse.ArgumentParser(description="Benchmark the MinAll script corpus.")
    parser.add_argument("--runs", type=int, default=5, help="Runs per script (default: 5).")
    parser.add_argument("--scripts", type=Path, default=SCRIPTS_DIR,
                        help="Directory of .js scripts.")
    parser.add_argument("--output", type=Path, default=Path("corpus_results.json"),
                        help="Where to write the JSON results.")
    args = parser.parse_args()

    if args.runs < 1:
        print("Error: --runs must be at least 1.", file=sys.stderr)
        sys.exit(1)

    scripts = sorted(args.scripts.glob("*.js"))
    if not scripts:
        print(f"Error: no .js scripts found in '{args.scripts}'.", file=sys.stderr)
        sys.exit(1)

    print("=" * 60)
    print("MinAll Corpus Benchmark")
    print("=" * 60)

    results = {}
    for path in scripts:
        try:
            timings = time_script(path, args.runs)
        except MinAllError as e:
            print(f"{path.name}: failed: {e}", file=sys.stderr)
            sys.exit(1)

        results[path.name] = {
            "runs": args.runs,
            "mean_s": float(timings.mean()),
            "min_s": float(timings.min()),
            "std_s": float(timings.std()),
        }
        print(f"{path.name:20s} mean {timings.mean() * 1000:9.3f} ms  "
              f"min {timings.min() * 1000:9.3f} ms  std {timings.std() * 1000:7.3f} ms")

    with open(args.output, "w") as f:
        json.dump({"runs": args.runs, "results": results}, f, indent=2)
    print(f"\nResults saved to {args.output}")


if __name__ == "__main__":
    main()
