"""
MinAll Performance Benchmarks

Micro-benchmarks that time the full pipeline (lex, parse, evaluate) on a
fresh runtime per iteration. Per-iteration timings are collected into a
numpy array for the summary statistics.
"""

import io
import time
from dataclasses import asdict, dataclass
from typing import Dict, List, Optional

import numpy as np

from .config import RuntimeConfig
from .runtime import MinAllRuntime


@dataclass
class BenchmarkCase:
    name: str
    source: str
    iterations: int


@dataclass
class BenchmarkResult:
    name: str
    iterations: int
    total_seconds: float
    mean_seconds: float
    std_seconds: float
    min_seconds: float
    ops_per_second: float

    def to_dict(self) -> Dict[str, float]:
        return asdict(self)


PERFORMANCE_CASES: List[BenchmarkCase] = [
    BenchmarkCase(
        "Simple arithmetic",
        "var x = 10; var y = 20; var z = x + y * 2;",
        10000,
    ),
    BenchmarkCase(
        "Function calls",
        "function add(a, b) { return a + b; }"
        "var result = add(5, 10);",
        5000,
    ),
    BenchmarkCase(
        "Loops and conditionals",
        "var sum = 0;"
        "for (var i = 0; i < 10; i = i + 1) {"
        "  if (i % 2 == 0) {"
        "    sum = sum + i;"
        "  }"
        "}",
        1000,
    ),
    BenchmarkCase(
        "Recursive function",
        "function factorial(n) {"
        "  if (n <= 1) return 1;"
        "  return n * factorial(n - 1);"
        "}"
        "var result = factorial(10);",
        1000,
    ),
]


def benchmark_execution(source: str, iterations: int,
                        config: Optional[RuntimeConfig] = None) -> np.ndarray:
    """Run source `iterations` times, returning per-iteration seconds"""
    if iterations < 1:
        raise ValueError(f"iterations must be positive, got {iterations}")
    config = (config or RuntimeConfig()).with_output(io.StringIO())
    timings = np.empty(iterations, dtype=np.float64)
    for i in range(iterations):
        start = time.perf_counter()
        MinAllRuntime(config).execute(source)
        timings[i] = time.perf_counter() - start
    return timings


def summarize(name: str, timings: np.ndarray) -> BenchmarkResult:
    total = float(timings.sum())
    return BenchmarkResult(
        name=name,
        iterations=int(timings.size),
        total_seconds=total,
        mean_seconds=float(timings.mean()),
        std_seconds=float(timings.std()),
        min_seconds=float(timings.min()),
        ops_per_second=float(timings.size / total) if total > 0 else float('inf'),
    )


def run_performance_tests(scale: float = 1.0,
                          cases: Optional[List[BenchmarkCase]] = None) -> List[BenchmarkResult]:
    """Run the benchmark suite; scale multiplies every case's iteration count"""
    results = []
    for case in cases or PERFORMANCE_CASES:
        iterations = max(1, int(case.iterations * scale))
        results.append(summarize(case.name, benchmark_execution(case.source, iterations)))
    return results


def format_report(results: List[BenchmarkResult]) -> str:
    """Plain-text report, one block per test plus a summary"""
    lines = ["MinAll Performance Benchmarks", "==============================", ""]
    for index, result in enumerate(results, 1):
        lines.append(f"Test {index}: {result.name}")
        lines.append(f"{result.iterations:,} iterations: {result.total_seconds:.6f} seconds "
                     f"({result.ops_per_second:.2f} ops/sec)")
        lines.append(f"  mean {result.mean_seconds * 1e6:.1f} us, std {result.std_seconds * 1e6:.1f} us, "
                     f"min {result.min_seconds * 1e6:.1f} us")
        lines.append("")

    total_time = sum(r.total_seconds for r in results)
    total_iterations = sum(r.iterations for r in results)
    lines.append("Performance Summary")
    lines.append("-------------------")
    lines.append(f"Total benchmark time: {total_time:.6f} seconds")
    if total_time > 0:
        lines.append(f"Average operations per second: {total_iterations / total_time:.2f}")
    return '\n'.join(lines)


__all__ = [
    'BenchmarkCase', 'BenchmarkResult', 'PERFORMANCE_CASES',
    'benchmark_execution', 'summarize', 'run_performance_tests', 'format_report',
]
