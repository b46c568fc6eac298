"""Latency benchmark for contextcore extraction.

Measures extraction latency across several inputs:
- Short single-intent messages
- A long multi-clause message touching most categories
- Single-category extraction
- Input at the truncation limit

Usage:
    python -m benchmarks.latency
    python benchmarks/latency.py
"""

import json
import statistics
import time
from typing import Any, Dict, List

from contextcore import ContextCompiler, extract_preferences
from contextcore.pipeline import MAX_INPUT_LENGTH


def _timed(fn, iterations: int = 1000) -> Dict[str, float]:
    """Run fn() `iterations` times and return latency stats in ms."""
    times: List[float] = []
    for _ in range(iterations):
        t0 = time.perf_counter()
        fn()
        elapsed = (time.perf_counter() - t0) * 1000
        times.append(elapsed)

    times.sort()
    return {
        "mean_ms": round(statistics.mean(times), 3),
        "median_ms": round(statistics.median(times), 3),
        "p95_ms": round(times[int(len(times) * 0.95)], 3),
        "p99_ms": round(times[int(len(times) * 0.99)], 3),
        "min_ms": round(times[0], 3),
        "max_ms": round(times[-1], 3),
        "iterations": iterations,
    }


def bench_short(compiler: ContextCompiler) -> Dict[str, float]:
    """A one-clause preference."""
    text = "I prefer dark mode over light mode"
    return _timed(lambda: compiler.extract(text))


def bench_long(compiler: ContextCompiler) -> Dict[str, float]:
    """A message that touches most categories."""
    text = (
        "I'm a backend developer at Acme and I've worked with distributed systems before. "
        "I'm building an ESP32 sensor project with Python and VS Code. "
        "After resetting my PC, all local files were wiped. "
        "I'm on mobile right now because my laptop is not booting. "
        "What's the best way to back up my data? I'm worried I might lose everything."
    )
    return _timed(lambda: compiler.extract(text), iterations=500)


def bench_single_category() -> Dict[str, float]:
    """Preferences only."""
    text = "I usually work late at night and I hate light themes"
    return _timed(lambda: extract_preferences(text))


def bench_max_length(compiler: ContextCompiler) -> Dict[str, float]:
    """Input truncated to the maximum length."""
    sentence = "I want to learn Rust and I use Linux every day. "
    text = (sentence * (MAX_INPUT_LENGTH // len(sentence) + 1))[:MAX_INPUT_LENGTH]
    return _timed(lambda: compiler.extract(text), iterations=50)


def main():
    print("contextcore Latency Benchmark")
    print("=" * 50)
    print()

    compiler = ContextCompiler()
    runs = (
        ("short_message", "short message × 1000", lambda: bench_short(compiler)),
        ("long_message", "long message × 500", lambda: bench_long(compiler)),
        ("single_category", "preferences only × 1000", bench_single_category),
        ("max_length", f"{MAX_INPUT_LENGTH} chars × 50", lambda: bench_max_length(compiler)),
    )

    results: Dict[str, Any] = {}
    for key, label, run in runs:
        print(f"Running: {label} ...")
        r = run()
        results[key] = r
        print(f"  mean={r['mean_ms']:.3f}ms  p95={r['p95_ms']:.3f}ms  p99={r['p99_ms']:.3f}ms")

    print()
    print("=" * 50)
    print("Summary:")
    print()
    for name, r in results.items():
        print(f"  {name:30s}  mean={r['mean_ms']:7.3f}ms  p95={r['p95_ms']:7.3f}ms")

    # Save results
    output_path = "benchmarks/latency_results.json"
    with open(output_path, "w") as f:
        json.dump(results, f, indent=2)
    print(f"\nResults saved to {output_path}")


if __name__ == "__main__":
    main()
