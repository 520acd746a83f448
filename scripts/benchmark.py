#!/usr/bin/env python3
"""
Append throughput benchmark for value-typed collections.
Appends the same object, then the same boolean, into typed collections
and reports the time each run takes.
"""

import argparse
import sys
import time
from typing import Any, Callable

from collectable import Collection


class A:
    pass


class ACollection(Collection[A]):
    value_type = A


class BoolCollection(Collection[bool]):
    value_type = 'boolean'


def run(label: str, factory: Callable[[], Collection[Any]], value: Any, iterations: int) -> float:
    """Append a value repeatedly and return the elapsed seconds."""
    print(f"{label} performance")

    collection = factory()
    start = time.perf_counter()

    for _ in range(iterations):
        collection.append(value)

    duration = time.perf_counter() - start
    print(f"Time: {duration:.4f}s ({len(collection)} items)")
    return duration


def main() -> int:
    """Run the benchmarks."""
    parser = argparse.ArgumentParser(description="Typed collection append benchmark")
    parser.add_argument(
        "--iterations",
        type=int,
        default=5_000_000,
        help="Number of appends per run"
    )

    args = parser.parse_args()

    run("Object", ACollection, A(), args.iterations)
    run("Scalar", BoolCollection, True, args.iterations)
    return 0


if __name__ == "__main__":
    sys.exit(main())
