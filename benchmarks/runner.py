# benchmarks/runner.py
#
# A generic utility for running and timing benchmark functions. Warm-up
# iterations are excluded from the measurement, the median of the timed runs
# is reported to resist system noise, and the buffer allocations made by
# lazyvec during the timed runs are counted alongside.

import time
from typing import NamedTuple

import numpy as np

import lazyvec


class BenchmarkResult(NamedTuple):
    median_ms: float
    allocations_per_run: float


def run_benchmark(func, args, num_warmup=3, num_iter=10):
    """
    Runs a given function with arguments and measures its performance.

    Args:
        func: The function to benchmark.
        args: A tuple of arguments to pass to the function.
        num_warmup (int): Number of warm-up runs before timing.
        num_iter (int): Number of timed iterations.

    Returns:
        A BenchmarkResult with the median execution time in milliseconds and
        the average number of lazyvec buffer allocations per run.
    """
    for _ in range(num_warmup):
        func(*args)

    times = []
    with lazyvec.profile() as p:
        for _ in range(num_iter):
            start_time = time.perf_counter()
            func(*args)
            times.append((time.perf_counter() - start_time) * 1000)

    return BenchmarkResult(float(np.median(times)), p.allocations / num_iter)
