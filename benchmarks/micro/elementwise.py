# benchmarks/micro/elementwise.py
#
# Compares a fused element-wise update `d -= (a + b + c) + (b / c) * (a / c)`
# against the same statement in NumPy. NumPy allocates a temporary array for
# every operator in the chain; lazyvec walks the expression once per index
# and writes straight into `d`, allocating nothing. The timing comparison is
# not the point (NumPy runs compiled loops, lazyvec runs Python ones); the
# allocation column is.

import numpy as np

from benchmarks.runner import run_benchmark
from lazyvec import LazyVector


def fused_update_lazyvec(a, b, c, d):
    d -= (a + b + c) + (b / c) * (a / c)


def fused_update_numpy(a, b, c, d):
    d -= (a + b + c) + (b / c) * (a / c)


def main():
    print("--- Running Fused Element-wise Benchmark ---")
    size = 20_000

    a_np = np.random.rand(size) + 1.0
    b_np = np.random.rand(size) + 1.0
    c_np = np.random.rand(size) + 1.0
    d_np = np.zeros(size)

    vectors = [LazyVector(arr, dtype=np.float64) for arr in (a_np, b_np, c_np, d_np)]

    lazy = run_benchmark(fused_update_lazyvec, tuple(vectors))
    numpy_time = run_benchmark(fused_update_numpy, (a_np, b_np, c_np, d_np))

    print(f"NumPy:   {numpy_time.median_ms:.4f} ms   (one temporary per operator)")
    print(f"lazyvec: {lazy.median_ms:.4f} ms   ({lazy.allocations_per_run:.0f} buffer allocations per run)")

    assert np.allclose(vectors[3].data, d_np), "fused result does not match NumPy!"
    print("[SUCCESS] fused result matches NumPy.")


if __name__ == "__main__":
    main()
