# examples/fused_update.py

from lazyvec import LazyVector, profile


def main():
    """Runs the demonstration."""
    print("--- Running lazyvec Fused Update Demonstration ---")

    a = LazyVector([1.0, 2.0, 3.0, 4.0])
    b = LazyVector([4.0, 5.0, 6.0, 7.0])
    c = LazyVector([2.0, 2.0, 2.0, 2.0])
    d = LazyVector.filled(4, 100.0)

    expr = (a + b + c) + (b / c) * (a / c)
    print(f"\nBuilt expression: {expr!r}")

    with profile() as p:
        d -= expr

    print(f"\nd after update: {d}")
    print(f"Buffers allocated during the update: {p.allocations}")

    expected = [100.0 - ((x + y + z) + (y / z) * (x / z)) for x, y, z in zip(a, b, c)]
    assert d.equals(expected), "fused result does not match the eager loop!"
    print("\n[SUCCESS] fused result matches the eager elementwise loop.")

    mask = (a < b).logical_and(c == 2.0)
    print(f"All lanes satisfy a < b and c == 2: {mask.all(len(a))}")

    print("\n--- lazyvec Fused Update Demonstration Complete ---")


if __name__ == "__main__":
    main()
