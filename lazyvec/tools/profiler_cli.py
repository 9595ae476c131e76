# lazyvec/tools/profiler_cli.py
#
# Implements the command-line interface for `lazyvec-prof`. This tool runs
# a Python script with the allocation profiler enabled and prints a report
# of every buffer the script's vectors allocated.

import argparse
import runpy

from .. import profiler
from ..runtime.logging import setup_logging


def main(argv=None):
    parser = argparse.ArgumentParser(
        description="Run a Python script with the lazyvec allocation profiler enabled."
    )
    parser.add_argument(
        "script_path",
        help="The path to the Python script to profile."
    )
    args = parser.parse_args(argv)

    setup_logging()
    print(f"=== Running '{args.script_path}' with lazyvec-prof ===")

    with profiler.profile() as p:
        runpy.run_path(args.script_path, run_name="__main__")

    print("\n" + "=" * 50)
    p.print_report()
    print("=" * 50)
    return p


if __name__ == "__main__":
    main()
