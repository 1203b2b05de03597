#!/usr/bin/env python3
"""
Single Lattice Run

Enumerates the lattice points of one basis, optionally with its dual lattice
and a parallelepiped sample, and saves everything to a .npz file.
"""

import argparse
import sys
import time
from dataclasses import replace
from pathlib import Path

# Add src/ to path
SRC = Path(__file__).resolve().parents[1]
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from lattice_engine import (
    EngineParams,
    LatticeConfig,
    LatticeExplorer,
    LatticeError,
    utils,
)


def build_explorer(args) -> LatticeExplorer:
    """Combine an optional parameter file with command-line overrides."""
    if args.params:
        config, params = utils.config_from_params(utils.load_params(args.params))
    else:
        config, params = LatticeConfig(dimension=args.dim), EngineParams()

    if args.dim is not None and args.dim != config.dimension:
        config = config.with_dimension(args.dim)
    if args.limit is not None:
        config = config.with_sum_limit(args.limit)
    overrides = {"verbose": params.verbose or args.verbose}
    if args.budget is not None:
        overrides["point_budget"] = args.budget
    if args.seed is not None:
        overrides["seed"] = args.seed
    # replace() re-runs EngineParams validation on the overrides
    params = replace(params, **overrides)
    return LatticeExplorer(config, params)


def main(argv=None):
    parser = argparse.ArgumentParser(
        description="Enumerate a lattice and its dual",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--params",
        type=str,
        default=None,
        help="JSON/TOML file with dimension, basis, sum_limit and engine settings",
    )
    parser.add_argument("--dim", type=int, default=None, help="Dimension (resets basis to identity)")
    parser.add_argument("--limit", type=int, default=None, help="Sum limit L")
    parser.add_argument("--budget", type=int, default=None, help="Maximum number of points")
    parser.add_argument("--dual", action="store_true", help="Also compute the dual lattice")
    parser.add_argument(
        "--cell",
        choices=["none", "corners", "random"],
        default="none",
        help="Parallelepiped sampling mode",
    )
    parser.add_argument("--seed", type=int, default=None, help="Random seed for the cell offset")
    parser.add_argument(
        "--out",
        type=str,
        default=None,
        help="Output .npz file path (auto-generated if not provided)",
    )
    parser.add_argument("--verbose", action="store_true")

    args = parser.parse_args(argv)
    if args.params is None and args.dim is None:
        args.dim = 2

    try:
        explorer = build_explorer(args)
        config = explorer.config
        print(f"Running lattice: d={config.dimension}, L={config.sum_limit}, "
              f"budget={explorer.params.point_budget}")
        start_time = time.time()

        point_set = explorer.lattice_points()
        dual = None
        if args.dual:
            dual = explorer.compute_dual()
            dual_set = explorer.dual_points()
            print(f"   Dual points: {dual_set.count}")
        if args.cell != "none":
            explorer.shade_parallelepiped(args.cell)
    except (LatticeError, ValueError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    elapsed_time = time.time() - start_time

    if args.out is None:
        output_dir = Path("results")
        output_dir.mkdir(exist_ok=True)
        args.out = str(
            output_dir / f"lattice_d{config.dimension}_L{config.sum_limit}_{utils.now_str()}.npz"
        )

    utils.save_point_set(
        args.out,
        point_set,
        basis=config.basis,
        dual=dual,
        parallelepiped=explorer.parallelepiped,
    )

    print("\nLattice run completed")
    print(f"   Time elapsed: {elapsed_time:.2f} seconds")
    print(f"   Points generated: {point_set.count} of {point_set.count_before_cap}")
    if point_set.timed_out:
        print("   Stopped early: time limit reached")
    print(f"   Output saved to: {args.out}")

    return 0


if __name__ == "__main__":
    sys.exit(main())
