"""
Command-line interface for FSSP.

Usage:
    python -m fssp.main --help
    python -m fssp.main --n 24
    python -m fssp.main --n 5 --start-side right --plot
    python -m fssp.main --sweep 40
    python -m fssp.main --n 24 --color-set 4 --save-pattern pattern.png
"""

import argparse
import json
import sys
from typing import Optional, Sequence

import matplotlib.pyplot as plt

from .catalog import StateCatalog
from .config import Config
from .errors import FSSPError
from .simulation import Simulation
from .verification import print_sweep_summary, print_verification_summary, verify, verify_sizes
from .visualization import plot_history, plot_pattern, save_pattern, stitch_pattern


def create_parser() -> argparse.ArgumentParser:
    """Create argument parser with all options."""
    parser = argparse.ArgumentParser(
        description="FSSP - Firing Squad Synchronization Problem simulator",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )

    # Basic options
    parser.add_argument(
        "--n", type=int, default=None,
        help="Number of automata in the line (default 24; not used with --sweep)"
    )
    parser.add_argument(
        "--steps", type=int, default=None,
        help="Snapshots to simulate, initial one included (default 3n; not used with --sweep)"
    )
    parser.add_argument(
        "--start-side", type=str, default=None,
        choices=["left", "right"], dest="start_side",
        help="End holding the first officer"
    )
    parser.add_argument(
        "--initial", type=str, default=None,
        help="Comma-separated interior roles, e.g. LeftFirstOfficer,Idle,Idle (not used with --sweep)"
    )
    parser.add_argument(
        "--sweep", type=int, default=None,
        help="Verify every line length from 1 to N with the default start instead of a single run"
    )

    # Rendering options
    parser.add_argument(
        "--color-set", type=int, default=None, dest="color_set",
        help="Cross-stitch colour set (1-12)"
    )
    parser.add_argument(
        "--raster-rows", type=int, default=69,
        help="Pattern height in stitches"
    )
    parser.add_argument(
        "--raster-cols", type=int, default=33,
        help="Pattern width in stitches"
    )
    parser.add_argument(
        "--plot", action="store_true",
        help="Show the space-time diagram and stitch pattern"
    )
    parser.add_argument(
        "--save-pattern", type=str, default=None,
        help="Path to save the stitch pattern image"
    )

    # Output options
    parser.add_argument(
        "--save-report", type=str, default=None,
        help="Save the verification report to a JSON file"
    )
    parser.add_argument(
        "--no-progress", action="store_true",
        help="Disable the progress bar"
    )

    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Main entry point."""
    parser = create_parser()
    args = parser.parse_args(argv)

    if args.initial is not None:
        args.initial_condition = tuple(s for s in args.initial.split(",") if s.strip())
    args.raster_dims = (args.raster_rows, args.raster_cols)

    try:
        config = Config.from_args(args)
    except ValueError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return 1

    catalog = StateCatalog.build(config.symbol_assignment)

    if args.sweep is not None:
        if args.sweep < 1:
            print(f"Configuration error: sweep must be >= 1, got {args.sweep}", file=sys.stderr)
            return 1
        # Sweeps always use the default line for each size
        single_run = {"--n": args.n, "--steps": args.steps, "--initial": args.initial}
        conflicting = [flag for flag, value in single_run.items() if value is not None]
        if conflicting:
            print(
                f"Configuration error: --sweep cannot be combined with {', '.join(conflicting)}",
                file=sys.stderr,
            )
            return 1
        print(f"Verifying n = 1..{args.sweep}")
        try:
            reports = verify_sizes(range(1, args.sweep + 1), catalog, config.start_side)
        except FSSPError as e:
            print(f"Simulation error: {e}", file=sys.stderr)
            return 2
        print_sweep_summary(reports)
        return 0 if all(r.solved and r.within_bound for r in reports.values()) else 1

    print("FSSP Simulation")
    print(f"  Soldiers: {config.n}")
    print(f"  Steps: {config.total_steps}")
    print(f"  Officer: {config.start_side if config.initial_condition is None else 'custom'}")
    print(f"  Rules: {catalog.rule_count} in {len(catalog.groups)} groups")
    print()

    try:
        sim = Simulation(config, catalog=catalog)
        history = sim.run(show_progress=not args.no_progress)
    except FSSPError as e:
        print(f"Simulation error: {e}", file=sys.stderr)
        return 2

    report = verify(history, catalog.fire_symbol, config.n)
    print()
    print_verification_summary(report)

    if args.save_report:
        with open(args.save_report, "w") as f:
            json.dump({"config": config.to_dict(), "report": report.to_dict()}, f, indent=2)
        print(f"Report saved to {args.save_report}")

    if args.plot or args.save_pattern:
        pattern = stitch_pattern(
            history,
            config.symbol_assignment,
            dims=config.raster_dims,
            method=config.fit_method,
        )
        if args.save_pattern:
            save_pattern(pattern, args.save_pattern)
        if args.plot:
            fig, (ax_history, ax_pattern) = plt.subplots(1, 2, figsize=(10, 8))
            plot_history(history, config.symbol_assignment, ax_history)
            plot_pattern(pattern, ax_pattern)
            plt.show()

    return 0 if report.solved else 1


if __name__ == "__main__":
    sys.exit(main())
