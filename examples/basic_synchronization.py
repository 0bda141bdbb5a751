#!/usr/bin/env python3
"""
Basic FSSP synchronization example.

This script demonstrates:
1. Creating a simulation for one line length
2. Watching signals propagate while it runs
3. Verifying the firing
4. Rendering the run as a cross-stitch pattern
"""

import mlx.core as mx

from fssp import Config
from fssp.simulation import Simulation
from fssp.symbols import Symbol
from fssp.verification import print_verification_summary, verify, verify_sizes
from fssp.visualization import save_pattern, stitch_pattern


def main():
    print("=" * 60)
    print("FSSP - Firing Squad Synchronization Problem")
    print("Basic Synchronization Example")
    print("=" * 60)
    print()

    print(f"MLX device: {mx.default_device()}")
    print()

    config = Config(
        n=24,               # Reference line length
        start_side="left",  # Officer at position 1
        color_set=4,        # Echoes swapped relative to set 1
    )

    print("Configuration:")
    print(f"  Soldiers: {config.n}")
    print(f"  Step bound: {config.total_steps}")
    print(f"  Colour set: {config.color_set}")
    print()

    sim = Simulation(config)
    print(f"Rules: {sim.catalog.rule_count}")
    print()

    print(f"Running simulation for up to {config.total_steps} steps...")

    def progress_callback(s: Simulation):
        active = s.config.n - s.state.count(Symbol.IDLE)
        print(f"  Step {s.step_count}: {active} soldiers active")

    history = sim.run(
        callback=progress_callback,
        callback_interval=10,
        show_progress=False,
    )
    print()

    report = verify(history)
    print_verification_summary(report)
    print()

    print("Checking other line lengths...")
    reports = verify_sizes(range(1, 33))
    failures = [n for n, r in reports.items() if not (r.solved and r.within_bound)]
    if failures:
        print(f"✗ Failed for n = {failures}")
    else:
        print(f"✓ All {len(reports)} line lengths synchronized within 3n")
    print()

    pattern = stitch_pattern(history, config.symbol_assignment, dims=config.raster_dims)
    save_pattern(pattern, "fssp_pattern.png")
    print()

    print("To plot interactively, run:")
    print("  python -m fssp.main --n 24 --plot")
    print()


if __name__ == "__main__":
    main()
