"""
Run the petri ecosystem without a renderer.

Loads a YAML config, ticks the simulation and prints a tick summary every
TICK_SUMMARY_INTERVAL ticks, followed by the final population sample.

Usage:
    python scripts/run_headless.py --ticks 2000 --seed demo
"""

import argparse
import sys
from pathlib import Path

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from petri.simulation import EcosystemSimulation
from petri.loader import DataLoadError, DEFAULT_CONFIG_PATH, DEFAULT_SCHEMA_DIR
from petri.constants import TICK_SUMMARY_INTERVAL


def main():
    parser = argparse.ArgumentParser(description="Run the petri ecosystem headless.")
    parser.add_argument("--config", type=Path, default=DEFAULT_CONFIG_PATH,
                        help="Simulation YAML (default: petri/data/simulation.yaml)")
    parser.add_argument("--ticks", type=int, default=1000, help="Number of ticks to run")
    parser.add_argument("--seed", default=None, help="Run seed, overrides the config seed")
    parser.add_argument("--summary-interval", type=int, default=TICK_SUMMARY_INTERVAL,
                        help="Print a summary every N ticks")
    args = parser.parse_args()

    overrides = {}
    if args.seed is not None:
        overrides['seed'] = args.seed

    try:
        sim = EcosystemSimulation.from_config(args.config, DEFAULT_SCHEMA_DIR, **overrides)
    except DataLoadError as e:
        print(f"[FAIL] {e}")
        sys.exit(1)

    for i in range(args.ticks):
        sim.tick()
        if args.summary_interval > 0 and (i + 1) % args.summary_interval == 0:
            sim.print_tick_summary()

    sample = sim.stats.latest()
    telemetry = sim.get_telemetry()

    print("=" * 60)
    print(f"[OK] Ran {sim.tick_count} ticks")
    if sample is not None:
        print(f"  Prey: {sample.population:.0f} (avg speed {sample.avg_speed:.2f}, "
              f"avg size {sample.avg_size:.2f})")
        print(f"  Predators: {sample.predators:.0f}")
    print(f"  Prey births: {telemetry['total_prey_births']}, "
          f"predator births: {telemetry['total_predator_births']}, "
          f"prey eaten: {telemetry['total_prey_eaten']}, "
          f"failsafe reseeds: {telemetry['failsafe_reseeds']}")
    print("=" * 60)


if __name__ == '__main__':
    main()
