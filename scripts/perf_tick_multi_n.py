"""
Multi-N tick performance validation.

Runs full world ticks at 50, 300, 1000, 2000 prey on both spatial backends
and reports median/p90 tick time. Single-threaded numpy for stable numbers.
"""

# Pin threading for stable measurement
import os
os.environ.update({
    'OPENBLAS_NUM_THREADS': '1',
    'MKL_NUM_THREADS': '1',
    'NUMEXPR_NUM_THREADS': '1',
    'OMP_NUM_THREADS': '1'
})

import sys
import numpy as np
import time
import gc
from pathlib import Path

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from petri.simulation import EcosystemSimulation
from petri.data_types import SimulationParams


# Per-tick budget at 60 fps
TICK_BUDGET_MS = 16.0


def run_tick_perf_test(prey_count: int, use_ckdtree: bool, runs: int = 50) -> dict:
    """
    Run tick performance test at given prey count.

    Reproduction is disabled so the population stays near prey_count.

    Args:
        prey_count: Number of seed prey
        use_ckdtree: Spatial backend
        runs: Number of measured ticks

    Returns:
        Dict with p50, p90, min, max and the final population
    """
    params = SimulationParams(reproduction_threshold=1e9, predator_reproduction_threshold=1e9)
    sim = EcosystemSimulation(
        params=params,
        seed=("perf", prey_count),
        initial_prey=prey_count,
        initial_food=1000,
        use_ckdtree=use_ckdtree
    )

    # Warmup
    for _ in range(5):
        sim.tick()

    # Measure (GC disabled for stable timing)
    gc.collect()
    gc.disable()

    times_ns = []
    build_ms = []
    try:
        for _ in range(runs):
            start = time.perf_counter_ns()
            sim.tick()
            times_ns.append(time.perf_counter_ns() - start)
            build_ms.append(sim.get_tick_stats()['index_build_ms'])
    finally:
        gc.enable()

    times_ms = np.array(times_ns) / 1_000_000

    return {
        'prey_count': prey_count,
        'backend': 'cKDTree' if use_ckdtree else 'O(n)',
        'runs': runs,
        'p50_ms': np.percentile(times_ms, 50),
        'p90_ms': np.percentile(times_ms, 90),
        'min_ms': np.min(times_ms),
        'max_ms': np.max(times_ms),
        'index_build_p50_ms': np.percentile(build_ms, 50),
        'final_prey': len(sim.prey),
    }


def main():
    """Run multi-N tick performance validation."""
    print("=" * 80)
    print("Petri Multi-N Tick Performance Validation")
    print("=" * 80)
    print()

    test_sizes = [50, 300, 1000, 2000]

    results = []

    for prey_count in test_sizes:
        for use_ckdtree in (False, True):
            result = run_tick_perf_test(prey_count, use_ckdtree)
            print(f"[N = {prey_count}, {result['backend']}]")
            print(f"  p50: {result['p50_ms']:.3f}ms")
            print(f"  p90: {result['p90_ms']:.3f}ms")
            print(f"  min: {result['min_ms']:.3f}ms, max: {result['max_ms']:.3f}ms")
            print(f"  index build p50: {result['index_build_p50_ms']:.3f}ms")

            if result['p50_ms'] >= TICK_BUDGET_MS:
                print(f"  WARNING: p50 {result['p50_ms']:.3f}ms >= {TICK_BUDGET_MS:.0f}ms frame budget!")
            else:
                headroom_pct = ((TICK_BUDGET_MS - result['p50_ms']) / TICK_BUDGET_MS) * 100
                print(f"  PASS: {headroom_pct:.1f}% headroom under {TICK_BUDGET_MS:.0f}ms frame budget")

            results.append(result)
            print()

    # Summary table
    print("=" * 80)
    print("Summary Table")
    print("=" * 80)
    print()
    print("| Prey | Backend | p50 (ms) | p90 (ms) | Build p50 (ms) | Final prey |")
    print("|------|---------|----------|----------|----------------|------------|")
    for r in results:
        print(f"| {r['prey_count']:4d} | {r['backend']:7s} | {r['p50_ms']:8.3f} | "
              f"{r['p90_ms']:8.3f} | {r['index_build_p50_ms']:14.3f} | {r['final_prey']:10d} |")

    print()
    print("=" * 80)


if __name__ == '__main__':
    main()
