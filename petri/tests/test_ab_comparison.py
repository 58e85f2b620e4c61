"""
Test A/B Comparison: USE_CKDTREE False vs True

Verifies that the cKDTree backend produces identical world states to the
O(n) fallback for the same seed, and reports the timing difference.
"""

import sys
import time
import numpy as np
import pytest
from pathlib import Path

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent.parent))

from petri.simulation import EcosystemSimulation
from petri import constants


def _run(use_ckdtree: bool, prey_count: int, ticks: int, seed: int):
    sim = EcosystemSimulation(seed=seed, initial_prey=prey_count, use_ckdtree=use_ckdtree)

    start_time = time.perf_counter()
    for _ in range(ticks):
        sim.tick()
    elapsed = time.perf_counter() - start_time

    return sim, elapsed


@pytest.mark.parametrize("prey_count", [50, 300])
def test_ab_determinism(prey_count):
    """
    Compare O(n) fallback vs cKDTree for identical results.

    Expects:
    - Identical prey, predator and food state
    - Identical active_behavior values
    - Identical statistics history
    """
    print("=" * 60)
    print(f"A/B Comparison Test: O(n) vs cKDTree ({prey_count} prey)")
    print("=" * 60)

    sim1, elapsed_on = _run(use_ckdtree=False, prey_count=prey_count, ticks=60, seed=17)
    sim2, elapsed_ckd = _run(use_ckdtree=True, prey_count=prey_count, ticks=60, seed=17)

    snapshot1 = sim1.get_snapshot()
    snapshot2 = sim2.get_snapshot()

    assert snapshot1['prey_count'] == snapshot2['prey_count'], "Prey count mismatch"
    assert snapshot1['predator_count'] == snapshot2['predator_count'], "Predator count mismatch"

    behavior_mismatches = 0
    for p1, p2 in zip(snapshot1['prey'], snapshot2['prey']):
        assert np.allclose(p1['position'], p2['position'], rtol=0.0, atol=1e-12)
        assert np.allclose(p1['velocity'], p2['velocity'], rtol=0.0, atol=1e-12)
        assert p1['energy'] == p2['energy']
        if p1['active_behavior'] != p2['active_behavior']:
            behavior_mismatches += 1

    assert behavior_mismatches == 0, f"{behavior_mismatches} behavior mismatches"
    assert snapshot1['predators'] == snapshot2['predators']
    assert snapshot1['food'] == snapshot2['food']
    assert snapshot1['stats'] == snapshot2['stats']
    assert snapshot1['telemetry'] == snapshot2['telemetry']

    print(f"O(n) time: {elapsed_on:.3f}s")
    print(f"cKDTree time: {elapsed_ckd:.3f}s")
    print("[OK] Determinism verified - results identical\n")


def test_constant_toggle_selects_backend():
    """Simulation falls back to the module constant when no override is passed."""
    original_setting = constants.USE_CKDTREE
    try:
        constants.USE_CKDTREE = False
        sim = EcosystemSimulation(seed=1, initial_prey=5, initial_food=5)
        assert sim._food_index.use_ckdtree is False

        constants.USE_CKDTREE = True
        sim = EcosystemSimulation(seed=1, initial_prey=5, initial_food=5)
        assert sim._food_index.use_ckdtree is True
    finally:
        constants.USE_CKDTREE = original_setting


if __name__ == '__main__':
    for count in [50, 300, 1000]:
        test_ab_determinism(count)
    print("=" * 60)
    print("[PASS] All A/B comparison tests passed!")
    print("=" * 60)
