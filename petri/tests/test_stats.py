"""
Test PopulationStats rolling history.
"""

import sys
import pytest
from pathlib import Path

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent.parent))

from petri.stats import PopulationStats
from petri.entity import Prey
from petri.genome import Genome
from petri.data_types import PopulationSample


def _prey(speed, size):
    genome = Genome(speed=speed, size=size, sense_radius=30.0, color=(0.5, 0.5, 0.5, 0.9))
    return Prey(position=[0.0, 0.0], velocity=[1.0, 0.0], genome=genome, energy=100.0)


def test_record_means():
    stats = PopulationStats()

    sample = stats.record([_prey(1.0, 4.0), _prey(3.0, 6.0)], predator_count=5)

    assert sample == PopulationSample(population=2.0, avg_speed=2.0, avg_size=5.0, predators=5.0)
    assert stats.latest() == sample
    print(f"[OK] Sample: {sample.to_dict()}")


def test_empty_population_records_zero_means():
    stats = PopulationStats()

    sample = stats.record([], predator_count=0)

    assert sample.population == 0.0
    assert sample.avg_speed == 0.0
    assert sample.avg_size == 0.0


def test_latest_before_first_record():
    assert PopulationStats().latest() is None


@pytest.mark.parametrize("capacity,samples", [(1, 3), (5, 5), (5, 12), (300, 301)])
def test_capacity_evicts_oldest(capacity, samples):
    stats = PopulationStats(capacity=capacity)

    for i in range(samples):
        stats.push(PopulationSample(population=float(i), avg_speed=0.0, avg_size=0.0, predators=0.0))

    expected = [float(i) for i in range(max(samples - capacity, 0), samples)]
    assert stats.population_history == expected
    assert len(stats) == min(capacity, samples)

    series_lengths = {len(series) for series in stats.to_dict().values()}
    assert series_lengths == {len(stats)}
