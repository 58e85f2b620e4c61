"""
Population statistics recorder.

Keeps four parallel rolling series (population, average speed, average
size, predator count) for the graph panel. One sample per tick; the
oldest entry of every series is dropped once capacity is exceeded.
"""

from typing import Dict, List, Optional, Sequence

from .entity import Prey
from .data_types import PopulationSample
from .constants import MAX_HISTORY


class PopulationStats:
    """
    Fixed-capacity FIFO history of aggregate population metrics.

    Invariant: all four series always have equal length <= capacity.
    """

    def __init__(self, capacity: int = MAX_HISTORY):
        self.capacity = capacity
        self.population_history: List[float] = []
        self.avg_speed_history: List[float] = []
        self.avg_size_history: List[float] = []
        self.predator_history: List[float] = []

    def __len__(self) -> int:
        return len(self.population_history)

    def record(self, prey: Sequence[Prey], predator_count: int) -> PopulationSample:
        """
        Aggregate the current prey population and append one sample.

        Mean speed and size are 0.0 for an empty population.

        Args:
            prey: Living prey
            predator_count: Number of living predators

        Returns:
            The sample that was appended
        """
        count = len(prey)
        if count > 0:
            avg_speed = sum(p.genome.speed for p in prey) / count
            avg_size = sum(p.genome.size for p in prey) / count
        else:
            avg_speed = 0.0
            avg_size = 0.0

        sample = PopulationSample(
            population=float(count),
            avg_speed=float(avg_speed),
            avg_size=float(avg_size),
            predators=float(predator_count),
        )
        self.push(sample)
        return sample

    def push(self, sample: PopulationSample):
        """Append a sample to all four series, evicting the oldest beyond capacity."""
        self.population_history.append(sample.population)
        self.avg_speed_history.append(sample.avg_speed)
        self.avg_size_history.append(sample.avg_size)
        self.predator_history.append(sample.predators)

        # Maintain rolling window
        while len(self.population_history) > self.capacity:
            self.population_history.pop(0)
            self.avg_speed_history.pop(0)
            self.avg_size_history.pop(0)
            self.predator_history.pop(0)

    def latest(self) -> Optional[PopulationSample]:
        """Newest sample, or None before the first record()."""
        if not self.population_history:
            return None
        return PopulationSample(
            population=self.population_history[-1],
            avg_speed=self.avg_speed_history[-1],
            avg_size=self.avg_size_history[-1],
            predators=self.predator_history[-1],
        )

    def to_dict(self) -> Dict[str, List[float]]:
        return {
            'population': list(self.population_history),
            'avg_speed': list(self.avg_speed_history),
            'avg_size': list(self.avg_size_history),
            'predators': list(self.predator_history),
        }
