"""
Heritable trait genome.

A Genome is an immutable value owned by one prey agent. Offspring receive a
mutated copy; the parent's genome is never modified.
"""

import numpy as np
from dataclasses import dataclass
from typing import Tuple, TYPE_CHECKING

from .rng import random_color
from .constants import (
    TRAIT_MIN,
    TRAIT_MAX,
    COLOR_CHANNEL_MIN,
    COLOR_CHANNEL_MAX,
    COLOR_ALPHA,
    COLOR_DRIFT,
    GENOME_SPEED_RANGE,
    GENOME_SIZE_RANGE,
    GENOME_SENSE_RANGE,
)

if TYPE_CHECKING:
    from .data_types import SimulationParams


def _clamp(value: float, low: float, high: float) -> float:
    return min(max(value, low), high)


@dataclass(frozen=True)
class Genome:
    """
    Heritable parameters of a prey agent.

    Attributes:
        speed: Distance moved per tick at speed_multiplier 1.0
        size: Body radius (food contact and lethal radius)
        sense_radius: Food detection range
        color: RGBA display color, channels in [0.2, 1.0], fixed alpha
    """
    speed: float
    size: float
    sense_radius: float
    color: Tuple[float, float, float, float]

    @classmethod
    def random(cls, rng: np.random.Generator) -> 'Genome':
        """Draw a fresh genome for a seed or failsafe prey."""
        return cls(
            speed=float(rng.uniform(*GENOME_SPEED_RANGE)),
            size=float(rng.uniform(*GENOME_SIZE_RANGE)),
            sense_radius=float(rng.uniform(*GENOME_SENSE_RANGE)),
            color=random_color(rng, COLOR_CHANNEL_MIN, COLOR_CHANNEL_MAX, COLOR_ALPHA),
        )

    def mutate(self, params: 'SimulationParams', rng: np.random.Generator) -> 'Genome':
        """
        Produce a mutated copy of this genome.

        Each scalar trait mutates independently with probability
        params.mutation_rate by a factor (1 + delta), delta uniform in
        [-mutation_strength, +mutation_strength], then is clamped to
        [TRAIT_MIN, TRAIT_MAX]. Color channels always drift by a uniform
        draw in [-COLOR_DRIFT, +COLOR_DRIFT] and are clamped.

        Args:
            params: Current simulation parameters (mutation rate/strength)
            rng: Simulation random source

        Returns:
            New Genome (self is untouched)
        """
        rate = params.mutation_rate
        strength = params.mutation_strength

        def mutate_trait(value: float) -> float:
            if rng.random() < rate:
                # Scaled unit draw keeps a negative strength well-defined
                change = rng.uniform(-1.0, 1.0) * strength
                return _clamp(value * (1.0 + change), TRAIT_MIN, TRAIT_MAX)
            return value

        speed = mutate_trait(self.speed)
        size = mutate_trait(self.size)
        sense_radius = mutate_trait(self.sense_radius)

        r, g, b = (
            _clamp(channel + rng.uniform(-COLOR_DRIFT, COLOR_DRIFT), COLOR_CHANNEL_MIN, COLOR_CHANNEL_MAX)
            for channel in self.color[:3]
        )

        return Genome(
            speed=float(speed),
            size=float(size),
            sense_radius=float(sense_radius),
            color=(float(r), float(g), float(b), COLOR_ALPHA),
        )

    def to_dict(self) -> dict:
        return {
            'speed': self.speed,
            'size': self.size,
            'sense_radius': self.sense_radius,
            'color': list(self.color),
        }

    @classmethod
    def from_dict(cls, data: dict) -> 'Genome':
        return cls(
            speed=float(data['speed']),
            size=float(data['size']),
            sense_radius=float(data['sense_radius']),
            color=tuple(float(c) for c in data['color']),
        )
