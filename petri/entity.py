"""
Agent runtime representation.

Prey carry a heritable Genome; predators have fixed physical parameters.
Both hold a 2D position, a unit-ish heading and an energy budget.
"""

import numpy as np
from dataclasses import dataclass
from typing import Optional, TYPE_CHECKING

from .genome import Genome
from .constants import (
    PREDATOR_INITIAL_ENERGY,
    PREDATOR_SPEED,
    PREDATOR_SIZE,
    PREDATOR_SENSE_RADIUS,
)

if TYPE_CHECKING:
    from .data_types import SimulationParams


def _as_vec2(value) -> np.ndarray:
    if not isinstance(value, np.ndarray):
        return np.array(value, dtype=np.float64)
    return value.astype(np.float64, copy=True)


@dataclass
class Prey:
    """
    Foraging bacterium.

    Attributes:
        position: 2D position [x, y] inside the world rectangle
        velocity: 2D heading [vx, vy], renormalized by steering
        genome: Heritable traits (speed, size, sense radius, color)
        energy: Energy budget, dies at <= 0 (no upper bound)
        age: Ticks lived
        active_behavior: Steering mode chosen on the last update
    """
    position: np.ndarray
    velocity: np.ndarray
    genome: Genome
    energy: float
    age: int = 0
    active_behavior: Optional[str] = None  # flee, forage, wander

    def __post_init__(self):
        """Ensure position and velocity are owned float64 arrays"""
        self.position = _as_vec2(self.position)
        self.velocity = _as_vec2(self.velocity)

    @property
    def is_alive(self) -> bool:
        return self.energy > 0.0

    def update_position(self, speed_multiplier: float):
        """Advance along heading by genome speed * speed_multiplier."""
        self.position += self.velocity * self.genome.speed * speed_multiplier

    def reproduce(self, params: 'SimulationParams', rng: np.random.Generator) -> 'Prey':
        """
        Split into parent and offspring.

        Parent energy is halved; the offspring gets the halved energy, a
        mutated genome, the parent's position, the reversed heading and age 0.

        Returns:
            Offspring Prey
        """
        self.energy *= 0.5
        return Prey(
            position=self.position.copy(),
            velocity=-self.velocity,
            genome=self.genome.mutate(params, rng),
            energy=self.energy,
            age=0,
        )

    def to_dict(self) -> dict:
        """
        Serialize prey to JSON-compatible dict.

        Returns:
            Dict with all prey fields
        """
        return {
            'position': self.position.tolist(),
            'velocity': self.velocity.tolist(),
            'genome': self.genome.to_dict(),
            'energy': float(self.energy),
            'age': int(self.age),
            'active_behavior': self.active_behavior,
        }


@dataclass
class Predator:
    """
    Hunting agent with fixed (non-mutating) physical parameters.

    Attributes:
        position: 2D position [x, y]
        velocity: 2D heading [vx, vy]
        energy: Energy budget, dies at <= 0
        speed: Distance moved per tick at speed_multiplier 1.0
        size: Body radius (lethal radius = predator size + prey size)
        sense_radius: Prey detection range
        active_behavior: Steering mode chosen on the last update
    """
    position: np.ndarray
    velocity: np.ndarray
    energy: float = PREDATOR_INITIAL_ENERGY
    speed: float = PREDATOR_SPEED
    size: float = PREDATOR_SIZE
    sense_radius: float = PREDATOR_SENSE_RADIUS
    active_behavior: Optional[str] = None  # pursue, wander

    def __post_init__(self):
        """Ensure position and velocity are owned float64 arrays"""
        self.position = _as_vec2(self.position)
        self.velocity = _as_vec2(self.velocity)

    @property
    def is_alive(self) -> bool:
        return self.energy > 0.0

    def update_position(self, speed_multiplier: float):
        """Advance along heading by speed * speed_multiplier."""
        self.position += self.velocity * self.speed * speed_multiplier

    def reproduce(self) -> 'Predator':
        """
        Split into parent and offspring.

        Parent energy is halved; the offspring copies the physical
        parameters and position, with the reversed heading.
        """
        self.energy *= 0.5
        return Predator(
            position=self.position.copy(),
            velocity=-self.velocity,
            energy=self.energy,
            speed=self.speed,
            size=self.size,
            sense_radius=self.sense_radius,
        )

    def to_dict(self) -> dict:
        return {
            'position': self.position.tolist(),
            'velocity': self.velocity.tolist(),
            'energy': float(self.energy),
            'speed': self.speed,
            'size': self.size,
            'sense_radius': self.sense_radius,
            'active_behavior': self.active_behavior,
        }

