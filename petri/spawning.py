"""
Entity spawning system.

Creates seed populations, failsafe reseeds and food at uniform random
positions inside the world rectangle.
"""

import numpy as np
from typing import List

from .entity import Prey, Predator
from .genome import Genome
from .data_types import WorldBounds
from .rng import random_heading, random_position, random_positions


def spawn_prey(
    count: int,
    bounds: WorldBounds,
    initial_energy: float,
    rng: np.random.Generator
) -> List[Prey]:
    """
    Spawn prey with random genomes, positions and headings.

    Used for the seed population and for the extinction failsafe.

    Args:
        count: Number of prey to spawn
        bounds: World rectangle
        initial_energy: Starting energy for every prey
        rng: Simulation random source

    Returns:
        List of new Prey (age 0)
    """
    prey = []
    for _ in range(max(count, 0)):
        position = random_position(rng, bounds.width, bounds.height)
        velocity = random_heading(rng)
        prey.append(Prey(
            position=position,
            velocity=velocity,
            genome=Genome.random(rng),
            energy=initial_energy,
        ))
    return prey


def spawn_predators(count: int, bounds: WorldBounds, rng: np.random.Generator) -> List[Predator]:
    """
    Spawn predators with default physical parameters at random positions.

    Args:
        count: Number of predators to spawn
        bounds: World rectangle
        rng: Simulation random source

    Returns:
        List of new Predator
    """
    predators = []
    for _ in range(max(count, 0)):
        position = random_position(rng, bounds.width, bounds.height)
        velocity = random_heading(rng)
        predators.append(Predator(position=position, velocity=velocity))
    return predators


def spawn_food(count: int, bounds: WorldBounds, rng: np.random.Generator) -> np.ndarray:
    """Spawn (count, 2) array of food positions."""
    return random_positions(rng, count, bounds.width, bounds.height)
