"""
Behavior engine for prey and predator agents.

Each update moves the agent, bounces it off the world walls, picks a
steering mode (flee / forage / wander for prey, pursue / wander for
predators), blends the steering direction into the heading and pays the
metabolic cost for the tick.

Neighbor lookups go through SpatialIndexAdapter snapshots built once per
pass by the simulation; plain (N, 2) arrays are accepted as well.
"""

import numpy as np
from typing import Union, TYPE_CHECKING

from .entity import Prey, Predator
from .genome import Genome
from .spatial import normalize, bounce_off_walls, jitter_heading, blend_heading
from .spatial_queries import SpatialIndexAdapter
from .constants import (
    PREY_DANGER_RADIUS,
    PREY_DANGER_EPSILON,
    PREY_FLEE_THRESHOLD,
    PREY_FLEE_WEIGHT,
    PREY_FORAGE_WEIGHT,
    PREY_JITTER_ANGLE,
    PREY_METABOLISM_FACTOR,
    PREY_METABOLISM_BASE,
    PREDATOR_PURSUIT_WEIGHT,
    PREDATOR_JITTER_ANGLE,
    PREDATOR_METABOLISM,
)

if TYPE_CHECKING:
    from .data_types import WorldBounds


PointSource = Union[SpatialIndexAdapter, np.ndarray]


def as_index(points: PointSource) -> SpatialIndexAdapter:
    """Wrap a raw (N, 2) array in a freshly built index; pass adapters through."""
    if isinstance(points, SpatialIndexAdapter):
        return points
    index = SpatialIndexAdapter()
    index.build(points)
    return index


def prey_metabolic_cost(genome: Genome, speed_multiplier: float) -> float:
    """
    Energy cost of one prey tick.

    Grows with the square of speed and linearly with size:
    (speed^2 * size * 0.005 + 0.1) * speed_multiplier
    """
    base = genome.speed * genome.speed * genome.size * PREY_METABOLISM_FACTOR + PREY_METABOLISM_BASE
    return base * speed_multiplier


def predator_metabolic_cost(speed_multiplier: float) -> float:
    """Flat predator cost per tick, independent of physical parameters."""
    return PREDATOR_METABOLISM * speed_multiplier


def compute_flee_vector(position: np.ndarray, predators: PointSource) -> np.ndarray:
    """
    Accumulate escape direction away from nearby predators.

    Every predator with PREY_DANGER_EPSILON < dist < PREY_DANGER_RADIUS adds
    the unit vector pointing away from it, weighted by 1 / dist.

    Args:
        position: Prey position [x, y]
        predators: Predator positions (index or (K, 2) array)

    Returns:
        Flee vector [x, y] (zero when no predator is in range)
    """
    index = as_index(predators)
    rows, distances = index.within(position, PREY_DANGER_RADIUS)

    mask = distances > PREY_DANGER_EPSILON
    if not np.any(mask):
        return np.zeros(2, dtype=np.float64)

    rows = rows[mask]
    distances = distances[mask][:, np.newaxis]

    away = (position - index.positions[rows]) / distances
    return np.sum(away / distances, axis=0)


def update_prey_behavior(
    prey: Prey,
    bounds: 'WorldBounds',
    food: PointSource,
    predators: PointSource,
    speed_multiplier: float,
    rng: np.random.Generator
) -> str:
    """
    Advance one prey by one tick.

    Order:
    1. Move along heading, bounce off walls
    2. Flee from predators in danger radius (takes priority over foraging)
    3. Otherwise jitter heading and steer toward nearest visible food
    4. Pay metabolic cost, age by one tick

    Args:
        prey: Prey to update (modified in place)
        bounds: World rectangle
        food: Food positions (index or (M, 2) array)
        predators: Predator positions (index or (K, 2) array)
        speed_multiplier: Global time-speed multiplier
        rng: Simulation random source

    Returns:
        Behavior id chosen this tick ('flee', 'forage' or 'wander')
    """
    # Movement physics
    prey.update_position(speed_multiplier)
    bounce_off_walls(prey.position, prey.velocity, bounds.width, bounds.height)

    flee = compute_flee_vector(prey.position, predators)
    flee_dir, flee_strength = normalize(flee)

    if flee_strength > PREY_FLEE_THRESHOLD:
        prey.velocity = blend_heading(prey.velocity, flee_dir, PREY_FLEE_WEIGHT)
        behavior_id = 'flee'
    else:
        jitter = rng.uniform(-PREY_JITTER_ANGLE, PREY_JITTER_ANGLE)
        prey.velocity = jitter_heading(prey.velocity, jitter)
        behavior_id = 'wander'

        food_index = as_index(food)
        row, _ = food_index.nearest_within(prey.position, prey.genome.sense_radius)
        if row is not None:
            direction, _ = normalize(food_index.positions[row] - prey.position)
            prey.velocity = blend_heading(prey.velocity, direction, PREY_FORAGE_WEIGHT)
            behavior_id = 'forage'

    # Metabolism
    prey.energy -= prey_metabolic_cost(prey.genome, speed_multiplier)
    prey.age += 1

    prey.active_behavior = behavior_id
    return behavior_id


def update_predator_behavior(
    predator: Predator,
    bounds: 'WorldBounds',
    prey: PointSource,
    speed_multiplier: float,
    rng: np.random.Generator
) -> str:
    """
    Advance one predator by one tick.

    Pursuit of the nearest prey inside sense_radius always wins over
    wandering. Metabolic cost is flat.

    Args:
        predator: Predator to update (modified in place)
        bounds: World rectangle
        prey: Prey positions (index or (N, 2) array)
        speed_multiplier: Global time-speed multiplier
        rng: Simulation random source

    Returns:
        Behavior id chosen this tick ('pursue' or 'wander')
    """
    predator.update_position(speed_multiplier)
    bounce_off_walls(predator.position, predator.velocity, bounds.width, bounds.height)

    prey_index = as_index(prey)
    row, _ = prey_index.nearest_within(predator.position, predator.sense_radius)

    if row is not None:
        direction, _ = normalize(prey_index.positions[row] - predator.position)
        predator.velocity = blend_heading(predator.velocity, direction, PREDATOR_PURSUIT_WEIGHT)
        behavior_id = 'pursue'
    else:
        jitter = rng.uniform(-PREDATOR_JITTER_ANGLE, PREDATOR_JITTER_ANGLE)
        predator.velocity = jitter_heading(predator.velocity, jitter)
        behavior_id = 'wander'

    predator.energy -= predator_metabolic_cost(speed_multiplier)

    predator.active_behavior = behavior_id
    return behavior_id
