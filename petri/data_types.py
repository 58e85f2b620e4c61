"""
Data types mirroring the YAML configuration structure.

These dataclasses are populated by loader.py from YAML files, or built
directly with their defaults.
"""

from dataclasses import dataclass, field, asdict
from typing import Any, Dict, Optional

from .constants import (
    WORLD_WIDTH_DEFAULT,
    WORLD_HEIGHT_DEFAULT,
    INITIAL_PREY_COUNT,
    INITIAL_FOOD_COUNT,
)


# ============================================================================
# Tunable Parameters
# ============================================================================

@dataclass
class SimulationParams:
    """
    Mutable parameters read every tick.

    Written by the UI collaborator between ticks; the simulation only
    reads them. Slider ranges are enforced at config load (schema), not here.
    """
    food_growth_rate: float = 2.0  # food items per tick (floored), slider [0, 10]
    max_food: int = 1000  # standing food ceiling
    mutation_rate: float = 0.1  # per-trait probability, slider [0, 0.5]
    mutation_strength: float = 0.1  # multiplicative bound, slider [0, 0.5]
    reproduction_threshold: float = 150.0  # prey, slider [50, 300]
    initial_energy: float = 100.0  # seed and failsafe prey, slider [50, 200]
    speed_multiplier: float = 1.0  # global time scale, slider [0.1, 3.0]
    predator_count: int = 5  # seed predators
    predator_reproduction_threshold: float = 200.0  # slider [100, 400]

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


# ============================================================================
# World Definition
# ============================================================================

@dataclass
class WorldBounds:
    """World rectangle [0, width] x [0, height]"""
    width: float = WORLD_WIDTH_DEFAULT
    height: float = WORLD_HEIGHT_DEFAULT


@dataclass
class PopulationConfig:
    """Seed population sizes (predator count lives in SimulationParams)"""
    initial_prey: int = INITIAL_PREY_COUNT
    initial_food: int = INITIAL_FOOD_COUNT


@dataclass
class SimulationConfig:
    """Complete simulation configuration"""
    world: WorldBounds = field(default_factory=WorldBounds)
    population: PopulationConfig = field(default_factory=PopulationConfig)
    parameters: SimulationParams = field(default_factory=SimulationParams)
    seed: Optional[Any] = None  # None = unseeded run
    description: Optional[str] = None


# ============================================================================
# Statistics
# ============================================================================

@dataclass
class PopulationSample:
    """One per-tick statistics sample"""
    population: float
    avg_speed: float
    avg_size: float
    predators: float

    def to_dict(self) -> Dict[str, float]:
        return {
            'population': float(self.population),
            'avg_speed': float(self.avg_speed),
            'avg_size': float(self.avg_size),
            'predators': float(self.predators),
        }
