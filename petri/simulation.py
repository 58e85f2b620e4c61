"""
Petri simulation kernel.

Main simulation class that owns the prey, predator and food collections,
advances them one tick at a time and feeds the population statistics.
"""

import numpy as np
import os
import time
from typing import Any, Dict, List, Optional, Set
from pathlib import Path

from .entity import Prey, Predator
from .data_types import SimulationParams, WorldBounds, SimulationConfig
from .spawning import spawn_prey, spawn_predators, spawn_food
from .behavior import update_prey_behavior, update_predator_behavior
from .spatial_queries import SpatialIndexAdapter
from .stats import PopulationStats
from .loader import load_config, DEFAULT_CONFIG_PATH, DEFAULT_SCHEMA_DIR
from .rng import make_rng
from .constants import (
    INITIAL_PREY_COUNT,
    INITIAL_FOOD_COUNT,
    FAILSAFE_RESEED_COUNT,
    FOOD_CONTACT_MARGIN,
    FOOD_ENERGY,
    PREY_ENERGY_REWARD,
    MAX_HISTORY,
    TICK_TIME_WINDOW,
)


class EcosystemSimulation:
    """
    Main simulation class for the bacterial ecosystem.

    Owns agent and food collections, the tunable SimulationParams, the
    injected random source and the rolling PopulationStats.

    External collaborators (renderer, UI panel) read prey, predators, food
    and stats, write params between ticks, and flip `paused`.
    """

    def __init__(
        self,
        params: Optional[SimulationParams] = None,
        bounds: Optional[WorldBounds] = None,
        rng: Optional[np.random.Generator] = None,
        seed: Optional[Any] = None,
        initial_prey: int = INITIAL_PREY_COUNT,
        initial_predators: Optional[int] = None,
        initial_food: int = INITIAL_FOOD_COUNT,
        stats_capacity: int = MAX_HISTORY,
        use_ckdtree: Optional[bool] = None
    ):
        """
        Initialize simulation and spawn the seed population.

        Args:
            params: Tunable parameters (defaults if None)
            bounds: World rectangle (defaults if None)
            rng: Injected random source (takes precedence over seed)
            seed: Optional run seed for make_rng(); None = unseeded run
            initial_prey: Seed prey count
            initial_predators: Seed predator count (None = params.predator_count)
            initial_food: Seed food count
            stats_capacity: Rolling history length
            use_ckdtree: Override USE_CKDTREE constant (for A/B testing)
        """
        self.params: SimulationParams = params if params is not None else SimulationParams()
        self.bounds: WorldBounds = bounds if bounds is not None else WorldBounds()
        self.rng: np.random.Generator = rng if rng is not None else make_rng(seed)

        # Simulation state
        self.paused: bool = False
        self.tick_count: int = 0
        self.stats = PopulationStats(capacity=stats_capacity)

        # Spatial snapshots (rebuilt per pass)
        self._food_index = SpatialIndexAdapter(use_ckdtree=use_ckdtree)
        self._predator_index = SpatialIndexAdapter(use_ckdtree=use_ckdtree)
        self._prey_index = SpatialIndexAdapter(use_ckdtree=use_ckdtree)

        # Performance metrics
        self._tick_times: List[float] = []
        self._tick_time_sum: float = 0.0
        self._tick_time_window: int = TICK_TIME_WINDOW  # Rolling average window
        self._index_build_ms: float = 0.0  # Spatial index builds, last advanced tick

        # Ecosystem telemetry
        self._telemetry: Dict[str, int] = {
            'prey_births_this_tick': 0,
            'predator_births_this_tick': 0,
            'prey_eaten_this_tick': 0,
            'starved_this_tick': 0,
            'food_eaten_this_tick': 0,
            'total_prey_births': 0,
            'total_predator_births': 0,
            'total_prey_eaten': 0,
            'failsafe_reseeds': 0,
        }

        # Spawn seed population
        if initial_predators is None:
            initial_predators = int(self.params.predator_count)

        self.prey: List[Prey] = spawn_prey(initial_prey, self.bounds, self.params.initial_energy, self.rng)
        self.predators: List[Predator] = spawn_predators(initial_predators, self.bounds, self.rng)
        self.food: np.ndarray = spawn_food(initial_food, self.bounds, self.rng)

        print(f"[OK] Simulation initialized: {len(self.prey)} prey, {len(self.predators)} predators, "
              f"{len(self.food)} food, world={self.bounds.width:g}x{self.bounds.height:g}")

    @classmethod
    def from_config(
        cls,
        config_path: Path = DEFAULT_CONFIG_PATH,
        schema_dir: Optional[Path] = DEFAULT_SCHEMA_DIR,
        **overrides
    ) -> 'EcosystemSimulation':
        """
        Build simulation from a YAML configuration file.

        Args:
            config_path: Path to simulation YAML
            schema_dir: Optional path to JSON schemas
            **overrides: Constructor keyword overrides (e.g. rng, use_ckdtree)

        Raises:
            DataLoadError: If the file is missing or invalid
        """
        config = load_config(config_path, schema_dir)
        return cls.from_simulation_config(config, **overrides)

    @classmethod
    def from_simulation_config(cls, config: SimulationConfig, **overrides) -> 'EcosystemSimulation':
        """Build simulation from an already parsed SimulationConfig."""
        kwargs = {
            'params': config.parameters,
            'bounds': config.world,
            'seed': config.seed,
            'initial_prey': config.population.initial_prey,
            'initial_food': config.population.initial_food,
        }
        kwargs.update(overrides)
        return cls(**kwargs)

    def toggle_pause(self) -> bool:
        """Flip the pause flag and return the new state."""
        self.paused = not self.paused
        return self.paused

    def tick(self):
        """
        Advance simulation by one time step.

        TICK ORDER (behavior-relevant, do not reorder):

        1. Food growth (below ceiling)
        2. Prey pass: move/steer, eat food (first touch wins), predator
           contact check (death pre-empts reproduction), reproduction into
           a birth buffer
        3. Predator pass: move/hunt, capture prey not already eaten,
           reproduction into a birth buffer
        4. Commit: drop eaten food and prey, append births, prune starved
        5. Extinction failsafe: reseed prey if none remain

        When paused, steps 1-5 are skipped. Statistics are recorded on
        every call, paused or not.
        """
        start_time = time.perf_counter()

        if not self.paused:
            self.tick_count += 1
            self._advance()

        self.stats.record(self.prey, len(self.predators))

        # Record timing
        elapsed = time.perf_counter() - start_time
        self._record_tick_time(elapsed)

        # Debug invariant check (zero perf impact when env var not set)
        if os.getenv('PETRI_DEBUG_INVARIANTS') == '1':
            self._check_invariants()

    def _advance(self):
        """Run tick steps 1-5 (not paused)."""
        params = self.params
        speed_multiplier = params.speed_multiplier

        # ============================================================
        # PHASE 1: FOOD GROWTH
        # ============================================================

        self._grow_food()

        # ============================================================
        # PHASE 2: PREY PASS
        # ============================================================
        # Predators have not moved yet: their snapshot is exact for the
        # whole pass. Food is never removed mid-pass, only marked eaten.

        self._food_index.build(self.food)
        self._predator_index.build(self._predator_positions())
        predator_sizes = np.array([p.size for p in self.predators], dtype=np.float64)
        max_predator_size = float(predator_sizes.max()) if len(predator_sizes) else 0.0

        eaten_food = np.zeros(len(self.food), dtype=bool)
        eaten_prey: Set[int] = set()
        prey_births: List[Prey] = []
        food_eaten = 0

        for idx, prey in enumerate(self.prey):
            update_prey_behavior(
                prey, self.bounds, self._food_index, self._predator_index, speed_multiplier, self.rng
            )

            # Eat food
            rows, _ = self._food_index.within(prey.position, prey.genome.size + FOOD_CONTACT_MARGIN)
            fresh = rows[~eaten_food[rows]]
            if len(fresh):
                prey.energy += FOOD_ENERGY * len(fresh)
                eaten_food[fresh] = True
                food_eaten += len(fresh)

            # Check if eaten by predator
            if self._touches_predator(prey, predator_sizes, max_predator_size):
                eaten_prey.add(idx)
                continue

            # Reproduce (if not eaten)
            if prey.energy > params.reproduction_threshold:
                prey_births.append(prey.reproduce(params, self.rng))

        # ============================================================
        # PHASE 3: PREDATOR PASS
        # ============================================================
        # Prey positions are final for this tick; predators sense every
        # prey, including those already marked eaten.

        self._prey_index.build(self._prey_positions())
        prey_sizes = np.array([p.genome.size for p in self.prey], dtype=np.float64)
        max_prey_size = float(prey_sizes.max()) if len(prey_sizes) else 0.0

        self._index_build_ms = (
            self._food_index.last_build_ms
            + self._predator_index.last_build_ms
            + self._prey_index.last_build_ms
        )

        predator_births: List[Predator] = []

        for predator in self.predators:
            update_predator_behavior(predator, self.bounds, self._prey_index, speed_multiplier, self.rng)

            # Eat prey
            rows, distances = self._prey_index.within(predator.position, predator.size + max_prey_size)
            for row, dist in zip(rows.tolist(), distances.tolist()):
                if row in eaten_prey:
                    continue
                if dist < predator.size + prey_sizes[row]:
                    predator.energy += PREY_ENERGY_REWARD
                    eaten_prey.add(row)

            # Reproduce
            if predator.energy > params.predator_reproduction_threshold:
                predator_births.append(predator.reproduce())

        # ============================================================
        # PHASE 4: COMMIT
        # ============================================================

        self.food = self.food[~eaten_food]

        if eaten_prey:
            self.prey = [p for i, p in enumerate(self.prey) if i not in eaten_prey]

        self.prey.extend(prey_births)
        self.predators.extend(predator_births)

        prey_before_prune = len(self.prey)
        predators_before_prune = len(self.predators)
        self.prey = [p for p in self.prey if p.is_alive]
        self.predators = [p for p in self.predators if p.is_alive]
        starved = (prey_before_prune - len(self.prey)) + (predators_before_prune - len(self.predators))

        # ============================================================
        # PHASE 5: EXTINCTION FAILSAFE
        # ============================================================
        # Prey only; predator extinction is terminal

        if not self.prey:
            self.prey = spawn_prey(FAILSAFE_RESEED_COUNT, self.bounds, params.initial_energy, self.rng)
            self._telemetry['failsafe_reseeds'] += 1
            print(f"[WARN] Prey extinct at tick {self.tick_count}, "
                  f"reseeded {FAILSAFE_RESEED_COUNT} prey")

        # Update telemetry
        self._telemetry['prey_births_this_tick'] = len(prey_births)
        self._telemetry['predator_births_this_tick'] = len(predator_births)
        self._telemetry['prey_eaten_this_tick'] = len(eaten_prey)
        self._telemetry['starved_this_tick'] = starved
        self._telemetry['food_eaten_this_tick'] = food_eaten
        self._telemetry['total_prey_births'] += len(prey_births)
        self._telemetry['total_predator_births'] += len(predator_births)
        self._telemetry['total_prey_eaten'] += len(eaten_prey)

    def _grow_food(self):
        """Append floor(food_growth_rate) food items while below max_food."""
        if len(self.food) >= self.params.max_food:
            return

        to_add = max(int(np.floor(self.params.food_growth_rate)), 0)
        if to_add == 0:
            return

        new_food = spawn_food(to_add, self.bounds, self.rng)
        self.food = np.vstack((self.food, new_food))

    def _touches_predator(self, prey: Prey, predator_sizes: np.ndarray, max_predator_size: float) -> bool:
        """True if prey is inside any predator's lethal radius (predator size + prey size)."""
        if len(predator_sizes) == 0:
            return False

        rows, distances = self._predator_index.within(prey.position, max_predator_size + prey.genome.size)
        if len(rows) == 0:
            return False

        return bool(np.any(distances < predator_sizes[rows] + prey.genome.size))

    def _prey_positions(self) -> np.ndarray:
        if not self.prey:
            return np.empty((0, 2), dtype=np.float64)
        return np.array([p.position for p in self.prey], dtype=np.float64)

    def _predator_positions(self) -> np.ndarray:
        if not self.predators:
            return np.empty((0, 2), dtype=np.float64)
        return np.array([p.position for p in self.predators], dtype=np.float64)

    def _check_invariants(self):
        lengths = {
            len(self.stats.population_history),
            len(self.stats.avg_speed_history),
            len(self.stats.avg_size_history),
            len(self.stats.predator_history),
        }
        assert len(lengths) == 1, f"Statistics series lengths differ: {lengths}"
        assert len(self.stats) <= self.stats.capacity, \
            f"Statistics length {len(self.stats)} exceeds capacity {self.stats.capacity}"
        if not self.paused:
            assert self.prey, "Prey population empty after tick (failsafe did not run)"
        assert self.food.ndim == 2 and self.food.shape[1] == 2, \
            f"Food array has shape {self.food.shape}"

    def get_telemetry(self) -> dict:
        """Births, captures, starvation and failsafe counters (copy)."""
        return dict(self._telemetry)

    def get_tick_stats(self) -> dict:
        """
        Get current tick timing statistics.

        Returns:
            Dict with tick_count, avg_tick_time_ms, last_tick_time_ms,
            index_build_ms (cKDTree builds of the last advanced tick)
        """
        if not self._tick_times:
            return {
                'tick_count': self.tick_count,
                'avg_tick_time_ms': 0.0,
                'last_tick_time_ms': 0.0,
                'index_build_ms': self._index_build_ms
            }

        avg_time = self._tick_time_sum / len(self._tick_times)
        last_time = self._tick_times[-1]

        return {
            'tick_count': self.tick_count,
            'avg_tick_time_ms': avg_time * 1000.0,
            'last_tick_time_ms': last_time * 1000.0,
            'index_build_ms': self._index_build_ms
        }

    def _record_tick_time(self, elapsed: float):
        """
        Record tick timing for rolling average.

        Args:
            elapsed: Tick time in seconds
        """
        self._tick_times.append(elapsed)
        self._tick_time_sum += elapsed

        # Maintain rolling window
        if len(self._tick_times) > self._tick_time_window:
            removed = self._tick_times.pop(0)
            self._tick_time_sum -= removed

    def get_snapshot(self) -> dict:
        """
        Get complete simulation state snapshot for renderers.

        Returns:
            Dict with tick_count, paused, bounds, params, prey, predators,
            food, stats, telemetry, timing
        """
        return {
            'tick_count': self.tick_count,
            'paused': self.paused,
            'bounds': {'width': self.bounds.width, 'height': self.bounds.height},
            'params': self.params.to_dict(),
            'prey_count': len(self.prey),
            'predator_count': len(self.predators),
            'food_count': len(self.food),
            'prey': [p.to_dict() for p in self.prey],
            'predators': [p.to_dict() for p in self.predators],
            'food': self.food.tolist(),
            'stats': self.stats.to_dict(),
            'telemetry': self.get_telemetry(),
            'timing': self.get_tick_stats()
        }

    def print_tick_summary(self):
        """Print tick summary to console (lightweight monitoring)"""
        stats = self.get_tick_stats()
        print(f"Tick {stats['tick_count']:5d} | "
              f"Avg: {stats['avg_tick_time_ms']:6.3f} ms | "
              f"Last: {stats['last_tick_time_ms']:6.3f} ms | "
              f"Index: {stats['index_build_ms']:6.3f} ms | "
              f"Prey: {len(self.prey)} | "
              f"Predators: {len(self.predators)} | "
              f"Food: {len(self.food)}")
