"""
Test configuration loading

Verifies YAML → Python dataclass conversion and schema validation.
"""

import sys
import pytest
from pathlib import Path

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent.parent))

from petri.loader import load_config, parse_config, DataLoadError, DEFAULT_CONFIG_PATH, DEFAULT_SCHEMA_DIR
import petri
from petri.data_types import SimulationParams
from petri.simulation import EcosystemSimulation


DATA_ROOT = Path(__file__).parent.parent / "data"
SCHEMA_DIR = DATA_ROOT / "schemas"


def test_load_default_config():
    """Shipped config loads, validates and matches the built-in defaults"""
    config = load_config(DATA_ROOT / "simulation.yaml", SCHEMA_DIR)

    print(f"[OK] Loaded config: {config.description}")
    print(f"  World: {config.world.width:g}x{config.world.height:g}")
    print(f"  Prey: {config.population.initial_prey}, food: {config.population.initial_food}")

    assert config.world.width == 1080.0
    assert config.world.height == 700.0
    assert config.population.initial_prey == 50
    assert config.population.initial_food == 200
    assert config.parameters == SimulationParams()
    assert config.seed is None


def test_out_of_range_parameter_rejected(tmp_path):
    config_file = tmp_path / "bad.yaml"
    config_file.write_text("parameters:\n  mutation_rate: 0.9\n")

    with pytest.raises(DataLoadError, match="Validation error"):
        load_config(config_file, SCHEMA_DIR)


def test_unknown_section_rejected_by_schema(tmp_path):
    config_file = tmp_path / "extra.yaml"
    config_file.write_text("weather:\n  rain: true\n")

    with pytest.raises(DataLoadError):
        load_config(config_file, SCHEMA_DIR)


def test_unknown_key_rejected_without_schema():
    with pytest.raises(DataLoadError, match="Invalid configuration"):
        parse_config({'parameters': {'gravity': 9.8}})


def test_missing_file():
    with pytest.raises(DataLoadError, match="File not found"):
        load_config(Path("/nonexistent/simulation.yaml"), SCHEMA_DIR)


def test_malformed_yaml(tmp_path):
    config_file = tmp_path / "broken.yaml"
    config_file.write_text("parameters: [unclosed\n")

    with pytest.raises(DataLoadError, match="YAML parse error"):
        load_config(config_file, SCHEMA_DIR)


def test_empty_file_uses_defaults(tmp_path):
    config_file = tmp_path / "empty.yaml"
    config_file.write_text("")

    config = load_config(config_file, SCHEMA_DIR)

    assert config.parameters == SimulationParams()
    assert config.population.initial_prey == 50


def test_partial_override(tmp_path):
    config_file = tmp_path / "partial.yaml"
    config_file.write_text(
        "world:\n  width: 400\n  height: 300\n"
        "parameters:\n  speed_multiplier: 2.5\n  predator_count: 2\n"
    )

    config = load_config(config_file, SCHEMA_DIR)

    assert config.world.width == 400
    assert config.parameters.speed_multiplier == 2.5
    assert config.parameters.predator_count == 2
    assert config.parameters.food_growth_rate == 2.0


def test_seeded_config_is_reproducible(tmp_path):
    """from_config with a seed replays identically"""
    config_file = tmp_path / "seeded.yaml"
    config_file.write_text(
        "population:\n  initial_prey: 20\n  initial_food: 50\n"
        "parameters:\n  predator_count: 2\n"
        "seed: petri-replay\n"
    )

    sim1 = EcosystemSimulation.from_config(config_file, SCHEMA_DIR)
    sim2 = EcosystemSimulation.from_config(config_file, SCHEMA_DIR)

    assert len(sim1.prey) == 20
    assert len(sim1.predators) == 2

    for _ in range(30):
        sim1.tick()
        sim2.tick()

    assert sim1.get_snapshot()['prey'] == sim2.get_snapshot()['prey']
    assert sim1.get_snapshot()['food'] == sim2.get_snapshot()['food']

    print("[OK] Seeded config replays identically")


def test_from_config_overrides(tmp_path):
    config_file = tmp_path / "small.yaml"
    config_file.write_text("population:\n  initial_prey: 20\nseed: 3\n")

    sim = EcosystemSimulation.from_config(config_file, SCHEMA_DIR, initial_prey=4, use_ckdtree=False)

    assert len(sim.prey) == 4
    assert sim._food_index.use_ckdtree is False


def test_default_data_pack_ships_inside_package():
    """Default config and schema resolve under the installed petri package"""
    package_dir = Path(petri.__file__).parent

    assert DEFAULT_CONFIG_PATH.is_file()
    assert (DEFAULT_SCHEMA_DIR / "simulation.schema.json").is_file()
    assert package_dir in DEFAULT_CONFIG_PATH.parents
    assert package_dir in DEFAULT_SCHEMA_DIR.parents

    sim = EcosystemSimulation.from_config(seed=8)

    assert len(sim.prey) == 50
    assert len(sim.predators) == 5
    assert len(sim.food) == 200
    print("[OK] from_config() works with default arguments")
