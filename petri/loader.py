"""
YAML configuration loader with schema validation.

Loads world bounds, seed population sizes, tunable parameters and the
optional run seed from a YAML file and validates against a JSON schema.
"""

import yaml
import json
from pathlib import Path
from typing import Optional
import jsonschema

from .data_types import SimulationConfig, SimulationParams, WorldBounds, PopulationConfig


# Data pack shipped inside the package (petri/data/simulation.yaml, petri/data/schemas/*.schema.json)
DEFAULT_DATA_ROOT = Path(__file__).parent / "data"
DEFAULT_CONFIG_PATH = DEFAULT_DATA_ROOT / "simulation.yaml"
DEFAULT_SCHEMA_DIR = DEFAULT_DATA_ROOT / "schemas"


class DataLoadError(Exception):
    """Raised when data loading or validation fails"""
    pass


def load_yaml(file_path: Path) -> dict:
    """Load YAML file and return parsed dict"""
    if not file_path.exists():
        raise DataLoadError(f"File not found: {file_path}")

    try:
        with open(file_path, 'r') as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise DataLoadError(f"YAML parse error in {file_path}: {e}")

    # Empty file parses to None
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise DataLoadError(f"Expected a mapping at top level of {file_path}")
    return data


def validate_against_schema(data: dict, schema_path: Path, data_path: Path):
    """Validate data dict against JSON schema"""
    if not schema_path.exists():
        # Schema validation optional
        return

    try:
        with open(schema_path, 'r') as f:
            schema = json.load(f)
        jsonschema.validate(instance=data, schema=schema)
    except jsonschema.ValidationError as e:
        raise DataLoadError(f"Validation error in {data_path}: {e.message}")
    except json.JSONDecodeError as e:
        raise DataLoadError(f"Invalid JSON schema {schema_path}: {e}")


def parse_config(data: dict, source: str = "<dict>") -> SimulationConfig:
    """
    Build SimulationConfig from a parsed config dict.

    Missing sections fall back to dataclass defaults.

    Raises:
        DataLoadError: On unknown keys in a section
    """
    try:
        world = WorldBounds(**data.get('world', {}))
        population = PopulationConfig(**data.get('population', {}))
        parameters = SimulationParams(**data.get('parameters', {}))
    except TypeError as e:
        raise DataLoadError(f"Invalid configuration in {source}: {e}")

    return SimulationConfig(
        world=world,
        population=population,
        parameters=parameters,
        seed=data.get('seed'),
        description=data.get('description')
    )


def load_config(file_path: Path = DEFAULT_CONFIG_PATH, schema_dir: Optional[Path] = DEFAULT_SCHEMA_DIR) -> SimulationConfig:
    """Load simulation configuration from YAML"""
    file_path = Path(file_path)
    data = load_yaml(file_path)

    # Validate if schema available
    if schema_dir:
        schema_path = Path(schema_dir) / "simulation.schema.json"
        validate_against_schema(data, schema_path, file_path)

    return parse_config(data, source=str(file_path))
