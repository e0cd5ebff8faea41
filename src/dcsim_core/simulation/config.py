# src/dcsim_core/simulation/config.py
import logging
import math
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any, Dict, Optional, Union

import cerberus
import yaml

from ..constants import DEFAULT_MAX_ITER, DEFAULT_TOLERANCE, DEFAULT_DAMPING_FACTOR

logger = logging.getLogger(__name__)


class ConfigParsingError(ValueError):
    """Custom exception for errors during solver configuration parsing."""
    pass


@dataclass(frozen=True)
class SolverConfig:
    """Numeric policy of the Gauss-Seidel solver."""
    max_iter: int = DEFAULT_MAX_ITER
    tolerance: float = DEFAULT_TOLERANCE
    damping_factor: float = DEFAULT_DAMPING_FACTOR

    def __post_init__(self):
        if isinstance(self.max_iter, bool) or not isinstance(self.max_iter, int) or self.max_iter < 1:
            raise ConfigParsingError(f"max_iter must be an integer >= 1, got {self.max_iter!r}.")
        if not math.isfinite(self.tolerance) or self.tolerance <= 0:
            raise ConfigParsingError(f"tolerance must be a finite number > 0, got {self.tolerance!r}.")
        if not (0.0 < self.damping_factor <= 1.0):
            raise ConfigParsingError(f"damping_factor must lie in (0, 1], got {self.damping_factor!r}.")

    def with_overrides(self, **overrides: Optional[Any]) -> "SolverConfig":
        """Returns a copy with every non-None override applied."""
        unknown = set(overrides) - {'max_iter', 'tolerance', 'damping_factor'}
        if unknown:
            raise ConfigParsingError(f"Unknown solver setting(s): {sorted(unknown)}.")
        changes = {key: value for key, value in overrides.items() if value is not None}
        return replace(self, **changes) if changes else self


def _to_integer(value: Any) -> int:
    """Cerberus coercer for counts; rejects non-integral numbers such as 2.7."""
    number = float(value)
    if not number.is_integer():
        raise ValueError(f"{value!r} is not an integral number")
    return int(number)


_CONFIG_SCHEMA = {
    'solver': {
        'type': 'dict',
        'required': False,
        'schema': {
            'max_iter': {'type': 'integer', 'coerce': _to_integer, 'min': 1},
            'tolerance': {'type': 'float', 'coerce': float, 'min': 0.0},
            'damping_factor': {'type': 'float', 'coerce': float, 'min': 0.0, 'max': 1.0},
        },
    },
    'logging': {
        'type': 'dict',
        'required': False,
        'schema': {
            'level': {'type': 'string', 'allowed': ['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'], 'coerce': str.upper},
        },
    },
}


@dataclass(frozen=True)
class RunConfig:
    """A loaded configuration file: solver settings plus an optional log level."""
    solver: SolverConfig
    log_level: Optional[str] = None


def parse_run_config(raw_config: Optional[Dict[str, Any]]) -> RunConfig:
    """
    Validates a raw configuration mapping (as loaded from YAML) and converts it into a
    `RunConfig`. Missing keys fall back to the solver defaults.
    """
    if raw_config is None:
        raw_config = {}
    if not isinstance(raw_config, dict):
        raise ConfigParsingError("Configuration root must be a mapping.")

    validator = cerberus.Validator(_CONFIG_SCHEMA)
    if not validator.validate(raw_config):
        raise ConfigParsingError(f"Invalid configuration: {validator.errors}")

    document = validator.document
    solver = SolverConfig(**document.get('solver', {}))
    log_level = document.get('logging', {}).get('level')
    return RunConfig(solver=solver, log_level=log_level)


def load_run_config(config_path: Union[str, Path]) -> RunConfig:
    """Loads and validates a YAML configuration file."""
    path = Path(config_path)
    try:
        with open(path, 'r', encoding='utf-8') as f:
            raw_config = yaml.safe_load(f)
    except OSError as e:
        raise ConfigParsingError(f"Cannot read configuration file '{path}': {e}") from e
    except yaml.YAMLError as e:
        raise ConfigParsingError(f"Configuration file '{path}' is not valid YAML: {e}") from e

    config = parse_run_config(raw_config)
    logger.info(f"Loaded solver configuration from '{path}': {config.solver}")
    return config


def load_solver_config(config_path: Union[str, Path]) -> SolverConfig:
    """Loads only the solver settings of a YAML configuration file."""
    return load_run_config(config_path).solver
