"""
===============================================================================
ORBIT ENGINE - Configuration and Logging Setup
===============================================================================
Numerical knobs of the engine live in a single immutable EngineConfig. The
defaults reproduce the reference behaviour (10-decimal Kepler precision,
30-iteration cap); a YAML file can override any of them:

    engine:
      kepler_precision: 12
      max_kepler_iterations: 30
      denominator_tolerance: 1.0e-12
      eccentricity_tolerance: 1.0e-10
      full_orientation: true
      log_level: INFO

See config/engine_config.yaml for the shipped defaults.
===============================================================================
"""

import sys
import logging
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Optional, Union

import yaml

from orbit_engine.core.constants import (
    DEFAULT_KEPLER_PRECISION,
    MAX_KEPLER_ITERATIONS,
    NEWTON_DENOMINATOR_TOLERANCE,
    ECCENTRICITY_TOLERANCE,
)
from orbit_engine.core.exceptions import InvalidParameterError

logger = logging.getLogger(__name__)

LOG_FORMAT = '%(asctime)s [%(levelname)s] %(name)s: %(message)s'


@dataclass(frozen=True)
class EngineConfig:
    """
    Numerical settings shared by every Orbit built with this config.

    Attributes
    ----------
    kepler_precision : int
        Decimal precision p of the Kepler solver (residual < 10^-p).
    max_kepler_iterations : int
        Hard cap on Newton-Raphson iterations.
    denominator_tolerance : float
        Smallest accepted |1 - e*cos(E)| before the solver gives up.
    eccentricity_tolerance : float
        Derived eccentricities within this distance of 0 or 1 are snapped to
        circular or parabolic by :meth:`Orbit.from_state_vectors`.
    full_orientation : bool
        True applies the full 3-1-3 rotation (LAN, inclination, argument of
        periapsis). False applies only the ascending-node rotation.
    log_level : str
        Level name passed to :func:`configure_logging`.
    """
    kepler_precision: int = DEFAULT_KEPLER_PRECISION
    max_kepler_iterations: int = MAX_KEPLER_ITERATIONS
    denominator_tolerance: float = NEWTON_DENOMINATOR_TOLERANCE
    eccentricity_tolerance: float = ECCENTRICITY_TOLERANCE
    full_orientation: bool = True
    log_level: str = 'WARNING'

    def __post_init__(self):
        if self.kepler_precision <= 0:
            raise InvalidParameterError(
                f"kepler_precision must be positive, got {self.kepler_precision}"
            )
        if self.max_kepler_iterations <= 0:
            raise InvalidParameterError(
                f"max_kepler_iterations must be positive, got {self.max_kepler_iterations}"
            )
        if self.denominator_tolerance < 0 or self.eccentricity_tolerance < 0:
            raise InvalidParameterError("Tolerances must be non-negative.")
        if logging.getLevelName(self.log_level.upper()) not in (
                logging.DEBUG, logging.INFO, logging.WARNING,
                logging.ERROR, logging.CRITICAL):
            raise InvalidParameterError(f"Unknown log level: {self.log_level}")

    def with_overrides(self, **overrides) -> 'EngineConfig':
        """Return a copy with the given fields replaced."""
        return replace(self, **overrides)


DEFAULT_CONFIG = EngineConfig()


def load_config(config_path: Optional[Union[str, Path]] = None) -> EngineConfig:
    """
    Load engine configuration from a YAML file.

    Args:
        config_path: Path to a YAML file with an ``engine:`` section. None
            returns the defaults.

    Returns:
        EngineConfig built from the file, defaults filling missing keys.

    Raises:
        InvalidParameterError: If the file has unknown keys or bad values.
    """
    if config_path is None:
        return DEFAULT_CONFIG

    logger.info(f"Loading engine configuration from: {config_path}")
    with open(config_path, 'r') as f:
        raw = yaml.safe_load(f) or {}

    section = raw.get('engine', {}) or {}
    if not isinstance(section, dict):
        raise InvalidParameterError("'engine' section must be a mapping.")

    known = {f.name for f in fields(EngineConfig)}
    unknown = sorted(set(section) - known)
    if unknown:
        raise InvalidParameterError(
            f"Unknown engine configuration keys: {unknown}. Valid: {sorted(known)}"
        )
    return EngineConfig(**section)


def configure_logging(level: Union[str, int] = 'WARNING',
                      log_file: Optional[Union[str, Path]] = None) -> None:
    """
    Install a root handler with the engine's log format.

    Args:
        level: Logging level name or number.
        log_file: Optional file that receives the same records as stdout.
    """
    handlers = [logging.StreamHandler(sys.stdout)]
    if log_file is not None:
        handlers.append(logging.FileHandler(log_file, mode='w'))

    if isinstance(level, str):
        level = level.upper()
    logging.basicConfig(level=level, format=LOG_FORMAT, handlers=handlers, force=True)
