"""
===============================================================================
ORBIT ENGINE
===============================================================================
Time-dependent geometry of two-body Keplerian orbits: orbital elements,
Kepler's equation, anomaly conversions, conic geometry, and the conversion
between elements and position/velocity state vectors.

Packages:
    core      -- constants, Vector algebra, frame rotations, errors, config
    dynamics  -- elements, Kepler solver, anomalies, geometry, Orbit facade
===============================================================================
"""

from orbit_engine.core.config import EngineConfig, load_config, configure_logging
from orbit_engine.core.exceptions import (
    OrbitError,
    InvalidParameterError,
    NumericalInstabilityError,
    NotRenderedError,
)
from orbit_engine.core.vector import Vector
from orbit_engine.dynamics.elements import OrbitalElements, OrbitType, ReferenceBody
from orbit_engine.dynamics.kepler import calculate_eccentric_anomaly
from orbit_engine.dynamics.state_vectors import elements_from_state_vectors
from orbit_engine.dynamics.orbit import Orbit, RenderedState

__version__ = "0.1.0"
