"""
===============================================================================
ORBIT ENGINE - Orbital Elements
===============================================================================
The six classical elements plus the reference body's gravitational parameter
fully define a two-body orbit:

    a      semi-major axis (m)           > 0 bound, < 0 hyperbolic
    e      eccentricity                  >= 0, selects the conic section
    i      inclination (rad)
    LAN    longitude of ascending node (rad)
    argp   argument of periapsis (rad)
    M0     mean anomaly at epoch (rad)

The conic section is classified exactly once, when the elements are built,
and stored next to them as an OrbitType. Every shape-dependent formula in the
engine dispatches on that stored value:

    CIRCULAR    e == 0
    ELLIPTICAL  0 < e < 1
    PARABOLIC   e == 1     (a is infinite; the a field stores periapsis)
    HYPERBOLIC  e > 1

The reference body is not held directly. Orbits receive a ReferenceBody
capability carrying the only two things the engine reads from it: mu and
the body's absolute position.
===============================================================================
"""

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, NoReturn, Optional

from orbit_engine.core.constants import BODY_MU, GRAVITATIONAL_CONSTANT
from orbit_engine.core.exceptions import InvalidParameterError
from orbit_engine.core.vector import Vector


class OrbitType(Enum):
    CIRCULAR = 'circular'
    ELLIPTICAL = 'elliptical'
    PARABOLIC = 'parabolic'
    HYPERBOLIC = 'hyperbolic'

    @classmethod
    def classify(cls, eccentricity: float) -> 'OrbitType':
        """
        Classify a conic section by its eccentricity.

        Raises
        ------
        InvalidParameterError
            If the eccentricity is negative or not finite.
        """
        if not math.isfinite(eccentricity):
            raise InvalidParameterError(f"Eccentricity must be finite. Got: {eccentricity}")
        if eccentricity < 0:
            raise InvalidParameterError(
                f"Eccentricity must never be negative. Got: {eccentricity}"
            )
        if eccentricity == 0:
            return cls.CIRCULAR
        if eccentricity < 1:
            return cls.ELLIPTICAL
        if eccentricity == 1:
            return cls.PARABOLIC
        return cls.HYPERBOLIC

    @property
    def is_bound(self) -> bool:
        """True for closed orbits (circular and elliptical)."""
        return self in (OrbitType.CIRCULAR, OrbitType.ELLIPTICAL)


def unreachable(orbit_type) -> NoReturn:
    """Fail loudly when a formula meets an orbit type it does not handle."""
    raise AssertionError(f"Unhandled orbit type: {orbit_type!r}")


def _origin() -> Vector:
    return Vector.zero()


@dataclass(frozen=True)
class ReferenceBody:
    """
    Read-only view of the body an orbit is referred to.

    Attributes
    ----------
    gravitational_parameter : float
        Standard gravitational parameter mu = G*M (m^3/s^2).
    position_provider : callable
        Zero-argument callable returning the body's absolute position. Called
        on every absolute-position query, so it may track a moving body.
    name : str
        Label used in log and repr output.
    """
    gravitational_parameter: float
    position_provider: Callable[[], Vector] = _origin
    name: str = 'body'

    def __post_init__(self):
        if not math.isfinite(self.gravitational_parameter) or self.gravitational_parameter < 0:
            raise InvalidParameterError(
                f"Gravitational parameter must be finite and >= 0. "
                f"Got: {self.gravitational_parameter}"
            )

    @classmethod
    def from_mass(cls, mass_kg: float,
                  position_provider: Callable[[], Vector] = _origin,
                  name: str = 'body') -> 'ReferenceBody':
        """Build a reference body from its mass, mu = G * m."""
        return cls(GRAVITATIONAL_CONSTANT * mass_kg, position_provider, name)

    @classmethod
    def named(cls, name: str,
              position_provider: Callable[[], Vector] = _origin) -> 'ReferenceBody':
        """
        Build a well-known body (earth, moon, jupiter, sun) by name.

        Raises
        ------
        InvalidParameterError
            If the name is not in the body table.
        """
        key = name.lower()
        if key not in BODY_MU:
            raise InvalidParameterError(
                f"Unknown body: {name}. Valid: {sorted(BODY_MU)}"
            )
        return cls(BODY_MU[key], position_provider, name)

    @property
    def absolute_position(self) -> Vector:
        return self.position_provider()


@dataclass(frozen=True)
class OrbitalElements:
    """
    Immutable classical orbital elements bound to a gravitational parameter.

    Units:
        gravitational_parameter: m^3/s^2 (0 when there is no reference body)
        semi_major_axis: m (negative for hyperbolic, periapsis for parabolic)
        eccentricity: dimensionless, >= 0
        angles: radians, unbounded

    orbit_type is derived from the eccentricity in __post_init__.
    """
    gravitational_parameter: float
    semi_major_axis: float
    eccentricity: float
    inclination: float = 0.0
    longitude_of_ascending_node: float = 0.0
    argument_of_periapsis: float = 0.0
    mean_anomaly_at_epoch: float = 0.0
    orbit_type: OrbitType = field(init=False)

    def __post_init__(self):
        object.__setattr__(self, 'orbit_type', OrbitType.classify(self.eccentricity))

        if not math.isfinite(self.gravitational_parameter) or self.gravitational_parameter < 0:
            raise InvalidParameterError(
                f"Gravitational parameter must be finite and >= 0. "
                f"Got: {self.gravitational_parameter}"
            )
        if not math.isfinite(self.semi_major_axis):
            raise InvalidParameterError(
                f"Semi-major axis must be finite. Got: {self.semi_major_axis}"
            )
        if self.orbit_type is OrbitType.HYPERBOLIC:
            if self.semi_major_axis >= 0:
                raise InvalidParameterError(
                    f"A hyperbolic orbit needs a negative semi-major axis. "
                    f"Got: {self.semi_major_axis}"
                )
        elif self.semi_major_axis <= 0:
            # a is the periapsis distance for a parabola, so it is positive too
            raise InvalidParameterError(
                f"A {self.orbit_type.value} orbit needs a positive semi-major axis. "
                f"Got: {self.semi_major_axis}"
            )
        for name in ('inclination', 'longitude_of_ascending_node',
                     'argument_of_periapsis', 'mean_anomaly_at_epoch'):
            value = getattr(self, name)
            if not math.isfinite(value):
                raise InvalidParameterError(f"{name} must be finite. Got: {value}")

    @classmethod
    def for_reference(cls, reference: Optional[ReferenceBody], semi_major_axis: float,
                      eccentricity: float, inclination: float = 0.0,
                      longitude_of_ascending_node: float = 0.0,
                      argument_of_periapsis: float = 0.0,
                      mean_anomaly_at_epoch: float = 0.0) -> 'OrbitalElements':
        """Elements whose mu is read once from *reference* (0 when it is None)."""
        mu = reference.gravitational_parameter if reference is not None else 0.0
        return cls(mu, semi_major_axis, eccentricity, inclination,
                   longitude_of_ascending_node, argument_of_periapsis,
                   mean_anomaly_at_epoch)
