"""
===============================================================================
ORBIT ENGINE - Conic Geometry, Energy and Velocity
===============================================================================
Stateless formulas of the two-body problem evaluated on OrbitalElements.
Every shape-dependent function dispatches on ``elements.orbit_type``:

    semi-latus rectum   p = a                     (circular)
                        p = 2 q                   (parabolic)
                        p = |a (1 - e^2)|         (otherwise)
    radius              r = a                     (circular)
                        r = 2 q / (1 + cos t)     (parabolic)
                        r = p / (1 + e cos t)     (otherwise)
    specific energy     eps = 0                   (parabolic)
                        eps = -mu / (2a)          (otherwise)
    speed               v = sqrt(mu / a)          (circular)
                        v = sqrt(2 mu / r)        (parabolic)
                        v = sqrt(mu (2/r - 1/a))  (vis-viva, otherwise)

q is the periapsis distance. For parabolic orbits it is the value stored in
the semi_major_axis field.

All quantities are SI: m, m/s, s, m^2/s, J/kg.

References
----------
    [1] Bate, Mueller & White, "Fundamentals of Astrodynamics", Ch. 1.
    [2] Curtis, "Orbital Mechanics for Engineering Students", 4th ed., Ch. 2.

===============================================================================
"""

import numpy as np

from orbit_engine.core.constants import TWO_PI, MS_PER_SECOND
from orbit_engine.core.exceptions import InvalidParameterError
from orbit_engine.core.vector import Vector
from orbit_engine.dynamics.elements import OrbitalElements, OrbitType, unreachable
from orbit_engine.dynamics.anomalies import mean_anomaly_from_true


# =============================================================================
# AXES AND RADII
# =============================================================================

def periapsis(elements: OrbitalElements) -> float:
    """Closest distance to the reference body (m)."""
    if elements.orbit_type is OrbitType.PARABOLIC:
        return float(elements.semi_major_axis)
    return float(elements.semi_major_axis * (1.0 - elements.eccentricity))


def apoapsis(elements: OrbitalElements) -> float:
    """Farthest distance from the reference body (m); infinite for open orbits."""
    if elements.orbit_type.is_bound:
        return float(elements.semi_major_axis * (1.0 + elements.eccentricity))
    return float('inf')


def semi_latus_rectum(elements: OrbitalElements) -> float:
    orbit_type = elements.orbit_type
    a = elements.semi_major_axis
    e = elements.eccentricity

    if orbit_type is OrbitType.CIRCULAR:
        return float(a)
    if orbit_type is OrbitType.PARABOLIC:
        return 2.0 * periapsis(elements)
    if orbit_type is OrbitType.ELLIPTICAL or orbit_type is OrbitType.HYPERBOLIC:
        return float(abs(a * (1.0 - e * e)))
    unreachable(orbit_type)


def semi_minor_axis(elements: OrbitalElements) -> float:
    """
    Semi-minor axis b = sqrt(|a| * p).

    Raises
    ------
    InvalidParameterError
        For parabolic orbits, where b is not defined.
    """
    if elements.orbit_type is OrbitType.PARABOLIC:
        raise InvalidParameterError("A parabolic orbit has no semi-minor axis.")
    return float(np.sqrt(abs(elements.semi_major_axis) * semi_latus_rectum(elements)))


def focus_distance(elements: OrbitalElements) -> float:
    """Distance from the centre of the conic to the occupied focus, a*e."""
    return float(elements.semi_major_axis * elements.eccentricity)


def radius_at(elements: OrbitalElements, theta: float) -> float:
    """Distance from the reference body at true anomaly *theta* (m)."""
    orbit_type = elements.orbit_type

    if orbit_type is OrbitType.CIRCULAR:
        return float(elements.semi_major_axis)
    if orbit_type is OrbitType.PARABOLIC:
        return float(2.0 * periapsis(elements) / (1.0 + np.cos(theta)))
    if orbit_type is OrbitType.ELLIPTICAL or orbit_type is OrbitType.HYPERBOLIC:
        return float(semi_latus_rectum(elements) / (1.0 + elements.eccentricity * np.cos(theta)))
    unreachable(orbit_type)


# =============================================================================
# ENERGY AND VELOCITY
# =============================================================================

def specific_orbital_energy(elements: OrbitalElements) -> float:
    """Specific mechanical energy eps = -mu / (2a) (J/kg); zero for a parabola."""
    if elements.orbit_type is OrbitType.PARABOLIC:
        return 0.0
    return float(-elements.gravitational_parameter / (2.0 * elements.semi_major_axis))


def mean_velocity(elements: OrbitalElements) -> float:
    """
    Circular speed sqrt(mu / a) at the semi-major axis (m/s).

    Raises
    ------
    InvalidParameterError
        For open orbits.
    """
    if not elements.orbit_type.is_bound:
        raise InvalidParameterError(
            f"Mean velocity is undefined for a {elements.orbit_type.value} orbit."
        )
    return float(np.sqrt(elements.gravitational_parameter / elements.semi_major_axis))


def velocity_at_radius(elements: OrbitalElements, radius: float) -> float:
    """Orbital speed at distance *radius* from the reference body (m/s)."""
    orbit_type = elements.orbit_type
    mu = elements.gravitational_parameter

    if orbit_type is OrbitType.CIRCULAR:
        return mean_velocity(elements)
    if orbit_type is OrbitType.PARABOLIC:
        return float(np.sqrt(2.0 * mu / radius))
    if orbit_type is OrbitType.ELLIPTICAL or orbit_type is OrbitType.HYPERBOLIC:
        return float(np.sqrt(mu * (2.0 / radius - 1.0 / elements.semi_major_axis)))
    unreachable(orbit_type)


def velocity_at_angle(elements: OrbitalElements, theta: float) -> float:
    """Orbital speed at true anomaly *theta* (m/s)."""
    return velocity_at_radius(elements, radius_at(elements, theta))


def velocity_angle(elements: OrbitalElements, theta: float) -> float:
    """
    Flight-path angle at true anomaly *theta*: the angle between the velocity
    and the local horizontal (rad), positive while climbing away from
    periapsis.
    """
    orbit_type = elements.orbit_type
    e = elements.eccentricity

    if orbit_type is OrbitType.CIRCULAR:
        return 0.0
    if orbit_type is OrbitType.PARABOLIC:
        return float(theta / 2.0)
    if orbit_type is OrbitType.ELLIPTICAL or orbit_type is OrbitType.HYPERBOLIC:
        return float(np.arctan2(e * np.sin(theta), 1.0 + e * np.cos(theta)))
    unreachable(orbit_type)


def areal_velocity(elements: OrbitalElements) -> float:
    """Rate at which the radius vector sweeps area (m^2/s)."""
    orbit_type = elements.orbit_type
    mu = elements.gravitational_parameter
    a = elements.semi_major_axis
    e = elements.eccentricity

    if orbit_type is OrbitType.CIRCULAR:
        return float(np.sqrt(mu * a))
    if orbit_type is OrbitType.ELLIPTICAL:
        return float(np.sqrt(mu * a * (1.0 + e) / (1.0 - e)))
    if orbit_type is OrbitType.PARABOLIC:
        return float(np.sqrt(mu * periapsis(elements) / 2.0))
    if orbit_type is OrbitType.HYPERBOLIC:
        # a < 0 and e > 1, so both factors are positive
        return float(np.sqrt(-mu * a * (e + 1.0) / (e - 1.0)))
    unreachable(orbit_type)


# =============================================================================
# TIMES
# =============================================================================

def period(elements: OrbitalElements) -> float:
    """
    Orbital period from Kepler's third law, T = 2*pi*sqrt(a^3 / mu) (s).

    Raises
    ------
    InvalidParameterError
        For open orbits (no finite period) or when mu <= 0.
    """
    if not elements.orbit_type.is_bound:
        raise InvalidParameterError(
            f"Orbital period is undefined for a {elements.orbit_type.value} orbit "
            f"(e = {elements.eccentricity})."
        )
    if elements.gravitational_parameter <= 0:
        raise InvalidParameterError("Orbital period needs a reference body with mu > 0.")
    return float(TWO_PI * np.sqrt(elements.semi_major_axis ** 3 / elements.gravitational_parameter))


def period_ms(elements: OrbitalElements) -> int:
    """Orbital period rounded to whole milliseconds."""
    return int(round(period(elements) * MS_PER_SECOND))


def time_from_periapsis(elements: OrbitalElements, theta: float) -> float:
    """
    Time (s) from periapsis passage to true anomaly *theta*.

    Negative for theta in (-pi, 0), i.e. before periapsis.

    Raises
    ------
    InvalidParameterError
        For open orbits (e >= 1).
    """
    if elements.eccentricity >= 1:
        raise InvalidParameterError(
            f"Time from periapsis is only implemented for closed orbits, e = {elements.eccentricity}."
        )
    return mean_anomaly_from_true(elements, theta) * period(elements) / TWO_PI


# =============================================================================
# ORBITAL-PLANE STATE
# =============================================================================

def position_on_orbital_plane(elements: OrbitalElements, E: float) -> Vector:
    """
    Perifocal position for eccentric anomaly *E* of a closed orbit:

        x = a (cos E - e),   y = a sqrt(1 - e^2) sin E

    The focus is at the origin and +x points toward periapsis.
    """
    if not elements.orbit_type.is_bound:
        raise InvalidParameterError(
            f"Eccentric-anomaly position is only defined for closed orbits, "
            f"got a {elements.orbit_type.value} orbit."
        )
    a = elements.semi_major_axis
    e = elements.eccentricity
    return Vector(a * (np.cos(E) - e), a * np.sqrt(1.0 - e * e) * np.sin(E), 0.0)


def position_on_orbital_plane_at_angle(elements: OrbitalElements, theta: float) -> Vector:
    """Perifocal position at true anomaly *theta*: r * (cos t, sin t, 0)."""
    r = radius_at(elements, theta)
    return Vector(r * np.cos(theta), r * np.sin(theta), 0.0)


def velocity_on_orbital_plane(elements: OrbitalElements, theta: float) -> Vector:
    """
    Perifocal velocity at true anomaly *theta*:

        v = sqrt(mu / p) * (-sin t, e + cos t, 0)
    """
    p = semi_latus_rectum(elements)
    e = elements.eccentricity
    scale = np.sqrt(elements.gravitational_parameter / p)
    return Vector(-scale * np.sin(theta), scale * (e + np.cos(theta)), 0.0)
