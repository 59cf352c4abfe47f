"""
===============================================================================
ORBIT ENGINE - Anomaly Conversions
===============================================================================
Three angles locate a body along its orbit:

    theta  true anomaly       angle at the focus from periapsis
    E      eccentric anomaly  angle on the auxiliary circle (or its analogue)
    M      mean anomaly       grows linearly in time, M(t) = n*t + M0

The closed-form relations change with the conic section:

                  theta -> E                         E -> M
    circular      E = theta                          M = E
    elliptical    cos E = (e + cos t)/(1 + e cos t)  M = E - e sin E
    parabolic     D = tan(theta/2)                   M = D + D^3/3   (Barker)
    hyperbolic    cosh F = (e + cos t)/(1 + e cos t) M = e sinh F - F

M -> E has no closed form and goes through the Kepler solver. Engine times
are integer milliseconds; the mean motion n is in rad/s.
===============================================================================
"""

import numpy as np

from orbit_engine.core.constants import (
    MS_PER_SECOND,
    DEFAULT_KEPLER_PRECISION,
    MAX_KEPLER_ITERATIONS,
    NEWTON_DENOMINATOR_TOLERANCE,
)
from orbit_engine.dynamics.elements import OrbitalElements, OrbitType, unreachable
from orbit_engine.dynamics.kepler import calculate_eccentric_anomaly


def acos2(cosine: float, angle: float) -> float:
    """
    Arc-cosine carrying the sign of a companion angle.

    Returns acos(cosine), negated when sin(angle) < 0, so that an angle in
    the lower half-plane maps to an anomaly in (-pi, 0).
    """
    value = float(np.arccos(np.clip(cosine, -1.0, 1.0)))
    return -value if np.sin(angle) < 0 else value


def _cos_eccentric_anomaly(e: float, theta: float) -> float:
    return (e + np.cos(theta)) / (1.0 + e * np.cos(theta))


def eccentric_anomaly_from_true(elements: OrbitalElements, theta: float) -> float:
    """
    Eccentric (or parabolic/hyperbolic) anomaly for a true anomaly theta.

    The result carries the sign of sin(theta) on every conic, so angles
    before periapsis map to negative anomalies.
    """
    orbit_type = elements.orbit_type
    e = elements.eccentricity

    if orbit_type is OrbitType.CIRCULAR:
        return float(theta)
    if orbit_type is OrbitType.ELLIPTICAL:
        return acos2(_cos_eccentric_anomaly(e, theta), theta)
    if orbit_type is OrbitType.PARABOLIC:
        return float(np.tan(theta / 2.0))
    if orbit_type is OrbitType.HYPERBOLIC:
        # cosh F >= 1 on the physical branch; round-off can dip just below
        F = float(np.arccosh(max(_cos_eccentric_anomaly(e, theta), 1.0)))
        return -F if np.sin(theta) < 0 else F
    unreachable(orbit_type)


def mean_anomaly_from_eccentric(elements: OrbitalElements, E: float) -> float:
    """Mean anomaly for an eccentric anomaly E (Kepler/Barker equations)."""
    orbit_type = elements.orbit_type
    e = elements.eccentricity

    if orbit_type is OrbitType.CIRCULAR:
        return float(E)
    if orbit_type is OrbitType.ELLIPTICAL:
        return float(E - e * np.sin(E))
    if orbit_type is OrbitType.PARABOLIC:
        return float(E + E ** 3 / 3.0)
    if orbit_type is OrbitType.HYPERBOLIC:
        return float(e * np.sinh(E) - E)
    unreachable(orbit_type)


def mean_anomaly_from_true(elements: OrbitalElements, theta: float) -> float:
    """Mean anomaly for a true anomaly theta."""
    return mean_anomaly_from_eccentric(elements, eccentric_anomaly_from_true(elements, theta))


def true_anomaly_from_eccentric(elements: OrbitalElements, E: float) -> float:
    """
    True anomaly from the eccentric anomaly of a closed orbit:

        theta = 2 * atan2( sqrt(1+e) * sin(E/2), sqrt(1-e) * cos(E/2) )
    """
    e = elements.eccentricity
    return float(2.0 * np.arctan2(np.sqrt(1.0 + e) * np.sin(E / 2.0),
                                  np.sqrt(1.0 - e) * np.cos(E / 2.0)))


def mean_motion(elements: OrbitalElements) -> float:
    """
    Mean motion n (rad/s).

    Closed orbits use sqrt(mu/a^3); hyperbolic orbits use |a|; parabolic
    orbits use the Barker normalisation sqrt(mu / (2 q^3)) with q the
    periapsis distance stored in the a field.
    """
    orbit_type = elements.orbit_type
    mu = elements.gravitational_parameter
    a = elements.semi_major_axis

    if orbit_type is OrbitType.CIRCULAR or orbit_type is OrbitType.ELLIPTICAL:
        return float(np.sqrt(mu / a ** 3))
    if orbit_type is OrbitType.PARABOLIC:
        return float(np.sqrt(mu / (2.0 * a ** 3)))
    if orbit_type is OrbitType.HYPERBOLIC:
        return float(np.sqrt(mu / (-a) ** 3))
    unreachable(orbit_type)


def mean_anomaly_at_time(elements: OrbitalElements, time_ms: int) -> float:
    """M(t) = n * (t / 1000) + M0 for t in milliseconds since epoch."""
    return mean_motion(elements) * (time_ms / MS_PER_SECOND) + elements.mean_anomaly_at_epoch


def eccentric_anomaly_at_time(
    elements: OrbitalElements,
    time_ms: int,
    precision: float = DEFAULT_KEPLER_PRECISION,
    max_iterations: int = MAX_KEPLER_ITERATIONS,
    denominator_tolerance: float = NEWTON_DENOMINATOR_TOLERANCE,
) -> float:
    """
    Eccentric anomaly at *time_ms*, solved from Kepler's equation.

    Raises
    ------
    InvalidParameterError
        For open orbits (e >= 1), which the solver does not handle.
    """
    return calculate_eccentric_anomaly(
        mean_anomaly_at_time(elements, time_ms),
        elements.eccentricity,
        precision,
        max_iterations,
        denominator_tolerance,
    )


def true_anomaly_at_time(elements: OrbitalElements, time_ms: int, **solver_options) -> float:
    """True anomaly at *time_ms*, in (-pi, pi]."""
    E = eccentric_anomaly_at_time(elements, time_ms, **solver_options)
    return true_anomaly_from_eccentric(elements, E)
