"""
===============================================================================
ORBIT ENGINE - Kepler's Equation Solver
===============================================================================
Kepler's equation links the mean anomaly M (linear in time) to the eccentric
anomaly E (geometric position on the auxiliary circle):

    M = E - e*sin(E)

It has no closed-form inverse, so E is found with Newton-Raphson:

    f(E)  = E - e*sin(E) - M
    f'(E) = 1 - e*cos(E)
    E    <- E - f(E) / f'(E),       E0 = M

The iteration stops once |f(E)| <= 10^-precision or after a fixed number of
iterations, whichever comes first. The cap bounds the work per call; it is
not a convergence guarantee, and hitting it is logged as a warning.

Only closed orbits (0 <= e < 1) are supported. The returned E is not wrapped
to [0, 2*pi): it stays on the same revolution as the input M. Use
:func:`normalize_angle` when a wrapped value is needed.

References
----------
    [1] Vallado, "Fundamentals of Astrodynamics and Applications", 4th ed.,
        Algorithm 2.
    [2] Danby, "Fundamentals of Celestial Mechanics", 2nd ed., Ch. 6.

===============================================================================
"""

import logging

import numpy as np

from orbit_engine.core.constants import (
    TWO_PI,
    DEFAULT_KEPLER_PRECISION,
    MAX_KEPLER_ITERATIONS,
    NEWTON_DENOMINATOR_TOLERANCE,
)
from orbit_engine.core.exceptions import InvalidParameterError, NumericalInstabilityError

logger = logging.getLogger(__name__)


def calculate_eccentric_anomaly(
    mean_anomaly: float,
    eccentricity: float,
    precision: float = DEFAULT_KEPLER_PRECISION,
    max_iterations: int = MAX_KEPLER_ITERATIONS,
    denominator_tolerance: float = NEWTON_DENOMINATOR_TOLERANCE,
) -> float:
    """
    Solve Kepler's equation for the eccentric anomaly.

    Parameters
    ----------
    mean_anomaly : float
        Mean anomaly M (rad). Not required to be wrapped.
    eccentricity : float
        Orbit eccentricity, 0 <= e < 1.
    precision : float
        Number of decimal places: iteration stops when the residual
        |E - e*sin(E) - M| is at most 10^-precision.
    max_iterations : int
        Hard cap on Newton-Raphson steps.
    denominator_tolerance : float
        Smallest accepted |1 - e*cos(E)|.

    Returns
    -------
    float
        Eccentric anomaly E (rad), not range-normalised.

    Raises
    ------
    InvalidParameterError
        If M is not finite, e < 0, or e >= 1 (open orbits are not
        handled by this solver).
    NumericalInstabilityError
        If the Newton denominator collapses towards zero.
    """
    if not np.isfinite(mean_anomaly):
        raise InvalidParameterError(
            f"Mean anomaly must be finite, got {mean_anomaly}."
        )
    if eccentricity < 0:
        raise InvalidParameterError(
            f"Eccentricity must be >= 0, got {eccentricity}."
        )
    if eccentricity >= 1:
        raise InvalidParameterError(
            f"Kepler solver supports closed orbits only (e < 1), got e = {eccentricity}."
        )

    delta = 10.0 ** (-precision)
    E = float(mean_anomaly)
    residual = E - eccentricity * np.sin(E) - mean_anomaly

    iteration = 0
    while abs(residual) > delta and iteration < max_iterations:
        denominator = 1.0 - eccentricity * np.cos(E)
        if abs(denominator) < denominator_tolerance:
            raise NumericalInstabilityError(
                f"Newton denominator 1 - e*cos(E) = {denominator:.3e} is near zero "
                f"(M = {mean_anomaly}, e = {eccentricity}, E = {E})."
            )
        E = E - residual / denominator
        residual = E - eccentricity * np.sin(E) - mean_anomaly
        iteration += 1

    if abs(residual) > delta:
        logger.warning(
            "Kepler solver hit the %d-iteration cap (M=%.6f, e=%.6f, residual=%.3e)",
            max_iterations, mean_anomaly, eccentricity, residual,
        )
    else:
        logger.debug("Kepler solver converged in %d iterations.", iteration)

    return float(E)


def normalize_angle(angle: float) -> float:
    """Wrap an angle to [0, 2*pi)."""
    wrapped = float(np.mod(angle, TWO_PI))
    # np.mod can return exactly 2*pi for tiny negative inputs
    return 0.0 if wrapped >= TWO_PI else wrapped


def calculate_eccentricity(semi_major_axis: float, semi_minor_axis: float) -> float:
    """
    Eccentricity of an ellipse from its semi-axes:

        e = sqrt(1 - b^2 / a^2)

    Raises
    ------
    InvalidParameterError
        If a is zero or b > a (not an ellipse).
    """
    if semi_major_axis == 0:
        raise InvalidParameterError("Semi-major axis must be non-zero.")
    ratio = (semi_minor_axis / semi_major_axis) ** 2
    if ratio > 1.0:
        raise InvalidParameterError(
            f"Semi-minor axis {semi_minor_axis} exceeds semi-major axis {semi_major_axis}."
        )
    return float(np.sqrt(1.0 - ratio))
