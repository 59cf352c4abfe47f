"""
===============================================================================
ORBIT ENGINE - State Vectors <-> Orbital Elements
===============================================================================
Converts between an instantaneous position/velocity pair (relative to the
reference body) and classical orbital elements.

Inverse problem (r, v) -> elements:

    h      = r x v                               (specific angular momentum)
    e_vec  = ((|v|^2 - mu/|r|) r - (r.v) v) / mu (eccentricity vector)
    e      = |e_vec|
    eps    = |v|^2/2 - mu/|r|                    (specific energy)
    a      = -mu / (2 eps)
    i      = acos(h_z / |h|)
    n      = z_hat x h                           (ascending node direction)
    LAN    = acos(n_x / |n|),   2*pi - LAN  if n_y < 0
    argp   = acos(n.e_vec / (|n| e)),  2*pi - argp  if e_z < 0

Edge cases:
    - Equatorial orbit (r_z = v_z = 0): the node line is undefined. LAN is
      set to 0 and argp is measured from the x-axis (mirrored for
      retrograde orbits).
    - Circular orbit (e ~ 0): argp is undefined and set to 0.
    - Parabolic orbit (eps = 0 or e ~ 1): e is pinned to 1 and the
      semi-major axis field stores the periapsis distance h^2 / (2 mu).
    - Rectilinear trajectory (h = 0): no orbital plane and no node axis.
      This raises NumericalInstabilityError.

The phase is not back-solved. Mean anomaly at epoch is always 0.

References
----------
    [1] Vallado, "Fundamentals of Astrodynamics and Applications", 4th ed.,
        Algorithms 9 and 10.
    [2] Curtis, "Orbital Mechanics for Engineering Students", 4th ed.,
        Algorithm 4.2.

===============================================================================
"""

import logging
from typing import Tuple

import numpy as np

from orbit_engine.core.constants import TWO_PI, ECCENTRICITY_TOLERANCE
from orbit_engine.core.exceptions import InvalidParameterError, NumericalInstabilityError
from orbit_engine.core.frames import perifocal_to_reference, rotate_about_node_only
from orbit_engine.core.vector import Vector
from orbit_engine.dynamics.elements import OrbitalElements, ReferenceBody
from orbit_engine.dynamics.geometry import (
    position_on_orbital_plane_at_angle,
    velocity_on_orbital_plane,
)

logger = logging.getLogger(__name__)


def elements_from_state_vectors(
    reference: ReferenceBody,
    position: Vector,
    velocity: Vector,
    eccentricity_tolerance: float = ECCENTRICITY_TOLERANCE,
) -> OrbitalElements:
    """
    Derive orbital elements from a position/velocity pair.

    Parameters
    ----------
    reference : ReferenceBody
        Body the state is relative to. Supplies mu.
    position : Vector
        Position relative to the reference body (m).
    velocity : Vector
        Velocity relative to the reference body (m/s).
    eccentricity_tolerance : float
        Snap threshold for circular (e -> 0) and parabolic (e -> 1) orbits.

    Returns
    -------
    OrbitalElements
        Elements with mean anomaly at epoch 0.

    Raises
    ------
    InvalidParameterError
        If the reference has mu <= 0 or the position is the origin.
    NumericalInstabilityError
        If the angular momentum or node axis is zero, or the ascending node
        evaluates to NaN.
    """
    mu = reference.gravitational_parameter
    if mu <= 0:
        raise InvalidParameterError(
            "Deriving elements needs a reference body with a positive gravitational parameter."
        )

    r_mag = position.magnitude
    if r_mag == 0:
        raise InvalidParameterError("Position coincides with the reference body.")
    speed_squared = velocity.magnitude_squared

    # Angular momentum
    h = position.cross(velocity)
    h_mag = h.magnitude
    if h_mag == 0:
        raise NumericalInstabilityError(
            "Angular momentum is zero (rectilinear trajectory); the orbital plane "
            "and node axis are undefined."
        )

    # Eccentricity vector
    e_vec = (position * (speed_squared - mu / r_mag)
             - velocity * position.dot(velocity)) / mu
    e = e_vec.magnitude

    # Specific mechanical energy -> semi-major axis
    energy = speed_squared / 2.0 - mu / r_mag
    if energy == 0 or abs(e - 1.0) < eccentricity_tolerance:
        e = 1.0
        a = h_mag * h_mag / (2.0 * mu)
    else:
        a = -mu / (2.0 * energy)
        if e < eccentricity_tolerance:
            e = 0.0

    # Inclination
    inc = float(np.arccos(np.clip(h.z / h_mag, -1.0, 1.0)))

    is_equatorial = position.z == 0 and velocity.z == 0
    if not is_equatorial:
        z_hat = Vector(0.0, 0.0, 1.0)
        node_axis = z_hat.cross(h)
        n_mag = node_axis.magnitude
        if n_mag == 0:
            raise NumericalInstabilityError(
                "Node axis has zero magnitude for a non-equatorial state."
            )

        LAN = float(np.arccos(np.clip(node_axis.x / n_mag, -1.0, 1.0)))
        if np.isnan(LAN):
            raise NumericalInstabilityError("Longitude of ascending node is NaN.")
        if node_axis.y < 0:
            LAN = TWO_PI - LAN

        if e > 0:
            cos_argp = node_axis.dot(e_vec) / (n_mag * e_vec.magnitude)
            argp = float(np.arccos(np.clip(cos_argp, -1.0, 1.0)))
            if e_vec.z < 0:
                argp = TWO_PI - argp
        else:
            argp = 0.0

        logger.debug("Node axis %s", node_axis)
    else:
        LAN = 0.0
        if e > 0:
            argp = float(np.arctan2(e_vec.y, e_vec.x))
            if h.z < 0:
                # Retrograde: the x-axis flip of the inclination rotation mirrors argp
                argp = -argp
            argp = float(np.mod(argp, TWO_PI))
        else:
            argp = 0.0

    logger.debug("LAN %.9f, AoP %.9f, inclination %.9f, a %.3f, e %.9f",
                 LAN, argp, inc, a, e)

    return OrbitalElements(
        gravitational_parameter=mu,
        semi_major_axis=a,
        eccentricity=e,
        inclination=inc,
        longitude_of_ascending_node=LAN,
        argument_of_periapsis=argp,
        mean_anomaly_at_epoch=0.0,
    )


def rotate_to_reference_frame(elements: OrbitalElements, v_pqw: Vector,
                              full_orientation: bool = True) -> Vector:
    """
    Rotate an orbital-plane vector into the reference body's frame.

    With *full_orientation* the complete 3-1-3 sequence (argp, inclination,
    LAN) is applied; otherwise only the ascending-node rotation is applied.
    """
    if full_orientation:
        return perifocal_to_reference(
            v_pqw,
            elements.longitude_of_ascending_node,
            elements.inclination,
            elements.argument_of_periapsis,
        )
    return rotate_about_node_only(v_pqw, elements.longitude_of_ascending_node)


def state_vectors_at_true_anomaly(
    elements: OrbitalElements,
    theta: float,
    full_orientation: bool = True,
) -> Tuple[Vector, Vector]:
    """
    Position and velocity relative to the reference body at true anomaly
    *theta*.

    Returns
    -------
    position : Vector
        Position in the reference frame (m).
    velocity : Vector
        Velocity in the reference frame (m/s).
    """
    r_pqw = position_on_orbital_plane_at_angle(elements, theta)
    v_pqw = velocity_on_orbital_plane(elements, theta)
    return (rotate_to_reference_frame(elements, r_pqw, full_orientation),
            rotate_to_reference_frame(elements, v_pqw, full_orientation))
