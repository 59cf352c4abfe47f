"""
===============================================================================
ORBIT ENGINE - Orbital Plane <-> Reference Frame Rotations
===============================================================================
Positions are first computed in the orbital (perifocal, PQW) plane:

    p-hat -> toward periapsis
    q-hat -> 90 deg ahead in the direction of motion
    w-hat -> orbit normal

and then rotated into the reference body's frame by the three orientation
angles of the orbit (3-1-3 Euler sequence):

    1. argument of periapsis       about the orbit normal
    2. inclination                 about the line of nodes
    3. longitude of ascending node about the reference frame's normal

The rotation matrices below follow the frame-rotation (passive) convention,
so the active PQW -> reference rotation is

    R = Rz(-LAN) * Rx(-inc) * Rz(-argp)

:func:`rotate_about_node_only` keeps the legacy single-rotation transform
(ascending node only) for compatibility with orbits authored against it.

References
----------
    [1] Vallado, "Fundamentals of Astrodynamics and Applications", 4th ed.,
        Algorithm 11.
    [2] Curtis, "Orbital Mechanics for Engineering Students", 4th ed., Sec. 4.6.

===============================================================================
"""

import numpy as np

from orbit_engine.core.vector import Vector


# =============================================================================
# ELEMENTARY ROTATION MATRICES
# =============================================================================

def Rx(angle: float) -> np.ndarray:
    """
    Elementary rotation matrix about the X-axis.

        Rx(a) = | 1    0       0     |
                | 0   cos(a)  sin(a)  |
                | 0  -sin(a)  cos(a)  |

    Parameters
    ----------
    angle : float
        Rotation angle in radians.

    Returns
    -------
    np.ndarray
        3x3 rotation matrix.
    """
    c = np.cos(angle)
    s = np.sin(angle)
    return np.array([
        [1.0,  0.0,  0.0],
        [0.0,    c,    s],
        [0.0,   -s,    c],
    ], dtype=np.float64)


def Rz(angle: float) -> np.ndarray:
    """
    Elementary rotation matrix about the Z-axis.

        Rz(a) = |  cos(a)  sin(a)  0 |
                | -sin(a)  cos(a)  0 |
                |    0       0     1 |

    Parameters
    ----------
    angle : float
        Rotation angle in radians.

    Returns
    -------
    np.ndarray
        3x3 rotation matrix.
    """
    c = np.cos(angle)
    s = np.sin(angle)
    return np.array([
        [  c,    s,  0.0],
        [ -s,    c,  0.0],
        [0.0,  0.0,  1.0],
    ], dtype=np.float64)


# =============================================================================
# PERIFOCAL <-> REFERENCE FRAME
# =============================================================================

def perifocal_matrix(LAN: float, inc: float, argp: float) -> np.ndarray:
    """Active rotation matrix taking orbital-plane vectors to the reference frame."""
    return Rz(-LAN) @ Rx(-inc) @ Rz(-argp)


def perifocal_to_reference(v_pqw: Vector, LAN: float,
                           inc: float, argp: float) -> Vector:
    """
    Rotate a vector from the orbital plane into the reference body's frame.

    Parameters
    ----------
    v_pqw : Vector
        Position or velocity expressed in the perifocal frame.
    LAN : float
        Longitude of the ascending node (rad).
    inc : float
        Inclination (rad).
    argp : float
        Argument of periapsis (rad).

    Returns
    -------
    Vector
        The same vector expressed in the reference frame.
    """
    return Vector.from_array(perifocal_matrix(LAN, inc, argp) @ v_pqw.components)


def reference_to_perifocal(v_ref: Vector, LAN: float,
                           inc: float, argp: float) -> Vector:
    """Inverse of :func:`perifocal_to_reference` (the matrix is orthogonal)."""
    return Vector.from_array(perifocal_matrix(LAN, inc, argp).T @ v_ref.components)


def rotate_about_node_only(v_pqw: Vector, LAN: float) -> Vector:
    """
    Legacy partial transform: rotate by the longitude of the ascending node
    about the reference frame's normal and ignore inclination and argument
    of periapsis.
    """
    normal_axis = Vector(0.0, 0.0, 1.0)
    return v_pqw.rotate(normal_axis, LAN)
