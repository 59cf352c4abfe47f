"""
===============================================================================
ORBIT ENGINE - 3D Vector Algebra
===============================================================================

Value-type 3-vector used for every position, velocity and axis handled by the
orbit engine. Components are stored in a float64 numpy array; every operation
returns a new Vector, so instances can be shared freely between the engine,
rendered snapshots and callers without defensive copies.

Equality
--------
Orbit geometry is a steady source of accumulated floating-point error (a
position rotated by three Euler angles will not reproduce the same bits as a
position computed directly), so ``==`` compares component-wise within
``EPSILON``. Use :meth:`Vector.is_close` to pass an explicit tolerance.
Because equality is approximate, vectors are deliberately unhashable.

Rotation
--------
:meth:`Vector.rotate` applies a right-handed rotation by ``theta`` about an
arbitrary axis using the Rodrigues rotation matrix:

    R = c*I + s*[k]x + t*k k^T,   c = cos(theta), s = sin(theta), t = 1 - c

where k is the unit axis. The vector's magnitude is preserved.

References
----------
    [1] Rodrigues, "Des lois geometriques qui regissent les deplacements
        d'un systeme solide", J. Math. Pures Appl., 1840.
    [2] Vallado, "Fundamentals of Astrodynamics and Applications", 4th ed.,
        Sec. 3.3.

===============================================================================
"""

import numbers
from typing import Iterator

import numpy as np

from orbit_engine.core.constants import EPSILON
from orbit_engine.core.exceptions import NumericalInstabilityError


class Vector:
    """
    Immutable 3-component real vector.

    Attributes
    ----------
    x : float
        First component.
    y : float
        Second component.
    z : float
        Third component (defaults to 0 for planar vectors).

    Examples
    --------
    >>> v = Vector(1.0, 0.0, 0.0)
    >>> v.rotate(Vector(0.0, 0.0, 1.0), np.pi / 2)
    Vector(x=+0.00000000, y=+1.00000000, z=+0.00000000)
    """

    # Magnitude below which a vector has no usable direction
    _ZERO_TOLERANCE = 1e-300

    __slots__ = ('_v',)

    def __init__(self, x: float, y: float, z: float = 0.0) -> None:
        self._v = np.array([x, y, z], dtype=np.float64)

    # =========================================================================
    # FACTORY METHODS
    # =========================================================================

    @staticmethod
    def from_array(values) -> 'Vector':
        """
        Build a Vector from any 3-element sequence or numpy array.

        Raises
        ------
        ValueError
            If *values* does not hold exactly three components.
        """
        arr = np.asarray(values, dtype=np.float64).reshape(-1)
        if arr.shape != (3,):
            raise ValueError(f"Vector needs 3 components, got shape {arr.shape}")
        return Vector(arr[0], arr[1], arr[2])

    @staticmethod
    def zero() -> 'Vector':
        """The null vector."""
        return Vector(0.0, 0.0, 0.0)

    @staticmethod
    def direction(angle: float) -> 'Vector':
        """
        Unit vector in the xy-plane pointing at *angle* from the x-axis.

        Parameters
        ----------
        angle : float
            Direction angle (rad), counter-clockwise from +x.
        """
        return Vector(np.cos(angle), np.sin(angle), 0.0)

    # =========================================================================
    # PROPERTIES
    # =========================================================================

    @property
    def x(self) -> float:
        return float(self._v[0])

    @property
    def y(self) -> float:
        return float(self._v[1])

    @property
    def z(self) -> float:
        return float(self._v[2])

    @property
    def components(self) -> np.ndarray:
        """Copy of the components as a float64 array [x, y, z]."""
        return self._v.copy()

    @property
    def magnitude_squared(self) -> float:
        return float(np.dot(self._v, self._v))

    @property
    def magnitude(self) -> float:
        """Euclidean norm sqrt(x^2 + y^2 + z^2)."""
        return float(np.linalg.norm(self._v))

    @property
    def longitude(self) -> float:
        """Angle of the xy-projection from the x-axis, atan2(y, x), in (-pi, pi]."""
        return float(np.arctan2(self._v[1], self._v[0]))

    # =========================================================================
    # ALGEBRA
    # =========================================================================

    def normalized(self) -> 'Vector':
        """
        Unit vector with the same direction.

        Raises
        ------
        NumericalInstabilityError
            If the vector has (near-)zero magnitude and therefore no direction.
        """
        length = self.magnitude
        if length < self._ZERO_TOLERANCE:
            raise NumericalInstabilityError(
                "Cannot normalize a zero-magnitude vector."
            )
        return Vector.from_array(self._v / length)

    def dot(self, other: 'Vector') -> float:
        """Scalar product."""
        return float(np.dot(self._v, other._v))

    def cross(self, other: 'Vector') -> 'Vector':
        """Vector product self x other."""
        return Vector.from_array(np.cross(self._v, other._v))

    # =========================================================================
    # ROTATION
    # =========================================================================

    def rotate(self, axis: 'Vector', theta: float) -> 'Vector':
        """
        Rotate this vector by *theta* about *axis* (right-hand rule).

        Parameters
        ----------
        axis : Vector
            Rotation axis. Normalised internally; its length is irrelevant.
        theta : float
            Rotation angle (rad).

        Returns
        -------
        Vector
            The rotated vector, same magnitude as this one.

        Raises
        ------
        NumericalInstabilityError
            If *axis* is a zero vector.
        """
        if theta == 0:
            return self

        k = axis.normalized()._v
        c = np.cos(theta)
        s = np.sin(theta)
        t = 1.0 - c

        # Rodrigues rotation matrix
        R = np.array([
            [t * k[0] * k[0] + c,
             t * k[0] * k[1] - s * k[2],
             t * k[0] * k[2] + s * k[1]],
            [t * k[0] * k[1] + s * k[2],
             t * k[1] * k[1] + c,
             t * k[1] * k[2] - s * k[0]],
            [t * k[0] * k[2] - s * k[1],
             t * k[1] * k[2] + s * k[0],
             t * k[2] * k[2] + c],
        ], dtype=np.float64)

        return Vector.from_array(R @ self._v)

    def rotate_x(self, theta: float) -> 'Vector':
        """Rotate about the x-axis by *theta* (rad)."""
        if theta == 0:
            return self
        c = np.cos(theta)
        s = np.sin(theta)
        x, y, z = self._v
        return Vector(x, y * c - z * s, z * c + y * s)

    def rotate_z(self, theta: float) -> 'Vector':
        """Rotate about the z-axis by *theta* (rad)."""
        if theta == 0:
            return self
        c = np.cos(theta)
        s = np.sin(theta)
        x, y, z = self._v
        return Vector(x * c - y * s, y * c + x * s, z)

    # =========================================================================
    # ANGLES AND DISTANCES
    # =========================================================================

    def angle_with(self, other: 'Vector') -> float:
        """
        Angle between this vector and *other*, signed by the z-component of
        their cross product.

        The result lies in [-pi, pi]; it is positive when *other* is
        counter-clockwise from this vector as seen from +z. Vectors whose
        cross product has no z-component (e.g. both along z) give 0.
        """
        v1 = self.normalized()
        v2 = other.normalized()
        # Clamp to [-1, 1] to protect against floating-point overshoot in arccos
        cos_angle = np.clip(v1.dot(v2), -1.0, 1.0)
        return float(np.arccos(cos_angle) * np.sign(v1.cross(v2).z))

    def angle_of_line_to(self, other: 'Vector') -> float:
        """Direction (rad) of the line from this point to *other* in the xy-plane."""
        return float(np.arctan2(other.y - self.y, other.x - self.x))

    def is_inside_radius(self, center: 'Vector', radius: float) -> bool:
        """True if this point lies within *radius* of *center* (boundary included)."""
        return (self - center).magnitude_squared <= radius * radius

    def is_inside_radius_2d(self, center: 'Vector', radius: float) -> bool:
        """Same as :meth:`is_inside_radius` with both points projected on z = 0."""
        return Vector(self.x, self.y).is_inside_radius(Vector(center.x, center.y), radius)

    def is_close(self, other: 'Vector', epsilon: float = EPSILON) -> bool:
        """Component-wise comparison within *epsilon*."""
        return bool(np.all(np.abs(self._v - other._v) <= epsilon))

    # =========================================================================
    # OPERATORS
    # =========================================================================

    def __add__(self, other: 'Vector') -> 'Vector':
        if isinstance(other, Vector):
            return Vector.from_array(self._v + other._v)
        return NotImplemented

    def __sub__(self, other: 'Vector') -> 'Vector':
        if isinstance(other, Vector):
            return Vector.from_array(self._v - other._v)
        return NotImplemented

    def __mul__(self, factor: numbers.Real) -> 'Vector':
        if isinstance(factor, numbers.Real):
            return Vector.from_array(self._v * float(factor))
        return NotImplemented

    def __rmul__(self, factor: numbers.Real) -> 'Vector':
        return self.__mul__(factor)

    def __truediv__(self, factor: numbers.Real) -> 'Vector':
        if isinstance(factor, numbers.Real):
            return Vector.from_array(self._v / float(factor))
        return NotImplemented

    def __neg__(self) -> 'Vector':
        return Vector.from_array(-self._v)

    def __iter__(self) -> Iterator[float]:
        return iter((self.x, self.y, self.z))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Vector):
            return NotImplemented
        return self.is_close(other)

    __hash__ = None

    def __repr__(self) -> str:
        return f"Vector(x={self.x:+.8f}, y={self.y:+.8f}, z={self.z:+.8f})"

    def __str__(self) -> str:
        return f"<{self.x:f}, {self.y:f}, {self.z:f}>"
