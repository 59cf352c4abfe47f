"""
===============================================================================
ORBIT ENGINE - Vector Algebra Test Suite
===============================================================================
Tests for the immutable Vector type: algebra, normalisation, axis-angle
rotation, signed angles, containment checks and epsilon equality.

All floating-point comparisons use numpy.testing.assert_allclose with
explicit tolerances appropriate for double-precision arithmetic.
===============================================================================
"""

import numpy as np
import pytest
from numpy.testing import assert_allclose

from orbit_engine.core.exceptions import NumericalInstabilityError
from orbit_engine.core.vector import Vector


# =============================================================================
# Fixtures
# =============================================================================

@pytest.fixture
def x_hat():
    return Vector(1.0, 0.0, 0.0)


@pytest.fixture
def y_hat():
    return Vector(0.0, 1.0, 0.0)


@pytest.fixture
def z_hat():
    return Vector(0.0, 0.0, 1.0)


# =============================================================================
# Test: Construction and components
# =============================================================================

class TestConstruction:
    """Tests for factories and component access."""

    def test_planar_default(self):
        """z defaults to zero for planar vectors."""
        v = Vector(3.0, 4.0)
        assert v.z == 0.0
        assert_allclose(v.components, [3.0, 4.0, 0.0])

    def test_from_array(self):
        v = Vector.from_array(np.array([1.0, -2.0, 3.5]))
        assert (v.x, v.y, v.z) == (1.0, -2.0, 3.5)

    def test_from_array_wrong_shape(self):
        with pytest.raises(ValueError):
            Vector.from_array([1.0, 2.0])

    def test_components_is_a_copy(self):
        """Mutating the exported array must not change the vector."""
        v = Vector(1.0, 2.0, 3.0)
        arr = v.components
        arr[0] = 99.0
        assert v.x == 1.0

    def test_direction(self):
        v = Vector.direction(np.pi / 3)
        assert_allclose(v.components, [0.5, np.sqrt(3) / 2, 0.0], atol=1e-15)

    def test_iteration(self):
        x, y, z = Vector(1.0, 2.0, 3.0)
        assert (x, y, z) == (1.0, 2.0, 3.0)


# =============================================================================
# Test: Algebra
# =============================================================================

class TestAlgebra:
    """Tests for magnitude, products and operators."""

    def test_magnitude(self):
        v = Vector(3.0, 4.0, 12.0)
        assert_allclose(v.magnitude, 13.0, rtol=1e-15)
        assert_allclose(v.magnitude_squared, 169.0, rtol=1e-15)

    def test_dot(self, x_hat, y_hat):
        assert x_hat.dot(y_hat) == 0.0
        assert_allclose(Vector(1.0, 2.0, 3.0).dot(Vector(4.0, -5.0, 6.0)), 12.0)

    def test_cross_right_handed(self, x_hat, y_hat, z_hat):
        """x cross y = z."""
        assert x_hat.cross(y_hat) == z_hat
        assert y_hat.cross(x_hat) == -z_hat

    def test_operators_return_new_vectors(self):
        """Operations never modify their operands."""
        a = Vector(1.0, 2.0, 3.0)
        b = Vector(0.5, 0.5, 0.5)
        total = a + b
        assert a == Vector(1.0, 2.0, 3.0)
        assert total == Vector(1.5, 2.5, 3.5)
        assert a - b == Vector(0.5, 1.5, 2.5)
        assert a * 2 == Vector(2.0, 4.0, 6.0)
        assert 2 * a == Vector(2.0, 4.0, 6.0)
        assert a / 2 == Vector(0.5, 1.0, 1.5)

    @pytest.mark.parametrize("factor", [np.int64(2), np.float32(2.0), np.float64(2.0)])
    def test_numpy_scalar_factors(self, factor):
        a = Vector(1.0, 2.0, 3.0)
        product = a * factor
        quotient = a / factor
        assert isinstance(product, Vector)
        assert isinstance(quotient, Vector)
        assert product == Vector(2.0, 4.0, 6.0)
        assert quotient == Vector(0.5, 1.0, 1.5)

    def test_non_numeric_factor_rejected(self):
        with pytest.raises(TypeError):
            Vector(1.0, 2.0, 3.0) * '2'

    def test_normalized(self):
        v = Vector(0.0, 3.0, 4.0).normalized()
        assert_allclose(v.magnitude, 1.0, rtol=1e-15)
        assert_allclose(v.components, [0.0, 0.6, 0.8], rtol=1e-15)

    def test_normalize_zero_vector_raises(self):
        with pytest.raises(NumericalInstabilityError):
            Vector.zero().normalized()


# =============================================================================
# Test: Rotation
# =============================================================================

class TestRotation:
    """Tests for axis-angle and elementary rotations."""

    def test_quarter_turn_about_z(self, x_hat, y_hat, z_hat):
        assert x_hat.rotate(z_hat, np.pi / 2) == y_hat

    def test_axis_length_is_irrelevant(self, x_hat, z_hat):
        assert x_hat.rotate(z_hat * 10.0, 1.1) == x_hat.rotate(z_hat, 1.1)

    def test_zero_angle_is_identity(self, x_hat):
        v = Vector(1.0, 2.0, 3.0)
        assert v.rotate(x_hat, 0.0) is v

    def test_rotation_preserves_magnitude(self):
        v = Vector(7.0e6, -1.2e6, 3.3e5)
        rotated = v.rotate(Vector(0.3, -0.4, 0.866), 2.345)
        assert_allclose(rotated.magnitude, v.magnitude, rtol=1e-14)

    def test_rotation_about_own_axis_is_identity(self):
        v = Vector(1.0, 1.0, 1.0)
        assert v.rotate(v, 1.234).is_close(v, 1e-12)

    def test_zero_axis_raises(self):
        with pytest.raises(NumericalInstabilityError):
            Vector(1.0, 0.0, 0.0).rotate(Vector.zero(), 0.5)

    @pytest.mark.parametrize("theta", [0.3, -1.2, np.pi, 4.0])
    def test_rotate_z_matches_axis_angle(self, z_hat, theta):
        v = Vector(1.5, -0.5, 2.0)
        assert v.rotate_z(theta).is_close(v.rotate(z_hat, theta), 1e-12)

    @pytest.mark.parametrize("theta", [0.3, -1.2, np.pi, 4.0])
    def test_rotate_x_matches_axis_angle(self, x_hat, theta):
        v = Vector(1.5, -0.5, 2.0)
        assert v.rotate_x(theta).is_close(v.rotate(x_hat, theta), 1e-12)


# =============================================================================
# Test: Angles and containment
# =============================================================================

class TestAngles:
    """Tests for signed angles, longitude and radius checks."""

    def test_angle_with_is_signed(self, x_hat, y_hat):
        assert_allclose(x_hat.angle_with(y_hat), np.pi / 2, rtol=1e-15)
        assert_allclose(y_hat.angle_with(x_hat), -np.pi / 2, rtol=1e-15)

    def test_angle_with_parallel_vectors(self, x_hat):
        assert x_hat.angle_with(x_hat * 5.0) == 0.0

    def test_longitude(self):
        assert_allclose(Vector(-1.0, 1.0, 7.0).longitude, 3 * np.pi / 4, rtol=1e-15)

    def test_angle_of_line_to(self):
        origin = Vector(1.0, 1.0)
        assert_allclose(origin.angle_of_line_to(Vector(1.0, 3.0)), np.pi / 2, rtol=1e-15)

    def test_is_inside_radius(self):
        centre = Vector(0.0, 0.0, 0.0)
        assert Vector(3.0, 4.0, 0.0).is_inside_radius(centre, 5.0)
        assert not Vector(3.0, 4.0, 1.0).is_inside_radius(centre, 5.0)

    def test_is_inside_radius_2d_ignores_z(self):
        assert Vector(3.0, 4.0, 100.0).is_inside_radius_2d(Vector(0.0, 0.0, -50.0), 5.0)


# =============================================================================
# Test: Equality
# =============================================================================

class TestEquality:
    """Vectors compare within EPSILON and are unhashable."""

    def test_equal_within_epsilon(self):
        assert Vector(1.0, 2.0, 3.0) == Vector(1.0 + 1e-12, 2.0, 3.0 - 1e-12)

    def test_not_equal_beyond_epsilon(self):
        assert Vector(1.0, 2.0, 3.0) != Vector(1.0 + 1e-6, 2.0, 3.0)

    def test_is_close_custom_tolerance(self):
        assert Vector(7.0e6, 0.0, 0.0).is_close(Vector(7.0e6 + 0.5, 0.0, 0.0), epsilon=1.0)

    def test_comparison_with_other_types(self):
        assert Vector(1.0, 2.0, 3.0) != (1.0, 2.0, 3.0)

    def test_unhashable(self):
        with pytest.raises(TypeError):
            hash(Vector(1.0, 2.0, 3.0))
