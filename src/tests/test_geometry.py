"""
===============================================================================
ORBIT ENGINE - Conic Geometry Test Suite
===============================================================================
Tests for the stateless two-body formulas: axes and radii, energy and
vis-viva speed, flight-path angle, areal velocity, period and time from
periapsis, and the orbital-plane position/velocity.

Reference values for the circular low-Earth scenario (a = 7000 km) follow
from v = sqrt(mu/a) and T = 2*pi*sqrt(a^3/mu).
===============================================================================
"""

import numpy as np
import pytest
from numpy.testing import assert_allclose

from orbit_engine.core.exceptions import InvalidParameterError
from orbit_engine.dynamics import geometry
from orbit_engine.dynamics.elements import OrbitalElements

MU = 3.986e14


# =============================================================================
# Fixtures
# =============================================================================

@pytest.fixture
def circular():
    return OrbitalElements(MU, 7.0e6, 0.0)


@pytest.fixture
def elliptical():
    return OrbitalElements(MU, 2.44e7, 0.7)


@pytest.fixture
def parabolic():
    """Periapsis distance 7000 km."""
    return OrbitalElements(MU, 7.0e6, 1.0)


@pytest.fixture
def hyperbolic():
    return OrbitalElements(MU, -1.0e7, 2.0)


# =============================================================================
# Test: Circular low-Earth scenario
# =============================================================================

class TestCircularScenario:
    """a = 7000 km, e = 0 around mu = 3.986e14."""

    def test_mean_velocity(self, circular):
        assert_allclose(geometry.mean_velocity(circular), 7546.0, rtol=1e-3)

    def test_period(self, circular):
        assert_allclose(geometry.period(circular), 5828.0, rtol=1e-3)

    def test_period_ms_rounds(self, circular):
        assert geometry.period_ms(circular) == int(round(geometry.period(circular) * 1000.0))

    def test_constant_radius_and_speed(self, circular):
        for theta in np.linspace(-np.pi, np.pi, 9):
            assert geometry.radius_at(circular, theta) == 7.0e6
            assert_allclose(geometry.velocity_at_angle(circular, theta),
                            geometry.mean_velocity(circular), rtol=1e-15)
            assert geometry.velocity_angle(circular, theta) == 0.0


# =============================================================================
# Test: Axes and radii
# =============================================================================

class TestAxesAndRadii:
    """Periapsis, apoapsis, semi-latus rectum and the conic equation."""

    def test_apsides_elliptical(self, elliptical):
        assert_allclose(geometry.periapsis(elliptical), 2.44e7 * 0.3, rtol=1e-15)
        assert_allclose(geometry.apoapsis(elliptical), 2.44e7 * 1.7, rtol=1e-15)

    @pytest.mark.parametrize("e", [0.0, 0.1, 0.5, 0.9, 0.99])
    def test_periapsis_not_beyond_apoapsis(self, e):
        elements = OrbitalElements(MU, 1.0e7, e)
        assert geometry.periapsis(elements) <= geometry.apoapsis(elements)

    def test_open_orbit_apoapsis_infinite(self, parabolic, hyperbolic):
        assert geometry.apoapsis(parabolic) == float('inf')
        assert geometry.apoapsis(hyperbolic) == float('inf')

    def test_hyperbolic_periapsis_positive(self, hyperbolic):
        assert_allclose(geometry.periapsis(hyperbolic), 1.0e7, rtol=1e-15)

    def test_semi_latus_rectum(self, circular, elliptical, parabolic, hyperbolic):
        assert geometry.semi_latus_rectum(circular) == 7.0e6
        assert_allclose(geometry.semi_latus_rectum(elliptical), 2.44e7 * 0.51, rtol=1e-14)
        assert geometry.semi_latus_rectum(parabolic) == 1.4e7
        assert_allclose(geometry.semi_latus_rectum(hyperbolic), 3.0e7, rtol=1e-15)

    def test_radius_at_apsides(self, elliptical):
        assert_allclose(geometry.radius_at(elliptical, 0.0), geometry.periapsis(elliptical), rtol=1e-14)
        assert_allclose(geometry.radius_at(elliptical, np.pi), geometry.apoapsis(elliptical), rtol=1e-14)

    def test_parabolic_radius(self, parabolic):
        assert geometry.radius_at(parabolic, 0.0) == 7.0e6
        assert_allclose(geometry.radius_at(parabolic, np.pi / 2), 1.4e7, rtol=1e-15)

    def test_semi_minor_axis(self, elliptical, hyperbolic):
        assert_allclose(geometry.semi_minor_axis(elliptical), 2.44e7 * np.sqrt(0.51), rtol=1e-14)
        assert_allclose(geometry.semi_minor_axis(hyperbolic), 1.0e7 * np.sqrt(3.0), rtol=1e-14)

    def test_semi_minor_axis_parabolic_raises(self, parabolic):
        with pytest.raises(InvalidParameterError):
            geometry.semi_minor_axis(parabolic)

    def test_focus_distance(self, elliptical):
        assert_allclose(geometry.focus_distance(elliptical), 2.44e7 * 0.7, rtol=1e-15)


# =============================================================================
# Test: Energy and velocity
# =============================================================================

class TestEnergyAndVelocity:
    """Vis-viva and its consequences."""

    @pytest.mark.parametrize("theta", [0.0, 0.7, 2.0, -2.5])
    def test_energy_from_vis_viva(self, elliptical, theta):
        """v^2/2 - mu/r equals -mu/(2a) everywhere on the orbit."""
        r = geometry.radius_at(elliptical, theta)
        v = geometry.velocity_at_radius(elliptical, r)
        assert_allclose(v ** 2 / 2 - MU / r, geometry.specific_orbital_energy(elliptical), rtol=1e-10)

    def test_energy_signs(self, circular, parabolic, hyperbolic):
        assert geometry.specific_orbital_energy(circular) < 0
        assert geometry.specific_orbital_energy(parabolic) == 0.0
        assert geometry.specific_orbital_energy(hyperbolic) > 0

    def test_parabolic_speed_is_escape(self, parabolic):
        r = 9.0e6
        assert_allclose(geometry.velocity_at_radius(parabolic, r), np.sqrt(2 * MU / r), rtol=1e-15)

    def test_speed_highest_at_periapsis(self, elliptical):
        assert geometry.velocity_at_angle(elliptical, 0.0) > geometry.velocity_at_angle(elliptical, np.pi)

    def test_mean_velocity_open_orbit_raises(self, hyperbolic):
        with pytest.raises(InvalidParameterError):
            geometry.mean_velocity(hyperbolic)

    def test_velocity_angle(self, elliptical, parabolic):
        e = 0.7
        theta = 1.2
        expected = np.arctan2(e * np.sin(theta), 1 + e * np.cos(theta))
        assert_allclose(geometry.velocity_angle(elliptical, theta), expected, rtol=1e-15)
        assert geometry.velocity_angle(elliptical, 0.0) == 0.0
        assert geometry.velocity_angle(elliptical, -theta) < 0
        assert_allclose(geometry.velocity_angle(parabolic, 1.0), 0.5, rtol=1e-15)

    def test_areal_velocity_closed_forms(self, circular, elliptical, parabolic):
        assert_allclose(geometry.areal_velocity(circular), np.sqrt(MU * 7.0e6), rtol=1e-15)
        assert_allclose(geometry.areal_velocity(elliptical),
                        np.sqrt(MU * 2.44e7 * 1.7 / 0.3), rtol=1e-14)
        assert_allclose(geometry.areal_velocity(parabolic), np.sqrt(MU * 7.0e6 / 2), rtol=1e-15)

    def test_areal_velocity_hyperbolic_is_real(self, hyperbolic):
        """a < 0 and e > 1 keep the radicand positive."""
        value = geometry.areal_velocity(hyperbolic)
        assert np.isfinite(value)
        assert_allclose(value, np.sqrt(MU * 1.0e7 * 3.0), rtol=1e-15)


# =============================================================================
# Test: Period and time from periapsis
# =============================================================================

class TestTimes:
    """Kepler's third law and the time-of-flight from periapsis."""

    def test_open_orbit_period_raises(self, parabolic, hyperbolic):
        for elements in (parabolic, hyperbolic):
            with pytest.raises(InvalidParameterError):
                geometry.period(elements)

    def test_zero_mu_period_raises(self):
        with pytest.raises(InvalidParameterError):
            geometry.period(OrbitalElements(0.0, 7.0e6, 0.1))

    def test_half_period_at_apoapsis(self, elliptical):
        assert_allclose(geometry.time_from_periapsis(elliptical, np.pi),
                        geometry.period(elliptical) / 2, rtol=1e-12)

    def test_zero_at_periapsis(self, elliptical):
        assert geometry.time_from_periapsis(elliptical, 0.0) == 0.0

    def test_negative_before_periapsis(self, elliptical):
        assert geometry.time_from_periapsis(elliptical, -1.0) < 0

    def test_open_orbit_rejected(self, hyperbolic):
        with pytest.raises(InvalidParameterError):
            geometry.time_from_periapsis(hyperbolic, 0.5)


# =============================================================================
# Test: Orbital-plane state
# =============================================================================

class TestOrbitalPlaneState:
    """Perifocal position from E and theta, perifocal velocity from theta."""

    def test_position_from_eccentric_anomaly(self, elliptical):
        a, e = 2.44e7, 0.7
        r = geometry.position_on_orbital_plane(elliptical, 0.0)
        assert_allclose(r.components, [a * (1 - e), 0.0, 0.0], rtol=1e-15)
        r = geometry.position_on_orbital_plane(elliptical, np.pi / 2)
        assert_allclose(r.components, [-a * e, a * np.sqrt(1 - e * e), 0.0], rtol=1e-12)

    def test_positions_agree(self, elliptical):
        """Both parametrisations place the body at the same point."""
        E = 1.1
        e = 0.7
        theta = 2 * np.arctan2(np.sqrt(1 + e) * np.sin(E / 2), np.sqrt(1 - e) * np.cos(E / 2))
        from_E = geometry.position_on_orbital_plane(elliptical, E)
        from_theta = geometry.position_on_orbital_plane_at_angle(elliptical, theta)
        assert from_E.is_close(from_theta, 1e-5)

    def test_position_open_orbit_raises(self, hyperbolic):
        with pytest.raises(InvalidParameterError):
            geometry.position_on_orbital_plane(hyperbolic, 0.5)

    @pytest.mark.parametrize("theta", [0.0, 1.0, np.pi, -2.0])
    def test_velocity_magnitude_matches_vis_viva(self, elliptical, theta):
        v = geometry.velocity_on_orbital_plane(elliptical, theta)
        assert_allclose(v.magnitude, geometry.velocity_at_angle(elliptical, theta), rtol=1e-12)

    def test_velocity_perpendicular_at_periapsis(self, elliptical):
        r = geometry.position_on_orbital_plane_at_angle(elliptical, 0.0)
        v = geometry.velocity_on_orbital_plane(elliptical, 0.0)
        assert r.dot(v) == 0.0
        assert v.y > 0
