"""
===============================================================================
ORBIT ENGINE - Orbit Facade
===============================================================================
Orbit bundles one set of OrbitalElements with its reference body and engine
configuration, and exposes the time-indexed queries a simulation needs:

    time (ms) -> mean anomaly -> Kepler solver -> eccentric anomaly
              -> orbital-plane position -> 3-1-3 rotation
              -> position relative to the reference body

Every query is a pure function of the elements. The one stateful entry
point is :meth:`Orbit.render_at_time`. It evaluates the chain once for an
instant and returns an immutable :class:`RenderedState`, so that the
derived accessors (true anomaly, speed, velocity vector, tangent
direction) do not repeat the solve. The orbit also remembers the last
snapshot for callers that use the accessors without passing a state.
That reference is replaced in a single assignment and never mutated.
Callers rendering one orbit from several threads should pass the snapshot
they rendered explicitly.
===============================================================================
"""

import logging
from dataclasses import dataclass
from typing import Optional, Tuple

import numpy as np

from orbit_engine.core.config import EngineConfig, DEFAULT_CONFIG
from orbit_engine.core.constants import HALF_PI, PI
from orbit_engine.core.exceptions import NotRenderedError
from orbit_engine.core.vector import Vector
from orbit_engine.dynamics import anomalies, geometry
from orbit_engine.dynamics.elements import OrbitalElements, OrbitType, ReferenceBody
from orbit_engine.dynamics.state_vectors import (
    elements_from_state_vectors,
    rotate_to_reference_frame,
    state_vectors_at_true_anomaly,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RenderedState:
    """
    Snapshot of an orbit evaluated at one instant.

    Attributes
    ----------
    time : int
        Milliseconds since epoch at which the snapshot was taken.
    eccentric_anomaly : float
        Solver output for that instant (rad, not range-normalised).
    position_on_orbital_plane : Vector
        Perifocal position, focus at the origin, +x toward periapsis (m).
    position_from_parent : Vector
        Position in the reference body's frame (m).
    """
    time: int
    eccentric_anomaly: float
    position_on_orbital_plane: Vector
    position_from_parent: Vector


class Orbit:
    """
    Two-body Keplerian orbit around a reference body.

    Parameters
    ----------
    reference : ReferenceBody or None
        Body the orbit is referred to. None gives mu = 0 (degenerate orbit)
        and places the body at the origin.
    semi_major_axis : float
        a (m). Negative for hyperbolic orbits, periapsis distance for
        parabolic ones.
    eccentricity : float
        e >= 0.
    inclination, longitude_of_ascending_node, argument_of_periapsis : float
        Orientation angles (rad).
    mean_anomaly_at_epoch : float
        Phase at t = 0 (rad).
    config : EngineConfig, optional
        Solver precision, iteration cap and orientation mode.
    """

    def __init__(self, reference: Optional[ReferenceBody], semi_major_axis: float,
                 eccentricity: float, inclination: float = 0.0,
                 longitude_of_ascending_node: float = 0.0,
                 argument_of_periapsis: float = 0.0,
                 mean_anomaly_at_epoch: float = 0.0,
                 config: Optional[EngineConfig] = None) -> None:
        elements = OrbitalElements.for_reference(
            reference, semi_major_axis, eccentricity, inclination,
            longitude_of_ascending_node, argument_of_periapsis,
            mean_anomaly_at_epoch,
        )
        self._bind(reference, elements, config)

    def _bind(self, reference: Optional[ReferenceBody], elements: OrbitalElements,
              config: Optional[EngineConfig]) -> None:
        self._reference = reference
        self._elements = elements
        self._config = config if config is not None else DEFAULT_CONFIG
        self._rendered: Optional[RenderedState] = None

    # =========================================================================
    # ALTERNATE CONSTRUCTORS
    # =========================================================================

    @classmethod
    def from_elements(cls, elements: OrbitalElements,
                      reference: Optional[ReferenceBody] = None,
                      config: Optional[EngineConfig] = None) -> 'Orbit':
        """Wrap existing elements; mu is taken from *elements*."""
        orbit = cls.__new__(cls)
        orbit._bind(reference, elements, config)
        return orbit

    @classmethod
    def from_state_vectors(cls, reference: ReferenceBody, position: Vector,
                           velocity: Vector,
                           config: Optional[EngineConfig] = None) -> 'Orbit':
        """Orbit whose elements are derived from a position/velocity pair."""
        config = config if config is not None else DEFAULT_CONFIG
        elements = elements_from_state_vectors(reference, position, velocity,
                                               config.eccentricity_tolerance)
        return cls.from_elements(elements, reference, config)

    # =========================================================================
    # ELEMENTS
    # =========================================================================

    @property
    def elements(self) -> OrbitalElements:
        return self._elements

    @property
    def reference(self) -> Optional[ReferenceBody]:
        return self._reference

    @property
    def config(self) -> EngineConfig:
        return self._config

    @property
    def orbit_type(self) -> OrbitType:
        return self._elements.orbit_type

    @property
    def gravitational_parameter(self) -> float:
        return self._elements.gravitational_parameter

    @property
    def semi_major_axis(self) -> float:
        return self._elements.semi_major_axis

    @property
    def eccentricity(self) -> float:
        return self._elements.eccentricity

    @property
    def inclination(self) -> float:
        return self._elements.inclination

    @property
    def longitude_of_ascending_node(self) -> float:
        return self._elements.longitude_of_ascending_node

    @property
    def argument_of_periapsis(self) -> float:
        return self._elements.argument_of_periapsis

    @property
    def mean_anomaly_at_epoch(self) -> float:
        return self._elements.mean_anomaly_at_epoch

    # =========================================================================
    # SHAPE, ENERGY, TIMES
    # =========================================================================

    @property
    def semi_minor_axis(self) -> float:
        return geometry.semi_minor_axis(self._elements)

    @property
    def focus_distance(self) -> float:
        return geometry.focus_distance(self._elements)

    @property
    def semi_latus_rectum(self) -> float:
        return geometry.semi_latus_rectum(self._elements)

    @property
    def periapsis(self) -> float:
        return geometry.periapsis(self._elements)

    @property
    def apoapsis(self) -> float:
        return geometry.apoapsis(self._elements)

    @property
    def specific_orbital_energy(self) -> float:
        return geometry.specific_orbital_energy(self._elements)

    @property
    def mean_velocity(self) -> float:
        return geometry.mean_velocity(self._elements)

    @property
    def mean_motion(self) -> float:
        return anomalies.mean_motion(self._elements)

    @property
    def areal_velocity(self) -> float:
        return geometry.areal_velocity(self._elements)

    @property
    def period(self) -> float:
        """Orbital period (s)."""
        return geometry.period(self._elements)

    @property
    def period_ms(self) -> int:
        """Orbital period (ms)."""
        return geometry.period_ms(self._elements)

    def radius_at(self, theta: float) -> float:
        return geometry.radius_at(self._elements, theta)

    def velocity_at_radius(self, radius: float) -> float:
        return geometry.velocity_at_radius(self._elements, radius)

    def velocity_at_angle(self, theta: float) -> float:
        return geometry.velocity_at_angle(self._elements, theta)

    def velocity_angle(self, theta: float) -> float:
        return geometry.velocity_angle(self._elements, theta)

    def time_from_periapsis(self, theta: float) -> float:
        """Seconds from periapsis passage to true anomaly *theta*."""
        return geometry.time_from_periapsis(self._elements, theta)

    # =========================================================================
    # ANOMALIES
    # =========================================================================

    def _solver_options(self) -> dict:
        return {
            'precision': self._config.kepler_precision,
            'max_iterations': self._config.max_kepler_iterations,
            'denominator_tolerance': self._config.denominator_tolerance,
        }

    def mean_anomaly_at_time(self, time: int) -> float:
        return anomalies.mean_anomaly_at_time(self._elements, time)

    def eccentric_anomaly_at_time(self, time: int) -> float:
        return anomalies.eccentric_anomaly_at_time(self._elements, time, **self._solver_options())

    def true_anomaly_at_time(self, time: int) -> float:
        return anomalies.true_anomaly_at_time(self._elements, time, **self._solver_options())

    def eccentric_anomaly_from_true(self, theta: float) -> float:
        return anomalies.eccentric_anomaly_from_true(self._elements, theta)

    def mean_anomaly_from_true(self, theta: float) -> float:
        return anomalies.mean_anomaly_from_true(self._elements, theta)

    # =========================================================================
    # POSITIONS AND VELOCITIES
    # =========================================================================

    def rotate_to_reference_frame(self, v_pqw: Vector) -> Vector:
        """Orbital plane -> reference body frame, honouring config.full_orientation."""
        return rotate_to_reference_frame(self._elements, v_pqw, self._config.full_orientation)

    def position_on_orbital_plane(self, eccentric_anomaly: float) -> Vector:
        return geometry.position_on_orbital_plane(self._elements, eccentric_anomaly)

    def position_from_parent_at_time(self, time: int) -> Vector:
        """Position relative to the reference body at *time* (ms)."""
        E = self.eccentric_anomaly_at_time(time)
        return self.rotate_to_reference_frame(self.position_on_orbital_plane(E))

    def absolute_position_at_time(self, time: int) -> Vector:
        """Position at *time* offset by the reference body's absolute position."""
        return self.position_from_parent_at_time(time) + self._reference_position()

    def velocity_at_time(self, time: int) -> Vector:
        """Velocity vector relative to the reference body at *time* (m/s)."""
        theta = anomalies.true_anomaly_from_eccentric(
            self._elements, self.eccentric_anomaly_at_time(time))
        return self.rotate_to_reference_frame(
            geometry.velocity_on_orbital_plane(self._elements, theta))

    def state_vectors_at_true_anomaly(self, theta: float) -> Tuple[Vector, Vector]:
        """(position, velocity) relative to the reference body at true anomaly *theta*."""
        return state_vectors_at_true_anomaly(self._elements, theta, self._config.full_orientation)

    def _reference_position(self) -> Vector:
        if self._reference is None:
            return Vector.zero()
        return self._reference.absolute_position

    # =========================================================================
    # RENDERING
    # =========================================================================

    def render_at_time(self, time: int) -> RenderedState:
        """
        Evaluate the orbit at *time* (ms) and return the snapshot.

        The snapshot also becomes the default state for the rendered
        accessors below.
        """
        E = self.eccentric_anomaly_at_time(time)
        on_plane = self.position_on_orbital_plane(E)
        state = RenderedState(
            time=time,
            eccentric_anomaly=E,
            position_on_orbital_plane=on_plane,
            position_from_parent=self.rotate_to_reference_frame(on_plane),
        )
        self._rendered = state
        logger.debug("Rendered %s at t=%d ms: E=%.9f", self, time, E)
        return state

    @property
    def rendered_state(self) -> RenderedState:
        """
        The last snapshot produced by :meth:`render_at_time`.

        Raises
        ------
        NotRenderedError
            If the orbit has never been rendered.
        """
        state = self._rendered
        if state is None:
            raise NotRenderedError("Orbit has not been rendered yet; call render_at_time first.")
        return state

    def _state(self, state: Optional[RenderedState]) -> RenderedState:
        return state if state is not None else self.rendered_state

    def rendered_eccentric_anomaly(self, state: Optional[RenderedState] = None) -> float:
        return self._state(state).eccentric_anomaly

    def rendered_position_from_parent(self, state: Optional[RenderedState] = None) -> Vector:
        return self._state(state).position_from_parent

    def rendered_position_from_orbital_plane(self, state: Optional[RenderedState] = None) -> Vector:
        return self._state(state).position_on_orbital_plane

    def rendered_absolute_position(self, state: Optional[RenderedState] = None) -> Vector:
        return self._state(state).position_from_parent + self._reference_position()

    def rendered_true_anomaly(self, state: Optional[RenderedState] = None) -> float:
        """True anomaly of the rendered instant, from the orbital-plane position."""
        return self._state(state).position_on_orbital_plane.longitude

    def rendered_velocity(self, state: Optional[RenderedState] = None) -> float:
        """Orbital speed at the rendered radius (m/s)."""
        return self.velocity_at_radius(self._state(state).position_from_parent.magnitude)

    def rendered_velocity_vector(self, state: Optional[RenderedState] = None) -> Vector:
        theta = self.rendered_true_anomaly(state)
        return self.rotate_to_reference_frame(
            geometry.velocity_on_orbital_plane(self._elements, theta))

    def tangent_direction(self, state: Optional[RenderedState] = None) -> float:
        """
        Direction (rad) of motion on the orbital plane at the rendered instant.

        Measured from the centre of the ellipse: with phi the polar angle of
        the rendered point about the centre, the tangent slope is
        -(1 - e^2) / tan(phi), flipped by pi on the right-hand half so that
        the direction follows the prograde motion.
        """
        on_plane = self._state(state).position_on_orbital_plane
        centre = Vector(-self.focus_distance, 0.0)
        phi = centre.angle_of_line_to(on_plane)
        e = self.eccentricity

        tangent = -np.arctan2(1.0 - e * e, np.tan(phi))
        if -HALF_PI < phi < HALF_PI:
            tangent += PI
        return float(tangent)

    # =========================================================================
    # DISPLAY
    # =========================================================================

    def __str__(self) -> str:
        name = self._reference.name if self._reference is not None else 'nothing'
        return (f"{self.orbit_type.value} orbit around {name}. "
                f"Semi-major axis {self.semi_major_axis:f}, "
                f"Eccentricity {self.eccentricity:f}")

    def __repr__(self) -> str:
        return f"Orbit({self._elements!r})"
