#!/usr/bin/env python3
"""
Core physics for Orbit Trails.

Responsibilities
- Compute the pull of a body's single attractor (inverse-square, no softening).
- Advance position and velocity with semi-implicit (symplectic) Euler.
- Advance the display-only rotation phase.
- Seed circular orbits, including satellites of moving attractors.

Units and conventions
- Scaled simulation units; see constants.py. G is process-wide and tunable.
- Time is wall-clock seconds scaled by a speed multiplier. speed = 0 pauses.
- Orbits lie in the x-z plane: a body placed on +x moves toward +z.

Numerical notes
- Velocity is updated before position and the new velocity is used for the
  position update. Explicit Euler would spiral outward on a circular orbit;
  symplectic Euler keeps the radius in a bounded band.
- When the separation is below MIN_SEPARATION the acceleration is skipped for
  that frame; the body keeps coasting on its current velocity.
- Each body feels exactly one attractor. This is not an N-body solver.
"""

import math
from typing import Optional, Tuple

from .attractors import Attractor, attractor_velocity
from .constants import G, MIN_SEPARATION
from .vector_utils import Vec3, vec3, vec_add, vec_len, vec_scale, vec_sub, vec_dot


class GravityIntegrator:
    """
    Single-attractor gravity with symplectic Euler integration.

    The acceleration of a body at position p toward an attractor at q is:
    a = G * M * (q - p) / |q - p|^3
    """

    def __init__(self, g: float = G, min_separation: float = MIN_SEPARATION):
        """
        Args:
            g: Gravitational constant in simulation units
            min_separation: Separation below which the pull is skipped
        """
        self.g = float(g)
        self.min_separation = float(min_separation)

    def acceleration(self, position: Vec3, attractor: Optional[Attractor]) -> Optional[Vec3]:
        """
        Acceleration toward the attractor, or None when there is no attractor or
        the separation is degenerate.
        """
        if attractor is None:
            return None
        displacement = vec_sub(attractor.current_position(), position)
        r = vec_len(displacement)
        if r < self.min_separation:
            return None
        magnitude = self.g * attractor.current_mass() / (r * r)
        return vec_scale(displacement, magnitude / r)

    def integrate(self, position: Vec3, velocity: Vec3, attractor: Optional[Attractor],
                  delta: float, speed: float) -> Tuple[Vec3, Vec3]:
        """
        One symplectic Euler step.

        Args:
            position: Current position
            velocity: Current velocity
            attractor: Attractor read at its current (this frame's) position
            delta: Elapsed wall-clock seconds (>= 0)
            speed: Speed multiplier; 0 freezes the state

        Returns:
            (new_position, new_velocity)
        """
        dt = delta * speed
        acceleration = self.acceleration(position, attractor)
        if acceleration is not None:
            velocity = vec_add(velocity, vec_scale(acceleration, dt))
        position = vec_add(position, vec_scale(velocity, dt))
        return position, velocity

    def step_body(self, body, delta: float, speed: float) -> None:
        """Advance a body's position, velocity and rotation phase in place."""
        body.position, body.velocity = self.integrate(
            body.position, body.velocity, body.attractor, delta, speed
        )
        body.rotation_phase = advance_rotation(body.rotation_phase, body.rotation_period, delta, speed)


def advance_rotation(phase: float, rotation_period: float, delta: float, speed: float) -> float:
    """Spin phase after delta seconds. Left unbounded; only used for display."""
    return phase + (2.0 * math.pi / rotation_period) * delta * speed


def circular_orbit_velocity(central_mass: float, orbital_radius: float, g: float = G) -> float:
    """
    Speed needed for a circular orbit.

    For a circular orbit gravity supplies exactly the centripetal force:
    G * M / r^2 = v^2 / r, therefore v = sqrt(G * M / r).

    Args:
        central_mass: Mass being orbited
        orbital_radius: Orbital radius

    Returns:
        Orbital speed; 0.0 for a non-positive radius
    """
    if orbital_radius <= 0:
        return 0.0
    return math.sqrt(g * central_mass / orbital_radius)


def circular_orbit_state(attractor: Attractor, distance: float, g: float = G) -> Tuple[Vec3, Vec3]:
    """
    Initial (position, velocity) for a circular orbit around an attractor.

    The body is placed `distance` along +x from the attractor and moves along +z.
    For a moving attractor the attractor's own velocity is added, otherwise the
    satellite would be left behind on the first frame.
    """
    center = attractor.current_position()
    v = circular_orbit_velocity(attractor.current_mass(), distance, g)
    position = vec_add(center, vec3(distance, 0.0, 0.0))
    velocity = vec_add(attractor_velocity(attractor), vec3(0.0, 0.0, v))
    return position, velocity


def specific_orbital_energy(body, g: float = G) -> Optional[float]:
    """
    Kinetic plus potential energy per unit mass relative to the body's attractor.

    Constant for an exact two-body orbit, so its drift measures integrator error.
    Returns None for bodies without an attractor.
    """
    attractor = body.attractor
    if attractor is None:
        return None
    rel_velocity = vec_sub(body.velocity, attractor_velocity(attractor))
    r = vec_len(vec_sub(body.position, attractor.current_position()))
    if r <= 0:
        return None
    return 0.5 * vec_dot(rel_velocity, rel_velocity) - g * attractor.current_mass() / r
