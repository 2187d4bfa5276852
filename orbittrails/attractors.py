#!/usr/bin/env python3
"""
Attractor references.

An attractor is whatever a body falls toward: a read-only handle exposing a
live mass and a live position. Values are read on every call, never captured
at construction, so a body orbiting a moving parent always sees the parent
where it is this frame.

Two variants
- FixedAttractor: a point that is not advanced by the simulation (the central
  mass). Its mass may be a constant or a zero-argument callable, which lets the
  control panel change the central mass between frames.
- BodyAttractor: another simulated Body. It only reads the body's state and
  never mutates it.
"""
from typing import Callable, Optional, Union

from .vector_utils import Vec3, vec3

MassSource = Union[float, Callable[[], float]]


class Attractor:
    """Capability interface: current_mass() and current_position()."""

    # Simulated body this attractor tracks, if any. Used for update ordering.
    source_body = None

    def current_mass(self) -> float:
        raise NotImplementedError

    def current_position(self) -> Vec3:
        raise NotImplementedError


class FixedAttractor(Attractor):
    """
    Stationary attractor at a fixed point.
    """

    def __init__(self, position: Vec3 = (0.0, 0.0, 0.0), mass: MassSource = 1.0, name: str = "Center"):
        self.name = name
        self.position = vec3(*position)
        self._mass = mass

    def current_mass(self) -> float:
        if callable(self._mass):
            return float(self._mass())
        return float(self._mass)

    def current_position(self) -> Vec3:
        return self.position

    def __repr__(self):
        return f"FixedAttractor(name={self.name!r}, position={self.position})"


class BodyAttractor(Attractor):
    """
    Live, read-only view of another body's mass and position.
    """

    def __init__(self, body):
        self.source_body = body

    @property
    def name(self) -> str:
        return self.source_body.name

    def current_mass(self) -> float:
        return self.source_body.current_mass()

    def current_position(self) -> Vec3:
        return self.source_body.current_position()

    def current_velocity(self) -> Vec3:
        return self.source_body.velocity

    def __repr__(self):
        return f"BodyAttractor(body={self.source_body.name!r})"


def attractor_velocity(attractor: Optional[Attractor]) -> Vec3:
    """Velocity of the attractor's frame; zero for fixed or missing attractors."""
    if isinstance(attractor, BodyAttractor):
        return attractor.current_velocity()
    return (0.0, 0.0, 0.0)
