#!/usr/bin/env python3
"""
Data models for Orbit Trails.

This module defines the Body dataclass shared between the simulation, rendering and
UI, the BodyDefinition row of a static body table, and the SimulationSettings the
control panel writes between frames.

Units and usage
- position and velocity are 3D tuples in simulation units; see constants.py.
- size, color, rotation phase and size multiplier are display-only; the integrator
  never reads them.
- trail is owned by the body and appended to once per frame by Body.update.
- A body's position and velocity are only written by its own update. Attractors
  and renderers read them.
"""
from dataclasses import dataclass, field
from typing import Optional, Tuple

from .attractors import Attractor
from .constants import DEFAULT_BODY_COLOR, DEFAULT_CENTRAL_MASS
from .errors import ConfigurationError
from .physics import GravityIntegrator
from .trail import TrailBuffer
from .vector_utils import Vec3, vec3, vec_len, vec_sub

_DEFAULT_INTEGRATOR = GravityIntegrator()


@dataclass
class Body:
    """
    A simulated orbiting body (planet or satellite).

    Fields:
    - name: Identifier, display-only
    - mass: Mass (> 0), read by bodies that use this one as their attractor
    - size: Visual radius
    - rotation_period: Seconds per spin at speed 1 (> 0)
    - position: 3D position
    - velocity: 3D velocity
    - attractor: What this body falls toward; None means no acceleration
    - color: RGB tuple used for the body and its trail
    - rotation_phase: Spin angle in radians, unbounded
    - size_multiplier: Cosmetic scale applied at render time
    - trail: Fading history of past positions
    """
    name: str
    mass: float
    size: float
    rotation_period: float
    position: Vec3
    velocity: Vec3
    attractor: Optional[Attractor] = None
    color: Tuple[int, int, int] = DEFAULT_BODY_COLOR
    rotation_phase: float = 0.0
    size_multiplier: float = 1.0
    trail: TrailBuffer = field(default_factory=TrailBuffer)

    def __post_init__(self):
        if not self.mass > 0:
            raise ConfigurationError(f"{self.name}: mass must be positive, got {self.mass}")
        if not self.rotation_period > 0:
            raise ConfigurationError(
                f"{self.name}: rotation period must be positive, got {self.rotation_period}"
            )
        self.mass = float(self.mass)
        self.position = vec3(*self.position)
        self.velocity = vec3(*self.velocity)
        self.color = tuple(self.color)
        self.trail.recolor(self.color)

    # Read accessors for the host

    def current_position(self) -> Vec3:
        return self.position

    def current_rotation_phase(self) -> float:
        return self.rotation_phase

    def current_mass(self) -> float:
        return self.mass

    def display_radius(self) -> float:
        return self.size * self.size_multiplier

    def distance_to_attractor(self) -> Optional[float]:
        if self.attractor is None:
            return None
        return vec_len(vec_sub(self.position, self.attractor.current_position()))

    # External control inputs

    def set_size_multiplier(self, multiplier: float) -> None:
        multiplier = float(multiplier)
        if not multiplier > 0:
            raise ValueError(f"Size multiplier must be positive, got {multiplier}")
        self.size_multiplier = multiplier

    def recolor(self, color: Tuple[int, int, int]) -> None:
        """Change body and trail color; recorded trail samples are kept."""
        self.color = tuple(color)
        self.trail.recolor(self.color)

    def update(self, delta: float, speed: float, now: float,
               integrator: GravityIntegrator = _DEFAULT_INTEGRATOR) -> None:
        """Advance one frame and record the new position in the trail."""
        integrator.step_body(self, delta, speed)
        self.trail.append(self.position, now)


@dataclass
class BodyDefinition:
    """
    One row of a body table, before orbital seeding.

    distance is measured from the attractor; attractor names an earlier row, or is
    None for the central mass.
    """
    name: str
    mass: float
    size: float
    rotation_period: float
    distance: float
    color: Tuple[int, int, int] = DEFAULT_BODY_COLOR
    attractor: Optional[str] = None


@dataclass
class SimulationSettings:
    """
    Runtime tunables written by the host or control panel between frames.

    Bodies never write these; the central attractor reads central_mass live.
    """
    speed: float = 1.0
    central_mass: float = DEFAULT_CENTRAL_MASS

    def __post_init__(self):
        self.set_speed(self.speed)
        self.set_central_mass(self.central_mass)

    def set_speed(self, speed: float) -> None:
        speed = float(speed)
        if speed < 0:
            raise ConfigurationError(f"Speed multiplier must be >= 0, got {speed}")
        self.speed = speed

    def set_central_mass(self, mass: float) -> None:
        mass = float(mass)
        if not mass > 0:
            raise ConfigurationError(f"Central mass must be positive, got {mass}")
        self.central_mass = mass
