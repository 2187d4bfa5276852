#!/usr/bin/env python3
"""
Simulation orchestrator.

Simulation owns the bodies, the runtime settings and the trail clock. Each call to
step() advances every body in attractor order and then records its trail sample,
with every body in the frame sharing one timestamp so their trails fade in sync.

Time basis
- Physics advances by delta * speed.
- The trail clock advances by delta alone, so a paused simulation (speed = 0)
  still ages and empties its trails.

Threading
- Not thread-safe by itself; the host serializes access (see SimulationController
  in orbit_trails.py).
"""
import logging
from typing import Iterable, List, Optional, Tuple

from .attractors import Attractor, BodyAttractor, FixedAttractor
from .constants import DEFAULT_TRAIL_SECONDS
from .data_models import Body, SimulationSettings
from .errors import ConfigurationError
from .ordering import update_order
from .physics import GravityIntegrator
from .trail import TrailBuffer
from .vector_utils import Vec3

log = logging.getLogger(__name__)


class Simulation:
    """
    Per-frame driver for a fixed set of bodies.
    """

    def __init__(self, settings: Optional[SimulationSettings] = None,
                 bodies: Iterable[Body] = (),
                 trail_seconds: float = DEFAULT_TRAIL_SECONDS,
                 integrator: Optional[GravityIntegrator] = None,
                 central_name: str = "Sun"):
        self.settings = settings if settings is not None else SimulationSettings()
        self.integrator = integrator if integrator is not None else GravityIntegrator()
        self.trail_seconds = float(trail_seconds)
        self.time = 0.0
        self.frame = 0
        self._central = FixedAttractor((0.0, 0.0, 0.0), lambda: self.settings.central_mass, name=central_name)
        self._bodies: List[Body] = []
        self._order: List[Body] = []
        for body in bodies:
            self._bodies.append(body)
        self._reorder()

    # -----------------------
    # Setup
    # -----------------------

    def central_attractor(self) -> FixedAttractor:
        """Stationary central mass whose mass follows settings.central_mass."""
        return self._central

    def attractor_for(self, body: Body) -> BodyAttractor:
        """Attractor bound to an already-created body, for satellites."""
        if not any(b is body for b in self._bodies):
            raise ConfigurationError(f"{body.name} is not part of this simulation")
        return BodyAttractor(body)

    def create_body(self, name: str, mass: float, size: float, rotation_period: float,
                    initial_position: Vec3, initial_velocity: Vec3,
                    attractor: Optional[Attractor] = None,
                    color: Tuple[int, int, int] = (200, 200, 255)) -> Body:
        """Create a body with its own trail and register it in update order."""
        body = Body(
            name=name,
            mass=mass,
            size=size,
            rotation_period=rotation_period,
            position=initial_position,
            velocity=initial_velocity,
            attractor=attractor,
            color=color,
            trail=TrailBuffer(self.trail_seconds, color),
        )
        self.add_body(body)
        return body

    def add_body(self, body: Body) -> None:
        if self.frame:
            raise ConfigurationError("Bodies cannot be added once the simulation has started")
        self._bodies.append(body)
        try:
            self._reorder()
        except ConfigurationError:
            self._bodies.pop()
            raise
        log.info("Created body %s (mass=%g) attracted to %s", body.name, body.mass, _attractor_name(body))

    def _reorder(self) -> None:
        self._order = update_order(self._bodies)

    def validate(self) -> None:
        """Recompute the update order; raises ConfigurationError on a bad graph."""
        self._reorder()

    # -----------------------
    # Queries
    # -----------------------

    @property
    def bodies(self) -> List[Body]:
        """Bodies in update order."""
        return list(self._order)

    def body(self, name: str) -> Body:
        for b in self._bodies:
            if b.name == name:
                return b
        raise KeyError(name)

    # -----------------------
    # Per-frame
    # -----------------------

    def step(self, delta: float, speed: Optional[float] = None, now: Optional[float] = None) -> float:
        """
        Advance all bodies by one frame.

        Args:
            delta: Elapsed wall-clock seconds since the previous step (>= 0)
            speed: Speed multiplier; defaults to settings.speed
            now: Trail timestamp for this frame; defaults to the internal clock

        Returns:
            The timestamp shared by every trail sample recorded this frame.
        """
        delta = max(0.0, float(delta))
        if speed is None:
            speed = self.settings.speed
        if now is None:
            self.time += delta
        else:
            self.time = float(now)
        now = self.time
        for body in self._order:
            body.update(delta, speed, now, self.integrator)
        self.frame += 1
        return now

    # -----------------------
    # Display controls
    # -----------------------

    def recolor(self, name: str, color: Tuple[int, int, int]) -> None:
        self.body(name).recolor(color)

    def set_size_multiplier(self, name: str, multiplier: float) -> None:
        self.body(name).set_size_multiplier(multiplier)

    def set_trail_seconds(self, seconds: float) -> None:
        seconds = float(seconds)
        if not seconds > 0:
            raise ConfigurationError(f"Trail retention must be positive, got {seconds}")
        for b in self._bodies:
            b.trail.set_retention(seconds)
        self.trail_seconds = seconds

    def clear_trails(self) -> None:
        for b in self._bodies:
            b.trail.clear()


def _attractor_name(body: Body) -> str:
    if body.attractor is None:
        return "nothing"
    return getattr(body.attractor, "name", repr(body.attractor))
