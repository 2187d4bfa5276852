#!/usr/bin/env python3
"""
Fading motion trails.

A TrailBuffer keeps a time-windowed history of one body's positions and turns it
into a polyline with a per-vertex opacity. Samples are stored oldest-first in a
deque, so pruning happens from the left in amortized O(1).

Opacity of a sample is 1 - age / retention, where age is measured against the
time of the latest append: the newest vertex is fully opaque and a vertex exactly
at the retention boundary is fully transparent. Samples older than the window are
dropped on every append.

Recoloring only changes the display color; stored samples are never touched.
"""
from collections import deque
from dataclasses import dataclass
from typing import Deque, List, NamedTuple, Optional, Tuple

from .constants import DEFAULT_BODY_COLOR, DEFAULT_TRAIL_SECONDS
from .errors import ConfigurationError
from .vector_utils import Vec3


@dataclass(frozen=True)
class TrailSample:
    """A captured position and the time (seconds) it was captured."""
    position: Vec3
    timestamp: float


class TrailRender(NamedTuple):
    """Drawable trail: ordered vertices, matching opacities and the draw count."""
    positions: List[Vec3]
    opacities: List[float]
    count: int


class TrailBuffer:
    """
    Time-windowed, age-decaying sample buffer owned by a single body.
    """

    def __init__(self, retention: float = DEFAULT_TRAIL_SECONDS, color: Tuple[int, int, int] = DEFAULT_BODY_COLOR):
        self.retention = _checked_retention(retention)
        self.color = tuple(color)
        self.samples: Deque[TrailSample] = deque()
        self._now: Optional[float] = None

    def __len__(self) -> int:
        return len(self.samples)

    @property
    def now(self) -> Optional[float]:
        """Timestamp of the latest append, or None before the first one."""
        return self._now

    def append(self, position: Vec3, now: float) -> None:
        """Record a new sample and drop everything older than the retention window."""
        self.samples.append(TrailSample(position, float(now)))
        self._now = float(now)
        self._prune()

    def _prune(self) -> None:
        now = self._now
        if now is None:
            return
        samples = self.samples
        while samples and now - samples[0].timestamp > self.retention:
            samples.popleft()

    def opacity(self, sample: TrailSample) -> float:
        if self._now is None:
            return 0.0
        alpha = 1.0 - (self._now - sample.timestamp) / self.retention
        return max(0.0, min(1.0, alpha))

    def render(self) -> TrailRender:
        """Positions, opacities and count for the surviving samples, oldest first."""
        positions = [s.position for s in self.samples]
        opacities = [self.opacity(s) for s in self.samples]
        return TrailRender(positions, opacities, len(positions))

    def recolor(self, color: Tuple[int, int, int]) -> None:
        self.color = tuple(color)

    def set_retention(self, retention: float) -> None:
        """Change the window; shrinking it prunes immediately."""
        self.retention = _checked_retention(retention)
        self._prune()

    def clear(self) -> None:
        self.samples.clear()


def _checked_retention(retention: float) -> float:
    retention = float(retention)
    if not retention > 0:
        raise ConfigurationError(f"Trail retention must be positive, got {retention}")
    return retention
