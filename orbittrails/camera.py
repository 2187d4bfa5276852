#!/usr/bin/env python3
"""
Orbital perspective camera for projecting simulation space onto the viewport.

The camera sits on a sphere around a target point and looks at it. yaw rotates
around the world y axis, pitch raises the camera above the orbital (x-z) plane.
"""
import math
from typing import Optional, Tuple

from .constants import (
    CAMERA_FOV,
    CAMERA_INITIAL_DISTANCE,
    CAMERA_INITIAL_PITCH,
    CAMERA_MAX_DISTANCE,
    CAMERA_MIN_DISTANCE,
    CAMERA_NEAR,
    VIEW_HEIGHT,
    VIEW_WIDTH,
)
from .vector_utils import Vec3, clamp, vec_add, vec_cross, vec_dot, vec_norm, vec_scale, vec_sub

WORLD_UP: Vec3 = (0.0, 1.0, 0.0)


class Camera3D:
    """
    Perspective camera orbiting a target.

    Attributes:
        target: world-space point the camera looks at.
        distance: distance from target to camera.
        yaw, pitch: orbit angles in degrees.
        viewport_size: (width, height) in pixels.
    """

    def __init__(self, target=(0.0, 0.0, 0.0), distance=CAMERA_INITIAL_DISTANCE,
                 yaw=90.0, pitch=CAMERA_INITIAL_PITCH, fov=CAMERA_FOV):
        self.target = tuple(target)
        self.distance = distance
        self.yaw = yaw
        self.pitch = pitch
        self.fov = fov
        self.viewport_size = (VIEW_WIDTH, VIEW_HEIGHT)

    def set_viewport_size(self, w: int, h: int) -> None:
        self.viewport_size = (w, h)

    def direction(self) -> Vec3:
        """Unit vector from target to camera."""
        yaw = math.radians(self.yaw)
        pitch = math.radians(self.pitch)
        return (
            math.cos(pitch) * math.cos(yaw),
            math.sin(pitch),
            math.cos(pitch) * math.sin(yaw),
        )

    def position(self) -> Vec3:
        return vec_add(self.target, vec_scale(self.direction(), self.distance))

    def axes(self) -> Tuple[Vec3, Vec3, Vec3]:
        """(forward, right, up) in world space."""
        forward = vec_scale(self.direction(), -1.0)
        right = vec_cross(forward, WORLD_UP)
        if vec_dot(right, right) < 1e-12:
            right = (1.0, 0.0, 0.0)
        right = vec_norm(right)
        up = vec_norm(vec_cross(right, forward))
        return forward, right, up

    def focal_length(self) -> float:
        """Pixels per unit at unit depth."""
        return (self.viewport_size[1] / 2) / math.tan(math.radians(self.fov) / 2)

    def project(self, point: Vec3) -> Optional[Tuple[float, float, float]]:
        """
        Project a world point to (screen_x, screen_y, depth).
        Returns None for points behind the near plane.
        """
        forward, right, up = self.axes()
        rel = vec_sub(point, self.position())
        depth = vec_dot(rel, forward)
        if depth < CAMERA_NEAR:
            return None
        f = self.focal_length() / depth
        sx = self.viewport_size[0] / 2 + vec_dot(rel, right) * f
        sy = self.viewport_size[1] / 2 - vec_dot(rel, up) * f
        return (sx, sy, depth)

    def projected_radius(self, radius: float, depth: float) -> float:
        return radius * self.focal_length() / depth

    def rotate(self, d_yaw: float, d_pitch: float) -> None:
        self.yaw = (self.yaw + d_yaw) % 360
        self.pitch = clamp(self.pitch + d_pitch, -89.0, 89.0)

    def zoom(self, factor: float) -> None:
        factor = clamp(factor, 0.05, 20.0)
        self.distance = clamp(self.distance / factor, CAMERA_MIN_DISTANCE, CAMERA_MAX_DISTANCE)
