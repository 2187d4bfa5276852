#!/usr/bin/env python3
"""
Shared constants for Orbit Trails (simulation units unless stated otherwise).

Keeping constants in one place helps ensure values are consistent across the
codebase and makes tuning easier. Units are scaled for display: 1 AU maps to
SCALE_AU simulation units and the default central mass gives Earth an orbital
period of roughly ten seconds at speed 1.
"""

# Physics
G = 1.0  # gravitational constant in simulation units
SCALE_AU = 20.0  # simulation units per astronomical unit
DEFAULT_CENTRAL_MASS = 3161.4
CENTRAL_RADIUS = 5.0
MIN_SEPARATION = 0.001  # below this the attractor pull is skipped for the frame

# Trails
DEFAULT_TRAIL_SECONDS = 5.0  # retention window in wall-clock seconds
MIN_TRAIL_SECONDS = 0.5
MAX_TRAIL_SECONDS = 30.0

# Control panel ranges
MIN_SPEED = 0.0
MAX_SPEED = 5.0
SPEED_STEP = 0.1
MIN_CENTRAL_MASS = 1000.0
MAX_CENTRAL_MASS = 5000.0
MIN_SIZE_MULTIPLIER = 1.0
MAX_SIZE_MULTIPLIER = 5.0

# Rendering (viewport)
VIEW_WIDTH = 1100
VIEW_HEIGHT = 800
TARGET_FPS = 60
BACKGROUND_COLOR = (0, 0, 0)
CENTRAL_COLOR = (255, 255, 0)
LABEL_COLOR = (200, 200, 200)
DEFAULT_BODY_COLOR = (200, 200, 255)
STAR_COUNT = 1500

# Camera
CAMERA_FOV = 45.0  # degrees, vertical
CAMERA_NEAR = 0.1
CAMERA_INITIAL_DISTANCE = 824.6  # |(0, 200, 800)|
CAMERA_INITIAL_PITCH = 14.0  # degrees above the orbital plane
CAMERA_MIN_DISTANCE = 10.0
CAMERA_MAX_DISTANCE = 5000.0

# Safety: avoid drawing outside reasonable integer pixel ranges
SAFE_COORD_LIMIT = 30000
