#!/usr/bin/env python3
"""
Orbit Trails application entry point and UI/renderer coordination.

What this module does
- Starts two event loops: a Pygame rendering thread (viewport) and the Dear PyGui
  control panel (running on the main thread).
- Maintains a shared SimulationController that owns the Simulation and its settings;
  all access is guarded by a re-entrant lock for thread-safety.
- Draws a starfield, the central mass, every body with a spin marker and a name label,
  and each body's fading trail (newest end opaque, oldest end transparent).

Threading model
- PygameRenderer runs in a background thread and performs: input handling (for the
  viewport), stepping the simulation once per frame, and drawing. It locks the
  SimulationController around short critical sections.
- The UI class runs in the main thread via Dear PyGui. Its callbacks write settings
  (speed, central mass) and per-body display controls through lock-protected
  SimulationController methods.

Running
1) Install dependencies: `pip install pygame dearpygui`
2) Run this module: `python orbit_trails.py [--template solar_system.json]`

Two windows will open: the viewport (Pygame) and the controls (Dear PyGui). Closing
either will shut down the application cleanly.
"""

import argparse
import logging
import math
import random
import sys
import threading
import time
from typing import List, Optional, Tuple

# GUI and Rendering libs
import pygame
from pygame import gfxdraw
import dearpygui.dearpygui as dpg

from orbittrails.camera import Camera3D
from orbittrails.constants import (
    BACKGROUND_COLOR,
    CENTRAL_COLOR,
    CENTRAL_RADIUS,
    DEFAULT_CENTRAL_MASS,
    DEFAULT_TRAIL_SECONDS,
    LABEL_COLOR,
    MAX_CENTRAL_MASS,
    MAX_SIZE_MULTIPLIER,
    MAX_SPEED,
    MAX_TRAIL_SECONDS,
    MIN_CENTRAL_MASS,
    MIN_SIZE_MULTIPLIER,
    MIN_SPEED,
    MIN_TRAIL_SECONDS,
    SAFE_COORD_LIMIT,
    SPEED_STEP,
    STAR_COUNT,
    TARGET_FPS,
    VIEW_HEIGHT,
    VIEW_WIDTH,
)
from orbittrails.data_models import SimulationSettings
from orbittrails.errors import ConfigurationError
from orbittrails.presets_loader import (
    build_simulation,
    build_solar_system,
    list_templates,
    load_template,
)
from orbittrails.simulation import Simulation

log = logging.getLogger("orbit_trails")

# ============================================================
# Simulation Controller (Shared State)
# ============================================================

class SimulationController:
    """
    Shared state between UI thread (DearPyGui) and rendering thread (Pygame).
    The Simulation itself is not thread-safe; every access goes through the lock.
    """
    def __init__(self, sim: Simulation):
        self.lock = threading.RLock()
        self.sim = sim
        self.settings = sim.settings
        self.running = True  # app running
        self.show_trails = True
        self.show_labels = True

    def step(self, dt_real_seconds: float) -> None:
        with self.lock:
            self.sim.step(dt_real_seconds, self.settings.speed)

    def set_speed(self, speed: float) -> None:
        with self.lock:
            self.settings.set_speed(speed)

    def set_central_mass(self, mass: float) -> None:
        with self.lock:
            self.settings.set_central_mass(mass)

    def set_trail_seconds(self, seconds: float) -> None:
        with self.lock:
            self.sim.set_trail_seconds(seconds)

    def clear_trails(self) -> None:
        with self.lock:
            self.sim.clear_trails()

    def recolor(self, name: str, color: Tuple[int, int, int]) -> None:
        with self.lock:
            self.sim.recolor(name, color)

    def set_size_multiplier(self, name: str, multiplier: float) -> None:
        with self.lock:
            self.sim.set_size_multiplier(name, multiplier)

    def replace_simulation(self, sim: Simulation) -> None:
        with self.lock:
            self.sim = sim
            self.settings = sim.settings

    def snapshot(self):
        """Copy what the renderer needs so drawing happens outside the lock."""
        with self.lock:
            views = []
            for b in self.sim.bodies:
                trail = b.trail.render() if self.show_trails else None
                views.append((b.name, b.current_position(), b.display_radius(),
                               b.current_rotation_phase(), b.color, b.trail.color, trail))
            return views, self.settings.speed, self.settings.central_mass

# ============================================================
# Pygame Renderer Thread
# ============================================================

class PygameRenderer(threading.Thread):
    """
    Pygame loop: steps the simulation and draws starfield, bodies, labels and trails.
    Left/right drag orbits the camera, the wheel zooms.
    """
    def __init__(self, controller: SimulationController):
        super().__init__(daemon=True)
        self.controller = controller
        self.camera = Camera3D()
        self.surface = None
        self.clock = None
        self.dragging = False
        self.last_mouse_screen = (0, 0)
        self.rotate_speed_keys = 60.0  # degrees per second
        self.stars = generate_starfield(STAR_COUNT)
        self.running = True

    def run(self):
        pygame.init()
        pygame.display.set_caption("Orbit Trails - Viewport")
        self.surface = pygame.display.set_mode((VIEW_WIDTH, VIEW_HEIGHT), pygame.RESIZABLE)
        self.camera.set_viewport_size(VIEW_WIDTH, VIEW_HEIGHT)
        self.clock = pygame.time.Clock()

        last_time = time.perf_counter()
        while self.running and self.controller.running:
            now = time.perf_counter()
            real_dt = now - last_time
            last_time = now

            self.handle_events(real_dt)
            self.controller.step(real_dt)
            self.draw()

            # Limit FPS
            self.clock.tick(TARGET_FPS)

        pygame.quit()

    def handle_events(self, real_dt):
        keys = pygame.key.get_pressed()
        if keys[pygame.K_LEFT]:
            self.camera.rotate(-self.rotate_speed_keys * real_dt, 0)
        if keys[pygame.K_RIGHT]:
            self.camera.rotate(self.rotate_speed_keys * real_dt, 0)
        if keys[pygame.K_UP]:
            self.camera.rotate(0, self.rotate_speed_keys * real_dt)
        if keys[pygame.K_DOWN]:
            self.camera.rotate(0, -self.rotate_speed_keys * real_dt)

        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                self.controller.running = False
                self.running = False

            elif event.type == pygame.VIDEORESIZE:
                self.surface = pygame.display.set_mode((event.w, event.h), pygame.RESIZABLE)
                self.camera.set_viewport_size(event.w, event.h)

            elif event.type == pygame.MOUSEWHEEL:
                factor = 1.1 if event.y > 0 else 1.0 / 1.1
                self.camera.zoom(factor)

            elif event.type == pygame.MOUSEBUTTONDOWN:
                if event.button in (1, 3):
                    self.dragging = True
                    self.last_mouse_screen = pygame.mouse.get_pos()

            elif event.type == pygame.MOUSEBUTTONUP:
                if event.button in (1, 3):
                    self.dragging = False

            elif event.type == pygame.MOUSEMOTION:
                if self.dragging:
                    mouse = pygame.mouse.get_pos()
                    dx = mouse[0] - self.last_mouse_screen[0]
                    dy = mouse[1] - self.last_mouse_screen[1]
                    self.camera.rotate(dx * 0.3, dy * 0.3)
                    self.last_mouse_screen = mouse

    def draw_stars(self, surf):
        w, h = self.camera.viewport_size
        for sx, sy, brightness in self.stars:
            x, y = int(sx * w), int(sy * h)
            surf.set_at((x, y), (brightness, brightness, brightness))

    def draw_trail(self, surf, trail, color):
        if trail is None or trail.count < 2:
            return
        points = [self.camera.project(p) for p in trail.positions]
        for i in range(1, trail.count):
            a, b = points[i - 1], points[i]
            if a is None or b is None:
                continue
            a_s, b_s = _safe_point(a), _safe_point(b)
            if a_s is None or b_s is None:
                continue
            seg_color = fade(color, trail.opacities[i])
            try:
                pygame.draw.aaline(surf, seg_color, a_s, b_s)
            except (TypeError, ValueError):
                pass

    def draw_body(self, surf, screen, radius, phase, color):
        x, y = screen
        try:
            gfxdraw.filled_circle(surf, x, y, radius, color)
            gfxdraw.aacircle(surf, x, y, radius, color)
        except OverflowError:
            return
        if radius >= 4:
            # Spin marker: a meridian line that sweeps with the rotation phase
            offset = int(radius * math.sin(phase))
            pygame.draw.line(surf, fade(color, 0.4), (x + offset, y - radius + 1), (x + offset, y + radius - 1), 1)

    def draw(self):
        surf = self.surface
        surf.fill(BACKGROUND_COLOR)
        self.draw_stars(surf)

        views, speed, central_mass = self.controller.snapshot()

        for name, position, radius, phase, color, trail_color, trail in views:
            self.draw_trail(surf, trail, trail_color)

        # Painter's order: far to near, central mass included
        drawables = []
        center = self.camera.project((0.0, 0.0, 0.0))
        if center is not None:
            drawables.append((center[2], None, center, CENTRAL_RADIUS, 0.0, CENTRAL_COLOR))
        for name, position, radius, phase, color, trail_color, trail in views:
            projected = self.camera.project(position)
            if projected is not None:
                drawables.append((projected[2], name, projected, radius, phase, color))
        drawables.sort(key=lambda d: d[0], reverse=True)

        for depth, name, projected, radius, phase, color in drawables:
            screen = _safe_point(projected)
            if screen is None:
                continue
            vis_r = int(max(1, min(60, self.camera.projected_radius(radius, depth))))
            self.draw_body(surf, screen, vis_r, phase, color)
            if name is not None and self.controller.show_labels:
                draw_text(surf, name, screen[0] + vis_r + 4, screen[1] - 8, LABEL_COLOR)

        draw_text(surf, "Drag: orbit camera | Wheel: zoom | Arrows: orbit", 10, 10, (200, 200, 200))
        draw_text(surf, f"Speed: {speed:.1f}x  Sun mass: {central_mass:.0f}", 10, 30, (200, 200, 200))

        pygame.display.flip()


def generate_starfield(count: int, seed: int = 7) -> List[Tuple[float, float, int]]:
    """Static background stars as (x_fraction, y_fraction, brightness)."""
    rng = random.Random(seed)
    return [(rng.random(), rng.random(), rng.randint(60, 255)) for _ in range(count)]


def fade(color: Tuple[int, int, int], opacity: float) -> Tuple[int, int, int]:
    """Blend a color toward the background by opacity in [0, 1]."""
    opacity = max(0.0, min(1.0, opacity))
    return tuple(int(bg + (c - bg) * opacity) for c, bg in zip(color, BACKGROUND_COLOR))


_cached_font = None

def draw_text(surface, text, x, y, color):
    global _cached_font
    if not pygame.font.get_init():
        pygame.font.init()
    if _cached_font is None:
        try:
            _cached_font = pygame.font.SysFont("consolas", 16)
        except (OSError, RuntimeError):
            _cached_font = pygame.font.Font(None, 16)
    img = _cached_font.render(text, True, color)
    surface.blit(img, (x, y))


def _safe_point(pt):
    try:
        x, y = int(pt[0]), int(pt[1])
    except (TypeError, ValueError, OverflowError):
        return None
    if -SAFE_COORD_LIMIT <= x <= SAFE_COORD_LIMIT and -SAFE_COORD_LIMIT <= y <= SAFE_COORD_LIMIT:
        return (x, y)
    return None

# ============================================================
# Dear PyGui UI
# ============================================================

class UI:
    """
    Dear PyGui control panel: template loader, speed, central mass, trail window,
    and per-body color and size controls.
    """
    def __init__(self, controller: SimulationController):
        self.controller = controller
        self.status_msg_id = None
        self.bodies_group_id = None
        self._template_map = {}
        self._build_ui()

    def _build_ui(self):
        dpg.create_context()
        dpg.create_viewport(title='Orbit Trails - Controls', width=340, height=800)

        with dpg.window(label="Controls", width=320, height=780, pos=(10, 10), tag="main_window"):
            with dpg.group(horizontal=True):
                dpg.add_text("Preset:")
                for fn, display in list_templates():
                    self._template_map[display] = fn
                preset_items = list(self._template_map.keys())
                dpg.add_combo(preset_items,
                              default_value=(preset_items[0] if preset_items else ""),
                              width=160,
                              tag="preset_combo")
                dpg.add_button(label="Load", callback=lambda: self.load_template(dpg.get_value("preset_combo")))

            dpg.add_separator()
            dpg.add_text("Simulation")
            dpg.add_slider_float(label="Speed", min_value=MIN_SPEED, max_value=MAX_SPEED,
                                 default_value=self.controller.settings.speed, width=180, format="%.1f",
                                 callback=lambda s, a, u: self._set_speed(a), tag="speed_slider")
            dpg.add_slider_float(label="Sun mass", min_value=MIN_CENTRAL_MASS, max_value=MAX_CENTRAL_MASS,
                                 default_value=self.controller.settings.central_mass, width=180, format="%.0f",
                                 callback=lambda s, a, u: self._set_central_mass(a), tag="central_mass_slider")
            dpg.add_slider_float(label="Trail (s)", min_value=MIN_TRAIL_SECONDS, max_value=MAX_TRAIL_SECONDS,
                                 default_value=self.controller.sim.trail_seconds, width=180, format="%.1f",
                                 callback=lambda s, a, u: self._set_trail_seconds(a), tag="trail_slider")
            with dpg.group(horizontal=True):
                dpg.add_checkbox(label="Trails", default_value=True, callback=self._toggle_trails)
                dpg.add_checkbox(label="Labels", default_value=True, callback=self._toggle_labels)
                dpg.add_button(label="Clear trails", callback=self._clear_trails)
            self.status_msg_id = dpg.add_text("")

            dpg.add_separator()
            dpg.add_text("Bodies")
            self.bodies_group_id = dpg.add_group()
            self._build_body_controls()

        dpg.setup_dearpygui()
        dpg.show_viewport()
        dpg.set_primary_window("main_window", True)

    def _build_body_controls(self):
        dpg.delete_item(self.bodies_group_id, children_only=True)
        with self.controller.lock:
            bodies = [(b.name, b.color, b.size_multiplier) for b in self.controller.sim.bodies]
        for name, color, multiplier in bodies:
            with dpg.collapsing_header(label=name, parent=self.bodies_group_id, default_open=False):
                dpg.add_color_edit(default_value=(color[0], color[1], color[2], 255), label="Color",
                                   no_alpha=True, width=200, user_data=name,
                                   callback=lambda s, a, u: self._recolor(u, a))
                dpg.add_slider_float(label="Size", min_value=MIN_SIZE_MULTIPLIER, max_value=MAX_SIZE_MULTIPLIER,
                                     default_value=multiplier, width=180, format="%.1f", user_data=name,
                                     callback=lambda s, a, u: self.controller.set_size_multiplier(u, a))

    # -----------------------
    # UI Callbacks
    # -----------------------

    def _set_status(self, msg: str, color=(180, 220, 180)):
        dpg.set_value(self.status_msg_id, msg)
        dpg.configure_item(self.status_msg_id, color=color)

    def _set_error(self, msg: str):
        log.error(msg)
        dpg.set_value(self.status_msg_id, msg)
        dpg.configure_item(self.status_msg_id, color=(255, 120, 120))

    def _set_speed(self, value):
        self.controller.set_speed(round(float(value) / SPEED_STEP) * SPEED_STEP)

    def _set_central_mass(self, value):
        self.controller.set_central_mass(round(float(value)))

    def _set_trail_seconds(self, value):
        self.controller.set_trail_seconds(float(value))

    def _toggle_trails(self, sender, value, user_data=None):
        with self.controller.lock:
            self.controller.show_trails = bool(value)

    def _toggle_labels(self, sender, value, user_data=None):
        with self.controller.lock:
            self.controller.show_labels = bool(value)

    def _clear_trails(self):
        self.controller.clear_trails()
        self._set_status("Trails cleared.")

    def _recolor(self, name, rgba):
        # Dear PyGui may hand back 0..1 floats or 0..255 values depending on version
        if all(c <= 1.0 for c in rgba[:3]):
            color = tuple(int(c * 255) for c in rgba[:3])
        else:
            color = tuple(int(c) for c in rgba[:3])
        self.controller.recolor(name, color)

    def load_template(self, display: str):
        fn = self._template_map.get(display)
        if fn is None:
            self._set_error(f"Unknown preset: {display}")
            return
        try:
            sim = simulation_from_template(fn, trail_seconds=self.controller.sim.trail_seconds)
        except ConfigurationError as exc:
            self._set_error(f"Invalid preset {display}: {exc}")
            return
        self.controller.replace_simulation(sim)
        dpg.set_value("speed_slider", sim.settings.speed)
        dpg.set_value("central_mass_slider", sim.settings.central_mass)
        self._build_body_controls()
        self._set_status(f"Loaded preset: {display}")

# ============================================================
# Scene setup and Application Entry
# ============================================================

def simulation_from_template(file_name: Optional[str], speed: Optional[float] = None,
                             central_mass: Optional[float] = None,
                             trail_seconds: float = DEFAULT_TRAIL_SECONDS) -> Simulation:
    """
    Build the scene from a template file, or the built-in solar system when no
    file is given. Command-line values override template settings.
    """
    settings = SimulationSettings()
    if file_name is None:
        definitions, overrides = None, {}
    else:
        definitions, overrides, display = load_template(file_name)
        if not definitions:
            raise ConfigurationError(f"Template {file_name} has no bodies")
        log.info("Loaded template %s (%d bodies)", display, len(definitions))
    settings.set_speed(speed if speed is not None else overrides.get("speed", 1.0))
    settings.set_central_mass(
        central_mass if central_mass is not None else overrides.get("central_mass", DEFAULT_CENTRAL_MASS)
    )
    if definitions is None:
        return build_solar_system(settings, trail_seconds)
    return build_simulation(definitions, settings, trail_seconds)


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Orbiting bodies with fading motion trails.")
    parser.add_argument("--template", help="JSON body table in templates/ (default: built-in solar system)")
    parser.add_argument("--speed", type=float, help="initial speed multiplier")
    parser.add_argument("--central-mass", type=float, help="initial central (Sun) mass")
    parser.add_argument("--trail-seconds", type=float, default=DEFAULT_TRAIL_SECONDS,
                        help="trail retention window in seconds")
    parser.add_argument("--log-level", default="INFO", help="logging level (DEBUG, INFO, WARNING, ...)")
    return parser.parse_args(argv)


def main(argv=None):
    args = parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, args.log_level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        sim = simulation_from_template(args.template, args.speed, args.central_mass, args.trail_seconds)
    except ConfigurationError as exc:
        log.error("Invalid configuration: %s", exc)
        return 2

    controller = SimulationController(sim)
    renderer = PygameRenderer(controller)

    # Start Pygame renderer thread
    renderer.start()

    UI(controller)

    # Run Dear PyGui event loop
    try:
        dpg.start_dearpygui()
    finally:
        controller.running = False
        renderer.running = False
        renderer.join(timeout=2.0)
        dpg.destroy_context()
    return 0


if __name__ == "__main__":
    sys.exit(main())
