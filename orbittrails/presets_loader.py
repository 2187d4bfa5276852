#!/usr/bin/env python3
"""
Body tables and JSON preset loading.

A body table is a list of BodyDefinition rows. build_simulation() turns a table into
a running Simulation by seeding every body on a circular orbit around its attractor:
rows without an attractor orbit the central mass, rows naming an earlier row orbit
that body (and inherit its velocity).

Schema
======
Template JSON (templates/*.json):
{
  "name": "Human-friendly preset name",
  "description": "Optional description",
  "central_mass": 3161.4,            # optional, default from settings
  "speed": 1.0,                      # optional, default from settings
  "bodies": [
    {
      "name": "Earth",
      "mass": 5.97,
      "size": 1.0,
      "rotation_period": 1.0,
      "distance_au": 1.0,            # or "distance" in simulation units
      "color": "#2233ff"             # or [34, 51, 255]
    },
    {
      "name": "Moon",
      "mass": 0.073,
      "size": 0.27,
      "rotation_period": 27,
      "distance": 3,
      "color": [136, 136, 136],
      "attractor": "Earth"           # optional; must name an earlier body
    }
  ]
}

Users can add their own JSON files to templates/ and they'll be picked up by the loader.
"""
import json
import logging
import os
from typing import Dict, List, Optional, Tuple

from .constants import DEFAULT_BODY_COLOR, DEFAULT_TRAIL_SECONDS, G, SCALE_AU
from .data_models import BodyDefinition, SimulationSettings
from .errors import ConfigurationError
from .physics import GravityIntegrator, circular_orbit_state
from .simulation import Simulation

log = logging.getLogger(__name__)

TEMPLATES_DIR = os.path.join(os.path.dirname(os.path.dirname(__file__)), "templates")


def _read_json(path: str) -> Optional[dict]:
  try:
    with open(path, "r", encoding="utf-8") as f:
      return json.load(f)
  except (OSError, ValueError) as exc:
    log.warning("Could not read %s: %s", path, exc)
    return None


def _coerce_color(c) -> Tuple[int, int, int]:
  """Accept 0xRRGGBB ints, "#rrggbb" strings or [r, g, b] lists."""
  try:
    if isinstance(c, str):
      c = int(c.lstrip("#"), 16)
    if isinstance(c, int):
      return ((c >> 16) & 0xFF, (c >> 8) & 0xFF, c & 0xFF)
    r, g, b = int(c[0]), int(c[1]), int(c[2])
    r = max(0, min(255, r)); g = max(0, min(255, g)); b = max(0, min(255, b))
    return (r, g, b)
  except (TypeError, ValueError, IndexError):
    return DEFAULT_BODY_COLOR


def _au(name, distance_au, color, size, mass, rotation_period) -> BodyDefinition:
  return BodyDefinition(name=name, mass=mass, size=size, rotation_period=rotation_period,
                        distance=distance_au * SCALE_AU, color=_coerce_color(color))


# Mercury through Pluto on the +x axis, plus the Moon around Earth.
SOLAR_SYSTEM: List[BodyDefinition] = [
  _au("Mercury", 0.387, 0xaaaaaa, 0.38, 0.33, 10),
  _au("Venus", 0.723, 0xffcc66, 0.95, 4.87, 10),
  _au("Earth", 1.0, 0x2233ff, 1.0, 5.97, 1),
  _au("Mars", 1.524, 0xff3300, 0.53, 0.642, 1.03),
  _au("Jupiter", 5.203, 0xff9966, 2.0, 1898, 0.41),
  _au("Saturn", 9.537, 0xffcc99, 1.8, 568, 0.45),
  _au("Uranus", 19.191, 0x66ccff, 1.5, 86.8, 0.72),
  _au("Neptune", 30.07, 0x3333ff, 1.5, 102, 0.67),
  _au("Pluto", 39.48, 0xaaaaaa, 0.3, 0.0146, 10),
  BodyDefinition(name="Moon", mass=0.073, size=0.27, rotation_period=27, distance=3.0,
                 color=(0x88, 0x88, 0x88), attractor="Earth"),
]


def _definition_from_json(row: dict) -> BodyDefinition:
  try:
    if "distance" in row:
      distance = float(row["distance"])
    else:
      distance = float(row["distance_au"]) * SCALE_AU
    return BodyDefinition(
      name=str(row["name"]),
      mass=float(row["mass"]),
      size=float(row.get("size", 1.0)),
      rotation_period=float(row["rotation_period"]),
      distance=distance,
      color=_coerce_color(row.get("color", list(DEFAULT_BODY_COLOR))),
      attractor=row.get("attractor"),
    )
  except (KeyError, TypeError, ValueError) as exc:
    raise ConfigurationError(f"Malformed body entry {row!r}: {exc}") from exc


def list_templates() -> List[Tuple[str, str]]:
  """Return list of (file_name, display_name) for available templates."""
  items: List[Tuple[str, str]] = []
  if not os.path.isdir(TEMPLATES_DIR):
    return items
  for fn in sorted(os.listdir(TEMPLATES_DIR)):
    if not fn.lower().endswith(".json"):
      continue
    path = os.path.join(TEMPLATES_DIR, fn)
    data = _read_json(path) or {}
    display = data.get("name") or os.path.splitext(fn)[0]
    items.append((fn, display))
  return items


def load_template(file_name: str, templates_dir: str = TEMPLATES_DIR
                  ) -> Tuple[List[BodyDefinition], Dict[str, float], str]:
  """
  Load a template JSON by file name (or absolute path).
  Returns (definitions, settings_overrides, display_name); an unreadable file gives
  an empty table. Malformed rows raise ConfigurationError.
  """
  path = file_name if os.path.isabs(file_name) else os.path.join(templates_dir, file_name)
  data = _read_json(path) or {}
  display_name = data.get("name") or os.path.splitext(os.path.basename(file_name))[0]
  overrides: Dict[str, float] = {}
  for key in ("central_mass", "speed"):
    if data.get(key) is not None:
      overrides[key] = float(data[key])
  definitions = [_definition_from_json(b) for b in data.get("bodies", [])]
  return definitions, overrides, display_name


def build_simulation(definitions: List[BodyDefinition],
                     settings: Optional[SimulationSettings] = None,
                     trail_seconds: float = DEFAULT_TRAIL_SECONDS,
                     g: float = G) -> Simulation:
  """
  Create a Simulation from a body table with every body on a circular orbit.

  Rows naming an attractor must come after the row they name.
  """
  sim = Simulation(settings, trail_seconds=trail_seconds, integrator=GravityIntegrator(g))
  created = {}
  for d in definitions:
    if d.name in created:
      raise ConfigurationError(f"Duplicate body name: {d.name}")
    if d.attractor is None:
      attractor = sim.central_attractor()
    elif d.attractor in created:
      attractor = sim.attractor_for(created[d.attractor])
    else:
      raise ConfigurationError(f"{d.name}: attractor {d.attractor!r} must be defined before it")
    position, velocity = circular_orbit_state(attractor, d.distance, g)
    created[d.name] = sim.create_body(
      d.name, d.mass, d.size, d.rotation_period, position, velocity, attractor, color=d.color
    )
  return sim


def build_solar_system(settings: Optional[SimulationSettings] = None,
                       trail_seconds: float = DEFAULT_TRAIL_SECONDS) -> Simulation:
  return build_simulation(SOLAR_SYSTEM, settings, trail_seconds)
