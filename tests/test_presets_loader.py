import json
import math

import pytest

from orbittrails.constants import DEFAULT_CENTRAL_MASS, SCALE_AU
from orbittrails.data_models import BodyDefinition, SimulationSettings
from orbittrails.errors import ConfigurationError
from orbittrails.presets_loader import (
    SOLAR_SYSTEM,
    build_simulation,
    build_solar_system,
    list_templates,
    load_template,
)


def test_solar_system_seeds_circular_orbits():
    sim = build_solar_system()
    names = [b.name for b in sim.bodies]
    assert names[:9] == ["Mercury", "Venus", "Earth", "Mars", "Jupiter",
                         "Saturn", "Uranus", "Neptune", "Pluto"]
    assert names[-1] == "Moon"

    earth = sim.body("Earth")
    assert earth.position == pytest.approx((SCALE_AU, 0.0, 0.0))
    assert earth.velocity == pytest.approx((0.0, 0.0, math.sqrt(DEFAULT_CENTRAL_MASS / SCALE_AU)))
    assert earth.color == (0x22, 0x33, 0xff)


def test_moon_orbits_earth_with_composed_velocity():
    sim = build_solar_system()
    earth, moon = sim.body("Earth"), sim.body("Moon")
    assert moon.attractor.source_body is earth
    assert moon.position == pytest.approx((SCALE_AU + 3.0, 0.0, 0.0))
    assert moon.velocity[2] == pytest.approx(earth.velocity[2] + math.sqrt(earth.mass / 3.0))


def test_moon_follows_earth_after_a_frame():
    sim = build_solar_system()
    moon = sim.body("Moon")
    sim.step(1.0 / 60.0, 1.0)
    assert moon.distance_to_attractor() == pytest.approx(3.0, rel=0.01)


def test_planets_use_settings_central_mass():
    sim = build_simulation(SOLAR_SYSTEM[:1], SimulationSettings(central_mass=2000.0))
    mercury = sim.body("Mercury")
    r = 0.387 * SCALE_AU
    assert mercury.velocity[2] == pytest.approx(math.sqrt(2000.0 / r))


def test_attractor_must_be_defined_first():
    moon = BodyDefinition(name="Moon", mass=1.0, size=1.0, rotation_period=1.0,
                          distance=3.0, attractor="Earth")
    with pytest.raises(ConfigurationError):
        build_simulation([moon])


def test_duplicate_names_are_rejected():
    row = BodyDefinition(name="Twin", mass=1.0, size=1.0, rotation_period=1.0, distance=3.0)
    with pytest.raises(ConfigurationError):
        build_simulation([row, row])


def test_invalid_rotation_period_in_table():
    row = BodyDefinition(name="Spinless", mass=1.0, size=1.0, rotation_period=0.0, distance=3.0)
    with pytest.raises(ConfigurationError):
        build_simulation([row])


def test_load_template_from_json(tmp_path):
    data = {
        "name": "Pair",
        "central_mass": 1500,
        "bodies": [
            {"name": "Home", "mass": 10, "size": 1, "rotation_period": 1, "distance_au": 2,
             "color": "#ff0000"},
            {"name": "Rock", "mass": 0.1, "rotation_period": 5, "distance": 2,
             "color": [0, 300, -4], "attractor": "Home"},
        ],
    }
    path = tmp_path / "pair.json"
    path.write_text(json.dumps(data), encoding="utf-8")

    definitions, overrides, display = load_template(str(path))
    assert display == "Pair"
    assert overrides == {"central_mass": 1500.0}
    assert definitions[0].distance == pytest.approx(2 * SCALE_AU)
    assert definitions[0].color == (255, 0, 0)
    assert definitions[1].color == (0, 255, 0)
    assert definitions[1].attractor == "Home"

    sim = build_simulation(definitions, SimulationSettings(central_mass=overrides["central_mass"]))
    assert [b.name for b in sim.bodies] == ["Home", "Rock"]


def test_malformed_row_raises(tmp_path):
    path = tmp_path / "bad.json"
    path.write_text(json.dumps({"bodies": [{"name": "NoMass", "rotation_period": 1, "distance": 1}]}),
                    encoding="utf-8")
    with pytest.raises(ConfigurationError):
        load_template(str(path))


def test_missing_template_is_empty(tmp_path):
    definitions, overrides, display = load_template("nope.json", templates_dir=str(tmp_path))
    assert definitions == []
    assert overrides == {}
    assert display == "nope"


def test_bundled_templates_load():
    templates = dict(list_templates())
    assert templates["solar_system.json"] == "Solar System"
    definitions, overrides, _ = load_template("solar_system.json")
    assert [d.name for d in definitions] == [d.name for d in SOLAR_SYSTEM]
    for loaded, builtin in zip(definitions, SOLAR_SYSTEM):
        assert loaded.distance == pytest.approx(builtin.distance)
        assert loaded.color == builtin.color
    assert overrides["central_mass"] == pytest.approx(DEFAULT_CENTRAL_MASS)
