import math

import pytest

from orbittrails.attractors import BodyAttractor, FixedAttractor
from orbittrails.constants import G
from orbittrails.physics import (
    GravityIntegrator,
    advance_rotation,
    circular_orbit_state,
    circular_orbit_velocity,
    specific_orbital_energy,
)
from orbittrails.vector_utils import vec_len


def test_acceleration_is_inverse_square_toward_attractor(origin_mass):
    integrator = GravityIntegrator()
    a = integrator.acceleration((10.0, 0.0, 0.0), origin_mass)
    assert a == pytest.approx((-G * 1000.0 / 100.0, 0.0, 0.0))

    a_far = integrator.acceleration((0.0, 0.0, -20.0), origin_mass)
    assert a_far == pytest.approx((0.0, 0.0, G * 1000.0 / 400.0))


def test_no_attractor_means_no_acceleration():
    assert GravityIntegrator().acceleration((1.0, 2.0, 3.0), None) is None


def test_integrate_updates_velocity_before_position(origin_mass):
    integrator = GravityIntegrator()
    pos, vel = integrator.integrate((10.0, 0.0, 0.0), (0.0, 0.0, 1.0), origin_mass, 0.1, 2.0)
    # dt = 0.2, a = -10 along x
    assert vel == pytest.approx((-2.0, 0.0, 1.0))
    assert pos == pytest.approx((10.0 - 0.4, 0.0, 0.2))


def test_attractor_mass_is_read_live():
    mass = {"value": 1000.0}
    attractor = FixedAttractor((0.0, 0.0, 0.0), lambda: mass["value"])
    integrator = GravityIntegrator()
    before = integrator.acceleration((10.0, 0.0, 0.0), attractor)
    mass["value"] = 2000.0
    after = integrator.acceleration((10.0, 0.0, 0.0), attractor)
    assert after[0] == pytest.approx(2 * before[0])


def test_coincident_positions_skip_acceleration(make_body, origin_mass):
    body = make_body(position=(0.0, 0.0, 0.0), velocity=(1.0, -2.0, 0.5), attractor=origin_mass)
    GravityIntegrator().step_body(body, 0.5, 2.0)
    assert body.velocity == (1.0, -2.0, 0.5)
    assert body.position == pytest.approx((1.0, -2.0, 0.5))
    assert all(math.isfinite(c) for c in body.position + body.velocity)


def test_separation_below_epsilon_is_degenerate(origin_mass):
    integrator = GravityIntegrator()
    assert integrator.acceleration((0.0005, 0.0, 0.0), origin_mass) is None
    assert integrator.acceleration((0.002, 0.0, 0.0), origin_mass) is not None


def test_speed_zero_freezes_state(make_body, origin_mass):
    body = make_body(velocity=(0.0, 0.0, 5.0), attractor=origin_mass)
    GravityIntegrator().step_body(body, 1.0, 0.0)
    assert body.position == (10.0, 0.0, 0.0)
    assert body.velocity == (0.0, 0.0, 5.0)
    assert body.rotation_phase == 0.0


def test_rotation_phase_advances_with_scaled_time():
    assert advance_rotation(0.0, 2.0, 0.5, 2.0) == pytest.approx(math.pi)
    assert advance_rotation(1.0, 1.0, 0.0, 3.0) == 1.0


def test_circular_orbit_velocity():
    assert circular_orbit_velocity(3161.4, 20.0) == pytest.approx(math.sqrt(3161.4 / 20.0))
    assert circular_orbit_velocity(100.0, 0.0) == 0.0


def test_circular_orbit_stays_near_radius(make_body):
    mass, r = 3161.4, 20.0
    star = FixedAttractor((0.0, 0.0, 0.0), mass)
    position, velocity = circular_orbit_state(star, r)
    assert position == (r, 0.0, 0.0)
    assert velocity == pytest.approx((0.0, 0.0, math.sqrt(mass / r)))

    body = make_body(position=position, velocity=velocity, attractor=star)
    integrator = GravityIntegrator()
    period = 2 * math.pi * r / math.sqrt(mass / r)
    dt = 1.0 / 240.0
    steps = int(3 * period / dt)
    radii = []
    for _ in range(steps):
        integrator.step_body(body, dt, 1.0)
        radii.append(vec_len(body.position))
    assert min(radii) > r * 0.98
    assert max(radii) < r * 1.02


def test_satellite_seeding_adds_attractor_velocity(make_body, origin_mass):
    planet = make_body(name="Planet", mass=10.0, position=(20.0, 0.0, 0.0),
                       velocity=(0.0, 0.0, 7.0), attractor=origin_mass)
    position, velocity = circular_orbit_state(BodyAttractor(planet), 3.0)
    assert position == (23.0, 0.0, 0.0)
    assert velocity == pytest.approx((0.0, 0.0, 7.0 + math.sqrt(10.0 / 3.0)))


def test_specific_orbital_energy_is_negative_for_bound_orbit(make_body):
    star = FixedAttractor((0.0, 0.0, 0.0), 1000.0)
    position, velocity = circular_orbit_state(star, 10.0)
    body = make_body(position=position, velocity=velocity, attractor=star)
    # circular orbit: E = -GM / 2r
    assert specific_orbital_energy(body) == pytest.approx(-1000.0 / 20.0)
    assert specific_orbital_energy(make_body()) is None
