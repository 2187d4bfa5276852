import pytest

from orbittrails.attractors import FixedAttractor
from orbittrails.data_models import Body, SimulationSettings
from orbittrails.simulation import Simulation


@pytest.fixture
def settings():
    return SimulationSettings(speed=1.0, central_mass=1000.0)


@pytest.fixture
def sim(settings):
    return Simulation(settings)


@pytest.fixture
def make_body():
    def _make(name="Body", mass=1.0, position=(10.0, 0.0, 0.0), velocity=(0.0, 0.0, 0.0),
              attractor=None, rotation_period=1.0, **kwargs):
        return Body(name=name, mass=mass, size=1.0, rotation_period=rotation_period,
                    position=position, velocity=velocity, attractor=attractor, **kwargs)
    return _make


@pytest.fixture
def origin_mass():
    return FixedAttractor((0.0, 0.0, 0.0), 1000.0)
