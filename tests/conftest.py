import numpy as np
import pytest

from particle import ParticleSystem
from simulation import Simulation, canvas_bounds


SMALL_PARAMS = {
    "seed": 42,
    "particle_count": 50,
    "hue": 0.0,
    "min_velocity": 20.0,
    "max_velocity": 200.0,
    "horizontal_velocity_range": [20.0, 40.0],
    "spawn_height_range": [300.0, 600.0],
    "repel_radius": 200.0,
    "repel_gain": 2.0,
}

# Far enough from the canvas that no drop is ever inside the repel radius.
FAR_POINTER = (1.0e6, 1.0e6)


@pytest.fixture
def params():
    return dict(SMALL_PARAMS)


@pytest.fixture
def particles(params):
    return ParticleSystem(params, 1200.0)


@pytest.fixture
def sim(particles, params):
    return Simulation(particles, params)


@pytest.fixture
def bounds():
    return canvas_bounds(1200.0, 800.0)


def place(particles, positions, velocities):
    """Replaces the particle arrays in place with the given rows."""
    particles.positions = np.array(positions, dtype=np.float64)
    particles.velocities = np.array(velocities, dtype=np.float64)
    particles.particle_count = particles.positions.shape[0]
