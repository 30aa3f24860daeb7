import numpy as np
import pytest

from constants import FALL_DIRECTION, LINE_OFFSET, PARTICLE_COUNT
from particle import ParticleSystem


def test_spawn_ranges(particles):
    assert len(particles) == 50
    assert particles.positions.shape == (50, 2)
    assert particles.velocities.shape == (50, 2)
    assert np.all(particles.positions[:, 0] >= -1200.0)
    assert np.all(particles.positions[:, 0] <= 1200.0)
    assert np.all(particles.positions[:, 1] >= 300.0)
    assert np.all(particles.positions[:, 1] <= 600.0)


def test_spawn_velocities(particles):
    vx = particles.velocities[:, 0]
    assert np.all(vx == vx[0])
    assert 20.0 <= vx[0] <= 40.0

    speeds = particles.velocities[:, 1] * FALL_DIRECTION
    assert np.all(speeds >= 20.0)
    assert np.all(speeds <= 200.0)


def test_default_particle_count():
    particles = ParticleSystem({"seed": 1}, 1200.0)
    assert len(particles) == PARTICLE_COUNT


def test_same_seed_same_spawn(params):
    a = ParticleSystem(params, 1200.0)
    b = ParticleSystem(params, 1200.0)
    np.testing.assert_array_equal(a.positions, b.positions)
    np.testing.assert_array_equal(a.velocities, b.velocities)


def test_shared_generator_is_used(params):
    rng = np.random.default_rng(7)
    particles = ParticleSystem(params, 1200.0, rng=rng)
    assert particles.rng is rng


def test_segments_have_fixed_offset(particles):
    starts, ends = particles.segments()
    np.testing.assert_allclose(ends - starts, np.tile(LINE_OFFSET, (len(particles), 1)))
    np.testing.assert_array_equal(starts, particles.positions)
    assert starts is not particles.positions


def test_segment_trails_against_fall():
    assert LINE_OFFSET[0] == pytest.approx(-1.5)
    assert LINE_OFFSET[1] * FALL_DIRECTION == pytest.approx(-8.0)


def test_iter_segments_yields_shared_color(particles):
    particles.hue = 0.25
    segments = list(particles.iter_segments())
    assert len(segments) == len(particles)
    start, end, color = segments[0]
    assert color == (0.25, 1.0, 1.0)
    assert end[0] - start[0] == pytest.approx(LINE_OFFSET[0])
    assert end[1] - start[1] == pytest.approx(LINE_OFFSET[1])
