import numpy as np
import pytest

from constants import FALL_DIRECTION
from controller import ParameterController, RequestVelocityRange, SetHue
from conftest import FAR_POINTER


@pytest.fixture
def controller(sim):
    return ParameterController(sim.inbox)


def test_events_become_commands(controller, sim):
    controller.on_hue_changed(0.5)
    controller.on_velocity_range_changed(10.0, 150.0)
    assert list(sim.inbox) == [SetHue(0.5), RequestVelocityRange(10.0, 150.0)]


def test_commands_are_not_applied_until_consumed(controller, sim, particles):
    velocities = particles.velocities.copy()
    controller.on_hue_changed(0.5)
    controller.on_velocity_range_changed(10.0, 150.0)
    assert sim.hue == 0.0
    assert not sim.velocity_reassignment_pending
    np.testing.assert_array_equal(particles.velocities, velocities)


def test_apply_pending_consumes_in_order(controller, sim):
    controller.on_hue_changed(0.2)
    controller.on_hue_changed(0.6)
    assert sim.apply_pending_parameter_changes() == 2
    assert sim.hue == 0.6
    assert not sim.inbox
    assert sim.apply_pending_parameter_changes() == 0


def test_slider_burst_reassigns_once_with_latest_range(controller, sim, particles, bounds):
    for max_velocity in range(100, 500, 25):
        controller.on_velocity_range_changed(40.0, float(max_velocity))
    controller.on_velocity_range_changed(40.0, 45.0)
    sim.step(0.0, FAR_POINTER, bounds)

    assert not sim.velocity_reassignment_pending
    assert (sim.min_velocity, sim.max_velocity) == (40.0, 45.0)
    speeds = particles.velocities[:, 1] * FALL_DIRECTION
    assert np.all(speeds >= 40.0)
    assert np.all(speeds <= 45.0)


def test_hue_command_reaches_particles_on_step(controller, sim, particles, bounds):
    controller.on_hue_changed(0.9)
    sim.step(0.0, FAR_POINTER, bounds)
    assert particles.color == (0.9, 1.0, 1.0)


def test_unknown_command_rejected(sim):
    sim.inbox.append("faster please")
    with pytest.raises(TypeError):
        sim.apply_pending_parameter_changes()
