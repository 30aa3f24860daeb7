# simulation.py
"""
Handles the core simulation logic and physics calculations.

This module defines the Simulation class (the simulation field), which is
responsible for advancing the raindrops by one time step: Euler
integration, pointer repulsion and wrapping drops that fall past the
bottom of the canvas back to the top. It also owns the tunables (hue and
the fall-speed range) and applies parameter commands posted by the
ParameterController.
"""
import logging
import math
from collections import deque
from dataclasses import dataclass
import numpy as np
from typing import Dict, Any, Deque, Optional, Tuple
from numba import jit
from particle import ParticleSystem
from controller import Command, SetHue, RequestVelocityRange
from constants import FALL_DIRECTION, REPEL_RADIUS, REPEL_GAIN, Y_AXIS_UP

# --- Data Contracts ---
#
# class CanvasBounds:
#   - left, right, bottom, top: float edges in canvas coordinates.
#     "bottom" is the edge drops fall toward, whichever way the y axis
#     points.
#   - width: right - left.
#
# class Simulation:
#   - __init__(self, particles: ParticleSystem, params: Dict[str, Any]):
#     - Inputs:
#       - particles: An initialized ParticleSystem object.
#       - params: Dictionary of simulation parameters from config.json.
#         - "min_velocity", "max_velocity": float
#         - "repel_radius": float
#         - "repel_gain": float
#         - "hue": float
#     - Side Effects: Stores a reference to the particles. Creates the
#       command inbox.
#
#   - step(self, dt: float, pointer: Optional[Tuple[float, float]],
#          bounds: CanvasBounds) -> None:
#     - Side Effects: Consumes pending commands, applies a pending velocity
#       reassignment, syncs the drop color, then moves every drop.
#     - Invariants: Particle count remains constant. After the call no drop
#       lies past the bottom edge. 0 <= hue <= 1.

@dataclass(frozen=True)
class CanvasBounds:
    left: float
    right: float
    bottom: float
    top: float

    @property
    def width(self) -> float:
        return self.right - self.left


def canvas_bounds(width: float, height: float) -> CanvasBounds:
    """Bounds of a canvas centered on the origin, honoring Y_AXIS_UP."""
    half_w, half_h = width / 2.0, height / 2.0
    if Y_AXIS_UP:
        return CanvasBounds(left=-half_w, right=half_w, bottom=-half_h, top=half_h)
    return CanvasBounds(left=-half_w, right=half_w, bottom=half_h, top=-half_h)


@jit(nopython=True)
def _repel_numba(positions, pointer_x, pointer_y, radius, gain, dt):
    """
    Numba-jitted pointer repulsion, applied in place.

    Each drop within `radius` of the pointer is pushed directly away from it
    by (radius - distance) * gain * dt. A drop sitting exactly on the
    pointer has no defined direction and is left alone.
    """
    radius_sq = radius * radius
    for i in range(positions.shape[0]):
        dx = pointer_x - positions[i, 0]
        dy = pointer_y - positions[i, 1]
        distance_sq = dx * dx + dy * dy
        if 0.0 < distance_sq < radius_sq:
            distance = np.sqrt(distance_sq)
            push = (radius - distance) * gain * dt / distance
            positions[i, 0] -= dx * push
            positions[i, 1] -= dy * push


class Simulation:
    """
    Owns the raindrops and the global tunables, and advances them one frame
    at a time.
    """
    def __init__(self, particles: ParticleSystem, params: Dict[str, Any]):
        """
        Initializes the simulation field.

        Args:
            particles (ParticleSystem): The raindrops to simulate.
            params (Dict[str, Any]): Simulation parameters from config.
        """
        self.particles = particles
        self.rng = particles.rng
        self.fall_direction = FALL_DIRECTION

        self.repel_radius = float(params.get('repel_radius', REPEL_RADIUS))
        self.repel_gain = float(params.get('repel_gain', REPEL_GAIN))
        if self.repel_radius < 0 or self.repel_gain < 0:
            msg = (
                f"Configuration error: repel_radius ({self.repel_radius}) and "
                f"repel_gain ({self.repel_gain}) must be non-negative."
            )
            logging.critical(msg)
            raise ValueError(msg)

        self.min_velocity, self.max_velocity = sorted((
            float(params.get('min_velocity', 20.0)),
            float(params.get('max_velocity', 200.0)),
        ))
        self.velocity_reassignment_pending = False

        self.hue = 0.0
        self.set_hue(params.get('hue', particles.hue))
        self.sync_colors()

        # Commands posted by the ParameterController, consumed once per step.
        self.inbox: Deque[Command] = deque()

        logging.info("Simulation field initialized.")
        logging.info(
            f"Repulsion radius {self.repel_radius:.1f}, gain {self.repel_gain:.2f}; "
            f"fall speed range [{self.min_velocity:.1f}, {self.max_velocity:.1f}]."
        )

    def set_hue(self, hue: float) -> None:
        """Sets the shared hue, clamped to [0, 1]. Drops pick it up on the next step."""
        hue = float(hue)
        if math.isnan(hue):
            logging.warning(f"Ignoring NaN hue; keeping {self.hue:.3f}.")
            return
        self.hue = min(max(hue, 0.0), 1.0)
        logging.debug(f"Hue set to {self.hue:.3f}.")

    def sync_colors(self) -> None:
        self.particles.hue = self.hue

    def request_velocity_reassignment(self, min_velocity: float, max_velocity: float) -> None:
        """
        Stores new fall-speed bounds and marks every drop for a vertical
        velocity redraw at the start of the next step.

        Repeated requests before a step collapse into one redraw that uses
        the most recent bounds.
        """
        if min_velocity > max_velocity:
            logging.warning(
                f"Inverted velocity bounds ({min_velocity:.1f} > {max_velocity:.1f}); swapping."
            )
            min_velocity, max_velocity = max_velocity, min_velocity
        self.min_velocity = float(min_velocity)
        self.max_velocity = float(max_velocity)
        self.velocity_reassignment_pending = True
        logging.debug(
            f"Velocity reassignment requested: [{self.min_velocity:.1f}, {self.max_velocity:.1f}]."
        )

    def apply_pending_parameter_changes(self) -> int:
        """
        Applies every queued command in arrival order.

        Returns:
            int: The number of commands consumed.
        """
        applied = 0
        while self.inbox:
            command = self.inbox.popleft()
            if isinstance(command, SetHue):
                self.set_hue(command.hue)
            elif isinstance(command, RequestVelocityRange):
                self.request_velocity_reassignment(command.min_velocity, command.max_velocity)
            else:
                raise TypeError(f"Unknown parameter command: {command!r}")
            applied += 1
        return applied

    def _reassign_velocities(self) -> None:
        """Redraws every drop's vertical velocity from the current range."""
        velocities = self.particles.velocities
        speeds = self.rng.uniform(self.min_velocity, self.max_velocity, size=velocities.shape[0])
        velocities[:, 1] = self.fall_direction * speeds
        self.velocity_reassignment_pending = False
        logging.info(
            f"Reassigned fall speeds for {velocities.shape[0]} drops "
            f"from [{self.min_velocity:.1f}, {self.max_velocity:.1f}]."
        )

    def step(self, dt: float, pointer: Optional[Tuple[float, float]], bounds: CanvasBounds) -> None:
        """
        Executes one time step of the simulation.

        Args:
            dt (float): Elapsed time in seconds. Not validated.
            pointer (Optional[Tuple[float, float]]): Pointer position in
                canvas coordinates, or None when there is no pointer.
            bounds (CanvasBounds): The canvas edges.
        """
        # 1. Consume parameter commands posted since the last frame
        self.apply_pending_parameter_changes()

        # 2. Apply a pending fall-speed change exactly once
        if self.velocity_reassignment_pending:
            self._reassign_velocities()

        # 3. Propagate the shared hue
        self.sync_colors()

        # 4. Integrate positions (explicit Euler)
        positions = self.particles.positions
        positions += self.particles.velocities * dt

        # 5. Push drops away from the pointer
        if pointer is not None:
            _repel_numba(
                positions, float(pointer[0]), float(pointer[1]),
                self.repel_radius, self.repel_gain, float(dt)
            )

        # 6. Wrap drops that fell past the bottom edge back to the top
        fallen = (positions[:, 1] - bounds.bottom) * self.fall_direction > 0
        count = int(np.count_nonzero(fallen))
        if count:
            positions[fallen, 1] = bounds.top
            positions[fallen, 0] = self.rng.uniform(-bounds.width, bounds.width, size=count)
