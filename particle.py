# particle.py
"""
Manages the state of all raindrops in the simulation.

This module defines the ParticleSystem class, which is responsible for
spawning and storing raindrop data (position, velocity) in NumPy arrays,
and for projecting that state into line segments for rendering.
"""
import logging
import numpy as np
from typing import Dict, Any, Iterator, Optional, Tuple
from constants import FALL_DIRECTION, LINE_OFFSET, PARTICLE_COUNT

# --- Data Contracts ---
#
# class ParticleSystem:
#   - __init__(self, params: Dict[str, Any], width: float,
#              rng: Optional[np.random.Generator] = None):
#     - Inputs:
#       - params: Dictionary of simulation parameters from config.json.
#         - "seed": Optional[int]
#         - "particle_count": int
#         - "min_velocity", "max_velocity": float (positive magnitudes)
#         - "horizontal_velocity_range": [float, float]
#         - "spawn_height_range": [float, float]
#         - "hue": float in [0, 1]
#       - width: float, width of the canvas. Drops spawn with x in
#         [-width, width].
#       - rng: Optional generator. If omitted, one is built from "seed".
#     - Outputs: None
#     - Side Effects: Initializes internal NumPy arrays for particle state.
#     - Invariants:
#       - self.positions is a NumPy array of shape (N, 2) of dtype float64.
#       - self.velocities is a NumPy array of shape (N, 2) of dtype float64.
#       - N never changes after construction.
#       - self.hue is the hue every drop is rendered with.
#
#   - iter_segments(self) -> Iterator[(start, end, color)]:
#     - Read-only projection for the renderer. color is an HSV triple.

class ParticleSystem:
    """
    A container for all raindrops, managing their state via NumPy arrays.

    Drops carry no individual color: every drop shares ``self.hue`` with
    saturation and value fixed at maximum.
    """
    def __init__(self, params: Dict[str, Any], width: float,
                 rng: Optional[np.random.Generator] = None):
        """
        Spawns the raindrops.

        Args:
            params (Dict[str, Any]): Simulation parameters from config.
            width (float): The width of the canvas.
            rng (Optional[np.random.Generator]): Shared random source.
        """
        self.particle_count = int(params.get('particle_count', PARTICLE_COUNT))
        self.seed = params.get('seed')

        # All randomness in a run (spawn, wrap respawn, velocity
        # reassignment) is drawn from this one generator.
        self.rng = rng if rng is not None else np.random.default_rng(self.seed)

        min_velocity = float(params.get('min_velocity', 20.0))
        max_velocity = float(params.get('max_velocity', 200.0))
        h_lo, h_hi = params.get('horizontal_velocity_range', (20.0, 40.0))
        y_lo, y_hi = params.get('spawn_height_range', (300.0, 600.0))

        n = self.particle_count
        self.positions = np.empty((n, 2), dtype=np.float64)
        self.positions[:, 0] = self.rng.uniform(-width, width, size=n)
        self.positions[:, 1] = self.rng.uniform(y_lo, y_hi, size=n)

        # The whole sheet of rain drifts sideways at one shared speed.
        self.velocities = np.empty((n, 2), dtype=np.float64)
        self.velocities[:, 0] = self.rng.uniform(h_lo, h_hi)
        low, high = sorted((min_velocity, max_velocity))
        self.velocities[:, 1] = FALL_DIRECTION * self.rng.uniform(low, high, size=n)

        self.hue = float(params.get('hue', 0.0))

        logging.info(f"ParticleSystem initialized with {self.particle_count} raindrops.")
        logging.debug(
            f"Particle data arrays created. "
            f"Positions shape: {self.positions.shape}, "
            f"Velocities shape: {self.velocities.shape}"
        )

    def __len__(self) -> int:
        return self.particle_count

    @property
    def color(self) -> Tuple[float, float, float]:
        """The HSV color shared by every drop."""
        return (self.hue, 1.0, 1.0)

    def segments(self) -> Tuple[np.ndarray, np.ndarray]:
        """Returns (starts, ends) arrays of shape (N, 2) in canvas coordinates."""
        starts = self.positions.copy()
        ends = starts + np.asarray(LINE_OFFSET, dtype=np.float64)
        return starts, ends

    def iter_segments(self) -> Iterator[Tuple[Tuple[float, float], Tuple[float, float], Tuple[float, float, float]]]:
        """Yields (start, end, color) for each drop."""
        starts, ends = self.segments()
        color = self.color
        for start, end in zip(starts, ends):
            yield (float(start[0]), float(start[1])), (float(end[0]), float(end[1])), color
