# constants.py
"""
Application-level constants.

These values are static and do not change between runs. They describe the
rendering surface, the canvas coordinate convention and the default physics
settings that are not part of the tunable configuration.
"""

# Window settings
# The main canvas the raindrops fall on.
WINDOW_WIDTH = 1200
WINDOW_HEIGHT = 800
# The control panel is drawn to the right of the canvas.
UI_PANEL_WIDTH = 260
UI_PANEL_HEIGHT = 140
FPS = 60
BACKGROUND_COLOR = (0, 0, 0) # Black
UI_BACKGROUND_COLOR = (40, 40, 40)

# --- Canvas Coordinate Convention ---
# The canvas origin is its center. With Y_AXIS_UP the y axis grows upward,
# so "falling" means decreasing y. Both the wrap check and the sign of the
# vertical velocity are derived from FALL_DIRECTION.
Y_AXIS_UP = True
FALL_DIRECTION = -1.0 if Y_AXIS_UP else 1.0

# --- Raindrop Geometry ---
# Each drop is drawn as a line from its position to position + offset.
# The offset trails behind the drop, against the fall direction.
LINE_LENGTH = 8.0
LINE_SLANT = -1.5
LINE_OFFSET = (LINE_SLANT, -FALL_DIRECTION * LINE_LENGTH)
LINE_WEIGHT = 3

# --- Pointer Repulsion ---
REPEL_RADIUS = 200.0
REPEL_GAIN = 2.0

# Particle count is fixed for the lifetime of the simulation.
PARTICLE_COUNT = 1200

# Slider ranges of the control panel (lo, hi). The simulation itself does
# not enforce these.
HUE_RANGE = (0.0, 1.0)
MIN_VELOCITY_RANGE = (1.0, 100.0)
MAX_VELOCITY_RANGE = (100.0, 500.0)
