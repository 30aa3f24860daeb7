# controller.py
"""
Translates control panel input into simulation commands.

The ParameterController holds no simulation state. Slider events become
discrete commands that are queued on the simulation's inbox and consumed
once per frame at the start of Simulation.step().
"""
import logging
from dataclasses import dataclass
from typing import Deque, Union

# --- Data Contracts ---
#
# SetHue(hue: float)
#   - Continuous: applied on the next step, clamped to [0, 1] there.
#
# RequestVelocityRange(min_velocity: float, max_velocity: float)
#   - Edge-triggered: every drop's vertical velocity is redrawn once on the
#     next step, from the bounds of the latest request.
#
# class ParameterController:
#   - __init__(self, inbox: Deque[Command]):
#     - Inputs: the queue the simulation drains (Simulation.inbox).
#   - on_hue_changed(hue) / on_velocity_range_changed(min, max):
#     - Side Effects: append one command to the inbox. Nothing else.

@dataclass(frozen=True)
class SetHue:
    hue: float


@dataclass(frozen=True)
class RequestVelocityRange:
    min_velocity: float
    max_velocity: float


Command = Union[SetHue, RequestVelocityRange]


class ParameterController:
    """
    Adapter between UI change events and the simulation's command inbox.
    """
    def __init__(self, inbox: Deque[Command]):
        self.inbox = inbox

    def on_hue_changed(self, hue: float) -> None:
        self.inbox.append(SetHue(float(hue)))

    def on_velocity_range_changed(self, min_velocity: float, max_velocity: float) -> None:
        """Called when either velocity slider moves, with both current values."""
        self.inbox.append(RequestVelocityRange(float(min_velocity), float(max_velocity)))
        logging.debug(
            f"Queued velocity range [{min_velocity:.1f}, {max_velocity:.1f}] "
            f"({len(self.inbox)} pending commands)."
        )
