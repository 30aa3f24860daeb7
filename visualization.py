# visualization.py
"""
Handles the visualization of the rainfall using Pygame.

The Visualizer draws the canvas and the control panel, turns slider drags
into ParameterController calls and reports the pointer position in canvas
coordinates. It only reads particle state, between simulation steps.
"""
import logging
import pygame
import numpy as np
from particle import ParticleSystem
from controller import ParameterController
from constants import (
    BACKGROUND_COLOR, UI_BACKGROUND_COLOR, WINDOW_WIDTH, WINDOW_HEIGHT,
    UI_PANEL_WIDTH, UI_PANEL_HEIGHT, LINE_WEIGHT, Y_AXIS_UP, FPS,
    HUE_RANGE, MIN_VELOCITY_RANGE, MAX_VELOCITY_RANGE
)
from typing import Tuple, Optional

# --- Data Contracts ---
#
# class Visualizer:
#   - __init__(self, controller: ParameterController, hue: float,
#              min_velocity: float, max_velocity: float,
#              vis_params: Optional[dict] = None):
#     - Side Effects: Initializes Pygame and creates the display surface
#       (canvas plus control panel).
#
#   - tick(self) -> float:
#     - Outputs: seconds elapsed since the previous frame, paced at fps.
#
#   - pointer_position(self) -> Optional[Tuple[float, float]]:
#     - Outputs: the mouse in canvas coordinates, or None when the mouse is
#       not over the canvas.
#
#   - draw(self, particles: ParticleSystem) -> bool:
#     - Outputs: False if the user has quit, True otherwise.
#     - Side Effects: Renders drops and UI, handles Pygame events, and
#       forwards slider changes to the controller.

# Slider palette
TEXT_COLOR = (255, 255, 255)
DIM_TEXT_COLOR = (200, 200, 200)
TRACK_COLOR = (70, 70, 70)
FILL_COLOR = (110, 110, 110)
KNOB_COLOR = (0, 200, 255)


def canvas_to_screen(points: np.ndarray, width: float, height: float) -> np.ndarray:
    """Maps (N, 2) canvas coordinates (origin at center) to screen pixels."""
    screen = np.empty_like(points, dtype=np.float64)
    screen[..., 0] = points[..., 0] + width / 2.0
    if Y_AXIS_UP:
        screen[..., 1] = height / 2.0 - points[..., 1]
    else:
        screen[..., 1] = points[..., 1] + height / 2.0
    return screen


def screen_to_canvas(pos: Tuple[float, float], width: float, height: float) -> Tuple[float, float]:
    """Inverse of canvas_to_screen for a single point."""
    x = pos[0] - width / 2.0
    if Y_AXIS_UP:
        y = height / 2.0 - pos[1]
    else:
        y = pos[1] - height / 2.0
    return (x, y)


def hsv_to_color(hsv: Tuple[float, float, float]) -> pygame.Color:
    """Converts an HSV triple in [0, 1] to a pygame Color."""
    h, s, v = hsv
    color = pygame.Color(0, 0, 0)
    color.hsva = (h * 360.0, s * 100.0, v * 100.0, 100.0)
    return color


class Slider:
    """A horizontal drag slider with a label and a formatted value."""
    HEIGHT = 10

    def __init__(self, label: str, x: int, y: int, w: int, lo: float, hi: float, val: float, fmt: str = "{:.2f}"):
        self.label = label
        self.x, self.y, self.w = x, y, w
        self.lo, self.hi = lo, hi
        self.val = min(max(val, lo), hi)
        self.fmt = fmt
        self._drag = False

    @property
    def track(self) -> pygame.Rect:
        return pygame.Rect(self.x, self.y + 16, self.w, self.HEIGHT)

    def _set_from_x(self, px: int) -> bool:
        t = min(max((px - self.x) / self.w, 0.0), 1.0)
        new_val = self.lo + t * (self.hi - self.lo)
        changed = new_val != self.val
        self.val = new_val
        return changed

    def handle(self, event) -> bool:
        """Processes one event. Returns True if the value changed."""
        if event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
            if self.track.inflate(16, 16).collidepoint(event.pos):
                self._drag = True
                return self._set_from_x(event.pos[0])
        elif event.type == pygame.MOUSEBUTTONUP and event.button == 1:
            self._drag = False
        elif event.type == pygame.MOUSEMOTION and self._drag:
            return self._set_from_x(event.pos[0])
        return False

    def draw(self, surf: pygame.Surface, font: pygame.font.Font):
        label_surf = font.render(self.label, True, DIM_TEXT_COLOR)
        surf.blit(label_surf, (self.x, self.y))
        value_surf = font.render(self.fmt.format(self.val), True, TEXT_COLOR)
        surf.blit(value_surf, value_surf.get_rect(topright=(self.x + self.w, self.y)))

        track = self.track
        pygame.draw.rect(surf, TRACK_COLOR, track, border_radius=4)
        t = (self.val - self.lo) / (self.hi - self.lo)
        fill = pygame.Rect(track.x, track.y, max(self.HEIGHT, int(t * self.w)), track.h)
        pygame.draw.rect(surf, FILL_COLOR, fill, border_radius=4)
        pygame.draw.circle(surf, KNOB_COLOR, (track.x + int(t * self.w), track.centery), 7)


class Visualizer:
    """
    Renders the raindrops and the control panel.
    """
    def __init__(self, controller: ParameterController, hue: float,
                 min_velocity: float, max_velocity: float,
                 vis_params: Optional[dict] = None):
        """
        Initializes Pygame and the display window.
        """
        vis_params = vis_params if vis_params is not None else {}
        pygame.init()
        pygame.font.init()

        self.canvas_width = WINDOW_WIDTH
        self.canvas_height = WINDOW_HEIGHT
        width, height = WINDOW_WIDTH + UI_PANEL_WIDTH, WINDOW_HEIGHT
        self.screen = pygame.display.set_mode((width, height))
        pygame.display.set_caption(vis_params.get('caption', 'Rainfall'))

        self.canvas_surface = pygame.Surface((self.canvas_width, self.canvas_height))
        self.canvas_rect = self.canvas_surface.get_rect()
        self.panel_rect = pygame.Rect(self.canvas_width, 0, UI_PANEL_WIDTH, UI_PANEL_HEIGHT)

        self.clock = pygame.time.Clock()
        self.fps = vis_params.get('fps', FPS)
        self.controller = controller

        self.font_title = pygame.font.SysFont(None, 20, bold=True)
        self.font_main = pygame.font.SysFont(None, 18)

        # --- Control Panel Layout ---
        pad = 12
        sx = self.panel_rect.x + pad
        sw = UI_PANEL_WIDTH - 2 * pad
        sy = self.panel_rect.y + 26
        self.hue_slider = Slider("Color Hue", sx, sy, sw, *HUE_RANGE, hue)
        self.min_velocity_slider = Slider("Min Velocity", sx, sy + 36, sw, *MIN_VELOCITY_RANGE, min_velocity, "{:.1f}")
        self.max_velocity_slider = Slider("Max Velocity", sx, sy + 72, sw, *MAX_VELOCITY_RANGE, max_velocity, "{:.1f}")

        logging.info(f"Visualizer initialized with Pygame display ({width}x{height}).")

    def tick(self) -> float:
        """Waits for the next frame and returns the elapsed time in seconds."""
        return self.clock.tick(self.fps) / 1000.0

    def pointer_position(self) -> Optional[Tuple[float, float]]:
        if not pygame.mouse.get_focused():
            return None
        mouse_pos = pygame.mouse.get_pos()
        if not self.canvas_rect.collidepoint(mouse_pos):
            return None
        return screen_to_canvas(mouse_pos, self.canvas_width, self.canvas_height)

    def _handle_slider_event(self, event):
        if self.hue_slider.handle(event):
            self.controller.on_hue_changed(self.hue_slider.val)
        min_changed = self.min_velocity_slider.handle(event)
        max_changed = self.max_velocity_slider.handle(event)
        if min_changed or max_changed:
            self.controller.on_velocity_range_changed(
                self.min_velocity_slider.val, self.max_velocity_slider.val
            )

    def _draw_control_panel(self):
        """Renders the panel background, its title and the sliders."""
        pygame.draw.rect(self.screen, UI_BACKGROUND_COLOR, self.panel_rect)
        title_surf = self.font_title.render("Control Panel", True, TEXT_COLOR)
        self.screen.blit(title_surf, (self.panel_rect.x + 12, self.panel_rect.y + 6))
        for slider in (self.hue_slider, self.min_velocity_slider, self.max_velocity_slider):
            slider.draw(self.screen, self.font_main)

    def draw(self, particles: ParticleSystem) -> bool:
        """
        Draws all raindrops and the UI, and handles events.

        Returns:
            bool: False if the application should exit, True otherwise.
        """
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                logging.info("Quit event received. Shutting down visualizer.")
                return False
            if event.type == pygame.KEYDOWN and event.key == pygame.K_ESCAPE:
                logging.info("ESC key pressed. Shutting down visualizer.")
                return False
            if event.type in (pygame.MOUSEBUTTONDOWN, pygame.MOUSEBUTTONUP, pygame.MOUSEMOTION):
                self._handle_slider_event(event)

        self.screen.fill(UI_BACKGROUND_COLOR)
        self.canvas_surface.fill(BACKGROUND_COLOR)

        starts, ends = particles.segments()
        starts = canvas_to_screen(starts, self.canvas_width, self.canvas_height)
        ends = canvas_to_screen(ends, self.canvas_width, self.canvas_height)
        color = hsv_to_color(particles.color)
        for start, end in zip(starts.tolist(), ends.tolist()):
            pygame.draw.line(self.canvas_surface, color, start, end, LINE_WEIGHT)

        self.screen.blit(self.canvas_surface, (0, 0))
        self._draw_control_panel()

        pygame.display.flip()
        return True

    def close(self):
        """Shuts down Pygame."""
        pygame.font.quit()
        pygame.quit()
