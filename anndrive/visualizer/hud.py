"""
Training HUD (Heads-Up Display)
================================

On-screen overlay showing the training status: accepted error, learning
rate and how much of the epoch budget has been used.
"""

from typing import List

import pygame

from config import Config
from anndrive.driving.controller import TrainingStatus


class TrainingHUD:
    """
    On-screen training statistics overlay.

    Displays:
    - SSE (last accepted epoch error)
    - Alpha (learning rate)
    - Trained (fraction of the epoch budget consumed)
    - Training progress bar
    """

    def __init__(self, config: Config):
        """
        Initialize the HUD.

        Args:
            config: Configuration object
        """
        self.config = config
        self.enabled = config.HUD_ENABLED

        self._font = pygame.font.Font(None, config.HUD_FONT_SIZE)

        # Colors
        self.text_color = config.COLOR_TEXT
        self.accent_color = (52, 152, 219)  # Blue
        self.good_color = (46, 204, 113)  # Green

    @staticmethod
    def format_lines(status: TrainingStatus) -> List[str]:
        """Text of each HUD label, top to bottom."""
        return [
            f"SSE: {status.sse}",
            f"Alpha: {status.alpha}",
            f"Trained: {status.progress}",
        ]

    def render(self, surface: pygame.Surface, status: TrainingStatus) -> None:
        """
        Render all HUD elements onto the surface.

        Args:
            surface: Pygame surface to render onto
            status: Current training status
        """
        if not self.enabled:
            return

        x, y = self.config.HUD_ORIGIN
        for line in self.format_lines(status):
            surface.blit(self._font.render(line, True, self.text_color), (x, y))
            y += self.config.HUD_LINE_SPACING

        self._render_progress_bar(surface, status)

    def _render_progress_bar(self, surface: pygame.Surface, status: TrainingStatus) -> None:
        """Render training progress bar at bottom of screen."""
        screen_width = surface.get_width()
        screen_height = surface.get_height()

        bar_width = max(10, screen_width - 40)
        bar_height = 8
        bar_x = 20
        bar_y = screen_height - 12

        progress = min(max(status.progress, 0.0), 1.0)

        pygame.draw.rect(surface, (40, 40, 40), (bar_x, bar_y, bar_width, bar_height), border_radius=4)

        fill_width = int(bar_width * progress)
        if fill_width > 0:
            fill_color = self.good_color if status.done else self.accent_color
            pygame.draw.rect(surface, fill_color, (bar_x, bar_y, fill_width, bar_height), border_radius=4)
