"""
Display and screen management.

Handles pygame display setup, window resizing and teardown.
"""

import pygame
from typing import Tuple


class DisplayManager:
    """Manages the pygame display and screen."""

    def __init__(self, width: int = 1280, height: int = 720, fullscreen: bool = False,
                 resizable: bool = True, title: str = "SoundBackgrounds",
                 hide_cursor: bool = False):
        """
        Initialize the display manager.

        Args:
            width: Window width in pixels
            height: Window height in pixels
            fullscreen: Whether to use fullscreen mode
            resizable: Allow the window to be resized (windowed mode only)
            title: Window caption
            hide_cursor: Hide the mouse cursor over the window
        """
        self.width = width
        self.height = height
        self.fullscreen = fullscreen
        self.resizable = resizable
        self.title = title
        self.hide_cursor = hide_cursor
        self.screen = None

    def _flags(self) -> int:
        if self.fullscreen:
            return pygame.FULLSCREEN
        return pygame.RESIZABLE if self.resizable else 0

    def initialize(self) -> pygame.Surface:
        """
        Initialize pygame and create the display surface.

        Returns:
            The pygame screen surface
        """
        pygame.init()
        pygame.display.set_caption(self.title)

        size = (0, 0) if self.fullscreen else (self.width, self.height)
        self.screen = pygame.display.set_mode(size, self._flags())
        self.width, self.height = self.screen.get_size()

        pygame.mouse.set_visible(not self.hide_cursor)
        return self.screen

    def resize(self, width: int, height: int) -> pygame.Surface:
        """Recreate the window surface at a new size (windowed mode)."""
        self.width = max(1, int(width))
        self.height = max(1, int(height))
        if not self.fullscreen:
            self.screen = pygame.display.set_mode((self.width, self.height), self._flags())
        else:
            self.screen = pygame.display.get_surface()
        return self.screen

    def get_screen(self) -> pygame.Surface:
        """Get the screen surface."""
        return self.screen

    def get_size(self) -> Tuple[int, int]:
        """Get the screen dimensions."""
        return (self.width, self.height)

    def present(self):
        """Flip the back buffer to the window."""
        pygame.display.flip()

    def cleanup(self):
        """Clean up pygame display."""
        pygame.quit()
        self.screen = None
