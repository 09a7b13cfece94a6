"""
Rendering engine.

Owns the target surface and the DrawingContext cartridges draw into.
"""

from typing import Optional, Tuple

import pygame

import showlog
from helper import to_rgb
from rendering.drawing_context import DrawingContext


class RenderingEngine:
    """Surface owner and DrawingContext factory."""

    def __init__(self):
        self.surface: Optional[pygame.Surface] = None
        self._context: Optional[DrawingContext] = None

    def initialize(self, surface: pygame.Surface) -> DrawingContext:
        """
        Bind the engine to a surface.

        Args:
            surface: Display surface (or any pygame.Surface when headless)

        Returns:
            DrawingContext for the surface
        """
        if surface is None:
            raise ValueError("RenderingEngine.initialize() requires a surface")
        self.surface = surface
        self._context = DrawingContext(surface)
        showlog.debug(f"[RENDERER] Initialized {surface.get_width()}x{surface.get_height()}")
        return self._context

    @property
    def initialized(self) -> bool:
        return self._context is not None

    def get_drawing_context(self) -> DrawingContext:
        if self._context is None:
            raise RuntimeError("Rendering engine not initialized")
        return self._context

    def clear(self, color=0):
        """Fill the whole surface and reset stroke/fill defaults for the frame."""
        ctx = self.get_drawing_context()
        self.surface.fill(to_rgb(color))
        ctx.reset()

    def get_dimensions(self) -> Tuple[int, int]:
        if self.surface is None:
            return (0, 0)
        return self.surface.get_size()

    def resize(self, surface: pygame.Surface):
        """Rebind to a new surface after a window resize; context state is kept."""
        if self._context is None:
            self.initialize(surface)
            return
        self.surface = surface
        self._context.surface = surface
        showlog.debug(f"[RENDERER] Resized to {surface.get_width()}x{surface.get_height()}")
