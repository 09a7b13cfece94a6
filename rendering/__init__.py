"""
Rendering modules.

Contains the rendering engine, the cartridge drawing context and the debug overlay.
"""

from .drawing_context import DrawingContext, DrawingError
from .renderer import RenderingEngine

__all__ = ["RenderingEngine", "DrawingContext", "DrawingError"]
