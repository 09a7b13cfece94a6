"""
core/cartridge.py
-----------------
Cartridge base class and registry record.

A cartridge is any object (or module) exposing
    draw(ctx, spectrum, width, height, state) -> dict | None
and optionally
    setup(ctx) -> dict | None

Subclassing Cartridge is optional; it only supplies metadata and a no-op
setup. There is deliberately no default draw(), so a subclass that forgets
to implement it is rejected by the validator.
"""

from dataclasses import dataclass
from typing import Any


class Cartridge:
    """
    Optional base class for class-based cartridges.

    Metadata:
        name: Human-readable cartridge name (shown in logs and the overlay)
        version: Semantic version string (e.g., "1.0.0")
        author: Cartridge author
        description: Brief description of the visual
    """

    # Metadata (override in subclasses)
    name: str = "Unnamed Cartridge"
    version: str = "1.0.0"
    author: str = "Unknown"
    description: str = ""

    def get_metadata(self):
        """Return structured metadata dictionary."""
        return {
            "name": self.name,
            "version": self.version,
            "author": self.author,
            "description": self.description,
        }

    def setup(self, ctx):
        """Called once before the first draw. Return the initial state or None."""
        return None


def display_name(cartridge) -> str:
    """Best-effort human name for a cartridge object or module."""
    name = getattr(cartridge, "name", None)
    if isinstance(name, str) and name:
        return name
    return getattr(cartridge, "__name__", None) or type(cartridge).__name__


@dataclass
class CartridgeRecord:
    """One admitted cartridge, owned by the registry."""
    id: str
    cartridge: Any
    name: str
