# helper.py
import pygame


def to_rgb(value):
    """Convert a grayscale int, '#RRGGBB' hex string or RGB tuple to (r, g, b)."""
    if isinstance(value, pygame.Color):
        return (value.r, value.g, value.b)
    if isinstance(value, bool):
        raise TypeError(f"Unsupported color format: {value!r}")
    if isinstance(value, (int, float)):
        v = max(0, min(255, int(value)))
        return (v, v, v)
    if isinstance(value, (tuple, list)) and len(value) in (3, 4):
        return tuple(max(0, min(255, int(c))) for c in value[:3])
    if isinstance(value, str):
        value = value.strip().lstrip('#')
        if len(value) != 6:
            raise ValueError(f"Expected '#RRGGBB', got {value!r}")
        return tuple(int(value[i:i+2], 16) for i in (0, 2, 4))
    raise TypeError(f"Unsupported color format: {value!r}")


def clamp(value, lo, hi):
    """Clamp value into [lo, hi]."""
    return max(lo, min(hi, value))
