"""
Drawing context handed to cartridges.

A small immediate-mode API over a pygame.Surface: stroke/fill state plus
primitive shapes. Every numeric parameter is validated before it reaches
pygame; coordinates are clamped so a runaway value cannot overflow the
C integer range pygame uses internally.
"""

import math
from numbers import Real
from typing import Callable, Iterable, Optional, Sequence, Tuple

import pygame

from helper import clamp, to_rgb

COORD_LIMIT = 1e6


class DrawingError(ValueError):
    """Raised for non-numeric or non-finite drawing parameters."""
    pass


def _finite(name: str, value) -> float:
    if isinstance(value, bool) or not isinstance(value, Real):
        raise DrawingError(f"Invalid {name}: expected a number, got {type(value).__name__}")
    v = float(value)
    if not math.isfinite(v):
        raise DrawingError(f"Invalid {name}: {value!r}")
    return v


def _coord(name: str, value) -> float:
    return clamp(_finite(name, value), -COORD_LIMIT, COORD_LIMIT)


class DrawingContext:
    """Stroke/fill state and shape primitives bound to one surface."""

    def __init__(self, surface: pygame.Surface):
        self.surface = surface
        self._stroke: Optional[pygame.Color] = pygame.Color(0, 0, 0)
        self._fill: Optional[pygame.Color] = pygame.Color(255, 255, 255)
        self._weight = 1

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------
    @property
    def width(self) -> int:
        return self.surface.get_width()

    @property
    def height(self) -> int:
        return self.surface.get_height()

    def no_stroke(self):
        self._stroke = None

    def stroke(self, *args):
        """Set the outline colour: stroke(gray), stroke(r, g, b[, a]) or stroke(color)."""
        self._stroke = self._parse_color(args)

    def stroke_weight(self, weight):
        w = max(0.0, _finite("stroke weight", weight))
        self._weight = int(round(w)) if w >= 1 else (1 if w > 0 else 0)

    def fill(self, *args):
        """Set the fill colour: fill(gray), fill(r, g, b[, a]) or fill(color)."""
        self._fill = self._parse_color(args)

    def no_fill(self):
        self._fill = None

    def reset(self):
        """Restore default stroke/fill state (called before each frame)."""
        self._stroke = pygame.Color(0, 0, 0)
        self._fill = pygame.Color(255, 255, 255)
        self._weight = 1

    # ------------------------------------------------------------------
    # Colour helpers
    # ------------------------------------------------------------------
    def color(self, r, g=None, b=None, a=255) -> pygame.Color:
        """Build a pygame.Color; channels are clamped to 0..255."""
        if g is None and b is None:
            g = b = r
        channels = [
            int(round(clamp(_finite(name, v), 0, 255)))
            for name, v in (("red", r), ("green", g), ("blue", b), ("alpha", a))
        ]
        return pygame.Color(*channels)

    def lerp_color(self, c1, c2, amt) -> pygame.Color:
        """Interpolate between two colours; amt is clamped to 0..1."""
        t = clamp(_finite("amount", amt), 0.0, 1.0)
        return pygame.Color(self._parse_color((c1,))).lerp(self._parse_color((c2,)), t)

    def map(self, value, start1, stop1, start2, stop2) -> float:
        """Re-map value from [start1, stop1] onto [start2, stop2]."""
        value = _finite("value", value)
        start1 = _finite("start1", start1)
        stop1 = _finite("stop1", stop1)
        start2 = _finite("start2", start2)
        stop2 = _finite("stop2", stop2)
        if stop1 == start1:
            return start2
        return start2 + (stop2 - start2) * ((value - start1) / (stop1 - start1))

    def _parse_color(self, args) -> pygame.Color:
        if len(args) == 1:
            value = args[0]
            if isinstance(value, pygame.Color):
                return pygame.Color(value)
            if isinstance(value, (tuple, list)):
                return self.color(*value)
            if isinstance(value, str):
                try:
                    return pygame.Color(*to_rgb(value))
                except ValueError as e:
                    raise DrawingError(str(e)) from e
            return self.color(value)
        if len(args) in (3, 4):
            return self.color(*args)
        raise DrawingError(f"Invalid colour arguments: {args!r}")

    # ------------------------------------------------------------------
    # Shapes
    # ------------------------------------------------------------------
    def rect(self, x, y, w, h):
        """Axis-aligned rectangle with its top-left corner at (x, y)."""
        x, y = _coord("x", x), _coord("y", y)
        w = clamp(abs(_finite("width", w)), 0, COORD_LIMIT)
        h = clamp(abs(_finite("height", h)), 0, COORD_LIMIT)
        bounds = pygame.Rect(int(x), int(y), int(round(w)), int(round(h)))
        self._shape(bounds, lambda target, color, width, r:
                    pygame.draw.rect(target, color, r, width))

    def ellipse(self, x, y, w, h):
        """Ellipse centred on (x, y)."""
        x, y = _coord("x", x), _coord("y", y)
        w = clamp(abs(_finite("width", w)), 0, COORD_LIMIT)
        h = clamp(abs(_finite("height", h)), 0, COORD_LIMIT)
        bounds = pygame.Rect(int(x - w / 2), int(y - h / 2), int(round(w)), int(round(h)))
        self._shape(bounds, lambda target, color, width, r:
                    pygame.draw.ellipse(target, color, r, width))

    def line(self, x1, y1, x2, y2):
        """Line segment; drawn with the stroke colour only."""
        points = [(_coord("x1", x1), _coord("y1", y1)), (_coord("x2", x2), _coord("y2", y2))]
        if self._stroke is None or self._weight <= 0:
            return
        bounds = _bounds(points, self._weight)
        self._paint(self._stroke, bounds, lambda target, dx, dy: pygame.draw.line(
            target, self._stroke, _shift(points[0], dx, dy), _shift(points[1], dx, dy),
            self._weight))

    def triangle(self, x1, y1, x2, y2, x3, y3):
        self.polygon([(x1, y1), (x2, y2), (x3, y3)])

    def polygon(self, points: Iterable[Sequence]):
        """Closed polygon through at least three (x, y) points."""
        pts = []
        for i, point in enumerate(points):
            try:
                px, py = point
            except (TypeError, ValueError) as e:
                raise DrawingError(f"Invalid point #{i}: {point!r}") from e
            pts.append((_coord(f"x{i}", px), _coord(f"y{i}", py)))
        if len(pts) < 3:
            raise DrawingError(f"Polygon needs at least 3 points, got {len(pts)}")

        bounds = _bounds(pts, self._weight)
        if self._fill is not None:
            self._paint(self._fill, bounds, lambda target, dx, dy: pygame.draw.polygon(
                target, self._fill, [_shift(p, dx, dy) for p in pts], 0))
        if self._stroke is not None and self._weight > 0:
            self._paint(self._stroke, bounds, lambda target, dx, dy: pygame.draw.polygon(
                target, self._stroke, [_shift(p, dx, dy) for p in pts], self._weight))

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------
    def _shape(self, bounds: pygame.Rect, draw: Callable):
        """Fill then outline a rect-bounded shape."""
        if self._fill is not None:
            self._paint(self._fill, bounds, lambda target, dx, dy:
                        draw(target, self._fill, 0, bounds.move(dx, dy)))
        if self._stroke is not None and self._weight > 0:
            self._paint(self._stroke, bounds, lambda target, dx, dy:
                        draw(target, self._stroke, self._weight, bounds.move(dx, dy)))

    def _paint(self, color: pygame.Color, bounds: pygame.Rect, draw: Callable):
        """Draw opaque colours directly; translucent ones via a SRCALPHA layer."""
        if color.a == 255:
            draw(self.surface, 0, 0)
            return
        if color.a == 0:
            return
        area = bounds.clip(self.surface.get_rect())
        if area.width == 0 or area.height == 0:
            return
        layer = pygame.Surface(area.size, pygame.SRCALPHA)
        draw(layer, -area.x, -area.y)
        self.surface.blit(layer, area.topleft)


def _shift(point: Tuple[float, float], dx: int, dy: int) -> Tuple[float, float]:
    return (point[0] + dx, point[1] + dy)


def _bounds(points, pad: int) -> pygame.Rect:
    xs = [p[0] for p in points]
    ys = [p[1] for p in points]
    left, top = int(math.floor(min(xs))) - pad, int(math.floor(min(ys))) - pad
    right, bottom = int(math.ceil(max(xs))) + pad, int(math.ceil(max(ys))) + pad
    return pygame.Rect(left, top, right - left + 1, bottom - top + 1)
