"""Tests for the drawing context and rendering engine (plain surfaces, no window)."""

from __future__ import annotations

import math
import unittest

import pygame

from rendering import debug_overlay
from rendering.drawing_context import DrawingContext, DrawingError
from rendering.renderer import RenderingEngine


class DrawingContextTests(unittest.TestCase):

    def setUp(self) -> None:
        self.surface = pygame.Surface((100, 80))
        self.surface.fill((0, 0, 0))
        self.ctx = DrawingContext(self.surface)

    def test_dimensions(self) -> None:
        self.assertEqual((self.ctx.width, self.ctx.height), (100, 80))

    def test_filled_rect(self) -> None:
        self.ctx.no_stroke()
        self.ctx.fill(255, 0, 0)
        self.ctx.rect(10, 10, 20, 20)
        self.assertEqual(tuple(self.surface.get_at((15, 15)))[:3], (255, 0, 0))
        self.assertEqual(tuple(self.surface.get_at((50, 50)))[:3], (0, 0, 0))

    def test_negative_size_is_made_positive(self) -> None:
        self.ctx.no_stroke()
        self.ctx.fill(0, 255, 0)
        self.ctx.rect(5, 5, -10, -10)
        self.assertEqual(tuple(self.surface.get_at((8, 8)))[:3], (0, 255, 0))

    def test_rect_rejects_non_finite(self) -> None:
        for args in ((math.nan, 0, 10, 10), (0, math.inf, 10, 10), (0, 0, "10", 10), (0, 0, True, 10)):
            with self.subTest(args=args):
                with self.assertRaises(DrawingError):
                    self.ctx.rect(*args)

    def test_rect_clamps_huge_coordinates(self) -> None:
        self.ctx.rect(1e10, -1e10, 100, 100)

    def test_drawing_error_is_value_error(self) -> None:
        with self.assertRaises(ValueError):
            self.ctx.ellipse(0, 0, math.nan, 1)

    def test_translucent_fill_blends(self) -> None:
        self.ctx.no_stroke()
        self.ctx.fill(255, 0, 0, 128)
        self.ctx.rect(0, 0, 20, 20)
        r, g, b, _ = self.surface.get_at((5, 5))
        self.assertTrue(120 <= r <= 136, r)
        self.assertEqual((g, b), (0, 0))

    def test_fully_transparent_draws_nothing(self) -> None:
        self.ctx.no_stroke()
        self.ctx.fill(255, 255, 255, 0)
        self.ctx.rect(0, 0, 20, 20)
        self.assertEqual(tuple(self.surface.get_at((5, 5)))[:3], (0, 0, 0))

    def test_ellipse_is_centred(self) -> None:
        self.ctx.no_stroke()
        self.ctx.fill(0, 0, 255)
        self.ctx.ellipse(50, 40, 20, 20)
        self.assertEqual(tuple(self.surface.get_at((50, 40)))[:3], (0, 0, 255))
        self.assertEqual(tuple(self.surface.get_at((5, 5)))[:3], (0, 0, 0))

    def test_line_and_stroke_weight(self) -> None:
        self.ctx.stroke(255)
        self.ctx.stroke_weight(3)
        self.ctx.line(0, 40, 99, 40)
        self.assertEqual(tuple(self.surface.get_at((50, 40)))[:3], (255, 255, 255))

        self.surface.fill((0, 0, 0))
        self.ctx.stroke_weight(-2)
        self.ctx.line(0, 40, 99, 40)
        self.assertEqual(tuple(self.surface.get_at((50, 40)))[:3], (0, 0, 0))

    def test_triangle_and_polygon(self) -> None:
        self.ctx.no_stroke()
        self.ctx.fill("#00FF00")
        self.ctx.triangle(0, 0, 60, 0, 0, 60)
        self.assertEqual(tuple(self.surface.get_at((5, 5)))[:3], (0, 255, 0))
        with self.assertRaises(DrawingError):
            self.ctx.polygon([(0, 0), (1, 1)])
        with self.assertRaises(DrawingError):
            self.ctx.polygon([(0, 0), (1, 1), (2,)])

    def test_color_clamps_channels(self) -> None:
        self.assertEqual(tuple(self.ctx.color(300, -5, 10)), (255, 0, 10, 255))
        self.assertEqual(tuple(self.ctx.color(128)), (128, 128, 128, 255))
        with self.assertRaises(DrawingError):
            self.ctx.color(math.nan, 0, 0)

    def test_bad_colour_arguments(self) -> None:
        with self.assertRaises(DrawingError):
            self.ctx.fill(1, 2)
        with self.assertRaises(DrawingError):
            self.ctx.fill("#12")

    def test_lerp_color_clamps_amount(self) -> None:
        black = self.ctx.color(0, 0, 0)
        white = self.ctx.color(255, 255, 255)
        self.assertEqual(tuple(self.ctx.lerp_color(black, white, 2.0)), (255, 255, 255, 255))
        self.assertEqual(tuple(self.ctx.lerp_color(black, white, -1.0)), (0, 0, 0, 255))
        mid = self.ctx.lerp_color((0, 0, 0), (200, 100, 0), 0.5)
        self.assertEqual((mid.r, mid.g, mid.b), (100, 50, 0))

    def test_map(self) -> None:
        self.assertEqual(self.ctx.map(5, 0, 10, 0, 100), 50)
        self.assertEqual(self.ctx.map(0, 0, 10, 100, 200), 100)
        self.assertEqual(self.ctx.map(7, 3, 3, 11, 99), 11)

    def test_reset_restores_defaults(self) -> None:
        self.ctx.no_fill()
        self.ctx.no_stroke()
        self.ctx.reset()
        self.ctx.rect(10, 10, 10, 10)
        self.assertEqual(tuple(self.surface.get_at((15, 15)))[:3], (255, 255, 255))


class RenderingEngineTests(unittest.TestCase):

    def test_requires_initialization(self) -> None:
        engine = RenderingEngine()
        self.assertFalse(engine.initialized)
        self.assertEqual(engine.get_dimensions(), (0, 0))
        with self.assertRaises(RuntimeError):
            engine.get_drawing_context()

    def test_clear_and_dimensions(self) -> None:
        surface = pygame.Surface((40, 30))
        engine = RenderingEngine()
        ctx = engine.initialize(surface)
        self.assertIs(engine.get_drawing_context(), ctx)
        engine.clear((10, 20, 30))
        self.assertEqual(tuple(surface.get_at((0, 0)))[:3], (10, 20, 30))
        self.assertEqual(engine.get_dimensions(), (40, 30))

    def test_resize_rebinds_context(self) -> None:
        engine = RenderingEngine()
        ctx = engine.initialize(pygame.Surface((40, 30)))
        bigger = pygame.Surface((80, 60))
        engine.resize(bigger)
        self.assertIs(engine.get_drawing_context(), ctx)
        self.assertIs(ctx.surface, bigger)
        self.assertEqual(engine.get_dimensions(), (80, 60))

    def test_initialize_requires_surface(self) -> None:
        with self.assertRaises(ValueError):
            RenderingEngine().initialize(None)


class DebugOverlayTests(unittest.TestCase):

    def test_draws_without_window(self) -> None:
        surface = pygame.Surface((320, 200))
        surface.fill((255, 255, 255))
        debug_overlay.draw_overlay(surface, 58.0, 3, skipped_frames=1, mode="development")
        # translucent panel darkens the top-left corner only
        self.assertLess(surface.get_at((190, 112)).r, 200)
        self.assertEqual(tuple(surface.get_at((300, 180)))[:3], (255, 255, 255))


if __name__ == "__main__":  # pragma: no cover
    unittest.main(exit=False)
