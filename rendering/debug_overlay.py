"""
Debug Overlay for Performance Monitoring
Displays FPS and cartridge metrics during development.
"""

import pygame

_font = None


def _get_font():
    global _font
    if _font is None:
        if not pygame.font.get_init():
            pygame.font.init()
        _font = pygame.font.Font(None, 24)
    return _font


def draw_overlay(screen, fps: float, cartridges: int, skipped_frames: int = 0,
                 mode: str = "production", target_fps: int = 60):
    """
    Draw performance overlay on screen.

    Args:
        screen: Pygame screen surface
        fps: Current frames per second
        cartridges: Number of admitted cartridges
        skipped_frames: Frames dropped by the draw rate limit
        mode: Active profile mode (production/development/safe/test)
        target_fps: Configured frame rate, used for the FPS colour bands
    """
    font = _get_font()

    # FPS text
    ratio = fps / target_fps if target_fps else 0
    fps_color = (0, 255, 0) if ratio >= 0.9 else (255, 165, 0) if ratio >= 0.5 else (255, 0, 0)
    fps_text = font.render(f"FPS: {int(fps)}/{target_fps}", True, fps_color)

    cart_text = font.render(f"Carts: {cartridges}", True, (200, 200, 200))

    skip_color = (0, 255, 0) if skipped_frames == 0 else (255, 0, 0)
    skip_text = font.render(f"Skipped: {skipped_frames}", True, skip_color)

    # Mode text
    mode_color = (100, 100, 255) if mode == "development" else (255, 100, 100) if mode == "safe" else (150, 150, 150)
    mode_text = font.render(f"[{mode.upper()}]", True, mode_color)

    # Draw with semi-transparent background
    overlay_rect = pygame.Rect(5, 5, 200, 110)
    overlay_surface = pygame.Surface((overlay_rect.width, overlay_rect.height))
    overlay_surface.set_alpha(180)
    overlay_surface.fill((0, 0, 0))
    screen.blit(overlay_surface, overlay_rect)

    screen.blit(fps_text, (10, 10))
    screen.blit(cart_text, (10, 35))
    screen.blit(skip_text, (10, 60))
    screen.blit(mode_text, (10, 85))
