"""
Development Profile - Debug-Friendly Settings
Verbose logging, windowed output and the debug overlay.
"""

# Development frame rate (easier to debug)
FRAME_RATE = 30
DRAW_RATE_LIMIT = (30 * 60 * 2, 60000)

# Verbose logging for development
LOG_LEVEL = 2           # INFO level
DEBUG = True
VERBOSE_LOG = True
DEBUG_LOG = True

# Enable debug overlay in development
DEBUG_OVERLAY = True    # Show FPS and cartridge metrics
SHOW_LOG_BAR = True

FULLSCREEN = False
