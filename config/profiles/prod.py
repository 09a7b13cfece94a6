"""
Production Profile - Optimized Settings
Default configuration for unattended visualization displays.
"""

FRAME_RATE = 60
DRAW_RATE_LIMIT = (60 * 60 * 2, 60000)

# Production logging (warnings and errors)
LOG_LEVEL = 1
DEBUG = False
VERBOSE_LOG = False
DEBUG_LOG = False

DEBUG_OVERLAY = False
SHOW_LOG_BAR = False
