"""
Safe Mode Profile - Minimal Features
For troubleshooting misbehaving cartridges or low-resource machines.
"""

# Safe mode performance (very conservative)
FRAME_RATE = 20
DRAW_RATE_LIMIT = (20 * 60 * 2, 60000)

# Tighter admission and runtime limits
MAX_CARTRIDGES = 3
EXECUTION_LIMIT_MS = 250

# Minimal logging (errors only)
LOG_LEVEL = 0
DEBUG = False
VERBOSE_LOG = False
DEBUG_LOG = False

# No microphone; random spectra keep cartridges moving
AUDIO_BACKEND = "mock"
