"""
Test Profile - Deterministic, Headless Settings
Used by the unit tests: no microphone, no log file.
"""

FRAME_RATE = 60

LOG_LEVEL = 2
DEBUG = True
DEBUG_LOG = True
LOG_TO_FILE = False

AUDIO_BACKEND = "mock"

DEBUG_OVERLAY = False
SHOW_LOG_BAR = False
FULLSCREEN = False
