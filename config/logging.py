"""
Logging Configuration
All logging-related settings for the host and its cartridges.
"""

# -------------------------------------------------------
# Logging configuration
# -------------------------------------------------------

# Verbosity levels:
#   0 = ERROR  → only critical errors
#   1 = WARN   → warnings and errors
#   2 = INFO   → normal info (default)
LOG_OFF = False
LOG_TO_FILE = True     # background writer appends to LOG_FILE

LOG_LEVEL = 2
VERBOSE_LOG = False
DEBUG_LOG = False

# Master debug flag
DEBUG = False

# Writer queue size; oldest lines are dropped when full
LOG_QUEUE_SIZE = 512

# Optional: enable CPU meter in the on-screen log bar
CPU_ON = True
SHOW_LOG_BAR = False
LOG_BAR_HEIGHT = 20

# Optional: enable debug overlay (FPS, cartridges, skipped frames)
DEBUG_OVERLAY = False

# Log text color (hex)
LOG_TEXT_COLOR = "#FFFFFF"
