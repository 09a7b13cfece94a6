"""
Display & Frame Configuration
Window size, background and frame-rate settings for the visualization surface.
"""

# Window size; FULLSCREEN uses the desktop resolution instead
SCREEN_WIDTH = 1280
SCREEN_HEIGHT = 720
FULLSCREEN = False
RESIZABLE = True
WINDOW_TITLE = "SoundBackgrounds"

# Background painted before cartridges draw each frame.
# Accepts a grayscale int, an (r, g, b) tuple or a "#RRGGBB" string.
BACKGROUND = 0

# --- Frame rate control ---
FRAME_RATE = 60
MIN_FRAME_RATE = 1
MAX_FRAME_RATE = 240

# Hide the mouse cursor over the canvas
HIDE_CURSOR = False
