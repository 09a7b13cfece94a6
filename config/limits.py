"""
Cartridge Admission & Runtime Limits
Registry capacity, rate limits, execution governor and spectrum bounds.
"""

# Maximum number of admitted cartridges
MAX_CARTRIDGES = 10

# (count, window_ms) pairs
REGISTER_RATE_LIMIT = (100, 60000)
# Draw calls happen once per frame: allow FRAME_RATE with 2x headroom.
# Intentionally above the (100, 60000) admission default; at 100/min a
# 60 fps loop would skip nearly every frame. Do not lower it to match.
DRAW_RATE_LIMIT = (60 * 60 * 2, 60000)

# Runtime governor around cartridge setup/draw
GOVERN_CARTRIDGES = True
EXECUTION_LIMIT_MS = 1000

# Registrations slower than this are abandoned
OPERATION_TIMEOUT_MS = 30000

# Spectrum sanitization
SPECTRUM_FALLBACK_LENGTH = 128
SPECTRUM_MAX = 255.0

# Static safety screen
REQUIRE_CARTRIDGE_SOURCE = True
CARTRIDGE_EXTRA_DENY_PATTERNS = ()

# Package scanned for bundled cartridges
CARTRIDGE_PACKAGE = "cartridges"
