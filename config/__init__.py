"""
Configuration Package with Profile Loading
Automatically loads the appropriate profile based on SB_ENV environment variable.

Usage:
    export SB_ENV=development  # or 'production', 'safe', 'test'
    python soundbackgrounds.py

    Or in code:
    import config
    print(config.MAX_CARTRIDGES)
"""

import os
import sys
from typing import List, Tuple


_PENDING_LOGS: List[Tuple[str, str]] = []


def _queue_startup_log(level: str, message: str) -> None:
    logger = sys.modules.get("showlog")
    handler = getattr(logger, level, None) if logger else None
    if callable(handler):
        handler(message)
    else:
        _PENDING_LOGS.append((level, message))


def _flush_pending_logs() -> None:
    """Replay start-up lines once showlog has been imported."""
    if not _PENDING_LOGS:
        return

    logger = sys.modules.get("showlog")
    if not logger:
        return

    remaining: List[Tuple[str, str]] = []
    for level, payload in _PENDING_LOGS:
        handler = getattr(logger, level, None)
        if callable(handler):
            handler(payload)
        else:
            remaining.append((level, payload))

    _PENDING_LOGS[:] = remaining


def _log_debug(message: str) -> None:
    _queue_startup_log("debug", f"[CONFIG] {message}")


def _log_info(message: str) -> None:
    _queue_startup_log("info", f"[CONFIG] {message}")


# Import all base configuration modules first
from .logging import *
from .display import *
from .audio import *
from .limits import *
from .paths import *

# Detect environment profile
_env = os.getenv("SB_ENV", "production").lower()

# Load profile-specific overrides
if _env == "development" or _env == "dev":
    _log_info("Loading DEVELOPMENT profile")
    from .profiles.dev import *
elif _env == "safe":
    _log_info("Loading SAFE MODE profile")
    from .profiles.safe import *
elif _env == "test":
    _log_info("Loading TEST profile")
    from .profiles.test import *
else:
    _log_info("Loading PRODUCTION profile")
    from .profiles.prod import *

# Export current profile name
ACTIVE_PROFILE = _env if _env in ("development", "dev", "safe", "test") else "production"

_log_info(f"Active profile: {ACTIVE_PROFILE}")
_log_debug(
    f"FRAME_RATE={FRAME_RATE}, MAX_CARTRIDGES={MAX_CARTRIDGES}, "
    f"DRAW_RATE_LIMIT={DRAW_RATE_LIMIT}, AUDIO_BACKEND={AUDIO_BACKEND}"
)
