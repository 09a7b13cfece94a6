"""Unit tests. Config is pinned to the headless test profile before anything imports it."""

import os

os.environ.setdefault("SB_ENV", "test")
os.environ.setdefault("SDL_VIDEODRIVER", "dummy")
os.environ.setdefault("SDL_AUDIODRIVER", "dummy")
