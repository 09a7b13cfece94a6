"""
Main application class.

Coordinates display, audio, rendering and the cartridge registry, and
drives the per-frame cycle.
"""

from typing import List, Optional, Tuple

import pygame

import config as cfg
import showlog
from audio.manager import AudioInitError, AudioManager
from core.discovery import discover_cartridges
from core.display import DisplayManager
from core.errors import CartridgeError
from core.loop import EventLoop
from core.registry import CartridgeRegistry
from helper import clamp
from rendering import debug_overlay
from rendering.renderer import RenderingEngine
from security.validator import DEFAULT_DENY_PATTERNS, CartridgeValidator


def registry_from_config() -> CartridgeRegistry:
    """Build a CartridgeRegistry from the active config profile."""
    validator = CartridgeValidator(
        deny_patterns=tuple(DEFAULT_DENY_PATTERNS) + tuple(getattr(cfg, "CARTRIDGE_EXTRA_DENY_PATTERNS", ())),
        require_source=bool(getattr(cfg, "REQUIRE_CARTRIDGE_SOURCE", True)),
    )
    return CartridgeRegistry(
        max_cartridges=getattr(cfg, "MAX_CARTRIDGES", 10),
        register_rate_limit=tuple(getattr(cfg, "REGISTER_RATE_LIMIT", (100, 60000))),
        draw_rate_limit=tuple(getattr(cfg, "DRAW_RATE_LIMIT", (100, 60000))),
        execution_limit_ms=getattr(cfg, "EXECUTION_LIMIT_MS", 1000),
        govern=bool(getattr(cfg, "GOVERN_CARTRIDGES", True)),
        operation_timeout_ms=getattr(cfg, "OPERATION_TIMEOUT_MS", 30000),
        validator=validator,
        spectrum_fallback_length=getattr(cfg, "SPECTRUM_FALLBACK_LENGTH", 128),
        spectrum_max=getattr(cfg, "SPECTRUM_MAX", 255.0),
    )


class SoundBackgrounds:
    """Audio-reactive cartridge host."""

    def __init__(self, registry: Optional[CartridgeRegistry] = None,
                 audio_manager: Optional[AudioManager] = None):
        """
        Args:
            registry: CartridgeRegistry to use (built from config if None)
            audio_manager: AudioManager to use (new instance if None)
        """
        self.registry = registry or registry_from_config()
        self.audio_manager = audio_manager or AudioManager()
        self.renderer = RenderingEngine()

        self.display_manager: Optional[DisplayManager] = None
        self.event_loop: Optional[EventLoop] = None
        self.screen: Optional[pygame.Surface] = None
        self.analyzer = None

        self.frame_rate = int(getattr(cfg, "FRAME_RATE", 60))
        self.background = getattr(cfg, "BACKGROUND", 0)
        self.is_initialized = False

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------
    def initialize(self, frame_rate=None, audio_smoothing=None, audio_bin_count=None,
                   background=None, size: Optional[Tuple[int, int]] = None,
                   fullscreen: Optional[bool] = None,
                   surface: Optional[pygame.Surface] = None) -> "SoundBackgrounds":
        """
        Initialize display, renderer and audio. Calling again is a no-op.

        Args:
            frame_rate: Target FPS (default FRAME_RATE)
            audio_smoothing: FFT smoothing 0..1 (default AUDIO_SMOOTHING)
            audio_bin_count: FFT bins (default AUDIO_BIN_COUNT)
            background: Clear colour (grayscale int, RGB tuple or '#RRGGBB')
            size: Window size (default SCREEN_WIDTH x SCREEN_HEIGHT)
            fullscreen: Fullscreen window (default FULLSCREEN)
            surface: Render into this surface instead of opening a window

        Returns:
            self
        """
        if self.is_initialized:
            return self

        if frame_rate is not None:
            self.frame_rate = int(clamp(int(frame_rate),
                                        getattr(cfg, "MIN_FRAME_RATE", 1),
                                        getattr(cfg, "MAX_FRAME_RATE", 240)))
        if background is not None:
            self.background = background

        self._init_display(surface, size, fullscreen)
        self._init_audio(audio_smoothing, audio_bin_count)

        self.event_loop = EventLoop()
        self.event_loop.add_resize_handler(self._on_resize)

        self.is_initialized = True
        showlog.info(f"[APP] Initialized {self.renderer.get_dimensions()} @ {self.frame_rate} FPS "
                     f"(profile: {getattr(cfg, 'ACTIVE_PROFILE', 'production')})")
        return self

    def _init_display(self, surface, size, fullscreen):
        """Open the window (or adopt a caller-supplied surface) and bind the renderer."""
        if surface is None:
            width, height = size or (getattr(cfg, "SCREEN_WIDTH", 1280), getattr(cfg, "SCREEN_HEIGHT", 720))
            self.display_manager = DisplayManager(
                width=width,
                height=height,
                fullscreen=getattr(cfg, "FULLSCREEN", False) if fullscreen is None else fullscreen,
                resizable=getattr(cfg, "RESIZABLE", True),
                title=getattr(cfg, "WINDOW_TITLE", "SoundBackgrounds"),
                hide_cursor=getattr(cfg, "HIDE_CURSOR", False),
            )
            surface = self.display_manager.initialize()

        self.screen = surface
        self.renderer.initialize(surface)
        if getattr(cfg, "SHOW_LOG_BAR", False):
            showlog.init(surface)

    def _init_audio(self, smoothing, bin_count):
        try:
            self.analyzer = self.audio_manager.initialize(smoothing=smoothing, bin_count=bin_count)
        except AudioInitError as e:
            # Cartridges still run; they see a silent spectrum
            showlog.error(f"[APP] Audio unavailable, continuing silent: {e}")
            self.analyzer = None

    def destroy(self) -> "SoundBackgrounds":
        """Stop audio, close the window and reset initialization state."""
        if self.event_loop:
            self.event_loop.stop()
        self.audio_manager.stop()
        self.analyzer = None

        if self.display_manager:
            self.display_manager.cleanup()
            self.display_manager = None

        self.renderer = RenderingEngine()
        self.screen = None
        self.event_loop = None
        self.is_initialized = False
        showlog.info("[APP] Destroyed")
        return self

    # ------------------------------------------------------------------
    # Cartridges
    # ------------------------------------------------------------------
    def register_cartridge(self, cartridge) -> str:
        """
        Admit a cartridge and run its setup.

        Returns:
            str: Cartridge id

        Raises:
            CartridgeError: If the registry rejects the cartridge
        """
        if not self.is_initialized:
            self.initialize()

        cartridge_id = self.registry.register(cartridge)
        self.registry.setup_cartridge(cartridge_id, self.renderer.get_drawing_context())
        return cartridge_id

    def remove_cartridge(self, cartridge_id: str) -> bool:
        return self.registry.remove(cartridge_id)

    def load_cartridges(self, package: Optional[str] = None) -> List[str]:
        """
        Discover and register every cartridge in a package.

        Rejected cartridges are logged and skipped.

        Returns:
            list: Ids of the admitted cartridges
        """
        package = package or getattr(cfg, "CARTRIDGE_PACKAGE", "cartridges")
        ids = []
        for name, cartridge in discover_cartridges(package):
            try:
                ids.append(self.register_cartridge(cartridge))
            except CartridgeError as e:
                showlog.warn(f"[APP] Rejected cartridge '{name}': {e}")
        showlog.info(f"[APP] Loaded {len(ids)} cartridge(s) from '{package}'")
        return ids

    # ------------------------------------------------------------------
    # Frame cycle
    # ------------------------------------------------------------------
    def _analyze(self):
        if self.analyzer is None:
            return None
        try:
            return self.analyzer.analyze()
        except Exception as e:
            showlog.error(f"[APP] Audio analysis failed: {e}")
            return None

    def render_frame(self) -> bool:
        """
        Render one frame: analyze, clear, draw cartridges, overlays, present.

        Returns:
            bool: False if the registry skipped the frame
        """
        if not self.is_initialized:
            raise RuntimeError("Application not initialized. Call initialize() first.")

        spectrum = self._analyze()
        self.renderer.clear(self.background)

        width, height = self.renderer.get_dimensions()
        drawn = self.registry.draw_all(self.renderer.get_drawing_context(), spectrum, width, height)

        fps = self.event_loop.get_fps() if self.event_loop else 0.0
        if getattr(cfg, "DEBUG_OVERLAY", False):
            debug_overlay.draw_overlay(
                self.screen, fps, len(self.registry), self.registry.skipped_frames,
                mode=getattr(cfg, "ACTIVE_PROFILE", "production"), target_fps=self.frame_rate,
            )
        if getattr(cfg, "SHOW_LOG_BAR", False):
            showlog.draw_bar(self.screen, fps_value=fps)

        if self.display_manager:
            self.display_manager.present()
        return drawn

    def _update(self):
        self.audio_manager.report_metrics()

    def _on_resize(self, width: int, height: int):
        if not self.display_manager:
            return
        self.screen = self.display_manager.resize(width, height)
        self.renderer.resize(self.screen)
        showlog.debug(f"[APP] Window resized to {width}x{height}")

    def run(self):
        """Run the main application loop until quit/Escape."""
        if not self.event_loop:
            raise RuntimeError("Application not initialized. Call initialize() first.")

        showlog.info(f"[APP] Running {len(self.registry)} cartridge(s)")
        try:
            self.event_loop.run(self._update, self.render_frame, self.frame_rate)
        except Exception as e:
            showlog.error(f"[APP] Error in main loop: {e}")
            raise
