"""
core/registry.py
----------------
Cartridge admission, lifecycle and per-frame state threading.

Key Features:
- Rate-limited, validated, capacity-bounded admission
- Per-cartridge state owned here; draw() gets a private copy and its return replaces it
- Registration order preserved across setup and draw
- Safe error handling (a failing cartridge never breaks the frame)
"""

import copy
import time
import uuid
from collections.abc import Mapping
from typing import Callable, Dict, List, Optional, Tuple

import showlog
from core.cartridge import CartridgeRecord, display_name
from core.errors import CapacityError, RateLimitError, RegistrationTimeoutError
from core.spectrum import sanitize_spectrum
from security.rate_limiter import RateLimiter
from security.validator import CartridgeValidator


def _monotonic_ms() -> float:
    return time.monotonic() * 1000.0


class CartridgeRegistry:
    """
    Owns admitted cartridges and their state.

    Lifecycle:
        register(cartridge)      -> id (rate -> validate -> capacity)
        setup_all(ctx)           -> initial state for every cartridge
        draw_all(ctx, spectrum, width, height) once per frame
        remove(id)               -> record and state dropped together
    """

    def __init__(self,
                 max_cartridges: int = 10,
                 register_rate_limit: Tuple[int, float] = (100, 60000),
                 draw_rate_limit: Tuple[int, float] = (100, 60000),
                 execution_limit_ms: float = 1000,
                 govern: bool = True,
                 operation_timeout_ms: float = 30000,
                 validator: Optional[CartridgeValidator] = None,
                 clock: Optional[Callable[[], float]] = None,
                 spectrum_fallback_length: int = 128,
                 spectrum_max: float = 255.0):
        """
        Args:
            max_cartridges: Upper bound on admitted cartridges
            register_rate_limit: (max_requests, window_ms) for register()
            draw_rate_limit: (max_requests, window_ms) for draw_all()
            execution_limit_ms: Per-call limit for governed setup/draw
            govern: Wrap admitted cartridges in execution governors
            operation_timeout_ms: Longest a registration may take
            validator: CartridgeValidator to use (default instance if None)
            clock: Callable returning milliseconds (monotonic by default)
        """
        self._max_cartridges = int(max_cartridges)
        self._clock = clock or _monotonic_ms
        self._register_limiter = RateLimiter(*register_rate_limit, clock=self._clock)
        self._draw_limiter = RateLimiter(*draw_rate_limit, clock=self._clock)
        self.validator = validator or CartridgeValidator()
        self.execution_limit_ms = execution_limit_ms
        self.govern = govern
        self.operation_timeout_ms = operation_timeout_ms
        self.spectrum_fallback_length = spectrum_fallback_length
        self.spectrum_max = spectrum_max

        self._records: List[CartridgeRecord] = []
        self._states: Dict[str, dict] = {}
        self.skipped_frames = 0

    # ------------------------------------------------------------------
    # Admission
    # ------------------------------------------------------------------
    def register(self, cartridge) -> str:
        """
        Admit a cartridge.

        Args:
            cartridge: Object or module exposing draw() and optionally setup()

        Returns:
            str: Unique id of the admitted cartridge

        Raises:
            RateLimitError: Too many registrations inside the window
            ValidationError: Cartridge is malformed or failed the safety screen
            CapacityError: Registry already holds max_cartridges
            RegistrationTimeoutError: Admission exceeded operation_timeout_ms
        """
        started = self._clock()

        if not self._register_limiter.is_allowed("register"):
            raise RateLimitError("Rate limit exceeded for cartridge registration")

        self.validator.validate(cartridge)

        if len(self._records) >= self._max_cartridges:
            raise CapacityError(f"Maximum number of cartridges ({self._max_cartridges}) reached")

        name = display_name(cartridge)
        if self.govern:
            cartridge = self.validator.wrap(cartridge, self.execution_limit_ms)

        cartridge_id = uuid.uuid4().hex
        self._states[cartridge_id] = {}
        self._records.append(CartridgeRecord(id=cartridge_id, cartridge=cartridge, name=name))

        elapsed = self._clock() - started
        if elapsed > self.operation_timeout_ms:
            self.remove(cartridge_id)
            raise RegistrationTimeoutError(
                f"Cartridge registration timed out ({round(elapsed)}ms > {round(self.operation_timeout_ms)}ms)"
            )

        showlog.info(f"[REGISTRY] Registered '{name}' ({cartridge_id[:8]}) "
                     f"[{len(self._records)}/{self._max_cartridges}]")
        return cartridge_id

    def remove(self, cartridge_id: str) -> bool:
        """
        Remove a cartridge and its state.

        Returns:
            bool: True if a cartridge with this id was registered
        """
        for index, record in enumerate(self._records):
            if record.id == cartridge_id:
                del self._records[index]
                self._states.pop(cartridge_id, None)
                showlog.info(f"[REGISTRY] Removed '{record.name}' ({cartridge_id[:8]})")
                return True
        return False

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------
    def setup_all(self, ctx) -> None:
        """
        Run setup(ctx) for every cartridge in registration order.

        State is re-initialized on every call; a failing setup leaves {}.
        """
        for record in list(self._records):
            self._setup_record(record, ctx)

    def setup_cartridge(self, cartridge_id: str, ctx) -> bool:
        """
        Run setup(ctx) for one cartridge (used for late admissions).

        Returns:
            bool: True if the id was found
        """
        record = self._find(cartridge_id)
        if record is None:
            return False
        self._setup_record(record, ctx)
        return True

    def _setup_record(self, record: CartridgeRecord, ctx) -> None:
        state = {}
        setup = getattr(record.cartridge, "setup", None)
        if setup is not None:
            try:
                result = setup(ctx)
                if isinstance(result, Mapping):
                    state = copy.deepcopy(dict(result))
                elif result is not None:
                    showlog.warn(f"[REGISTRY] Setup for '{record.name}' returned "
                                 f"{type(result).__name__}, expected a mapping")
            except Exception as e:
                showlog.error(f"[REGISTRY] Setup failed for '{record.name}': {e}")
        if record.id in self._states:
            self._states[record.id] = state

    def draw_all(self, ctx, spectrum, width, height) -> bool:
        """
        Draw every cartridge for one frame.

        Args:
            ctx: DrawingContext for the current frame
            spectrum: Raw analyzer output (sanitized here once per frame)
            width: Surface width in pixels
            height: Surface height in pixels

        Returns:
            bool: False if the frame was skipped by the draw rate limit
        """
        if not self._draw_limiter.is_allowed("draw"):
            self.skipped_frames += 1
            showlog.warn("[REGISTRY] Draw rate limit exceeded, skipping frame")
            return False

        safe_spectrum = sanitize_spectrum(spectrum, self.spectrum_fallback_length, self.spectrum_max)

        for record in list(self._records):
            if record.id not in self._states:
                continue
            # the cartridge only ever holds copies of its stored state
            state = copy.deepcopy(self._states[record.id])
            try:
                result = record.cartridge.draw(ctx, safe_spectrum, width, height, state)
                if isinstance(result, Mapping):
                    result = copy.deepcopy(dict(result))
            except Exception as e:
                showlog.error(f"[REGISTRY] Draw failed for '{record.name}': {e}")
                continue

            if isinstance(result, Mapping):
                if record.id in self._states:
                    self._states[record.id] = result
            elif result is not None:
                showlog.warn(f"[REGISTRY] Draw for '{record.name}' returned "
                             f"{type(result).__name__}, keeping previous state")
        return True

    # ------------------------------------------------------------------
    # Read-only lookups
    # ------------------------------------------------------------------
    @property
    def max_cartridges(self) -> int:
        return self._max_cartridges

    def __len__(self):
        return len(self._records)

    def __contains__(self, cartridge_id):
        return cartridge_id in self._states

    def ids(self) -> List[str]:
        """Ids in registration order."""
        return [record.id for record in self._records]

    def name_of(self, cartridge_id: str) -> Optional[str]:
        record = self._find(cartridge_id)
        return record.name if record else None

    def state_of(self, cartridge_id: str) -> Optional[dict]:
        """Deep copy of a cartridge's current state, or None for unknown ids."""
        if cartridge_id not in self._states:
            return None
        return copy.deepcopy(self._states[cartridge_id])

    def _find(self, cartridge_id: str) -> Optional[CartridgeRecord]:
        for record in self._records:
            if record.id == cartridge_id:
                return record
        return None
