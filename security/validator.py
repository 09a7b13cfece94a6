"""
Cartridge validation and runtime monitoring.

validate() is a structural check plus a static safety screen: a regex
search over the cartridge's source text for a deny-list of patterns.
The screen is a best-effort heuristic, NOT a sandbox. It catches naive
misuse only; indirection (getattr on a string, aliased imports), string
concatenation or any obfuscation walks straight past it. Treat a pass as
advisory. The ExecutionGovernor is the second layer: it converts a
runaway cartridge into a recoverable ExecutionLimitError at the call site.
"""

import inspect
import re
import time
from collections import deque
from typing import Callable, Iterable, List, Optional

import showlog
from core.errors import ExecutionLimitError, ValidationError

# Number of recent durations kept by the governor
HISTORY_SIZE = 10
# Rolling average above this share of the limit fails the call
SUSTAINED_LOAD_RATIO = 0.8

DEFAULT_DENY_PATTERNS = (
    # dynamic code evaluation
    r"\beval\s*\(",
    r"\bexec\s*\(",
    r"\bcompile\s*\(",
    # dynamic function construction / imports
    r"\bFunctionType\b",
    r"\bCodeType\b",
    r"\b__import__\s*\(",
    r"\bimportlib\b",
    # timer scheduling
    r"\bthreading\b",
    r"\bTimer\s*\(",
    r"\bsched\b",
    r"\bsignal\.(?:alarm|setitimer)\b",
    r"\bcall_(?:later|at)\b",
    r"\bpygame\.time\.set_timer\b",
    # direct host / global object access
    r"\bglobals\s*\(",
    r"\b__builtins__\b",
    r"\bbuiltins\b",
    r"\bos\.",
    r"\bsys\.",
    r"\bsubprocess\b",
    r"\bctypes\b",
    r"\bsocket\b",
    r"\bpygame\.display\b",
    # persistent storage
    r"\bopen\s*\(",
    r"\bshelve\b",
    r"\bpickle\b",
    r"\bsqlite3\b",
    r"\bdbm\b",
    r"\bpathlib\b",
    # object-model manipulation
    r"__(?:class|bases|mro|subclasses|globals|code|dict|getattribute|closure)__",
    r"\bsetattr\s*\(",
    r"\bdelattr\s*\(",
)

_PRIMITIVES = (bool, int, float, complex, str, bytes, bytearray)


class CartridgeValidator:
    """Structural and safety screen run once per cartridge at admission."""

    def __init__(self,
                 deny_patterns: Optional[Iterable[str]] = None,
                 require_source: bool = True):
        """
        Args:
            deny_patterns: Regexes searched for in cartridge source
                           (defaults to DEFAULT_DENY_PATTERNS)
            require_source: Reject cartridges whose source cannot be read
        """
        patterns = list(DEFAULT_DENY_PATTERNS if deny_patterns is None else deny_patterns)
        self.deny_patterns = tuple(patterns)
        self.require_source = require_source
        self._deny_re = re.compile("|".join(f"(?:{p})" for p in patterns)) if patterns else None

    def validate(self, candidate) -> None:
        """
        Validate a cartridge's structure and safety.

        Args:
            candidate: Object or module exposing draw() and optionally setup()

        Raises:
            ValidationError: If the cartridge is malformed or potentially harmful
        """
        if candidate is None or isinstance(candidate, _PRIMITIVES):
            raise ValidationError("Invalid cartridge format")
        if inspect.isclass(candidate):
            raise ValidationError(
                f"Invalid cartridge format: got class {candidate.__name__}, expected an instance"
            )

        self._validate_structure(candidate)
        self._validate_safety(candidate)

    def _validate_structure(self, candidate) -> None:
        draw = getattr(candidate, "draw", None)
        if not callable(draw):
            raise ValidationError("Invalid cartridge structure: draw() is required")

        setup = getattr(candidate, "setup", None)
        if setup is not None and not callable(setup):
            raise ValidationError("Invalid cartridge structure: setup must be callable")

    def _validate_safety(self, candidate) -> None:
        sources = _collect_source(candidate)
        if not sources:
            if self.require_source:
                raise ValidationError("Cartridge source unavailable for safety screen")
            showlog.warn("[VALIDATOR] No source available; skipping safety screen")
            return
        if self._deny_re is None:
            return

        for text in sources:
            match = self._deny_re.search(text)
            if match:
                showlog.warn(f"[VALIDATOR] Rejected cartridge: matched '{match.group(0)}'")
                raise ValidationError(
                    f"Cartridge contains potentially harmful code: '{match.group(0)}'"
                )

    def wrap(self, candidate, limit_ms: float = 1000) -> "GovernedCartridge":
        """
        Wrap a cartridge so every setup/draw call is timed.

        Args:
            candidate: Validated cartridge
            limit_ms: Maximum execution time in milliseconds

        Returns:
            GovernedCartridge forwarding to candidate
        """
        return GovernedCartridge(candidate, limit_ms)


def _collect_source(candidate) -> List[str]:
    """Gather source text for a module, or for an object's class and capabilities."""
    if inspect.ismodule(candidate):
        text = _source_of(candidate)
        return [text] if text else []

    sources = []
    cls = type(candidate)
    if cls.__module__ not in ("builtins", "types"):
        text = _source_of(cls)
        if text:
            sources.append(text)

    for name in ("setup", "draw"):
        fn = getattr(candidate, name, None)
        if fn is None:
            continue
        text = _source_of(fn)
        if text and text not in sources and not any(text in s for s in sources):
            sources.append(text)
    return sources


def _source_of(obj) -> Optional[str]:
    try:
        return inspect.getsource(obj)
    except (OSError, TypeError):
        return None


class ExecutionGovernor:
    """
    Times each call of a wrapped callable.

    Keeps the last HISTORY_SIZE durations; a call fails with
    ExecutionLimitError when it alone exceeds limit_ms, or when a full
    history averages above SUSTAINED_LOAD_RATIO * limit_ms. Once the full
    history is over that average, later calls are refused without running.
    """

    def __init__(self, fn: Callable, limit_ms: float = 1000,
                 timer: Callable[[], float] = time.perf_counter, name: str = ""):
        if limit_ms <= 0:
            raise ValueError(f"limit_ms must be > 0, got {limit_ms}")
        self.fn = fn
        self.limit_ms = float(limit_ms)
        self.name = name or getattr(fn, "__name__", "call")
        self._timer = timer
        self._history = deque(maxlen=HISTORY_SIZE)

    def __call__(self, *args, **kwargs):
        # a callable already flagged as too slow is not run again
        if len(self._history) == HISTORY_SIZE:
            average = sum(self._history) / len(self._history)
            if average > self.limit_ms * SUSTAINED_LOAD_RATIO:
                raise ExecutionLimitError(
                    f"{self.name} refused: consistent high CPU usage "
                    f"(avg {average:.1f}ms over last {HISTORY_SIZE} calls)"
                )

        start = self._timer()
        result = self.fn(*args, **kwargs)
        elapsed_ms = (self._timer() - start) * 1000.0
        self._history.append(elapsed_ms)

        if elapsed_ms > self.limit_ms:
            raise ExecutionLimitError(
                f"{self.name} execution time exceeded limit "
                f"({round(elapsed_ms)}ms > {round(self.limit_ms)}ms)"
            )
        if len(self._history) == HISTORY_SIZE:
            average = sum(self._history) / len(self._history)
            if average > self.limit_ms * SUSTAINED_LOAD_RATIO:
                raise ExecutionLimitError(
                    f"{self.name} showing consistent high CPU usage "
                    f"(avg {average:.1f}ms over last {HISTORY_SIZE} calls)"
                )
        return result

    @property
    def history(self) -> tuple:
        return tuple(self._history)

    def average_ms(self) -> float:
        if not self._history:
            return 0.0
        return sum(self._history) / len(self._history)


class GovernedCartridge:
    """Cartridge wrapper whose setup/draw run under an ExecutionGovernor."""

    def __init__(self, cartridge, limit_ms: float = 1000,
                 timer: Callable[[], float] = time.perf_counter):
        self.cartridge = cartridge
        self.limit_ms = limit_ms
        self.draw = ExecutionGovernor(cartridge.draw, limit_ms, timer, name="draw")
        setup = getattr(cartridge, "setup", None)
        self.setup = ExecutionGovernor(setup, limit_ms, timer, name="setup") if setup else None

    def __getattr__(self, name):
        if name == "cartridge":
            raise AttributeError(name)
        # Metadata (name, version, ...) comes from the wrapped cartridge
        return getattr(self.cartridge, name)

    def __repr__(self):
        return f"GovernedCartridge({self.cartridge!r}, limit_ms={self.limit_ms})"
