"""Tests for cartridge validation and the execution governor."""

from __future__ import annotations

import types
import unittest

from tests.helpers import StepTimer

from cartridges import pulse_rings
from cartridges.spectrum_bars import SpectrumBars
from core.cartridge import Cartridge
from core.errors import ExecutionLimitError, ValidationError
from security.validator import (
    DEFAULT_DENY_PATTERNS,
    HISTORY_SIZE,
    CartridgeValidator,
    ExecutionGovernor,
    GovernedCartridge,
)


class PlainCartridge:
    name = "Plain"

    def setup(self, ctx):
        return {"ticks": 0}

    def draw(self, ctx, spectrum, width, height, state):
        return {"ticks": state.get("ticks", 0) + 1}


class DrawOnly:
    def draw(self, ctx, spectrum, width, height, state):
        return None


class NoSetupCartridge(Cartridge):
    name = "No Setup Override"

    def draw(self, ctx, spectrum, width, height, state):
        return None


class MissingDraw(Cartridge):
    name = "Forgot draw"


class BadSetup:
    setup = 42

    def draw(self, ctx, spectrum, width, height, state):
        return None


class EvalCartridge:
    def draw(self, ctx, spectrum, width, height, state):
        return eval("{}")


class HostAccessCartridge:
    def draw(self, ctx, spectrum, width, height, state):
        import os
        return {"cwd": os.getcwd()}


class ObjectModelCartridge:
    def draw(self, ctx, spectrum, width, height, state):
        return {"cls": self.__class__.__name__}


class FileCartridge:
    def setup(self, ctx):
        with open("state.txt") as fh:
            return {"saved": fh.read()}

    def draw(self, ctx, spectrum, width, height, state):
        return None


class ForbiddenWordCartridge:
    def draw(self, ctx, spectrum, width, height, state):
        forbidden_word = 1
        return {"x": forbidden_word}


class ValidateStructureTests(unittest.TestCase):

    def setUp(self) -> None:
        self.validator = CartridgeValidator()

    def test_accepts_plain_object(self) -> None:
        self.validator.validate(PlainCartridge())

    def test_accepts_draw_only(self) -> None:
        self.validator.validate(DrawOnly())

    def test_accepts_base_class_subclass(self) -> None:
        self.validator.validate(NoSetupCartridge())

    def test_accepts_bundled_cartridges(self) -> None:
        self.validator.validate(SpectrumBars())
        self.validator.validate(pulse_rings)

    def test_rejects_non_structured_values(self) -> None:
        for value in (None, True, 0, 3.5, "draw", b"draw"):
            with self.subTest(value=value):
                with self.assertRaises(ValidationError):
                    self.validator.validate(value)

    def test_rejects_class_instead_of_instance(self) -> None:
        with self.assertRaises(ValidationError):
            self.validator.validate(PlainCartridge)

    def test_rejects_missing_draw(self) -> None:
        with self.assertRaises(ValidationError):
            self.validator.validate(MissingDraw())

    def test_rejects_non_callable_setup(self) -> None:
        with self.assertRaises(ValidationError):
            self.validator.validate(BadSetup())

    def test_setup_none_is_allowed(self) -> None:
        candidate = types.SimpleNamespace(setup=None, draw=lambda ctx, s, w, h, st: None)
        self.validator.validate(candidate)


class SafetyScreenTests(unittest.TestCase):

    def setUp(self) -> None:
        self.validator = CartridgeValidator()

    def test_rejects_eval(self) -> None:
        with self.assertRaises(ValidationError) as cm:
            self.validator.validate(EvalCartridge())
        self.assertIn("eval", str(cm.exception))

    def test_rejects_host_module_access(self) -> None:
        with self.assertRaises(ValidationError):
            self.validator.validate(HostAccessCartridge())

    def test_rejects_object_model_access(self) -> None:
        with self.assertRaises(ValidationError):
            self.validator.validate(ObjectModelCartridge())

    def test_rejects_file_access_in_setup(self) -> None:
        with self.assertRaises(ValidationError):
            self.validator.validate(FileCartridge())

    def test_fails_closed_without_source(self) -> None:
        candidate = types.SimpleNamespace(draw=print)
        with self.assertRaises(ValidationError):
            self.validator.validate(candidate)

    def test_source_optional_when_not_required(self) -> None:
        validator = CartridgeValidator(require_source=False)
        validator.validate(types.SimpleNamespace(draw=print))

    def test_extra_patterns(self) -> None:
        self.validator.validate(ForbiddenWordCartridge())
        strict = CartridgeValidator(deny_patterns=DEFAULT_DENY_PATTERNS + (r"\bforbidden_word\b",))
        with self.assertRaises(ValidationError):
            strict.validate(ForbiddenWordCartridge())


class ExecutionGovernorTests(unittest.TestCase):

    def test_fast_calls_pass_through(self) -> None:
        timer = StepTimer()
        governor = ExecutionGovernor(lambda x: x * 2, limit_ms=100, timer=timer)
        for _ in range(HISTORY_SIZE * 2):
            timer.queue_call(10)
            self.assertEqual(governor(21), 42)
        self.assertEqual(len(governor.history), HISTORY_SIZE)

    def test_single_slow_call_raises(self) -> None:
        timer = StepTimer()
        governor = ExecutionGovernor(lambda: None, limit_ms=100, timer=timer)
        timer.queue_call(150)
        with self.assertRaises(ExecutionLimitError):
            governor()

    def test_sustained_load_raises_once_history_is_full(self) -> None:
        timer = StepTimer()
        governor = ExecutionGovernor(lambda: None, limit_ms=100, timer=timer)
        for _ in range(HISTORY_SIZE - 1):
            timer.queue_call(85)
            governor()
        timer.queue_call(85)
        with self.assertRaises(ExecutionLimitError):
            governor()

    def test_flagged_callable_is_not_run_again(self) -> None:
        timer = StepTimer()
        calls = []
        governor = ExecutionGovernor(lambda: calls.append(1), limit_ms=100, timer=timer)
        for _ in range(HISTORY_SIZE - 1):
            timer.queue_call(85)
            governor()
        timer.queue_call(85)
        with self.assertRaises(ExecutionLimitError):
            governor()
        self.assertEqual(len(calls), HISTORY_SIZE)

        # no timer readings queued: the call must be refused before timing
        for _ in range(3):
            with self.assertRaises(ExecutionLimitError):
                governor()
        self.assertEqual(len(calls), HISTORY_SIZE)

    def test_average_below_threshold_passes(self) -> None:
        timer = StepTimer()
        governor = ExecutionGovernor(lambda: None, limit_ms=100, timer=timer)
        for _ in range(HISTORY_SIZE):
            timer.queue_call(79)
            governor()
        self.assertAlmostEqual(governor.average_ms(), 79.0, places=6)

    def test_invalid_limit(self) -> None:
        with self.assertRaises(ValueError):
            ExecutionGovernor(lambda: None, limit_ms=0)


class GovernedCartridgeTests(unittest.TestCase):

    def test_wrap_forwards_calls_and_metadata(self) -> None:
        wrapped = CartridgeValidator().wrap(PlainCartridge(), limit_ms=1000)
        self.assertIsInstance(wrapped, GovernedCartridge)
        self.assertEqual(wrapped.name, "Plain")
        self.assertEqual(wrapped.setup(None), {"ticks": 0})
        self.assertEqual(wrapped.draw(None, [], 10, 10, {"ticks": 4}), {"ticks": 5})

    def test_missing_setup_stays_missing(self) -> None:
        wrapped = GovernedCartridge(DrawOnly())
        self.assertIsNone(wrapped.setup)

    def test_slow_draw_raises(self) -> None:
        timer = StepTimer()
        wrapped = GovernedCartridge(DrawOnly(), limit_ms=5, timer=timer)
        timer.queue_call(50)
        with self.assertRaises(ExecutionLimitError):
            wrapped.draw(None, [], 10, 10, {})


if __name__ == "__main__":  # pragma: no cover
    unittest.main(exit=False)
