"""Shared fakes for the test suite."""

from __future__ import annotations


class FakeClock:
    """Manually advanced millisecond clock."""

    def __init__(self, start: float = 0.0) -> None:
        self.now = float(start)

    def __call__(self) -> float:
        return self.now

    def advance(self, ms: float) -> None:
        self.now += ms


class StepTimer:
    """perf_counter stand-in returning queued readings (seconds)."""

    def __init__(self) -> None:
        self._readings = []
        self._t = 0.0

    def queue_call(self, duration_ms: float) -> None:
        start = self._t
        self._t += duration_ms / 1000.0
        self._readings.extend([start, self._t])

    def __call__(self) -> float:
        return self._readings.pop(0)
