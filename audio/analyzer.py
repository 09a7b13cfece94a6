"""
Frequency analyzers.

Every analyzer returns a 1-D sequence of byte-scaled magnitudes (0..255),
one value per frequency bin, from analyze(). FFTAnalyzer computes them
from live samples pushed in by the capture callback; MockAudioAnalyzer
returns noise for tests and machines without an input device.
"""

import threading
from typing import Optional

import numpy as np


class AudioAnalyzer:
    """Analyzer interface plus per-frame level metrics."""

    def __init__(self):
        self.metrics = {"drops": 0, "total_samples": 0, "peak_level": 0.0}

    def analyze(self):
        raise NotImplementedError("Method not implemented")

    def reset_metrics(self):
        self.metrics = {"drops": 0, "total_samples": 0, "peak_level": 0.0}

    def _update_metrics(self, data):
        peak = float(np.max(data)) if len(data) else 0.0
        self.metrics["total_samples"] += 1
        self.metrics["peak_level"] = max(self.metrics["peak_level"], peak)
        # a silent frame counts as a dropout
        if peak < 1:
            self.metrics["drops"] += 1


class FFTAnalyzer(AudioAnalyzer):
    """
    Windowed FFT over the most recent 2 * bin_count samples.

    Magnitudes are smoothed over time (smoothing=0 means no smoothing),
    converted to dBFS and mapped from [min_db, max_db] onto 0..255.
    """

    def __init__(self, bin_count: int = 1024, smoothing: float = 0.8,
                 min_db: float = -100.0, max_db: float = -30.0):
        super().__init__()
        self.bin_count = int(bin_count)
        self.fft_size = self.bin_count * 2
        self.smoothing = float(smoothing)
        self.min_db = float(min_db)
        self.max_db = float(max_db)

        # periodic Hann; a bin-centred tone only leaks into its neighbours
        self._window = np.hanning(self.fft_size + 1)[:-1]
        self._buffer = np.zeros(self.fft_size, dtype=np.float32)
        self._smoothed = np.zeros(self.bin_count, dtype=np.float64)
        self._lock = threading.Lock()

    def feed(self, samples) -> None:
        """Append mono samples to the ring buffer (called from the capture thread)."""
        block = np.asarray(samples, dtype=np.float32).ravel()
        if block.size == 0:
            return
        with self._lock:
            if block.size >= self.fft_size:
                self._buffer[:] = block[-self.fft_size:]
            else:
                self._buffer = np.roll(self._buffer, -block.size)
                self._buffer[-block.size:] = block

    def analyze(self) -> np.ndarray:
        with self._lock:
            frame = self._buffer.copy()

        spectrum = np.fft.rfft(frame * self._window)[:self.bin_count]
        magnitude = np.abs(spectrum) / self.fft_size

        s = self.smoothing
        self._smoothed = s * self._smoothed + (1.0 - s) * magnitude

        with np.errstate(divide="ignore"):
            db = 20.0 * np.log10(np.maximum(self._smoothed, 1e-12))
        scaled = (db - self.min_db) * (255.0 / (self.max_db - self.min_db))
        data = np.floor(np.clip(scaled, 0.0, 255.0)).astype(np.uint8)

        self._update_metrics(data)
        return data


class MockAudioAnalyzer(AudioAnalyzer):
    """Random spectrum of 128 values in 0..254."""

    SIZE = 128

    def __init__(self, seed: Optional[int] = None):
        super().__init__()
        self._rng = np.random.default_rng(seed)

    def analyze(self) -> np.ndarray:
        data = self._rng.integers(0, 255, size=self.SIZE)
        self._update_metrics(data)
        return data
