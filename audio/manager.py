"""
Audio capture management.

Opens a sounddevice input stream that feeds an FFTAnalyzer, or hands out
a MockAudioAnalyzer when AUDIO_BACKEND is "mock". Also reports dropout
metrics at a fixed interval.
"""

import math
import time
from typing import Optional

import config as cfg
import showlog
from audio.analyzer import AudioAnalyzer, FFTAnalyzer, MockAudioAnalyzer
from helper import clamp


class AudioInitError(RuntimeError):
    """Raised when audio capture could not be started."""
    pass


def _number_or_default(value, default: float) -> float:
    if value is None or isinstance(value, bool):
        return default
    try:
        v = float(value)
    except (TypeError, ValueError):
        return default
    return v if math.isfinite(v) else default


def sanitize_options(smoothing=None, bin_count=None):
    """
    Clamp analyzer options into their supported ranges.

    Returns:
        tuple: (smoothing in 0..1, bin_count in MIN_BIN_COUNT..MAX_BIN_COUNT)
    """
    smoothing = _number_or_default(smoothing, float(getattr(cfg, "AUDIO_SMOOTHING", 0.8)))
    bin_count = _number_or_default(bin_count, float(getattr(cfg, "AUDIO_BIN_COUNT", 1024)))
    lo = int(getattr(cfg, "MIN_BIN_COUNT", 32))
    hi = int(getattr(cfg, "MAX_BIN_COUNT", 2048))
    return clamp(smoothing, 0.0, 1.0), int(clamp(int(bin_count), lo, hi))


class AudioManager:
    """Owns the capture stream and the analyzer it feeds."""

    def __init__(self):
        self.analyzer: Optional[AudioAnalyzer] = None
        self.stream = None
        self._last_report: Optional[float] = None

    def initialize(self, smoothing=None, bin_count=None) -> AudioAnalyzer:
        """
        Start audio analysis.

        Args:
            smoothing: FFT smoothing (default AUDIO_SMOOTHING, clamped to 0..1)
            bin_count: Frequency bins (default AUDIO_BIN_COUNT, clamped to 32..2048)

        Returns:
            AudioAnalyzer instance

        Raises:
            AudioInitError: If the input stream could not be opened
        """
        backend = getattr(cfg, "AUDIO_BACKEND", "sounddevice")
        if backend == "mock":
            self.analyzer = MockAudioAnalyzer()
            showlog.info("[AUDIO] Using mock analyzer")
            return self.analyzer

        smoothing, bin_count = sanitize_options(smoothing, bin_count)
        analyzer = FFTAnalyzer(
            bin_count=bin_count,
            smoothing=smoothing,
            min_db=float(getattr(cfg, "MIN_DECIBELS", -100.0)),
            max_db=float(getattr(cfg, "MAX_DECIBELS", -30.0)),
        )

        try:
            # PortAudio is loaded on import; keep it out of headless/mock runs
            import sounddevice as sd

            self.stream = sd.InputStream(
                device=getattr(cfg, "AUDIO_INPUT_DEVICE", None),
                channels=int(getattr(cfg, "CHANNELS", 1)),
                samplerate=int(getattr(cfg, "SAMPLE_RATE", 44100)),
                blocksize=bin_count,
                dtype="float32",
                callback=self._make_callback(analyzer),
            )
            self.stream.start()
        except Exception as e:
            self.stream = None
            showlog.error(f"[AUDIO] Audio initialization failed: {e}")
            raise AudioInitError("Could not initialize audio input") from e

        self.analyzer = analyzer
        self._last_report = time.monotonic()
        showlog.info(f"[AUDIO] Capturing: bins={bin_count}, smoothing={smoothing:.2f}")
        return analyzer

    @staticmethod
    def _make_callback(analyzer: FFTAnalyzer):
        def _callback(indata, frames, t, status):
            if status:
                showlog.debug(f"[AUDIO] Stream status: {status}")
            analyzer.feed(indata[:, 0])
        return _callback

    def report_metrics(self, now: Optional[float] = None) -> Optional[float]:
        """
        Log dropouts once per AUDIO_METRICS_INTERVAL_SEC and reset counters.

        Args:
            now: Current monotonic time in seconds

        Returns:
            float: Drop rate in percent when a report was made, else None
        """
        if self.analyzer is None:
            return None
        now = time.monotonic() if now is None else now
        if self._last_report is None:
            self._last_report = now
            return None
        if now - self._last_report < float(getattr(cfg, "AUDIO_METRICS_INTERVAL_SEC", 5.0)):
            return None

        metrics = self.analyzer.metrics
        drop_rate = metrics["drops"] / max(metrics["total_samples"], 1) * 100.0
        if drop_rate > float(getattr(cfg, "AUDIO_DROP_WARN_PERCENT", 5.0)):
            showlog.warn(f"[AUDIO] Audio drops: {drop_rate:.2f}% - Peak level: {metrics['peak_level']:.0f}")
        self.analyzer.reset_metrics()
        self._last_report = now
        return drop_rate

    def stop(self):
        """Stop and close the input stream."""
        if self.stream is not None:
            try:
                self.stream.stop()
                self.stream.close()
            except Exception as e:
                showlog.warn(f"[AUDIO] Error closing stream: {e}")
            self.stream = None
            showlog.debug("[AUDIO] Stream closed")
        self.analyzer = None
        self._last_report = None
