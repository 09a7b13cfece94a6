"""Tests for analyzers and the audio manager (no real input device)."""

from __future__ import annotations

import sys
import types
import unittest
from unittest import mock

import numpy as np

import config as cfg
from audio.analyzer import AudioAnalyzer, FFTAnalyzer, MockAudioAnalyzer
from audio.manager import AudioInitError, AudioManager, sanitize_options


def _sine(cycles: int, size: int, amplitude: float = 0.5) -> np.ndarray:
    n = np.arange(size)
    return (amplitude * np.sin(2 * np.pi * cycles * n / size)).astype(np.float32)


class MockAnalyzerTests(unittest.TestCase):

    def test_shape_and_range(self) -> None:
        analyzer = MockAudioAnalyzer(seed=1)
        for _ in range(20):
            data = analyzer.analyze()
            self.assertEqual(len(data), 128)
            self.assertTrue(((data >= 0) & (data <= 254)).all())

    def test_interface_is_abstract(self) -> None:
        with self.assertRaises(NotImplementedError):
            AudioAnalyzer().analyze()


class FFTAnalyzerTests(unittest.TestCase):

    def test_silence_counts_as_drop(self) -> None:
        analyzer = FFTAnalyzer(bin_count=64, smoothing=0.0)
        data = analyzer.analyze()
        self.assertEqual(len(data), 64)
        self.assertFalse(data.any())
        self.assertEqual(analyzer.metrics["drops"], 1)
        self.assertEqual(analyzer.metrics["total_samples"], 1)

    def test_sine_peaks_in_its_bin(self) -> None:
        analyzer = FFTAnalyzer(bin_count=64, smoothing=0.0)
        analyzer.feed(_sine(10, 128))
        data = analyzer.analyze()
        self.assertEqual(data[10], 255)
        self.assertEqual(data[40], 0)
        self.assertEqual(analyzer.metrics["drops"], 0)
        self.assertEqual(analyzer.metrics["peak_level"], 255)

    def test_feed_keeps_most_recent_samples(self) -> None:
        analyzer = FFTAnalyzer(bin_count=32, smoothing=0.0)
        analyzer.feed(_sine(5, 64))
        for _ in range(4):
            analyzer.feed(np.zeros(16, dtype=np.float32))
        self.assertFalse(analyzer.analyze().any())

    def test_smoothing_carries_energy_over(self) -> None:
        analyzer = FFTAnalyzer(bin_count=64, smoothing=0.9)
        analyzer.feed(_sine(10, 128))
        analyzer.analyze()
        analyzer.feed(np.zeros(128, dtype=np.float32))
        self.assertGreater(analyzer.analyze()[10], 0)

    def test_reset_metrics(self) -> None:
        analyzer = FFTAnalyzer(bin_count=32)
        analyzer.analyze()
        analyzer.reset_metrics()
        self.assertEqual(analyzer.metrics, {"drops": 0, "total_samples": 0, "peak_level": 0.0})


class SanitizeOptionsTests(unittest.TestCase):

    def test_defaults(self) -> None:
        self.assertEqual(sanitize_options(), (0.8, 1024))

    def test_clamping(self) -> None:
        self.assertEqual(sanitize_options(5, 10), (1.0, 32))
        self.assertEqual(sanitize_options(-1, 99999), (0.0, 2048))

    def test_zero_smoothing_is_kept(self) -> None:
        self.assertEqual(sanitize_options(0, 512), (0.0, 512))

    def test_garbage_falls_back_to_defaults(self) -> None:
        self.assertEqual(sanitize_options("loud", float("nan")), (0.8, 1024))


class AudioManagerTests(unittest.TestCase):

    def test_mock_backend(self) -> None:
        manager = AudioManager()
        analyzer = manager.initialize()
        self.assertIsInstance(analyzer, MockAudioAnalyzer)
        self.assertIsNone(manager.stream)

    def test_sounddevice_stream(self) -> None:
        fake_sd = types.ModuleType("sounddevice")
        fake_sd.InputStream = mock.MagicMock(name="InputStream")
        with mock.patch.dict(sys.modules, {"sounddevice": fake_sd}), \
                mock.patch.object(cfg, "AUDIO_BACKEND", "sounddevice"):
            manager = AudioManager()
            analyzer = manager.initialize(smoothing=0.0, bin_count=64)

        self.assertIsInstance(analyzer, FFTAnalyzer)
        self.assertEqual(analyzer.bin_count, 64)
        kwargs = fake_sd.InputStream.call_args.kwargs
        self.assertEqual(kwargs["dtype"], "float32")
        self.assertEqual(kwargs["blocksize"], 64)
        stream = fake_sd.InputStream.return_value
        stream.start.assert_called_once()

        # capture callback feeds the analyzer
        kwargs["callback"](_sine(10, 128).reshape(-1, 1), 128, None, None)
        self.assertEqual(analyzer.analyze()[10], 255)

        manager.stop()
        stream.stop.assert_called_once()
        stream.close.assert_called_once()
        self.assertIsNone(manager.stream)

    def test_stream_failure_raises_audio_init_error(self) -> None:
        fake_sd = types.ModuleType("sounddevice")
        fake_sd.InputStream = mock.MagicMock(side_effect=OSError("no device"))
        with mock.patch.dict(sys.modules, {"sounddevice": fake_sd}), \
                mock.patch.object(cfg, "AUDIO_BACKEND", "sounddevice"):
            manager = AudioManager()
            with self.assertRaises(AudioInitError) as cm:
                manager.initialize()
        self.assertIsInstance(cm.exception, RuntimeError)
        self.assertIsNone(manager.analyzer)

    def test_report_metrics_warns_on_high_drop_rate(self) -> None:
        manager = AudioManager()
        analyzer = manager.initialize()
        self.assertIsNone(manager.report_metrics(now=100.0))

        analyzer.metrics.update(drops=10, total_samples=100, peak_level=12)
        with mock.patch("showlog.warn") as warn:
            self.assertIsNone(manager.report_metrics(now=102.0))
            rate = manager.report_metrics(now=105.0)
        self.assertAlmostEqual(rate, 10.0)
        warn.assert_called_once()
        self.assertEqual(analyzer.metrics["total_samples"], 0)

    def test_report_metrics_quiet_below_threshold(self) -> None:
        manager = AudioManager()
        analyzer = manager.initialize()
        manager.report_metrics(now=0.0)
        analyzer.metrics.update(drops=1, total_samples=100)
        with mock.patch("showlog.warn") as warn:
            self.assertAlmostEqual(manager.report_metrics(now=5.0), 1.0)
        warn.assert_not_called()

    def test_report_without_analyzer(self) -> None:
        self.assertIsNone(AudioManager().report_metrics(now=1.0))


if __name__ == "__main__":  # pragma: no cover
    unittest.main(exit=False)
