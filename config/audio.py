"""Audio capture configuration for spectrum analysis."""

# "sounddevice" captures the default input; "mock" feeds random spectra
AUDIO_BACKEND = "sounddevice"

# Input device (None = system default). Accepts an index or a name substring.
AUDIO_INPUT_DEVICE = None
SAMPLE_RATE = 44100
CHANNELS = 1

# FFT options (sanitized by AudioManager)
AUDIO_SMOOTHING = 0.8
AUDIO_BIN_COUNT = 1024
MIN_BIN_COUNT = 32
MAX_BIN_COUNT = 2048

# Byte-spectrum scaling window (dBFS), same range as a browser AnalyserNode
MIN_DECIBELS = -100.0
MAX_DECIBELS = -30.0

# Drop-rate reporting
AUDIO_METRICS_INTERVAL_SEC = 5.0
AUDIO_DROP_WARN_PERCENT = 5.0
