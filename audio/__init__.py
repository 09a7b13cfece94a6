"""
Audio capture and frequency analysis.
"""

from .analyzer import AudioAnalyzer, FFTAnalyzer, MockAudioAnalyzer
from .manager import AudioInitError, AudioManager

__all__ = ["AudioAnalyzer", "FFTAnalyzer", "MockAudioAnalyzer", "AudioManager", "AudioInitError"]
