"""
Spectrum sanitization.

Cartridges never see raw analyzer output: the registry converts whatever
the audio layer produced into a read-only float64 array with every value
finite and inside [0, upper].
"""

import math
from collections.abc import Mapping

import numpy as np


def _is_sequence(value) -> bool:
    if value is None or isinstance(value, (str, bytes, bytearray, Mapping)):
        return False
    if isinstance(value, np.ndarray):
        return value.ndim > 0
    return hasattr(value, "__iter__") and hasattr(value, "__len__")


def _coerce(item, upper: float) -> float:
    try:
        v = float(item)
    except (TypeError, ValueError, OverflowError):
        return 0.0
    if not math.isfinite(v):
        return 0.0
    return min(max(v, 0.0), upper)


def sanitize_spectrum(spectrum, fallback_length: int = 128, upper: float = 255.0) -> np.ndarray:
    """
    Produce a safe copy of a spectrum for cartridges.

    Args:
        spectrum: Analyzer output (sequence of numbers, numpy array, or anything else)
        fallback_length: Length of the all-zero array used for non-sequence input
        upper: Inclusive upper bound for every value

    Returns:
        Read-only numpy float64 array
    """
    if not _is_sequence(spectrum):
        out = np.zeros(int(fallback_length), dtype=np.float64)
    elif isinstance(spectrum, np.ndarray) and spectrum.dtype.kind in "biuf":
        out = np.nan_to_num(spectrum.astype(np.float64).ravel(), nan=0.0, posinf=0.0, neginf=0.0)
        np.clip(out, 0.0, upper, out=out)
    else:
        items = spectrum.ravel() if isinstance(spectrum, np.ndarray) else spectrum
        out = np.fromiter((_coerce(item, upper) for item in items), dtype=np.float64)

    out.setflags(write=False)
    return out
