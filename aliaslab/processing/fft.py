"""Pure spectral-analysis functions used by the aliasing engine.

All functions in this module are stateless: they take arrays (and scalar
parameters) and return results without touching any shared mutable state.
This makes them independently testable and reusable outside of the
:class:`~aliaslab.processing.engine.AliasingEngine` class.
"""

from __future__ import annotations

import math

import numpy as np

from ..constants import (
    AUTO_FFT_SAMPLES_PER_HZ,
    BLACKMAN_HARRIS_COEFFS,
    MIN_FFT_SIZE,
    SIZE_ROUNDING_EPSILON,
)
from ..errors import InvalidFrequencyError, InvalidTransformSizeError
from ..models import FftSizeMode, SpectralWindow


def round_up_even(value: float) -> int:
    """Round *value* up to an integer, then up again to the next even number."""
    if not math.isfinite(value):
        raise InvalidTransformSizeError(f"cannot size a transform from {value!r}")
    n = max(0, math.ceil(value - SIZE_ROUNDING_EPSILON))
    if n % 2:
        n += 1
    return n


def resolve_fft_size(sampling_frequency: float, mode: FftSizeMode) -> int:
    """Transform length for *mode*: ``round_up_even(20 * fs)`` or the custom size."""
    if mode.is_auto:
        if not math.isfinite(sampling_frequency) or sampling_frequency <= 0.0:
            raise InvalidFrequencyError(
                f"sampling_frequency must be a finite value > 0, got {sampling_frequency!r}"
            )
        n = round_up_even(AUTO_FFT_SAMPLES_PER_HZ * float(sampling_frequency))
    else:
        assert mode.custom_size is not None
        n = round_up_even(mode.custom_size)
    if n < MIN_FFT_SIZE:
        raise InvalidTransformSizeError(f"FFT size must be >= {MIN_FFT_SIZE}, got {n}")
    return n


def blackman_harris(n: int) -> np.ndarray:
    """4-term Blackman-Harris window of length *n* (float32)."""
    if n <= 1:
        return np.ones(max(0, n), dtype=np.float32)
    a0, a1, a2, a3 = BLACKMAN_HARRIS_COEFFS
    phase = 2.0 * np.pi * np.arange(n, dtype=np.float64) / float(n - 1)
    window = a0 - a1 * np.cos(phase) + a2 * np.cos(2.0 * phase) - a3 * np.cos(3.0 * phase)
    return window.astype(np.float32)


def compute_spectrum(
    time_samples: np.ndarray,
    *,
    window: SpectralWindow = SpectralWindow.NONE,
) -> np.ndarray:
    """Forward DFT of a real sample sequence.

    Returns a complex64 array of the same length.  Nothing is windowed unless
    *window* asks for it.  Sequences shorter than two samples have no
    meaningful spectrum and raise :class:`InvalidTransformSizeError`.
    """
    samples = np.asarray(time_samples, dtype=np.float32)
    if samples.ndim != 1:
        raise InvalidTransformSizeError(f"expected a 1-D sample sequence, got shape {samples.shape}")
    n = samples.size
    if n < MIN_FFT_SIZE:
        raise InvalidTransformSizeError(f"FFT size must be >= {MIN_FFT_SIZE}, got {n}")
    if window is SpectralWindow.BLACKMAN_HARRIS:
        samples = samples * blackman_harris(n)
    return np.fft.fft(samples).astype(np.complex64)


def nyquist_bin_count(fft_size: int, sampling_frequency: float) -> int:
    """``K = min(N/2, ceil((fs/2) / Δf))``: the highest bin synthesised."""
    resolution_hz = float(sampling_frequency) / fft_size
    return min(fft_size // 2, math.ceil((float(sampling_frequency) / 2.0) / resolution_hz))
