"""Ideal-signal and sample-point generation.

Both display curves share the normalised ``[0, 2π)`` x-axis so the sample
markers overlay the continuous curve.  The transform input is the one place
that uses physical sample times, so that FFT bin ``k`` maps to
``k * fs / N`` Hz.
"""

from __future__ import annotations

import math

import numpy as np

from ..constants import TWO_PI
from ..errors import EmptyOutputRequestedError, InvalidFrequencyError
from ..models import Curve


def _phase_radians(phase_offset: float) -> float:
    return float(phase_offset) * math.pi


def generate_signal(signal_frequency: float, phase_offset: float, n_points: int) -> Curve:
    """``sin(f * x + phase * π)`` at *n_points* evenly spaced ``x`` in ``[0, 2π)``."""
    if n_points < 0:
        raise EmptyOutputRequestedError(f"n_points must be >= 0, got {n_points}")
    if n_points == 0:
        return Curve.empty()
    x = np.arange(n_points, dtype=np.float64) * (TWO_PI / n_points)
    y = np.sin(float(signal_frequency) * x + _phase_radians(phase_offset))
    return Curve(x, y)


def sample_count(sampling_frequency: float) -> int:
    """Number of sample markers: ``floor(fs) + 1``."""
    if not math.isfinite(sampling_frequency) or sampling_frequency <= 0.0:
        raise InvalidFrequencyError(
            f"sampling_frequency must be a finite value > 0, got {sampling_frequency!r}"
        )
    return math.floor(sampling_frequency) + 1


def generate_sample_points(
    signal_frequency: float,
    sampling_frequency: float,
    phase_offset: float,
) -> Curve:
    """Samples at ``x_i = i * 2π / fs`` for ``i = 0..floor(fs)``.

    The last marker lands at or just before one full display period, so the
    markers line up with :func:`generate_signal`'s axis rather than with
    physical seconds.
    """
    n_samples = sample_count(sampling_frequency)
    x = np.arange(n_samples, dtype=np.float64) * (TWO_PI / float(sampling_frequency))
    y = np.sin(float(signal_frequency) * x + _phase_radians(phase_offset))
    return Curve(x, y)


def generate_transform_input(
    signal_frequency: float,
    sampling_frequency: float,
    phase_offset: float,
    n_samples: int,
) -> np.ndarray:
    """*n_samples* real samples at ``t_i = i / fs`` seconds, as float32."""
    if not math.isfinite(sampling_frequency) or sampling_frequency <= 0.0:
        raise InvalidFrequencyError(
            f"sampling_frequency must be a finite value > 0, got {sampling_frequency!r}"
        )
    t = np.arange(max(0, int(n_samples)), dtype=np.float64) / float(sampling_frequency)
    y = np.sin(TWO_PI * float(signal_frequency) * t + _phase_radians(phase_offset))
    return y.astype(np.float32)
