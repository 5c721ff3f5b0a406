"""Spectrum → time-domain reconstruction strategies.

Three algorithms live behind :class:`~aliaslab.models.ReconstructionPolicy`:

- ``FOURIER_SYNTHESIS`` (default): sum the non-negative bins up to Nyquist,
  DC excluded, each scaled by ``2/N`` to account for the folded
  negative-frequency half.
- ``FULL_SPECTRUM``: sum every bin once at ``1/N``, mapping bins above
  ``N/2`` to negative frequencies and flipping their phase sign.  By
  Hermitian symmetry this equals the Fourier synthesis plus the DC term.
- ``SINC_INTERPOLATION``: rebuild directly from the sample points with a
  ``sin(u)/u`` kernel; the spectrum is not consulted.

Min-max rescaling is a policy flag so every reconstruction of a session is
post-processed the same way.
"""

from __future__ import annotations

import numpy as np

from ..constants import TWO_PI
from ..errors import EmptyOutputRequestedError, InvalidFrequencyError
from ..models import Curve, ReconstructionMethod, ReconstructionPolicy, Spectrum
from .fft import nyquist_bin_count

_MAX_BLOCK_ELEMENTS = 1 << 20
"""Upper bound on the ``points x components`` matrix built per block."""


def output_axis(n_points: int) -> np.ndarray:
    """*n_points* evenly spaced ``x`` in ``[0, 2π)`` (float64)."""
    if n_points <= 0:
        raise EmptyOutputRequestedError(
            f"reconstruction needs at least one output point, got {n_points}"
        )
    return np.arange(n_points, dtype=np.float64) * (TWO_PI / n_points)


def _synthesize(
    x: np.ndarray,
    freqs: np.ndarray,
    amps: np.ndarray,
    phases: np.ndarray,
) -> np.ndarray:
    """``Σ amps * cos(freqs * x + phases)`` evaluated block-wise over *x*."""
    y = np.zeros(x.size, dtype=np.float64)
    if freqs.size == 0:
        return y
    block = max(1, _MAX_BLOCK_ELEMENTS // freqs.size)
    for start in range(0, x.size, block):
        xs = x[start : start + block]
        arg = np.outer(xs, freqs) + phases
        y[start : start + block] = np.cos(arg) @ amps
    return y


def fourier_synthesis(spectrum: Spectrum, n_points: int) -> np.ndarray:
    """Sum bins ``1..K`` with ``K = min(N/2, ceil((fs/2)/Δf))`` at ``2/N``."""
    x = output_axis(n_points)
    n = spectrum.fft_size
    k_max = nyquist_bin_count(n, spectrum.sampling_frequency)
    k = np.arange(1, k_max + 1)
    values = spectrum.values[k].astype(np.complex128)
    y = _synthesize(
        x,
        k * (spectrum.sampling_frequency / n),
        np.abs(values),
        np.angle(values),
    )
    return y * (2.0 / n)


def full_spectrum_synthesis(spectrum: Spectrum, n_points: int) -> np.ndarray:
    """Sum all ``N`` bins at ``1/N`` with negative-frequency phase flipped."""
    x = output_axis(n_points)
    n = spectrum.fft_size
    k = np.arange(n)
    negative = k > n // 2
    signed_k = np.where(negative, k - n, k)
    values = spectrum.values.astype(np.complex128)
    phases = np.where(negative, -np.angle(values), np.angle(values))
    y = _synthesize(
        x,
        np.abs(signed_k) * (spectrum.sampling_frequency / n),
        np.abs(values),
        phases,
    )
    return y / n


def hann_edge_window(n_samples: int) -> np.ndarray:
    """Hann taper over sample index; identity for fewer than three samples."""
    if n_samples < 3:
        return np.ones(max(0, n_samples), dtype=np.float64)
    return np.hanning(n_samples)


def sinc_kernel(u: np.ndarray) -> np.ndarray:
    """``sin(u)/u`` with the removable singularity at ``u == 0`` set to 1."""
    u = np.asarray(u, dtype=np.float64)
    at_zero = u == 0.0
    safe_u = np.where(at_zero, 1.0, u)
    return np.where(at_zero, 1.0, np.sin(safe_u) / safe_u)


def sinc_interpolation(
    samples: Curve,
    sampling_frequency: float,
    n_points: int,
    *,
    edge_window: bool = False,
) -> np.ndarray:
    """``y(x) = Σ_j w_j s_j sinc(π (x - t_j) fs / 2π)`` over the display axis."""
    if sampling_frequency <= 0.0:
        raise InvalidFrequencyError(
            f"sampling_frequency must be > 0 for sinc interpolation, got {sampling_frequency!r}"
        )
    x = output_axis(n_points)
    t = samples.x.astype(np.float64)
    weights = samples.y.astype(np.float64)
    if edge_window:
        weights = weights * hann_edge_window(t.size)
    y = np.zeros(x.size, dtype=np.float64)
    if t.size == 0:
        return y
    scale = np.pi * float(sampling_frequency) / TWO_PI
    block = max(1, _MAX_BLOCK_ELEMENTS // t.size)
    for start in range(0, x.size, block):
        xs = x[start : start + block]
        y[start : start + block] = sinc_kernel((xs[:, None] - t[None, :]) * scale) @ weights
    return y


def rescale_to_unit(y: np.ndarray) -> np.ndarray:
    """Min-max rescale into ``[-1, 1]``; a flat curve maps to all zeros."""
    y = np.asarray(y, dtype=np.float64)
    if y.size == 0:
        return y
    y_min = float(np.min(y))
    y_max = float(np.max(y))
    delta = y_max - y_min
    if delta == 0.0:
        return np.zeros_like(y)
    midpoint = y_max - delta / 2.0
    return (y - midpoint) * (2.0 / delta)


def reconstruct(
    policy: ReconstructionPolicy,
    n_points: int,
    *,
    spectrum: Spectrum | None = None,
    samples: Curve | None = None,
    sampling_frequency: float | None = None,
) -> Curve:
    """Run the algorithm selected by *policy* and apply its post-processing.

    Spectral methods need *spectrum*; sinc interpolation needs *samples* and
    *sampling_frequency*.  Missing inputs are a programming error and raise
    ``ValueError``.
    """
    if policy.method is ReconstructionMethod.SINC_INTERPOLATION:
        if samples is None or sampling_frequency is None:
            raise ValueError("sinc interpolation requires samples and sampling_frequency")
        y = sinc_interpolation(
            samples, sampling_frequency, n_points, edge_window=policy.edge_window
        )
    else:
        if spectrum is None:
            raise ValueError(f"{policy.method} reconstruction requires a spectrum")
        if policy.method is ReconstructionMethod.FULL_SPECTRUM:
            y = full_spectrum_synthesis(spectrum, n_points)
        else:
            y = fourier_synthesis(spectrum, n_points)
    if policy.rescale:
        y = rescale_to_unit(y)
    return Curve(output_axis(n_points), y)
