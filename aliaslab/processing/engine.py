"""Aliasing engine: parameter state, cached computation and frame assembly.

``AliasingEngine`` is the stateful coordinator for one interactive session.
It owns the current :class:`~aliaslab.models.Parameters`, the reconstruction
policy, the spectral window and a :class:`~aliaslab.processing.cache.ComputationCache`,
and dispatches the actual math to the pure functions in
:mod:`~aliaslab.processing.signal`, :mod:`~aliaslab.processing.fft` and
:mod:`~aliaslab.processing.reconstruction`.

The engine is meant to be called once per redraw from a single thread.
Every call runs to completion before returning; parameters only change
between calls through :meth:`AliasingEngine.set_parameters`.
"""

from __future__ import annotations

import logging
import math
import operator
import time
from dataclasses import dataclass
from typing import Any

from ..constants import (
    DEFAULT_DISPLAY_MAX_HZ,
    DEFAULT_SAMPLING_FREQUENCY_HZ,
    DEFAULT_SIGNAL_FREQUENCY_HZ,
)
from ..errors import InvalidFrequencyError
from ..models import (
    AliasingReport,
    Curve,
    FftSizeMode,
    Parameters,
    ReconstructionPolicy,
    SpectralWindow,
    Spectrum,
)
from .cache import (
    ComputationCache,
    reconstruction_key,
    sample_points_key,
    signal_key,
    spectrum_key,
)
from .fft import compute_spectrum, resolve_fft_size
from .reconstruction import reconstruct
from .signal import generate_sample_points, generate_signal, generate_transform_input

LOGGER = logging.getLogger(__name__)


def aliased_frequency(signal_frequency: float, sampling_frequency: float) -> float:
    """Fold *signal_frequency* into ``[0, fs/2]``."""
    if not math.isfinite(sampling_frequency) or sampling_frequency <= 0.0:
        raise InvalidFrequencyError(
            f"sampling_frequency must be a finite value > 0, got {sampling_frequency!r}"
        )
    remainder = math.fmod(signal_frequency, sampling_frequency)
    if remainder > sampling_frequency / 2.0:
        return sampling_frequency - remainder
    return remainder


def _point_count(n_points: int) -> int:
    # Cache keys and generators must see the same integer count.
    if isinstance(n_points, bool):
        raise TypeError(f"n_points must be an integer, got {n_points!r}")
    try:
        return operator.index(n_points)
    except TypeError:
        raise TypeError(f"n_points must be an integer, got {n_points!r}") from None


@dataclass(frozen=True, slots=True, eq=False)
class Frame:
    """Everything a renderer draws for one redraw."""

    parameters: Parameters
    signal: Curve
    sample_points: Curve
    spectrum: Spectrum
    reconstruction: Curve
    report: AliasingReport
    display_max_hz: float = DEFAULT_DISPLAY_MAX_HZ

    def to_dict(self) -> dict[str, Any]:
        freqs, mags = self.spectrum.display_magnitudes(self.display_max_hz)
        return {
            "parameters": self.parameters.to_dict(),
            "report": self.report.to_dict(),
            "signal": self.signal.to_dict(),
            "sample_points": self.sample_points.to_dict(),
            "spectrum": {
                "fft_size": self.spectrum.fft_size,
                "resolution_hz": self.spectrum.resolution_hz,
                "freq": freqs,
                "magnitude": mags,
                "phase": self.spectrum.phases()[: freqs.size],
            },
            "reconstruction": self.reconstruction.to_dict(),
        }


class AliasingEngine:
    def __init__(
        self,
        parameters: Parameters | None = None,
        *,
        policy: ReconstructionPolicy | None = None,
        window: SpectralWindow = SpectralWindow.NONE,
    ):
        self._parameters = parameters or Parameters(
            signal_frequency=DEFAULT_SIGNAL_FREQUENCY_HZ,
            sampling_frequency=DEFAULT_SAMPLING_FREQUENCY_HZ,
        )
        self._fft_size = resolve_fft_size(
            self._parameters.sampling_frequency, self._parameters.fft_size_mode
        )
        self._policy = policy or ReconstructionPolicy()
        self._window = SpectralWindow(window)
        self._cache = ComputationCache()
        # Lightweight call metrics for observability.
        self._total_frames: int = 0
        self._last_frame_duration_s: float = 0.0

    # -- parameter state -------------------------------------------------------

    @property
    def parameters(self) -> Parameters:
        return self._parameters

    @property
    def fft_size(self) -> int:
        return self._fft_size

    @property
    def policy(self) -> ReconstructionPolicy:
        return self._policy

    @property
    def window(self) -> SpectralWindow:
        return self._window

    def set_parameters(
        self,
        signal_frequency: float,
        sampling_frequency: float,
        phase_offset: float = 0.0,
        fft_size_mode: FftSizeMode | None = None,
    ) -> Parameters:
        """Validate and install new parameters.

        Raises a :class:`~aliaslab.errors.DomainError` subclass and leaves the
        current parameters untouched when any value is invalid.  Caches are
        not flushed: each memo notices on its next lookup whether its own
        inputs changed.
        """
        params = Parameters(
            signal_frequency=signal_frequency,
            sampling_frequency=sampling_frequency,
            phase_offset=phase_offset,
            fft_size_mode=fft_size_mode or FftSizeMode.auto(),
        )
        fft_size = resolve_fft_size(params.sampling_frequency, params.fft_size_mode)
        if params != self._parameters:
            LOGGER.info(
                "Parameters changed: signal=%.4g Hz sampling=%.4g Hz phase=%.4gπ fft=%s (N=%d)",
                params.signal_frequency,
                params.sampling_frequency,
                params.phase_offset,
                params.fft_size_mode,
                fft_size,
            )
        self._parameters = params
        self._fft_size = fft_size
        return params

    def set_reconstruction_policy(self, policy: ReconstructionPolicy) -> None:
        if policy != self._policy:
            LOGGER.info("Reconstruction policy changed to %s", policy)
        self._policy = policy

    def set_spectral_window(self, window: SpectralWindow) -> None:
        window = SpectralWindow(window)
        if window is not self._window:
            LOGGER.info("Spectral window changed to %s", window)
        self._window = window

    # -- cached computations ---------------------------------------------------

    def signal(self, n_points: int) -> Curve:
        n_points = _point_count(n_points)
        params = self._parameters
        return self._cache.signal.get_or_compute(
            signal_key(params, n_points),
            lambda: generate_signal(params.signal_frequency, params.phase_offset, n_points),
        )

    def sample_points(self) -> Curve:
        params = self._parameters
        return self._cache.sample_points.get_or_compute(
            sample_points_key(params),
            lambda: generate_sample_points(
                params.signal_frequency,
                params.sampling_frequency,
                params.phase_offset,
            ),
        )

    def spectrum(self) -> Spectrum:
        params = self._parameters
        fft_size = self._fft_size
        window = self._window

        def _compute() -> Spectrum:
            time_samples = generate_transform_input(
                params.signal_frequency,
                params.sampling_frequency,
                params.phase_offset,
                fft_size,
            )
            return Spectrum(
                fft_size=fft_size,
                sampling_frequency=params.sampling_frequency,
                values=compute_spectrum(time_samples, window=window),
            )

        return self._cache.spectrum.get_or_compute(
            spectrum_key(params, fft_size, window), _compute
        )

    def reconstruct(self, n_points: int) -> Curve:
        n_points = _point_count(n_points)
        params = self._parameters
        policy = self._policy

        def _compute() -> Curve:
            if policy.uses_spectrum:
                return reconstruct(policy, n_points, spectrum=self.spectrum())
            return reconstruct(
                policy,
                n_points,
                samples=self.sample_points(),
                sampling_frequency=params.sampling_frequency,
            )

        return self._cache.reconstruction.get_or_compute(
            reconstruction_key(params, self._fft_size, n_points, policy, self._window),
            _compute,
        )

    # -- aliasing arithmetic ---------------------------------------------------

    def nyquist_frequency(self) -> float:
        return self._parameters.nyquist_frequency

    def is_aliased(self) -> bool:
        """True when the signal lies strictly above Nyquist; exactly at Nyquist is not."""
        return self._parameters.signal_frequency > self.nyquist_frequency()

    def aliased_frequency(self) -> float:
        params = self._parameters
        return aliased_frequency(params.signal_frequency, params.sampling_frequency)

    def aliasing_report(self) -> AliasingReport:
        params = self._parameters
        return AliasingReport(
            signal_frequency=params.signal_frequency,
            sampling_frequency=params.sampling_frequency,
            nyquist_frequency=self.nyquist_frequency(),
            aliased=self.is_aliased(),
            apparent_frequency=self.aliased_frequency(),
            peak_frequency=self.spectrum().peak_frequency(),
        )

    # -- frame assembly --------------------------------------------------------

    def frame(self, n_points: int, *, display_max_hz: float = DEFAULT_DISPLAY_MAX_HZ) -> Frame:
        """Compute (or reuse) every output needed to draw one redraw."""
        t0 = time.monotonic()
        frame = Frame(
            parameters=self._parameters,
            signal=self.signal(n_points),
            sample_points=self.sample_points(),
            spectrum=self.spectrum(),
            reconstruction=self.reconstruct(n_points),
            report=self.aliasing_report(),
            display_max_hz=display_max_hz,
        )
        self._last_frame_duration_s = time.monotonic() - t0
        self._total_frames += 1
        return frame

    # -- observability ---------------------------------------------------------

    def cache_stats(self) -> dict[str, dict[str, int]]:
        return self._cache.stats()

    def clear_caches(self) -> None:
        self._cache.clear()
        LOGGER.debug("Cleared all computation caches")

    def stats(self) -> dict[str, Any]:
        return {
            "total_frames": self._total_frames,
            "last_frame_duration_s": self._last_frame_duration_s,
            "fft_size": self._fft_size,
            "policy": self._policy.method.value,
            "window": self._window.value,
            "caches": self.cache_stats(),
        }
